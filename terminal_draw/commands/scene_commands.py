"""
Whole-grid operations: clearing layers and resizing the scene.
"""

from typing import TYPE_CHECKING, List, Optional, Union

import numpy as np

from ..errors import CommandValidationError, ResizeError
from ..events import CellChanged, SceneResized
from ..layer import Layer, LayerSnapshot
from ..models import Cell, ResizeStrategy
from ..resizer import validate_resize
from .base import Command

if TYPE_CHECKING:
    from ..events import EventBus
    from ..scene import Scene


class ClearCommand(Command):
    """Clear one layer, or every layer when none is given."""

    def __init__(
        self,
        scene: "Scene",
        layer: Optional[Layer] = None,
        events: Optional["EventBus"] = None,
    ):
        if scene is None:
            raise CommandValidationError("ClearCommand scene is required")
        super().__init__(f"Clear {layer.name} Layer" if layer is not None else "Clear All Layers")
        self.scene = scene
        self.events = events
        self.layers: List[Layer] = [layer] if layer is not None else list(scene.layers)
        self.snapshots: List[LayerSnapshot] = []

    def _emit_changes(self, layer: Layer, before: LayerSnapshot):
        if self.events is None:
            return
        changed = (before.chars != layer.chars) | (before.fg != layer.fg) | (before.bg != layer.bg)
        for y, x in zip(*np.nonzero(changed)):
            x, y = int(x), int(y)
            self.events.emit(CellChanged(x, y, layer.id, layer.get_cell(x, y)))

    def execute(self):
        self.snapshots = [layer.snapshot() for layer in self.layers]
        for layer, before in zip(self.layers, self.snapshots):
            layer.clear()
            self._emit_changes(layer, before)
        self.executed = True

    def undo(self):
        for layer, snapshot in zip(self.layers, self.snapshots):
            cleared = layer.snapshot()
            layer.restore(snapshot)
            self._emit_changes(layer, cleared)


class ResizeCommand(Command):
    def __init__(
        self,
        scene: "Scene",
        width: int,
        height: int,
        strategy: Union[ResizeStrategy, str] = ResizeStrategy.PAD,
        fill: Optional[Cell] = None,
        events: Optional["EventBus"] = None,
    ):
        if scene is None:
            raise CommandValidationError("ResizeCommand scene is required")
        problems = validate_resize(width, height)
        if problems:
            raise ResizeError("; ".join(problems))
        try:
            strategy = ResizeStrategy(strategy)
        except ValueError:
            raise ResizeError(f"Unknown resize strategy: {strategy}") from None

        super().__init__(f"Resize to {width}x{height} ({strategy.value})")
        self.scene = scene
        self.events = events
        self.width = width
        self.height = height
        self.strategy = strategy
        self.fill = fill
        self.old_width = scene.width
        self.old_height = scene.height
        self.snapshots: List[LayerSnapshot] = []

    def execute(self):
        self.old_width, self.old_height = self.scene.width, self.scene.height
        self.snapshots = self.scene.resize(self.width, self.height, self.strategy, self.fill)
        self.executed = True
        if self.events is not None:
            self.events.emit(SceneResized(self.width, self.height, self.old_width, self.old_height))

    def undo(self):
        for layer, snapshot in zip(self.scene.layers, self.snapshots):
            layer.restore(snapshot)
        self.scene.width = self.old_width
        self.scene.height = self.old_height
        if self.events is not None:
            self.events.emit(SceneResized(self.old_width, self.old_height, self.width, self.height))
