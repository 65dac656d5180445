"""
Brush tool: paints the current cell under the pointer, one cell per event.
"""

from typing import TYPE_CHECKING, Any, Mapping, Optional

from ..models import Cell, DrawingMode, PaintMode
from .common import DEFAULT_BRUSH, PendingLayer, apply_paint_mode, build_changes, commit, editable_layer

if TYPE_CHECKING:
    from ..commands.history import CommandHistory
    from ..events import EventBus
    from ..scene import Scene


class BrushTool:
    name = "brush"
    cursor_hint = "crosshair"

    def __init__(
        self,
        history: "CommandHistory",
        current_cell: Optional[Cell] = None,
        paint_mode: PaintMode = PaintMode.ALL,
        drawing_mode: DrawingMode = DrawingMode.NORMAL,
    ):
        self.history = history
        self.current_cell = current_cell or DEFAULT_BRUSH
        self.paint_mode = PaintMode(paint_mode)
        self.drawing_mode = DrawingMode(drawing_mode)
        self.stroking = False

    def _paint(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"]):
        layer = editable_layer(scene)
        if layer is None or not layer.in_bounds(x, y):
            return

        if self.drawing_mode is DrawingMode.NORMAL:
            after = apply_paint_mode(self.current_cell.char, layer.get_cell(x, y), self.current_cell, self.paint_mode)
            # Unchanged cells still go through history so the stroke stays one step
            changes = build_changes(layer, [(x, y, after)])
        else:
            pending = PendingLayer(layer)
            pending.place_smart(x, y, self.drawing_mode.line_style, self.current_cell, self.paint_mode)
            changes = pending.changes()

        commit(self.history, layer, changes, self.name, events, single=True)

    def on_pointer_down(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        self.stroking = True
        self._paint(x, y, scene, events)

    def on_pointer_drag(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        if self.stroking:
            self._paint(x, y, scene, events)

    def on_pointer_up(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        if self.stroking:
            self.stroking = False
            self.history.end_stroke()
