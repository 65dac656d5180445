"""
Undoable layer-stack operations: add, remove and reorder layers.

Undo and redo move the same Layer objects in and out of the scene, so cell
commands recorded against a layer stay valid across the round trip.
"""

from typing import TYPE_CHECKING, Optional

from ..errors import CommandValidationError
from ..events import LayerAdded, LayerRemoved, LayerReordered
from ..layer import Layer
from .base import Command

if TYPE_CHECKING:
    from ..events import EventBus
    from ..scene import Scene


class AddLayerCommand(Command):
    def __init__(
        self,
        scene: "Scene",
        name: str,
        layer_id: Optional[str] = None,
        index: Optional[int] = None,
        events: Optional["EventBus"] = None,
    ):
        if scene is None:
            raise CommandValidationError("AddLayerCommand scene is required")
        super().__init__(f"Add {name or 'Unnamed'} Layer")
        self.scene = scene
        self.events = events
        self.layer = Layer(layer_id or scene.next_layer_id(), name or "Unnamed", scene.width, scene.height)
        self.index = index
        self.previous_active_id: Optional[str] = None

    def execute(self):
        if self.scene.get_layer(self.layer.id) is not None:
            raise CommandValidationError(f"Layer {self.layer.id!r} already exists")
        self.previous_active_id = self.scene.active_layer_id
        self.scene.add_layer(self.layer, self.index)
        self.scene.set_active_layer(self.layer.id)
        self.executed = True
        if self.events is not None:
            self.events.emit(LayerAdded(self.layer.id, self.scene.get_layer_index(self.layer.id)))

    def undo(self):
        index = self.scene.get_layer_index(self.layer.id)
        if not self.scene.remove_layer(self.layer.id):
            raise RuntimeError(f"Could not remove layer {self.layer.id!r}")
        if self.previous_active_id is None or not self.scene.set_active_layer(self.previous_active_id):
            self.scene.set_active_layer(self.scene.layers[0].id)
        if self.events is not None:
            self.events.emit(LayerRemoved(self.layer.id, index))


class RemoveLayerCommand(Command):
    def __init__(self, scene: "Scene", layer_id: str, events: Optional["EventBus"] = None):
        if scene is None:
            raise CommandValidationError("RemoveLayerCommand scene is required")
        layer = scene.get_layer(layer_id)
        if layer is None:
            raise CommandValidationError(f"Layer {layer_id!r} not found")
        if len(scene.layers) <= 1:
            raise CommandValidationError("Cannot remove the last layer")
        super().__init__(f"Remove {layer.name} Layer")
        self.scene = scene
        self.events = events
        self.layer = layer
        self.index = scene.get_layer_index(layer_id)
        self.was_active = False

    def execute(self):
        self.index = self.scene.get_layer_index(self.layer.id)
        self.was_active = self.scene.active_layer_id == self.layer.id
        if not self.scene.remove_layer(self.layer.id):
            raise RuntimeError(f"Could not remove layer {self.layer.id!r}")
        self.executed = True
        if self.events is not None:
            self.events.emit(LayerRemoved(self.layer.id, self.index))

    def undo(self):
        self.scene.add_layer(self.layer, self.index)
        if self.was_active:
            self.scene.set_active_layer(self.layer.id)
        if self.events is not None:
            self.events.emit(LayerAdded(self.layer.id, self.index))


class ReorderLayersCommand(Command):
    def __init__(
        self,
        scene: "Scene",
        from_index: int,
        to_index: int,
        events: Optional["EventBus"] = None,
    ):
        if scene is None or not scene.layers:
            raise CommandValidationError("Invalid scene or scene has no layers")
        count = len(scene.layers)
        for label, value in (("from_index", from_index), ("to_index", to_index)):
            if not 0 <= value < count:
                raise CommandValidationError(f"Invalid {label}: {value} (layer count: {count})")

        layer = scene.layers[from_index]
        direction = "up" if to_index > from_index else "down"
        super().__init__(f"Move {layer.name} Layer {direction}")
        self.scene = scene
        self.events = events
        self.layer = layer
        self.from_index = from_index
        self.to_index = to_index

    def _move_to(self, target: int):
        current = self.scene.get_layer_index(self.layer.id)
        if current == -1 or not self.scene.reorder_layers(current, target):
            raise RuntimeError(f"Could not move layer {self.layer.id!r}")
        if self.events is not None:
            self.events.emit(LayerReordered(self.layer.id, current, target))

    def execute(self):
        self._move_to(self.to_index)
        self.executed = True

    def undo(self):
        self._move_to(self.from_index)
