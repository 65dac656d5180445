"""
Picker tool: samples the active layer's cell and reports it; never edits.
"""

from typing import TYPE_CHECKING, Any, Mapping, Optional

from ..events import CellPicked
from ..models import Cell

if TYPE_CHECKING:
    from ..events import EventBus
    from ..scene import Scene


class PickerTool:
    name = "picker"
    cursor_hint = "copy"

    def __init__(self):
        self.last_picked: Optional[Cell] = None

    def _pick(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"]):
        layer = scene.get_active_layer()
        if layer is None or not layer.in_bounds(x, y):
            return
        cell = layer.get_cell(x, y)
        self.last_picked = cell
        if events is not None:
            events.emit(CellPicked(x, y, layer.id, cell))

    def on_pointer_down(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        self._pick(x, y, scene, events)

    def on_pointer_drag(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        self._pick(x, y, scene, events)

    def on_pointer_up(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        pass
