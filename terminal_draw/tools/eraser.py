"""
Eraser tool: resets cells under the pointer to the default empty cell.
"""

from typing import TYPE_CHECKING, Any, Mapping, Optional

from ..models import EMPTY_CELL
from .common import build_changes, commit, editable_layer

if TYPE_CHECKING:
    from ..commands.history import CommandHistory
    from ..events import EventBus
    from ..scene import Scene


class EraserTool:
    name = "eraser"
    cursor_hint = "not-allowed"

    def __init__(self, history: "CommandHistory"):
        self.history = history
        self.stroking = False

    def _erase(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"]):
        layer = editable_layer(scene)
        if layer is None or not layer.in_bounds(x, y):
            return
        commit(self.history, layer, build_changes(layer, [(x, y, EMPTY_CELL)]), self.name, events, single=True)

    def on_pointer_down(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        self.stroking = True
        self._erase(x, y, scene, events)

    def on_pointer_drag(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        if self.stroking:
            self._erase(x, y, scene, events)

    def on_pointer_up(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        if self.stroking:
            self.stroking = False
            self.history.end_stroke()
