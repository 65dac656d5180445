"""
Flood fill tool: fills the 4-connected region around the clicked cell.

Which cells count as "the same region" follows the paint mode: in fg mode
only the foreground color has to match, in glyph mode only the character,
and so on.
"""

from collections import deque
from typing import TYPE_CHECKING, Any, List, Mapping, Optional

from ..models import Cell, PaintMode
from .common import DEFAULT_BRUSH, apply_paint_mode, build_changes, cells_match, commit, editable_layer
from .shapes import Point

if TYPE_CHECKING:
    from ..commands.history import CommandHistory
    from ..events import EventBus
    from ..layer import Layer
    from ..scene import Scene


class FloodFillTool:
    name = "floodfill"
    cursor_hint = "cell"

    def __init__(
        self,
        history: "CommandHistory",
        current_cell: Optional[Cell] = None,
        paint_mode: PaintMode = PaintMode.ALL,
    ):
        self.history = history
        self.current_cell = current_cell or DEFAULT_BRUSH
        self.paint_mode = PaintMode(paint_mode)

    def _filled(self, cell: Cell) -> Cell:
        return apply_paint_mode(self.current_cell.char, cell, self.current_cell, self.paint_mode)

    def region(self, layer: "Layer", x: int, y: int) -> List[Point]:
        """Cells connected to (x, y) that match its start cell, in BFS order."""
        start = layer.get_cell(x, y)
        queue = deque([(x, y)])
        visited = {(x, y)}
        found = []

        while queue:
            cx, cy = queue.popleft()
            if not cells_match(layer.get_cell(cx, cy), start, self.paint_mode):
                continue
            found.append((cx, cy))
            for dx, dy in ((0, -1), (0, 1), (1, 0), (-1, 0)):
                nx, ny = cx + dx, cy + dy
                if layer.in_bounds(nx, ny) and (nx, ny) not in visited:
                    visited.add((nx, ny))
                    queue.append((nx, ny))
        return found

    def fill(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None):
        layer = editable_layer(scene)
        if layer is None or not layer.in_bounds(x, y):
            return

        start = layer.get_cell(x, y)
        if cells_match(start, self._filled(start), self.paint_mode):
            # Filling would not change the region
            return

        writes = [(px, py, self._filled(layer.get_cell(px, py))) for px, py in self.region(layer, x, y)]
        commit(self.history, layer, build_changes(layer, writes), self.name, events)
        self.history.end_stroke()

    def on_pointer_down(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        self.fill(x, y, scene, events)

    def on_pointer_drag(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        pass

    def on_pointer_up(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        pass
