"""
Rectangle tool: drag out a box, outlined or filled.
"""

from typing import TYPE_CHECKING, Any, Mapping, Optional, Tuple

from .. import box_drawing
from ..events import ToolAnchor
from ..models import Cell, DrawingMode, FillMode, PaintMode
from .common import DEFAULT_BRUSH, PendingLayer, apply_paint_mode, build_changes, commit, editable_layer
from .shapes import normalize_rect, rect_points

if TYPE_CHECKING:
    from ..commands.history import CommandHistory
    from ..events import EventBus
    from ..scene import Scene


def edge_role(x: int, y: int, left: int, top: int, right: int, bottom: int) -> str:
    on_top, on_bottom = y == top, y == bottom
    on_left, on_right = x == left, x == right
    if on_top and on_left:
        return box_drawing.TOP_LEFT
    if on_top and on_right:
        return box_drawing.TOP_RIGHT
    if on_bottom and on_left:
        return box_drawing.BOTTOM_LEFT
    if on_bottom and on_right:
        return box_drawing.BOTTOM_RIGHT
    if on_top or on_bottom:
        return box_drawing.HORIZONTAL
    return box_drawing.VERTICAL


class RectangleTool:
    name = "rectangle"
    cursor_hint = "crosshair"

    def __init__(
        self,
        history: "CommandHistory",
        current_cell: Optional[Cell] = None,
        paint_mode: PaintMode = PaintMode.ALL,
        drawing_mode: DrawingMode = DrawingMode.NORMAL,
        fill_mode: FillMode = FillMode.OUTLINE,
    ):
        self.history = history
        self.current_cell = current_cell or DEFAULT_BRUSH
        self.paint_mode = PaintMode(paint_mode)
        self.drawing_mode = DrawingMode(drawing_mode)
        self.fill_mode = FillMode(fill_mode)
        self.anchor: Optional[Tuple[int, int]] = None
        self.current: Optional[Tuple[int, int]] = None

    def on_pointer_down(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        if editable_layer(scene) is None:
            return
        self.anchor = self.current = (x, y)
        if events is not None:
            events.emit(ToolAnchor(self.name, x, y))

    def on_pointer_drag(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        if self.anchor is not None:
            self.current = (x, y)

    def on_pointer_up(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        if self.anchor is None:
            return
        self.current = (x, y)
        try:
            self.draw(scene, events)
        finally:
            self.anchor = self.current = None
            if events is not None:
                events.emit(ToolAnchor(self.name, None, None))
            self.history.end_stroke()

    def _expected_char(self, x: int, y: int, bounds: Tuple[int, int, int, int]) -> str:
        if self.drawing_mode is DrawingMode.NORMAL:
            return self.current_cell.char
        return box_drawing.STYLE_CHARS[self.drawing_mode.line_style][edge_role(x, y, *bounds)]

    def _outline_char(self, x: int, y: int, bounds: Tuple[int, int, int, int], outline: PendingLayer) -> str:
        expected = self._expected_char(x, y, bounds)
        if self.drawing_mode is DrawingMode.NORMAL:
            return expected

        # Crossing an existing line of the other style needs a mixed junction
        neighbors = box_drawing.get_neighbors(x, y, outline, outline.width, outline.height)
        smart = box_drawing.get_smart_character(neighbors, self.drawing_mode.line_style)
        return smart if box_drawing.is_mixed_char(smart) else expected

    def draw(self, scene: "Scene", events: Optional["EventBus"] = None):
        layer = editable_layer(scene)
        if layer is None:
            return

        bounds = normalize_rect(*self.anchor, *self.current)
        filled = self.fill_mode is FillMode.FILLED
        points = [p for p in rect_points(*bounds, filled=filled) if layer.in_bounds(*p)]

        # The plain outline, so each edge cell sees the edges next to it
        outline = PendingLayer(layer)
        if not filled:
            for x, y in points:
                outline.set_cell(x, y, Cell(self._expected_char(x, y, bounds)))

        writes = []
        for x, y in points:
            char = self.current_cell.char if filled else self._outline_char(x, y, bounds, outline)
            after = apply_paint_mode(char, layer.get_cell(x, y), self.current_cell, self.paint_mode)
            writes.append((x, y, after))

        commit(self.history, layer, build_changes(layer, writes), self.name, events)
