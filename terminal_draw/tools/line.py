"""
Line tool: drag from an anchor and release to draw a straight line.

In single/double drawing mode the line is made 4-connected and each point
gets the box glyph that joins its previous and next points, so diagonal
drags come out as staircases of corners.
"""

from typing import TYPE_CHECKING, Any, Mapping, Optional, Tuple

from .. import box_drawing
from ..events import ToolAnchor
from ..models import Cell, DrawingMode, LineStyle, PaintMode
from .common import DEFAULT_BRUSH, apply_paint_mode, build_changes, commit, editable_layer
from .shapes import Point, bresenham_line

if TYPE_CHECKING:
    from ..commands.history import CommandHistory
    from ..events import EventBus
    from ..scene import Scene


def line_glyph(prev: Optional[Point], curr: Point, nxt: Optional[Point], style: LineStyle) -> str:
    """Box glyph for ``curr`` given its neighbors along the line."""
    up = down = left = right = False
    for other in (prev, nxt):
        if other is None:
            continue
        dx, dy = other[0] - curr[0], other[1] - curr[1]
        left |= dx < 0
        right |= dx > 0
        up |= dy < 0
        down |= dy > 0

    chars = box_drawing.STYLE_CHARS[style]
    if (left or right) and (up or down) and sum((up, down, left, right)) == 2:
        if down and right:
            return chars[box_drawing.TOP_LEFT]
        if down and left:
            return chars[box_drawing.TOP_RIGHT]
        if up and right:
            return chars[box_drawing.BOTTOM_LEFT]
        return chars[box_drawing.BOTTOM_RIGHT]
    if (up or down) and not (left or right):
        return chars[box_drawing.VERTICAL]
    return chars[box_drawing.HORIZONTAL]


class LineTool:
    name = "line"
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

    def points(self):
        smart = self.drawing_mode is not DrawingMode.NORMAL
        return bresenham_line(*self.anchor, *self.current, connected=smart)

    def draw(self, scene: "Scene", events: Optional["EventBus"] = None):
        layer = editable_layer(scene)
        if layer is None:
            return

        points = self.points()
        writes = []
        for i, point in enumerate(points):
            if not layer.in_bounds(*point):
                continue
            if self.drawing_mode is DrawingMode.NORMAL:
                char = self.current_cell.char
            else:
                prev = points[i - 1] if i > 0 else None
                nxt = points[i + 1] if i + 1 < len(points) else None
                char = line_glyph(prev, point, nxt, self.drawing_mode.line_style)
            after = apply_paint_mode(char, layer.get_cell(*point), self.current_cell, self.paint_mode)
            writes.append((point[0], point[1], after))

        commit(self.history, layer, build_changes(layer, writes), self.name, events)
