"""
Circle tool: drag from the center outwards to draw a circle or an ellipse.
"""

import math
from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Set, Tuple

from .. import box_drawing
from ..events import ToolAnchor
from ..models import Cell, DrawingMode, FillMode, LineStyle, PaintMode
from .common import DEFAULT_BRUSH, apply_paint_mode, build_changes, commit, editable_layer
from .shapes import Point, circle_outline, ellipse_outline, filled_circle, filled_ellipse

if TYPE_CHECKING:
    from ..commands.history import CommandHistory
    from ..events import EventBus
    from ..scene import Scene


def curve_glyph(x: int, y: int, positions: Set[Point], style: LineStyle) -> str:
    """Box glyph for a point on a closed curve, from which neighbors are on it too."""
    left, right = (x - 1, y) in positions, (x + 1, y) in positions
    up, down = (x, y - 1) in positions, (x, y + 1) in positions
    chars = box_drawing.STYLE_CHARS[style]

    count = sum((left, right, up, down))
    if count == 1:
        return chars[box_drawing.VERTICAL] if up or down else chars[box_drawing.HORIZONTAL]
    if count == 2:
        if left and right:
            return chars[box_drawing.HORIZONTAL]
        if up and down:
            return chars[box_drawing.VERTICAL]
        if right and down:
            return chars[box_drawing.TOP_LEFT]
        if left and down:
            return chars[box_drawing.TOP_RIGHT]
        if right and up:
            return chars[box_drawing.BOTTOM_LEFT]
        return chars[box_drawing.BOTTOM_RIGHT]
    return chars[box_drawing.HORIZONTAL]


class CircleTool:
    name = "circle"
    cursor_hint = "crosshair"

    def __init__(
        self,
        history: "CommandHistory",
        current_cell: Optional[Cell] = None,
        paint_mode: PaintMode = PaintMode.ALL,
        drawing_mode: DrawingMode = DrawingMode.NORMAL,
        fill_mode: FillMode = FillMode.OUTLINE,
        ellipse: bool = False,
    ):
        self.history = history
        self.current_cell = current_cell or DEFAULT_BRUSH
        self.paint_mode = PaintMode(paint_mode)
        self.drawing_mode = DrawingMode(drawing_mode)
        self.fill_mode = FillMode(fill_mode)
        self.ellipse = ellipse
        self.center: Optional[Tuple[int, int]] = None
        self.current: Optional[Tuple[int, int]] = None

    def on_pointer_down(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        if editable_layer(scene) is None:
            return
        self.center = self.current = (x, y)
        if events is not None:
            events.emit(ToolAnchor(self.name, x, y))

    def on_pointer_drag(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        if self.center is not None:
            self.current = (x, y)

    def on_pointer_up(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        if self.center is None:
            return
        self.current = (x, y)
        try:
            self.draw(scene, events)
        finally:
            self.center = self.current = None
            if events is not None:
                events.emit(ToolAnchor(self.name, None, None))
            self.history.end_stroke()

    def radius(self) -> int:
        dx = self.current[0] - self.center[0]
        dy = self.current[1] - self.center[1]
        return round(math.sqrt(dx * dx + dy * dy))

    def radii(self) -> Tuple[int, int]:
        return abs(self.current[0] - self.center[0]), abs(self.current[1] - self.center[1])

    def points(self) -> List[Point]:
        cx, cy = self.center
        smart = self.drawing_mode is not DrawingMode.NORMAL
        if self.fill_mode is FillMode.FILLED:
            if self.ellipse:
                return filled_ellipse(cx, cy, *self.radii())
            return filled_circle(cx, cy, self.radius())
        if self.ellipse:
            return ellipse_outline(cx, cy, *self.radii(), connected=smart)
        return circle_outline(cx, cy, self.radius(), connected=smart)

    def _plain_char(self) -> str:
        if self.drawing_mode is DrawingMode.NORMAL:
            return self.current_cell.char
        return box_drawing.STYLE_CHARS[self.drawing_mode.line_style][box_drawing.HORIZONTAL]

    def draw(self, scene: "Scene", events: Optional["EventBus"] = None):
        layer = editable_layer(scene)
        if layer is None:
            return

        points = [p for p in self.points() if layer.in_bounds(*p)]
        smart_outline = (
            self.drawing_mode is not DrawingMode.NORMAL
            and self.fill_mode is FillMode.OUTLINE
            and len(points) > 1
        )
        positions = set(points)

        writes = []
        for x, y in points:
            if smart_outline:
                char = curve_glyph(x, y, positions, self.drawing_mode.line_style)
            else:
                char = self._plain_char()
            after = apply_paint_mode(char, layer.get_cell(x, y), self.current_cell, self.paint_mode)
            writes.append((x, y, after))

        commit(self.history, layer, build_changes(layer, writes), self.name, events)
