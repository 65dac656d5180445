"""
Raster geometry for the shape tools: lines, circles, ellipses, rectangles.
All helpers return grid points in drawing order with duplicates removed.
"""

from typing import Iterable, List, Tuple

Point = Tuple[int, int]


def _unique(points: Iterable[Point]) -> List[Point]:
    seen = set()
    out = []
    for p in points:
        if p not in seen:
            seen.add(p)
            out.append(p)
    return out


def bresenham_line(x0: int, y0: int, x1: int, y1: int, connected: bool = False) -> List[Point]:
    """Points from (x0, y0) to (x1, y1) inclusive.

    With ``connected`` every diagonal step gets an extra corner point so the
    line is 4-connected, which box-drawing glyphs need to join up.
    """
    points = []
    dx, dy = abs(x1 - x0), -abs(y1 - y0)
    sx, sy = (1 if x0 < x1 else -1), (1 if y0 < y1 else -1)
    err = dx + dy
    x, y = x0, y0
    while True:
        points.append((x, y))
        if x == x1 and y == y1:
            break
        prev_x, prev_y = x, y
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x += sx
        if e2 <= dx:
            err += dx
            y += sy
        if connected and x != prev_x and y != prev_y:
            points.append((prev_x, y))
    return points


def _circle_octants(cx: int, cy: int, x: int, y: int) -> List[Point]:
    return [
        (cx + x, cy + y), (cx - x, cy + y), (cx + x, cy - y), (cx - x, cy - y),
        (cx + y, cy + x), (cx - y, cy + x), (cx + y, cy - x), (cx - y, cy - x),
    ]


def _ellipse_quadrants(cx: int, cy: int, x: int, y: int) -> List[Point]:
    return [(cx + x, cy + y), (cx - x, cy + y), (cx + x, cy - y), (cx - x, cy - y)]


def circle_outline(cx: int, cy: int, radius: int, connected: bool = False) -> List[Point]:
    if radius <= 0:
        return [(cx, cy)]

    points = []
    x, y = 0, radius
    d = 3 - 2 * radius
    points.extend(_circle_octants(cx, cy, x, y))
    while y >= x:
        prev_y = y
        x += 1
        if d > 0:
            y -= 1
            d += 4 * (x - y) + 10
        else:
            d += 4 * x + 6
        if connected and y != prev_y:
            points.extend(_circle_octants(cx, cy, x, prev_y))
        points.extend(_circle_octants(cx, cy, x, y))
    return _unique(points)


def ellipse_outline(cx: int, cy: int, rx: int, ry: int, connected: bool = False) -> List[Point]:
    """Midpoint ellipse with per-axis radii."""
    if rx <= 0 and ry <= 0:
        return [(cx, cy)]
    if rx <= 0:
        return [(cx, y) for y in range(cy - ry, cy + ry + 1)]
    if ry <= 0:
        return [(x, cy) for x in range(cx - rx, cx + rx + 1)]

    points = []
    rx2, ry2 = rx * rx, ry * ry
    x, y = 0, ry
    px, py = 0, 2 * rx2 * y
    points.extend(_ellipse_quadrants(cx, cy, x, y))

    # Region 1: slope above -1
    p = round(ry2 - rx2 * ry + 0.25 * rx2)
    while px < py:
        prev_x, prev_y = x, y
        x += 1
        px += 2 * ry2
        if p < 0:
            p += ry2 + px
        else:
            y -= 1
            py -= 2 * rx2
            p += ry2 + px - py
        if connected and x != prev_x and y != prev_y:
            points.extend(_ellipse_quadrants(cx, cy, x, prev_y))
        points.extend(_ellipse_quadrants(cx, cy, x, y))

    # Region 2
    p = round(ry2 * (x + 0.5) ** 2 + rx2 * (y - 1) ** 2 - rx2 * ry2)
    while y > 0:
        prev_x, prev_y = x, y
        y -= 1
        py -= 2 * rx2
        if p > 0:
            p += rx2 - py
        else:
            x += 1
            px += 2 * ry2
            p += rx2 - py + px
        if connected and x != prev_x and y != prev_y:
            points.extend(_ellipse_quadrants(cx, cy, prev_x, y))
        points.extend(_ellipse_quadrants(cx, cy, x, y))
    return _unique(points)


def filled_circle(cx: int, cy: int, radius: int) -> List[Point]:
    if radius <= 0:
        return [(cx, cy)]
    r2 = radius * radius
    return [
        (x, y)
        for y in range(cy - radius, cy + radius + 1)
        for x in range(cx - radius, cx + radius + 1)
        if (x - cx) ** 2 + (y - cy) ** 2 <= r2
    ]


def filled_ellipse(cx: int, cy: int, rx: int, ry: int) -> List[Point]:
    if rx <= 0 or ry <= 0:
        # Degenerate ellipses are just their outline
        return ellipse_outline(cx, cy, rx, ry)
    return [
        (x, y)
        for y in range(cy - ry, cy + ry + 1)
        for x in range(cx - rx, cx + rx + 1)
        if (x - cx) ** 2 / (rx * rx) + (y - cy) ** 2 / (ry * ry) <= 1
    ]


def normalize_rect(x0: int, y0: int, x1: int, y1: int) -> Tuple[int, int, int, int]:
    return min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1)


def rect_points(x0: int, y0: int, x1: int, y1: int, filled: bool = False) -> List[Point]:
    left, top, right, bottom = normalize_rect(x0, y0, x1, y1)
    return [
        (x, y)
        for y in range(top, bottom + 1)
        for x in range(left, right + 1)
        if filled or x in (left, right) or y in (top, bottom)
    ]
