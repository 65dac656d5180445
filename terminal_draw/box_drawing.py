"""
Smart box-drawing for the editor.
Picks the correct line glyph for a cell based on its neighbor connections,
and works out which neighbors must change when a glyph is placed.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Tuple, Union

from .models import LineStyle

if TYPE_CHECKING:
    from .layer import Layer

# Glyph roles. Tees are named after the side the bar sits on:
# TEE_TOP is ┬ (open to south, east, west), TEE_LEFT is ├ (north, south, east).
HORIZONTAL = "horizontal"
VERTICAL = "vertical"
TOP_LEFT = "top_left"
TOP_RIGHT = "top_right"
BOTTOM_LEFT = "bottom_left"
BOTTOM_RIGHT = "bottom_right"
CROSS = "cross"
TEE_TOP = "tee_top"
TEE_BOTTOM = "tee_bottom"
TEE_LEFT = "tee_left"
TEE_RIGHT = "tee_right"

SINGLE_CHARS: Dict[str, str] = {
    HORIZONTAL: "─",
    VERTICAL: "│",
    TOP_LEFT: "┌",
    TOP_RIGHT: "┐",
    BOTTOM_LEFT: "└",
    BOTTOM_RIGHT: "┘",
    CROSS: "┼",
    TEE_TOP: "┬",
    TEE_BOTTOM: "┴",
    TEE_LEFT: "├",
    TEE_RIGHT: "┤",
}

DOUBLE_CHARS: Dict[str, str] = {
    HORIZONTAL: "═",
    VERTICAL: "║",
    TOP_LEFT: "╔",
    TOP_RIGHT: "╗",
    BOTTOM_LEFT: "╚",
    BOTTOM_RIGHT: "╝",
    CROSS: "╬",
    TEE_TOP: "╦",
    TEE_BOTTOM: "╩",
    TEE_LEFT: "╠",
    TEE_RIGHT: "╣",
}

# Double vertical strokes crossed by single horizontal ones
DOUBLE_VERTICAL_CHARS: Dict[str, str] = {
    CROSS: "╫",
    TEE_TOP: "╥",
    TEE_BOTTOM: "╨",
    TEE_LEFT: "╟",
    TEE_RIGHT: "╢",
}

# Single vertical strokes crossed by double horizontal ones
DOUBLE_HORIZONTAL_CHARS: Dict[str, str] = {
    CROSS: "╪",
    TEE_TOP: "╤",
    TEE_BOTTOM: "╧",
    TEE_LEFT: "╞",
    TEE_RIGHT: "╡",
}

STYLE_CHARS: Dict[LineStyle, Dict[str, str]] = {
    LineStyle.SINGLE: SINGLE_CHARS,
    LineStyle.DOUBLE: DOUBLE_CHARS,
}

SINGLE_SET = frozenset(SINGLE_CHARS.values())
DOUBLE_SET = frozenset(DOUBLE_CHARS.values())
MIXED_SET = frozenset(DOUBLE_VERTICAL_CHARS.values()) | frozenset(DOUBLE_HORIZONTAL_CHARS.values())
BOX_SET = SINGLE_SET | DOUBLE_SET | MIXED_SET

# Slot codes: 2 bits per neighbor
ABSENT = 0
SINGLE = 1
DOUBLE = 2

# (vertical stroke, horizontal stroke) of each mixed glyph
_MIXED_AXES: Dict[str, Tuple[int, int]] = {}
for _char in DOUBLE_VERTICAL_CHARS.values():
    _MIXED_AXES[_char] = (DOUBLE, SINGLE)
for _char in DOUBLE_HORIZONTAL_CHARS.values():
    _MIXED_AXES[_char] = (SINGLE, DOUBLE)

# Connection pattern (north, south, east, west) -> role
_ROLES: Dict[Tuple[bool, bool, bool, bool], str] = {
    (True, True, True, True): CROSS,
    (True, True, True, False): TEE_LEFT,
    (True, True, False, True): TEE_RIGHT,
    (False, True, True, True): TEE_TOP,
    (True, False, True, True): TEE_BOTTOM,
    (False, True, True, False): TOP_LEFT,
    (False, True, False, True): TOP_RIGHT,
    (True, False, True, False): BOTTOM_LEFT,
    (True, False, False, True): BOTTOM_RIGHT,
    (True, True, False, False): VERTICAL,
    (True, False, False, False): VERTICAL,
    (False, True, False, False): VERTICAL,
    (False, False, True, True): HORIZONTAL,
    (False, False, True, False): HORIZONTAL,
    (False, False, False, True): HORIZONTAL,
    (False, False, False, False): HORIZONTAL,
}

_MIXED_ROLES = frozenset(DOUBLE_VERTICAL_CHARS)


@dataclass(frozen=True)
class Neighbors:
    """Glyphs in the four cardinal cells; None where there is no cell."""

    north: Optional[str] = None
    south: Optional[str] = None
    east: Optional[str] = None
    west: Optional[str] = None


@dataclass(frozen=True)
class NeighborUpdate:
    """A neighbor whose glyph must change; colors are carried over unchanged."""

    x: int
    y: int
    char: str
    original_char: str
    fg: int
    bg: int


NeighborsLike = Union[Neighbors, Mapping[str, Optional[str]]]


def is_box_drawing_char(char: Optional[str]) -> bool:
    return char in BOX_SET


def is_single_line_char(char: Optional[str]) -> bool:
    return char in SINGLE_SET


def is_double_line_char(char: Optional[str]) -> bool:
    return char in DOUBLE_SET


def is_mixed_char(char: Optional[str]) -> bool:
    return char in MIXED_SET


def can_connect_horizontally(char: Optional[str]) -> bool:
    return is_box_drawing_char(char) and char not in ("│", "║")


def can_connect_vertically(char: Optional[str]) -> bool:
    return is_box_drawing_char(char) and char not in ("─", "═")


def has_connection(char: Optional[str], direction: str) -> bool:
    if not char or not is_box_drawing_char(char):
        return False
    if direction == "horizontal":
        return can_connect_horizontally(char)
    return can_connect_vertically(char)


def classify(char: Optional[str], vertical_slot: bool) -> int:
    """Slot code for a neighbor glyph.

    Mixed glyphs take the style of the stroke facing the cell being resolved:
    the vertical stroke for north/south slots, the horizontal one for east/west.
    """
    if char in SINGLE_SET:
        return SINGLE
    if char in DOUBLE_SET:
        return DOUBLE
    axes = _MIXED_AXES.get(char)
    if axes is not None:
        return axes[0] if vertical_slot else axes[1]
    return ABSENT


def encode(neighbors: NeighborsLike) -> int:
    """Pack the four slot codes into one byte: north | south<<2 | east<<4 | west<<6."""
    n = _as_neighbors(neighbors)
    return (
        classify(n.north, True)
        | classify(n.south, True) << 2
        | classify(n.east, False) << 4
        | classify(n.west, False) << 6
    )


def _resolve(code: int, style: LineStyle) -> str:
    n, s, e, w = code & 3, (code >> 2) & 3, (code >> 4) & 3, (code >> 6) & 3
    role = _ROLES[(n != ABSENT, s != ABSENT, e != ABSENT, w != ABSENT)]

    if role in _MIXED_ROLES:
        vertical = {v for v in (n, s) if v != ABSENT}
        horizontal = {h for h in (e, w) if h != ABSENT}
        if vertical == {DOUBLE} and horizontal == {SINGLE}:
            return DOUBLE_VERTICAL_CHARS[role]
        if vertical == {SINGLE} and horizontal == {DOUBLE}:
            return DOUBLE_HORIZONTAL_CHARS[role]

    return STYLE_CHARS[style][role]


# Read-only lookup tables, one per style, indexed by encode()
RESOLUTION_TABLES: Dict[LineStyle, Tuple[str, ...]] = {
    style: tuple(_resolve(code, style) for code in range(256)) for style in LineStyle
}


def _as_neighbors(neighbors: NeighborsLike) -> Neighbors:
    if isinstance(neighbors, Neighbors):
        return neighbors
    return Neighbors(
        neighbors.get("north"),
        neighbors.get("south"),
        neighbors.get("east"),
        neighbors.get("west"),
    )


def get_smart_character(neighbors: NeighborsLike, mode: Union[LineStyle, str] = LineStyle.SINGLE) -> str:
    """Return the glyph that joins up with the given neighbors."""
    return RESOLUTION_TABLES[LineStyle(mode)][encode(neighbors)]


def get_neighbors(x: int, y: int, layer: "Layer", width: int, height: int) -> Neighbors:
    def char_at(nx: int, ny: int) -> Optional[str]:
        if nx < 0 or nx >= width or ny < 0 or ny >= height:
            return None
        return layer.get_cell(nx, ny).char

    return Neighbors(
        north=char_at(x, y - 1),
        south=char_at(x, y + 1),
        east=char_at(x + 1, y),
        west=char_at(x - 1, y),
    )


_DIRECTIONS = ((0, -1), (0, 1), (1, 0), (-1, 0))  # north, south, east, west


def get_neighbors_to_update(x: int, y: int, layer: "Layer", width: int, height: int) -> List[NeighborUpdate]:
    """Neighbors of (x, y) whose glyph no longer matches their connections.

    ``layer`` must already hold the glyph placed at (x, y). Each neighbor keeps
    its own style: single glyphs stay single, double and mixed ones resolve as
    double.
    """
    updates = []
    for dx, dy in _DIRECTIONS:
        nx, ny = x + dx, y + dy
        if nx < 0 or nx >= width or ny < 0 or ny >= height:
            continue

        cell = layer.get_cell(nx, ny)
        if not is_box_drawing_char(cell.char):
            continue

        mode = LineStyle.SINGLE if is_single_line_char(cell.char) else LineStyle.DOUBLE
        new_char = get_smart_character(get_neighbors(nx, ny, layer, width, height), mode)
        if new_char != cell.char:
            updates.append(NeighborUpdate(nx, ny, new_char, cell.char, cell.fg, cell.bg))
    return updates
