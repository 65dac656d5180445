"""
Helpers shared by the drawing tools.
"""

import logging
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Tuple, Union

from .. import box_drawing
from ..commands.cell_command import CellChange, CellCommand
from ..models import Cell, LineStyle, PaintMode

if TYPE_CHECKING:
    from ..commands.history import CommandHistory
    from ..events import EventBus
    from ..layer import Layer
    from ..scene import Scene

logger = logging.getLogger(__name__)

DEFAULT_BRUSH = Cell("█", 7, -1)


def apply_paint_mode(char: str, before: Cell, brush: Cell, mode: Union[PaintMode, str]) -> Cell:
    """Build the cell a tool writes over ``before``, touching only what ``mode`` selects."""
    mode = PaintMode(mode)
    if mode is PaintMode.FG:
        return Cell(before.char, brush.fg, before.bg)
    if mode is PaintMode.BG:
        return Cell(before.char, before.fg, brush.bg)
    if mode is PaintMode.GLYPH:
        return Cell(char, before.fg, before.bg)
    return Cell(char, brush.fg, brush.bg)


def cells_match(a: Cell, b: Cell, mode: Union[PaintMode, str]) -> bool:
    mode = PaintMode(mode)
    if mode is PaintMode.FG:
        return a.fg == b.fg
    if mode is PaintMode.BG:
        return a.bg == b.bg
    if mode is PaintMode.GLYPH:
        return a.char == b.char
    return a == b


def editable_layer(scene: "Scene", require_visible: bool = True) -> Optional["Layer"]:
    """The active layer, or None when it may not be drawn on."""
    layer = scene.get_active_layer()
    if layer is None:
        return None
    if layer.locked:
        logger.debug("Layer %r is locked, ignoring edit", layer.id)
        return None
    if require_visible and not layer.visible:
        logger.debug("Layer %r is hidden, ignoring edit", layer.id)
        return None
    return layer


class PendingLayer:
    """Read-through view of a layer with uncommitted writes on top.

    Tools stage their cells here so the box-drawing resolver sees the result
    of the edit before any command touches the real layer.
    """

    def __init__(self, layer: "Layer"):
        self.layer = layer
        self.width = layer.width
        self.height = layer.height
        self.pending: Dict[Tuple[int, int], Cell] = {}

    def get_cell(self, x: int, y: int) -> Cell:
        cell = self.pending.get((x, y))
        return cell if cell is not None else self.layer.get_cell(x, y)

    def set_cell(self, x: int, y: int, cell: Cell):
        self.pending[(x, y)] = cell

    def place_smart(self, x: int, y: int, style: LineStyle, brush: Cell, paint_mode: PaintMode):
        """Stage a resolved box glyph at (x, y) plus the neighbor rewrites it causes."""
        neighbors = box_drawing.get_neighbors(x, y, self, self.width, self.height)
        glyph = box_drawing.get_smart_character(neighbors, style)
        self.set_cell(x, y, apply_paint_mode(glyph, self.get_cell(x, y), brush, paint_mode))
        for update in box_drawing.get_neighbors_to_update(x, y, self, self.width, self.height):
            self.set_cell(update.x, update.y, Cell(update.char, update.fg, update.bg))

    def changes(self) -> List[CellChange]:
        """Staged writes that differ from the layer, in staging order."""
        out = []
        for (x, y), after in self.pending.items():
            before = self.layer.get_cell(x, y)
            if before != after:
                out.append(CellChange(self.layer.cell_index(x, y), before, after))
        return out


def build_changes(layer: "Layer", writes: Iterable[Tuple[int, int, Cell]]) -> List[CellChange]:
    return [CellChange(layer.cell_index(x, y), layer.get_cell(x, y), after) for x, y, after in writes]


def commit(
    history: "CommandHistory",
    layer: "Layer",
    changes: List[CellChange],
    tool: str,
    events: Optional["EventBus"] = None,
    single: bool = False,
) -> Optional[CellCommand]:
    """Wrap ``changes`` in one CellCommand and run it through the history."""
    if not changes:
        return None
    if single and len(changes) == 1:
        change = changes[0]
        command = CellCommand.from_single_cell(
            layer, change.index, change.before, change.after, tool=tool, events=events
        )
    else:
        command = CellCommand.from_multiple_cells(layer, changes, tool=tool, events=events)
    history.execute(command)
    return command
