"""
Layer storage for the editor: a fixed-size grid of cells plus display flags.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

import numpy as np

from .constants import DEFAULT_BG, DEFAULT_CHAR, DEFAULT_FG, TRANSPARENT
from .errors import OutOfBoundsError
from .models import Cell, EMPTY_CELL


@dataclass
class LayerSnapshot:
    """Copy of a layer's grid, used by commands that replace whole layers."""

    width: int
    height: int
    chars: np.ndarray
    fg: np.ndarray
    bg: np.ndarray


class Layer:
    """A named grid of cells.

    Cells are stored as three parallel numpy arrays indexed ``[y, x]``. Every coordinate inside the grid always holds a cell; reads and
    writes outside it raise ``OutOfBoundsError`` instead of wrapping.
    """

    def __init__(self, layer_id: str, name: str, width: int, height: int):
        if width < 1 or height < 1:
            raise ValueError(f"Layer dimensions must be positive, got {width}x{height}")
        self.id = layer_id
        self.name = name
        self.width = width
        self.height = height
        self.visible = True
        self.locked = False
        self.ligatures = False  # Render hint only

        self.chars = np.full((height, width), DEFAULT_CHAR, dtype=object)
        self.fg = np.full((height, width), DEFAULT_FG, dtype=np.int16)
        self.bg = np.full((height, width), DEFAULT_BG, dtype=np.int16)

    def __repr__(self) -> str:
        return f"Layer(id={self.id!r}, name={self.name!r}, {self.width}x{self.height})"

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_index(self, x: int, y: int) -> int:
        return y * self.width + x

    def _check(self, x: int, y: int):
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(x, y, self.width, self.height)

    def get_cell(self, x: int, y: int) -> Cell:
        self._check(x, y)
        return Cell(self.chars[y, x], int(self.fg[y, x]), int(self.bg[y, x]))

    def set_cell(self, x: int, y: int, cell: Cell):
        self._check(x, y)
        self.chars[y, x] = cell.char
        self.fg[y, x] = cell.fg
        self.bg[y, x] = cell.bg

    def get_cell_at(self, index: int) -> Cell:
        y, x = divmod(index, self.width)
        return self.get_cell(x, y)

    def set_cell_at(self, index: int, cell: Cell):
        y, x = divmod(index, self.width)
        self.set_cell(x, y, cell)

    def clear(self):
        self.fill(EMPTY_CELL)

    def fill(self, cell: Cell):
        self.chars[:, :] = cell.char
        self.fg[:, :] = cell.fg
        self.bg[:, :] = cell.bg

    def get_region(self, x: int, y: int, width: int, height: int) -> List[List[Cell]]:
        """Copy a rectangle of cells; parts outside the grid come back empty."""
        region = []
        for ry in range(y, y + height):
            row = []
            for rx in range(x, x + width):
                row.append(self.get_cell(rx, ry) if self.in_bounds(rx, ry) else EMPTY_CELL)
            region.append(row)
        return region

    def set_region(self, x: int, y: int, region: List[List[Cell]]) -> int:
        """Paste a rectangle of cells, skipping anything outside the grid."""
        count = 0
        for dy, row in enumerate(region):
            for dx, cell in enumerate(row):
                if self.in_bounds(x + dx, y + dy):
                    self.set_cell(x + dx, y + dy, cell)
                    count += 1
        return count

    def snapshot(self) -> LayerSnapshot:
        return LayerSnapshot(
            width=self.width,
            height=self.height,
            chars=self.chars.copy(),
            fg=self.fg.copy(),
            bg=self.bg.copy(),
        )

    def restore(self, snapshot: LayerSnapshot):
        """Replace the whole grid, dimensions included, from a snapshot."""
        self.width = snapshot.width
        self.height = snapshot.height
        self.chars = snapshot.chars.copy()
        self.fg = snapshot.fg.copy()
        self.bg = snapshot.bg.copy()

    def clone(self) -> "Layer":
        layer = Layer(self.id, self.name, self.width, self.height)
        layer.visible = self.visible
        layer.locked = self.locked
        layer.ligatures = self.ligatures
        layer.restore(self.snapshot())
        return layer

    def iter_cells(self):
        """Yield every cell in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield self.get_cell(x, y)

    def to_text(self) -> str:
        return "\n".join("".join(row) for row in self.chars.tolist())

    def stats(self) -> Dict[str, Any]:
        empty = (self.chars == " ") & (self.bg == TRANSPARENT)
        freq = Counter(self.chars[~empty].tolist())
        return {
            "total_cells": self.width * self.height,
            "empty_count": int(empty.sum()),
            "non_empty_count": int((~empty).sum()),
            "char_frequency": dict(freq),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "width": self.width,
            "height": self.height,
            "visible": self.visible,
            "locked": self.locked,
            "ligatures": self.ligatures,
            "cells": [cell.to_dict() for cell in self.iter_cells()],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Layer":
        layer = cls(data["id"], data.get("name", data["id"]), data["width"], data["height"])
        layer.visible = data.get("visible", True)
        layer.locked = data.get("locked", False)
        layer.ligatures = data.get("ligatures", False)

        cells = data.get("cells") or []
        if cells and len(cells) != layer.width * layer.height:
            raise ValueError(
                f"Layer {layer.id!r} has {len(cells)} cells, "
                f"expected {layer.width * layer.height}"
            )
        for index, cell_data in enumerate(cells):
            layer.set_cell_at(index, Cell.from_dict(cell_data))
        return layer
