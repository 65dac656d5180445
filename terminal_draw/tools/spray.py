"""
Spray tool: scatters glyphs around the pointer.

Every hit advances the cell one step along the current preset's density
sequence; cells already at the densest glyph only pick up the new color.
"""

import random
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence

from ..models import Cell
from .common import build_changes, commit, editable_layer
from .shapes import Point

if TYPE_CHECKING:
    from ..commands.history import CommandHistory
    from ..events import EventBus
    from ..layer import Layer
    from ..scene import Scene

PRESETS: Dict[str, List[str]] = {
    "artist": [".", "-", "+", "*", "%", "m", "#"],
    "blocks": ["░", "▒", "▓", "█"],
    "dots": ["·", "•", "○", "●"],
    "stipple": [",", ".", "·", ":"],
    "heights": ["▁", "▂", "▃", "▄", "▅", "▆", "▇", "█"],
    "widths": ["▏", "▎", "▍", "▌", "▋", "▊", "▉"],
    "stars": ["·", "•", "✶", "✕"],
    "triangles": ["▴", "▵", "►", "◄", "▲", "▼"],
    "crosses": ["·", "÷", "+", "✕", "×", "X", "╳"],
    "waves": ["~", "∼", "≈", "≋"],
}

RADII = (2, 3, 5)  # small, medium, large
COVERAGES = (0.025, 0.05, 0.1, 0.5)  # light, medium, dense, heavy


def next_density_char(char: str, sequence: Sequence[str]) -> str:
    """Next glyph in ``sequence``; unknown glyphs start at the lightest one."""
    if char not in sequence:
        return sequence[0]
    index = sequence.index(char)
    return sequence[min(index + 1, len(sequence) - 1)]


class SprayTool:
    name = "spray"
    cursor_hint = "crosshair"

    def __init__(
        self,
        history: "CommandHistory",
        current_cell: Optional[Cell] = None,
        preset: str = "artist",
        radius: int = 3,
        coverage: float = 0.05,
        rng: Optional[random.Random] = None,
    ):
        self.history = history
        self.current_cell = current_cell or Cell(".", 7, -1)
        self.rng = rng or random.Random()
        self.preset = "artist"
        self.radius = 3
        self.coverage = 0.05
        self.stroking = False
        self.set_preset(preset)
        self.set_radius(radius)
        self.set_coverage(coverage)

    def set_preset(self, name: str):
        if name not in PRESETS:
            raise ValueError(f"Unknown spray preset: {name}")
        self.preset = name

    def set_radius(self, radius: int):
        if radius not in RADII:
            raise ValueError(f"Spray radius must be one of {RADII}")
        self.radius = radius

    def set_coverage(self, coverage: float):
        if coverage not in COVERAGES:
            raise ValueError(f"Spray coverage must be one of {COVERAGES}")
        self.coverage = coverage

    @property
    def sequence(self) -> List[str]:
        return PRESETS[self.preset]

    def cells_in_radius(self, layer: "Layer", cx: int, cy: int) -> List[Point]:
        r = self.radius
        return [
            (cx + dx, cy + dy)
            for dy in range(-r, r + 1)
            for dx in range(-r, r + 1)
            if dx * dx + dy * dy <= r * r and layer.in_bounds(cx + dx, cy + dy)
        ]

    def _sprayed(self, before: Cell) -> Optional[Cell]:
        sequence = self.sequence
        char = next_density_char(before.char, sequence)
        if char == before.char:
            # Densest glyph already; only a color change is left
            if char == sequence[-1] and before.fg != self.current_cell.fg:
                return Cell(char, self.current_cell.fg, before.bg)
            return None
        return Cell(char, self.current_cell.fg, before.bg)

    def spray(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None):
        layer = editable_layer(scene)
        if layer is None:
            return

        writes = []
        for px, py in self.cells_in_radius(layer, x, y):
            if self.rng.random() >= self.coverage:
                continue
            after = self._sprayed(layer.get_cell(px, py))
            if after is not None:
                writes.append((px, py, after))

        commit(self.history, layer, build_changes(layer, writes), self.name, events)

    def on_pointer_down(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        self.stroking = True
        self.spray(x, y, scene, events)

    def on_pointer_drag(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        if self.stroking:
            self.spray(x, y, scene, events)

    def on_pointer_up(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None):
        if self.stroking:
            self.stroking = False
            self.history.end_stroke()
