"""
Core value types and enums for the editor.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Mapping

from .constants import DEFAULT_BG, DEFAULT_CHAR, DEFAULT_FG, TRANSPARENT


@dataclass(frozen=True, slots=True)
class Cell:
    """A single character cell: glyph plus foreground/background palette indices."""

    char: str = DEFAULT_CHAR
    fg: int = DEFAULT_FG
    bg: int = DEFAULT_BG  # -1 = transparent

    def is_empty(self) -> bool:
        return self.char == " " and self.bg == TRANSPARENT

    def with_char(self, char: str) -> "Cell":
        return replace(self, char=char)

    def to_dict(self) -> Dict[str, Any]:
        return {"ch": self.char, "fg": self.fg, "bg": self.bg}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Cell":
        return cls(
            char=data.get("ch", DEFAULT_CHAR),
            fg=data.get("fg", DEFAULT_FG),
            bg=data.get("bg", DEFAULT_BG),
        )


EMPTY_CELL = Cell()


class LineStyle(str, Enum):
    SINGLE = "single"
    DOUBLE = "double"


class DrawingMode(str, Enum):
    """How shape tools pick glyphs: the current glyph, or smart box-drawing."""

    NORMAL = "normal"
    SINGLE = "single"
    DOUBLE = "double"

    @property
    def line_style(self) -> "LineStyle":
        if self is DrawingMode.NORMAL:
            raise ValueError("Normal drawing mode has no line style")
        return LineStyle(self.value)


class PaintMode(str, Enum):
    """Which cell attributes a tool writes."""

    ALL = "all"
    FG = "fg"
    BG = "bg"
    GLYPH = "glyph"


class FillMode(str, Enum):
    OUTLINE = "outline"
    FILLED = "filled"


class ResizeStrategy(str, Enum):
    PAD = "pad"
    CROP = "crop"
    CENTER = "center"
