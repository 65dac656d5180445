"""
Exception types raised by the editor core.
"""


class EditorError(Exception):
    """Base class for all editor core errors."""


class CommandValidationError(EditorError, ValueError):
    """A command was built with missing or malformed fields."""


class MergeError(EditorError):
    """merge() was called on commands that cannot be merged."""


class OutOfBoundsError(EditorError, IndexError):
    """A cell coordinate lies outside the grid."""

    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"Cell ({x}, {y}) is outside the {width}x{height} grid")
        self.x = x
        self.y = y


class ResizeError(EditorError, ValueError):
    """Invalid grid dimensions or resize strategy."""


class ProjectFormatError(EditorError):
    """A project file could not be parsed or failed validation."""
