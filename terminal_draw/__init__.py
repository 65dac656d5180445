"""
terminal-draw: layered ASCII-art editing core with undo/redo and smart box-drawing.
"""

from .config import EditorConfig
from .editor import EditorSession
from .events import EventBus, EventType
from .layer import Layer
from .log import configure_logging
from .models import Cell, DrawingMode, FillMode, LineStyle, PaintMode, ResizeStrategy
from .scene import Scene

__version__ = "0.1.0"

__all__ = [
    "Cell",
    "DrawingMode",
    "EditorConfig",
    "EditorSession",
    "EventBus",
    "EventType",
    "FillMode",
    "Layer",
    "LineStyle",
    "PaintMode",
    "ResizeStrategy",
    "Scene",
    "configure_logging",
]
