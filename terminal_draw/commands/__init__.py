from .base import Command, now_ms
from .cell_command import CellChange, CellCommand
from .history import CommandHistory
from .layer_commands import AddLayerCommand, RemoveLayerCommand, ReorderLayersCommand
from .scene_commands import ClearCommand, ResizeCommand

__all__ = [
    "Command",
    "now_ms",
    "CellChange",
    "CellCommand",
    "CommandHistory",
    "AddLayerCommand",
    "RemoveLayerCommand",
    "ReorderLayersCommand",
    "ClearCommand",
    "ResizeCommand",
]
