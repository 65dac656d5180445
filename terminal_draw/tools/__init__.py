"""
Drawing tools. Each tool turns pointer gestures into CellCommands and runs
them through the shared CommandHistory; none of them write layers directly.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Optional, Protocol, runtime_checkable

from .brush import BrushTool
from .circle import CircleTool
from .eraser import EraserTool
from .flood_fill import FloodFillTool
from .line import LineTool
from .picker import PickerTool
from .rectangle import RectangleTool
from .spray import SprayTool

if TYPE_CHECKING:
    from ..commands.history import CommandHistory
    from ..events import EventBus
    from ..scene import Scene


@runtime_checkable
class Tool(Protocol):
    name: str
    cursor_hint: str

    def on_pointer_down(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None): ...

    def on_pointer_drag(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None): ...

    def on_pointer_up(self, x: int, y: int, scene: "Scene", events: Optional["EventBus"] = None, event_data: Optional[Mapping[str, Any]] = None): ...


class ToolKind(str, Enum):
    BRUSH = "brush"
    ERASER = "eraser"
    LINE = "line"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    FLOODFILL = "floodfill"
    SPRAY = "spray"
    PICKER = "picker"


_TOOL_CLASSES = {
    ToolKind.BRUSH: BrushTool,
    ToolKind.ERASER: EraserTool,
    ToolKind.LINE: LineTool,
    ToolKind.RECTANGLE: RectangleTool,
    ToolKind.CIRCLE: CircleTool,
    ToolKind.FLOODFILL: FloodFillTool,
    ToolKind.SPRAY: SprayTool,
}


def create_tool(kind, history: "CommandHistory", **options) -> Tool:
    """Build a tool by kind; ``options`` go to the tool's constructor."""
    kind = ToolKind(kind)
    if kind is ToolKind.PICKER:
        return PickerTool()
    return _TOOL_CLASSES[kind](history, **options)


__all__ = [
    "Tool",
    "ToolKind",
    "create_tool",
    "BrushTool",
    "CircleTool",
    "EraserTool",
    "FloodFillTool",
    "LineTool",
    "PickerTool",
    "RectangleTool",
    "SprayTool",
]
