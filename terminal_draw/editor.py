"""
Editor session: wires one scene, event bus, command history and tool set together.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Union

from rich.console import Console

from .commands import (
    AddLayerCommand,
    ClearCommand,
    CommandHistory,
    RemoveLayerCommand,
    ReorderLayersCommand,
    ResizeCommand,
)
from .config import EditorConfig
from .errors import CommandValidationError
from .events import EventBus
from .log import configure_logging
from .models import Cell, DrawingMode, PaintMode, ResizeStrategy
from .project_manager import ProjectManager
from .scene import Scene
from .tools import Tool, ToolKind, create_tool

logger = logging.getLogger(__name__)


class EditorSession:
    def __init__(self, config: Optional[EditorConfig] = None, scene: Optional[Scene] = None):
        self.config = config or EditorConfig()
        self.events = EventBus()
        self.history = CommandHistory(
            max_size=self.config.max_history,
            events=self.events,
            merging_enabled=self.config.merging_enabled,
        )
        self.projects = ProjectManager(self.events)
        self.scene = scene or Scene(
            self.config.default_width,
            self.config.default_height,
            self.config.palette_id,
        )

        # One instance per tool, all sharing the history
        self.tools: Dict[ToolKind, Tool] = {kind: create_tool(kind, self.history) for kind in ToolKind}
        self.active_tool_kind = ToolKind.BRUSH
        self.line_style = self.config.default_line_style

    def setup_logging(self, console: Optional[Console] = None) -> logging.Logger:
        """Render package logs with rich at the configured ``log_level``."""
        return configure_logging(self.config.log_level, console)

    @property
    def active_tool(self) -> Tool:
        return self.tools[self.active_tool_kind]

    def select_tool(self, kind: Union[ToolKind, str]) -> Tool:
        self.active_tool_kind = ToolKind(kind)
        logger.debug("Selected tool %s", self.active_tool_kind.value)
        return self.active_tool

    def set_current_cell(self, cell: Cell):
        for tool in self.tools.values():
            if hasattr(tool, "current_cell"):
                tool.current_cell = cell

    def set_paint_mode(self, mode: Union[PaintMode, str]):
        mode = PaintMode(mode)
        for tool in self.tools.values():
            if hasattr(tool, "paint_mode"):
                tool.paint_mode = mode

    def set_drawing_mode(self, mode: Union[DrawingMode, str]):
        mode = DrawingMode(mode)
        for tool in self.tools.values():
            if hasattr(tool, "drawing_mode"):
                tool.drawing_mode = mode

    def set_smart_drawing(self, enabled: bool):
        """Switch shape tools between box-drawing in ``line_style`` and the plain glyph."""
        self.set_drawing_mode(DrawingMode(self.line_style.value) if enabled else DrawingMode.NORMAL)

    # Pointer forwarding

    def pointer_down(self, x: int, y: int, event_data: Optional[Mapping[str, Any]] = None):
        self.active_tool.on_pointer_down(x, y, self.scene, self.events, event_data)

    def pointer_drag(self, x: int, y: int, event_data: Optional[Mapping[str, Any]] = None):
        self.active_tool.on_pointer_drag(x, y, self.scene, self.events, event_data)

    def pointer_up(self, x: int, y: int, event_data: Optional[Mapping[str, Any]] = None):
        self.active_tool.on_pointer_up(x, y, self.scene, self.events, event_data)

    # History

    def undo(self) -> bool:
        return self.history.undo()

    def redo(self) -> bool:
        return self.history.redo()

    # Layer and scene operations

    def add_layer(self, name: str, layer_id: Optional[str] = None, index: Optional[int] = None):
        self.history.execute(AddLayerCommand(self.scene, name, layer_id, index, self.events), allow_merge=False)

    def remove_layer(self, layer_id: str):
        self.history.execute(RemoveLayerCommand(self.scene, layer_id, self.events), allow_merge=False)

    def move_layer(self, from_index: int, to_index: int):
        self.history.execute(ReorderLayersCommand(self.scene, from_index, to_index, self.events), allow_merge=False)

    def clear(self, layer_id: Optional[str] = None):
        layer = None
        if layer_id is not None:
            layer = self.scene.get_layer(layer_id)
            if layer is None:
                raise CommandValidationError(f"Layer {layer_id!r} not found")
        self.history.execute(ClearCommand(self.scene, layer, self.events), allow_merge=False)

    def resize(
        self,
        width: int,
        height: int,
        strategy: Union[ResizeStrategy, str] = ResizeStrategy.PAD,
        fill: Optional[Cell] = None,
    ):
        self.history.execute(ResizeCommand(self.scene, width, height, strategy, fill, self.events), allow_merge=False)

    # Projects

    def replace_scene(self, scene: Scene):
        """Swap in a new scene. History cannot span unrelated grids, so it is cleared."""
        self.history.clear()
        self.scene = scene
        for tool in self.tools.values():
            for attr in ("anchor", "center", "current"):
                if getattr(tool, attr, None) is not None:
                    setattr(tool, attr, None)
            if getattr(tool, "stroking", False):
                tool.stroking = False
        logger.info("Scene replaced (%dx%d, %d layers)", scene.width, scene.height, len(scene.layers))

    def new_scene(self, width: Optional[int] = None, height: Optional[int] = None):
        self.replace_scene(
            Scene(
                width or self.config.default_width,
                height or self.config.default_height,
                self.config.palette_id,
            )
        )

    def save_project(self, path: str, name: Optional[str] = None) -> str:
        return self.projects.save(self.scene, path, name)

    def load_project(self, path: str) -> Scene:
        scene = self.projects.load(path)
        self.replace_scene(scene)
        return scene
