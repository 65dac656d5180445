"""
Project file management: wraps a scene with metadata and saves/loads it as JSON.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .constants import DEFAULT_BG, DEFAULT_CHAR, DEFAULT_FG, PROJECT_EXTENSION, PROJECT_VERSION
from .errors import ProjectFormatError
from .events import EventBus, ProjectError, ProjectLoaded, ProjectSaved
from .scene import Scene

logger = logging.getLogger(__name__)


class CellModel(BaseModel):
    ch: str = DEFAULT_CHAR
    fg: int = DEFAULT_FG
    bg: int = DEFAULT_BG


class LayerModel(BaseModel):
    id: str
    name: str
    visible: bool = True
    locked: bool = False
    ligatures: bool = False
    width: Optional[int] = None
    height: Optional[int] = None
    cells: List[CellModel] = Field(default_factory=list)


class SceneModel(BaseModel):
    w: int = Field(ge=1)
    h: int = Field(ge=1)
    palette_id: str = Field(alias="paletteId")
    active_layer_id: Optional[str] = Field(default=None, alias="activeLayerId")
    options: Dict[str, Any] = Field(default_factory=dict)
    layers: List[LayerModel] = Field(min_length=1)

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def check_layers(self) -> "SceneModel":
        for layer in self.layers:
            if (layer.width or self.w) != self.w or (layer.height or self.h) != self.h:
                raise ValueError(f"Layer {layer.id!r} does not match the scene size {self.w}x{self.h}")
            if layer.cells and len(layer.cells) != self.w * self.h:
                raise ValueError(
                    f"Layer {layer.id!r} has {len(layer.cells)} cells, expected {self.w * self.h}"
                )
        ids = [layer.id for layer in self.layers]
        if len(set(ids)) != len(ids):
            raise ValueError("Layer ids must be unique")
        if self.active_layer_id is not None and self.active_layer_id not in ids:
            raise ValueError(f"Active layer {self.active_layer_id!r} not found")
        return self


class ProjectModel(BaseModel):
    version: str
    name: str = "Untitled"
    timestamp: str = ""
    scene: SceneModel

    @field_validator("version")
    @classmethod
    def check_version(cls, value: str) -> str:
        if value != PROJECT_VERSION:
            raise ValueError(f"Unsupported version: {value} (expected {PROJECT_VERSION})")
        return value


def _validate(data: Any) -> ProjectModel:
    try:
        return ProjectModel.model_validate(data)
    except ValidationError as e:
        raise ProjectFormatError(f"Invalid project: {e}") from e


class ProjectManager:
    """Builds, validates and persists project files for a scene."""

    def __init__(self, events: Optional[EventBus] = None):
        self.events = events
        self.version = PROJECT_VERSION

    def _emit(self, event):
        if self.events is not None:
            self.events.emit(event)

    def create_project(self, scene: Scene, name: str = "Untitled") -> Dict[str, Any]:
        return {
            "version": self.version,
            "name": name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "scene": scene.to_dict(),
        }

    def validate_project(self, project: Any) -> ProjectModel:
        return _validate(project)

    def serialize_project(self, project: Dict[str, Any]) -> str:
        model = _validate(project)
        return json.dumps(model.model_dump(by_alias=True, exclude_none=True), indent=2, ensure_ascii=False)

    def parse_project(self, text: str) -> Dict[str, Any]:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ProjectFormatError(f"Failed to parse project: {e}") from e
        return _validate(data).model_dump(by_alias=True, exclude_none=True)

    def import_scene(self, project: Dict[str, Any]) -> Scene:
        model = _validate(project)
        return Scene.from_dict(model.scene.model_dump(by_alias=True, exclude_none=True))

    def project_info(self, project: Dict[str, Any]) -> Dict[str, Any]:
        scene = project.get("scene") or {}
        layers = scene.get("layers") or []
        return {
            "name": project.get("name"),
            "version": project.get("version"),
            "timestamp": project.get("timestamp"),
            "width": scene.get("w"),
            "height": scene.get("h"),
            "palette_id": scene.get("paletteId"),
            "layer_count": len(layers),
            "layer_names": [layer.get("name") for layer in layers],
        }

    def save(self, scene: Scene, path: str, name: Optional[str] = None) -> str:
        """Write ``scene`` to ``path`` (``.json`` is appended if missing)."""
        path = os.fspath(path)
        if not path.endswith(PROJECT_EXTENSION):
            path += PROJECT_EXTENSION
        name = name or os.path.splitext(os.path.basename(path))[0]

        try:
            text = self.serialize_project(self.create_project(scene, name))
            with open(path, "w", encoding="utf-8") as f:
                f.write(text)
        except (OSError, ProjectFormatError) as e:
            logger.error("Error saving project %s: %s", path, e)
            self._emit(ProjectError(path, str(e)))
            raise

        size = len(text.encode("utf-8"))
        logger.info("Saved project %r to %s (%d bytes)", name, path, size)
        self._emit(ProjectSaved(path, name, size))
        return path

    def load(self, path: str) -> Scene:
        path = os.fspath(path)
        try:
            if not path.endswith(PROJECT_EXTENSION):
                raise ProjectFormatError(f"Invalid file type. Expected {PROJECT_EXTENSION} file")
            with open(path, "r", encoding="utf-8") as f:
                project = self.parse_project(f.read())
            scene = self.import_scene(project)
        except (OSError, ProjectFormatError) as e:
            logger.error("Error loading project %s: %s", path, e)
            self._emit(ProjectError(path, str(e)))
            raise

        logger.info("Loaded project %r from %s", project["name"], path)
        self._emit(ProjectLoaded(path, project["name"], project["timestamp"]))
        return scene
