"""
Scene: the ordered stack of layers that make up a drawing.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from .constants import (
    DEFAULT_HEIGHT,
    DEFAULT_PALETTE_ID,
    DEFAULT_WIDTH,
    LAYER_BG,
    LAYER_FG,
    LAYER_MID,
)
from .layer import Layer, LayerSnapshot
from .models import Cell, ResizeStrategy
from . import resizer

logger = logging.getLogger(__name__)


class Scene:
    """Layers painted bottom-to-top, all sharing one width and height."""

    def __init__(
        self,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        palette_id: str = DEFAULT_PALETTE_ID,
        layers: Optional[List[Layer]] = None,
    ):
        self.width = width
        self.height = height
        self.palette_id = palette_id
        self.options: Dict[str, Any] = {}

        if layers is None:
            layers = [
                Layer(LAYER_BG, "Background", width, height),
                Layer(LAYER_MID, "Middle", width, height),
                Layer(LAYER_FG, "Foreground", width, height),
            ]
        if not layers:
            raise ValueError("A scene needs at least one layer")
        for layer in layers:
            self._check_dimensions(layer)
        self.layers: List[Layer] = list(layers)
        self.active_layer_id = LAYER_MID if self.get_layer(LAYER_MID) else self.layers[0].id

    def _check_dimensions(self, layer: Layer):
        if layer.width != self.width or layer.height != self.height:
            raise ValueError(
                f"Layer {layer.id!r} is {layer.width}x{layer.height}, "
                f"scene is {self.width}x{self.height}"
            )

    def get_layer(self, layer_id: str) -> Optional[Layer]:
        for layer in self.layers:
            if layer.id == layer_id:
                return layer
        return None

    def get_active_layer(self) -> Optional[Layer]:
        return self.get_layer(self.active_layer_id)

    def set_active_layer(self, layer_id: str) -> bool:
        if self.get_layer(layer_id) is None:
            return False
        self.active_layer_id = layer_id
        return True

    def get_layer_index(self, layer_id: str) -> int:
        for i, layer in enumerate(self.layers):
            if layer.id == layer_id:
                return i
        return -1

    def add_layer(self, layer: Layer, index: Optional[int] = None) -> bool:
        """Insert a layer (on top by default). Returns False if the id is taken."""
        if self.get_layer(layer.id) is not None:
            return False
        self._check_dimensions(layer)
        if index is None:
            self.layers.append(layer)
        else:
            self.layers.insert(max(0, min(index, len(self.layers))), layer)
        return True

    def remove_layer(self, layer_id: str) -> bool:
        """Remove a layer. The last remaining layer can never be removed."""
        if len(self.layers) <= 1:
            return False
        index = self.get_layer_index(layer_id)
        if index == -1:
            return False
        self.layers.pop(index)
        if self.active_layer_id == layer_id:
            self.active_layer_id = self.layers[0].id
        return True

    def reorder_layers(self, from_index: int, to_index: int) -> bool:
        count = len(self.layers)
        if not (0 <= from_index < count and 0 <= to_index < count):
            return False
        layer = self.layers.pop(from_index)
        self.layers.insert(to_index, layer)
        return True

    def next_layer_id(self, prefix: str = "layer") -> str:
        n = len(self.layers) + 1
        while self.get_layer(f"{prefix}-{n}") is not None:
            n += 1
        return f"{prefix}-{n}"

    def visible_layers(self) -> List[Layer]:
        return [layer for layer in self.layers if layer.visible]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_index(self, x: int, y: int) -> int:
        return y * self.width + x

    def clear_all(self):
        for layer in self.layers:
            layer.clear()

    def resize(
        self,
        width: int,
        height: int,
        strategy: Union[ResizeStrategy, str] = ResizeStrategy.PAD,
        fill: Optional[Cell] = None,
    ) -> List[LayerSnapshot]:
        """Resize every layer consistently; returns the previous grids."""
        snapshots = resizer.resize_layers(self.layers, width, height, strategy, fill)
        logger.debug(
            "Resized scene %dx%d -> %dx%d (%s)", self.width, self.height, width, height, strategy
        )
        self.width = width
        self.height = height
        return snapshots

    def to_dict(self) -> Dict[str, Any]:
        return {
            "w": self.width,
            "h": self.height,
            "paletteId": self.palette_id,
            "activeLayerId": self.active_layer_id,
            "options": dict(self.options),
            "layers": [layer.to_dict() for layer in self.layers],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Scene":
        width, height = data["w"], data["h"]
        layers = None
        if data.get("layers") is not None:
            layers = []
            for layer_data in data["layers"]:
                layer_data = dict(layer_data)
                layer_data.setdefault("width", width)
                layer_data.setdefault("height", height)
                layers.append(Layer.from_dict(layer_data))

        # An explicit empty list is rejected by the constructor
        scene = cls(width, height, data.get("paletteId", DEFAULT_PALETTE_ID), layers)
        scene.options = dict(data.get("options") or {})
        active = data.get("activeLayerId")
        if active is not None and not scene.set_active_layer(active):
            logger.warning("Active layer %r not found, using %r", active, scene.active_layer_id)
        return scene
