"""
Configuration settings for the editor core.
"""

import logging
import os

import toml
from pydantic import BaseModel, ConfigDict

from .constants import (
    DEFAULT_HEIGHT,
    DEFAULT_MAX_HISTORY,
    DEFAULT_PALETTE_ID,
    DEFAULT_WIDTH,
)
from .models import LineStyle

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "terminal_draw.toml"


class EditorConfig(BaseModel):
    """Configuration settings for an editing session."""

    # Grid settings
    default_width: int = DEFAULT_WIDTH
    default_height: int = DEFAULT_HEIGHT
    palette_id: str = DEFAULT_PALETTE_ID

    # History settings
    max_history: int = DEFAULT_MAX_HISTORY
    merging_enabled: bool = True

    # Tool settings
    default_line_style: LineStyle = LineStyle.SINGLE

    # Logging
    log_level: str = "INFO"

    model_config = ConfigDict(extra="allow")

    @classmethod
    def load_from_toml(cls, path: str = DEFAULT_CONFIG_PATH) -> "EditorConfig":
        """Load configuration from the ``[editor]`` table of a TOML file."""
        if not os.path.exists(path):
            logger.info("Config file %s not found, using defaults", path)
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = toml.load(f)
            return cls(**data.get("editor", {}))
        except Exception as e:
            logger.error("Error loading config %s: %s", path, e)
            return cls()
