"""
Default values shared across the editor core.
"""

# Grid defaults
DEFAULT_WIDTH = 80
DEFAULT_HEIGHT = 25
DEFAULT_PALETTE_ID = "default"

# Default cell values
DEFAULT_CHAR = " "
DEFAULT_FG = 7  # White
TRANSPARENT = -1
DEFAULT_BG = TRANSPARENT

# Layer IDs
LAYER_BG = "bg"
LAYER_MID = "mid"
LAYER_FG = "fg"

# History
DEFAULT_MAX_HISTORY = 50
MERGE_WINDOW_MS = 2000

# Project files
PROJECT_VERSION = "1.0"
PROJECT_EXTENSION = ".json"

# Resize limits
MIN_GRID_SIZE = 1
MAX_GRID_WIDTH = 200
MAX_GRID_HEIGHT = 100
