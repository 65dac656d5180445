"""
Grid resizing for layers: pad, crop and center strategies.
"""

from typing import Iterable, List, Optional, Union

import numpy as np

from .constants import MAX_GRID_HEIGHT, MAX_GRID_WIDTH, MIN_GRID_SIZE
from .errors import ResizeError
from .layer import Layer, LayerSnapshot
from .models import Cell, EMPTY_CELL, ResizeStrategy


def _offsets(strategy: ResizeStrategy, old_w: int, old_h: int, new_w: int, new_h: int):
    if strategy is ResizeStrategy.CENTER:
        return (new_w - old_w) // 2, (new_h - old_h) // 2
    # pad and crop both keep the top-left corner anchored
    return 0, 0


def resize_layer(
    layer: Layer,
    new_w: int,
    new_h: int,
    strategy: Union[ResizeStrategy, str] = ResizeStrategy.PAD,
    fill: Optional[Cell] = None,
) -> LayerSnapshot:
    """Resize ``layer`` in place and return a snapshot of its previous grid."""
    if new_w < MIN_GRID_SIZE or new_h < MIN_GRID_SIZE:
        raise ResizeError(f"New dimensions must be at least 1x1, got {new_w}x{new_h}")
    try:
        strategy = ResizeStrategy(strategy)
    except ValueError:
        raise ResizeError(f"Unknown resize strategy: {strategy}") from None

    fill = fill or EMPTY_CELL
    old = layer.snapshot()
    off_x, off_y = _offsets(strategy, old.width, old.height, new_w, new_h)

    chars = np.full((new_h, new_w), fill.char, dtype=object)
    fg = np.full((new_h, new_w), fill.fg, dtype=np.int16)
    bg = np.full((new_h, new_w), fill.bg, dtype=np.int16)

    # Overlap of the old grid, shifted by the offset, with the new grid
    dst_x0, dst_y0 = max(0, off_x), max(0, off_y)
    dst_x1 = min(new_w, off_x + old.width)
    dst_y1 = min(new_h, off_y + old.height)
    if dst_x1 > dst_x0 and dst_y1 > dst_y0:
        src = (slice(dst_y0 - off_y, dst_y1 - off_y), slice(dst_x0 - off_x, dst_x1 - off_x))
        dst = (slice(dst_y0, dst_y1), slice(dst_x0, dst_x1))
        chars[dst] = old.chars[src]
        fg[dst] = old.fg[src]
        bg[dst] = old.bg[src]

    layer.restore(LayerSnapshot(new_w, new_h, chars, fg, bg))
    return old


def resize_layers(
    layers: Iterable[Layer],
    new_w: int,
    new_h: int,
    strategy: Union[ResizeStrategy, str] = ResizeStrategy.PAD,
    fill: Optional[Cell] = None,
) -> List[LayerSnapshot]:
    return [resize_layer(layer, new_w, new_h, strategy, fill) for layer in layers]


def validate_resize(
    new_w: int,
    new_h: int,
    min_size: int = MIN_GRID_SIZE,
    max_width: int = MAX_GRID_WIDTH,
    max_height: int = MAX_GRID_HEIGHT,
) -> List[str]:
    """Return a list of human-readable problems; empty means the size is fine."""
    errors = []
    for label, value, maximum in (("Width", new_w, max_width), ("Height", new_h, max_height)):
        if not isinstance(value, int) or isinstance(value, bool):
            errors.append(f"{label} must be an integer")
        elif value < min_size:
            errors.append(f"{label} must be at least {min_size}")
        elif value > maximum:
            errors.append(f"{label} cannot exceed {maximum}")
    return errors
