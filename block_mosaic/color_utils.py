"""Channel expansion and cell averaging for straight-alpha RGBA pixels."""

from __future__ import annotations

import numpy as np

# 8-bit -> 16-bit expansion factor (0xFF * 0x101 == 0xFFFF)
CHANNEL_EXPAND = 0x101

OPAQUE_BLACK: tuple[int, int, int, int] = (0, 0, 0, 255)


def expand_channels(pixels: np.ndarray) -> np.ndarray:
    """Widen uint8 channel values to the 16-bit scale as int64."""
    return pixels.astype(np.int64) * CHANNEL_EXPAND


def narrow_channels(values: np.ndarray) -> np.ndarray:
    """Truncate 16-bit scale values back to uint8."""
    return (values >> 8).astype(np.uint8)


def average_color(cell: np.ndarray) -> tuple[int, int, int, int]:
    """Mean colour of an (h, w, 4) uint8 cell.

    Every channel, alpha included, is averaged independently on its stored
    value; colours are *not* premultiplied by alpha first. Each value is
    expanded to 16 bits, summed, floor-divided by the pixel count and
    shifted back down to 8 bits, so the result is exact and reproducible.

    An empty cell averages to opaque black.
    """
    pixels = cell.reshape(-1, 4)
    count = len(pixels)
    if count == 0:
        return OPAQUE_BLACK

    sums = expand_channels(pixels).sum(axis=0)
    mean = narrow_channels(sums // count)
    r, g, b, a = (int(c) for c in mean)
    return r, g, b, a
