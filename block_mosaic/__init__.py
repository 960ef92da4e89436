"""
Block Mosaic
============

Pixelate an image by replacing every fixed-size tile with its average
colour. The image is streamed through a single reusable band, one tile
tall, so memory use stays flat however tall the image is.
"""

__version__ = "1.0.0"

from block_mosaic.color_utils import OPAQUE_BLACK, average_color
from block_mosaic.config import MosaicConfig
from block_mosaic.errors import EmptySource, InvalidConfiguration, MosaicError
from block_mosaic.image_io import load_image, make_comparison_grid, save_image
from block_mosaic.pixel_buffer import PixelBuffer
from block_mosaic.transformer import (
    MosaicTransformer,
    Tile,
    mosaic_array,
    tiles,
    transform,
)

__all__ = [
    "OPAQUE_BLACK",
    "EmptySource",
    "InvalidConfiguration",
    "MosaicConfig",
    "MosaicError",
    "MosaicTransformer",
    "PixelBuffer",
    "Tile",
    "average_color",
    "load_image",
    "make_comparison_grid",
    "mosaic_array",
    "save_image",
    "tiles",
    "transform",
]
