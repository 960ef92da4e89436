"""Block mosaic transform over a reusable row-band buffer.

The source is processed one horizontal band at a time. A band is the full
image width and one tile tall; it is copied into a scratch buffer, every
tile of the band is flattened to its average colour in place, and the band
is copied into the output. Only the scratch band and the output are ever
allocated, whatever the image height.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from typing import NamedTuple

import numpy as np

from block_mosaic.color_utils import average_color
from block_mosaic.errors import EmptySource, InvalidConfiguration
from block_mosaic.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

# Called once per finished band with (rows_done, total_rows).
ProgressCallback = Callable[[int, int], None]


class Tile(NamedTuple):
    """A cell of the working band, already clipped to its valid region."""

    x: int
    y: int
    width: int
    height: int


def validate_tile_size(tile_width: int, tile_height: int) -> None:
    """Raise :class:`InvalidConfiguration` unless both sides are positive ints."""
    for name, value in (("tile_width", tile_width), ("tile_height", tile_height)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            msg = f"{name} must be an integer, got {type(value).__name__}"
            raise InvalidConfiguration(msg)
        if value <= 0:
            msg = f"{name} must be > 0, got {value}"
            raise InvalidConfiguration(msg)


def tiles(
    width: int, height: int, tile_width: int, tile_height: int,
) -> Iterator[Tile]:
    """Yield row-major cells covering a ``width x height`` region.

    The last column and row of cells are truncated to the region.
    """
    for y in range(0, height, tile_height):
        h = min(tile_height, height - y)
        for x in range(0, width, tile_width):
            yield Tile(x, y, min(tile_width, width - x), h)


class MosaicTransformer:
    """Pixelate one source image band by band.

    Args:
        source:      Image to read. Never written to.
        tile_width:  Cell width in pixels (> 0).
        tile_height: Cell height in pixels (> 0); also the band height,
                     capped at the image height.

    The working band is allocated here and reused by every :meth:`process`
    call. Rows of the band beyond the count returned by :meth:`load_band`
    hold stale pixels from an earlier band; the averager and writer are
    always given that count and stay inside it.
    """

    def __init__(self, source: PixelBuffer, tile_width: int, tile_height: int) -> None:
        validate_tile_size(tile_width, tile_height)
        if source.is_empty:
            msg = f"source image is empty ({source.width}x{source.height})"
            raise EmptySource(msg)

        self.source = source
        self.tile_width = int(tile_width)
        self.tile_height = int(tile_height)
        # rows past the source height can never be loaded
        self.band = PixelBuffer.new(source.width, min(self.tile_height, source.height))

    @property
    def band_count(self) -> int:
        return -(-self.source.height // self.tile_height)

    # -- Band steps ----------------------------------------------------

    def load_band(self, offset: int) -> int:
        """Copy source rows starting at *offset* into the band.

        Returns the number of rows copied, ``tile_height`` except for a
        short final band.
        """
        rows = min(self.tile_height, self.source.height - offset)
        self.band.copy_rows_from(self.source, offset, 0, rows)
        return rows

    def average_tiles(self, rows: int) -> None:
        """Flatten every cell in the first *rows* rows of the band."""
        data = self.band.pixels
        for tile in tiles(self.band.width, rows, self.tile_width, self.tile_height):
            cell = data[tile.y:tile.y + tile.height, tile.x:tile.x + tile.width]
            self.band.fill_rect(*tile, average_color(cell))

    def write_band(self, output: PixelBuffer, offset: int, rows: int) -> None:
        """Copy the first *rows* rows of the band into *output* at *offset*."""
        rows = min(rows, output.height - offset)
        output.copy_rows_from(self.band, 0, offset, rows)

    # -- Driver --------------------------------------------------------

    def process(self, progress: ProgressCallback | None = None) -> PixelBuffer:
        """Run every band and return the finished output image.

        *progress*, if given, is called after each band. Raising from it
        abandons the run; no output is returned.
        """
        height = self.source.height
        output = PixelBuffer.new(self.source.width, height, origin=self.source.origin)

        logger.debug(
            "Mosaic %dx%d, tile %dx%d, %d bands",
            self.source.width, height, self.tile_width, self.tile_height,
            self.band_count,
        )

        offset = 0
        while offset < height:
            rows = self.load_band(offset)
            self.average_tiles(rows)
            self.write_band(output, offset, rows)
            offset += self.tile_height

            done = min(offset, height)
            logger.debug("Band done: %d/%d rows", done, height)
            if progress is not None:
                progress(done, height)

        return output


def transform(
    source: PixelBuffer,
    tile_width: int,
    tile_height: int,
    progress: ProgressCallback | None = None,
) -> PixelBuffer:
    """Return a block-mosaic copy of *source*.

    Raises:
        InvalidConfiguration: a tile side is not a positive integer.
        EmptySource: *source* has zero width or height.
    """
    transformer = MosaicTransformer(source, tile_width, tile_height)

    logger.info(
        "Pixelating %dx%d image with %dx%d tiles …",
        source.width, source.height, tile_width, tile_height,
    )
    t0 = time.perf_counter()
    output = transformer.process(progress)
    logger.info("Mosaic ready  (%.2f s)", time.perf_counter() - t0)
    return output


def mosaic_array(array: np.ndarray, tile_width: int, tile_height: int) -> np.ndarray:
    """Pixelate an (H, W, 3) or (H, W, 4) uint8 array.

    The result has the same shape as *array*.
    """
    result = transform(PixelBuffer.from_array(array), tile_width, tile_height)
    out = result.to_array()
    if array.shape[2] == 3:
        return np.ascontiguousarray(out[:, :, :3])
    return out
