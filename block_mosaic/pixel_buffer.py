"""In-memory RGBA pixel grid backed by a NumPy array."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

CHANNELS = 4

Color = tuple[int, int, int, int]


class PixelBuffer:
    """Rectangular grid of straight-alpha RGBA pixels.

    Pixels live in a C-contiguous ``(height, width, 4)`` uint8 array and are
    addressed with local coordinates ``(x, y)``, ``0 <= x < width`` and
    ``0 <= y < height``. ``origin`` is the logical top-left corner in the
    coordinate space the image came from; it is carried through unchanged
    and never affects local addressing.
    """

    __slots__ = ("_data", "origin")

    def __init__(self, data: np.ndarray, origin: tuple[int, int] = (0, 0)) -> None:
        if data.dtype != np.uint8:
            raise TypeError("pixel data must have dtype=uint8")
        if data.ndim != 3 or data.shape[2] != CHANNELS:
            raise ValueError("pixel data must have shape (H, W, 4)")
        self._data = np.ascontiguousarray(data)
        self.origin = (int(origin[0]), int(origin[1]))

    # -- Constructors --------------------------------------------------

    @classmethod
    def new(
        cls,
        width: int,
        height: int,
        origin: tuple[int, int] = (0, 0),
    ) -> PixelBuffer:
        """Allocate a zero-filled buffer."""
        if width < 0 or height < 0:
            raise ValueError("buffer dimensions must be >= 0")
        data = np.zeros((height, width, CHANNELS), dtype=np.uint8)
        return cls(data, origin)

    @classmethod
    def from_array(
        cls,
        array: np.ndarray,
        origin: tuple[int, int] = (0, 0),
    ) -> PixelBuffer:
        """Copy an (H, W, 4) or (H, W, 3) uint8 array into a new buffer.

        Three-channel input is treated as fully opaque.
        """
        if not isinstance(array, np.ndarray):
            raise TypeError("array must be a NumPy array")
        if array.dtype != np.uint8:
            raise TypeError("array must have dtype=uint8")
        if array.ndim != 3 or array.shape[2] not in (3, CHANNELS):
            raise ValueError("array must have shape (H, W, 3) or (H, W, 4)")

        if array.shape[2] == 3:
            h, w = array.shape[:2]
            data = np.full((h, w, CHANNELS), 255, dtype=np.uint8)
            data[:, :, :3] = array
        else:
            data = array.copy()
        return cls(data, origin)

    # -- Geometry ------------------------------------------------------

    @property
    def width(self) -> int:
        return self._data.shape[1]

    @property
    def height(self) -> int:
        return self._data.shape[0]

    @property
    def bounds(self) -> tuple[int, int, int, int]:
        """``(x0, y0, x1, y1)`` in origin coordinates, exclusive max."""
        x0, y0 = self.origin
        return x0, y0, x0 + self.width, y0 + self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    @property
    def pixels(self) -> np.ndarray:
        """Live view of the underlying array. Writes go into the buffer."""
        return self._data

    # -- Pixel access --------------------------------------------------

    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"pixel ({x}, {y}) outside {self.width}x{self.height} buffer"
            )

    def get_pixel(self, x: int, y: int) -> Color:
        self._check(x, y)
        r, g, b, a = (int(c) for c in self._data[y, x])
        return r, g, b, a

    def set_pixel(self, x: int, y: int, color: Sequence[int]) -> None:
        self._check(x, y)
        self._data[y, x] = np.asarray(color, dtype=np.uint8)

    def fill_rect(
        self, x: int, y: int, width: int, height: int, color: Sequence[int],
    ) -> None:
        """Paint a rectangle that must lie inside the buffer."""
        if width <= 0 or height <= 0:
            return
        self._check(x, y)
        self._check(x + width - 1, y + height - 1)
        self._data[y:y + height, x:x + width] = np.asarray(color, dtype=np.uint8)

    # -- Row copies ----------------------------------------------------

    def copy_rows_from(
        self, src: PixelBuffer, src_row: int, dst_row: int, rows: int,
    ) -> None:
        """Copy *rows* full-width rows of *src* starting at *src_row*.

        Both buffers must have the same width and both row ranges must fit.
        """
        if src.width != self.width:
            raise ValueError(
                f"width mismatch: source {src.width}, destination {self.width}"
            )
        if rows < 0 or src_row < 0 or dst_row < 0:
            raise IndexError("row indices must be >= 0")
        if src_row + rows > src.height or dst_row + rows > self.height:
            raise IndexError(
                f"{rows} rows from {src_row} -> {dst_row} do not fit "
                f"({src.height} -> {self.height})"
            )
        self._data[dst_row:dst_row + rows] = src._data[src_row:src_row + rows]

    # -- Misc ----------------------------------------------------------

    def to_array(self) -> np.ndarray:
        """Independent (H, W, 4) uint8 copy of the pixels."""
        return self._data.copy()

    def tobytes(self) -> bytes:
        return self._data.tobytes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.origin == other.origin and np.array_equal(self._data, other._data)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"PixelBuffer(width={self.width}, height={self.height}, "
            f"origin={self.origin})"
        )
