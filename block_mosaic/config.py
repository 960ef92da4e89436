"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class MosaicConfig:
    """All tuneable parameters for a mosaic run.

    Attributes:
        tile_width:      Width of one mosaic cell in pixels.
        tile_height:     Height of one mosaic cell, also the band height.
        input_path:      Source image for the ``single`` command.
        output_path:     Destination for the ``single`` command.
        input_dir:       Folder to scan for source images (``batch``).
        output_dir:      Folder for results (``batch``).
        output_format:   Image format for files written by ``batch``.
        jpeg_quality:    Encoder quality for JPEG output (1-95).
        save_comparison: Also write an Original | Mosaic comparison image.
    """

    # Tiles
    tile_width: int = 100
    tile_height: int = 100

    # Single image
    input_path: Path = field(default_factory=lambda: Path("test.jpg"))
    output_path: Path = field(default_factory=lambda: Path("result.jpg"))

    # Batch
    input_dir: Path = field(default_factory=lambda: Path("images"))
    output_dir: Path = field(default_factory=lambda: Path("output"))

    # Output
    output_format: str = "jpg"
    jpeg_quality: int = 75
    save_comparison: bool = False

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".webp", ".gif"}
    )
