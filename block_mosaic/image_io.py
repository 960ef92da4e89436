"""Image loading, saving, and comparison-grid generation."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from block_mosaic.pixel_buffer import PixelBuffer

# Pillow formats that cannot store an alpha channel
_OPAQUE_FORMATS = frozenset({"JPEG", "BMP"})


def load_image(path: str | Path) -> PixelBuffer:
    """Decode an image file into a straight-alpha RGBA buffer.

    Palette, greyscale and RGB images are all converted, so the core only
    ever sees four 8-bit channels. The origin is always ``(0, 0)``.
    """
    with Image.open(path) as img:
        rgba = img.convert("RGBA")
        return PixelBuffer(np.array(rgba, dtype=np.uint8))


def to_pil(buffer: PixelBuffer) -> Image.Image:
    """Wrap a buffer's pixels in a new Pillow RGBA image."""
    return Image.fromarray(buffer.to_array())


def save_image(
    buffer: PixelBuffer,
    path: str | Path,
    quality: int = 75,
) -> None:
    """Encode *buffer* to *path*, format inferred from the extension.

    Alpha is discarded for formats that have none (JPEG, BMP).
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    img = to_pil(buffer)
    fmt = Image.registered_extensions().get(path.suffix.lower())
    if fmt in _OPAQUE_FORMATS:
        img = img.convert("RGB")

    if fmt == "JPEG":
        img.save(path, quality=quality)
    else:
        img.save(path)


def make_comparison_grid(
    original: PixelBuffer,
    mosaic: PixelBuffer,
    output_path: str | Path,
) -> None:
    """Create a 2-panel comparison: Original | Mosaic.

    Both panels are composited over a dark background, so transparent
    regions stay visible.
    """
    panel_w, panel_h = original.width, original.height
    label_height = 36
    gap = 8

    panels = [to_pil(original), to_pil(mosaic)]
    labels = ["Original", "Mosaic"]

    total_w = len(panels) * panel_w + (len(panels) - 1) * gap
    total_h = panel_h + label_height

    canvas = Image.new("RGB", (total_w, total_h), (30, 30, 30))
    draw = ImageDraw.Draw(canvas)

    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 18,
        )
    except OSError:
        font = ImageFont.load_default()

    for i, (panel, label) in enumerate(zip(panels, labels, strict=True)):
        x = i * (panel_w + gap)
        canvas.paste(panel, (x, label_height), mask=panel)

        bbox = draw.textbbox((0, 0), label, font=font)
        text_w = bbox[2] - bbox[0]
        tx = x + (panel_w - text_w) // 2
        draw.text((tx, 6), label, fill=(220, 220, 220), font=font)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    canvas.save(output_path)

