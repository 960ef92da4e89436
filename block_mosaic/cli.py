"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import typer
from PIL import UnidentifiedImageError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn

from block_mosaic.config import MosaicConfig
from block_mosaic.errors import MosaicError
from block_mosaic.image_io import load_image, make_comparison_grid, save_image
from block_mosaic.pixel_buffer import PixelBuffer
from block_mosaic.transformer import transform

app = typer.Typer(
    name="block-mosaic",
    help="Pixelate images by replacing each tile with its average colour.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()

logger = logging.getLogger("block_mosaic")

# Pillow raises ValueError for an unknown output extension
_IMAGE_ERRORS = (MosaicError, ValueError, OSError, UnidentifiedImageError)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )


def _collect_images(folder: Path, extensions: frozenset[str]) -> list[Path]:
    if not folder.exists():
        return []
    return sorted(
        f for f in folder.iterdir()
        if f.is_file() and f.suffix.lower() in extensions
    )


def _resolve_tile(
    tile: int | None, tile_width: int, tile_height: int,
) -> tuple[int, int]:
    if tile is not None:
        return tile, tile
    return tile_width, tile_height


def _run(source: PixelBuffer, tile_width: int, tile_height: int) -> PixelBuffer:
    """Transform *source* behind a Rich progress bar fed by band progress."""
    with Progress(
        TextColumn("  [cyan]bands[/cyan]"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    ) as bar:
        task = bar.add_task("mosaic", total=source.height)

        def _on_band(done: int, total: int) -> None:
            bar.update(task, completed=done, total=total)

        return transform(source, tile_width, tile_height, progress=_on_band)


def _comparison_path(output: Path) -> Path:
    return output.with_name(f"{output.stem}_comparison.png")


# Defaults come from MosaicConfig - single source of truth
_DEFAULTS = MosaicConfig()


# -- single-image command ----------------------------------------------

@app.command()
def single(
    source: Path = typer.Argument(
        _DEFAULTS.input_path, help="Path to the source image",
    ),
    output: Path = typer.Option(
        _DEFAULTS.output_path, "--output", "-o", help="Where to write the mosaic",
    ),
    tile_width: int = typer.Option(
        _DEFAULTS.tile_width, "--tile-width", "-W", help="Tile width in pixels",
    ),
    tile_height: int = typer.Option(
        _DEFAULTS.tile_height, "--tile-height", "-H", help="Tile height in pixels",
    ),
    tile: int | None = typer.Option(
        None, "--tile", "-t", help="Square tile size (overrides -W / -H)",
    ),
    quality: int = typer.Option(
        _DEFAULTS.jpeg_quality, "--quality", "-q", help="JPEG quality",
    ),
    comparison: bool = typer.Option(
        _DEFAULTS.save_comparison, "--comparison/--no-comparison",
        help="Also save an Original | Mosaic comparison",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Pixelate a single image."""
    _setup_logging(verbose)
    tw, th = _resolve_tile(tile, tile_width, tile_height)

    try:
        img = load_image(source)
        mosaic = _run(img, tw, th)
        save_image(mosaic, output, quality=quality)
        if comparison:
            make_comparison_grid(img, mosaic, _comparison_path(output))
    except _IMAGE_ERRORS as exc:
        console.print(f"[red]✗[/red] {source}: {exc}")
        raise typer.Exit(1) from exc

    console.print(
        f"[green]✓[/green] Saved to {output}  "
        f"[dim]{img.width}x{img.height}  tile={tw}x{th}[/dim]"
    )


# -- batch command -----------------------------------------------------

@app.command()
def batch(
    input_dir: Path = typer.Option(
        _DEFAULTS.input_dir, "--input", "-i", help="Folder with source images",
    ),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Results folder",
    ),
    tile_width: int = typer.Option(
        _DEFAULTS.tile_width, "--tile-width", "-W", help="Tile width in pixels",
    ),
    tile_height: int = typer.Option(
        _DEFAULTS.tile_height, "--tile-height", "-H", help="Tile height in pixels",
    ),
    tile: int | None = typer.Option(
        None, "--tile", "-t", help="Square tile size (overrides -W / -H)",
    ),
    output_format: str = typer.Option(
        _DEFAULTS.output_format, "--format", "-f", help="Output file extension",
    ),
    quality: int = typer.Option(
        _DEFAULTS.jpeg_quality, "--quality", "-q", help="JPEG quality",
    ),
    comparison: bool = typer.Option(
        _DEFAULTS.save_comparison, "--comparison/--no-comparison",
        help="Also save an Original | Mosaic comparison per image",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Pixelate all images in INPUT_DIR and write results to OUTPUT_DIR."""
    _setup_logging(verbose)
    tw, th = _resolve_tile(tile, tile_width, tile_height)

    cfg = MosaicConfig(
        tile_width=tw,
        tile_height=th,
        input_dir=input_dir,
        output_dir=output_dir,
        output_format=output_format.lstrip("."),
        jpeg_quality=quality,
        save_comparison=comparison,
    )

    cfg.input_dir.mkdir(exist_ok=True)
    cfg.output_dir.mkdir(parents=True, exist_ok=True)

    images = _collect_images(cfg.input_dir, cfg.SUPPORTED_EXTENSIONS)
    if not images:
        console.print(f"\n[yellow]No images found in {cfg.input_dir}/[/yellow]")
        console.print("Place .jpg / .png / ... files there and re-run.\n")
        raise typer.Exit(0)

    console.print(Panel.fit(
        f"[bold]BLOCK MOSAIC[/bold]\n"
        f"Tile: {cfg.tile_width}x{cfg.tile_height}  |  "
        f"Format: {cfg.output_format}\n"
        f"Images: {len(images)}",
        border_style="cyan",
    ))

    failed = 0
    for idx, img_path in enumerate(images, 1):
        console.rule(f"[bold cyan][{idx}/{len(images)}] {img_path.name}[/bold cyan]")
        t_total = time.perf_counter()

        mosaic_path = cfg.output_dir / f"{img_path.stem}_mosaic.{cfg.output_format}"
        try:
            img = load_image(img_path)
            mosaic = _run(img, cfg.tile_width, cfg.tile_height)
            save_image(mosaic, mosaic_path, quality=cfg.jpeg_quality)
            if cfg.save_comparison:
                make_comparison_grid(img, mosaic, _comparison_path(mosaic_path))
        except _IMAGE_ERRORS as exc:
            logger.error("Skipping %s: %s", img_path.name, exc)
            failed += 1
            continue

        elapsed = time.perf_counter() - t_total
        console.print(
            f"  [green]✓[/green] {mosaic_path.name}  "
            f"[dim]{img.width}x{img.height}  time={elapsed:.1f}s[/dim]"
        )

    style = "yellow" if failed else "green"
    console.print(Panel.fit(
        f"[bold {style}]ALL DONE[/bold {style}] - "
        f"{len(images) - failed}/{len(images)} images, "
        f"results in [bold]{cfg.output_dir}/[/bold]",
        border_style=style,
    ))
    if failed:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
