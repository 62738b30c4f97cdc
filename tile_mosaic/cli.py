"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from tile_mosaic.composer import build_mosaic
from tile_mosaic.config import KernelSize, MosaicConfig, select_strategy
from tile_mosaic.errors import MosaicError
from tile_mosaic.image_io import save_array
from tile_mosaic.tiles import prepare_tiles

app = typer.Typer(
    name="tile-mosaic",
    help="Rebuild images out of a folder of tile images.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()


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


def _fail(exc: MosaicError) -> typer.Exit:
    console.print(f"[bold red]Error:[/bold red] {exc}")
    return typer.Exit(1)


# Defaults come from MosaicConfig - single source of truth
_DEFAULTS = MosaicConfig()


# -- single-image command ----------------------------------------------

@app.command()
def single(
    source: Path = typer.Argument(..., help="Path to the source image"),
    tiles_dir: Path = typer.Option(
        _DEFAULTS.tiles_dir, "--tiles", "-t", help="Folder with tile images",
    ),
    output: Path = typer.Option(Path("output/mosaic.png"), "--output", "-o"),
    width: int = typer.Option(
        _DEFAULTS.kernel_width, "--width", "-w", min=1, help="Tile width in pixels",
    ),
    height: int = typer.Option(
        _DEFAULTS.kernel_height, "--height", "-h", min=1, help="Tile height in pixels",
    ),
    resize: bool = typer.Option(
        _DEFAULTS.resize, "--resize/--no-resize",
        help="One tile per source pixel (output grows by the tile size)",
    ),
    opacity: int | None = typer.Option(
        _DEFAULTS.opacity, "--opacity", min=0, max=255,
        help="Blend tiles over the source at this opacity (0-255)",
    ),
    sort: bool = typer.Option(
        _DEFAULTS.sort_tiles, "--sort/--no-sort", help="Order tiles by file name",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Build a mosaic of a single image."""
    _setup_logging(verbose)
    kernel = KernelSize(width, height)

    try:
        tiles = prepare_tiles(tiles_dir, kernel, sort=sort)
        mosaic = build_mosaic(source, tiles, resize=resize, opacity=opacity)
        output.parent.mkdir(parents=True, exist_ok=True)
        save_array(mosaic, output)
    except MosaicError as exc:
        raise _fail(exc) from exc

    h, w = mosaic.shape[:2]
    console.print(
        f"[green]✓[/green] Saved to {output}  "
        f"[dim]{w}x{h}  tiles={len(tiles)}  "
        f"strategy={select_strategy(resize, opacity).value}[/dim]"
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
    tiles_dir: Path = typer.Option(
        _DEFAULTS.tiles_dir, "--tiles", "-t", help="Folder with tile images",
    ),
    width: int = typer.Option(_DEFAULTS.kernel_width, "--width", "-w", min=1),
    height: int = typer.Option(_DEFAULTS.kernel_height, "--height", "-h", min=1),
    resize: bool = typer.Option(_DEFAULTS.resize, "--resize/--no-resize"),
    opacity: int | None = typer.Option(_DEFAULTS.opacity, "--opacity", min=0, max=255),
    sort: bool = typer.Option(_DEFAULTS.sort_tiles, "--sort/--no-sort"),
    output_format: str = typer.Option(
        _DEFAULTS.output_format, "--format", "-f", help="Output image format",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Process all images in INPUT_DIR with one tile library."""
    _setup_logging(verbose)

    cfg = MosaicConfig(
        kernel_width=width,
        kernel_height=height,
        sort_tiles=sort,
        resize=resize,
        opacity=opacity,
        output_format=output_format,
        tiles_dir=tiles_dir,
        input_dir=input_dir,
        output_dir=output_dir,
    )

    images = _collect_images(input_dir, cfg.SUPPORTED_EXTENSIONS)
    if not images:
        console.print(f"\n[yellow]No images found in {input_dir}/[/yellow]")
        console.print("Place .jpg / .png / ... files there and re-run.\n")
        raise typer.Exit(0)

    try:
        tiles = prepare_tiles(cfg.tiles_dir, cfg.kernel, sort=cfg.sort_tiles)
    except MosaicError as exc:
        raise _fail(exc) from exc

    console.print(Panel.fit(
        f"[bold]TILE MOSAIC[/bold]\n"
        f"Kernel: {cfg.kernel}  |  Tiles: {len(tiles)}\n"
        f"Strategy: {cfg.strategy.value}  |  Images: {len(images)}",
        border_style="cyan",
    ))

    output_dir.mkdir(parents=True, exist_ok=True)

    for idx, img_path in enumerate(images, 1):
        console.rule(f"[bold cyan][{idx}/{len(images)}] {img_path.name}[/bold cyan]")
        t_total = time.perf_counter()
        mosaic_path = output_dir / f"{img_path.stem}_mosaic.{cfg.output_format}"

        try:
            mosaic = build_mosaic(
                img_path, tiles, resize=cfg.resize, opacity=cfg.opacity,
            )
            save_array(mosaic, mosaic_path)
        except MosaicError as exc:
            raise _fail(exc) from exc

        h, w = mosaic.shape[:2]
        elapsed = time.perf_counter() - t_total
        console.print(
            f"  [green]✓[/green] {mosaic_path.name}  "
            f"[dim]{w}x{h}  time={elapsed:.1f}s[/dim]"
        )

    console.print(Panel.fit(
        f"[bold green]ALL DONE[/bold green] - results in [bold]{output_dir}/[/bold]",
        border_style="green",
    ))


if __name__ == "__main__":
    app()
