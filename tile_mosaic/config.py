"""Centralised configuration via frozen dataclasses."""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class KernelSize:
    """Pixel footprint shared by every tile of a run."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            msg = f"Kernel size must be positive, got {self.width}x{self.height}"
            raise ValueError(msg)

    def __iter__(self) -> Iterator[int]:
        return iter((self.width, self.height))

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


class Strategy(enum.Enum):
    """How tiles are written into the output."""

    EXACT = "exact"        # overwrite, output keeps source size
    EXPANDED = "expanded"  # one tile per source pixel
    BLENDED = "blended"    # alpha-blend tiles over the source


def select_strategy(resize: bool, opacity: int | None) -> Strategy:
    """Pick the assembly strategy for a set of options.

    ``resize`` always wins. Opacity 0 and 255 take the plain overwrite
    path; any other opacity blends.
    """
    if resize:
        return Strategy.EXPANDED
    if opacity is not None and opacity not in (0, 255):
        return Strategy.BLENDED
    return Strategy.EXACT


@dataclass(frozen=True)
class MosaicConfig:
    """All tuneable parameters for a mosaic run.

    Attributes:
        kernel_width:   Width of every tile in pixels.
        kernel_height:  Height of every tile in pixels.
        resize:         Expand the output so each source pixel becomes a tile.
        opacity:        Blend tiles over the source at this opacity (0-255).
        sort_tiles:     Sort tile files by name for reproducible output.
        tiles_dir:      Folder holding the tile images.
        input_dir:      Folder to scan for source images (batch mode).
        output_dir:     Folder for results (batch mode).
        output_format:  Image format for saved files.
    """

    # Tiles
    kernel_width: int = 20
    kernel_height: int = 20
    sort_tiles: bool = True

    # Assembly
    resize: bool = False
    opacity: int | None = None

    # Output
    output_format: str = "png"

    # Paths
    tiles_dir: Path = field(default_factory=lambda: Path("tiles"))
    input_dir: Path = field(default_factory=lambda: Path("images"))
    output_dir: Path = field(default_factory=lambda: Path("output"))

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".webp", ".gif"}
    )

    @property
    def kernel(self) -> KernelSize:
        return KernelSize(self.kernel_width, self.kernel_height)

    @property
    def strategy(self) -> Strategy:
        return select_strategy(self.resize, self.opacity)
