"""Tile library: load a folder of images as fixed-size RGB tiles."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image

from tile_mosaic.config import KernelSize
from tile_mosaic.errors import DecodeError, ReadError
from tile_mosaic.image_io import open_image

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class TileSet:
    """Every tile of a run, stored as one contiguous array.

    A tile is identified only by its position: ``tiles[i]`` is the
    (kernel.height, kernel.width, 3) uint8 block loaded from ``paths[i]``.
    The pixel array is read-only.

    Attributes:
        pixels: (N, kernel.height, kernel.width, 3) uint8.
        kernel: Footprint shared by all tiles.
        paths:  Source file of each tile, same order as *pixels*.
    """

    pixels: np.ndarray
    kernel: KernelSize
    paths: tuple[Path, ...] = ()

    def __len__(self) -> int:
        return len(self.pixels)

    def __getitem__(self, index: int) -> np.ndarray:
        return self.pixels[index]

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self.pixels)

    @classmethod
    def from_arrays(
        cls,
        tiles: list[np.ndarray],
        kernel: KernelSize,
        paths: tuple[Path, ...] = (),
    ) -> TileSet:
        """Stack individual (kh, kw, 3) tiles into a read-only arena."""
        shape = (kernel.height, kernel.width, 3)
        for tile in tiles:
            if tile.shape != shape:
                msg = f"Tile shape {tile.shape} does not match kernel {kernel}"
                raise ValueError(msg)
        if tiles:
            pixels = np.stack(tiles, axis=0).astype(np.uint8)
        else:
            pixels = np.empty((0, *shape), dtype=np.uint8)
        pixels.setflags(write=False)
        return cls(pixels=pixels, kernel=kernel, paths=paths)

    def mean_colors(self) -> np.ndarray:
        """(N, 3) float64 mean colour of every tile (see :func:`mean_color`)."""
        n = len(self.pixels)
        sums = self.pixels.reshape(n, -1, 3).astype(np.float64).sum(axis=1)
        return sums / (self.kernel.width * self.kernel.height)


def mean_color(tile: np.ndarray) -> np.ndarray:
    """Per-channel arithmetic mean of an (H, W, 3) tile as float64 (R, G, B).

    Pixels are summed in floating point and divided by the pixel count, so
    a uniformly filled tile returns its exact colour.
    """
    h, w = tile.shape[:2]
    return tile[..., :3].reshape(-1, 3).astype(np.float64).sum(axis=0) / (h * w)


def load_tile(path: str | Path, kernel: KernelSize) -> np.ndarray:
    """Decode one image as an RGB tile of exactly *kernel* pixels.

    Alpha is dropped and the image is stretched with nearest-neighbour
    resampling; aspect ratio is not preserved.
    """
    img = open_image(path, "RGB")
    img = img.resize((kernel.width, kernel.height), Image.NEAREST)
    return np.array(img, dtype=np.uint8)


def prepare_tiles(
    directory: str | Path,
    kernel: KernelSize,
    *,
    sort: bool = False,
) -> TileSet:
    """Load every decodable image in *directory* as a tile.

    Entries that cannot be opened or decoded (other files, sub-folders)
    are skipped without a diagnostic. Tiles keep the directory enumeration
    order, which depends on the filesystem; pass ``sort=True`` to order
    them by file name instead.

    Raises:
        ReadError: *directory* cannot be enumerated.
    """
    directory = Path(directory)
    try:
        entries = list(directory.iterdir())
    except OSError as exc:
        msg = f"Cannot list tile directory {directory}: {exc.strerror or exc}"
        raise ReadError(msg) from exc
    if sort:
        entries.sort(key=lambda p: p.name)

    t0 = time.perf_counter()
    tiles: list[np.ndarray] = []
    paths: list[Path] = []
    for entry in entries:
        try:
            tile = load_tile(entry, kernel)
        except (ReadError, DecodeError):
            continue
        tiles.append(tile)
        paths.append(entry)

    logger.info(
        "Loaded %d/%d tiles (%s) from %s  (%.1f s)",
        len(tiles), len(entries), kernel, directory, time.perf_counter() - t0,
    )
    return TileSet.from_arrays(tiles, kernel, tuple(paths))
