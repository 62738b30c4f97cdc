"""Image loading, saving, and nearest-neighbour resampling."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from tile_mosaic.config import KernelSize
from tile_mosaic.errors import DecodeError, EncodeError, ReadError

_UNREADABLE = (FileNotFoundError, IsADirectoryError, NotADirectoryError, PermissionError)


def compute_grid_size(
    width: int,
    height: int,
    kernel: KernelSize,
) -> tuple[int, int]:
    """Number of (columns, rows) of tiles covering a *width* x *height* image.

    Each side is divided by the kernel and rounded with Python's ``round``,
    so it may be zero (``round(1 / 2) == 0``) and the grid may fall short of
    or overshoot the image by part of a tile.
    """
    return round(width / kernel.width), round(height / kernel.height)


def open_image(path: str | Path, mode: str = "RGB") -> Image.Image:
    """Decode the image at *path* and convert it to *mode*.

    Raises:
        ReadError:   the path does not exist or cannot be read.
        DecodeError: the file is not a decodable image.
    """
    try:
        with Image.open(path) as img:
            img.load()
            return img.convert(mode)
    except UnidentifiedImageError as exc:
        msg = f"Cannot identify image file {path}"
        raise DecodeError(msg) from exc
    except _UNREADABLE as exc:
        msg = f"Cannot read {path}: {exc.strerror or exc}"
        raise ReadError(msg) from exc
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        msg = f"Cannot decode {path}: {exc}"
        raise DecodeError(msg) from exc


def load_array(path: str | Path, mode: str = "RGB") -> np.ndarray:
    """Load an image as an (H, W, C) uint8 array."""
    return np.array(open_image(path, mode), dtype=np.uint8)


def resize_nearest(array: np.ndarray, width: int, height: int) -> np.ndarray:
    """Resample an (H, W, C) uint8 array to *width* x *height* (nearest).

    Aspect ratio is not preserved. A zero-sized target yields an empty
    array with the same channel count.
    """
    h, w, channels = array.shape
    if (w, h) == (width, height):
        return array.copy()
    if width == 0 or height == 0:
        return np.empty((height, width, channels), dtype=np.uint8)
    img = Image.fromarray(array.astype(np.uint8))
    img = img.resize((width, height), Image.NEAREST)
    return np.array(img, dtype=np.uint8)


def save_array(array: np.ndarray, path: str | Path) -> None:
    """Encode an (H, W, 3|4) array; the format follows the file extension."""
    img = Image.fromarray(array.astype(np.uint8))
    try:
        img.save(path)
    except (OSError, ValueError, KeyError) as exc:
        msg = f"Cannot write {path}: {exc}"
        raise EncodeError(msg) from exc
