"""Mosaic assembly: exact-size, resolution-expanding and blended strategies.

All three strategies share one skeleton. The source is sampled on a grid
of cells, each cell's colour is matched to the nearest tile, and the tile
is written into the block ``[gx*kw, gx*kw + kw) x [gy*kh, gy*kh + kh)`` of
the destination, clipped to the destination's bounds. Blocks of different
cells never overlap, so the chosen tiles are laid out in one vectorised
step and the clipped result is written at once.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

import numpy as np

from tile_mosaic.blending import blend
from tile_mosaic.color_index import ColorIndex
from tile_mosaic.config import Strategy, select_strategy
from tile_mosaic.errors import EmptyTileSetError
from tile_mosaic.image_io import compute_grid_size, load_array, resize_nearest
from tile_mosaic.tiles import TileSet

logger = logging.getLogger(__name__)


def clip_block(
    width: int,
    height: int,
    x: int,
    y: int,
    block_w: int,
    block_h: int,
) -> tuple[int, int]:
    """Size (w, h) of the part of a block at (x, y) inside a width x height buffer."""
    return max(0, min(block_w, width - x)), max(0, min(block_h, height - y))


def paste_block(canvas: np.ndarray, block: np.ndarray, x: int, y: int) -> tuple[int, int]:
    """Copy *block* into *canvas* with its top-left corner at (x, y).

    Only the top-left part of *block* that fits inside *canvas* is written;
    the rest is discarded.

    Returns:
        The (w, h) actually written.
    """
    ch, cw = canvas.shape[:2]
    bh, bw = block.shape[:2]
    w, h = clip_block(cw, ch, x, y, bw, bh)
    if w and h:
        canvas[y:y + h, x:x + w] = block[:h, :w]
    return w, h


def _match_cells(cells: np.ndarray, index: ColorIndex) -> np.ndarray:
    """(rows, cols) tile indices for an (rows, cols, 3+) grid of colours."""
    rows, cols = cells.shape[:2]
    t0 = time.perf_counter()
    distances, tile_ids = index.query(cells[..., :3].reshape(-1, 3))
    if len(distances):
        logger.info(
            "Matched %d cells  mean distance=%.1f  (%.2f s)",
            rows * cols, float(distances.mean()), time.perf_counter() - t0,
        )
    return tile_ids.reshape(rows, cols)


def _lay_out(tiles: TileSet, tile_ids: np.ndarray) -> np.ndarray:
    """Place the chosen tiles edge to edge: (rows*kh, cols*kw, 3) uint8."""
    rows, cols = tile_ids.shape
    kw, kh = tiles.kernel
    blocks = tiles.pixels[tile_ids]  # (rows, cols, kh, kw, 3)
    return blocks.transpose(0, 2, 1, 3, 4).reshape(rows * kh, cols * kw, 3)


def compose_exact(
    source: np.ndarray,
    tiles: TileSet,
    index: ColorIndex,
) -> np.ndarray:
    """Strategy A: replace each kernel-sized region with its nearest tile.

    The source is downsampled (nearest) to one pixel per grid cell. The
    canvas keeps the source's size; where the grid falls short of it the
    trailing margin stays black, where it overshoots the last tiles are
    cropped.

    Args:
        source: (H, W, 3|4) uint8.

    Returns:
        (H, W, 3) uint8.
    """
    h, w = source.shape[:2]
    grid_w, grid_h = compute_grid_size(w, h, tiles.kernel)
    logger.info("Exact mosaic: %dx%d source -> %dx%d grid", w, h, grid_w, grid_h)

    canvas = np.zeros((h, w, 3), dtype=np.uint8)
    cells = resize_nearest(source, grid_w, grid_h)
    paste_block(canvas, _lay_out(tiles, _match_cells(cells, index)), 0, 0)
    return canvas


def compose_expanded(
    source: np.ndarray,
    tiles: TileSet,
    index: ColorIndex,
) -> np.ndarray:
    """Strategy B: every source pixel becomes a whole tile.

    Returns:
        (H*kh, W*kw, 3) uint8, fully covered by tiles.
    """
    h, w = source.shape[:2]
    kw, kh = tiles.kernel
    logger.info("Expanded mosaic: %dx%d source -> %dx%d output", w, h, w * kw, h * kh)

    canvas = np.zeros((h * kh, w * kw, 3), dtype=np.uint8)
    paste_block(canvas, _lay_out(tiles, _match_cells(source, index)), 0, 0)
    return canvas


def compose_blended(
    source: np.ndarray,
    tiles: TileSet,
    index: ColorIndex,
    opacity: int,
) -> np.ndarray:
    """Strategy C: blend tiles over the full-resolution source.

    Cells are sampled exactly as in :func:`compose_exact`, but the
    destination is the source itself. Every covered pixel is replaced by
    :func:`~tile_mosaic.blending.blend` of the pixel and the tile pixel;
    pixels outside the grid are left untouched.

    Args:
        source:  (H, W, 3|4) uint8. An RGBA array is modified in place; an
            RGB array is first copied into a new RGBA array with opaque alpha.
        opacity: 0..255.

    Returns:
        (H, W, 4) uint8.
    """
    if source.shape[2] == 3:
        alpha = np.full((*source.shape[:2], 1), 255, dtype=np.uint8)
        source = np.concatenate([source.astype(np.uint8), alpha], axis=2)
    h, w = source.shape[:2]
    grid_w, grid_h = compute_grid_size(w, h, tiles.kernel)
    logger.info(
        "Blended mosaic: %dx%d source -> %dx%d grid  opacity=%d",
        w, h, grid_w, grid_h, opacity,
    )

    cells = resize_nearest(source, grid_w, grid_h)
    layout = _lay_out(tiles, _match_cells(cells, index))
    cw, ch = clip_block(w, h, 0, 0, layout.shape[1], layout.shape[0])
    if cw and ch:
        source[:ch, :cw] = blend(source[:ch, :cw], layout[:ch, :cw], opacity)
    return source


def build_mosaic(
    source_path: str | Path,
    tiles: TileSet,
    *,
    resize: bool = False,
    opacity: int | None = None,
) -> np.ndarray:
    """Decode *source_path* and assemble a mosaic from *tiles*.

    The strategy follows :func:`~tile_mosaic.config.select_strategy`.
    A colour index is built once for this call.

    Raises:
        ReadError:         the source cannot be read.
        DecodeError:       the source is not a decodable image.
        EmptyTileSetError: *tiles* is empty.
    """
    strategy = select_strategy(resize, opacity)
    mode = "RGBA" if strategy is Strategy.BLENDED else "RGB"
    source = load_array(source_path, mode)

    if len(tiles) == 0:
        msg = "No usable tiles: the tile library is empty"
        raise EmptyTileSetError(msg)

    t0 = time.perf_counter()
    index = ColorIndex.build(tiles)
    logger.info("Colour index over %d tiles  (%.2f s)", len(index), time.perf_counter() - t0)

    if strategy is Strategy.EXPANDED:
        return compose_expanded(source, tiles, index)
    if strategy is Strategy.BLENDED:
        return compose_blended(source, tiles, index, opacity)
    return compose_exact(source, tiles, index)
