"""
Tile Mosaic
===========

Rebuild any image out of a folder of small tile images: every region of
the source is replaced by the tile whose mean colour is closest to it.
Ships three assembly strategies:

- **Exact** - output keeps the source size, one tile per kernel-sized cell
- **Expanded** - every source pixel becomes a whole tile
- **Blended** - tiles are alpha-blended over the source
"""

__version__ = "0.1.0"

from tile_mosaic.blending import blend
from tile_mosaic.color_index import ColorIndex
from tile_mosaic.composer import (
    build_mosaic,
    compose_blended,
    compose_exact,
    compose_expanded,
    paste_block,
)
from tile_mosaic.config import KernelSize, MosaicConfig, Strategy, select_strategy
from tile_mosaic.errors import (
    DecodeError,
    EmptyIndexError,
    EmptyTileSetError,
    EncodeError,
    MosaicError,
    ReadError,
)
from tile_mosaic.image_io import compute_grid_size, load_array, save_array
from tile_mosaic.tiles import TileSet, mean_color, prepare_tiles

__all__ = [
    "ColorIndex",
    "DecodeError",
    "EmptyIndexError",
    "EmptyTileSetError",
    "EncodeError",
    "KernelSize",
    "MosaicConfig",
    "MosaicError",
    "ReadError",
    "Strategy",
    "TileSet",
    "blend",
    "build_mosaic",
    "compose_blended",
    "compose_exact",
    "compose_expanded",
    "compute_grid_size",
    "load_array",
    "mean_color",
    "paste_block",
    "prepare_tiles",
    "save_array",
    "select_strategy",
]
