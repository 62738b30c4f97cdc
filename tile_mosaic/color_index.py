"""Nearest-tile lookup over mean colours via a 3-D k-d tree (scipy)."""

from __future__ import annotations

import logging

import numpy as np
from scipy.spatial import cKDTree

from tile_mosaic.errors import EmptyIndexError
from tile_mosaic.tiles import TileSet

logger = logging.getLogger(__name__)


class ColorIndex:
    """Map RGB points to the tile whose mean colour is closest.

    Distances are Euclidean in RGB. Tiles sharing an identical mean colour
    are collapsed into one tree node that answers with the lowest tile
    index, so results are reproducible for a given tile order. The index
    is read-only once built.
    """

    def __init__(self, colors: np.ndarray) -> None:
        colors = np.asarray(colors, dtype=np.float64).reshape(-1, 3)
        self._size = len(colors)
        if self._size == 0:
            self._tree = None
            self._tile_ids = np.empty(0, dtype=np.intp)
            return
        # np.unique keeps the first occurrence of each duplicate
        unique, first = np.unique(colors, axis=0, return_index=True)
        self._tree = cKDTree(unique)
        self._tile_ids = first.astype(np.intp)
        self._tile_ids.setflags(write=False)
        logger.debug(
            "Colour index: %d tiles, %d distinct mean colours",
            self._size, len(unique),
        )

    @classmethod
    def build(cls, tiles: TileSet) -> ColorIndex:
        return cls(tiles.mean_colors())

    def __len__(self) -> int:
        return self._size

    def query(self, points: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Nearest tile for each of (N, 3) *points*.

        Returns:
            ``(distances, tile_ids)``: (N,) float64 Euclidean distances and
            (N,) tile indices.

        Raises:
            EmptyIndexError: the index holds no tiles.
        """
        if self._tree is None:
            msg = "Nearest-tile query on an empty colour index"
            raise EmptyIndexError(msg)
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        if len(points) == 0:
            return np.empty(0, dtype=np.float64), np.empty(0, dtype=np.intp)
        distances, nodes = self._tree.query(points, k=1)
        return distances, self._tile_ids[nodes]

    def nearest_tiles(self, points: np.ndarray) -> np.ndarray:
        """(N,) tile indices minimising squared distance to each point."""
        return self.query(points)[1]

    def nearest_tile(self, point: np.ndarray | tuple[float, float, float]) -> int:
        """Index of the tile whose mean colour is closest to *point*."""
        return int(self.nearest_tiles(np.asarray(point, dtype=np.float64))[0])
