"""Exceptions raised by the mosaic pipeline."""

from __future__ import annotations


class MosaicError(Exception):
    """Base class for every error raised by :mod:`tile_mosaic`."""


class ReadError(MosaicError, OSError):
    """A file or directory could not be read."""


class DecodeError(MosaicError, ValueError):
    """The bytes at a path are not an image Pillow can decode."""


class EncodeError(MosaicError, ValueError):
    """An output image could not be encoded or written."""


class EmptyTileSetError(MosaicError, ValueError):
    """No usable tile survived loading."""


class EmptyIndexError(MosaicError, IndexError):
    """A nearest-neighbour query was issued against an empty index."""
