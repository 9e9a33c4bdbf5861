"""Exception hierarchy shared by the loader, board builder and solvers."""

from __future__ import annotations


class MosaicError(Exception):
    """Base class for every error raised by :mod:`brick_mosaic`."""


class CatalogError(MosaicError):
    """The brick catalog file is missing or malformed."""


class ImageLoadError(MosaicError):
    """The source image could not be opened or decoded."""


class UnsolvableError(MosaicError):
    """The search ran out of legal placements before covering the board."""
