"""Exceptions raised by the mosaic transform."""

from __future__ import annotations


class MosaicError(Exception):
    """Base class for every error the transform raises on purpose."""


class InvalidConfiguration(MosaicError, ValueError):
    """Tile width or height is not a positive integer."""


class EmptySource(MosaicError, ValueError):
    """The source image has zero width or zero height."""
