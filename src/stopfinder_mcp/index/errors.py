"""Errors raised by the stop indexes."""


class StopIndexError(Exception):
    """Base class for index errors."""


class OutOfBoundsError(StopIndexError):
    """An entry lies outside the root region of the spatial index."""

    def __init__(self, entry, region):
        self.entry = entry
        self.region = region
        super().__init__(f"{entry!r} lies outside the index region {region!r}")


class SubdivideOnNonLeafError(StopIndexError, AssertionError):
    """subdivide() was called on a node that already has children."""
