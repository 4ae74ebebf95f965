"""Projection of latitude/longitude into the planar kilometre space of the index."""

import math
from typing import Iterable

from ..index.geometry import Point, Region

KM_PER_DEGREE = 111.0


class Projection:
    """
    Equirectangular projection centred on a reference coordinate.

    Good enough for a single city's stops: distances are in kilometres and
    the x scale is fixed at the centre latitude.
    """

    def __init__(self, centre_lat: float, centre_lon: float) -> None:
        self.centre_lat = centre_lat
        self.centre_lon = centre_lon
        self._x_scale = KM_PER_DEGREE * math.cos(math.radians(centre_lat))

    def __repr__(self) -> str:
        return f"Projection(centre_lat={self.centre_lat}, centre_lon={self.centre_lon})"

    @classmethod
    def for_extents(cls, min_lat: float, min_lon: float, max_lat: float, max_lon: float) -> "Projection":
        return cls((min_lat + max_lat) / 2.0, (min_lon + max_lon) / 2.0)

    def to_point(self, lat: float, lon: float) -> Point:
        return Point(
            (lon - self.centre_lon) * self._x_scale,
            (lat - self.centre_lat) * KM_PER_DEGREE,
        )

    def to_latlon(self, point: Point) -> tuple:
        return (
            self.centre_lat + point.y / KM_PER_DEGREE,
            self.centre_lon + point.x / self._x_scale,
        )


def bounding_region(points: Iterable[Point], padding_km: float = 0.5) -> Region:
    """Smallest region holding every point, grown by ``padding_km`` on each side."""
    points = list(points)
    if not points:
        raise ValueError("Cannot compute a bounding region for no points")
    region = Region.from_bounds(
        min(p.x for p in points),
        min(p.y for p in points),
        max(p.x for p in points),
        max(p.y for p in points),
    )
    return region.padded(padding_km)
