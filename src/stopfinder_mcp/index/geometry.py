"""Planar points and axis-aligned regions used by the spatial index."""

import math
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def move_by(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)


class Located(Protocol):
    """Anything the spatial index can store: it only needs a location."""

    @property
    def location(self) -> Point: ...


@dataclass(frozen=True)
class Region:
    """
    Rectangle with Y increasing upward.

    ``origin`` is the top-left corner (min x, max y) and ``bottom_right``
    the opposite corner (max x, min y). All four edges belong to the region.
    """

    origin: Point
    bottom_right: Point

    def __post_init__(self):
        if self.origin.x > self.bottom_right.x or self.bottom_right.y > self.origin.y:
            raise ValueError(
                f"Region corners out of order: origin={self.origin}, "
                f"bottom_right={self.bottom_right}"
            )

    @classmethod
    def from_bounds(cls, min_x: float, min_y: float, max_x: float, max_y: float) -> "Region":
        return cls(Point(min_x, max_y), Point(max_x, min_y))

    @property
    def centre(self) -> Point:
        return Point(
            (self.origin.x + self.bottom_right.x) / 2.0,
            (self.origin.y + self.bottom_right.y) / 2.0,
        )

    @property
    def width(self) -> float:
        return self.bottom_right.x - self.origin.x

    @property
    def height(self) -> float:
        return self.origin.y - self.bottom_right.y

    def contains(self, p: Point) -> bool:
        return not (
            p.x < self.origin.x or p.x > self.bottom_right.x
            or p.y > self.origin.y or p.y < self.bottom_right.y
        )

    def is_beyond(self, target: Point, distance: float) -> bool:
        """
        True when ``target`` is further than ``distance`` from the region
        along at least one axis, so no point inside can be closer.

        The rectangle is expanded by ``distance`` on every side, so a region
        near a corner may be kept even though it is out of reach, but a region
        within reach is never reported as beyond.
        """
        return (
            target.x < self.origin.x - distance
            or target.x > self.bottom_right.x + distance
            or target.y > self.origin.y + distance
            or target.y < self.bottom_right.y - distance
        )

    def quadrant(self, idx: int) -> "Region":
        """
        Quadrant ``idx`` split at the centre.

        x-------+-------+
        |       |       |
        |   0   |   1   |
        |       |       |
        +-------c-------+
        |       |       |
        |   2   |   3   |
        |       |       |
        +-------+-------+
        """
        c = self.centre
        o = self.origin
        br = self.bottom_right
        if idx == 0:
            return Region(o, c)
        if idx == 1:
            return Region(Point(c.x, o.y), Point(br.x, c.y))
        if idx == 2:
            return Region(Point(o.x, c.y), Point(c.x, br.y))
        if idx == 3:
            return Region(c, br)
        raise ValueError(f"Quadrant index must be 0-3, got {idx}")

    def quadrant_of(self, target: Point) -> int:
        """Index of the quadrant on whose side of both midlines ``target`` falls."""
        right = 1 if 2 * target.x > self.origin.x + self.bottom_right.x else 0
        bottom = 1 if 2 * target.y < self.origin.y + self.bottom_right.y else 0
        return 2 * bottom + right

    def padded(self, amount: float) -> "Region":
        return Region(
            self.origin.move_by(-amount, amount),
            self.bottom_right.move_by(amount, -amount),
        )
