"""Integer grid coordinates and cardinal headings.

The world is a toroidal grid: stepping off one edge re-enters on the
opposite edge, so every neighbor of a valid cell is itself valid.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class Direction(Enum):
    """One of the four cardinal headings, as a (dx, dy) unit step."""

    UP = (0, -1)
    RIGHT = (1, 0)
    DOWN = (0, 1)
    LEFT = (-1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    def left(self) -> "Direction":
        """Heading after a 90 degree counter-clockwise turn."""
        return _LEFT_OF[self]

    def right(self) -> "Direction":
        """Heading after a 90 degree clockwise turn."""
        return _RIGHT_OF[self]

    @classmethod
    def random(cls, rng: random.Random) -> "Direction":
        return rng.choice(_ORDERED)


_ORDERED = (Direction.UP, Direction.RIGHT, Direction.DOWN, Direction.LEFT)
_RIGHT_OF = {d: _ORDERED[(i + 1) % 4] for i, d in enumerate(_ORDERED)}
_LEFT_OF = {d: _ORDERED[(i - 1) % 4] for i, d in enumerate(_ORDERED)}


@dataclass(frozen=True)
class Point:
    """An integer grid coordinate."""

    x: int
    y: int

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass(frozen=True)
class GridGeometry:
    """Dimensions of the grid plus wrapping helpers.

    Attributes:
        width: Number of cells along x
        height: Number of cells along y
    """

    width: int
    height: int

    def contains(self, point: Point) -> bool:
        return 0 <= point.x < self.width and 0 <= point.y < self.height

    def wrap(self, point: Point) -> Point:
        """Fold an arbitrary coordinate back onto the grid."""
        return Point(point.x % self.width, point.y % self.height)

    def neighbor(self, point: Point, direction: Direction) -> Point:
        """The cell one step from ``point`` in ``direction``."""
        return self.wrap(Point(point.x + direction.dx, point.y + direction.dy))

    def random_point(self, rng: random.Random) -> Point:
        """A uniformly random cell."""
        return Point(rng.randrange(self.width), rng.randrange(self.height))

    def cell_count(self) -> int:
        return self.width * self.height

    def iter_points(self) -> Iterator[Point]:
        for x in range(self.width):
            for y in range(self.height):
                yield Point(x, y)
