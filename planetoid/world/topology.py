"""Cube topology — addressing and adjacency for the six faces of the planet.

The planet surface is a cube standing in for a sphere.  Two faces are
polar (``NORTH`` and ``SOUTH``); the other four form an equatorial ring.
Every face is an ``N x N`` grid addressed by ``(x, y)`` with ``y``
growing downwards.

Two adjacency models are provided:

- **Cubical**: the folded net.  Leaving a face through an edge lands on
  the adjoining face via a fixed coordinate transform.
- **Spherical**: identical on the ring, but on a polar face the
  requested direction is relabelled by the cell's quadrant, so that a
  walk circles the pole (or heads for its centre) instead of tearing
  across the cube corners.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from numpy.random import Generator

Offset = tuple[int, int]
_Transform = Callable[[int, int, int], tuple[int, int]]


class TopologyError(LookupError):
    """Raised when the edge table has no entry for a face/direction."""


class Direction(Enum):
    """One unit step on a face."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Face(Enum):
    """The six cube faces, in canonical iteration order."""

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"
    OBVERSE = "obverse"
    REVERSE = "reverse"

    @property
    def is_polar(self) -> bool:
        """Return True for the two pole faces."""
        return self in (Face.NORTH, Face.SOUTH)


class Hemisphere(Enum):
    """Which half of the planet a cell lies in."""

    TOP = "top"
    BOTTOM = "bottom"


@dataclass(frozen=True)
class CellPosition:
    """A cell address: face plus in-face coordinates.

    Attributes:
        face: The cube face.
        x: Column index (0 is the left edge).
        y: Row index (0 is the top edge).
    """

    face: Face
    x: int
    y: int

    def shifted(self, direction: Direction) -> CellPosition:
        """Return the in-face neighbour, ignoring face boundaries."""
        return CellPosition(self.face, self.x + direction.dx, self.y + direction.dy)


# Leaving ``face`` through the edge in ``direction`` lands on the
# destination face at the transformed coordinates.  Transforms receive
# ``(x, y, m)`` with ``m = size - 1``.  Every entry has an inverse entry.
_EDGE_TRANSFORMS: dict[tuple[Face, Direction], tuple[Face, _Transform]] = {
    (Face.NORTH, Direction.RIGHT): (Face.EAST, lambda x, y, m: (m - y, 0)),
    (Face.NORTH, Direction.LEFT): (Face.WEST, lambda x, y, m: (y, 0)),
    (Face.NORTH, Direction.UP): (Face.REVERSE, lambda x, y, m: (m - x, 0)),
    (Face.NORTH, Direction.DOWN): (Face.OBVERSE, lambda x, y, m: (x, 0)),
    (Face.SOUTH, Direction.RIGHT): (Face.EAST, lambda x, y, m: (y, m)),
    (Face.SOUTH, Direction.LEFT): (Face.WEST, lambda x, y, m: (m - y, m)),
    (Face.SOUTH, Direction.UP): (Face.OBVERSE, lambda x, y, m: (x, m)),
    (Face.SOUTH, Direction.DOWN): (Face.REVERSE, lambda x, y, m: (m - x, m)),
    (Face.OBVERSE, Direction.RIGHT): (Face.EAST, lambda x, y, m: (0, y)),
    (Face.OBVERSE, Direction.LEFT): (Face.WEST, lambda x, y, m: (m, y)),
    (Face.OBVERSE, Direction.UP): (Face.NORTH, lambda x, y, m: (x, m)),
    (Face.OBVERSE, Direction.DOWN): (Face.SOUTH, lambda x, y, m: (x, 0)),
    (Face.EAST, Direction.RIGHT): (Face.REVERSE, lambda x, y, m: (0, y)),
    (Face.EAST, Direction.LEFT): (Face.OBVERSE, lambda x, y, m: (m, y)),
    (Face.EAST, Direction.UP): (Face.NORTH, lambda x, y, m: (m, m - x)),
    (Face.EAST, Direction.DOWN): (Face.SOUTH, lambda x, y, m: (m, x)),
    (Face.REVERSE, Direction.RIGHT): (Face.WEST, lambda x, y, m: (0, y)),
    (Face.REVERSE, Direction.LEFT): (Face.EAST, lambda x, y, m: (m, y)),
    (Face.REVERSE, Direction.UP): (Face.NORTH, lambda x, y, m: (m - x, 0)),
    (Face.REVERSE, Direction.DOWN): (Face.SOUTH, lambda x, y, m: (m - x, m)),
    (Face.WEST, Direction.RIGHT): (Face.OBVERSE, lambda x, y, m: (0, y)),
    (Face.WEST, Direction.LEFT): (Face.REVERSE, lambda x, y, m: (m, y)),
    (Face.WEST, Direction.UP): (Face.NORTH, lambda x, y, m: (0, x)),
    (Face.WEST, Direction.DOWN): (Face.SOUTH, lambda x, y, m: (0, m - x)),
}

# Lateral moves on a pole face, relabelled by quadrant so that they
# circle the pole.
_CIRCLE_POLE: dict[Direction, dict[Direction, Direction]] = {
    Direction.RIGHT: {
        Direction.DOWN: Direction.RIGHT,
        Direction.RIGHT: Direction.UP,
        Direction.UP: Direction.LEFT,
        Direction.LEFT: Direction.DOWN,
    },
    Direction.LEFT: {
        Direction.DOWN: Direction.LEFT,
        Direction.RIGHT: Direction.DOWN,
        Direction.UP: Direction.RIGHT,
        Direction.LEFT: Direction.UP,
    },
}

# Direction that points from a pole face towards the equator.
_AWAY_FROM_POLE = {Face.NORTH: Direction.DOWN, Face.SOUTH: Direction.UP}


class CubeTopology:
    """Adjacency, latitude and hemisphere queries for an ``N x N`` cube.

    Attributes:
        size: Cells along one face edge.
    """

    def __init__(self, size: int) -> None:
        if size < 1:
            msg = f"cube size must be positive, got {size}"
            raise ValueError(msg)
        self.size = size
        self._pole_edge = math.sqrt((size / 2) ** 2 * 2)
        self._bias = 0.5 if size % 2 == 0 else 0.0

    # -- Iteration ---------------------------------------------------------

    def positions(self) -> Iterator[CellPosition]:
        """Yield every position, face by face, row-major within a face."""
        for face in Face:
            for y in range(self.size):
                for x in range(self.size):
                    yield CellPosition(face, x, y)

    def contains(self, position: CellPosition) -> bool:
        """Return True if the coordinates lie on the face."""
        return 0 <= position.x < self.size and 0 <= position.y < self.size

    def random_position(self, rng: Generator) -> CellPosition:
        """Pick a face uniformly, then a cell uniformly on that face."""
        faces = list(Face)
        face = faces[int(rng.integers(0, len(faces)))]
        x = int(rng.integers(0, self.size))
        y = int(rng.integers(0, self.size))
        return CellPosition(face, x, y)

    # -- Stepping ----------------------------------------------------------

    def step(
        self,
        position: CellPosition,
        direction: Direction,
        *,
        spherical: bool = False,
    ) -> CellPosition:
        """Move one cell in ``direction``.

        Args:
            position: Starting cell.
            direction: Direction of the step, in face coordinates.
            spherical: Use the spherical adjacency instead of the
                cubical one.

        Raises:
            TopologyError: If the edge table lacks the crossing.
        """
        if spherical and position.face.is_polar:
            return self._cross(position, self._relabel_on_pole(position, direction))
        return self._cross(position, direction)

    def step_by(
        self,
        position: CellPosition,
        offset: Offset,
        *,
        spherical: bool = False,
    ) -> CellPosition:
        """Walk ``offset`` as single steps: all x-steps first, then y-steps."""
        dx, dy = offset
        horizontal = Direction.RIGHT if dx > 0 else Direction.LEFT
        for _ in range(abs(dx)):
            position = self.step(position, horizontal, spherical=spherical)
        vertical = Direction.DOWN if dy > 0 else Direction.UP
        for _ in range(abs(dy)):
            position = self.step(position, vertical, spherical=spherical)
        return position

    def _cross(self, position: CellPosition, direction: Direction) -> CellPosition:
        moved = position.shifted(direction)
        if self.contains(moved):
            return moved
        try:
            face, transform = _EDGE_TRANSFORMS[(position.face, direction)]
        except KeyError:
            msg = f"no edge transform for {position.face.name} going {direction.name}"
            raise TopologyError(msg) from None
        x, y = transform(position.x, position.y, self.size - 1)
        return CellPosition(face, x, y)

    def _relabel_on_pole(
        self,
        position: CellPosition,
        direction: Direction,
    ) -> Direction:
        quadrant = self.quadrant(position, direction)
        if direction in _CIRCLE_POLE:
            return _CIRCLE_POLE[direction][quadrant]
        if direction is _AWAY_FROM_POLE[position.face]:
            return quadrant
        return quadrant.opposite

    def quadrant(self, position: CellPosition, direction: Direction) -> Direction:
        """Return which edge-facing triangle of the face holds ``position``.

        The face is split by both diagonals.  Cells exactly on a diagonal
        are assigned by the direction of travel so that a walk around
        the pole keeps turning the same way; the centre cell of an
        odd-sized face belongs to ``RIGHT``.
        """
        x, y = position.x, position.y
        anti = self.size - 1 - y
        leftward = direction is Direction.LEFT
        if x > y:
            if x > anti:
                return Direction.RIGHT
            if x < anti:
                return Direction.UP
            return Direction.RIGHT if leftward else Direction.UP
        if x < y:
            if x > anti:
                return Direction.DOWN
            if x < anti:
                return Direction.LEFT
            return Direction.LEFT if leftward else Direction.DOWN
        if x > anti:
            return Direction.DOWN if leftward else Direction.RIGHT
        if x < anti:
            return Direction.UP if leftward else Direction.LEFT
        return Direction.RIGHT

    # -- Geography ---------------------------------------------------------

    def latitude(self, position: CellPosition) -> float:
        """Return 0.0 on the equator rows rising to 1.0 at the pole centre.

        Polar cells use the Chebyshev distance from the face centre, ring
        cells the row distance from the equator offset by the pole-edge
        constant, so both scales share one normalisation.
        """
        half = self.size // 2
        span = half - self._bias + self._pole_edge
        if position.face.is_polar:
            centre = self.size / 2
            distance = (
                max(abs(position.x + 0.5 - centre), abs(position.y + 0.5 - centre))
                - self._bias
            )
        else:
            distance = half - abs(position.y + self._bias - half) + self._pole_edge
        return 1.0 - distance / span

    def hemisphere(self, position: CellPosition) -> Hemisphere:
        """Return the half of the planet ``position`` lies in."""
        if position.face is Face.NORTH:
            return Hemisphere.TOP
        if position.face is Face.SOUTH:
            return Hemisphere.BOTTOM
        return Hemisphere.TOP if position.y < self.size // 2 else Hemisphere.BOTTOM
