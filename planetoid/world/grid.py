"""SurfaceGrid — every cell of the planet and the per-tick update.

The grid owns ``6 * N * N`` cells in one flat list, face by face in
``Face`` order and row-major within a face, so ``pixel_at`` is a single
index computation.  Neighbour indices and latitudes never change and are
computed once at construction.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from planetoid.physics.flow import update_liquid
from planetoid.physics.heat import update_temperature
from planetoid.physics.wind import update_gas
from planetoid.render.palette import cell_colour
from planetoid.world.cell import Cell, apply_phase_transitions
from planetoid.world.environment import Climate, Volcanism
from planetoid.world.materials import Liquid, Material
from planetoid.world.topology import CubeTopology, Direction, Face

if TYPE_CHECKING:
    from numpy.random import Generator

    from planetoid.world.topology import CellPosition, Offset

logger = logging.getLogger(__name__)

# Clockwise from up.
_NEIGHBOUR_DIRECTIONS = (Direction.UP, Direction.RIGHT, Direction.DOWN, Direction.LEFT)
_FACE_INDEX = {face: i for i, face in enumerate(Face)}


@dataclass
class SurfaceGrid:
    """All cells of the planet surface.

    Attributes:
        size: Cells along one face edge.
        rng: Seeded random generator shared by every random draw.
        climate: Global physical constants.
        volcanism: Volcano scheduler.
        topology: Adjacency for a cube of ``size``.
        cells: Flat list of cells, see ``index_of``.
    """

    size: int
    rng: Generator
    climate: Climate = field(default_factory=Climate)
    volcanism: Volcanism = field(default_factory=Volcanism)
    topology: CubeTopology = field(init=False)
    cells: list[Cell] = field(init=False, repr=False)
    _neighbours: list[tuple[int, ...]] = field(init=False, repr=False)
    _latitudes: NDArray[np.float64] = field(init=False, repr=False)
    _wind_samples: dict[tuple[CellPosition, int], list[tuple[Offset, Cell]]] = field(
        init=False,
        repr=False,
        default_factory=dict,
    )

    def __post_init__(self) -> None:
        """Allocate cells and precompute neighbours and latitudes."""
        self.topology = CubeTopology(self.size)
        positions = list(self.topology.positions())
        self.cells = [Cell(position=position) for position in positions]
        self._neighbours = [
            tuple(
                self.index_of(self.topology.step(position, direction))
                for direction in _NEIGHBOUR_DIRECTIONS
            )
            for position in positions
        ]
        self._latitudes = np.array(
            [self.topology.latitude(position) for position in positions],
            dtype=np.float64,
        )

    # -- Addressing --------------------------------------------------------

    def index_of(self, position: CellPosition) -> int:
        """Return the flat index of ``position``.

        Raises:
            IndexError: If the coordinates are off the face.
        """
        if not self.topology.contains(position):
            msg = (
                f"({position.x}, {position.y}) out of bounds on "
                f"{position.face.name} for size {self.size}"
            )
            raise IndexError(msg)
        return (
            _FACE_INDEX[position.face] * self.size * self.size
            + position.y * self.size
            + position.x
        )

    def pixel_at(self, position: CellPosition) -> Cell:
        """Return the cell at ``position``."""
        return self.cells[self.index_of(position)]

    def neighbours(self, position: CellPosition) -> list[Cell]:
        """Return the four cubical neighbours, clockwise from up."""
        return [self.cells[i] for i in self._neighbours[self.index_of(position)]]

    def wind_samples(
        self,
        position: CellPosition,
        radius: int,
    ) -> list[tuple[Offset, Cell]]:
        """Return ``(offset, cell)`` for the square of ``radius`` around ``position``.

        Offsets are walked with the spherical adjacency.  Results are
        cached since the topology never changes.
        """
        key = (position, radius)
        samples = self._wind_samples.get(key)
        if samples is None:
            samples = []
            for dx in range(-radius, radius + 1):
                for dy in range(-radius, radius + 1):
                    target = self.topology.step_by(position, (dx, dy), spherical=True)
                    samples.append(((dx, dy), self.pixel_at(target)))
            self._wind_samples[key] = samples
        return samples

    # -- Terrain -----------------------------------------------------------

    def populate(
        self,
        *,
        temperature: float = 320.0,
        material: Material = Material.METAMORPHIC,
        liquid: Liquid = Liquid.SALT_WATER,
        liquid_depth: float = 1.0,
        num_features: int = 20,
        height_range: tuple[float, float] = (-5.0, 6.0),
        falloff_range: tuple[float, float] = (0.5, 2.0),
    ) -> None:
        """Reset every cell to a baseline and raise random round features.

        Args:
            temperature: Starting temperature of every cell.
            material: Bedrock of every cell.
            liquid: Liquid covering every cell (``Liquid.NONE`` for dry).
            liquid_depth: Starting depth of that liquid.
            num_features: Number of round hills/basins to stamp.
            height_range: (min, max) signed feature height.
            falloff_range: (min, max) height lost per cell of distance.
        """
        for cell in self.cells:
            cell.temperature = temperature
            cell.material = material
            cell.elevation = 0.0
            cell.clear_coating()
            cell.clear_gas()
            cell.clear_liquid()
            if liquid is not Liquid.NONE:
                cell.add_liquid(liquid, liquid_depth, self.rng)

        lo_height, hi_height = height_range
        lo_falloff, hi_falloff = falloff_range
        for _ in range(num_features):
            position = self.topology.random_position(self.rng)
            height = float(self.rng.uniform(lo_height, hi_height))
            falloff = float(self.rng.uniform(lo_falloff, hi_falloff))
            self.place_feature(position, height, falloff)
        logger.debug(
            "seeded %d terrain features on a size-%d cube",
            num_features,
            self.size,
        )

    def place_feature(self, position: CellPosition, height: float, falloff: float) -> None:
        """Add a round hill (or basin, for negative ``height``) at ``position``.

        The elevation change falls off linearly from ``height`` at the
        centre to zero at ``|height| / falloff`` cells away.  Offsets are
        walked with the spherical adjacency so features near the poles
        stay round.
        """
        reach = abs(height)
        if reach == 0 or falloff <= 0:
            return
        radius = math.ceil(reach / falloff)
        for dx in range(-radius, radius + 1):
            for dy in range(-radius, radius + 1):
                distance = math.hypot(dx, dy)
                change = (1.0 - min(distance * falloff, reach) / reach) * height
                if change == 0:
                    continue
                target = self.topology.step_by(position, (dx, dy), spherical=True)
                self.pixel_at(target).change_elevation(change)

    # -- Simulation --------------------------------------------------------

    def update(self) -> None:
        """Advance the whole surface by one tick.

        Volcanism runs first.  Cells are then visited in storage order;
        conduction reads start-of-tick temperatures, while liquid and gas
        moved by earlier cells are already visible to later ones.
        """
        self.volcanism.update(self, self.rng)

        temperatures = np.fromiter(
            (cell.temperature for cell in self.cells),
            dtype=np.float64,
            count=len(self.cells),
        )
        for index, cell in enumerate(self.cells):
            update_temperature(
                cell,
                float(self._latitudes[index]),
                [float(temperatures[i]) for i in self._neighbours[index]],
                self.climate,
                self.size,
            )
            apply_phase_transitions(cell, self.rng)
            update_liquid(self, cell.position)
            update_gas(self, cell.position)

    def render(
        self,
        into: dict[Face, NDArray[np.uint8]] | None = None,
    ) -> dict[Face, NDArray[np.uint8]]:
        """Write every cell's colour into per-face ``(size, size, 3)`` buffers.

        Args:
            into: Buffers to fill in place, indexed ``[y, x]``; fresh
                buffers are allocated when omitted.

        Returns:
            The filled buffers, keyed by face.
        """
        if into is None:
            into = {
                face: np.zeros((self.size, self.size, 3), dtype=np.uint8)
                for face in Face
            }
        for cell in self.cells:
            position = cell.position
            into[position.face][position.y, position.x] = cell_colour(cell)
        return into
