"""Environment — planet-wide constants and the volcano scheduler.

``Climate`` carries the physical constants every per-cell update reads.
``Volcanism`` is the only planet-wide state that changes each tick: it
is updated first in every tick so the cell pass sees fresh eruptions.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from numpy.random import Generator

    from planetoid.world.grid import SurfaceGrid
    from planetoid.world.topology import CellPosition

logger = logging.getLogger(__name__)


@dataclass
class Climate:
    """Global physical constants.

    Attributes:
        solar_energy: Heat delivered per tick at the equator.
        heat_radiation: Fraction of temperature radiated away per tick.
        heat_conductivity: Strength of exchange with neighbours (> 0
            enables diffusion).
        angular_velocity: Planet spin; its sign picks the Coriolis side.
        elevation_radiation: Extra radiation per squared unit of height.
        evaporation_chance: Per-tick chance that a settled, warm pool
            evaporates.
        wind_range_divisor: Grid size divided by this gives the wind
            sampling radius (at least 1).
    """

    solar_energy: float = 3.5
    heat_radiation: float = 0.01
    heat_conductivity: float = 0.1
    angular_velocity: float = 1.0
    elevation_radiation: float = 0.02
    evaporation_chance: float = 1 / 120
    wind_range_divisor: int = 16

    def wind_range(self, size: int) -> int:
        """Return the wind sampling radius for a grid of ``size``."""
        return max(1, size // max(1, self.wind_range_divisor))


@dataclass
class Volcanism:
    """Bounded set of erupting cells.

    Attributes:
        eruption_chance: Per-tick chance of a new volcano.
        extinction_chance: Per-tick chance the oldest volcano goes quiet.
        eruption_temperature: Temperature forced on an active vent.
        lava_per_tick: Molten rock poured on each vent every tick.
        max_active: Upper bound on simultaneous volcanoes.
        active: Active vents, oldest first.
    """

    eruption_chance: float = 1 / 120
    extinction_chance: float = 1 / 40
    eruption_temperature: float = 2000.0
    lava_per_tick: float = 1.0
    max_active: int = 8
    active: deque[CellPosition] = field(default_factory=deque)

    def update(self, grid: SurfaceGrid, rng: Generator) -> None:
        """Advance volcanism by one tick.

        May promote one random cell, feeds every active vent, then may
        retire the oldest vent.

        Args:
            grid: The surface whose cells erupt.
            rng: Seeded random generator.
        """
        if rng.random() < self.eruption_chance:
            self.ignite(grid.topology.random_position(rng))

        for position in self.active:
            grid.pixel_at(position).erupt(
                self.eruption_temperature,
                self.lava_per_tick,
                rng,
            )

        if self.active and rng.random() < self.extinction_chance:
            self.retire()

    def ignite(self, position: CellPosition) -> bool:
        """Make ``position`` an active vent.

        When the set is full the oldest vent is retired first.

        Returns:
            True if the vent was added, False if it was already active
            or volcanism is disabled.
        """
        if self.max_active <= 0 or position in self.active:
            return False
        while len(self.active) >= self.max_active:
            self.retire()
        self.active.append(position)
        logger.debug("volcano ignited at %s (%d active)", position, len(self.active))
        return True

    def retire(self) -> CellPosition | None:
        """Silence the oldest vent and return it."""
        if not self.active:
            return None
        position = self.active.popleft()
        logger.debug("volcano retired at %s (%d active)", position, len(self.active))
        return position
