"""SimulationEngine — builds a seeded planet and advances it tick by tick.

Owns the master random generator and the surface grid.  Each tick runs,
in order:

1. Volcanism (promote, feed, retire vents)
2. The cell pass: temperature, phase transitions, liquid, gas
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.random import Generator

from planetoid.world.grid import SurfaceGrid
from planetoid.world.interactions import InteractionError
from planetoid.world.topology import TopologyError

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from planetoid.simulation.config import SimulationConfig
    from planetoid.world.topology import Face

logger = logging.getLogger(__name__)


@dataclass
class SimulationEngine:
    """Drives the simulation forward tick by tick.

    Attributes:
        config: Loaded simulation configuration.
        grid: The planet surface.
        rng: Master seeded random generator, shared with the grid.
        tick: Current tick count.
    """

    config: SimulationConfig
    grid: SurfaceGrid = field(init=False)
    rng: Generator = field(init=False)
    tick: int = 0

    def __post_init__(self) -> None:
        """Build the RNG and a seeded surface from config."""
        self.rng = np.random.default_rng(self.config.seed)
        self.grid = SurfaceGrid(
            size=self.config.size,
            rng=self.rng,
            climate=self.config.climate(),
            volcanism=self.config.volcanism(),
        )
        self.grid.populate(
            temperature=self.config.baseline_temperature,
            material=self.config.baseline_material,
            liquid=self.config.baseline_liquid,
            liquid_depth=self.config.baseline_liquid_depth,
            num_features=self.config.num_features,
            height_range=self.config.feature_height_range,
            falloff_range=self.config.feature_falloff_range,
        )
        logger.info(
            "planet ready: size=%d seed=%d cells=%d",
            self.config.size,
            self.config.seed,
            len(self.grid.cells),
        )

    def step(self) -> None:
        """Advance the simulation by one tick.

        Raises:
            TopologyError: If the adjacency table is broken.
            InteractionError: If an interaction table is incomplete.
        """
        try:
            self.grid.update()
        except (TopologyError, InteractionError):
            logger.exception("tick %d aborted", self.tick)
            raise
        self.tick += 1

    def run(self, ticks: int) -> None:
        """Run the simulation for a fixed number of ticks.

        Args:
            ticks: Number of ticks to advance.
        """
        for _ in range(ticks):
            self.step()

    def render(
        self,
        into: dict[Face, NDArray[np.uint8]] | None = None,
    ) -> dict[Face, NDArray[np.uint8]]:
        """Return per-face colour buffers for the current state."""
        return self.grid.render(into)

    def summary(self) -> dict[str, float]:
        """Planet-wide statistics for progress reporting.

        Returns:
            Mean temperature, fractions of cells holding liquid and
            coating, total gas density and the active volcano count.
        """
        cells = self.grid.cells
        temperatures = np.fromiter(
            (cell.temperature for cell in cells),
            dtype=np.float64,
            count=len(cells),
        )
        return {
            "tick": float(self.tick),
            "mean_temperature": float(temperatures.mean()),
            "liquid_cover": sum(cell.has_liquid for cell in cells) / len(cells),
            "coating_cover": sum(
                cell.coating_thickness > 0 for cell in cells
            ) / len(cells),
            "total_gas": float(sum(cell.gas_density for cell in cells)),
            "volcanoes": float(len(self.grid.volcanism.active)),
        }
