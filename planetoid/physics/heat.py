"""Heat balance for a single cell.

Each tick a cell gains sunlight according to its latitude, loses heat by
radiation, then exchanges heat with its four neighbours.  Solar input and
radiation are scaled by ``16 / size`` so that a planet heats up at the
same rate whatever its resolution.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TYPE_CHECKING

from planetoid.world.materials import MATERIALS

if TYPE_CHECKING:
    from planetoid.world.cell import Cell
    from planetoid.world.environment import Climate

_REFERENCE_SIZE = 16


def solar_strength(latitude: float) -> float:
    """Return the sunlight multiplier: 1.0 at the equator, 0.0 at a pole."""
    return math.sin(math.pi / 2 + latitude * math.pi / 2)


def radiation_multiplier(cell: Cell, climate: Climate) -> float:
    """Scale radiative loss by height, bedrock and whether liquid covers it.

    Open liquid holds heat better (0.9) than bare land (1.1); high
    terrain radiates more.
    """
    height = cell.surface_height
    elevation_factor = 1.0 + climate.elevation_radiation * height * height
    surface_factor = 0.9 if cell.liquid_depth > 0 else 1.1
    return elevation_factor * MATERIALS[cell.material].emissivity * surface_factor


def diffuse_heat(
    cell: Cell,
    neighbour_temperatures: Sequence[float],
    conductivity: float,
) -> None:
    """Move the cell temperature towards its neighbours.

    Each neighbour contributes ``(t_n - t) / (n + 1/conductivity)``, so a
    conductivity of 0 disables exchange and large values approach a full
    average.
    """
    if conductivity <= 0 or not neighbour_temperatures:
        return
    weight = 1.0 / (len(neighbour_temperatures) + 1.0 / conductivity)
    own = cell.temperature
    cell.temperature += sum(t - own for t in neighbour_temperatures) * weight


def update_temperature(
    cell: Cell,
    latitude: float,
    neighbour_temperatures: Sequence[float],
    climate: Climate,
    size: int,
) -> None:
    """Apply one tick of sunlight, radiation and conduction.

    Args:
        cell: The cell to heat.
        latitude: Cell latitude in [0, 1].
        neighbour_temperatures: Start-of-tick temperatures of the four
            orthogonal neighbours.
        climate: Global physical constants.
        size: Grid size, for time scaling.
    """
    time_scale = _REFERENCE_SIZE / size
    solar = solar_strength(latitude) * climate.solar_energy * time_scale
    radiation = (
        cell.temperature
        * climate.heat_radiation
        * radiation_multiplier(cell, climate)
        * time_scale
    )
    cell.temperature += solar - radiation
    diffuse_heat(cell, neighbour_temperatures, climate.heat_conductivity)
