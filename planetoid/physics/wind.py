"""Wind estimation and gas advection.

Wind at a cell is built from three pushes, all in face coordinates:

1. towards the hottest cell in a square neighbourhood, as strong as the
   temperature difference;
2. towards thinner gas, scaled by how much thinner the thinnest sample is;
3. a Coriolis push to the right (top hemisphere, positive spin) or left,
   scaled by ``|angular_velocity| * sin(latitude)``.

The combined vector is normalised, and the cell's gas is shared among
the up-to-four integer offsets surrounding the wind target.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from planetoid.world.topology import Direction, Hemisphere

if TYPE_CHECKING:
    from planetoid.world.grid import SurfaceGrid
    from planetoid.world.topology import CellPosition

_DENSITY_PUSH = 0.2
_FULL_STRENGTH_SPEED = 10.0
# Rounding residue from cancelling pushes must not become a direction.
_NEGLIGIBLE = 1e-9


def _unit(vector: NDArray[np.float64]) -> NDArray[np.float64]:
    norm = float(np.linalg.norm(vector))
    if norm < _NEGLIGIBLE:
        return np.zeros(2, dtype=np.float64)
    return vector / norm


def get_wind(
    grid: SurfaceGrid,
    position: CellPosition,
    radius: int,
) -> tuple[NDArray[np.float64], float]:
    """Return the unit wind direction at ``position`` and its speed.

    Args:
        grid: The surface to sample.
        position: Cell the wind blows from.
        radius: Half-width of the square sampling neighbourhood.

    Returns:
        ``(direction, speed)``; direction is the zero vector when there
        is no wind.
    """
    cell = grid.pixel_at(position)
    samples = grid.wind_samples(position, radius)

    # Hottest sample wins; ties go to whichever the shuffle visits first.
    hottest = cell.temperature
    heading = np.zeros(2, dtype=np.float64)
    for i in grid.rng.permutation(len(samples)):
        offset, other = samples[i]
        if other.temperature > hottest:
            hottest = other.temperature
            heading = _unit(np.array(offset, dtype=np.float64))
    wind = heading * abs(cell.temperature - hottest)

    drift = np.zeros(2, dtype=np.float64)
    lowest = cell.gas_density
    for offset, other in samples:
        lowest = min(lowest, other.gas_density)
        deficit = cell.gas_density - other.gas_density
        if deficit > 0:
            drift += _unit(np.array(offset, dtype=np.float64)) * deficit
    wind += _unit(drift) * (cell.gas_density - lowest) * _DENSITY_PUSH

    topology = grid.topology
    spin = grid.climate.angular_velocity
    if topology.hemisphere(position) is Hemisphere.TOP and spin > 0:
        side = Direction.RIGHT
    else:
        side = Direction.LEFT
    coriolis = np.array([side.dx, side.dy], dtype=np.float64)
    wind += coriolis * abs(spin) * math.sin(topology.latitude(position))

    speed = float(np.linalg.norm(wind))
    return _unit(wind), speed


def wind_targets(direction: NDArray[np.float64]) -> list[tuple[int, int]]:
    """Integer offsets surrounding ``direction``, without duplicates or (0, 0)."""
    wx, wy = float(direction[0]), float(direction[1])
    lo_x, hi_x = math.floor(wx), math.ceil(wx)
    lo_y, hi_y = math.floor(wy), math.ceil(wy)
    candidates = [(lo_x, lo_y), (hi_x, hi_y), (lo_x, hi_y), (hi_x, lo_y)]
    return [offset for offset in dict.fromkeys(candidates) if offset != (0, 0)]


def flow_gas(grid: SurfaceGrid, position: CellPosition) -> None:
    """Blow part of the cell's gas downwind.

    Each target offset receives
    ``remaining * min(speed / 10, 1) * (1 - clamp(manhattan, 0, 1))``
    where ``manhattan`` is its distance from the exact wind target.
    Whatever is not blown away stays on the cell.
    """
    cell = grid.pixel_at(position)
    if not cell.has_gas:
        cell.clear_gas()
        return

    direction, speed = get_wind(grid, position, grid.climate.wind_range(grid.size))
    if not direction.any():
        return
    strength = min(speed / _FULL_STRENGTH_SPEED, 1.0)
    wx, wy = float(direction[0]), float(direction[1])

    kind = cell.gas
    remaining = cell.gas_density
    for offset in wind_targets(direction):
        miss = abs(offset[0] - wx) + abs(offset[1] - wy)
        change = remaining * strength * (1.0 - min(max(miss, 0.0), 1.0))
        target = grid.pixel_at(grid.topology.step_by(position, offset, spherical=True))
        if target is cell or change <= 0:
            continue
        target.add_gas(kind, change)
        remaining -= change

    cell.gas_density = max(remaining, 0.0)
    if cell.gas_density <= 0:
        cell.clear_gas()


def update_gas(grid: SurfaceGrid, position: CellPosition) -> None:
    """Clear an empty gas layer or advect a present one."""
    cell = grid.pixel_at(position)
    if not cell.has_gas:
        cell.clear_gas()
        return
    flow_gas(grid, position)
