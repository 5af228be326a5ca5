"""Liquid levelling and evaporation.

Liquid flow is an approximate simultaneous levelling: the cell and its
four neighbours are ranked by the height liquid would see, and the
cell's depth is poured into the lowest ranks, each share divided by the
number of cells already at that level.  It is not an exact solve, and
because neighbours are mutated in place the result depends on the fixed
iteration order of the grid.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from planetoid.world.materials import LIQUIDS

if TYPE_CHECKING:
    from planetoid.world.cell import Cell
    from planetoid.world.grid import SurfaceGrid
    from planetoid.world.topology import CellPosition

SETTLED_TOLERANCE = 0.1
EVAPORATION_THRESHOLD = 0.3


def comparison_height(neighbour: Cell, source: Cell) -> float:
    """Height of ``neighbour`` as seen by liquid leaving ``source``.

    Liquid depth only counts on a neighbour that holds the same kind as
    the source; the source itself is measured without its own liquid.
    """
    height = neighbour.elevation + neighbour.coating_thickness
    if neighbour is not source and neighbour.liquid is source.liquid:
        height += neighbour.liquid_depth
    return height


def is_settled(grid: SurfaceGrid, position: CellPosition) -> bool:
    """Return True if every neighbour's surface is within 0.1 of this one."""
    cell = grid.pixel_at(position)
    return all(
        abs(cell.surface_height - neighbour.surface_height) < SETTLED_TOLERANCE
        for neighbour in grid.neighbours(position)
    )


def maybe_evaporate(grid: SurfaceGrid, position: CellPosition) -> bool:
    """Randomly evaporate a settled, warm pool.

    The liquid must have a vapour, sit above ``min + 30%`` of its stable
    range and be level with all neighbours; it then evaporates with
    ``climate.evaporation_chance``.

    Returns:
        True if the pool evaporated.
    """
    cell = grid.pixel_at(position)
    if not cell.has_liquid:
        return False
    liquid = LIQUIDS[cell.liquid]
    if liquid.vapour is None:
        return False
    threshold = liquid.min_temp + (liquid.max_temp - liquid.min_temp) * EVAPORATION_THRESHOLD
    if cell.temperature <= threshold or not is_settled(grid, position):
        return False
    if grid.rng.random() >= grid.climate.evaporation_chance:
        return False
    cell.evaporate()
    return True


def flow_liquid(grid: SurfaceGrid, position: CellPosition) -> None:
    """Spread the cell's liquid over itself and its four neighbours.

    The five cells are sorted (stably) by ``comparison_height``.  Walking
    up the ranking, rank ``i`` receives ``min(remaining, gap_i) / (i + 1)``
    where ``gap_i`` is the height step to the next rank; the walk stops
    once the running remaining depth is used up.  Arrivals on a different
    liquid go through the interaction table.
    """
    cell = grid.pixel_at(position)
    if not cell.has_liquid:
        cell.clear_liquid()
        return

    pool = [*grid.neighbours(position), cell]
    ranked = sorted(pool, key=lambda other: comparison_height(other, cell))
    heights = [comparison_height(other, cell) for other in ranked]
    gaps = [heights[i + 1] - heights[i] for i in range(len(ranked) - 1)]
    gaps.append(math.inf)

    kind = cell.liquid
    remaining = cell.liquid_depth
    for rank, (target, gap) in enumerate(zip(ranked, gaps)):
        change = min(remaining, gap) / (rank + 1)
        if target is not cell and change > 0:
            target.add_liquid(kind, change, grid.rng)
            cell.remove_liquid(change)
        remaining -= gap
        if remaining <= 0:
            break


def update_liquid(grid: SurfaceGrid, position: CellPosition) -> None:
    """Evaporate or level the cell's liquid for this tick."""
    cell = grid.pixel_at(position)
    if not cell.has_liquid:
        cell.clear_liquid()
        return
    if maybe_evaporate(grid, position):
        return
    flow_liquid(grid, position)
