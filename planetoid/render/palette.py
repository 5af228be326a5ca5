"""Colour projection for cells.

A cell is drawn by strict priority: coating if present, else liquid if
any is pooled, else bedrock.  Gas is then laid over the result as a
haze that thickens with density.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from planetoid.world.cell import MAX_ELEVATION, MIN_ELEVATION
from planetoid.world.materials import (
    COATINGS,
    GASES,
    LIQUIDS,
    MATERIALS,
    Coating,
    Colour,
    ColourRule,
    LiquidProperties,
)

if TYPE_CHECKING:
    from planetoid.world.cell import Cell

COATING_WINDOW = 100.0
MAX_SHADED_DEPTH = MAX_ELEVATION * 2
MAX_HAZE_DENSITY = 10.0


def lerp_colour(
    a: Colour | NDArray[np.float64],
    b: Colour | NDArray[np.float64],
    lo: float,
    hi: float,
    value: float,
) -> NDArray[np.float64]:
    """Blend from ``a`` at ``lo`` to ``b`` at ``hi``, clamped at both ends."""
    start = np.asarray(a, dtype=np.float64)
    end = np.asarray(b, dtype=np.float64)
    if hi == lo:
        t = 1.0 if value >= hi else 0.0
    else:
        t = min(max((value - lo) / (hi - lo), 0.0), 1.0)
    return start + t * (end - start)


def liquid_colour(
    liquid: LiquidProperties,
    temperature: float,
    depth: float,
) -> NDArray[np.float64]:
    """Shade a liquid according to its colour rule."""
    palette = liquid.colour
    if palette.rule is ColourRule.TEMPERATURE:
        return lerp_colour(
            palette.cold_shallow,
            palette.hot_shallow,
            liquid.min_temp,
            liquid.max_temp,
            temperature,
        )
    hot = lerp_colour(palette.hot_shallow, palette.hot_deep, 0.0, MAX_SHADED_DEPTH, depth)
    cold = lerp_colour(
        palette.cold_shallow, palette.cold_deep, 0.0, MAX_SHADED_DEPTH, depth
    )
    return lerp_colour(cold, hot, liquid.min_temp, liquid.max_temp, temperature)


def cell_colour(cell: Cell) -> NDArray[np.uint8]:
    """Return the RGB colour of ``cell``."""
    if cell.coating is not Coating.NONE:
        coating = COATINGS[cell.coating]
        colour = lerp_colour(
            coating.high_colour,
            coating.low_colour,
            coating.max_temp - COATING_WINDOW,
            coating.max_temp,
            cell.temperature,
        )
    elif cell.has_liquid:
        colour = liquid_colour(LIQUIDS[cell.liquid], cell.temperature, cell.liquid_depth)
    else:
        material = MATERIALS[cell.material]
        colour = lerp_colour(
            material.low_colour,
            material.high_colour,
            MIN_ELEVATION,
            MAX_ELEVATION,
            cell.elevation,
        )

    if cell.has_gas:
        colour = lerp_colour(
            colour, GASES[cell.gas].colour, 0.0, MAX_HAZE_DENSITY, cell.gas_density
        )

    return np.rint(colour).astype(np.uint8)
