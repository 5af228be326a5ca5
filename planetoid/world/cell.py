"""Cell — the physical state of one position on the planet surface.

A cell stacks four layers: bedrock material, pooled liquid, a solid
coating and a gas.  Every layer except the material carries a quantity,
and the quantity is positive exactly when the kind is not ``NONE``; the
mutators below keep that pairing intact.

Phase transitions are static kind -> function tables.  Each tick
``apply_phase_transitions`` compares the cell temperature with the
thresholds of the coating, liquid, material and gas (in that order) and
fires the matching rule.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from planetoid.world.interactions import (
    InteractionError,
    resolve_gases,
    resolve_liquids,
)
from planetoid.world.materials import (
    COATINGS,
    GASES,
    LIQUIDS,
    MATERIALS,
    Coating,
    Gas,
    Liquid,
    Material,
)

if TYPE_CHECKING:
    from numpy.random import Generator

    from planetoid.world.topology import CellPosition

MIN_ELEVATION = -5.0
MAX_ELEVATION = 5.0


@dataclass
class Cell:
    """A single cell of the surface grid.

    Attributes:
        position: Where the cell lives on the cube.
        temperature: Temperature in sim-units (water is liquid 300-400).
        elevation: Bedrock height, clamped to [-5, 5].
        material: Bedrock material.
        liquid: Pooled liquid kind.
        liquid_depth: Depth of the pooled liquid.
        coating: Solid crust kind.
        coating_thickness: Thickness of the crust.
        gas: Gas kind above the cell.
        gas_density: Density of that gas.
    """

    position: CellPosition
    temperature: float = 0.0
    elevation: float = 0.0
    material: Material = Material.UNSET
    liquid: Liquid = Liquid.NONE
    liquid_depth: float = 0.0
    coating: Coating = Coating.NONE
    coating_thickness: float = 0.0
    gas: Gas = Gas.NONE
    gas_density: float = 0.0

    @property
    def surface_height(self) -> float:
        """Bedrock plus coating plus liquid."""
        return self.elevation + self.coating_thickness + self.liquid_depth

    @property
    def has_liquid(self) -> bool:
        return self.liquid is not Liquid.NONE and self.liquid_depth > 0

    @property
    def has_gas(self) -> bool:
        return self.gas is not Gas.NONE and self.gas_density > 0

    def snapshot(self) -> Cell:
        """Return a detached copy for diagnostics."""
        return replace(self)

    # -- Elevation ---------------------------------------------------------

    def change_elevation(self, amount: float) -> None:
        """Raise or lower the bedrock, clamped to [-5, 5]."""
        self.elevation = min(MAX_ELEVATION, max(MIN_ELEVATION, self.elevation + amount))

    # -- Liquid ------------------------------------------------------------

    def add_liquid(self, kind: Liquid, amount: float, rng: Generator) -> None:
        """Pour ``amount`` of ``kind`` onto the cell.

        Pouring onto an empty cell or onto the same kind simply deepens
        it; any other pairing is settled by the interaction table.

        Raises:
            InteractionError: If the two kinds have no defined interaction.
        """
        if amount <= 0:
            return
        if kind is Liquid.NONE:
            msg = "cannot pour liquid of kind NONE"
            raise InteractionError(msg)
        if not self.has_liquid or kind is self.liquid:
            self.liquid = kind
            self.liquid_depth = max(0.0, self.liquid_depth) + amount
            return
        outcome = resolve_liquids(self.liquid, self.liquid_depth, kind, amount, rng)
        self.liquid = outcome.liquid
        self.liquid_depth = outcome.depth
        if outcome.steam > 0:
            self.add_gas(Gas.WATER, outcome.steam)
        if self.liquid_depth <= 0:
            self.clear_liquid()

    def remove_liquid(self, amount: float) -> None:
        """Drain up to ``amount`` of the pooled liquid."""
        self.liquid_depth -= amount
        if self.liquid_depth <= 0:
            self.clear_liquid()

    def clear_liquid(self) -> None:
        self.liquid = Liquid.NONE
        self.liquid_depth = 0.0

    def freeze(self, coating: Coating) -> None:
        """Turn the whole liquid layer into ``coating`` of equal thickness."""
        depth = self.liquid_depth
        self.clear_liquid()
        self.add_coating(coating, depth)

    def evaporate(self) -> None:
        """Send the whole liquid layer up as its vapour, if it has one."""
        if not self.has_liquid:
            return
        vapour = LIQUIDS[self.liquid].vapour
        if vapour is None:
            return
        self.add_gas(vapour, self.liquid_depth)
        self.clear_liquid()

    # -- Coating -----------------------------------------------------------

    def add_coating(self, kind: Coating, amount: float) -> None:
        """Lay down ``amount`` of crust; a new kind covers the old one."""
        if amount <= 0 or kind is Coating.NONE:
            return
        if self.coating is Coating.NONE:
            self.coating_thickness = 0.0
        self.coating = kind
        self.coating_thickness += amount

    def clear_coating(self) -> None:
        self.coating = Coating.NONE
        self.coating_thickness = 0.0

    def melt_coating(self, rng: Generator) -> None:
        """Dissolve the coating, restoring its thickness as liquid."""
        melts_into = COATINGS[self.coating].melts_into
        thickness = self.coating_thickness
        self.clear_coating()
        if melts_into is not None:
            self.add_liquid(melts_into, thickness, rng)

    # -- Gas ---------------------------------------------------------------

    def add_gas(self, kind: Gas, amount: float) -> None:
        """Add ``amount`` of gas.

        Raises:
            UnsupportedInteractionError: If a different gas is present.
        """
        if amount <= 0:
            return
        self.gas = resolve_gases(self.gas if self.has_gas else Gas.NONE, kind)
        self.gas_density = max(0.0, self.gas_density) + amount

    def clear_gas(self) -> None:
        self.gas = Gas.NONE
        self.gas_density = 0.0

    def rain(self, rng: Generator) -> None:
        """Condense all gas into fresh water."""
        density = self.gas_density
        self.clear_gas()
        self.add_liquid(Liquid.FRESH_WATER, density, rng)

    # -- Events ------------------------------------------------------------

    def erupt(self, temperature: float, lava: float, rng: Generator) -> None:
        """Force the cell hot and pour molten rock onto it."""
        self.temperature = temperature
        self.add_liquid(Liquid.MOLTEN_ROCK, lava, rng)


# -- Transition tables -----------------------------------------------------

_Rule = Callable[[Cell, "Generator"], None]


def _melt_into(liquid: Liquid) -> _Rule:
    def rule(cell: Cell, rng: Generator) -> None:
        cell.change_elevation(-1.0)
        cell.add_liquid(liquid, 1.0, rng)

    return rule


def _turn_into(material: Material) -> _Rule:
    def rule(cell: Cell, rng: Generator) -> None:
        cell.material = material

    return rule


def _solidify(material: Material) -> _Rule:
    def rule(cell: Cell, rng: Generator) -> None:
        cell.clear_liquid()
        cell.material = material
        cell.change_elevation(1.0)

    return rule


def _boil_away(cell: Cell, rng: Generator) -> None:
    cell.clear_liquid()


def _ice_over(cell: Cell, rng: Generator) -> None:
    cell.freeze(Coating.ICE)


def _rain(cell: Cell, rng: Generator) -> None:
    cell.rain(rng)


_MATERIAL_ON_HEAT: dict[Material, _Rule] = {
    Material.IGNEOUS: _melt_into(Liquid.MOLTEN_ROCK),
    Material.SEDIMENTARY: _melt_into(Liquid.MOLTEN_ROCK),
    Material.METAMORPHIC: _melt_into(Liquid.MOLTEN_ROCK),
    Material.RUST: _melt_into(Liquid.MOLTEN_ROCK),
    Material.ICE: _melt_into(Liquid.FRESH_WATER),
    Material.METAL: _melt_into(Liquid.MOLTEN_METAL),
    Material.MUD: _turn_into(Material.SEDIMENTARY),
}

_LIQUID_ON_HEAT: dict[Liquid, _Rule] = {
    Liquid.SALT_WATER: _ice_over,
    Liquid.FRESH_WATER: _ice_over,
    Liquid.MOLTEN_ROCK: _boil_away,
    Liquid.MOLTEN_METAL: _boil_away,
}

_LIQUID_ON_COOL: dict[Liquid, _Rule] = {
    Liquid.SALT_WATER: _ice_over,
    Liquid.FRESH_WATER: _ice_over,
    Liquid.MOLTEN_ROCK: _solidify(Material.IGNEOUS),
    Liquid.MOLTEN_METAL: _solidify(Material.METAL),
}

_GAS_ON_COOL: dict[Gas, _Rule] = {
    Gas.WATER: _rain,
}


def apply_phase_transitions(cell: Cell, rng: Generator) -> None:
    """Fire every threshold rule the cell's temperature has crossed.

    Order is fixed: coating, liquid, material, gas.  A rule may change
    the layers examined after it within the same call.
    """
    temperature = cell.temperature

    if cell.coating is not Coating.NONE and temperature > COATINGS[cell.coating].max_temp:
        cell.melt_coating(rng)

    if cell.has_liquid:
        liquid = LIQUIDS[cell.liquid]
        if temperature > liquid.max_temp:
            _LIQUID_ON_HEAT[cell.liquid](cell, rng)
        elif temperature < liquid.min_temp:
            _LIQUID_ON_COOL[cell.liquid](cell, rng)

    if temperature > MATERIALS[cell.material].max_temp:
        rule = _MATERIAL_ON_HEAT.get(cell.material)
        if rule is not None:
            rule(cell, rng)

    if cell.has_gas and temperature < GASES[cell.gas].min_temp:
        _GAS_ON_COOL[cell.gas](cell, rng)
