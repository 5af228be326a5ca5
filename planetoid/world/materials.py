"""Kinds of surface matter and their fixed physical properties.

Each cell stacks four layers (material, liquid, coating, gas) and each
layer holds one kind drawn from a closed enumeration.  The property
tables below hold everything that depends only on the kind: stability
thresholds, render colours and radiative emissivity.  What happens when
a threshold is crossed lives in ``planetoid.world.cell``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

Colour = tuple[int, int, int]

_BLACK: Colour = (0, 0, 0)
_WHITE: Colour = (255, 255, 255)
_INF = float("inf")


def _hex(value: int) -> Colour:
    return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


class Material(Enum):
    """Bedrock composition of a cell."""

    UNSET = "unset"
    IGNEOUS = "igneous"
    SEDIMENTARY = "sedimentary"
    METAMORPHIC = "metamorphic"
    ICE = "ice"
    METAL = "metal"
    MUD = "mud"
    RUST = "rust"


class Liquid(Enum):
    """Liquid pooled on top of the bedrock."""

    NONE = "none"
    SALT_WATER = "salt_water"
    FRESH_WATER = "fresh_water"
    MOLTEN_ROCK = "molten_rock"
    MOLTEN_METAL = "molten_metal"


class Coating(Enum):
    """Solid crust lying on the surface."""

    NONE = "none"
    ICE = "ice"
    OBSIDIAN = "obsidian"
    WASTE = "waste"


class Gas(Enum):
    """Gas hanging over the cell."""

    NONE = "none"
    WATER = "water"


class ColourRule(Enum):
    """How a liquid's colour responds to its state."""

    TEMPERATURE = "temperature"
    BOTH = "both"


@dataclass(frozen=True)
class LiquidColour:
    """Corner colours for liquid shading.

    ``TEMPERATURE`` liquids blend the shallow pair from cold to hot and
    ``BOTH`` blends all four corners.
    """

    rule: ColourRule
    cold_shallow: Colour
    cold_deep: Colour
    hot_shallow: Colour
    hot_deep: Colour


@dataclass(frozen=True)
class MaterialProperties:
    """Fixed properties of a bedrock material.

    Attributes:
        low_colour: Colour at the lowest elevation.
        high_colour: Colour at the highest elevation.
        max_temp: Temperature above which the material reacts.
        emissivity: Multiplier on radiative heat loss.
    """

    low_colour: Colour
    high_colour: Colour
    max_temp: float
    emissivity: float = 1.0


@dataclass(frozen=True)
class LiquidProperties:
    """Fixed properties of a liquid.

    Attributes:
        colour: Shading rule and corner colours.
        min_temp: Temperature below which the liquid cools into something.
        max_temp: Temperature above which the liquid heats into something.
        vapour: Gas produced by evaporation, or None if it never evaporates.
    """

    colour: LiquidColour
    min_temp: float
    max_temp: float
    vapour: Gas | None = None


@dataclass(frozen=True)
class CoatingProperties:
    """Fixed properties of a coating.

    Attributes:
        low_colour: Colour just below the melting point.
        high_colour: Colour well below the melting point.
        max_temp: Melting point.
        melts_into: Liquid that receives the coating's thickness on
            melting, or None if the coating simply disappears.
    """

    low_colour: Colour
    high_colour: Colour
    max_temp: float
    melts_into: Liquid | None = None


@dataclass(frozen=True)
class GasProperties:
    """Fixed properties of a gas."""

    colour: Colour
    min_temp: float


MATERIALS: dict[Material, MaterialProperties] = {
    Material.UNSET: MaterialProperties(_BLACK, _WHITE, _INF),
    Material.IGNEOUS: MaterialProperties(_hex(0x1B1B1B), _hex(0x3C3C50), 2000),
    Material.SEDIMENTARY: MaterialProperties(
        _hex(0x96331B), _hex(0xC45212), 3000, emissivity=0.95
    ),
    Material.METAMORPHIC: MaterialProperties(_hex(0x434357), _hex(0x817B73), 5000),
    Material.ICE: MaterialProperties(
        _hex(0xC8F2FF), _WHITE, 300, emissivity=0.9
    ),
    Material.METAL: MaterialProperties(
        _hex(0x948A8A), _WHITE, 7000, emissivity=0.6
    ),
    Material.MUD: MaterialProperties(
        _hex(0x392B4B), _hex(0x833607), 100, emissivity=1.05
    ),
    Material.RUST: MaterialProperties(_hex(0x3D3D41), _hex(0xCB461E), 1000),
}

LIQUIDS: dict[Liquid, LiquidProperties] = {
    Liquid.SALT_WATER: LiquidProperties(
        LiquidColour(
            ColourRule.BOTH,
            cold_shallow=(40, 60, 90),
            cold_deep=(5, 20, 40),
            hot_shallow=(60, 140, 180),
            hot_deep=(20, 45, 105),
        ),
        min_temp=300,
        max_temp=400,
        vapour=Gas.WATER,
    ),
    Liquid.FRESH_WATER: LiquidProperties(
        LiquidColour(
            ColourRule.BOTH,
            cold_shallow=_hex(0x477288),
            cold_deep=_hex(0x1F335E),
            hot_shallow=_hex(0x3E8686),
            hot_deep=_hex(0x274E62),
        ),
        min_temp=300,
        max_temp=400,
        vapour=Gas.WATER,
    ),
    Liquid.MOLTEN_ROCK: LiquidProperties(
        LiquidColour(
            ColourRule.TEMPERATURE,
            cold_shallow=_hex(0xFF2F00),
            cold_deep=_hex(0xFF2F00),
            hot_shallow=_hex(0xFF8000),
            hot_deep=_hex(0xFF8000),
        ),
        min_temp=1000,
        max_temp=10000,
    ),
    Liquid.MOLTEN_METAL: LiquidProperties(
        LiquidColour(
            ColourRule.TEMPERATURE,
            cold_shallow=_hex(0xFF8000),
            cold_deep=_hex(0xFF8000),
            hot_shallow=_hex(0xFFE285),
            hot_deep=_hex(0xFFE285),
        ),
        min_temp=2000,
        max_temp=20000,
    ),
}

COATINGS: dict[Coating, CoatingProperties] = {
    Coating.ICE: CoatingProperties(
        _hex(0xD6EFFF), _hex(0xE5E3DF), 300, melts_into=Liquid.FRESH_WATER
    ),
    Coating.OBSIDIAN: CoatingProperties(
        _hex(0x160A23), _hex(0x351F4F), 1000, melts_into=Liquid.MOLTEN_ROCK
    ),
    Coating.WASTE: CoatingProperties(_hex(0x4B4111), _hex(0x6B5D1C), 200),
}

GASES: dict[Gas, GasProperties] = {
    Gas.WATER: GasProperties(_WHITE, min_temp=400),
}
