"""What happens when two different kinds of liquid (or gas) meet in a cell.

A cell holds a single liquid kind and a single gas kind, so mixtures are
never stored: they are resolved on arrival.  Liquid pairs are looked up
in an ordered dispatch table keyed by ``(existing, incoming)``:

- Same family (salt/fresh water, molten rock/metal) -> *simple replace*:
  the deeper side wins the kind and the depths add up.
- Water against molten -> *vaporize*: the molten side boils the water
  into steam equal to the molten depth and the water side remains.

Any pair outside the table is a programming error in the table itself
and raises ``InteractionError``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from planetoid.world.materials import Gas, Liquid

if TYPE_CHECKING:
    from numpy.random import Generator


class InteractionError(LookupError):
    """Raised when an interaction table has no entry for a pair of kinds."""


class UnsupportedInteractionError(InteractionError):
    """Raised for gas pairs whose mixing is not modelled."""


@dataclass(frozen=True)
class LiquidOutcome:
    """Resolved liquid state of a cell after two liquids meet.

    Attributes:
        liquid: Surviving liquid kind.
        depth: Surviving liquid depth.
        steam: Water gas released into the cell.
    """

    liquid: Liquid
    depth: float
    steam: float = 0.0


def simple_replace(
    kind_a: Liquid,
    depth_a: float,
    kind_b: Liquid,
    depth_b: float,
    rng: Generator,
) -> LiquidOutcome:
    """Merge two related liquids; the deeper one sets the kind.

    An exact tie is settled by a single fair coin flip.
    """
    if depth_a > depth_b:
        kind = kind_a
    elif depth_b > depth_a:
        kind = kind_b
    else:
        kind = kind_a if rng.random() < 0.5 else kind_b
    return LiquidOutcome(kind, depth_a + depth_b)


def vaporize(water: Liquid, water_depth: float, molten_depth: float) -> LiquidOutcome:
    """Boil off steam equal to the molten depth; the water survives."""
    return LiquidOutcome(water, water_depth, steam=molten_depth)


_Resolver = Callable[[float, float, "Generator"], LiquidOutcome]


def _replace(existing: Liquid, incoming: Liquid) -> _Resolver:
    return lambda held, added, rng: simple_replace(existing, held, incoming, added, rng)


def _quench(water: Liquid) -> _Resolver:
    # Water already pooled, molten liquid arriving.
    return lambda held, added, rng: vaporize(water, held, added)


def _boil(water: Liquid) -> _Resolver:
    # Molten liquid already pooled, water arriving.
    return lambda held, added, rng: vaporize(water, added, held)


_WATERS = (Liquid.SALT_WATER, Liquid.FRESH_WATER)
_MOLTEN = (Liquid.MOLTEN_ROCK, Liquid.MOLTEN_METAL)

_LIQUID_INTERACTIONS: dict[tuple[Liquid, Liquid], _Resolver] = {
    (Liquid.SALT_WATER, Liquid.FRESH_WATER): _replace(
        Liquid.SALT_WATER, Liquid.FRESH_WATER
    ),
    (Liquid.FRESH_WATER, Liquid.SALT_WATER): _replace(
        Liquid.FRESH_WATER, Liquid.SALT_WATER
    ),
    (Liquid.MOLTEN_ROCK, Liquid.MOLTEN_METAL): _replace(
        Liquid.MOLTEN_ROCK, Liquid.MOLTEN_METAL
    ),
    (Liquid.MOLTEN_METAL, Liquid.MOLTEN_ROCK): _replace(
        Liquid.MOLTEN_METAL, Liquid.MOLTEN_ROCK
    ),
}
for _water in _WATERS:
    for _molten in _MOLTEN:
        _LIQUID_INTERACTIONS[(_water, _molten)] = _quench(_water)
        _LIQUID_INTERACTIONS[(_molten, _water)] = _boil(_water)


def resolve_liquids(
    existing: Liquid,
    existing_depth: float,
    incoming: Liquid,
    incoming_depth: float,
    rng: Generator,
) -> LiquidOutcome:
    """Resolve ``incoming`` liquid arriving on a cell holding ``existing``.

    Raises:
        InteractionError: If the pair is missing from the table.
    """
    try:
        resolver = _LIQUID_INTERACTIONS[(existing, incoming)]
    except KeyError:
        msg = f"interaction between {existing.name} and {incoming.name} is not defined"
        raise InteractionError(msg) from None
    return resolver(existing_depth, incoming_depth, rng)


def resolve_gases(existing: Gas, incoming: Gas) -> Gas:
    """Return the gas kind left after ``incoming`` joins ``existing``.

    Raises:
        InteractionError: If ``incoming`` is ``Gas.NONE``.
        UnsupportedInteractionError: If two different gases would mix.
    """
    if incoming is Gas.NONE:
        msg = "cannot add gas of kind NONE"
        raise InteractionError(msg)
    if existing is Gas.NONE or existing is incoming:
        return incoming
    msg = f"mixing {existing.name} with {incoming.name} is not supported"
    raise UnsupportedInteractionError(msg)
