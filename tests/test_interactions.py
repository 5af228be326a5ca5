"""Tests for planetoid.world.interactions — liquid and gas mixing rules."""

import itertools
from enum import Enum

import pytest
from numpy.random import Generator

from planetoid.world.interactions import (
    InteractionError,
    LiquidOutcome,
    UnsupportedInteractionError,
    resolve_gases,
    resolve_liquids,
    simple_replace,
    vaporize,
)
from planetoid.world.materials import Gas, Liquid


class _Smoke(Enum):
    """A second gas kind for exercising the mixing guard."""

    SMOKE = "smoke"


class TestSimpleReplace:
    """Tests for merging related liquids."""

    def test_deeper_existing_wins(self, rng: Generator) -> None:
        outcome = simple_replace(
            Liquid.SALT_WATER, 3.0, Liquid.FRESH_WATER, 1.0, rng
        )
        assert outcome == LiquidOutcome(Liquid.SALT_WATER, 4.0)

    def test_deeper_incoming_wins(self, rng: Generator) -> None:
        outcome = simple_replace(
            Liquid.SALT_WATER, 1.0, Liquid.FRESH_WATER, 3.0, rng
        )
        assert outcome == LiquidOutcome(Liquid.FRESH_WATER, 4.0)

    def test_tie_is_a_coin_flip(self, rng: Generator) -> None:
        winners = {
            simple_replace(
                Liquid.MOLTEN_ROCK, 1.0, Liquid.MOLTEN_METAL, 1.0, rng
            ).liquid
            for _ in range(64)
        }
        assert winners == {Liquid.MOLTEN_ROCK, Liquid.MOLTEN_METAL}

    def test_no_steam(self, rng: Generator) -> None:
        outcome = simple_replace(
            Liquid.FRESH_WATER, 1.0, Liquid.SALT_WATER, 2.0, rng
        )
        assert outcome.steam == 0.0


class TestVaporize:
    """Tests for water meeting molten liquid."""

    def test_molten_depth_becomes_steam(self) -> None:
        outcome = vaporize(Liquid.FRESH_WATER, 2.0, 0.5)
        assert outcome == LiquidOutcome(Liquid.FRESH_WATER, 2.0, steam=0.5)

    def test_table_routes_both_orders(self, rng: Generator) -> None:
        quench = resolve_liquids(Liquid.SALT_WATER, 1.0, Liquid.MOLTEN_ROCK, 3.0, rng)
        assert quench == LiquidOutcome(Liquid.SALT_WATER, 1.0, steam=3.0)

        boil = resolve_liquids(Liquid.MOLTEN_ROCK, 3.0, Liquid.SALT_WATER, 1.0, rng)
        assert boil == LiquidOutcome(Liquid.SALT_WATER, 1.0, steam=3.0)


class TestResolveLiquids:
    """Tests for the ordered interaction table."""

    def test_every_distinct_pair_is_defined(self, rng: Generator) -> None:
        kinds = [kind for kind in Liquid if kind is not Liquid.NONE]
        for existing, incoming in itertools.permutations(kinds, 2):
            outcome = resolve_liquids(existing, 1.0, incoming, 2.0, rng)
            assert outcome.liquid is not Liquid.NONE

    def test_same_kind_is_not_in_the_table(self, rng: Generator) -> None:
        with pytest.raises(InteractionError):
            resolve_liquids(Liquid.SALT_WATER, 1.0, Liquid.SALT_WATER, 1.0, rng)

    def test_none_is_not_in_the_table(self, rng: Generator) -> None:
        with pytest.raises(InteractionError):
            resolve_liquids(Liquid.NONE, 0.0, Liquid.FRESH_WATER, 1.0, rng)

    def test_error_is_a_lookup_error(self, rng: Generator) -> None:
        with pytest.raises(LookupError):
            resolve_liquids(Liquid.MOLTEN_ROCK, 1.0, Liquid.NONE, 1.0, rng)


class TestResolveGases:
    """Tests for gas mixing."""

    def test_onto_empty(self) -> None:
        assert resolve_gases(Gas.NONE, Gas.WATER) is Gas.WATER

    def test_same_kind(self) -> None:
        assert resolve_gases(Gas.WATER, Gas.WATER) is Gas.WATER

    def test_adding_none(self) -> None:
        with pytest.raises(InteractionError):
            resolve_gases(Gas.WATER, Gas.NONE)

    def test_unsupported_is_an_interaction_error(self) -> None:
        assert issubclass(UnsupportedInteractionError, InteractionError)

    def test_two_different_gases_do_not_mix(self) -> None:
        with pytest.raises(UnsupportedInteractionError, match="WATER with SMOKE"):
            resolve_gases(Gas.WATER, _Smoke.SMOKE)  # type: ignore[arg-type]

    def test_different_gas_into_empty_is_taken(self) -> None:
        assert resolve_gases(Gas.NONE, _Smoke.SMOKE) is _Smoke.SMOKE  # type: ignore[arg-type]
