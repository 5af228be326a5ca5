"""Tests for planetoid.physics — heat balance, liquid flow and wind."""

import math

import numpy as np
import pytest

from planetoid.physics.flow import (
    comparison_height,
    flow_liquid,
    is_settled,
    maybe_evaporate,
)
from planetoid.physics.heat import diffuse_heat, solar_strength, update_temperature
from planetoid.physics.wind import flow_gas, get_wind, wind_targets
from planetoid.world.cell import Cell
from planetoid.world.environment import Climate
from planetoid.world.grid import SurfaceGrid
from planetoid.world.materials import Gas, Liquid, Material
from planetoid.world.topology import CellPosition, Face


def _flood(grid: SurfaceGrid, kind: Liquid, depth: float) -> None:
    for cell in grid.cells:
        cell.add_liquid(kind, depth, grid.rng)


def _total_liquid(grid: SurfaceGrid) -> float:
    return sum(cell.liquid_depth for cell in grid.cells)


def _total_gas(grid: SurfaceGrid) -> float:
    return sum(cell.gas_density for cell in grid.cells)


class TestHeat:
    """Tests for sunlight, radiation and conduction."""

    def test_solar_strength(self) -> None:
        assert solar_strength(0.0) == pytest.approx(1.0)
        assert solar_strength(1.0) == pytest.approx(0.0, abs=1e-12)
        assert 0.0 < solar_strength(0.5) < 1.0

    def test_diffusion_towards_neighbours(self) -> None:
        cell = Cell(position=CellPosition(Face.OBVERSE, 0, 0), temperature=100.0)
        diffuse_heat(cell, [0.0, 0.0, 0.0, 0.0], conductivity=0.1)
        assert cell.temperature == pytest.approx(100.0 - 400.0 / 14.0)

    def test_zero_conductivity_disables_diffusion(self) -> None:
        cell = Cell(position=CellPosition(Face.OBVERSE, 0, 0), temperature=100.0)
        diffuse_heat(cell, [0.0, 0.0, 0.0, 0.0], conductivity=0.0)
        assert cell.temperature == 100.0

    def test_equator_warms_faster_than_pole(self) -> None:
        climate = Climate()
        equator = Cell(position=CellPosition(Face.OBVERSE, 0, 1))
        pole = Cell(position=CellPosition(Face.NORTH, 1, 1))
        update_temperature(equator, 0.0, [0.0] * 4, climate, 16)
        update_temperature(pole, 1.0, [0.0] * 4, climate, 16)
        assert equator.temperature > pole.temperature
        assert pole.temperature == pytest.approx(0.0, abs=1e-9)

    def test_time_scale_follows_size(self) -> None:
        climate = Climate(heat_conductivity=0.0)
        coarse = Cell(position=CellPosition(Face.OBVERSE, 0, 0))
        fine = Cell(position=CellPosition(Face.OBVERSE, 0, 0))
        update_temperature(coarse, 0.0, [], climate, 8)
        update_temperature(fine, 0.0, [], climate, 16)
        assert coarse.temperature == pytest.approx(2 * fine.temperature)

    def test_hot_cell_radiates(self) -> None:
        climate = Climate(solar_energy=0.0, heat_conductivity=0.0)
        cell = Cell(
            position=CellPosition(Face.OBVERSE, 0, 0),
            temperature=1000.0,
            material=Material.METAMORPHIC,
        )
        update_temperature(cell, 0.0, [], climate, 16)
        assert cell.temperature == pytest.approx(1000.0 - 1000.0 * 0.01 * 1.1)


class TestFlow:
    """Tests for liquid levelling."""

    def test_comparison_height_counts_same_kind_only(
        self,
        small_grid: SurfaceGrid,
    ) -> None:
        source = small_grid.cells[0]
        neighbour = small_grid.cells[1]
        source.add_liquid(Liquid.SALT_WATER, 1.0, small_grid.rng)
        neighbour.add_liquid(Liquid.SALT_WATER, 2.0, small_grid.rng)
        neighbour.change_elevation(1.0)
        assert comparison_height(neighbour, source) == 3.0
        assert comparison_height(source, source) == 0.0

        neighbour.clear_liquid()
        neighbour.add_liquid(Liquid.MOLTEN_ROCK, 2.0, small_grid.rng)
        assert comparison_height(neighbour, source) == 1.0

    def test_basin_fills(self, small_grid: SurfaceGrid) -> None:
        _flood(small_grid, Liquid.FRESH_WATER, 1.0)
        centre = CellPosition(Face.OBVERSE, 1, 1)
        small_grid.pixel_at(centre).change_elevation(-2.0)
        around = [
            CellPosition(Face.OBVERSE, 1, 0),
            CellPosition(Face.OBVERSE, 2, 1),
            CellPosition(Face.OBVERSE, 1, 2),
            CellPosition(Face.OBVERSE, 0, 1),
        ]
        five = [centre, *around]

        for position in five:
            flow_liquid(small_grid, position)

        depths = [small_grid.pixel_at(p).liquid_depth for p in five]
        assert sum(depths) == pytest.approx(5.0)
        assert depths[0] > 1.0
        assert min(depths[1:]) < 1.0

    def test_level_pool_stays_put(self, small_grid: SurfaceGrid) -> None:
        _flood(small_grid, Liquid.SALT_WATER, 1.0)
        for position in small_grid.topology.positions():
            flow_liquid(small_grid, position)
        for cell in small_grid.cells:
            assert cell.liquid_depth == pytest.approx(1.0)

    def test_flow_conserves_volume(self, small_grid: SurfaceGrid) -> None:
        rng = np.random.default_rng(seed=7)
        for cell in small_grid.cells:
            cell.change_elevation(float(rng.uniform(-3.0, 3.0)))
            cell.add_liquid(Liquid.FRESH_WATER, float(rng.uniform(0.5, 2.0)), small_grid.rng)
        before = _total_liquid(small_grid)

        for _ in range(3):
            for position in small_grid.topology.positions():
                flow_liquid(small_grid, position)

        assert _total_liquid(small_grid) == pytest.approx(before)
        for cell in small_grid.cells:
            assert cell.liquid_depth >= 0.0
            assert cell.has_liquid == (cell.liquid is not Liquid.NONE)

    def test_liquid_runs_downhill(self, small_grid: SurfaceGrid) -> None:
        peak = CellPosition(Face.EAST, 2, 2)
        small_grid.pixel_at(peak).change_elevation(3.0)
        small_grid.pixel_at(peak).add_liquid(Liquid.MOLTEN_ROCK, 1.0, small_grid.rng)
        flow_liquid(small_grid, peak)
        kept = small_grid.pixel_at(peak).liquid_depth
        received = sum(n.liquid_depth for n in small_grid.neighbours(peak))
        assert kept < 1.0
        assert received > 0.0
        assert kept + received == pytest.approx(1.0)


class TestEvaporation:
    """Tests for settled pools turning to vapour."""

    def test_warm_settled_water_evaporates(self, rng: np.random.Generator) -> None:
        grid = SurfaceGrid(size=4, rng=rng, climate=Climate(evaporation_chance=1.0))
        _flood(grid, Liquid.FRESH_WATER, 1.0)
        position = CellPosition(Face.WEST, 1, 1)
        grid.pixel_at(position).temperature = 380.0

        assert is_settled(grid, position)
        assert maybe_evaporate(grid, position)
        cell = grid.pixel_at(position)
        assert not cell.has_liquid
        assert cell.gas is Gas.WATER
        assert cell.gas_density == 1.0

    def test_cool_water_stays(self, rng: np.random.Generator) -> None:
        grid = SurfaceGrid(size=4, rng=rng, climate=Climate(evaporation_chance=1.0))
        _flood(grid, Liquid.FRESH_WATER, 1.0)
        position = CellPosition(Face.WEST, 1, 1)
        grid.pixel_at(position).temperature = 320.0
        assert not maybe_evaporate(grid, position)

    def test_unsettled_water_stays(self, rng: np.random.Generator) -> None:
        grid = SurfaceGrid(size=4, rng=rng, climate=Climate(evaporation_chance=1.0))
        _flood(grid, Liquid.FRESH_WATER, 1.0)
        position = CellPosition(Face.WEST, 1, 1)
        grid.pixel_at(position).temperature = 380.0
        grid.neighbours(position)[0].change_elevation(1.0)
        assert not is_settled(grid, position)
        assert not maybe_evaporate(grid, position)

    def test_zero_chance_never_evaporates(self, small_grid: SurfaceGrid) -> None:
        small_grid.climate.evaporation_chance = 0.0
        _flood(small_grid, Liquid.FRESH_WATER, 1.0)
        position = CellPosition(Face.WEST, 1, 1)
        small_grid.pixel_at(position).temperature = 380.0
        assert not maybe_evaporate(small_grid, position)

    def test_lava_has_no_vapour(self, rng: np.random.Generator) -> None:
        grid = SurfaceGrid(size=4, rng=rng, climate=Climate(evaporation_chance=1.0))
        _flood(grid, Liquid.MOLTEN_ROCK, 1.0)
        position = CellPosition(Face.WEST, 1, 1)
        grid.pixel_at(position).temperature = 9000.0
        assert not maybe_evaporate(grid, position)


class TestWind:
    """Tests for wind estimation and gas advection."""

    def test_still_air(self, calm_grid: SurfaceGrid) -> None:
        direction, speed = get_wind(calm_grid, CellPosition(Face.OBVERSE, 1, 1), 1)
        assert not direction.any()
        assert speed == 0.0

    def test_blows_towards_heat(self, calm_grid: SurfaceGrid) -> None:
        calm_grid.pixel_at(CellPosition(Face.OBVERSE, 2, 1)).temperature = 100.0
        direction, speed = get_wind(calm_grid, CellPosition(Face.OBVERSE, 1, 1), 1)
        np.testing.assert_allclose(direction, [1.0, 0.0])
        assert speed == pytest.approx(100.0)

    @pytest.mark.parametrize(("y", "expected"), [(0, 1.0), (3, -1.0)])
    def test_coriolis_side_follows_hemisphere(
        self,
        small_grid: SurfaceGrid,
        y: int,
        expected: float,
    ) -> None:
        position = CellPosition(Face.OBVERSE, 1, y)
        direction, speed = get_wind(small_grid, position, 1)
        np.testing.assert_allclose(direction, [expected, 0.0])
        latitude = small_grid.topology.latitude(position)
        assert speed == pytest.approx(math.sin(latitude))

    def test_no_coriolis_on_the_equator(self, small_grid: SurfaceGrid) -> None:
        _, speed = get_wind(small_grid, CellPosition(Face.OBVERSE, 1, 1), 1)
        assert speed == 0.0

    def test_wind_targets(self) -> None:
        assert wind_targets(np.array([1.0, 0.0])) == [(1, 0)]
        assert wind_targets(np.array([0.6, 0.8])) == [(1, 1), (0, 1), (1, 0)]
        assert wind_targets(np.array([0.0, 0.0])) == []

    def test_gas_follows_the_wind(self, calm_grid: SurfaceGrid) -> None:
        source = CellPosition(Face.OBVERSE, 1, 1)
        downwind = CellPosition(Face.OBVERSE, 2, 1)
        calm_grid.pixel_at(downwind).temperature = 100.0
        calm_grid.pixel_at(source).add_gas(Gas.WATER, 5.0)

        flow_gas(calm_grid, source)

        assert calm_grid.pixel_at(downwind).gas_density == pytest.approx(5.0)
        assert not calm_grid.pixel_at(source).has_gas
        assert _total_gas(calm_grid) == pytest.approx(5.0)

    def test_still_gas_stays(self, calm_grid: SurfaceGrid) -> None:
        for cell in calm_grid.cells:
            cell.add_gas(Gas.WATER, 1.0)
        source = CellPosition(Face.NORTH, 2, 2)
        flow_gas(calm_grid, source)
        assert calm_grid.pixel_at(source).gas_density == 1.0
        assert _total_gas(calm_grid) == pytest.approx(len(calm_grid.cells))

    def test_gas_is_conserved_over_a_tick(self, small_grid: SurfaceGrid) -> None:
        rng = np.random.default_rng(seed=3)
        for cell in small_grid.cells:
            cell.temperature = float(rng.uniform(300.0, 400.0))
            cell.add_gas(Gas.WATER, float(rng.uniform(0.0, 2.0)))
        before = _total_gas(small_grid)
        for position in small_grid.topology.positions():
            flow_gas(small_grid, position)
        assert _total_gas(small_grid) == pytest.approx(before)
