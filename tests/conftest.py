"""Shared fixtures for the planetoid test suite."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.random import Generator

from planetoid.simulation.config import SimulationConfig
from planetoid.world.environment import Climate, Volcanism
from planetoid.world.grid import SurfaceGrid
from planetoid.world.topology import CubeTopology


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def topology() -> CubeTopology:
    """A 4x4-per-face cube."""
    return CubeTopology(4)


@pytest.fixture
def small_grid(rng: Generator) -> SurfaceGrid:
    """A blank 4x4-per-face planet with volcanism switched off."""
    return SurfaceGrid(size=4, rng=rng, volcanism=Volcanism(eruption_chance=0.0))


@pytest.fixture
def calm_grid(rng: Generator) -> SurfaceGrid:
    """A blank planet without spin or volcanoes, for wind tests."""
    return SurfaceGrid(
        size=4,
        rng=rng,
        climate=Climate(angular_velocity=0.0),
        volcanism=Volcanism(eruption_chance=0.0),
    )


@pytest.fixture
def default_config() -> SimulationConfig:
    """A small default config (no YAML file needed)."""
    return SimulationConfig(size=4, num_features=5)
