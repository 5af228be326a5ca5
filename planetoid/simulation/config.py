"""Config — load simulation parameters from YAML files.

All tunable constants (planet size, terrain seeding, climate, volcanism)
live in YAML and are parsed into a typed dataclass here.  This keeps the
simulation core data-driven and easy to experiment with.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from planetoid.world.environment import Climate, Volcanism
from planetoid.world.materials import Liquid, Material


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        size: Cells along one cube face edge.
        baseline_temperature: Starting temperature of every cell.
        baseline_material: Starting bedrock of every cell.
        baseline_liquid: Liquid initially covering every cell.
        baseline_liquid_depth: Depth of that liquid.
        num_features: Round terrain features stamped at start-up.
        feature_height_range: (min, max) signed feature height.
        feature_falloff_range: (min, max) height lost per cell of distance.
        solar_energy: Heat delivered per tick at the equator.
        heat_radiation: Fraction of temperature radiated per tick.
        heat_conductivity: Neighbour heat exchange strength.
        angular_velocity: Planet spin driving the Coriolis push.
        elevation_radiation: Extra radiation per squared unit of height.
        evaporation_chance: Per-tick chance a settled warm pool evaporates.
        wind_range_divisor: ``size // wind_range_divisor`` is the wind
            sampling radius.
        eruption_chance: Per-tick chance a new volcano appears.
        extinction_chance: Per-tick chance the oldest volcano goes quiet.
        eruption_temperature: Temperature forced on active vents.
        lava_per_tick: Molten rock poured on each vent per tick.
        max_volcanoes: Cap on simultaneously active vents.
    """

    seed: int = 42
    size: int = 16

    # Terrain seeding
    baseline_temperature: float = 320.0
    baseline_material: Material = Material.METAMORPHIC
    baseline_liquid: Liquid = Liquid.SALT_WATER
    baseline_liquid_depth: float = 1.0
    num_features: int = 20
    feature_height_range: tuple[float, float] = (-5.0, 6.0)
    feature_falloff_range: tuple[float, float] = (0.5, 2.0)

    # Climate
    solar_energy: float = 3.5
    heat_radiation: float = 0.01
    heat_conductivity: float = 0.1
    angular_velocity: float = 1.0
    elevation_radiation: float = 0.02
    evaporation_chance: float = 1 / 120
    wind_range_divisor: int = 16

    # Volcanism
    eruption_chance: float = 1 / 120
    extinction_chance: float = 1 / 40
    eruption_temperature: float = 2000.0
    lava_per_tick: float = 1.0
    max_volcanoes: int = 8

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Kinds are given by their enum value, e.g. ``baseline_material:
        igneous``; ranges as two-element lists.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ValueError: If a kind name is not recognised.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        return cls(
            seed=data.get("seed", cls.seed),
            size=data.get("size", cls.size),
            baseline_temperature=data.get(
                "baseline_temperature",
                cls.baseline_temperature,
            ),
            baseline_material=Material(
                data.get("baseline_material", cls.baseline_material.value),
            ),
            baseline_liquid=Liquid(
                data.get("baseline_liquid", cls.baseline_liquid.value),
            ),
            baseline_liquid_depth=data.get(
                "baseline_liquid_depth",
                cls.baseline_liquid_depth,
            ),
            num_features=data.get("num_features", cls.num_features),
            feature_height_range=tuple(
                data.get("feature_height_range", cls.feature_height_range),
            ),
            feature_falloff_range=tuple(
                data.get("feature_falloff_range", cls.feature_falloff_range),
            ),
            solar_energy=data.get("solar_energy", cls.solar_energy),
            heat_radiation=data.get("heat_radiation", cls.heat_radiation),
            heat_conductivity=data.get("heat_conductivity", cls.heat_conductivity),
            angular_velocity=data.get("angular_velocity", cls.angular_velocity),
            elevation_radiation=data.get(
                "elevation_radiation",
                cls.elevation_radiation,
            ),
            evaporation_chance=data.get(
                "evaporation_chance",
                cls.evaporation_chance,
            ),
            wind_range_divisor=data.get(
                "wind_range_divisor",
                cls.wind_range_divisor,
            ),
            eruption_chance=data.get("eruption_chance", cls.eruption_chance),
            extinction_chance=data.get("extinction_chance", cls.extinction_chance),
            eruption_temperature=data.get(
                "eruption_temperature",
                cls.eruption_temperature,
            ),
            lava_per_tick=data.get("lava_per_tick", cls.lava_per_tick),
            max_volcanoes=data.get("max_volcanoes", cls.max_volcanoes),
        )

    def climate(self) -> Climate:
        """Build the climate constants for a grid."""
        return Climate(
            solar_energy=self.solar_energy,
            heat_radiation=self.heat_radiation,
            heat_conductivity=self.heat_conductivity,
            angular_velocity=self.angular_velocity,
            elevation_radiation=self.elevation_radiation,
            evaporation_chance=self.evaporation_chance,
            wind_range_divisor=self.wind_range_divisor,
        )

    def volcanism(self) -> Volcanism:
        """Build a fresh, empty volcano scheduler."""
        return Volcanism(
            eruption_chance=self.eruption_chance,
            extinction_chance=self.extinction_chance,
            eruption_temperature=self.eruption_temperature,
            lava_per_tick=self.lava_per_tick,
            max_active=self.max_volcanoes,
        )
