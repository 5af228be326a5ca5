"""Entry point for ``python -m planetoid``.

Loads a YAML config, builds a seeded planet and runs it headless for a
number of ticks, logging a short summary as it goes.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import pathlib

from planetoid.simulation.config import SimulationConfig
from planetoid.simulation.engine import SimulationEngine

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)

logger = logging.getLogger("planetoid")


def build_parser() -> argparse.ArgumentParser:
    """Return the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="planetoid",
        description="Planetoid - cellular planet surface simulator",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=100,
        help="Number of ticks to simulate (default: 100)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Override the seed from the config file",
    )
    parser.add_argument(
        "--report-every",
        type=int,
        default=10,
        help="Ticks between progress reports (default: 10)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, create the engine and run it."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = SimulationConfig.from_yaml(args.config)
    if args.seed is not None:
        config = dataclasses.replace(config, seed=args.seed)
    engine = SimulationEngine(config=config)

    report_every = max(1, args.report_every)
    for _ in range(args.ticks):
        engine.step()
        if engine.tick % report_every == 0 or engine.tick == args.ticks:
            stats = engine.summary()
            logger.info(
                "tick %d: mean T=%.1f liquid=%.0f%% coated=%.0f%% gas=%.2f volcanoes=%d",
                engine.tick,
                stats["mean_temperature"],
                stats["liquid_cover"] * 100,
                stats["coating_cover"] * 100,
                stats["total_gas"],
                stats["volcanoes"],
            )


if __name__ == "__main__":
    main()
