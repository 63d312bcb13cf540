"""Main entry point for the protozoa simulation.

Runs the simulation headless and logs population stats, optionally
exporting them as JSON at the end of the run.
"""

import argparse
import logging
import sys

import orjson

from protozoa.config import SimulationConfig
from protozoa.exceptions import ConfigurationError
from protozoa.logging_config import configure_logging
from protozoa.simulation import Simulation

logger = logging.getLogger(__name__)


def load_config(path):
    """Build a SimulationConfig from a JSON file of nested overrides."""
    if path is None:
        return SimulationConfig()
    with open(path, "rb") as f:
        overrides = orjson.loads(f.read())
    return SimulationConfig.from_dict(overrides)


def run_headless(cycles: int, stats_interval: int, seed=None, export_stats=None, config=None):
    """Run the simulation in headless mode.

    Args:
        cycles: Number of cycles to simulate
        stats_interval: Log stats every N cycles
        seed: Optional random seed for deterministic behavior
        export_stats: Optional filename to export JSON stats to
        config: Optional SimulationConfig (defaults otherwise)
    """
    simulation = Simulation(config=config, seed=seed)
    simulation.run_headless(cycles=cycles, stats_interval=stats_interval, export_json=export_stats)


def main(argv=None):
    """Parse command-line arguments and run the simulation."""
    parser = argparse.ArgumentParser(
        description="Protozoa Decision Tree Evolution Simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Quick run
  python main.py --cycles 1000

  # Reproducible run with stats export
  python main.py --cycles 20000 --seed 42 --export-stats results.json

  # Small world from a JSON file of overrides
  python main.py --config small.json --log-level DEBUG
        """,
    )

    parser.add_argument(
        "--cycles",
        type=int,
        default=10000,
        help="Number of cycles to simulate (default: 10000)",
    )

    parser.add_argument(
        "--stats-interval",
        type=int,
        default=500,
        help="Log stats every N cycles (default: 500)",
    )

    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed for deterministic behavior (optional)"
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="FILENAME",
        help="JSON file of nested config overrides, e.g. {\"grid\": {\"width\": 50}}",
    )

    parser.add_argument(
        "--export-stats",
        type=str,
        default=None,
        metavar="FILENAME",
        help="Export final stats and a population snapshot to a JSON file",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level (default: PROTOZOA_LOG_LEVEL or INFO)",
    )

    args = parser.parse_args(argv)
    configure_logging(level=args.log_level)

    try:
        config = load_config(args.config)
    except (OSError, orjson.JSONDecodeError, ConfigurationError) as e:
        logger.error("Could not load configuration: %s", e)
        sys.exit(2)

    logger.info("Starting headless simulation...")
    logger.info("Configuration: %d cycles, stats every %d cycles", args.cycles, args.stats_interval)
    if args.export_stats:
        logger.info("Stats will be exported to: %s", args.export_stats)
    run_headless(
        args.cycles,
        args.stats_interval,
        seed=args.seed,
        export_stats=args.export_stats,
        config=config,
    )


if __name__ == "__main__":
    main()
