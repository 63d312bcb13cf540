"""Headless simulation engine.

``Simulation`` wires the configuration, the random source and the food,
pH and organism managers together and advances them one tick at a time:

    food update -> environment update -> organism tick
"""

import logging
import random
from typing import Any, Dict, Optional

import orjson

from protozoa.config.simulation_config import SimulationConfig
from protozoa.inspection import build_population_data
from protozoa.organisms.manager import OrganismManager
from protozoa.world.environment import EnvironmentManager
from protozoa.world.food import FoodManager

logger = logging.getLogger(__name__)

SEPARATOR_WIDTH = 60


class Simulation:
    """Owns every subsystem of one run.

    Attributes:
        config: Validated simulation configuration
        rng: The only random source of the run
        seed: Seed ``rng`` was created from, if any
        food: Food collaborator
        environment: pH collaborator
        organisms: Population manager
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ):
        self.config = config or SimulationConfig()
        self.config.validate()

        # Prefer an explicit rng, then the seed, then a fresh generator
        if rng is not None:
            self.rng = rng
            self.seed = None
        else:
            self.rng = random.Random(seed)
            self.seed = seed

        self.food = FoodManager(self.config.grid, self.config.food, self.rng)
        self.environment = EnvironmentManager(self.config.grid, self.config.ph, self.rng)
        self.organisms = OrganismManager(self.config, self.rng, self.food, self.environment)
        self._is_setup = False

    @property
    def cycle(self) -> int:
        return self.organisms.cycle

    def organism_count(self) -> int:
        return self.organisms.organism_count()

    def food_count(self) -> int:
        return self.food.food_count()

    def setup(self) -> None:
        """Place initial food and root organisms. Safe to call twice."""
        if self._is_setup:
            return
        self.food.initialize()
        attempts = 0
        target = min(
            self.config.organisms.initial_organisms, self.config.organisms.max_organisms
        )
        # Random spawns give up on occupied cells, so bound the retries
        while self.organisms.organism_count() < target and attempts < target * 10:
            self.organisms.spawn_random_organism()
            attempts += 1
        self._is_setup = True
        logger.info(
            "Simulation set up on a %dx%d grid with %d organisms and %d food items",
            self.config.grid.width,
            self.config.grid.height,
            self.organism_count(),
            self.food_count(),
        )

    def update(self) -> None:
        """Advance one tick. Defects in the decision trees propagate."""
        if not self._is_setup:
            self.setup()
        self.food.update()
        self.environment.update()
        self.organisms.update()

    def run(self, cycles: int) -> Dict[str, Any]:
        """Advance ``cycles`` ticks and return the final stats."""
        self.setup()
        for _ in range(cycles):
            self.update()
        return self.get_stats()

    def get_stats(self) -> Dict[str, Any]:
        manager = self.organisms
        return {
            "cycle": self.cycle,
            "organisms": manager.organism_count(),
            "food_items": self.food_count(),
            "total_food": self.food.total_food(),
            "average_ph": self.environment.average_ph(),
            "total_organisms_created": manager.total_organisms_created,
            "total_deaths": manager.total_deaths,
            "best_current_children": manager.best_current.children,
            "best_all_time_children": manager.best_all_time.children,
            "update_ms": manager.update_duration * 1000.0,
            "resolve_ms": manager.resolve_duration * 1000.0,
        }

    def print_stats(self) -> None:
        stats = self.get_stats()
        logger.info(
            "Cycle %d: %d organisms, %d food items, %d created, %d deaths, "
            "best children now/ever %d/%d, update %.2fms (resolve %.2fms)",
            stats["cycle"],
            stats["organisms"],
            stats["food_items"],
            stats["total_organisms_created"],
            stats["total_deaths"],
            stats["best_current_children"],
            stats["best_all_time_children"],
            stats["update_ms"],
            stats["resolve_ms"],
        )
        for ancestor_id, count in self.organisms.best_ancestors():
            logger.debug("Lineage %d: %d descendants", ancestor_id, count)

    def export_stats_json(self, filename: str) -> None:
        """Write the stats and a population snapshot as JSON."""
        payload = {
            "seed": self.seed,
            "config": self.config.to_dict(),
            "stats": self.get_stats(),
            "population": build_population_data(self.organisms).model_dump(),
        }
        with open(filename, "wb") as f:
            f.write(orjson.dumps(payload, option=orjson.OPT_INDENT_2))
        logger.info("Stats exported to %s", filename)

    def run_headless(
        self,
        cycles: int = 10000,
        stats_interval: int = 500,
        export_json: Optional[str] = None,
    ) -> None:
        """Run without visualization, logging stats every ``stats_interval`` cycles."""
        logger.info("=" * SEPARATOR_WIDTH)
        logger.info("HEADLESS PROTOZOA SIMULATION")
        logger.info("=" * SEPARATOR_WIDTH)
        logger.info("Running for %d cycles, stats every %d cycles", cycles, stats_interval)

        self.setup()
        for cycle in range(cycles):
            self.update()
            if stats_interval > 0 and cycle > 0 and cycle % stats_interval == 0:
                self.print_stats()

        logger.info("=" * SEPARATOR_WIDTH)
        logger.info("SIMULATION COMPLETE - Final Statistics")
        logger.info("=" * SEPARATOR_WIDTH)
        self.print_stats()

        best = self.organisms.best_all_time
        if not best.is_empty:
            logger.info(
                "All-time champion %d (ancestor %d) with %d children, best path %s:\n%s",
                best.id,
                best.ancestor_id,
                best.children,
                best.best_path,
                best.decision_tree,
            )

        if export_json:
            self.export_stats_json(export_json)
