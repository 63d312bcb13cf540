"""In-memory food storage keyed by grid cell."""

import logging
import random
from typing import Dict, Optional, Set

from protozoa.config.simulation_config import FoodConfig, GridConfig
from protozoa.spatial.grid import GridGeometry, Point
from protozoa.util.rng import require_rng_param

logger = logging.getLogger(__name__)


class FoodManager:
    """Food items, at most one per cell.

    Attributes:
        items: Food value per cell
        updated_points: Cells changed since ``clear_updated_points``
    """

    def __init__(self, grid: GridConfig, config: FoodConfig, rng: random.Random):
        self.config = config
        self.geometry = GridGeometry(grid.width, grid.height)
        self._rng = require_rng_param(rng, "FoodManager.__init__")
        self.items: Dict[Point, float] = {}
        self.updated_points: Set[Point] = set()

    def initialize(self, count: Optional[int] = None) -> None:
        """Make ``count`` placement attempts (default: ``initial_food``)."""
        if count is None:
            count = self.config.initial_food
        for _ in range(count):
            self.add_random_food_item()
        logger.debug("Initialized %d food items", len(self.items))

    def update(self) -> None:
        if self._rng.random() < self.config.chance_to_add_food_item:
            self.add_random_food_item()

    def add_random_food_item(self) -> float:
        """Add food of random value at a random cell; returns the amount added."""
        point = self.geometry.random_point(self._rng)
        value = self._rng.uniform(self.config.min_food_value, self.config.max_food_value)
        return self.add_food(point, value)

    def food_count(self) -> int:
        return len(self.items)

    def total_food(self) -> float:
        return sum(self.items.values())

    def food_at(self, point: Point) -> Optional[float]:
        return self.items.get(point)

    def add_food(self, point: Point, amount: float) -> float:
        """Add food at a cell, clamped to ``max_food_value``.

        Returns:
            The amount actually added (0 for non-positive amounts)
        """
        if amount <= 0:
            return 0.0
        self.updated_points.add(point)
        original = self.items.get(point, 0.0)
        value = min(original + amount, self.config.max_food_value)
        self.items[point] = value
        return value - original

    def remove_food(self, point: Point, amount: float) -> float:
        """Take up to ``amount`` food from a cell.

        The item disappears once what is left falls below ``min_food_value``.

        Returns:
            The amount actually removed
        """
        if amount <= 0:
            return 0.0
        original = self.items.get(point)
        if original is None:
            return 0.0
        self.updated_points.add(point)
        remaining = original - amount
        if remaining < self.config.min_food_value:
            del self.items[point]
        else:
            self.items[point] = remaining
        return min(amount, original)

    def clear_updated_points(self) -> None:
        self.updated_points = set()
