"""In-memory pH grid."""

import logging
import random
from typing import List, Set

from protozoa.config.simulation_config import GridConfig, PhConfig
from protozoa.spatial.grid import Direction, GridGeometry, Point
from protozoa.util.rng import require_rng_param

logger = logging.getLogger(__name__)


class EnvironmentManager:
    """Per-cell pH levels, clamped to the configured bounds.

    Attributes:
        ph_map: Dense column-major grid (``ph_map[x][y]``)
        updated_points: Cells changed since ``clear_updated_points``
    """

    def __init__(self, grid: GridConfig, config: PhConfig, rng: random.Random):
        self.config = config
        self.geometry = GridGeometry(grid.width, grid.height)
        rng = require_rng_param(rng, "EnvironmentManager.__init__")
        low = max(config.min_ph, config.initial_ph - config.initial_ph_spread)
        high = min(config.max_ph, config.initial_ph + config.initial_ph_spread)
        self.ph_map: List[List[float]] = [
            [rng.uniform(low, high) for _ in range(grid.height)] for _ in range(grid.width)
        ]
        self.updated_points: Set[Point] = set()
        logger.debug("Initialized pH grid in [%.2f, %.2f]", low, high)

    def ph_at(self, point: Point) -> float:
        return self.ph_map[point.x][point.y]

    def change_ph(self, point: Point, delta: float) -> None:
        if delta == 0:
            return
        self.ph_map[point.x][point.y] = self._clamp(self.ph_map[point.x][point.y] + delta)
        self.updated_points.add(point)

    def set_ph(self, point: Point, value: float) -> None:
        self.ph_map[point.x][point.y] = self._clamp(value)
        self.updated_points.add(point)

    def average_ph(self) -> float:
        total = sum(sum(column) for column in self.ph_map)
        return total / self.geometry.cell_count()

    def update(self) -> None:
        """Diffuse pH towards each cell's neighbour mean."""
        factor = self.config.diffuse_factor
        if factor <= 0:
            return
        previous = [column[:] for column in self.ph_map]
        for point in self.geometry.iter_points():
            neighbours = [
                self.geometry.neighbor(point, direction) for direction in Direction
            ]
            mean = sum(previous[n.x][n.y] for n in neighbours) / len(neighbours)
            current = previous[point.x][point.y]
            self.ph_map[point.x][point.y] = current + (mean - current) * factor

    def clear_updated_points(self) -> None:
        self.updated_points = set()

    def _clamp(self, value: float) -> float:
        return max(self.config.min_ph, min(self.config.max_ph, value))
