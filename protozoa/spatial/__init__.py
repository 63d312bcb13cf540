"""Grid geometry and the organism occupancy index."""

from protozoa.spatial.grid import Direction, GridGeometry, Point
from protozoa.spatial.occupancy import EMPTY, OccupancyGrid

__all__ = ["Direction", "EMPTY", "GridGeometry", "OccupancyGrid", "Point"]
