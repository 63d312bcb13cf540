"""Reference food and pH collaborators for headless runs."""

from protozoa.world.environment import EnvironmentManager
from protozoa.world.food import FoodManager

__all__ = ["EnvironmentManager", "FoodManager"]
