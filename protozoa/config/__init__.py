"""Configuration package for the protozoa simulation.

Default values live in plain constant modules grouped by concern
(``world``, ``organisms``, ``decisions``). ``SimulationConfig`` bundles
them into an explicit value that is passed to every component.
"""

from protozoa.config.simulation_config import (
    DecisionTreeConfig,
    FoodConfig,
    GridConfig,
    HealthConfig,
    OrganismConfig,
    PhConfig,
    SimulationConfig,
)

__all__ = [
    "DecisionTreeConfig",
    "FoodConfig",
    "GridConfig",
    "HealthConfig",
    "OrganismConfig",
    "PhConfig",
    "SimulationConfig",
]
