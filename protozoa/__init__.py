"""Protozoa: organisms on a grid, each driven by an evolvable decision tree.

Subpackages:
- config: explicit simulation configuration
- decisions: decision tree nodes, encoding, mutation and evaluation
- organisms: organism entity and the population manager
- spatial: grid geometry and occupancy index
- world: reference food and pH collaborators
"""

from protozoa.config import SimulationConfig
from protozoa.exceptions import (
    ConfigurationError,
    DecisionTreeError,
    ProtozoaError,
    SimulationError,
)
from protozoa.organisms import Organism, OrganismManager
from protozoa.simulation import Simulation

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "DecisionTreeError",
    "Organism",
    "OrganismManager",
    "ProtozoaError",
    "Simulation",
    "SimulationConfig",
    "SimulationError",
]
