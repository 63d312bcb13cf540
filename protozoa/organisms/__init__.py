"""Organisms and the population manager that schedules them.

- traits: inherited numeric parameters and their mutation
- organism: the Organism entity (decide-side behaviour)
- api: world facade and collaborator protocols
- champions: lineage counts and reproduction champions
- manager: OrganismManager, the decide/resolve tick loop
"""

from protozoa.organisms.api import (
    ChangeAPI,
    EnvironmentService,
    FoodService,
    LookupAPI,
    WorldAPI,
)
from protozoa.organisms.champions import ChampionTracker, LineageTracker, OrganismInfo
from protozoa.organisms.manager import OrganismManager
from protozoa.organisms.organism import Organism
from protozoa.organisms.traits import OrganismTraits, TraitSpec, organism_trait_specs

__all__ = [
    "ChampionTracker",
    "ChangeAPI",
    "EnvironmentService",
    "FoodService",
    "LineageTracker",
    "LookupAPI",
    "Organism",
    "OrganismInfo",
    "OrganismManager",
    "OrganismTraits",
    "TraitSpec",
    "WorldAPI",
    "organism_trait_specs",
]
