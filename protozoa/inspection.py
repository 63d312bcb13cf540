"""Read-only inspection payloads.

These pydantic models are what a display layer (or the JSON export) sees
of the population: per-organism stats, traits and decision trees, the
reproduction champions and lineage counts. Building them never mutates
the manager.
"""

from typing import TYPE_CHECKING, List, Optional

from pydantic import BaseModel

from protozoa.decisions.node import best_path, format_tree
from protozoa.decisions.sequence import format_sequence, tree_to_sequence
from protozoa.organisms.champions import OrganismInfo
from protozoa.organisms.traits import OrganismTraits

if TYPE_CHECKING:
    from protozoa.organisms.manager import OrganismManager
    from protozoa.organisms.organism import Organism


class TraitsData(BaseModel):
    """Inherited trait values of one organism."""

    max_size: float
    spawn_health: float
    min_health_to_spawn: float
    min_cycles_between_spawns: int
    chance_to_mutate_decision_tree: float
    cycles_to_evaluate_decision_tree: int
    ph_tolerance_min: float
    ph_tolerance_range: float
    ph_tolerance_max: float
    ph_effect: float


class OrganismData(BaseModel):
    """Stats of a live organism."""

    id: int
    x: int
    y: int
    direction: str
    health: float
    size: float
    age: int
    children: int
    cycles_since_last_spawn: int
    original_ancestor_id: int
    parent_id: Optional[int] = None
    generation: int
    action: Optional[str] = None
    tree_size: int
    decision_sequence: str
    decision_tree: str
    best_path: str
    traits: TraitsData


class ChampionData(BaseModel):
    """Snapshot of a reproduction champion; ``id`` is -1 when none exists yet."""

    id: int
    ancestor_id: int
    size: float
    health: float
    age: int
    children: int
    decision_tree: str
    best_path: str = ""
    tree_score: float = 0.0
    tree_evaluations: int = 0
    traits: Optional[TraitsData] = None


class LineageData(BaseModel):
    ancestor_id: int
    descendants: int


class PopulationData(BaseModel):
    """Population-level view used by headless stats export."""

    cycle: int
    organism_count: int
    total_organisms_created: int
    total_deaths: int
    best_current: ChampionData
    best_all_time: ChampionData
    lineages: List[LineageData]
    organisms: List[OrganismData] = []


def build_traits_data(traits: OrganismTraits) -> TraitsData:
    return TraitsData(**traits.to_dict())


def build_organism_data(organism: "Organism") -> OrganismData:
    return OrganismData(
        id=organism.id,
        x=organism.location.x,
        y=organism.location.y,
        direction=organism.direction.name,
        health=organism.health,
        size=organism.size,
        age=organism.age,
        children=organism.children,
        cycles_since_last_spawn=organism.cycles_since_last_spawn,
        original_ancestor_id=organism.original_ancestor_id,
        parent_id=organism.parent_id,
        generation=organism.generation,
        action=organism.action.value if organism.action is not None else None,
        tree_size=organism.tree_size,
        decision_sequence=format_sequence(tree_to_sequence(organism.decision_tree)),
        decision_tree=format_tree(organism.decision_tree),
        best_path=format_sequence([node.kind for node in best_path(organism.decision_tree)]),
        traits=build_traits_data(organism.traits),
    )


def build_champion_data(info: OrganismInfo) -> ChampionData:
    return ChampionData(
        id=info.id,
        ancestor_id=info.ancestor_id,
        size=info.size,
        health=info.health,
        age=info.age,
        children=info.children,
        decision_tree=info.decision_tree,
        best_path=info.best_path,
        tree_score=info.tree_score,
        tree_evaluations=info.tree_evaluations,
        traits=TraitsData(**info.traits) if info.traits else None,
    )


def build_population_data(
    manager: "OrganismManager", include_organisms: bool = False
) -> PopulationData:
    """Collect a population snapshot.

    Args:
        manager: Population manager to inspect
        include_organisms: Also list every live organism, in update order

    Returns:
        PopulationData with lineages sorted by descendant count
    """
    lineages = sorted(
        manager.lineage_counts.items(), key=lambda item: (-item[1], item[0])
    )
    organisms: List[OrganismData] = []
    if include_organisms:
        for organism_id in manager.update_order:
            organism = manager.get_organism(organism_id)
            if organism is not None:
                organisms.append(build_organism_data(organism))
    return PopulationData(
        cycle=manager.cycle,
        organism_count=manager.organism_count(),
        total_organisms_created=manager.total_organisms_created,
        total_deaths=manager.total_deaths,
        best_current=build_champion_data(manager.best_current),
        best_all_time=build_champion_data(manager.best_all_time),
        lineages=[
            LineageData(ancestor_id=ancestor_id, descendants=count)
            for ancestor_id, count in lineages
        ],
        organisms=organisms,
    )
