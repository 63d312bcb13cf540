"""Lineage counting and reproduction champions.

The organism manager feeds every registration into a ``LineageTracker``
and every resolved organism into a ``ChampionTracker``. Both only keep
plain snapshots so inspection never holds on to live organisms.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Tuple

from protozoa.decisions.node import best_path, format_tree
from protozoa.decisions.sequence import format_sequence

if TYPE_CHECKING:
    from protozoa.organisms.organism import Organism

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrganismInfo:
    """Snapshot of an organism's stats at the moment it was recorded.

    Attributes:
        id: Organism id, -1 for the empty sentinel
        ancestor_id: Original ancestor of the organism's lineage
        size: Size at snapshot time
        health: Health at snapshot time
        age: Cycles lived
        children: Successful spawns, the score champions are ranked by
        decision_tree: Formatted decision tree with per-node uses and average
            health
        best_path: Root-to-leaf path with the best average health, dash joined
        tree_score: Average health over every walk of the tree
        tree_evaluations: Number of times the tree was walked
        traits: Trait values
    """

    id: int = -1
    ancestor_id: int = -1
    size: float = 0.0
    health: float = 0.0
    age: int = 0
    children: int = 0
    decision_tree: str = ""
    best_path: str = ""
    tree_score: float = 0.0
    tree_evaluations: int = 0
    traits: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> OrganismInfo:
        return cls()

    @classmethod
    def from_organism(cls, organism: Organism) -> OrganismInfo:
        tree = organism.decision_tree
        return cls(
            id=organism.id,
            ancestor_id=organism.original_ancestor_id,
            size=organism.size,
            health=organism.health,
            age=organism.age,
            children=organism.children,
            decision_tree=format_tree(tree, with_stats=True),
            best_path=format_sequence([node.kind for node in best_path(tree)]),
            tree_score=tree.avg_health_when_top_level,
            tree_evaluations=tree.top_level_uses,
            traits=organism.traits.to_dict(),
        )

    @property
    def is_empty(self) -> bool:
        return self.id < 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ChampionTracker:
    """Tracks the highest-reproduction organism this tick and of all time.

    Only strict improvements replace a champion, so on ties the organism
    recorded first keeps the title.

    Attributes:
        best_current: Champion of the current tick, reset every tick
        best_all_time: Champion across the whole run
    """

    def __init__(self):
        self.best_current = OrganismInfo.empty()
        self.best_all_time = OrganismInfo.empty()

    def start_tick(self) -> None:
        self.best_current = OrganismInfo.empty()

    def evaluate(self, organism: Organism, cycle: int) -> bool:
        """Consider an organism for the champion titles.

        Returns:
            True if the organism became the new all-time champion
        """
        if organism.children <= self.best_current.children:
            return False
        self.best_current = OrganismInfo.from_organism(organism)
        if self.best_current.children <= self.best_all_time.children:
            return False
        self.best_all_time = self.best_current
        logger.info(
            "Cycle %d: new all-time champion organism %d with %d children (ancestor %d)",
            cycle,
            organism.id,
            organism.children,
            organism.original_ancestor_id,
        )
        return True


class LineageTracker:
    """Counts descendants per original ancestor.

    Root organisms are their own ancestor and are not counted against
    themselves; every child increments its lineage's count.
    """

    def __init__(self):
        self.counts: Dict[int, int] = defaultdict(int)

    def record(self, organism: Organism) -> None:
        if organism.original_ancestor_id != organism.id:
            self.counts[organism.original_ancestor_id] += 1

    def descendants_of(self, ancestor_id: int) -> int:
        return self.counts.get(ancestor_id, 0)

    def best_ancestors(self, threshold: int) -> List[Tuple[int, int]]:
        """Ancestors with more than ``threshold`` descendants, largest first.

        Ties are ordered by ancestor id.
        """
        ranked = [(ancestor, count) for ancestor, count in self.counts.items() if count > threshold]
        ranked.sort(key=lambda item: (-item[1], item[0]))
        return ranked
