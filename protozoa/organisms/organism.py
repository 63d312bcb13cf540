"""A single simulated organism."""

from __future__ import annotations

import random
from typing import List, Optional

from protozoa.config.simulation_config import SimulationConfig
from protozoa.decisions.actions import Action, Condition
from protozoa.decisions.evaluation import evaluate_tree
from protozoa.decisions.mutation import mutate_tree
from protozoa.decisions.node import DecisionNode, copy_tree
from protozoa.decisions.sequence import random_tree
from protozoa.organisms.api import LookupAPI
from protozoa.organisms.traits import OrganismTraits
from protozoa.spatial.grid import Direction, Point


class Organism:
    """An agent on the grid driven by its own decision tree.

    The organism manager owns every organism and is the only thing that
    changes health, position or direction (during the resolve pass). The
    organism itself only ages and evaluates its tree (during the decide
    pass), reading the world through a ``LookupAPI``.

    Attributes:
        id: Unique, never reused
        location: Current grid cell
        direction: Current heading
        health: Organism dies once this reaches 0 or below
        size: Grows up to ``traits.max_size``; scales most health changes
        age: Cycles lived
        children: Successful spawns
        cycles_since_last_spawn: Cooldown counter for reproduction
        cycles_since_evaluation: Decide passes since the tree was last walked
        evaluated_this_cycle: Whether the latest decide pass walked the tree
        original_ancestor_id: Root of this organism's lineage
        parent_id: Direct parent, None for root organisms
        generation: 0 for root organisms, parent's generation + 1 otherwise
        traits: Inherited parameters
        decision_tree: Root of the organism's private decision tree
        action: Action chosen by the latest decide pass
    """

    def __init__(
        self,
        organism_id: int,
        location: Point,
        direction: Direction,
        traits: OrganismTraits,
        decision_tree: DecisionNode,
        *,
        health: float,
        size: float,
        original_ancestor_id: Optional[int] = None,
        parent_id: Optional[int] = None,
        generation: int = 0,
    ):
        self.id = organism_id
        self.location = location
        self.direction = direction
        self.traits = traits
        self.decision_tree = decision_tree
        self.health = health
        self.size = size
        self.age = 0
        self.children = 0
        self.cycles_since_last_spawn = 0
        self.cycles_since_evaluation = 0
        self.evaluated_this_cycle = False
        self.original_ancestor_id = (
            organism_id if original_ancestor_id is None else original_ancestor_id
        )
        self.parent_id = parent_id
        self.generation = generation
        self.action: Optional[Action] = None
        self.tree_size = decision_tree.size()
        self._last_path: List[DecisionNode] = []

    @classmethod
    def random(
        cls,
        organism_id: int,
        location: Point,
        rng: random.Random,
        config: SimulationConfig,
    ) -> "Organism":
        """Create a root organism with random traits and a random tree."""
        traits = OrganismTraits.random(rng, config.organisms)
        return cls(
            organism_id,
            location,
            Direction.random(rng),
            traits,
            random_tree(rng, config.decisions),
            health=traits.spawn_health,
            size=config.organisms.initial_size,
        )

    @classmethod
    def child(
        cls,
        parent: "Organism",
        organism_id: int,
        location: Point,
        rng: random.Random,
        config: SimulationConfig,
    ) -> "Organism":
        """Create a child from ``parent``.

        The child gets mutated copies of the parent's traits and, with the
        parent's ``chance_to_mutate_decision_tree``, a mutated copy of its
        tree (otherwise a plain copy). The parent is left untouched.
        """
        traits = parent.traits.mutated(rng, config.organisms)
        if rng.random() < parent.traits.chance_to_mutate_decision_tree:
            tree = mutate_tree(parent.decision_tree, rng, config.decisions)
        else:
            tree = copy_tree(parent.decision_tree)
        return cls(
            organism_id,
            location,
            Direction.random(rng),
            traits,
            tree,
            health=parent.traits.spawn_health,
            size=config.organisms.initial_size,
            original_ancestor_id=parent.original_ancestor_id,
            parent_id=parent.id,
            generation=parent.generation + 1,
        )

    def __repr__(self) -> str:
        return (
            f"Organism(id={self.id}, location={self.location}, health={self.health:.2f}, "
            f"size={self.size:.2f}, children={self.children})"
        )

    @property
    def is_alive(self) -> bool:
        return self.health > 0.0

    def apply_health_change(self, amount: float) -> None:
        self.health += amount

    def grow(self, growth_factor: float) -> None:
        """Grow while health exceeds size, up to the trait maximum."""
        if self.health > self.size and self.size < self.traits.max_size:
            self.size = min(self.size + growth_factor, self.traits.max_size)

    def can_spawn(self) -> bool:
        return (
            self.cycles_since_last_spawn >= self.traits.min_cycles_between_spawns
            and self.health >= self.traits.min_health_to_spawn
        )

    def health_cost_to_reproduce(self) -> float:
        return -self.traits.spawn_health

    def is_related_to(self, other: "Organism") -> bool:
        return self.original_ancestor_id == other.original_ancestor_id

    # ------------------------------------------------------------------
    # Decide pass
    # ------------------------------------------------------------------

    def update_stats(self) -> None:
        self.age += 1
        self.cycles_since_last_spawn += 1
        self.cycles_since_evaluation += 1

    def needs_evaluation(self) -> bool:
        return (
            self.action is None
            or self.cycles_since_evaluation >= self.traits.cycles_to_evaluate_decision_tree
        )

    def decide(self, world: LookupAPI, max_steps: int) -> Action:
        """Choose this cycle's action.

        The tree is walked on the first decide pass and then once every
        ``cycles_to_evaluate_decision_tree`` passes; in between the previous
        action is repeated and the previous path stays flagged.
        """
        if not self.needs_evaluation():
            self.evaluated_this_cycle = False
            return self.action
        self.evaluated_this_cycle = True
        self.cycles_since_evaluation = 0
        for node in self._last_path:
            node.used_last_cycle = False
        self.action, self._last_path = evaluate_tree(
            self.decision_tree,
            lambda condition: self.check_condition(condition, world),
            self.health,
            max_steps,
        )
        return self.action

    def check_condition(self, condition: Condition, world: LookupAPI) -> bool:
        """Answer a decision tree condition against the current world."""
        geometry = world.geometry
        ahead = geometry.neighbor(self.location, self.direction)

        if condition is Condition.CAN_MOVE:
            return world.is_cell_empty(ahead)
        if condition is Condition.IS_FOOD_AHEAD:
            return world.food_at(ahead) is not None
        if condition is Condition.IS_FOOD_LEFT:
            left = geometry.neighbor(self.location, self.direction.left())
            return world.food_at(left) is not None
        if condition is Condition.IS_FOOD_RIGHT:
            right = geometry.neighbor(self.location, self.direction.right())
            return world.food_at(right) is not None
        if condition is Condition.IS_ORGANISM_AHEAD:
            return world.is_organism_at(ahead)
        if condition is Condition.IS_BIGGER_ORGANISM_AHEAD:
            other = world.organism_at(ahead)
            return other is not None and other.size > self.size
        if condition is Condition.IS_RELATED_ORGANISM_AHEAD:
            other = world.organism_at(ahead)
            return other is not None and self.is_related_to(other)
        if condition is Condition.IS_HEALTH_ABOVE_HALF_SIZE:
            return self.health > self.size / 2.0
        if condition is Condition.IS_PH_HEALTHY:
            return self.traits.tolerates_ph(world.ph_at(self.location))
        raise ValueError(f"Unsupported condition: {condition}")
