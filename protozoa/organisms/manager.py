"""Organism population manager.

Owns every live organism and the occupancy index, and drives each tick:

1. Maybe spawn one random root organism.
2. Decide pass: every organism ages and evaluates its decision tree
   against the world as it stood at the start of the pass. Nothing shared
   is written, so the pass may run on a thread pool.
3. Resolve pass: in the same order, apply health upkeep, the chosen
   action, growth, champion tracking and death.
4. Rebuild the update order, appending organisms spawned this tick.

The manager also implements ``WorldAPI``: organisms query it while
deciding and it forwards food and pH mutations to its collaborators.
"""

import logging
import math
import random
import time
from concurrent.futures import ThreadPoolExecutor
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from protozoa.config.simulation_config import SimulationConfig
from protozoa.decisions.actions import Action
from protozoa.exceptions import SimulationError
from protozoa.organisms.api import EnvironmentService, FoodService
from protozoa.organisms.champions import ChampionTracker, LineageTracker, OrganismInfo
from protozoa.organisms.organism import Organism
from protozoa.spatial.grid import GridGeometry, Point
from protozoa.spatial.occupancy import EMPTY, OccupancyGrid
from protozoa.util.rng import require_rng_param

logger = logging.getLogger(__name__)

# Cells tried around a parent before a child spawn gives up
CHILD_SPAWN_ATTEMPTS = 4


class OrganismManager:
    """Population manager and world facade.

    Attributes:
        config: Simulation configuration
        geometry: Grid dimensions
        occupancy: Grid cell to organism id index
        lineage: Descendant counts per original ancestor
        champions: Current and all-time reproduction champions
        total_organisms_created: Organisms ever registered
        total_deaths: Organisms removed after their health ran out
        update_duration: Seconds spent in the last full tick
        decide_duration: Seconds spent in the last decide pass
        resolve_duration: Seconds spent in the last resolve pass
    """

    def __init__(
        self,
        config: SimulationConfig,
        rng: random.Random,
        food: FoodService,
        environment: EnvironmentService,
    ):
        self.config = config
        self._rng = require_rng_param(rng, "OrganismManager.__init__")
        self.food = food
        self.environment = environment
        self._geometry = GridGeometry(config.grid.width, config.grid.height)
        self.occupancy = OccupancyGrid(self._geometry)
        self.lineage = LineageTracker()
        self.champions = ChampionTracker()

        self._organisms: Dict[int, Organism] = {}
        self._order: List[int] = []
        self._new_ids: List[int] = []
        self._next_id = 0
        self._cycle = 0
        self._updating = False

        self.total_organisms_created = 0
        self.total_deaths = 0
        self.update_duration = 0.0
        self.decide_duration = 0.0
        self.resolve_duration = 0.0

        self._action_handlers: Dict[Action, Callable[[Organism], None]] = {
            Action.IDLE: self._apply_idle,
            Action.TURN_LEFT: self._apply_turn_left,
            Action.TURN_RIGHT: self._apply_turn_right,
            Action.MOVE: self._apply_move,
            Action.EAT: self._apply_eat,
            Action.ATTACK: self._apply_attack,
            Action.FEED: self._apply_feed,
            Action.SPAWN: self._apply_spawn,
        }

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def geometry(self) -> GridGeometry:
        return self._geometry

    @property
    def cycle(self) -> int:
        """Number of completed ticks."""
        return self._cycle

    @property
    def organisms(self) -> Mapping[int, Organism]:
        return MappingProxyType(self._organisms)

    @property
    def update_order(self) -> List[int]:
        return list(self._order)

    @property
    def best_current(self) -> OrganismInfo:
        return self.champions.best_current

    @property
    def best_all_time(self) -> OrganismInfo:
        return self.champions.best_all_time

    @property
    def lineage_counts(self) -> Dict[int, int]:
        return dict(self.lineage.counts)

    def get_organism(self, organism_id: int) -> Optional[Organism]:
        return self._organisms.get(organism_id)

    def organism_count(self) -> int:
        return len(self._organisms)

    def best_ancestors(self, threshold: Optional[int] = None) -> List[Tuple[int, int]]:
        """Ancestors whose lineage exceeds ``threshold`` descendants."""
        if threshold is None:
            threshold = self.config.organisms.descendants_report_threshold
        return self.lineage.best_ancestors(threshold)

    # ------------------------------------------------------------------
    # LookupAPI
    # ------------------------------------------------------------------

    def food_at(self, point: Point) -> Optional[float]:
        return self.food.food_at(point)

    def ph_at(self, point: Point) -> float:
        return self.environment.ph_at(point)

    def organism_at(self, point: Point) -> Optional[Organism]:
        organism_id = self.occupancy.get(point)
        if organism_id == EMPTY:
            return None
        return self._organisms.get(organism_id)

    def is_organism_at(self, point: Point) -> bool:
        return not self.occupancy.is_empty(point)

    def is_cell_empty(self, point: Point) -> bool:
        return self.occupancy.is_empty(point) and self.food.food_at(point) is None

    # ------------------------------------------------------------------
    # ChangeAPI
    # ------------------------------------------------------------------

    def add_food(self, point: Point, amount: float) -> float:
        return self.food.add_food(point, amount)

    def remove_food(self, point: Point, amount: float) -> float:
        return self.food.remove_food(point, amount)

    def change_ph(self, point: Point, delta: float) -> None:
        self.environment.change_ph(point, delta)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def update(self) -> None:
        """Run one complete tick."""
        start = time.perf_counter()
        self._updating = True
        try:
            self.champions.start_tick()
            if self._rng.random() < self.config.organisms.chance_to_add_organism:
                self.spawn_random_organism()

            decide_start = time.perf_counter()
            self._decide_all()
            resolve_start = time.perf_counter()
            self.decide_duration = resolve_start - decide_start

            for organism_id in self._order:
                organism = self._organisms.get(organism_id)
                # Killed earlier in this pass
                if organism is None:
                    continue
                self.resolve_organism(organism)
            self.resolve_duration = time.perf_counter() - resolve_start

            self._update_organism_order()
        finally:
            self._updating = False
        self._cycle += 1
        self.update_duration = time.perf_counter() - start

    def _decide_all(self) -> None:
        organisms = [self._organisms[organism_id] for organism_id in self._order]
        workers = self.config.organisms.decide_workers
        if workers > 1 and len(organisms) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                # Consume the iterator so worker exceptions propagate
                list(executor.map(self.decide_organism, organisms))
        else:
            for organism in organisms:
                self.decide_organism(organism)

    def decide_organism(self, organism: Organism) -> Action:
        organism.update_stats()
        return organism.decide(self, self.config.decisions.max_evaluation_steps)

    def resolve_organism(self, organism: Organism) -> None:
        """Apply one organism's upkeep and chosen action."""
        self._update_health(organism)
        self.apply_action(organism)
        organism.grow(self.config.organisms.growth_factor)
        self.champions.evaluate(organism, self._cycle)
        self._remove_if_dead(organism)

    def _update_health(self, organism: Organism) -> None:
        health = self.config.health
        organism.apply_health_change(health.change_per_cycle * organism.size)
        if organism.evaluated_this_cycle:
            organism.apply_health_change(
                health.change_per_decision_tree_node * organism.tree_size
            )

        location = organism.location
        if not organism.traits.tolerates_ph(self.environment.ph_at(location)):
            organism.apply_health_change(health.change_from_unhealthy_ph * organism.size)
        self.environment.change_ph(location, organism.traits.ph_effect)

    def _update_organism_order(self) -> None:
        self._order = [
            organism_id
            for organism_id in self._order + self._new_ids
            if organism_id in self._organisms
        ]
        self._new_ids = []

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def apply_action(self, organism: Organism) -> None:
        """Apply the organism's last chosen action; no-op before its first decision."""
        if organism.action is None:
            return
        self._action_handlers[organism.action](organism)

    def _ahead(self, organism: Organism) -> Point:
        return self._geometry.neighbor(organism.location, organism.direction)

    def _other_ahead(self, organism: Organism) -> Tuple[Point, Optional[Organism]]:
        """The cell ahead and its occupant, or None when that is ``organism`` itself.

        On a grid one cell wide or high the cell ahead wraps back onto the
        organism's own cell.
        """
        target_point = self._ahead(organism)
        target = self.organism_at(target_point)
        if target is organism:
            return target_point, None
        return target_point, target

    def _apply_idle(self, organism: Organism) -> None:
        organism.apply_health_change(self.config.health.change_from_being_idle * organism.size)

    def _apply_turn_left(self, organism: Organism) -> None:
        organism.apply_health_change(self.config.health.change_from_turning * organism.size)
        organism.direction = organism.direction.left()

    def _apply_turn_right(self, organism: Organism) -> None:
        organism.apply_health_change(self.config.health.change_from_turning * organism.size)
        organism.direction = organism.direction.right()

    def _apply_move(self, organism: Organism) -> None:
        organism.apply_health_change(self.config.health.change_from_moving * organism.size)
        target = self._ahead(organism)
        if self.is_cell_empty(target):
            self.occupancy.move(organism.location, target)
            organism.location = target

    def _apply_eat(self, organism: Organism) -> None:
        organism.apply_health_change(
            self.config.health.change_from_eating_attempt * organism.size
        )
        target = self._ahead(organism)
        available = self.food.food_at(target)
        if available is None:
            return
        eaten = self.food.remove_food(target, min(available, organism.size))
        organism.apply_health_change(eaten)

    def _apply_attack(self, organism: Organism) -> None:
        health = self.config.health
        organism.apply_health_change(health.change_from_attacking * organism.size)
        _, target = self._other_ahead(organism)
        if target is None:
            return
        target.apply_health_change(health.change_inflicted_by_attack * organism.size)
        self._remove_if_dead(target)

    def _apply_feed(self, organism: Organism) -> None:
        change = self.config.health.change_from_feeding * organism.size
        organism.apply_health_change(change)
        target_point, target = self._other_ahead(organism)
        if target is not None:
            target.apply_health_change(-change)
        elif target_point != organism.location:
            self.food.add_food(target_point, -change)

    def _apply_spawn(self, organism: Organism) -> None:
        if not organism.can_spawn():
            return
        if self.spawn_child_organism(organism) is None:
            return
        organism.apply_health_change(organism.health_cost_to_reproduce())
        organism.cycles_since_last_spawn = 0
        organism.children += 1

    # ------------------------------------------------------------------
    # Spawning and removal
    # ------------------------------------------------------------------

    def _next_organism_id(self) -> int:
        organism_id = self._next_id
        self._next_id += 1
        return organism_id

    def _at_capacity(self) -> bool:
        return len(self._organisms) >= self.config.organisms.max_organisms

    def spawn_random_organism(self) -> Optional[Organism]:
        """Try once to place a new root organism on a random empty cell.

        Returns:
            The new organism, or None if the population is full or the
            sampled cell was taken.
        """
        if self._at_capacity():
            return None
        point = self._geometry.random_point(self._rng)
        if not self.is_cell_empty(point):
            return None
        organism = Organism.random(self._next_organism_id(), point, self._rng, self.config)
        self.add_organism(organism)
        logger.debug("Spawned root organism %d at %s", organism.id, point)
        return organism

    def spawn_child_organism(self, parent: Organism) -> Optional[Organism]:
        """Place a child next to ``parent``, starting ahead and turning left.

        Neither the parent's health nor its counters are touched here. The
        population cap only limits random spawns, not children.

        Returns:
            The child, or None if no adjacent cell is empty.
        """
        direction = parent.direction
        for _ in range(CHILD_SPAWN_ATTEMPTS):
            point = self._geometry.neighbor(parent.location, direction)
            if self.is_cell_empty(point):
                child = Organism.child(
                    parent, self._next_organism_id(), point, self._rng, self.config
                )
                self.add_organism(child)
                logger.debug(
                    "Organism %d spawned child %d at %s (generation %d)",
                    parent.id,
                    child.id,
                    point,
                    child.generation,
                )
                return child
            direction = direction.left()
        return None

    def add_organism(self, organism: Organism) -> None:
        """Register an organism at its location.

        Organisms added during a tick join the update order at the next
        tick; organisms added between ticks join it immediately.

        Raises:
            SimulationError: If the id is taken, the location is off the
                grid, or another organism occupies it.
        """
        if organism.id in self._organisms:
            raise SimulationError(f"Organism id {organism.id} is already registered")
        if not self._geometry.contains(organism.location):
            raise SimulationError(f"Organism {organism.id} placed off-grid at {organism.location}")
        if not self.occupancy.is_empty(organism.location):
            raise SimulationError(
                f"Cell {organism.location} is already occupied by organism "
                f"{self.occupancy.get(organism.location)}"
            )
        self._organisms[organism.id] = organism
        self.occupancy.set(organism.location, organism.id)
        self._next_id = max(self._next_id, organism.id + 1)
        self.lineage.record(organism)
        self.total_organisms_created += 1
        if self._updating:
            self._new_ids.append(organism.id)
        else:
            self._order.append(organism.id)

    def _remove_if_dead(self, organism: Organism) -> bool:
        if organism.is_alive:
            return False
        del self._organisms[organism.id]
        self.occupancy.clear(organism.location)
        deposited = self.food.add_food(organism.location, float(math.floor(organism.size)))
        self.total_deaths += 1
        logger.debug(
            "Organism %d died at %s aged %d, leaving %.1f food",
            organism.id,
            organism.location,
            organism.age,
            deposited,
        )
        return True

    def verify_occupancy(self) -> None:
        """Check that the occupancy index matches organism locations.

        Raises:
            SimulationError: On any mismatch.
        """
        if self.occupancy.occupied_count() != len(self._organisms):
            raise SimulationError(
                f"Occupancy index holds {self.occupancy.occupied_count()} organisms, "
                f"expected {len(self._organisms)}"
            )
        for organism in self._organisms.values():
            occupant = self.occupancy.get(organism.location)
            if occupant != organism.id:
                raise SimulationError(
                    f"Organism {organism.id} at {organism.location} but index holds {occupant}"
                )
