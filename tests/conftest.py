"""Pytest configuration and fixtures for protozoa tests."""

import functools
import random
from typing import Callable, Optional, Sequence

import pytest

from protozoa.config import SimulationConfig
from protozoa.decisions import Action, NodeKind, tree_from_sequence
from protozoa.organisms import Organism, OrganismManager, OrganismTraits
from protozoa.simulation import Simulation
from protozoa.spatial import Direction, Point
from protozoa.world import EnvironmentManager, FoodManager


def small_config(**sections) -> SimulationConfig:
    """A 10x10 world with no background spawning and a uniform pH of 5."""
    overrides = {
        "grid": {"width": 10, "height": 10},
        "food": {"initial_food": 0, "chance_to_add_food_item": 0.0},
        "ph": {"initial_ph": 5.0, "initial_ph_spread": 0.0},
        "organisms": {"initial_organisms": 0, "chance_to_add_organism": 0.0},
    }
    for section, values in sections.items():
        overrides.setdefault(section, {}).update(values)
    return SimulationConfig.from_dict(overrides)


def make_traits(**overrides) -> OrganismTraits:
    """Traits that tolerate any pH, leave pH alone and never mutate trees."""
    values = dict(
        max_size=10.0,
        spawn_health=1.0,
        min_health_to_spawn=1.0,
        min_cycles_between_spawns=0,
        chance_to_mutate_decision_tree=0.0,
        cycles_to_evaluate_decision_tree=1,
        ph_tolerance_min=0.0,
        ph_tolerance_range=10.0,
        ph_effect=0.0,
    )
    values.update(overrides)
    return OrganismTraits(**values)


def place_organism(
    manager: OrganismManager,
    x: int,
    y: int,
    *,
    sequence: Sequence[NodeKind] = (Action.IDLE,),
    direction: Direction = Direction.RIGHT,
    health: float = 1.0,
    size: float = 1.0,
    organism_id: Optional[int] = None,
    ancestor_id: Optional[int] = None,
    **trait_overrides,
) -> Organism:
    """Register an organism with a fixed tree at a given cell."""
    if organism_id is None:
        organism_id = manager.total_organisms_created + 100
    organism = Organism(
        organism_id,
        Point(x, y),
        direction,
        make_traits(**trait_overrides),
        tree_from_sequence(list(sequence)),
        health=health,
        size=size,
        original_ancestor_id=ancestor_id,
    )
    manager.add_organism(organism)
    return organism


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def config():
    return small_config()


@pytest.fixture
def make_config() -> Callable[..., SimulationConfig]:
    """``small_config`` with per-section overrides, e.g. ``make_config(grid={"width": 3})``."""
    return small_config


@pytest.fixture
def traits_factory() -> Callable[..., OrganismTraits]:
    return make_traits


@pytest.fixture
def make_manager(seeded_rng) -> Callable[..., OrganismManager]:
    """Build a manager over a ``small_config`` with overrides."""

    def _make(**sections) -> OrganismManager:
        config = small_config(**sections)
        food = FoodManager(config.grid, config.food, seeded_rng)
        environment = EnvironmentManager(config.grid, config.ph, seeded_rng)
        return OrganismManager(config, seeded_rng, food, environment)

    return _make


@pytest.fixture
def manager(make_manager):
    return make_manager()


@pytest.fixture
def make_organism(manager) -> Callable[..., Organism]:
    """``place_organism`` bound to the ``manager`` fixture."""
    return functools.partial(place_organism, manager)


@pytest.fixture
def organism_placer() -> Callable[..., Organism]:
    """``place_organism`` for managers built with ``make_manager``."""
    return place_organism


@pytest.fixture
def simulation():
    """A small, busy world for end-to-end runs."""
    config = small_config(
        grid={"width": 20, "height": 20},
        food={"initial_food": 60, "chance_to_add_food_item": 0.5},
        organisms={"initial_organisms": 25, "chance_to_add_organism": 0.2},
    )
    return Simulation(config=config, seed=42)
