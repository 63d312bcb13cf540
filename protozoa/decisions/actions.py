"""Action and condition vocabularies for organism decision trees.

Actions are leaves: the behavior an organism performs this cycle.
Conditions are branches: a yes/no question asked about the world in front
of the organism. Enum values double as the compact display names used in
encoded sequences and tree printouts.
"""

import random
from enum import Enum
from typing import Tuple, Union


class Action(Enum):
    """Concrete organism behaviors."""

    EAT = "A_Eat"
    IDLE = "A_Idle"
    MOVE = "A_Move"
    TURN_LEFT = "A_Left"
    TURN_RIGHT = "A_Right"
    ATTACK = "A_Attack"
    FEED = "A_Feed"
    SPAWN = "A_Spawn"


class Condition(Enum):
    """Boolean predicates evaluated against the organism's surroundings."""

    CAN_MOVE = "C_Move"
    IS_FOOD_AHEAD = "C_FoodAhead"
    IS_FOOD_LEFT = "C_FoodLeft"
    IS_FOOD_RIGHT = "C_FoodRight"
    IS_ORGANISM_AHEAD = "C_OrgAhead"
    IS_BIGGER_ORGANISM_AHEAD = "C_BiggerOrgAhead"
    IS_RELATED_ORGANISM_AHEAD = "C_RelatedOrgAhead"
    IS_HEALTH_ABOVE_HALF_SIZE = "C_HealthAboveHalf"
    IS_PH_HEALTHY = "C_HealthyPh"


NodeKind = Union[Action, Condition]

ACTIONS: Tuple[Action, ...] = tuple(Action)
CONDITIONS: Tuple[Condition, ...] = tuple(Condition)


def is_action(kind: object) -> bool:
    return isinstance(kind, Action)


def is_condition(kind: object) -> bool:
    return isinstance(kind, Condition)


def random_action(rng: random.Random) -> Action:
    return rng.choice(ACTIONS)


def random_condition(rng: random.Random) -> Condition:
    return rng.choice(CONDITIONS)


def different_action(rng: random.Random, current: Action) -> Action:
    """A uniformly random action other than ``current``."""
    return rng.choice([action for action in ACTIONS if action is not current])


def different_condition(rng: random.Random, current: Condition) -> Condition:
    """A uniformly random condition other than ``current``."""
    return rng.choice([condition for condition in CONDITIONS if condition is not current])
