"""Flat pre-order encoding of decision trees.

A tree is written as a list of node kinds: a condition is followed by the
full encoding of its yes branch and then the full encoding of its no
branch; an action stands alone. Because a strict binary tree always has
exactly one more action than it has conditions, the yes branch ends at the
first point where the running count of actions minus conditions reaches
+1, and whatever follows is the no branch.
"""

import logging
import random
from typing import List, Sequence

from protozoa.config.simulation_config import DecisionTreeConfig
from protozoa.decisions.actions import (
    NodeKind,
    is_action,
    is_condition,
    random_action,
    random_condition,
)
from protozoa.decisions.node import DecisionNode, assign_ids
from protozoa.exceptions import MalformedSequenceError

logger = logging.getLogger(__name__)

NodeSequence = List[NodeKind]


def tree_to_sequence(root: DecisionNode) -> NodeSequence:
    """Encode a tree as its pre-order list of node kinds."""
    return [node.kind for node in root.iter_nodes()]


def tree_from_sequence(sequence: Sequence[NodeKind]) -> DecisionNode:
    """Rebuild a tree from a pre-order sequence and number its nodes.

    Raises:
        MalformedSequenceError: If the sequence is empty, contains something
            other than actions and conditions, never balances, or carries
            trailing tokens beyond one complete tree.
    """
    if not sequence:
        raise MalformedSequenceError("Cannot build a decision tree from an empty sequence")
    for token in sequence:
        if not (is_action(token) or is_condition(token)):
            raise MalformedSequenceError(
                f"Unexpected token {token!r} in sequence {format_sequence(sequence)}"
            )

    root = _build(sequence, 0, len(sequence), sequence)
    size = root.size()
    if size != len(sequence):
        raise MalformedSequenceError(
            f"Sequence has {len(sequence) - size} trailing tokens: {format_sequence(sequence)}"
        )
    return assign_ids(root)


def _build(
    sequence: Sequence[NodeKind], start: int, end: int, full: Sequence[NodeKind]
) -> DecisionNode:
    if start >= end:
        raise MalformedSequenceError(
            f"Condition is missing a branch in sequence {format_sequence(full)}"
        )
    kind = sequence[start]
    if is_action(kind):
        return DecisionNode(kind)

    index = start + 1
    actions_minus_conditions = 0
    while actions_minus_conditions < 1:
        if index >= end:
            raise MalformedSequenceError(
                f"Sequence never balances: {format_sequence(full)}"
            )
        actions_minus_conditions += 1 if is_action(sequence[index]) else -1
        index += 1

    yes = _build(sequence, start + 1, index, full)
    no = _build(sequence, index, end, full)
    return DecisionNode(kind, yes, no)


def random_sequence(rng: random.Random, max_size: int, chance_of_action_leaf: float) -> NodeSequence:
    """Generate a random, well-formed sequence of at most ``max_size`` nodes.

    Each (sub)tree is an action leaf with probability
    ``chance_of_action_leaf``; otherwise it is a random condition whose two
    branches are generated recursively from what is left of the budget.
    A budget below 3 nodes always yields a leaf.
    """
    if max_size < 3 or rng.random() < chance_of_action_leaf:
        return [random_action(rng)]
    yes = random_sequence(rng, (max_size - 1) // 2, chance_of_action_leaf)
    no = random_sequence(rng, max_size - 1 - len(yes), chance_of_action_leaf)
    return [random_condition(rng), *yes, *no]


def random_tree(rng: random.Random, config: DecisionTreeConfig) -> DecisionNode:
    """Build a fresh random tree for a root-spawned organism."""
    budget = min(config.max_random_tree_size, config.max_tree_size)
    sequence = random_sequence(rng, budget, config.chance_of_action_leaf)
    logger.debug("Generated random decision tree %s", format_sequence(sequence))
    return tree_from_sequence(sequence)


def format_sequence(sequence: Sequence[object]) -> str:
    """Dash-separated display form, e.g. ``C_FoodAhead-A_Eat-A_Move``."""
    return "-".join(getattr(token, "value", repr(token)) for token in sequence)
