"""Structural and value mutation of decision trees.

Mutation never touches the tree it is given: it deep copies it first, so a
parent's tree is unchanged by its child's mutation. Any node may be the
target, which lets conditions deep in a tree change or collapse and gives
trees a variable depth across generations. Growth is capped by
``DecisionTreeConfig.max_tree_size``.
"""

import logging
import random

from protozoa.config.simulation_config import DecisionTreeConfig
from protozoa.decisions.actions import (
    different_action,
    different_condition,
    random_action,
    random_condition,
)
from protozoa.decisions.node import DecisionNode, assign_ids, copy_tree

logger = logging.getLogger(__name__)


def mutate_tree(
    original: DecisionNode, rng: random.Random, config: DecisionTreeConfig
) -> DecisionNode:
    """Return a mutated copy of ``original``.

    One node is picked uniformly from the whole tree:

    - An action becomes a condition over a new random action and the
      original action (grows the tree by two nodes) when a coin flip allows
      it and the result stays within the size cap; otherwise it is swapped
      for a different action.
    - A condition collapses into a single random action (dropping both
      branches) on a coin flip; otherwise it is swapped for a different
      condition and keeps its branches.

    Usage statistics on the mutated node and the root are cleared and the
    copy is renumbered in order.
    """
    mutated = copy_tree(original)
    nodes = list(mutated.iter_nodes())
    target = rng.choice(nodes)
    size = len(nodes)

    if target.is_action:
        grow = rng.random() < config.chance_to_grow_action
        if grow and size + 2 <= config.max_tree_size:
            kept = DecisionNode(target.kind)
            added = DecisionNode(random_action(rng))
            if rng.random() < 0.5:
                yes, no = added, kept
            else:
                yes, no = kept, added
            target.become_condition(random_condition(rng), yes, no)
            change = "grew action into condition"
        else:
            target.become_action(different_action(rng, target.kind))
            change = "changed action"
    elif rng.random() < config.chance_to_collapse_condition:
        target.become_action(random_action(rng))
        change = "collapsed condition"
    else:
        target.become_condition(different_condition(rng, target.kind), target.yes, target.no)
        change = "changed condition"

    target.reset_stats()
    mutated.reset_stats()
    assign_ids(mutated)
    logger.debug(
        "Mutated decision tree node %d (%s): size %d -> %d",
        target.id,
        change,
        size,
        mutated.size(),
    )
    return mutated
