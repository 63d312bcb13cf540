"""Evolvable decision trees that choose an organism's action each cycle.

- actions: Action and Condition vocabularies
- node: DecisionNode plus copy, renumbering, scoring and display helpers
- sequence: flat pre-order encoding, decoding and random generation
- mutation: copy-then-mutate structural/value changes
- evaluation: walking a tree to an action
"""

from protozoa.decisions.actions import ACTIONS, CONDITIONS, Action, Condition, NodeKind
from protozoa.decisions.evaluation import evaluate_tree
from protozoa.decisions.mutation import mutate_tree
from protozoa.decisions.node import (
    DecisionNode,
    assign_ids,
    best_path,
    copy_tree,
    format_tree,
)
from protozoa.decisions.sequence import (
    format_sequence,
    random_sequence,
    random_tree,
    tree_from_sequence,
    tree_to_sequence,
)

__all__ = [
    "ACTIONS",
    "CONDITIONS",
    "Action",
    "Condition",
    "DecisionNode",
    "NodeKind",
    "assign_ids",
    "best_path",
    "copy_tree",
    "evaluate_tree",
    "format_sequence",
    "format_tree",
    "mutate_tree",
    "random_sequence",
    "random_tree",
    "tree_from_sequence",
    "tree_to_sequence",
]
