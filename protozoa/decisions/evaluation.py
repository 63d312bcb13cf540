"""Walking a decision tree to choose an action."""

from typing import Callable, List, Tuple

from protozoa.decisions.actions import Action, Condition
from protozoa.decisions.node import DecisionNode
from protozoa.exceptions import EvaluationStepLimitError, IncompleteConditionError

ConditionCheck = Callable[[Condition], bool]


def evaluate_tree(
    root: DecisionNode,
    check: ConditionCheck,
    health: float,
    max_steps: int,
) -> Tuple[Action, List[DecisionNode]]:
    """Follow conditions from ``root`` down to an action leaf.

    Every node visited records a use at ``health`` and is flagged as used
    this cycle; the root also records a top-level use. The caller is
    responsible for clearing the flags of the previous path.

    Args:
        root: Tree to evaluate
        check: Answers a condition against the current world state
        health: Organism health, folded into the nodes' running averages
        max_steps: Hard cap on nodes visited

    Returns:
        The chosen action and the visited path, root first.

    Raises:
        EvaluationStepLimitError: If more than ``max_steps`` nodes are visited.
        IncompleteConditionError: If a condition is missing a child.
    """
    root.record_top_level_use(health)
    path: List[DecisionNode] = []
    node = root
    while True:
        if len(path) >= max_steps:
            raise EvaluationStepLimitError(
                f"Decision tree evaluation exceeded {max_steps} steps at node {node.id}"
            )
        node.record_use(health)
        path.append(node)
        if node.is_action:
            return node.kind, path
        if node.yes is None or node.no is None:
            raise IncompleteConditionError(
                f"Condition node {node.id} ({node.kind.value}) is missing a child"
            )
        node = node.yes if check(node.kind) else node.no
