"""Decision tree nodes.

A tree is a strict binary tree: every condition owns exactly two children
(``yes`` and ``no``) and every action is a leaf. Nodes also carry usage
statistics so inspection can show which paths an organism actually takes
and how healthy it was when it took them.
"""

from typing import Iterator, List, Optional

from protozoa.decisions.actions import NodeKind, is_action
from protozoa.exceptions import DecisionTreeError, IncompleteConditionError


class DecisionNode:
    """One node of an organism decision tree.

    Attributes:
        id: In-order index of the node within its tree
        kind: An ``Action`` (leaf) or a ``Condition`` (branch)
        yes: Child followed when the condition holds (conditions only)
        no: Child followed when the condition fails (conditions only)
        uses: Evaluations that passed through this node
        top_level_uses: Evaluations in which this node was the tree root
        avg_health: Running mean of organism health over ``uses``
        avg_health_when_top_level: Running mean over ``top_level_uses``
        used_last_cycle: Whether the most recent evaluation passed through here
    """

    __slots__ = (
        "id",
        "kind",
        "yes",
        "no",
        "uses",
        "top_level_uses",
        "avg_health",
        "avg_health_when_top_level",
        "used_last_cycle",
    )

    def __init__(
        self,
        kind: NodeKind,
        yes: Optional["DecisionNode"] = None,
        no: Optional["DecisionNode"] = None,
        node_id: int = 0,
    ):
        if is_action(kind):
            if yes is not None or no is not None:
                raise DecisionTreeError(f"Action node {kind.value} cannot have children")
        elif yes is None or no is None:
            raise IncompleteConditionError(
                f"Condition node {kind.value} requires both a yes and a no child"
            )
        self.id = node_id
        self.kind = kind
        self.yes = yes
        self.no = no
        self.uses = 0
        self.top_level_uses = 0
        self.avg_health = 0.0
        self.avg_health_when_top_level = 0.0
        self.used_last_cycle = False

    @property
    def is_action(self) -> bool:
        return is_action(self.kind)

    def __repr__(self) -> str:
        return f"DecisionNode(id={self.id}, kind={self.kind.value}, size={self.size()})"

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def iter_nodes(self) -> Iterator["DecisionNode"]:
        """Yield every node of this subtree in pre-order."""
        stack: List[DecisionNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            if not node.is_action:
                stack.append(node.no)
                stack.append(node.yes)

    def size(self) -> int:
        """Number of nodes in this subtree."""
        return sum(1 for _ in self.iter_nodes())

    def depth(self) -> int:
        """Number of nodes on the longest root-to-leaf path."""
        if self.is_action:
            return 1
        return 1 + max(self.yes.depth(), self.no.depth())

    def validate(self) -> None:
        """Check the strict-binary-tree shape of this subtree.

        Raises:
            IncompleteConditionError: If a condition is missing a child.
            DecisionTreeError: If an action has children.
        """
        for node in self.iter_nodes():
            if node.is_action:
                if node.yes is not None or node.no is not None:
                    raise DecisionTreeError(
                        f"Action node {node.id} ({node.kind.value}) has children"
                    )
            elif node.yes is None or node.no is None:
                raise IncompleteConditionError(
                    f"Condition node {node.id} ({node.kind.value}) is missing a child"
                )

    # ------------------------------------------------------------------
    # In-place reshaping (only ever applied to a private copy)
    # ------------------------------------------------------------------

    def become_action(self, kind: NodeKind) -> None:
        """Turn this node into a leaf, discarding any children."""
        self.kind = kind
        self.yes = None
        self.no = None

    def become_condition(self, kind: NodeKind, yes: "DecisionNode", no: "DecisionNode") -> None:
        """Turn this node into a branch over the two given children."""
        self.kind = kind
        self.yes = yes
        self.no = no

    # ------------------------------------------------------------------
    # Usage statistics
    # ------------------------------------------------------------------

    def record_use(self, health: float) -> None:
        self.uses += 1
        self.avg_health += (health - self.avg_health) / self.uses
        self.used_last_cycle = True

    def record_top_level_use(self, health: float) -> None:
        self.top_level_uses += 1
        self.avg_health_when_top_level += (
            health - self.avg_health_when_top_level
        ) / self.top_level_uses

    def reset_stats(self) -> None:
        self.uses = 0
        self.top_level_uses = 0
        self.avg_health = 0.0
        self.avg_health_when_top_level = 0.0
        self.used_last_cycle = False


def assign_ids(root: DecisionNode) -> DecisionNode:
    """Renumber a tree with an in-order walk (yes subtree, node, no subtree).

    Ids start at 0 and are contiguous. Returns ``root`` for chaining.
    """
    next_id = 0
    stack: List[DecisionNode] = []
    node: Optional[DecisionNode] = root
    while stack or node is not None:
        while node is not None:
            stack.append(node)
            node = node.yes
        node = stack.pop()
        node.id = next_id
        next_id += 1
        node = node.no
    return root


def copy_tree(source: DecisionNode) -> DecisionNode:
    """Deep copy a tree by value with all usage statistics reset."""
    if source.is_action:
        return DecisionNode(source.kind, node_id=source.id)
    return DecisionNode(
        source.kind,
        copy_tree(source.yes),
        copy_tree(source.no),
        node_id=source.id,
    )


def best_path(root: DecisionNode) -> List[DecisionNode]:
    """The path through a tree that coincided with the best organism health.

    Starting at the root, follow whichever child has been reached before and
    has the higher ``avg_health`` (the yes branch on ties). Stops at an
    action, or at a condition neither of whose children was ever reached.
    """
    path = [root]
    node = root
    while not node.is_action:
        reached = [child for child in (node.yes, node.no) if child.uses > 0]
        if not reached:
            break
        node = max(reached, key=lambda child: child.avg_health)
        path.append(node)
    return path


def format_tree(node: DecisionNode, indent: int = 1, with_stats: bool = False) -> str:
    """Render a tree as an indented outline for inspection output.

    Example:
        C_FoodAhead
          ├─Then... A_Eat
          └─Else: A_Move

    With ``with_stats`` every line also shows the node's uses and the
    average organism health at those uses, e.g. ``A_Eat [3 uses, 2.50]``.
    """
    label = node.kind.value
    if with_stats:
        label += f" [{node.uses} uses, {node.avg_health:.2f}]"
    lines = [label + "\n"]
    if not node.is_action:
        pad = "  " * indent
        lines.append(pad + "├─Then... " + format_tree(node.yes, indent + 1, with_stats))
        lines.append(pad + "└─Else: " + format_tree(node.no, indent + 1, with_stats))
    return "".join(lines)
