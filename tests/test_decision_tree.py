"""Tests for decision tree nodes, mutation and evaluation."""

import random
from typing import List

import pytest

from protozoa.config import DecisionTreeConfig
from protozoa.decisions import (
    Action,
    Condition,
    DecisionNode,
    best_path,
    copy_tree,
    evaluate_tree,
    format_tree,
    mutate_tree,
    random_tree,
    tree_from_sequence,
    tree_to_sequence,
)
from protozoa.exceptions import (
    DecisionTreeError,
    EvaluationStepLimitError,
    IncompleteConditionError,
)


def _in_order_ids(node: DecisionNode) -> List[int]:
    if node.is_action:
        return [node.id]
    return _in_order_ids(node.yes) + [node.id] + _in_order_ids(node.no)


def _exercise(tree: DecisionNode, times: int = 5) -> None:
    """Give every node some usage statistics."""
    for i in range(times):
        evaluate_tree(tree, lambda condition: i % 2 == 0, health=float(i + 1), max_steps=64)


class TestDecisionNode:
    def test_action_cannot_have_children(self) -> None:
        with pytest.raises(DecisionTreeError):
            DecisionNode(Action.EAT, DecisionNode(Action.MOVE), DecisionNode(Action.IDLE))

    def test_condition_needs_both_children(self) -> None:
        with pytest.raises(IncompleteConditionError):
            DecisionNode(Condition.CAN_MOVE, DecisionNode(Action.MOVE))

    def test_validate_detects_missing_child(self) -> None:
        root = tree_from_sequence([Condition.CAN_MOVE, Action.MOVE, Action.IDLE])
        root.no = None

        with pytest.raises(IncompleteConditionError):
            root.validate()

    def test_validate_detects_action_with_children(self) -> None:
        root = tree_from_sequence([Condition.CAN_MOVE, Action.MOVE, Action.IDLE])
        root.yes.yes = DecisionNode(Action.EAT)

        with pytest.raises(DecisionTreeError):
            root.validate()

    def test_size_and_depth(self) -> None:
        root = tree_from_sequence(
            [Condition.CAN_MOVE, Condition.IS_FOOD_AHEAD, Action.EAT, Action.MOVE, Action.IDLE]
        )
        assert root.size() == 5
        assert root.depth() == 3
        assert [node.kind for node in root.iter_nodes()] == tree_to_sequence(root)

    def test_copy_tree_is_deep_and_resets_stats(self) -> None:
        original = tree_from_sequence([Condition.CAN_MOVE, Action.MOVE, Action.IDLE])
        _exercise(original)

        copy = copy_tree(original)

        assert tree_to_sequence(copy) == tree_to_sequence(original)
        assert [n.id for n in copy.iter_nodes()] == [n.id for n in original.iter_nodes()]
        for copied, source in zip(copy.iter_nodes(), original.iter_nodes()):
            assert copied is not source
            assert copied.uses == 0
            assert copied.top_level_uses == 0
            assert copied.avg_health == 0.0
            assert not copied.used_last_cycle
        assert original.uses == 5


class TestMutation:
    @pytest.mark.parametrize("seed", range(30))
    def test_size_never_exceeds_cap(self, seed: int) -> None:
        rng = random.Random(seed)
        config = DecisionTreeConfig(max_tree_size=9, max_random_tree_size=5)
        tree = random_tree(rng, config)

        for _ in range(40):
            tree = mutate_tree(tree, rng, config)
            assert tree.size() <= config.max_tree_size
            tree.validate()

    @pytest.mark.parametrize("seed", range(30))
    def test_bookkeeping_reset_and_ids_contiguous(self, seed: int) -> None:
        rng = random.Random(seed)
        config = DecisionTreeConfig(max_tree_size=15, max_random_tree_size=7)
        tree = random_tree(rng, config)
        _exercise(tree)

        mutated = mutate_tree(tree, rng, config)

        for node in mutated.iter_nodes():
            assert node.uses == 0
            assert node.top_level_uses == 0
            assert not node.used_last_cycle
        assert _in_order_ids(mutated) == list(range(mutated.size()))

    @pytest.mark.parametrize("seed", range(20))
    def test_original_is_untouched(self, seed: int) -> None:
        rng = random.Random(seed)
        config = DecisionTreeConfig()
        tree = random_tree(rng, config)
        _exercise(tree)
        sequence = tree_to_sequence(tree)
        uses = [node.uses for node in tree.iter_nodes()]

        mutate_tree(tree, rng, config)

        assert tree_to_sequence(tree) == sequence
        assert [node.uses for node in tree.iter_nodes()] == uses

    def test_action_grows_into_condition_over_original(self) -> None:
        config = DecisionTreeConfig(chance_to_grow_action=1.0)
        for seed in range(20):
            tree = tree_from_sequence([Action.EAT])
            mutated = mutate_tree(tree, random.Random(seed), config)

            assert mutated.size() == 3
            assert isinstance(mutated.kind, Condition)
            assert Action.EAT in (mutated.yes.kind, mutated.no.kind)

    def test_action_at_cap_changes_value_instead(self) -> None:
        config = DecisionTreeConfig(max_tree_size=1, chance_to_grow_action=1.0)
        for seed in range(20):
            mutated = mutate_tree(tree_from_sequence([Action.EAT]), random.Random(seed), config)

            assert mutated.size() == 1
            assert mutated.kind is not Action.EAT

    def test_condition_collapses_or_changes(self) -> None:
        config = DecisionTreeConfig(chance_to_grow_action=0.0, chance_to_collapse_condition=1.0)
        sequence = [Condition.CAN_MOVE, Action.MOVE, Action.IDLE]
        sizes = set()
        for seed in range(30):
            mutated = mutate_tree(tree_from_sequence(sequence), random.Random(seed), config)
            sizes.add(mutated.size())
            if mutated.size() == 3:
                # A leaf was swapped for a different action
                assert tree_to_sequence(mutated) != sequence
                assert mutated.kind is Condition.CAN_MOVE
        assert sizes == {1, 3}

    def test_condition_value_change_keeps_children(self) -> None:
        config = DecisionTreeConfig(chance_to_collapse_condition=0.0)
        sequence = [Condition.CAN_MOVE, Action.MOVE, Action.IDLE]
        for seed in range(30):
            mutated = mutate_tree(tree_from_sequence(sequence), random.Random(seed), config)
            if isinstance(mutated.kind, Condition) and mutated.kind is not Condition.CAN_MOVE:
                assert (mutated.yes.kind, mutated.no.kind) == (Action.MOVE, Action.IDLE)


class TestEvaluation:
    def test_follows_condition_answers(self) -> None:
        root = tree_from_sequence([Condition.IS_FOOD_AHEAD, Action.EAT, Action.MOVE])

        action, path = evaluate_tree(root, lambda c: True, health=2.0, max_steps=10)
        assert action is Action.EAT
        assert path == [root, root.yes]

        action, path = evaluate_tree(root, lambda c: False, health=4.0, max_steps=10)
        assert action is Action.MOVE
        assert path == [root, root.no]

    def test_records_usage(self) -> None:
        root = tree_from_sequence([Condition.IS_FOOD_AHEAD, Action.EAT, Action.MOVE])

        evaluate_tree(root, lambda c: True, health=2.0, max_steps=10)
        evaluate_tree(root, lambda c: True, health=4.0, max_steps=10)

        assert root.uses == 2
        assert root.top_level_uses == 2
        assert root.avg_health == pytest.approx(3.0)
        assert root.avg_health_when_top_level == pytest.approx(3.0)
        assert root.yes.uses == 2
        assert root.yes.used_last_cycle
        assert root.no.uses == 0
        assert not root.no.used_last_cycle

    def test_step_cap_is_fatal(self) -> None:
        root = tree_from_sequence(
            [Condition.CAN_MOVE, Condition.IS_FOOD_AHEAD, Action.EAT, Action.MOVE, Action.IDLE]
        )

        with pytest.raises(EvaluationStepLimitError):
            evaluate_tree(root, lambda c: True, health=1.0, max_steps=2)

    def test_missing_child_is_fatal(self) -> None:
        root = tree_from_sequence([Condition.CAN_MOVE, Action.MOVE, Action.IDLE])
        root.no = None

        with pytest.raises(IncompleteConditionError):
            evaluate_tree(root, lambda c: False, health=1.0, max_steps=10)


class TestBestPath:
    def test_follows_healthier_branch(self) -> None:
        root = tree_from_sequence(
            [Condition.CAN_MOVE, Condition.IS_FOOD_AHEAD, Action.EAT, Action.MOVE, Action.IDLE]
        )
        evaluate_tree(root, lambda c: True, health=1.0, max_steps=10)
        evaluate_tree(root, lambda c: False, health=5.0, max_steps=10)

        assert best_path(root) == [root, root.no]

        evaluate_tree(root, lambda c: c is Condition.CAN_MOVE, health=9.0, max_steps=10)
        evaluate_tree(root, lambda c: c is Condition.CAN_MOVE, health=9.0, max_steps=10)

        assert best_path(root) == [root, root.yes, root.yes.no]

    def test_ties_prefer_yes_branch(self) -> None:
        root = tree_from_sequence([Condition.CAN_MOVE, Action.MOVE, Action.IDLE])
        evaluate_tree(root, lambda c: True, health=2.0, max_steps=10)
        evaluate_tree(root, lambda c: False, health=2.0, max_steps=10)

        assert best_path(root) == [root, root.yes]

    def test_unreached_children_stop_the_path(self) -> None:
        root = tree_from_sequence([Condition.CAN_MOVE, Action.MOVE, Action.IDLE])

        assert best_path(root) == [root]

        evaluate_tree(root, lambda c: False, health=0.5, max_steps=10)
        assert best_path(root) == [root, root.no]

    def test_format_tree_with_stats(self) -> None:
        root = tree_from_sequence([Condition.CAN_MOVE, Action.MOVE, Action.IDLE])
        evaluate_tree(root, lambda c: True, health=2.0, max_steps=10)
        evaluate_tree(root, lambda c: True, health=4.0, max_steps=10)

        assert format_tree(root, with_stats=True) == (
            "C_Move [2 uses, 3.00]\n"
            "  ├─Then... A_Move [2 uses, 3.00]\n"
            "  └─Else: A_Idle [0 uses, 0.00]\n"
        )
        assert format_tree(root) == "C_Move\n  ├─Then... A_Move\n  └─Else: A_Idle\n"
