"""Tests for proof-tree invariant checks."""

from __future__ import annotations

import pytest

from spa.prover.invariants import (
    check_frontier_leaves,
    check_lineage,
    check_node_shape,
    check_unique_labels,
    validate_prover,
)
from spa.prover.tree import NodeStatus, ProofNode


@pytest.fixture
def goal(parse):
    return parse("(= 1 1)")


def _split(goal) -> tuple[ProofNode, ProofNode, ProofNode]:
    root = ProofNode(goal=goal, label="A")
    b = ProofNode(goal=goal, label="B")
    c = ProofNode(goal=goal, label="C")
    root.extend("separate", b, c)
    return root, b, c


class TestFrontier:
    def test_open_leaves_pass(self, goal) -> None:
        _, b, c = _split(goal)
        assert check_frontier_leaves([c, b]) == []

    def test_decomposed_node_on_frontier(self, goal) -> None:
        root, _, c = _split(goal)
        violations = check_frontier_leaves([c, root])
        assert any("has children" in v for v in violations)
        assert any("decomposed" in v for v in violations)

    def test_discharged_node_on_frontier(self, goal) -> None:
        _, b, _ = _split(goal)
        b.status = NodeStatus.TRIVIAL
        assert check_frontier_leaves([b]) == ["Frontier node B is trivial"]


class TestLineage:
    def test_valid_chain(self, goal) -> None:
        root, b, c = _split(goal)
        assert check_lineage(root, [root, b], [c, b]) == []

    def test_wrong_end(self, goal) -> None:
        root, b, c = _split(goal)
        violations = check_lineage(root, [root, b], [b, c])
        assert violations == ["Lineage ends at B, current node is C"]

    def test_broken_chain(self, goal) -> None:
        root, b, c = _split(goal)
        violations = check_lineage(root, [root, b, c], [c])
        assert "Lineage breaks between B and C" in violations

    def test_empty_frontier_skips(self, goal) -> None:
        root, _, _ = _split(goal)
        assert check_lineage(root, [], []) == []


class TestShape:
    def test_well_formed(self, goal) -> None:
        root, _, _ = _split(goal)
        assert check_node_shape(root) == []

    def test_secondary_without_primary(self, goal) -> None:
        root, b, c = _split(goal)
        root.primary = None
        violations = check_node_shape(root)
        assert "Node A: secondary child without primary" in violations

    def test_decomposed_leaf(self, goal) -> None:
        node = ProofNode(goal=goal, label="A", status=NodeStatus.DECOMPOSED)
        assert check_node_shape(node) == ["Node A: decomposed but has no children"]

    def test_bad_parent_link(self, goal) -> None:
        root, b, _ = _split(goal)
        b.parent = None
        assert "Node B: parent link is wrong" in check_node_shape(root)

    def test_extend_twice_rejected(self, goal) -> None:
        root, _, _ = _split(goal)
        with pytest.raises(ValueError):
            root.extend("again", ProofNode(goal=goal, label="D"))


class TestLabels:
    def test_duplicate(self, goal) -> None:
        root = ProofNode(goal=goal, label="A")
        root.extend("x", ProofNode(goal=goal, label="B"), ProofNode(goal=goal, label="B"))
        assert check_unique_labels(root) == ["Duplicate node label B"]


class TestValidateProver:
    def test_clean_run(self, prover, parse) -> None:
        assert validate_prover(prover) == []
        prover.set_theorem(parse("(and (= 1 1) (= 2 2))"))
        prover.decompose(0)
        assert validate_prover(prover) == []
        prover.trivial()
        prover.trivial()
        assert validate_prover(prover) == []
