"""Invariant checks on a proof in progress.

Each check returns a list of violation strings (empty when it holds):
- Frontier nodes are open leaves
- The lineage is a parent chain from the root to the current node
- Decomposed nodes have children and only decomposed nodes do
- Labels are unique
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from spa.prover.tree import NodeStatus, ProofNode

if TYPE_CHECKING:
    from spa.prover.engine import TheoremProver


def check_frontier_leaves(frontier: list[ProofNode]) -> list[str]:
    violations: list[str] = []
    for node in frontier:
        if not node.is_leaf:
            violations.append(f"Frontier node {node.label} has children")
        if node.status != NodeStatus.OPEN:
            violations.append(f"Frontier node {node.label} is {node.status.value}")
    return violations


def check_lineage(
    root: ProofNode, lineage: list[ProofNode], frontier: list[ProofNode],
) -> list[str]:
    if not frontier:
        return []
    violations: list[str] = []
    if not lineage or lineage[0] is not root:
        violations.append("Lineage does not start at the root")
    for parent, child in zip(lineage, lineage[1:]):
        if child.parent is not parent:
            violations.append(
                f"Lineage breaks between {parent.label} and {child.label}"
            )
    if lineage and lineage[-1] is not frontier[-1]:
        violations.append(
            f"Lineage ends at {lineage[-1].label}, current node is {frontier[-1].label}"
        )
    return violations


def check_node_shape(root: ProofNode) -> list[str]:
    violations: list[str] = []
    for node in root.walk():
        if node.secondary is not None and node.primary is None:
            violations.append(f"Node {node.label}: secondary child without primary")
        decomposed = node.status == NodeStatus.DECOMPOSED
        if decomposed and node.is_leaf:
            violations.append(f"Node {node.label}: decomposed but has no children")
        if not decomposed and not node.is_leaf:
            violations.append(f"Node {node.label}: {node.status.value} but has children")
        for child in node.children():
            if child.parent is not node:
                violations.append(f"Node {child.label}: parent link is wrong")
    return violations


def check_unique_labels(root: ProofNode) -> list[str]:
    seen: set[str] = set()
    violations: list[str] = []
    for node in root.walk():
        if node.label in seen:
            violations.append(f"Duplicate node label {node.label}")
        seen.add(node.label)
    return violations


def validate_prover(prover: "TheoremProver") -> list[str]:
    """Run every check against a prover's current tree."""
    root = prover.root
    if root is None:
        return []
    frontier = list(prover.frontier)
    violations: list[str] = []
    violations.extend(check_frontier_leaves(frontier))
    violations.extend(check_lineage(root, list(prover.lineage), frontier))
    violations.extend(check_node_shape(root))
    violations.extend(check_unique_labels(root))
    return violations
