"""Proof export: JSON-serializable dict and Markdown outline.

The dict holds every node with its goal, givens, status, strategy and
justification, plus the operation history. The Markdown form is the
indented formal proof.
"""

from __future__ import annotations

from pathlib import Path

from spa.core.serialize import export_dict
from spa.prover.engine import TheoremProver
from spa.prover.tree import NodeStatus, ProofNode


def _node_to_dict(node: ProofNode) -> dict:
    return {
        "label": node.label,
        "goal": str(node.goal),
        "givens": [str(g) for g in node.givens],
        "status": node.status.value,
        "strategy": node.strategy or None,
        "justification": node.justification or None,
        "parent": node.parent.label if node.parent is not None else None,
        "children": [c.label for c in node.children()],
    }


def proof_to_dict(prover: TheoremProver) -> dict:
    """Snapshot of the whole proof as plain data."""
    st = prover.status()
    root = prover.root
    nodes = [_node_to_dict(n) for n in root.walk()] if root is not None else []
    return {
        "mode": st.mode.value,
        "theorem": st.theorem,
        "proven": root.is_proven() if root is not None else False,
        "open_goals": [n.label for n in reversed(prover.frontier)],
        "nodes": nodes,
        "history": prover.history,
    }


def _outline(node: ProofNode, depth: int, lines: list[str]) -> None:
    pad = "  " * depth
    lines.append(f"{pad}- **{node.label}** prove `{node.goal}`")
    for given in node.givens:
        lines.append(f"{pad}  - given `{given}`")
    if node.status == NodeStatus.DECOMPOSED:
        lines.append(f"{pad}  - by {node.strategy}:")
        for child in node.children():
            _outline(child, depth + 2, lines)
    elif node.status == NodeStatus.TRIVIAL:
        lines.append(f"{pad}  - trivial")
    elif node.status == NodeStatus.JUSTIFIED:
        reason = node.justification or "(no reason given)"
        lines.append(f"{pad}  - justified: {reason}")
    else:
        lines.append(f"{pad}  - *open*")


def proof_to_markdown(prover: TheoremProver) -> str:
    """Render the proof as a Markdown outline."""
    root = prover.root
    if root is None:
        return "# Proof\n\nNo theorem loaded.\n"
    lines = ["# Proof", "", f"**Theorem** `{root.goal}`", ""]
    _outline(root, 0, lines)
    lines.append("")
    if root.is_proven():
        lines.append("Q.E.D.")
    else:
        lines.append(f"{len(prover.frontier)} goal(s) open.")
    lines.append("")
    return "\n".join(lines)


def export_proof(prover: TheoremProver, path: str | Path) -> None:
    """Write the proof dict as JSON."""
    export_dict(proof_to_dict(prover), path)
