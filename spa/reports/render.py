"""Rich rendering of a proof: tree view, status table and option lists."""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from spa.core.sentences import Sentence
from spa.prover.engine import Mode, TheoremProver
from spa.prover.tree import NodeStatus, ProofNode

_STATUS_STYLE = {
    NodeStatus.OPEN: "bold yellow",
    NodeStatus.DECOMPOSED: "cyan",
    NodeStatus.TRIVIAL: "green",
    NodeStatus.JUSTIFIED: "green",
}


def symbol_legend(sentence: Sentence) -> str:
    """Distinct symbols of a sentence as char#id, in order of appearance."""
    seen: dict[int, str] = {}
    for s in sentence.symbols():
        seen.setdefault(s.id, f"{s.char}#{s.id}")
    return " ".join(seen.values())


def _node_text(node: ProofNode, current: ProofNode | None, show_ids: bool) -> Text:
    text = Text()
    text.append(f"{node.label} ", style="bold")
    text.append(str(node.goal))
    text.append(f"  [{node.status.value}", style=_STATUS_STYLE[node.status])
    if node.strategy:
        text.append(f": {node.strategy}", style=_STATUS_STYLE[node.status])
    text.append("]", style=_STATUS_STYLE[node.status])
    if node is current:
        text.append("  <- current", style="bold magenta")
    if node.justification:
        text.append(f"\n  because {node.justification}", style="italic")
    if show_ids:
        legend = symbol_legend(node.goal)
        if legend:
            text.append(f"  {legend}", style="dim")
    return text


def _add_subtree(
    parent: Tree, node: ProofNode, current: ProofNode | None, show_ids: bool,
) -> None:
    branch = parent.add(_node_text(node, current, show_ids))
    for given in node.givens:
        branch.add(Text(f"given {given}", style="dim"))
    for child in node.children():
        _add_subtree(branch, child, current, show_ids)


def proof_tree(prover: TheoremProver) -> Tree:
    """Build a rich Tree of the whole proof, or a placeholder without one."""
    root = prover.root
    if root is None:
        return Tree(Text("no theorem loaded", style="dim"))
    current = prover.current_node() if prover.mode() == Mode.PROVING else None
    show_ids = prover.config.show_symbol_ids
    tree = Tree(_node_text(root, current, show_ids))
    for given in root.givens:
        tree.add(Text(f"given {given}", style="dim"))
    for child in root.children():
        _add_subtree(tree, child, current, show_ids)
    return tree


def render_proof_tree(prover: TheoremProver, console: Console | None = None) -> None:
    """Print the proof tree."""
    if console is None:
        console = Console()
    console.print(proof_tree(prover))


def render_status_table(prover: TheoremProver, console: Console | None = None) -> None:
    """Print a one-row summary of the prover state."""
    if console is None:
        console = Console()
    st = prover.status()

    table = Table(title="Proof Status")
    table.add_column("Mode")
    table.add_column("Theorem")
    table.add_column("Open", justify="right")
    table.add_column("Nodes", justify="right")
    table.add_column("Current Goal")

    style = "green" if st.mode == Mode.DONE else ("yellow" if st.mode == Mode.PROVING else "dim")
    current = f"{st.current_label} {st.current_goal}" if st.current_goal else "-"
    table.add_row(
        st.mode.value,
        st.theorem or "-",
        str(st.open_goals),
        str(st.nodes),
        current,
        style=style,
    )
    console.print(table)


def render_givens(prover: TheoremProver, console: Console | None = None) -> None:
    """Print the givens in scope, each with the label of its node."""
    if console is None:
        console = Console()
    givens = prover.labelled_givens()
    if not givens:
        console.print("no givens", style="dim")
        return
    for label, given in givens:
        console.print(Text(f"{label}: {given}"))


def render_options(
    title: str, options: Sequence[str], console: Console | None = None,
) -> None:
    """Print a numbered option list, as offered by dec and ded."""
    if console is None:
        console = Console()
    if not options:
        console.print(f"no {title}", style="dim")
        return
    table = Table(title=title.capitalize(), show_header=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Option")
    for i, option in enumerate(options):
        table.add_row(str(i), Text(option))
    console.print(table)
