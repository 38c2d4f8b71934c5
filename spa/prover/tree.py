"""Proof tree nodes.

A node is a goal plus the givens introduced at it. A goal is proven once
all of its children's goals are proven, or once it is discharged
directly. Givens at a node are usable by every node below it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterator, Optional

from spa.core.sentences import Sentence


class NodeStatus(str, enum.Enum):
    OPEN = "open"
    DECOMPOSED = "decomposed"
    TRIVIAL = "trivial"
    JUSTIFIED = "justified"


def node_label(index: int) -> str:
    """A, B, ..., Z, AA, AB, ... for index 0, 1, 2, ..."""
    label = ""
    index += 1
    while index > 0:
        index, rem = divmod(index - 1, 26)
        label = chr(ord("A") + rem) + label
    return label


@dataclass(eq=False)
class ProofNode:
    goal: Sentence
    label: str
    givens: list[Sentence] = field(default_factory=list)
    parent: Optional["ProofNode"] = field(default=None, repr=False)
    primary: Optional["ProofNode"] = None
    secondary: Optional["ProofNode"] = None
    status: NodeStatus = NodeStatus.OPEN
    strategy: str = ""
    justification: str = ""

    @property
    def is_leaf(self) -> bool:
        return self.primary is None and self.secondary is None

    def children(self) -> list["ProofNode"]:
        return [c for c in (self.primary, self.secondary) if c is not None]

    def extend(
        self, strategy: str, primary: "ProofNode", secondary: "ProofNode | None" = None,
    ) -> None:
        """Attach children to a leaf. A node is extended at most once."""
        if not self.is_leaf:
            raise ValueError(f"Node {self.label} already has children")
        primary.parent = self
        if secondary is not None:
            secondary.parent = self
        self.primary = primary
        self.secondary = secondary
        self.strategy = strategy
        self.status = NodeStatus.DECOMPOSED

    def walk(self) -> Iterator["ProofNode"]:
        """Pre-order traversal, primary before secondary."""
        yield self
        for child in self.children():
            yield from child.walk()

    def is_proven(self) -> bool:
        if self.status in (NodeStatus.TRIVIAL, NodeStatus.JUSTIFIED):
            return True
        if self.status == NodeStatus.DECOMPOSED:
            return all(c.is_proven() for c in self.children())
        return False
