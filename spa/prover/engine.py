"""TheoremProver: the proof state machine.

Modes: NoTheorem -> Proving -> Done.

The frontier is a stack of open leaf goals; its top is the current goal.
The lineage is the path from the root to the current goal, and the givens
in scope are those of every node on it, in lineage order.

Every public operation checks all of its preconditions before touching
any state, so a ProverError leaves the proof exactly as it was. With
strict=True the tree invariants are re-checked after each mutation.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any

from spa.core.config import DEFAULT_CONFIG, SpaConfig
from spa.core.objects import SymbolIds
from spa.core.sentences import Sentence, max_symbol_id
from spa.prover.errors import (
    AlreadyDecomposed,
    ChoiceOutOfRange,
    NoOptionsAvailable,
    ProofInvariantViolation,
    WrongMode,
)
from spa.prover.invariants import validate_prover
from spa.prover.tree import NodeStatus, ProofNode, node_label
from spa.rules.base import Branch, Decomp, Deduct
from spa.rules.decompose import decompose as decompose_goal
from spa.rules.deduce import deduce as deduce_from

logger = logging.getLogger(__name__)


class Mode(str, enum.Enum):
    NO_THEOREM = "NoTheorem"
    PROVING = "Proving"
    DONE = "Done"


@dataclass(frozen=True)
class DeductionOption:
    """A deduction together with the given it is drawn from."""

    source: Sentence
    source_label: str
    deduct: Deduct

    def describe(self) -> str:
        return f"[{self.source_label}] {self.deduct.describe()}"


@dataclass(frozen=True)
class ProverStatus:
    mode: Mode
    theorem: str | None
    open_goals: int
    nodes: int
    current_goal: str | None
    current_label: str | None


class TheoremProver:
    """Interactive natural-deduction prover for one theorem at a time."""

    def __init__(
        self,
        ids: SymbolIds | None = None,
        config: SpaConfig = DEFAULT_CONFIG,
        strict: bool | None = None,
    ) -> None:
        self.ids = ids if ids is not None else SymbolIds()
        self.config = config
        self.strict = config.strict if strict is None else strict
        self._root: ProofNode | None = None
        self._frontier: list[ProofNode] = []
        self._lineage: list[ProofNode] = []
        self._label_count = 0
        self._history: list[dict[str, Any]] = []

    # ---- Queries ----

    @property
    def root(self) -> ProofNode | None:
        return self._root

    @property
    def frontier(self) -> tuple[ProofNode, ...]:
        return tuple(self._frontier)

    @property
    def lineage(self) -> tuple[ProofNode, ...]:
        return tuple(self._lineage)

    @property
    def history(self) -> list[dict[str, Any]]:
        """Log of every successful mutating operation."""
        return list(self._history)

    def mode(self) -> Mode:
        if self._root is None:
            return Mode.NO_THEOREM
        if not self._frontier:
            return Mode.DONE
        return Mode.PROVING

    def theorem(self) -> Sentence:
        if self._root is None:
            raise WrongMode("theorem", Mode.NO_THEOREM.value)
        return self._root.goal

    def current_node(self) -> ProofNode:
        self._require_proving("goal")
        return self._frontier[-1]

    def current_goal(self) -> Sentence:
        return self.current_node().goal

    def givens_in_scope(self) -> list[Sentence]:
        return [g for _, g in self._labelled_givens("givens")]

    def labelled_givens(self) -> list[tuple[str, Sentence]]:
        """Givens in scope paired with the label of the node introducing them."""
        return self._labelled_givens("givens")

    def _labelled_givens(self, operation: str) -> list[tuple[str, Sentence]]:
        self._require_proving(operation)
        return [(node.label, g) for node in self._lineage for g in node.givens]

    def decomposition_options(self) -> list[Decomp]:
        node = self.current_node()
        if not node.is_leaf:
            raise AlreadyDecomposed(node.label)
        return decompose_goal(node.goal, self.ids, self.config)

    def deduction_options(self) -> list[DeductionOption]:
        return [
            DeductionOption(source=given, source_label=label, deduct=d)
            for label, given in self._labelled_givens("deduce")
            for d in deduce_from(given, self.ids, self.config)
        ]

    def status(self) -> ProverStatus:
        mode = self.mode()
        proving = mode == Mode.PROVING
        return ProverStatus(
            mode=mode,
            theorem=str(self._root.goal) if self._root is not None else None,
            open_goals=len(self._frontier),
            nodes=sum(1 for _ in self._root.walk()) if self._root is not None else 0,
            current_goal=str(self._frontier[-1].goal) if proving else None,
            current_label=self._frontier[-1].label if proving else None,
        )

    # ---- Mutations ----

    def set_theorem(self, sentence: Sentence | None) -> None:
        """Start a new proof, discarding any previous one.

        None clears the prover back to NoTheorem.
        """
        self._root = None
        self._frontier = []
        self._lineage = []
        self._label_count = 0
        self._history = []
        if sentence is None:
            logger.debug("theorem cleared")
            return
        top = max_symbol_id(sentence)
        if top is not None:
            self.ids.reserve(top)
        root = self._new_node(sentence)
        self._root = root
        self._frontier = [root]
        self._lineage = [root]
        self._record("set_theorem", root, theorem=str(sentence))

    def decompose(self, choice: int) -> Decomp:
        """Split the current goal using option *choice*."""
        options = self.decomposition_options()
        node = self._frontier[-1]
        if not options:
            raise NoOptionsAvailable("decompose", str(node.goal))
        option = self._pick(options, choice)

        primary = self._child(option.primary)
        secondary = self._child(option.secondary) if option.secondary is not None else None
        node.extend(option.name, primary, secondary)
        self._frontier.pop()
        if secondary is not None:
            self._frontier.append(secondary)
        self._frontier.append(primary)
        self._lineage.append(primary)
        self._record("decompose", node, strategy=option.name)
        return option

    def deduce(self, choice: int) -> Sentence:
        """Add deduction *choice* as a given at the current node."""
        options = self.deduction_options()
        node = self._frontier[-1]
        if not options:
            raise NoOptionsAvailable("deduce", "the givens in scope")
        option = self._pick(options, choice)
        given = option.deduct.as_given(self.givens_in_scope())
        node.givens.append(given)
        self._record("deduce", node, rule=option.deduct.name, given=str(given))
        return given

    def trivial(self) -> ProofNode:
        """Discharge the current goal as immediate."""
        return self._discharge("trivial", NodeStatus.TRIVIAL, "")

    def justify(self, text: str = "") -> ProofNode:
        """Discharge the current goal with a free-form justification.

        The text is stored on the node and never checked.
        """
        return self._discharge("justify", NodeStatus.JUSTIFIED, text)

    # ---- Internals ----

    def _discharge(self, operation: str, status: NodeStatus, text: str) -> ProofNode:
        self._require_proving(operation)
        node = self._frontier.pop()
        node.status = status
        node.justification = text
        if self._frontier:
            nxt = self._frontier[-1]
            while self._lineage and self._lineage[-1] is not nxt.parent:
                self._lineage.pop()
            self._lineage.append(nxt)
        self._record(operation, node)
        return node

    def _pick(self, options: list, choice: int) -> Any:
        if not 0 <= choice < len(options):
            raise ChoiceOutOfRange(choice, len(options))
        return options[choice]

    def _require_proving(self, operation: str) -> None:
        mode = self.mode()
        if mode != Mode.PROVING:
            raise WrongMode(operation, mode.value)

    def _new_node(self, goal: Sentence, givens: list[Sentence] | None = None) -> ProofNode:
        node = ProofNode(goal=goal, label=node_label(self._label_count), givens=givens or [])
        self._label_count += 1
        return node

    def _child(self, branch: Branch) -> ProofNode:
        givens = [branch.given] if branch.given is not None else []
        return self._new_node(branch.goal, givens)

    def _record(self, operation: str, node: ProofNode, **details: Any) -> None:
        self._history.append({"operation": operation, "node": node.label, **details})
        logger.debug(
            "%s on %s -> mode %s, %d open",
            operation, node.label, self.mode().value, len(self._frontier),
        )
        if self.strict:
            violations = validate_prover(self)
            if violations:
                raise ProofInvariantViolation(operation, violations)
