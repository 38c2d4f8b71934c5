"""Precondition and invariant errors raised by the theorem prover.

Precondition errors are recoverable driver mistakes: they are raised
before any state changes, so the proof is untouched afterwards.
"""

from __future__ import annotations

import enum
from typing import ClassVar


class ProverErrorKind(str, enum.Enum):
    WRONG_MODE = "WrongMode"
    ALREADY_DECOMPOSED = "AlreadyDecomposed"
    NO_OPTIONS = "NoOptionsAvailable"
    CHOICE_OUT_OF_RANGE = "ChoiceOutOfRange"


class ProverError(Exception):
    """Base class for recoverable prover precondition violations."""

    kind: ClassVar[ProverErrorKind]


class WrongMode(ProverError):
    kind = ProverErrorKind.WRONG_MODE

    def __init__(self, operation: str, mode: str) -> None:
        self.operation = operation
        self.mode = mode
        if mode == "NoTheorem":
            msg = "no theorem loaded"
        elif mode == "Done":
            msg = "the proof is complete"
        else:
            msg = f"'{operation}' is not allowed in mode {mode}"
        super().__init__(msg)


class AlreadyDecomposed(ProverError):
    kind = ProverErrorKind.ALREADY_DECOMPOSED

    def __init__(self, label: str) -> None:
        self.label = label
        super().__init__(f"node {label} has already been decomposed")


class NoOptionsAvailable(ProverError):
    kind = ProverErrorKind.NO_OPTIONS

    def __init__(self, operation: str, subject: str) -> None:
        self.operation = operation
        self.subject = subject
        if operation == "decompose":
            msg = f"goal cannot be decomposed: {subject}"
        else:
            msg = f"nothing can be deduced from {subject}"
        super().__init__(msg)


class ChoiceOutOfRange(ProverError):
    kind = ProverErrorKind.CHOICE_OUT_OF_RANGE

    def __init__(self, choice: int, count: int) -> None:
        self.choice = choice
        self.count = count
        super().__init__(f"choice {choice} out of range (0-{count - 1})")


class ProofInvariantViolation(Exception):
    """Raised in strict mode when an operation leaves the tree inconsistent."""

    def __init__(self, operation: str, violations: list[str]) -> None:
        self.operation = operation
        self.violations = violations
        msg = f"Invariant violation after {operation}:\n" + "\n".join(violations)
        super().__init__(msg)
