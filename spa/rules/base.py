"""Rewrite-rule results: decomposition options and deductions.

A Decomp splits a goal into one or two independent branches, each with an
optional new given. A Deduct derives a new given from an existing sentence
without branching, optionally conditioned on a hypothesis.
"""

from __future__ import annotations

from typing import Optional, Sequence

from pydantic import BaseModel, Field

from spa.core.sentences import LogicalOp, Sentence, logical


class Branch(BaseModel):
    """One subgoal, with the given it may assume."""

    model_config = {"frozen": True}

    goal: Sentence
    given: Optional[Sentence] = None

    def __str__(self) -> str:
        if self.given is None:
            return f"goal {self.goal}"
        return f"given {self.given}, goal {self.goal}"


class Decomp(BaseModel):
    """A named strategy for splitting a goal."""

    model_config = {"frozen": True}

    name: str
    branches: tuple[Branch, ...] = Field(min_length=1, max_length=2)

    @property
    def primary(self) -> Branch:
        return self.branches[0]

    @property
    def secondary(self) -> Branch | None:
        return self.branches[1] if len(self.branches) > 1 else None

    def describe(self) -> str:
        return f"{self.name}: " + "; ".join(str(b) for b in self.branches)


class Deduct(BaseModel):
    """A conclusion derivable from a sentence, possibly under a hypothesis."""

    model_config = {"frozen": True}

    name: str
    conclusion: Sentence
    hypothesis: Optional[Sentence] = None

    def as_given(self, available: Sequence[Sentence] = ()) -> Sentence:
        """The sentence to add as a given.

        The bare conclusion when it holds unconditionally or its hypothesis
        is already available; otherwise the implication hypothesis => conclusion.
        """
        if self.hypothesis is None or self.hypothesis in available:
            return self.conclusion
        return logical(LogicalOp.IMPLIES, self.hypothesis, self.conclusion)

    def describe(self) -> str:
        if self.hypothesis is None:
            return f"{self.name}: {self.conclusion}"
        return f"{self.name}: {self.conclusion} if {self.hypothesis}"
