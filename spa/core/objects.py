"""Mathematical objects: the terms that sentences talk about.

Grammar:
  number := ConcreteNumber(value) | CompoundNumber(op, number, number) | Symbol
  set    := ConcreteSet(items) | SpecialSet(kind) | CompoundSet(op, set, set)
          | Symbol

A Symbol is both a number and a set: it appears in both unions and is
distinguished only by its tag. Two symbols are the same variable iff their
ids match; the character is for printing only.

All nodes are frozen Pydantic models. Trees are values, so a subtree can
never be shared mutably between two parents.
"""

from __future__ import annotations

import enum
from typing import Annotated, Iterator, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


class NumberOp(str, enum.Enum):
    """Binary arithmetic operators. Values are the surface tokens."""

    ADD = "+"
    SUB = "-"
    MUL = "*"

    @classmethod
    def parse_operator(cls, token: str) -> Optional["NumberOp"]:
        try:
            return cls(token)
        except ValueError:
            return None


class SetOp(str, enum.Enum):
    """Binary set operators. Values are the surface tokens."""

    UNION = "union"
    INTERSECT = "intersect"
    DIFF = "diff"

    @classmethod
    def parse_operator(cls, token: str) -> Optional["SetOp"]:
        try:
            return cls(token)
        except ValueError:
            return None


class SpecialSetKind(str, enum.Enum):
    """Named parameterless domains. Values are the surface names."""

    EMPTY = "null"
    INTEGERS = "ZZ"
    NATURALS = "NN"
    SETS = "SS"

    @classmethod
    def parse_operator(cls, token: str) -> Optional["SpecialSetKind"]:
        try:
            return cls(token)
        except ValueError:
            return None


def _is_symbol_char(c: str) -> bool:
    return len(c) == 1 and ("a" <= c <= "z" or "A" <= c <= "Z")


class Symbol(BaseModel):
    """A variable standing for a number or a set."""

    model_config = {"frozen": True}
    tag: Literal["sym"] = "sym"
    char: str
    id: int

    @field_validator("char")
    @classmethod
    def _single_letter(cls, v: str) -> str:
        if not _is_symbol_char(v):
            raise ValueError(f"symbol character must be one letter, got {v!r}")
        return v

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Symbol):
            return self.id == other.id
        return NotImplemented

    def __hash__(self) -> int:
        return hash(("sym", self.id))

    def clone(self) -> "Symbol":
        return self.model_copy(deep=True)

    def is_ground(self) -> bool:
        return False

    def evaluate(self) -> int | None:
        return None

    def contains(self, obj: MathObject) -> bool | None:
        return None

    def symbols(self) -> Iterator["Symbol"]:
        yield self

    def __str__(self) -> str:
        return self.char


class ConcreteNumber(BaseModel):
    """An integer literal."""

    model_config = {"frozen": True}
    tag: Literal["num"] = "num"
    value: int

    def clone(self) -> "ConcreteNumber":
        return self.model_copy(deep=True)

    def is_ground(self) -> bool:
        return True

    def evaluate(self) -> int | None:
        return self.value

    def symbols(self) -> Iterator[Symbol]:
        return iter(())

    def __str__(self) -> str:
        return str(self.value)


class CompoundNumber(BaseModel):
    """Sum, difference or product of two numbers."""

    model_config = {"frozen": True}
    tag: Literal["compound_num"] = "compound_num"
    op: NumberOp
    left: NumberExpr
    right: NumberExpr

    def clone(self) -> "CompoundNumber":
        return self.model_copy(deep=True)

    def is_ground(self) -> bool:
        return self.left.is_ground() and self.right.is_ground()

    def evaluate(self) -> int | None:
        a = self.left.evaluate()
        b = self.right.evaluate()
        if a is None or b is None:
            return None
        if self.op == NumberOp.ADD:
            return a + b
        if self.op == NumberOp.SUB:
            return a - b
        return a * b

    def symbols(self) -> Iterator[Symbol]:
        yield from self.left.symbols()
        yield from self.right.symbols()

    def __str__(self) -> str:
        return f"({self.op.value} {self.left} {self.right})"


class ConcreteSet(BaseModel):
    """A finite set literal. Order is kept for printing only."""

    model_config = {"frozen": True}
    tag: Literal["set"] = "set"
    items: tuple[MathObject, ...] = ()

    def clone(self) -> "ConcreteSet":
        return self.model_copy(deep=True)

    def is_ground(self) -> bool:
        return all(item.is_ground() for item in self.items)

    def evaluate(self) -> int | None:
        return None

    def contains(self, obj: MathObject) -> bool | None:
        """Membership by element equality. None when undecided."""
        undecided = False
        for item in self.items:
            same = same_element(item, obj)
            if same is True:
                return True
            if same is None:
                undecided = True
        return None if undecided else False

    def symbols(self) -> Iterator[Symbol]:
        for item in self.items:
            yield from item.symbols()

    def __str__(self) -> str:
        return "{" + ", ".join(str(item) for item in self.items) + "}"


class SpecialSet(BaseModel):
    """A named domain such as the integers. Membership is never decided."""

    model_config = {"frozen": True}
    tag: Literal["special"] = "special"
    kind: SpecialSetKind

    def clone(self) -> "SpecialSet":
        return self.model_copy(deep=True)

    def is_ground(self) -> bool:
        return False

    def evaluate(self) -> int | None:
        return None

    def contains(self, obj: MathObject) -> bool | None:
        return None

    def symbols(self) -> Iterator[Symbol]:
        return iter(())

    def __str__(self) -> str:
        return self.kind.value


class CompoundSet(BaseModel):
    """Union, intersection or difference of two sets."""

    model_config = {"frozen": True}
    tag: Literal["compound_set"] = "compound_set"
    op: SetOp
    left: SetExpr
    right: SetExpr

    def clone(self) -> "CompoundSet":
        return self.model_copy(deep=True)

    def is_ground(self) -> bool:
        return self.left.is_ground() and self.right.is_ground()

    def evaluate(self) -> int | None:
        return None

    def contains(self, obj: MathObject) -> bool | None:
        a = self.left.contains(obj)
        b = self.right.contains(obj)
        if self.op == SetOp.UNION:
            if a is True or b is True:
                return True
            if a is False and b is False:
                return False
            return None
        if self.op == SetOp.INTERSECT:
            if a is False or b is False:
                return False
            if a is True and b is True:
                return True
            return None
        # DIFF
        if a is False or b is True:
            return False
        if a is True and b is False:
            return True
        return None

    def symbols(self) -> Iterator[Symbol]:
        yield from self.left.symbols()
        yield from self.right.symbols()

    def __str__(self) -> str:
        return f"({self.op.value} {self.left} {self.right})"


# Discriminated unions. Symbol appears in both NumberExpr and SetExpr.
NumberExpr = Annotated[
    Union[ConcreteNumber, CompoundNumber, Symbol],
    Field(discriminator="tag"),
]

SetExpr = Annotated[
    Union[ConcreteSet, SpecialSet, CompoundSet, Symbol],
    Field(discriminator="tag"),
]

MathObject = Annotated[
    Union[ConcreteNumber, CompoundNumber, ConcreteSet, SpecialSet, CompoundSet, Symbol],
    Field(discriminator="tag"),
]

NUMBER_TYPES = (ConcreteNumber, CompoundNumber, Symbol)
SET_TYPES = (ConcreteSet, SpecialSet, CompoundSet, Symbol)

# Rebuild models now that the unions are defined (forward references)
CompoundNumber.model_rebuild()
ConcreteSet.model_rebuild()
CompoundSet.model_rebuild()


def is_number(obj: object) -> bool:
    return isinstance(obj, NUMBER_TYPES)


def is_set(obj: object) -> bool:
    return isinstance(obj, SET_TYPES)


def same_element(a: MathObject, b: MathObject) -> bool | None:
    """Decide whether two objects denote the same element. None if unknown."""
    if a == b:
        return True
    if not (a.is_ground() and b.is_ground()):
        return None
    va, vb = a.evaluate(), b.evaluate()
    if va is not None and vb is not None:
        return va == vb
    if isinstance(a, ConcreteSet) and isinstance(b, ConcreteSet):
        return _ground_sets_equal(a, b)
    if is_number(a) != is_number(b):
        return False
    return None


def _ground_sets_equal(a: ConcreteSet, b: ConcreteSet) -> bool | None:
    for x, y in ((a, b), (b, a)):
        for item in x.items:
            inside = y.contains(item)
            if inside is not True:
                return inside
    return True


# ---- Identifier generation ----


class SymbolIds:
    """Hands out symbol identifiers.

    One generator is shared by everything that creates symbols for a
    session (parser, rewrite rules, prover), so ids never collide. Tests
    construct their own to get deterministic ids.
    """

    def __init__(self, start: int = 0) -> None:
        self._next = start

    def next_id(self) -> int:
        n = self._next
        self._next += 1
        return n

    def peek(self) -> int:
        return self._next

    def reserve(self, used_id: int) -> None:
        """Ensure *used_id* is never handed out again."""
        if used_id >= self._next:
            self._next = used_id + 1

    def fresh(self, char: str) -> Symbol:
        return Symbol(char=char, id=self.next_id())


# ---- Helpers ----


def num(value: int) -> ConcreteNumber:
    """Shorthand constructor for ConcreteNumber."""
    return ConcreteNumber(value=value)


def special(kind: SpecialSetKind) -> SpecialSet:
    """Shorthand constructor for SpecialSet."""
    return SpecialSet(kind=kind)


def finite_set(*items: MathObject) -> ConcreteSet:
    """Shorthand constructor for ConcreteSet."""
    return ConcreteSet(items=tuple(items))
