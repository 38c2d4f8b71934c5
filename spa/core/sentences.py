"""Sentences: logical connectives, relations and quantified statements.

Grammar:
  sentence := Logical(op, sentence, sentence)
            | Relation(op, positive, object, object)
            | Quantified(kind, symbol, sentence)

The grammar is closed under negation. negate() pushes the negation
inward and never wraps a sentence in a separate "not" node: relations
flip their polarity flag, connectives follow De Morgan, quantifiers swap.

All nodes are frozen Pydantic models; rewrites return new trees.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Iterator, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from spa.core import arith
from spa.core.objects import (
    ConcreteSet,
    CompoundSet,
    MathObject,
    SetExpr,
    SetOp,
    Symbol,
    is_number,
    is_set,
)
from spa.core.truth import Truth


class LogicalOp(str, enum.Enum):
    AND = "and"
    OR = "or"
    IMPLIES = "=>"
    IFF = "iff"

    @classmethod
    def parse_operator(cls, token: str) -> Optional["LogicalOp"]:
        try:
            return cls(token)
        except ValueError:
            return None


class RelationOp(str, enum.Enum):
    EQ = "Eq"
    LT = "Lt"
    LTE = "Lte"
    SET_EQ = "SetEq"
    SUBSET = "Subset"
    PROPER_SUBSET = "ProperSubset"
    IN = "In"
    DIVIDES = "Divides"

    @classmethod
    def parse_operator(cls, token: str) -> Optional[tuple["RelationOp", bool]]:
        """Map a surface token to (base relation, polarity)."""
        return RELATION_TOKENS.get(token)


class Quantifier(str, enum.Enum):
    FORALL = "forall"
    EXISTS = "exists"

    @classmethod
    def parse_operator(cls, token: str) -> Optional["Quantifier"]:
        try:
            return cls(token)
        except ValueError:
            return None

    @property
    def dual(self) -> "Quantifier":
        return Quantifier.EXISTS if self is Quantifier.FORALL else Quantifier.FORALL


# Surface token -> (base relation, polarity). The printer inverts this
# table, so parsing and printing cannot drift apart.
RELATION_TOKENS: dict[str, tuple[RelationOp, bool]] = {
    "=": (RelationOp.EQ, True),
    "!=": (RelationOp.EQ, False),
    "<": (RelationOp.LT, True),
    ">=": (RelationOp.LT, False),
    "<=": (RelationOp.LTE, True),
    ">": (RelationOp.LTE, False),
    "s=": (RelationOp.SET_EQ, True),
    "s!=": (RelationOp.SET_EQ, False),
    "sub": (RelationOp.PROPER_SUBSET, True),
    # Negations, not supersets: supe is "not sub" and sup is "not sube"
    "supe": (RelationOp.PROPER_SUBSET, False),
    "sube": (RelationOp.SUBSET, True),
    "sup": (RelationOp.SUBSET, False),
    "in": (RelationOp.IN, True),
    "notin": (RelationOp.IN, False),
    "div": (RelationOp.DIVIDES, True),
    "notdiv": (RelationOp.DIVIDES, False),
}

_RELATION_PRINT: dict[tuple[RelationOp, bool], str] = {
    v: k for k, v in RELATION_TOKENS.items()
}

NUMBER_RELATIONS = frozenset(
    {RelationOp.EQ, RelationOp.LT, RelationOp.LTE, RelationOp.DIVIDES}
)
SET_RELATIONS = frozenset(
    {RelationOp.SET_EQ, RelationOp.SUBSET, RelationOp.PROPER_SUBSET}
)


class Logical(BaseModel):
    """AND, OR, implication, or equivalence of two sentences."""

    model_config = {"frozen": True}
    tag: Literal["logical"] = "logical"
    op: LogicalOp
    left: Sentence
    right: Sentence

    def clone(self) -> "Logical":
        return self.model_copy(deep=True)

    def value(self) -> Truth:
        va = self.left.value()
        vb = self.right.value()
        if not (va.decided and vb.decided):
            return Truth.UNKNOWN
        a, b = va is Truth.TRUE, vb is Truth.TRUE
        if self.op == LogicalOp.AND:
            return Truth.of(a and b)
        if self.op == LogicalOp.OR:
            return Truth.of(a or b)
        if self.op == LogicalOp.IMPLIES:
            return Truth.of(not a or b)
        return Truth.of(a == b)

    def negate(self) -> "Logical":
        if self.op == LogicalOp.AND:
            return Logical(op=LogicalOp.OR, left=self.left.negate(), right=self.right.negate())
        if self.op == LogicalOp.OR:
            return Logical(op=LogicalOp.AND, left=self.left.negate(), right=self.right.negate())
        if self.op == LogicalOp.IMPLIES:
            return Logical(op=LogicalOp.AND, left=self.left, right=self.right.negate())
        return self.expand_iff().negate()

    def contrapositive(self) -> "Logical":
        """not B => not A for A => B."""
        self._require(LogicalOp.IMPLIES)
        return Logical(
            op=LogicalOp.IMPLIES, left=self.right.negate(), right=self.left.negate(),
        )

    def expand_iff(self) -> "Logical":
        """(A => B) and (B => A) for A iff B."""
        self._require(LogicalOp.IFF)
        return Logical(
            op=LogicalOp.AND,
            left=Logical(op=LogicalOp.IMPLIES, left=self.left, right=self.right),
            right=Logical(op=LogicalOp.IMPLIES, left=self.right.clone(), right=self.left.clone()),
        )

    def _require(self, op: LogicalOp) -> None:
        if self.op != op:
            raise ValueError(f"Expected a '{op.value}' sentence, got '{self.op.value}'")

    def symbols(self) -> Iterator[Symbol]:
        yield from self.left.symbols()
        yield from self.right.symbols()

    def __str__(self) -> str:
        return f"({self.op.value} {self.left} {self.right})"


class Relation(BaseModel):
    """A relationship between two objects, with a polarity flag."""

    model_config = {"frozen": True}
    tag: Literal["relation"] = "relation"
    op: RelationOp
    positive: bool = True
    left: MathObject
    right: MathObject

    @model_validator(mode="after")
    def _check_operand_kinds(self) -> "Relation":
        if self.op in NUMBER_RELATIONS:
            for side in (self.left, self.right):
                if not is_number(side):
                    raise ValueError(f"{self.op.value} expects numbers, got {side}")
        elif self.op in SET_RELATIONS:
            for side in (self.left, self.right):
                if not is_set(side):
                    raise ValueError(f"{self.op.value} expects sets, got {side}")
        elif not is_set(self.right):
            raise ValueError(f"In expects a set on the right, got {self.right}")
        return self

    @property
    def token(self) -> str:
        return _RELATION_PRINT[(self.op, self.positive)]

    def clone(self) -> "Relation":
        return self.model_copy(deep=True)

    def value(self) -> Truth:
        base = Truth.of(self._decide_base())
        return base if self.positive else ~base

    def _decide_base(self) -> bool | None:
        a, b = self.left, self.right
        if self.op == RelationOp.EQ:
            return arith.decide_eq(a, b)
        if self.op == RelationOp.LT:
            return arith.decide_lt(a, b)
        if self.op == RelationOp.LTE:
            return arith.decide_lte(a, b)
        if self.op == RelationOp.DIVIDES:
            return arith.decide_divides(a, b)
        if self.op == RelationOp.IN:
            return b.contains(a)
        sub = _subset(a, b)
        if self.op == RelationOp.SUBSET:
            return sub
        sup = _subset(b, a)
        if self.op == RelationOp.SET_EQ:
            return _and3(sub, sup)
        return _and3(sub, None if sup is None else not sup)

    def negate(self) -> "Relation":
        return self.model_copy(update={"positive": not self.positive})

    def symbols(self) -> Iterator[Symbol]:
        yield from self.left.symbols()
        yield from self.right.symbols()

    def __str__(self) -> str:
        return f"({self.token} {self.left} {self.right})"


class Quantified(BaseModel):
    """A universally or existentially quantified statement."""

    model_config = {"frozen": True}
    tag: Literal["quantified"] = "quantified"
    kind: Quantifier
    variable: Symbol
    body: Sentence

    @classmethod
    def over(
        cls, kind: Quantifier, variable: Symbol, domain: SetExpr, body: Sentence,
    ) -> "Quantified":
        """Domain shorthand.

        forall x in S: B  ->  forall x: (x in S) => B
        exists x in S: B  ->  exists x: (x in S) and B
        """
        membership = Relation(op=RelationOp.IN, left=variable, right=domain)
        op = LogicalOp.IMPLIES if kind == Quantifier.FORALL else LogicalOp.AND
        return cls(
            kind=kind,
            variable=variable,
            body=Logical(op=op, left=membership, right=body),
        )

    def split_domain(self) -> tuple[SetExpr, Sentence] | None:
        """Inverse of over(): (domain, body) when the shape matches."""
        body = self.body
        want = LogicalOp.IMPLIES if self.kind == Quantifier.FORALL else LogicalOp.AND
        if not (isinstance(body, Logical) and body.op == want):
            return None
        guard = body.left
        if (
            isinstance(guard, Relation)
            and guard.op == RelationOp.IN
            and guard.positive
            and guard.left == self.variable
        ):
            return guard.right, body.right
        return None

    def clone(self) -> "Quantified":
        return self.model_copy(deep=True)

    def value(self) -> Truth:
        return Truth.UNKNOWN

    def negate(self) -> "Quantified":
        return Quantified(kind=self.kind.dual, variable=self.variable, body=self.body.negate())

    def symbols(self) -> Iterator[Symbol]:
        yield self.variable
        yield from self.body.symbols()

    def __str__(self) -> str:
        split = self.split_domain()
        if split is not None:
            domain, body = split
            return f"({self.kind.value} {self.variable} in {domain} {body})"
        return f"({self.kind.value} {self.variable} {self.body})"


Sentence = Annotated[
    Union[Logical, Relation, Quantified],
    Field(discriminator="tag"),
]

Logical.model_rebuild()
Quantified.model_rebuild()


def _and3(a: bool | None, b: bool | None) -> bool | None:
    if a is False or b is False:
        return False
    if a is True and b is True:
        return True
    return None


def _elements(s: SetExpr) -> list[MathObject] | None:
    """Enumerate a ground finite set, or None if that is not possible."""
    if isinstance(s, ConcreteSet):
        return list(s.items)
    if isinstance(s, CompoundSet):
        left = _elements(s.left)
        if left is None:
            return None
        candidates = left
        if s.op == SetOp.UNION:
            right = _elements(s.right)
            if right is None:
                return None
            candidates = left + right
        members = []
        for item in candidates:
            inside = s.contains(item)
            if inside is None:
                return None
            if inside:
                members.append(item)
        return members
    return None


def _subset(a: SetExpr, b: SetExpr) -> bool | None:
    if not (a.is_ground() and b.is_ground()):
        return None
    elements = _elements(a)
    if elements is None:
        return None
    result: bool | None = True
    for item in elements:
        result = _and3(result, b.contains(item))
        if result is False:
            return False
    return result


# ---- Helpers ----


def logical(op: LogicalOp, left: Sentence, right: Sentence) -> Logical:
    """Shorthand constructor for Logical."""
    return Logical(op=op, left=left, right=right)


def relation(
    op: RelationOp, left: MathObject, right: MathObject, positive: bool = True,
) -> Relation:
    """Shorthand constructor for Relation."""
    return Relation(op=op, left=left, right=right, positive=positive)


def forall(variable: Symbol, body: Sentence, domain: SetExpr | None = None) -> Quantified:
    """Shorthand constructor for a universal statement."""
    if domain is not None:
        return Quantified.over(Quantifier.FORALL, variable, domain, body)
    return Quantified(kind=Quantifier.FORALL, variable=variable, body=body)


def exists(variable: Symbol, body: Sentence, domain: SetExpr | None = None) -> Quantified:
    """Shorthand constructor for an existential statement."""
    if domain is not None:
        return Quantified.over(Quantifier.EXISTS, variable, domain, body)
    return Quantified(kind=Quantifier.EXISTS, variable=variable, body=body)


def max_symbol_id(node: Any) -> int | None:
    """Largest symbol id in a sentence or object, or None if it has none."""
    ids = [s.id for s in node.symbols()]
    return max(ids) if ids else None


def shape(node: Any) -> Any:
    """Structure of a tree with symbol ids erased.

    Two trees with equal shapes print identically and differ at most by a
    renaming of symbol identifiers.
    """
    if isinstance(node, Symbol):
        return ("sym", node.char)
    if isinstance(node, BaseModel):
        return tuple(
            shape(getattr(node, name)) for name in type(node).model_fields
        )
    if isinstance(node, tuple):
        return tuple(shape(item) for item in node)
    if isinstance(node, enum.Enum):
        return node.value
    return node


def binding_shape(node: Any) -> Any:
    """Like shape(), but keeps track of which symbols are the same variable.

    A bound occurrence records the distance to its binder (0 for the
    innermost). A free occurrence records the order in which its id first
    appears free. Two trees have equal binding shapes exactly when they
    differ by a consistent renaming of identifiers.
    """
    return _binding_shape(node, (), {})


def _binding_shape(node: Any, bound: tuple[int, ...], free: dict[int, int]) -> Any:
    if isinstance(node, Symbol):
        if node.id in bound:
            return ("bound", node.char, bound[::-1].index(node.id))
        return ("free", node.char, free.setdefault(node.id, len(free)))
    if isinstance(node, Quantified):
        inner = bound + (node.variable.id,)
        return (
            "quantified",
            node.kind.value,
            node.variable.char,
            _binding_shape(node.body, inner, free),
        )
    if isinstance(node, BaseModel):
        return tuple(
            _binding_shape(getattr(node, name), bound, free)
            for name in type(node).model_fields
        )
    if isinstance(node, tuple):
        return tuple(_binding_shape(item, bound, free) for item in node)
    if isinstance(node, enum.Enum):
        return node.value
    return node
