"""Deduction rules: sentence -> list of Deduct (forward chaining).

Connectives:
  (and A B)      A; B
  (or A B)       A if not B; B if not A
  (=> A B)       B if A; (=> (not B) (not A))
  (iff A B)      (=> A B); (=> B A)
  quantified     its body (no instantiation)

Relations yield the weakenings that are sound for their polarity, and
positive subset/divisibility statements unfold to their definitions.
"""

from __future__ import annotations

from spa.core.config import DEFAULT_CONFIG, SpaConfig
from spa.core.objects import SymbolIds
from spa.core.sentences import (
    Logical,
    LogicalOp,
    Quantified,
    Relation,
    RelationOp,
    Sentence,
    relation,
)
from spa.rules.base import Deduct
from spa.rules.decompose import divides_definition, subset_definition


def deduce(
    source: Sentence,
    ids: SymbolIds,
    config: SpaConfig = DEFAULT_CONFIG,
) -> list[Deduct]:
    """All facts derivable from *source* without branching."""
    if isinstance(source, Logical):
        return _deduce_logical(source)
    if isinstance(source, Relation):
        return _deduce_relation(source, ids, config)
    if isinstance(source, Quantified):
        return [Deduct(name="body", conclusion=source.body)]
    return []


def _deduce_logical(source: Logical) -> list[Deduct]:
    a, b = source.left, source.right
    if source.op == LogicalOp.AND:
        return [
            Deduct(name="left conjunct", conclusion=a),
            Deduct(name="right conjunct", conclusion=b),
        ]
    if source.op == LogicalOp.OR:
        return [
            Deduct(name="left disjunct", conclusion=a, hypothesis=b.negate()),
            Deduct(name="right disjunct", conclusion=b, hypothesis=a.negate()),
        ]
    if source.op == LogicalOp.IMPLIES:
        return [
            Deduct(name="modus ponens", conclusion=b, hypothesis=a),
            Deduct(name="contrapositive", conclusion=source.contrapositive()),
        ]
    return [
        Deduct(name="forward", conclusion=Logical(op=LogicalOp.IMPLIES, left=a, right=b)),
        Deduct(name="backward", conclusion=Logical(op=LogicalOp.IMPLIES, left=b, right=a)),
    ]


def _deduce_relation(source: Relation, ids: SymbolIds, config: SpaConfig) -> list[Deduct]:
    a, b = source.left, source.right
    op, pos = source.op, source.positive

    if op == RelationOp.EQ and pos:
        return [
            Deduct(name="weaken", conclusion=relation(RelationOp.LTE, a, b)),
            Deduct(name="weaken reversed", conclusion=relation(RelationOp.LTE, b, a)),
            Deduct(name="symmetry", conclusion=relation(RelationOp.EQ, b, a)),
        ]
    if op == RelationOp.EQ:
        return [Deduct(name="symmetry", conclusion=relation(RelationOp.EQ, b, a, positive=False))]
    if op == RelationOp.LT and pos:
        return [
            Deduct(name="weaken", conclusion=relation(RelationOp.LTE, a, b)),
            Deduct(name="distinct", conclusion=relation(RelationOp.EQ, a, b, positive=False)),
        ]
    if op == RelationOp.LT:
        # a >= b
        return [Deduct(name="flip", conclusion=relation(RelationOp.LTE, b, a))]
    if op == RelationOp.LTE and not pos:
        # a > b
        return [
            Deduct(name="flip", conclusion=relation(RelationOp.LT, b, a)),
            Deduct(name="distinct", conclusion=relation(RelationOp.EQ, a, b, positive=False)),
        ]
    if op == RelationOp.SET_EQ and pos:
        return [
            Deduct(name="forward subset", conclusion=relation(RelationOp.SUBSET, a, b)),
            Deduct(name="backward subset", conclusion=relation(RelationOp.SUBSET, b, a)),
        ]
    if op == RelationOp.PROPER_SUBSET and pos:
        return [
            Deduct(name="weaken", conclusion=relation(RelationOp.SUBSET, a, b)),
            Deduct(name="distinct", conclusion=relation(RelationOp.SET_EQ, a, b, positive=False)),
        ]
    if op == RelationOp.SUBSET and pos:
        return [Deduct(name="definition", conclusion=subset_definition(source, ids, config))]
    if op == RelationOp.DIVIDES and pos:
        return [Deduct(name="definition", conclusion=divides_definition(source, ids, config))]
    return []
