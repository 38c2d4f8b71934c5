"""Decomposition rules: goal -> list of Decomp options.

One entry per sentence shape:
  (and A B)      separate         {A}, {B}
  (or A B)       first            {given not B, goal A}
                 second           {given not A, goal B}
  (=> A B)       direct           {given A, goal B}
                 contrapositive   {given not B, goal not A}
  (iff A B)      bidirectional    {A => B}, {B => A}
  (s= A B)       mutual subsets   {A sube B}, {B sube A}
  (sube A B)     definition       {forall x in A (in x B)}
  (div A B)      definition       {exists k in ZZ (= (* k A) B)}
  (forall x B)   general          {B}

Everything else (negative relations, exists, ...) has no options.
"""

from __future__ import annotations

import string

from spa.core.config import DEFAULT_CONFIG, SpaConfig
from spa.core.objects import (
    CompoundNumber,
    NumberOp,
    SpecialSetKind,
    SymbolIds,
    special,
)
from spa.core.sentences import (
    Logical,
    LogicalOp,
    Quantified,
    Quantifier,
    Relation,
    RelationOp,
    Sentence,
    exists,
    forall,
    logical,
    relation,
)
from spa.rules.base import Branch, Decomp


def decompose(
    goal: Sentence,
    ids: SymbolIds,
    config: SpaConfig = DEFAULT_CONFIG,
) -> list[Decomp]:
    """All ways to split *goal* into subgoals. Empty if it cannot be split."""
    if isinstance(goal, Logical):
        return _decompose_logical(goal)
    if isinstance(goal, Relation):
        return _decompose_relation(goal, ids, config)
    if isinstance(goal, Quantified):
        return _decompose_quantified(goal)
    return []


def _decompose_logical(goal: Logical) -> list[Decomp]:
    a, b = goal.left, goal.right
    if goal.op == LogicalOp.AND:
        return [Decomp(name="separate", branches=(Branch(goal=a), Branch(goal=b.clone())))]
    if goal.op == LogicalOp.OR:
        return [
            Decomp(name="first", branches=(Branch(given=b.negate(), goal=a),)),
            Decomp(name="second", branches=(Branch(given=a.negate(), goal=b),)),
        ]
    if goal.op == LogicalOp.IMPLIES:
        return [
            Decomp(name="direct", branches=(Branch(given=a, goal=b),)),
            Decomp(
                name="contrapositive",
                branches=(Branch(given=b.negate(), goal=a.negate()),),
            ),
        ]
    return [
        Decomp(
            name="bidirectional",
            branches=(
                Branch(goal=logical(LogicalOp.IMPLIES, a, b)),
                Branch(goal=logical(LogicalOp.IMPLIES, b.clone(), a.clone())),
            ),
        )
    ]


def _decompose_relation(goal: Relation, ids: SymbolIds, config: SpaConfig) -> list[Decomp]:
    if not goal.positive:
        return []
    a, b = goal.left, goal.right
    if goal.op == RelationOp.SET_EQ:
        return [
            Decomp(
                name="mutual subsets",
                branches=(
                    Branch(goal=relation(RelationOp.SUBSET, a, b)),
                    Branch(goal=relation(RelationOp.SUBSET, b.clone(), a.clone())),
                ),
            )
        ]
    if goal.op == RelationOp.SUBSET:
        return [Decomp(name="definition", branches=(Branch(goal=subset_definition(goal, ids, config)),))]
    if goal.op == RelationOp.DIVIDES:
        return [Decomp(name="definition", branches=(Branch(goal=divides_definition(goal, ids, config)),))]
    return []


def _decompose_quantified(goal: Quantified) -> list[Decomp]:
    # Witness strategies for exists are not modelled
    if goal.kind == Quantifier.FORALL:
        return [Decomp(name="general", branches=(Branch(goal=goal.body),))]
    return []


def subset_definition(
    goal: Relation, ids: SymbolIds, config: SpaConfig = DEFAULT_CONFIG,
) -> Quantified:
    """(sube A B) -> (forall x in A (in x B)) with a fresh x."""
    x = ids.fresh(unused_letter(config.fresh_subset_var, goal))
    return forall(x, relation(RelationOp.IN, x, goal.right), domain=goal.left)


def divides_definition(
    goal: Relation, ids: SymbolIds, config: SpaConfig = DEFAULT_CONFIG,
) -> Quantified:
    """(div A B) -> (exists k in ZZ (= (* k A) B)) with a fresh k."""
    k = ids.fresh(unused_letter(config.fresh_divides_var, goal))
    product = CompoundNumber(op=NumberOp.MUL, left=k, right=goal.left)
    return exists(
        k,
        relation(RelationOp.EQ, product, goal.right),
        domain=special(SpecialSetKind.INTEGERS),
    )


def unused_letter(preferred: str, goal: Relation) -> str:
    """A letter for a new bound variable that no symbol in *goal* prints as.

    The bound variable gets a fresh id either way, but sharing a letter with
    an operand would make the printed goal capture that operand.
    """
    taken = {s.char for s in goal.symbols()}
    if preferred not in taken:
        return preferred
    for c in string.ascii_lowercase + string.ascii_uppercase:
        if c not in taken:
            return c
    # Every letter is in use; capture cannot be avoided in the surface syntax
    return preferred
