"""Tests for sentences: printing, truth values and negation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from spa.core.objects import SpecialSetKind, Symbol, finite_set, num, special
from spa.core.sentences import (
    RELATION_TOKENS,
    Logical,
    LogicalOp,
    Quantified,
    Quantifier,
    Relation,
    RelationOp,
    binding_shape,
    exists,
    forall,
    logical,
    max_symbol_id,
    relation,
    shape,
)
from spa.core.truth import Truth

X = Symbol(char="x", id=0)
Y = Symbol(char="y", id=1)


def _eq(a, b, positive: bool = True) -> Relation:
    return relation(RelationOp.EQ, a, b, positive=positive)


class TestTruth:
    def test_invert(self) -> None:
        assert ~Truth.TRUE is Truth.FALSE
        assert ~Truth.FALSE is Truth.TRUE
        assert ~Truth.UNKNOWN is Truth.UNKNOWN

    def test_of(self) -> None:
        assert Truth.of(True) is Truth.TRUE
        assert Truth.of(None) is Truth.UNKNOWN
        assert not Truth.UNKNOWN.decided


class TestRelationTokens:
    def test_every_token_prints_back(self) -> None:
        for token, (op, positive) in RELATION_TOKENS.items():
            if op == RelationOp.IN:
                rel = Relation(op=op, positive=positive, left=X, right=finite_set())
            elif op in (RelationOp.EQ, RelationOp.LT, RelationOp.LTE, RelationOp.DIVIDES):
                rel = Relation(op=op, positive=positive, left=num(1), right=num(2))
            else:
                rel = Relation(op=op, positive=positive, left=finite_set(), right=finite_set())
            assert rel.token == token

    def test_parse_operator(self) -> None:
        assert RelationOp.parse_operator(">") == (RelationOp.LTE, False)
        assert RelationOp.parse_operator("sub") == (RelationOp.PROPER_SUBSET, True)
        assert RelationOp.parse_operator("=>") is None


class TestRelationValue:
    @pytest.mark.parametrize(
        "rel, expected",
        [
            (_eq(num(1), num(1)), Truth.TRUE),
            (_eq(num(1), num(2), positive=False), Truth.TRUE),
            (relation(RelationOp.LT, num(1), num(2)), Truth.TRUE),
            (relation(RelationOp.LT, num(2), num(1), positive=False), Truth.TRUE),
            (relation(RelationOp.LTE, num(3), num(2), positive=False), Truth.TRUE),
            (relation(RelationOp.DIVIDES, num(3), num(7)), Truth.FALSE),
            (relation(RelationOp.IN, num(1), finite_set(num(1), num(2))), Truth.TRUE),
            (relation(RelationOp.IN, num(3), finite_set(num(1)), positive=False), Truth.TRUE),
            (relation(RelationOp.IN, num(1), special(SpecialSetKind.INTEGERS)), Truth.UNKNOWN),
            (_eq(X, num(1)), Truth.UNKNOWN),
        ],
    )
    def test_numbers_and_membership(self, rel: Relation, expected: Truth) -> None:
        assert rel.value() is expected

    def test_set_equality_ignores_order(self) -> None:
        a = finite_set(num(1), num(2))
        b = finite_set(num(2), num(1))
        assert relation(RelationOp.SET_EQ, a, b).value() is Truth.TRUE

    def test_subsets(self) -> None:
        small = finite_set(num(1))
        big = finite_set(num(1), num(2))
        assert relation(RelationOp.SUBSET, small, big).value() is Truth.TRUE
        assert relation(RelationOp.PROPER_SUBSET, small, big).value() is Truth.TRUE
        assert relation(RelationOp.PROPER_SUBSET, big, big).value() is Truth.FALSE
        assert relation(RelationOp.SUBSET, big, small).value() is Truth.FALSE
        # supe is the negation of a proper subset
        assert relation(RelationOp.PROPER_SUBSET, big, big, positive=False).value() is Truth.TRUE

    def test_subset_of_special_set_undecided(self) -> None:
        rel = relation(RelationOp.SUBSET, finite_set(num(1)), special(SpecialSetKind.NATURALS))
        assert rel.value() is Truth.UNKNOWN

    def test_empty_set_is_subset(self) -> None:
        rel = relation(RelationOp.SUBSET, finite_set(), finite_set(num(1)))
        assert rel.value() is Truth.TRUE


class TestOperandKinds:
    def test_number_relation_rejects_set(self) -> None:
        with pytest.raises(ValidationError):
            relation(RelationOp.EQ, finite_set(), num(1))

    def test_set_relation_rejects_number(self) -> None:
        with pytest.raises(ValidationError):
            relation(RelationOp.SUBSET, num(1), finite_set())

    def test_membership_needs_set_on_right(self) -> None:
        with pytest.raises(ValidationError):
            relation(RelationOp.IN, num(1), num(2))

    def test_symbol_fits_anywhere(self) -> None:
        relation(RelationOp.EQ, X, Y)
        relation(RelationOp.SET_EQ, X, Y)
        relation(RelationOp.IN, X, Y)


class TestNegation:
    def test_relation_flips_polarity(self) -> None:
        rel = relation(RelationOp.LT, X, num(3))
        neg = rel.negate()
        assert str(neg) == "(>= x 3)"
        assert rel.positive
        assert neg.negate() == rel

    def test_de_morgan(self) -> None:
        s = logical(LogicalOp.AND, _eq(X, num(1)), relation(RelationOp.LT, Y, num(2)))
        assert str(s.negate()) == "(or (!= x 1) (>= y 2))"
        t = logical(LogicalOp.OR, _eq(X, num(1)), _eq(Y, num(2)))
        assert str(t.negate()) == "(and (!= x 1) (!= y 2))"

    def test_implication(self) -> None:
        s = logical(LogicalOp.IMPLIES, _eq(X, num(1)), _eq(Y, num(2)))
        assert str(s.negate()) == "(and (= x 1) (!= y 2))"

    def test_iff(self) -> None:
        s = logical(LogicalOp.IFF, _eq(X, num(1)), _eq(Y, num(2)))
        assert str(s.negate()) == "(or (and (= x 1) (!= y 2)) (and (= y 2) (!= x 1)))"

    def test_quantifier_swaps(self) -> None:
        s = forall(X, relation(RelationOp.LT, X, num(0)))
        neg = s.negate()
        assert neg.kind == Quantifier.EXISTS
        assert str(neg) == "(exists x (>= x 0))"

    def test_negation_does_not_mutate(self) -> None:
        s = logical(LogicalOp.AND, _eq(X, num(1)), _eq(Y, num(2)))
        before = str(s)
        s.negate()
        assert str(s) == before

    def test_value_of_negation(self) -> None:
        s = logical(LogicalOp.IFF, _eq(num(1), num(1)), _eq(num(2), num(3)))
        assert s.value() is Truth.FALSE
        assert s.negate().value() is Truth.TRUE


class TestLogicalValue:
    def test_unknown_propagates(self) -> None:
        s = logical(LogicalOp.OR, _eq(num(1), num(1)), _eq(X, num(1)))
        assert s.value() is Truth.UNKNOWN

    def test_implication_value(self) -> None:
        s = logical(LogicalOp.IMPLIES, _eq(num(1), num(2)), _eq(num(1), num(3)))
        assert s.value() is Truth.TRUE


class TestRewrites:
    def test_contrapositive(self) -> None:
        s = logical(LogicalOp.IMPLIES, _eq(X, num(1)), relation(RelationOp.LT, Y, num(2)))
        assert str(s.contrapositive()) == "(=> (>= y 2) (!= x 1))"

    def test_expand_iff(self) -> None:
        s = logical(LogicalOp.IFF, _eq(X, num(1)), _eq(Y, num(2)))
        assert str(s.expand_iff()) == "(and (=> (= x 1) (= y 2)) (=> (= y 2) (= x 1)))"

    def test_wrong_connective(self) -> None:
        s = logical(LogicalOp.AND, _eq(X, num(1)), _eq(Y, num(2)))
        with pytest.raises(ValueError):
            s.contrapositive()
        with pytest.raises(ValueError):
            s.expand_iff()


class TestQuantified:
    def test_domain_sugar(self) -> None:
        s = forall(X, relation(RelationOp.LTE, X, num(0), positive=False),
                   domain=special(SpecialSetKind.NATURALS))
        assert isinstance(s.body, Logical)
        assert s.body.op == LogicalOp.IMPLIES
        assert str(s) == "(forall x in NN (> x 0))"

    def test_exists_domain(self) -> None:
        s = exists(X, _eq(X, num(2)), domain=finite_set(num(1), num(2)))
        assert s.body.op == LogicalOp.AND
        assert str(s) == "(exists x in {1, 2} (= x 2))"

    def test_split_domain(self) -> None:
        dom = special(SpecialSetKind.INTEGERS)
        s = forall(X, _eq(X, X), domain=dom)
        split = s.split_domain()
        assert split is not None
        assert split[0] == dom

    def test_guard_on_other_variable_is_not_sugar(self) -> None:
        body = logical(
            LogicalOp.IMPLIES,
            relation(RelationOp.IN, Y, special(SpecialSetKind.INTEGERS)),
            _eq(X, Y),
        )
        s = Quantified(kind=Quantifier.FORALL, variable=X, body=body)
        assert s.split_domain() is None
        assert str(s) == "(forall x (=> (in y ZZ) (= x y)))"

    def test_value_is_unknown(self) -> None:
        s = forall(X, _eq(num(1), num(1)))
        assert s.value() is Truth.UNKNOWN

    def test_negated_sugar_keeps_domain(self) -> None:
        s = forall(X, relation(RelationOp.LT, X, num(5)), domain=finite_set(num(1)))
        assert str(s.negate()) == "(exists x in {1} (>= x 5))"


class TestHelpers:
    def test_max_symbol_id(self) -> None:
        s = logical(LogicalOp.AND, _eq(X, num(1)), _eq(Symbol(char="z", id=7), Y))
        assert max_symbol_id(s) == 7
        assert max_symbol_id(_eq(num(1), num(1))) is None

    def test_shape_ignores_ids(self) -> None:
        a = _eq(Symbol(char="x", id=0), num(1))
        b = _eq(Symbol(char="x", id=9), num(1))
        c = _eq(Symbol(char="y", id=0), num(1))
        assert shape(a) == shape(b)
        assert shape(a) != shape(c)

    def test_binding_shape_tracks_sharing(self) -> None:
        x0, x1, x2 = (Symbol(char="x", id=i) for i in range(3))
        same = logical(LogicalOp.AND, _eq(x0, num(1)), _eq(x0, num(2)))
        renamed = logical(LogicalOp.AND, _eq(x2, num(1)), _eq(x2, num(2)))
        split = logical(LogicalOp.AND, _eq(x0, num(1)), _eq(x1, num(2)))
        assert shape(same) == shape(split)
        assert binding_shape(same) == binding_shape(renamed)
        assert binding_shape(same) != binding_shape(split)

    def test_binding_shape_separates_bound_from_free(self) -> None:
        x0, x1 = Symbol(char="x", id=0), Symbol(char="x", id=1)
        captured = forall(x1, relation(RelationOp.IN, x1, x1))
        distinct = forall(x1, relation(RelationOp.IN, x1, x0))
        assert shape(captured) == shape(distinct)
        assert binding_shape(captured) != binding_shape(distinct)

    def test_clone_is_deep(self) -> None:
        s = logical(LogicalOp.AND, _eq(X, num(1)), _eq(Y, num(2)))
        c = s.clone()
        assert c == s
        assert c.left is not s.left
