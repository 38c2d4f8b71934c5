"""Tests for mathematical objects."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from spa.core.objects import (
    CompoundNumber,
    CompoundSet,
    ConcreteNumber,
    NumberOp,
    SetOp,
    SpecialSetKind,
    Symbol,
    SymbolIds,
    finite_set,
    is_number,
    is_set,
    num,
    same_element,
    special,
)


class TestSymbol:
    def test_equality_by_id(self) -> None:
        assert Symbol(char="x", id=1) == Symbol(char="y", id=1)
        assert Symbol(char="x", id=1) != Symbol(char="x", id=2)

    def test_hash_by_id(self) -> None:
        assert hash(Symbol(char="x", id=3)) == hash(Symbol(char="z", id=3))
        assert len({Symbol(char="x", id=0), Symbol(char="x", id=0)}) == 1

    def test_prints_char_only(self) -> None:
        assert str(Symbol(char="Q", id=17)) == "Q"

    @pytest.mark.parametrize("char", ["xy", "1", "", "$"])
    def test_rejects_non_letters(self, char: str) -> None:
        with pytest.raises(ValidationError):
            Symbol(char=char, id=0)

    def test_is_number_and_set(self) -> None:
        x = Symbol(char="x", id=0)
        assert is_number(x)
        assert is_set(x)
        assert not x.is_ground()
        assert x.contains(num(1)) is None


class TestNumbers:
    def test_evaluate_compound(self) -> None:
        expr = CompoundNumber(
            op=NumberOp.MUL,
            left=CompoundNumber(op=NumberOp.ADD, left=num(2), right=num(3)),
            right=num(-4),
        )
        assert expr.evaluate() == -20
        assert expr.is_ground()
        assert str(expr) == "(* (+ 2 3) -4)"

    def test_evaluate_with_symbol(self) -> None:
        expr = CompoundNumber(op=NumberOp.SUB, left=num(1), right=Symbol(char="x", id=0))
        assert expr.evaluate() is None
        assert not expr.is_ground()
        assert [s.id for s in expr.symbols()] == [0]

    def test_concrete_is_not_a_set(self) -> None:
        assert is_number(num(5))
        assert not is_set(num(5))

    def test_frozen(self) -> None:
        n = num(1)
        with pytest.raises(ValidationError):
            n.value = 2  # type: ignore[misc]

    def test_compound_rejects_set_operand(self) -> None:
        with pytest.raises(ValidationError):
            CompoundNumber(op=NumberOp.ADD, left=num(1), right=finite_set())


class TestSets:
    def test_literal_membership(self) -> None:
        s = finite_set(num(1), num(2))
        assert s.contains(num(1)) is True
        assert s.contains(num(3)) is False
        assert str(s) == "{1, 2}"

    def test_membership_by_value(self) -> None:
        s = finite_set(CompoundNumber(op=NumberOp.ADD, left=num(1), right=num(1)))
        assert s.contains(num(2)) is True

    def test_membership_undecided_with_symbol(self) -> None:
        s = finite_set(Symbol(char="x", id=0))
        assert s.contains(num(1)) is None
        assert s.contains(Symbol(char="x", id=0)) is True

    def test_nested_sets(self) -> None:
        inner = finite_set(num(1), num(2))
        outer = finite_set(inner, finite_set())
        assert outer.contains(finite_set(num(2), num(1))) is True
        assert outer.contains(finite_set(num(3))) is False
        assert outer.contains(num(1)) is False

    def test_empty_literal(self) -> None:
        assert str(finite_set()) == "{}"
        assert finite_set().contains(num(0)) is False

    def test_special_sets_are_undecided(self) -> None:
        for kind in SpecialSetKind:
            assert special(kind).contains(num(1)) is None
        assert str(special(SpecialSetKind.INTEGERS)) == "ZZ"

    def test_union(self) -> None:
        s = CompoundSet(op=SetOp.UNION, left=finite_set(num(1)), right=finite_set(num(2)))
        assert s.contains(num(2)) is True
        assert s.contains(num(3)) is False
        assert str(s) == "(union {1} {2})"

    def test_intersect(self) -> None:
        s = CompoundSet(
            op=SetOp.INTERSECT,
            left=finite_set(num(1), num(2)),
            right=finite_set(num(2)),
        )
        assert s.contains(num(2)) is True
        assert s.contains(num(1)) is False

    def test_diff_with_special_set(self) -> None:
        s = CompoundSet(
            op=SetOp.DIFF,
            left=special(SpecialSetKind.NATURALS),
            right=finite_set(num(0)),
        )
        assert s.contains(num(0)) is False
        assert s.contains(num(1)) is None


class TestSameElement:
    def test_number_vs_set(self) -> None:
        assert same_element(num(1), finite_set()) is False

    def test_symbols(self) -> None:
        x = Symbol(char="x", id=0)
        assert same_element(x, x) is True
        assert same_element(x, Symbol(char="x", id=1)) is None


class TestClone:
    def test_clone_is_equal_copy(self) -> None:
        s = finite_set(num(1), Symbol(char="a", id=4))
        c = s.clone()
        assert c == s
        assert c is not s
        assert c.items[1] is not s.items[1]


class TestOperatorLookup:
    def test_known_tokens(self) -> None:
        assert NumberOp.parse_operator("*") == NumberOp.MUL
        assert SetOp.parse_operator("diff") == SetOp.DIFF
        assert SpecialSetKind.parse_operator("null") == SpecialSetKind.EMPTY

    def test_unknown_tokens(self) -> None:
        assert NumberOp.parse_operator("/") is None
        assert SetOp.parse_operator("+") is None
        assert SpecialSetKind.parse_operator("RR") is None


class TestSymbolIds:
    def test_sequential(self, ids: SymbolIds) -> None:
        assert ids.fresh("x").id == 0
        assert ids.fresh("x").id == 1
        assert ids.peek() == 2

    def test_reserve(self, ids: SymbolIds) -> None:
        ids.reserve(9)
        assert ids.next_id() == 10
        ids.reserve(3)
        assert ids.next_id() == 11

    def test_start(self) -> None:
        assert SymbolIds(start=100).fresh("y") == Symbol(char="y", id=100)
