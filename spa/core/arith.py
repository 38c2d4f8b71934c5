"""Symbolic arithmetic for deciding number relations.

This is the only place where SymPy is allowed. Numbers are converted to
SymPy integer expressions, one integer symbol per Symbol id, and a
relation is decided when the difference of its sides simplifies to a
constant.
"""

from __future__ import annotations

import sympy as sp

from spa.core.objects import (
    CompoundNumber,
    ConcreteNumber,
    NumberExpr,
    NumberOp,
    Symbol,
)


def _sym(symbol: Symbol) -> sp.Symbol:
    # Keyed by id so that two variables printed alike stay distinct
    return sp.Symbol(f"{symbol.char}_{symbol.id}", integer=True)


def to_sympy(expr: NumberExpr) -> sp.Expr:
    """Convert a number tree into a SymPy expression."""
    if isinstance(expr, ConcreteNumber):
        return sp.Integer(expr.value)
    if isinstance(expr, Symbol):
        return _sym(expr)
    if isinstance(expr, CompoundNumber):
        a = to_sympy(expr.left)
        b = to_sympy(expr.right)
        if expr.op == NumberOp.ADD:
            return a + b
        if expr.op == NumberOp.SUB:
            return a - b
        return a * b
    raise TypeError(f"Not a number: {expr!r}")


def _constant_difference(a: NumberExpr, b: NumberExpr) -> int | None:
    diff = sp.expand(to_sympy(a) - to_sympy(b))
    if diff.is_Integer:
        return int(diff)
    return None


def decide_eq(a: NumberExpr, b: NumberExpr) -> bool | None:
    """a = b, when the difference is a constant."""
    d = _constant_difference(a, b)
    return None if d is None else d == 0


def decide_lt(a: NumberExpr, b: NumberExpr) -> bool | None:
    """a < b, when the difference is a constant."""
    d = _constant_difference(a, b)
    return None if d is None else d < 0


def decide_lte(a: NumberExpr, b: NumberExpr) -> bool | None:
    """a <= b, when the difference is a constant."""
    d = _constant_difference(a, b)
    return None if d is None else d <= 0


def decide_divides(a: NumberExpr, b: NumberExpr) -> bool | None:
    """a divides b, for ground integers only."""
    x = to_sympy(a)
    y = to_sympy(b)
    if not (x.is_Integer and y.is_Integer):
        return None
    if x == 0:
        return y == 0
    return bool(sp.Mod(y, x) == 0)
