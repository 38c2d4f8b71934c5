"""Recursive-descent parser for fully parenthesized prefix notation.

Grammar:
  sentence := '(' ( logical-op sentence sentence
                  | relation-op object object
                  | quantifier-op SYMBOL ['in' set] sentence ) ')'
  object   := '(' ( number-op number number | set-op set set ) ')'
            | '{' [object (',' object)*] '}'
            | special-set-name | integer | SYMBOL

Symbols are resolved against a scope that lives for one top-level parse.
A quantifier binds a fresh identifier, shadowing the character for the
rest of the parse; every other occurrence reuses the identifier currently
bound to its character, or binds a new one.

Inner methods raise ParseError. The public functions catch it and return
a ParseResult, so no partial tree ever escapes a failed parse.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Sequence

from spa.core.config import DEFAULT_CONFIG, SpaConfig
from spa.core.objects import (
    CompoundNumber,
    CompoundSet,
    ConcreteNumber,
    ConcreteSet,
    MathObject,
    NumberExpr,
    NumberOp,
    SetExpr,
    SetOp,
    SpecialSet,
    SpecialSetKind,
    Symbol,
    SymbolIds,
    is_number,
    is_set,
)
from spa.core.sentences import (
    NUMBER_RELATIONS,
    SET_RELATIONS,
    Logical,
    LogicalOp,
    Quantified,
    Quantifier,
    Relation,
    RelationOp,
    Sentence,
)
from spa.parsing.errors import ParseError, ParseErrorKind
from spa.parsing.tokenize import PUNCTUATION, tokenize

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class ParseResult:
    """Outcome of a top-level parse: a tree or an error, never both."""

    sentence: Sentence | MathObject | None
    end: int
    error: ParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Parser:
    """Cursor over a token sequence plus the symbol scope of one parse."""

    def __init__(
        self,
        tokens: Sequence[str],
        ids: SymbolIds | None = None,
        config: SpaConfig = DEFAULT_CONFIG,
        start: int = 0,
    ) -> None:
        self.tokens = list(tokens)
        self.pos = start
        self.ids = ids if ids is not None else SymbolIds()
        self.config = config
        self.scope: dict[str, int] = {}
        self.depth = 0

    # ---- Cursor ----

    def _peek(self) -> str | None:
        if self.pos >= len(self.tokens):
            return None
        return self.tokens[self.pos]

    def _next(self) -> str:
        if self.pos >= len(self.tokens):
            raise ParseError(ParseErrorKind.UNEXPECTED_END, position=self.pos)
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def _expect(self, token: str) -> None:
        if self._next() != token:
            raise ParseError.expected(token, self.pos - 1)

    def _enter(self, position: int) -> None:
        self.depth += 1
        if self.depth > self.config.max_depth:
            raise ParseError(ParseErrorKind.TOO_DEEP, position=position)

    # ---- Sentences ----

    def sentence(self) -> Sentence:
        start = self.pos
        self._expect("(")
        self._enter(start)
        sentence = self._sentence_body()
        self._expect(")")
        self.depth -= 1
        return sentence

    def _sentence_body(self) -> Sentence:
        tok = self._next()

        op = LogicalOp.parse_operator(tok)
        if op is not None:
            a = self.sentence()
            b = self.sentence()
            return Logical(op=op, left=a, right=b)

        rel = RelationOp.parse_operator(tok)
        if rel is not None:
            rel_op, positive = rel
            left, right = self._relation_operands(rel_op)
            return Relation(op=rel_op, positive=positive, left=left, right=right)

        kind = Quantifier.parse_operator(tok)
        if kind is not None:
            variable = self._symbol(self._next(), fresh=True)
            if self._peek() == "in":
                self.pos += 1
                domain = self.set_expr()
                body = self.sentence()
                return Quantified.over(kind, variable, domain, body)
            body = self.sentence()
            return Quantified(kind=kind, variable=variable, body=body)

        raise ParseError(
            ParseErrorKind.UNKNOWN_OPERATOR,
            f"unknown sentence operator '{tok}'",
            self.pos - 1,
        )

    def _relation_operands(self, op: RelationOp) -> tuple[MathObject, MathObject]:
        if op in NUMBER_RELATIONS:
            return self.number(), self.number()
        if op in SET_RELATIONS:
            return self.set_expr(), self.set_expr()
        return self.object(), self.set_expr()

    # ---- Objects ----

    def object(self) -> MathObject:
        start = self.pos
        tok = self._next()
        if tok == "(":
            self._enter(start)
            obj = self._compound()
            self._expect(")")
            self.depth -= 1
            return obj
        if tok == "{":
            self._enter(start)
            items = self._set_literal()
            self.depth -= 1
            return items
        if tok in PUNCTUATION:
            raise ParseError(
                ParseErrorKind.EXPECTED_TOKEN, f"expected an object, got '{tok}'", start,
            )
        kind = SpecialSetKind.parse_operator(tok)
        if kind is not None:
            return SpecialSet(kind=kind)
        if _INT_RE.fullmatch(tok):
            value = int(tok)
            if not self.config.int_min <= value <= self.config.int_max:
                raise ParseError(ParseErrorKind.OUT_OF_RANGE, position=start)
            return ConcreteNumber(value=value)
        return self._symbol(tok, fresh=False)

    def _compound(self) -> MathObject:
        tok = self._next()
        num_op = NumberOp.parse_operator(tok)
        if num_op is not None:
            a = self.number()
            b = self.number()
            return CompoundNumber(op=num_op, left=a, right=b)
        set_op = SetOp.parse_operator(tok)
        if set_op is not None:
            a = self.set_expr()
            b = self.set_expr()
            return CompoundSet(op=set_op, left=a, right=b)
        raise ParseError(
            ParseErrorKind.UNKNOWN_OPERATOR,
            f"unknown object operator '{tok}'",
            self.pos - 1,
        )

    def _set_literal(self) -> ConcreteSet:
        if self._peek() == "}":
            self.pos += 1
            return ConcreteSet(items=())
        items: list[MathObject] = []
        while True:
            items.append(self.object())
            tok = self._next()
            if tok == "}":
                return ConcreteSet(items=tuple(items))
            if tok != ",":
                raise ParseError(ParseErrorKind.SET_COMMA, position=self.pos - 1)

    def number(self) -> NumberExpr:
        start = self.pos
        obj = self.object()
        if not is_number(obj):
            raise ParseError(ParseErrorKind.EXPECTED_NUMBER, position=start)
        return obj

    def set_expr(self) -> SetExpr:
        start = self.pos
        obj = self.object()
        if not is_set(obj):
            raise ParseError(ParseErrorKind.EXPECTED_SET, position=start)
        return obj

    def _symbol(self, tok: str, fresh: bool) -> Symbol:
        if len(tok) > 1:
            raise ParseError(ParseErrorKind.LONG_SYMBOL, position=self.pos - 1)
        if not ("a" <= tok <= "z" or "A" <= tok <= "Z"):
            raise ParseError(ParseErrorKind.BAD_SYMBOL, position=self.pos - 1)
        if not fresh and tok in self.scope:
            return Symbol(char=tok, id=self.scope[tok])
        symbol = self.ids.fresh(tok)
        self.scope[tok] = symbol.id
        return symbol


# ---- Entry points ----


def parse_sentence(
    tokens: Sequence[str],
    start: int = 0,
    ids: SymbolIds | None = None,
    config: SpaConfig = DEFAULT_CONFIG,
) -> ParseResult:
    """Parse one sentence starting at *start*. Trailing tokens are left alone."""
    parser = Parser(tokens, ids=ids, config=config, start=start)
    try:
        sentence = parser.sentence()
    except ParseError as e:
        logger.debug("parse failed at token %d: %s", e.position, e.message)
        return ParseResult(sentence=None, end=parser.pos, error=e)
    return ParseResult(sentence=sentence, end=parser.pos)


def parse_object(
    tokens: Sequence[str],
    start: int = 0,
    ids: SymbolIds | None = None,
    config: SpaConfig = DEFAULT_CONFIG,
) -> ParseResult:
    """Parse one object starting at *start*."""
    parser = Parser(tokens, ids=ids, config=config, start=start)
    try:
        obj = parser.object()
    except ParseError as e:
        logger.debug("parse failed at token %d: %s", e.position, e.message)
        return ParseResult(sentence=None, end=parser.pos, error=e)
    return ParseResult(sentence=obj, end=parser.pos)


def _require_end(result: ParseResult, tokens: Sequence[str]) -> ParseResult:
    if result.ok and result.end < len(tokens):
        err = ParseError(
            ParseErrorKind.TRAILING_INPUT,
            f"unexpected input after end: '{tokens[result.end]}'",
            result.end,
        )
        return ParseResult(sentence=None, end=result.end, error=err)
    return result


def parse_text(
    text: str,
    ids: SymbolIds | None = None,
    config: SpaConfig = DEFAULT_CONFIG,
) -> ParseResult:
    """Tokenize and parse a complete sentence; nothing may follow it."""
    tokens = tokenize(text)
    return _require_end(parse_sentence(tokens, ids=ids, config=config), tokens)


def parse_object_text(
    text: str,
    ids: SymbolIds | None = None,
    config: SpaConfig = DEFAULT_CONFIG,
) -> ParseResult:
    """Tokenize and parse a complete object; nothing may follow it."""
    tokens = tokenize(text)
    return _require_end(parse_object(tokens, ids=ids, config=config), tokens)
