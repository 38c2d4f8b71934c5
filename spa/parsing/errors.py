"""Typed parse errors."""

from __future__ import annotations

import enum


class ParseErrorKind(str, enum.Enum):
    UNEXPECTED_END = "unexpected_end"
    EXPECTED_TOKEN = "expected_token"
    LONG_SYMBOL = "long_symbol"
    BAD_SYMBOL = "bad_symbol"
    OUT_OF_RANGE = "out_of_range"
    EXPECTED_NUMBER = "expected_number"
    EXPECTED_SET = "expected_set"
    SET_COMMA = "set_comma"
    UNKNOWN_OPERATOR = "unknown_operator"
    TRAILING_INPUT = "trailing_input"
    TOO_DEEP = "too_deep"


_DEFAULT_MESSAGES: dict[ParseErrorKind, str] = {
    ParseErrorKind.UNEXPECTED_END: "unexpected end of input",
    ParseErrorKind.LONG_SYMBOL: "symbols can only be one character long",
    ParseErrorKind.BAD_SYMBOL: "invalid symbol character",
    ParseErrorKind.OUT_OF_RANGE: "integer out of range",
    ParseErrorKind.EXPECTED_NUMBER: "expected object to be a number",
    ParseErrorKind.EXPECTED_SET: "expected object to be a set",
    ParseErrorKind.SET_COMMA: "expected comma in set",
    ParseErrorKind.TOO_DEEP: "expression is nested too deeply",
}


class ParseError(Exception):
    """Raised inside the parser; caught at the top level into a ParseResult."""

    def __init__(self, kind: ParseErrorKind, message: str = "", position: int = 0) -> None:
        self.kind = kind
        self.message = message or _DEFAULT_MESSAGES.get(kind, kind.value)
        self.position = position
        super().__init__(self.message)

    @classmethod
    def expected(cls, token: str, position: int) -> "ParseError":
        return cls(ParseErrorKind.EXPECTED_TOKEN, f"expected '{token}'", position)
