"""Tokenizer for the prefix surface syntax."""

from __future__ import annotations

# Always emitted as single-character tokens, even when glued to other text
PUNCTUATION = frozenset("(){},")


def tokenize(line: str) -> list[str]:
    """Split on whitespace, treating parentheses, braces and commas as tokens.

    >>> tokenize("(in x {1,2})")
    ['(', 'in', 'x', '{', '1', ',', '2', '}', ')']
    """
    tokens: list[str] = []
    word: list[str] = []
    for c in line:
        if c in PUNCTUATION or c.isspace():
            if word:
                tokens.append("".join(word))
                word.clear()
            if c in PUNCTUATION:
                tokens.append(c)
        else:
            word.append(c)
    if word:
        tokens.append("".join(word))
    return tokens
