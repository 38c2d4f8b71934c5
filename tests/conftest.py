"""Shared fixtures for spa tests."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from spa.core.objects import SymbolIds
from spa.parsing.parser import parse_text
from spa.prover.engine import TheoremProver
from spa.session import Session


@pytest.fixture
def ids() -> SymbolIds:
    """A fresh identifier generator starting at 0."""
    return SymbolIds()


@pytest.fixture
def parse(ids):
    """Parse a sentence with the shared generator; fails the test on error."""

    def _parse(text: str):
        result = parse_text(text, ids=ids)
        assert result.ok, result.error.message
        return result.sentence

    return _parse


@pytest.fixture
def prover(ids) -> TheoremProver:
    return TheoremProver(ids=ids)


@pytest.fixture
def console() -> Console:
    """A console writing to a buffer, wide enough that nothing wraps."""
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def session(console) -> Session:
    return Session(console=console)
