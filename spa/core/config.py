"""Session configuration.

Loaded from an optional JSON file; every field has a default so an empty
file (or no file) gives the standard behaviour.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from spa.core.serialize import import_dict


class SpaConfig(BaseModel):
    """Tunable knobs for parsing, rewriting and display."""

    model_config = {"frozen": True, "extra": "forbid"}

    fresh_subset_var: str = "x"
    fresh_divides_var: str = "k"
    int_bits: int = Field(default=32, ge=2, le=64)
    # Parser nesting limit; the parser and printer recurse once per level
    max_depth: int = Field(default=64, ge=1, le=200)
    strict: bool = True
    show_symbol_ids: bool = False

    @field_validator("fresh_subset_var", "fresh_divides_var")
    @classmethod
    def _single_letter(cls, v: str) -> str:
        if len(v) != 1 or not v.isascii() or not v.isalpha():
            raise ValueError(f"fresh variable must be one letter, got {v!r}")
        return v

    @property
    def int_min(self) -> int:
        return -(2 ** (self.int_bits - 1))

    @property
    def int_max(self) -> int:
        return 2 ** (self.int_bits - 1) - 1


DEFAULT_CONFIG = SpaConfig()


def load_config(path: str | Path | None = None) -> SpaConfig:
    """Read a SpaConfig from JSON, or return the defaults."""
    if path is None:
        return DEFAULT_CONFIG
    return SpaConfig.model_validate(import_dict(path))
