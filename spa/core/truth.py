"""Three-valued truth for sentences."""

from __future__ import annotations

import enum


class Truth(str, enum.Enum):
    """True, False, or Unknown (the truth could not be decided)."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"

    @classmethod
    def of(cls, value: bool | None) -> "Truth":
        if value is None:
            return cls.UNKNOWN
        return cls.TRUE if value else cls.FALSE

    @property
    def decided(self) -> bool:
        return self is not Truth.UNKNOWN

    def __invert__(self) -> "Truth":
        if self is Truth.UNKNOWN:
            return self
        return Truth.FALSE if self is Truth.TRUE else Truth.TRUE
