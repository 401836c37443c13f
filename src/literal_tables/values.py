"""Literal values stored in table rows.

Every constant that can appear in a VALUES list is represented by one of the
frozen dataclasses below. Two literals compare equal only when they are the
same variant with the same payload, so ``Integer(1) != Real(1.0)``. Ordering
is defined within a variant only.
"""

from __future__ import annotations

from dataclasses import dataclass

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

KEYWORD_CONSTANTS = frozenset(
    {"CURRENT_DATE", "CURRENT_TIME", "CURRENT_TIMESTAMP", "TRUE", "FALSE"}
)


@dataclass(frozen=True, order=True)
class Literal:
    """Base class for SQL constant values."""


@dataclass(frozen=True, order=True)
class Integer(Literal):
    """Signed 64-bit integer literal."""

    value: int


@dataclass(frozen=True, order=True)
class Real(Literal):
    """Floating-point literal."""

    value: float


@dataclass(frozen=True, order=True)
class Text(Literal):
    """String literal, stored without its surrounding quotes."""

    value: str


@dataclass(frozen=True, order=True)
class Blob(Literal):
    """Blob literal, written as X'..' in SQL."""

    value: bytes


@dataclass(frozen=True, order=True)
class Null(Literal):
    """The NULL literal."""


@dataclass(frozen=True, order=True)
class KeywordConstant(Literal):
    """Keyword literal such as CURRENT_TIMESTAMP or TRUE."""

    keyword: str

    def __post_init__(self) -> None:
        if self.keyword.upper() not in KEYWORD_CONSTANTS:
            raise ValueError(f"Not a keyword constant: {self.keyword}")
        object.__setattr__(self, "keyword", self.keyword.upper())


Row = tuple[Literal, ...]


def integer_literal(value: int) -> Integer | Real:
    """Build an integer literal, falling back to Real outside the 64-bit range."""
    if INT64_MIN <= value <= INT64_MAX:
        return Integer(value)
    return Real(float(value))

