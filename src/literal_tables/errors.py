"""Errors raised while evaluating SQL statements."""

from __future__ import annotations


class SQLError(Exception):
    """Base class for every error surfaced by Engine.evaluate."""


class ParseError(SQLError):
    """The SQL text is not syntactically valid."""

    def __init__(self, message: str, position: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position


class UnsupportedConstruct(SQLError):
    """The statement is valid SQL but falls outside the supported subset."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class StatementNotImplemented(UnsupportedConstruct):
    """A recognized statement kind that the engine does not execute."""

    def __init__(self, statement: str) -> None:
        super().__init__(f"{statement} is not implemented")
        self.statement = statement


class TableNotFound(SQLError):
    """INSERT or SELECT referenced a table missing from the catalog."""

    def __init__(self, name: object) -> None:
        super().__init__(f"no such table: {name}")
        self.name = name
