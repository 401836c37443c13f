"""In-memory table storage."""

from __future__ import annotations

import copy
from typing import Iterable

from literal_tables.parsing.sql_ast import CreateTable, QualifiedName
from literal_tables.values import Row


class Table:
    """A named table: its CREATE TABLE definition plus append-only rows.

    The definition is copied when the table is created and is kept only for
    introspection; rows are never checked against it.
    """

    def __init__(self, name: QualifiedName, definition: CreateTable) -> None:
        self.name = name
        self.definition = copy.deepcopy(definition)
        self._rows: list[Row] = []

    @property
    def sql(self) -> str:
        """Source text of the CREATE TABLE statement."""
        return self.definition.sql

    @property
    def column_names(self) -> list[str]:
        return [column.name.text for column in self.definition.columns]

    def append_rows(self, rows: Iterable[Row]) -> int:
        """Append rows in order and return how many were added."""
        new_rows = [tuple(row) for row in rows]
        self._rows.extend(new_rows)
        return len(new_rows)

    def snapshot(self) -> list[Row]:
        """Return a copy of the current rows."""
        return list(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"Table({self.name}, rows={len(self._rows)})"
