"""Catalog of the tables owned by an engine."""

from __future__ import annotations

from typing import Iterator

from literal_tables.parsing.sql_ast import CreateTable, QualifiedName
from literal_tables.table import Table


class Catalog:
    """Insertion-ordered collection of tables, unique by qualified name.

    Names are compared exactly as the parser produced them, so ``t``, ``T``
    and ``"t"`` are three different tables.
    """

    def __init__(self) -> None:
        self._tables: dict[QualifiedName, Table] = {}

    def create_table(self, definition: CreateTable) -> bool:
        """Install a table for definition.

        Returns False, leaving the existing table untouched, when a table
        with the same name already exists.
        """
        if definition.name in self._tables:
            return False
        self._tables[definition.name] = Table(definition.name, definition)
        return True

    def get_table(self, name: QualifiedName) -> Table | None:
        return self._tables.get(name)

    def names(self) -> list[QualifiedName]:
        return list(self._tables)

    def __contains__(self, name: object) -> bool:
        return name in self._tables

    def __iter__(self) -> Iterator[Table]:
        return iter(list(self._tables.values()))

    def __len__(self) -> int:
        return len(self._tables)
