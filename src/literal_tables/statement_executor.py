"""Statement executor for the supported SQL subset."""

from __future__ import annotations

from dataclasses import dataclass, field

from literal_tables.catalog import Catalog
from literal_tables.errors import TableNotFound
from literal_tables.parsing.sql_ast import Command, QualifiedName
from literal_tables.table import Table
from literal_tables.validator import (
    CreateTablePlan,
    InsertPlan,
    SelectPlan,
    StatementValidator,
)
from literal_tables.values import Row


@dataclass
class ExecutionResult:
    """Result of evaluating one statement."""

    columns: list[str] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)
    message: str | None = None


@dataclass
class EmptyResult(ExecutionResult):
    """Nothing was parsed: the input held no statement."""


@dataclass
class CreateTableResult(ExecutionResult):
    """Result of CREATE TABLE. created is False when the table already existed."""

    created: bool = False


@dataclass
class InsertResult(ExecutionResult):
    """Result of INSERT."""

    row_count: int = 0


@dataclass
class SelectResult(ExecutionResult):
    """Result of SELECT. rows is a copy, unaffected by later inserts."""

    table: QualifiedName | None = None


class StatementExecutor:
    """Runs validated statements against a catalog.

    The executor keeps no state of its own between calls.
    """

    def __init__(self, catalog: Catalog, validator: StatementValidator | None = None) -> None:
        self.catalog = catalog
        self.validator = validator or StatementValidator()

    def execute(self, command: Command) -> ExecutionResult:
        """Validate and execute a command and return its result."""
        plan = self.validator.validate(command)
        if isinstance(plan, CreateTablePlan):
            return self._execute_create_table(plan)
        elif isinstance(plan, InsertPlan):
            return self._execute_insert(plan)
        elif isinstance(plan, SelectPlan):
            return self._execute_select(plan)
        else:
            raise ValueError(f"Unknown plan type: {type(plan)}")

    def _require_table(self, name: QualifiedName) -> Table:
        table = self.catalog.get_table(name)
        if table is None:
            raise TableNotFound(name)
        return table

    def _execute_create_table(self, plan: CreateTablePlan) -> CreateTableResult:
        name = plan.definition.name
        created = self.catalog.create_table(plan.definition)
        message = f"Created table {name}" if created else f"Table {name} already exists"
        return CreateTableResult(message=message, created=created)

    def _execute_insert(self, plan: InsertPlan) -> InsertResult:
        table = self._require_table(plan.table)
        count = table.append_rows(plan.rows)
        noun = "row" if count == 1 else "rows"
        return InsertResult(message=f"Inserted {count} {noun} into {plan.table}", row_count=count)

    def _execute_select(self, plan: SelectPlan) -> SelectResult:
        table = self._require_table(plan.table)
        return SelectResult(columns=table.column_names, rows=table.snapshot(), table=plan.table)
