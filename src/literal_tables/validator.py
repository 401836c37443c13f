"""Decide whether a parsed command falls inside the supported SQL subset.

Supported statements are:

* ``CREATE TABLE`` with a column list (any columns, constraints and options)
* ``INSERT INTO <table> VALUES (<literal>, ...), ...``
* ``SELECT * FROM <table>``

Anything else raises ``UnsupportedConstruct`` naming the offending clause,
or ``StatementNotImplemented`` for statement kinds the engine does not run.
Validation never consults the catalog; a plan that passes may still fail
at execution time with ``TableNotFound``.
"""

from __future__ import annotations

from dataclasses import dataclass

from literal_tables.errors import StatementNotImplemented, UnsupportedConstruct
from literal_tables.parsing.render import render
from literal_tables.parsing.sql_ast import (
    AlterTable,
    Analyze,
    Attach,
    Begin,
    Command,
    Commit,
    CreateIndex,
    CreateTable,
    CreateTrigger,
    CreateView,
    CreateVirtualTable,
    Delete,
    Detach,
    Drop,
    Explain,
    Expr,
    Insert,
    Pragma,
    QualifiedName,
    Reindex,
    Release,
    Rollback,
    Savepoint,
    Select,
    SelectCore,
    Star,
    SubquerySource,
    TableFunction,
    TableRef,
    Update,
    Vacuum,
    Values,
)
from literal_tables.values import Literal, Row

_UNIMPLEMENTED = {
    Update: "UPDATE",
    Delete: "DELETE",
    AlterTable: "ALTER TABLE",
    CreateIndex: "CREATE INDEX",
    CreateView: "CREATE VIEW",
    CreateTrigger: "CREATE TRIGGER",
    CreateVirtualTable: "CREATE VIRTUAL TABLE",
    Pragma: "PRAGMA",
    Begin: "BEGIN",
    Rollback: "ROLLBACK",
    Savepoint: "SAVEPOINT",
    Release: "RELEASE",
    Vacuum: "VACUUM",
    Analyze: "ANALYZE",
    Attach: "ATTACH",
    Detach: "DETACH",
    Reindex: "REINDEX",
}


@dataclass
class CreateTablePlan:
    definition: CreateTable


@dataclass
class InsertPlan:
    table: QualifiedName
    rows: list[Row]


@dataclass
class SelectPlan:
    table: QualifiedName


Plan = CreateTablePlan | InsertPlan | SelectPlan


def literal_value(expr: Expr) -> Literal:
    """Return the constant an expression stands for.

    A literal is returned as is. Every other expression is rejected,
    including a signed number such as ``-1``, which parses as a unary
    operator applied to a literal.
    """
    if isinstance(expr, Literal):
        return expr
    raise UnsupportedConstruct(f"only literal values are supported in VALUES, found: {render(expr)}")


class StatementValidator:
    """Map a parsed command to a plan, or reject it."""

    def validate(self, command: Command) -> Plan:
        if isinstance(command, Explain):
            keyword = "EXPLAIN QUERY PLAN" if command.query_plan else "EXPLAIN"
            raise UnsupportedConstruct(f"{keyword} is not supported")
        elif isinstance(command, CreateTable):
            return self._validate_create_table(command)
        elif isinstance(command, Insert):
            return self._validate_insert(command)
        elif isinstance(command, Select):
            return self._validate_select(command)
        elif isinstance(command, Commit):
            raise StatementNotImplemented(command.keyword)
        elif isinstance(command, Drop):
            raise StatementNotImplemented(f"DROP {command.kind}")
        elif type(command) in _UNIMPLEMENTED:
            raise StatementNotImplemented(_UNIMPLEMENTED[type(command)])
        else:
            raise ValueError(f"Unknown command type: {type(command)}")

    # --- CREATE TABLE ---

    def _validate_create_table(self, statement: CreateTable) -> CreateTablePlan:
        if statement.as_select is not None:
            raise UnsupportedConstruct("CREATE TABLE ... AS SELECT is not supported")
        return CreateTablePlan(definition=statement)

    # --- INSERT ---

    def _validate_insert(self, statement: Insert) -> InsertPlan:
        if statement.with_ is not None:
            raise UnsupportedConstruct("WITH clause is not supported in INSERT")
        if statement.verb == "REPLACE":
            raise UnsupportedConstruct("REPLACE INTO is not supported")
        if statement.conflict is not None:
            raise UnsupportedConstruct(f"INSERT OR {statement.conflict} is not supported")
        if statement.alias is not None:
            raise UnsupportedConstruct("table alias is not supported in INSERT")
        if statement.columns:
            raise UnsupportedConstruct("column list is not supported in INSERT")
        if statement.returning:
            raise UnsupportedConstruct("RETURNING clause is not supported")
        if statement.upsert:
            raise UnsupportedConstruct("upsert clause (ON CONFLICT) is not supported")
        if statement.default_values or statement.source is None:
            raise UnsupportedConstruct("DEFAULT VALUES is not supported")
        rows = self._insert_rows(statement.source)
        return InsertPlan(table=statement.table, rows=rows)

    def _insert_rows(self, source: Select) -> list[Row]:
        if source.with_ is not None:
            raise UnsupportedConstruct("WITH clause is not supported in INSERT source")
        if source.order_by:
            raise UnsupportedConstruct("ORDER BY is not supported in INSERT source")
        if source.limit is not None:
            raise UnsupportedConstruct("LIMIT is not supported in INSERT source")
        if source.body.compounds:
            op = source.body.compounds[0][0]
            raise UnsupportedConstruct(f"compound operator {op} is not supported in INSERT source")
        if not isinstance(source.body.select, Values):
            raise UnsupportedConstruct("INSERT ... SELECT is not supported, use VALUES")
        # Every row is checked before any is returned, so a bad value
        # anywhere rejects the whole statement
        return [tuple(literal_value(expr) for expr in row) for row in source.body.select.rows]

    # --- SELECT ---

    def _validate_select(self, statement: Select) -> SelectPlan:
        if statement.with_ is not None:
            raise UnsupportedConstruct("WITH clause is not supported in SELECT")
        if statement.order_by:
            raise UnsupportedConstruct("ORDER BY is not supported")
        if statement.limit is not None:
            raise UnsupportedConstruct("LIMIT is not supported")
        if statement.body.compounds:
            op = statement.body.compounds[0][0]
            raise UnsupportedConstruct(f"compound operator {op} is not supported")
        core = statement.body.select
        if not isinstance(core, SelectCore):
            raise UnsupportedConstruct("VALUES as a query is not supported")
        self._check_select_clauses(core)
        table = self._single_table(core)
        if len(core.columns) != 1 or not isinstance(core.columns[0], Star):
            raise UnsupportedConstruct("only SELECT * is supported")
        return SelectPlan(table=table.name)

    def _check_select_clauses(self, core: SelectCore) -> None:
        if core.distinctness == "DISTINCT":
            raise UnsupportedConstruct("DISTINCT is not supported")
        if core.where is not None:
            raise UnsupportedConstruct("WHERE clause is not supported")
        if core.group_by:
            raise UnsupportedConstruct("GROUP BY is not supported")
        if core.having is not None:
            raise UnsupportedConstruct("HAVING clause is not supported")
        if core.window:
            raise UnsupportedConstruct("WINDOW clause is not supported")

    def _single_table(self, core: SelectCore) -> TableRef:
        if core.from_ is None:
            raise UnsupportedConstruct("SELECT without FROM is not supported")
        if core.from_.joins:
            raise UnsupportedConstruct("joins are not supported")
        source = core.from_.source
        if isinstance(source, TableFunction):
            raise UnsupportedConstruct("table-valued functions are not supported")
        if isinstance(source, SubquerySource):
            raise UnsupportedConstruct("subqueries in FROM are not supported")
        if source.alias is not None:
            raise UnsupportedConstruct("table alias is not supported in SELECT")
        if source.indexed_by is not None:
            raise UnsupportedConstruct("INDEXED BY is not supported")
        if source.not_indexed:
            raise UnsupportedConstruct("NOT INDEXED is not supported")
        return source
