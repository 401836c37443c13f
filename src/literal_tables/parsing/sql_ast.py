"""AST node types produced by the SQL parser.

Literal values from ``literal_tables.values`` double as expression nodes, so
the VALUES rows of an INSERT are made of the same objects that end up stored
in a table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from literal_tables.values import Literal

_QUOTES = {'"': '"', "`": "`", "[": "]"}


@dataclass(frozen=True)
class Name:
    """An identifier exactly as written, including any quotes."""

    text: str

    @property
    def value(self) -> str:
        """The identifier with its quotes removed."""
        closing = _QUOTES.get(self.text[:1])
        if closing is None or len(self.text) < 2 or self.text[-1] != closing:
            return self.text
        inner = self.text[1:-1]
        if closing != "]":
            inner = inner.replace(closing * 2, closing)
        return inner

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class QualifiedName:
    """A possibly schema-qualified object name."""

    name: Name
    schema: Name | None = None

    def __str__(self) -> str:
        if self.schema is None:
            return str(self.name)
        return f"{self.schema}.{self.name}"


# --- Expressions ---


@dataclass
class Column:
    """Column reference, optionally qualified by table and schema."""

    name: Name
    table: Name | None = None
    schema: Name | None = None


@dataclass
class Variable:
    """Bind parameter such as ?, ?1, :name, @name or $name."""

    text: str


@dataclass
class Unary:
    """Prefix operator: -, +, ~ or NOT."""

    op: str
    operand: Expr


@dataclass
class Binary:
    """Infix operator, including AND, OR, IS and IS NOT."""

    op: str
    left: Expr
    right: Expr


@dataclass
class Like:
    """LIKE, GLOB, REGEXP or MATCH, optionally negated."""

    op: str
    left: Expr
    pattern: Expr
    escape: Expr | None = None
    negated: bool = False


@dataclass
class IsNull:
    """ISNULL, NOTNULL or NOT NULL postfix test."""

    operand: Expr
    negated: bool = False


@dataclass
class Between:
    operand: Expr
    low: Expr
    high: Expr
    negated: bool = False


@dataclass
class InList:
    operand: Expr
    items: list[Expr]
    negated: bool = False


@dataclass
class InSelect:
    operand: Expr
    select: Select
    negated: bool = False


@dataclass
class Exists:
    select: Select


@dataclass
class Subquery:
    """Scalar subquery used as an expression."""

    select: Select


@dataclass
class Case:
    operand: Expr | None
    whens: list[tuple[Expr, Expr]]
    else_: Expr | None = None


@dataclass
class TypeName:
    """Declared type: one or more words plus up to two numeric arguments."""

    name: str
    args: list[Literal] = field(default_factory=list)


@dataclass
class Cast:
    expr: Expr
    type_name: TypeName


@dataclass
class Collate:
    expr: Expr
    collation: Name


@dataclass
class FrameBound:
    """One end of a window frame, e.g. UNBOUNDED PRECEDING or 3 FOLLOWING."""

    kind: str
    expr: Expr | None = None


@dataclass
class WindowFrame:
    unit: str
    start: FrameBound
    end: FrameBound | None = None


@dataclass
class WindowDefinition:
    partition_by: list[Expr] = field(default_factory=list)
    order_by: list[SortedColumn] = field(default_factory=list)
    frame: WindowFrame | None = None


@dataclass
class NamedWindow:
    """Entry of a WINDOW clause."""

    name: Name
    definition: WindowDefinition


@dataclass
class FunctionCall:
    name: Name
    args: list[Expr] = field(default_factory=list)
    distinct: bool = False
    star: bool = False
    filter: Expr | None = None
    over: Name | WindowDefinition | None = None


@dataclass
class Parenthesized:
    """Parenthesized expression or row value: (a) or (a, b)."""

    exprs: list[Expr]


Expr = Union[
    Literal, Column, Variable, Unary, Binary, Like, IsNull, Between, InList,
    InSelect, Exists, Subquery, Case, Cast, Collate, FunctionCall, Parenthesized,
]


# --- SELECT ---


@dataclass
class SortedColumn:
    expr: Expr
    order: str | None = None
    nulls: str | None = None


@dataclass
class Limit:
    expr: Expr
    offset: Expr | None = None


@dataclass
class CommonTableExpr:
    name: Name
    select: Select
    columns: list[Name] = field(default_factory=list)
    materialized: str | None = None


@dataclass
class With:
    ctes: list[CommonTableExpr]
    recursive: bool = False


@dataclass
class Star:
    """The * result column."""


@dataclass
class TableStar:
    """The table.* result column."""

    table: Name


@dataclass
class ExprColumn:
    expr: Expr
    alias: Name | None = None


ResultColumn = Union[Star, TableStar, ExprColumn]


@dataclass
class TableRef:
    """Named table in a FROM clause."""

    name: QualifiedName
    alias: Name | None = None
    indexed_by: Name | None = None
    not_indexed: bool = False


@dataclass
class TableFunction:
    """Table-valued function call in a FROM clause."""

    name: QualifiedName
    args: list[Expr] = field(default_factory=list)
    alias: Name | None = None


@dataclass
class SubquerySource:
    """Parenthesized SELECT in a FROM clause."""

    select: Select
    alias: Name | None = None


TableSource = Union[TableRef, TableFunction, SubquerySource]


@dataclass
class Join:
    operator: str
    source: TableSource
    on: Expr | None = None
    using: list[Name] | None = None


@dataclass
class FromClause:
    source: TableSource
    joins: list[Join] = field(default_factory=list)


@dataclass
class SelectCore:
    """One SELECT ... FROM ... WHERE ... block."""

    columns: list[ResultColumn]
    distinctness: str | None = None
    from_: FromClause | None = None
    where: Expr | None = None
    group_by: list[Expr] = field(default_factory=list)
    having: Expr | None = None
    window: list[NamedWindow] = field(default_factory=list)


@dataclass
class Values:
    """VALUES (...), (...) used as a query."""

    rows: list[list[Expr]]


@dataclass
class SelectBody:
    """First select plus any UNION / INTERSECT / EXCEPT continuations."""

    select: SelectCore | Values
    compounds: list[tuple[str, SelectCore | Values]] = field(default_factory=list)


@dataclass
class Select:
    body: SelectBody
    with_: With | None = None
    order_by: list[SortedColumn] = field(default_factory=list)
    limit: Limit | None = None


# --- CREATE TABLE ---


@dataclass
class ForeignKeyClause:
    table: Name
    columns: list[Name] = field(default_factory=list)
    actions: list[str] = field(default_factory=list)
    deferrable: str | None = None


@dataclass
class ColumnConstraint:
    """Column constraint; which fields are set depends on ``kind``."""

    kind: str
    name: Name | None = None
    expr: Expr | None = None
    order: str | None = None
    conflict: str | None = None
    autoincrement: bool = False
    collation: Name | None = None
    foreign_key: ForeignKeyClause | None = None
    detail: str | None = None


@dataclass
class ColumnDefinition:
    name: Name
    type_name: TypeName | None = None
    constraints: list[ColumnConstraint] = field(default_factory=list)


@dataclass
class TableConstraint:
    kind: str
    name: Name | None = None
    columns: list[SortedColumn] = field(default_factory=list)
    expr: Expr | None = None
    conflict: str | None = None
    autoincrement: bool = False
    foreign_key: ForeignKeyClause | None = None


@dataclass
class CreateTable:
    name: QualifiedName
    columns: list[ColumnDefinition] = field(default_factory=list)
    constraints: list[TableConstraint] = field(default_factory=list)
    temporary: bool = False
    if_not_exists: bool = False
    as_select: Select | None = None
    options: list[str] = field(default_factory=list)
    # Source text of the statement, filled in by the parser
    sql: str = field(default="", compare=False)


# --- INSERT / UPDATE / DELETE ---


@dataclass
class Assignment:
    columns: list[Name]
    value: Expr


@dataclass
class Upsert:
    """ON CONFLICT ... DO NOTHING | DO UPDATE SET ..."""

    action: str
    target: list[SortedColumn] = field(default_factory=list)
    target_where: Expr | None = None
    assignments: list[Assignment] = field(default_factory=list)
    where: Expr | None = None


@dataclass
class Insert:
    table: QualifiedName
    source: Select | None = None
    with_: With | None = None
    verb: str = "INSERT"
    conflict: str | None = None
    alias: Name | None = None
    columns: list[Name] = field(default_factory=list)
    default_values: bool = False
    upsert: list[Upsert] = field(default_factory=list)
    returning: list[ResultColumn] = field(default_factory=list)


@dataclass
class Update:
    table: QualifiedName
    assignments: list[Assignment]
    with_: With | None = None
    conflict: str | None = None
    alias: Name | None = None
    from_: FromClause | None = None
    where: Expr | None = None
    returning: list[ResultColumn] = field(default_factory=list)


@dataclass
class Delete:
    table: QualifiedName
    with_: With | None = None
    alias: Name | None = None
    where: Expr | None = None
    returning: list[ResultColumn] = field(default_factory=list)


# --- Other statements ---


@dataclass
class Drop:
    kind: str
    name: QualifiedName
    if_exists: bool = False


@dataclass
class AlterTable:
    table: QualifiedName
    action: str
    column: Name | None = None
    new_name: Name | None = None
    definition: ColumnDefinition | None = None


@dataclass
class CreateIndex:
    name: QualifiedName
    table: Name
    columns: list[SortedColumn]
    unique: bool = False
    if_not_exists: bool = False
    where: Expr | None = None


@dataclass
class CreateView:
    name: QualifiedName
    select: Select
    columns: list[Name] = field(default_factory=list)
    temporary: bool = False
    if_not_exists: bool = False


@dataclass
class CreateTrigger:
    """CREATE TRIGGER; the body is kept as source text, BEGIN to END."""

    name: QualifiedName
    event: str
    table: QualifiedName
    body: str
    timing: str | None = None
    columns: list[Name] = field(default_factory=list)
    for_each_row: bool = False
    when: Expr | None = None
    temporary: bool = False
    if_not_exists: bool = False


@dataclass
class CreateVirtualTable:
    name: QualifiedName
    module: Name
    arguments: str | None = None
    if_not_exists: bool = False


@dataclass
class Attach:
    expr: Expr
    schema: Expr
    key: Expr | None = None


@dataclass
class Detach:
    schema: Expr


@dataclass
class Reindex:
    target: QualifiedName | None = None


@dataclass
class Pragma:
    name: QualifiedName
    value: Any = None


@dataclass
class Begin:
    mode: str | None = None


@dataclass
class Commit:
    # COMMIT or END, as written
    keyword: str = "COMMIT"


@dataclass
class Rollback:
    savepoint: Name | None = None


@dataclass
class Savepoint:
    name: Name


@dataclass
class Release:
    name: Name


@dataclass
class Vacuum:
    schema: Name | None = None


@dataclass
class Analyze:
    target: QualifiedName | None = None


Statement = Union[
    CreateTable, Insert, Select, Update, Delete, Drop, AlterTable, CreateIndex,
    CreateView, CreateTrigger, CreateVirtualTable, Attach, Detach, Reindex,
    Pragma, Begin, Commit, Rollback, Savepoint, Release, Vacuum, Analyze,
]


@dataclass
class Explain:
    """EXPLAIN or EXPLAIN QUERY PLAN wrapped around a statement."""

    statement: Statement
    query_plan: bool = False


Command = Union[Statement, Explain]
