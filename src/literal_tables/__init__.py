"""Literal Tables - an in-memory engine for a small subset of SQL."""

from literal_tables.catalog import Catalog
from literal_tables.engine import Engine
from literal_tables.errors import (
    ParseError,
    SQLError,
    StatementNotImplemented,
    TableNotFound,
    UnsupportedConstruct,
)
from literal_tables.parsing import SQLParser, format_row, format_rows, render
from literal_tables.statement_executor import (
    CreateTableResult,
    EmptyResult,
    ExecutionResult,
    InsertResult,
    SelectResult,
)
from literal_tables.table import Table
from literal_tables.values import (
    Blob,
    Integer,
    KeywordConstant,
    Literal,
    Null,
    Real,
    Row,
    Text,
)

__all__ = [
    # Main API
    "Engine",
    "SQLParser",
    # Storage
    "Catalog",
    "Table",
    # Results
    "ExecutionResult",
    "EmptyResult",
    "CreateTableResult",
    "InsertResult",
    "SelectResult",
    # Values
    "Literal",
    "Integer",
    "Real",
    "Text",
    "Blob",
    "Null",
    "KeywordConstant",
    "Row",
    # Errors
    "SQLError",
    "ParseError",
    "UnsupportedConstruct",
    "StatementNotImplemented",
    "TableNotFound",
    # Rendering
    "render",
    "format_row",
    "format_rows",
]

__version__ = "0.1.0"
