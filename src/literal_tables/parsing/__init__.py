"""SQL lexing, parsing and rendering."""

from literal_tables.parsing.render import format_row, format_rows, render
from literal_tables.parsing.sql_lexer import SQLLexer
from literal_tables.parsing.sql_parser import SQLParser

__all__ = ["SQLLexer", "SQLParser", "render", "format_row", "format_rows"]
