"""Render AST literals and expressions back to SQL text.

``render`` produces a deterministic, minimal SQL form of a single node.
``format_row`` and ``format_rows`` build the display form used by the REPL
and the conformance harness: values joined with ``|``, rows with newlines.
"""

from __future__ import annotations

from typing import Iterable

from literal_tables.parsing.sql_ast import (
    Between,
    Binary,
    Case,
    Cast,
    Collate,
    Column,
    Exists,
    FunctionCall,
    InList,
    InSelect,
    IsNull,
    Like,
    Parenthesized,
    Subquery,
    TypeName,
    Unary,
    Variable,
)
from literal_tables.values import Blob, Integer, KeywordConstant, Literal, Null, Real, Text


def render_real(value: float) -> str:
    """Render a float the way SQLite prints REAL values."""
    if value != value:
        return "NaN"
    if value in (float("inf"), float("-inf")):
        return "Inf" if value > 0 else "-Inf"
    text = "%.15g" % value
    if "." not in text:
        mantissa, sep, exponent = text.partition("e")
        text = f"{mantissa}.0{sep}{exponent}"
    return text


def render_literal(literal: Literal) -> str:
    if isinstance(literal, Integer):
        return str(literal.value)
    if isinstance(literal, Real):
        return render_real(literal.value)
    if isinstance(literal, Text):
        return "'" + literal.value.replace("'", "''") + "'"
    if isinstance(literal, Blob):
        return "X'" + literal.value.hex().upper() + "'"
    if isinstance(literal, Null):
        return "NULL"
    if isinstance(literal, KeywordConstant):
        return literal.keyword
    raise ValueError(f"Unknown literal type: {type(literal)}")


def _render_type(type_name: TypeName) -> str:
    if not type_name.args:
        return type_name.name
    return f"{type_name.name}({', '.join(render(arg) for arg in type_name.args)})"


def render(node: object) -> str:
    """Return the minimal SQL text for a literal or expression node."""
    if isinstance(node, Literal):
        return render_literal(node)
    if isinstance(node, Column):
        parts = [part for part in (node.schema, node.table, node.name) if part is not None]
        return ".".join(str(part) for part in parts)
    if isinstance(node, Variable):
        return node.text
    if isinstance(node, Unary):
        if node.op == "NOT":
            return f"NOT {render(node.operand)}"
        return f"{node.op}{render(node.operand)}"
    if isinstance(node, Binary):
        return f"{render(node.left)} {node.op} {render(node.right)}"
    if isinstance(node, Like):
        op = f"NOT {node.op}" if node.negated else node.op
        text = f"{render(node.left)} {op} {render(node.pattern)}"
        if node.escape is not None:
            text += f" ESCAPE {render(node.escape)}"
        return text
    if isinstance(node, IsNull):
        return f"{render(node.operand)} {'NOTNULL' if node.negated else 'ISNULL'}"
    if isinstance(node, Between):
        op = "NOT BETWEEN" if node.negated else "BETWEEN"
        return f"{render(node.operand)} {op} {render(node.low)} AND {render(node.high)}"
    if isinstance(node, InList):
        op = "NOT IN" if node.negated else "IN"
        return f"{render(node.operand)} {op} ({', '.join(render(item) for item in node.items)})"
    if isinstance(node, InSelect):
        op = "NOT IN" if node.negated else "IN"
        return f"{render(node.operand)} {op} (SELECT ...)"
    if isinstance(node, Exists):
        return "EXISTS (SELECT ...)"
    if isinstance(node, Subquery):
        return "(SELECT ...)"
    if isinstance(node, Case):
        parts = ["CASE"]
        if node.operand is not None:
            parts.append(render(node.operand))
        for when, then in node.whens:
            parts.append(f"WHEN {render(when)} THEN {render(then)}")
        if node.else_ is not None:
            parts.append(f"ELSE {render(node.else_)}")
        parts.append("END")
        return " ".join(parts)
    if isinstance(node, Cast):
        return f"CAST({render(node.expr)} AS {_render_type(node.type_name)})"
    if isinstance(node, Collate):
        return f"{render(node.expr)} COLLATE {node.collation}"
    if isinstance(node, FunctionCall):
        if node.star:
            args = "*"
        else:
            args = ", ".join(render(arg) for arg in node.args)
            if node.distinct:
                args = f"DISTINCT {args}"
        return f"{node.name}({args})"
    if isinstance(node, Parenthesized):
        return f"({', '.join(render(expr) for expr in node.exprs)})"
    raise ValueError(f"Cannot render node: {type(node).__name__}")


def format_row(row: Iterable[Literal]) -> str:
    return "|".join(render(value) for value in row)


def format_rows(rows: Iterable[Iterable[Literal]]) -> str:
    return "\n".join(format_row(row) for row in rows)
