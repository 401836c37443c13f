"""Parser for SQL statements.

The grammar follows SQLite's. Every statement kind is parsed into an AST
node, even the ones the engine refuses to execute, so that callers can
tell a syntax error apart from an unsupported construct.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator

import ply.lex as lex
import ply.yacc as yacc

from literal_tables.errors import ParseError
from literal_tables.parsing.sql_ast import (
    AlterTable,
    Analyze,
    Assignment,
    Attach,
    Begin,
    Between,
    Binary,
    Case,
    Cast,
    Collate,
    Column,
    ColumnConstraint,
    ColumnDefinition,
    Command,
    Commit,
    CommonTableExpr,
    CreateIndex,
    CreateTable,
    CreateTrigger,
    CreateView,
    CreateVirtualTable,
    Delete,
    Detach,
    Drop,
    Exists,
    Explain,
    ExprColumn,
    ForeignKeyClause,
    FrameBound,
    FromClause,
    FunctionCall,
    InList,
    InSelect,
    Insert,
    IsNull,
    Join,
    Like,
    Limit,
    Name,
    NamedWindow,
    Parenthesized,
    Pragma,
    QualifiedName,
    Reindex,
    Release,
    Rollback,
    Savepoint,
    Select,
    SelectBody,
    SelectCore,
    SortedColumn,
    Star,
    Subquery,
    SubquerySource,
    TableConstraint,
    TableFunction,
    TableRef,
    TableStar,
    TypeName,
    Unary,
    Update,
    Upsert,
    Vacuum,
    Values,
    Variable,
    WindowDefinition,
    WindowFrame,
    With,
)
from literal_tables.parsing.sql_lexer import SQLLexer
from literal_tables.values import Blob, Null, Real, Text, integer_literal


def _literal(token_type: str, value: Any) -> Any:
    if token_type == "INTEGER":
        return integer_literal(value)
    if token_type == "FLOAT":
        return Real(value)
    if token_type == "STRING":
        return Text(value)
    if token_type == "BLOB":
        return Blob(value)
    if token_type == "NULL":
        return Null()
    # CONSTANT_KW tokens already carry a KeywordConstant
    return value


# Keywords that are read as a plain name wherever the keyword itself cannot
# appear, so "CREATE TABLE t(first, last)" and "CREATE TABLE true(a)" parse.
# CONSTANT_KW (TRUE, FALSE, CURRENT_*) falls back the same way.
_FALLBACK = frozenset({
    "ABORT", "ACTION", "AFTER", "ALWAYS", "ANALYZE", "ASC", "ATTACH",
    "BEFORE", "BEGIN", "BY", "CASCADE", "CAST", "COLUMN", "CONFLICT",
    "CONSTANT_KW", "CURRENT", "DATABASE", "DEFERRED", "DESC", "DETACH", "DO",
    "EACH", "END", "EXCLUSIVE", "EXPLAIN", "FAIL", "FIRST", "FOLLOWING",
    "FOR", "GENERATED", "GLOB", "GROUPS", "IF", "IGNORE", "IMMEDIATE",
    "INITIALLY", "INSTEAD", "KEY", "LAST", "LIKE", "MATCH", "MATERIALIZED",
    "NO", "NULLS", "OF", "OFFSET", "PARTITION", "PLAN", "PRAGMA",
    "PRECEDING", "QUERY", "RANGE", "RECURSIVE", "REGEXP", "REINDEX",
    "RELEASE", "RENAME", "REPLACE", "RESTRICT", "ROLLBACK", "ROW", "ROWS",
    "SAVEPOINT", "TEMP", "TEMPORARY", "TRIGGER", "UNBOUNDED", "VACUUM",
    "VIEW", "VIRTUAL", "WITH", "WITHOUT",
})


class _StatementTokens:
    """Token source for yacc that stops at the first semicolon.

    Empty statements (a bare ``;``) are skipped before the statement starts.
    Each token is annotated with the source text it was lexed from, and the
    span of the statement is tracked in ``start``/``end``.

    Two parts of a statement reach the parser as a single token. The body of
    CREATE TRIGGER, from BEGIN through the END that follows a semicolon, is
    TRIGGER_BODY, so its semicolons do not end the statement. The
    parenthesized arguments of CREATE VIRTUAL TABLE ... USING module(...)
    are MODULE_ARGS.
    """

    def __init__(self, lexer: SQLLexer, data: str) -> None:
        self._lexer = lexer
        self._data = data
        self._pending: lex.LexToken | None = None
        self._seen: list[str] = []
        self.start = 0
        self.end = 0
        self.done = False

    def _next(self) -> lex.LexToken | None:
        tok = self._lexer.token()
        if tok is not None:
            tok.text = self._data[tok.lexpos:self._lexer.lexer.lexpos]
        return tok

    def skip_empty(self) -> bool:
        """Advance to the first token of the statement; False at end of input."""
        while True:
            tok = self._next()
            if tok is None:
                return False
            if tok.type != "SEMICOLON":
                self._pending = tok
                self.start = tok.lexpos
                self.end = tok.lexpos + len(tok.text)
                return True

    def token(self) -> lex.LexToken | None:
        if self._pending is not None:
            tok, self._pending = self._pending, None
        elif self.done:
            return None
        else:
            tok = self._next()
            if tok is None or tok.type == "SEMICOLON":
                self.done = True
                return None
            kind = self._created()
            if kind == "TRIGGER" and tok.type == "BEGIN" and self._seen[-1] != "DOT":
                tok = self._collapse(tok, "TRIGGER_BODY", self._trigger_body_end)
            elif kind == "VIRTUAL" and tok.type == "LPAREN" and self._seen[-2] == "USING":
                tok = self._collapse(tok, "MODULE_ARGS", self._module_args_end())
            if tok is None:
                return None
        self._seen.append(tok.type)
        self.end = tok.lexpos + len(tok.text)
        return tok

    def _created(self) -> str | None:
        """Return TRIGGER or VIRTUAL when the statement creates one."""
        head = [t for t in self._seen[:6] if t not in ("EXPLAIN", "QUERY", "PLAN", "TEMP", "TEMPORARY")]
        if len(head) >= 2 and head[0] == "CREATE" and head[1] in ("TRIGGER", "VIRTUAL"):
            return head[1]
        return None

    @staticmethod
    def _trigger_body_end(prev: lex.LexToken, tok: lex.LexToken) -> bool:
        return prev.type == "SEMICOLON" and tok.type == "END"

    @staticmethod
    def _module_args_end() -> Callable[[lex.LexToken, lex.LexToken], bool]:
        depth = 1

        def at_end(prev: lex.LexToken, tok: lex.LexToken) -> bool:
            nonlocal depth
            if tok.type == "LPAREN":
                depth += 1
            elif tok.type == "RPAREN":
                depth -= 1
            return depth == 0

        return at_end

    def _collapse(
        self,
        first: lex.LexToken,
        token_type: str,
        at_end: Callable[[lex.LexToken, lex.LexToken], bool],
    ) -> lex.LexToken | None:
        """Merge first and the tokens after it, up to at_end, into one token.

        Returns None, ending the statement, if the input runs out first.
        """
        prev = first
        while True:
            tok = self._next()
            if tok is None:
                self.done = True
                return None
            if at_end(prev, tok):
                break
            prev = tok
        merged = lex.LexToken()
        merged.type = token_type
        merged.text = self._data[first.lexpos:tok.lexpos + len(tok.text)]
        merged.value = merged.text
        merged.lineno = first.lineno
        merged.lexpos = first.lexpos
        return merged


class SQLParser:
    """Parser for SQL statements."""

    tokens = SQLLexer.tokens

    # Lowest to highest, as in SQLite
    precedence = (
        ("left", "OR"),
        ("left", "AND"),
        ("right", "NOT"),
        ("left", "IS", "MATCH", "LIKE", "GLOB", "REGEXP", "BETWEEN", "IN",
         "ISNULL", "NOTNULL", "NE", "EQ"),
        ("left", "GT", "LE", "LT", "GE"),
        ("right", "ESCAPE"),
        ("left", "BITAND", "BITOR", "LSHIFT", "RSHIFT"),
        ("left", "PLUS", "MINUS"),
        ("left", "STAR", "SLASH", "REM"),
        ("left", "CONCAT", "PTR"),
        ("left", "COLLATE"),
        ("right", "BITNOT", "UMINUS"),
    )

    # LR tables are shared by every instance once built
    _shared_parser: yacc.LRParser | None = None

    def __init__(self) -> None:
        self.lexer = SQLLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    # --- Commands ---

    def p_cmd(self, p: yacc.YaccProduction) -> None:
        """cmd : stmt"""
        p[0] = p[1]

    def p_cmd_explain(self, p: yacc.YaccProduction) -> None:
        """cmd : EXPLAIN stmt"""
        p[0] = Explain(statement=p[2])

    def p_cmd_explain_query_plan(self, p: yacc.YaccProduction) -> None:
        """cmd : EXPLAIN QUERY PLAN stmt"""
        p[0] = Explain(statement=p[4], query_plan=True)

    def p_stmt(self, p: yacc.YaccProduction) -> None:
        """stmt : create_table
                | create_index
                | create_view
                | create_trigger
                | create_virtual_table
                | insert
                | select
                | update
                | delete
                | drop
                | alter
                | pragma
                | begin
                | commit
                | rollback
                | savepoint
                | release
                | vacuum
                | analyze
                | attach
                | detach
                | reindex"""
        p[0] = p[1]

    def p_empty(self, p: yacc.YaccProduction) -> None:
        """empty :"""
        p[0] = None

    # --- Names ---

    def p_nm(self, p: yacc.YaccProduction) -> None:
        """nm : IDENTIFIER
              | ABORT
              | ACTION
              | ANALYZE
              | CASCADE
              | DEFERRED
              | DO
              | EXCLUSIVE
              | EXPLAIN
              | FAIL
              | IGNORE
              | IMMEDIATE
              | KEY
              | NO
              | NOTHING
              | PLAN
              | PRAGMA
              | QUERY
              | RELEASE
              | RENAME
              | REPLACE
              | RESTRICT
              | TEMP
              | TEMPORARY
              | TRANSACTION
              | VACUUM"""
        p[0] = Name(p[1])

    def p_fullname(self, p: yacc.YaccProduction) -> None:
        """fullname : nm"""
        p[0] = QualifiedName(name=p[1])

    def p_fullname_qualified(self, p: yacc.YaccProduction) -> None:
        """fullname : nm DOT nm"""
        p[0] = QualifiedName(name=p[3], schema=p[1])

    def p_idlist_single(self, p: yacc.YaccProduction) -> None:
        """idlist : nm"""
        p[0] = [p[1]]

    def p_idlist_multiple(self, p: yacc.YaccProduction) -> None:
        """idlist : idlist COMMA nm"""
        p[0] = p[1] + [p[3]]

    def p_idlist_paren_opt(self, p: yacc.YaccProduction) -> None:
        """idlist_paren_opt : empty
                            | LPAREN idlist RPAREN"""
        p[0] = p[2] if len(p) == 4 else []

    def p_alias_opt(self, p: yacc.YaccProduction) -> None:
        """alias_opt : empty
                     | AS nm
                     | AS STRING
                     | IDENTIFIER
                     | STRING"""
        if len(p) == 3:
            p[0] = p[2] if isinstance(p[2], Name) else Name(p[2])
        elif p[1] is not None:
            p[0] = Name(p[1])
        else:
            p[0] = None

    # --- Literals ---

    def p_literal(self, p: yacc.YaccProduction) -> None:
        """literal : INTEGER
                   | FLOAT
                   | STRING
                   | BLOB
                   | NULL
                   | CONSTANT_KW"""
        p[0] = _literal(p.slice[1].type, p[1])

    def p_number(self, p: yacc.YaccProduction) -> None:
        """number : INTEGER
                  | FLOAT"""
        p[0] = _literal(p.slice[1].type, p[1])

    def p_signed_number(self, p: yacc.YaccProduction) -> None:
        """signed_number : number
                         | PLUS number
                         | MINUS number"""
        if len(p) == 2 or p[1] == "+":
            p[0] = p[len(p) - 1]
        else:
            p[0] = Unary(op="-", operand=p[2])

    # --- WITH ---

    def p_with_opt_empty(self, p: yacc.YaccProduction) -> None:
        """with_opt : empty"""
        p[0] = None

    def p_with_opt(self, p: yacc.YaccProduction) -> None:
        """with_opt : WITH cte_list
                    | WITH RECURSIVE cte_list"""
        p[0] = With(ctes=p[len(p) - 1], recursive=len(p) == 4)

    def p_cte_list_single(self, p: yacc.YaccProduction) -> None:
        """cte_list : cte"""
        p[0] = [p[1]]

    def p_cte_list_multiple(self, p: yacc.YaccProduction) -> None:
        """cte_list : cte_list COMMA cte"""
        p[0] = p[1] + [p[3]]

    def p_cte(self, p: yacc.YaccProduction) -> None:
        """cte : nm idlist_paren_opt AS materialized_opt LPAREN select RPAREN"""
        p[0] = CommonTableExpr(name=p[1], select=p[6], columns=p[2], materialized=p[4])

    def p_materialized_opt(self, p: yacc.YaccProduction) -> None:
        """materialized_opt : empty
                            | MATERIALIZED
                            | NOT MATERIALIZED"""
        if p[1] is None:
            p[0] = None
        else:
            p[0] = " ".join(p[i].upper() for i in range(1, len(p)))

    # --- SELECT ---

    def p_select(self, p: yacc.YaccProduction) -> None:
        """select : with_opt select_body orderby_opt limit_opt"""
        p[0] = Select(body=p[2], with_=p[1], order_by=p[3], limit=p[4])

    def p_select_body_single(self, p: yacc.YaccProduction) -> None:
        """select_body : select_core"""
        p[0] = SelectBody(select=p[1])

    def p_select_body_compound(self, p: yacc.YaccProduction) -> None:
        """select_body : select_body compound_op select_core"""
        p[0] = p[1]
        p[0].compounds.append((p[2], p[3]))

    def p_compound_op(self, p: yacc.YaccProduction) -> None:
        """compound_op : UNION
                       | UNION ALL
                       | INTERSECT
                       | EXCEPT"""
        p[0] = " ".join(p[i].upper() for i in range(1, len(p)))

    def p_select_core(self, p: yacc.YaccProduction) -> None:
        """select_core : SELECT distinct_opt result_columns from_opt where_opt groupby_opt having_opt window_opt"""
        p[0] = SelectCore(
            columns=p[3],
            distinctness=p[2],
            from_=p[4],
            where=p[5],
            group_by=p[6],
            having=p[7],
            window=p[8],
        )

    def p_select_core_values(self, p: yacc.YaccProduction) -> None:
        """select_core : VALUES values_rows"""
        rows = p[2]
        if any(len(row) != len(rows[0]) for row in rows):
            raise ParseError("all VALUES must have the same number of terms", p.lexpos(1))
        p[0] = Values(rows=rows)

    def p_values_rows_single(self, p: yacc.YaccProduction) -> None:
        """values_rows : LPAREN nexprlist RPAREN"""
        p[0] = [p[2]]

    def p_values_rows_multiple(self, p: yacc.YaccProduction) -> None:
        """values_rows : values_rows COMMA LPAREN nexprlist RPAREN"""
        p[0] = p[1] + [p[4]]

    def p_distinct_opt(self, p: yacc.YaccProduction) -> None:
        """distinct_opt : empty
                        | DISTINCT
                        | ALL"""
        p[0] = p[1].upper() if p[1] else None

    def p_result_columns_single(self, p: yacc.YaccProduction) -> None:
        """result_columns : result_column"""
        p[0] = [p[1]]

    def p_result_columns_multiple(self, p: yacc.YaccProduction) -> None:
        """result_columns : result_columns COMMA result_column"""
        p[0] = p[1] + [p[3]]

    def p_result_column_star(self, p: yacc.YaccProduction) -> None:
        """result_column : STAR"""
        p[0] = Star()

    def p_result_column_table_star(self, p: yacc.YaccProduction) -> None:
        """result_column : nm DOT STAR"""
        p[0] = TableStar(table=p[1])

    def p_result_column_expr(self, p: yacc.YaccProduction) -> None:
        """result_column : expr alias_opt"""
        p[0] = ExprColumn(expr=p[1], alias=p[2])

    def p_from_opt(self, p: yacc.YaccProduction) -> None:
        """from_opt : empty
                    | FROM seltablist"""
        p[0] = p[2] if len(p) == 3 else None

    def p_seltablist_single(self, p: yacc.YaccProduction) -> None:
        """seltablist : table_source"""
        p[0] = FromClause(source=p[1])

    def p_seltablist_join(self, p: yacc.YaccProduction) -> None:
        """seltablist : seltablist join_op table_source join_constraint_opt"""
        on, using = p[4] if p[4] is not None else (None, None)
        p[0] = p[1]
        p[0].joins.append(Join(operator=p[2], source=p[3], on=on, using=using))

    def p_table_source_table(self, p: yacc.YaccProduction) -> None:
        """table_source : fullname alias_opt indexed_opt"""
        indexed_by, not_indexed = p[3] if p[3] is not None else (None, False)
        p[0] = TableRef(name=p[1], alias=p[2], indexed_by=indexed_by, not_indexed=not_indexed)

    def p_table_source_function(self, p: yacc.YaccProduction) -> None:
        """table_source : fullname LPAREN exprlist RPAREN alias_opt"""
        p[0] = TableFunction(name=p[1], args=p[3], alias=p[5])

    def p_table_source_subquery(self, p: yacc.YaccProduction) -> None:
        """table_source : LPAREN select RPAREN alias_opt"""
        p[0] = SubquerySource(select=p[2], alias=p[4])

    def p_indexed_opt(self, p: yacc.YaccProduction) -> None:
        """indexed_opt : empty
                       | INDEXED BY nm
                       | NOT INDEXED"""
        if len(p) == 4:
            p[0] = (p[3], False)
        elif len(p) == 3:
            p[0] = (None, True)
        else:
            p[0] = None

    def p_join_op(self, p: yacc.YaccProduction) -> None:
        """join_op : COMMA
                   | JOIN
                   | join_kw_list JOIN"""
        if len(p) == 3:
            p[0] = f"{p[1]} JOIN"
        else:
            p[0] = p[1].upper()

    def p_join_kw_list(self, p: yacc.YaccProduction) -> None:
        """join_kw_list : join_kw
                        | join_kw_list join_kw"""
        p[0] = p[1] if len(p) == 2 else f"{p[1]} {p[2]}"

    def p_join_kw(self, p: yacc.YaccProduction) -> None:
        """join_kw : NATURAL
                   | LEFT
                   | RIGHT
                   | FULL
                   | OUTER
                   | INNER
                   | CROSS"""
        p[0] = p[1].upper()

    def p_join_constraint_opt(self, p: yacc.YaccProduction) -> None:
        """join_constraint_opt : empty
                               | ON expr
                               | USING LPAREN idlist RPAREN"""
        if len(p) == 3:
            p[0] = (p[2], None)
        elif len(p) == 5:
            p[0] = (None, p[3])
        else:
            p[0] = None

    def p_where_opt(self, p: yacc.YaccProduction) -> None:
        """where_opt : empty
                     | WHERE expr"""
        p[0] = p[2] if len(p) == 3 else None

    def p_groupby_opt(self, p: yacc.YaccProduction) -> None:
        """groupby_opt : empty
                       | GROUP BY nexprlist"""
        p[0] = p[3] if len(p) == 4 else []

    def p_having_opt(self, p: yacc.YaccProduction) -> None:
        """having_opt : empty
                      | HAVING expr"""
        p[0] = p[2] if len(p) == 3 else None

    def p_window_opt(self, p: yacc.YaccProduction) -> None:
        """window_opt : empty
                      | WINDOW window_def_list"""
        p[0] = p[2] if len(p) == 3 else []

    def p_window_def_list_single(self, p: yacc.YaccProduction) -> None:
        """window_def_list : window_def"""
        p[0] = [p[1]]

    def p_window_def_list_multiple(self, p: yacc.YaccProduction) -> None:
        """window_def_list : window_def_list COMMA window_def"""
        p[0] = p[1] + [p[3]]

    def p_window_def(self, p: yacc.YaccProduction) -> None:
        """window_def : nm AS LPAREN window_spec RPAREN"""
        p[0] = NamedWindow(name=p[1], definition=p[4])

    def p_window_spec(self, p: yacc.YaccProduction) -> None:
        """window_spec : partition_opt orderby_opt frame_opt"""
        p[0] = WindowDefinition(partition_by=p[1], order_by=p[2], frame=p[3])

    def p_partition_opt(self, p: yacc.YaccProduction) -> None:
        """partition_opt : empty
                         | PARTITION BY nexprlist"""
        p[0] = p[3] if len(p) == 4 else []

    def p_frame_opt_empty(self, p: yacc.YaccProduction) -> None:
        """frame_opt : empty"""
        p[0] = None

    def p_frame_opt_single(self, p: yacc.YaccProduction) -> None:
        """frame_opt : frame_unit frame_bound"""
        p[0] = WindowFrame(unit=p[1], start=p[2])

    def p_frame_opt_between(self, p: yacc.YaccProduction) -> None:
        """frame_opt : frame_unit BETWEEN frame_bound AND frame_bound"""
        p[0] = WindowFrame(unit=p[1], start=p[3], end=p[5])

    def p_frame_unit(self, p: yacc.YaccProduction) -> None:
        """frame_unit : RANGE
                      | ROWS
                      | GROUPS"""
        p[0] = p[1].upper()

    def p_frame_bound_keyword(self, p: yacc.YaccProduction) -> None:
        """frame_bound : UNBOUNDED PRECEDING
                       | UNBOUNDED FOLLOWING
                       | CURRENT ROW"""
        p[0] = FrameBound(kind=f"{p[1].upper()} {p[2].upper()}")

    def p_frame_bound_expr(self, p: yacc.YaccProduction) -> None:
        """frame_bound : expr PRECEDING
                       | expr FOLLOWING"""
        p[0] = FrameBound(kind=p[2].upper(), expr=p[1])

    def p_orderby_opt(self, p: yacc.YaccProduction) -> None:
        """orderby_opt : empty
                       | ORDER BY sorted_list"""
        p[0] = p[3] if len(p) == 4 else []

    def p_sorted_list_single(self, p: yacc.YaccProduction) -> None:
        """sorted_list : sorted_item"""
        p[0] = [p[1]]

    def p_sorted_list_multiple(self, p: yacc.YaccProduction) -> None:
        """sorted_list : sorted_list COMMA sorted_item"""
        p[0] = p[1] + [p[3]]

    def p_sorted_item(self, p: yacc.YaccProduction) -> None:
        """sorted_item : expr sort_order_opt nulls_opt"""
        p[0] = SortedColumn(expr=p[1], order=p[2], nulls=p[3])

    def p_sort_order_opt(self, p: yacc.YaccProduction) -> None:
        """sort_order_opt : empty
                          | ASC
                          | DESC"""
        p[0] = p[1].upper() if p[1] else None

    def p_nulls_opt(self, p: yacc.YaccProduction) -> None:
        """nulls_opt : empty
                     | NULLS FIRST
                     | NULLS LAST"""
        p[0] = p[2].upper() if len(p) == 3 else None

    def p_limit_opt_empty(self, p: yacc.YaccProduction) -> None:
        """limit_opt : empty"""
        p[0] = None

    def p_limit_opt(self, p: yacc.YaccProduction) -> None:
        """limit_opt : LIMIT expr
                     | LIMIT expr OFFSET expr"""
        p[0] = Limit(expr=p[2], offset=p[4] if len(p) == 5 else None)

    def p_limit_opt_comma(self, p: yacc.YaccProduction) -> None:
        """limit_opt : LIMIT expr COMMA expr"""
        # LIMIT offset, count
        p[0] = Limit(expr=p[4], offset=p[2])

    # --- Expressions ---

    def p_expr_literal(self, p: yacc.YaccProduction) -> None:
        """expr : literal"""
        p[0] = p[1]

    def p_expr_variable(self, p: yacc.YaccProduction) -> None:
        """expr : VARIABLE"""
        p[0] = Variable(text=p[1])

    def p_expr_column(self, p: yacc.YaccProduction) -> None:
        """expr : nm
                | nm DOT nm
                | nm DOT nm DOT nm"""
        if len(p) == 2:
            p[0] = Column(name=p[1])
        elif len(p) == 4:
            p[0] = Column(name=p[3], table=p[1])
        else:
            p[0] = Column(name=p[5], table=p[3], schema=p[1])

    def p_expr_parenthesized(self, p: yacc.YaccProduction) -> None:
        """expr : LPAREN nexprlist RPAREN"""
        p[0] = Parenthesized(exprs=p[2])

    def p_expr_subquery(self, p: yacc.YaccProduction) -> None:
        """expr : LPAREN select RPAREN"""
        p[0] = Subquery(select=p[2])

    def p_expr_exists(self, p: yacc.YaccProduction) -> None:
        """expr : EXISTS LPAREN select RPAREN"""
        p[0] = Exists(select=p[3])

    def p_expr_cast(self, p: yacc.YaccProduction) -> None:
        """expr : CAST LPAREN expr AS typetoken RPAREN"""
        p[0] = Cast(expr=p[3], type_name=p[5])

    def p_expr_function(self, p: yacc.YaccProduction) -> None:
        """expr : nm LPAREN distinct_opt exprlist RPAREN filter_opt over_opt"""
        p[0] = FunctionCall(
            name=p[1],
            args=p[4],
            distinct=p[3] == "DISTINCT",
            filter=p[6],
            over=p[7],
        )

    def p_expr_function_star(self, p: yacc.YaccProduction) -> None:
        """expr : nm LPAREN STAR RPAREN filter_opt over_opt"""
        p[0] = FunctionCall(name=p[1], star=True, filter=p[5], over=p[6])

    def p_filter_opt(self, p: yacc.YaccProduction) -> None:
        """filter_opt : empty
                      | FILTER LPAREN WHERE expr RPAREN"""
        p[0] = p[4] if len(p) == 6 else None

    def p_over_opt(self, p: yacc.YaccProduction) -> None:
        """over_opt : empty
                    | OVER nm
                    | OVER LPAREN window_spec RPAREN"""
        if len(p) == 3:
            p[0] = p[2]
        elif len(p) == 5:
            p[0] = p[3]
        else:
            p[0] = None

    def p_expr_case(self, p: yacc.YaccProduction) -> None:
        """expr : CASE case_operand when_list case_else END"""
        p[0] = Case(operand=p[2], whens=p[3], else_=p[4])

    def p_case_operand(self, p: yacc.YaccProduction) -> None:
        """case_operand : empty
                        | expr"""
        p[0] = p[1]

    def p_when_list_single(self, p: yacc.YaccProduction) -> None:
        """when_list : WHEN expr THEN expr"""
        p[0] = [(p[2], p[4])]

    def p_when_list_multiple(self, p: yacc.YaccProduction) -> None:
        """when_list : when_list WHEN expr THEN expr"""
        p[0] = p[1] + [(p[3], p[5])]

    def p_case_else(self, p: yacc.YaccProduction) -> None:
        """case_else : empty
                     | ELSE expr"""
        p[0] = p[2] if len(p) == 3 else None

    # BETWEEN must come before the binary AND rule so that
    # "a BETWEEN b AND c" is not read as "a BETWEEN (b AND c)"
    def p_expr_between(self, p: yacc.YaccProduction) -> None:
        """expr : expr between_op expr AND expr %prec BETWEEN"""
        p[0] = Between(operand=p[1], low=p[3], high=p[5], negated=p[2])

    def p_between_op(self, p: yacc.YaccProduction) -> None:
        """between_op : BETWEEN
                      | NOT BETWEEN"""
        p[0] = len(p) == 3

    def p_expr_like(self, p: yacc.YaccProduction) -> None:
        """expr : expr likeop expr %prec LIKE
                | expr likeop expr ESCAPE expr %prec LIKE"""
        op, negated = p[2]
        escape = p[5] if len(p) == 6 else None
        p[0] = Like(op=op, left=p[1], pattern=p[3], escape=escape, negated=negated)

    def p_likeop(self, p: yacc.YaccProduction) -> None:
        """likeop : LIKE
                  | GLOB
                  | REGEXP
                  | MATCH
                  | NOT LIKE
                  | NOT GLOB
                  | NOT REGEXP
                  | NOT MATCH"""
        p[0] = (p[len(p) - 1].upper(), len(p) == 3)

    def p_expr_in_list(self, p: yacc.YaccProduction) -> None:
        """expr : expr in_op LPAREN exprlist RPAREN %prec IN"""
        p[0] = InList(operand=p[1], items=p[4], negated=p[2])

    def p_expr_in_select(self, p: yacc.YaccProduction) -> None:
        """expr : expr in_op LPAREN select RPAREN %prec IN"""
        p[0] = InSelect(operand=p[1], select=p[4], negated=p[2])

    def p_in_op(self, p: yacc.YaccProduction) -> None:
        """in_op : IN
                 | NOT IN"""
        p[0] = len(p) == 3

    def p_expr_isnull(self, p: yacc.YaccProduction) -> None:
        """expr : expr ISNULL
                | expr NOTNULL
                | expr NOT NULL %prec ISNULL"""
        p[0] = IsNull(operand=p[1], negated=p[2].upper() != "ISNULL")

    # Must come before the unary NOT rule so that "a IS NOT b" is not
    # read as "a IS (NOT b)"
    def p_expr_is_not(self, p: yacc.YaccProduction) -> None:
        """expr : expr IS NOT expr %prec IS"""
        p[0] = Binary(op="IS NOT", left=p[1], right=p[4])

    def p_expr_is_distinct(self, p: yacc.YaccProduction) -> None:
        """expr : expr IS DISTINCT FROM expr %prec IS
                | expr IS NOT DISTINCT FROM expr %prec IS"""
        op = "IS DISTINCT FROM" if len(p) == 6 else "IS NOT DISTINCT FROM"
        p[0] = Binary(op=op, left=p[1], right=p[len(p) - 1])

    def p_expr_binary(self, p: yacc.YaccProduction) -> None:
        """expr : expr OR expr
                | expr AND expr
                | expr IS expr
                | expr EQ expr
                | expr NE expr
                | expr LT expr
                | expr GT expr
                | expr LE expr
                | expr GE expr
                | expr BITAND expr
                | expr BITOR expr
                | expr LSHIFT expr
                | expr RSHIFT expr
                | expr PLUS expr
                | expr MINUS expr
                | expr STAR expr
                | expr SLASH expr
                | expr REM expr
                | expr CONCAT expr
                | expr PTR expr"""
        p[0] = Binary(op=p[2].upper(), left=p[1], right=p[3])

    def p_expr_collate(self, p: yacc.YaccProduction) -> None:
        """expr : expr COLLATE nm"""
        p[0] = Collate(expr=p[1], collation=p[3])

    def p_expr_unary(self, p: yacc.YaccProduction) -> None:
        """expr : NOT expr
                | BITNOT expr
                | MINUS expr %prec UMINUS
                | PLUS expr %prec UMINUS"""
        p[0] = Unary(op=p[1].upper(), operand=p[2])

    def p_exprlist(self, p: yacc.YaccProduction) -> None:
        """exprlist : empty
                    | nexprlist"""
        p[0] = p[1] if p[1] is not None else []

    def p_nexprlist_single(self, p: yacc.YaccProduction) -> None:
        """nexprlist : expr"""
        p[0] = [p[1]]

    def p_nexprlist_multiple(self, p: yacc.YaccProduction) -> None:
        """nexprlist : nexprlist COMMA expr"""
        p[0] = p[1] + [p[3]]

    # --- CREATE TABLE ---

    def p_create_table(self, p: yacc.YaccProduction) -> None:
        """create_table : CREATE temp_opt TABLE if_not_exists_opt fullname LPAREN table_body RPAREN table_options_opt"""
        columns, constraints = p[7]
        p[0] = CreateTable(
            name=p[5],
            columns=columns,
            constraints=constraints,
            temporary=p[2],
            if_not_exists=p[4],
            options=p[9],
        )

    def p_create_table_as(self, p: yacc.YaccProduction) -> None:
        """create_table : CREATE temp_opt TABLE if_not_exists_opt fullname AS select"""
        p[0] = CreateTable(name=p[5], temporary=p[2], if_not_exists=p[4], as_select=p[7])

    def p_temp_opt(self, p: yacc.YaccProduction) -> None:
        """temp_opt : empty
                    | TEMP
                    | TEMPORARY"""
        p[0] = p[1] is not None

    def p_if_not_exists_opt(self, p: yacc.YaccProduction) -> None:
        """if_not_exists_opt : empty
                             | IF NOT EXISTS"""
        p[0] = len(p) == 4

    def p_table_body(self, p: yacc.YaccProduction) -> None:
        """table_body : column_defs
                      | column_defs COMMA table_constraint_list"""
        p[0] = (p[1], p[3] if len(p) == 4 else [])

    def p_column_defs_single(self, p: yacc.YaccProduction) -> None:
        """column_defs : column_def"""
        p[0] = [p[1]]

    def p_column_defs_multiple(self, p: yacc.YaccProduction) -> None:
        """column_defs : column_defs COMMA column_def"""
        p[0] = p[1] + [p[3]]

    def p_column_def(self, p: yacc.YaccProduction) -> None:
        """column_def : nm type_opt ccons_list_opt"""
        p[0] = ColumnDefinition(name=p[1], type_name=p[2], constraints=p[3])

    def p_type_opt(self, p: yacc.YaccProduction) -> None:
        """type_opt : empty
                    | typetoken"""
        p[0] = p[1]

    def p_typetoken(self, p: yacc.YaccProduction) -> None:
        """typetoken : type_name
                     | type_name LPAREN signed_number RPAREN
                     | type_name LPAREN signed_number COMMA signed_number RPAREN"""
        args = [p[i] for i in (3, 5) if i < len(p) - 1]
        p[0] = TypeName(name=p[1], args=args)

    def p_type_name(self, p: yacc.YaccProduction) -> None:
        """type_name : nm
                     | type_name nm"""
        p[0] = p[1].text if len(p) == 2 else f"{p[1]} {p[2].text}"

    def p_ccons_list_opt(self, p: yacc.YaccProduction) -> None:
        """ccons_list_opt : empty
                          | ccons_list"""
        p[0] = p[1] if p[1] is not None else []

    def p_ccons_list(self, p: yacc.YaccProduction) -> None:
        """ccons_list : ccons
                      | ccons_list ccons"""
        p[0] = [p[1]] if len(p) == 2 else p[1] + [p[2]]

    def p_ccons_named(self, p: yacc.YaccProduction) -> None:
        """ccons : CONSTRAINT nm ccons_body"""
        p[0] = p[3]
        p[0].name = p[2]

    def p_ccons(self, p: yacc.YaccProduction) -> None:
        """ccons : ccons_body"""
        p[0] = p[1]

    def p_ccons_primary_key(self, p: yacc.YaccProduction) -> None:
        """ccons_body : PRIMARY KEY sort_order_opt conflict_opt autoinc_opt"""
        p[0] = ColumnConstraint(kind="PRIMARY KEY", order=p[3], conflict=p[4], autoincrement=p[5])

    def p_ccons_not_null(self, p: yacc.YaccProduction) -> None:
        """ccons_body : NOT NULL conflict_opt"""
        p[0] = ColumnConstraint(kind="NOT NULL", conflict=p[3])

    def p_ccons_null(self, p: yacc.YaccProduction) -> None:
        """ccons_body : NULL conflict_opt"""
        p[0] = ColumnConstraint(kind="NULL", conflict=p[2])

    def p_ccons_unique(self, p: yacc.YaccProduction) -> None:
        """ccons_body : UNIQUE conflict_opt"""
        p[0] = ColumnConstraint(kind="UNIQUE", conflict=p[2])

    def p_ccons_check(self, p: yacc.YaccProduction) -> None:
        """ccons_body : CHECK LPAREN expr RPAREN"""
        p[0] = ColumnConstraint(kind="CHECK", expr=p[3])

    def p_ccons_default(self, p: yacc.YaccProduction) -> None:
        """ccons_body : DEFAULT literal
                      | DEFAULT PLUS number
                      | DEFAULT MINUS number"""
        if len(p) == 3:
            p[0] = ColumnConstraint(kind="DEFAULT", expr=p[2])
        else:
            p[0] = ColumnConstraint(kind="DEFAULT", expr=Unary(op=p[2], operand=p[3]))

    def p_ccons_default_expr(self, p: yacc.YaccProduction) -> None:
        """ccons_body : DEFAULT LPAREN expr RPAREN"""
        p[0] = ColumnConstraint(kind="DEFAULT", expr=Parenthesized(exprs=[p[3]]))

    def p_ccons_collate(self, p: yacc.YaccProduction) -> None:
        """ccons_body : COLLATE nm"""
        p[0] = ColumnConstraint(kind="COLLATE", collation=p[2])

    def p_ccons_references(self, p: yacc.YaccProduction) -> None:
        """ccons_body : REFERENCES nm idlist_paren_opt fk_clause_list_opt"""
        p[0] = ColumnConstraint(
            kind="REFERENCES",
            foreign_key=ForeignKeyClause(table=p[2], columns=p[3], actions=p[4]),
        )

    def p_ccons_deferrable(self, p: yacc.YaccProduction) -> None:
        """ccons_body : deferrable"""
        p[0] = ColumnConstraint(kind="DEFERRABLE", detail=p[1])

    def p_ccons_generated(self, p: yacc.YaccProduction) -> None:
        """ccons_body : AS LPAREN expr RPAREN generated_opt
                      | GENERATED ALWAYS AS LPAREN expr RPAREN generated_opt"""
        p[0] = ColumnConstraint(kind="GENERATED", expr=p[len(p) - 3], detail=p[len(p) - 1])

    def p_generated_opt(self, p: yacc.YaccProduction) -> None:
        """generated_opt : empty
                         | IDENTIFIER"""
        p[0] = p[1].upper() if p[1] else None

    def p_conflict_opt(self, p: yacc.YaccProduction) -> None:
        """conflict_opt : empty
                        | ON CONFLICT resolve"""
        p[0] = p[3] if len(p) == 4 else None

    def p_resolve(self, p: yacc.YaccProduction) -> None:
        """resolve : ROLLBACK
                   | ABORT
                   | FAIL
                   | IGNORE
                   | REPLACE"""
        p[0] = p[1].upper()

    def p_autoinc_opt(self, p: yacc.YaccProduction) -> None:
        """autoinc_opt : empty
                       | AUTOINCREMENT"""
        p[0] = p[1] is not None

    def p_fk_clause_list_opt(self, p: yacc.YaccProduction) -> None:
        """fk_clause_list_opt : empty
                              | fk_clause_list"""
        p[0] = p[1] if p[1] is not None else []

    def p_fk_clause_list(self, p: yacc.YaccProduction) -> None:
        """fk_clause_list : fk_clause
                          | fk_clause_list fk_clause"""
        p[0] = [p[1]] if len(p) == 2 else p[1] + [p[2]]

    def p_fk_clause(self, p: yacc.YaccProduction) -> None:
        """fk_clause : ON DELETE fk_action
                     | ON UPDATE fk_action
                     | MATCH nm"""
        if p[1].upper() == "MATCH":
            p[0] = f"MATCH {p[2]}"
        else:
            p[0] = f"ON {p[2].upper()} {p[3]}"

    def p_fk_action(self, p: yacc.YaccProduction) -> None:
        """fk_action : SET NULL
                     | SET DEFAULT
                     | CASCADE
                     | RESTRICT
                     | NO ACTION"""
        p[0] = " ".join(p[i].upper() for i in range(1, len(p)))

    def p_deferrable_opt(self, p: yacc.YaccProduction) -> None:
        """deferrable_opt : empty
                          | deferrable"""
        p[0] = p[1]

    def p_deferrable(self, p: yacc.YaccProduction) -> None:
        """deferrable : DEFERRABLE initially_opt
                      | NOT DEFERRABLE initially_opt"""
        words = [p[i].upper() for i in range(1, len(p) - 1)]
        if p[len(p) - 1]:
            words.append(p[len(p) - 1])
        p[0] = " ".join(words)

    def p_initially_opt(self, p: yacc.YaccProduction) -> None:
        """initially_opt : empty
                         | INITIALLY DEFERRED
                         | INITIALLY IMMEDIATE"""
        p[0] = f"INITIALLY {p[2].upper()}" if len(p) == 3 else None

    def p_table_constraint_list(self, p: yacc.YaccProduction) -> None:
        """table_constraint_list : table_constraint
                                 | table_constraint_list COMMA table_constraint"""
        p[0] = [p[1]] if len(p) == 2 else p[1] + [p[3]]

    def p_table_constraint_named(self, p: yacc.YaccProduction) -> None:
        """table_constraint : CONSTRAINT nm tcons_body"""
        p[0] = p[3]
        p[0].name = p[2]

    def p_table_constraint(self, p: yacc.YaccProduction) -> None:
        """table_constraint : tcons_body"""
        p[0] = p[1]

    def p_tcons_primary_key(self, p: yacc.YaccProduction) -> None:
        """tcons_body : PRIMARY KEY LPAREN sorted_list autoinc_opt RPAREN conflict_opt"""
        p[0] = TableConstraint(kind="PRIMARY KEY", columns=p[4], autoincrement=p[5], conflict=p[7])

    def p_tcons_unique(self, p: yacc.YaccProduction) -> None:
        """tcons_body : UNIQUE LPAREN sorted_list RPAREN conflict_opt"""
        p[0] = TableConstraint(kind="UNIQUE", columns=p[3], conflict=p[5])

    def p_tcons_check(self, p: yacc.YaccProduction) -> None:
        """tcons_body : CHECK LPAREN expr RPAREN conflict_opt"""
        p[0] = TableConstraint(kind="CHECK", expr=p[3], conflict=p[5])

    def p_tcons_foreign_key(self, p: yacc.YaccProduction) -> None:
        """tcons_body : FOREIGN KEY LPAREN idlist RPAREN REFERENCES nm idlist_paren_opt fk_clause_list_opt deferrable_opt"""
        p[0] = TableConstraint(
            kind="FOREIGN KEY",
            columns=[SortedColumn(expr=Column(name=name)) for name in p[4]],
            foreign_key=ForeignKeyClause(table=p[7], columns=p[8], actions=p[9], deferrable=p[10]),
        )

    def p_table_options_opt(self, p: yacc.YaccProduction) -> None:
        """table_options_opt : empty
                             | table_options"""
        p[0] = p[1] if p[1] is not None else []

    def p_table_options(self, p: yacc.YaccProduction) -> None:
        """table_options : table_option
                         | table_options COMMA table_option"""
        p[0] = [p[1]] if len(p) == 2 else p[1] + [p[3]]

    def p_table_option(self, p: yacc.YaccProduction) -> None:
        """table_option : WITHOUT nm
                        | nm"""
        if len(p) == 3:
            p[0] = f"WITHOUT {p[2].text.upper()}"
        else:
            p[0] = p[1].text.upper()

    # --- INSERT ---

    def p_insert(self, p: yacc.YaccProduction) -> None:
        """insert : with_opt insert_cmd INTO fullname insert_alias_opt idlist_paren_opt select upsert_list_opt returning_opt"""
        verb, conflict = p[2]
        p[0] = Insert(
            table=p[4],
            source=p[7],
            with_=p[1],
            verb=verb,
            conflict=conflict,
            alias=p[5],
            columns=p[6],
            upsert=p[8],
            returning=p[9],
        )

    def p_insert_default_values(self, p: yacc.YaccProduction) -> None:
        """insert : with_opt insert_cmd INTO fullname insert_alias_opt idlist_paren_opt DEFAULT VALUES returning_opt"""
        verb, conflict = p[2]
        p[0] = Insert(
            table=p[4],
            with_=p[1],
            verb=verb,
            conflict=conflict,
            alias=p[5],
            columns=p[6],
            default_values=True,
            returning=p[9],
        )

    def p_insert_cmd(self, p: yacc.YaccProduction) -> None:
        """insert_cmd : INSERT
                      | INSERT OR resolve
                      | REPLACE"""
        if len(p) == 4:
            p[0] = ("INSERT", p[3])
        else:
            p[0] = (p[1].upper(), None)

    def p_insert_alias_opt(self, p: yacc.YaccProduction) -> None:
        """insert_alias_opt : empty
                            | AS nm"""
        p[0] = p[2] if len(p) == 3 else None

    def p_upsert_list_opt(self, p: yacc.YaccProduction) -> None:
        """upsert_list_opt : empty
                           | upsert_list"""
        p[0] = p[1] if p[1] is not None else []

    def p_upsert_list(self, p: yacc.YaccProduction) -> None:
        """upsert_list : upsert
                       | upsert_list upsert"""
        p[0] = [p[1]] if len(p) == 2 else p[1] + [p[2]]

    def p_upsert_nothing(self, p: yacc.YaccProduction) -> None:
        """upsert : ON CONFLICT upsert_target_opt DO NOTHING"""
        target, target_where = p[3] if p[3] is not None else ([], None)
        p[0] = Upsert(action="NOTHING", target=target, target_where=target_where)

    def p_upsert_update(self, p: yacc.YaccProduction) -> None:
        """upsert : ON CONFLICT upsert_target_opt DO UPDATE SET assignment_list where_opt"""
        target, target_where = p[3] if p[3] is not None else ([], None)
        p[0] = Upsert(
            action="UPDATE",
            target=target,
            target_where=target_where,
            assignments=p[7],
            where=p[8],
        )

    def p_upsert_target_opt(self, p: yacc.YaccProduction) -> None:
        """upsert_target_opt : empty
                             | LPAREN sorted_list RPAREN where_opt"""
        p[0] = (p[2], p[4]) if len(p) == 5 else None

    def p_assignment_list(self, p: yacc.YaccProduction) -> None:
        """assignment_list : assignment
                           | assignment_list COMMA assignment"""
        p[0] = [p[1]] if len(p) == 2 else p[1] + [p[3]]

    def p_assignment(self, p: yacc.YaccProduction) -> None:
        """assignment : nm EQ expr"""
        p[0] = Assignment(columns=[p[1]], value=p[3])

    def p_assignment_row(self, p: yacc.YaccProduction) -> None:
        """assignment : LPAREN idlist RPAREN EQ expr"""
        p[0] = Assignment(columns=p[2], value=p[5])

    def p_returning_opt(self, p: yacc.YaccProduction) -> None:
        """returning_opt : empty
                         | RETURNING result_columns"""
        p[0] = p[2] if len(p) == 3 else []

    # --- UPDATE / DELETE ---

    def p_update(self, p: yacc.YaccProduction) -> None:
        """update : with_opt UPDATE conflict_or_opt fullname insert_alias_opt indexed_opt SET assignment_list from_opt where_opt returning_opt"""
        p[0] = Update(
            table=p[4],
            assignments=p[8],
            with_=p[1],
            conflict=p[3],
            alias=p[5],
            from_=p[9],
            where=p[10],
            returning=p[11],
        )

    def p_conflict_or_opt(self, p: yacc.YaccProduction) -> None:
        """conflict_or_opt : empty
                           | OR resolve"""
        p[0] = p[2] if len(p) == 3 else None

    def p_delete(self, p: yacc.YaccProduction) -> None:
        """delete : with_opt DELETE FROM fullname insert_alias_opt indexed_opt where_opt returning_opt"""
        p[0] = Delete(table=p[4], with_=p[1], alias=p[5], where=p[7], returning=p[8])

    # --- Schema statements ---

    def p_drop(self, p: yacc.YaccProduction) -> None:
        """drop : DROP drop_kind if_exists_opt fullname"""
        p[0] = Drop(kind=p[2], name=p[4], if_exists=p[3])

    def p_drop_kind(self, p: yacc.YaccProduction) -> None:
        """drop_kind : TABLE
                     | INDEX
                     | VIEW
                     | TRIGGER"""
        p[0] = p[1].upper()

    def p_if_exists_opt(self, p: yacc.YaccProduction) -> None:
        """if_exists_opt : empty
                         | IF EXISTS"""
        p[0] = len(p) == 3

    def p_alter_rename_table(self, p: yacc.YaccProduction) -> None:
        """alter : ALTER TABLE fullname RENAME TO nm"""
        p[0] = AlterTable(table=p[3], action="RENAME TO", new_name=p[6])

    def p_alter_rename_column(self, p: yacc.YaccProduction) -> None:
        """alter : ALTER TABLE fullname RENAME nm TO nm
                 | ALTER TABLE fullname RENAME COLUMN nm TO nm"""
        p[0] = AlterTable(table=p[3], action="RENAME COLUMN", column=p[len(p) - 3], new_name=p[len(p) - 1])

    def p_alter_add_column(self, p: yacc.YaccProduction) -> None:
        """alter : ALTER TABLE fullname ADD column_def
                 | ALTER TABLE fullname ADD COLUMN column_def"""
        p[0] = AlterTable(table=p[3], action="ADD COLUMN", definition=p[len(p) - 1])

    def p_alter_drop_column(self, p: yacc.YaccProduction) -> None:
        """alter : ALTER TABLE fullname DROP nm
                 | ALTER TABLE fullname DROP COLUMN nm"""
        p[0] = AlterTable(table=p[3], action="DROP COLUMN", column=p[len(p) - 1])

    def p_create_index(self, p: yacc.YaccProduction) -> None:
        """create_index : CREATE unique_opt INDEX if_not_exists_opt fullname ON nm LPAREN sorted_list RPAREN where_opt"""
        p[0] = CreateIndex(
            name=p[5],
            table=p[7],
            columns=p[9],
            unique=p[2],
            if_not_exists=p[4],
            where=p[11],
        )

    def p_unique_opt(self, p: yacc.YaccProduction) -> None:
        """unique_opt : empty
                      | UNIQUE"""
        p[0] = p[1] is not None

    def p_create_view(self, p: yacc.YaccProduction) -> None:
        """create_view : CREATE temp_opt VIEW if_not_exists_opt fullname idlist_paren_opt AS select"""
        p[0] = CreateView(
            name=p[5],
            select=p[8],
            columns=p[6],
            temporary=p[2],
            if_not_exists=p[4],
        )

    def p_create_trigger(self, p: yacc.YaccProduction) -> None:
        """create_trigger : CREATE temp_opt TRIGGER if_not_exists_opt fullname trigger_time trigger_event ON fullname foreach_opt trigger_when_opt TRIGGER_BODY"""
        event, columns = p[7]
        p[0] = CreateTrigger(
            name=p[5],
            event=event,
            table=p[9],
            body=p[12],
            timing=p[6],
            columns=columns,
            for_each_row=p[10],
            when=p[11],
            temporary=p[2],
            if_not_exists=p[4],
        )

    def p_trigger_time(self, p: yacc.YaccProduction) -> None:
        """trigger_time : empty
                        | BEFORE
                        | AFTER
                        | INSTEAD OF"""
        p[0] = " ".join(word.upper() for word in p[1:]) if p[1] else None

    def p_trigger_event(self, p: yacc.YaccProduction) -> None:
        """trigger_event : DELETE
                         | INSERT
                         | UPDATE
                         | UPDATE OF idlist"""
        p[0] = (p[1].upper(), p[3] if len(p) == 4 else [])

    def p_foreach_opt(self, p: yacc.YaccProduction) -> None:
        """foreach_opt : empty
                       | FOR EACH ROW"""
        p[0] = len(p) == 4

    def p_trigger_when_opt(self, p: yacc.YaccProduction) -> None:
        """trigger_when_opt : empty
                            | WHEN expr"""
        p[0] = p[2] if len(p) == 3 else None

    def p_create_virtual_table(self, p: yacc.YaccProduction) -> None:
        """create_virtual_table : CREATE VIRTUAL TABLE if_not_exists_opt fullname USING nm
                                | CREATE VIRTUAL TABLE if_not_exists_opt fullname USING nm MODULE_ARGS"""
        # MODULE_ARGS is the source text, parentheses included
        arguments = p[8][1:-1].strip() if len(p) == 9 else None
        p[0] = CreateVirtualTable(name=p[5], module=p[7], arguments=arguments, if_not_exists=p[4])

    # --- Other statements ---

    def p_pragma(self, p: yacc.YaccProduction) -> None:
        """pragma : PRAGMA fullname
                  | PRAGMA fullname EQ pragma_value
                  | PRAGMA fullname LPAREN pragma_value RPAREN"""
        p[0] = Pragma(name=p[2], value=p[4] if len(p) > 3 else None)

    def p_pragma_value(self, p: yacc.YaccProduction) -> None:
        """pragma_value : signed_number
                        | nm"""
        p[0] = p[1]

    def p_pragma_value_word(self, p: yacc.YaccProduction) -> None:
        """pragma_value : STRING
                        | ON
                        | DELETE
                        | DEFAULT"""
        p[0] = Name(p[1])

    def p_begin(self, p: yacc.YaccProduction) -> None:
        """begin : BEGIN transaction_opt
                 | BEGIN trans_mode transaction_opt"""
        p[0] = Begin(mode=p[2] if len(p) == 4 else None)

    def p_trans_mode(self, p: yacc.YaccProduction) -> None:
        """trans_mode : DEFERRED
                      | IMMEDIATE
                      | EXCLUSIVE"""
        p[0] = p[1].upper()

    def p_transaction_opt(self, p: yacc.YaccProduction) -> None:
        """transaction_opt : empty
                           | TRANSACTION
                           | TRANSACTION nm"""
        p[0] = None

    def p_commit(self, p: yacc.YaccProduction) -> None:
        """commit : COMMIT transaction_opt
                  | END transaction_opt"""
        p[0] = Commit(keyword=p[1].upper())

    def p_rollback(self, p: yacc.YaccProduction) -> None:
        """rollback : ROLLBACK transaction_opt"""
        p[0] = Rollback()

    def p_rollback_to(self, p: yacc.YaccProduction) -> None:
        """rollback : ROLLBACK transaction_opt TO nm
                    | ROLLBACK transaction_opt TO SAVEPOINT nm"""
        p[0] = Rollback(savepoint=p[len(p) - 1])

    def p_savepoint(self, p: yacc.YaccProduction) -> None:
        """savepoint : SAVEPOINT nm"""
        p[0] = Savepoint(name=p[2])

    def p_release(self, p: yacc.YaccProduction) -> None:
        """release : RELEASE nm
                   | RELEASE SAVEPOINT nm"""
        p[0] = Release(name=p[len(p) - 1])

    def p_vacuum(self, p: yacc.YaccProduction) -> None:
        """vacuum : VACUUM
                  | VACUUM nm"""
        p[0] = Vacuum(schema=p[2] if len(p) == 3 else None)

    def p_analyze(self, p: yacc.YaccProduction) -> None:
        """analyze : ANALYZE
                   | ANALYZE fullname"""
        p[0] = Analyze(target=p[2] if len(p) == 3 else None)

    def p_attach(self, p: yacc.YaccProduction) -> None:
        """attach : ATTACH expr AS expr key_opt
                  | ATTACH DATABASE expr AS expr key_opt"""
        offset = len(p) - 6
        p[0] = Attach(expr=p[2 + offset], schema=p[4 + offset], key=p[5 + offset])

    def p_key_opt(self, p: yacc.YaccProduction) -> None:
        """key_opt : empty
                   | KEY expr"""
        p[0] = p[2] if len(p) == 3 else None

    def p_detach(self, p: yacc.YaccProduction) -> None:
        """detach : DETACH expr
                  | DETACH DATABASE expr"""
        p[0] = Detach(schema=p[len(p) - 1])

    def p_reindex(self, p: yacc.YaccProduction) -> None:
        """reindex : REINDEX
                   | REINDEX fullname"""
        p[0] = Reindex(target=p[2] if len(p) == 3 else None)

    def p_error(self, p: yacc.YaccProduction) -> lex.LexToken | None:
        if p:
            if p.type in _FALLBACK:
                # Retry the keyword as a plain name in the same state
                p.type = "IDENTIFIER"
                p.value = getattr(p, "text", p.value)
                self.parser.errok()
                return p
            text = getattr(p, "text", p.value)
            raise ParseError(f'near "{text}": syntax error', p.lexpos)
        else:
            raise ParseError("incomplete input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, start="cmd", errorlog=yacc.NullLogger(), **kwargs)

    def _ensure_built(self) -> yacc.LRParser:
        if self.parser is None:
            if SQLParser._shared_parser is None:
                self.build(debug=False, write_tables=False)
                SQLParser._shared_parser = self.parser
            else:
                self.parser = SQLParser._shared_parser
        return self.parser

    def commands(self, data: str) -> Iterator[Command]:
        """Parse statements one at a time, stopping at the end of the input."""
        parser = self._ensure_built()
        self.lexer.input(data)
        while True:
            stream = _StatementTokens(self.lexer, data)
            if not stream.skip_empty():
                return
            command = parser.parse(lexer=stream)
            if isinstance(command, CreateTable):
                command.sql = data[stream.start:stream.end]
            yield command

    def next_command(self, data: str) -> Command | None:
        """Parse the first statement in data.

        Returns None when data holds no statement (only whitespace, comments
        or semicolons). Anything after the first statement is ignored.
        """
        return next(self.commands(data), None)

    def parse(self, data: str) -> Command | None:
        """Parse a SQL string."""
        return self.next_command(data)
