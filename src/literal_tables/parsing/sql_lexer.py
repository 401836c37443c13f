"""Lexer for the SQLite dialect of SQL."""

import ply.lex as lex

from literal_tables.errors import ParseError
from literal_tables.values import KEYWORD_CONSTANTS, KeywordConstant


class SQLLexer:
    """Lexer for tokenizing SQL statements.

    Keywords are matched case-insensitively. Every token keeps the text it
    was written with, except literals whose value is decoded: strings lose
    their quotes, blobs become bytes and numbers become ints or floats.
    Quoted identifiers ("x", [x], `x`) are always IDENTIFIER tokens and keep
    their quotes.
    """

    # Reserved keywords (upper-case spelling -> token type)
    reserved = {
        keyword: keyword
        for keyword in (
            "ABORT", "ACTION", "ADD", "AFTER", "ALL", "ALTER", "ALWAYS",
            "ANALYZE", "AND", "AS", "ASC", "ATTACH", "AUTOINCREMENT",
            "BEFORE", "BEGIN", "BETWEEN", "BY", "CASCADE", "CASE", "CAST",
            "CHECK", "COLLATE", "COLUMN", "COMMIT", "CONFLICT", "CONSTRAINT",
            "CREATE", "CROSS", "CURRENT", "DATABASE", "DEFAULT", "DEFERRABLE",
            "DEFERRED", "DELETE", "DESC", "DETACH", "DISTINCT", "DO", "DROP",
            "EACH", "ELSE", "END", "ESCAPE", "EXCEPT", "EXCLUSIVE", "EXISTS",
            "EXPLAIN", "FAIL", "FILTER", "FIRST", "FOLLOWING", "FOR",
            "FOREIGN", "FROM", "FULL", "GENERATED", "GLOB", "GROUP", "GROUPS",
            "HAVING", "IF", "IGNORE", "IMMEDIATE", "IN", "INDEX", "INDEXED",
            "INITIALLY", "INNER", "INSERT", "INSTEAD", "INTERSECT", "INTO",
            "IS", "ISNULL", "JOIN", "KEY", "LAST", "LEFT", "LIKE", "LIMIT",
            "MATCH", "MATERIALIZED", "NATURAL", "NO", "NOT", "NOTHING",
            "NOTNULL", "NULL", "NULLS", "OF", "OFFSET", "ON", "OR", "ORDER",
            "OUTER", "OVER", "PARTITION", "PLAN", "PRAGMA", "PRECEDING",
            "PRIMARY", "QUERY", "RANGE", "RECURSIVE", "REFERENCES", "REGEXP",
            "REINDEX", "RELEASE", "RENAME", "REPLACE", "RESTRICT",
            "RETURNING", "RIGHT", "ROLLBACK", "ROW", "ROWS", "SAVEPOINT",
            "SELECT", "SET", "TABLE", "TEMP", "TEMPORARY", "THEN", "TO",
            "TRANSACTION", "TRIGGER", "UNBOUNDED", "UNION", "UNIQUE",
            "UPDATE", "USING", "VACUUM", "VALUES", "VIEW", "VIRTUAL", "WHEN",
            "WHERE", "WINDOW", "WITH", "WITHOUT",
        )
    }

    # Token list
    tokens = [
        "IDENTIFIER",
        "STRING",
        "BLOB",
        "INTEGER",
        "FLOAT",
        "VARIABLE",
        "CONSTANT_KW",
        "CONCAT",
        "PTR",
        "LSHIFT",
        "RSHIFT",
        "LE",
        "GE",
        "NE",
        "EQ",
        "LT",
        "GT",
        "BITAND",
        "BITOR",
        "BITNOT",
        "PLUS",
        "MINUS",
        "STAR",
        "SLASH",
        "REM",
        "LPAREN",
        "RPAREN",
        "COMMA",
        "DOT",
        "SEMICOLON",
        # Produced by the parser's token stream, never by the lexer
        "TRIGGER_BODY",
        "MODULE_ARGS",
    ] + sorted(reserved.values())

    # Simple tokens
    t_CONCAT = r"\|\|"
    t_PTR = r"->>|->"
    t_LSHIFT = r"<<"
    t_RSHIFT = r">>"
    t_LE = r"<="
    t_GE = r">="
    t_NE = r"!=|<>"
    t_EQ = r"==|="
    t_LT = r"<"
    t_GT = r">"
    t_BITAND = r"&"
    t_BITOR = r"\|"
    t_BITNOT = r"~"
    t_PLUS = r"\+"
    t_MINUS = r"-"
    t_STAR = r"\*"
    t_SLASH = r"/"
    t_REM = r"%"
    t_LPAREN = r"\("
    t_RPAREN = r"\)"
    t_COMMA = r","
    t_DOT = r"\."
    t_SEMICOLON = r";"

    # Ignored characters (newlines are counted by t_NEWLINE)
    t_ignore = " \t\r\f"

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore

    def t_COMMENT(self, t: lex.LexToken) -> None:
        r"--[^\n]*|/\*(.|\n)*?(\*/|\Z)"
        t.lexer.lineno += t.value.count("\n")

    def t_BLOB(self, t: lex.LexToken) -> lex.LexToken:
        r"[xX]'[^']*'"
        digits = t.value[2:-1]
        if len(digits) % 2 or any(c not in "0123456789abcdefABCDEF" for c in digits):
            raise ParseError(f'unrecognized token: "{t.value}"', t.lexpos)
        t.value = bytes.fromhex(digits)
        return t

    def t_FLOAT(self, t: lex.LexToken) -> lex.LexToken:
        r"(\d+\.\d*|\.\d+)([eE][-+]?\d+)?|\d+[eE][-+]?\d+"
        t.value = float(t.value)
        return t

    def t_INTEGER(self, t: lex.LexToken) -> lex.LexToken:
        r"0[xX][0-9a-fA-F]+|\d+"
        text = t.value
        if text[:2] in ("0x", "0X"):
            if len(text) - 2 > 16:
                raise ParseError(f'hex literal too big: {text}', t.lexpos)
            value = int(text, 16)
            # Hex literals are 64-bit two's complement
            if value >= 2**63:
                value -= 2**64
            t.value = value
        else:
            t.value = int(text)
        return t

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r"'([^']|'')*'"
        t.value = t.value[1:-1].replace("''", "'")
        t.lexer.lineno += t.value.count("\n")
        return t

    def t_VARIABLE(self, t: lex.LexToken) -> lex.LexToken:
        r"\?\d*|[:@$][A-Za-z0-9_]+"
        return t

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r'"([^"]|"")*"|`([^`]|``)*`|\[[^\]]*\]|[^\W\d][\w$]*'
        if t.value[0] in "\"`[":
            return t
        upper = t.value.upper()
        if upper in KEYWORD_CONSTANTS:
            t.type = "CONSTANT_KW"
            t.value = KeywordConstant(upper)
        else:
            # Check if it's a reserved word
            t.type = self.reserved.get(upper, "IDENTIFIER")
        return t

    def t_NEWLINE(self, t: lex.LexToken) -> None:
        r"\n+"
        t.lexer.lineno += len(t.value)
        # Newlines separate tokens but are not tokens themselves

    def t_error(self, t: lex.LexToken) -> None:
        if t.value[0] in "'\"`[":
            # Unterminated quote swallows the rest of the input
            raise ParseError(f'unrecognized token: "{t.value}"', t.lexpos)
        raise ParseError(f'unrecognized token: "{t.value[0]}"', t.lexpos)

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize."""
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
        """Return the next token."""
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens
