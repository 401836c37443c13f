"""Tests for the SQL lexer."""

import pytest

from literal_tables.errors import ParseError
from literal_tables.parsing.sql_lexer import SQLLexer
from literal_tables.values import KeywordConstant


@pytest.fixture
def lexer():
    lexer = SQLLexer()
    lexer.build()
    return lexer


def _types(lexer, text):
    return [t.type for t in lexer.tokenize(text)]


class TestKeywordsAndIdentifiers:
    """Tests for keywords and identifiers."""

    def test_tokenize_select(self, lexer):
        """Test tokenizing a simple query."""
        assert _types(lexer, "SELECT * FROM t") == ["SELECT", "STAR", "FROM", "IDENTIFIER"]

    def test_keywords_case_insensitive(self, lexer):
        """Test that keywords match in any case and keep their spelling."""
        tokens = lexer.tokenize("select")
        assert tokens[0].type == "SELECT"
        assert tokens[0].value == "select"

    def test_quoted_identifiers(self, lexer):
        """Test that every identifier quoting style keeps its quotes."""
        tokens = lexer.tokenize('"a b" [c d] `e`')
        assert [t.type for t in tokens] == ["IDENTIFIER"] * 3
        assert [t.value for t in tokens] == ['"a b"', "[c d]", "`e`"]

    def test_quoted_keyword_is_identifier(self, lexer):
        """Test that a quoted keyword is not a keyword."""
        assert _types(lexer, '"select"') == ["IDENTIFIER"]

    def test_keyword_constants(self, lexer):
        """Test that TRUE, FALSE and CURRENT_* carry keyword constants."""
        tokens = lexer.tokenize("true CURRENT_TIMESTAMP")
        assert [t.type for t in tokens] == ["CONSTANT_KW", "CONSTANT_KW"]
        assert tokens[0].value == KeywordConstant("TRUE")
        assert tokens[1].value == KeywordConstant("CURRENT_TIMESTAMP")


class TestLiterals:
    """Tests for literal tokens."""

    def test_integer(self, lexer):
        tokens = lexer.tokenize("42")
        assert tokens[0].type == "INTEGER"
        assert tokens[0].value == 42

    def test_hex_integer(self, lexer):
        """Test that hex literals are read as 64-bit two's complement."""
        assert lexer.tokenize("0x10")[0].value == 16
        assert lexer.tokenize("0xFFFFFFFFFFFFFFFF")[0].value == -1

    def test_hex_integer_too_big(self, lexer):
        with pytest.raises(ParseError, match="hex literal too big"):
            lexer.tokenize("0x1FFFFFFFFFFFFFFFF")

    def test_floats(self, lexer):
        """Test the decimal and exponent float forms."""
        tokens = lexer.tokenize("1.5 .5 1e3 2.")
        assert [t.type for t in tokens] == ["FLOAT"] * 4
        assert [t.value for t in tokens] == [1.5, 0.5, 1000.0, 2.0]

    def test_string_unescapes_quotes(self, lexer):
        """Test that doubled quotes inside a string collapse to one."""
        tokens = lexer.tokenize("'it''s'")
        assert tokens[0].type == "STRING"
        assert tokens[0].value == "it's"

    def test_blob(self, lexer):
        tokens = lexer.tokenize("x'0aFF'")
        assert tokens[0].type == "BLOB"
        assert tokens[0].value == b"\x0a\xff"

    def test_malformed_blob(self, lexer):
        """Test that a blob with an odd number of digits is rejected."""
        with pytest.raises(ParseError, match="unrecognized token"):
            lexer.tokenize("x'abc'")

    def test_variables(self, lexer):
        assert _types(lexer, "? ?1 :name @name $name") == ["VARIABLE"] * 5


class TestOperatorsAndComments:
    """Tests for operators, comments and errors."""

    def test_multi_character_operators(self, lexer):
        """Test that longer operators win over their prefixes."""
        assert _types(lexer, "|| <= >= <> != == << >>") == [
            "CONCAT", "LE", "GE", "NE", "NE", "EQ", "LSHIFT", "RSHIFT",
        ]

    def test_comments_skipped(self, lexer):
        """Test that line and block comments produce no tokens."""
        assert _types(lexer, "-- hi\nSELECT /* x\n y */ 1") == ["SELECT", "INTEGER"]

    def test_line_numbers(self, lexer):
        """Test that newlines advance the line counter."""
        tokens = lexer.tokenize("SELECT\n\n1")
        assert tokens[1].lineno == 3

    def test_unrecognized_character(self, lexer):
        with pytest.raises(ParseError, match='unrecognized token: "#"'):
            lexer.tokenize("SELECT #")

    def test_unterminated_string(self, lexer):
        """Test that an unterminated string is reported with its text."""
        with pytest.raises(ParseError, match="unrecognized token: \"'abc\""):
            lexer.tokenize("SELECT 'abc")
