"""Tests for the SQL parser."""

import pytest

from literal_tables.errors import ParseError
from literal_tables.parsing import SQLParser
from literal_tables.parsing.sql_ast import (
    Attach,
    Between,
    Binary,
    Column,
    Commit,
    CreateTable,
    CreateTrigger,
    CreateVirtualTable,
    Detach,
    Drop,
    Explain,
    ExprColumn,
    FunctionCall,
    Insert,
    Name,
    QualifiedName,
    Reindex,
    Select,
    SelectCore,
    SortedColumn,
    Star,
    TableRef,
    TypeName,
    Unary,
    Update,
    Values,
)
from literal_tables.values import Blob, Integer, KeywordConstant, Null, Real, Text


@pytest.fixture
def parser():
    return SQLParser()


class TestStatementBoundaries:
    """Tests for how much of the input is parsed."""

    def test_empty_input(self, parser):
        """Test that input without a statement yields None."""
        assert parser.next_command("") is None
        assert parser.next_command("   \n\t") is None
        assert parser.next_command("-- just a comment") is None
        assert parser.next_command(";;  /* nothing */ ;") is None

    def test_first_statement_only(self, parser):
        """Test that text after the first statement is ignored."""
        command = parser.next_command("CREATE TABLE a(x); CREATE TABLE b(y)")
        assert isinstance(command, CreateTable)
        assert command.name == QualifiedName(Name("a"))

    def test_trailing_garbage_ignored(self, parser):
        """Test that an invalid second statement does not affect the first."""
        command = parser.next_command("SELECT * FROM t; this is not sql")
        assert isinstance(command, Select)

    def test_leading_semicolons_skipped(self, parser):
        command = parser.next_command(";; SELECT * FROM t")
        assert isinstance(command, Select)

    def test_commands_yields_every_statement(self, parser):
        """Test iterating over a multi-statement script."""
        commands = list(parser.commands("CREATE TABLE t(a); INSERT INTO t VALUES (1);; SELECT * FROM t;"))
        assert [type(c) for c in commands] == [CreateTable, Insert, Select]

    def test_parse_is_next_command(self, parser):
        assert parser.parse("SELECT * FROM t") == parser.next_command("SELECT * FROM t")

    def test_parsers_share_tables(self):
        """Test that a second parser instance works with the shared tables."""
        first = SQLParser()
        first.parse("SELECT * FROM t")
        second = SQLParser()
        assert isinstance(second.parse("SELECT * FROM u"), Select)


class TestSyntaxErrors:
    """Tests for syntax error reporting."""

    def test_unexpected_token(self, parser):
        with pytest.raises(ParseError, match='near "SELEC": syntax error'):
            parser.parse("SELEC * FROM t")

    def test_incomplete_input(self, parser):
        with pytest.raises(ParseError, match="incomplete input"):
            parser.parse("SELECT * FROM")

    def test_error_position(self, parser):
        """Test that the error carries the offset of the bad token."""
        with pytest.raises(ParseError) as exc_info:
            parser.parse("SELECT * FROM t t2 t3")
        assert exc_info.value.position == 19

    def test_values_arity_mismatch(self, parser):
        """Test that VALUES rows must all have the same length."""
        with pytest.raises(ParseError, match="all VALUES must have the same number of terms"):
            parser.parse("INSERT INTO t VALUES (1, 2), (3)")

    def test_lexer_error_propagates(self, parser):
        with pytest.raises(ParseError, match="unrecognized token"):
            parser.parse("SELECT * FROM t WHERE a = #")

    def test_misplaced_keyword_reported_as_written(self, parser):
        """Test that a keyword retried as a name is still reported by its text."""
        with pytest.raises(ParseError, match='near "true": syntax error'):
            parser.parse("DROP true t")


class TestCreateTable:
    """Tests for CREATE TABLE parsing."""

    def test_simple(self, parser):
        command = parser.parse("CREATE TABLE t(a, b)")
        assert command.name == QualifiedName(Name("t"))
        assert [column.name.text for column in command.columns] == ["a", "b"]
        assert command.columns[0].type_name is None

    def test_source_text_captured(self, parser):
        """Test that the statement text is kept without the semicolon."""
        command = parser.parse("  CREATE TABLE t(a, b);  SELECT 1")
        assert command.sql == "CREATE TABLE t(a, b)"

    def test_types_and_constraints(self, parser):
        """Test column types, constraints and table options."""
        command = parser.parse(
            "CREATE TEMP TABLE IF NOT EXISTS main.t("
            "id INTEGER PRIMARY KEY AUTOINCREMENT, "
            "name VARCHAR(10) NOT NULL DEFAULT 'x', "
            "score DOUBLE PRECISION DEFAULT -1, "
            "UNIQUE (name)) WITHOUT ROWID"
        )
        assert command.temporary
        assert command.if_not_exists
        assert command.name == QualifiedName(Name("t"), Name("main"))
        id_col, name_col, score_col = command.columns
        assert id_col.type_name == TypeName("INTEGER")
        assert id_col.constraints[0].kind == "PRIMARY KEY"
        assert id_col.constraints[0].autoincrement
        assert name_col.type_name == TypeName("VARCHAR", [Integer(10)])
        assert [c.kind for c in name_col.constraints] == ["NOT NULL", "DEFAULT"]
        assert name_col.constraints[1].expr == Text("x")
        assert score_col.type_name == TypeName("DOUBLE PRECISION")
        assert command.constraints[0].kind == "UNIQUE"
        assert command.options == ["WITHOUT ROWID"]

    def test_quoted_name_kept_raw(self, parser):
        """Test that quoted identifiers keep their quotes in the name."""
        command = parser.parse('CREATE TABLE "My Table"(a)')
        assert command.name.name.text == '"My Table"'
        assert command.name.name.value == "My Table"

    def test_foreign_key(self, parser):
        command = parser.parse(
            "CREATE TABLE c(pid REFERENCES p(id) ON DELETE CASCADE, "
            "FOREIGN KEY (pid) REFERENCES p(id) DEFERRABLE INITIALLY DEFERRED)"
        )
        fk = command.columns[0].constraints[0].foreign_key
        assert fk.table == Name("p")
        assert fk.actions == ["ON DELETE CASCADE"]
        assert command.constraints[0].foreign_key.deferrable == "DEFERRABLE INITIALLY DEFERRED"

    def test_create_table_as_select(self, parser):
        command = parser.parse("CREATE TABLE t AS SELECT * FROM u")
        assert isinstance(command.as_select, Select)
        assert command.columns == []


class TestInsert:
    """Tests for INSERT parsing."""

    def test_values_rows(self, parser):
        command = parser.parse("INSERT INTO t VALUES (1, 'a'), (2.5, NULL), (x'00', TRUE)")
        assert command.table == QualifiedName(Name("t"))
        values = command.source.body.select
        assert isinstance(values, Values)
        assert values.rows == [
            [Integer(1), Text("a")],
            [Real(2.5), Null()],
            [Blob(b"\x00"), KeywordConstant("TRUE")],
        ]

    def test_negative_literal(self, parser):
        """Test that a minus sign stays a unary operator in the AST."""
        command = parser.parse("INSERT INTO t VALUES (-1)")
        assert command.source.body.select.rows == [[Unary("-", Integer(1))]]

    def test_modifiers(self, parser):
        """Test that every INSERT modifier is recorded."""
        command = parser.parse(
            "WITH c AS (SELECT 1) INSERT OR IGNORE INTO t AS x (a, b) "
            "VALUES (1, 2) ON CONFLICT DO NOTHING RETURNING *"
        )
        assert command.with_ is not None
        assert command.conflict == "IGNORE"
        assert command.alias == Name("x")
        assert command.columns == [Name("a"), Name("b")]
        assert command.upsert[0].action == "NOTHING"
        assert command.returning == [Star()]

    def test_replace(self, parser):
        assert parser.parse("REPLACE INTO t VALUES (1)").verb == "REPLACE"

    def test_default_values(self, parser):
        command = parser.parse("INSERT INTO t DEFAULT VALUES")
        assert command.default_values
        assert command.source is None


class TestSelect:
    """Tests for SELECT parsing."""

    def test_select_star(self, parser):
        command = parser.parse("SELECT * FROM t")
        core = command.body.select
        assert isinstance(core, SelectCore)
        assert core.columns == [Star()]
        assert core.from_.source == TableRef(name=QualifiedName(Name("t")))

    def test_clauses(self, parser):
        """Test that each optional clause lands in its field."""
        command = parser.parse(
            "SELECT DISTINCT a, count(*) AS n FROM t WHERE a > 1 GROUP BY a "
            "HAVING n > 2 ORDER BY a DESC LIMIT 5 OFFSET 1"
        )
        core = command.body.select
        assert core.distinctness == "DISTINCT"
        assert isinstance(core.columns[1], ExprColumn)
        assert isinstance(core.columns[1].expr, FunctionCall)
        assert core.columns[1].expr.star
        assert core.columns[1].alias == Name("n")
        assert isinstance(core.where, Binary)
        assert len(core.group_by) == 1
        assert core.having is not None
        assert command.order_by[0].order == "DESC"
        assert command.limit.expr == Integer(5)
        assert command.limit.offset == Integer(1)

    def test_compound(self, parser):
        command = parser.parse("SELECT * FROM a UNION ALL SELECT * FROM b")
        assert command.body.compounds[0][0] == "UNION ALL"

    def test_join(self, parser):
        command = parser.parse("SELECT * FROM a LEFT JOIN b ON a.id = b.id")
        join = command.body.select.from_.joins[0]
        assert join.operator == "LEFT JOIN"
        assert isinstance(join.on, Binary)

    def test_between_binds_its_and(self, parser):
        """Test that BETWEEN takes the AND as its own."""
        command = parser.parse("SELECT * FROM t WHERE a BETWEEN 1 AND 2 AND b")
        where = command.body.select.where
        assert isinstance(where, Binary)
        assert where.op == "AND"
        assert isinstance(where.left, Between)

    def test_precedence(self, parser):
        """Test that multiplication binds tighter than addition."""
        command = parser.parse("SELECT 1 + 2 * 3")
        expr = command.body.select.columns[0].expr
        assert expr.op == "+"
        assert expr.right.op == "*"

    def test_is_not(self, parser):
        command = parser.parse("SELECT a IS NOT NULL")
        assert command.body.select.columns[0].expr.op == "IS NOT"

    def test_values_query(self, parser):
        command = parser.parse("VALUES (1), (2)")
        assert isinstance(command.body.select, Values)


class TestOtherStatements:
    """Tests for statements the engine recognizes but does not run."""

    def test_explain(self, parser):
        command = parser.parse("EXPLAIN SELECT * FROM t")
        assert isinstance(command, Explain)
        assert not command.query_plan
        assert parser.parse("EXPLAIN QUERY PLAN SELECT * FROM t").query_plan

    def test_update(self, parser):
        command = parser.parse("UPDATE t SET a = 1 WHERE b = 2")
        assert isinstance(command, Update)
        assert command.assignments[0].columns == [Name("a")]

    def test_drop(self, parser):
        command = parser.parse("DROP TABLE IF EXISTS t")
        assert command == Drop(kind="TABLE", name=QualifiedName(Name("t")), if_exists=True)

    def test_misc_statements_parse(self, parser):
        """Test that schema and transaction statements are all recognized."""
        for sql in (
            "DELETE FROM t WHERE a = 1",
            "ALTER TABLE t ADD COLUMN c",
            "CREATE UNIQUE INDEX i ON t(a)",
            "CREATE VIEW v AS SELECT * FROM t",
            "PRAGMA foreign_keys = ON",
            "BEGIN IMMEDIATE TRANSACTION",
            "COMMIT",
            "ROLLBACK TO SAVEPOINT s",
            "SAVEPOINT s",
            "RELEASE s",
            "VACUUM",
            "ANALYZE t",
        ):
            assert parser.parse(sql) is not None, sql

    def test_drop_trigger(self, parser):
        command = parser.parse("DROP TRIGGER IF EXISTS tr")
        assert command == Drop(kind="TRIGGER", name=QualifiedName(Name("tr")), if_exists=True)

    def test_end_keeps_its_keyword(self, parser):
        assert parser.parse("END TRANSACTION") == Commit(keyword="END")
        assert parser.parse("commit") == Commit(keyword="COMMIT")

    def test_attach(self, parser):
        command = parser.parse("ATTACH DATABASE 'other.db' AS aux KEY 'secret'")
        assert command == Attach(expr=Text("other.db"), schema=Column(Name("aux")), key=Text("secret"))
        assert parser.parse("ATTACH 'other.db' AS aux").key is None

    def test_detach(self, parser):
        assert parser.parse("DETACH DATABASE aux") == Detach(schema=Column(Name("aux")))
        assert parser.parse("DETACH aux") == Detach(schema=Column(Name("aux")))

    def test_reindex(self, parser):
        assert parser.parse("REINDEX") == Reindex()
        assert parser.parse("REINDEX main.t") == Reindex(target=QualifiedName(Name("t"), Name("main")))


class TestCreateTrigger:
    """Tests for CREATE TRIGGER, whose body holds its own semicolons."""

    def test_body_kept_as_text(self, parser):
        command = parser.parse(
            "CREATE TRIGGER tr AFTER UPDATE OF a, b ON t FOR EACH ROW WHEN new.a > 0 "
            "BEGIN UPDATE t SET b = CASE WHEN a THEN 1 END; INSERT INTO log VALUES (1); END"
        )
        assert isinstance(command, CreateTrigger)
        assert command.name == QualifiedName(Name("tr"))
        assert command.table == QualifiedName(Name("t"))
        assert command.timing == "AFTER"
        assert command.event == "UPDATE"
        assert command.columns == [Name("a"), Name("b")]
        assert command.for_each_row
        assert command.when == Binary(">", Column(Name("a"), table=Name("new")), Integer(0))
        assert command.body == "BEGIN UPDATE t SET b = CASE WHEN a THEN 1 END; INSERT INTO log VALUES (1); END"

    def test_next_statement_follows_body(self, parser):
        """Test that the statement after a trigger starts after its END."""
        commands = list(
            parser.commands("CREATE TRIGGER tr DELETE ON t BEGIN DELETE FROM u; END; SELECT 1")
        )
        assert [type(command) for command in commands] == [CreateTrigger, Select]
        assert commands[0].timing is None
        assert commands[0].event == "DELETE"
        assert commands[0].body == "BEGIN DELETE FROM u; END"

    def test_options(self, parser):
        command = parser.parse(
            "CREATE TEMP TRIGGER IF NOT EXISTS main.tr INSTEAD OF INSERT ON v BEGIN SELECT 1; END"
        )
        assert command.name == QualifiedName(Name("tr"), Name("main"))
        assert command.timing == "INSTEAD OF"
        assert command.event == "INSERT"
        assert command.temporary
        assert command.if_not_exists
        assert not command.for_each_row

    def test_unterminated_body(self, parser):
        with pytest.raises(ParseError, match="incomplete input"):
            parser.parse("CREATE TRIGGER tr DELETE ON t BEGIN SELECT 1;")


class TestCreateVirtualTable:
    def test_module_arguments(self, parser):
        command = parser.parse(
            "CREATE VIRTUAL TABLE IF NOT EXISTS docs USING fts5(title, body, tokenize = 'porter ascii')"
        )
        assert command == CreateVirtualTable(
            name=QualifiedName(Name("docs")),
            module=Name("fts5"),
            arguments="title, body, tokenize = 'porter ascii'",
            if_not_exists=True,
        )

    def test_nested_parentheses(self, parser):
        command = parser.parse("CREATE VIRTUAL TABLE v USING m(a(1, 2), b)")
        assert command.arguments == "a(1, 2), b"

    def test_no_arguments(self, parser):
        assert parser.parse("CREATE VIRTUAL TABLE v USING m").arguments is None


class TestKeywordsAsNames:
    """Tests for keywords read as names where the keyword cannot appear."""

    def test_true_and_false_columns(self, parser):
        command = parser.parse("CREATE TABLE t4(true, false)")
        assert [column.name.text for column in command.columns] == ["true", "false"]

    def test_true_table(self, parser):
        command = parser.parse("CREATE TABLE true(a)")
        assert command.name == QualifiedName(Name("true"))
        assert parser.parse("SELECT * FROM true").body.select.from_.source.name == QualifiedName(Name("true"))

    def test_other_keywords(self, parser):
        command = parser.parse("CREATE TABLE first(last, nulls, trigger, virtual)")
        assert command.name == QualifiedName(Name("first"))
        assert [column.name.text for column in command.columns] == ["last", "nulls", "trigger", "virtual"]

    def test_true_is_still_a_value(self, parser):
        command = parser.parse("INSERT INTO t VALUES (true, FALSE)")
        assert command.source.body.select.rows == [[KeywordConstant("TRUE"), KeywordConstant("FALSE")]]


class TestNewerSyntax:
    def test_is_distinct_from(self, parser):
        expr = parser.parse("SELECT a IS DISTINCT FROM b").body.select.columns[0].expr
        assert expr == Binary("IS DISTINCT FROM", Column(Name("a")), Column(Name("b")))

    def test_is_not_distinct_from(self, parser):
        expr = parser.parse("SELECT a IS NOT DISTINCT FROM NULL").body.select.columns[0].expr
        assert expr == Binary("IS NOT DISTINCT FROM", Column(Name("a")), Null())

    def test_nulls_ordering(self, parser):
        command = parser.parse("SELECT * FROM t ORDER BY a DESC NULLS LAST, b NULLS FIRST")
        assert command.order_by == [
            SortedColumn(Column(Name("a")), "DESC", "LAST"),
            SortedColumn(Column(Name("b")), None, "FIRST"),
        ]
