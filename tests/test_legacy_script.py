"""Tests for reading SQLite Tcl test scripts."""

from pathlib import Path

import pytest
from structlog.testing import capture_logs

from literal_tables.legacy_script import (
    SELECT1_STOP_MARKER,
    DoTest,
    ExecSql,
    ScriptSyntaxError,
    load_script,
    parse_script,
)

SCRIPT = """\
# The author disclaims copyright to this source code.
#
set testdir [file dirname $argv0]
source $testdir/tester.tcl

# Try to select on a non-existant table.
#
do_test select1-1.1 {
  set v [catch {execsql {SELECT f1 FROM test1}} msg]
  lappend v $msg
} {1 {no such table: test1}}

execsql {CREATE TABLE test1(f1 int, f2 int)}

do_test select1-1.4 {
  execsql {SELECT f1 FROM test1}
} {11}

do_test select1-1.5 {
  execsql {
    SELECT f1, f2 FROM test1}
} {11 22}
"""


class TestParseScript:
    """Tests for turning script text into records."""

    def test_records(self):
        """Test that comments and set/source lines are skipped."""
        records = parse_script(SCRIPT)
        assert [type(r) for r in records] == [DoTest, ExecSql, DoTest, DoTest]

    def test_catch_test(self):
        record = parse_script(SCRIPT)[0]
        assert record == DoTest(
            name="select1-1.1",
            catch=True,
            sql="SELECT f1 FROM test1",
            expected="1 {no such table: test1}",
        )

    def test_exec_sql(self):
        assert parse_script(SCRIPT)[1] == ExecSql(sql="CREATE TABLE test1(f1 int, f2 int)")

    def test_plain_test(self):
        record = parse_script(SCRIPT)[2]
        assert record == DoTest(name="select1-1.4", catch=False, sql="SELECT f1 FROM test1", expected="11")

    def test_wrapped_sql(self):
        """Test an execsql body that continues onto the next line."""
        record = parse_script(SCRIPT)[3]
        assert record.sql.strip() == "SELECT f1, f2 FROM test1"
        assert record.expected == "11 22"

    def test_catch_without_lappend(self):
        records = parse_script(
            "do_test t-1 {\n"
            "  set v [catch {execsql {SELECT 1}} msg]\n"
            "} {0 1}\n"
        )
        assert records == [DoTest(name="t-1", catch=True, sql="SELECT 1", expected="0 1")]

    def test_stop_at(self):
        """Test that the script is cut at the marker."""
        text = SCRIPT + f"\n{SELECT1_STOP_MARKER}\nthis would not parse\n"
        assert len(parse_script(text, stop_at=SELECT1_STOP_MARKER)) == 4

    def test_stop_at_missing_marker(self):
        assert len(parse_script(SCRIPT, stop_at="no such marker")) == 4

    def test_empty_script(self):
        assert parse_script("") == []

    def test_unterminated_exec_sql_skipped(self):
        """Test that a top-level execsql without a closing brace is skipped."""
        with capture_logs() as logs:
            records = parse_script("execsql {\n\ndo_test t-1 {\n  execsql {SELECT 1}\n} {1}\n")
        assert [type(r) for r in records] == [DoTest]
        assert [log["event"] for log in logs] == ["unterminated execsql skipped"]


class TestScriptErrors:
    """Tests for malformed scripts."""

    def _error(self, text):
        with pytest.raises(ScriptSyntaxError) as exc_info:
            parse_script(text)
        return exc_info.value

    def test_unknown_top_level_line(self):
        error = self._error("# header\n\nputs hello\n")
        assert error.line == 3
        assert error.message == "could not parse"
        assert str(error) == "line 3: could not parse"

    def test_missing_brace(self):
        assert self._error("do_test t-1\n").message == "expected '{'"

    def test_missing_body(self):
        assert self._error("do_test t-1 {").message == "expected line"

    def test_unknown_body(self):
        error = self._error("do_test t-1 {\n  puts hi\n} {}\n")
        assert error.message.startswith("expected set v [catch {execsql {")

    def test_unterminated_catch(self):
        error = self._error("do_test t-1 {\n  set v [catch {execsql {SELECT 1}\n} {}\n")
        assert error.message == "expected }} msg]"

    def test_trailing_characters(self):
        error = self._error("do_test t-1 {\n  execsql {SELECT 1} extra\n} {1}\n")
        assert error.message == "unexpected trailing chars:  extra"
        assert error.line == 2

    def test_missing_close(self):
        error = self._error("do_test t-1 {\n  execsql {SELECT 1}\n  puts hi\n")
        assert error.message == "unexpected line puts hi"

    def test_malformed_result(self):
        error = self._error("do_test t-1 {\n  execsql {SELECT 1}\n} 1\n")
        assert error.message == "expected result"


class TestLoadScript:
    def test_load_from_file(self, tmp_path: Path):
        path = tmp_path / "select1.test"
        path.write_text(SCRIPT, encoding="utf-8")
        assert load_script(path) == parse_script(SCRIPT)

    def test_load_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_script(tmp_path / "missing.test")
