"""Reader for SQLite's Tcl test scripts.

Only the small subset of Tcl used by the simpler SQLite test files is
understood. A script becomes a list of records:

* ``ExecSql`` for a top-level ``execsql {...}`` line
* ``DoTest`` for a block such as::

    do_test select1-1.4 {
      execsql {SELECT f1 FROM test1}
    } {11}

  or the error-catching form::

    do_test select1-1.1 {
      set v [catch {execsql {SELECT f1 FROM test1}} msg]
      lappend v $msg
    } {1 {no such table: test1}}

Blank lines, ``#`` comments and top-level ``set``/``source`` commands are
skipped.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from literal_tables.log import get_logger

logger = get_logger(__name__)

# select1.test stops being parseable by this reader at this line
SELECT1_STOP_MARKER = "set long {This is a string that is too big to fit inside a NBFS buffer}"

_START_CATCH = "set v [catch {execsql {"
_END_CATCH = "}} msg]"
_START_SQL = "execsql {"
_END_SQL = "}"


@dataclass(frozen=True)
class ExecSql:
    """Setup SQL that is expected to succeed."""

    sql: str


@dataclass(frozen=True)
class DoTest:
    """A named test: run sql and compare with expected."""

    name: str
    catch: bool
    sql: str
    expected: str


Record = Union[ExecSql, DoTest]


class ScriptSyntaxError(Exception):
    """The test script uses a construct this reader does not understand."""

    def __init__(self, line: int, message: str) -> None:
        super().__init__(f"line {line}: {message}")
        self.line = line
        self.message = message


class _Lines:
    """Trimmed lines with their 1-based line numbers."""

    def __init__(self, text: str) -> None:
        self._lines = deque(enumerate(text.split("\n"), start=1))
        self.lineno = 0

    def next(self) -> str | None:
        if not self._lines:
            return None
        self.lineno, line = self._lines.popleft()
        return line.strip()

    def expect(self) -> str:
        line = self.next()
        if line is None:
            raise ScriptSyntaxError(self.lineno, "expected line")
        return line


def _check_trailing(lines: _Lines, rest: str) -> None:
    if rest:
        raise ScriptSyntaxError(lines.lineno, f"unexpected trailing chars: {rest}")


def _parse_test_sql(lines: _Lines) -> tuple[bool, str]:
    line = lines.expect()

    start = line.find(_START_CATCH)
    if start >= 0:
        end = line.find(_END_CATCH)
        if end < 0:
            raise ScriptSyntaxError(lines.lineno, f"expected {_END_CATCH}")
        _check_trailing(lines, line[end + len(_END_CATCH):])
        return True, line[start + len(_START_CATCH):end]

    start = line.find(_START_SQL)
    if start < 0:
        raise ScriptSyntaxError(lines.lineno, f"expected {_START_CATCH} or {_START_SQL}")
    end = line.rfind(_END_SQL)
    if end < start:
        # The statement wraps onto the next line
        line = f"{line} {lines.expect()}"
        end = line.rfind(_END_SQL)
        if end < start:
            raise ScriptSyntaxError(lines.lineno, f"expected {_END_SQL}")
    _check_trailing(lines, line[end + len(_END_SQL):])
    return False, line[start + len(_START_SQL):end]


def _parse_do_test(lines: _Lines, header: str) -> DoTest:
    header = header.replace("do_test ", "", 1)
    brace = header.find("{")
    if brace < 0:
        raise ScriptSyntaxError(lines.lineno, "expected '{'")
    name = header[:brace].strip()

    catch, sql = _parse_test_sql(lines)

    line = lines.expect()
    if line == "lappend v $msg":
        line = lines.expect()
    if not line.startswith("}"):
        raise ScriptSyntaxError(lines.lineno, f"unexpected line {line}")
    result = line[1:].strip()
    if not (result.startswith("{") and result.endswith("}")):
        raise ScriptSyntaxError(lines.lineno, "expected result")

    return DoTest(name=name, catch=catch, sql=sql, expected=result[1:-1])


def parse_script(text: str, stop_at: str | None = None) -> list[Record]:
    """Parse a Tcl test script into records.

    If stop_at is given, the script is truncated at its first occurrence.
    """
    if stop_at is not None:
        index = text.find(stop_at)
        if index >= 0:
            text = text[:index]

    records: list[Record] = []
    lines = _Lines(text)
    while (line := lines.next()) is not None:
        if not line or line.startswith("#") or line.startswith(("set", "source")):
            continue

        if line.startswith("do_test"):
            records.append(_parse_do_test(lines, line))
        elif line.startswith(_START_SQL):
            body = line.replace(_START_SQL, "", 1)
            end = body.rfind(_END_SQL)
            if end < 0:
                logger.warning("unterminated execsql skipped", line=lines.lineno)
                continue
            records.append(ExecSql(sql=body[:end]))
        else:
            raise ScriptSyntaxError(lines.lineno, "could not parse")

    logger.debug("parsed test script", records=len(records))
    return records


def load_script(path: str | Path, stop_at: str | None = None) -> list[Record]:
    """Read and parse a Tcl test script file."""
    text = Path(path).read_text(encoding="utf-8")
    return parse_script(text, stop_at=stop_at)
