"""Replay legacy SQLite test scripts against an engine.

Each ``DoTest`` result is rendered the way SQLite's Tcl harness would print
it and compared with the expected string from the script.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from literal_tables.engine import Engine
from literal_tables.errors import SQLError, UnsupportedConstruct
from literal_tables.legacy_script import DoTest, ExecSql, Record
from literal_tables.log import get_logger
from literal_tables.parsing.render import render_real
from literal_tables.parsing.sql_ast import ExprColumn, Select, SelectCore
from literal_tables.parsing.sql_parser import SQLParser
from literal_tables.statement_executor import ExecutionResult
from literal_tables.validator import literal_value
from literal_tables.values import Blob, Integer, KeywordConstant, Literal, Null, Real, Row, Text

logger = get_logger(__name__)

_TCL_SPECIAL = frozenset(' \t\n\r{}[]$";\\')


class ReplayStatus(Enum):
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"


@dataclass
class ReplayOutcome:
    """What happened when one record was replayed."""

    record: Record
    status: ReplayStatus
    actual: str = ""
    message: str | None = None

    @property
    def name(self) -> str:
        if isinstance(self.record, DoTest):
            return self.record.name
        return "execsql"


@dataclass
class ReplayReport:
    outcomes: list[ReplayOutcome] = field(default_factory=list)

    def _count(self, status: ReplayStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)

    @property
    def passed(self) -> int:
        return self._count(ReplayStatus.PASSED)

    @property
    def failed(self) -> int:
        return self._count(ReplayStatus.FAILED)

    @property
    def errors(self) -> int:
        return self._count(ReplayStatus.ERROR)

    @property
    def ok(self) -> bool:
        return self.passed == len(self.outcomes)

    def summary(self) -> str:
        return f"{self.passed} passed, {self.failed} failed, {self.errors} errors"


def tcl_element(text: str) -> str:
    """Quote text as a single Tcl list element."""
    if text == "" or any(c in _TCL_SPECIAL for c in text):
        return "{" + text + "}"
    return text


def tcl_value(literal: Literal) -> str:
    """Format a value the way SQLite's Tcl binding returns it."""
    if isinstance(literal, Integer):
        return str(literal.value)
    if isinstance(literal, Real):
        return render_real(literal.value)
    if isinstance(literal, Text):
        return literal.value
    if isinstance(literal, Blob):
        return literal.value.decode("utf-8", errors="replace")
    if isinstance(literal, Null):
        return ""
    if isinstance(literal, KeywordConstant):
        return literal.keyword
    raise ValueError(f"Unknown literal type: {type(literal)}")


def tcl_list(values: Iterable[str]) -> str:
    return " ".join(tcl_element(value) for value in values)


def flatten(rows: Iterable[Row]) -> list[str]:
    """Flatten rows into the value list execsql returns."""
    return [tcl_value(value) for row in rows for value in row]


def _result_text(result: ExecutionResult) -> str:
    return tcl_list(flatten(result.rows))


def _replay_test(engine: Engine, test: DoTest) -> ReplayOutcome:
    try:
        result = engine.evaluate(test.sql)
    except SQLError as e:
        if not test.catch:
            return ReplayOutcome(test, ReplayStatus.ERROR, message=str(e))
        actual = tcl_list(["1", str(e)])
    else:
        actual = _result_text(result)
        if test.catch:
            actual = tcl_list(["0", actual])

    status = ReplayStatus.PASSED if actual == test.expected else ReplayStatus.FAILED
    return ReplayOutcome(test, status, actual=actual)


def replay(records: Iterable[Record], engine: Engine | None = None) -> ReplayReport:
    """Run every record against engine (a fresh one by default)."""
    engine = engine or Engine()
    report = ReplayReport()
    for record in records:
        if isinstance(record, ExecSql):
            try:
                engine.evaluate(record.sql)
            except SQLError as e:
                outcome = ReplayOutcome(record, ReplayStatus.ERROR, message=str(e))
            else:
                outcome = ReplayOutcome(record, ReplayStatus.PASSED)
        elif isinstance(record, DoTest):
            outcome = _replay_test(engine, record)
        else:
            raise ValueError(f"Unknown record type: {type(record)}")

        if outcome.status is not ReplayStatus.PASSED:
            logger.info(
                "replay mismatch",
                test=outcome.name,
                status=outcome.status.value,
                actual=outcome.actual,
                message=outcome.message,
            )
        report.outcomes.append(outcome)

    logger.debug("replay finished", passed=report.passed, total=len(report.outcomes))
    return report


def literal_select_rows(sql: str, parser: SQLParser | None = None) -> list[Row]:
    """Evaluate a script of ``SELECT <literal>, ...`` statements.

    Each statement contributes one row. This is how expected results can be
    written as SQL, e.g. ``SELECT 1, 2; SELECT 3, 4``.
    """
    parser = parser or SQLParser()
    rows: list[Row] = []
    for command in parser.commands(sql):
        if not isinstance(command, Select) or not _is_plain_select(command):
            raise UnsupportedConstruct(f"expected SELECT of literals, got {type(command).__name__}")
        core = command.body.select
        row = []
        for column in core.columns:
            if not isinstance(column, ExprColumn) or column.alias is not None:
                raise UnsupportedConstruct(f"unexpected column {column}")
            row.append(literal_value(column.expr))
        rows.append(tuple(row))
    return rows


def _is_plain_select(select: Select) -> bool:
    core = select.body.select
    return (
        select.with_ is None
        and not select.order_by
        and select.limit is None
        and not select.body.compounds
        and isinstance(core, SelectCore)
        and core.distinctness is None
        and core.from_ is None
        and core.where is None
        and not core.group_by
        and core.having is None
        and not core.window
    )
