"""Engine: the single entry point for evaluating SQL text."""

from __future__ import annotations

from literal_tables.catalog import Catalog
from literal_tables.parsing.sql_parser import SQLParser
from literal_tables.statement_executor import EmptyResult, ExecutionResult, StatementExecutor


class Engine:
    """Owns one catalog and evaluates SQL statements against it.

    Not thread-safe: callers sharing an engine must serialize access.
    """

    def __init__(self, parser: SQLParser | None = None) -> None:
        self.parser = parser or SQLParser()
        self._catalog = Catalog()
        self._executor = StatementExecutor(self._catalog)

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    def evaluate(self, sql: str) -> ExecutionResult:
        """Evaluate the first statement in sql.

        Text after the first statement is ignored. Input without a statement
        returns EmptyResult. ParseError, UnsupportedConstruct and
        TableNotFound propagate to the caller.
        """
        command = self.parser.next_command(sql)
        if command is None:
            return EmptyResult()
        return self._executor.execute(command)
