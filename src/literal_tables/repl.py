"""Interactive shell and command line for literal tables."""

from __future__ import annotations

import argparse
import readline  # noqa: F401 - enables line editing in input()
import sys
from pathlib import Path

from literal_tables.config import Settings, get_settings
from literal_tables.conformance import ReplayStatus, replay
from literal_tables.engine import Engine
from literal_tables.errors import SQLError, TableNotFound
from literal_tables.legacy_script import ScriptSyntaxError, load_script
from literal_tables.log import get_logger, setup_logging
from literal_tables.parsing.render import format_rows
from literal_tables.statement_executor import ExecutionResult, SelectResult

logger = get_logger(__name__)

_CLOSING_QUOTE = {"'": "'", '"': '"', "`": "`", "[": "]"}


def _scan(content: str) -> tuple[list[str], bool]:
    """Split content into statements and report whether it ends mid-statement.

    Semicolons inside quoted strings, quoted identifiers, comments and
    parentheses do not end a statement. The flag is True when content stops
    inside a quote, a block comment or an open parenthesis.
    """
    statements = []
    current: list[str] = []
    paren_depth = 0
    closing_quote: str | None = None
    in_line_comment = False
    in_block_comment = False
    i = 0

    while i < len(content):
        ch = content[i]
        nxt = content[i + 1] if i + 1 < len(content) else ""

        if in_line_comment:
            current.append(ch)
            if ch == "\n":
                in_line_comment = False
            i += 1
            continue

        if in_block_comment:
            current.append(ch)
            if ch == "*" and nxt == "/":
                current.append(nxt)
                in_block_comment = False
                i += 2
                continue
            i += 1
            continue

        if closing_quote is not None:
            # A doubled quote closes and reopens, which leaves the state unchanged
            current.append(ch)
            if ch == closing_quote:
                closing_quote = None
            i += 1
            continue

        if ch in _CLOSING_QUOTE:
            closing_quote = _CLOSING_QUOTE[ch]
            current.append(ch)
        elif ch == "-" and nxt == "-":
            in_line_comment = True
            current.append(ch)
        elif ch == "/" and nxt == "*":
            in_block_comment = True
            current.append(ch + nxt)
            i += 2
            continue
        elif ch == "(":
            paren_depth += 1
            current.append(ch)
        elif ch == ")":
            paren_depth = max(0, paren_depth - 1)
            current.append(ch)
        elif ch == ";" and paren_depth == 0:
            stmt = "".join(current).strip()
            if stmt:
                statements.append(stmt)
            current = []
        else:
            current.append(ch)
        i += 1

    stmt = "".join(current).strip()
    if stmt:
        statements.append(stmt)

    incomplete = closing_quote is not None or in_block_comment or paren_depth > 0
    return statements, incomplete


def _split_statements(content: str) -> list[str]:
    """Split content into statements on top-level semicolons."""
    return _scan(content)[0]


def needs_continuation(text: str) -> bool:
    """Check whether text stops inside a quote, comment or parenthesis."""
    return _scan(text)[1]


def print_result(result: ExecutionResult) -> None:
    """Print a statement result.

    SELECT rows are printed one per line with values separated by ``|``.
    Other statements print their confirmation message, if any.
    """
    if isinstance(result, SelectResult):
        if not result.rows:
            print("(no results)")
            return
        print(format_rows(result.rows))
        return

    if result.message:
        print(result.message)


def _evaluate(engine: Engine, sql: str) -> ExecutionResult:
    logger.debug("evaluating statement", sql=sql)
    return engine.evaluate(sql)


def _print_tables(engine: Engine) -> None:
    names = engine.catalog.names()
    if not names:
        print("(no tables)")
        return
    for name in names:
        print(name)


def _print_schema(engine: Engine, name: str | None) -> None:
    tables = list(engine.catalog)
    if name:
        tables = [table for table in tables if str(table.name) == name]
        if not tables:
            raise TableNotFound(name)
    for table in tables:
        print(f"{table.sql};")


def run_repl(settings: Settings, engine: Engine | None = None) -> int:
    """Run the interactive shell."""
    engine = engine or Engine()

    print("ltsql - literal tables SQL shell")
    print("Type 'help' for commands, 'exit' to quit.\n")

    history_file = settings.history_path
    try:
        readline.read_history_file(history_file)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("could not read history", path=str(history_file), error=str(e))

    try:
        while True:
            try:
                line = input(settings.prompt).strip()
            except EOFError:
                print()
                break
            except KeyboardInterrupt:
                print()
                continue

            if not line:
                continue

            lower = line.lower()
            if lower in ("exit", "quit"):
                break
            elif lower == "help":
                print_help()
                continue
            elif lower == "clear":
                print("\033[2J\033[H", end="")
                continue
            elif lower == "tables":
                _print_tables(engine)
                print()
                continue
            elif lower == "schema" or lower.startswith("schema "):
                try:
                    _print_schema(engine, line[6:].strip() or None)
                except SQLError as e:
                    print(f"Error: {e}")
                print()
                continue
            elif lower.startswith("execute "):
                script_path = Path(line[8:].strip().strip('"').strip("'"))
                if not script_path.exists():
                    print(f"Error: File not found: {script_path}")
                    print()
                    continue

                print(f"Executing {script_path}...")
                if run_file(script_path, engine, verbose=True) != 0:
                    print("Script execution failed with errors.")
                else:
                    print("Script execution completed.")
                print()
                continue

            # Keep reading while a quote, comment or parenthesis is open
            while needs_continuation(line):
                try:
                    continuation = input("...> ")
                except EOFError:
                    break
                if not continuation.strip():
                    # Empty line cancels continuation
                    break
                line += "\n" + continuation

            # The input goes to the engine as typed; only its first statement runs
            try:
                print_result(_evaluate(engine, line))
            except SQLError as e:
                print(f"Error: {e}")

            print()

    finally:
        try:
            readline.set_history_length(settings.history_length)
            readline.write_history_file(history_file)
        except OSError as e:
            logger.warning("could not write history", path=str(history_file), error=str(e))

    return 0


def print_help() -> None:
    """Print help information."""
    print("""
ltsql - literal tables SQL shell

SUPPORTED SQL:
  CREATE TABLE <name> (<column> [type] [constraints], ...)
                           Create a table (types and constraints are recorded,
                           not enforced). Re-creating an existing table is a no-op.
  INSERT INTO <name> VALUES (<literal>, ...), (...)
                           Append rows. Values must be literals: integers, reals,
                           'text', X'blob', NULL, TRUE, FALSE, CURRENT_DATE,
                           CURRENT_TIME, CURRENT_TIMESTAMP.
  SELECT * FROM <name>     Return every row in insertion order

  Anything else is parsed and rejected with an error explaining which clause
  is not supported.

SHELL COMMANDS:
  tables                   List tables
  schema [name]            Show CREATE TABLE statements
  execute <file>           Run the statements in a file
  clear                    Clear the screen
  help                     Show this help
  exit, quit               Leave the shell

Each input runs one statement; text after its first semicolon is ignored.
Input with an open parenthesis, quote or block comment continues on the
next line; an empty line cancels it.
""")


def run_file(file_path: Path, engine: Engine | None = None, verbose: bool = False) -> int:
    """Execute the statements in a file.

    Args:
        file_path: Path to the file containing SQL statements
        engine: Engine to run against; a fresh one when omitted
        verbose: If True, print each statement before executing

    Returns:
        0 on success, 1 on error
    """
    try:
        content = file_path.read_text()
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1

    statements = _split_statements(content)
    if not statements:
        print("No statements found in file", file=sys.stderr)
        return 1

    engine = engine or Engine()
    logger.info("running file", path=str(file_path), statements=len(statements))

    for statement in statements:
        if verbose:
            print(f"{statement};")
        try:
            print_result(_evaluate(engine, statement))
        except SQLError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    return 0


def run_replay(script_path: Path, stop_at: str | None = None, verbose: bool = False) -> int:
    """Replay a legacy SQLite test script and print a summary.

    Returns:
        0 when every record passed, 1 otherwise
    """
    try:
        records = load_script(script_path, stop_at=stop_at)
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1
    except ScriptSyntaxError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    report = replay(records)
    for outcome in report.outcomes:
        if outcome.status is ReplayStatus.PASSED:
            if verbose:
                print(f"ok      {outcome.name}")
            continue
        detail = outcome.message if outcome.status is ReplayStatus.ERROR else outcome.actual
        print(f"{outcome.status.value:<7} {outcome.name}: {detail}")

    print(report.summary())
    return 0 if report.ok else 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        description="Shell for the literal tables SQL engine"
    )
    arg_parser.add_argument(
        "-c", "--command",
        type=str,
        help="Evaluate a single statement and exit",
    )
    arg_parser.add_argument(
        "-f", "--file",
        type=Path,
        help="Execute statements from a file and exit",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print each statement before executing (for -f/--file and --replay)",
    )
    arg_parser.add_argument(
        "--replay",
        type=Path,
        metavar="PATH",
        help="Replay a legacy SQLite Tcl test script and exit",
    )
    arg_parser.add_argument(
        "--stop-at",
        type=str,
        metavar="MARKER",
        help="Ignore the replayed script from the first occurrence of MARKER",
    )
    arg_parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level",
    )
    arg_parser.add_argument(
        "--log-format",
        choices=["json", "console"],
        help="Override the configured log format",
    )

    args = arg_parser.parse_args(argv)

    settings = get_settings()
    setup_logging(
        level=args.log_level or settings.log_level,
        log_format=args.log_format or settings.log_format,
    )

    if args.replay:
        if not args.replay.exists():
            print(f"Error: File not found: {args.replay}", file=sys.stderr)
            return 1
        return run_replay(args.replay, stop_at=args.stop_at, verbose=args.verbose)

    if args.file:
        if not args.file.exists():
            print(f"Error: File not found: {args.file}", file=sys.stderr)
            return 1
        return run_file(args.file, verbose=args.verbose)

    if args.command:
        try:
            print_result(_evaluate(Engine(), args.command))
        except SQLError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return 0

    return run_repl(settings)


if __name__ == "__main__":
    sys.exit(main())
