from __future__ import annotations
import dataclasses
import logging
import typing as t

from sqlbatch.config import Settings
from sqlbatch.driver import CursorExecutor, Executor, connection, cursor
from sqlbatch.script.reader import ScriptError, iter_script

logger = logging.getLogger(__name__)


class ExecutionFailure(RuntimeError):
    """A statement failed; nothing after it was attempted."""


@dataclasses.dataclass(frozen=True)
class Outcome:
    """Result of executing one statement."""

    index: int
    statement: str
    rowcount: int = 0
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclasses.dataclass
class RunResult:
    executed: int = 0
    affected: int = 0
    failure: Outcome | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def raise_for_failure(self) -> None:
        if self.failure is None:
            return
        f = self.failure
        raise ExecutionFailure(
            f"Statement #{f.index} failed: {f.error}\nSQL:{f.statement}"
        ) from f.error


def execute_statement(executor: Executor, statement: str, index: int) -> Outcome:
    """Execute a single statement and report how it went, never raising."""
    logger.info("SQL:%s", statement)
    try:
        rowcount = executor.execute(statement)
    except Exception as exc:  # driver errors are reported via the Outcome
        logger.error("%s", exc)
        return Outcome(index, statement, error=exc)

    if rowcount > 0:
        logger.info("Affected rows:%d", rowcount)
    logger.debug("Success SQL:%s", statement)
    return Outcome(index, statement, rowcount=rowcount)


def run_statements(executor: Executor, statements: t.Iterable[str]) -> RunResult:
    """
    Execute *statements* in order, stopping at the first failure.

    *statements* is consumed lazily, so nothing past the failing statement
    is read.
    """
    result = RunResult()
    for index, stmt in enumerate(statements, start=1):
        outcome = execute_statement(executor, stmt, index)
        if not outcome.ok:
            result.failure = outcome
            return result
        result.executed += 1
        result.affected += outcome.rowcount
    return result


class _DryRunExecutor:
    def execute(self, sql: str) -> int:
        return 0


class ScriptRunner:
    """
    Applies one SQL script to the database described by *settings*.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings: Settings = settings

    def run(self, *, dry_run: bool = False) -> RunResult:
        script = self.settings.require_script()
        if not script.is_file():
            raise ScriptError(f"SQL script {script} not found")

        stmts = iter_script(script, self.settings.encoding)

        if dry_run:
            logger.info("(DRY) %s – no statements will be executed", script)
            result = run_statements(_DryRunExecutor(), stmts)
        else:
            env = self.settings.env
            with connection(env) as conn, cursor(conn, env) as cur:
                result = run_statements(CursorExecutor(cur), stmts)

        if result.ok:
            logger.info(
                "Completed %s: %d statement(s), %d row(s) affected",
                script.name, result.executed, result.affected,
            )
        else:
            logger.error(
                "Halted %s at statement #%d after %d successful statement(s)",
                script.name, result.failure.index, result.executed,
            )
        return result
