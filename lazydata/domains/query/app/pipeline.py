"""Query execution pipeline: classify, dispatch, time, normalize, record."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from lazydata.db.exceptions import QueryError, UnsupportedStatementError
from lazydata.domains.query.app.classifier import StatementKind, classify_statement
from lazydata.domains.query.app.context import AppContext
from lazydata.domains.query.store.history import QueryHistoryEntry
from lazydata.shared.core.debug_events import emit_debug_event

if TYPE_CHECKING:
    from lazydata.db.executor import Executor
    from lazydata.domains.results.domain.cells import CellValue


@dataclass(frozen=True)
class DataResult:
    """Rows returned by a SELECT."""

    headers: list[str]
    rows: list[tuple[CellValue, ...]]
    row_count: int
    message: str


@dataclass(frozen=True)
class AffectedResult:
    """Row count reported by INSERT/UPDATE/DELETE."""

    kind: StatementKind
    row_count: int
    message: str


ExecutionResult = DataResult | AffectedResult


def select_message(row_count: int, elapsed_ms: int) -> str:
    return f"Successfully run. Total query runtime: {elapsed_ms} ms.\n{row_count} rows fetched."


def affected_message(kind: StatementKind, row_count: int, elapsed_ms: int) -> str:
    return f"{kind.value} {row_count} rows affected.\nQuery completed in {elapsed_ms} msec."


class QueryPipeline:
    """Runs one statement against an executor and records the attempt.

    Holds no per-query state; stats and history go to the ``AppContext``.
    Every attempt, successful or not, adds exactly one history entry.
    """

    def __init__(
        self,
        context: AppContext,
        connection_name: str | None,
        *,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.context = context
        self.connection_name = connection_name
        self._clock = clock

    def execute(self, executor: Executor, sql: str) -> ExecutionResult:
        kind = classify_statement(sql)
        emit_debug_event("query.execute", category="query", kind=kind.value, connection=self.connection_name)
        start = self._clock()
        try:
            if kind is StatementKind.UNKNOWN:
                raise UnsupportedStatementError()
            result = self._dispatch(executor, kind, sql, start)
        except QueryError as exc:
            elapsed_ms = self._elapsed_ms(start)
            self._record(sql, success=False, rows=0, elapsed_ms=elapsed_ms)
            emit_debug_event("query.failed", category="query", error=exc.message, elapsed_ms=elapsed_ms)
            raise
        return result

    def _dispatch(self, executor: Executor, kind: StatementKind, sql: str, start: float) -> ExecutionResult:
        if kind is StatementKind.SELECT:
            columns, rows = executor.fetch_all(sql)
            elapsed_ms = self._elapsed_ms(start)
            row_count = len(rows)
            headers = list(columns) if rows else []
            self._complete(sql, row_count, elapsed_ms)
            return DataResult(
                headers=headers,
                rows=list(rows),
                row_count=row_count,
                message=select_message(row_count, elapsed_ms),
            )

        operation = {
            StatementKind.INSERT: executor.insert,
            StatementKind.UPDATE: executor.update,
            StatementKind.DELETE: executor.delete,
        }[kind]
        row_count = max(0, operation(sql))
        elapsed_ms = self._elapsed_ms(start)
        self._complete(sql, row_count, elapsed_ms)
        return AffectedResult(kind=kind, row_count=row_count, message=affected_message(kind, row_count, elapsed_ms))

    def _complete(self, sql: str, row_count: int, elapsed_ms: int) -> None:
        self.context.record_stats(row_count, elapsed_ms)
        self._record(sql, success=True, rows=row_count, elapsed_ms=elapsed_ms)
        emit_debug_event("query.complete", category="query", rows=row_count, elapsed_ms=elapsed_ms)

    def _record(self, sql: str, *, success: bool, rows: int, elapsed_ms: int) -> None:
        self.context.append_history(
            QueryHistoryEntry.create(
                sql,
                self.connection_name,
                success=success,
                rows_affected=rows,
                execution_time_ms=elapsed_ms,
            )
        )

    def _elapsed_ms(self, start: float) -> int:
        return max(0, int((self._clock() - start) * 1000))
