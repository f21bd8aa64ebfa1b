"""Unit tests for run-level result aggregation."""

from __future__ import annotations

from concurrent.futures import Future

from core.types import TaskResult
from ingest.result_aggregator import ResultAggregator


def _settled(result: TaskResult) -> Future[TaskResult]:
    handle: Future[TaskResult] = Future()
    handle.set_result(result)
    return handle


def _failed_handle(error: Exception) -> Future[TaskResult]:
    handle: Future[TaskResult] = Future()
    handle.set_exception(error)
    return handle


def test_await_all_orders_successes_by_completion() -> None:
    """Success messages should follow completion order, not submission order."""
    handles = [
        _settled(TaskResult("A", "A:done", True, completion_index=2)),
        _settled(TaskResult("B", "B:done", True, completion_index=0)),
        _settled(TaskResult("C", "C:done", True, completion_index=1)),
    ]

    outcome = ResultAggregator().await_all(handles)

    assert outcome.successes == ("B:done", "C:done", "A:done")


def test_await_all_excludes_and_logs_failures(captured_logs: list[dict[str, object]]) -> None:
    """Failures should be logged once each and kept out of the success list."""
    handles = [
        _settled(TaskResult("A", "A:done", True, completion_index=0)),
        _settled(TaskResult("B", "B:fetch error", False, completion_index=1)),
    ]

    outcome = ResultAggregator().await_all(handles)
    failure_logs = [entry for entry in captured_logs if entry["log_level"] == "error"]

    assert outcome.successes == ("A:done",)
    assert outcome.failure_count == 1
    assert len(failure_logs) == 1 and failure_logs[0]["error"] == "B:fetch error"


def test_await_all_counts_duplicate_handles_once() -> None:
    """Passing the same handle twice should not double-count its result."""
    handle = _settled(TaskResult("A", "A:done", True, completion_index=0))

    outcome = ResultAggregator().await_all([handle, handle])

    assert outcome.successes == ("A:done",) and outcome.total_count == 1


def test_await_all_is_idempotent_over_settled_handles() -> None:
    """Aggregating the same settled handle set twice should give equal outcomes."""
    handles = [
        _settled(TaskResult("A", "A:done", True, completion_index=1)),
        _settled(TaskResult("B", "B:boom", False, completion_index=0)),
        _settled(TaskResult("C", "C:done", True, completion_index=2)),
    ]
    aggregator = ResultAggregator()

    first = aggregator.await_all(handles)
    second = aggregator.await_all(handles)

    assert first == second


def test_await_all_records_raised_handles_as_failures() -> None:
    """A handle that raised instead of returning a result should count as a failure."""
    outcome = ResultAggregator().await_all([_failed_handle(RuntimeError("worker died"))])

    assert outcome.successes == ()
    assert outcome.failures[0].message == "worker died"


def test_await_all_handles_empty_input() -> None:
    """No handles should produce an empty outcome."""
    outcome = ResultAggregator().await_all([])

    assert outcome.total_count == 0
