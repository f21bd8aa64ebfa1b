"""Run-level aggregation of import task results.

This module waits for every submitted task to settle and then
combines their results in a single pass.
"""

from __future__ import annotations

from concurrent.futures import CancelledError, Future, wait
from typing import Iterable

from core.logging_config import get_logger
from core.types import AggregatedOutcome, TaskResult

_LOGGER = get_logger(__name__)
_UNKNOWN_STUDY_ID = "unknown"


class ResultAggregator:
    """Combines settled task results into an aggregated outcome."""

    def await_all(self, handles: Iterable[Future[TaskResult]]) -> AggregatedOutcome:
        """Wait for all handles, then aggregate their results once.

        Successes are ordered by completion. Failures are logged and
        kept out of the success list. A handle passed more than once
        contributes a single result.

        Args:
            handles: Futures returned by ``WorkerPool.submit``.

        Returns:
            Aggregated outcome across every distinct handle.
        """
        unique_handles = _unique_handles(handles)
        wait(unique_handles)
        results = sorted(
            (_settled_result(handle) for handle in unique_handles),
            key=_completion_sort_key,
        )
        successes: list[str] = []
        failures: list[TaskResult] = []
        for result in results:
            if result.succeeded:
                _LOGGER.info(
                    "study_import_succeeded", study_id=result.study_id, message=result.message
                )
                successes.append(result.message)
            else:
                _LOGGER.error(
                    "study_import_failed", study_id=result.study_id, error=result.message
                )
                failures.append(result)
        _LOGGER.info(
            "import_run_aggregated",
            success_count=len(successes),
            failure_count=len(failures),
        )
        return AggregatedOutcome(successes=tuple(successes), failures=tuple(failures))


def _unique_handles(handles: Iterable[Future[TaskResult]]) -> list[Future[TaskResult]]:
    unique: list[Future[TaskResult]] = []
    seen_ids: set[int] = set()
    for handle in handles:
        if id(handle) in seen_ids:
            continue
        seen_ids.add(id(handle))
        unique.append(handle)
    return unique


def _settled_result(handle: Future[TaskResult]) -> TaskResult:
    """Read a settled handle, converting a raised error into a failure."""
    try:
        return handle.result()
    except CancelledError:
        return TaskResult(study_id=_UNKNOWN_STUDY_ID, message="task was cancelled", succeeded=False)
    except Exception as error:  # noqa: BLE001
        return TaskResult(
            study_id=_UNKNOWN_STUDY_ID,
            message=str(error) or type(error).__name__,
            succeeded=False,
        )


def _completion_sort_key(result: TaskResult) -> tuple[bool, int]:
    # Results without a pool-assigned index sort last.
    return (result.completion_index < 0, result.completion_index)
