"""Bounded-concurrency worker pool for import tasks.

This module runs import tasks on a fixed number of threads and
resolves every submission to exactly one task result.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from types import TracebackType
from typing import Callable

from core.constants import DEFAULT_WORKER_COUNT
from core.errors import ImporterConfigError, OrchestrationError
from core.types import ImportTask, TaskResult

TaskRunner = Callable[[ImportTask], str]


class WorkerPool:
    """Fixed-size thread pool running import tasks.

    Submissions beyond ``worker_count`` wait in an unbounded FIFO queue.
    A task that raises settles as a failed result; it never breaks the
    pool or its sibling tasks.
    """

    def __init__(self, runner: TaskRunner, worker_count: int = DEFAULT_WORKER_COUNT) -> None:
        if worker_count < 1:
            raise ImporterConfigError(
                f"Invalid worker_count: expected a positive integer, got {worker_count}."
            )
        self._runner = runner
        self._worker_count = worker_count
        self._executor = ThreadPoolExecutor(
            max_workers=worker_count, thread_name_prefix="study-import"
        )
        self._lock = threading.Lock()
        self._next_completion_index = 0
        self._closed = False

    @property
    def worker_count(self) -> int:
        """Maximum number of concurrently running tasks."""
        return self._worker_count

    def submit(self, task: ImportTask) -> Future[TaskResult]:
        """Queue a task for execution.

        Args:
            task: Import task to run.

        Returns:
            Future resolved once with the task's result.

        Raises:
            OrchestrationError: If the pool has been shut down.
        """
        with self._lock:
            if self._closed:
                raise OrchestrationError(
                    f"Cannot submit study '{task.study_id}': worker pool is shut down."
                )
            return self._executor.submit(self._run_task, task)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting tasks and optionally wait for queued ones."""
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.shutdown(wait=True)

    def _run_task(self, task: ImportTask) -> TaskResult:
        try:
            message = self._runner(task)
            succeeded = True
        except Exception as error:  # noqa: BLE001
            message = str(error) or type(error).__name__
            succeeded = False
        return TaskResult(
            study_id=task.study_id,
            message=message,
            succeeded=succeeded,
            completion_index=self._claim_completion_index(),
        )

    def _claim_completion_index(self) -> int:
        with self._lock:
            index = self._next_completion_index
            self._next_completion_index += 1
            return index
