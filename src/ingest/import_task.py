"""Single-study import execution.

This module runs the fetch, stage and transform steps for one
import task and reports the success message.
"""

from __future__ import annotations

from core.logging_config import get_logger
from core.types import ImportTask
from ingest.source_fetcher import SourceFetcher

_LOGGER = get_logger(__name__)


def execute_import_task(task: ImportTask, fetcher: SourceFetcher) -> str:
    """Fetch, stage and transform one study source file.

    Args:
        task: Import task to execute.
        fetcher: Callable staging ``task.source_location`` into ``task.staging_path``.

    Returns:
        Success message naming the study and the staged output.

    Raises:
        TaskFailure: If fetching or transforming fails.
    """
    _LOGGER.debug(
        "study_import_started",
        study_id=task.study_id,
        source_location=task.source_location,
        staging_path=str(task.staging_path),
    )
    staged_file = fetcher(task.source_location, task.staging_path)
    summary = task.transformer.transform(staged_file)
    return (
        f"{task.study_id}: staged {summary.record_count} mutations to {summary.output_path}"
    )
