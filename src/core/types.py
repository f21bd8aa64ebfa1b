"""Shared typed models.

This module defines immutable data models used by the registry,
resolver, worker pool and aggregator to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Protocol


@dataclass(frozen=True)
class StudyMetadata:
    """Registry metadata for one study.

    Attributes:
        study_id: Registry identifier, e.g. ``BRCA-UK``.
        download_directory: Directory name used under the staging root.
    """

    study_id: str
    download_directory: str


class Transformer(Protocol):
    """Rewrites a fetched source file into the staging format."""

    staging_path: Path

    def transform(self, source_file: Path) -> "TransformSummary":
        ...


TransformerFactory = Callable[[Path], Transformer]


class MetadataProvider(Protocol):
    """Read-only source of registered studies."""

    def list_study_locations(self) -> Mapping[str, str]:
        ...

    def get_metadata(self, study_id: str) -> StudyMetadata | None:
        ...


@dataclass(frozen=True)
class TransformSummary:
    """Outcome of a single file transformation.

    Attributes:
        output_path: Staging file written by the transformer.
        record_count: Number of data rows written.
    """

    output_path: Path
    record_count: int


@dataclass(frozen=True)
class ImportTask:
    """One unit of import work for a single study.

    Attributes:
        study_id: Study the task imports.
        staging_path: Directory holding the study's in-flight files.
        source_location: Local path or URI of the source file.
        transformer: Transformer bound to ``staging_path``.
    """

    study_id: str
    staging_path: Path
    source_location: str
    transformer: Transformer


@dataclass(frozen=True)
class TaskResult:
    """Terminal disposition of one import task.

    Attributes:
        study_id: Study the task imported.
        message: Success message or failure description.
        succeeded: Whether fetch, stage and transform all completed.
        completion_index: Pool-wide sequence number assigned on settle.
    """

    study_id: str
    message: str
    succeeded: bool
    completion_index: int = -1


@dataclass(frozen=True)
class AggregatedOutcome:
    """Run-level result combining every settled task.

    Attributes:
        successes: Success messages in completion order.
        failures: Failed task results in completion order.
    """

    successes: tuple[str, ...]
    failures: tuple[TaskResult, ...]

    @property
    def failure_count(self) -> int:
        """Number of tasks that failed."""
        return len(self.failures)

    @property
    def total_count(self) -> int:
        """Number of tasks that settled."""
        return len(self.successes) + len(self.failures)
