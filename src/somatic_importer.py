"""Public SDK surface for the mutation importer.

This module provides a stable import path for library users.
It re-exports the orchestrator, providers and typed models.
"""

from __future__ import annotations

from core.config import ImporterConfig
from core.errors import OrchestrationError, ResolutionError, TaskFailure
from core.types import AggregatedOutcome, ImportTask, StudyMetadata, TaskResult
from ingest.orchestrator import MutationImportOrchestrator, import_simple_somatic_mutations
from ingest.result_aggregator import ResultAggregator
from ingest.task_resolver import TaskResolver
from ingest.worker_pool import WorkerPool
from registry.study_registry import InMemoryMetadataProvider, load_study_registry

__all__ = [
    "AggregatedOutcome",
    "ImportTask",
    "ImporterConfig",
    "InMemoryMetadataProvider",
    "MutationImportOrchestrator",
    "OrchestrationError",
    "ResolutionError",
    "ResultAggregator",
    "StudyMetadata",
    "TaskFailure",
    "TaskResult",
    "TaskResolver",
    "WorkerPool",
    "import_simple_somatic_mutations",
    "load_study_registry",
]
