"""Multi-study mutation import orchestration.

This module wires task resolution, the worker pool and result
aggregation into a single import run.
"""

from __future__ import annotations

from pathlib import Path

from core.config import ImporterConfig
from core.constants import DEFAULT_WORKER_COUNT
from core.errors import OrchestrationError, ResolutionError
from core.logging_config import get_logger
from core.types import AggregatedOutcome, ImportTask, MetadataProvider, TransformerFactory
from ingest.import_task import execute_import_task
from ingest.result_aggregator import ResultAggregator
from ingest.source_fetcher import SourceFetcher, build_source_fetcher
from ingest.task_resolver import TaskResolver
from ingest.worker_pool import WorkerPool
from transforms.simple_somatic import build_simple_somatic_transformer

_LOGGER = get_logger(__name__)


class MutationImportOrchestrator:
    """Runs simple somatic mutation imports for every registered study."""

    def __init__(
        self,
        provider: MetadataProvider,
        base_staging_path: Path,
        worker_count: int = DEFAULT_WORKER_COUNT,
        transformer_factory: TransformerFactory = build_simple_somatic_transformer,
        fetcher: SourceFetcher | None = None,
        aggregator: ResultAggregator | None = None,
    ) -> None:
        self._resolver = TaskResolver(provider, base_staging_path, transformer_factory)
        self._worker_count = worker_count
        self._fetcher = fetcher or build_source_fetcher(
            ImporterConfig(base_staging_path=base_staging_path, worker_count=worker_count)
        )
        self._aggregator = aggregator or ResultAggregator()

    @classmethod
    def from_config(
        cls,
        provider: MetadataProvider,
        config: ImporterConfig,
        transformer_factory: TransformerFactory = build_simple_somatic_transformer,
    ) -> "MutationImportOrchestrator":
        """Build an orchestrator from runtime configuration."""
        return cls(
            provider=provider,
            base_staging_path=config.base_staging_path,
            worker_count=config.worker_count,
            transformer_factory=transformer_factory,
            fetcher=build_source_fetcher(config),
        )

    def run(self) -> list[str]:
        """Import every registered study and return success messages.

        Returns:
            Success messages in completion order. Failed studies are
            logged and omitted.

        Raises:
            OrchestrationError: If task resolution fails.
        """
        return list(self.run_outcome().successes)

    def run_outcome(self) -> AggregatedOutcome:
        """Import every registered study and return the full outcome.

        Raises:
            OrchestrationError: If task resolution fails.
        """
        try:
            tasks = self._resolver.resolve()
        except ResolutionError as error:
            _LOGGER.error("import_run_resolution_failed", error=str(error))
            raise OrchestrationError(f"Import run aborted: {error}") from error
        _LOGGER.info("import_run_started", task_count=len(tasks), worker_count=self._worker_count)
        with WorkerPool(self._run_task, self._worker_count) as pool:
            handles = [pool.submit(task) for task in tasks]
            outcome = self._aggregator.await_all(handles)
        _LOGGER.info(
            "import_run_completed",
            task_count=len(tasks),
            success_count=len(outcome.successes),
            failure_count=outcome.failure_count,
        )
        return outcome

    def _run_task(self, task: ImportTask) -> str:
        return execute_import_task(task, self._fetcher)


def import_simple_somatic_mutations(
    provider: MetadataProvider,
    config: ImporterConfig,
) -> list[str]:
    """Run a simple somatic mutation import for all registered studies.

    Args:
        provider: Source of registered study locations and metadata.
        config: Runtime configuration.

    Returns:
        Success messages for studies that imported cleanly.

    Raises:
        OrchestrationError: If task resolution fails.
    """
    return MutationImportOrchestrator.from_config(provider, config).run()
