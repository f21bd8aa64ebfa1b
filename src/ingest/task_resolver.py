"""Import task resolution.

This module turns registered studies into independent import tasks,
each bound to its own staging directory and transformer.
"""

from __future__ import annotations

from pathlib import Path

from core.errors import ResolutionError
from core.types import ImportTask, MetadataProvider, StudyMetadata, TransformerFactory


class TaskResolver:
    """Builds import tasks from a metadata provider."""

    def __init__(
        self,
        provider: MetadataProvider,
        base_staging_path: Path,
        transformer_factory: TransformerFactory,
    ) -> None:
        self._provider = provider
        self._base_staging_path = base_staging_path
        self._transformer_factory = transformer_factory

    def resolve(self) -> list[ImportTask]:
        """Resolve one import task per registered study.

        Returns:
            Import tasks ordered by study id.

        Raises:
            ResolutionError: If a study has a location but no metadata, or its
                staging directory escapes the base path or is shared with
                another study.
        """
        locations = self._provider.list_study_locations()
        tasks: list[ImportTask] = []
        owners: dict[Path, str] = {}
        for study_id in sorted(locations):
            metadata = self._lookup_metadata(study_id)
            staging_path = self._base_staging_path / metadata.download_directory
            self._claim_staging_path(study_id, staging_path, owners)
            tasks.append(
                ImportTask(
                    study_id=study_id,
                    staging_path=staging_path,
                    source_location=locations[study_id],
                    transformer=self._transformer_factory(staging_path),
                )
            )
        return tasks

    def _claim_staging_path(
        self,
        study_id: str,
        staging_path: Path,
        owners: dict[Path, str],
    ) -> None:
        base_path = self._base_staging_path.resolve()
        resolved_path = staging_path.resolve()
        if not resolved_path.is_relative_to(base_path):
            raise ResolutionError(
                f"Study '{study_id}' stages to {resolved_path}, outside the staging root "
                f"{base_path}. Use a relative download_directory without '..'."
            )
        owner = owners.get(resolved_path)
        if owner is not None:
            raise ResolutionError(
                f"Studies '{owner}' and '{study_id}' share the staging directory "
                f"{resolved_path}. Give each study its own download_directory."
            )
        owners[resolved_path] = study_id

    def _lookup_metadata(self, study_id: str) -> StudyMetadata:
        try:
            metadata = self._provider.get_metadata(study_id)
        except KeyError as error:
            raise _missing_metadata_error(study_id) from error
        if metadata is None:
            raise _missing_metadata_error(study_id)
        if not metadata.download_directory.strip():
            raise ResolutionError(
                f"Study '{study_id}' has an empty download directory. "
                "Set download_directory in the study registry."
            )
        return metadata


def _missing_metadata_error(study_id: str) -> ResolutionError:
    return ResolutionError(
        f"Study '{study_id}' has a source location but no metadata. "
        "Register metadata for the study or remove its location."
    )
