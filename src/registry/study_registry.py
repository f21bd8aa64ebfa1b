"""Study registry metadata providers.

This module loads registered studies from a YAML registry file or an
in-memory mapping and serves their source locations and metadata.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, cast

from core.constants import DEFAULT_SOURCE_URL_TEMPLATE
from core.errors import ImporterDependencyError, RegistryError
from core.types import StudyMetadata

_STUDY_KEYS = {"study_id", "download_directory", "source_location"}


@dataclass(frozen=True)
class RegisteredStudy:
    """Registry entry for one study.

    Attributes:
        metadata: Study metadata.
        source_location: Resolved source file location.
    """

    metadata: StudyMetadata
    source_location: str


class InMemoryMetadataProvider:
    """Metadata provider backed by explicit mappings.

    Locations and metadata are held separately so a caller can
    register a location without metadata.
    """

    def __init__(
        self,
        locations: Mapping[str, str],
        metadata: Mapping[str, StudyMetadata],
    ) -> None:
        self._locations = dict(locations)
        self._metadata = dict(metadata)

    @classmethod
    def from_studies(cls, studies: list[RegisteredStudy]) -> "InMemoryMetadataProvider":
        """Build a provider from complete registry entries."""
        locations = {study.metadata.study_id: study.source_location for study in studies}
        metadata = {study.metadata.study_id: study.metadata for study in studies}
        return cls(locations, metadata)

    def list_study_locations(self) -> Mapping[str, str]:
        """Return source locations keyed by study id."""
        return dict(self._locations)

    def get_metadata(self, study_id: str) -> StudyMetadata | None:
        """Return metadata for a study, or None when unregistered."""
        return self._metadata.get(study_id)


def load_study_registry(registry_path: str | Path) -> InMemoryMetadataProvider:
    """Load a YAML study registry into a metadata provider.

    The registry format is::

        source_url_template: https://host/{study_id}.tsv.gz
        studies:
          - study_id: BRCA-UK
            download_directory: icgc/brca_uk
          - study_id: LIRI-JP
            download_directory: icgc/liri_jp
            source_location: s3://bucket/liri.tsv.gz

    Args:
        registry_path: Path to the YAML registry file.

    Returns:
        Provider serving every registered study.

    Raises:
        RegistryError: If the file is missing or malformed.
        ImporterDependencyError: If PyYAML is not installed.
    """
    registry_file = Path(registry_path).expanduser().resolve()
    payload = _load_yaml_payload(registry_file)
    root_mapping = _expect_mapping(payload, f"registry root in {registry_file}")
    url_template = _validate_url_template(
        root_mapping.get("source_url_template", DEFAULT_SOURCE_URL_TEMPLATE), registry_file
    )
    raw_studies = root_mapping.get("studies")
    if not isinstance(raw_studies, list) or not raw_studies:
        raise RegistryError(
            f"Registry at {registry_file} has no studies. Add a non-empty 'studies' list."
        )
    studies = [
        _parse_study(_expect_mapping(item, f"study #{index}"), url_template, index)
        for index, item in enumerate(raw_studies, 1)
    ]
    _reject_duplicate_ids(studies, registry_file)
    return InMemoryMetadataProvider.from_studies(studies)


def _load_yaml_payload(registry_file: Path) -> object:
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as error:  # pragma: no cover - dependency failure
        raise ImporterDependencyError(
            "YAML registry support requires PyYAML. Install with 'pip install pyyaml'."
        ) from error
    if not registry_file.exists():
        raise RegistryError(
            f"Study registry does not exist at {registry_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(registry_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise RegistryError(
            f"Failed to read study registry at {registry_file}: {error}. "
            "Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise RegistryError(
            f"Failed to parse study registry at {registry_file}: {error}. "
            "Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise RegistryError(f"Study registry at {registry_file} is empty. Define 'studies'.")
    return payload


def _validate_url_template(url_template: object, registry_file: Path) -> str:
    """Require a template whose only placeholder is '{study_id}'."""
    if not isinstance(url_template, str):
        raise RegistryError(
            f"Invalid source_url_template in {registry_file}: expected a string, "
            f"got {type(url_template).__name__}."
        )
    try:
        field_names = {
            field_name
            for _, field_name, _, _ in string.Formatter().parse(url_template)
            if field_name is not None
        }
    except ValueError as error:
        raise RegistryError(
            f"Invalid source_url_template in {registry_file}: {error}. "
            "Escape literal braces as '{{' and '}}'."
        ) from error
    if field_names != {"study_id"}:
        raise RegistryError(
            f"Invalid source_url_template in {registry_file}: expected only the "
            f"'{{study_id}}' placeholder, found {sorted(field_names)}."
        )
    return url_template


def _expect_mapping(value: object, context: str) -> dict[str, object]:
    if not isinstance(value, dict):
        raise RegistryError(f"Expected a mapping for {context}, got {type(value).__name__}.")
    return cast(dict[str, object], value)


def _parse_study(item: dict[str, object], url_template: str, index: int) -> RegisteredStudy:
    unknown_keys = set(item) - _STUDY_KEYS
    if unknown_keys:
        raise RegistryError(
            f"Unsupported keys in study #{index}: {sorted(unknown_keys)}. "
            f"Allowed keys: {sorted(_STUDY_KEYS)}."
        )
    study_id = _require_text(item, "study_id", index)
    download_directory = _require_text(item, "download_directory", index)
    source_location = item.get("source_location")
    if source_location is None:
        source_location = url_template.format(study_id=study_id)
    elif not isinstance(source_location, str) or not source_location.strip():
        raise RegistryError(f"Study #{index} has an empty source_location.")
    return RegisteredStudy(
        metadata=StudyMetadata(study_id=study_id, download_directory=download_directory),
        source_location=source_location,
    )


def _require_text(item: dict[str, object], key: str, index: int) -> str:
    value = item.get(key)
    if not isinstance(value, str) or not value.strip():
        raise RegistryError(f"Study #{index} is missing required string field '{key}'.")
    return value.strip()


def _reject_duplicate_ids(studies: list[RegisteredStudy], registry_file: Path) -> None:
    seen: set[str] = set()
    for study in studies:
        study_id = study.metadata.study_id
        if study_id in seen:
            raise RegistryError(f"Duplicate study_id '{study_id}' in {registry_file}.")
        seen.add(study_id)
