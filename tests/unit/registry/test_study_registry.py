"""Unit tests for study registry providers."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import RegistryError
from core.types import StudyMetadata
from registry.study_registry import InMemoryMetadataProvider, load_study_registry


def _write_registry(tmp_path: Path, text: str) -> Path:
    registry_path = tmp_path / "registry.yaml"
    registry_path.write_text(text, encoding="utf-8")
    return registry_path


def test_load_study_registry_builds_urls_from_template(tmp_path: Path) -> None:
    """Studies without an explicit location should use the URL template."""
    registry_path = _write_registry(
        tmp_path,
        "source_url_template: https://example.org/{study_id}.tsv.gz\n"
        "studies:\n"
        "  - study_id: BRCA-UK\n"
        "    download_directory: icgc/brca_uk\n",
    )

    provider = load_study_registry(registry_path)

    assert provider.list_study_locations() == {"BRCA-UK": "https://example.org/BRCA-UK.tsv.gz"}


def test_load_study_registry_keeps_explicit_location(tmp_path: Path) -> None:
    """An explicit source_location should override the template."""
    registry_path = _write_registry(
        tmp_path,
        "studies:\n"
        "  - study_id: LIRI-JP\n"
        "    download_directory: icgc/liri_jp\n"
        "    source_location: s3://bucket/liri.tsv.gz\n",
    )

    provider = load_study_registry(registry_path)

    assert provider.list_study_locations()["LIRI-JP"] == "s3://bucket/liri.tsv.gz"
    assert provider.get_metadata("LIRI-JP") == StudyMetadata("LIRI-JP", "icgc/liri_jp")


def test_load_study_registry_default_template_targets_icgc(tmp_path: Path) -> None:
    """Without a template the ICGC download URL should be used."""
    registry_path = _write_registry(
        tmp_path,
        "studies:\n  - study_id: PACA-CA\n    download_directory: paca\n",
    )

    location = load_study_registry(registry_path).list_study_locations()["PACA-CA"]

    assert "simple_somatic_mutation.open.PACA-CA.tsv.gz" in location


def test_load_study_registry_rejects_duplicate_ids(tmp_path: Path) -> None:
    """Duplicate study ids should fail registry loading."""
    registry_path = _write_registry(
        tmp_path,
        "studies:\n"
        "  - {study_id: A, download_directory: a}\n"
        "  - {study_id: A, download_directory: b}\n",
    )

    with pytest.raises(RegistryError):
        load_study_registry(registry_path)


def test_load_study_registry_rejects_missing_directory(tmp_path: Path) -> None:
    """Every study needs a download directory."""
    registry_path = _write_registry(tmp_path, "studies:\n  - {study_id: A}\n")

    with pytest.raises(RegistryError):
        load_study_registry(registry_path)


def test_load_study_registry_raises_for_missing_file(tmp_path: Path) -> None:
    """A missing registry file should raise RegistryError."""
    with pytest.raises(RegistryError):
        load_study_registry(tmp_path / "absent.yaml")


def test_in_memory_provider_returns_none_for_unknown_study() -> None:
    """Unregistered studies should have no metadata."""
    provider = InMemoryMetadataProvider({"A": "a.tsv"}, {})

    assert provider.get_metadata("A") is None


@pytest.mark.parametrize(
    "template",
    [
        "https://h/{study_id}/{release}.tsv",
        "https://h/{study_id}/{0}.tsv",
        "https://h/{study_id.upper}.tsv",
        "https://h/{study_id.tsv",
        "https://h/static.tsv",
    ],
)
def test_load_study_registry_rejects_unusable_url_template(tmp_path: Path, template: str) -> None:
    """Templates with unknown or broken placeholders should raise RegistryError."""
    registry_path = _write_registry(
        tmp_path,
        f"source_url_template: '{template}'\n"
        "studies:\n  - {study_id: A, download_directory: a}\n",
    )

    with pytest.raises(RegistryError, match="source_url_template"):
        load_study_registry(registry_path)
