"""Unit tests for the mutation staging file writer."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from core.errors import TransformError
from transforms.mutation_file_handler import MUTATION_COLUMNS, MutationFileHandler


def test_write_rows_creates_staging_directory(tmp_path: Path) -> None:
    """Writer should create the staging directory and a header line."""
    handler = MutationFileHandler()
    staging_path = tmp_path / "study"

    count = handler.write_rows(staging_path, [])

    lines = handler.staging_file(staging_path).read_text(encoding="utf-8").splitlines()
    assert count == 0 and lines == ["\t".join(MUTATION_COLUMNS)]


def test_write_rows_replaces_previous_file(tmp_path: Path) -> None:
    """A second write should replace earlier staging content."""
    handler = MutationFileHandler(file_name="mutations.txt")
    handler.write_rows(tmp_path, [{"Hugo_Symbol": "TP53"}, {"Hugo_Symbol": "KRAS"}])

    count = handler.write_rows(tmp_path, [{"Hugo_Symbol": "EGFR"}])

    content = (tmp_path / "mutations.txt").read_text(encoding="utf-8")
    assert count == 1 and "EGFR" in content and "TP53" not in content


def test_write_rows_leaves_no_file_when_rows_fail(tmp_path: Path) -> None:
    """A failure mid-stream should leave neither a staging nor a partial file."""
    handler = MutationFileHandler()

    def _rows() -> Iterator[dict[str, str]]:
        yield {"Hugo_Symbol": "TP53"}
        raise TransformError("bad row")

    with pytest.raises(TransformError):
        handler.write_rows(tmp_path, _rows())

    assert list(tmp_path.iterdir()) == []


def test_write_rows_keeps_previous_file_when_rows_fail(tmp_path: Path) -> None:
    """A failed rewrite should not clobber the last complete staging file."""
    handler = MutationFileHandler()
    handler.write_rows(tmp_path, [{"Hugo_Symbol": "KRAS"}])

    def _rows() -> Iterator[dict[str, str]]:
        raise TransformError("bad row")
        yield {}

    with pytest.raises(TransformError):
        handler.write_rows(tmp_path, _rows())

    assert "KRAS" in handler.staging_file(tmp_path).read_text(encoding="utf-8")
    assert [path.name for path in tmp_path.iterdir()] == ["data_mutations_extended.txt"]
