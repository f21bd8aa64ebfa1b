"""Mutation staging file writer.

This module owns the staging file layout for mutation records.
Transformers hand it normalized rows and never touch the file directly.
"""

from __future__ import annotations

import csv
import os
from pathlib import Path
from typing import Iterable, Mapping

from core.constants import MUTATION_STAGING_FILE_NAME
from core.errors import TransformError

PARTIAL_SUFFIX = ".partial"

MUTATION_COLUMNS = (
    "Hugo_Symbol",
    "Chromosome",
    "Start_Position",
    "End_Position",
    "Strand",
    "Variant_Type",
    "Reference_Allele",
    "Tumor_Seq_Allele1",
    "Tumor_Seq_Allele2",
    "Tumor_Sample_Barcode",
    "Matched_Norm_Sample_Barcode",
    "dbSNP_RS",
)


class MutationFileHandler:
    """Writes MAF-style mutation rows into a staging directory."""

    def __init__(self, file_name: str = MUTATION_STAGING_FILE_NAME) -> None:
        self._file_name = file_name

    def staging_file(self, staging_path: Path) -> Path:
        """Return the staging file location inside a staging directory."""
        return staging_path / self._file_name

    def write_rows(self, staging_path: Path, rows: Iterable[Mapping[str, str]]) -> int:
        """Write mutation rows, replacing any previous staging file.

        Rows go to a partial file that replaces the staging file only
        once every row is written.

        Args:
            staging_path: Study staging directory.
            rows: Rows keyed by ``MUTATION_COLUMNS``.

        Returns:
            Number of rows written.

        Raises:
            TransformError: If the staging file cannot be written.
        """
        output_path = self.staging_file(staging_path)
        partial_path = output_path.with_name(output_path.name + PARTIAL_SUFFIX)
        try:
            staging_path.mkdir(parents=True, exist_ok=True)
            handle = partial_path.open("w", encoding="utf-8", newline="")
        except OSError as error:
            raise TransformError(
                f"Failed to open mutation staging file {output_path}: {error}."
            ) from error
        row_count = 0
        try:
            with handle:
                writer = csv.DictWriter(
                    handle,
                    fieldnames=MUTATION_COLUMNS,
                    delimiter="\t",
                    lineterminator="\n",
                    extrasaction="ignore",
                )
                writer.writeheader()
                for row in rows:
                    writer.writerow(row)
                    row_count += 1
        except Exception:
            partial_path.unlink(missing_ok=True)
            raise
        os.replace(partial_path, output_path)
        return row_count
