"""ICGC simple somatic mutation transformer.

This module converts ICGC simple somatic mutation TSV files into
MAF-style staging rows, one row per mutation and sample.
"""

from __future__ import annotations

import csv
import gzip
from pathlib import Path
from typing import IO, Iterator, Mapping

from core.errors import TransformError
from core.logging_config import get_logger
from core.types import TransformSummary
from transforms.mutation_file_handler import MutationFileHandler

_LOGGER = get_logger(__name__)

REQUIRED_SOURCE_COLUMNS = (
    "icgc_mutation_id",
    "icgc_sample_id",
    "chromosome",
    "chromosome_start",
    "chromosome_end",
    "mutation_type",
    "reference_genome_allele",
    "mutated_to_allele",
)

_VARIANT_TYPES = {
    "single base substitution": "SNP",
    "insertion of <=200bp": "INS",
    "deletion of <=200bp": "DEL",
}


class SimpleSomaticFileTransformer:
    """Transformer bound to one study staging directory."""

    def __init__(self, file_handler: MutationFileHandler, staging_path: Path) -> None:
        self._file_handler = file_handler
        self.staging_path = staging_path

    def transform(self, source_file: Path) -> TransformSummary:
        """Transform a staged ICGC file into the mutation staging file.

        Args:
            source_file: Staged ``.tsv`` or ``.tsv.gz`` source file.

        Returns:
            Summary with the written staging file and row count.

        Raises:
            TransformError: If the source is unreadable or malformed.
        """
        try:
            with _open_text(source_file) as handle:
                reader = csv.DictReader(handle, delimiter="\t")
                _validate_header(reader.fieldnames, source_file)
                record_count = self._file_handler.write_rows(
                    self.staging_path, _iter_mutation_rows(reader)
                )
        except (OSError, EOFError, csv.Error) as error:
            raise TransformError(f"Failed to read source file {source_file}: {error}.") from error
        output_path = self._file_handler.staging_file(self.staging_path)
        _LOGGER.debug(
            "simple_somatic_transformed",
            source_file=str(source_file),
            output_path=str(output_path),
            record_count=record_count,
        )
        return TransformSummary(output_path=output_path, record_count=record_count)


def build_simple_somatic_transformer(staging_path: Path) -> SimpleSomaticFileTransformer:
    """Default transformer factory used by task resolution."""
    return SimpleSomaticFileTransformer(MutationFileHandler(), staging_path)


def _open_text(source_file: Path) -> IO[str]:
    if source_file.suffix.lower() == ".gz":
        return gzip.open(source_file, "rt", encoding="utf-8", newline="")
    return source_file.open("r", encoding="utf-8", newline="")


def _iter_mutation_rows(reader: csv.DictReader) -> Iterator[dict[str, str]]:
    """Yield one staging row per distinct mutation and sample.

    ICGC files repeat a mutation once per affected transcript;
    only the first consequence row is kept.
    """
    seen_keys: set[tuple[str, str]] = set()
    for line_number, source_row in enumerate(reader, 2):
        row_key = (source_row["icgc_mutation_id"], source_row["icgc_sample_id"])
        if row_key in seen_keys:
            continue
        seen_keys.add(row_key)
        yield _build_staging_row(source_row, line_number)


def _validate_header(fieldnames: object, source_file: Path) -> None:
    columns = set(fieldnames or [])
    missing = [name for name in REQUIRED_SOURCE_COLUMNS if name not in columns]
    if missing:
        raise TransformError(
            f"Source file {source_file} is missing required columns: {missing}. "
            "Provide an ICGC simple somatic mutation file."
        )


def _build_staging_row(source_row: Mapping[str, str], line_number: int) -> dict[str, str]:
    reference_allele = source_row["reference_genome_allele"] or ""
    tumor_allele = source_row["mutated_to_allele"] or ""
    return {
        "Hugo_Symbol": source_row.get("gene_affected") or "Unknown",
        "Chromosome": source_row["chromosome"],
        "Start_Position": _require_position(source_row, "chromosome_start", line_number),
        "End_Position": _require_position(source_row, "chromosome_end", line_number),
        "Strand": _strand(source_row.get("chromosome_strand")),
        "Variant_Type": resolve_variant_type(
            source_row["mutation_type"] or "", reference_allele, tumor_allele
        ),
        "Reference_Allele": reference_allele,
        "Tumor_Seq_Allele1": source_row.get("mutated_from_allele") or reference_allele,
        "Tumor_Seq_Allele2": tumor_allele,
        "Tumor_Sample_Barcode": source_row["icgc_sample_id"],
        "Matched_Norm_Sample_Barcode": source_row.get("matched_icgc_sample_id") or "",
        "dbSNP_RS": "",
    }


def resolve_variant_type(mutation_type: str, reference_allele: str, tumor_allele: str) -> str:
    """Map an ICGC mutation type onto a MAF variant type.

    Args:
        mutation_type: ICGC ``mutation_type`` value.
        reference_allele: Reference genome allele.
        tumor_allele: Mutated allele.

    Returns:
        One of SNP, DNP, TNP, ONP, INS or DEL.
    """
    variant_type = _VARIANT_TYPES.get(mutation_type.strip().lower())
    if variant_type:
        return variant_type
    allele_length = max(len(reference_allele), len(tumor_allele))
    if allele_length == 2:
        return "DNP"
    if allele_length == 3:
        return "TNP"
    return "ONP"


def _require_position(source_row: Mapping[str, str], column: str, line_number: int) -> str:
    value = (source_row.get(column) or "").strip()
    if not value.isdigit():
        raise TransformError(
            f"Invalid {column} at line {line_number}: expected integer, got '{value}'."
        )
    return value


def _strand(raw_strand: str | None) -> str:
    if raw_strand and raw_strand.strip() == "-1":
        return "-"
    return "+"
