"""Core constants used across importer modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_BASE_STAGING_PATH = Path(".importer") / "staging"
DEFAULT_WORKER_COUNT = 4
DEFAULT_HTTP_TIMEOUT_SECONDS = 60
DOWNLOAD_CHUNK_SIZE = 1024 * 1024
MUTATION_STAGING_FILE_NAME = "data_mutations_extended.txt"
DEFAULT_SOURCE_URL_TEMPLATE = (
    "https://dcc.icgc.org/api/v1/download?fn=/current/Projects/{study_id}/"
    "simple_somatic_mutation.open.{study_id}.tsv.gz"
)
