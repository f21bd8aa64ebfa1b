"""Runtime configuration model for the importer.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_BASE_STAGING_PATH,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_WORKER_COUNT,
)
from core.errors import ImporterConfigError


@dataclass(frozen=True)
class ImporterConfig:
    """Validated runtime configuration.

    Attributes:
        base_staging_path: Root directory holding per-study staging folders.
        worker_count: Number of concurrent study import workers.
        registry_path: Optional YAML study registry location.
        http_timeout_seconds: Timeout applied to HTTP source downloads.
        s3_region: Optional default AWS region for S3 sources.
        s3_profile: Optional AWS profile for boto3 session initialization.
    """

    base_staging_path: Path
    worker_count: int = DEFAULT_WORKER_COUNT
    registry_path: Path | None = None
    http_timeout_seconds: int = DEFAULT_HTTP_TIMEOUT_SECONDS
    s3_region: str | None = None
    s3_profile: str | None = None

    def __post_init__(self) -> None:
        _require_positive("worker_count", self.worker_count)
        _require_positive("http_timeout_seconds", self.http_timeout_seconds)

    @classmethod
    def from_env(cls) -> "ImporterConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ImporterConfigError: If environment values are invalid.
        """
        staging_value = os.getenv("IMPORTER_BASE_STAGING_PATH", str(DEFAULT_BASE_STAGING_PATH))
        registry_value = os.getenv("IMPORTER_REGISTRY_PATH")
        worker_count = _parse_int_env("IMPORTER_ETL_THREADS", DEFAULT_WORKER_COUNT)
        http_timeout = _parse_int_env(
            "IMPORTER_HTTP_TIMEOUT_SECONDS", DEFAULT_HTTP_TIMEOUT_SECONDS
        )
        return cls(
            base_staging_path=Path(staging_value).expanduser().resolve(),
            worker_count=worker_count,
            registry_path=Path(registry_value).expanduser().resolve() if registry_value else None,
            http_timeout_seconds=http_timeout,
            s3_region=os.getenv("IMPORTER_S3_REGION"),
            s3_profile=os.getenv("IMPORTER_S3_PROFILE"),
        )


def _parse_int_env(name: str, default: int) -> int:
    """Parse an integer environment value.

    Args:
        name: Environment variable name.
        default: Value used when the variable is unset.

    Returns:
        Parsed integer.

    Raises:
        ImporterConfigError: If value cannot be parsed into int.
    """
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError as error:
        raise ImporterConfigError(
            f"Invalid {name} value: expected integer, got '{raw_value}'. "
            f"Set {name} to a numeric value."
        ) from error


def _require_positive(field_name: str, value: int) -> None:
    """Reject zero or negative integer settings."""
    if value < 1:
        raise ImporterConfigError(
            f"Invalid {field_name}: expected a positive integer, got {value}. "
            f"Set {field_name} to 1 or more."
        )
