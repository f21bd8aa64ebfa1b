"""Source file fetching for study imports.

This module stages a study source file from a local path, an S3
object or an HTTP(S) URL into the study's staging directory.
"""

from __future__ import annotations

import shutil
from pathlib import Path, PurePosixPath
from typing import Any, Callable
from urllib.parse import parse_qs, unquote, urlparse

import requests

from core.config import ImporterConfig
from core.constants import DOWNLOAD_CHUNK_SIZE
from core.errors import FetchError, ImporterDependencyError
from core.s3_uri import parse_s3_uri

SourceFetcher = Callable[[str, Path], Path]


def build_source_fetcher(config: ImporterConfig) -> SourceFetcher:
    """Bind runtime configuration into a two-argument fetcher.

    Args:
        config: Runtime configuration for HTTP and S3 sessions.

    Returns:
        Callable accepting a source location and staging directory.
    """

    def _fetch(source_location: str, staging_path: Path) -> Path:
        return fetch_source(source_location, staging_path, config)

    return _fetch


def fetch_source(source_location: str, staging_path: Path, config: ImporterConfig) -> Path:
    """Stage a source file into a staging directory.

    Args:
        source_location: Local path, ``file://``, ``s3://`` or ``http(s)://`` location.
        staging_path: Destination directory for the staged file.
        config: Runtime configuration.

    Returns:
        Path to the staged file.

    Raises:
        FetchError: If the source cannot be read or written.
    """
    staging_path.mkdir(parents=True, exist_ok=True)
    destination = staging_path / staged_file_name(source_location)
    scheme = urlparse(source_location).scheme.lower()
    if scheme in ("http", "https"):
        _download_http(source_location, destination, config.http_timeout_seconds)
    elif scheme == "s3":
        _download_s3(source_location, destination, config)
    else:
        _copy_local(_local_source_path(source_location), destination)
    return destination


def staged_file_name(source_location: str) -> str:
    """Derive the staged file name from a source location.

    ICGC download URLs carry the real file path in an ``fn`` query
    parameter; it takes precedence over the URL path.
    """
    parsed = urlparse(source_location)
    if parsed.scheme.lower() in ("http", "https"):
        file_param = parse_qs(parsed.query).get("fn")
        candidate = file_param[0] if file_param else parsed.path
    elif parsed.scheme.lower() in ("s3", "file"):
        candidate = parsed.path
    else:
        candidate = source_location
    name = PurePosixPath(unquote(candidate).replace("\\", "/")).name
    if not name:
        raise FetchError(
            f"Cannot derive a file name from source '{source_location}'. "
            "Point the study at a file rather than a directory."
        )
    return name


def _local_source_path(source_location: str) -> Path:
    parsed = urlparse(source_location)
    if parsed.scheme.lower() == "file":
        return Path(unquote(parsed.path))
    return Path(source_location).expanduser()


def _copy_local(source_path: Path, destination: Path) -> None:
    if not source_path.is_file():
        raise FetchError(
            f"Failed to fetch source at {source_path}: file does not exist. "
            "Provide an existing source file."
        )
    if source_path.resolve() == destination.resolve():
        return
    try:
        shutil.copyfile(source_path, destination)
    except OSError as error:
        raise FetchError(f"Failed to stage {source_path} to {destination}: {error}.") from error


def _download_http(url: str, destination: Path, timeout_seconds: int) -> None:
    try:
        with requests.get(url, stream=True, timeout=timeout_seconds) as response:
            response.raise_for_status()
            with destination.open("wb") as handle:
                for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        handle.write(chunk)
    except requests.RequestException as error:
        raise FetchError(f"Failed to download {url}: {error}.") from error
    except OSError as error:
        raise FetchError(f"Failed to write {destination}: {error}.") from error


def _download_s3(source_uri: str, destination: Path, config: ImporterConfig) -> None:
    location = parse_s3_uri(source_uri)
    s3_client = _create_s3_client(config)
    try:
        s3_client.download_file(location.bucket, location.key, str(destination))
    except Exception as error:
        raise FetchError(f"Failed to download {source_uri}: {error}.") from error


def _create_s3_client(config: ImporterConfig) -> Any:
    """Create a boto3 S3 client.

    Args:
        config: Runtime config containing optional profile/region.

    Returns:
        Boto3 S3 client.

    Raises:
        ImporterDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise ImporterDependencyError(
            "S3 support requires boto3, but it is not installed. "
            "Install boto3 to import from s3:// sources."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")
