"""Importer CLI entry points.
This module exposes commands for running study imports and inspecting
the study registry. It maps argparse commands onto orchestrator calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import ImporterConfig
from core.errors import ImporterError
from ingest.orchestrator import MutationImportOrchestrator
from ingest.task_resolver import TaskResolver
from registry.study_registry import InMemoryMetadataProvider, load_study_registry
from transforms.simple_somatic import build_simple_somatic_transformer


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="importer", description="Simple somatic mutation importer"
    )
    parser.add_argument(
        "--registry", help="Study registry YAML file (overrides IMPORTER_REGISTRY_PATH)"
    )
    parser.add_argument(
        "--staging-root", help="Override IMPORTER_BASE_STAGING_PATH for this command"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_run_command(subparsers)
    _add_studies_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the importer CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
        provider = _load_provider(config)
        if args.command == "run":
            return _run_import_command(provider, config, args)
        if args.command == "studies":
            return _run_studies_command(provider, config)
    except ImporterError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(args: argparse.Namespace) -> ImporterConfig:
    """Build runtime config with CLI overrides applied.

    Args:
        args: Parsed CLI args.

    Returns:
        Validated config.
    """
    config = ImporterConfig.from_env()
    if args.staging_root:
        config = replace(config, base_staging_path=Path(args.staging_root).expanduser().resolve())
    if args.registry:
        config = replace(config, registry_path=Path(args.registry).expanduser().resolve())
    if getattr(args, "workers", None) is not None:
        config = replace(config, worker_count=args.workers)
    return config


def _load_provider(config: ImporterConfig) -> InMemoryMetadataProvider:
    if config.registry_path is None:
        raise ImporterError(
            "No study registry configured. Pass --registry or set IMPORTER_REGISTRY_PATH."
        )
    return load_study_registry(config.registry_path)


def _run_import_command(
    provider: InMemoryMetadataProvider,
    config: ImporterConfig,
    args: argparse.Namespace,
) -> int:
    """Handle run command.

    Args:
        provider: Registry-backed metadata provider.
        config: Runtime config.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    orchestrator = MutationImportOrchestrator.from_config(provider, config)
    outcome = orchestrator.run_outcome()
    for message in outcome.successes:
        print(message)
    if outcome.failure_count:
        print(
            f"{outcome.failure_count} of {outcome.total_count} studies failed; see log for details",
            file=sys.stderr,
        )
    if args.strict and outcome.failure_count:
        return 1
    return 0


def _run_studies_command(provider: InMemoryMetadataProvider, config: ImporterConfig) -> int:
    """Handle studies command."""
    resolver = TaskResolver(provider, config.base_staging_path, build_simple_somatic_transformer)
    for task in resolver.resolve():
        print(f"{task.study_id}\t{task.staging_path}\t{task.source_location}")
    return 0


def _add_run_command(subparsers: Any) -> None:
    """Register run subcommand."""
    parser = subparsers.add_parser("run", help="Import mutations for all registered studies")
    parser.add_argument("--workers", type=int, help="Concurrent study imports")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any study fails",
    )


def _add_studies_command(subparsers: Any) -> None:
    """Register studies subcommand."""
    subparsers.add_parser("studies", help="List registered studies and staging paths")
