"""Importer exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Resolution failures abort a run; task failures stay local to one study.
"""

from __future__ import annotations


class ImporterError(Exception):
    """Base exception for all importer failures."""


class ImporterConfigError(ImporterError):
    """Raised for invalid runtime configuration."""


class ImporterDependencyError(ImporterError):
    """Raised when an optional runtime dependency is missing."""


class RegistryError(ImporterError):
    """Raised when a study registry file cannot be loaded."""


class ResolutionError(ImporterError):
    """Raised when a registered study cannot be turned into an import task."""


class OrchestrationError(ImporterError):
    """Raised when an import run cannot be started."""


class TaskFailure(ImporterError):
    """Raised for a failure confined to a single study import."""


class FetchError(TaskFailure):
    """Raised when a study source file cannot be fetched or staged."""


class TransformError(TaskFailure):
    """Raised when a staged study file cannot be transformed."""
