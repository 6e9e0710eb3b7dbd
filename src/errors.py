"""
Exception hierarchy for the RDS engine version exporter.
"""

from typing import List, Optional


class ExporterError(RuntimeError):
    """Base class for all exporter errors."""


class ConfigError(ExporterError):
    """Invalid or missing configuration."""


class SourceQueryError(ExporterError):
    """The RDS API returned an error for a paged query."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


class MalformedRecordError(ExporterError):
    """A cluster or instance record is missing a required field."""

    def __init__(self, record_kind: str, missing_field: str, record: dict):
        super().__init__(
            f"{record_kind} record is missing required field {missing_field}: {record!r}"
        )
        self.record_kind = record_kind
        self.missing_field = missing_field


class CatalogBuildError(ExporterError):
    """One phase of the engine version catalog build failed."""

    def __init__(self, phase: str):
        super().__init__(
            f"error while querying rds engine version status (phase: {phase})"
        )
        self.phase = phase


class CollectionError(ExporterError):
    """Reading cluster or instance infos failed."""

    def __init__(self, resource_class: str):
        super().__init__(f"failed to read RDS {resource_class} infos")
        self.resource_class = resource_class


class ClassificationError(ExporterError):
    """A resource could not be resolved against the catalog."""


class UnknownEngineError(ClassificationError):
    def __init__(self, engine: str):
        super().__init__(f"unknown engine: {engine}")
        self.engine = engine


class UnknownVersionError(ClassificationError):
    def __init__(self, engine: str, version: str):
        super().__init__(f"unknown version: {version} (engine: {engine})")
        self.engine = engine
        self.version = version


class SnapshotError(ExporterError):
    """
    A snapshot cycle was aborted or finished with classification failures.

    Attributes:
        report: SnapshotReport describing what was published before the error
        errors: Classification errors collected during the cycle
    """

    def __init__(self, message: str, report=None, errors: Optional[List[Exception]] = None):
        super().__init__(message)
        self.report = report
        self.errors = list(errors or [])


def describe_error(error: Optional[BaseException]) -> str:
    """Render an exception and its chain of causes as one line."""
    parts = []
    while error is not None:
        parts.append(str(error))
        error = error.__cause__
    return "; ".join(parts)
