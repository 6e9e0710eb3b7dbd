"""
Data models for the RDS engine version exporter.
"""

from dataclasses import dataclass
from typing import Dict, NamedTuple

# engine -> version -> deprecated flag
DeprecationCatalog = Dict[str, Dict[str, bool]]


def has_text(value) -> bool:
    """True for a non-empty string field from an RDS record."""
    return isinstance(value, str) and bool(value)


class EngineVersionKey(NamedTuple):
    """Identity of a database engine release."""

    engine: str
    version: str


@dataclass(frozen=True)
class ResourceInfo:
    """One RDS cluster or instance at the moment of collection."""

    resource_identifier: str  # DBClusterIdentifier or DBInstanceIdentifier
    engine: str  # e.g. "mysql", "aurora-postgresql"
    engine_version: str  # e.g. "5.7.34"

    @property
    def key(self) -> EngineVersionKey:
        return EngineVersionKey(self.engine, self.engine_version)

    def labels(self) -> Dict[str, str]:
        """Prometheus label set for this resource."""
        return {
            "cluster_identifier": self.resource_identifier,
            "engine": self.engine,
            "engine_version": self.engine_version,
        }


@dataclass
class SnapshotReport:
    """Summary of one snapshot cycle."""

    clusters: int = 0
    instances: int = 0
    published: int = 0
    deprecated: int = 0
    available: int = 0
    skipped: int = 0
    unprocessed: int = 0

    @property
    def total(self) -> int:
        return self.clusters + self.instances
