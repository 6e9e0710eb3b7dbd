"""
RDS engine version deprecation exporter.
"""

from catalog import CatalogBuilder
from classifier import classify
from clients import RdsApiClient
from config import ExporterConfig
from exporter import VersionExporter
from fleet import FleetCollector
from log_utils import setup_logging
from metrics import VersionMetrics
from models import EngineVersionKey, ResourceInfo, SnapshotReport
from paginator import paginate
from snapshot import SnapshotOrchestrator

__all__ = [
    "CatalogBuilder",
    "classify",
    "RdsApiClient",
    "ExporterConfig",
    "VersionExporter",
    "FleetCollector",
    "setup_logging",
    "VersionMetrics",
    "EngineVersionKey",
    "ResourceInfo",
    "SnapshotReport",
    "paginate",
    "SnapshotOrchestrator",
]
