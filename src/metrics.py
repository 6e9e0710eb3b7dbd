"""
Prometheus gauges publishing each resource's engine version status.
"""

import logging
from typing import Optional

from prometheus_client import CollectorRegistry, Gauge, start_http_server

from models import ResourceInfo

logger = logging.getLogger(__name__)

NAMESPACE = "aws_custom"
SUBSYSTEM = "rds"
LABELS = ("cluster_identifier", "engine", "engine_version")

KIND_AVAILABLE = "available"
KIND_DEPRECATED = "deprecated"


class VersionMetrics:
    """Available/deprecated gauge pair on a dedicated registry."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self.available = Gauge(
            "version_available",
            "Number of instances whose version is available",
            LABELS,
            namespace=NAMESPACE,
            subsystem=SUBSYSTEM,
            registry=self.registry,
        )
        self.deprecated = Gauge(
            "version_deprecated",
            "Number of instances whose Version is deprecated",
            LABELS,
            namespace=NAMESPACE,
            subsystem=SUBSYSTEM,
            registry=self.registry,
        )
        self._gauges = {KIND_AVAILABLE: self.available, KIND_DEPRECATED: self.deprecated}

    def reset(self) -> None:
        """Drop every labelled series from both gauges."""
        self.available.clear()
        self.deprecated.clear()

    def set_gauge(self, kind: str, resource: ResourceInfo, value: int) -> None:
        if kind not in self._gauges:
            raise ValueError(f"Unknown gauge kind: {kind}")
        self._gauges[kind].labels(**resource.labels()).set(value)

    def publish(self, resource: ResourceInfo, deprecated: bool) -> None:
        """Set exactly one of the pair to 1 for this resource."""
        self.set_gauge(KIND_DEPRECATED, resource, 1 if deprecated else 0)
        self.set_gauge(KIND_AVAILABLE, resource, 0 if deprecated else 1)

    def serve(self, port: int, addr: str = "0.0.0.0"):
        """Expose the registry on http://addr:port/metrics."""
        logger.info(f"Serving metrics on {addr}:{port}/metrics")
        return start_http_server(port, addr=addr, registry=self.registry)
