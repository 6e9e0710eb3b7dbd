"""
Scheduler that keeps the engine version gauges up to date.
"""

import logging
import threading
import time
from typing import Optional

from catalog import CatalogBuilder
from clients import RdsApiClient
from config import CATALOG_REFRESH_CYCLE, ExporterConfig
from errors import ExporterError, describe_error
from fleet import FleetCollector
from metrics import VersionMetrics
from models import DeprecationCatalog, SnapshotReport
from snapshot import SnapshotOrchestrator

logger = logging.getLogger(__name__)


class VersionExporter:
    """Builds the catalog, serves /metrics and runs snapshot cycles."""

    def __init__(
        self,
        config: ExporterConfig,
        api: Optional[RdsApiClient] = None,
        metrics: Optional[VersionMetrics] = None,
    ):
        """
        Initialize the exporter.

        Args:
            config: Exporter configuration
            api: RDS API client; built from config if omitted
            metrics: Gauge pair; a fresh registry is used if omitted
        """
        self.config = config
        self.api = api or RdsApiClient(
            region=config.region,
            profile=config.profile,
            timeout_s=config.timeout,
            max_attempts=config.max_attempts,
        )
        self.metrics = metrics or VersionMetrics()

        self.catalog_builder = CatalogBuilder(self.api)
        self.orchestrator = SnapshotOrchestrator(
            FleetCollector(self.api),
            self.metrics,
            classification_policy=config.classification_policy,
        )

        self.catalog: Optional[DeprecationCatalog] = None
        self.cycles = 0
        self.failed_cycles = 0
        self._stop = threading.Event()
        self._server = None

    def build_catalog(self) -> DeprecationCatalog:
        """
        (Re)build the catalog. The previous catalog is dropped first.

        Raises:
            CatalogBuildError: If the RDS API could not be queried
        """
        self.catalog = None
        self.catalog = self.catalog_builder.build()
        return self.catalog

    def start(self, serve: bool = True) -> None:
        """
        Build the catalog and start the HTTP server.

        Raises:
            CatalogBuildError: Startup must not continue without a catalog
        """
        self.build_catalog()
        if serve:
            self._server = self.metrics.serve(
                self.config.server_port, self.config.listen_addr
            )

    def run_once(self) -> SnapshotReport:
        """
        Run one snapshot cycle, rebuilding the catalog first when configured.

        Raises:
            ExporterError: If the cycle failed
        """
        self.cycles += 1
        start = time.time()
        try:
            if self.catalog is None or self.config.catalog_refresh == CATALOG_REFRESH_CYCLE:
                # a failed rebuild must not leave the previous cycle's series exported
                self.metrics.reset()
                self.build_catalog()
            report = self.orchestrator.run_snapshot(self.catalog)
        except ExporterError:
            self.failed_cycles += 1
            raise

        logger.debug(f"Cycle {self.cycles} took {time.time() - start:.2f}s")
        return report

    def run_forever(self) -> None:
        """Run a cycle every interval until stop() is called."""
        logger.info(
            f"Polling RDS every {self.config.interval_seconds}s "
            f"(catalog refresh: {self.config.catalog_refresh}, "
            f"classification policy: {self.config.classification_policy})"
        )
        while not self._stop.wait(self.config.interval_seconds):
            try:
                self.run_once()
            except ExporterError as e:
                logger.error(f"Snapshot cycle {self.cycles} failed: {describe_error(e)}")

    def stop(self) -> None:
        self._stop.set()
        if self._server is not None:
            server = self._server[0] if isinstance(self._server, tuple) else self._server
            server.shutdown()
            self._server = None

