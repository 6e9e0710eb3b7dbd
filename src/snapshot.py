"""
One collect-classify-publish pass over the RDS fleet.
"""

import logging
from typing import List

from classifier import classify
from errors import (
    ClassificationError,
    CollectionError,
    MalformedRecordError,
    SnapshotError,
    SourceQueryError,
)
from fleet import FleetCollector
from metrics import VersionMetrics
from models import DeprecationCatalog, ResourceInfo, SnapshotReport

logger = logging.getLogger(__name__)

POLICY_SKIP = "skip"
POLICY_FAIL_FAST = "fail_fast"
CLASSIFICATION_POLICIES = (POLICY_SKIP, POLICY_FAIL_FAST)


class SnapshotOrchestrator:
    """Resets the gauges and republishes the current fleet's status."""

    def __init__(
        self,
        collector: FleetCollector,
        metrics: VersionMetrics,
        classification_policy: str = POLICY_SKIP,
    ):
        """
        Initialize the orchestrator.

        Args:
            collector: Source of cluster and instance infos
            metrics: Gauge pair to repopulate each cycle
            classification_policy: "skip" publishes every resource it can and
                reports failures at the end; "fail_fast" stops at the first
                failure, leaving later resources unpublished
        """
        if classification_policy not in CLASSIFICATION_POLICIES:
            raise ValueError(
                f"Unknown classification policy: {classification_policy}"
            )
        self.collector = collector
        self.metrics = metrics
        self.classification_policy = classification_policy

    def run_snapshot(self, catalog: DeprecationCatalog) -> SnapshotReport:
        """
        Run one cycle. Must not be called concurrently with itself.

        Returns:
            SnapshotReport for a cycle with no failures

        Raises:
            CollectionError: If clusters or instances could not be read
            SnapshotError: If any resource could not be classified
        """
        report = SnapshotReport()
        self.metrics.reset()

        try:
            clusters = self.collector.collect_clusters()
        except (SourceQueryError, MalformedRecordError) as e:
            raise CollectionError("Cluster") from e
        report.clusters = len(clusters)

        try:
            instances = self.collector.collect_instances()
        except (SourceQueryError, MalformedRecordError) as e:
            raise CollectionError("Instance") from e
        report.instances = len(instances)

        resources: List[ResourceInfo] = clusters + instances
        errors: List[ClassificationError] = []

        for index, resource in enumerate(resources):
            try:
                deprecated = classify(resource, catalog)
            except ClassificationError as e:
                if self.classification_policy == POLICY_FAIL_FAST:
                    report.unprocessed = len(resources) - index
                    raise SnapshotError(
                        f"failed to export metric for {resource.resource_identifier}: {e}",
                        report=report,
                        errors=[e],
                    ) from e

                logger.warning(
                    f"Skipping {resource.resource_identifier} "
                    f"({resource.engine} {resource.engine_version}): {e}"
                )
                errors.append(e)
                report.skipped += 1
                continue

            self.metrics.publish(resource, deprecated)
            report.published += 1
            if deprecated:
                report.deprecated += 1
            else:
                report.available += 1

        if errors:
            raise SnapshotError(
                f"{len(errors)} of {len(resources)} resource(s) could not be classified",
                report=report,
                errors=errors,
            ) from errors[0]

        logger.info(
            f"Snapshot complete: {report.published} published "
            f"({report.deprecated} deprecated, {report.available} available) "
            f"from {report.clusters} cluster(s) and {report.instances} instance(s)"
        )
        return report
