"""
Collects the engine and version of every RDS cluster and instance.
"""

import logging
from typing import Callable, Dict, List, Optional

from clients import RdsApiClient, RecordPage
from models import ResourceInfo, has_text
from errors import MalformedRecordError
from paginator import paginate

logger = logging.getLogger(__name__)


def to_resource_info(record: Dict, record_kind: str, id_field: str) -> ResourceInfo:
    """
    Normalize a DBCluster or DBInstance record.

    Raises:
        MalformedRecordError: If identifier, engine or version is missing
    """
    values = {}
    for field in (id_field, "Engine", "EngineVersion"):
        value = record.get(field)
        if not has_text(value):
            raise MalformedRecordError(record_kind, field, record)
        values[field] = value

    return ResourceInfo(
        resource_identifier=values[id_field],
        engine=values["Engine"],
        engine_version=values["EngineVersion"],
    )


class FleetCollector:
    """Reads live engine assignments for the whole RDS fleet."""

    def __init__(self, api: RdsApiClient):
        self.api = api

    def _collect(
        self,
        fetch_page: Callable[[Optional[str]], Optional[RecordPage]],
        record_kind: str,
        id_field: str,
    ) -> List[ResourceInfo]:
        records = paginate(fetch_page)
        return [to_resource_info(r, record_kind, id_field) for r in records]

    def collect_clusters(self) -> List[ResourceInfo]:
        """
        List every DB cluster as a ResourceInfo.

        Raises:
            SourceQueryError: If the API call fails
            MalformedRecordError: If a record lacks a required field
        """
        clusters = self._collect(
            self.api.describe_clusters_page, "cluster", "DBClusterIdentifier"
        )
        logger.info(f"Collected {len(clusters)} RDS cluster(s)")
        return clusters

    def collect_instances(self) -> List[ResourceInfo]:
        """
        List every DB instance as a ResourceInfo.

        Raises:
            SourceQueryError: If the API call fails
            MalformedRecordError: If a record lacks a required field
        """
        instances = self._collect(
            self.api.describe_instances_page, "instance", "DBInstanceIdentifier"
        )
        logger.info(f"Collected {len(instances)} RDS instance(s)")
        return instances

