"""
Paged RDS API client used by the catalog builder and fleet collector.
"""

import logging
from typing import Dict, List, Optional, Tuple

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from errors import SourceQueryError

logger = logging.getLogger(__name__)

# (records, next_marker)
RecordPage = Tuple[List[Dict], Optional[str]]


class RdsApiClient:
    """Thin wrapper around the boto3 RDS client exposing one call per page."""

    def __init__(
        self,
        region: Optional[str] = None,
        profile: Optional[str] = None,
        timeout_s: int = 60,
        max_attempts: int = 5,
        client=None,
    ):
        """
        Initialize the RDS API client.

        Args:
            region: AWS region; falls back to the SDK's default chain
            profile: Named AWS profile; falls back to the default chain
            timeout_s: Connect and read timeout in seconds
            max_attempts: Total attempts per call, retried by botocore
            client: Pre-built boto3 RDS client (mainly for tests)
        """
        self.region = region
        self.profile = profile
        self.timeout_s = timeout_s
        self.max_attempts = max_attempts

        if client is None:
            session = boto3.session.Session(profile_name=profile, region_name=region)
            client = session.client(
                "rds",
                config=Config(
                    connect_timeout=timeout_s,
                    read_timeout=timeout_s,
                    retries={"max_attempts": max_attempts, "mode": "standard"},
                ),
            )
        self.rds = client

    def _call(self, operation: str, **kwargs) -> Optional[Dict]:
        """
        Invoke an RDS operation, dropping an absent Marker.

        Raises:
            SourceQueryError: If botocore reports a failure
        """
        if kwargs.get("Marker") is None:
            kwargs.pop("Marker", None)

        try:
            return getattr(self.rds, operation)(**kwargs)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            raise SourceQueryError(operation, f"{code}: {e}") from e
        except BotoCoreError as e:
            raise SourceQueryError(operation, str(e)) from e

    @staticmethod
    def _page(response: Optional[Dict], records_key: str) -> Optional[RecordPage]:
        if response is None:
            return None
        return response.get(records_key, []), response.get("Marker")

    def describe_engine_versions_page(
        self, status: str, marker: Optional[str] = None
    ) -> Optional[RecordPage]:
        """
        Fetch one page of engine versions with the given status.

        Args:
            status: "available" or "deprecated"
            marker: Marker returned by the previous page

        Returns:
            Tuple of (DBEngineVersions records, next marker), or None
        """
        response = self._call(
            "describe_db_engine_versions",
            Filters=[{"Name": "status", "Values": [status]}],
            Marker=marker,
        )
        return self._page(response, "DBEngineVersions")

    def describe_clusters_page(self, marker: Optional[str] = None) -> Optional[RecordPage]:
        """Fetch one page of DB clusters."""
        response = self._call("describe_db_clusters", Marker=marker)
        return self._page(response, "DBClusters")

    def describe_instances_page(
        self, marker: Optional[str] = None
    ) -> Optional[RecordPage]:
        """Fetch one page of DB instances."""
        response = self._call("describe_db_instances", Marker=marker)
        return self._page(response, "DBInstances")
