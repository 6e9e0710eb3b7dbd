"""
Builds the engine version deprecation catalog from the RDS API.
"""

import logging
from typing import Dict

from clients import RdsApiClient
from errors import CatalogBuildError, MalformedRecordError, SourceQueryError
from models import DeprecationCatalog, has_text
from paginator import paginate

logger = logging.getLogger(__name__)

STATUS_AVAILABLE = "available"
STATUS_DEPRECATED = "deprecated"


def status_for(deprecated: bool) -> str:
    """Map a deprecated flag to the RDS engine version status filter."""
    return STATUS_DEPRECATED if deprecated else STATUS_AVAILABLE


class CatalogBuilder:
    """Queries available and deprecated engine versions and merges them."""

    # Later phases overwrite earlier ones for the same (engine, version).
    PHASES = (False, True)

    def __init__(self, api: RdsApiClient):
        self.api = api

    def build(self) -> DeprecationCatalog:
        """
        Build a complete catalog, or nothing.

        Returns:
            Mapping of engine -> version -> deprecated flag

        Raises:
            CatalogBuildError: If either phase fails
        """
        catalog: DeprecationCatalog = {}

        for deprecated in self.PHASES:
            try:
                self.query_engine_versions(deprecated, catalog)
            except (SourceQueryError, MalformedRecordError) as e:
                raise CatalogBuildError(status_for(deprecated)) from e

        versions = sum(len(v) for v in catalog.values())
        logger.info(
            f"Engine version catalog built: {len(catalog)} engine(s), {versions} version(s)"
        )
        return catalog

    def query_engine_versions(
        self, deprecated: bool, catalog: DeprecationCatalog
    ) -> int:
        """
        Merge every engine version with the matching status into ``catalog``.

        Args:
            deprecated: Which status to query; also the flag recorded
            catalog: Catalog updated in place

        Returns:
            Number of engine version records merged
        """
        status = status_for(deprecated)
        records = paginate(
            lambda marker: self.api.describe_engine_versions_page(status, marker)
        )

        for record in records:
            engine = record.get("Engine")
            version = record.get("EngineVersion")
            if not has_text(engine):
                raise MalformedRecordError("engine version", "Engine", record)
            if not has_text(version):
                raise MalformedRecordError("engine version", "EngineVersion", record)

            versions: Dict[str, bool] = catalog.setdefault(engine, {})
            versions[version] = deprecated

        logger.info(f"Merged {len(records)} {status} engine version(s)")
        return len(records)
