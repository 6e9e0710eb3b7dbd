"""
Resolves a resource's engine version against the deprecation catalog.
"""

from errors import UnknownEngineError, UnknownVersionError
from models import DeprecationCatalog, ResourceInfo


def classify(resource: ResourceInfo, catalog: DeprecationCatalog) -> bool:
    """
    Return True if the resource runs a deprecated engine version.

    Matching is exact on both engine and version strings.

    Raises:
        UnknownEngineError: If the engine is not in the catalog
        UnknownVersionError: If the engine is known but the version is not
    """
    engine, version = resource.key
    versions = catalog.get(engine)
    if versions is None:
        raise UnknownEngineError(engine)

    if version not in versions:
        raise UnknownVersionError(engine, version)

    return versions[version]
