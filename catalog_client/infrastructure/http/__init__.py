"""HTTP infrastructure package."""

from .catalog_api_client import CatalogApiClient
from .collection_gateway import (
    EndpointSet,
    HttpBranchLocationGateway,
    HttpCollectionGateway,
    HttpSiblingPropagationGateway,
    build_collection_gateways,
)

__all__ = [
    "CatalogApiClient",
    "EndpointSet",
    "HttpBranchLocationGateway",
    "HttpCollectionGateway",
    "HttpSiblingPropagationGateway",
    "build_collection_gateways",
]
