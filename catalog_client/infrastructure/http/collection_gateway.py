"""HTTP implementations of the collection, branch-location and sibling-propagation gateways.

One generic ``HttpCollectionGateway`` serves every collection; the routes
and envelope keys that differ between them live in an ``EndpointSet``.
"""

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from catalog_client.application.interfaces import (
    BranchLocationGateway,
    CollectionGateway,
    SiblingPropagationGateway,
)
from catalog_client.application.schemas import BranchLocationRecord
from catalog_client.application.services.collection_definitions import (
    BRANCHES,
    CATEGORIES,
    COMPANIES,
    PRODUCTS,
    SCHEDULES,
    SOCIALS,
    USER_TAGS,
    CollectionDefinition,
)
from catalog_client.domain.entities import BranchAspect, OrderUpdate
from catalog_client.domain.exceptions import (
    CatalogApiError,
    EntityNotFoundError,
    UnsupportedOperationError,
)
from catalog_client.infrastructure.http.catalog_api_client import CatalogApiClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EndpointSet:
    """Routes of one collection, relative to the API base URL.

    Templates may reference ``{parent_id}`` and ``{child_id}``. A ``None``
    route means the authority has no such operation for the collection.
    """

    list_path: str
    create_path: str
    item_path: str
    list_key: str
    item_key: str
    create_parent_field: str | None = None
    reorder_path: str | None = None
    replace_path: str | None = None
    replace_key: str | None = None
    updatable: bool = True


PRODUCT_ENDPOINTS = EndpointSet(
    list_path="/products/category/{parent_id}",
    create_path="/products",
    item_path="/products/{child_id}",
    list_key="products",
    item_key="product",
    create_parent_field="categoryId",
    reorder_path="/products/reorder",
)

CATEGORY_ENDPOINTS = EndpointSet(
    list_path="/categories/branch/{parent_id}",
    create_path="/categories",
    item_path="/categories/{child_id}",
    list_key="categories",
    item_key="category",
    create_parent_field="branchId",
    reorder_path="/categories/reorder",
)

BRANCH_ENDPOINTS = EndpointSet(
    list_path="/branches/company/{parent_id}",
    create_path="/branches",
    item_path="/branches/{child_id}",
    list_key="branches",
    item_key="branch",
    create_parent_field="companyId",
)

SCHEDULE_ENDPOINTS = EndpointSet(
    list_path="/branches/{parent_id}/schedules",
    create_path="/branches/{parent_id}/schedules",
    item_path="/branches/{parent_id}/schedules/{child_id}",
    list_key="schedules",
    item_key="schedule",
    replace_path="/branches/{parent_id}/schedules/batch",
    replace_key="schedules",
)

SOCIAL_ENDPOINTS = EndpointSet(
    list_path="/branches/{parent_id}/socials",
    create_path="/branches/{parent_id}/socials",
    item_path="/branches/{parent_id}/socials/{child_id}",
    list_key="socials",
    item_key="social",
)

COMPANY_ENDPOINTS = EndpointSet(
    list_path="/companies",
    create_path="/companies",
    item_path="/companies/{child_id}",
    list_key="companies",
    item_key="company",
)

USER_TAG_ENDPOINTS = EndpointSet(
    list_path="/users/tags",
    create_path="/users/tags",
    item_path="/users/tags/{child_id}",
    list_key="tags",
    item_key="tag",
    updatable=False,
)


class HttpCollectionGateway(CollectionGateway):
    """Infrastructure adapter — one collection over the catalog REST API.

    Records coming back are validated against the collection's record
    schema and handed to the application layer as snake_case mappings.
    """

    def __init__(
        self,
        definition: CollectionDefinition[Any],
        endpoints: EndpointSet,
        api_client: CatalogApiClient,
    ):
        self._definition = definition
        self._endpoints = endpoints
        self._api = api_client

    @property
    def collection_name(self) -> str:
        return self._definition.name

    def _path(self, template: str, *, parent_id: int | None = None, child_id: int | None = None) -> str:
        if "{parent_id}" in template and parent_id is None:
            # parent must come from the cache, which does not hold this child
            raise EntityNotFoundError(self._definition.entity_name, child_id if child_id is not None else "?")
        return template.format(parent_id=parent_id, child_id=child_id)

    def _record(self, raw: Any) -> dict[str, Any]:
        if not isinstance(raw, dict):
            raise CatalogApiError(200, f"Expected a {self._definition.entity_name} object in response")
        try:
            return self._definition.record_schema.model_validate(raw).model_dump()
        except ValidationError as e:
            logger.warning("Invalid %s record from server: %s", self._definition.entity_name, e)
            raise CatalogApiError(200, f"Malformed {self._definition.entity_name} record in response") from e

    def _records(self, data: dict[str, Any], key: str) -> list[dict[str, Any]]:
        raw = data.get(key)
        if raw is None:
            logger.warning("Response has no '%s' list for %s; treating as empty", key, self.collection_name)
            return []
        if not isinstance(raw, list):
            raise CatalogApiError(200, f"Expected a list under '{key}' in response")
        return [self._record(item) for item in raw]

    async def list_children(self, parent_id: int) -> list[dict[str, Any]]:
        data = await self._api.get(self._path(self._endpoints.list_path, parent_id=parent_id))
        return self._records(data, self._endpoints.list_key)

    async def create_child(self, parent_id: int, fields: dict[str, Any]) -> dict[str, Any]:
        body = dict(fields)
        if self._endpoints.create_parent_field:
            body[self._endpoints.create_parent_field] = parent_id
        data = await self._api.post(self._path(self._endpoints.create_path, parent_id=parent_id), json=body)
        return self._record(data.get(self._endpoints.item_key))

    async def update_child(
        self,
        child_id: int,
        fields: dict[str, Any],
        *,
        parent_id: int | None = None,
    ) -> dict[str, Any]:
        if not self._endpoints.updatable:
            raise UnsupportedOperationError(self.collection_name, "update")
        path = self._path(self._endpoints.item_path, parent_id=parent_id, child_id=child_id)
        data = await self._api.put(path, json=fields)
        return self._record(data.get(self._endpoints.item_key))

    async def delete_child(self, child_id: int, *, parent_id: int | None = None) -> None:
        await self._api.delete(self._path(self._endpoints.item_path, parent_id=parent_id, child_id=child_id))

    async def reorder(
        self, parent_id: int, updates: list[OrderUpdate]
    ) -> list[dict[str, Any]] | None:
        if self._endpoints.reorder_path is None:
            raise UnsupportedOperationError(self.collection_name, "reorder")
        await self._api.patch(
            self._path(self._endpoints.reorder_path, parent_id=parent_id),
            json={"updates": [update.to_wire() for update in updates]},
        )
        return None

    async def replace_children(
        self, parent_id: int, items: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        if self._endpoints.replace_path is None or self._endpoints.replace_key is None:
            raise UnsupportedOperationError(self.collection_name, "replace_children")
        data = await self._api.put(
            self._path(self._endpoints.replace_path, parent_id=parent_id),
            json={self._endpoints.replace_key: items},
        )
        return self._records(data, self._endpoints.list_key)


class HttpSiblingPropagationGateway(SiblingPropagationGateway):
    """Calls ``POST /companies/{company}/apply-{aspect}/{branch}``."""

    def __init__(self, api_client: CatalogApiClient, timeout: float = 30.0):
        self._api = api_client
        self._timeout = timeout

    async def apply_to_siblings(
        self, company_id: int, source_branch_id: int, aspect: BranchAspect
    ) -> None:
        path = f"/companies/{company_id}/apply-{aspect.value}/{source_branch_id}"
        await self._api.post(path, timeout=self._timeout)


class HttpBranchLocationGateway(BranchLocationGateway):
    """Calls ``POST`` and ``DELETE /branches/{branch}/location``."""

    def __init__(self, api_client: CatalogApiClient):
        self._api = api_client

    async def save_location(self, branch_id: int, fields: dict[str, Any]) -> dict[str, Any]:
        data = await self._api.post(f"/branches/{branch_id}/location", json=fields)
        raw = data.get("location")
        if not isinstance(raw, dict):
            raise CatalogApiError(200, "Expected a location object in response")
        try:
            return BranchLocationRecord.model_validate(raw).model_dump()
        except ValidationError as e:
            logger.warning("Invalid location record from server: %s", e)
            raise CatalogApiError(200, "Malformed location record in response") from e

    async def delete_location(self, branch_id: int) -> None:
        await self._api.delete(f"/branches/{branch_id}/location")


def build_collection_gateways(api_client: CatalogApiClient) -> dict[str, HttpCollectionGateway]:
    """One gateway per collection, keyed by collection name."""
    table = (
        (COMPANIES, COMPANY_ENDPOINTS),
        (BRANCHES, BRANCH_ENDPOINTS),
        (CATEGORIES, CATEGORY_ENDPOINTS),
        (PRODUCTS, PRODUCT_ENDPOINTS),
        (SCHEDULES, SCHEDULE_ENDPOINTS),
        (SOCIALS, SOCIAL_ENDPOINTS),
        (USER_TAGS, USER_TAG_ENDPOINTS),
    )
    return {
        definition.name: HttpCollectionGateway(definition, endpoints, api_client)
        for definition, endpoints in table
    }
