"""Application service (use case) for one parent-scoped collection.

Owns the load-once policy and the remote-then-cache write path. Remote
failures are caught at this boundary and returned as ``OperationResult``
values; the cache is only written with records the authority has returned.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from catalog_client.application.interfaces import CollectionGateway
from catalog_client.application.services.collection_cache import ParentScopedCache
from catalog_client.domain.entities import ChildRecord, ChildUpdate, OperationResult, OrderUpdate
from catalog_client.domain.exceptions import (
    CatalogApiError,
    EntityNotFoundError,
    UnsupportedOperationError,
)
from catalog_client.infrastructure.logging.colored_logger import OperationLogger, OperationStage

logger = logging.getLogger(__name__)
olog = OperationLogger("CollectionService")

D = TypeVar("D", bound=ChildRecord)

OPERATION_ERRORS = (CatalogApiError, UnsupportedOperationError, EntityNotFoundError)


def error_message(exc: Exception) -> str:
    if isinstance(exc, CatalogApiError):
        return exc.message
    return str(exc)


def to_wire(fields: BaseModel | Mapping[str, Any]) -> dict[str, Any]:
    """Outbound payload: DTOs are dumped camelCase, plain mappings pass through as-is."""
    if isinstance(fields, BaseModel):
        return fields.model_dump(by_alias=True, exclude_unset=True, mode="json")
    return dict(fields)


class CollectionService(Generic[D]):
    """Orchestrates loads and mutations of one collection.

    *dependents* are caches whose scopes are keyed by this collection's child
    ids (products under a category, schedules under a branch, ...). They are
    registered on the cache, so deleting a child clears its scope in each of
    them and, below those, the scopes of the records they held.
    """

    def __init__(
        self,
        cache: ParentScopedCache[D],
        gateway: CollectionGateway,
        *,
        dependents: Sequence[ParentScopedCache[Any]] = (),
    ):
        self._cache = cache
        self._gateway = gateway
        for dependent in dependents:
            cache.add_dependent(dependent)
        self._loading: dict[int, int] = {}
        self._errors: dict[int, str] = {}

    @property
    def cache(self) -> ParentScopedCache[D]:
        return self._cache

    @property
    def name(self) -> str:
        return self._cache.name

    def is_loading(self, parent_id: int) -> bool:
        return self._loading.get(parent_id, 0) > 0

    def last_error(self, parent_id: int) -> str | None:
        return self._errors.get(parent_id)

    def get_children(self, parent_id: int) -> list[D]:
        return self._cache.get_children(parent_id)

    def add_dependent(self, cache: ParentScopedCache[Any]) -> None:
        self._cache.add_dependent(cache)

    # ── Loading ──────────────────────────────────────────────────────

    async def load(self, parent_id: int, force_refresh: bool = False) -> OperationResult[list[D]]:
        """Fetch a scope unless it is already loaded (or *force_refresh* is set).

        A failed load leaves the cache untouched: an unloaded scope stays
        unloaded so the next call retries.
        """
        if not force_refresh and self._cache.has_loaded(parent_id):
            olog.detail(f"Cache hit for {self.name}", parent_id=parent_id)
            return OperationResult.success(self._cache.get_children(parent_id))

        generation = self._cache.generation(parent_id)
        self._loading[parent_id] = self._loading.get(parent_id, 0) + 1
        self._errors.pop(parent_id, None)
        try:
            with olog.timed_step(OperationStage.LOAD, f"Fetching {self.name}", parent_id=parent_id):
                records = await self._gateway.list_children(parent_id)
        except CatalogApiError as e:
            self._errors[parent_id] = e.message
            return OperationResult.failure(e.message)
        finally:
            self._loading[parent_id] -= 1
            if not self._loading[parent_id]:
                del self._loading[parent_id]

        if not self._cache.set_children(parent_id, records, generation=generation):
            return OperationResult.failure(f"{self.name} for {parent_id} were cleared while loading")
        olog.stats(collection=self.name, parent_id=parent_id, count=len(records))
        return OperationResult.success(self._cache.get_children(parent_id))

    async def refresh(self, parent_id: int) -> OperationResult[list[D]]:
        return await self.load(parent_id, force_refresh=True)

    # ── Mutations ────────────────────────────────────────────────────

    async def create(
        self, parent_id: int, fields: BaseModel | Mapping[str, Any]
    ) -> OperationResult[D]:
        """Create a child under *parent_id* and insert the canonical record.

        An unloaded scope stays unloaded; the next load picks the new child up.
        """
        olog.step_start(OperationStage.CREATE, f"Creating {self._cache.definition.entity_name}", parent_id=parent_id)
        try:
            record = await self._gateway.create_child(parent_id, to_wire(fields))
        except OPERATION_ERRORS as e:
            olog.step_error(OperationStage.CREATE, f"Create in {self.name} failed", error=e)
            return OperationResult.failure(error_message(e))

        if self._cache.has_loaded(parent_id):
            created = self._cache.add_child(record)
        else:
            created = self._cache.definition.derive(record)
        olog.step_complete(OperationStage.CREATE, f"Created {self._cache.definition.entity_name}", id=created.id)
        return OperationResult.success(created)

    async def update(
        self,
        child_id: int,
        changes: BaseModel | Mapping[str, Any],
        parent_id: int | None = None,
    ) -> OperationResult[D]:
        """Send a partial update and patch the cached record with the authority's answer.

        The record stays in the scope it was cached under. A child that is
        not cached yet is inserted when its scope is loaded.
        """
        if parent_id is None:
            parent_id = self._cache.find_parent(child_id)

        olog.step_start(OperationStage.UPDATE, f"Updating {self._cache.definition.entity_name}", id=child_id)
        try:
            record = await self._gateway.update_child(child_id, to_wire(changes), parent_id=parent_id)
        except OPERATION_ERRORS as e:
            olog.step_error(OperationStage.UPDATE, f"Update of {child_id} failed", error=e)
            return OperationResult.failure(error_message(e))

        updated = self._cache.update_child(child_id, record)
        if updated is None:
            updated = self._cache.definition.derive(record)
            if self._cache.has_loaded(updated.parent_id):
                updated = self._cache.add_child(record)
        olog.step_complete(OperationStage.UPDATE, f"Updated {self._cache.definition.entity_name}", id=child_id)
        return OperationResult.success(updated)

    async def delete(self, child_id: int, parent_id: int | None = None) -> OperationResult[int]:
        """Delete a child, drop it from its scope and clear every dependent scope it owned."""
        if parent_id is None:
            parent_id = self._cache.find_parent(child_id)

        olog.step_start(OperationStage.DELETE, f"Deleting {self._cache.definition.entity_name}", id=child_id)
        try:
            await self._gateway.delete_child(child_id, parent_id=parent_id)
        except OPERATION_ERRORS as e:
            olog.step_error(OperationStage.DELETE, f"Delete of {child_id} failed", error=e)
            return OperationResult.failure(error_message(e))

        if parent_id is not None:
            self._cache.remove_child(child_id, parent_id)
        cleared = self._cache.clear_descendants(child_id)
        if cleared:
            olog.detail(f"Cleared {cleared} dependent scopes", parent_id=child_id)
        olog.step_complete(OperationStage.DELETE, f"Deleted {self._cache.definition.entity_name}", id=child_id)
        return OperationResult.success(child_id)

    async def replace_all(
        self, parent_id: int, items: Sequence[BaseModel | Mapping[str, Any]]
    ) -> OperationResult[list[D]]:
        """Replace a whole scope in one request; the returned records become the scope."""
        generation = self._cache.generation(parent_id)
        try:
            with olog.timed_step(OperationStage.UPDATE, f"Replacing {self.name}", parent_id=parent_id):
                records = await self._gateway.replace_children(
                    parent_id, [to_wire(item) for item in items]
                )
        except OPERATION_ERRORS as e:
            return OperationResult.failure(error_message(e))

        self._cache.set_children(parent_id, records, generation=generation)
        return OperationResult.success(self._cache.get_children(parent_id))

    async def reorder(self, parent_id: int, pairs: Sequence[OrderUpdate]) -> OperationResult[list[D]]:
        """Apply new sort orders locally, then persist them as one batch request.

        The local write is optimistic. On failure the scope keeps the new
        order; rolling back is the caller's job (see ``ReorderSession``).
        """
        applied = self._cache.update_many(
            ChildUpdate(pair.id, {"sort_order": pair.sort_order}) for pair in pairs
        )
        olog.detail(f"Applied {applied} sort orders locally", parent_id=parent_id)
        try:
            with olog.timed_step(OperationStage.REORDER, f"Persisting {self.name} order", parent_id=parent_id):
                await self._gateway.reorder(parent_id, list(pairs))
        except OPERATION_ERRORS as e:
            return OperationResult.failure(error_message(e))
        return OperationResult.success(self._cache.get_children(parent_id))
