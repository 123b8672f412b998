"""Abstract gateway interface (port) for one parent-scoped collection on the remote authority."""

from abc import ABC, abstractmethod
from typing import Any

from catalog_client.domain.entities import OrderUpdate
from catalog_client.domain.exceptions import UnsupportedOperationError


class CollectionGateway(ABC):
    """Port for collection CRUD — implemented in the infrastructure layer.

    Outbound ``fields`` are wire-ready (camelCase) mappings. Every returned
    record is the authority's canonical version, already validated and
    converted to a snake_case *source* mapping for the derived value
    pipeline.
    """

    @property
    @abstractmethod
    def collection_name(self) -> str: ...

    @abstractmethod
    async def list_children(self, parent_id: int) -> list[dict[str, Any]]:
        """Fetch every record of one parent scope, in canonical order."""
        ...

    @abstractmethod
    async def create_child(self, parent_id: int, fields: dict[str, Any]) -> dict[str, Any]:
        """Create a record; id and default sortOrder are assigned by the authority."""
        ...

    @abstractmethod
    async def update_child(
        self,
        child_id: int,
        fields: dict[str, Any],
        *,
        parent_id: int | None = None,
    ) -> dict[str, Any]:
        """Apply a partial update and return the full canonical record."""
        ...

    @abstractmethod
    async def delete_child(self, child_id: int, *, parent_id: int | None = None) -> None:
        ...

    async def reorder(
        self, parent_id: int, updates: list[OrderUpdate]
    ) -> list[dict[str, Any]] | None:
        """Persist a batch of ``{id, sortOrder}`` pairs as one request."""
        raise UnsupportedOperationError(self.collection_name, "reorder")

    async def replace_children(
        self, parent_id: int, items: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        """Replace a whole scope in one request and return the new records."""
        raise UnsupportedOperationError(self.collection_name, "replace_children")
