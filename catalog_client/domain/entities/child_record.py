"""Structural contract shared by every record stored in a parent-scoped collection."""

from dataclasses import dataclass, field
from typing import Any, Protocol


class ChildRecord(Protocol):
    """Any derived record the cache can hold: id, owning scope, sibling order."""

    id: int
    sort_order: int

    @property
    def parent_id(self) -> int: ...


@dataclass
class OrderUpdate:
    """One ``{id, sortOrder}`` pair of a batch reorder request."""

    id: int
    sort_order: int

    def to_wire(self) -> dict[str, int]:
        return {"id": self.id, "sortOrder": self.sort_order}


@dataclass
class ChildUpdate:
    """A partial update for one record, keyed by source (snake_case) field names."""

    id: int
    changes: dict[str, Any] = field(default_factory=dict)
