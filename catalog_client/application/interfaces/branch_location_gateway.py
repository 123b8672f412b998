"""Abstract gateway interface (port) for a branch's location sub-resource."""

from abc import ABC, abstractmethod
from typing import Any


class BranchLocationGateway(ABC):
    """Port for the one-location-per-branch endpoints."""

    @abstractmethod
    async def save_location(self, branch_id: int, fields: dict[str, Any]) -> dict[str, Any]:
        """Create or replace the location and return it as a snake_case mapping."""
        ...

    @abstractmethod
    async def delete_location(self, branch_id: int) -> None:
        ...
