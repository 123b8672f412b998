"""Abstract gateway interface (port) for the apply-to-all-branches endpoints."""

from abc import ABC, abstractmethod

from catalog_client.domain.entities import BranchAspect


class SiblingPropagationGateway(ABC):
    """Port for fan-out writes that copy one branch's aspect to its siblings."""

    @abstractmethod
    async def apply_to_siblings(
        self, company_id: int, source_branch_id: int, aspect: BranchAspect
    ) -> None:
        """Overwrite every sibling branch's *aspect* with the source branch's copy."""
        ...
