"""Application service for the single location attached to a branch.

The location is embedded in the branch record, so every write is folded
back into the branch cache through the re-derive path rather than kept in
a collection of its own.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from catalog_client.application.interfaces import BranchLocationGateway
from catalog_client.application.services import derived_values as dv
from catalog_client.application.services.collection_service import (
    OPERATION_ERRORS,
    CollectionService,
    error_message,
    to_wire,
)
from catalog_client.domain.entities import Branch, BranchLocation, OperationResult
from catalog_client.infrastructure.logging.colored_logger import OperationLogger, OperationStage

logger = logging.getLogger(__name__)
olog = OperationLogger("BranchLocationService")


class BranchLocationService:
    def __init__(self, branches: CollectionService[Branch], gateway: BranchLocationGateway):
        self._branches = branches
        self._gateway = gateway

    async def save(
        self, branch_id: int, fields: BaseModel | Mapping[str, Any]
    ) -> OperationResult[BranchLocation]:
        """Create or replace the location of *branch_id*."""
        olog.step_start(OperationStage.UPDATE, "Saving branch location", branch_id=branch_id)
        try:
            location = await self._gateway.save_location(branch_id, to_wire(fields))
        except OPERATION_ERRORS as e:
            olog.step_error(OperationStage.UPDATE, f"Saving location of branch {branch_id} failed", error=e)
            return OperationResult.failure(error_message(e))

        branch = self._branches.cache.update_child(branch_id, {"location": location})
        saved = branch.location if branch is not None else dv.derive_location(location)
        olog.step_complete(OperationStage.UPDATE, "Saved branch location", branch_id=branch_id)
        return OperationResult.success(saved)

    async def delete(self, branch_id: int) -> OperationResult[int]:
        olog.step_start(OperationStage.DELETE, "Deleting branch location", branch_id=branch_id)
        try:
            await self._gateway.delete_location(branch_id)
        except OPERATION_ERRORS as e:
            olog.step_error(OperationStage.DELETE, f"Deleting location of branch {branch_id} failed", error=e)
            return OperationResult.failure(error_message(e))

        if self._branches.cache.update_child(branch_id, {"location": None}) is None:
            logger.debug("Branch %s not cached; nothing to clear", branch_id)
        olog.step_complete(OperationStage.DELETE, "Deleted branch location", branch_id=branch_id)
        return OperationResult.success(branch_id)
