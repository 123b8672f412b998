"""Application service for copying one branch's schedules or socials to its siblings."""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from catalog_client.application.interfaces import SiblingPropagationGateway
from catalog_client.application.services.collection_service import CollectionService
from catalog_client.application.services.notification_center import NotificationCenter
from catalog_client.domain.entities import Branch, BranchAspect, OperationResult
from catalog_client.domain.exceptions import CatalogApiError
from catalog_client.infrastructure.logging.colored_logger import OperationLogger, OperationStage

logger = logging.getLogger(__name__)
olog = OperationLogger("SiblingPropagationService")


class SiblingPropagationService:
    """Applies a branch's schedules/socials to every branch of its company.

    The authority performs the copy. Locally, each sibling's scope of the
    affected collection is invalidated, and the ones that were loaded are
    fetched again so readers never see the pre-propagation values.
    """

    def __init__(
        self,
        branches: CollectionService[Branch],
        aspects: Mapping[BranchAspect, CollectionService[Any]],
        gateway: SiblingPropagationGateway,
        notifications: NotificationCenter | None = None,
    ):
        self._branches = branches
        self._aspects = dict(aspects)
        self._gateway = gateway
        self._notifications = notifications

    async def apply_to_siblings(
        self, company_id: int, source_branch_id: int, aspect: BranchAspect
    ) -> OperationResult[list[int]]:
        """Returns the ids of the sibling branches that received the copy."""
        target = self._aspects[aspect]

        listed = await self._branches.load(company_id)
        if not listed.ok:
            return OperationResult.failure(listed.error or f"Could not list branches of company {company_id}")
        sibling_ids = [branch.id for branch in listed.value or [] if branch.id != source_branch_id]

        olog.step_start(
            OperationStage.PROPAGATE,
            f"Applying {aspect.value} of branch {source_branch_id}",
            company_id=company_id,
            siblings=len(sibling_ids),
        )
        try:
            await self._gateway.apply_to_siblings(company_id, source_branch_id, aspect)
        except CatalogApiError as e:
            olog.step_error(OperationStage.PROPAGATE, f"Applying {aspect.value} failed", error=e)
            if self._notifications is not None:
                self._notifications.error(f"Could not apply {aspect.value} to all branches: {e.message}")
            return OperationResult.failure(e.message)

        to_reload = [bid for bid in sibling_ids if target.cache.has_loaded(bid)]
        for branch_id in sibling_ids:
            target.cache.clear_scope(branch_id)

        reloads = await asyncio.gather(*(target.load(bid) for bid in to_reload))
        for branch_id, reload in zip(to_reload, reloads):
            if not reload.ok:
                # scope stays unloaded, the next read fetches it again
                logger.warning(
                    "Reload of %s for branch %s failed after propagation: %s",
                    target.name,
                    branch_id,
                    reload.error,
                )

        olog.step_complete(
            OperationStage.PROPAGATE,
            f"Applied {aspect.value} to {len(sibling_ids)} branches",
            reloaded=len(to_reload),
        )
        if self._notifications is not None:
            self._notifications.success(f"{aspect.value.capitalize()} applied to all branches.")
        return OperationResult.success(sibling_ids)
