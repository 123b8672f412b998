"""Reorder protocol — optimistic drag-and-drop reordering with rollback.

A ``ReorderSession`` walks one scope through
``IDLE → DRAGGING → COMMITTING → IDLE`` on success, or
``COMMITTING → ROLLING_BACK → IDLE`` when the authority rejects the new
order. Rollback re-fetches the scope from the authority; if that fetch
fails too, the pre-drag snapshot is written back. A scope cleared while
the commit was in flight (logout, parent deleted) is left unloaded.

Two sessions committing the same scope concurrently are not serialized.
Whichever persist lands last wins on the authority, and a rollback reload
may overwrite the other session's optimistic order.
"""

import logging
from typing import Generic, TypeVar

from catalog_client.application.services.collection_service import CollectionService
from catalog_client.application.services.notification_center import NotificationCenter
from catalog_client.domain.entities import ChildRecord, OperationResult, OrderUpdate, ReorderState
from catalog_client.domain.exceptions import InvalidStateTransitionError
from catalog_client.infrastructure.logging.colored_logger import OperationLogger, OperationStage

logger = logging.getLogger(__name__)
olog = OperationLogger("ReorderService")

D = TypeVar("D", bound=ChildRecord)


def move_item(items: list[D], old_index: int, new_index: int) -> list[D]:
    """Return a copy of *items* with the element at *old_index* moved to *new_index*."""
    moved = list(items)
    moved.insert(new_index, moved.pop(old_index))
    return moved


class ReorderSession(Generic[D]):
    """One drag gesture over one parent scope."""

    def __init__(
        self,
        service: CollectionService[D],
        parent_id: int,
        notifications: NotificationCenter | None = None,
    ):
        self._service = service
        self._parent_id = parent_id
        self._notifications = notifications
        self._state = ReorderState.IDLE
        self._snapshot: list[D] = []
        self._generation: int | None = None
        self.active_id: int | None = None

    @property
    def state(self) -> ReorderState:
        return self._state

    @property
    def parent_id(self) -> int:
        return self._parent_id

    def _require(self, expected: ReorderState, action: str) -> None:
        if self._state != expected:
            raise InvalidStateTransitionError(self._state.value, action)

    def begin_drag(self, active_id: int | None = None) -> list[D]:
        """Snapshot the scope and enter DRAGGING. Returns the items being dragged over."""
        self._require(ReorderState.IDLE, "begin a drag")
        self._snapshot = self._service.get_children(self._parent_id)
        self._generation = self._service.cache.generation(self._parent_id)
        self.active_id = active_id
        self._state = ReorderState.DRAGGING
        return list(self._snapshot)

    def cancel(self) -> None:
        """Abandon the drag. The cache was never touched."""
        self._require(ReorderState.DRAGGING, "cancel")
        self._reset()

    async def drop(self, active_id: int, over_id: int | None) -> OperationResult[list[D]]:
        """Drop the dragged record onto the position of *over_id*.

        Dropping outside any target (``over_id`` None) or onto itself is a
        no-op that issues no request.
        """
        self._require(ReorderState.DRAGGING, "drop")
        if over_id is None or active_id == over_id:
            self._reset()
            return OperationResult.success(self._service.get_children(self._parent_id))

        ids = [item.id for item in self._snapshot]
        try:
            old_index, new_index = ids.index(active_id), ids.index(over_id)
        except ValueError:
            self._reset()
            logger.warning("Drop references an id outside scope %s: %s -> %s", self._parent_id, active_id, over_id)
            return OperationResult.failure(f"Unknown {self._service.name} id in drop")
        return await self.drop_at(old_index, new_index)

    async def drop_at(self, old_index: int, new_index: int) -> OperationResult[list[D]]:
        """Drop by list positions; the same position on both sides is a no-op."""
        self._require(ReorderState.DRAGGING, "drop")
        if old_index == new_index:
            self._reset()
            return OperationResult.success(self._service.get_children(self._parent_id))
        size = len(self._snapshot)
        if not (0 <= old_index < size and 0 <= new_index < size):
            self._reset()
            return OperationResult.failure(f"Drop position out of range for {size} {self._service.name}")
        return await self._commit(move_item(self._snapshot, old_index, new_index))

    async def _commit(self, reordered: list[D]) -> OperationResult[list[D]]:
        self._state = ReorderState.COMMITTING
        base = self._service.cache.definition.order_base
        updates = [OrderUpdate(item.id, base + index) for index, item in enumerate(reordered)]
        olog.step_start(
            OperationStage.REORDER,
            f"Reordering {self._service.name}",
            parent_id=self._parent_id,
            count=len(updates),
        )

        result = await self._service.reorder(self._parent_id, updates)
        if result.ok:
            olog.step_complete(OperationStage.REORDER, f"Reordered {self._service.name}", parent_id=self._parent_id)
            self._reset()
            return result

        await self._rollback(result.error or "unknown error")
        return result

    async def _rollback(self, error: str) -> None:
        self._state = ReorderState.ROLLING_BACK
        olog.step_error(OperationStage.ROLLBACK, f"Reorder of {self._service.name} rejected: {error}")

        cache = self._service.cache
        if self._generation is not None and not cache.is_current(self._parent_id, self._generation):
            # scope was torn down while the commit was in flight; leave it unloaded
            logger.info(
                "Skipping rollback of %s scope %s: cleared during commit",
                self._service.name,
                self._parent_id,
            )
        else:
            reload = await self._service.refresh(self._parent_id)
            if not reload.ok:
                logger.warning(
                    "Rollback reload of %s scope %s failed (%s); restoring pre-drag order",
                    self._service.name,
                    self._parent_id,
                    reload.error,
                )
                cache.restore_scope(self._parent_id, self._snapshot, generation=self._generation)

        if self._notifications is not None:
            self._notifications.error(
                f"The new {self._service.name} order did not persist and has been reverted."
            )
        self._reset()

    def _reset(self) -> None:
        self._snapshot = []
        self._generation = None
        self.active_id = None
        self._state = ReorderState.IDLE


class ReorderService(Generic[D]):
    """Creates reorder sessions for one collection."""

    def __init__(self, service: CollectionService[D], notifications: NotificationCenter | None = None):
        self._service = service
        self._notifications = notifications

    def session(self, parent_id: int) -> ReorderSession[D]:
        return ReorderSession(self._service, parent_id, self._notifications)

    async def reorder(self, parent_id: int, old_index: int, new_index: int) -> OperationResult[list[D]]:
        """Move one item by position in a single call (drag + drop)."""
        session = self.session(parent_id)
        session.begin_drag()
        return await session.drop_at(old_index, new_index)

    async def move(self, parent_id: int, active_id: int, over_id: int | None) -> OperationResult[list[D]]:
        """Move one item onto another item's position, by id."""
        session = self.session(parent_id)
        session.begin_drag(active_id)
        return await session.drop(active_id, over_id)
