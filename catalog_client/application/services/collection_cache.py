"""Parent-scoped collection cache — the in-memory store behind every collection.

Maps a parent id (company, branch or category) to the ordered list of its
derived child records. A scope is either absent (unloaded) or present,
possibly empty (fully loaded); there is no partial state.

The mutation reducers live here too. Each reducer builds the new scope list
and swaps it in with a single assignment, so no reader ever observes a
patched-but-unsorted scope.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import fields, replace
from typing import Any, Generic, TypeVar

from catalog_client.application.services.collection_definitions import CollectionDefinition
from catalog_client.domain.entities import ChildRecord, ChildUpdate

logger = logging.getLogger(__name__)

D = TypeVar("D", bound=ChildRecord)


class ParentScopedCache(Generic[D]):
    """Session-scoped store of derived records keyed by parent id.

    Each scope carries a generation counter. ``clear`` and ``clear_scope``
    bump it, so an async load that captured the old generation can be
    discarded when it finally resolves.
    """

    def __init__(self, definition: CollectionDefinition[D]) -> None:
        self._definition = definition
        self._scopes: dict[int, list[D]] = {}
        self._generations: dict[int, int] = {}
        self._dependents: list[ParentScopedCache[Any]] = []

    @property
    def definition(self) -> CollectionDefinition[D]:
        return self._definition

    @property
    def name(self) -> str:
        return self._definition.name

    # ── Reads ────────────────────────────────────────────────────────

    def has_loaded(self, parent_id: int) -> bool:
        """True iff the scope is present, regardless of how many children it has."""
        return parent_id in self._scopes

    def get_children(self, parent_id: int) -> list[D]:
        """Children of a scope in ``sort_order``; ``[]`` when unloaded."""
        return list(self._scopes.get(parent_id, ()))

    def loaded_scopes(self) -> list[int]:
        return list(self._scopes)

    def get_child(self, child_id: int) -> D | None:
        for children in self._scopes.values():
            for child in children:
                if child.id == child_id:
                    return child
        return None

    def find_parent(self, child_id: int) -> int | None:
        for parent_id, children in self._scopes.items():
            if any(child.id == child_id for child in children):
                return parent_id
        return None

    # ── Generations ──────────────────────────────────────────────────

    def generation(self, parent_id: int) -> int:
        """Current generation of a scope; registers the scope so ``clear`` can bump it."""
        return self._generations.setdefault(parent_id, 0)

    def is_current(self, parent_id: int, generation: int) -> bool:
        return self._generations.get(parent_id, 0) == generation

    def _bump(self, parent_id: int) -> None:
        self._generations[parent_id] = self._generations.get(parent_id, 0) + 1

    # ── Writes ───────────────────────────────────────────────────────

    def set_children(
        self,
        parent_id: int,
        items: Iterable[Mapping[str, Any]],
        *,
        generation: int | None = None,
    ) -> bool:
        """Replace a scope wholesale with freshly derived, sorted records.

        Returns False (and writes nothing) when *generation* is stale.
        """
        if generation is not None and not self.is_current(parent_id, generation):
            logger.info(
                "Discarding stale %s load for scope %s (generation %s)",
                self.name,
                parent_id,
                generation,
            )
            return False
        derived: dict[int, D] = {}
        for item in items:
            record = self._definition.derive(item)
            derived[record.id] = record
        self._scopes[parent_id] = self._sorted(derived.values())
        logger.debug("Set %d %s for scope %s", len(derived), self.name, parent_id)
        return True

    def restore_scope(
        self,
        parent_id: int,
        items: Iterable[D],
        *,
        generation: int | None = None,
    ) -> bool:
        """Write already-derived records back verbatim (rollback snapshot).

        Same stale-generation rule as ``set_children``.
        """
        if generation is not None and not self.is_current(parent_id, generation):
            logger.info("Discarding stale %s restore for scope %s", self.name, parent_id)
            return False
        self._scopes[parent_id] = self._sorted(items)
        return True

    def add_child(self, item: Mapping[str, Any]) -> D:
        """Derive and insert one record into its owning scope, creating the scope if absent.

        A record whose id is already cached replaces the old representation.
        """
        record = self._definition.derive(item)
        parent_id = record.parent_id
        siblings = [c for c in self._scopes.get(parent_id, ()) if c.id != record.id]
        siblings.append(record)
        self._scopes[parent_id] = self._sorted(siblings)
        return record

    def update_child(self, child_id: int, changes: Mapping[str, Any]) -> D | None:
        """Patch one record in place; returns the new record or None if not cached."""
        parent_id = self.find_parent(child_id)
        if parent_id is None:
            logger.debug("update_child: %s %s not cached", self._definition.entity_name, child_id)
            return None

        updated: D | None = None
        children: list[D] = []
        for child in self._scopes[parent_id]:
            if child.id == child_id:
                updated = self._apply(child, changes)
                children.append(updated)
            else:
                children.append(child)

        if "sort_order" in changes:
            children = self._sorted(children)
        self._scopes[parent_id] = children
        return updated

    def update_many(self, updates: Iterable[ChildUpdate]) -> int:
        """Apply a batch of partial updates, one pass and at most one sort per scope.

        Returns the number of records patched; unknown ids are skipped.
        """
        index = {
            child.id: parent_id
            for parent_id, children in self._scopes.items()
            for child in children
        }
        by_scope: dict[int, dict[int, dict[str, Any]]] = {}
        for update in updates:
            parent_id = index.get(update.id)
            if parent_id is None:
                logger.debug("update_many: skipping unknown id %s", update.id)
                continue
            by_scope.setdefault(parent_id, {}).setdefault(update.id, {}).update(update.changes)

        applied = 0
        for parent_id, changes_by_id in by_scope.items():
            children = [
                self._apply(child, changes_by_id[child.id]) if child.id in changes_by_id else child
                for child in self._scopes[parent_id]
            ]
            applied += len(changes_by_id)
            if any("sort_order" in changes for changes in changes_by_id.values()):
                children = self._sorted(children)
            self._scopes[parent_id] = children
        return applied

    def remove_child(self, child_id: int, parent_id: int) -> bool:
        """Drop one record from a scope. No-op (False) when the scope or id is absent."""
        children = self._scopes.get(parent_id)
        if children is None:
            return False
        remaining = [c for c in children if c.id != child_id]
        if len(remaining) == len(children):
            return False
        self._scopes[parent_id] = remaining
        return True

    def clear_scope(self, parent_id: int) -> None:
        self._scopes.pop(parent_id, None)
        self._bump(parent_id)

    def clear(self) -> None:
        for parent_id in set(self._generations) | set(self._scopes):
            self._bump(parent_id)
        self._scopes.clear()

    # ── Dependent caches ─────────────────────────────────────────────

    @property
    def dependents(self) -> list["ParentScopedCache[Any]"]:
        return list(self._dependents)

    def add_dependent(self, cache: "ParentScopedCache[Any]") -> None:
        """Register a cache whose scopes are keyed by this cache's child ids."""
        if cache not in self._dependents:
            self._dependents.append(cache)

    def clear_descendants(self, child_id: int) -> int:
        """Clear every dependent scope owned by *child_id*, walking down the hierarchy.

        Deleting a branch drops its categories, and through them the product
        scopes of those categories. Returns the number of scopes cleared.
        """
        cleared = 0
        for dependent in self._dependents:
            for grandchild in dependent.get_children(child_id):
                cleared += dependent.clear_descendants(grandchild.id)
            if dependent.has_loaded(child_id):
                cleared += 1
            dependent.clear_scope(child_id)
            logger.debug("Cleared %s scope %s", dependent.name, child_id)
        return cleared

    # ── Reducer internals ────────────────────────────────────────────

    def _apply(self, current: D, changes: Mapping[str, Any]) -> D:
        """Shallow-patch plain fields, or rebuild and re-derive when a pipeline input changes."""
        computed = self._definition.derived_fields & changes.keys()
        if computed:
            logger.warning(
                "Ignoring computed fields %s on %s %s",
                sorted(computed),
                self._definition.entity_name,
                current.id,
            )
            changes = {k: v for k, v in changes.items() if k not in computed}
        if not changes:
            return current
        if self._definition.pipeline_fields & changes.keys():
            source = self._definition.to_source(current)
            source.update(changes)
            return self._definition.derive(source)

        names = {f.name for f in fields(current)}
        patch = {k: v for k, v in changes.items() if k in names}
        ignored = changes.keys() - patch.keys()
        if ignored:
            logger.debug("Ignoring non-field keys %s on %s", sorted(ignored), self._definition.entity_name)
        return replace(current, **patch)

    @staticmethod
    def _sorted(items: Iterable[D]) -> list[D]:
        return sorted(items, key=lambda child: child.sort_order)
