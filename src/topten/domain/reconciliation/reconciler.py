"""Bring a named grouping in line with the computed ranking."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from topten.domain.errors import CollaboratorError, ReconciliationError
from topten.domain.model import Grouping, ItemKind

from .plan import MembershipPlan, plan_membership

if TYPE_CHECKING:
    from collections.abc import Sequence

    from topten.domain.model import CatalogItem
    from topten.domain.ports import CatalogService, GroupingStore

log = getLogger(__name__)


@dataclass(slots=True)
class ReconcileResult:
    grouping: Grouping
    plan: MembershipPlan
    created: bool = False

    @property
    def added(self) -> int:
        return len(self.plan.to_add)

    @property
    def removed(self) -> int:
        return len(self.plan.to_remove)


@dataclass(slots=True)
class GroupingReconciler:
    catalog: CatalogService
    groupings: GroupingStore

    def reconcile(self, name: str, desired: Sequence[CatalogItem]) -> ReconcileResult:
        """Make the membership of grouping ``name`` exactly ``desired``.

        The grouping is created locked and empty when missing. The store is only
        asked to add or remove when there is something to add or remove, so running
        twice with the same ranking issues no edits the second time.
        """

        log.info(f"Updating collection: {name} with {len(desired)} items")
        try:
            grouping, created = self._find_or_create(name)
            if created:
                current = list(grouping.member_ids)
            else:
                current = [child.id for child in self.catalog.linked_children(grouping.id)]
            plan = plan_membership(current, (item.id for item in desired))

            if plan.to_add:
                log.info(f"Adding {len(plan.to_add)} items to collection {name}")
                self.groupings.add_members(grouping.id, plan.to_add)
            if plan.to_remove:
                log.info(f"Removing {len(plan.to_remove)} items from collection {name}")
                self.groupings.remove_members(grouping.id, plan.to_remove)
        except CollaboratorError as exc:
            log.exception(f"Error updating collection {name}")
            raise ReconciliationError(
                f"Could not update collection {name!r}: {exc}", collection_name=name
            ) from exc

        if plan.is_noop:
            log.info(f"Collection {name} already up to date")
        return ReconcileResult(
            grouping=Grouping(id=grouping.id, name=grouping.name, member_ids=plan.desired),
            plan=plan,
            created=created,
        )

    def _find_or_create(self, name: str) -> tuple[Grouping, bool]:
        for item in self.catalog.list_items((ItemKind.GROUPING,), recursive=True, name=name):
            if item.name == name:
                return Grouping(id=item.id, name=item.name), False
        log.info(f"Creating new collection: {name}")
        return self.groupings.create_grouping(name, locked=True), True


__all__ = ["GroupingReconciler", "ReconcileResult"]
