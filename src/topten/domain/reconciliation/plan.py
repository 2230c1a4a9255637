"""Membership diff between a grouping and the desired ranking."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from topten.domain.model import ItemId


@dataclass(frozen=True, slots=True)
class MembershipPlan:
    """Set edit turning ``current`` membership into ``desired``.

    ``to_add`` follows the desired order and ``to_remove`` the current order; the two
    edits are independent of each other.
    """

    current: tuple[ItemId, ...]
    desired: tuple[ItemId, ...]
    to_add: tuple[ItemId, ...]
    to_remove: tuple[ItemId, ...]

    @property
    def is_noop(self) -> bool:
        return not self.to_add and not self.to_remove

    def result(self) -> frozenset[ItemId]:
        """Membership after applying the plan."""

        return (frozenset(self.current) - frozenset(self.to_remove)) | frozenset(self.to_add)


def _unique(ids: Iterable[ItemId]) -> tuple[ItemId, ...]:
    return tuple(dict.fromkeys(ids))


def plan_membership(current: Iterable[ItemId], desired: Iterable[ItemId]) -> MembershipPlan:
    current_ids = _unique(current)
    desired_ids = _unique(desired)
    current_set = frozenset(current_ids)
    desired_set = frozenset(desired_ids)
    return MembershipPlan(
        current=current_ids,
        desired=desired_ids,
        to_add=tuple(item_id for item_id in desired_ids if item_id not in current_set),
        to_remove=tuple(item_id for item_id in current_ids if item_id not in desired_set),
    )


__all__ = ["MembershipPlan", "plan_membership"]
