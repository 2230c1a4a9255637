"""Translate Jellyfin payloads into catalog entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from topten.domain.model import ActivityRecord, CatalogItem, ItemKind
from topten.domain.time_windows import ensure_aware

if TYPE_CHECKING:
    from collections.abc import Collection

    from topten.domain.model import UserId

    from .schema import BaseItemPayload

_KIND_TO_JELLYFIN: dict[ItemKind, str] = {
    ItemKind.MOVIE: "Movie",
    ItemKind.SERIES: "Series",
    ItemKind.EPISODE: "Episode",
    ItemKind.GROUPING: "BoxSet",
}
_JELLYFIN_TO_KIND = {value: key for key, value in _KIND_TO_JELLYFIN.items()}


def jellyfin_item_types(kinds: Collection[ItemKind]) -> str:
    return ",".join(_KIND_TO_JELLYFIN[kind] for kind in kinds)


def parse_catalog_item(payload: BaseItemPayload) -> CatalogItem:
    kind = _JELLYFIN_TO_KIND.get(payload.type, ItemKind.OTHER)
    return CatalogItem(
        id=payload.id,
        name=payload.name,
        kind=kind,
        series_id=payload.series_id if kind is ItemKind.EPISODE else None,
    )


def parse_activity(user_id: UserId, payload: BaseItemPayload) -> ActivityRecord | None:
    user_data = payload.user_data
    if user_data is None or user_data.last_played_date is None:
        return None
    return ActivityRecord(
        user_id=user_id,
        item_id=payload.id,
        last_played=ensure_aware(user_data.last_played_date),
    )
