"""Public interface for the Jellyfin adapter."""

from __future__ import annotations

from .client import JellyfinAPIError, JellyfinClient
from .gateway import JellyfinGateway
from .schema import BaseItemPayload, ItemsResult, UserItemData, UserPayload
from .translator import jellyfin_item_types, parse_activity, parse_catalog_item

__all__ = [
    "BaseItemPayload",
    "ItemsResult",
    "JellyfinAPIError",
    "JellyfinClient",
    "JellyfinGateway",
    "UserItemData",
    "UserPayload",
    "jellyfin_item_types",
    "parse_activity",
    "parse_catalog_item",
]
