"""Domain port definitions for adapters."""

from __future__ import annotations

from .catalog import ActivityStore, CatalogService, GroupingStore, UserDirectory

__all__ = [
    "ActivityStore",
    "CatalogService",
    "GroupingStore",
    "UserDirectory",
]
