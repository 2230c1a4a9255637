"""Synchronous port implementations backed by one Jellyfin server.

A gateway is meant to serve a single update run and be closed afterwards. All of
its calls share one HTTP client and event loop, so the rate limit and HTTP cache
apply across the run. The first activity lookup for a user loads that user's
played movies and episodes once and answers every later lookup from memory.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from topten.adapters.http_resilience import ResilientClient
from topten.config.jellyfin import JellyfinConfig, get_jellyfin_config
from topten.domain.model import ActivityRecord, Grouping, ItemId, ItemKind, UserId

from .client import JellyfinClient
from .translator import jellyfin_item_types, parse_activity, parse_catalog_item

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Collection, Sequence
    from types import TracebackType

    from topten.config.http_resilience import ResilienceConfig
    from topten.domain.model import CatalogItem
    from topten.domain.ports import ActivityStore, CatalogService, GroupingStore, UserDirectory

    from .client import QueryValue

log = getLogger(__name__)

_ACTIVITY_KINDS = (ItemKind.MOVIE, ItemKind.EPISODE)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class JellyfinGateway:
    config: JellyfinConfig = field(default_factory=get_jellyfin_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _activity: dict[UserId, dict[ItemId, ActivityRecord]] = field(
        default_factory=dict["UserId", "dict[ItemId, ActivityRecord]"], init=False
    )
    _runner: asyncio.Runner | None = field(default=None, init=False)
    _http: ResilientClient | None = field(default=None, init=False)

    def __enter__(self) -> JellyfinGateway:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client and the event loop shared by this gateway's calls."""

        runner, http = self._runner, self._http
        self._runner = None
        self._http = None
        if runner is None:
            return
        try:
            if http is not None:
                runner.run(http.aclose())
        finally:
            runner.close()

    def list_items(
        self,
        kinds: Collection[ItemKind],
        *,
        recursive: bool = True,
        ancestor_id: ItemId | None = None,
        name: str | None = None,
    ) -> Sequence[CatalogItem]:
        params: dict[str, QueryValue] = {
            "IncludeItemTypes": jellyfin_item_types(kinds),
            "Recursive": recursive,
        }
        if ancestor_id is not None:
            params["ParentId"] = ancestor_id
        if name is not None:
            params["SearchTerm"] = name
        payloads = self._call(lambda client: client.list_items(params))
        items = [parse_catalog_item(payload) for payload in payloads]
        if name is not None:
            # SearchTerm is a fuzzy match.
            items = [item for item in items if item.name == name]
        return items

    def linked_children(self, grouping_id: ItemId) -> Sequence[CatalogItem]:
        payloads = self._call(lambda client: client.list_items({"ParentId": grouping_id}))
        return [parse_catalog_item(payload) for payload in payloads]

    def list_users(self) -> Sequence[UserId]:
        users = self._call(lambda client: client.list_users())
        return [user.id for user in users]

    def get_activity(self, user_id: UserId, item_id: ItemId) -> ActivityRecord | None:
        records = self._activity.get(user_id)
        if records is None:
            records = self._load_activity(user_id)
            self._activity[user_id] = records
        return records.get(item_id)

    def create_grouping(self, name: str, *, locked: bool) -> Grouping:
        created = self._call(lambda client: client.create_collection(name, locked=locked))
        log.info(f"Created Jellyfin collection {name} ({created.id})")
        return Grouping(id=created.id, name=name)

    def add_members(self, grouping_id: ItemId, item_ids: Sequence[ItemId]) -> None:
        self._call(lambda client: client.add_to_collection(grouping_id, item_ids))

    def remove_members(self, grouping_id: ItemId, item_ids: Sequence[ItemId]) -> None:
        self._call(lambda client: client.remove_from_collection(grouping_id, item_ids))

    def _load_activity(self, user_id: UserId) -> dict[ItemId, ActivityRecord]:
        params: dict[str, QueryValue] = {
            "IncludeItemTypes": jellyfin_item_types(_ACTIVITY_KINDS),
            "Recursive": True,
            "EnableUserData": True,
            "SortBy": "DatePlayed",
            "SortOrder": "Descending",
        }
        payloads = self._call(lambda client: client.list_user_items(user_id, params))
        records: dict[ItemId, ActivityRecord] = {}
        for payload in payloads:
            record = parse_activity(user_id, payload)
            if record is not None:
                records[record.item_id] = record
        log.debug(f"Loaded {len(records)} played items for user {user_id}")
        return records

    def _call[T](self, operation: Callable[[JellyfinClient], Awaitable[T]]) -> T:
        async def run() -> T:
            if self._http is None:
                # Created inside the runner loop, which the rate limiter binds to.
                self._http = self.client_factory(self.config.resilience)
            return await operation(JellyfinClient(self._http, page_size=self.config.page_size))

        if self._runner is None:
            self._runner = asyncio.Runner()
        return self._runner.run(run())


if TYPE_CHECKING:
    _catalog_check: CatalogService = JellyfinGateway()
    _users_check: UserDirectory = JellyfinGateway()
    _activity_check: ActivityStore = JellyfinGateway()
    _groupings_check: GroupingStore = JellyfinGateway()


__all__ = ["JellyfinGateway"]
