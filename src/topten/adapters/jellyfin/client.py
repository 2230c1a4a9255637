"""Async HTTP client for the Jellyfin REST API."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ValidationError

from topten.domain.errors import CollaboratorError

from .schema import BaseItemPayload, CollectionCreationResult, ItemsResult, UserPayload

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from topten.adapters.http_resilience import ResilientClient

log = getLogger(__name__)

type QueryValue = str | int | bool


class JellyfinAPIError(CollaboratorError):
    """Raised when the Jellyfin server is unreachable or answers with an error."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _join_ids(item_ids: Sequence[str]) -> str:
    return ",".join(item_ids)


@dataclass(slots=True)
class JellyfinClient:
    http: ResilientClient
    page_size: int = 500

    async def list_items(self, params: Mapping[str, QueryValue]) -> list[BaseItemPayload]:
        return await self._paginate("/Items", params)

    async def list_user_items(
        self,
        user_id: str,
        params: Mapping[str, QueryValue],
    ) -> list[BaseItemPayload]:
        return await self._paginate(f"/Users/{user_id}/Items", params)

    async def list_users(self) -> list[UserPayload]:
        response = await self._request("GET", "/Users")
        payload = _decode(response)
        if not isinstance(payload, list):
            raise JellyfinAPIError("Unexpected Jellyfin users payload")
        return [_validate(UserPayload, entry) for entry in payload]

    async def create_collection(self, name: str, *, locked: bool) -> CollectionCreationResult:
        params: dict[str, QueryValue] = {"name": name, "isLocked": _flag(locked)}
        response = await self._request("POST", "/Collections", params=params)
        return _validate(CollectionCreationResult, _decode(response))

    async def add_to_collection(self, collection_id: str, item_ids: Sequence[str]) -> None:
        await self._request(
            "POST", f"/Collections/{collection_id}/Items", params={"ids": _join_ids(item_ids)}
        )

    async def remove_from_collection(self, collection_id: str, item_ids: Sequence[str]) -> None:
        await self._request(
            "DELETE", f"/Collections/{collection_id}/Items", params={"ids": _join_ids(item_ids)}
        )

    async def _paginate(
        self,
        path: str,
        params: Mapping[str, QueryValue],
    ) -> list[BaseItemPayload]:
        items: list[BaseItemPayload] = []
        start = 0
        while True:
            page_params = {**params, "StartIndex": start, "Limit": self.page_size}
            response = await self._request("GET", path, params=page_params)
            page = _validate(ItemsResult, _decode(response))
            items.extend(page.items)
            start += len(page.items)
            if len(page.items) < self.page_size:
                break
            if page.total_record_count is not None and start >= page.total_record_count:
                break
        return items

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, QueryValue] | None = None,
    ) -> httpx.Response:
        query = httpx.QueryParams(
            {key: _query_value(value) for key, value in (params or {}).items()}
        )
        try:
            response = await self.http.request(method, path, params=query)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            log.error(f"Jellyfin {method} {path} failed with HTTP {status}")
            raise JellyfinAPIError(
                f"Jellyfin {method} {path} failed with HTTP {status}", status_code=status
            ) from exc
        except httpx.HTTPError as exc:
            log.error(f"Jellyfin {method} {path} failed: {exc}")
            raise JellyfinAPIError(f"Jellyfin {method} {path} failed: {exc}") from exc
        return response


def _decode(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError as exc:
        raise JellyfinAPIError("Jellyfin returned a non-JSON response") from exc


def _flag(value: bool) -> str:  # noqa: FBT001
    return "true" if value else "false"


def _query_value(value: QueryValue) -> str | int:
    if isinstance(value, bool):
        return _flag(value)
    return value


def _validate[ModelT: BaseModel](model: type[ModelT], payload: object) -> ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise JellyfinAPIError(f"Unexpected Jellyfin payload for {model.__name__}") from exc


__all__ = ["JellyfinAPIError", "JellyfinClient"]
