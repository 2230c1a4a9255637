"""Pydantic models describing the subset of the Jellyfin API payloads we read."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _parse_timestamp(value: object) -> object:
    value = _blank_to_none(value)
    if isinstance(value, str):
        # fromisoformat accepts the trailing Z and truncates 7-digit fractions.
        value = datetime.fromisoformat(value)
    if isinstance(value, datetime) and value.year <= 1:
        return None
    return value


class JellyfinBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class UserItemData(JellyfinBaseModel):
    last_played_date: datetime | None = Field(default=None, alias="LastPlayedDate")
    play_count: int = Field(default=0, alias="PlayCount")
    played: bool = Field(default=False, alias="Played")

    _normalize_last_played = field_validator("last_played_date", mode="before")(_parse_timestamp)


class BaseItemPayload(JellyfinBaseModel):
    id: str = Field(alias="Id")
    name: str = Field(default="", alias="Name")
    type: str = Field(alias="Type")
    series_id: str | None = Field(default=None, alias="SeriesId")
    user_data: UserItemData | None = Field(default=None, alias="UserData")

    _normalize_series_id = field_validator("series_id", mode="before")(_blank_to_none)


class ItemsResult(JellyfinBaseModel):
    items: list[BaseItemPayload] = Field(default_factory=list["BaseItemPayload"], alias="Items")
    total_record_count: int | None = Field(default=None, alias="TotalRecordCount")
    start_index: int = Field(default=0, alias="StartIndex")


class UserPayload(JellyfinBaseModel):
    id: str = Field(alias="Id")
    name: str = Field(default="", alias="Name")


class CollectionCreationResult(JellyfinBaseModel):
    id: str = Field(alias="Id")
