"""Playback extraction and ranking per item kind."""

from __future__ import annotations

from .extraction import PlaybackSignalExtractor
from .ranker import SortKey, by_play_count, by_unique_users, rank_items
from .strategies import (
    MovieRankingStrategy,
    PhaseResult,
    RankingRequest,
    RankingStrategy,
    SeriesRankingStrategy,
)

__all__ = [
    "MovieRankingStrategy",
    "PhaseResult",
    "PlaybackSignalExtractor",
    "RankingRequest",
    "RankingStrategy",
    "SeriesRankingStrategy",
    "SortKey",
    "by_play_count",
    "by_unique_users",
    "rank_items",
]
