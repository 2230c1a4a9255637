"""Failure kinds raised and reported by a collection update run."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from topten.domain.model import ItemKind


class FailureKind(StrEnum):
    CONFIGURATION_MISSING = "configuration_missing"
    EXTRACTION = "extraction"
    RECONCILIATION = "reconciliation"
    CANCELLED = "cancelled"
    COLLABORATOR = "collaborator"


class TopTenError(RuntimeError):
    """Base class for errors raised by the ranking and reconciliation core."""

    kind: FailureKind


class CollaboratorError(TopTenError):
    """Raised by port implementations when an external store cannot serve a request."""

    kind = FailureKind.COLLABORATOR


class ConfigurationMissingError(TopTenError):
    kind = FailureKind.CONFIGURATION_MISSING


class ExtractionError(TopTenError):
    """Playback extraction for one item kind could not complete."""

    kind = FailureKind.EXTRACTION

    def __init__(self, message: str, *, item_kind: ItemKind) -> None:
        super().__init__(message)
        self.item_kind = item_kind


class ReconciliationError(TopTenError):
    """The grouping store rejected or failed a membership edit."""

    kind = FailureKind.RECONCILIATION

    def __init__(self, message: str, *, collection_name: str) -> None:
        super().__init__(message)
        self.collection_name = collection_name


class OperationCancelledError(TopTenError):
    kind = FailureKind.CANCELLED


__all__ = [
    "CollaboratorError",
    "ConfigurationMissingError",
    "ExtractionError",
    "FailureKind",
    "OperationCancelledError",
    "ReconciliationError",
    "TopTenError",
]
