"""Domain models and exceptions for the Google Sheets integration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from draftimages.core.errors import DraftImagesError


class SheetsError(DraftImagesError):
    """Base error raised for Google Sheets failures."""

    def __init__(self, message: str, *, status_code: int | None = None, payload: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}


class SheetsAuthError(SheetsError):
    """Raised when the service account cannot authenticate or lacks access."""


class SheetsRequestError(SheetsError):
    """Raised for transport failures and unexpected HTTP responses."""


@dataclass(slots=True)
class ReconcileResult:
    """Outcome of one reconciliation pass."""

    appended: list[list[str]] = field(default_factory=list)
    skipped_existing: list[str] = field(default_factory=list)
    unactioned: list[str] = field(default_factory=list)
    missing_id_documents: list[str] = field(default_factory=list)

    @property
    def appended_count(self) -> int:
        return len(self.appended)


__all__ = [
    "ReconcileResult",
    "SheetsAuthError",
    "SheetsError",
    "SheetsRequestError",
]
