"""Google Sheets integration for the editorial DraftImage sheet."""

from .client import SheetStore, SheetsClient
from .models import ReconcileResult, SheetsAuthError, SheetsError, SheetsRequestError
from .reconciler import Reconciler
from .schema import build_row, check_sheet_schema, validate_header

__all__ = [
    "ReconcileResult",
    "Reconciler",
    "SheetStore",
    "SheetsAuthError",
    "SheetsClient",
    "SheetsError",
    "SheetsRequestError",
    "build_row",
    "check_sheet_schema",
    "validate_header",
]
