"""Header validation and row building against the configured column schema."""

from __future__ import annotations

from typing import Sequence

from draftimages.config import ColumnSchema
from draftimages.core.errors import SchemaMismatchError
from draftimages.services.extractor.models import DraftImageRecord

from .client import SheetStore


def validate_header(header: Sequence[str], schema: ColumnSchema) -> None:
    """Raise :class:`SchemaMismatchError` unless ``header`` matches ``schema`` exactly."""

    if len(header) != len(schema):
        raise SchemaMismatchError(f"Expected {len(schema)} columns but found {len(header)}")
    for column, actual in zip(schema.columns, header):
        if actual != column.title:
            raise SchemaMismatchError(
                f"Column {column.index} ({column.letter}) should be "
                f"'{column.title}' but is '{actual}'"
            )


def check_sheet_schema(store: SheetStore, schema: ColumnSchema) -> list[str]:
    """Fetch the live header row and validate it; returns the header on success."""

    header = store.read_header()
    validate_header(header, schema)
    return header


def build_row(record: DraftImageRecord, schema: ColumnSchema) -> list[str]:
    """Lay out ``record`` as sheet cells; absent values become empty cells."""

    row: list[str] = []
    for column in schema.columns:
        value = getattr(record, column.key)
        row.append("" if value is None else str(value))
    return row


def pad_row(row: Sequence[str], width: int) -> list[str]:
    """Right-pad (or truncate) a row read from the API to ``width`` cells."""

    if len(row) >= width:
        return list(row[:width])
    return list(row) + [""] * (width - len(row))


__all__ = ["build_row", "check_sheet_schema", "pad_row", "validate_header"]
