"""Append new DraftImage rows and report rows that were never actioned."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from draftimages.config import ADDED_KEY, ID_KEY, ColumnSchema
from draftimages.core.logger import get_logger
from draftimages.services.extractor.models import DraftImageRecord

from .client import SheetStore
from .models import ReconcileResult
from .schema import build_row, pad_row

LOGGER = get_logger()


def existing_ids(rows: Iterable[Sequence[str]], schema: ColumnSchema) -> set[str]:
    """Collect the identifiers already present in the sheet."""

    index = schema.column(ID_KEY).index
    return {row[index] for row in (pad_row(r, len(schema)) for r in rows) if row[index]}


def select_new_records(
    candidates: Iterable[DraftImageRecord],
    known_ids: set[str],
) -> tuple[list[DraftImageRecord], list[str], list[DraftImageRecord]]:
    """Split candidates into (to append, already-present ids, without id), keeping discovery order.

    Candidates without an id are appended too, with an empty id cell, and are
    also returned on their own so the caller can report them. Duplicates among
    the candidates themselves are not collapsed.
    """

    new: list[DraftImageRecord] = []
    present: list[str] = []
    missing_id: list[DraftImageRecord] = []
    for record in candidates:
        if record.id and record.id in known_ids:
            present.append(record.id)
            continue
        if not record.id:
            missing_id.append(record)
        new.append(record)
    return new, present, missing_id


def find_unactioned(
    rows: Iterable[Sequence[str]],
    candidate_ids: set[str],
    schema: ColumnSchema,
    marker: str,
) -> list[str]:
    """Ids of rows not yet added to a worksheet and not referenced by any candidate."""

    id_index = schema.column(ID_KEY).index
    added_index = schema.column(ADDED_KEY).index
    unactioned: list[str] = []
    for raw in rows:
        row = pad_row(raw, len(schema))
        if not row[id_index] or row[added_index] == marker:
            continue
        if row[id_index] in candidate_ids:
            continue
        unactioned.append(row[id_index])
    return unactioned


class Reconciler:
    """Synchronise DraftImage candidates into the sheet by identifier."""

    def __init__(
        self,
        store: SheetStore,
        schema: ColumnSchema,
        *,
        added_marker: str,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._schema = schema
        self._marker = added_marker
        self._logger = logger or LOGGER

    def run(self, candidates: Sequence[DraftImageRecord]) -> ReconcileResult:
        rows = self._store.read_data_rows()
        known = existing_ids(rows, self._schema)
        new, present, missing_id = select_new_records(candidates, known)

        result = ReconcileResult(
            skipped_existing=present,
            missing_id_documents=[record.document_name for record in missing_id],
        )
        if result.missing_id_documents:
            self._logger.warning(
                "reconcile.missing_id appending %d DraftImage(s) with an empty id from: %s",
                len(missing_id),
                ", ".join(result.missing_id_documents),
            )

        result.appended = [build_row(record, self._schema) for record in new]
        if result.appended:
            self._store.append_rows(result.appended)

        candidate_ids = {record.id for record in candidates if record.id}
        result.unactioned = find_unactioned(rows, candidate_ids, self._schema, self._marker)
        if result.unactioned:
            self._logger.warning(
                "reconcile.unactioned The following DraftImages are in the spreadsheet but no "
                "longer referenced and not added to a worksheet: %s",
                ", ".join(result.unactioned),
            )

        self._logger.info(
            "reconcile.done appended=%d already_present=%d",
            result.appended_count,
            len(present),
        )
        return result


__all__ = ["Reconciler", "existing_ids", "find_unactioned", "select_new_records"]
