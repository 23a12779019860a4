from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from draftimages.config import SheetConfig, load_sheet_config
from draftimages.services.changeset import resolve_changed_files
from draftimages.services.extractor import DraftImageRecord, extract_from_files
from draftimages.services.sheets import (
    Reconciler,
    ReconcileResult,
    SheetsClient,
    SheetStore,
    check_sheet_schema,
)

from .logger import get_logger
from .settings import RevisionRange, ServiceAccount


ProgressCB = Callable[[str, str], None]
StoreFactory = Callable[[SheetConfig], SheetStore]


def default_store_factory(config: SheetConfig) -> SheetStore:
    return SheetsClient.from_service_account(config, ServiceAccount.from_env())


@dataclass
class SyncResult:
    changed_files: list[str]
    candidates: list[DraftImageRecord] = field(default_factory=list)
    reconcile: ReconcileResult | None = None

    @property
    def appended_count(self) -> int:
        return self.reconcile.appended_count if self.reconcile else 0

    @property
    def nothing_to_do(self) -> bool:
        return not self.changed_files


class Pipeline:
    """Coordinates Changes -> Extract -> Schema check -> Reconcile steps."""

    def __init__(
        self,
        logger=None,
        sheet_config: SheetConfig | None = None,
        store_factory: StoreFactory | None = None,
        repo_root: Path | None = None,
    ) -> None:
        self.logger = logger or get_logger()
        self._sheet_config = sheet_config
        self.store_factory = store_factory or default_store_factory
        self.repo_root = repo_root

    @property
    def sheet_config(self) -> SheetConfig:
        if self._sheet_config is None:
            self._sheet_config = load_sheet_config()
        return self._sheet_config

    def scan(self, revisions: RevisionRange) -> tuple[list[str], list[DraftImageRecord]]:
        """Resolve the change-set and extract candidates; touches no remote state."""

        changed = resolve_changed_files(
            revisions.before,
            revisions.current,
            cwd=self.repo_root,
            logger=self.logger,
        )
        if not changed:
            return changed, []
        candidates = extract_from_files(changed, root=self.repo_root, logger=self.logger)
        return changed, candidates

    def check_schema(self) -> list[str]:
        """Validate the live header row against the configured columns."""

        store = self.store_factory(self.sheet_config)
        try:
            return check_sheet_schema(store, self.sheet_config.schema)
        finally:
            _close(store)

    def run(self, revisions: RevisionRange, progress_cb: ProgressCB | None = None) -> SyncResult:
        def progress(stage: str, detail: str = ""):
            if progress_cb:
                progress_cb(stage, detail)
            self.logger.info("%s - %s", stage, detail)

        # 1. Changed files
        progress("1/4 changes", f"{revisions.before}..{revisions.current}")
        changed, candidates = self.scan(revisions)
        if not changed:
            progress("1/4 changes", "no changed .jsx files, nothing to do")
            return SyncResult(changed_files=changed)

        # 2. Extract
        progress("2/4 extract", f"{len(candidates)} DraftImage(s) in {len(changed)} file(s)")

        # 3. Schema
        config = self.sheet_config
        store = self.store_factory(config)
        try:
            progress("3/4 schema", f"checking header of '{config.sheet_name}'")
            check_sheet_schema(store, config.schema)

            # 4. Reconcile
            progress("4/4 reconcile", "appending new rows")
            reconciler = Reconciler(
                store,
                config.schema,
                added_marker=config.added_marker,
                logger=self.logger,
            )
            outcome = reconciler.run(candidates)
        finally:
            _close(store)
        progress("4/4 reconcile", f"added {outcome.appended_count} row(s) to the spreadsheet")
        return SyncResult(changed_files=changed, candidates=candidates, reconcile=outcome)


def _close(store: SheetStore) -> None:
    close = getattr(store, "close", None)
    if callable(close):
        close()
