from __future__ import annotations

import faulthandler
import os
import socket
import sys
import tempfile
from pathlib import Path
from typing import Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

faulthandler.enable()  # Ensure crashes emit tracebacks.
socket.setdefaulttimeout(10)

# Keep the application log out of the working tree.
os.environ.setdefault("DRAFTIMAGES_LOG_DIR", tempfile.mkdtemp(prefix="draftimages-logs-"))

from draftimages.config import SheetConfig, load_sheet_config

ENV_KEYS = (
    "CURRENT_SHA",
    "BEFORE_SHA",
    "SHEETS_SERVICE_ACCOUNT_EMAIL",
    "SHEETS_SERVICE_ACCOUNT_KEY",
    "SHEETS_SPREADSHEET_ID",
    "SHEETS_SHEET_NAME",
    "SHEETS_TIMEOUT_SEC",
)

HEADER = [
    "UUID",
    "Original URL",
    "Comment",
    "Document",
    "Figma URL",
    "Design Review",
    "New URL to add to jsx-images.mathspace.co",
    "Editor review",
    "Added to Worksheet?",
]


class FakeStore:
    """In-memory stand-in for the spreadsheet."""

    def __init__(self, header: Sequence[str] = HEADER, rows: Sequence[Sequence[str]] = ()) -> None:
        self.header = list(header)
        self.rows = [list(row) for row in rows]
        self.appended: list[list[list[str]]] = []
        self.calls: list[str] = []
        self.closed = False

    def read_header(self) -> list[str]:
        self.calls.append("read_header")
        return list(self.header)

    def read_data_rows(self) -> list[list[str]]:
        self.calls.append("read_data_rows")
        return [list(row) for row in self.rows]

    def append_rows(self, rows: Sequence[Sequence[str]]) -> None:
        self.calls.append("append_rows")
        self.appended.append([list(row) for row in rows])

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def sheet_config() -> SheetConfig:
    return load_sheet_config()


@pytest.fixture
def fake_store() -> type[FakeStore]:
    return FakeStore


@pytest.fixture
def header() -> list[str]:
    return list(HEADER)
