"""Configuration helpers for the editorial spreadsheet.

Loads ``sheet.yaml`` into immutable structures: where the sheet lives and
the ordered column schema its header row must carry. Scalar values can be
overridden from the environment so a fork can point at its own copy of the
sheet without editing the file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from draftimages.core.errors import ConfigError
from draftimages.services.extractor.models import DraftImageRecord


CONFIG_DIR = Path(__file__).resolve().parent
DEFAULT_SHEET_CONFIG_PATH = CONFIG_DIR / "sheet.yaml"
DEFAULT_TIMEOUT = 30.0
DEFAULT_ADDED_MARKER = "TRUE"

SPREADSHEET_ID_ENV = "SHEETS_SPREADSHEET_ID"
SHEET_NAME_ENV = "SHEETS_SHEET_NAME"
TIMEOUT_ENV = "SHEETS_TIMEOUT_SEC"

ID_KEY = "id"
ADDED_KEY = "added_to_worksheet"


def column_letter(index: int) -> str:
    """Return the spreadsheet letter for a zero-based column index."""

    n = index + 1
    letters = ""
    while n > 0:
        n, rem = divmod(n - 1, 26)
        letters = chr(65 + rem) + letters
    return letters


@dataclass(frozen=True)
class Column:
    """One expected header cell."""

    key: str
    title: str
    index: int

    @property
    def letter(self) -> str:
        return column_letter(self.index)


@dataclass(frozen=True)
class ColumnSchema:
    """Ordered, immutable column layout of the sheet."""

    columns: tuple[Column, ...]

    @classmethod
    def from_pairs(cls, pairs: list[tuple[str, str]]) -> "ColumnSchema":
        return cls(columns=tuple(Column(key=key, title=title, index=idx) for idx, (key, title) in enumerate(pairs)))

    def __len__(self) -> int:
        return len(self.columns)

    @property
    def titles(self) -> tuple[str, ...]:
        return tuple(column.title for column in self.columns)

    @property
    def last_letter(self) -> str:
        return self.columns[-1].letter

    def column(self, key: str) -> Column:
        for column in self.columns:
            if column.key == key:
                return column
        raise KeyError(key)


@dataclass(frozen=True)
class SheetConfig:
    """Location of the editorial sheet and its expected layout."""

    spreadsheet_id: str
    sheet_name: str
    schema: ColumnSchema
    added_marker: str = DEFAULT_ADDED_MARKER
    timeout_sec: float = DEFAULT_TIMEOUT

    def a1(self, cells: str) -> str:
        """Return an A1 range on the configured tab, e.g. ``'Draft images'!A1:I1``."""

        escaped = self.sheet_name.replace("'", "''")
        return f"'{escaped}'!{cells}"

    @property
    def header_range(self) -> str:
        # Whole row: a range capped at the last column would hide extra titles.
        return self.a1("1:1")

    @property
    def data_range(self) -> str:
        return self.a1(f"A2:{self.schema.last_letter}")


def load_sheet_config(path: str | Path | None = None) -> SheetConfig:
    """Load the sheet configuration, applying environment overrides."""

    config_path = Path(path) if path else DEFAULT_SHEET_CONFIG_PATH
    raw = _load_yaml(config_path)
    node = raw.get("sheet")
    if not isinstance(node, Mapping):
        raise ConfigError(f"{config_path} is missing the 'sheet' section")
    return _build_sheet_config(node)


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Sheet configuration not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigError("Sheet configuration must be a mapping")
    return data


def _build_sheet_config(node: Mapping[str, Any]) -> SheetConfig:
    spreadsheet_id = _read_env(SPREADSHEET_ID_ENV) or _require_str(node, "spreadsheet_id")
    sheet_name = _read_env(SHEET_NAME_ENV) or _require_str(node, "sheet_name")
    marker = node.get("added_marker", DEFAULT_ADDED_MARKER)
    if not isinstance(marker, str) or not marker:
        raise ConfigError("sheet.added_marker must be a non-empty string")
    return SheetConfig(
        spreadsheet_id=spreadsheet_id,
        sheet_name=sheet_name,
        schema=_normalize_columns(node.get("columns")),
        added_marker=marker,
        timeout_sec=_resolve_timeout(node.get("timeout_sec", DEFAULT_TIMEOUT)),
    )


def _normalize_columns(node: Any) -> ColumnSchema:
    if not isinstance(node, list) or not node:
        raise ConfigError("sheet.columns must be a non-empty list")
    known = {field.name for field in fields(DraftImageRecord)}
    pairs: list[tuple[str, str]] = []
    seen: set[str] = set()
    for idx, spec in enumerate(node):
        if not isinstance(spec, Mapping):
            raise ConfigError(f"sheet.columns[{idx}] must be a mapping")
        key = _require_str(spec, "key", where=f"sheet.columns[{idx}]")
        title = _require_str(spec, "title", where=f"sheet.columns[{idx}]")
        if key not in known:
            raise ConfigError(f"sheet.columns[{idx}] has unknown key '{key}'")
        if key in seen:
            raise ConfigError(f"sheet.columns[{idx}] repeats key '{key}'")
        seen.add(key)
        pairs.append((key, title))
    for required in (ID_KEY, ADDED_KEY):
        if required not in seen:
            raise ConfigError(f"sheet.columns must define the '{required}' column")
    if pairs[0][0] != ID_KEY:
        raise ConfigError("sheet.columns must start with the 'id' column")
    return ColumnSchema.from_pairs(pairs)


def _resolve_timeout(value: Any) -> float:
    env = _read_env(TIMEOUT_ENV)
    raw = env if env else value
    try:
        timeout = float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Request timeout must be a number, got {raw!r}") from exc
    if timeout <= 0:
        raise ConfigError("Request timeout must be positive")
    return timeout


def _require_str(node: Mapping[str, Any], key: str, *, where: str = "sheet") -> str:
    value = node.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{where}.{key} must be a non-empty string")
    return value.strip()


def _read_env(key: str) -> str | None:
    value = os.getenv(key)
    if value is None:
        return None
    return value.strip() or None


__all__ = [
    "Column",
    "ColumnSchema",
    "SheetConfig",
    "column_letter",
    "load_sheet_config",
]
