"""Google Sheets v4 values client."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Protocol, Sequence
from urllib.parse import quote

import requests
from google.auth.exceptions import GoogleAuthError
from requests import Response
from requests.exceptions import RequestException, Timeout

from draftimages.config import SheetConfig
from draftimages.core.logger import get_logger
from draftimages.core.settings import ServiceAccount

from .auth import authorized_session
from .models import SheetsAuthError, SheetsRequestError

LOGGER = get_logger()

BASE_URL = "https://sheets.googleapis.com/v4/spreadsheets"
USER_AGENT = "draftimages/0.1"


class SheetStore(Protocol):
    """Remote tabular store contract used by validation and reconciliation."""

    def read_header(self) -> list[str]:
        """Return the cells of the first row."""

    def read_data_rows(self) -> list[list[str]]:
        """Return every row below the header."""

    def append_rows(self, rows: Sequence[Sequence[str]]) -> None:
        """Append rows verbatim in a single write."""


class SheetsClient(SheetStore):
    """Read and append rows of one tab of one spreadsheet."""

    def __init__(
        self,
        config: SheetConfig,
        *,
        session: requests.Session,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._session = session
        self._session.headers.setdefault("User-Agent", USER_AGENT)
        self._logger = logger or LOGGER

    @classmethod
    def from_service_account(cls, config: SheetConfig, account: ServiceAccount) -> "SheetsClient":
        """Instantiate a client authenticated as ``account``."""

        return cls(config, session=authorized_session(account))

    @property
    def config(self) -> SheetConfig:
        return self._config

    def read_range(self, a1_range: str) -> list[list[str]]:
        """Return the formatted cell values of ``a1_range`` row by row."""

        response = self._request("GET", self._values_url(a1_range))
        payload = self._safe_json(response)
        values = payload.get("values") or []
        rows = [[str(cell) for cell in row] for row in values]
        self._logger.info("sheets.http read range=%s rows=%d", a1_range, len(rows))
        return rows

    def append_values(self, a1_range: str, rows: Sequence[Sequence[str]]) -> dict[str, object]:
        """Append ``rows`` after the table found at ``a1_range`` without formula parsing."""

        response = self._request(
            "POST",
            self._values_url(a1_range) + ":append",
            params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
            json_body={"values": [list(row) for row in rows]},
        )
        payload = self._safe_json(response)
        updates = payload.get("updates") or {}
        self._logger.info(
            "sheets.http append range=%s rows=%d updated_range=%s",
            a1_range,
            len(rows),
            updates.get("updatedRange") if isinstance(updates, Mapping) else None,
        )
        return payload

    def read_header(self) -> list[str]:
        rows = self.read_range(self._config.header_range)
        return rows[0] if rows else []

    def read_data_rows(self) -> list[list[str]]:
        return self.read_range(self._config.data_range)

    def append_rows(self, rows: Sequence[Sequence[str]]) -> None:
        self.append_values(self._config.a1("A1"), rows)

    def close(self) -> None:
        """Release the underlying HTTP session."""

        self._session.close()

    # Internal helpers -------------------------------------------------

    def _values_url(self, a1_range: str) -> str:
        return f"{BASE_URL}/{self._config.spreadsheet_id}/values/{quote(a1_range, safe='')}"

    def _request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Mapping[str, object] | None = None,
        expected_status: Iterable[int] = (200,),
    ) -> Response:
        try:
            response = self._session.request(
                method,
                url,
                params=dict(params or {}),
                json=json_body,
                timeout=self._config.timeout_sec,
            )
        except GoogleAuthError as exc:
            raise SheetsAuthError(f"Could not authorize Sheets request: {exc}") from exc
        except Timeout as exc:
            raise SheetsRequestError("Sheets request timed out", payload={"url": url}) from exc
        except RequestException as exc:
            raise SheetsRequestError(
                f"Sheets request failed: {type(exc).__name__}", payload={"url": url}
            ) from exc

        status = response.status_code
        if status in tuple(expected_status):
            return response

        payload = self._safe_json(response)
        message = self._error_message(payload)
        self._logger.error(
            "sheets.http unexpected_status method=%s status=%d message=%s", method, status, message
        )
        if status in (401, 403):
            raise SheetsAuthError(
                f"Sheets denied access ({status}): {message}", status_code=status, payload=payload
            )
        if status == 404:
            raise SheetsRequestError(
                f"Spreadsheet or sheet not found: {message}", status_code=status, payload=payload
            )
        raise SheetsRequestError(f"Unexpected status {status}: {message}", status_code=status, payload=payload)

    def _error_message(self, payload: Mapping[str, object]) -> str:
        error = payload.get("error")
        if isinstance(error, Mapping):
            return str(error.get("message") or error.get("status") or "")
        return str(payload.get("body") or "")

    def _safe_json(self, response: Response) -> dict[str, object]:
        try:
            data = response.json()
        except ValueError:
            text = response.text
            if len(text) > 200:
                text = text[:200] + "..."
            return {"body": text}
        return data if isinstance(data, dict) else {"body": data}


__all__ = ["BASE_URL", "SheetStore", "SheetsClient"]
