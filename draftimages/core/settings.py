from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigError


load_dotenv(override=False)

CURRENT_SHA_ENV = "CURRENT_SHA"
BEFORE_SHA_ENV = "BEFORE_SHA"
SERVICE_ACCOUNT_EMAIL_ENV = "SHEETS_SERVICE_ACCOUNT_EMAIL"
SERVICE_ACCOUNT_KEY_ENV = "SHEETS_SERVICE_ACCOUNT_KEY"
LOG_DIR_ENV = "DRAFTIMAGES_LOG_DIR"


@dataclass(frozen=True)
class RevisionRange:
    """The pair of revisions a push moved between.

    Attributes:
        before: Revision the branch pointed at before the push.
        current: Revision that was pushed.
    """

    before: str
    current: str

    @classmethod
    def from_env(cls) -> "RevisionRange":
        return cls(
            before=_require_env(BEFORE_SHA_ENV),
            current=_require_env(CURRENT_SHA_ENV),
        )


@dataclass(frozen=True)
class ServiceAccount:
    """Google service account credential used to reach the sheet."""

    email: str
    private_key: str

    @classmethod
    def from_env(cls) -> "ServiceAccount":
        email = _require_env(SERVICE_ACCOUNT_EMAIL_ENV)
        key = _require_env(SERVICE_ACCOUNT_KEY_ENV)
        return cls(email=email, private_key=normalize_private_key(key))

    def __repr__(self) -> str:
        return f"ServiceAccount(email={self.email!r}, private_key=<redacted>)"


def normalize_private_key(value: str) -> str:
    """Turn literal ``\\n`` sequences (as stored in CI secrets) into newlines."""

    return value.replace("\\n", "\n")


def _read_env(key: str) -> str | None:
    value = os.getenv(key)
    if value is None:
        return None
    return value.strip()


def _require_env(key: str) -> str:
    value = _read_env(key)
    if not value:
        raise ConfigError(f"Environment variable {key} is not set")
    return value


def _log_dir() -> Path:
    env = _read_env(LOG_DIR_ENV)
    if env:
        return Path(env)
    return Path.cwd() / ".draftimages" / "logs"
