"""Service account credentials for the Sheets API."""

from __future__ import annotations

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from draftimages.core.settings import ServiceAccount

from .models import SheetsAuthError

SCOPES = ("https://www.googleapis.com/auth/spreadsheets",)
TOKEN_URI = "https://oauth2.googleapis.com/token"


def build_credentials(account: ServiceAccount) -> service_account.Credentials:
    """Build read/write spreadsheet credentials from an email + private key pair."""

    info = {
        "type": "service_account",
        "client_email": account.email,
        "private_key": account.private_key,
        "token_uri": TOKEN_URI,
    }
    try:
        return service_account.Credentials.from_service_account_info(info, scopes=list(SCOPES))
    except (GoogleAuthError, ValueError, TypeError) as exc:
        raise SheetsAuthError(f"Invalid service account key for {account.email}") from exc


def authorized_session(account: ServiceAccount) -> AuthorizedSession:
    """Return a requests session that signs every call with the service account."""

    return AuthorizedSession(build_credentials(account))


__all__ = ["SCOPES", "TOKEN_URI", "authorized_session", "build_credentials"]
