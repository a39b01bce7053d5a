"""Access tokens for the Google Sheets API.

The Sheets REST API is called with ``httpx``; only OAuth token minting is
delegated to ``google-auth``. Token refresh performs blocking HTTP, so it
runs in a worker thread to keep the event loop free.
"""

from __future__ import annotations

import asyncio
import typing as typ

import google.auth.exceptions
import msgspec
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account

from pixelhook.sheets.config import SHEETS_SCOPE
from pixelhook.sheets.errors import SheetsAPIError, SheetsConfigError

if typ.TYPE_CHECKING:
    import collections.abc as cabc


@typ.runtime_checkable
class TokenProvider(typ.Protocol):
    """Source of bearer tokens for the Sheets API."""

    async def access_token(self) -> str:
        """Return a currently valid OAuth access token."""
        ...


class StaticTokenProvider:
    """Token provider returning a fixed token (local tooling and tests)."""

    def __init__(self, token: str) -> None:
        """Initialise with the token to hand out."""
        self._token = token

    async def access_token(self) -> str:
        """Return the fixed token."""
        return self._token


class ServiceAccountTokenProvider:
    """Mint and cache access tokens from service-account credentials.

    Parameters
    ----------
    credentials_json
        Raw service-account key JSON.
    scopes
        OAuth scopes requested for the token.

    """

    def __init__(
        self,
        credentials_json: str,
        *,
        scopes: cabc.Sequence[str] = (SHEETS_SCOPE,),
    ) -> None:
        """Store the raw credentials; parsing happens on first use."""
        self._credentials_json = credentials_json
        self._scopes = list(scopes)
        self._credentials: service_account.Credentials | None = None
        self._lock = asyncio.Lock()

    def _load_credentials(self) -> service_account.Credentials:
        try:
            info = msgspec.json.decode(self._credentials_json)
        except msgspec.DecodeError as exc:
            raise SheetsConfigError.invalid_credentials(str(exc)) from exc
        if not isinstance(info, dict):
            detail = "expected a JSON object"
            raise SheetsConfigError.invalid_credentials(detail)
        try:
            return service_account.Credentials.from_service_account_info(
                info, scopes=self._scopes
            )
        except (KeyError, ValueError) as exc:
            raise SheetsConfigError.invalid_credentials(str(exc)) from exc

    async def access_token(self) -> str:
        """Return a valid access token, refreshing it when expired.

        Raises
        ------
        SheetsConfigError
            If the credentials JSON cannot be parsed or the token endpoint
            rejects them.
        SheetsAPIError
            If the token endpoint cannot be reached.

        """
        async with self._lock:
            if self._credentials is None:
                self._credentials = self._load_credentials()
            credentials = self._credentials
            if not credentials.valid:
                try:
                    await asyncio.to_thread(credentials.refresh, GoogleAuthRequest())
                except google.auth.exceptions.TransportError as exc:
                    raise SheetsAPIError.network_error(str(exc)) from exc
                except google.auth.exceptions.GoogleAuthError as exc:
                    raise SheetsConfigError.token_refresh_failed(str(exc)) from exc
            return typ.cast("str", credentials.token)


__all__ = ["ServiceAccountTokenProvider", "StaticTokenProvider", "TokenProvider"]
