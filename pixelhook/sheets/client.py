"""Google Sheets implementation of the :class:`RowSink` protocol."""

from __future__ import annotations

import typing as typ
import urllib.parse

import httpx
import msgspec

from pixelhook.sheets.errors import SheetsAPIError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from pixelhook.ingest.rows import Row
    from pixelhook.sheets.auth import TokenProvider
    from pixelhook.sheets.config import SheetsConfig

_HTTP_ERROR_STATUS_THRESHOLD = 400
_INSERT_DATA_OPTION = "INSERT_ROWS"


class _AppendUpdates(msgspec.Struct, kw_only=True):
    updated_rows: int | None = msgspec.field(default=None, name="updatedRows")


class AppendValuesResponse(msgspec.Struct, kw_only=True):
    """Subset of the ``values.append`` response used for logging."""

    spreadsheet_id: str | None = msgspec.field(default=None, name="spreadsheetId")
    table_range: str | None = msgspec.field(default=None, name="tableRange")
    updates: _AppendUpdates | None = None


def _error_detail(response: httpx.Response) -> str:
    """Extract the API error message from an error response, if any."""
    try:
        body = response.json()
    except ValueError:
        return ""
    if not isinstance(body, dict):
        return ""
    error = body.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    return ""


class GoogleSheetsRowSink:
    """Append projected rows to a Google Sheet.

    Parameters
    ----------
    config
        Sheet id, target range and API settings.
    token_provider
        Source of OAuth bearer tokens.
    http_client
        Optional httpx.AsyncClient for testing. If not provided, the
        instance creates and owns its own client.

    """

    def __init__(
        self,
        config: SheetsConfig,
        token_provider: TokenProvider,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the sink with configuration and a token source."""
        self._config = config
        self._tokens = token_provider
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s,
            headers={"Accept": "application/json"},
        )

    @property
    def config(self) -> SheetsConfig:
        """Read-only access to the sink configuration."""
        return self._config

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    def _append_url(self) -> str:
        sheet_range = urllib.parse.quote(self._config.range, safe="!:")
        return f"{self._config.endpoint}/{self._config.sheet_id}/values/{sheet_range}:append"

    async def append_rows(self, rows: cabc.Sequence[Row]) -> int:
        """Append ``rows`` after the last row of the configured range.

        Parameters
        ----------
        rows
            Rectangular rows of scalar cells.

        Returns
        -------
        int
            Number of rows reported as updated by the API, or ``len(rows)``
            when the response omits the count.

        Raises
        ------
        SheetsAPIError
            If the request fails, times out or returns an error status.
        SheetsConfigError
            If the token provider cannot parse the credentials.

        """
        token = await self._tokens.access_token()
        try:
            response = await self._client.post(
                self._append_url(),
                params={
                    "valueInputOption": self._config.value_input_option,
                    "insertDataOption": _INSERT_DATA_OPTION,
                },
                headers={"Authorization": f"Bearer {token}"},
                json={"values": [list(row) for row in rows]},
            )
        except httpx.TimeoutException as exc:
            raise SheetsAPIError.timeout() from exc
        except httpx.RequestError as exc:
            raise SheetsAPIError.network_error(str(exc)) from exc

        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise SheetsAPIError.http_error(response.status_code, _error_detail(response))

        try:
            parsed = msgspec.json.decode(response.content, type=AppendValuesResponse)
        except msgspec.DecodeError:
            return len(rows)
        if parsed.updates is None or parsed.updates.updated_rows is None:
            return len(rows)
        return parsed.updates.updated_rows


__all__ = ["AppendValuesResponse", "GoogleSheetsRowSink"]
