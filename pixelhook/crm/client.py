"""HTTP implementation of the :class:`ContactSink` protocol."""

from __future__ import annotations

import typing as typ

import httpx
import msgspec

from pixelhook.crm.errors import CRMAPIError, CRMConfigError, CRMResponseShapeError
from pixelhook.crm.models import (
    ContactCreateRequest,
    ContactEnvelope,
    ContactLookupResponse,
    NoteCreateRequest,
)

if typ.TYPE_CHECKING:
    from pixelhook.crm.config import CRMConfig
    from pixelhook.ingest.sinks import NewContact

_HTTP_ERROR_STATUS_THRESHOLD = 400
_HTTP_NOT_FOUND = 404

_T = typ.TypeVar("_T")


class CRMContactClient:
    """Look up, create and annotate CRM contacts.

    Parameters
    ----------
    config
        API key, base URL and timeout for the CRM.
    http_client
        Optional httpx.AsyncClient for testing. If not provided, the
        instance creates and owns its own client.

    """

    def __init__(
        self,
        config: CRMConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with configuration."""
        if not config.api_key.strip():
            raise CRMConfigError.empty_api_key()

        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)
        self._headers = {
            "Authorization": f"Bearer {config.api_key}",
            "Accept": "application/json",
        }

    @property
    def config(self) -> CRMConfig:
        """Read-only access to the client configuration."""
        return self._config

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    def _url(self, path: str) -> str:
        return f"{self._config.base_url}{path}"

    async def _send(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        body: msgspec.Struct | None = None,
    ) -> httpx.Response:
        headers = dict(self._headers)
        content: bytes | None = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            content = msgspec.json.encode(body)
        try:
            return await self._client.request(
                method,
                self._url(path),
                params=params,
                headers=headers,
                content=content,
            )
        except httpx.TimeoutException as exc:
            raise CRMAPIError.timeout(operation) from exc
        except httpx.RequestError as exc:
            raise CRMAPIError.network_error(operation, str(exc)) from exc

    @staticmethod
    def _check_status(operation: str, response: httpx.Response) -> None:
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise CRMAPIError.http_error(operation, response.status_code)

    @staticmethod
    def _decode(operation: str, response: httpx.Response, model: type[_T]) -> _T:
        try:
            return msgspec.json.decode(response.content, type=model)
        except msgspec.DecodeError as exc:
            raise CRMResponseShapeError.malformed(operation, response.text) from exc

    async def find_contact(self, *, email: str = "", phone: str = "") -> str | None:
        """Return the id of the first contact matching ``email`` or ``phone``.

        Empty identifiers are not sent. When both are empty no request is
        made and ``None`` is returned.

        Raises
        ------
        CRMAPIError
            If the request fails or returns an error status other than 404.
        CRMResponseShapeError
            If the response body cannot be decoded.

        """
        params = {key: value for key, value in (("email", email), ("phone", phone)) if value}
        if not params:
            return None

        response = await self._send("lookup", "GET", "/contacts/lookup", params=params)
        if response.status_code == _HTTP_NOT_FOUND:
            return None
        self._check_status("lookup", response)

        parsed = self._decode("lookup", response, ContactLookupResponse)
        if not parsed.contacts:
            return None
        return parsed.contacts[0].id

    async def create_contact(self, contact: NewContact) -> str:
        """Create a contact and return its id.

        Raises
        ------
        CRMAPIError
            If the request fails or returns an error status.
        CRMResponseShapeError
            If the response does not carry the created contact.

        """
        body = ContactCreateRequest(
            first_name=contact.first_name,
            last_name=contact.last_name,
            source=contact.source,
            email=contact.email,
            phone=contact.phone,
        )
        response = await self._send("create", "POST", "/contacts/", body=body)
        self._check_status("create", response)
        return self._decode("create", response, ContactEnvelope).contact.id

    async def add_note(self, contact_id: str, body: str) -> None:
        """Attach a note to the contact ``contact_id``.

        Raises
        ------
        CRMAPIError
            If the request fails or returns an error status.

        """
        response = await self._send(
            "note",
            "POST",
            f"/contacts/{contact_id}/notes/",
            body=NoteCreateRequest(body=body),
        )
        self._check_status("note", response)


__all__ = ["CRMContactClient"]
