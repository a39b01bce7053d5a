"""Pixel webhook resource.

``GET`` and ``POST`` are handled identically and always answer
``204 No Content`` with an empty body: the firing pixel never sees sink
errors, malformed input or unexpected failures.

Usage
-----
Register the resource on the Falcon app::

    from pixelhook.api.pixel.resources import PixelResource

    app.add_route("/pixel", PixelResource(ingestor))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import falcon

from pixelhook.ingest.payload import build_payload
from pixelhook.logging import get_logger, log_exception, log_warning

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from pixelhook.ingest.service import EventIngestor

__all__ = ["PixelResource"]

logger = get_logger(__name__)

_UNREADABLE_BODY_ERRORS = (
    falcon.MediaNotFoundError,
    falcon.MediaMalformedError,
    falcon.HTTPUnsupportedMediaType,
)


async def _read_body(req: Request) -> object:
    """Return the decoded request body, or ``None`` when it is unusable."""
    try:
        return await req.get_media(default_when_empty=None)
    except _UNREADABLE_BODY_ERRORS as exc:
        log_warning(logger, "Ignoring unreadable pixel request body: %s", exc)
        return None


class PixelResource:
    """Receive pixel events and hand them to the ingestor.

    Parameters
    ----------
    ingestor
        Event ingestor configured with the deployment profile and sinks.

    """

    def __init__(self, ingestor: EventIngestor) -> None:
        """Initialise with the shared event ingestor."""
        self._ingestor = ingestor

    async def on_get(self, req: Request, resp: Response) -> None:
        """Handle GET /pixel requests."""
        await self._handle(req, resp)

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle POST /pixel requests."""
        await self._handle(req, resp)

    async def _handle(self, req: Request, resp: Response) -> None:
        try:
            body = await _read_body(req)
            payload = build_payload(self._ingestor.profile, req.params, body)
            await self._ingestor.ingest(payload)
        except Exception as exc:  # noqa: BLE001 - the pixel always receives 204
            log_exception(logger, "Pixel request processing failed", exc)
        resp.status = HTTPStatus.NO_CONTENT
