"""Health probe resources for liveness and readiness checks.

These resources are stateless and never call the row or contact sinks.
They are always registered, whether or not the pixel endpoint is.

Usage
-----
Register health endpoints on the Falcon app::

    from pixelhook.api.health.resources import HealthResource, ReadyResource

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource({"sheets": True, "crm": False}))

"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe resource returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests.

        Parameters
        ----------
        _req
            Falcon request (unused).
        resp
            Falcon response populated with liveness status.

        """
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe resource returning ``{"status": "ready"}``.

    When constructed with an integration map, the body also lists which
    sinks are enabled so operators can spot a missing configuration.

    Parameters
    ----------
    integrations
        Optional mapping of integration name to enabled flag.

    """

    def __init__(self, integrations: cabc.Mapping[str, bool] | None = None) -> None:
        """Initialise with the enabled-integration map, if any."""
        self._integrations = dict(integrations or {})

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests.

        Parameters
        ----------
        _req
            Falcon request (unused).
        resp
            Falcon response populated with readiness status.

        """
        media: dict[str, object] = {"status": "ready"}
        if self._integrations:
            media["integrations"] = self._integrations
        resp.media = media
        resp.status = HTTPStatus.OK
