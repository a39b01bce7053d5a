"""Application factory for the Pixelhook Falcon ASGI application.

This module provides ``create_app()`` which builds and configures the
Falcon ASGI application with health endpoints and, when an ingestor is
supplied, the pixel webhook routes.

Usage
-----
Create a health-only app::

    app = create_app()

Create a full app with the pixel endpoint::

    from pixelhook.api.app import AppDependencies, create_app

    deps = AppDependencies(ingestor=ingestor)
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from pixelhook.api.health.resources import HealthResource, ReadyResource

if typ.TYPE_CHECKING:
    from pixelhook.ingest.service import EventIngestor

__all__ = ["PIXEL_ROUTES", "AppDependencies", "IngestorShutdown", "create_app"]

# Both paths accept GET and POST; /api/pixel keeps older pixel snippets working.
PIXEL_ROUTES: tuple[str, ...] = ("/pixel", "/api/pixel")


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    ingestor
        Event ingestor backing the pixel routes. When ``None`` only health
        endpoints are registered.
    integrations
        Enabled flag per integration, reported by ``/ready``.

    """

    ingestor: EventIngestor | None = None
    integrations: dict[str, bool] = dc.field(default_factory=dict)


class IngestorShutdown:
    """Close the ingestor's HTTP clients when the ASGI server shuts down."""

    def __init__(self, ingestor: EventIngestor) -> None:
        self._ingestor = ingestor

    async def process_shutdown(
        self, scope: dict[str, typ.Any], event: dict[str, typ.Any]
    ) -> None:
        """Handle the lifespan shutdown event."""
        await self._ingestor.aclose()


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    When *dependencies* provides an ingestor, ``GET|POST /pixel`` and
    ``GET|POST /api/pixel`` are registered and the ingestor is closed on
    lifespan shutdown. ``/health`` and ``/ready`` are always available.

    Parameters
    ----------
    dependencies
        Optional application dependencies.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    ingestor = dependencies.ingestor if dependencies is not None else None
    middleware = [IngestorShutdown(ingestor)] if ingestor is not None else []
    app = falcon.asgi.App(middleware=middleware)

    integrations = dependencies.integrations if dependencies is not None else {}
    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(integrations))

    if ingestor is not None:
        from pixelhook.api.pixel.resources import PixelResource

        pixel = PixelResource(ingestor)
        for route in PIXEL_ROUTES:
            app.add_route(route, pixel)

    return app
