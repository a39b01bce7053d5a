"""Pixelhook runtime entrypoint.

This module provides the ASGI application factory used by Granian. It
reads :class:`~pixelhook.config.PixelhookConfig` from the environment once,
builds the event ingestor and delegates app construction to
:func:`pixelhook.api.app.create_app`.

Configuration is driven by environment variables:

- ``PIXELHOOK_HOST``: Bind address (default ``0.0.0.0``)
- ``PIXELHOOK_PORT``: Listen port (default ``8080``)
- ``PIXELHOOK_LOG_LEVEL``: Log level (default ``INFO``)
- ``PIXELHOOK_PROFILE``, ``PIXELHOOK_SHEET_*``, ``PIXELHOOK_CRM_*``: see
  :mod:`pixelhook.config`

Run the service directly with ``python -m pixelhook.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from pixelhook.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

# TCP port number range limits
_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid PIXELHOOK_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from environment configuration.

    Returns
    -------
    falcon.asgi.App
        App serving ``/health``, ``/ready`` and the pixel routes.

    Raises
    ------
    PixelhookConfigError
        If ``PIXELHOOK_PROFILE`` names an unknown profile.

    """
    from pixelhook.api.app import AppDependencies
    from pixelhook.api.app import create_app as _create_api_app
    from pixelhook.api.factory import build_ingestor
    from pixelhook.config import PixelhookConfig

    config = PixelhookConfig.from_env()
    integrations = {"sheets": config.sheets is not None, "crm": config.crm is not None}
    log_info(
        logger,
        "Pixel webhook configured (profile=%s sheets=%s crm=%s)",
        config.profile.name,
        integrations["sheets"],
        integrations["crm"],
    )
    deps = AppDependencies(ingestor=build_ingestor(config), integrations=integrations)
    return _create_api_app(deps)


def main() -> None:
    """Start the Pixelhook server using Granian.

    Reads ``PIXELHOOK_HOST``, ``PIXELHOOK_PORT``, and ``PIXELHOOK_LOG_LEVEL``
    from the environment and starts the ASGI server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("PIXELHOOK_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port = _parse_port(os.environ.get("PIXELHOOK_PORT", "8080"))
    log_level_str = os.environ.get("PIXELHOOK_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid PIXELHOOK_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting Pixelhook on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "pixelhook.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
