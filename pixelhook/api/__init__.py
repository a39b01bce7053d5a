"""Pixelhook HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application for the pixel webhook.

Usage
-----
Create and run the application::

    from pixelhook.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # full mode with the pixel endpoint

Public API
----------
create_app
    Application factory that configures the Falcon ASGI app with health
    endpoints and, when an ingestor is provided, the pixel routes.
"""

from pixelhook.api.app import create_app

__all__ = ["create_app"]
