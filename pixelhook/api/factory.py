"""Factory for building an EventIngestor from configuration.

This module provides ``build_ingestor()`` which wires the configured
payload profile, Google Sheets row sink and CRM contact sink into a
single ``EventIngestor``. Integrations whose configuration is absent are
left unset, which disables them.

Usage
-----
Build an ingestor for the API layer::

    from pixelhook.api.factory import build_ingestor
    from pixelhook.config import PixelhookConfig

    ingestor = build_ingestor(PixelhookConfig.from_env())

"""

from __future__ import annotations

import typing as typ

from pixelhook.ingest.observability import IngestEventLogger
from pixelhook.ingest.service import DEFAULT_CONTACT_SOURCE, EventIngestor

if typ.TYPE_CHECKING:
    from pixelhook.config import PixelhookConfig
    from pixelhook.ingest.sinks import ContactSink, RowSink

__all__ = ["build_ingestor"]


def build_ingestor(config: PixelhookConfig) -> EventIngestor:
    """Build an ``EventIngestor`` from start-up configuration.

    Parameters
    ----------
    config
        Process-wide configuration.

    Returns
    -------
    EventIngestor
        Ingestor using the configured profile and enabled sinks.

    """
    row_sink: RowSink | None = None
    if config.sheets is not None:
        from pixelhook.sheets.auth import ServiceAccountTokenProvider
        from pixelhook.sheets.client import GoogleSheetsRowSink

        row_sink = GoogleSheetsRowSink(
            config.sheets,
            ServiceAccountTokenProvider(config.sheets.credentials_json),
        )

    contact_sink: ContactSink | None = None
    contact_source = DEFAULT_CONTACT_SOURCE
    if config.crm is not None:
        from pixelhook.crm.client import CRMContactClient

        contact_sink = CRMContactClient(config.crm)
        contact_source = config.crm.source

    return EventIngestor(
        config.profile,
        row_sink=row_sink,
        contact_sink=contact_sink,
        contact_source=contact_source,
        event_logger=IngestEventLogger(),
    )
