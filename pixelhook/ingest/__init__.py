"""Pixel event ingestion: payload extraction, row projection and lead capture."""

from __future__ import annotations

from .leads import LeadRecord, derive_lead, first_email, sanitize_phone
from .observability import ErrorCategory, IngestEventLogger, categorize_error
from .outcome import SideChannelResult, call_side_channel
from .profiles import PayloadProfile, PayloadShape, get_profile
from .rows import ESCAPE_MARKER, event_to_row, unescape_cell
from .service import EventIngestor, IngestResult
from .sinks import ContactSink, NewContact, RowSink

__all__ = [
    "ESCAPE_MARKER",
    "ContactSink",
    "ErrorCategory",
    "EventIngestor",
    "IngestEventLogger",
    "IngestResult",
    "LeadRecord",
    "NewContact",
    "PayloadProfile",
    "PayloadShape",
    "RowSink",
    "SideChannelResult",
    "call_side_channel",
    "categorize_error",
    "derive_lead",
    "event_to_row",
    "first_email",
    "get_profile",
    "sanitize_phone",
    "unescape_cell",
]
