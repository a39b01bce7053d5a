"""Observability primitives for pixel ingestion.

Provides structured log events and error categorization for each request
handled by the ingestor. Events are emitted as ``[event.type] key=value``
lines suitable for parsing by log aggregators.
"""

from __future__ import annotations

import enum
import typing as typ

import httpx

from pixelhook.crm.errors import CRMAPIError, CRMConfigError, CRMResponseShapeError
from pixelhook.logging import get_logger, log_debug, log_error, log_info
from pixelhook.sheets.errors import SheetsAPIError, SheetsConfigError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from pixelhook.ingest.service import IngestResult

logger = get_logger(__name__)

# HTTP status code threshold for server errors (5xx)
_HTTP_SERVER_ERROR_THRESHOLD = 500


class IngestEventType(enum.StrEnum):
    """Structured log event types for ingestion observability."""

    REQUEST_RECEIVED = "ingest.request.received"
    REQUEST_EMPTY = "ingest.request.empty"
    REQUEST_COMPLETED = "ingest.request.completed"
    ROWS_APPENDED = "ingest.rows.appended"
    ROWS_SKIPPED = "ingest.rows.skipped"
    LEAD_SKIPPED = "ingest.lead.skipped"
    CONTACT_CREATED = "ingest.contact.created"
    CONTACT_NOTED = "ingest.contact.noted"
    SIDE_CHANNEL_FAILED = "ingest.side_channel.failed"


class ErrorCategory(enum.StrEnum):
    """Categories for side-channel failure classification."""

    TRANSIENT = "transient"
    CLIENT_ERROR = "client_error"
    SCHEMA_DRIFT = "schema_drift"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (CRMResponseShapeError, ErrorCategory.SCHEMA_DRIFT),
    (CRMConfigError, ErrorCategory.CONFIGURATION),
    (SheetsConfigError, ErrorCategory.CONFIGURATION),
    (httpx.TransportError, ErrorCategory.TRANSIENT),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize a side-channel failure for alerting purposes.

    API errors with a 5xx status, or with no status at all (timeouts and
    network failures), are transient; other API errors are client errors.
    """
    if isinstance(exc, CRMAPIError | SheetsAPIError):
        if exc.status_code is None or exc.status_code >= _HTTP_SERVER_ERROR_THRESHOLD:
            return ErrorCategory.TRANSIENT
        return ErrorCategory.CLIENT_ERROR

    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category

    return ErrorCategory.UNKNOWN


class IngestEventLogger:
    """Emit structured ingestion events via femtologging."""

    def log_request_received(self, profile: str, event_count: int) -> None:
        """Log receipt of a pixel request."""
        log_info(
            logger,
            "[%s] profile=%s event_count=%d",
            IngestEventType.REQUEST_RECEIVED,
            profile,
            event_count,
        )

    def log_payload(self, payload: object) -> None:
        """Log the raw request payload at DEBUG level."""
        log_debug(logger, "Received payload: %r", payload)

    def log_request_empty(self, profile: str) -> None:
        """Log a request that carried no events."""
        log_info(
            logger,
            "[%s] profile=%s reason=no_events",
            IngestEventType.REQUEST_EMPTY,
            profile,
        )

    def log_rows_appended(self, row_count: int, appended: int) -> None:
        """Log a successful bulk append."""
        log_info(
            logger,
            "[%s] row_count=%d appended=%d",
            IngestEventType.ROWS_APPENDED,
            row_count,
            appended,
        )

    def log_rows_skipped(self, row_count: int, reason: str) -> None:
        """Log a bulk append that was not attempted."""
        log_info(
            logger,
            "[%s] row_count=%d reason=%s",
            IngestEventType.ROWS_SKIPPED,
            row_count,
            reason,
        )

    def log_lead_skipped(self, event_index: int, reason: str) -> None:
        """Log an event whose lead did not qualify for CRM capture."""
        log_debug(
            logger,
            "[%s] event_index=%d reason=%s",
            IngestEventType.LEAD_SKIPPED,
            event_index,
            reason,
        )

    def log_contact_created(self, event_index: int, contact_id: str) -> None:
        """Log creation of a CRM contact."""
        log_info(
            logger,
            "[%s] event_index=%d contact_id=%s",
            IngestEventType.CONTACT_CREATED,
            event_index,
            contact_id,
        )

    def log_contact_noted(self, event_index: int, contact_id: str) -> None:
        """Log an activity note added to an existing CRM contact."""
        log_info(
            logger,
            "[%s] event_index=%d contact_id=%s",
            IngestEventType.CONTACT_NOTED,
            event_index,
            contact_id,
        )

    def log_side_channel_failed(
        self,
        operation: str,
        error: BaseException,
        category: ErrorCategory,
    ) -> None:
        """Log a failed best-effort external call with its category."""
        log_error(
            logger,
            "[%s] operation=%s error_type=%s error_category=%s error_message=%s",
            IngestEventType.SIDE_CHANNEL_FAILED,
            operation,
            type(error).__name__,
            category,
            str(error),
            exc_info=error,
        )

    def log_request_completed(
        self,
        result: IngestResult,
        failed_operations: cabc.Sequence[str],
    ) -> None:
        """Log the outcome of a processed request."""
        log_info(
            logger,
            "[%s] events_received=%d rows_appended=%d leads_qualified=%d "
            "contacts_created=%d notes_added=%d failures=%d failed_operations=%s",
            IngestEventType.REQUEST_COMPLETED,
            result.events_received,
            result.rows_appended,
            result.leads_qualified,
            result.contacts_created,
            result.notes_added,
            len(failed_operations),
            ",".join(failed_operations) or "-",
        )


__all__ = [
    "ErrorCategory",
    "IngestEventLogger",
    "IngestEventType",
    "categorize_error",
]
