"""Unit tests for ingestion observability and side-channel outcomes."""

from __future__ import annotations

import asyncio
import typing as typ

import httpx
import pytest

from pixelhook.crm.errors import CRMAPIError, CRMConfigError, CRMResponseShapeError
from pixelhook.ingest import observability
from pixelhook.ingest.observability import (
    ErrorCategory,
    IngestEventLogger,
    IngestEventType,
    categorize_error,
)
from pixelhook.ingest.outcome import call_side_channel
from pixelhook.ingest.service import IngestResult
from pixelhook.sheets.errors import SheetsAPIError, SheetsConfigError
from tests.helpers.fake_logger import FakeLogger


@pytest.fixture
def fake_logger(monkeypatch: pytest.MonkeyPatch) -> FakeLogger:
    """Replace the observability module logger with a recorder."""
    logger = FakeLogger()
    monkeypatch.setattr(observability, "logger", logger)
    return logger


class TestCategorizeError:
    """Tests for error categorization."""

    @pytest.mark.parametrize(
        ("exc", "expected"),
        [
            (CRMAPIError.http_error("lookup", 502), ErrorCategory.TRANSIENT),
            (CRMAPIError.http_error("create", 422), ErrorCategory.CLIENT_ERROR),
            (CRMAPIError.timeout("note"), ErrorCategory.TRANSIENT),
            (SheetsAPIError.http_error(503), ErrorCategory.TRANSIENT),
            (SheetsAPIError.http_error(404, "not found"), ErrorCategory.CLIENT_ERROR),
            (
                SheetsConfigError.token_refresh_failed("invalid_grant"),
                ErrorCategory.CONFIGURATION,
            ),
            (SheetsAPIError.network_error("token endpoint"), ErrorCategory.TRANSIENT),
            (CRMResponseShapeError.malformed("create", "{}"), ErrorCategory.SCHEMA_DRIFT),
            (CRMConfigError.empty_api_key(), ErrorCategory.CONFIGURATION),
            (SheetsConfigError.invalid_credentials("x"), ErrorCategory.CONFIGURATION),
            (httpx.ReadTimeout("slow"), ErrorCategory.TRANSIENT),
            (RuntimeError("unexpected"), ErrorCategory.UNKNOWN),
        ],
    )
    def test_categorize_error(self, exc: Exception, expected: ErrorCategory) -> None:
        """Exceptions map to alerting categories."""
        assert categorize_error(exc) == expected


class TestCallSideChannel:
    """Tests for call_side_channel()."""

    def test_success_returns_value(self, fake_logger: FakeLogger) -> None:
        """A successful call carries its value and logs nothing."""

        async def call() -> str:
            return "contact-1"

        outcome = asyncio.run(
            call_side_channel("crm.create", call, event_logger=IngestEventLogger())
        )

        assert outcome.ok
        assert outcome.value == "contact-1"
        assert outcome.reason == ""
        assert fake_logger.calls == []

    def test_failure_is_captured_and_logged(self, fake_logger: FakeLogger) -> None:
        """Exceptions are returned, categorized and logged at ERROR."""
        error = CRMAPIError.http_error("lookup", 401)

        async def call() -> typ.NoReturn:
            raise error

        outcome = asyncio.run(
            call_side_channel("crm.lookup", call, event_logger=IngestEventLogger())
        )

        assert not outcome.ok
        assert outcome.error is error
        assert outcome.category is ErrorCategory.CLIENT_ERROR
        assert outcome.reason == "CRM lookup failed: HTTP 401"
        [call_record] = fake_logger.calls
        assert call_record.level == "ERROR"
        assert call_record.exc_info is error
        assert call_record.message.startswith(f"[{IngestEventType.SIDE_CHANNEL_FAILED}]")
        assert "operation=crm.lookup" in call_record.message
        assert "error_category=client_error" in call_record.message


class TestIngestEventLogger:
    """Tests for structured log lines."""

    def test_request_completed_lists_failed_operations(
        self, fake_logger: FakeLogger
    ) -> None:
        """Completion lines summarise counters and failures."""
        result = IngestResult(events_received=2, rows_appended=2, contacts_created=1)

        IngestEventLogger().log_request_completed(result, ["crm.note"])

        [message] = fake_logger.messages("INFO")
        assert message == (
            "[ingest.request.completed] events_received=2 rows_appended=2 "
            "leads_qualified=0 contacts_created=1 notes_added=0 failures=1 "
            "failed_operations=crm.note"
        )

    def test_request_completed_without_failures(self, fake_logger: FakeLogger) -> None:
        """A dash marks an empty failure list."""
        IngestEventLogger().log_request_completed(IngestResult(), [])
        assert fake_logger.messages()[0].endswith("failures=0 failed_operations=-")

    def test_payload_is_logged_at_debug(self, fake_logger: FakeLogger) -> None:
        """Raw payloads are only logged at DEBUG level."""
        IngestEventLogger().log_payload({"events": []})
        assert fake_logger.messages("DEBUG") == ["Received payload: {'events': []}"]

    def test_empty_request(self, fake_logger: FakeLogger) -> None:
        """Empty requests log the profile and reason."""
        IngestEventLogger().log_request_empty("events")
        assert fake_logger.messages() == [
            "[ingest.request.empty] profile=events reason=no_events"
        ]
