"""Unit tests for the pixel webhook resource."""

from __future__ import annotations

import dataclasses as dc
from http import HTTPStatus

import falcon.testing
import pytest

from pixelhook.api.app import AppDependencies, create_app
from pixelhook.api.pixel import resources
from pixelhook.ingest import EventIngestor
from pixelhook.ingest.profiles import (
    EVENTS_PROFILE,
    FREEFORM_PROFILE,
    SHEET_HEADERS,
    PayloadProfile,
)
from pixelhook.ingest.rows import read_cell
from pixelhook.sheets.errors import SheetsAPIError
from tests.helpers.fake_logger import FakeLogger
from tests.helpers.pixel_events import PixelEventSpec, events_payload, jane_doe_resolution
from tests.helpers.sinks import FakeContactSink, FakeRowSink


@dc.dataclass(slots=True)
class _Harness:
    client: falcon.testing.TestClient
    rows: FakeRowSink
    contacts: FakeContactSink


def _harness(
    profile: PayloadProfile = EVENTS_PROFILE,
    *,
    error: Exception | None = None,
) -> _Harness:
    rows = FakeRowSink(error=error)
    contacts = FakeContactSink()
    ingestor = EventIngestor(profile, row_sink=rows, contact_sink=contacts)
    client = falcon.testing.TestClient(create_app(AppDependencies(ingestor=ingestor)))
    return _Harness(client, rows, contacts)


@pytest.fixture
def resource_logger(monkeypatch: pytest.MonkeyPatch) -> FakeLogger:
    """Capture log calls made by the pixel resource."""
    logger = FakeLogger()
    monkeypatch.setattr(resources, "logger", logger)
    return logger


class _ExplodingIngestor:
    profile = EVENTS_PROFILE

    async def ingest(self, payload: object) -> None:
        msg = "ingestor bug"
        raise RuntimeError(msg)


class TestEventsProfile:
    """Requests using the structured events body."""

    def test_post_appends_rows_and_returns_empty_204(self) -> None:
        """A valid POST appends rows and answers with an empty body."""
        harness = _harness()
        payload = events_payload(PixelEventSpec(resolution=jane_doe_resolution()).build())

        result = harness.client.simulate_post("/pixel", json=payload)

        assert result.status_code == HTTPStatus.NO_CONTENT
        assert result.content == b""
        assert len(harness.rows.batches) == 1
        assert harness.contacts.lookups == [("j@x.com", "15551234567")]

    def test_get_without_body_is_empty_request(self) -> None:
        """A bare GET carries no events and touches no sink."""
        harness = _harness()

        result = harness.client.simulate_get("/api/pixel")

        assert result.status_code == HTTPStatus.NO_CONTENT
        assert harness.rows.batches == []

    def test_malformed_json_returns_204(self, resource_logger: FakeLogger) -> None:
        """Unparseable bodies are logged and treated as empty."""
        harness = _harness()

        result = harness.client.simulate_post(
            "/pixel",
            body=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert result.status_code == HTTPStatus.NO_CONTENT
        assert harness.rows.batches == []
        assert any(
            "unreadable pixel request body" in m for m in resource_logger.messages("WARNING")
        )

    def test_unsupported_media_type_returns_204(self) -> None:
        """Bodies of unknown media types are ignored."""
        harness = _harness()

        result = harness.client.simulate_post(
            "/pixel",
            body=b"hello",
            headers={"Content-Type": "text/plain"},
        )

        assert result.status_code == HTTPStatus.NO_CONTENT
        assert harness.rows.batches == []

    def test_sink_failure_is_invisible_to_caller(self) -> None:
        """Row-sink errors never change the response."""
        harness = _harness(error=SheetsAPIError.http_error(500))

        result = harness.client.simulate_post(
            "/pixel", json=events_payload(PixelEventSpec().build())
        )

        assert result.status_code == HTTPStatus.NO_CONTENT
        assert result.content == b""


class TestFreeformProfile:
    """Requests using query parameters and free-form bodies."""

    def test_query_parameters_form_the_record(self) -> None:
        """GET query parameters alone make one record."""
        harness = _harness(FREEFORM_PROFILE)

        harness.client.simulate_get(
            "/pixel", params={"pixel_id": "px-7", "page_url": "https://q.test/"}
        )

        [[row]] = harness.rows.batches
        assert read_cell(row, SHEET_HEADERS, "pixel_id") == "px-7"
        assert read_cell(row, SHEET_HEADERS, "page_url") == "https://q.test/"

    def test_body_fields_override_query_parameters(self) -> None:
        """Body fields win over query parameters on collision."""
        harness = _harness(FREEFORM_PROFILE)

        harness.client.simulate_post(
            "/pixel",
            params={"pixel_id": "from-query", "page_title": "Home"},
            json={"pixel_id": "from-body"},
        )

        [[row]] = harness.rows.batches
        assert read_cell(row, SHEET_HEADERS, "pixel_id") == "from-body"
        assert read_cell(row, SHEET_HEADERS, "page_title") == "Home"

    def test_form_encoded_body_is_accepted(self) -> None:
        """URL-encoded form bodies are decoded into the record."""
        harness = _harness(FREEFORM_PROFILE)

        harness.client.simulate_post(
            "/pixel",
            body=b"pixel_id=px-form&first_name=Lee",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

        [[row]] = harness.rows.batches
        assert read_cell(row, SHEET_HEADERS, "pixel_id") == "px-form"
        assert read_cell(row, SHEET_HEADERS, "first_name") == "Lee"


def test_unexpected_ingestor_error_still_returns_204(
    resource_logger: FakeLogger,
) -> None:
    """Failures outside the sinks are logged and hidden from the pixel."""
    app = create_app(AppDependencies(ingestor=_ExplodingIngestor()))  # type: ignore[arg-type]
    client = falcon.testing.TestClient(app)

    result = client.simulate_post("/pixel", json={"events": []})

    assert result.status_code == HTTPStatus.NO_CONTENT
    [call] = resource_logger.calls
    assert call.level == "ERROR"
    assert call.message == "Pixel request processing failed"
    assert isinstance(call.exc_info, RuntimeError)
