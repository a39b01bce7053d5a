"""Unit tests for event flattening and row projection."""

from __future__ import annotations

import pytest

from pixelhook.ingest.profiles import (
    EVENTS_LOWERCASE_PROFILE,
    EVENTS_PROFILE,
    FREEFORM_PROFILE,
    SHEET_HEADERS,
)
from pixelhook.ingest.rows import (
    ESCAPE_MARKER,
    build_field_mapping,
    escape_cell,
    event_to_row,
    project_row,
    read_cell,
    to_cell,
    unescape_cell,
)
from tests.helpers.pixel_events import PixelEventSpec, jane_doe_resolution

_IDENTIFIER_COLUMNS = frozenset({
    "pixel_id",
    "hem_sha256",
    "event_timestamp",
    "event_type",
    "ip_address",
    "page_referrer",
    "page_title",
    "page_url",
})


class TestEventToRow:
    """Tests for projecting structured events onto the sheet schema."""

    def test_row_has_one_cell_per_header(self) -> None:
        """Rows are rectangular regardless of payload content."""
        row = event_to_row({}, EVENTS_PROFILE)
        assert len(row) == len(SHEET_HEADERS)
        assert all(cell == "" for cell in row)

    def test_event_without_resolution_only_populates_supplied_fields(self) -> None:
        """Columns without a matching field are empty strings."""
        event = PixelEventSpec().build()
        row = event_to_row(event, EVENTS_PROFILE)

        for header, cell in zip(SHEET_HEADERS, row, strict=True):
            if header in _IDENTIFIER_COLUMNS:
                assert cell != "", f"expected {header} to be populated"
            else:
                assert cell == "", f"expected {header} to be empty, got {cell!r}"

    def test_nested_element_fields_are_extracted(self) -> None:
        """Clicked element tag, text and href come from event_data.element."""
        event = PixelEventSpec(
            element={"tag": "A", "text": "Buy", "attributes": {"href": "/checkout"}},
        ).build()
        row = event_to_row(event, EVENTS_PROFILE)

        assert read_cell(row, SHEET_HEADERS, "element_tag") == "A"
        assert read_cell(row, SHEET_HEADERS, "element_text") == "Buy"
        assert read_cell(row, SHEET_HEADERS, "element_href") == "/checkout"

    def test_resolution_fields_follow_header_order(self) -> None:
        """Upper-snake resolution keys land in their schema columns."""
        event = PixelEventSpec(
            resolution=jane_doe_resolution(COMPANY_NAME="Acme", UUID="u-1"),
        ).build()
        row = event_to_row(event, EVENTS_PROFILE)

        assert row[SHEET_HEADERS.index("first_name")] == "Jane"
        assert row[SHEET_HEADERS.index("company_name")] == "Acme"
        assert row[-1] == "u-1", "uuid is the last column"

    def test_phone_is_escaped_in_row(self) -> None:
        """E.164 phones gain the escape marker in the projected row."""
        event = PixelEventSpec(resolution=jane_doe_resolution()).build()
        row = event_to_row(event, EVENTS_PROFILE)
        assert row[SHEET_HEADERS.index("mobile_phone")] == "'+1 (555) 123-4567"

    def test_lowercase_profile_reads_lowercase_resolution_keys(self) -> None:
        """The lowercase profile maps resolution.first_name."""
        event = {"resolution": {"first_name": "Ana", "FIRST_NAME": "Ignored"}}
        row = event_to_row(event, EVENTS_LOWERCASE_PROFILE)
        assert read_cell(row, SHEET_HEADERS, "first_name") == "Ana"

    def test_freeform_profile_reads_top_level_keys(self) -> None:
        """The free-form profile looks columns up as top-level keys."""
        record = {"pixel_id": "px-9", "first_name": "Lee", "unrelated": "x"}
        row = event_to_row(record, FREEFORM_PROFILE)
        assert read_cell(row, SHEET_HEADERS, "pixel_id") == "px-9"
        assert read_cell(row, SHEET_HEADERS, "first_name") == "Lee"
        assert "x" not in row


class TestCellFormatting:
    """Tests for cell coercion and the plus-sign escape."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("+15551234567", "'+15551234567"),
            ("15551234567", "15551234567"),
            ("a+b", "a+b"),
            ("'+1 offer", "''+1 offer"),
            ("'quoted'", "'quoted'"),
            (42, 42),
        ],
    )
    def test_escape_cell(self, value: str | int, expected: str | int) -> None:
        """Strings starting with '+', after any markers, are escaped."""
        assert escape_cell(value) == expected

    @pytest.mark.parametrize("value", [None, "", 0, False, [], {}])
    def test_falsy_values_become_empty_string(self, value: object) -> None:
        """Missing or falsy values never reach the sheet as null."""
        assert to_cell(value) == ""

    def test_containers_are_json_encoded(self) -> None:
        """Nested objects are serialised so every cell is scalar."""
        assert to_cell({"a": [1, 2]}) == '{"a":[1,2]}'

    def test_numbers_pass_through(self) -> None:
        """Numeric values keep their type."""
        assert to_cell(3.5) == 3.5

    def test_unescape_strips_marker(self) -> None:
        """The escape marker is strippable."""
        assert unescape_cell(f"{ESCAPE_MARKER}+44 20 7946 0958") == "+44 20 7946 0958"

    def test_unescape_leaves_other_apostrophes(self) -> None:
        """Values that merely start with an apostrophe are unchanged."""
        assert unescape_cell("'quoted'") == "'quoted'"


def test_projection_round_trip_recovers_populated_values() -> None:
    """Reading a row back by schema index recovers every populated value."""
    event = PixelEventSpec(
        title="'+1 offer",
        referrer="''+44 line",
        element={"tag": "BUTTON", "text": "Call", "attributes": {"href": "tel:+1555"}},
        resolution=jane_doe_resolution(
            DIRECT_NUMBER="+1 555 000 1111",
            SKIPTRACE_EXACT_AGE=41,
            HOMEOWNER="Y",
        ),
    ).build()
    fields = build_field_mapping(event, EVENTS_PROFILE)
    row = project_row(fields, SHEET_HEADERS)

    for index, header in enumerate(SHEET_HEADERS):
        if fields.get(header):
            assert unescape_cell(row[index]) == fields[header], header


def test_read_cell_rejects_unknown_column() -> None:
    """Unknown column names raise ValueError."""
    row = event_to_row({}, EVENTS_PROFILE)
    with pytest.raises(ValueError, match="not in list"):
        read_cell(row, SHEET_HEADERS, "favourite_colour")


def test_marker_prefixed_plus_value_round_trips() -> None:
    """A value already starting with the marker and '+' reads back unchanged."""
    fields = build_field_mapping({"event_data": {"title": "'+1 offer"}}, EVENTS_PROFILE)
    row = project_row(fields, SHEET_HEADERS)

    assert row[SHEET_HEADERS.index("page_title")] == "''+1 offer"
    assert read_cell(row, SHEET_HEADERS, "page_title") == "'+1 offer"
