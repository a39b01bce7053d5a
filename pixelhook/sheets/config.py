"""Configuration for the Google Sheets row sink."""

from __future__ import annotations

import dataclasses
import os

from pixelhook.sheets.errors import SheetsConfigError

# Default configuration values - single source of truth
_DEFAULT_ENDPOINT = "https://sheets.googleapis.com/v4/spreadsheets"
_DEFAULT_RANGE = "Sheet1!A1"
_DEFAULT_VALUE_INPUT_OPTION = "USER_ENTERED"
_DEFAULT_TIMEOUT_S = 20.0

SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"


@dataclasses.dataclass(frozen=True, slots=True)
class SheetsConfig:
    """Configuration for appending rows to a Google Sheet.

    Attributes
    ----------
    sheet_id
        Spreadsheet identifier from the sheet URL.
    credentials_json
        Raw service-account credentials JSON. Parsed lazily by the token
        provider so a malformed value surfaces as a sink failure rather
        than a start-up error.
    range
        A1 range the rows are appended after.
    value_input_option
        How Sheets interprets the submitted values.
    endpoint
        Base URL of the spreadsheets API.
    timeout_s
        Request timeout in seconds.

    """

    sheet_id: str
    credentials_json: str = dataclasses.field(repr=False)
    range: str = _DEFAULT_RANGE
    value_input_option: str = _DEFAULT_VALUE_INPUT_OPTION
    endpoint: str = _DEFAULT_ENDPOINT
    timeout_s: float = _DEFAULT_TIMEOUT_S

    @classmethod
    def from_env(cls) -> SheetsConfig:
        """Build configuration from environment variables.

        Reads the following environment variables:

        - ``PIXELHOOK_SHEET_ID``: Required spreadsheet id
        - ``PIXELHOOK_SHEETS_CREDENTIALS``: Required service-account JSON
        - ``PIXELHOOK_SHEET_RANGE``: Optional append range
          (default ``Sheet1!A1``)

        Returns
        -------
        SheetsConfig
            Configuration instance with values from environment.

        Raises
        ------
        SheetsConfigError
            If the sheet id or credentials are missing or blank.

        """
        sheet_id = os.environ.get("PIXELHOOK_SHEET_ID", "").strip()
        if not sheet_id:
            raise SheetsConfigError.missing_sheet_id()

        credentials_json = os.environ.get("PIXELHOOK_SHEETS_CREDENTIALS", "").strip()
        if not credentials_json:
            raise SheetsConfigError.missing_credentials()

        sheet_range = os.environ.get("PIXELHOOK_SHEET_RANGE", "").strip()

        return cls(
            sheet_id=sheet_id,
            credentials_json=credentials_json,
            range=sheet_range or _DEFAULT_RANGE,
        )
