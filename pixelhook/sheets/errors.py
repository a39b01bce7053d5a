"""Google Sheets row-sink errors."""

from __future__ import annotations


class SheetsError(Exception):
    """Base exception for all Google Sheets sink errors."""


class SheetsAPIError(SheetsError):
    """Raised when the Sheets API returns an error or cannot be reached.

    Attributes
    ----------
    status_code
        HTTP status code from the API response, if available.

    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, detail: str = "") -> SheetsAPIError:
        """Return an error for non-2xx HTTP responses."""
        msg = f"Google Sheets API HTTP {status_code}"
        if detail:
            msg = f"{msg}: {detail}"
        return cls(msg, status_code=status_code)

    @classmethod
    def timeout(cls) -> SheetsAPIError:
        """Return an error for request timeouts."""
        return cls("Google Sheets API request timed out")

    @classmethod
    def network_error(cls, detail: str) -> SheetsAPIError:
        """Return an error for network failures (DNS, connection, TLS, etc.)."""
        return cls(f"Google Sheets API network error: {detail}")


class SheetsConfigError(SheetsError):
    """Raised when Google Sheets sink configuration is invalid."""

    @classmethod
    def missing_sheet_id(cls) -> SheetsConfigError:
        """Return an error when no spreadsheet id is configured."""
        return cls("PIXELHOOK_SHEET_ID is required for the Google Sheets sink")

    @classmethod
    def missing_credentials(cls) -> SheetsConfigError:
        """Return an error when no service-account credentials are configured."""
        return cls("PIXELHOOK_SHEETS_CREDENTIALS is required for the Google Sheets sink")

    @classmethod
    def invalid_credentials(cls, detail: str) -> SheetsConfigError:
        """Return an error when the credentials cannot be parsed."""
        return cls(f"Google service account credentials are invalid: {detail}")

    @classmethod
    def token_refresh_failed(cls, detail: str) -> SheetsConfigError:
        """Return an error when the token endpoint rejects the credentials."""
        return cls(f"Google service account token refresh failed: {detail}")
