"""CRM contact-sink errors."""

from __future__ import annotations

# Body preview length for error messages
_BODY_PREVIEW_LIMIT = 100


class CRMError(Exception):
    """Base exception for all CRM sink errors."""


class CRMAPIError(CRMError):
    """Raised when the CRM API returns an error or cannot be reached.

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
    def http_error(cls, operation: str, status_code: int) -> CRMAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(f"CRM {operation} failed: HTTP {status_code}", status_code=status_code)

    @classmethod
    def timeout(cls, operation: str) -> CRMAPIError:
        """Return an error for request timeouts."""
        return cls(f"CRM {operation} timed out")

    @classmethod
    def network_error(cls, operation: str, detail: str) -> CRMAPIError:
        """Return an error for network failures (DNS, connection, TLS, etc.)."""
        return cls(f"CRM {operation} network error: {detail}")


class CRMResponseShapeError(CRMError):
    """Raised when a CRM response body is missing expected fields."""

    @classmethod
    def malformed(cls, operation: str, body: str) -> CRMResponseShapeError:
        """Return an error for a body that does not decode as expected."""
        if len(body) > _BODY_PREVIEW_LIMIT:
            preview = body[:_BODY_PREVIEW_LIMIT] + "..."
        else:
            preview = body
        return cls(f"CRM {operation} returned an unexpected body: {preview}")


class CRMConfigError(CRMError):
    """Raised when CRM sink configuration is invalid."""

    @classmethod
    def missing_api_key(cls) -> CRMConfigError:
        """Return an error when no CRM API key is configured."""
        return cls("PIXELHOOK_CRM_API_KEY is required for the CRM sink")

    @classmethod
    def empty_api_key(cls) -> CRMConfigError:
        """Return an error when the provided API key is empty."""
        return cls("CRM API key must be non-empty")
