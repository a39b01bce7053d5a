"""Google Sheets row sink."""

from __future__ import annotations

from .auth import ServiceAccountTokenProvider, StaticTokenProvider, TokenProvider
from .client import GoogleSheetsRowSink
from .config import SheetsConfig
from .errors import SheetsAPIError, SheetsConfigError, SheetsError

__all__ = [
    "GoogleSheetsRowSink",
    "ServiceAccountTokenProvider",
    "SheetsAPIError",
    "SheetsConfig",
    "SheetsConfigError",
    "SheetsError",
    "StaticTokenProvider",
    "TokenProvider",
]
