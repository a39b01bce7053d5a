"""Process-wide configuration for the pixel webhook.

:class:`PixelhookConfig` is built once at start-up and handed to the app
factory. Each integration is enabled independently: a missing sheet id or
credentials disables row logging, a missing CRM key disables lead capture.

Usage
-----
Build the configuration once at start-up::

    config = PixelhookConfig.from_env()
    ingestor = build_ingestor(config)

"""

from __future__ import annotations

import dataclasses as dc
import os

from pixelhook.crm.config import CRMConfig
from pixelhook.crm.errors import CRMConfigError
from pixelhook.ingest.profiles import (
    DEFAULT_PROFILE_NAME,
    PayloadProfile,
    UnknownProfileError,
    get_profile,
)
from pixelhook.logging import get_logger, log_info
from pixelhook.sheets.config import SheetsConfig
from pixelhook.sheets.errors import SheetsConfigError

logger = get_logger(__name__)


class PixelhookConfigError(Exception):
    """Raised when start-up configuration is invalid."""

    @classmethod
    def unknown_profile(cls, exc: UnknownProfileError) -> PixelhookConfigError:
        """Create error for an unrecognised PIXELHOOK_PROFILE value."""
        return cls(f"Invalid PIXELHOOK_PROFILE: {exc}")


@dc.dataclass(frozen=True, slots=True)
class PixelhookConfig:
    """Configuration for the pixel webhook.

    Attributes
    ----------
    profile
        Payload profile describing the event shape and column schema.
    sheets
        Row-sink configuration, or ``None`` when row logging is disabled.
    crm
        Contact-sink configuration, or ``None`` when CRM sync is disabled.

    """

    profile: PayloadProfile
    sheets: SheetsConfig | None = None
    crm: CRMConfig | None = None

    @staticmethod
    def _sheets_from_env() -> SheetsConfig | None:
        try:
            return SheetsConfig.from_env()
        except SheetsConfigError as exc:
            log_info(logger, "Google Sheets logging disabled: %s", exc)
            return None

    @staticmethod
    def _crm_from_env() -> CRMConfig | None:
        try:
            return CRMConfig.from_env()
        except CRMConfigError as exc:
            log_info(logger, "CRM sync disabled: %s", exc)
            return None

    @classmethod
    def from_env(cls) -> PixelhookConfig:
        """Create configuration from environment variables.

        Reads ``PIXELHOOK_PROFILE`` (default ``events``) and delegates to
        :meth:`SheetsConfig.from_env` and :meth:`CRMConfig.from_env`. A
        missing integration setting disables that integration.

        Returns
        -------
        PixelhookConfig
            Configuration instance with values from environment.

        Raises
        ------
        PixelhookConfigError
            If ``PIXELHOOK_PROFILE`` names an unknown profile.

        """
        raw_profile = os.environ.get("PIXELHOOK_PROFILE", "").strip()
        try:
            profile = get_profile(raw_profile or DEFAULT_PROFILE_NAME)
        except UnknownProfileError as exc:
            raise PixelhookConfigError.unknown_profile(exc) from exc

        return cls(
            profile=profile,
            sheets=cls._sheets_from_env(),
            crm=cls._crm_from_env(),
        )


__all__ = ["PixelhookConfig", "PixelhookConfigError"]
