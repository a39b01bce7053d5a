"""Configuration for the CRM contact sink."""

from __future__ import annotations

import dataclasses
import os

from pixelhook.crm.errors import CRMConfigError

# Default configuration values - single source of truth
_DEFAULT_BASE_URL = "https://rest.gohighlevel.com/v1"
_DEFAULT_SOURCE = "Website Pixel"
_DEFAULT_TIMEOUT_S = 20.0


@dataclasses.dataclass(frozen=True, slots=True)
class CRMConfig:
    """Configuration for the CRM contacts API.

    Attributes
    ----------
    api_key
        Bearer token for the CRM API.
    base_url
        API base URL; contact endpoints live below ``/contacts``.
    source
        Source tag applied to contacts created from pixel events.
    timeout_s
        Request timeout in seconds.

    """

    api_key: str = dataclasses.field(repr=False)
    base_url: str = _DEFAULT_BASE_URL
    source: str = _DEFAULT_SOURCE
    timeout_s: float = _DEFAULT_TIMEOUT_S

    @classmethod
    def from_env(cls) -> CRMConfig:
        """Build configuration from environment variables.

        Reads the following environment variables:

        - ``PIXELHOOK_CRM_API_KEY``: Required API key
        - ``PIXELHOOK_CRM_BASE_URL``: Optional base URL override
        - ``PIXELHOOK_CRM_SOURCE``: Optional contact source tag

        Returns
        -------
        CRMConfig
            Configuration instance with values from environment.

        Raises
        ------
        CRMConfigError
            If the API key is missing or blank.

        """
        raw_api_key = os.environ.get("PIXELHOOK_CRM_API_KEY")
        if raw_api_key is None:
            raise CRMConfigError.missing_api_key()
        api_key = raw_api_key.strip()
        if not api_key:
            raise CRMConfigError.empty_api_key()

        base_url = os.environ.get("PIXELHOOK_CRM_BASE_URL", "").strip()
        source = os.environ.get("PIXELHOOK_CRM_SOURCE", "").strip()

        return cls(
            api_key=api_key,
            base_url=(base_url or _DEFAULT_BASE_URL).rstrip("/"),
            source=source or _DEFAULT_SOURCE,
        )
