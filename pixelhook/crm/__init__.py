"""CRM contact sink used for lead capture."""

from __future__ import annotations

from .client import CRMContactClient
from .config import CRMConfig
from .errors import CRMAPIError, CRMConfigError, CRMError, CRMResponseShapeError
from .models import Contact

__all__ = [
    "CRMAPIError",
    "CRMConfig",
    "CRMConfigError",
    "CRMContactClient",
    "CRMError",
    "CRMResponseShapeError",
    "Contact",
]
