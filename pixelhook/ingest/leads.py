"""Lead derivation and qualification for CRM capture."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import re
import typing as typ

from pixelhook.common.lookup import get_path

if typ.TYPE_CHECKING:
    from pixelhook.ingest.profiles import LeadFieldPaths

_NON_DIGITS = re.compile(r"\D")

NOTE_URL_PLACEHOLDER = "N/A"


def _text(value: object) -> str:
    if value is None or value == "":
        return ""
    return str(value).strip()


def sanitize_phone(raw: object) -> str:
    """Strip every non-digit character from a phone value.

    >>> sanitize_phone("+1 (555) 123-4567")
    '15551234567'

    """
    return _NON_DIGITS.sub("", _text(raw))


def first_email(raw: object) -> str:
    """Return the first entry of a comma-separated email list.

    >>> first_email(" j@x.com , other@x.com")
    'j@x.com'

    """
    return _text(raw).split(",", 1)[0].strip()


@dc.dataclass(frozen=True, slots=True)
class LeadRecord:
    """Identity fields derived from an event's resolution data."""

    first_name: str
    last_name: str
    email: str
    phone: str

    @property
    def is_qualified(self) -> bool:
        """Return True when names and at least one identifier are present."""
        return bool(self.first_name and self.last_name and (self.email or self.phone))


def derive_lead(event: cabc.Mapping[str, typ.Any], paths: LeadFieldPaths) -> LeadRecord:
    """Build a :class:`LeadRecord` from ``event`` using ``paths``.

    The phone is the first candidate key that sanitizes to a non-empty
    digit string.
    """
    phone = ""
    for key in paths.phones:
        phone = sanitize_phone(get_path(event, paths.under_root(key)))
        if phone:
            break

    return LeadRecord(
        first_name=_text(get_path(event, paths.under_root(paths.first_name))),
        last_name=_text(get_path(event, paths.under_root(paths.last_name))),
        email=first_email(get_path(event, paths.under_root(paths.emails))),
        phone=phone,
    )


def build_activity_note(
    event: cabc.Mapping[str, typ.Any],
    paths: LeadFieldPaths,
) -> str:
    """Render the CRM note recorded when a known contact fires the pixel."""
    event_type = _text(get_path(event, paths.event_type))
    source_url = _text(get_path(event, paths.source_url)) or NOTE_URL_PLACEHOLDER
    timestamp = _text(get_path(event, paths.timestamp))
    return (
        f"Pixel event: {event_type}\n"
        f"Source URL: {source_url}\n"
        f"Timestamp: {timestamp}"
    )


__all__ = [
    "NOTE_URL_PLACEHOLDER",
    "LeadRecord",
    "build_activity_note",
    "derive_lead",
    "first_email",
    "sanitize_phone",
]
