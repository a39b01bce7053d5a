"""Payload profiles: column schemas and field paths per deployment.

Pixel providers ship otherwise-identical deployments with incompatible
payload conventions. Rather than guessing a unified schema, each convention
is a named :class:`PayloadProfile` selected through configuration.

Usage
-----
Resolve a profile by name:

>>> from pixelhook.ingest.profiles import get_profile
>>> profile = get_profile("events")
>>> profile.headers[0]
'pixel_id'
>>> profile.field_paths["first_name"]
'resolution.FIRST_NAME'

"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import types

# Column order MUST match the physical column order of the target sheet.
SHEET_HEADERS: tuple[str, ...] = (
    "pixel_id",
    "hem_sha256",
    "event_timestamp",
    "event_type",
    "ip_address",
    "activity_start_date",
    "activity_end_date",
    "page_referrer",
    "page_title",
    "page_url",
    "element_tag",
    "element_text",
    "element_href",
    "first_name",
    "last_name",
    "gender",
    "age_range",
    "homeowner",
    "married",
    "children",
    "income_range",
    "net_worth",
    "personal_address",
    "personal_city",
    "personal_state",
    "personal_zip",
    "personal_emails",
    "mobile_phone",
    "direct_number",
    "company_name",
    "company_domain",
    "company_industry",
    "job_title",
    "linkedin_url",
    "skiptrace_ip",
    "skiptrace_exact_age",
    "uuid",
)

_EVENT_PATHS: dict[str, str] = {
    "pixel_id": "pixel_id",
    "hem_sha256": "hem_sha256",
    "event_timestamp": "event_timestamp",
    "event_type": "event_type",
    "ip_address": "ip_address",
    "activity_start_date": "activity_start_date",
    "activity_end_date": "activity_end_date",
    "page_referrer": "event_data.referrer",
    "page_title": "event_data.title",
    "page_url": "event_data.url",
    "element_tag": "event_data.element.tag",
    "element_text": "event_data.element.text",
    "element_href": "event_data.element.attributes.href",
}

# Logical field name -> key inside the resolution sub-object.
_RESOLUTION_KEYS: dict[str, str] = {
    "first_name": "FIRST_NAME",
    "last_name": "LAST_NAME",
    "gender": "GENDER",
    "age_range": "AGE_RANGE",
    "homeowner": "HOMEOWNER",
    "married": "MARRIED",
    "children": "CHILDREN",
    "income_range": "INCOME_RANGE",
    "net_worth": "NET_WORTH",
    "personal_address": "PERSONAL_ADDRESS",
    "personal_city": "PERSONAL_CITY",
    "personal_state": "PERSONAL_STATE",
    "personal_zip": "PERSONAL_ZIP",
    "personal_emails": "PERSONAL_EMAILS",
    "mobile_phone": "MOBILE_PHONE",
    "direct_number": "DIRECT_NUMBER",
    "company_name": "COMPANY_NAME",
    "company_domain": "COMPANY_DOMAIN",
    "company_industry": "COMPANY_INDUSTRY",
    "job_title": "JOB_TITLE",
    "linkedin_url": "LINKEDIN_URL",
    "skiptrace_ip": "SKIPTRACE_IP",
    "skiptrace_exact_age": "SKIPTRACE_EXACT_AGE",
    "uuid": "UUID",
}

RESOLUTION_ROOT = "resolution"


class PayloadShape(enum.StrEnum):
    """Top-level request shapes accepted by the pixel endpoint."""

    EVENTS = "events"
    FREEFORM = "freeform"


@dc.dataclass(frozen=True, slots=True)
class LeadFieldPaths:
    """Paths used to derive a lead record from an event.

    Attributes
    ----------
    root
        Path of the sub-object holding identity fields, or ``""`` when the
        fields live at the top level of the event.
    first_name, last_name
        Keys of the name fields below ``root``.
    emails
        Key of the comma-separated email list below ``root``.
    phones
        Candidate phone keys below ``root``, tried in order.
    event_type, source_url, timestamp
        Event-level paths quoted in CRM activity notes.

    """

    root: str
    first_name: str
    last_name: str
    emails: str
    phones: tuple[str, ...]
    event_type: str = "event_type"
    source_url: str = "event_data.url"
    timestamp: str = "event_timestamp"

    def under_root(self, key: str) -> str:
        """Return the full dotted path of ``key`` below the lead root."""
        return f"{self.root}.{key}" if self.root else key


@dc.dataclass(frozen=True, slots=True)
class PayloadProfile:
    """A named payload convention and its row schema.

    Attributes
    ----------
    name
        Configuration name of the profile.
    shape
        Whether requests carry an ``events`` list or one free-form record.
    headers
        Ordered column names of the target sheet.
    field_paths
        Logical field name -> dotted path inside an event. Columns with no
        entry project to an empty string.
    lead_paths
        Paths used to derive CRM lead records.

    """

    name: str
    shape: PayloadShape
    headers: tuple[str, ...]
    field_paths: cabc.Mapping[str, str]
    lead_paths: LeadFieldPaths


def _resolution_paths(*, lowercase: bool) -> dict[str, str]:
    return {
        field: f"{RESOLUTION_ROOT}.{key.lower() if lowercase else key}"
        for field, key in _RESOLUTION_KEYS.items()
    }


def _events_profile(name: str, *, lowercase: bool) -> PayloadProfile:
    def key(field: str) -> str:
        raw = _RESOLUTION_KEYS[field]
        return raw.lower() if lowercase else raw

    return PayloadProfile(
        name=name,
        shape=PayloadShape.EVENTS,
        headers=SHEET_HEADERS,
        field_paths=types.MappingProxyType(
            _EVENT_PATHS | _resolution_paths(lowercase=lowercase)
        ),
        lead_paths=LeadFieldPaths(
            root=RESOLUTION_ROOT,
            first_name=key("first_name"),
            last_name=key("last_name"),
            emails=key("personal_emails"),
            phones=(key("mobile_phone"), key("direct_number")),
        ),
    )


EVENTS_PROFILE = _events_profile("events", lowercase=False)
EVENTS_LOWERCASE_PROFILE = _events_profile("events-lowercase", lowercase=True)
FREEFORM_PROFILE = PayloadProfile(
    name="freeform",
    shape=PayloadShape.FREEFORM,
    headers=SHEET_HEADERS,
    field_paths=types.MappingProxyType({header: header for header in SHEET_HEADERS}),
    lead_paths=LeadFieldPaths(
        root="",
        first_name="first_name",
        last_name="last_name",
        emails="personal_emails",
        phones=("mobile_phone", "direct_number"),
        source_url="page_url",
    ),
)

PROFILES: cabc.Mapping[str, PayloadProfile] = types.MappingProxyType({
    profile.name: profile
    for profile in (EVENTS_PROFILE, EVENTS_LOWERCASE_PROFILE, FREEFORM_PROFILE)
})

DEFAULT_PROFILE_NAME = EVENTS_PROFILE.name


class UnknownProfileError(LookupError):
    """Raised when a profile name does not match any known profile."""

    def __init__(self, name: str) -> None:
        """Initialise with the unrecognised profile name."""
        self.name = name
        valid = ", ".join(f"'{n}'" for n in sorted(PROFILES))
        super().__init__(f"Unknown payload profile '{name}'. Valid options are: {valid}")


def get_profile(name: str) -> PayloadProfile:
    """Return the profile registered under ``name`` (case-insensitive).

    Raises
    ------
    UnknownProfileError
        If no profile is registered under ``name``.

    """
    normalized = name.strip().lower()
    try:
        return PROFILES[normalized]
    except KeyError as exc:
        raise UnknownProfileError(name) from exc


__all__ = [
    "DEFAULT_PROFILE_NAME",
    "EVENTS_LOWERCASE_PROFILE",
    "EVENTS_PROFILE",
    "FREEFORM_PROFILE",
    "PROFILES",
    "SHEET_HEADERS",
    "LeadFieldPaths",
    "PayloadProfile",
    "PayloadShape",
    "UnknownProfileError",
    "get_profile",
]
