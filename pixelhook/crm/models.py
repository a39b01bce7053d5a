"""Wire models for the CRM contacts API."""

from __future__ import annotations

import msgspec


class Contact(msgspec.Struct, kw_only=True):
    """Contact record as returned by the CRM.

    Only ``id`` is required; the remaining fields are informational.
    """

    id: str
    first_name: str | None = msgspec.field(default=None, name="firstName")
    last_name: str | None = msgspec.field(default=None, name="lastName")
    email: str | None = None
    phone: str | None = None


class ContactLookupResponse(msgspec.Struct, kw_only=True):
    """Body of ``GET /contacts/lookup``."""

    contacts: list[Contact] = msgspec.field(default_factory=list)


class ContactEnvelope(msgspec.Struct, kw_only=True):
    """Body of ``POST /contacts/``."""

    contact: Contact


class ContactCreateRequest(msgspec.Struct, kw_only=True, omit_defaults=True):
    """Body sent to ``POST /contacts/``; empty identifiers are omitted."""

    first_name: str = msgspec.field(name="firstName")
    last_name: str = msgspec.field(name="lastName")
    source: str
    email: str = ""
    phone: str = ""


class NoteCreateRequest(msgspec.Struct, kw_only=True):
    """Body sent to ``POST /contacts/{id}/notes/``."""

    body: str
