"""Sink protocols for pixel ingestion.

These are the ports (in hexagonal architecture terms) that the ingestor
talks to. Adapters implement them for Google Sheets
(:mod:`pixelhook.sheets`) and the CRM (:mod:`pixelhook.crm`); tests use
in-memory fakes.

The protocols are ``runtime_checkable`` to support ``isinstance`` checks
for dependency injection and testing scenarios.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from pixelhook.ingest.rows import Row


@dc.dataclass(frozen=True, slots=True)
class NewContact:
    """Fields sent to the CRM when creating a contact.

    Attributes
    ----------
    first_name, last_name
        Lead name as resolved for the event.
    email
        First email of the lead, or ``""``.
    phone
        Digits-only phone of the lead, or ``""``.
    source
        Fixed tag identifying contacts captured by the pixel.

    """

    first_name: str
    last_name: str
    email: str
    phone: str
    source: str


@typ.runtime_checkable
class RowSink(typ.Protocol):
    """Append-only tabular store receiving projected rows."""

    async def append_rows(self, rows: cabc.Sequence[Row]) -> int:
        """Append ``rows`` after the existing rows.

        Returns
        -------
        int
            Number of rows the store reports as appended.

        """
        ...


@typ.runtime_checkable
class ContactSink(typ.Protocol):
    """Contact directory used for lead capture."""

    async def find_contact(self, *, email: str = "", phone: str = "") -> str | None:
        """Return the id of a contact matching ``email`` or ``phone``."""
        ...

    async def create_contact(self, contact: NewContact) -> str:
        """Create ``contact`` and return its id."""
        ...

    async def add_note(self, contact_id: str, body: str) -> None:
        """Attach a text note to the contact ``contact_id``."""
        ...


__all__ = ["ContactSink", "NewContact", "RowSink"]
