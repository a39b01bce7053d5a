"""Event ingestion service.

:class:`EventIngestor` is the single request handler behind the pixel
endpoint. For one inbound payload it:

1. extracts the event list (zero events -> nothing else happens);
2. flattens every event into a row ordered by the profile headers;
3. when a contact sink is configured, captures qualified leads in the CRM
   (lookup, then note the existing contact or create a new one);
4. appends all rows to the row sink in one bulk call.

Events are processed sequentially in arrival order. External calls are
best-effort: failures are logged, recorded on the :class:`IngestResult`
and never raised to the caller.

Usage
-----
>>> import asyncio
>>> from pixelhook.ingest import EventIngestor
>>> from pixelhook.ingest.profiles import EVENTS_PROFILE
>>> ingestor = EventIngestor(EVENTS_PROFILE)
>>> asyncio.run(ingestor.ingest({"events": []})).events_received
0

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from pixelhook.ingest.leads import build_activity_note, derive_lead
from pixelhook.ingest.observability import IngestEventLogger
from pixelhook.ingest.outcome import SideChannelResult, call_side_channel
from pixelhook.ingest.payload import extract_events
from pixelhook.ingest.rows import Row, event_to_row
from pixelhook.ingest.sinks import NewContact

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from pixelhook.ingest.profiles import PayloadProfile
    from pixelhook.ingest.sinks import ContactSink, RowSink

DEFAULT_CONTACT_SOURCE = "Website Pixel"


@dc.dataclass(slots=True)
class IngestResult:
    """Summary of one processed request.

    Attributes
    ----------
    events_received
        Number of event records extracted from the payload.
    rows
        Projected rows, in event order.
    rows_appended
        Rows the row sink reported as appended (0 when skipped or failed).
    leads_qualified
        Events whose lead passed the qualification predicate.
    contacts_created
        New CRM contacts created.
    notes_added
        Activity notes added to existing CRM contacts.
    failures
        Failed side-channel calls, in the order they were attempted.

    """

    events_received: int = 0
    rows: list[Row] = dc.field(default_factory=list)
    rows_appended: int = 0
    leads_qualified: int = 0
    contacts_created: int = 0
    notes_added: int = 0
    failures: list[SideChannelResult[typ.Any]] = dc.field(default_factory=list)


class EventIngestor:
    """Flatten pixel events into sheet rows and capture qualified leads.

    Parameters
    ----------
    profile
        Payload profile defining the event shape, column schema and lead
        field paths.
    row_sink
        Destination of projected rows. ``None`` disables row logging.
    contact_sink
        CRM used for lead capture. ``None`` disables CRM sync.
    contact_source
        Source tag set on contacts created by the ingestor.
    event_logger
        Structured logger; a default instance is created when omitted.

    """

    def __init__(
        self,
        profile: PayloadProfile,
        *,
        row_sink: RowSink | None = None,
        contact_sink: ContactSink | None = None,
        contact_source: str = DEFAULT_CONTACT_SOURCE,
        event_logger: IngestEventLogger | None = None,
    ) -> None:
        """Initialise the ingestor with its profile and optional sinks."""
        self._profile = profile
        self._row_sink = row_sink
        self._contact_sink = contact_sink
        self._contact_source = contact_source
        self._events = event_logger or IngestEventLogger()

    @property
    def profile(self) -> PayloadProfile:
        """Return the payload profile used by this ingestor."""
        return self._profile

    async def aclose(self) -> None:
        """Close sinks that hold network resources."""
        for sink in (self._row_sink, self._contact_sink):
            close = getattr(sink, "aclose", None)
            if close is not None:
                await close()

    async def ingest(self, payload: object) -> IngestResult:
        """Process one inbound payload.

        Parameters
        ----------
        payload
            Decoded request payload. Any shape is accepted; malformed
            payloads are treated as carrying zero events.

        Returns
        -------
        IngestResult
            Counters and failures for the request. Never raises for sink
            failures.

        """
        self._events.log_payload(payload)
        events = extract_events(payload, self._profile)
        result = IngestResult(events_received=len(events))

        if not events:
            self._events.log_request_empty(self._profile.name)
            return result

        self._events.log_request_received(self._profile.name, len(events))

        for index, event in enumerate(events):
            result.rows.append(event_to_row(event, self._profile))
            if self._contact_sink is not None:
                await self._capture_lead(self._contact_sink, index, event, result)

        await self._append_rows(result)

        self._events.log_request_completed(
            result, [failure.operation for failure in result.failures]
        )
        return result

    async def _run(
        self,
        operation: str,
        call: cabc.Callable[[], cabc.Awaitable[typ.Any]],
        result: IngestResult,
    ) -> SideChannelResult[typ.Any]:
        outcome = await call_side_channel(operation, call, event_logger=self._events)
        if not outcome.ok:
            result.failures.append(outcome)
        return outcome

    async def _capture_lead(
        self,
        sink: ContactSink,
        index: int,
        event: cabc.Mapping[str, typ.Any],
        result: IngestResult,
    ) -> None:
        """Look up the event's lead and note or create the CRM contact."""
        lead = derive_lead(event, self._profile.lead_paths)
        if not lead.is_qualified:
            self._events.log_lead_skipped(index, "unqualified")
            return

        result.leads_qualified += 1
        lookup = await self._run(
            "crm.lookup",
            lambda: sink.find_contact(email=lead.email, phone=lead.phone),
            result,
        )
        if not lookup.ok:
            return

        contact_id = lookup.value
        if contact_id:
            note = build_activity_note(event, self._profile.lead_paths)
            outcome = await self._run(
                "crm.note", lambda: sink.add_note(contact_id, note), result
            )
            if outcome.ok:
                result.notes_added += 1
                self._events.log_contact_noted(index, contact_id)
            return

        new_contact = NewContact(
            first_name=lead.first_name,
            last_name=lead.last_name,
            email=lead.email,
            phone=lead.phone,
            source=self._contact_source,
        )
        created = await self._run(
            "crm.create", lambda: sink.create_contact(new_contact), result
        )
        if created.ok:
            result.contacts_created += 1
            self._events.log_contact_created(index, str(created.value))

    async def _append_rows(self, result: IngestResult) -> None:
        """Append every accumulated row in a single row-sink call."""
        row_count = len(result.rows)
        if self._row_sink is None:
            self._events.log_rows_skipped(row_count, "row_sink_not_configured")
            return
        if row_count == 0:
            self._events.log_rows_skipped(row_count, "no_rows")
            return

        sink = self._row_sink
        rows = list(result.rows)
        outcome = await self._run("sheets.append", lambda: sink.append_rows(rows), result)
        if outcome.ok:
            result.rows_appended = int(outcome.value or 0)
            self._events.log_rows_appended(row_count, result.rows_appended)


__all__ = ["DEFAULT_CONTACT_SOURCE", "EventIngestor", "IngestResult"]
