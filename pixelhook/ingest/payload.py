"""Turn inbound request data into a list of event records.

Malformed input never fails a request: a body that is not an object, or an
``events`` member that is not a list, yields zero events.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from pixelhook.ingest.profiles import PayloadProfile, PayloadShape

EVENTS_KEY = "events"

Event = cabc.Mapping[str, typ.Any]


def build_payload(
    profile: PayloadProfile,
    query: cabc.Mapping[str, typ.Any],
    body: object,
) -> object:
    """Combine query parameters and body into the ingest payload.

    The ``events`` shape uses the body as-is. The free-form shape merges
    query parameters with body fields; body fields win on key collision.
    """
    if profile.shape is PayloadShape.EVENTS:
        return body

    merged: dict[str, typ.Any] = dict(query)
    if isinstance(body, cabc.Mapping):
        merged.update(body)
    return merged


def extract_events(payload: object, profile: PayloadProfile) -> list[Event]:
    """Return the event records carried by ``payload``.

    Parameters
    ----------
    payload
        Payload built by :func:`build_payload`.
    profile
        Profile deciding whether the payload holds an ``events`` list or is
        itself a single free-form record.

    Returns
    -------
    list[Mapping[str, Any]]
        Event records in arrival order. Non-object entries are dropped.

    """
    if not isinstance(payload, cabc.Mapping):
        return []

    if profile.shape is PayloadShape.FREEFORM:
        return [payload] if payload else []

    events = payload.get(EVENTS_KEY)
    if not isinstance(events, list):
        return []
    return [event for event in events if isinstance(event, cabc.Mapping)]


__all__ = ["EVENTS_KEY", "Event", "build_payload", "extract_events"]
