"""Best-effort side-channel calls.

Every external call made while ingesting (sheet append, CRM lookup,
create and note) goes through :func:`call_side_channel`. Failures are
categorized, logged and returned as a :class:`SideChannelResult`; they
never propagate to the HTTP response path.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from pixelhook.ingest.observability import (
    ErrorCategory,
    IngestEventLogger,
    categorize_error,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

T = typ.TypeVar("T")


@dc.dataclass(frozen=True, slots=True)
class SideChannelResult(typ.Generic[T]):
    """Outcome of a best-effort external call.

    Attributes
    ----------
    operation
        Short name of the call (``sheets.append``, ``crm.lookup``...).
    value
        Value returned by the call when it succeeded.
    error
        Exception raised by the call when it failed.
    category
        Error category of ``error``; ``None`` on success.

    """

    operation: str
    value: T | None = None
    error: Exception | None = None
    category: ErrorCategory | None = None

    @property
    def ok(self) -> bool:
        """Return True when the call completed without raising."""
        return self.error is None

    @property
    def reason(self) -> str:
        """Return the failure message, or ``""`` on success."""
        return "" if self.error is None else str(self.error)


async def call_side_channel(
    operation: str,
    call: cabc.Callable[[], cabc.Awaitable[T]],
    *,
    event_logger: IngestEventLogger,
) -> SideChannelResult[T]:
    """Await ``call`` and capture any failure as a result.

    Parameters
    ----------
    operation
        Short name used in logs and in the returned result.
    call
        Zero-argument callable returning the awaitable to run.
    event_logger
        Logger receiving the failure event.

    Returns
    -------
    SideChannelResult
        Success with the returned value, or failure with the exception
        and its category.

    """
    try:
        value = await call()
    except Exception as exc:  # noqa: BLE001 - side-channel failures never propagate
        category = categorize_error(exc)
        event_logger.log_side_channel_failed(operation, exc, category)
        return SideChannelResult(operation=operation, error=exc, category=category)
    return SideChannelResult(operation=operation, value=value)


__all__ = ["SideChannelResult", "call_side_channel"]
