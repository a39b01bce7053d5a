"""Safe dotted-path lookups over untyped JSON trees.

Pixel payloads are loosely structured: any intermediate object may be
absent, ``null`` or of an unexpected type. These helpers walk a dotted path
one segment at a time and report whether a value was found instead of
raising ``KeyError``/``TypeError`` on missing structure.

Examples
--------
>>> lookup({"a": {"b": 1}}, "a.b")
Found(value=1)
>>> lookup({"a": {"b": None}}, "a.b.c") is MISSING
True
>>> get_path({"a": {"b": None}}, "a.b.c")
''

"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import typing as typ

PATH_SEPARATOR = "."


class _Missing(enum.Enum):
    """Sentinel type for a path that resolved to nothing."""

    MISSING = "missing"

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing.MISSING


@dc.dataclass(frozen=True, slots=True)
class Found:
    """A value located at the end of a path."""

    value: typ.Any


LookupResult = Found | _Missing


def split_path(path: str) -> tuple[str, ...]:
    """Split a dotted path into its segments, ignoring empty segments."""
    return tuple(segment for segment in path.split(PATH_SEPARATOR) if segment)


def _step(current: object, segment: str) -> LookupResult:
    """Resolve a single path segment against ``current``."""
    if isinstance(current, cabc.Mapping):
        if segment not in current:
            return MISSING
        return Found(current[segment])
    if isinstance(current, cabc.Sequence) and not isinstance(current, str | bytes):
        if not segment.isdecimal():
            return MISSING
        index = int(segment)
        if index >= len(current):
            return MISSING
        return Found(current[index])
    return MISSING


def lookup(tree: object, path: str | cabc.Sequence[str]) -> LookupResult:
    """Walk ``tree`` along ``path`` and return the value found there.

    Parameters
    ----------
    tree
        Root of the JSON tree (usually a ``dict`` decoded from a request).
    path
        Dotted path string (``"event_data.element.tag"``) or a pre-split
        sequence of segments. Sequence segments index lists by position.

    Returns
    -------
    LookupResult
        ``Found(value)`` when every segment resolved to a non-null value,
        otherwise ``MISSING``. A ``None`` leaf counts as missing.

    """
    segments = split_path(path) if isinstance(path, str) else tuple(path)
    if not segments:
        return MISSING

    current: object = tree
    for segment in segments:
        if current is None:
            return MISSING
        step = _step(current, segment)
        if step is MISSING:
            return MISSING
        current = typ.cast("Found", step).value

    if current is None:
        return MISSING
    return Found(current)


def get_path(
    tree: object,
    path: str | cabc.Sequence[str],
    default: typ.Any = "",  # noqa: ANN401 - mirrors dict.get
) -> typ.Any:  # noqa: ANN401 - JSON values are untyped
    """Return the value at ``path`` or ``default`` when it is missing."""
    result = lookup(tree, path)
    if isinstance(result, Found):
        return result.value
    return default


__all__ = [
    "MISSING",
    "PATH_SEPARATOR",
    "Found",
    "LookupResult",
    "get_path",
    "lookup",
    "split_path",
]
