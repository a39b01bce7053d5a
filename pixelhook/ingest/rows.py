"""Flatten pixel events into fixed-column sheet rows.

An event is first reduced to a flat mapping of logical field names to
extracted values, then projected onto the profile's ordered headers. The
projection is rectangular: every column yields a cell and missing values
become empty strings.

Cells are written with ``USER_ENTERED`` semantics, so a leading ``+`` would
make Sheets parse an E.164 phone number as a formula or number. Such
strings are prefixed with :data:`ESCAPE_MARKER`, which Sheets hides and
:func:`unescape_cell` strips again.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

import msgspec

from pixelhook.common.lookup import get_path

if typ.TYPE_CHECKING:
    from pixelhook.ingest.profiles import PayloadProfile

Cell = str | int | float | bool
Row = tuple[Cell, ...]

ESCAPE_MARKER = "'"
_FORMULA_PREFIX = "+"


def build_field_mapping(
    event: cabc.Mapping[str, typ.Any],
    profile: PayloadProfile,
) -> dict[str, typ.Any]:
    """Extract every mapped logical field from ``event``.

    Parameters
    ----------
    event
        Untyped event record.
    profile
        Profile supplying the logical field to path mapping.

    Returns
    -------
    dict[str, Any]
        Logical field name -> extracted value; missing paths map to ``""``.

    """
    return {field: get_path(event, path) for field, path in profile.field_paths.items()}


def _needs_marker(value: str) -> bool:
    return value.lstrip(ESCAPE_MARKER).startswith(_FORMULA_PREFIX)


def escape_cell(value: Cell) -> Cell:
    """Prefix strings whose leading markers are followed by ``+``.

    Values that already start with the marker get one more, so
    :func:`unescape_cell` always restores the original.

    >>> escape_cell("+15551234567")
    "'+15551234567"
    >>> escape_cell("'+1 offer")
    "''+1 offer"

    """
    if isinstance(value, str) and _needs_marker(value):
        return f"{ESCAPE_MARKER}{value}"
    return value


def unescape_cell(value: Cell) -> Cell:
    """Strip the single escape marker added by :func:`escape_cell`."""
    if (
        isinstance(value, str)
        and value.startswith(ESCAPE_MARKER)
        and _needs_marker(value[len(ESCAPE_MARKER) :])
    ):
        return value[len(ESCAPE_MARKER) :]
    return value


def to_cell(value: object) -> Cell:
    """Coerce an extracted value into a sheet cell.

    Falsy values (``None``, ``""``, ``0``, ``False``, empty containers)
    become ``""``. Nested objects and arrays are JSON-encoded so the cell
    stays scalar. Strings are escaped with :func:`escape_cell`.
    """
    if not value:
        return ""
    if isinstance(value, str | int | float | bool):
        return escape_cell(value)
    return msgspec.json.encode(value).decode("utf-8")


def project_row(
    fields: cabc.Mapping[str, typ.Any],
    headers: cabc.Sequence[str],
) -> Row:
    """Project a field mapping onto ``headers`` preserving column order."""
    return tuple(to_cell(fields.get(header)) for header in headers)


def event_to_row(event: cabc.Mapping[str, typ.Any], profile: PayloadProfile) -> Row:
    """Flatten one event into a row ordered by the profile headers."""
    return project_row(build_field_mapping(event, profile), profile.headers)


def read_cell(row: cabc.Sequence[Cell], headers: cabc.Sequence[str], column: str) -> Cell:
    """Read ``column`` back from a projected row, undoing the escape marker.

    Raises
    ------
    ValueError
        If ``column`` is not one of ``headers``.

    """
    return unescape_cell(row[list(headers).index(column)])


__all__ = [
    "ESCAPE_MARKER",
    "Cell",
    "Row",
    "build_field_mapping",
    "escape_cell",
    "event_to_row",
    "project_row",
    "read_cell",
    "to_cell",
    "unescape_cell",
]
