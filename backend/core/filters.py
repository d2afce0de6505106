"""
Filtering of already-fetched record lists.

List screens narrow the records they hold with a free-text search box and a
status dropdown; both are applied locally, never sent to the backend.
"""

from collections.abc import Callable, Iterable, Sequence
from typing import Any, TypeVar

T = TypeVar("T")

ALL = "all"


def _field_text(record: Any, name: str) -> str:
    value = record
    for part in name.split("."):
        if value is None:
            return ""
        value = value.get(part) if isinstance(value, dict) else getattr(value, part, None)
    return "" if value is None else str(value)


def matches_search(record: Any, query: str | None, fields: Sequence[str]) -> bool:
    """
    Case-insensitive substring match of *query* against any of *fields*.

    Fields may be dotted paths (``"profile.full_name"``). An empty query
    matches everything.
    """
    if not query:
        return True
    needle = query.lower()
    return any(needle in _field_text(record, name).lower() for name in fields)


def matches_status(record: Any, status: str | None, field: str = "status") -> bool:
    """Status equality; ``None`` or ``"all"`` matches every record."""
    if not status or status == ALL:
        return True
    return _field_text(record, field) == str(status)


def filter_records(
    records: Iterable[T],
    query: str | None = None,
    fields: Sequence[str] = ("name",),
    status: str | None = None,
    status_field: str = "status",
) -> list[T]:
    """Apply search and status filters together."""
    return [
        record
        for record in records
        if matches_search(record, query, fields) and matches_status(record, status, status_field)
    ]


def group_by(records: Iterable[T], key: Callable[[T], str]) -> dict[str, list[T]]:
    """Group records by key, preserving input order within each group."""
    grouped: dict[str, list[T]] = {}
    for record in records:
        grouped.setdefault(key(record), []).append(record)
    return grouped
