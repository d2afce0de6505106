"""Helpers for building domain records from backend rows."""

from dataclasses import fields
from datetime import datetime
from typing import Any


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp as returned by the backend."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def row_kwargs(cls: type, row: dict[str, Any]) -> dict[str, Any]:
    """Keep only the keys of *row* that are fields of dataclass *cls*."""
    names = {f.name for f in fields(cls)}
    return {key: value for key, value in row.items() if key in names}
