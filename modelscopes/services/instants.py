from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any

from modelscopes.core.errors import FormatError

# Epoch values at or above this magnitude are read as milliseconds
_EPOCH_MILLIS_THRESHOLD = 100_000_000_000
# Shorter digit runs are dates (20240110) or junk, never epoch values
_EPOCH_RE = re.compile(r"^[+-]?\d{9,}(\.\d+)?$")
_COMPACT_DATE_RE = re.compile(r"^\d{8}$")


def utcnow():
    return datetime.now(timezone.utc)


def _bad_instant(value: Any) -> FormatError:
    return FormatError(f"Invalid date value: {value!r}", {"value": str(value)})


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _from_epoch(number: float) -> datetime:
    if abs(number) >= _EPOCH_MILLIS_THRESHOLD:
        number = number / 1000.0
    try:
        return datetime.fromtimestamp(number, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        raise _bad_instant(number)


def to_datetime(value: Any) -> datetime | None:
    """Normalize an instant to an aware ``datetime``.

    Accepts ``None``, ``datetime``, ``date``, epoch seconds or milliseconds
    (numbers, or digit strings of nine digits or more), compact ``YYYYMMDD``
    dates and ISO 8601 strings. Naive values are taken as UTC. Blank strings
    mean "no instant" and give ``None``.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise _bad_instant(value)
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time(), tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        return _from_epoch(float(value))
    if not isinstance(value, str):
        raise _bad_instant(value)

    text = value.strip()
    if not text:
        return None
    if _EPOCH_RE.fullmatch(text):
        return _from_epoch(float(text))
    try:
        if _COMPACT_DATE_RE.fullmatch(text):
            return datetime.strptime(text, "%Y%m%d").replace(tzinfo=timezone.utc)
        if "T" not in text and " " not in text and len(text) == 10:
            return datetime.combine(date.fromisoformat(text), datetime.min.time(), tzinfo=timezone.utc)
        return _as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        raise _bad_instant(value)
