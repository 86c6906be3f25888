from __future__ import annotations

import logging
from typing import Any, Iterable

from sqlalchemy import Boolean, or_

from modelscopes.core.config import settings
from modelscopes.services.naming import column_ref

_LOG = logging.getLogger("modelscopes.scopes")


def _as_list(values: Any) -> list[Any]:
    if isinstance(values, (list, tuple, set, frozenset)):
        return list(values)
    return [values]


def _as_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode(settings.APP_CHARSET)
    return None


def _is_like_pattern(text: str) -> bool:
    return text.startswith("%") or text.endswith("%")


def filter_by_strict_values(q, model, column: str, values: Any = (), alias: str | None = None):
    """AND ``(col = v1 OR col = v2 OR col IS NULL ...)`` onto ``q``.

    A scalar is treated as a one-element list and an empty list leaves the
    query untouched.
    """
    items = _as_list(values)
    if not items:
        return q
    col = column_ref(model, column, alias)
    predicates = [col.is_(None) if value is None else col == value for value in items]
    return q.filter(or_(*predicates))


def filter_by_like_values(
    q,
    model,
    column: str,
    values: Any = (),
    alias: str | None = None,
    min_length: int | None = None,
):
    """Like :func:`filter_by_strict_values`, but values wrapped in ``%`` use LIKE.

    Non-string values and strings shorter than ``min_length`` are skipped.
    Strings without a leading or trailing ``%`` are compared for equality.
    """
    items = _as_list(values)
    if not items:
        return q
    min_length = settings.FILTER_MIN_LENGTH if min_length is None else int(min_length)
    col = column_ref(model, column, alias)
    predicates = []
    for value in items:
        if value is None:
            predicates.append(col.is_(None))
            continue
        text = _as_text(value)
        if text is None or len(text) < min_length:
            _LOG.debug("Skipping filter value %r for %s", value, column)
            continue
        predicates.append(col.like(text) if _is_like_pattern(text) else col == text)
    if not predicates:
        return q
    return q.filter(or_(*predicates))


def normalize_filter_array(values: Any = (), min_length: int = 2, to_lowercase: bool = False) -> list[str]:
    """Keep unique strings of at least ``min_length`` characters, in order."""
    items: Iterable[Any] = [values] if isinstance(values, (str, bytes)) else (values or [])
    normalized: list[str] = []
    seen: set[str] = set()
    for value in items:
        text = _as_text(value)
        if text is None or (min_length and len(text) < min_length):
            continue
        if to_lowercase:
            text = text.lower()
        if text in seen:
            continue
        seen.add(text)
        normalized.append(text)
    return normalized


def _flag_value(col, flag: bool):
    if isinstance(col.type, Boolean):
        return flag
    return 1 if flag else 0


def active(q, model, alias: str | None = None):
    col = column_ref(model, "active", alias)
    return q.filter(col == _flag_value(col, True))


def inactive(q, model, alias: str | None = None):
    col = column_ref(model, "active", alias)
    return q.filter(col == _flag_value(col, False))
