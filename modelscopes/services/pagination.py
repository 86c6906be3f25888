from __future__ import annotations

from typing import Any


def _as_int(value: Any) -> int:
    if isinstance(value, int):
        return value
    text = str(value or "").strip()
    try:
        return int(text)
    except ValueError:
        try:
            return int(float(text))
        except (ValueError, OverflowError):
            return 0


def page_window(page: Any = 1, per_page: Any = 0) -> tuple[int, int] | None:
    """``(limit, offset)`` for a page request, ``None`` when it is not valid."""
    page = _as_int(page)
    per_page = _as_int(per_page)
    if page < 1 or per_page < 1:
        return None
    return per_page, (page - 1) * per_page


def paginate_by_demand(q, page: Any = 1, per_page: Any = 0):
    window = page_window(page, per_page)
    if window is None:
        return q
    limit, offset = window
    return q.limit(limit).offset(offset)
