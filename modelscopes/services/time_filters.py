from __future__ import annotations

import calendar
import logging
from datetime import datetime, time, timedelta
from typing import Any, Callable

from modelscopes.core.errors import FormatError, ValidationError
from modelscopes.schemas.scopes import PERIODS
from modelscopes.services.instants import to_datetime, utcnow
from modelscopes.services.naming import column_ref

_LOG = logging.getLogger("modelscopes.scopes")


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.max, tzinfo=value.tzinfo)


def start_of_week(value: datetime) -> datetime:
    # Weeks start on Monday
    return start_of_day(value - timedelta(days=value.weekday()))


def end_of_week(value: datetime) -> datetime:
    return end_of_day(start_of_week(value) + timedelta(days=6))


def start_of_month(value: datetime) -> datetime:
    return start_of_day(value.replace(day=1))


def end_of_month(value: datetime) -> datetime:
    last_day = calendar.monthrange(value.year, value.month)[1]
    return end_of_day(value.replace(day=last_day))


def sub_month(value: datetime) -> datetime:
    year, month = (value.year, value.month - 1) if value.month > 1 else (value.year - 1, 12)
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def _on_date(col, day: datetime):
    day_start = start_of_day(day)
    return (col >= day_start) & (col < day_start + timedelta(days=1))


def filter_by_time_range(q, model, column: str, from_: Any = None, to: Any = None, alias: str | None = None):
    from_dt = to_datetime(from_)
    to_dt = to_datetime(to)
    if from_dt is not None and to_dt is not None and from_dt > to_dt:
        raise ValidationError(
            "Invalid date range. End date cannot be earlier than start date.",
            {"from": from_dt.isoformat(), "to": to_dt.isoformat()},
        )
    col = column_ref(model, column, alias)
    if from_dt is not None:
        q = q.filter(col >= from_dt)
    if to_dt is not None:
        q = q.filter(col <= to_dt)
    return q


def period_predicate(col, period: str | None, now: datetime):
    """Return the WHERE clause of a named time period relative to ``now``.

    ``last_week`` and ``last_month`` run up to the end of the current week or
    month, not the previous one.
    """
    if period is not None and period not in PERIODS:
        raise FormatError("Invalid time period.", {"period": period, "allowed": list(PERIODS)})
    if period is None or period == "today":
        return _on_date(col, now)
    if period == "24h":
        return col >= now - timedelta(hours=24)
    if period == "yesterday":
        return _on_date(col, now - timedelta(days=1))
    if period == "this_week":
        return col.between(start_of_week(now), end_of_week(now))
    if period == "last_week":
        return col.between(start_of_week(now - timedelta(weeks=1)), end_of_week(now))
    if period == "7d":
        return col >= now - timedelta(days=7)
    if period == "this_month":
        return col.between(start_of_month(now), end_of_month(now))
    if period == "last_month":
        return col.between(start_of_month(sub_month(now)), end_of_month(now))
    # 1month
    return col >= sub_month(now)


def filter_by_time_period(
    q,
    model,
    column: str,
    period: str | None = None,
    alias: str | None = None,
    clock: Callable[[], datetime] = utcnow,
):
    now = clock()
    predicate = period_predicate(column_ref(model, column, alias), period, now)
    _LOG.debug("Filtering %s by period %s (now=%s)", column, period or "today", now.isoformat())
    return q.filter(predicate)
