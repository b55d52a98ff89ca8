"""Reporting windows used by the sales endpoints."""
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

from django.utils import timezone

PERIOD_ALL = "ALL"
PERIOD_DAILY = "DAILY"
PERIOD_WEEKLY = "WEEKLY"
PERIOD_MONTHLY = "MONTHLY"
PERIOD_YEARLY = "YEARLY"
PERIODS = (PERIOD_ALL, PERIOD_DAILY, PERIOD_WEEKLY, PERIOD_MONTHLY, PERIOD_YEARLY)


def normalize_period(raw: Optional[str]) -> Optional[str]:
    value = (raw or PERIOD_ALL).strip().upper()
    return value if value in PERIODS else None


def period_start(period: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """Start of the current day/week/month/year; weeks start on Monday."""
    now = timezone.localtime(now or timezone.now())
    day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == PERIOD_DAILY:
        return day_start
    if period == PERIOD_WEEKLY:
        return day_start - timedelta(days=day_start.weekday())
    if period == PERIOD_MONTHLY:
        return day_start.replace(day=1)
    if period == PERIOD_YEARLY:
        return day_start.replace(month=1, day=1)
    return None


def parse_date(raw: Optional[str]) -> Optional[date]:
    if not raw:
        return None
    try:
        return date.fromisoformat(str(raw).strip()[:10])
    except ValueError:
        raise ValueError(f"Invalid date: {raw!r}")


def date_bounds(
    start: Optional[date], end: Optional[date]
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Aware datetimes for ``[start, end]``; the upper bound is exclusive of the next day."""
    tz = timezone.get_current_timezone()
    lower = (
        timezone.make_aware(datetime.combine(start, datetime.min.time()), tz)
        if start
        else None
    )
    upper = (
        timezone.make_aware(
            datetime.combine(end + timedelta(days=1), datetime.min.time()), tz
        )
        if end
        else None
    )
    return lower, upper
