from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current server-local time.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now()


def day_name(value: date) -> str:
    return DAY_NAMES[value.weekday()]


def week_bounds(today: date) -> tuple[date, date]:
    """Monday..Sunday of the week containing ``today``."""
    monday = today - timedelta(days=today.weekday())
    return monday, monday + timedelta(days=6)


def hours_between(work_date: date, start: time, end: time) -> Decimal:
    """Elapsed hours between two times of the same day, rounded to 2 places."""
    elapsed = datetime.combine(work_date, end) - datetime.combine(work_date, start)
    seconds = max(int(elapsed.total_seconds()), 0)
    return (Decimal(seconds) / Decimal(3600)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def format_hhmm(value: time | None) -> str | None:
    return value.strftime("%H:%M") if value else None


def month_bounds(today: date) -> tuple[date, date]:
    """First and last day of the month containing ``today``."""
    first = today.replace(day=1)
    next_month = (first + timedelta(days=32)).replace(day=1)
    return first, next_month - timedelta(days=1)
