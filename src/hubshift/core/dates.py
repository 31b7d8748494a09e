"""Relative date parsing for event filters.

Accepted forms are ``NOW`` or ``<number>:<unit>`` where unit is one of
SECONDS, MINUTES, HOURS, DAYS, WEEKS, MONTHS or YEARS (case-insensitive),
for example ``-7:DAYS`` or ``2:WEEKS``.
"""

from __future__ import annotations

import calendar
from datetime import UTC, datetime, timedelta

__all__ = ["relative_date"]

_FIXED_UNITS: dict[str, str] = {
    "SECONDS": "seconds",
    "MINUTES": "minutes",
    "HOURS": "hours",
    "DAYS": "days",
    "WEEKS": "weeks",
}


def _add_months(moment: datetime, months: int) -> datetime:
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def relative_date(relative: str, now: datetime | None = None) -> datetime:
    """Resolve a relative date expression against ``now``.

    Args:
        relative: ``NOW`` or ``<number>:<unit>``
        now: Reference time, defaults to the current UTC time

    Returns:
        Timezone-aware datetime

    Raises:
        ValueError: If the expression is malformed or the unit is unknown
    """
    base = now or datetime.now(UTC)
    text = relative.strip()

    if text.upper() == "NOW":
        return base

    amount_text, sep, unit = text.partition(":")
    if not sep:
        raise ValueError(
            f"Invalid relative date '{relative}'. Use NOW or <number>:<unit>."
        )

    try:
        amount = int(amount_text)
    except ValueError as exc:
        raise ValueError(f"Invalid amount in relative date '{relative}'.") from exc

    unit = unit.strip().upper()
    if unit in _FIXED_UNITS:
        return base + timedelta(**{_FIXED_UNITS[unit]: amount})
    if unit == "MONTHS":
        return _add_months(base, amount)
    if unit == "YEARS":
        return _add_months(base, amount * 12)

    raise ValueError(f"Unknown unit '{unit}' in relative date '{relative}'.")
