from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from .config import settings
from .grouping import parse_optional_timestamp
from .money import ZERO, money, q2, to_decimal


def minutes_between(start, end) -> int:
    """Whole minutes from `start` to `end`, rounded down; 0 when either is unparsable or end <= start."""
    s = parse_optional_timestamp(start)
    e = parse_optional_timestamp(end)
    if s is None or e is None or e <= s:
        return 0
    return int((e - s).total_seconds() // 60)


def parse_hhmm(text) -> int:
    # Booking form duration, "H:MM". Anything malformed books zero minutes.
    parts = str(text or "").strip().split(":")
    if len(parts) != 2:
        return 0
    try:
        h, m = int(parts[0]), int(parts[1])
    except ValueError:
        return 0
    if h < 0 or m < 0 or m > 59:
        return 0
    return h * 60 + m


def add_duration(start, hhmm) -> Optional[datetime]:
    s = parse_optional_timestamp(start)
    if s is None:
        return None
    return s + timedelta(minutes=parse_hhmm(hhmm))


def time_charge(minutes, *, hourly_rate=None, free_minutes: Optional[int] = None) -> Decimal:
    """
    Walk-in seat time charge.

    The first `free_minutes` are not billed; the rest are charged per minute at
    `hourly_rate / 60` and rounded once to centavos. Defaults come from settings.
    """
    rate = settings.session_hourly_rate if hourly_rate is None else money(hourly_rate)
    free = settings.session_free_minutes if free_minutes is None else max(0, int(to_decimal(free_minutes)))
    used = max(0, int(to_decimal(minutes)))
    billable = max(0, used - free)
    if billable == 0:
        return q2(ZERO)
    return q2(Decimal(billable) * rate / Decimal(60))


def session_charge(time_started, time_ended, *, hourly_rate=None, free_minutes: Optional[int] = None) -> Decimal:
    return time_charge(
        minutes_between(time_started, time_ended),
        hourly_rate=hourly_rate,
        free_minutes=free_minutes,
    )
