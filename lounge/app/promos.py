from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_FLOOR
from typing import Iterable, Optional, Tuple

from .grouping import parse_optional_timestamp
from .money import to_decimal

UPCOMING = "upcoming"
ONGOING = "ongoing"
FINISHED = "finished"


def _whole(v) -> int:
    d = to_decimal(v)
    return max(0, int(d.to_integral_value(rounding=ROUND_FLOOR)))


def normalize_attempts(attempts_left, max_attempts) -> Tuple[int, int]:
    """
    Promo attempt counters as staff save them: both floored to non-negative
    integers, and attempts left never above the max when a max is set (0 = no cap).
    """
    left = _whole(attempts_left)
    cap = _whole(max_attempts)
    if cap > 0:
        left = min(left, cap)
    return left, cap


def _now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    return now if now.tzinfo else now.replace(tzinfo=timezone.utc)


def is_expired(validity_end_at, now: Optional[datetime] = None) -> bool:
    # No (or unreadable) validity end means the promo never expires.
    end = parse_optional_timestamp(validity_end_at)
    if end is None:
        return False
    return _now(now) > end


def booking_status(start_at, end_at, now: Optional[datetime] = None) -> str:
    start = parse_optional_timestamp(start_at)
    end = parse_optional_timestamp(end_at)
    if start is None or end is None:
        return FINISHED
    t = _now(now)
    if t < start:
        return UPCOMING
    if t <= end:
        return ONGOING
    return FINISHED


@dataclass(frozen=True)
class StatusCounts:
    upcoming: int = 0
    ongoing: int = 0
    finished: int = 0


def count_statuses(bookings: Iterable[dict], now: Optional[datetime] = None) -> StatusCounts:
    t = _now(now)
    counts = {UPCOMING: 0, ONGOING: 0, FINISHED: 0}
    for b in bookings:
        counts[booking_status(b.get("start_at"), b.get("end_at"), t)] += 1
    return StatusCounts(**counts)
