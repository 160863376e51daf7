from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Iterable, List, Optional

from .config import DEFAULT_GROUP_WINDOW_MS, settings
from .money import ZERO, money, norm_text, q2, to_bool

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def identity_key(full_name, seat_number, *extra) -> str:
    """
    Customer identity used to stitch add-on rows into one receipt.
    Cancelled-record screens also key on the description / cancel note, hence `extra`.
    """
    return "|".join(norm_text(p) for p in (full_name, seat_number, *extra))


def parse_optional_timestamp(v) -> Optional[datetime]:
    """ISO-8601 text or a datetime, as an aware datetime (naive means UTC); None when blank or unparsable."""
    if isinstance(v, datetime):
        return v if v.tzinfo else v.replace(tzinfo=timezone.utc)
    raw = str(v or "").strip()
    if not raw:
        return None
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError:
        return None
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def parse_timestamp(v) -> datetime:
    # Unparsable or missing timestamps sort as the epoch instead of failing the whole list.
    return parse_optional_timestamp(v) or EPOCH


@dataclass(frozen=True)
class LineItem:
    key: str
    timestamp: datetime
    total: Decimal
    cash: Decimal = ZERO
    electronic: Decimal = ZERO
    is_paid: bool = False
    paid_at: Optional[datetime] = None
    payload: Any = None

    def __post_init__(self):
        # Directly constructed items are normalized too, so mixed input never breaks the scan.
        object.__setattr__(self, "key", norm_text(self.key))
        object.__setattr__(self, "timestamp", parse_timestamp(self.timestamp))
        for name in ("total", "cash", "electronic"):
            object.__setattr__(self, name, money(getattr(self, name)))
        object.__setattr__(self, "is_paid", to_bool(self.is_paid))
        object.__setattr__(self, "paid_at", parse_timestamp(self.paid_at) if self.paid_at else None)

    @classmethod
    def build(
        cls,
        *,
        key: str,
        timestamp,
        total,
        cash=0,
        electronic=0,
        is_paid: bool = False,
        paid_at=None,
        payload: Any = None,
    ) -> "LineItem":
        return cls(
            key=key,
            timestamp=timestamp,
            total=total,
            cash=cash,
            electronic=electronic,
            is_paid=is_paid,
            paid_at=paid_at,
            payload=payload,
        )


@dataclass
class TransactionGroup:
    key: str
    timestamp: datetime
    items: List[LineItem] = field(default_factory=list)
    total: Decimal = ZERO
    cash: Decimal = ZERO
    electronic: Decimal = ZERO
    is_paid: bool = False
    paid_at: Optional[datetime] = None

    def add(self, item: LineItem) -> None:
        self.items.append(item)
        # Round after every step so group totals match the receipt line-by-line.
        self.total = q2(self.total + item.total)
        self.cash = q2(self.cash + item.cash)
        self.electronic = q2(self.electronic + item.electronic)
        self.is_paid = self.is_paid or item.is_paid
        if self.paid_at is None:
            self.paid_at = item.paid_at


def group_line_items(items: Iterable[LineItem], window_ms: Optional[int] = None) -> List[TransactionGroup]:
    """
    Partition add-on/consignment rows into customer transactions.

    Rows are scanned oldest first; a new group starts whenever the identity key
    changes or the gap to the previous row exceeds `window_ms`. Groups come back
    newest first, which is how every list screen displays them.
    """
    window = settings.group_window_ms if window_ms is None else int(window_ms)
    if window <= 0:
        window = DEFAULT_GROUP_WINDOW_MS

    max_gap = timedelta(milliseconds=window)
    ordered = sorted(items, key=lambda it: it.timestamp)
    groups: List[TransactionGroup] = []
    current: Optional[TransactionGroup] = None
    last: Optional[LineItem] = None

    for item in ordered:
        start_new = (
            current is None
            or last is None
            or item.key != last.key
            or abs(item.timestamp - last.timestamp) > max_gap
        )
        if start_new:
            current = TransactionGroup(key=item.key, timestamp=item.timestamp)
            groups.append(current)
        current.add(item)
        last = item

    # Ties keep the later-scanned group first, so reversing restores scan order.
    order = sorted(range(len(groups)), key=lambda i: (groups[i].timestamp, i), reverse=True)
    return [groups[i] for i in order]


def flatten_groups(groups: Iterable[TransactionGroup]) -> List[LineItem]:
    # Oldest group first, so the result is in the same order the scan consumes.
    out: List[LineItem] = []
    for g in reversed(list(groups)):
        out.extend(g.items)
    return out
