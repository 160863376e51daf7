from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Mapping

from .consignment import ConsignmentSplit, split_consignment
from .money import ZERO, money, norm_text, q2, to_decimal

CASH_DENOMS = (1000, 500, 200, 100, 50)
COIN_DENOMS = (20, 10, 5, 1)


@dataclass(frozen=True)
class CashLine:
    money_kind: str
    denomination: int
    qty: int = 0

    @property
    def amount(self) -> Decimal:
        return Decimal(self.denomination * self.qty)


def build_zero_lines() -> List[CashLine]:
    lines = [CashLine("cash", d) for d in CASH_DENOMS]
    lines.extend(CashLine("coin", d) for d in COIN_DENOMS)
    return lines


def _qty(v) -> int:
    d = to_decimal(v)
    return int(d) if d > 0 else 0


def merge_count_lines(rows: Iterable[Mapping]) -> List[CashLine]:
    """
    Lay stored count rows over the fixed denomination sheet.
    Every denomination is always present; rows for unknown denominations are dropped.
    """
    qty_by_slot = {}
    for r in rows:
        kind = norm_text(r.get("money_kind"))
        denom = to_decimal(r.get("denomination"))
        if denom != denom.to_integral_value():
            continue
        slot = (kind, int(denom))
        # First stored row per slot wins.
        qty_by_slot.setdefault(slot, _qty(r.get("qty")))
    return [
        CashLine(line.money_kind, line.denomination, qty_by_slot.get((line.money_kind, line.denomination), 0))
        for line in build_zero_lines()
    ]


def kind_total(lines: Iterable[CashLine], money_kind: str) -> Decimal:
    return q2(sum((l.amount for l in lines if l.money_kind == money_kind), ZERO))


def cash_on_hand(lines: Iterable[CashLine]) -> Decimal:
    return q2(sum((l.amount for l in lines), ZERO))


@dataclass(frozen=True)
class DailySummary:
    cash_total: Decimal
    coin_total: Decimal
    cash_on_hand: Decimal
    bilin: Decimal
    net_collected: Decimal
    addons_paid: Decimal
    consignment: ConsignmentSplit


def daily_summary(
    lines: Iterable[CashLine],
    *,
    bilin=0,
    addon_totals: Iterable = (),
    consignment_totals: Iterable = (),
    fee_rate=None,
) -> DailySummary:
    """
    End-of-day drawer figures.

    `addon_totals` / `consignment_totals` are line totals of rows already marked
    paid on the report day; unpaid rows must not be passed in.
    """
    lines = list(lines)
    coh = cash_on_hand(lines)
    b = money(bilin)
    addons = q2(sum((money(t) for t in addon_totals), ZERO))
    cons_gross = q2(sum((money(t) for t in consignment_totals), ZERO))
    return DailySummary(
        cash_total=kind_total(lines, "cash"),
        coin_total=kind_total(lines, "coin"),
        cash_on_hand=coh,
        bilin=b,
        # Not floored: a negative figure means the drawer is short.
        net_collected=q2(coh - b),
        addons_paid=addons,
        consignment=split_consignment(cons_gross, fee_rate),
    )
