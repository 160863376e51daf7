from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping

from .config import settings
from .money import ZERO, money, norm_text, q2, to_decimal


@dataclass(frozen=True)
class ConsignmentSplit:
    gross: Decimal
    fee: Decimal
    net: Decimal


def _rate(fee_rate) -> Decimal:
    if fee_rate is None:
        return settings.consignment_fee_rate
    r = to_decimal(fee_rate)
    return min(Decimal("1"), max(ZERO, r))


def split_consignment(gross, fee_rate=None) -> ConsignmentSplit:
    """The venue keeps `fee_rate` of consignment sales; the consignor is owed the rest."""
    g = money(gross)
    fee = q2(g * _rate(fee_rate))
    return ConsignmentSplit(gross=g, fee=fee, net=q2(g - fee))


@dataclass
class ConsignorSummary:
    key: str
    label: str
    total_restock: int = 0
    total_sold: int = 0
    expected_total: Decimal = ZERO
    gross_total: Decimal = ZERO
    fee_total: Decimal = ZERO
    net_total: Decimal = ZERO
    cashout_cash: Decimal = ZERO
    cashout_gcash: Decimal = ZERO
    cashout_total: Decimal = ZERO
    remaining: Decimal = ZERO


def _label(v) -> str:
    s = str(v or "").strip()
    return s or "-"


def _count(v) -> int:
    d = to_decimal(v)
    return int(d) if d > 0 else 0


def summarize_consignment(
    sales_rows: Iterable[Mapping],
    cashouts: Iterable[Mapping] = (),
    *,
    group_by: str = "consignor",
    fee_rate=None,
) -> List[ConsignorSummary]:
    """
    Per-consignor (or per-category) payable summary.

    sales_rows: {full_name, category, restocked, sold, expected_sales, overall_sales}
    cashouts:   {full_name, category, cashout_amount, payment_method}
    """
    field_name = "category" if norm_text(group_by) == "category" else "full_name"
    by_key: Dict[str, ConsignorSummary] = {}

    def get_or_create(row: Mapping) -> ConsignorSummary:
        label = _label(row.get(field_name))
        key = norm_text(label)
        found = by_key.get(key)
        if found is None:
            found = ConsignorSummary(key=key, label=label)
            by_key[key] = found
        return found

    for r in sales_rows:
        a = get_or_create(r)
        a.total_restock += _count(r.get("restocked"))
        a.total_sold += _count(r.get("sold"))
        a.expected_total = q2(a.expected_total + q2(r.get("expected_sales")))
        a.gross_total = q2(a.gross_total + q2(r.get("overall_sales")))

    for a in by_key.values():
        split = split_consignment(a.gross_total, fee_rate)
        a.fee_total = split.fee
        a.net_total = split.net

    for c in cashouts:
        a = get_or_create(c)
        amt = q2(c.get("cashout_amount"))
        if norm_text(c.get("payment_method")) == "gcash":
            a.cashout_gcash = q2(a.cashout_gcash + amt)
        else:
            a.cashout_cash = q2(a.cashout_cash + amt)
        a.cashout_total = q2(a.cashout_cash + a.cashout_gcash)

    for a in by_key.values():
        a.remaining = q2(max(ZERO, a.net_total - a.cashout_total))

    return sorted(by_key.values(), key=lambda a: a.key)


def consignment_totals(rows: Iterable[ConsignorSummary], fee_rate=None) -> ConsignmentSplit:
    gross = ZERO
    for a in rows:
        gross = q2(gross + a.gross_total)
    return split_consignment(gross, fee_rate)
