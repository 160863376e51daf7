from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import AliasChoices, BaseModel, Field

from ..cash_count import daily_summary, merge_count_lines
from ..consignment import consignment_totals, summarize_consignment
from ..discounts import Discount, apply_discount, discount_text
from ..grouping import LineItem, group_line_items, identity_key
from ..payments import balance_after_down_payment, reconcile
from ..promos import is_expired, normalize_attempts
from ..sessions import minutes_between, time_charge
from ..validation import CashoutMethod, ConsignmentGroupBy, DiscountKind, Flag, Money, MoneyKind, Number

router = APIRouter(prefix="/billing", tags=["billing"])


class DiscountIn(BaseModel):
    base: Money = Decimal("0")
    discount_kind: DiscountKind = "none"
    discount_value: Number = Decimal("0")


@router.post("/discount")
def compute_discount(data: DiscountIn):
    discount = Discount.from_row(data.discount_kind, data.discount_value)
    res = apply_discount(data.base, discount)
    return {
        "discounted_total": res.discounted_total,
        "discount_amount": res.discount_amount,
        "discount_text": discount_text(discount),
    }


class PaymentIn(BaseModel):
    price: Money = Decimal("0")
    discount_kind: DiscountKind = "none"
    discount_value: Number = Decimal("0")
    down_payment: Money = Decimal("0")
    cash: Money = Decimal("0")
    electronic: Money = Field(default=Decimal("0"), validation_alias=AliasChoices("electronic", "gcash"))


@router.post("/payment")
def compute_payment(data: PaymentIn):
    discount = Discount.from_row(data.discount_kind, data.discount_value)
    calc = apply_discount(data.price, discount)
    due = calc.discounted_total
    paid = reconcile(due, data.cash, data.electronic)
    return {
        "due": due,
        "discount_amount": calc.discount_amount,
        "discount_text": discount_text(discount),
        "balance_after_down_payment": balance_after_down_payment(due, data.down_payment),
        "total_paid": paid.total_paid,
        "remaining": paid.remaining,
        "change": paid.change,
        "is_paid": paid.is_paid,
        # The caller persists this together with is_paid.
        "paid_at": datetime.now(timezone.utc) if paid.is_paid else None,
    }


class LineItemIn(BaseModel):
    ref: Optional[str] = None
    full_name: Optional[str] = None
    seat_number: Optional[str] = None
    extra: List[str] = []
    created_at: Optional[str] = None
    total: Money = Decimal("0")
    cash: Money = Decimal("0")
    electronic: Money = Field(default=Decimal("0"), validation_alias=AliasChoices("electronic", "gcash"))
    is_paid: Flag = False
    paid_at: Optional[str] = None


class GroupIn(BaseModel):
    window_ms: Optional[int] = None
    items: List[LineItemIn] = []


@router.post("/group")
def group_receipts(data: GroupIn):
    if data.window_ms is not None and data.window_ms <= 0:
        raise HTTPException(status_code=400, detail="window_ms must be > 0")
    items = [
        LineItem.build(
            key=identity_key(it.full_name, it.seat_number, *it.extra),
            timestamp=it.created_at,
            total=it.total,
            cash=it.cash,
            electronic=it.electronic,
            is_paid=it.is_paid,
            paid_at=it.paid_at,
            payload=it,
        )
        for it in data.items
    ]
    groups = group_line_items(items, data.window_ms)
    out = []
    for g in groups:
        first = g.items[0].payload
        out.append(
            {
                "key": f"{g.key}|{int(g.timestamp.timestamp() * 1000)}",
                "created_at": g.timestamp,
                "full_name": first.full_name,
                "seat_number": first.seat_number,
                "refs": [it.payload.ref for it in g.items],
                "grand_total": g.total,
                "cash_amount": g.cash,
                "gcash_amount": g.electronic,
                "is_paid": g.is_paid,
                "paid_at": g.paid_at,
            }
        )
    return {"groups": out}


class ConsignmentSaleIn(BaseModel):
    full_name: Optional[str] = None
    category: Optional[str] = None
    restocked: Number = Decimal("0")
    sold: Number = Decimal("0")
    expected_sales: Number = Decimal("0")
    overall_sales: Number = Decimal("0")


class ConsignmentCashoutIn(BaseModel):
    full_name: Optional[str] = None
    category: Optional[str] = None
    cashout_amount: Money = Decimal("0")
    payment_method: CashoutMethod = "cash"


class ConsignmentIn(BaseModel):
    sales: List[ConsignmentSaleIn] = []
    cashouts: List[ConsignmentCashoutIn] = []
    group_by: ConsignmentGroupBy = "consignor"
    fee_rate: Optional[Number] = None


@router.post("/consignment")
def consignment_summary(data: ConsignmentIn):
    rows = summarize_consignment(
        [s.model_dump() for s in data.sales],
        [c.model_dump() for c in data.cashouts],
        group_by=data.group_by,
        fee_rate=data.fee_rate,
    )
    total = consignment_totals(rows, data.fee_rate)
    return {
        "rows": [vars(r) for r in rows],
        "totals": {"gross": total.gross, "fee": total.fee, "net": total.net},
    }


class CashLineIn(BaseModel):
    money_kind: MoneyKind = "cash"
    denomination: Number = Decimal("0")
    qty: Number = Decimal("0")


class DailySummaryIn(BaseModel):
    bilin: Money = Decimal("0")
    lines: List[CashLineIn] = []
    addon_totals: List[Money] = []
    consignment_totals: List[Money] = []
    fee_rate: Optional[Number] = None


@router.post("/daily-summary")
def compute_daily_summary(data: DailySummaryIn):
    lines = merge_count_lines([l.model_dump() for l in data.lines])
    s = daily_summary(
        lines,
        bilin=data.bilin,
        addon_totals=data.addon_totals,
        consignment_totals=data.consignment_totals,
        fee_rate=data.fee_rate,
    )
    return {
        "lines": [
            {"money_kind": l.money_kind, "denomination": l.denomination, "qty": l.qty, "amount": l.amount}
            for l in lines
        ],
        "cash_total": s.cash_total,
        "coin_total": s.coin_total,
        "cash_on_hand": s.cash_on_hand,
        "bilin": s.bilin,
        "net_collected": s.net_collected,
        "addons_paid": s.addons_paid,
        "consignment": {"gross": s.consignment.gross, "fee": s.consignment.fee, "net": s.consignment.net},
    }


class SessionIn(BaseModel):
    time_started: Optional[str] = None
    time_ended: Optional[str] = None
    hourly_rate: Optional[Money] = None
    free_minutes: Optional[Number] = None
    discount_kind: DiscountKind = "none"
    discount_value: Number = Decimal("0")


@router.post("/session")
def compute_session(data: SessionIn):
    minutes = minutes_between(data.time_started, data.time_ended)
    charge = time_charge(minutes, hourly_rate=data.hourly_rate, free_minutes=data.free_minutes)
    discount = Discount.from_row(data.discount_kind, data.discount_value)
    calc = apply_discount(charge, discount)
    return {
        "minutes_used": minutes,
        "time_charge": charge,
        "due": calc.discounted_total,
        "discount_amount": calc.discount_amount,
        "discount_text": discount_text(discount),
    }


class PromoRuleIn(BaseModel):
    attempts_left: Number = Decimal("0")
    max_attempts: Number = Decimal("0")
    validity_end_at: Optional[str] = None


@router.post("/promo-rule")
def normalize_promo_rule(data: PromoRuleIn):
    left, cap = normalize_attempts(data.attempts_left, data.max_attempts)
    return {
        "attempts_left": left,
        "max_attempts": cap,
        "validity_end_at": (data.validity_end_at or "").strip() or None,
        "is_expired": is_expired(data.validity_end_at),
    }
