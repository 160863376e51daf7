from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .money import ZERO, money, norm_text, peso, q2, to_decimal

HUNDRED = Decimal("100")

DISCOUNT_KINDS = ("none", "percent", "amount")


def normalize_discount_kind(v) -> str:
    s = norm_text(v)
    return s if s in DISCOUNT_KINDS else "none"


@dataclass(frozen=True)
class Discount:
    kind: str = "none"
    value: Decimal = ZERO

    @classmethod
    def none(cls) -> "Discount":
        return cls()

    @classmethod
    def percent(cls, value) -> "Discount":
        return cls("percent", to_decimal(value))

    @classmethod
    def amount(cls, value) -> "Discount":
        return cls("amount", to_decimal(value))

    @classmethod
    def from_row(cls, kind, value) -> "Discount":
        k = normalize_discount_kind(kind)
        if k == "none":
            return cls()
        return cls(k, to_decimal(value))


@dataclass(frozen=True)
class DiscountResult:
    discounted_total: Decimal
    discount_amount: Decimal


def apply_discount(base, discount: Discount | None = None) -> DiscountResult:
    """
    Apply a session/booking discount to a base amount.

    Inputs are clamped rather than rejected: a negative base counts as 0, a
    percent is clamped into [0, 100] and a fixed amount can never exceed the
    base. `discounted_total + discount_amount` always equals `money(base)`.
    """
    cost = money(base)
    d = discount or Discount.none()
    v = to_decimal(d.value)
    if v < 0:
        v = ZERO

    if d.kind == "percent":
        pct = min(HUNDRED, v)
        disc = q2(cost * pct / HUNDRED)
    elif d.kind == "amount":
        disc = q2(min(cost, v))
    else:
        return DiscountResult(discounted_total=cost, discount_amount=q2(ZERO))

    final = q2(max(ZERO, cost - disc))
    return DiscountResult(discounted_total=final, discount_amount=disc)


def discount_text(discount: Discount | None) -> str:
    d = discount or Discount.none()
    v = to_decimal(d.value)
    if d.kind == "percent" and v > 0:
        return f"{v.normalize():f}%"
    if d.kind == "amount" and v > 0:
        return peso(v)
    return "—"
