from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BeforeValidator

from .money import money, to_bool, to_decimal


def _to_lower_str(v):
    if v is None:
        return v
    return str(v).strip().lower()


def _to_discount_kind(v):
    s = _to_lower_str(v) or "none"
    return s if s in {"percent", "amount"} else "none"


def _to_group_by(v):
    s = _to_lower_str(v) or "consignor"
    return "category" if s == "category" else "consignor"


# Screens send amounts straight from text inputs; malformed values clamp, they never 422.
Money = Annotated[Decimal, BeforeValidator(money)]
Number = Annotated[Decimal, BeforeValidator(to_decimal)]
Flag = Annotated[bool, BeforeValidator(to_bool)]

# Canonical codes mirror the `discount_kind` column on sessions and promo bookings.
DiscountKind = Annotated[Literal["none", "percent", "amount"], BeforeValidator(_to_discount_kind)]
ConsignmentGroupBy = Annotated[Literal["consignor", "category"], BeforeValidator(_to_group_by)]
CashoutMethod = Annotated[Literal["cash", "gcash"], BeforeValidator(lambda v: "gcash" if _to_lower_str(v) == "gcash" else "cash")]
# Unknown kinds pass through; the denomination sheet simply has no slot for them.
MoneyKind = Annotated[str, BeforeValidator(lambda v: _to_lower_str(v) or "")]
