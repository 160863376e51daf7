from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

Q2 = Decimal("0.01")
ZERO = Decimal("0")
# Largest decimal exponent accepted as input; anything bigger is not a real amount or count.
MAX_ADJUSTED = 12


def to_decimal(v) -> Decimal:
    """
    Lenient numeric coercion for form input and backend rows.
    Anything that is not a finite number of sane magnitude is treated as zero;
    this never raises.
    """
    if v is None or isinstance(v, bool):
        return ZERO
    if isinstance(v, Decimal):
        d = v
    elif isinstance(v, int):
        d = Decimal(v)
    elif isinstance(v, float):
        d = Decimal(str(v))
    else:
        raw = str(v).strip()
        if not raw:
            return ZERO
        try:
            d = Decimal(raw)
        except InvalidOperation:
            return ZERO
    if not d.is_finite() or d.adjusted() > MAX_ADJUSTED:
        return ZERO
    return d


def q2(v) -> Decimal:
    try:
        return to_decimal(v).quantize(Q2, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # Result exceeds context precision.
        return ZERO.quantize(Q2)


def money(v) -> Decimal:
    # Non-negative, 2dp: what every stored amount (price, total, cash, e-wallet) must satisfy.
    d = to_decimal(v)
    return q2(d if d > 0 else ZERO)


def signed_money(v) -> Decimal:
    return q2(v)


def to_bool(v) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float, Decimal)):
        return v != 0
    if isinstance(v, str):
        return v.strip().lower() in {"true", "1", "yes", "paid"}
    return False


def norm_text(v) -> str:
    return str(v or "").strip().lower()


def peso(v) -> str:
    return f"₱{q2(v):,.2f}"
