from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .discounts import Discount, DiscountResult, apply_discount
from .money import ZERO, money, q2, signed_money, to_decimal


@dataclass(frozen=True)
class PaymentResult:
    total_paid: Decimal
    # Positive: still owed by the customer. Negative: change owed to the customer.
    balance_or_change: Decimal
    is_paid: bool

    @property
    def is_change(self) -> bool:
        return self.balance_or_change < 0

    @property
    def remaining(self) -> Decimal:
        return q2(max(ZERO, self.balance_or_change))

    @property
    def change(self) -> Decimal:
        return q2(max(ZERO, -self.balance_or_change))


def reconcile(due, cash, electronic) -> PaymentResult:
    """
    Derive paid/unpaid from a cash + e-wallet split.

    Contributions are clamped to >= 0 but never capped against `due`;
    overpayment is reported as change, not rejected.
    """
    due_d = q2(to_decimal(due))
    total_paid = q2(money(cash) + money(electronic))
    balance = signed_money(due_d - total_paid)
    is_paid = True if due_d <= 0 else total_paid >= due_d
    return PaymentResult(total_paid=total_paid, balance_or_change=balance, is_paid=is_paid)


def due_after_discount(price, discount: Discount | None = None) -> DiscountResult:
    # Amount due is always the discount-adjusted price, never the gross system cost.
    return apply_discount(price, discount)


def balance_after_down_payment(due, down_payment) -> Decimal:
    return q2(max(ZERO, money(due) - money(down_payment)))
