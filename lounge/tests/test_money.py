from decimal import Decimal

from lounge.app.money import money, norm_text, peso, q2, signed_money, to_bool, to_decimal


def test_to_decimal_treats_garbage_as_zero():
    assert to_decimal(None) == Decimal("0")
    assert to_decimal("") == Decimal("0")
    assert to_decimal("  ") == Decimal("0")
    assert to_decimal("abc") == Decimal("0")
    assert to_decimal(float("nan")) == Decimal("0")
    assert to_decimal(float("inf")) == Decimal("0")
    assert to_decimal("-Infinity") == Decimal("0")
    assert to_decimal(True) == Decimal("0")


def test_to_decimal_accepts_numbers_and_numeric_strings():
    assert to_decimal(5) == Decimal("5")
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal(" 12.50 ") == Decimal("12.50")
    assert to_decimal(Decimal("-3")) == Decimal("-3")


def test_q2_rounds_half_up():
    assert q2("1.005") == Decimal("1.01")
    assert q2("2.344") == Decimal("2.34")
    assert q2(None) == Decimal("0.00")
    assert q2("1e40") == Decimal("0.00")


def test_money_clamps_negative_to_zero():
    assert money("-5") == Decimal("0.00")
    assert money("12.345") == Decimal("12.35")
    assert signed_money("-20") == Decimal("-20.00")


def test_to_bool_row_flags():
    assert to_bool(True) is True
    assert to_bool(1) is True
    assert to_bool(0) is False
    assert to_bool(" PAID ") is True
    assert to_bool("yes") is True
    assert to_bool("no") is False
    assert to_bool(None) is False


def test_norm_text_and_peso():
    assert norm_text("  Juan DELA Cruz ") == "juan dela cruz"
    assert norm_text(None) == ""
    assert peso("1234.5") == "₱1,234.50"


def test_to_decimal_clamps_absurd_magnitudes():
    assert to_decimal("1e3000000") == Decimal("0")
    assert to_decimal(10 ** 40) == Decimal("0")
    assert to_decimal("-1e20") == Decimal("0")
    assert to_decimal("999999999999.99") == Decimal("999999999999.99")
    assert money("1e3000000") == Decimal("0.00")
