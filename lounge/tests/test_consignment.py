from decimal import Decimal

from lounge.app import consignment
from lounge.app.consignment import consignment_totals, split_consignment, summarize_consignment


def test_split_uses_fifteen_percent_by_default():
    s = split_consignment("1000")
    assert s.gross == Decimal("1000.00")
    assert s.fee == Decimal("150.00")
    assert s.net == Decimal("850.00")


def test_split_rounds_and_clamps():
    s = split_consignment("33.33", fee_rate="0.15")
    assert s.fee == Decimal("5.00")
    assert s.net == Decimal("28.33")
    assert split_consignment("-10").gross == Decimal("0.00")
    assert split_consignment("100", fee_rate="2").net == Decimal("0.00")


def test_split_follows_configured_rate(monkeypatch):
    monkeypatch.setattr(consignment.settings, "consignment_fee_rate", Decimal("0.20"))
    assert split_consignment("100").fee == Decimal("20.00")


def test_summary_groups_by_consignor_case_insensitively():
    sales = [
        {"full_name": "Maria Santos", "category": "Bags", "restocked": 10, "sold": 4, "expected_sales": "400", "overall_sales": "400"},
        {"full_name": " maria santos", "category": "Shirts", "restocked": "5", "sold": "2", "expected_sales": "300", "overall_sales": "250"},
        {"full_name": "Leo", "category": "Bags", "restocked": 3, "sold": 1, "expected_sales": "100", "overall_sales": "100"},
    ]
    cashouts = [
        {"full_name": "MARIA SANTOS", "cashout_amount": "200", "payment_method": "cash"},
        {"full_name": "maria santos", "cashout_amount": "100", "payment_method": "GCash"},
    ]
    rows = summarize_consignment(sales, cashouts)

    assert [r.label for r in rows] == ["Leo", "Maria Santos"]
    maria = rows[1]
    assert maria.total_restock == 15
    assert maria.total_sold == 6
    assert maria.expected_total == Decimal("700.00")
    assert maria.gross_total == Decimal("650.00")
    assert maria.fee_total == Decimal("97.50")
    assert maria.net_total == Decimal("552.50")
    assert maria.cashout_cash == Decimal("200.00")
    assert maria.cashout_gcash == Decimal("100.00")
    assert maria.cashout_total == Decimal("300.00")
    assert maria.remaining == Decimal("252.50")


def test_summary_by_category_and_blank_labels():
    sales = [
        {"full_name": "A", "category": "Bags", "overall_sales": "100"},
        {"full_name": "B", "category": "bags", "overall_sales": "50"},
        {"full_name": "C", "category": None, "overall_sales": "10"},
    ]
    rows = summarize_consignment(sales, group_by="CATEGORY")
    assert [(r.label, r.gross_total) for r in rows] == [("-", Decimal("10.00")), ("Bags", Decimal("150.00"))]


def test_cashout_without_sales_still_gets_a_row_and_remaining_is_floored():
    rows = summarize_consignment(
        [{"full_name": "Leo", "overall_sales": "100"}],
        [{"full_name": "Leo", "cashout_amount": "500"}, {"full_name": "Nina", "cashout_amount": "50"}],
    )
    leo, nina = rows
    assert leo.remaining == Decimal("0.00")
    assert nina.gross_total == Decimal("0")
    assert nina.cashout_cash == Decimal("50.00")
    assert nina.remaining == Decimal("0.00")


def test_consignment_totals_split_overall_gross():
    rows = summarize_consignment(
        [{"full_name": "A", "overall_sales": "120"}, {"full_name": "B", "overall_sales": "80"}]
    )
    total = consignment_totals(rows)
    assert (total.gross, total.fee, total.net) == (Decimal("200.00"), Decimal("30.00"), Decimal("170.00"))


def test_summary_clamps_absurd_counts():
    (row,) = summarize_consignment([{"full_name": "Leo", "sold": "1e3000000", "restocked": "3", "overall_sales": "100"}])
    assert row.total_sold == 0
    assert row.total_restock == 3
    assert row.gross_total == Decimal("100.00")
