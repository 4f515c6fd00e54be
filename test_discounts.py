from decimal import Decimal

from app.schemas.pricing import DiscountKind, DiscountRule
from app.services.discounts import (
    is_day_eligible, list_discount_availability, parse_rules, select_applicable_discount,
)

D = Decimal


def rule(id, kind="percentage", value="10", minimum=None, days=None, name=None):
    return DiscountRule(id=id, name=name or f"rule {id}", kind=kind, value=value,
                        minimum_purchase_amount=minimum, days_of_week=days)


def test_fixed_discount_capped_at_subtotal():
    sel = select_applicable_discount([rule(1, "fixed", "100")], D("20"), "Monday")
    assert sel.discount_amount == D("20.00")


def test_percentage_discount_is_linear(ten_percent):
    sel = select_applicable_discount([ten_percent], D("50"), "Monday")
    assert sel.discount == ten_percent
    assert sel.discount_amount == D("5.00")


def test_percentage_rounds_half_up_to_cents():
    sel = select_applicable_discount([rule(1, value="10")], D("12.35"), "Monday")
    assert sel.discount_amount == D("1.24")


def test_day_filter_excludes_rule_from_both_queries():
    monday_only = rule(1, days=["Monday"])
    assert select_applicable_discount([monday_only], D("50"), "Tuesday").discount is None
    assert list_discount_availability([monday_only], D("50"), "Tuesday") == []


def test_day_match_is_case_insensitive():
    r = rule(1, days=["monday", "FRIDAY"])
    assert is_day_eligible(r, "Monday")
    assert is_day_eligible(r, " friday ")
    assert not is_day_eligible(r, "Sunday")


def test_empty_day_list_means_every_day():
    assert is_day_eligible(rule(1, days=[]), "Sunday")
    assert is_day_eligible(rule(1, days=None), "Sunday")


def test_first_eligible_rule_wins_over_larger_one():
    small = rule(1, "fixed", "1.00")
    big = rule(2, "percentage", "50")
    sel = select_applicable_discount([small, big], D("40"), "Monday")
    assert sel.discount.id == 1
    assert sel.discount_amount == D("1.00")


def test_unmet_minimum_skips_to_next_rule():
    rules = [rule(1, value="20", minimum="30"), rule(2, value="5")]
    sel = select_applicable_discount(rules, D("25"), "Monday")
    assert sel.discount.id == 2
    assert sel.discount_amount == D("1.25")


def test_minimum_is_inclusive():
    sel = select_applicable_discount([rule(1, minimum="25")], D("25"), "Monday")
    assert sel.discount is not None


def test_no_rules_no_discount():
    for rules in ([], None):
        sel = select_applicable_discount(rules, D("25"), "Monday")
        assert sel.discount is None
        assert sel.discount_amount == 0


def test_availability_reports_shortfall():
    rules = [rule(1, minimum="30"), rule(2, minimum=None), rule(3, days=["Sunday"])]
    out = list_discount_availability(rules, D("22.50"), "Monday")

    assert [e.rule.id for e in out] == [1, 2]
    assert out[0].meets_requirement is False
    assert out[0].amount_needed == D("7.50")
    assert out[1].meets_requirement is True
    assert out[1].amount_needed == 0


def test_queries_do_not_touch_rules():
    rules = [rule(1, minimum="30"), rule(2)]
    snapshot = [r.model_copy() for r in rules]
    list_discount_availability(rules, D("10"), "Monday")
    select_applicable_discount(rules, D("10"), "Monday")
    assert rules == snapshot


def test_backend_payload_parses_with_its_own_field_names():
    rules = parse_rules([{
        "id": 7, "name": "Midweek", "discount_type": "Percentage", "discount_value": "15",
        "minimum_purchase_amount": "20.00", "days_of_week": ["Wednesday"],
    }])
    assert rules[0].kind is DiscountKind.PERCENTAGE
    assert rules[0].value == D("15")
    assert rules[0].days_of_week == ("Wednesday",)


def test_unparsable_value_counts_as_zero():
    rules = parse_rules([{"id": 1, "discount_type": "fixed", "discount_value": "ten euro"}])
    sel = select_applicable_discount(rules, D("30"), "Monday")
    assert sel.discount.id == 1
    assert sel.discount_amount == D("0.00")


def test_unknown_kind_is_skipped_not_fatal(caplog):
    rules = parse_rules([
        {"id": 1, "discount_type": "bogo", "discount_value": "1"},
        {"id": 2, "discount_type": "fixed", "discount_value": "2"},
    ])
    assert [r.id for r in rules] == [2]
    assert "skipping malformed discount rule" in caplog.text
