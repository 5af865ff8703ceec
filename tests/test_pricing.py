import pytest

from checkout.pricing import (
    FlatDiscount,
    PercentageDiscount,
    compute_total,
    parse_discount,
    round_half_up,
    to_minor_units,
)


@pytest.mark.parametrize("price,quantity,expected", [
    (499, 2, 998),
    (10.4, 1, 10),
    (10.5, 1, 11),
    (0.3, 1, 1),
    (99.99, 3, 300),
])
def test_total_without_coupon(price, quantity, expected):
    assert compute_total(price, quantity) == expected
    assert to_minor_units(compute_total(price, quantity)) == expected * 100


def test_quantity_defaults_to_one():
    assert compute_total(250) == 250
    assert compute_total(250, None) == 250


def test_percentage_coupon_matches_checkout_example():
    # 998 - 99.8 = 898.2
    total = compute_total(499, 2, PercentageDiscount(10))
    assert total == 898
    assert to_minor_units(total) == 89800


def test_flat_coupon_is_clamped_to_minimum():
    total = compute_total(5, 1, FlatDiscount(100))
    assert total == 1
    assert to_minor_units(total) == 100


def test_flat_discount_larger_than_price():
    assert compute_total(10, 1, FlatDiscount(50)) == 1


def test_flat_coupon_subtracts_before_rounding():
    assert compute_total(100.4, 1, FlatDiscount(0.2)) == 100
    assert compute_total(100, 2, FlatDiscount(49.5)) == 151


def test_full_percentage_discount_clamps():
    assert compute_total(1200, 1, PercentageDiscount(100)) == 1


def test_rounding_is_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(-0.5) == 0
    assert round_half_up(898.2) == 898


@pytest.mark.parametrize("coupon_type", ["percentage", "percent", "Percentage", " PERCENT "])
def test_parse_percentage_aliases(coupon_type):
    assert parse_discount(coupon_type, 15) == PercentageDiscount(15.0)


def test_parse_flat():
    assert parse_discount("flat", "40") == FlatDiscount(40.0)


@pytest.mark.parametrize("coupon_type", [None, "", "bogo", "percentage_flat"])
def test_unknown_coupon_type_gives_no_discount(coupon_type):
    assert parse_discount(coupon_type, 10) is None
