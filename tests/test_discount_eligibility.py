"""Uygunluk sırası, hedefleme tabanı ve tutar hesabı."""
from datetime import timedelta

import pytest

from app.services.discount_eligibility import applicable_base, discount_amount, evaluate_rule
from app.services.discount_types import (
    CategoryTarget,
    CustomerTarget,
    DiscountKind,
    DiscountStatus,
    EligibleDiscount,
    ProductTarget,
    Rejection,
    RejectionReason,
)
from factories import NOW, cart, rule


def test_percentage_on_whole_order():
    result = evaluate_rule(rule(), cart(order_amount=500_000), NOW)
    assert isinstance(result, EligibleDiscount)
    assert result.discount_amount == 50_000
    assert result.applicable_amount == 500_000
    assert result.applied_to_products == ()


@pytest.mark.parametrize(
    "status, reason",
    [
        (DiscountStatus.INACTIVE, RejectionReason.INACTIVE),
        (DiscountStatus.EXPIRED, RejectionReason.EXPIRED),
    ],
)
def test_status_not_active_is_rejected(status, reason):
    result = evaluate_rule(rule(status=status), cart(), NOW)
    assert isinstance(result, Rejection)
    assert result.reason == reason


def test_expired_yesterday():
    r = rule(start_date=NOW - timedelta(days=30), end_date=NOW - timedelta(days=1))
    result = evaluate_rule(r, cart(), NOW)
    assert result.reason == RejectionReason.EXPIRED
    assert "expired" in result.message


def test_not_started_yet():
    r = rule(start_date=NOW + timedelta(hours=1), end_date=NOW + timedelta(days=3))
    assert evaluate_rule(r, cart(), NOW).reason == RejectionReason.NOT_STARTED


def test_date_window_is_inclusive():
    assert isinstance(evaluate_rule(rule(start_date=NOW, end_date=NOW), cart(), NOW), EligibleDiscount)


def test_usage_limit_reached():
    result = evaluate_rule(rule(usage_limit=5, usage_count=5), cart(), NOW)
    assert result.reason == RejectionReason.EXHAUSTED


def test_usage_limit_not_yet_reached():
    assert isinstance(evaluate_rule(rule(usage_limit=5, usage_count=4), cart(), NOW), EligibleDiscount)


def test_min_order_amount():
    result = evaluate_rule(rule(min_order_amount=600_000), cart(order_amount=500_000), NOW)
    assert result.reason == RejectionReason.MIN_ORDER_NOT_MET
    assert isinstance(evaluate_rule(rule(min_order_amount=500_000), cart(order_amount=500_000), NOW), EligibleDiscount)


def test_first_purchase_only():
    r = rule(is_first_purchase_only=True)
    assert evaluate_rule(r, cart(), NOW).reason == RejectionReason.FIRST_PURCHASE_ONLY
    assert evaluate_rule(r, cart(is_first_purchase=False), NOW).reason == RejectionReason.FIRST_PURCHASE_ONLY
    assert isinstance(evaluate_rule(r, cart(is_first_purchase=True), NOW), EligibleDiscount)


def test_first_failure_wins():
    # Hem pasif hem süresi dolmuş hem limit dolmuş: sadece ilk neden raporlanır
    r = rule(
        status=DiscountStatus.INACTIVE,
        end_date=NOW - timedelta(days=1),
        start_date=NOW - timedelta(days=10),
        usage_limit=1,
        usage_count=1,
    )
    assert evaluate_rule(r, cart(), NOW).reason == RejectionReason.INACTIVE


def test_products_base_is_sum_of_intersection():
    r = rule(target=ProductTarget(product_ids=frozenset({"p1", "p3"})))
    c = cart(order_amount=600, product_ids=("p1", "p2", "p3"), product_prices={"p1": 100, "p2": 200, "p3": 300})
    result = evaluate_rule(r, c, NOW)
    assert result.applied_to_products == ("p1", "p3")
    assert result.applicable_amount == 400
    assert result.discount_amount == 40


def test_products_without_intersection_is_ineligible():
    r = rule(target=ProductTarget(product_ids=frozenset({"p9"})))
    c = cart(product_ids=("p1",), product_prices={"p1": 100})
    assert evaluate_rule(r, c, NOW).reason == RejectionReason.NO_MATCHING_PRODUCTS


def test_products_zero_base_is_ineligible():
    r = rule(target=ProductTarget(product_ids=frozenset({"p1"})))
    c = cart(product_ids=("p1",), product_prices={"p1": 0})
    assert evaluate_rule(r, c, NOW).reason == RejectionReason.NO_MATCHING_PRODUCTS


def test_products_without_prices_uses_order_amount():
    r = rule(target=ProductTarget(product_ids=frozenset({"p1"})))
    found = applicable_base(r, cart(order_amount=1000, product_ids=("p1", "p2")))
    assert found.base == 1000
    assert found.product_ids == ("p1",)


def test_products_without_prices_and_empty_order_is_ineligible():
    r = rule(target=ProductTarget(product_ids=frozenset({"p1"})))
    result = evaluate_rule(r, cart(order_amount=0, product_ids=("p1",)), NOW)
    assert isinstance(result, Rejection)
    assert result.reason == RejectionReason.NO_MATCHING_PRODUCTS


def test_categories_per_product_without_prices_and_empty_order_is_ineligible():
    r = rule(target=CategoryTarget(category_names=frozenset({"GPU"})))
    c = cart(order_amount=0, product_ids=("gpu-1",), product_categories={"gpu-1": ("GPU",)})
    assert evaluate_rule(r, c, NOW).reason == RejectionReason.NO_MATCHING_CATEGORIES


def test_categories_per_product():
    r = rule(target=CategoryTarget(category_names=frozenset({"GPU"})))
    c = cart(
        order_amount=1500,
        product_ids=("cpu-1", "gpu-1"),
        product_prices={"cpu-1": 500, "gpu-1": 1000},
        product_categories={"cpu-1": ("CPU",), "gpu-1": ("GPU", "Graphics")},
    )
    result = evaluate_rule(r, c, NOW)
    assert result.applied_to_products == ("gpu-1",)
    assert result.applicable_amount == 1000
    assert result.discount_amount == 100


def test_categories_flat_list_uses_order_amount():
    r = rule(target=CategoryTarget(category_names=frozenset({"GPU"})))
    result = evaluate_rule(r, cart(order_amount=2000, category_names=("CPU", "GPU")), NOW)
    assert result.applicable_amount == 2000


def test_categories_without_match():
    r = rule(target=CategoryTarget(category_names=frozenset({"Monitor"})))
    result = evaluate_rule(r, cart(category_names=("CPU",)), NOW)
    assert result.reason == RejectionReason.NO_MATCHING_CATEGORIES


def test_customers_target():
    r = rule(target=CustomerTarget(customer_ids=frozenset({"c1"})))
    assert evaluate_rule(r, cart(customer_id="c2"), NOW).reason == RejectionReason.INELIGIBLE_CUSTOMER
    assert evaluate_rule(r, cart(), NOW).reason == RejectionReason.INELIGIBLE_CUSTOMER
    result = evaluate_rule(r, cart(order_amount=800, customer_id="c1"), NOW)
    assert result.applicable_amount == 800


def test_percentage_cap():
    r = rule(amount=50, max_discount_amount=100_000)
    assert discount_amount(r, 500_000) == 100_000
    assert discount_amount(r, 100_000) == 50_000


def test_fixed_never_exceeds_base():
    r = rule(kind=DiscountKind.FIXED, amount=20_000)
    assert discount_amount(r, 15_000) == 15_000
    assert discount_amount(r, 200_000) == 20_000


def test_evaluation_does_not_touch_usage_count():
    r = rule(usage_limit=3, usage_count=2)
    evaluate_rule(r, cart(), NOW)
    evaluate_rule(r, cart(), NOW)
    assert r.usage_count == 2
