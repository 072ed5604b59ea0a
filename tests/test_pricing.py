import pytest

from storefront.models import CartItem, DeliveryMethod
from storefront.services.pricing import compute_totals, format_currency, round_half_up


def test_order_arithmetic_with_delivery():
    items = [CartItem(id=1, name="Bundle", price=500, quantity=2)]

    totals = compute_totals(items, DeliveryMethod.DELIVERY)

    assert totals.subtotal == 1000
    assert totals.delivery_fee == 150
    assert totals.tax == 180
    assert totals.total == 1330


def test_pickup_has_no_delivery_fee():
    items = [CartItem(id=1, name="Bundle", price=1000, quantity=1)]
    totals = compute_totals(items, DeliveryMethod.PICKUP)
    assert totals.delivery_fee == 0
    assert totals.total == 1180


def test_empty_cart_totals():
    totals = compute_totals([], DeliveryMethod.PICKUP)
    assert (totals.subtotal, totals.tax, totals.total) == (0, 0, 0)


def test_tax_rounds_half_up():
    # 25 * 0.18 = 4.5
    items = [CartItem(id=1, name="Sticker", price=25, quantity=1)]
    assert compute_totals(items, DeliveryMethod.PICKUP).tax == 5
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2


@pytest.mark.parametrize("value,expected", [
    (1330, "1,330 MKD"),
    (0, "0 MKD"),
    (99.6, "100 MKD"),
    (None, "—"),
    ("n/a", "n/a MKD"),
])
def test_format_currency(value, expected):
    assert format_currency(value) == expected
