import json
import re
from datetime import datetime, timedelta, timezone

import pytest

from storefront.database import OrderDatabase, generate_order_id
from storefront.database.store import MemoryStore
from storefront.models import (
    CartItem,
    CustomerInfo,
    DeliveryInfo,
    DeliveryMethod,
    Order,
    PaymentInfo,
    PaymentMethod,
)


def make_order(order_id: str, date: datetime) -> Order:
    return Order(
        id=order_id,
        items=[CartItem(id=1, name="Mug", price=300, quantity=1)],
        customer_info=CustomerInfo(first_name="Ana", last_name="P", email="a@b.mk", phone="070123456"),
        delivery_info=DeliveryInfo(method=DeliveryMethod.PICKUP),
        payment_info=PaymentInfo(method=PaymentMethod.CASH),
        total=300,
        delivery_fee=0,
        tax=54,
        final_total=354,
        date=date,
    )


def test_order_id_format():
    order_id = generate_order_id(now_ms=1760000000000)
    assert re.fullmatch(r"ORD-1760000000000-[0-9A-Z]{5}", order_id)


@pytest.mark.asyncio
async def test_append_keeps_history(orders):
    now = datetime.now(timezone.utc)
    await orders.append(make_order("ORD-1-AAAAA", now - timedelta(days=1)))
    await orders.append(make_order("ORD-2-BBBBB", now))

    listed = await orders.list_orders()
    assert [order.id for order in listed] == ["ORD-2-BBBBB", "ORD-1-AAAAA"]
    assert await orders.count() == 2
    assert (await orders.get_order("ORD-1-AAAAA")).final_total == 354
    assert await orders.get_order("ORD-404") is None


@pytest.mark.asyncio
async def test_colliding_id_is_regenerated(orders):
    now = datetime.now(timezone.utc)
    first = await orders.append(make_order("ORD-1-AAAAA", now))
    second = await orders.append(make_order("ORD-1-AAAAA", now))

    assert first.id == "ORD-1-AAAAA"
    assert second.id != first.id
    assert {order.id for order in await orders.list_orders()} == {first.id, second.id}


@pytest.mark.asyncio
async def test_record_uses_camel_case_keys(store, orders):
    await orders.append(make_order("ORD-1-AAAAA", datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)))

    record = json.loads(store.data["orders"])[0]
    assert set(record) == {
        "id", "items", "customerInfo", "deliveryInfo", "paymentInfo",
        "total", "deliveryFee", "tax", "finalTotal", "date", "status",
    }
    assert record["date"].startswith("2026-10-19T12:00:00")
    assert record["status"] == "confirmed"


@pytest.mark.asyncio
async def test_listing_fails_soft_on_corrupt_history():
    orders = OrderDatabase(MemoryStore({"orders": "{{"}))
    assert await orders.list_orders() == []
    assert await orders.count() == 0


@pytest.mark.asyncio
async def test_listing_skips_malformed_records():
    store = MemoryStore({"orders": json.dumps([{"id": "ORD-x"}])})
    assert await OrderDatabase(store).list_orders() == []


@pytest.mark.asyncio
async def test_lookup_of_malformed_record_returns_none():
    store = MemoryStore({"orders": json.dumps([{"id": "ORD-1", "items": "bad"}])})
    assert await OrderDatabase(store).get_order("ORD-1") is None


@pytest.mark.asyncio
async def test_recover_with_malformed_marked_record_does_not_raise(carts, lighter):
    store = carts.store
    await store.write_json("orders", [{"id": "ORD-1", "items": "bad"}])
    await store.write_json("pending_checkout", {"orderId": "ORD-1"})
    await carts.add_or_increment(lighter)
    orders = OrderDatabase(store)

    assert await orders.recover_pending(carts) is None

    assert await orders.pending_order_id() is None
    assert len(await carts.load()) == 1


@pytest.mark.asyncio
async def test_recover_discards_marker_for_unrecorded_order(store, carts, orders, lighter):
    await carts.add_or_increment(lighter)
    await store.write_json("pending_checkout", {"orderId": "ORD-9-ZZZZZ"})

    assert await orders.recover_pending(carts) is None

    assert await orders.pending_order_id() is None
    assert len(await carts.load()) == 1


@pytest.mark.asyncio
async def test_recover_clears_cart_for_recorded_order(store, carts, orders, lighter):
    order = await orders.append(make_order("ORD-1-AAAAA", datetime.now(timezone.utc)))
    await carts.add_or_increment(lighter)

    assert await orders.recover_pending(carts) == order.id
    assert await carts.load() == []
    assert "pending_checkout" not in store.data
