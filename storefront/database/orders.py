"""Order history storage"""

import time
import secrets
import logging
import string
from typing import Optional

from ..models.checkout import Order
from .carts import CartDatabase
from .store import KeyValueStore, StorageError, ORDERS_KEY, PENDING_CHECKOUT_KEY

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_uppercase


def generate_order_id(now_ms: Optional[int] = None) -> str:
    """ORD-<epoch ms>-<5 base36 chars>"""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(5))
    return f"ORD-{now_ms}-{suffix}"


class OrderDatabase:
    """
    Append-only order history, persisted as a JSON list of orders.

    A commit writes a pending-checkout marker naming the order before the
    history is written; the marker is removed once the cart is cleared. A
    marker left behind by an interrupted commit is reconciled by
    recover_pending().
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def _read_records(self, strict: bool) -> list[dict]:
        records = await self.store.read_json(ORDERS_KEY, default=[], strict=strict)
        if not isinstance(records, list):
            if strict:
                raise StorageError(f"Order history has unexpected type {type(records).__name__}")
            return []
        return records

    async def append(self, order: Order) -> Order:
        """
        Append an order to the history.

        The order id is regenerated if it collides with a stored one, so the
        returned order may carry a different id than the one passed in.

        Raises:
            StorageError: the history could not be read or written
        """
        async with self.store.lock(ORDERS_KEY):
            records = await self._read_records(strict=True)
            known_ids = {record.get("id") for record in records if isinstance(record, dict)}
            while order.id in known_ids:
                order = order.model_copy(update={"id": generate_order_id()})

            await self.store.write_json(PENDING_CHECKOUT_KEY, {"orderId": order.id})
            records.append(order.to_record())
            await self.store.write_json(ORDERS_KEY, records)

        logger.info(f"Order {order.id} recorded ({len(records)} in history)")
        return order

    async def resolve_pending(self, order_id: str) -> None:
        """Drop the pending-checkout marker once the order's cart is cleared"""
        marker = await self.store.read_json(PENDING_CHECKOUT_KEY)
        if isinstance(marker, dict) and marker.get("orderId") == order_id:
            await self.store.delete_item(PENDING_CHECKOUT_KEY)

    async def pending_order_id(self) -> Optional[str]:
        """Order id named by a leftover pending-checkout marker"""
        marker = await self.store.read_json(PENDING_CHECKOUT_KEY)
        if isinstance(marker, dict):
            return marker.get("orderId")
        return None

    async def recover_pending(self, carts: CartDatabase) -> Optional[str]:
        """
        Finish an interrupted commit.

        If the marked order made it into the history, the cart is cleared.
        The marker is removed either way.

        Returns:
            Id of the order whose commit was completed, or None
        """
        order_id = await self.pending_order_id()
        if order_id is None:
            return None

        completed = None
        if await self.get_order(order_id) is not None:
            await carts.clear()
            completed = order_id
            logger.warning(f"Completed interrupted checkout of order {order_id}")
        else:
            logger.warning(f"Discarding checkout marker for unrecorded order {order_id}")

        await self.store.delete_item(PENDING_CHECKOUT_KEY)
        return completed

    async def list_orders(self, limit: int = 50) -> list[Order]:
        """List recent orders, newest first"""
        orders = []
        for record in await self._read_records(strict=False):
            try:
                orders.append(Order.model_validate(record))
            except ValueError:
                logger.warning(f"Skipping malformed order record: {record!r}")
        orders.sort(key=lambda o: o.date, reverse=True)
        return orders[:limit]

    async def get_order(self, order_id: str) -> Optional[Order]:
        """Get an order by ID"""
        for record in await self._read_records(strict=False):
            if isinstance(record, dict) and record.get("id") == order_id:
                try:
                    return Order.model_validate(record)
                except ValueError:
                    logger.warning(f"Order {order_id} has a malformed record: {record!r}")
                    return None
        return None

    async def count(self) -> int:
        return len(await self._read_records(strict=False))
