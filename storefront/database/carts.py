"""Cart storage"""

import logging
from typing import Awaitable, Callable, Iterable, TypeVar

from ..models.cart import CartItem
from ..models.product import Product
from .store import KeyValueStore, CART_KEY

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CartDatabase:
    """
    The single local cart, persisted as a JSON list of line items.

    Every mutation is a read-modify-write of the whole list, serialised by
    the store's cart lock.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def load(self) -> list[CartItem]:
        """
        Load the cart.

        Missing or corrupt data yields an empty cart. Records are normalised
        and duplicate ids merged so the returned cart always satisfies the
        one-entry-per-product rule.
        """
        raw = await self.store.read_json(CART_KEY, default=[])
        if not isinstance(raw, list):
            logger.warning(f"Ignoring cart of unexpected type {type(raw).__name__}")
            return []

        items: list[CartItem] = []
        by_id: dict[int, CartItem] = {}
        for record in raw:
            item = CartItem.from_stored(record)
            if item is None:
                logger.debug(f"Dropping unusable cart record: {record!r}")
                continue
            if item.id in by_id:
                by_id[item.id].quantity += item.quantity
                continue
            by_id[item.id] = item
            items.append(item)
        return items

    async def _save(self, items: Iterable[CartItem]) -> list[CartItem]:
        items = list(items)
        await self.store.write_json(CART_KEY, [item.model_dump(mode="json") for item in items])
        return items

    async def _mutate(self, change: Callable[[list[CartItem]], list[CartItem]]) -> list[CartItem]:
        async with self.store.lock(CART_KEY):
            items = await self.load()
            return await self._save(change(items))

    async def add_or_increment(self, product: Product) -> list[CartItem]:
        """Add one unit of a product, incrementing the existing line if present"""

        def change(items: list[CartItem]) -> list[CartItem]:
            existing_item = next((item for item in items if item.id == product.id), None)
            if existing_item:
                existing_item.quantity += 1
            else:
                items.append(
                    CartItem(
                        id=product.id,
                        name=product.name,
                        price=max(0.0, product.price or 0),
                        image=product.image,
                        quantity=1,
                    )
                )
            return items

        items = await self._mutate(change)
        logger.info(f"Added product {product.id} to cart ({len(items)} lines)")
        return items

    async def increase(self, item_id: int) -> list[CartItem]:
        """Increase an item's quantity by one"""

        def change(items: list[CartItem]) -> list[CartItem]:
            for item in items:
                if item.id == item_id:
                    item.quantity += 1
            return items

        return await self._mutate(change)

    async def decrease(self, item_id: int) -> list[CartItem]:
        """Decrease an item's quantity by one, never below 1"""

        def change(items: list[CartItem]) -> list[CartItem]:
            for item in items:
                if item.id == item_id:
                    item.quantity = max(1, item.quantity - 1)
            return items

        return await self._mutate(change)

    async def remove(self, item_id: int) -> list[CartItem]:
        """Remove an item from the cart"""
        return await self._mutate(lambda items: [item for item in items if item.id != item_id])

    async def clear(self) -> list[CartItem]:
        """Clear all items from cart"""
        async with self.store.lock(CART_KEY):
            return await self._save([])

    async def check_out(self, place: Callable[[list[CartItem]], Awaitable[T]]) -> T:
        """
        Hand the current cart to `place` and clear it afterwards.

        The cart lock is held from the load until the clear, so the items
        passed to `place` are exactly the items removed. If `place` raises,
        the cart is left as it was.
        """
        async with self.store.lock(CART_KEY):
            items = await self.load()
            result = await place(items)
            await self._save([])
            return result

    @staticmethod
    def total(items: Iterable[CartItem]) -> float:
        """Sum of price * quantity"""
        return sum((item.price * item.quantity for item in items), 0)
