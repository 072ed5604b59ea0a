# Database modules

from functools import lru_cache

from .store import (
    KeyValueStore,
    MemoryStore,
    FileStore,
    StorageError,
    TOKEN_KEY,
    USER_KEY,
    CART_KEY,
    ORDERS_KEY,
    PENDING_CHECKOUT_KEY,
)
from .carts import CartDatabase
from .orders import OrderDatabase, generate_order_id


@lru_cache()
def get_store() -> KeyValueStore:
    """Get the store configured in settings"""
    from ..core.config import settings

    if settings.store_backend == "memory":
        return MemoryStore()
    return FileStore(settings.store_path)


__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "FileStore",
    "StorageError",
    "TOKEN_KEY",
    "USER_KEY",
    "CART_KEY",
    "ORDERS_KEY",
    "PENDING_CHECKOUT_KEY",
    "CartDatabase",
    "OrderDatabase",
    "generate_order_id",
    "get_store",
]
