"""Shared route dependencies"""

from functools import lru_cache

from ..core.config import settings
from ..core.session import CheckoutSessionManager, session_manager
from ..database import CartDatabase, OrderDatabase, KeyValueStore, get_store
from ..services.accounts import AccountService
from ..services.api_client import StorefrontClient


def get_kv_store() -> KeyValueStore:
    return get_store()


def get_cart_db() -> CartDatabase:
    return CartDatabase(get_store())


def get_order_db() -> OrderDatabase:
    return OrderDatabase(get_store())


@lru_cache()
def get_client() -> StorefrontClient:
    return StorefrontClient(settings.api_base_url, timeout=settings.api_timeout)


def get_account_service() -> AccountService:
    return AccountService(get_store(), get_client())


def get_session_manager() -> CheckoutSessionManager:
    return session_manager
