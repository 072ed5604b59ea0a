import os

os.environ.setdefault("STOREFRONT_STORE_BACKEND", "memory")
os.environ.setdefault("STOREFRONT_PAYMENT_DELAY_SECONDS", "0")

import pytest

from storefront.database import CartDatabase, MemoryStore, OrderDatabase
from storefront.models import Product


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def carts(store):
    return CartDatabase(store)


@pytest.fixture
def orders(store):
    return OrderDatabase(store)


@pytest.fixture
def lighter():
    return Product(id=7, name="Lighter", price=500)


@pytest.fixture
def phone_case():
    return Product(id=12, name="Phone Case", price=250, image="https://cdn.example.com/case.png")
