import json

import pytest

from storefront.database.store import FileStore, MemoryStore, StorageError


@pytest.mark.asyncio
async def test_memory_store_roundtrip():
    store = MemoryStore()
    assert await store.get_item("token") is None

    await store.set_item("token", "abc")
    assert await store.get_item("token") == "abc"

    await store.delete_item("token")
    await store.delete_item("token")
    assert await store.get_item("token") is None


@pytest.mark.asyncio
async def test_read_json_fails_soft_on_corrupt_data():
    store = MemoryStore({"cart": "{not json"})
    assert await store.read_json("cart", default=[]) == []


@pytest.mark.asyncio
async def test_read_json_strict_raises_on_corrupt_data():
    store = MemoryStore({"orders": "[{"})
    with pytest.raises(StorageError):
        await store.read_json("orders", default=[], strict=True)


@pytest.mark.asyncio
async def test_lock_is_per_key():
    store = MemoryStore()
    assert store.lock("cart") is store.lock("cart")
    assert store.lock("cart") is not store.lock("orders")


@pytest.mark.asyncio
async def test_file_store_persists_across_instances(tmp_path):
    first = FileStore(str(tmp_path / "data"))
    await first.write_json("cart", [{"id": 1, "name": "Mug", "price": 300, "quantity": 2}])

    second = FileStore(str(tmp_path / "data"))
    assert await second.read_json("cart") == [{"id": 1, "name": "Mug", "price": 300, "quantity": 2}]
    assert json.loads((tmp_path / "data" / "cart.json").read_text()) == await second.read_json("cart")


@pytest.mark.asyncio
async def test_file_store_missing_key_and_delete(tmp_path):
    store = FileStore(str(tmp_path))
    assert await store.get_item("user") is None

    await store.set_item("user", "{}")
    await store.delete_item("user")
    assert await store.get_item("user") is None
    assert not list(tmp_path.iterdir())


@pytest.mark.asyncio
async def test_file_store_rejects_path_like_keys(tmp_path):
    store = FileStore(str(tmp_path))
    with pytest.raises(ValueError):
        await store.set_item("../escape", "x")
