"""
Persistent key-value store

Durable string key-value storage used for the session token, the signed-in
user, the cart and the order history. Values are strings; structured values
are JSON-encoded by the callers through read_json/write_json.
"""

import os
import re
import json
import asyncio
import logging
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"
CART_KEY = "cart"
ORDERS_KEY = "orders"
PENDING_CHECKOUT_KEY = "pending_checkout"

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class StorageError(Exception):
    """Raised when the backing store cannot be read or written"""


class KeyValueStore(ABC):
    """
    Asynchronous string key-value store.

    Every logical entity (cart, orders) is written by one task at a time:
    callers doing a read-modify-write hold lock(key) for the whole cycle.
    """

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}

    def lock(self, key: str) -> asyncio.Lock:
        """Get the writer lock for a key"""
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """Get the raw value of a key, None if absent"""

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Set the raw value of a key"""

    @abstractmethod
    async def delete_item(self, key: str) -> None:
        """Delete a key; no error if absent"""

    async def read_json(self, key: str, default: Any = None, strict: bool = False) -> Any:
        """
        Read and decode a JSON value.

        Args:
            key: Key to read
            default: Returned when the key is absent
            strict: Raise StorageError on unreadable or corrupt data instead
                of returning the default

        Returns:
            Decoded value or default
        """
        try:
            raw = await self.get_item(key)
        except StorageError:
            if strict:
                raise
            logger.warning(f"Could not read '{key}', using default", exc_info=True)
            return default

        if raw is None or raw == "":
            return default

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            if strict:
                raise StorageError(f"Corrupt JSON stored under '{key}': {e}") from e
            logger.warning(f"Corrupt JSON stored under '{key}', using default")
            return default

    async def write_json(self, key: str, value: Any) -> None:
        """Encode and write a JSON value"""
        await self.set_item(key, json.dumps(value))


class MemoryStore(KeyValueStore):
    """In-memory store"""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        super().__init__()
        self.data: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    async def delete_item(self, key: str) -> None:
        self.data.pop(key, None)


class FileStore(KeyValueStore):
    """
    Directory-backed store, one <key>.json file per key.

    A write lands in a temp file that is then renamed over the target, so
    readers see either the old or the new value, never a partial one.
    """

    def __init__(self, directory: str):
        super().__init__()
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.directory / f"{key}.json"

    def _read(self, path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def _write(self, path: Path, value: str) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{path.stem}-")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_path, path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e

    def _delete(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete {path}: {e}") from e

    async def get_item(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._read, self._path(key))

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, self._path(key), value)

    async def delete_item(self, key: str) -> None:
        await asyncio.to_thread(self._delete, self._path(key))
