"""Persistence for the order list.

Two layers:
- key-value stores (JsonFileStore, MemoryStore) holding raw string values,
  in the manner of a browser's localStorage;
- OrderStorage, the load/save boundary the model talks to. It owns the
  fixed key and the JSON array format.

Reads are forgiving (corrupt data loads as an empty list). Writes are not:
a failed write raises StorageError to the caller.
"""
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

from models import Order

logger = logging.getLogger(__name__)

DEFAULT_KEY = 'orders'


class StorageError(Exception):
    """Raised when an order snapshot cannot be written."""


class KeyValueStore(ABC):
    """Synchronous string key-value store."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        ...


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class JsonFileStore(KeyValueStore):
    """One file per key: ``<directory>/<key>.json``.

    Values are written to a temporary file first and moved into place, so
    a failed write leaves the previous snapshot intact.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f'{key}.json'

    def get_item(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding='utf-8')

    def set_item(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f'.{key}.', suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(value)
            os.replace(tmp_name, self.path_for(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove_item(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)


def serialize_orders(orders: Sequence[Order]) -> str:
    return json.dumps([o.to_dict() for o in orders], ensure_ascii=False)


def deserialize_orders(value: str) -> List[Order]:
    """Parse a persisted JSON array into orders.

    Raises ValueError if the value is not a JSON array. Malformed entries
    and repeated ids are skipped (first occurrence wins).
    """
    data = json.loads(value)
    if not isinstance(data, list):
        raise ValueError(f'expected a JSON array, got {type(data).__name__}')
    orders: List[Order] = []
    seen: Set[int] = set()
    for raw in data:
        if not isinstance(raw, dict):
            logger.warning("Skipping non-object order entry: %r", raw)
            continue
        try:
            order = Order.from_dict(raw)
        except ValueError as exc:
            logger.warning("Skipping malformed order entry: %s", exc)
            continue
        if order.id in seen:
            logger.warning("Skipping order with duplicate id %d", order.id)
            continue
        seen.add(order.id)
        orders.append(order)
    return orders


class OrderStorage:
    def __init__(self, store: KeyValueStore, key: str = DEFAULT_KEY):
        self.store = store
        self.key = key

    def load(self) -> List[Order]:
        """Load the persisted order list.

        Absent, unreadable or unparseable data -> empty list.
        """
        try:
            value = self.store.get_item(self.key)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read stored orders (%s); starting empty", exc)
            return []
        if value is None:
            return []
        try:
            orders = deserialize_orders(value)
        except ValueError as exc:  # json.JSONDecodeError is a ValueError
            logger.warning("Stored orders are corrupt (%s); starting empty", exc)
            return []
        logger.debug("Loaded %d orders from key %r", len(orders), self.key)
        return orders

    def save(self, orders: Sequence[Order]) -> None:
        """Persist the full order list, replacing the previous snapshot."""
        try:
            self.store.set_item(self.key, serialize_orders(orders))
        except OSError as exc:
            raise StorageError(f'could not save orders under key {self.key!r}: {exc}') from exc
