"""Key-value backends for the persisted cache record."""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Optional, Protocol

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from ..clients.mongodb_client import get_mongo_client
from ..config import MONGODB_COLLECTION, MONGODB_DATABASE, MONGODB_URI

logger = logging.getLogger(__name__)

# Failures a backend may raise while the store itself is unreachable
STORE_ERRORS = (PyMongoError, OSError)


class KeyValueStore(Protocol):
    """Minimal store contract the cache relies on."""

    def get(self, key: str) -> Optional[Dict[str, Any]]: ...

    def set(self, key: str, value: Dict[str, Any]) -> None: ...


class InMemoryKeyValueStore:
    """Process-local store; values are deep-copied in and out."""

    def __init__(self) -> None:
        self._items: Dict[str, Dict[str, Any]] = {}

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        value = self._items.get(key)
        return copy.deepcopy(value) if value is not None else None

    def set(self, key: str, value: Dict[str, Any]) -> None:
        self._items[key] = copy.deepcopy(value)


class MongoKeyValueStore:
    """One MongoDB document per key, ``_id`` being the key."""

    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        document = self._collection.find_one({"_id": key})
        if document is None:
            return None
        document.pop("_id", None)
        return document

    def set(self, key: str, value: Dict[str, Any]) -> None:
        result = self._collection.replace_one({"_id": key}, {"_id": key, **value}, upsert=True)
        logger.info(
            "Stored cache record '%s' in MongoDB (matched=%d, upserted=%s)",
            key,
            result.matched_count,
            result.upserted_id is not None,
        )


def get_cache_store() -> KeyValueStore:
    """Return the MongoDB-backed store, or an in-memory one when no URI is set."""
    if not MONGODB_URI:
        logger.warning("MONGODB_URI is not set – cache will not survive restarts")
        return InMemoryKeyValueStore()
    collection = get_mongo_client()[MONGODB_DATABASE][MONGODB_COLLECTION]
    return MongoKeyValueStore(collection)

__all__ = [
    "STORE_ERRORS",
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "MongoKeyValueStore",
    "get_cache_store",
]
