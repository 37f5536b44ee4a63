"""Named, isolated append-only collections managed side by side."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import NamedTuple

from .store import AppendOnlyStore

logger = logging.getLogger(__name__)


class CollectionError(Exception):
    """Base class for collection management errors."""


class CollectionNotFoundError(CollectionError, LookupError):
    """Raised when an operation names a collection that does not exist."""

    def __init__(self, collection_id: str) -> None:
        self.collection_id = collection_id
        super().__init__(f"Collection '{collection_id}' not found")


class DuplicateCollectionError(CollectionError):
    """Raised when a collection is created with a name already in use."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Collection with name '{name}' already exists")


@dataclass
class CollectionMetadata:
    """Descriptive information and counters for one collection."""

    id: str
    name: str
    created_at: int = field(default_factory=lambda: int(time.time()))
    created_by: str | None = None
    document_count: int = 0
    total_size_bytes: int = 0
    operations_count: int = 0


class TotalStats(NamedTuple):
    """Aggregate figures over every collection of a manager."""

    collections: int
    documents: int
    size_bytes: int


class Collection:
    """An append-only key-value namespace with its own statistics."""

    def __init__(self, collection_id: str, name: str, created_by: str | None = None) -> None:
        self.metadata = CollectionMetadata(id=collection_id, name=name, created_by=created_by)
        self._storage = AppendOnlyStore()

    def put(self, key: bytes, value: bytes) -> None:
        """Store ``value`` under ``key``; an existing key raises ``KeyExistsError``."""
        key = bytes(key)
        value = bytes(value)
        self._storage.put(key, value)
        self.metadata.document_count += 1
        self.metadata.total_size_bytes += len(key) + len(value)
        self.metadata.operations_count += 1
        logger.debug("put [%s] %r", self.metadata.name, key)

    def get(self, key: bytes) -> bytes | None:
        """Return the value stored under ``key``, or ``None`` if absent."""
        return self._storage.get(key)

    def verify_integrity(self) -> bool:
        """Check the storage chain and that the counters agree with it."""
        return (
            self._storage.verify_integrity()
            and self.metadata.document_count == len(self._storage)
        )

    def __len__(self) -> int:
        return len(self._storage)

    def __contains__(self, key: object) -> bool:
        return key in self._storage


class CollectionManager:
    """Creates, looks up and drops collections, and routes data operations."""

    def __init__(self) -> None:
        self._collections: dict[str, Collection] = {}
        self._next_id = 1

    def create_collection(self, name: str, created_by: str | None = None) -> str:
        """Create a collection and return its generated identifier."""
        if self.get_collection_by_name(name) is not None:
            raise DuplicateCollectionError(name)
        collection_id = f"col_{self._next_id}"
        self._next_id += 1
        self._collections[collection_id] = Collection(collection_id, name, created_by)
        logger.info("collection '%s' created with id %s", name, collection_id)
        return collection_id

    def drop_collection(self, collection_id: str) -> None:
        """Remove a collection and all of its data."""
        collection = self._collections.pop(collection_id, None)
        if collection is None:
            raise CollectionNotFoundError(collection_id)
        logger.info("collection '%s' (%s) dropped", collection.metadata.name, collection_id)

    def list_collections(self) -> list[CollectionMetadata]:
        """Return the metadata of every collection."""
        return [collection.metadata for collection in self._collections.values()]

    def collection_exists(self, collection_id: str) -> bool:
        """Tell whether a collection with this identifier exists."""
        return collection_id in self._collections

    def get_collection_by_name(self, name: str) -> str | None:
        """Return the identifier of the collection with this name, if any."""
        return next(
            (cid for cid, c in self._collections.items() if c.metadata.name == name),
            None,
        )

    def _collection(self, collection_id: str) -> Collection:
        try:
            return self._collections[collection_id]
        except KeyError:
            raise CollectionNotFoundError(collection_id) from None

    def put(self, collection_id: str, key: bytes, value: bytes) -> None:
        """Store ``value`` under ``key`` in the given collection."""
        self._collection(collection_id).put(key, value)

    def get(self, collection_id: str, key: bytes) -> bytes | None:
        """Return the value under ``key`` in the given collection, or ``None``."""
        return self._collection(collection_id).get(key)

    def get_collection_stats(self, collection_id: str) -> CollectionMetadata:
        """Return the metadata of one collection."""
        return self._collection(collection_id).metadata

    def total_stats(self) -> TotalStats:
        """Return the collection count and the summed documents and sizes."""
        metas = self.list_collections()
        return TotalStats(
            len(metas),
            sum(m.document_count for m in metas),
            sum(m.total_size_bytes for m in metas),
        )

    def verify_integrity(self) -> bool:
        """Verify every collection; stop at the first one that fails."""
        for collection_id, collection in self._collections.items():
            if not collection.verify_integrity():
                logger.warning("integrity check failed for collection %s", collection_id)
                return False
        return True

    def __len__(self) -> int:
        return len(self._collections)

    def __contains__(self, collection_id: object) -> bool:
        return collection_id in self._collections