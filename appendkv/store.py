"""An in-memory append-only key-value store with a hash-chained operation log."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Iterator, NamedTuple

logger = logging.getLogger(__name__)

_GENESIS = bytes(32)


@dataclass
class StoreConfig:
    """Settings for an :class:`AppendOnlyStore`."""

    data_dir: str = "./blockdb_data"
    memtable_size_limit: int = 64 * 1024 * 1024
    wal_sync_interval_ms: int = 1000
    compaction_threshold: int = 4
    blockchain_batch_size: int = 1000


class KeyExistsError(ValueError):
    """Raised when a key that is already stored is written again."""

    def __init__(self, key: bytes) -> None:
        self.key = key
        text = key.decode("utf-8", errors="replace")
        super().__init__(f"Key already exists (append-only): {text!r}")


class StoreStats(NamedTuple):
    """Number of stored keys and number of successful write operations."""

    keys: int
    operations: int


@dataclass(frozen=True)
class _LogRecord:
    key: bytes
    value: bytes
    digest: bytes


def _chain_digest(previous: bytes, key: bytes, value: bytes) -> bytes:
    hasher = hashlib.sha256(previous)
    hasher.update(len(key).to_bytes(8, "big"))
    hasher.update(key)
    hasher.update(len(value).to_bytes(8, "big"))
    hasher.update(value)
    return hasher.digest()


@dataclass
class AppendOnlyStore:
    """Key-value store in which every key can be written exactly once.

    Each write is appended to a log whose records are linked by SHA-256
    digests, so the full history can be re-verified at any time.
    """

    config: StoreConfig = field(default_factory=StoreConfig)
    _data: dict[bytes, bytes] = field(default_factory=dict, init=False, repr=False)
    _log: list[_LogRecord] = field(default_factory=list, init=False, repr=False)

    def put(self, key: bytes, value: bytes) -> None:
        """Store ``value`` under ``key``; raise :class:`KeyExistsError` if taken."""
        key = bytes(key)
        value = bytes(value)
        if key in self._data:
            raise KeyExistsError(key)
        previous = self._log[-1].digest if self._log else _GENESIS
        self._log.append(_LogRecord(key, value, _chain_digest(previous, key, value)))
        self._data[key] = value
        logger.debug("put %r (%d bytes)", key, len(value))

    def get(self, key: bytes) -> bytes | None:
        """Return the value stored under ``key``, or ``None`` if absent."""
        return self._data.get(bytes(key))

    def verify_integrity(self) -> bool:
        """Recompute the operation chain and check it against the stored data."""
        previous = _GENESIS
        for record in self._log:
            if _chain_digest(previous, record.key, record.value) != record.digest:
                return False
            if self._data.get(record.key) != record.value:
                return False
            previous = record.digest
        ok = len(self._log) == len(self._data)
        logger.debug("integrity check over %d operations: %s", len(self._log), ok)
        return ok

    def stats(self) -> StoreStats:
        """Return the number of stored keys and of write operations."""
        return StoreStats(len(self._data), len(self._log))

    @property
    def head_digest(self) -> bytes:
        """Digest of the most recent operation (all zeros when empty)."""
        return self._log[-1].digest if self._log else _GENESIS

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, (bytes, bytearray, memoryview)) and bytes(key) in self._data

    def __iter__(self) -> Iterator[bytes]:
        return (record.key for record in self._log)