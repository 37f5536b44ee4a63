"""Request/response front end over an append-only store, with counters and auth hooks."""

from __future__ import annotations

import base64
import binascii
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable

from .store import AppendOnlyStore, KeyExistsError

logger = logging.getLogger(__name__)

BASE64 = "base64"
PERMISSION_READ = "read"
PERMISSION_WRITE = "write"

Authorizer = Callable[[str, str], bool]
"""Callable receiving ``(token, permission)`` and telling whether it is granted."""


class ApiError(Exception):
    """Base class for errors raised by the request layer."""


class InvalidDataError(ApiError, ValueError):
    """Raised when a request carries data that cannot be decoded."""


class AuthenticationError(ApiError, PermissionError):
    """Raised when a request lacks valid credentials or the needed permission."""


def _now() -> int:
    return int(time.time())


@dataclass
class ApiConfig:
    """Settings of the request layer."""

    host: str = "127.0.0.1"
    port: int = 8080
    max_connections: int = 1000
    request_timeout: int = 30
    enable_cors: bool = True
    enable_compression: bool = True
    auth_enabled: bool = True
    require_auth_for_reads: bool = False
    session_duration_hours: int = 24


@dataclass
class WriteRequest:
    key: str
    value: str
    encoding: str | None = None
    auth_token: str | None = None


@dataclass
class ReadRequest:
    key: str
    encoding: str | None = None
    auth_token: str | None = None


@dataclass
class WriteResponse:
    success: bool
    message: str
    timestamp: int
    sequence_number: int | None = None


@dataclass
class ReadResponse:
    success: bool
    data: str | None
    message: str
    timestamp: int


@dataclass
class BatchWriteRequest:
    operations: list[WriteRequest] = field(default_factory=list)


@dataclass
class BatchWriteResponse:
    success: bool
    results: list[WriteResponse]
    total_processed: int


@dataclass
class HealthResponse:
    status: str
    uptime: int
    total_records: int
    blockchain_height: int
    integrity_verified: bool


@dataclass
class StatsResponse:
    total_writes: int
    total_reads: int
    cache_hits: int
    cache_misses: int
    blockchain_blocks: int
    storage_size: int


@dataclass
class ServerStats:
    """Running counters kept by a server."""

    total_writes: int = 0
    total_reads: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    start_time: float | None = None


def _decode(text: str, encoding: str | None, what: str) -> bytes:
    if encoding == BASE64:
        try:
            return base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidDataError(f"Invalid base64 {what}: {exc}") from exc
    return text.encode("utf-8")


class BlockDBServer:
    """Serves write, read, batch, health and statistics requests over a store."""

    def __init__(
        self,
        db: AppendOnlyStore | None = None,
        config: ApiConfig | None = None,
        authorizer: Authorizer | None = None,
    ) -> None:
        self.db = db if db is not None else AppendOnlyStore()
        self.config = config if config is not None else ApiConfig()
        self._authorizer = authorizer
        self._stats = ServerStats(start_time=time.time())
        self._lock = threading.Lock()

    def _authenticate(self, token: str | None, permission: str) -> None:
        if not self.config.auth_enabled:
            return
        if self._authorizer is None or token is None:
            raise AuthenticationError("Invalid credentials")
        if not self._authorizer(token, permission):
            raise AuthenticationError(f"Insufficient permissions: {permission} required")

    def write(self, request: WriteRequest) -> WriteResponse:
        """Store one key/value pair; raises on auth, decoding or duplicate-key errors."""
        self._authenticate(request.auth_token, PERMISSION_WRITE)
        key = _decode(request.key, request.encoding, "key")
        value = _decode(request.value, request.encoding, "value")
        self.db.put(key, value)
        with self._lock:
            self._stats.total_writes += 1
        return WriteResponse(True, "Data written successfully", _now())

    def read(self, request: ReadRequest) -> ReadResponse:
        """Look up one key; a missing key is reported in the response, not raised."""
        if self.config.require_auth_for_reads:
            self._authenticate(request.auth_token, PERMISSION_READ)
        key = _decode(request.key, request.encoding, "key")
        value = self.db.get(key)
        with self._lock:
            self._stats.total_reads += 1
            if value is not None:
                self._stats.cache_hits += 1
            else:
                self._stats.cache_misses += 1
        if value is None:
            data = None
        elif request.encoding == BASE64:
            data = base64.b64encode(value).decode("ascii")
        else:
            data = value.decode("utf-8", errors="replace")
        message = "Data found" if data is not None else "Key not found"
        return ReadResponse(True, data, message, _now())

    def batch_write(self, request: BatchWriteRequest) -> BatchWriteResponse:
        """Apply each write in turn, recording failures instead of raising them."""
        results: list[WriteResponse] = []
        processed = 0
        for operation in request.operations:
            try:
                results.append(self.write(operation))
                processed += 1
            except (ApiError, KeyExistsError) as exc:
                logger.debug("batch write failed: %s", exc)
                results.append(WriteResponse(False, str(exc), _now()))
        return BatchWriteResponse(processed > 0, results, processed)

    def health(self) -> HealthResponse:
        """Report uptime, record count and the result of an integrity check."""
        integrity = self.db.verify_integrity()
        with self._lock:
            start = self._stats.start_time
            total = self._stats.total_writes
        uptime = max(0, int(time.time() - start)) if start is not None else 0
        return HealthResponse("healthy", uptime, total, 0, integrity)

    def stats(self) -> StatsResponse:
        """Return a snapshot of the request counters."""
        with self._lock:
            s = self._stats
            return StatsResponse(s.total_writes, s.total_reads, s.cache_hits, s.cache_misses, 0, 0)