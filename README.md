# appendkv

An in-memory, append-only key-value store. Each key can be written once.
A second write to the same key raises an error, and the first value stays
in place. Every write is added to a log whose records are linked by SHA-256
digests, and the whole history can be checked again on demand.

The store is the base for two more layers:

- named **collections**, each with its own key space and counters;
- a **request/response layer** (`BlockDBServer`) that takes write, read,
  batch, health and statistics requests, keeps request counters and can
  check permissions through a callable you supply.

Only the standard library is used.

## Installation

```
pip install .
```

To run the test suite with pytest, install the `test` extra: `pip install .[test]`.

## The store: `appendkv.store`

```python
from appendkv.store import AppendOnlyStore, KeyExistsError

db = AppendOnlyStore()
db.put(b"user:1001", b"Alice")
db.get(b"user:1001")        # b"Alice"
db.get(b"missing")          # None

try:
    db.put(b"user:1001", b"Alice Updated")
except KeyExistsError as exc:
    print(exc)              # Key already exists (append-only): 'user:1001'

db.stats()                  # StoreStats(keys=1, operations=1)
db.verify_integrity()       # True
db.head_digest              # 32-byte digest of the latest write
len(db)                     # 1
b"user:1001" in db          # True
list(db)                    # keys in the order they were written
```

- `put(key, value)` stores bytes. It raises `KeyExistsError`, a subclass
  of `ValueError`, when the key is already present. The exception's `key`
  attribute holds the key.
- `get(key)` returns the stored bytes or `None`.
- `stats()` returns a `StoreStats` named tuple `(keys, operations)`.
- `verify_integrity()` recomputes the digest chain from an all-zero
  starting digest. It checks each record against the stored data and
  returns `True` or `False`.
- `head_digest` is all zeros while the store is empty.

`StoreConfig` is a dataclass. Its fields are `data_dir`,
`memtable_size_limit`, `wal_sync_interval_ms`, `compaction_threshold` and
`blockchain_batch_size`. Pass one with `AppendOnlyStore(config=...)`. The
store keeps it as `db.config`.

## Collections: `appendkv.collections`

```python
from appendkv.collections import (
    CollectionManager,
    CollectionNotFoundError,
    DuplicateCollectionError,
)

manager = CollectionManager()
users = manager.create_collection("users")             # "col_1"
orders = manager.create_collection("orders", "admin")  # "col_2", created_by="admin"

manager.put(users, b"key1", b"user_value")
manager.put(orders, b"key1", b"order_value")   # separate key space

manager.get(users, b"key1")                    # b"user_value"
manager.get(users, b"absent")                  # None
manager.get_collection_by_name("orders")       # "col_2"
manager.collection_exists(users)               # True

meta = manager.get_collection_stats(users)     # CollectionMetadata
meta.document_count, meta.total_size_bytes, meta.operations_count

manager.list_collections()                     # [CollectionMetadata, ...]
manager.total_stats()                          # TotalStats(collections, documents, size_bytes)
manager.verify_integrity()                     # True

manager.drop_collection(users)
manager.collection_exists(users)               # False
```

- IDs are given out as `col_1`, `col_2`, … in creation order. An ID is not
  reused after its collection is dropped.
- Creating a collection with a name that is already in use raises
  `DuplicateCollectionError`.
- Any operation on an unknown collection ID raises
  `CollectionNotFoundError`, which is also a `LookupError`. Both errors
  derive from `CollectionError`.
- Writing a key that already exists in a collection raises the store's
  `KeyExistsError`.
- `CollectionMetadata` holds `id`, `name`, `created_at` (Unix seconds),
  `created_by`, `document_count`, `total_size_bytes` (key plus value
  lengths) and `operations_count`.
- `Collection.verify_integrity()` checks the collection's digest chain and
  checks that its document count matches the stored keys.
  `CollectionManager.verify_integrity()` stops at the first collection
  that fails.
- `len(manager)` counts collections. `collection_id in manager` tests
  whether one exists.

## Request/response layer: `appendkv.api`

```python
from appendkv.api import (
    ApiConfig,
    BatchWriteRequest,
    BlockDBServer,
    ReadRequest,
    WriteRequest,
)

def authorizer(token: str, permission: str) -> bool:
    return token == "token" and permission in {"read", "write"}

server = BlockDBServer(config=ApiConfig(), authorizer=authorizer)

server.write(WriteRequest(key="user:1", value="Alice", auth_token="token"))
server.read(ReadRequest(key="user:1"))
# ReadResponse(success=True, data='Alice', message='Data found', timestamp=...)

server.write(WriteRequest(key="dXNlcjoy", value="Qm9i",
                          encoding="base64", auth_token="token"))

batch = server.batch_write(BatchWriteRequest(operations=[
    WriteRequest(key="a", value="1", auth_token="token"),
    WriteRequest(key="a", value="2", auth_token="token"),   # duplicate
]))
batch.total_processed    # 1
batch.results[1].success # False

server.health()          # HealthResponse(status="healthy", uptime=..., ...)
server.stats()           # StatsResponse(total_writes=..., total_reads=..., ...)
```

- `BlockDBServer(db=None, config=None, authorizer=None)` creates its own
  `AppendOnlyStore` and a default `ApiConfig` when none are given.
- Authentication: when `config.auth_enabled` is true (the default), each
  write needs an `auth_token`. It also needs an authorizer that returns
  `True` for `(token, "write")`. Reads are checked with `"read"` only when
  `config.require_auth_for_reads` is true. A failed check raises
  `AuthenticationError`. With no authorizer, every checked request fails.
  With `auth_enabled=False` no checks are made.
- Encoding: with `encoding="base64"`, keys and values must be valid
  base64, or `InvalidDataError` is raised. Found values are returned in
  base64. Otherwise text is sent as UTF-8. `InvalidDataError` and
  `AuthenticationError` both derive from `ApiError`.
- `write` lets the store's `KeyExistsError` propagate.
- `read` reports a missing key with `data=None` and
  `message="Key not found"`. Hits and misses are counted in `cache_hits`
  and `cache_misses`.
- `batch_write` runs each write in turn. It records each failure as a
  `WriteResponse` with `success=False` and does not raise.
  `success` is true when at least one write went through.
- `health()` runs the store's integrity check. It reports uptime in
  seconds and the number of writes made through the server.
  `blockchain_height` is always 0.
- `stats()` returns the counters. `blockchain_blocks` and `storage_size`
  are always 0.

## Demonstration

```
appendkv-demo                 # run all demonstrations
appendkv-demo simple          # basic store walkthrough
appendkv-demo collection      # multi-collection walkthrough
appendkv-demo basic           # short write/read/verify example
```

Each walkthrough prints its steps to standard output.
`run_simple_demo(out)` and `run_collection_demo(out)` in `appendkv.demo`
do the same thing and write to any text stream. They return the store or
manager they built.

## What this package does not do

- **No persistence.** Data lives in memory only and is lost when the
  process ends. The `StoreConfig` fields, such as `data_dir` and the size
  and interval settings, are kept with the store but have no effect on its
  behaviour.
- **No network server.** `BlockDBServer` is called directly from Python.
  `ApiConfig.host`, `port`, `max_connections`, `request_timeout`,
  `enable_cors`, `enable_compression` and `session_duration_hours` are
  stored but never used to listen for connections.
- **No user or session management.** There are no logins, user accounts
  or tokens issued by the package. Permission checks are left entirely to
  the authorizer callable you pass in.
- **No replication or consensus.** Everything runs in a single process.