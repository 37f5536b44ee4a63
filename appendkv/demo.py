"""Command-line walkthroughs of the store and the collection manager."""

from __future__ import annotations

import argparse
import sys
from typing import Callable, TextIO

from .collections import CollectionError, CollectionManager
from .store import AppendOnlyStore, KeyExistsError, StoreConfig


def _text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _heading(out: TextIO, title: str) -> None:
    print(title, file=out)
    print("-" * len(title), file=out)


class _StoreReporter:
    """Performs store operations and reports each one on ``out``."""

    def __init__(self, store: AppendOnlyStore, out: TextIO) -> None:
        self.store = store
        self.out = out

    def put(self, key: bytes, value: bytes) -> bool:
        try:
            self.store.put(key, value)
        except KeyExistsError as exc:
            print(f"ERROR: {exc}", file=self.out)
            return False
        print(f"PUT: {_text(key)} -> {_text(value)}", file=self.out)
        return True

    def get(self, key: bytes) -> bytes | None:
        value = self.store.get(key)
        if value is None:
            print(f"GET: {_text(key)} -> NOT FOUND", file=self.out)
        else:
            print(f"GET: {_text(key)} -> {_text(value)}", file=self.out)
        return value


def run_simple_demo(out: TextIO | None = None) -> AppendOnlyStore:
    """Walk through basic puts, gets, append-only refusal and verification."""
    out = out if out is not None else sys.stdout
    print("AppendKV Simple Demonstration", file=out)
    print("=============================\n", file=out)

    print("Initializing store...", file=out)
    store = AppendOnlyStore()
    db = _StoreReporter(store, out)
    print("Store ready!\n", file=out)

    _heading(out, "1. Basic PUT/GET Operations:")
    db.put(b"user:1001", b"Alice")
    db.put(b"user:1002", b"Bob")
    db.put(b"config:theme", b"dark")
    db.get(b"user:1001")
    db.get(b"user:1002")
    db.get(b"nonexistent")
    print(file=out)

    _heading(out, "2. Append-Only Behavior:")
    db.put(b"counter", b"1")
    db.put(b"counter", b"2")
    db.get(b"counter")
    print(file=out)

    _heading(out, "3. Example Use Cases:")
    print("Financial Ledger:", file=out)
    db.put(b"tx:001", b"alice->bob:$100")
    db.put(b"tx:002", b"bob->charlie:$50")
    print("\nEvent Sourcing:", file=out)
    db.put(b"event:user_created:1001", b"name:Alice,email:alice@example.com")
    db.put(b"event:user_login:1001", b"timestamp:2024-01-01T10:00:00Z")
    print("\nConfiguration Management:", file=out)
    db.put(b"config:v1", b"api_url:http://api.v1.example.com")
    db.put(b"config:v2", b"api_url:http://api.v2.example.com")
    print(file=out)

    _heading(out, "4. Chain Verification:")
    keys, operations = store.stats()
    print("Verifying chain integrity...", file=out)
    if store.verify_integrity():
        print(f"Chain verification passed ({operations} operations verified)", file=out)
    else:
        print("Chain verification FAILED", file=out)
    print(file=out)

    _heading(out, "5. Database Statistics:")
    print(f"Total keys stored: {keys}", file=out)
    print(f"Total operations: {operations}", file=out)
    print(file=out)
    return store


class _ManagerReporter:
    """Performs collection operations and reports each one on ``out``."""

    def __init__(self, manager: CollectionManager, out: TextIO) -> None:
        self.manager = manager
        self.out = out

    def _name(self, collection_id: str) -> str:
        if self.manager.collection_exists(collection_id):
            return self.manager.get_collection_stats(collection_id).name
        return collection_id

    def create(self, name: str) -> str:
        collection_id = self.manager.create_collection(name)
        print(f"Collection '{name}' created with ID: {collection_id}", file=self.out)
        return collection_id

    def put(self, collection_id: str, key: bytes, value: bytes) -> bool:
        name = self._name(collection_id)
        try:
            self.manager.put(collection_id, key, value)
        except (KeyExistsError, CollectionError) as exc:
            print(f"ERROR [{name}]: {exc}", file=self.out)
            return False
        print(f"PUT [{name}]: {_text(key)} -> {_text(value)}", file=self.out)
        return True

    def get(self, collection_id: str, key: bytes) -> bytes | None:
        name = self._name(collection_id)
        try:
            value = self.manager.get(collection_id, key)
        except CollectionError as exc:
            print(f"GET [{name}]: {_text(key)} -> {exc}", file=self.out)
            return None
        if value is None:
            print(f"GET [{name}]: {_text(key)} -> NOT FOUND", file=self.out)
        else:
            print(f"GET [{name}]: {_text(key)} -> {_text(value)}", file=self.out)
        return value


def run_collection_demo(out: TextIO | None = None) -> CollectionManager:
    """Walk through several isolated collections and their management."""
    out = out if out is not None else sys.stdout
    print("AppendKV Multi-Collection Demonstration", file=out)
    print("=======================================\n", file=out)

    manager = CollectionManager()
    m = _ManagerReporter(manager, out)
    print("Collection manager initialized\n", file=out)

    _heading(out, "1. Creating Collections:")
    users = m.create("users")
    orders = m.create("orders")
    products = m.create("products")
    audit_log = m.create("audit_log")
    print(file=out)

    _heading(out, "2. Collection Operations & Isolation:")
    m.put(users, b"user:1001", b"Alice Smith")
    m.put(users, b"user:1002", b"Bob Johnson")
    m.put(users, b"user:1003", b"Carol Davis")
    m.put(orders, b"order:2001", b"laptop,keyboard,mouse")
    m.put(orders, b"order:2002", b"monitor,cables")
    m.put(products, b"prod:3001", b'MacBook Pro 16"')
    m.put(products, b"prod:3002", b'Dell Monitor 27"')
    m.put(audit_log, b"log:4001", b"user_login:Alice:2024-01-15T10:30:00Z")
    m.put(audit_log, b"log:4002", b"order_created:2001:2024-01-15T10:35:00Z")
    print(file=out)

    _heading(out, "3. Data Retrieval & Isolation Testing:")
    m.get(users, b"user:1001")
    m.get(orders, b"order:2001")
    m.get(products, b"prod:3001")
    m.get(users, b"order:2001")
    m.get(orders, b"user:1001")
    m.get(products, b"log:4001")
    print(file=out)

    _heading(out, "4. Append-Only Behavior Testing:")
    m.put(users, b"user:1001", b"Alice Updated")
    m.put(orders, b"order:2001", b"different order")
    m.get(users, b"user:1001")
    m.get(orders, b"order:2001")
    print(file=out)

    _heading(out, "5. Collection Management:")
    listing = manager.list_collections()
    print(f"Collections ({len(listing)}):", file=out)
    for meta in listing:
        print(
            f"   - {meta.name} (ID: {meta.id}, Documents: {meta.document_count}, "
            f"Size: {meta.total_size_bytes} bytes)",
            file=out,
        )
    found = manager.get_collection_by_name("users")
    if found is not None:
        print(f"Found 'users' collection with ID: {found}", file=out)
    print("Collection existence checks:", file=out)
    print(f"   - users exists: {manager.collection_exists(users)}", file=out)
    print(f"   - nonexistent exists: {manager.collection_exists('nonexistent')}", file=out)
    print(file=out)

    _heading(out, "6. Real-World Use Cases:")
    print("E-commerce System:", file=out)
    m.put(users, b"user:1004", b"David Wilson")
    m.put(orders, b"order:2003", b"smartphone,case,charger")
    m.put(products, b"prod:3003", b"iPhone 15 Pro")
    m.put(audit_log, b"log:4003", b"order_shipped:2003:2024-01-15T14:20:00Z")
    print("\nMulti-Tenant SaaS:", file=out)
    tenant_a = m.create("tenant_a_data")
    tenant_b = m.create("tenant_b_data")
    m.put(tenant_a, b"config:api_limit", b"1000")
    m.put(tenant_a, b"user:admin", b"John Doe")
    m.put(tenant_b, b"config:api_limit", b"5000")
    m.put(tenant_b, b"user:admin", b"Jane Smith")
    print("\nTenant Isolation Verification:", file=out)
    m.get(tenant_a, b"config:api_limit")
    m.get(tenant_b, b"config:api_limit")
    m.get(tenant_a, b"user:admin")
    m.get(tenant_b, b"user:admin")
    print(file=out)

    _heading(out, "7. Collection Deletion:")
    temp = m.create("temporary")
    m.put(temp, b"temp:key", b"temp value")
    print("Before deletion:", file=out)
    print(f"   - temporary exists: {manager.collection_exists(temp)}", file=out)
    m.get(temp, b"temp:key")
    manager.drop_collection(temp)
    print(f"Collection 'temporary' (ID: {temp}) dropped successfully", file=out)
    print("After deletion:", file=out)
    print(f"   - temporary exists: {manager.collection_exists(temp)}", file=out)
    m.get(temp, b"temp:key")
    print(file=out)

    _heading(out, "8. Statistics & Integrity:")
    totals = manager.total_stats()
    print(f"Total collections: {totals.collections}", file=out)
    print(f"Total documents: {totals.documents}", file=out)
    print(f"Total size: {totals.size_bytes} bytes", file=out)
    print("Verifying integrity across all collections...", file=out)
    if manager.verify_integrity():
        print(
            f"Integrity verification passed for all {totals.collections} collections",
            file=out,
        )
    else:
        print("Integrity verification FAILED", file=out)
    print(file=out)
    return manager


def _run_basic_usage(out: TextIO | None = None) -> AppendOnlyStore:
    """Write a handful of records, read some back and verify the chain."""
    out = out if out is not None else sys.stdout
    store = AppendOnlyStore(StoreConfig(data_dir="./example_data", memtable_size_limit=1024 * 1024))

    print("Writing data...", file=out)
    for key, value in (
        (b"user:1", b"Alice"),
        (b"user:2", b"Bob"),
        (b"user:3", b"Charlie"),
        (b"config:timeout", b"30"),
        (b"config:retries", b"3"),
    ):
        store.put(key, value)

    print("Reading data...", file=out)
    for key in (b"user:1", b"config:timeout"):
        value = store.get(key)
        if value is not None:
            print(f"{_text(key)} = {_text(value)}", file=out)
    if store.get(b"nonexistent") is None:
        print("Key 'nonexistent' not found (expected)", file=out)

    print("Verifying chain integrity...", file=out)
    verdict = "Valid" if store.verify_integrity() else "Invalid"
    print(f"Chain integrity: {verdict}", file=out)
    print("Example completed successfully!", file=out)
    return store


_DEMOS: dict[str, Callable[[TextIO | None], object]] = {
    "simple": run_simple_demo,
    "collection": run_collection_demo,
    "basic": _run_basic_usage,
}


def main(argv: list[str] | None = None) -> int:
    """Run one demonstration, or all of them, and print to standard output."""
    parser = argparse.ArgumentParser(
        prog="appendkv-demo",
        description="Demonstrate the append-only store and its collections.",
    )
    parser.add_argument(
        "demo",
        nargs="?",
        default="all",
        choices=[*_DEMOS, "all"],
        help="which demonstration to run (default: all)",
    )
    args = parser.parse_args(argv)
    selected = list(_DEMOS) if args.demo == "all" else [args.demo]
    for name in selected:
        _DEMOS[name](sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())