import pytest

from appendkv.store import AppendOnlyStore, KeyExistsError, StoreConfig


@pytest.fixture
def db():
    return AppendOnlyStore()


def test_basic_operations(db):
    db.put(b"test_key", b"test_value")
    assert db.get(b"test_key") == b"test_value"
    with pytest.raises(KeyExistsError):
        db.put(b"test_key", b"new_value")
    assert db.get(b"test_key") == b"test_value"
    assert db.get(b"missing") is None


def test_append_only_behavior(db):
    db.put(b"key1", b"value1")
    with pytest.raises(KeyExistsError) as info:
        db.put(b"key1", b"value2")
    assert info.value.key == b"key1"
    assert "append-only" in str(info.value)
    assert db.get(b"key1") == b"value1"


def test_integrity_verification_empty(db):
    assert db.verify_integrity() is True


def test_integrity_verification_after_writes(db):
    for i in range(20):
        db.put(f"k{i}".encode(), f"v{i}".encode())
    assert db.verify_integrity() is True


def test_statistics(db):
    assert db.stats() == (0, 0)
    db.put(b"key1", b"value1")
    db.put(b"key2", b"value2")
    assert db.stats() == (2, 2)
    assert db.stats().keys == 2
    assert db.stats().operations == 2


def test_failed_write_not_counted(db):
    db.put(b"counter", b"1")
    with pytest.raises(KeyExistsError):
        db.put(b"counter", b"2")
    assert db.stats() == (1, 1)
    assert db.get(b"counter") == b"1"


def test_usage_example_basic_operations():
    config = StoreConfig(
        data_dir="./test_data",
        memtable_size_limit=1024 * 1024,
        wal_sync_interval_ms=1000,
        compaction_threshold=4,
        blockchain_batch_size=100,
    )
    db = AppendOnlyStore(config)
    db.put(b"test_key", b"test_value")
    assert db.get(b"test_key") == b"test_value"
    assert db.verify_integrity()
    assert db.config.data_dir == "./test_data"
    assert db.config.memtable_size_limit == 1024 * 1024


def test_default_config_used(db):
    assert db.config == StoreConfig()
    assert db.config.memtable_size_limit == 64 * 1024 * 1024
    assert db.config.blockchain_batch_size == 1000


def test_head_digest_changes_with_writes(db):
    empty = db.head_digest
    assert empty == bytes(32)
    db.put(b"a", b"1")
    first = db.head_digest
    assert first != empty
    assert len(first) == 32
    db.put(b"b", b"2")
    assert db.head_digest not in (empty, first)


def test_same_history_gives_same_digest():
    one, two = AppendOnlyStore(), AppendOnlyStore()
    for store in (one, two):
        store.put(b"tx:001", b"alice->bob:$100")
        store.put(b"tx:002", b"bob->charlie:$50")
    assert one.head_digest == two.head_digest


def test_order_changes_digest():
    one, two = AppendOnlyStore(), AppendOnlyStore()
    one.put(b"a", b"1")
    one.put(b"b", b"2")
    two.put(b"b", b"2")
    two.put(b"a", b"1")
    assert one.head_digest != two.head_digest


def test_container_protocol(db):
    db.put(b"user:1001", b"Alice")
    db.put(b"user:1002", b"Bob")
    assert len(db) == 2
    assert b"user:1001" in db
    assert b"nonexistent" not in db
    assert list(db) == [b"user:1001", b"user:1002"]


def test_bytearray_key_accepted(db):
    db.put(bytearray(b"k"), bytearray(b"v"))
    assert db.get(b"k") == b"v"


def test_str_key_rejected(db):
    with pytest.raises(TypeError):
        db.put("text", b"v")