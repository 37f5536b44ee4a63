import io

import pytest

from appendkv.demo import main, run_collection_demo, run_simple_demo
from appendkv.store import KeyExistsError


@pytest.fixture
def out():
    return io.StringIO()


def test_simple_demo_preserves_original_value(out):
    store = run_simple_demo(out)
    assert store.get(b"counter") == b"1"
    assert store.get(b"user:1001") == b"Alice"
    assert store.get(b"nonexistent") is None


def test_simple_demo_stats_agree_and_chain_verifies(out):
    store = run_simple_demo(out)
    keys, operations = store.stats()
    assert keys == operations
    assert keys == len(list(store))
    assert store.verify_integrity() is True


def test_simple_demo_reports_refusal_and_missing_key(out):
    run_simple_demo(out)
    text = out.getvalue()
    assert "NOT FOUND" in text
    assert "Key already exists (append-only)" in text
    assert "Chain verification passed" in text


def test_simple_demo_store_still_append_only(out):
    store = run_simple_demo(out)
    with pytest.raises(KeyExistsError):
        store.put(b"user:1001", b"Alice Updated")


def test_collection_demo_isolation(out):
    manager = run_collection_demo(out)
    users = manager.get_collection_by_name("users")
    orders = manager.get_collection_by_name("orders")
    assert manager.get(users, b"user:1001") == b"Alice Smith"
    assert manager.get(orders, b"order:2001") == b"laptop,keyboard,mouse"
    assert manager.get(users, b"order:2001") is None


def test_collection_demo_tenants_hold_separate_values(out):
    manager = run_collection_demo(out)
    tenant_a = manager.get_collection_by_name("tenant_a_data")
    tenant_b = manager.get_collection_by_name("tenant_b_data")
    assert manager.get(tenant_a, b"user:admin") == b"John Doe"
    assert manager.get(tenant_b, b"user:admin") == b"Jane Smith"


def test_collection_demo_drops_temporary(out):
    manager = run_collection_demo(out)
    assert manager.get_collection_by_name("temporary") is None
    assert "not found" in out.getvalue()


def test_collection_demo_totals_match_listing(out):
    manager = run_collection_demo(out)
    totals = manager.total_stats()
    listing = manager.list_collections()
    assert totals.collections == len(listing)
    assert totals.documents == sum(m.document_count for m in listing)
    assert totals.size_bytes == sum(m.total_size_bytes for m in listing)
    assert manager.verify_integrity() is True


def test_main_runs_selected_demo(capsys):
    assert main(["simple"]) == 0
    captured = capsys.readouterr().out
    assert "PUT: user:1001 -> Alice" in captured
    assert "Multi-Collection" not in captured


def test_main_basic_usage(capsys):
    assert main(["basic"]) == 0
    captured = capsys.readouterr().out
    assert "user:1 = Alice" in captured
    assert "Key 'nonexistent' not found (expected)" in captured


def test_main_rejects_unknown_demo():
    with pytest.raises(SystemExit) as excinfo:
        main(["bogus"])
    assert excinfo.value.code == 2