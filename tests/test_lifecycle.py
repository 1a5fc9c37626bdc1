"""Tests for the purge-or-persist lifecycle of NamespacedStoreMap."""

import gc
import logging

import pytest

from namespaced_map import NamespacedStoreMap, StoreUnavailableError
from namespaced_map.stores import InMemoryStore


class ClosableStore(InMemoryStore):
    def __init__(self):
        super().__init__()
        self.closed = 0

    def close(self):
        self.closed += 1


class FlakyStore(InMemoryStore):
    """Scans fail while ``down`` is set."""

    def __init__(self):
        super().__init__()
        self.down = False

    def scan_keys_matching(self, pattern):
        if self.down:
            raise StoreUnavailableError("scan", "connection refused")
        return super().scan_keys_matching(pattern)


def _keys_with_suffix(store, token):
    return store.scan_keys_matching("*" + token)


# ── explicit close ───────────────────────────────────────────


def test_close_purges_namespace(make_map, store):
    m = make_map()
    m.put("one", "1")
    m.put("two", "2")
    token = m.token

    m.close()
    assert _keys_with_suffix(store, token) == set()


def test_close_leaves_other_namespaces(make_map, store):
    keep = make_map(persist=True)
    keep.put("k", "kept")
    drop = make_map()
    drop.put("k", "dropped")

    drop.close()
    assert keep.get("k") == "kept"


def test_close_is_idempotent(make_map, store):
    m = make_map()
    m.put("one", "1")
    m.close()
    m.close()
    assert len(store) == 0


def test_persisted_close_keeps_entries(make_map, store):
    m = make_map()
    m.put("one", "1")
    m.mark_persist()
    assert m.is_persisted()

    m.close()
    assert store.get("one" + m.token) == "1"


def test_mark_ephemeral_restores_purge(make_map, store):
    m = make_map(persist=True)
    m.put("one", "1")
    m.mark_ephemeral()
    assert not m.is_persisted()

    m.close()
    assert len(store) == 0


def test_close_releases_connection():
    store = ClosableStore()
    m = NamespacedStoreMap(token="abc123", persist=True, connector=lambda h, p: store)
    m.put("k", "v")
    m.close()
    assert store.closed == 1


def test_failed_purge_can_be_retried():
    store = FlakyStore()
    m = NamespacedStoreMap(token="abc123", connector=lambda h, p: store)
    m.put("k", "v")

    store.down = True
    with pytest.raises(StoreUnavailableError):
        m.close()

    store.down = False
    m.close()
    assert len(store) == 0


# ── context manager ──────────────────────────────────────────


def test_context_manager_purges(connector, store):
    with NamespacedStoreMap(token="abc123", connector=connector) as m:
        m.put("one", "1")
        assert len(store) == 1
    assert len(store) == 0


def test_context_manager_persisted(connector, store):
    with NamespacedStoreMap(token="abc123", persist=True, connector=connector) as m:
        m.put("one", "1")

    reopened = NamespacedStoreMap(token="abc123", persist=True, connector=connector)
    assert reopened.get("one") == "1"


def test_context_manager_purges_on_error(connector, store):
    try:
        with NamespacedStoreMap(token="abc123", connector=connector) as m:
            m.put("one", "1")
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    assert len(store) == 0


# ── garbage-collection safety net ────────────────────────────


def test_collected_map_purges_namespace(connector, store):
    m = NamespacedStoreMap(token="abc123", connector=connector)
    m.put("one", "1")
    other = NamespacedStoreMap(token="zzz999", persist=True, connector=connector)
    other.put("one", "kept")

    del m
    gc.collect()

    assert _keys_with_suffix(store, "abc123") == set()
    assert other.get("one") == "kept"


def test_collected_persisted_map_keeps_namespace(connector, store):
    m = NamespacedStoreMap(token="abc123", connector=connector)
    m.put("one", "1")
    m.mark_persist()

    del m
    gc.collect()

    assert store.get("oneabc123") == "1"


def test_collection_uses_current_token(connector, store):
    m = NamespacedStoreMap(token="first", connector=connector)
    m.put("k", "old")
    m.set_token("second")
    m.put("k", "new")

    del m
    gc.collect()

    assert store.get("kfirst") == "old"
    assert store.get("ksecond") is None


def test_collection_after_close_does_not_purge_again(connector, store):
    m = NamespacedStoreMap(token="abc123", connector=connector)
    m.close()
    # Written after close: cleanup already ran, so it stays.
    m.put("late", "v")

    del m
    gc.collect()

    assert store.get("lateabc123") == "v"


def test_collection_logs_store_failure(caplog):
    store = FlakyStore()
    m = NamespacedStoreMap(token="abc123", connector=lambda h, p: store)
    m.put("k", "v")
    store.down = True

    with caplog.at_level(logging.WARNING, logger="namespaced_map.map"):
        del m
        gc.collect()

    assert "Could not purge namespace abc123" in caplog.text
    assert store.get("kabc123") == "v"
