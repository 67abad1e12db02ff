# tests/test_recent.py
import json
import logging
import uuid

import pytest
from sqlalchemy import create_engine, inspect

import init_db
from picker.config import RecentBackend, Settings
from picker.recent import (
    JsonFileStore,
    MemoryStore,
    NamespacedBackend,
    RecentSelectionsManager,
    SqlStore,
    default_memory_store,
    open_backend,
    recent_namespace,
)


class CountingBackend:
    def __init__(self, initial=None):
        self.data = list(initial or [])
        self.saves = 0

    def load(self):
        return list(self.data)

    def save(self, ids):
        self.saves += 1
        self.data = list(ids)


class BrokenBackend:
    def load(self):
        raise OSError("storage unavailable")

    def save(self, ids):
        raise OSError("storage unavailable")


class GarbageBackend:
    def __init__(self, value):
        self.value = value

    def load(self):
        return self.value

    def save(self, ids):
        pass


def _manager(capacity=5, backend=None):
    return RecentSelectionsManager("test", capacity=capacity, backend=backend or CountingBackend())


# -----------------------------
# manager behaviour
# -----------------------------


def test_capacity_drops_oldest():
    manager = _manager()
    for item_id in ["a", "b", "c", "d", "e", "f"]:
        manager.add_recent(item_id)
    assert manager.get_recent() == ["f", "e", "d", "c", "b"]


def test_re_adding_moves_to_front_without_duplicates():
    manager = _manager()
    for item_id in ["a", "b", "c", "a"]:
        manager.add_recent(item_id)
    assert manager.get_recent() == ["a", "c", "b"]


def test_adding_current_front_is_a_no_op():
    backend = CountingBackend()
    manager = _manager(backend=backend)
    manager.add_recent("a")
    manager.add_recent("a")
    assert manager.get_recent() == ["a"]
    assert backend.saves == 1


def test_ids_are_coerced_to_strings():
    manager = _manager()
    manager.add_recent(7)
    assert manager.get_recent() == ["7"]


def test_loads_existing_history_truncated_to_capacity():
    manager = _manager(capacity=2, backend=CountingBackend(["x", "y", "z"]))
    assert manager.get_recent() == ["x", "y"]


def test_zero_capacity_keeps_nothing():
    manager = _manager(capacity=0)
    manager.add_recent("a")
    assert manager.get_recent() == []


def test_clear_recent():
    backend = CountingBackend(["a", "b"])
    manager = _manager(backend=backend)
    manager.clear_recent()
    assert manager.get_recent() == []
    assert backend.data == []


def test_managers_sharing_a_namespace_see_each_other():
    store = MemoryStore()
    first = RecentSelectionsManager("dogs-he", backend=store.backend("dogs-he"))
    second = RecentSelectionsManager("dogs-he", backend=store.backend("dogs-he"))

    first.add_recent("dog-1")
    assert second.get_recent() == ["dog-1"]

    second.add_recent("dog-2")
    assert first.get_recent() == ["dog-2", "dog-1"]


def test_namespaces_are_isolated():
    store = MemoryStore()
    dogs = RecentSelectionsManager("dogs-he", backend=store.backend("dogs-he"))
    cats = RecentSelectionsManager("cats-he", backend=store.backend("cats-he"))

    dogs.add_recent("dog-1")
    assert cats.get_recent() == []


# -----------------------------
# failure handling
# -----------------------------


def test_broken_backend_keeps_working_in_memory(caplog):
    with caplog.at_level(logging.WARNING, logger="picker.recent"):
        manager = _manager(backend=BrokenBackend())
        manager.add_recent("a")
        manager.add_recent("b")
        assert manager.get_recent() == ["b", "a"]

    assert "Failed to load recent selections" in caplog.text
    assert "Failed to save recent selections" in caplog.text


@pytest.mark.parametrize("garbage", ["not-a-list", {"a": 1}, 42, None])
def test_corrupt_data_is_ignored(garbage, caplog):
    with caplog.at_level(logging.WARNING, logger="picker.recent"):
        manager = _manager(backend=GarbageBackend(garbage))
        assert manager.get_recent() == []
    assert "corrupt" in caplog.text


def test_non_string_entries_are_dropped():
    manager = _manager(backend=CountingBackend(["a", 3, None, "b", "a"]))
    assert manager.get_recent() == ["a", "b"]


# -----------------------------
# stores
# -----------------------------


def test_json_file_store_round_trips_and_keeps_namespaces(tmp_path):
    path = tmp_path / "recent.json"
    store = JsonFileStore(path)

    RecentSelectionsManager("dogs-he", backend=store.backend("dogs-he")).add_recent("dog-1")
    RecentSelectionsManager("cats-he", backend=store.backend("cats-he")).add_recent("cat-1")

    reopened = RecentSelectionsManager("dogs-he", backend=JsonFileStore(path).backend("dogs-he"))
    assert reopened.get_recent() == ["dog-1"]
    assert json.loads(path.read_text(encoding="utf-8")) == {"dogs-he": ["dog-1"], "cats-he": ["cat-1"]}


def test_json_file_store_missing_file_is_empty(tmp_path):
    assert JsonFileStore(tmp_path / "absent.json").load("x") == []


def test_json_file_store_replaces_unreadable_file(tmp_path, caplog):
    path = tmp_path / "recent.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    store = JsonFileStore(path)

    with caplog.at_level(logging.WARNING, logger="picker.recent"):
        manager = RecentSelectionsManager("dogs-he", backend=store.backend("dogs-he"))
        manager.add_recent("dog-1")

    assert manager.get_recent() == ["dog-1"]
    assert json.loads(path.read_text(encoding="utf-8")) == {"dogs-he": ["dog-1"]}
    assert "Replacing unreadable" in caplog.text


def test_json_file_store_invalid_json_falls_back(tmp_path):
    path = tmp_path / "recent.json"
    path.write_text("{not json", encoding="utf-8")
    manager = RecentSelectionsManager("dogs-he", backend=JsonFileStore(path).backend("dogs-he"))
    manager.add_recent("dog-1")
    assert manager.get_recent() == ["dog-1"]


def test_json_file_store_leaves_no_temp_files(tmp_path):
    store = JsonFileStore(tmp_path / "recent.json")
    store.save("a", ["1"])
    store.save("a", ["2", "1"])
    assert sorted(p.name for p in tmp_path.iterdir()) == ["recent.json"]


def test_sql_store(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'recent.db'}")
    store = SqlStore(engine)

    manager = RecentSelectionsManager("dogs-he", backend=store.backend("dogs-he"))
    manager.add_recent("dog-1")
    manager.add_recent("dog-2")

    assert SqlStore(engine).load("dogs-he") == ["dog-2", "dog-1"]
    assert store.load("cats-he") == []
    engine.dispose()


# -----------------------------
# wiring
# -----------------------------


def test_recent_namespace():
    assert recent_namespace("dog", "he") == "breed-recent-dog-he"
    assert recent_namespace("cat", "en", prefix="pets") == "pets-cat-en"


def test_open_backend_uses_configured_store(tmp_path):
    cfg = Settings(recent={"backend": "json", "json_path": str(tmp_path / "r.json")})
    assert cfg.recent.backend == RecentBackend.JSON

    backend = open_backend("dogs-he", cfg)
    assert isinstance(backend, NamespacedBackend)
    assert isinstance(backend.store, JsonFileStore)
    backend.save(["dog-1"])
    assert (tmp_path / "r.json").exists()


def test_default_managers_share_the_process_memory_store():
    namespace = f"test-{uuid.uuid4().hex}"
    first = RecentSelectionsManager(namespace, backend=open_backend(namespace, Settings()))
    second = RecentSelectionsManager(namespace, backend=open_backend(namespace, Settings()))

    first.add_recent("dog-3")
    assert second.get_recent() == ["dog-3"]
    assert default_memory_store().load(namespace) == ["dog-3"]


def test_init_database_creates_table(tmp_path, monkeypatch):
    engine = create_engine(f"sqlite:///{tmp_path / 'init.db'}")
    monkeypatch.setattr(init_db, "get_engine", lambda: engine)

    init_db.init_database(reset=True)
    assert "recent_selections" in inspect(engine).get_table_names()
    engine.dispose()


def test_unreachable_sql_store_falls_back_to_memory(tmp_path, monkeypatch, caplog):
    cfg = Settings(recent={"backend": "sql", "db_url": f"sqlite:///{tmp_path / 'missing' / 'r.db'}"})
    monkeypatch.setattr("picker.recent.settings", cfg)
    namespace = f"test-{uuid.uuid4().hex}"

    with caplog.at_level(logging.WARNING, logger="picker.recent"):
        manager = RecentSelectionsManager(namespace)
        manager.add_recent("dog-1")

    assert manager.get_recent() == ["dog-1"]
    assert default_memory_store().load(namespace) == ["dog-1"]
    assert "Failed to open sql recent-selection store" in caplog.text
    assert caplog.records[0].namespace == namespace
