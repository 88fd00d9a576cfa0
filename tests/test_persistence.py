"""Unit tests for the persistence adapter (envelopes, set handling, merging)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from civicboard.core.persistence import ModuleCatalogAdapter, PersistenceAdapter
from civicboard.core.snapshots import (
    Density,
    ModuleCatalogSnapshot,
    ModuleRecord,
    PrivacySnapshot,
    SavedQuery,
    ViewSnapshot,
)
from civicboard.core.storage import VIEW_STORAGE_KEY, FileStorage, MemoryStorage
from civicboard.stores import ViewStore

VIEW_FIELDS = ("favorites", "density", "velocity_window", "saved_queries")


class _FullStorage(MemoryStorage):
    """Storage whose writes always fail, like a browser over quota."""

    def set(self, key: str, value: str) -> None:
        raise OSError("quota exceeded")


def _view_adapter(storage: MemoryStorage) -> PersistenceAdapter[ViewSnapshot]:
    return PersistenceAdapter("view", ViewSnapshot, VIEW_FIELDS, storage)


def test_write_projects_only_durable_fields() -> None:
    """Non-durable fields (search text, filters) are never written."""
    storage = MemoryStorage()
    snap = ViewSnapshot(search_query="secret", favorites=frozenset({"b", "a"}))

    assert _view_adapter(storage).write(snap)

    payload = json.loads(storage.get("view") or "")
    assert payload["version"] == 1
    state = payload["state"]
    assert set(state) == set(VIEW_FIELDS)
    assert state["favorites"] == ["a", "b"]
    assert state["density"] == "full"


def test_favorites_survive_serialization_as_a_set() -> None:
    storage = MemoryStorage()
    adapter = _view_adapter(storage)
    favorites = frozenset({"f1", "f2", "f3"})
    adapter.write(ViewSnapshot(favorites=favorites))

    partial = adapter.read()

    assert partial is not None
    assert partial["favorites"] == favorites
    assert isinstance(partial["favorites"], frozenset)


def test_read_absent_and_corrupt_values() -> None:
    """Nothing stored, invalid JSON and non-object JSON all read as None."""
    storage = MemoryStorage()
    adapter = _view_adapter(storage)
    assert adapter.read() is None

    storage.set("view", "{not json")
    assert adapter.read() is None

    storage.set("view", "[1, 2, 3]")
    assert adapter.read() is None


@pytest.mark.parametrize(
    "raw",
    [
        b'{"state": {"density": "\xff\xfe"}}',
        b"[" * 200_000 + b"]" * 200_000,
    ],
    ids=["invalid-utf8", "deeply-nested"],
)
def test_undecodable_file_reads_as_absent(tmp_path: Path, raw: bytes) -> None:
    """Bytes on disk that cannot be decoded leave the store on its defaults."""
    (tmp_path / f"{VIEW_STORAGE_KEY}.json").write_bytes(raw)
    storage = FileStorage(tmp_path)

    assert PersistenceAdapter(VIEW_STORAGE_KEY, ViewSnapshot, VIEW_FIELDS, storage).read() is None
    assert ViewStore(storage).present == ViewSnapshot()


def test_read_accepts_bare_state_mapping() -> None:
    storage = MemoryStorage({"view": json.dumps({"density": "compact", "search_query": "x"})})
    assert _view_adapter(storage).read() == {"density": "compact"}


def test_merge_overlays_durable_fields_and_keeps_defaults() -> None:
    adapter = _view_adapter(MemoryStorage())
    fresh = ViewSnapshot()

    merged = adapter.merge({"density": "compact", "favorites": frozenset({"x"})}, fresh)

    assert merged.density is Density.COMPACT
    assert merged.favorites == frozenset({"x"})
    assert merged.velocity_window == fresh.velocity_window
    assert merged.search_query == ""


def test_merge_falls_back_field_by_field_on_bad_values() -> None:
    """A wrongly typed field keeps its default while valid fields still load."""
    adapter = _view_adapter(MemoryStorage())

    merged = adapter.merge(
        {"density": "sideways", "velocity_window": 13, "favorites": frozenset({"ok"})},
        ViewSnapshot(),
    )

    assert merged.density is Density.FULL
    assert merged.velocity_window == 24
    assert merged.favorites == frozenset({"ok"})


def test_merge_is_idempotent() -> None:
    adapter = _view_adapter(MemoryStorage())
    persisted = {
        "favorites": frozenset({"a"}),
        "saved_queries": [{"name": "buses", "query": "lanta"}],
    }
    once = adapter.merge(persisted, ViewSnapshot())
    twice = adapter.merge(persisted, once)
    assert once == twice
    assert once.saved_queries == (SavedQuery(name="buses", query="lanta"),)


def test_merge_without_persisted_returns_fresh_instance() -> None:
    adapter = _view_adapter(MemoryStorage())
    fresh = ViewSnapshot()
    assert adapter.merge(None, fresh) is fresh
    assert adapter.merge({}, fresh) is fresh


def test_write_failure_is_reported_not_raised() -> None:
    adapter = _view_adapter(_FullStorage())
    assert adapter.write(ViewSnapshot()) is False


def test_negative_vote_counts_are_not_loaded() -> None:
    storage = MemoryStorage()
    adapter = PersistenceAdapter(
        "privacy",
        PrivacySnapshot,
        ("privacy_mode", "local_upvotes", "local_downvotes"),
        storage,
    )
    storage.set(
        "privacy",
        json.dumps(
            {"state": {"privacy_mode": True, "local_upvotes": {"a": -3}, "local_downvotes": {"a": 2}}}
        ),
    )

    loaded = adapter.load(PrivacySnapshot())

    assert loaded.privacy_mode is True
    assert loaded.local_upvotes == {}
    assert loaded.local_downvotes == {"a": 2}


def test_module_adapter_persists_enabled_flags_only() -> None:
    storage = MemoryStorage()
    adapter = ModuleCatalogAdapter("modules", storage)
    snap = ModuleCatalogSnapshot(
        modules={"a": ModuleRecord(id="a", name="A", enabled=False, priority=7)}
    )

    adapter.write(snap)

    payload = json.loads(storage.get("modules") or "")
    assert payload["state"] == {"modules": {"a": {"enabled": False}}}


def test_module_adapter_reconciles_against_fresh_catalog() -> None:
    """Stored flags apply to surviving modules; names/priorities stay fresh."""
    storage = MemoryStorage()
    adapter = ModuleCatalogAdapter("modules", storage)
    storage.set(
        "modules",
        json.dumps({"state": {"modules": {"a": {"enabled": False}, "gone": {"enabled": False}}}}),
    )
    fresh = ModuleCatalogSnapshot(
        modules={
            "a": ModuleRecord(id="a", name="Renamed", enabled=True, priority=3),
            "b": ModuleRecord(id="b", name="New", enabled=True),
        }
    )

    loaded = adapter.load(fresh)

    assert set(loaded.modules) == {"a", "b"}
    assert loaded.modules["a"] == ModuleRecord(id="a", name="Renamed", enabled=False, priority=3)
    assert loaded.modules["b"].enabled is True


def test_clear_removes_stored_value() -> None:
    storage = MemoryStorage()
    adapter = _view_adapter(storage)
    adapter.write(ViewSnapshot())
    adapter.clear()
    assert storage.get("view") is None
