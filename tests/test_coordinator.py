"""Tests for cross-store undo and the dashboard application root."""

from __future__ import annotations

from typing import Any

from civicboard.core.settings import load_settings
from civicboard.core.storage import ALL_STORAGE_KEYS, MemoryStorage
from civicboard.stores import Dashboard, UndoCoordinator, build_dashboard


def test_undo_any_reverts_every_store_with_history(board: Dashboard) -> None:
    """One gesture undoes the last search edit *and* the last module toggle."""
    board.view.set_search_query("parks")
    board.modules.toggle_module("sports")

    assert board.coordinator.undo_any() == 2

    assert board.view.present.search_query == ""
    assert board.modules.is_enabled("sports")
    assert board.privacy.can_undo() is False


def test_redo_any_is_symmetric(board: Dashboard) -> None:
    board.view.set_search_query("parks")
    board.privacy.toggle_privacy_mode()
    board.coordinator.undo_any()

    assert board.coordinator.can_redo_any()
    assert board.coordinator.redo_any() == 2
    assert board.view.present.search_query == "parks"
    assert board.privacy.present.privacy_mode is True
    assert not board.coordinator.can_redo_any()


def test_nothing_to_undo(board: Dashboard) -> None:
    assert not board.coordinator.can_undo_any()
    assert board.coordinator.undo_any() == 0
    assert board.coordinator.redo_any() == 0


def test_only_stores_with_history_move(board: Dashboard) -> None:
    board.view.set_search_query("a")
    board.view.set_search_query("b")
    board.modules.toggle_module("sports")

    board.coordinator.undo_any()
    board.coordinator.undo_any()

    assert board.view.present.search_query == ""
    assert board.modules.is_enabled("sports")
    assert board.modules.can_redo()


def test_coordinator_accepts_any_subset(board: Dashboard) -> None:
    only_view = UndoCoordinator([board.view])
    board.view.toggle_favorite("f1")
    board.modules.toggle_module("sports")

    assert only_view.undo_any() == 1
    assert not board.modules.is_enabled("sports")


def test_dashboards_are_independent() -> None:
    a = build_dashboard(load_settings(), storage=MemoryStorage())
    b = build_dashboard(load_settings(), storage=MemoryStorage())
    a.view.toggle_favorite("f1")
    assert b.view.present.favorites == frozenset()


def test_default_catalog_is_used_when_none_given() -> None:
    board = build_dashboard(load_settings(), storage=MemoryStorage())
    assert "news-regional" in board.modules.present.modules
    assert len(board.modules.present.modules) == 18


def test_clear_local_data_removes_every_key(board: Dashboard, storage: MemoryStorage) -> None:
    board.view.toggle_favorite("f1")
    board.modules.toggle_module("sports")
    board.privacy.increment_local_vote("f1", "up")
    assert set(storage.keys()) == set(ALL_STORAGE_KEYS)

    board.clear_local_data()

    assert storage.keys() == ()
    assert board.view.present.favorites == frozenset()
    assert board.modules.is_enabled("sports")
    assert not board.coordinator.can_undo_any()


def test_history_limit_from_settings(monkeypatch: Any) -> None:
    """`CIVICBOARD_HISTORY_LIMIT` bounds every store built by the dashboard."""
    monkeypatch.setenv("CIVICBOARD_HISTORY_LIMIT", "1")
    load_settings.cache_clear()
    board = build_dashboard(load_settings(), storage=MemoryStorage())

    board.view.set_search_query("a")
    board.view.set_search_query("b")
    assert board.view.undo()
    assert board.view.undo() is False
