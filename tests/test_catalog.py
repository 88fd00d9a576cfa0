"""Unit tests for module ids, catalog building and reconciliation."""

from __future__ import annotations

import pytest

from civicboard.core.catalog import (
    DEFAULT_CATEGORIES,
    build_catalog,
    module_id,
    ordered,
    reconcile,
    source_id,
)
from civicboard.core.snapshots import ModuleRecord


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("News - Regional", "news-regional"),
        ("Safety - Police & Courts", "safety-police-courts"),
        ("Media / Culture", "media-culture"),
        ("Education - K12", "education-k12"),
        ("  Sports!  ", "sports"),
    ],
)
def test_module_id_collapses_separator_runs(label: str, expected: str) -> None:
    assert module_id(label) == expected


def test_module_id_requires_alphanumerics() -> None:
    with pytest.raises(ValueError):
        module_id(" / - ")


def test_default_categories_have_unique_ids() -> None:
    ids = [module_id(label) for label in DEFAULT_CATEGORIES]
    assert len(ids) == len(set(ids))


def test_build_catalog_keeps_first_on_collision() -> None:
    records = build_catalog(["Arts & Events", "Arts / Events", "Sports"])
    assert [r.id for r in records] == ["arts-events", "sports"]
    assert records[0].name == "Arts & Events"
    assert all(r.enabled and r.priority == 1 for r in records)


def test_source_id_is_deterministic_uuid() -> None:
    a = source_id("https://example.org/feed", "Sports", "Example")
    b = source_id("https://example.org/feed", "Sports", "Example")
    c = source_id("https://example.org/feed", "Health", "Example")
    assert a == b
    assert a != c
    assert len(a) == 36


def test_reconcile_preserves_enabled_and_refreshes_metadata() -> None:
    """Enabled comes from the previous mapping; name and priority are fresh."""
    fresh = [ModuleRecord(id="a", name="A", enabled=True, priority=1)]
    previous = {"a": ModuleRecord(id="a", name="OldA", enabled=False, priority=9)}

    result = reconcile(fresh, previous)

    assert result == {"a": ModuleRecord(id="a", name="A", enabled=False, priority=1)}


def test_reconcile_adds_and_drops_modules() -> None:
    """New modules use their own default; removed modules disappear."""
    fresh = [
        ModuleRecord(id="b", name="B", enabled=False),
        ModuleRecord(id="c", name="C", enabled=True),
    ]
    previous = {
        "a": ModuleRecord(id="a", name="A", enabled=False),
        "c": {"enabled": False},
    }

    result = reconcile(fresh, previous)

    assert list(result) == ["b", "c"]
    assert result["b"].enabled is False
    assert result["c"].enabled is False


def test_reconcile_ignores_malformed_previous_flags() -> None:
    fresh = [ModuleRecord(id="a", name="A", enabled=True)]
    result = reconcile(fresh, {"a": {"enabled": "no"}})
    assert result["a"] is fresh[0]


def test_ordered_sorts_by_priority_then_name() -> None:
    modules = [
        ModuleRecord(id="z", name="Zeta", priority=1),
        ModuleRecord(id="b", name="Beta", priority=5),
        ModuleRecord(id="a", name="Alpha", priority=1),
    ]
    assert [m.id for m in ordered(modules)] == ["b", "a", "z"]
    assert [m.id for m in ordered({m.id: m for m in modules})] == ["b", "a", "z"]
