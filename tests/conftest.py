"""Shared fixtures: in-memory storage and dashboards built over it."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from civicboard.core.catalog import build_catalog
from civicboard.core.settings import load_settings
from civicboard.core.snapshots import ModuleRecord
from civicboard.core.storage import MemoryStorage
from civicboard.stores import Dashboard, build_dashboard

LABELS = ("News - Regional", "Gov - County", "Sports")


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path: Path, monkeypatch: Any) -> Iterator[None]:
    """Point settings at a throwaway state dir and rebuild the cached instance."""
    monkeypatch.setenv("CIVICBOARD_ENV", "test")
    monkeypatch.setenv("CIVICBOARD_STATE_DIR", str(tmp_path / "state"))
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def catalog() -> list[ModuleRecord]:
    return build_catalog(LABELS)


@pytest.fixture
def board(storage: MemoryStorage, catalog: list[ModuleRecord]) -> Dashboard:
    return build_dashboard(load_settings(), storage=storage, catalog=catalog)
