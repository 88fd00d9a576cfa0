"""
Application root: builds and owns the domain stores.

Stores are plain objects created here and handed to whoever renders them;
nothing in the package keeps a module-level store. Tests build as many
independent dashboards as they need, usually over
:class:`~civicboard.core.storage.MemoryStorage`.

Usage
-----
>>> board = build_dashboard(storage=MemoryStorage())
>>> board.view.toggle_favorite("f1")
True
>>> board.coordinator.undo_any()
1
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from civicboard.core.catalog import DEFAULT_CATEGORIES, build_catalog
from civicboard.core.settings import Settings, get_logger, load_settings
from civicboard.core.snapshots import ModuleRecord
from civicboard.core.storage import FileStorage, KeyValueStorage

from .coordinator import UndoCoordinator
from .modules import ModuleStore
from .privacy import PrivacyStore
from .view import ViewStore

logger = get_logger(__name__)


@dataclass
class Dashboard:
    """The three domain stores plus the cross-store undo coordinator."""

    view: ViewStore
    modules: ModuleStore
    privacy: PrivacyStore
    coordinator: UndoCoordinator
    storage: KeyValueStorage

    def clear_local_data(self) -> None:
        """Delete every persisted envelope and reset all stores to defaults."""
        for store in (self.view, self.modules, self.privacy):
            store.reset()
        logger.info("Cleared local data")


def build_dashboard(
    settings: Settings | None = None,
    storage: KeyValueStorage | None = None,
    catalog: Iterable[ModuleRecord] | None = None,
) -> Dashboard:
    """
    Construct a dashboard from settings.

    Parameters
    ----------
    settings:
        Defaults to the cached process settings.
    storage:
        Defaults to :class:`FileStorage` under ``settings.state_dir``.
    catalog:
        Module catalog; defaults to one module per
        :data:`~civicboard.core.catalog.DEFAULT_CATEGORIES` label.
    """
    settings = settings or load_settings()
    if storage is None:
        storage = FileStorage(settings.state_dir)
    if catalog is None:
        catalog = build_catalog(DEFAULT_CATEGORIES)

    view = ViewStore(
        storage,
        max_query_length=settings.search_max_length,
        history_limit=settings.history_limit,
    )
    modules = ModuleStore(storage, catalog, history_limit=settings.history_limit)
    privacy = PrivacyStore(
        storage,
        vote_cap=settings.vote_cap,
        history_limit=settings.history_limit,
    )
    return Dashboard(
        view=view,
        modules=modules,
        privacy=privacy,
        coordinator=UndoCoordinator((view, modules, privacy)),
        storage=storage,
    )


__all__ = ["Dashboard", "build_dashboard"]
