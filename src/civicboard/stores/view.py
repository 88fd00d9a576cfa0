"""View/filter store: search text, filters, favorites and layout preferences."""

from __future__ import annotations

from civicboard.core.persistence import PersistenceAdapter
from civicboard.core.snapshots import (
    VELOCITY_WINDOWS,
    Density,
    SavedQuery,
    ViewMode,
    ViewSnapshot,
)
from civicboard.core.storage import VIEW_STORAGE_KEY, KeyValueStorage

from .base import DomainStore

#: Fields written to storage; search text and filters are session-only.
VIEW_DURABLE_FIELDS: tuple[str, ...] = ("favorites", "density", "velocity_window", "saved_queries")

DEFAULT_MAX_QUERY_LENGTH = 100


class ViewStore(DomainStore[ViewSnapshot]):
    """
    Filter and display state of the source list.

    Usage:
        view = ViewStore(MemoryStorage())
        view.set_search_query("transit")
        view.toggle_favorite(source_id)
        view.undo()
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        max_query_length: int = DEFAULT_MAX_QUERY_LENGTH,
        history_limit: int | None = None,
    ) -> None:
        adapter = PersistenceAdapter(VIEW_STORAGE_KEY, ViewSnapshot, VIEW_DURABLE_FIELDS, storage)
        super().__init__(adapter, ViewSnapshot(), history_limit=history_limit)
        self.max_query_length = max_query_length

    # --- Filters ---

    def set_search_query(self, text: str) -> bool:
        if len(text) > self.max_query_length:
            return self._reject("set_search_query", f"longer than {self.max_query_length}")
        return self._commit(
            "set_search_query", lambda s: s.model_copy(update={"search_query": text})
        )

    def set_selected_category(self, category: str | None) -> bool:
        category = category or None
        return self._commit(
            "set_selected_category",
            lambda s: s.model_copy(update={"selected_category": category}),
        )

    def set_view_mode(self, mode: ViewMode | str) -> bool:
        try:
            value = ViewMode(mode)
        except ValueError:
            return self._reject("set_view_mode", f"unknown mode {mode!r}")
        return self._commit("set_view_mode", lambda s: s.model_copy(update={"view_mode": value}))

    # --- Favorites ---

    def toggle_favorite(self, source_id: str) -> bool:
        if not source_id:
            return self._reject("toggle_favorite", "empty id")

        def flip(s: ViewSnapshot) -> ViewSnapshot:
            if source_id in s.favorites:
                favorites = s.favorites - {source_id}
            else:
                favorites = s.favorites | {source_id}
            return s.model_copy(update={"favorites": favorites})

        return self._commit("toggle_favorite", flip)

    def is_favorite(self, source_id: str) -> bool:
        return source_id in self.present.favorites

    # --- Layout ---

    def set_density(self, density: Density | str) -> bool:
        try:
            value = Density(density)
        except ValueError:
            return self._reject("set_density", f"unknown density {density!r}")
        return self._commit("set_density", lambda s: s.model_copy(update={"density": value}))

    def set_velocity_window(self, hours: int) -> bool:
        if isinstance(hours, bool) or hours not in VELOCITY_WINDOWS:
            return self._reject("set_velocity_window", f"{hours!r} not in {VELOCITY_WINDOWS}")
        return self._commit(
            "set_velocity_window", lambda s: s.model_copy(update={"velocity_window": hours})
        )

    # --- Saved queries ---

    def saved_query(self, name: str) -> SavedQuery | None:
        for saved in self.present.saved_queries:
            if saved.name == name:
                return saved
        return None

    def save_query(self, name: str) -> bool:
        """Save the current query, category and view mode under ``name``.

        An existing entry with the same name is replaced where it stands.
        """
        name = name.strip()
        if not name:
            return self._reject("save_query", "empty name")

        def save(s: ViewSnapshot) -> ViewSnapshot:
            entry = SavedQuery(
                name=name,
                query=s.search_query,
                category=s.selected_category,
                view_mode=s.view_mode,
            )
            names = [q.name for q in s.saved_queries]
            if name in names:
                queries = list(s.saved_queries)
                queries[names.index(name)] = entry
            else:
                queries = [*s.saved_queries, entry]
            return s.model_copy(update={"saved_queries": tuple(queries)})

        return self._commit("save_query", save)

    def remove_saved_query(self, name: str) -> bool:
        if self.saved_query(name) is None:
            return self._reject("remove_saved_query", f"no saved query {name!r}")
        return self._commit(
            "remove_saved_query",
            lambda s: s.model_copy(
                update={"saved_queries": tuple(q for q in s.saved_queries if q.name != name)}
            ),
        )

    def apply_saved_query(self, name: str) -> bool:
        saved = self.saved_query(name)
        if saved is None:
            return self._reject("apply_saved_query", f"no saved query {name!r}")
        if len(saved.query) > self.max_query_length:
            return self._reject("apply_saved_query", f"longer than {self.max_query_length}")
        return self._commit(
            "apply_saved_query",
            lambda s: s.model_copy(
                update={
                    "search_query": saved.query,
                    "selected_category": saved.category,
                    "view_mode": saved.view_mode,
                }
            ),
        )


__all__ = ["DEFAULT_MAX_QUERY_LENGTH", "VIEW_DURABLE_FIELDS", "ViewStore"]
