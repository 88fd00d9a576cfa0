"""Module catalog store: which feature panels are shown, and in what order."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import TypeAdapter, ValidationError

from civicboard.core.catalog import ordered, reconcile
from civicboard.core.persistence import ModuleCatalogAdapter
from civicboard.core.snapshots import ModuleCatalogSnapshot, ModuleRecord
from civicboard.core.storage import MODULE_STORAGE_KEY, KeyValueStorage

from .base import DomainStore

_RECORDS = TypeAdapter(list[ModuleRecord])


def _snapshot_of(catalog: Iterable[ModuleRecord]) -> ModuleCatalogSnapshot:
    return ModuleCatalogSnapshot(modules=reconcile(catalog, {}))


class ModuleStore(DomainStore[ModuleCatalogSnapshot]):
    """
    Toggleable feature modules.

    The catalog passed at construction is the base snapshot; stored enabled
    flags are reconciled over it before the store is readable. Only the
    enabled flags are persisted.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        catalog: Iterable[ModuleRecord] = (),
        *,
        history_limit: int | None = None,
    ) -> None:
        adapter = ModuleCatalogAdapter(MODULE_STORAGE_KEY, storage)
        super().__init__(adapter, _snapshot_of(catalog), history_limit=history_limit)

    # --- Catalog refresh ---

    def set_modules(self, records: Iterable[ModuleRecord | Mapping[str, Any]]) -> bool:
        """
        Replace the catalog, keeping the current enabled flag of every module
        that survives the refresh.

        The whole batch is rejected if any record fails validation or two
        records share an id.
        """
        try:
            validated = _RECORDS.validate_python(
                [r.model_dump() if isinstance(r, ModuleRecord) else r for r in records]
            )
        except ValidationError as e:
            return self._reject("set_modules", f"{e.error_count()} invalid records")

        ids = [r.id for r in validated]
        if len(set(ids)) != len(ids):
            return self._reject("set_modules", "duplicate module ids")

        # the refreshed catalog becomes the reset target and stays so after an undo
        self._default = _snapshot_of(validated)
        return self._commit(
            "set_modules",
            lambda s: s.model_copy(update={"modules": reconcile(validated, s.modules)}),
        )

    # --- Per-module edits ---

    def toggle_module(self, module_id: str) -> bool:
        record = self.present.modules.get(module_id)
        if record is None:
            return self._reject("toggle_module", f"unknown module {module_id!r}")
        flipped = record.model_copy(update={"enabled": not record.enabled})
        return self._commit(
            "toggle_module",
            lambda s: s.model_copy(update={"modules": {**s.modules, module_id: flipped}}),
        )

    def set_priority(self, module_id: str, priority: int) -> bool:
        record = self.present.modules.get(module_id)
        if record is None:
            return self._reject("set_priority", f"unknown module {module_id!r}")
        if isinstance(priority, bool) or not isinstance(priority, int):
            return self._reject("set_priority", f"priority must be an int, got {priority!r}")
        updated = record.model_copy(update={"priority": priority})
        return self._commit(
            "set_priority",
            lambda s: s.model_copy(update={"modules": {**s.modules, module_id: updated}}),
        )

    # --- Selectors ---

    def is_enabled(self, module_id: str) -> bool:
        record = self.present.modules.get(module_id)
        return record is not None and record.enabled

    def ordered(self) -> list[ModuleRecord]:
        """Modules in display order (priority descending, then name)."""
        return ordered(self.present.modules)

    def enabled_ids(self) -> list[str]:
        return [m.id for m in self.ordered() if m.enabled]


__all__ = ["ModuleStore"]
