"""
Partial, type-safe persistence of snapshots to durable key/value storage.

A :class:`PersistenceAdapter` owns one storage key and a declared set of
*durable* snapshot fields (the persistence envelope). Everything else in the
snapshot is never written and is always re-derived from fresh defaults on
load.

Envelope format
---------------
The stored value is JSON::

    {"version": 1, "state": {"favorites": ["a", "b"], "density": "compact"}}

Set-typed fields are written as sorted arrays and turned back into sets on
read. A bare mapping without the ``version``/``state`` wrapper is accepted as
the state itself.

Failure semantics
-----------------
- ``read()`` never raises: missing, corrupt or wrongly shaped values read as
  ``None``.
- ``write()`` never raises: storage or encoding errors are logged and the
  in-memory state stays authoritative.
- ``merge()`` validates durable fields one at a time; a field that fails
  validation keeps the fresh default, so older or newer envelopes degrade
  field by field instead of as a whole.
"""

from __future__ import annotations

import json
from collections.abc import Hashable, Iterable, Mapping
from typing import Any, Generic, TypeVar, get_origin

from pydantic import BaseModel, ValidationError

from .catalog import reconcile
from .settings import get_logger
from .snapshots import ModuleCatalogSnapshot
from .storage import KeyValueStorage

logger = get_logger(__name__)

ENVELOPE_VERSION = 1

M = TypeVar("M", bound=BaseModel)

_SET_ORIGINS = (set, frozenset)


def _set_typed_fields(model: type[BaseModel]) -> frozenset[str]:
    """Return the names of ``model`` fields annotated as set/frozenset."""
    names = set()
    for name, info in model.model_fields.items():
        annotation = info.annotation
        if annotation in _SET_ORIGINS or get_origin(annotation) in _SET_ORIGINS:
            names.add(name)
    return frozenset(names)


class PersistenceAdapter(Generic[M]):
    """
    Serialize a declared subset of a snapshot under a fixed storage key.

    Parameters
    ----------
    key:
        Storage key for this domain (e.g. ``"lv-feed-index-storage"``).
    model:
        Snapshot model class; used to detect set-typed fields and to validate
        persisted values during :meth:`merge`.
    durable_fields:
        Names of the fields that make up the persistence envelope.
    storage:
        Backend implementing :class:`~civicboard.core.storage.KeyValueStorage`.
    """

    def __init__(
        self,
        key: str,
        model: type[M],
        durable_fields: Iterable[str],
        storage: KeyValueStorage,
    ) -> None:
        self.key = key
        self.model = model
        self.durable_fields: tuple[str, ...] = tuple(durable_fields)
        unknown = set(self.durable_fields) - set(model.model_fields)
        if unknown:
            raise ValueError(f"{model.__name__} has no fields {sorted(unknown)}")
        self.storage = storage
        self.set_fields = _set_typed_fields(model) & set(self.durable_fields)

    # ------------------------------- Encode ---------------------------------

    def project(self, snapshot: M) -> dict[str, Any]:
        """Return the JSON-compatible durable view of ``snapshot``."""
        state = snapshot.model_dump(mode="json", include=set(self.durable_fields))
        for name in self.set_fields:
            state[name] = sorted(getattr(snapshot, name))
        return state

    def write(self, snapshot: M) -> bool:
        """
        Store the durable view of ``snapshot``.

        Returns
        -------
        bool
            ``True`` if the value reached storage, ``False`` if the write was
            dropped (the failure is logged, not raised).
        """
        try:
            payload = json.dumps(
                {"version": ENVELOPE_VERSION, "state": self.project(snapshot)},
                ensure_ascii=False,
                sort_keys=True,
            )
            self.storage.set(self.key, payload)
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Could not persist %s: %s", self.key, e)
            return False
        return True

    # ------------------------------- Decode ---------------------------------

    def read(self) -> dict[str, Any] | None:
        """
        Load the stored partial snapshot, or ``None`` if there is none.

        Only durable fields are returned. Arrays stored for set-typed fields
        come back as ``frozenset``s.
        """
        try:
            raw = self.storage.get(self.key)
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s: %s", self.key, e)
            return None
        if raw is None:
            return None

        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError, ValueError, RecursionError) as e:
            logger.warning("Discarding corrupt %s: %s", self.key, e)
            return None

        if isinstance(data, dict) and isinstance(data.get("state"), dict):
            data = data["state"]
        if not isinstance(data, dict):
            logger.warning("Discarding %s: expected an object, got %s", self.key, type(data).__name__)
            return None

        partial: dict[str, Any] = {}
        for name in self.durable_fields:
            if name not in data:
                continue
            value = data[name]
            # lists with unhashable members are left for merge() to reject
            if (
                name in self.set_fields
                and isinstance(value, list)
                and all(isinstance(v, Hashable) for v in value)
            ):
                value = frozenset(value)
            partial[name] = value
        return partial

    # ------------------------------- Merge ----------------------------------

    def merge(self, persisted: Mapping[str, Any] | None, fresh: M) -> M:
        """
        Overlay durable fields from ``persisted`` onto ``fresh``.

        Fields missing from ``persisted`` or failing validation keep their
        fresh value. Applying the same ``persisted`` twice gives the same
        snapshot.
        """
        if not persisted:
            return fresh

        candidate = fresh.model_dump()
        accepted = False
        for name in self.durable_fields:
            if name not in persisted:
                continue
            trial = {**candidate, name: persisted[name]}
            try:
                self.model.model_validate(trial)
            except ValidationError as e:
                logger.warning(
                    "Ignoring stored %s.%s (%d validation errors)",
                    self.key,
                    name,
                    e.error_count(),
                )
                continue
            candidate = trial
            accepted = True

        if not accepted:
            return fresh
        return self.model.model_validate(candidate)

    def load(self, fresh: M) -> M:
        """Shorthand for ``merge(read(), fresh)``."""
        return self.merge(self.read(), fresh)

    def clear(self) -> None:
        """Delete the stored envelope (best effort)."""
        try:
            self.storage.remove(self.key)
        except OSError as e:
            logger.warning("Could not remove %s: %s", self.key, e)


class ModuleCatalogAdapter(PersistenceAdapter[ModuleCatalogSnapshot]):
    """
    Persist only the per-module ``enabled`` flags.

    Names, priorities and weights always come from the fresh catalog; on load
    the stored flags are folded in with :func:`~civicboard.core.catalog.reconcile`.
    """

    def __init__(self, key: str, storage: KeyValueStorage) -> None:
        super().__init__(key, ModuleCatalogSnapshot, ("modules",), storage)

    def project(self, snapshot: ModuleCatalogSnapshot) -> dict[str, Any]:
        return {
            "modules": {mid: {"enabled": record.enabled} for mid, record in snapshot.modules.items()}
        }

    def merge(
        self,
        persisted: Mapping[str, Any] | None,
        fresh: ModuleCatalogSnapshot,
    ) -> ModuleCatalogSnapshot:
        if not persisted:
            return fresh
        previous = persisted.get("modules")
        if not isinstance(previous, Mapping):
            if previous is not None:
                logger.warning("Ignoring stored %s.modules: not an object", self.key)
            return fresh
        modules = reconcile(fresh.modules.values(), previous)
        return fresh.model_copy(update={"modules": modules})


__all__ = ["ENVELOPE_VERSION", "ModuleCatalogAdapter", "PersistenceAdapter"]
