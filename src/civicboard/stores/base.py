"""
Shared machinery for the domain stores.

A :class:`DomainStore` couples one :class:`~civicboard.core.history.History`
with one :class:`~civicboard.core.persistence.PersistenceAdapter`:

1. **Construction**: the stored envelope is read and merged over the
   default snapshot before the store becomes readable.
2. **Actions**: subclasses validate input first. Rejected input returns
   ``False`` and creates no history entry; accepted input commits a new
   snapshot and returns ``True``.
3. **After every change** (commit, undo, redo): the new ``present`` is
   written to storage and subscribers are notified, in that order.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

from pydantic import BaseModel

from civicboard.core.history import History, HistoryStatus
from civicboard.core.persistence import PersistenceAdapter
from civicboard.core.settings import get_logger

M = TypeVar("M", bound=BaseModel)

Listener = Callable[[M], None]

logger = get_logger(__name__)


class DomainStore(Generic[M]):
    """History + persistence for one area of UI state."""

    def __init__(
        self,
        adapter: PersistenceAdapter[M],
        default: M,
        *,
        history_limit: int | None = None,
    ) -> None:
        self._adapter = adapter
        self._default = default
        self._history: History[M] = History(adapter.load(default), limit=history_limit)
        self._listeners: list[Listener[M]] = []

    # ------------------------------- Selectors ------------------------------

    @property
    def name(self) -> str:
        """Storage key of this domain."""
        return self._adapter.key

    @property
    def present(self) -> M:
        return self._history.present

    @property
    def past(self) -> tuple[M, ...]:
        return self._history.past

    @property
    def future(self) -> tuple[M, ...]:
        return self._history.future

    @property
    def status(self) -> HistoryStatus:
        return self._history.status

    def can_undo(self) -> bool:
        return self._history.can_undo()

    def can_redo(self) -> bool:
        return self._history.can_redo()

    # ----------------------------- Subscriptions ----------------------------

    def subscribe(self, listener: Listener[M]) -> Callable[[], None]:
        """Call ``listener(present)`` after every change; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------ Transitions -----------------------------

    def undo(self) -> bool:
        moved = self._history.undo()
        if moved:
            self._changed()
        return moved

    def redo(self) -> bool:
        moved = self._history.redo()
        if moved:
            self._changed()
        return moved

    def clear_history(self) -> None:
        self._history.clear()

    def reset(self) -> None:
        """Drop stored state and history and return to the default snapshot."""
        self._adapter.clear()
        self._history.reset(self._default)
        self._notify()

    def _commit(self, action: str, mutator: Callable[[M], M]) -> bool:
        self._history.commit(mutator)
        logger.debug("%s: committed %s", self.name, action)
        self._changed()
        return True

    def _reject(self, action: str, reason: str) -> bool:
        logger.debug("%s: rejected %s (%s)", self.name, action, reason)
        return False

    def _changed(self) -> None:
        self._adapter.write(self.present)
        self._notify()

    def _notify(self) -> None:
        present = self.present
        for listener in list(self._listeners):
            listener(present)


__all__ = ["DomainStore", "Listener"]
