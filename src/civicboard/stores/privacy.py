"""Privacy store: privacy mode flag and local-only vote tallies."""

from __future__ import annotations

from civicboard.core.persistence import PersistenceAdapter
from civicboard.core.snapshots import PrivacySnapshot, VoteDirection
from civicboard.core.storage import PRIVACY_STORAGE_KEY, KeyValueStorage

from .base import DomainStore

PRIVACY_DURABLE_FIELDS: tuple[str, ...] = ("privacy_mode", "local_upvotes", "local_downvotes")


class PrivacyStore(DomainStore[PrivacySnapshot]):
    """
    Votes recorded on this device only, plus the privacy mode switch.

    Counters are unbounded unless ``vote_cap`` is given, in which case they
    saturate at the cap and further increments are rejected.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        vote_cap: int | None = None,
        history_limit: int | None = None,
    ) -> None:
        adapter = PersistenceAdapter(
            PRIVACY_STORAGE_KEY, PrivacySnapshot, PRIVACY_DURABLE_FIELDS, storage
        )
        super().__init__(adapter, PrivacySnapshot(), history_limit=history_limit)
        self.vote_cap = vote_cap

    def toggle_privacy_mode(self) -> bool:
        return self._commit(
            "toggle_privacy_mode",
            lambda s: s.model_copy(update={"privacy_mode": not s.privacy_mode}),
        )

    def increment_local_vote(self, source_id: str, direction: VoteDirection | str) -> bool:
        if not source_id:
            return self._reject("increment_local_vote", "empty id")
        try:
            direction = VoteDirection(direction)
        except ValueError:
            return self._reject("increment_local_vote", f"unknown direction {direction!r}")

        field = "local_upvotes" if direction is VoteDirection.UP else "local_downvotes"
        current = getattr(self.present, field).get(source_id, 0)
        if self.vote_cap is not None and current >= self.vote_cap:
            return self._reject("increment_local_vote", f"{source_id} at cap {self.vote_cap}")

        return self._commit(
            "increment_local_vote",
            lambda s: s.model_copy(
                update={field: {**getattr(s, field), source_id: current + 1}}
            ),
        )

    def clear_local_votes(self) -> bool:
        current = self.present
        if not current.local_upvotes and not current.local_downvotes:
            return self._reject("clear_local_votes", "nothing to clear")
        return self._commit(
            "clear_local_votes",
            lambda s: s.model_copy(update={"local_upvotes": {}, "local_downvotes": {}}),
        )

    def local_votes(self, source_id: str) -> tuple[int, int]:
        """Return ``(upvotes, downvotes)`` recorded locally for ``source_id``."""
        s = self.present
        return s.local_upvotes.get(source_id, 0), s.local_downvotes.get(source_id, 0)

    def local_score(self, source_id: str) -> int:
        up, down = self.local_votes(source_id)
        return up - down


__all__ = ["PRIVACY_DURABLE_FIELDS", "PrivacyStore"]
