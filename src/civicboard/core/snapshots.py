"""
Snapshot contracts: immutable per-domain state values.

Each domain store holds exactly one of these as its ``present`` value and
keeps older instances on its undo/redo stacks. Because older instances must
stay valid on their own, a snapshot is never changed in place: every action
builds a new one with :meth:`pydantic.BaseModel.model_copy`.

Three domains are modelled:

- :class:`ViewSnapshot`: search text, category/view filters, favorites,
  display density, velocity window, saved queries.
- :class:`ModuleCatalogSnapshot`: feature modules keyed by identifier.
- :class:`PrivacySnapshot`: privacy mode flag plus local-only vote tallies.

Notes
-----
``model_copy(update=...)`` does not re-run validation and copies shallowly,
so unchanged fields (and unchanged module records) are shared by reference
between consecutive snapshots. Callers are expected to hand it values that
already satisfy the field types.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --------------------------------------------------------------------------- #
# Constants
# --------------------------------------------------------------------------- #

#: Hour counts selectable for the "velocity" (recent activity) window.
VELOCITY_WINDOWS: tuple[int, ...] = (1, 6, 24, 72, 168)

DEFAULT_VELOCITY_WINDOW = 24

VoteCount = Annotated[int, Field(ge=0)]


class ViewMode(str, Enum):
    """Which sources the list shows."""

    ALL = "all"
    FAVORITES = "favorites"


class Density(str, Enum):
    """Card layout density."""

    FULL = "full"
    COMPACT = "compact"


class VoteDirection(str, Enum):
    """Direction of a local-only vote."""

    UP = "up"
    DOWN = "down"


# --------------------------------------------------------------------------- #
# View / filter domain
# --------------------------------------------------------------------------- #


class SavedQuery(BaseModel):
    """A named, re-applicable combination of search filters."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    query: str = ""
    category: str | None = None
    view_mode: ViewMode = ViewMode.ALL


class ViewSnapshot(BaseModel):
    """
    State of the filtered, searchable source list.

    Parameters
    ----------
    search_query:
        Free-text query matched against source titles and URLs.
    selected_category:
        Category label to restrict the list to, or ``None`` for all.
    view_mode:
        ``all`` or ``favorites``.
    favorites:
        Identifiers of favorited sources.
    density:
        ``full`` or ``compact`` card layout.
    velocity_window:
        Activity window in hours; one of :data:`VELOCITY_WINDOWS`.
    saved_queries:
        User-saved filter presets, in insertion order.
    """

    model_config = ConfigDict(frozen=True)

    search_query: str = ""
    selected_category: str | None = None
    view_mode: ViewMode = ViewMode.ALL
    favorites: frozenset[str] = Field(default_factory=frozenset)
    density: Density = Density.FULL
    velocity_window: int = DEFAULT_VELOCITY_WINDOW
    saved_queries: tuple[SavedQuery, ...] = ()

    @field_validator("velocity_window")
    @classmethod
    def _known_window(cls, v: int) -> int:
        if v not in VELOCITY_WINDOWS:
            raise ValueError(f"velocity_window must be one of {VELOCITY_WINDOWS}")
        return v


# --------------------------------------------------------------------------- #
# Module catalog domain
# --------------------------------------------------------------------------- #


class ModuleRecord(BaseModel):
    """One toggleable feature panel."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    enabled: bool = True
    priority: int = 1
    weights: dict[str, float] | None = None


class ModuleCatalogSnapshot(BaseModel):
    """Feature modules keyed by their identifier."""

    model_config = ConfigDict(frozen=True)

    modules: dict[str, ModuleRecord] = Field(default_factory=dict)

    @field_validator("modules")
    @classmethod
    def _keys_match_ids(cls, v: dict[str, ModuleRecord]) -> dict[str, ModuleRecord]:
        for key, record in v.items():
            if key != record.id:
                raise ValueError(f"module key {key!r} does not match record id {record.id!r}")
        return v


# --------------------------------------------------------------------------- #
# Privacy domain
# --------------------------------------------------------------------------- #


class PrivacySnapshot(BaseModel):
    """Privacy mode flag and local-only vote tallies per source."""

    model_config = ConfigDict(frozen=True)

    privacy_mode: bool = False
    local_upvotes: dict[str, VoteCount] = Field(default_factory=dict)
    local_downvotes: dict[str, VoteCount] = Field(default_factory=dict)


__all__ = [
    "DEFAULT_VELOCITY_WINDOW",
    "VELOCITY_WINDOWS",
    "Density",
    "ModuleCatalogSnapshot",
    "ModuleRecord",
    "PrivacySnapshot",
    "SavedQuery",
    "ViewMode",
    "ViewSnapshot",
    "VoteDirection",
]
