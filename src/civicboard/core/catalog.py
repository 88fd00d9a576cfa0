"""
Module catalog construction and reconciliation.

The module catalog is regenerated from a fixed list of category labels each
time the process starts. A user's on/off choice for a module must survive
that refresh even when modules are added, removed or reordered; that is the
job of :func:`reconcile`.

Identifiers
-----------
Module identifiers are the join key between catalog entries and content, so
they are derived from the category label by a pure function
(:func:`module_id`). Content sources get their own deterministic
identifiers from :func:`source_id`.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Iterable, Mapping
from typing import Any

from .settings import get_logger
from .snapshots import ModuleRecord

logger = get_logger(__name__)

#: Category labels the catalog is built from at process start.
DEFAULT_CATEGORIES: tuple[str, ...] = (
    "News - Regional",
    "News - Local",
    "Gov - Municipal",
    "Gov - County",
    "Safety - Police & Courts",
    "LV Business",
    "Education - Higher Ed",
    "Education - K12",
    "Community & Civic",
    "Media / Culture",
    "Lifestyle - Arts & Events",
    "Lifestyle - Food & Drink",
    "Lifestyle - Environment",
    "Lifestyle - Outdoors",
    "Sports",
    "Transit & Weather",
    "Health",
    "Utilities / Infrastructure",
)

#: Namespace for content-source identifiers.
SOURCE_NAMESPACE = uuid.UUID("a9a73802-517e-4f2a-a3a4-72bce5c10bce")

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def module_id(label: str) -> str:
    """
    Derive a module identifier from a category label.

    The label is lowercased and every run of characters outside ``[a-z0-9]``
    becomes a single ``-``; leading and trailing separators are dropped.

    >>> module_id("Safety - Police & Courts")
    'safety-police-courts'
    """
    slug = _NON_ALNUM.sub("-", label.lower()).strip("-")
    if not slug:
        raise ValueError(f"category label {label!r} has no alphanumeric characters")
    return slug


def source_id(url: str, category: str, title: str) -> str:
    """Return a deterministic UUIDv5 string identifying one content source."""
    return str(uuid.uuid5(SOURCE_NAMESPACE, f"{url}-{category}-{title}"))


def build_catalog(
    labels: Iterable[str],
    *,
    enabled: bool = True,
    priority: int = 1,
) -> list[ModuleRecord]:
    """
    Build an ordered module catalog from category labels.

    Labels that collapse to an identifier already produced keep the first
    label; later ones are skipped with a warning.
    """
    records: list[ModuleRecord] = []
    seen: dict[str, str] = {}
    for label in labels:
        mid = module_id(label)
        if mid in seen:
            logger.warning(
                "Category %r collides with %r on module id %r; keeping the first",
                label,
                seen[mid],
                mid,
            )
            continue
        seen[mid] = label
        records.append(ModuleRecord(id=mid, name=label, enabled=enabled, priority=priority))
    return records


def _previous_enabled(entry: ModuleRecord | Mapping[str, Any]) -> bool | None:
    """Return the persisted enabled flag of ``entry``, or None if it carries none."""
    if isinstance(entry, ModuleRecord):
        return entry.enabled
    value = entry.get("enabled") if isinstance(entry, Mapping) else None
    return value if isinstance(value, bool) else None


def reconcile(
    fresh: Iterable[ModuleRecord],
    previous: Mapping[str, ModuleRecord | Mapping[str, Any]],
) -> dict[str, ModuleRecord]:
    """
    Merge a freshly supplied catalog with previously stored module state.

    Every fresh record appears in the result with its own ``id``, ``name``,
    ``priority`` and ``weights``. ``enabled`` comes from ``previous[id]`` when
    that entry exists and carries a boolean flag, otherwise from the fresh
    record. Entries only present in ``previous`` are dropped.

    Parameters
    ----------
    fresh:
        The new catalog, in catalog order.
    previous:
        Prior modules keyed by id; values are full records or the persisted
        ``{"enabled": bool}`` form.

    Returns
    -------
    dict[str, ModuleRecord]
        Reconciled modules keyed by id, in fresh-catalog order. Fresh records
        whose flag is unchanged are returned as-is (same object).
    """
    result: dict[str, ModuleRecord] = {}
    for record in fresh:
        enabled = record.enabled
        if record.id in previous:
            stored = _previous_enabled(previous[record.id])
            if stored is not None:
                enabled = stored
        if enabled != record.enabled:
            record = record.model_copy(update={"enabled": enabled})
        result[record.id] = record
    return result


def ordered(modules: Mapping[str, ModuleRecord] | Iterable[ModuleRecord]) -> list[ModuleRecord]:
    """Return modules in display order: priority descending, then name."""
    values = modules.values() if isinstance(modules, Mapping) else modules
    return sorted(values, key=lambda m: (-m.priority, m.name))


__all__ = [
    "DEFAULT_CATEGORIES",
    "SOURCE_NAMESPACE",
    "build_catalog",
    "module_id",
    "ordered",
    "reconcile",
    "source_id",
]
