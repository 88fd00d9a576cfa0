"""Read-only selectors the rendering layer applies to snapshots."""

from __future__ import annotations

from collections import Counter
from collections.abc import Collection, Iterable

from pydantic import BaseModel, ConfigDict

from .catalog import module_id
from .snapshots import ModuleCatalogSnapshot, ViewMode, ViewSnapshot


class SourceItem(BaseModel):
    """A content source as seen by the list view."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    url: str
    category: str


def visible_sources(
    sources: Iterable[SourceItem],
    view: ViewSnapshot,
    enabled_categories: Collection[str] | None = None,
) -> list[SourceItem]:
    """
    Apply the view filters to ``sources``, preserving input order.

    Filters run in this order: favorites-only (when ``view_mode`` is
    ``favorites``), selected category, case-insensitive substring search
    over title and URL, and finally, when ``enabled_categories`` is given,
    membership of the source's category in that collection.
    """
    query = view.search_query.lower()
    out: list[SourceItem] = []
    for item in sources:
        if view.view_mode is ViewMode.FAVORITES and item.id not in view.favorites:
            continue
        if view.selected_category and item.category != view.selected_category:
            continue
        if query and query not in item.title.lower() and query not in item.url.lower():
            continue
        if enabled_categories is not None and item.category not in enabled_categories:
            continue
        out.append(item)
    return out


def enabled_categories(catalog: ModuleCatalogSnapshot, labels: Iterable[str]) -> set[str]:
    """Return the category labels whose module is enabled in ``catalog``."""
    result: set[str] = set()
    for label in labels:
        record = catalog.modules.get(module_id(label))
        if record is not None and record.enabled:
            result.add(label)
    return result


def facet_counts(sources: Iterable[SourceItem]) -> list[tuple[str, int]]:
    """Count sources per category, most populated first (ties keep first-seen order)."""
    counts = Counter(item.category for item in sources)
    return sorted(counts.items(), key=lambda kv: -kv[1])


__all__ = ["SourceItem", "enabled_categories", "facet_counts", "visible_sources"]
