from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional


PAGE_SIZE = 10
ALL_CATEGORIES = "All"
SORT_KEYS = ("date", "label", "outgoing_amount", "incoming_amount", "fee_amount", "trx_id")
SORT_DIRECTIONS = ("desc", "asc")


@dataclass(frozen=True)
class TableFilters:
    category: str = ALL_CATEGORIES
    search: str = ""
    sort_key: str = "date"
    sort_direction: str = "desc"
    page: int = 1


def _as_page(value: object) -> int:
    try:
        page = int(value)  # type: ignore[arg-type]
    except Exception:
        return 1
    return max(1, page)


def normalize_filters(raw: Optional[dict]) -> TableFilters:
    raw = raw or {}

    category = raw.get("category") or ALL_CATEGORIES
    search = raw.get("search")
    search = "" if search is None else str(search)

    sort_key = raw.get("sort_key")
    if sort_key not in SORT_KEYS:
        sort_key = "date"
    sort_direction = raw.get("sort_direction")
    if sort_direction not in SORT_DIRECTIONS:
        sort_direction = "desc"

    return TableFilters(
        category=str(category),
        search=search,
        sort_key=sort_key,
        sort_direction=sort_direction,
        page=_as_page(raw.get("page", 1)),
    )


def with_category(filters: TableFilters, category: str) -> TableFilters:
    return replace(filters, category=category or ALL_CATEGORIES, page=1)


def with_search(filters: TableFilters, search: str) -> TableFilters:
    return replace(filters, search=search or "", page=1)


def with_sort(filters: TableFilters, key: str) -> TableFilters:
    """Same key flips the direction, a new key starts descending. Page is kept."""
    if key == filters.sort_key:
        direction = "asc" if filters.sort_direction == "desc" else "desc"
    else:
        direction = "desc"
    return replace(filters, sort_key=key, sort_direction=direction)


def with_page(filters: TableFilters, page: int) -> TableFilters:
    return replace(filters, page=_as_page(page))
