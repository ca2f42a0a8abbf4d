from __future__ import annotations

import math
from dataclasses import asdict
from typing import Any, Dict, List

import pandas as pd

from pnl_core.data import KNOWN_LABELS, records_to_rows
from pnl_core.filters import ALL_CATEGORIES, PAGE_SIZE, TableFilters


SEARCH_COLUMNS = ("trx_id", "comment", "incoming_asset", "outgoing_asset")


def filter_transactions(records: pd.DataFrame, category: str = ALL_CATEGORIES, search: str = "") -> pd.DataFrame:
    df = records
    if category != ALL_CATEGORIES:
        df = df[df["label"] == category]
    if search:
        q = search.lower()
        mask = pd.Series(False, index=df.index)
        for col in SEARCH_COLUMNS:
            mask |= df[col].astype(str).str.lower().str.contains(q, regex=False, na=False)
        df = df[mask]
    return df


def sort_transactions(records: pd.DataFrame, key: str, direction: str = "desc") -> pd.DataFrame:
    if key not in records.columns:
        return records
    return records.sort_values(key, ascending=(direction == "asc"), kind="mergesort", na_position="last")


def page_count(row_count: int) -> int:
    return math.ceil(row_count / PAGE_SIZE)


def paginate(records: pd.DataFrame, page: int) -> pd.DataFrame:
    """Rows of a 1-based page; pages past the end are empty."""
    start = (max(1, int(page)) - 1) * PAGE_SIZE
    return records.iloc[start : start + PAGE_SIZE]


def select_transactions(filters: TableFilters, records: pd.DataFrame) -> pd.DataFrame:
    filtered = filter_transactions(records, filters.category, filters.search)
    return sort_transactions(filtered, filters.sort_key, filters.sort_direction)


def label_options(records: pd.DataFrame) -> List[str]:
    extra = sorted({str(x) for x in records["label"].dropna().unique()} - set(KNOWN_LABELS))
    return [ALL_CATEGORIES, *KNOWN_LABELS, *extra]


def compute_transactions(filters: TableFilters, records: pd.DataFrame) -> Dict[str, Any]:
    selected = select_transactions(filters, records)
    page_df = paginate(selected, filters.page)
    return {
        "filters": asdict(filters),
        "total_count": int(len(records)),
        "filtered_count": int(len(selected)),
        "total_pages": page_count(len(selected)),
        "page": filters.page,
        "page_size": PAGE_SIZE,
        "rows": records_to_rows(page_df),
        "label_options": label_options(records),
    }
