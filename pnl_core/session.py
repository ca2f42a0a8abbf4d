from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import pandas as pd

from pnl_core.data import empty_records, load_statement
from pnl_core.errors import StatementError
from pnl_core.filters import TableFilters, with_category, with_page, with_search, with_sort


logger = logging.getLogger(__name__)


@dataclass
class DashboardSession:
    """Record set of the current upload plus the table controls.

    A failed upload leaves ``records`` and ``filters`` untouched and only sets
    ``error``.
    """

    records: pd.DataFrame = field(default_factory=empty_records)
    filters: TableFilters = field(default_factory=TableFilters)
    error: Optional[str] = None
    source_name: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return not self.records.empty

    def upload(self, csv_text: str, *, source_name: Optional[str] = None) -> bool:
        try:
            records = load_statement(csv_text)
        except StatementError as exc:
            logger.warning("Upload %s rejected: %s", source_name or "<text>", exc)
            self.error = str(exc)
            return False
        self.records = records
        self.filters = TableFilters()
        self.error = None
        self.source_name = source_name
        logger.info("Loaded %d transactions from %s", len(records), source_name or "<text>")
        return True

    def reset(self) -> None:
        self.records = empty_records()
        self.filters = TableFilters()
        self.error = None
        self.source_name = None

    def set_category(self, category: str) -> None:
        self.filters = with_category(self.filters, category)

    def set_search(self, search: str) -> None:
        self.filters = with_search(self.filters, search)

    def toggle_sort(self, key: str) -> None:
        self.filters = with_sort(self.filters, key)

    def set_page(self, page: int) -> None:
        self.filters = with_page(self.filters, page)
