from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd

from pnl_core.data import LABEL_FUTURES_LOSS, LABEL_FUTURES_PROFIT, stable_mask


def futures_pnl_delta(records: pd.DataFrame) -> pd.Series:
    """Per-record futures PnL contribution in stablecoins (0 for everything else)."""
    profit_mask = records["label"].eq(LABEL_FUTURES_PROFIT) & stable_mask(records["incoming_asset"])
    loss_mask = records["label"].eq(LABEL_FUTURES_LOSS) & stable_mask(records["outgoing_asset"])
    profit = records["incoming_amount"].where(profit_mask, 0.0)
    loss = records["outgoing_amount"].where(loss_mask, 0.0)
    return (profit - loss).fillna(0.0)


def compute_pnl_series(records: pd.DataFrame) -> List[Dict[str, Any]]:
    """End-of-day cumulative futures PnL, one point per UTC calendar day.

    Rows without a valid date are left out of the series.
    """
    dated = records.dropna(subset=["date"])
    if dated.empty:
        return []
    ordered = dated.sort_values("date", kind="mergesort")
    ordered = ordered.assign(
        running=futures_pnl_delta(ordered).cumsum(),
        day=ordered["date"].dt.strftime("%Y-%m-%d"),
    )
    by_day = ordered.groupby("day", sort=True)["running"].last()
    return [{"date": day, "value": float(value)} for day, value in by_day.items()]
