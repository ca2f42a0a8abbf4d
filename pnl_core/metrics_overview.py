from __future__ import annotations

from typing import Any, Dict, Optional

import pandas as pd

from pnl_core.charts import distribution_pie_chart, pnl_line_chart, to_vega_spec
from pnl_core.data import (
    LABEL_DEPOSIT,
    LABEL_WITHDRAW,
    REBATE_LABELS,
    stable_mask,
)
from pnl_core.metrics_breakdown import compute_breakdown, compute_distribution
from pnl_core.metrics_pnl import compute_pnl_series, futures_pnl_delta


def _stable_sum(amounts: pd.Series, assets: pd.Series, mask: Optional[pd.Series] = None) -> float:
    keep = stable_mask(assets)
    if mask is not None:
        keep = keep & mask
    return float(amounts[keep].sum())


def compute_totals(records: pd.DataFrame) -> Dict[str, Any]:
    """Stablecoin-denominated totals over the full record set."""
    labels = records["label"]
    return {
        "total_deposits": _stable_sum(records["incoming_amount"], records["incoming_asset"], labels.eq(LABEL_DEPOSIT)),
        "total_withdrawals": _stable_sum(records["outgoing_amount"], records["outgoing_asset"], labels.eq(LABEL_WITHDRAW)),
        "futures_pnl": float(futures_pnl_delta(records).sum()),
        "referral_rewards": _stable_sum(records["incoming_amount"], records["incoming_asset"], labels.isin(REBATE_LABELS)),
        "total_fees": _stable_sum(records["fee_amount"], records["fee_asset"]),
        "transaction_count": int(len(records)),
    }


def compute_overview(records: pd.DataFrame) -> Dict[str, Any]:
    totals = compute_totals(records)
    breakdown = compute_breakdown(records)
    pnl_series = compute_pnl_series(records)
    distribution = compute_distribution(records)

    charts: Dict[str, Any] = {"pnl": None, "distribution": None}
    line = pnl_line_chart(pnl_series)
    if line is not None:
        charts["pnl"] = to_vega_spec(line)
    pie = distribution_pie_chart(distribution)
    if pie is not None:
        charts["distribution"] = to_vega_spec(pie)

    return {
        "totals": totals,
        "breakdown": breakdown,
        "pnl_series": pnl_series,
        "distribution": distribution,
        "charts": charts,
    }
