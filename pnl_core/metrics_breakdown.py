from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd

from pnl_core.data import stable_mask


def compute_breakdown(records: pd.DataFrame) -> List[Dict[str, Any]]:
    """Stablecoin flows per raw label, most frequent label first.

    Counts include every row; the sums only include stablecoin legs.
    """
    if records.empty:
        return []
    legs = pd.DataFrame(
        {
            "label": records["label"],
            "incoming": records["incoming_amount"].where(stable_mask(records["incoming_asset"]), 0.0),
            "outgoing": records["outgoing_amount"].where(stable_mask(records["outgoing_asset"]), 0.0),
            "fees": records["fee_amount"].where(stable_mask(records["fee_asset"]), 0.0),
        }
    )
    grouped = (
        legs.groupby("label", sort=False, dropna=False)
        .agg(
            incoming=("incoming", "sum"),
            outgoing=("outgoing", "sum"),
            fees=("fees", "sum"),
            count=("incoming", "size"),
        )
        .reset_index()
    )
    grouped["net"] = grouped["incoming"] - grouped["outgoing"]
    grouped = grouped.sort_values("count", ascending=False, kind="mergesort")
    return [
        {
            "label": str(row["label"]),
            "incoming": float(row["incoming"]),
            "outgoing": float(row["outgoing"]),
            "fees": float(row["fees"]),
            "net": float(row["net"]),
            "count": int(row["count"]),
        }
        for row in grouped.to_dict(orient="records")
    ]


def compute_distribution(records: pd.DataFrame) -> List[Dict[str, Any]]:
    if records.empty:
        return []
    counts = records.groupby("label", sort=False, dropna=False).size()
    return [{"name": str(label), "value": int(count)} for label, count in counts.items()]
