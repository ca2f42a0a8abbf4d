from __future__ import annotations

from typing import Any, Dict, List, Optional

import altair as alt
import pandas as pd

from pnl_core.data import (
    LABEL_DEPOSIT,
    LABEL_FUTURES_LOSS,
    LABEL_FUTURES_PROFIT,
    LABEL_REBATE_AGENT,
    LABEL_REBATE_NORMAL,
    LABEL_SPOT_TRADE,
    LABEL_SWAP,
    LABEL_WITHDRAW,
)

alt.data_transformers.disable_max_rows()

ACCENT = "#D0F500"
DEFAULT_LABEL_COLOR = "#a1a1aa"
LABEL_COLORS = {
    LABEL_DEPOSIT: "#34d399",
    LABEL_WITHDRAW: "#fb7185",
    LABEL_SWAP: "#60a5fa",
    LABEL_FUTURES_PROFIT: ACCENT,
    LABEL_FUTURES_LOSS: "#f43f5e",
    LABEL_REBATE_AGENT: "#a78bfa",
    LABEL_REBATE_NORMAL: "#8b5cf6",
    LABEL_SPOT_TRADE: "#fb923c",
}


def label_color(label: str) -> str:
    return LABEL_COLORS.get(label, DEFAULT_LABEL_COLOR)


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def pnl_line_chart(series: List[Dict[str, Any]]) -> Optional[alt.Chart]:
    if not series:
        return None
    df = pd.DataFrame(series)
    return (
        alt.Chart(df)
        .mark_line(color=ACCENT, strokeWidth=2)
        .encode(
            x=alt.X("date:T", title="Date"),
            y=alt.Y("value:Q", title="Cumulative PnL (USD)", axis=alt.Axis(format="$,.0f")),
            tooltip=[alt.Tooltip("date:T", title="Date"), alt.Tooltip("value:Q", title="PnL", format="$,.2f")],
        )
        .properties(height=300)
    )


def distribution_pie_chart(distribution: List[Dict[str, Any]]) -> Optional[alt.Chart]:
    if not distribution:
        return None
    df = pd.DataFrame(distribution)
    names = df["name"].astype(str).tolist()
    return (
        alt.Chart(df)
        .mark_arc(innerRadius=60)
        .encode(
            theta=alt.Theta("value:Q"),
            color=alt.Color(
                "name:N",
                title="Type",
                scale=alt.Scale(domain=names, range=[label_color(n) for n in names]),
            ),
            tooltip=[alt.Tooltip("name:N", title="Type"), alt.Tooltip("value:Q", title="Count", format=",")],
        )
        .properties(height=300)
    )
