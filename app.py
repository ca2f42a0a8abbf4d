import logging
import os
from contextlib import contextmanager
from typing import Optional

import pandas as pd
import streamlit as st

from pnl_core.charts import ACCENT, label_color
from pnl_core.data import decode_upload, format_amount, format_timestamp, upload_signature
from pnl_core.filters import SORT_KEYS
from pnl_core.metrics_overview import compute_overview
from pnl_core.metrics_transactions import compute_transactions, select_transactions
from pnl_core.session import DashboardSession

logging.basicConfig(
    level=os.getenv("PNL_DASHBOARD_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("pnl_dashboard")

SORT_TITLES = {
    "date": "Date",
    "label": "Type",
    "outgoing_amount": "Outgoing",
    "incoming_amount": "Incoming",
    "fee_amount": "Fee",
    "trx_id": "Trx ID",
}


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        f"""
        <style>
        .app-top-bar {{padding: 6px 0 4px;border-bottom: 1px solid #27272a;margin-bottom: 10px;}}
        .app-top-bar .breadcrumb {{color: #a1a1aa;font-size: 0.9rem;margin-bottom: 2px;}}
        .app-top-bar .page-title {{font-size: 1.4rem;font-weight: 700;color: #f4f4f5;}}
        .card {{border: 1px solid #27272a;border-radius: 12px;padding: 16px;background: #121212;margin-bottom: 12px;}}
        .card-header {{display: flex;justify-content: space-between;align-items: center;margin-bottom: 8px;}}
        .card-title {{font-weight: 600;font-size: 1.0rem;color: #f4f4f5;}}
        .card-actions {{font-size: 0.9rem;color: {ACCENT};}}
        .badge {{border-radius: 999px;padding: 2px 10px;font-size: 0.8rem;font-weight: 600;border: 1px solid;}}
        .step {{color: {ACCENT};font-weight: 700;margin-right: 6px;}}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str, actions: Optional[str] = None):
    container = st.container()
    container.markdown(
        f"""
        <div class="card">
          <div class="card-header">
            <div class="card-title">{title}</div>
            <div class="card-actions">{actions or ""}</div>
          </div>
        """,
        unsafe_allow_html=True,
    )
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def badge(label: str) -> str:
    color = label_color(label)
    return f"<span class='badge' style='color:{color};border-color:{color}'>{label}</span>"


def get_session() -> DashboardSession:
    if "dashboard" not in st.session_state:
        st.session_state["dashboard"] = DashboardSession()
    return st.session_state["dashboard"]


def uploader_key() -> str:
    return f"csv_upload_{st.session_state.get('_uploader_generation', 0)}"


def handle_upload(session: DashboardSession, uploaded) -> None:
    data = uploaded.getvalue()
    signature = upload_signature(uploaded.name, data)
    if st.session_state.get("_upload_sig") == signature:
        return
    st.session_state["_upload_sig"] = signature
    if session.upload(decode_upload(data), source_name=uploaded.name):
        st.session_state.pop("table_search", None)
        st.session_state.pop("table_category", None)
        st.rerun()


def reset_dashboard(session: DashboardSession) -> None:
    session.reset()
    st.session_state.pop("_upload_sig", None)
    st.session_state.pop("table_search", None)
    st.session_state.pop("table_category", None)
    st.session_state["_uploader_generation"] = st.session_state.get("_uploader_generation", 0) + 1


def render_page_header(title: str, breadcrumb: str, session: DashboardSession, export_df: Optional[pd.DataFrame] = None):
    c1, c2, c3 = st.columns([6, 2, 2])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        if export_df is not None and not export_df.empty:
            st.download_button(
                "Export CSV",
                data=export_df.to_csv(index=False).encode("utf-8"),
                file_name="transactions_export.csv",
                mime="text/csv",
            )
    with c3:
        st.button("New upload", on_click=reset_dashboard, args=(session,))


# ---------- Upload page ----------
def render_upload_page(session: DashboardSession):
    st.title("PnL Calculator")
    st.caption("Analyze your trading performance, fees, and flows.")
    with card("How to get your CSV data"):
        st.markdown(
            "<span class='step'>1</span>Log in to Bitunix and open the "
            "[Taxes & API page](https://www.bitunix.com/taxes-api).",
            unsafe_allow_html=True,
        )
        st.markdown(
            "<span class='step'>2</span>Select your date range and click <b>Generate</b>.",
            unsafe_allow_html=True,
        )
        st.markdown("<span class='step'>3</span>Download the CSV file and drop it below.", unsafe_allow_html=True)

    uploaded = st.file_uploader("Transaction CSV", type=["csv"], key=uploader_key())
    if uploaded is not None:
        handle_upload(session, uploaded)
    if session.error:
        st.error(session.error)
    st.caption("Accepts standard Bitunix Transaction CSV.")


# ---------- Dashboard ----------
def render_stat_cards(totals: dict):
    cols = st.columns(5)
    cols[0].metric("Total Deposits", format_amount(totals["total_deposits"], "USD"))
    cols[1].metric("Total Withdrawals", format_amount(totals["total_withdrawals"], "USD"))
    cols[2].metric(
        "Net Futures PnL",
        format_amount(totals["futures_pnl"], "USD"),
        delta="profit" if totals["futures_pnl"] > 0 else "loss",
        delta_color="normal" if totals["futures_pnl"] > 0 else "inverse",
    )
    cols[3].metric("Referral Rewards", format_amount(totals["referral_rewards"], "USD"))
    cols[4].metric("Total Fees Paid", format_amount(totals["total_fees"], "USD"))
    st.caption(f"{totals['transaction_count']:,} transactions. Totals count USDT, USDC, DAI and FDUSD legs only.")


def render_breakdown(breakdown: list):
    with card("Breakdown by type"):
        if not breakdown:
            st.info("No transactions.")
            return
        cols = st.columns(4)
        for i, stat in enumerate(breakdown):
            with cols[i % 4]:
                st.markdown(badge(stat["label"]), unsafe_allow_html=True)
                st.metric(f"{stat['count']:,} txns", format_amount(stat["net"], "USD"))
                st.caption(f"In +{format_amount(stat['incoming'], 'USD')}")
                st.caption(f"Out -{format_amount(stat['outgoing'], 'USD')}")
                if stat["fees"]:
                    st.caption(f"Fees {format_amount(stat['fees'], 'USD')}")


def render_charts(charts: dict):
    chart_cols = st.columns([2, 1])
    with chart_cols[0]:
        with card("Cumulative Futures PnL"):
            if charts["pnl"] is None:
                st.info("No dated transactions to chart.")
            else:
                st.vega_lite_chart(charts["pnl"], use_container_width=True)
    with chart_cols[1]:
        with card("Transaction types"):
            if charts["distribution"] is None:
                st.info("No transactions.")
            else:
                st.vega_lite_chart(charts["distribution"], use_container_width=True)


def _display_table(rows: list) -> pd.DataFrame:
    out = []
    for r in rows:
        out.append(
            {
                "Date": format_timestamp(pd.Timestamp(r["date"]) if r["date"] else None),
                "Type": r["label"],
                "Outgoing": f"-{format_amount(r['outgoing_amount'], r['outgoing_asset'])}" if r["outgoing_amount"] else "-",
                "Incoming": f"+{format_amount(r['incoming_amount'], r['incoming_asset'])}" if r["incoming_amount"] else "-",
                "Fee": format_amount(r["fee_amount"], r["fee_asset"]) if r["fee_amount"] else "-",
                "Trx ID": r["trx_id"],
                "Comment": r["comment"],
            }
        )
    return pd.DataFrame(out)


def render_transactions(session: DashboardSession):
    payload = compute_transactions(session.filters, session.records)
    with card("Transaction History", actions=f"{payload['filtered_count']:,} rows"):
        ctl = st.columns([3, 2])
        with ctl[0]:
            st.text_input(
                "Search ID, asset or comment",
                key="table_search",
                on_change=lambda: session.set_search(st.session_state["table_search"]),
            )
        with ctl[1]:
            options = payload["label_options"]
            current = session.filters.category if session.filters.category in options else options[0]
            st.selectbox(
                "Type",
                options=options,
                index=options.index(current),
                key="table_category",
                on_change=lambda: session.set_category(st.session_state["table_category"]),
            )

        sort_cols = st.columns(len(SORT_KEYS))
        for col, key in zip(sort_cols, SORT_KEYS):
            arrow = ""
            if session.filters.sort_key == key:
                arrow = " ↓" if session.filters.sort_direction == "desc" else " ↑"
            col.button(f"{SORT_TITLES[key]}{arrow}", key=f"sort_{key}", on_click=session.toggle_sort, args=(key,))

        if payload["rows"]:
            st.dataframe(_display_table(payload["rows"]), use_container_width=True, hide_index=True)
        else:
            st.info("No transactions match the current filters.")

        if payload["total_pages"] > 1:
            pager = st.columns([1, 2, 1])
            page = payload["page"]
            pager[0].button(
                "Previous",
                disabled=page <= 1,
                on_click=session.set_page,
                args=(page - 1,),
            )
            pager[1].markdown(f"Page {page} of {payload['total_pages']}")
            pager[2].button(
                "Next",
                disabled=page >= payload["total_pages"],
                on_click=session.set_page,
                args=(page + 1,),
            )


def render_dashboard(session: DashboardSession):
    records = session.records
    overview = compute_overview(records)
    export_df = select_transactions(session.filters, records)
    render_page_header("PnL Dashboard", f"Home / {session.source_name or 'Upload'}", session, export_df=export_df)
    render_stat_cards(overview["totals"])
    render_charts(overview["charts"])
    render_breakdown(overview["breakdown"])
    render_transactions(session)


# ---------- UI setup ----------
st.set_page_config(page_title="Bitunix PnL Calculator", layout="wide")
inject_base_styles()

dashboard = get_session()
if dashboard.has_data:
    render_dashboard(dashboard)
else:
    render_upload_page(dashboard)
