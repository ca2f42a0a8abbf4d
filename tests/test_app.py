from pathlib import Path

from streamlit.testing.v1 import AppTest

from pnl_core.session import DashboardSession

APP_PATH = str(Path(__file__).resolve().parents[1] / "app.py")


def run_dashboard(session: DashboardSession) -> AppTest:
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.session_state["dashboard"] = session
    at.run()
    return at


def test_upload_page_without_records():
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()
    assert not at.exception
    assert at.title[0].value == "PnL Calculator"


def test_breakdown_cards_show_incoming_and_outgoing(sample_csv):
    session = DashboardSession()
    session.upload(sample_csv, source_name="history.csv")
    at = run_dashboard(session)

    assert not at.exception
    captions = [c.value for c in at.caption]
    assert "In +1,000.00 USD" in captions
    assert "Out -200.00 USD" in captions


def test_dashboard_stat_cards_use_overview_totals(sample_csv):
    session = DashboardSession()
    session.upload(sample_csv)
    at = run_dashboard(session)

    metrics = {m.label: m.value for m in at.metric}
    assert metrics["Total Deposits"] == "1,000.00 USD"
    assert metrics["Total Withdrawals"] == "200.00 USD"
