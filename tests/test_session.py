from pnl_core.data import EMPTY_FILE_MESSAGE
from pnl_core.filters import TableFilters
from pnl_core.session import DashboardSession
from tests.helpers.statements import HEADER


def test_new_session_has_no_data():
    session = DashboardSession()
    assert not session.has_data
    assert session.error is None


def test_upload_replaces_records_and_resets_filters(sample_csv):
    session = DashboardSession()
    session.set_search("usdt")
    assert session.upload(sample_csv, source_name="history.csv")
    assert session.has_data
    assert len(session.records) == 9
    assert session.filters == TableFilters()
    assert session.source_name == "history.csv"
    assert session.error is None


def test_failed_upload_keeps_previous_state(sample_csv):
    session = DashboardSession()
    session.upload(sample_csv)
    session.toggle_sort("fee_amount")
    before = session.records

    assert not session.upload(HEADER + "\n")
    assert session.error == EMPTY_FILE_MESSAGE
    assert session.records is before
    assert session.filters.sort_key == "fee_amount"


def test_successful_upload_clears_error(sample_csv):
    session = DashboardSession()
    session.upload("")
    assert session.error
    session.upload(sample_csv)
    assert session.error is None


def test_control_changes(sample_csv):
    session = DashboardSession()
    session.upload(sample_csv)
    session.set_page(3)
    session.toggle_sort("date")
    assert session.filters.page == 3
    assert session.filters.sort_direction == "asc"
    session.set_category("Deposit")
    assert session.filters.page == 1
    session.set_page(2)
    session.set_search("btc")
    assert session.filters.page == 1


def test_reset_discards_everything(sample_csv):
    session = DashboardSession()
    session.upload(sample_csv, source_name="a.csv")
    session.set_search("x")
    session.reset()
    assert not session.has_data
    assert session.filters == TableFilters()
    assert session.source_name is None
