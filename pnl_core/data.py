from __future__ import annotations

import hashlib
import logging
import math
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from pnl_core.errors import EmptyStatementError, StatementParseError


logger = logging.getLogger(__name__)

STABLECOINS = frozenset({"USDT", "USDC", "DAI", "FDUSD"})

LABEL_DEPOSIT = "Deposit"
LABEL_WITHDRAW = "Withdraw"
LABEL_SWAP = "Swap"
LABEL_FUTURES_PROFIT = "Futures Profit"
LABEL_FUTURES_LOSS = "Futures Loss"
LABEL_REBATE_AGENT = "Rebate (Agent)"
LABEL_REBATE_NORMAL = "Rebate (Normal)"
LABEL_SPOT_TRADE = "Spot Trade"

KNOWN_LABELS = (
    LABEL_DEPOSIT,
    LABEL_WITHDRAW,
    LABEL_SWAP,
    LABEL_FUTURES_PROFIT,
    LABEL_FUTURES_LOSS,
    LABEL_REBATE_AGENT,
    LABEL_REBATE_NORMAL,
    LABEL_SPOT_TRADE,
)
REBATE_LABELS = (LABEL_REBATE_AGENT, LABEL_REBATE_NORMAL)

# Column order of the exchange export (header row is ignored).
CSV_FIELDS = (
    "date",
    "label",
    "outgoing_asset",
    "outgoing_amount",
    "incoming_asset",
    "incoming_amount",
    "fee_asset",
    "fee_amount",
    "trx_id",
    "comment",
)
AMOUNT_FIELDS = ("outgoing_amount", "incoming_amount", "fee_amount")
RECORD_COLUMNS = ("id",) + CSV_FIELDS
LEADING_NUMBER = r"^([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"

EMPTY_FILE_MESSAGE = "The CSV file appears to be empty or invalid."
PARSE_FAILED_MESSAGE = "Failed to parse CSV. Please check the file format."


def is_stable(asset: Optional[str]) -> bool:
    return asset in STABLECOINS


def stable_mask(assets: pd.Series) -> pd.Series:
    return assets.isin(list(STABLECOINS))


def normalize_timestamp(value: str) -> str:
    """Turn ``"2024-01-05 10:00:00"`` into ``"2024-01-05T10:00:00Z"``."""
    return value.replace(" ", "T", 1) + ("" if "Z" in value else "Z")


def parse_timestamps(values: pd.Series) -> pd.Series:
    normalized = values.astype(str).map(normalize_timestamp)
    return pd.to_datetime(normalized, utc=True, errors="coerce", format="ISO8601")


def numericize(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    """Blank -> 0, otherwise the leading number of the cell (``"100USDT"`` -> 100)."""
    for col in cols:
        if col in df.columns:
            leading = df[col].astype(str).replace("", "0").str.extract(LEADING_NUMBER, expand=False)
            df[col] = pd.to_numeric(leading, errors="coerce").astype(float)
    return df


def split_row(row: str) -> List[str]:
    cols = [c.strip() for c in row.split(",")]
    if len(cols) < len(CSV_FIELDS):
        cols += [""] * (len(CSV_FIELDS) - len(cols))
    return cols[: len(CSV_FIELDS)]


def _build_frame(raw: List[Dict[str, str]]) -> pd.DataFrame:
    df = pd.DataFrame(raw, columns=list(RECORD_COLUMNS))
    df = numericize(df, AMOUNT_FIELDS)
    df["date"] = parse_timestamps(df["date"])
    return df


def empty_records() -> pd.DataFrame:
    return _build_frame([])


def parse_csv(csv_text: str) -> pd.DataFrame:
    """Parse an exchange transaction export into a record frame, newest first.

    Malformed rows are kept: blank amounts become 0, amounts without a
    leading number NaN and unparseable dates NaT (sorted after every valid date).
    """
    lines = csv_text.strip().split("\n")
    rows = [line for line in lines[1:] if line.strip()]

    raw: List[Dict[str, str]] = []
    for index, row in enumerate(rows):
        record = dict(zip(CSV_FIELDS, split_row(row)))
        record["id"] = f"txn-{index}-{record['trx_id']}"
        raw.append(record)

    df = _build_frame(raw)
    bad_dates = int(df["date"].isna().sum())
    if bad_dates:
        logger.warning("%d of %d rows have an unparseable date", bad_dates, len(df))
    logger.info("Parsed %d transaction rows", len(df))
    return df.sort_values("date", ascending=False, kind="mergesort", na_position="last", ignore_index=True)


def decode_upload(data: bytes) -> str:
    """UTF-8 text of an upload; undecodable bytes become U+FFFD."""
    text = data.decode("utf-8-sig", errors="replace")
    replaced = text.count("\ufffd")
    if replaced:
        logger.warning("Upload has %d bytes that are not valid UTF-8, replaced", replaced)
    return text


def upload_signature(name: str, data: bytes) -> Tuple[str, int, str]:
    return name, len(data), hashlib.sha1(data).hexdigest()


def load_statement(csv_text: str) -> pd.DataFrame:
    try:
        records = parse_csv(csv_text)
    except Exception as exc:
        logger.exception("parse_csv failed")
        raise StatementParseError(PARSE_FAILED_MESSAGE) from exc
    if records.empty:
        raise EmptyStatementError(EMPTY_FILE_MESSAGE)
    return records


# ---------------- Formatting ----------------
def format_amount(amount: object, asset: Optional[str] = None) -> str:
    """Thousands-grouped decimal with 2 to 6 fraction digits, asset code appended."""
    value = math.nan if amount is None or pd.isna(amount) else float(amount)
    if math.isnan(value):
        formatted = "NaN"
    elif math.isinf(value):
        formatted = "-∞" if value < 0 else "∞"
    else:
        whole, frac = f"{value:,.6f}".split(".")
        formatted = f"{whole}.{frac.rstrip('0').ljust(2, '0')}"
    return f"{formatted} {asset}" if asset else formatted


def format_timestamp(value: object) -> str:
    if value is None or pd.isna(value):
        return "Invalid Date"
    ts = pd.Timestamp(value)
    ts = ts.tz_localize("UTC") if ts.tzinfo is None else ts.tz_convert("UTC")
    return f"{ts.strftime('%b')} {ts.day}, {ts.year}, {ts.strftime('%I:%M %p')}"


def records_to_rows(df: pd.DataFrame) -> List[Dict[str, object]]:
    """Records as JSON-friendly dicts (ISO dates, NaN -> None)."""
    if df.empty:
        return []
    out = df.copy()
    out["date"] = out["date"].apply(lambda ts: ts.isoformat() if pd.notna(ts) else None)
    out = out.astype(object).where(pd.notna(out), None)
    return out.to_dict(orient="records")
