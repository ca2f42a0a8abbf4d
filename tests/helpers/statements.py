"""Builders for CSV text in the exchange export layout."""

from __future__ import annotations

HEADER = "Date(UTC),Label,Outgoing Asset,Outgoing Amount,Incoming Asset,Incoming Amount,Fee Asset,Fee Amount,Trx. ID,Comment"


def make_csv(*rows: str) -> str:
    return "\n".join([HEADER, *rows]) + "\n"


def deposit_rows(count: int, *, start_day: int = 1) -> list[str]:
    """``count`` USDT deposits, one per minute on 2024-03-<start_day>."""
    return [
        f"2024-03-{start_day:02d} 10:{i:02d}:00,Deposit,,,USDT,{i + 1},,,dep{i},batch"
        for i in range(count)
    ]
