"""Shared CSV fixtures in the exchange export layout."""

from __future__ import annotations

import pandas as pd
import pytest

from pnl_core.data import parse_csv
from tests.helpers.statements import make_csv


@pytest.fixture
def sample_csv() -> str:
    return make_csv(
        "2024-01-01 09:00:00,Deposit,,,USDT,1000,,,dep1,first deposit",
        "2024-01-02 10:00:00,Futures Profit,,,USDT,100,USDT,0.5,fp1,",
        "2024-01-02 18:30:00,Futures Loss,USDT,40,,,USDT,0.25,fl1,",
        "2024-01-03 08:00:00,Rebate (Agent),,,USDC,3,,,rb1,agent rebate",
        "2024-01-03 09:00:00,Rebate (Normal),,,BTC,0.001,,,rb2,",
        "2024-01-04 12:00:00,Swap,USDT,50,ETH,0.02,USDT,0.1,sw1,swap to eth",
        "2024-01-05 12:00:00,Withdraw,USDT,200,,,USDT,1,wd1,",
        "2024-01-05 13:00:00,Withdraw,BTC,0.01,,,BTC,0.0001,wd2,cold wallet",
        "2024-01-06 00:00:00,Futures Profit,,,BTC,0.002,,,fp2,",
    )


@pytest.fixture
def records(sample_csv: str) -> pd.DataFrame:
    return parse_csv(sample_csv)
