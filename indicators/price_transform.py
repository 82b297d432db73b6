"""
Price Transform

OHLC 조합 가격: Typical / Median / Average / Weighted Close
"""

from typing import Any

import pandas as pd

from indicators.columns import get_column


def typical_price(ohlcv: pd.DataFrame, params: dict[str, Any] | None = None) -> pd.Series:
    """Typical Price = (high + low + close) / 3"""
    high = get_column(ohlcv, "high")
    low = get_column(ohlcv, "low")
    close = get_column(ohlcv, "close")

    return ((high + low + close) / 3.0).rename("typical_price")


def median_price(ohlcv: pd.DataFrame, params: dict[str, Any] | None = None) -> pd.Series:
    """Median Price = (high + low) / 2"""
    high = get_column(ohlcv, "high")
    low = get_column(ohlcv, "low")

    return ((high + low) / 2.0).rename("median_price")


def average_price(ohlcv: pd.DataFrame, params: dict[str, Any] | None = None) -> pd.Series:
    """Average Price = (open + high + low + close) / 4"""
    open_ = get_column(ohlcv, "open")
    high = get_column(ohlcv, "high")
    low = get_column(ohlcv, "low")
    close = get_column(ohlcv, "close")

    return ((open_ + high + low + close) / 4.0).rename("average_price")


def weighted_close(ohlcv: pd.DataFrame, params: dict[str, Any] | None = None) -> pd.Series:
    """Weighted Close = (high + low + 2 * close) / 4"""
    high = get_column(ohlcv, "high")
    low = get_column(ohlcv, "low")
    close = get_column(ohlcv, "close")

    return ((high + low + 2.0 * close) / 4.0).rename("weighted_close")
