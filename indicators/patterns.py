"""
Candlestick Patterns

단순 캔들 패턴 플래그: Doji, Hammer, Shooting Star, Bullish/Bearish Engulfing

출력은 float 플래그 (1.0 = 패턴, 0.0 = 아님, NaN = 입력 결측).
다른 지표와 같은 숫자 컬럼으로 DataFrame에 붙일 수 있도록 bool 대신 float 사용.
"""

from typing import Any

import pandas as pd

from core.constants import Defaults
from indicators.columns import get_column, get_float


def _ohlc(ohlcv: pd.DataFrame) -> tuple[pd.Series, pd.Series, pd.Series, pd.Series]:
    return (
        get_column(ohlcv, "open"),
        get_column(ohlcv, "high"),
        get_column(ohlcv, "low"),
        get_column(ohlcv, "close"),
    )


def _flag(condition: pd.Series, valid: pd.Series, name: str) -> pd.Series:
    return condition.astype("float64").where(valid).rename(name)


def doji(ohlcv: pd.DataFrame, params: dict[str, Any] | None = None) -> pd.Series:
    """Doji: 몸통이 전체 범위의 body_ratio 이하

    범위가 0인 bar(시가=고가=저가=종가)도 Doji로 판정.

    params: {"body_ratio": float (선택, 기본 0.1)}
    """
    body_ratio = get_float(params or {}, "body_ratio", Defaults.DOJI_BODY_RATIO, minimum=0.0)
    open_, high, low, close = _ohlc(ohlcv)

    body = (close - open_).abs()
    bar_range = high - low
    valid = open_.notna() & high.notna() & low.notna() & close.notna()

    return _flag(body <= body_ratio * bar_range, valid, "doji")


def hammer(ohlcv: pd.DataFrame, params: dict[str, Any] | None = None) -> pd.Series:
    """Hammer: 아래꼬리 >= 2 * 몸통, 위꼬리 <= 몸통"""
    open_, high, low, close = _ohlc(ohlcv)

    body = (close - open_).abs()
    lower_shadow = pd.concat([open_, close], axis=1).min(axis=1) - low
    upper_shadow = high - pd.concat([open_, close], axis=1).max(axis=1)
    valid = open_.notna() & high.notna() & low.notna() & close.notna()

    condition = (body > 0) & (lower_shadow >= 2 * body) & (upper_shadow <= body)
    return _flag(condition, valid, "hammer")


def shooting_star(ohlcv: pd.DataFrame, params: dict[str, Any] | None = None) -> pd.Series:
    """Shooting Star: 위꼬리 >= 2 * 몸통, 아래꼬리 <= 몸통"""
    open_, high, low, close = _ohlc(ohlcv)

    body = (close - open_).abs()
    lower_shadow = pd.concat([open_, close], axis=1).min(axis=1) - low
    upper_shadow = high - pd.concat([open_, close], axis=1).max(axis=1)
    valid = open_.notna() & high.notna() & low.notna() & close.notna()

    condition = (body > 0) & (upper_shadow >= 2 * body) & (lower_shadow <= body)
    return _flag(condition, valid, "shooting_star")


def bullish_engulfing(ohlcv: pd.DataFrame, params: dict[str, Any] | None = None) -> pd.Series:
    """Bullish Engulfing: 음봉 다음 양봉이 이전 몸통을 완전히 감쌈

    첫 bar는 이전 bar가 없으므로 NaN.
    """
    open_ = get_column(ohlcv, "open")
    close = get_column(ohlcv, "close")
    prev_open = open_.shift(1)
    prev_close = close.shift(1)

    condition = (
        (prev_open > prev_close)
        & (close > open_)
        & (open_ <= prev_close)
        & (close >= prev_open)
    )
    valid = open_.notna() & close.notna() & prev_open.notna() & prev_close.notna()

    return _flag(condition, valid, "bullish_engulfing")


def bearish_engulfing(ohlcv: pd.DataFrame, params: dict[str, Any] | None = None) -> pd.Series:
    """Bearish Engulfing: 양봉 다음 음봉이 이전 몸통을 완전히 감쌈

    첫 bar는 이전 bar가 없으므로 NaN.
    """
    open_ = get_column(ohlcv, "open")
    close = get_column(ohlcv, "close")
    prev_open = open_.shift(1)
    prev_close = close.shift(1)

    condition = (
        (prev_close > prev_open)
        & (open_ > close)
        & (open_ >= prev_close)
        & (close <= prev_open)
    )
    valid = open_.notna() & close.notna() & prev_open.notna() & prev_close.notna()

    return _flag(condition, valid, "bearish_engulfing")
