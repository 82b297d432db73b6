"""
Volatility Indicators

변동성 관련 지표: Bollinger Bands, %B, ATR, Garman-Klass, True Range,
Standard Deviation, NATR, Keltner Channels, Donchian Channels, Historical Volatility
"""

import math
from typing import Any

import numpy as np
import pandas as pd

from core.constants import Defaults, Numeric
from indicators import primitives
from indicators.columns import get_column, get_float, get_period, get_source

# Garman-Klass 계수
GK_HL_COEF = 0.5
GK_CO_COEF = 2.0 * math.log(2.0) - 1.0


def _true_range(ohlcv: pd.DataFrame) -> pd.Series:
    return primitives.true_range(
        get_column(ohlcv, "high"),
        get_column(ohlcv, "low"),
        get_column(ohlcv, "close"),
    )


def true_range(ohlcv: pd.DataFrame, params: dict[str, Any] | None = None) -> pd.Series:
    """True Range (첫 bar는 high - low)"""
    return _true_range(ohlcv).rename("true_range")


def atr(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Average True Range

    첫 값은 TR 처음 period개의 SMA, 이후 Wilder smoothing (alpha = 1/period).

    Args:
        ohlcv: OHLCV DataFrame
        params: {
            "period": int (선택, 기본 14)
        }

    Returns:
        pd.Series: ATR 값 (이름 "atr_{period}")

    Example:
        >>> atr_14 = atr(ohlcv, {"period": 14})
        >>> atr_20 = atr(ohlcv, {"period": 20})
    """
    period = get_period(params, default=Defaults.ATR_PERIOD)

    result = primitives.wilder_smoothing(_true_range(ohlcv), period)
    return result.rename(f"atr_{period}")


def natr(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Normalized ATR (%) = 100 * ATR / close. close가 0이면 NaN."""
    period = get_period(params, default=Defaults.ATR_PERIOD)

    atr_values = atr(ohlcv, {"period": period})
    result = 100 * primitives.safe_divide(atr_values, get_column(ohlcv, "close"))
    return result.rename(f"natr_{period}")


def stddev(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Rolling 모표준편차

    params: {"period": int (선택, 기본 20), "source": str (선택)}
    """
    period = get_period(params, default=Defaults.BB_PERIOD)
    source = get_source(params)

    result = primitives.rolling_std(get_column(ohlcv, source), period)
    return result.rename(f"stddev_{period}")


def bollinger_bands(
    ohlcv: pd.DataFrame,
    params: dict[str, Any],
) -> tuple[pd.Series, pd.Series, pd.Series]:
    """볼린저 밴드 (Bollinger Bands)

    표준편차는 모표준편차(ddof=0). 세 밴드는 같은 warm-up 구간을 가짐.

    Args:
        ohlcv: OHLCV DataFrame
        params: {
            "period": int (선택, 기본 20)
            "std_dev": float (선택, 기본 2.0, 0 이상)
            "source": str (선택, 기본 "close")
        }

    Returns:
        tuple[pd.Series, pd.Series, pd.Series]:
            - bb_upper: 상단 밴드
            - bb_middle: 중간 밴드 (SMA)
            - bb_lower: 하단 밴드

    Example:
        >>> upper, middle, lower = bollinger_bands(ohlcv, {"period": 20})
        >>> upper, middle, lower = bollinger_bands(ohlcv, {
        ...     "period": 20,
        ...     "std_dev": 2.5,
        ... })
    """
    period = get_period(params, default=Defaults.BB_PERIOD)
    std_dev = get_float(params, "std_dev", Defaults.BB_STD_DEV, minimum=0.0)
    source = get_source(params)

    prices = get_column(ohlcv, source)

    middle = primitives.simple_moving_average(prices, period)
    std = primitives.rolling_std(prices, period)

    upper = middle + (std * std_dev)
    lower = middle - (std * std_dev)

    return upper.rename("bb_upper"), middle.rename("bb_middle"), lower.rename("bb_lower")


def percent_b(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """볼린저 %B = (price - lower) / (upper - lower)

    밴드 밖의 가격은 [0, 1] 범위를 벗어남 (정상).
    밴드 폭이 0(허용 오차 이내)이면 NaN.

    Args:
        ohlcv: OHLCV DataFrame
        params: bollinger_bands()와 동일

    Returns:
        pd.Series: %B 값 (이름 "bb_b")
    """
    upper, middle, lower = bollinger_bands(ohlcv, params)
    prices = get_column(ohlcv, get_source(params))

    width = upper - lower
    zero_width = width.abs() <= Numeric.ZERO_TOLERANCE * np.maximum(1.0, middle.abs())

    result = primitives.safe_divide(prices - lower, width)
    result = result.mask(zero_width)

    return result.rename("bb_b")


def gk_volatility(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Garman-Klass 변동성

    bar별 추정치: 0.5 * ln(H/L)^2 - (2*ln2 - 1) * ln(C/O)^2
    period 동안 평균 후 제곱근. 제곱근 전에 음수는 0으로 clamp.
    가격이 0 이하이거나 결측인 bar는 NaN.

    Args:
        ohlcv: OHLCV DataFrame
        params: {
            "period": int (선택, 기본 10)
        }

    Returns:
        pd.Series: GK 변동성 (이름 "gk_volatility_{period}")
    """
    period = get_period(params, default=Defaults.GK_PERIOD)

    open_ = get_column(ohlcv, "open")
    high = get_column(ohlcv, "high")
    low = get_column(ohlcv, "low")
    close = get_column(ohlcv, "close")

    valid = (open_ > 0) & (high > 0) & (low > 0) & (close > 0)

    # 유효하지 않은 bar는 log 계산 전에 NaN으로 치환
    log_hl = np.log(high.where(valid) / low.where(valid))
    log_co = np.log(close.where(valid) / open_.where(valid))

    per_bar = GK_HL_COEF * log_hl ** 2 - GK_CO_COEF * log_co ** 2

    variance = primitives.simple_moving_average(per_bar, period)
    result = np.sqrt(variance.clip(lower=0.0))

    return result.rename(f"gk_volatility_{period}")


def keltner_channels(
    ohlcv: pd.DataFrame,
    params: dict[str, Any],
) -> tuple[pd.Series, pd.Series, pd.Series]:
    """Keltner Channels = EMA(close) ± multiplier * ATR

    params: {
        "period": int (선택, 기본 20)
        "multiplier": float (선택, 기본 2.0)
    }

    Returns:
        (keltner_upper, keltner_middle, keltner_lower)
    """
    period = get_period(params, default=Defaults.KELTNER_PERIOD)
    multiplier = get_float(params, "multiplier", Defaults.KELTNER_MULTIPLIER, minimum=0.0)

    middle = primitives.exponential_moving_average(get_column(ohlcv, "close"), period)
    atr_values = atr(ohlcv, {"period": period})

    upper = middle + multiplier * atr_values
    lower = middle - multiplier * atr_values

    return (
        upper.rename("keltner_upper"),
        middle.rename("keltner_middle"),
        lower.rename("keltner_lower"),
    )


def donchian_channels(
    ohlcv: pd.DataFrame,
    params: dict[str, Any],
) -> tuple[pd.Series, pd.Series, pd.Series]:
    """Donchian Channels (기간 최고가 / 중간 / 최저가)

    params: {"period": int (선택, 기본 20)}
    """
    period = get_period(params, default=Defaults.DONCHIAN_PERIOD)

    upper = primitives.rolling_max(get_column(ohlcv, "high"), period)
    lower = primitives.rolling_min(get_column(ohlcv, "low"), period)
    middle = (upper + lower) / 2

    return (
        upper.rename("donchian_upper"),
        middle.rename("donchian_middle"),
        lower.rename("donchian_lower"),
    )


def hist_volatility(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Historical Volatility (연율화, %)

    로그 수익률 ln(x[i]/x[i-1])의 rolling 모표준편차 * sqrt(trading_periods) * 100.
    가격이 0 이하인 bar의 수익률은 NaN. 첫 유효값은 index period.

    Args:
        ohlcv: OHLCV DataFrame
        params: {
            "period": int (선택, 기본 20)
            "trading_periods": int (선택, 기본 252) - 연간 bar 수
            "source": str (선택, 기본 "close")
        }

    Returns:
        pd.Series: 연율화 변동성 (이름 "hist_volatility_{period}")
    """
    period = get_period(params, default=Defaults.HIST_VOL_PERIOD)
    trading_periods = get_period(params, "trading_periods", Defaults.TRADING_PERIODS)
    source = get_source(params)

    prices = get_column(ohlcv, source)
    positive = prices.where(prices > 0)
    log_returns = np.log(positive / positive.shift(1))

    std = primitives.rolling_std(log_returns, period)
    result = std * math.sqrt(trading_periods) * 100

    return result.rename(f"hist_volatility_{period}")
