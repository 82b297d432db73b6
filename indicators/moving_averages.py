"""
Moving Average Indicators

이동평균 지표: SMA, EMA, WMA, HMA, VWAP
primitives 위의 얇은 래퍼 (컬럼 선택 + 이름 지정)
"""

import math
from typing import Any

import pandas as pd

from indicators import primitives
from indicators.columns import get_column, get_period, get_seed, get_source
from indicators.errors import InvalidParameterError
from indicators.price_transform import typical_price


def sma(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """단순 이동평균 (Simple Moving Average)

    Args:
        ohlcv: OHLCV DataFrame
        params: {
            "period": int (필수) - 이동평균 기간
            "source": str (선택, 기본 "close") - 계산 대상 컬럼
        }

    Returns:
        pd.Series: SMA 값 (같은 index, 이름 "sma_{period}")

    Raises:
        InvalidParameterError: period 누락 또는 1 미만
        ColumnNotFoundError: source 컬럼 없음

    Example:
        >>> sma_20 = sma(ohlcv, {"period": 20})
        >>> sma_5_high = sma(ohlcv, {"period": 5, "source": "high"})
    """
    period = get_period(params)
    source = get_source(params)

    result = primitives.simple_moving_average(get_column(ohlcv, source), period)
    return result.rename(f"sma_{period}")


def ema(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """지수 이동평균 (Exponential Moving Average)

    alpha = 2/(period+1). 기본 seed는 첫 period개 값의 SMA이므로
    처음 period-1개는 NaN.

    Args:
        ohlcv: OHLCV DataFrame
        params: {
            "period": int (필수) - EMA 기간
            "source": str (선택, 기본 "close") - 계산 대상 컬럼
            "seed": str (선택, 기본 "sma") - "sma" 또는 "first_value"
        }

    Returns:
        pd.Series: EMA 값 (이름 "ema_{period}")

    Raises:
        InvalidParameterError: period 누락 또는 1 미만
        InvalidParameterError: 유효하지 않은 seed

    Example:
        >>> ema_12 = ema(ohlcv, {"period": 12})
        >>> ema_26 = ema(ohlcv, {"period": 26, "seed": "first_value"})
    """
    period = get_period(params)
    source = get_source(params)
    seed = get_seed(params)

    result = primitives.exponential_moving_average(get_column(ohlcv, source), period, seed)
    return result.rename(f"ema_{period}")


def wma(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """가중 이동평균 (Weighted Moving Average)

    가중치는 선형 감소 (가장 최근 값 = period, 가장 오래된 값 = 1).

    Args:
        ohlcv: OHLCV DataFrame
        params: {
            "period": int (필수)
            "source": str (선택, 기본 "close")
        }

    Returns:
        pd.Series: WMA 값 (이름 "wma_{period}")
    """
    period = get_period(params)
    source = get_source(params)

    result = primitives.weighted_moving_average(get_column(ohlcv, source), period)
    return result.rename(f"wma_{period}")


def hma(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Hull 이동평균 (Hull Moving Average)

    HMA = WMA(2 * WMA(period/2) - WMA(period), round(sqrt(period)))
    period/2 window가 1 이상이어야 하므로 period >= 2.

    Args:
        ohlcv: OHLCV DataFrame
        params: {
            "period": int (필수, 2 이상)
            "source": str (선택, 기본 "close")
        }

    Returns:
        pd.Series: HMA 값 (이름 "hma_{period}")
    """
    period = get_period(params)
    if period < 2:
        raise InvalidParameterError(f"HMA period는 2 이상이어야 합니다: {period}")
    source = get_source(params)

    prices = get_column(ohlcv, source)

    wma_half = primitives.weighted_moving_average(prices, period // 2)
    wma_full = primitives.weighted_moving_average(prices, period)
    raw = 2 * wma_half - wma_full

    result = primitives.weighted_moving_average(raw, round(math.sqrt(period)))
    return result.rename(f"hma_{period}")


def vwap(ohlcv: pd.DataFrame, params: dict[str, Any] | None = None) -> pd.Series:
    """거래량 가중 평균 가격 (Volume Weighted Average Price)

    가격은 Typical Price. period를 생략하면 첫 bar부터 누적,
    지정하면 trailing period개 bar 기준. 거래량 합이 0이면 NaN.

    Args:
        ohlcv: OHLCV DataFrame (high, low, close, volume 필요)
        params: {
            "period": int (선택, 없으면 누적)
        }

    Returns:
        pd.Series: VWAP 값 (이름 "vwap" 또는 "vwap_{period}")

    Example:
        >>> session_vwap = vwap(ohlcv)
        >>> vwap_20 = vwap(ohlcv, {"period": 20})
    """
    params = params or {}

    price_volume = typical_price(ohlcv) * get_column(ohlcv, "volume")
    volume = get_column(ohlcv, "volume")

    if params.get("period") is None:
        # 결측 bar는 NaN, 누적에는 반영하지 않음
        valid = price_volume.notna()
        result = primitives.safe_divide(
            price_volume.where(valid, 0.0).cumsum(),
            volume.where(valid, 0.0).cumsum(),
        )
        return result.where(valid).rename("vwap")

    period = get_period(params)
    result = primitives.safe_divide(
        primitives.rolling_sum(price_volume, period),
        primitives.rolling_sum(volume, period),
    )
    return result.rename(f"vwap_{period}")
