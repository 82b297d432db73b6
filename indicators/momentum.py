"""
Momentum Indicators

모멘텀/오실레이터 지표: RSI, MACD, Stochastic, Williams %R, ROC, Momentum, CCI,
PPO, TRIX, Stochastic RSI, Ultimate Oscillator, DPO, CMO, BOP, ROCP/ROCR/ROCR100
"""

import logging
from typing import Any

import numpy as np
import pandas as pd

from core.constants import Defaults, Numeric
from indicators import primitives
from indicators.columns import get_column, get_period, get_seed, get_source
from indicators.price_transform import typical_price

logger = logging.getLogger(__name__)


def rsi(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Relative Strength Index (RSI)

    Wilder smoothing(alpha = 1/period)으로 평균 이득/손실 계산.
    처음 period개 위치는 NaN (첫 변화량은 index 1부터 존재).

    Args:
        ohlcv: OHLCV DataFrame
        params: {
            "period": int (선택, 기본 14)
            "source": str (선택, 기본 "close")
        }

    Returns:
        pd.Series: RSI 값 (0-100 범위, 이름 "rsi_{period}")

    Example:
        >>> rsi_14 = rsi(ohlcv, {"period": 14})
        >>> rsi_7 = rsi(ohlcv, {"period": 7})
    """
    period = get_period(params, default=Defaults.RSI_PERIOD)
    source = get_source(params)

    delta = get_column(ohlcv, source).diff()

    # 상승/하락 분리 (clip은 NaN 유지)
    gain = delta.clip(lower=0.0)
    loss = (-delta).clip(lower=0.0)

    avg_gain = primitives.wilder_smoothing(gain, period)
    avg_loss = primitives.wilder_smoothing(loss, period)

    rs = avg_gain / avg_loss
    rsi_values = 100 - (100 / (1 + rs))

    # avg_loss가 정확히 0이면 RSI는 100 (횡보 포함)
    rsi_values = rsi_values.where(avg_loss != 0, 100.0)
    rsi_values = rsi_values.where(avg_loss.notna() & avg_gain.notna())

    return rsi_values.rename(f"rsi_{period}")


def macd(
    ohlcv: pd.DataFrame,
    params: dict[str, Any],
) -> tuple[pd.Series, pd.Series, pd.Series]:
    """MACD (Moving Average Convergence Divergence)

    세 EMA(fast, slow, signal)는 모두 같은 seed 정책을 사용.
    fast >= slow도 계산은 하지만 자동 보정하지 않음 (경고 로그만 남김).

    Args:
        ohlcv: OHLCV DataFrame
        params: {
            "fast_period": int (선택, 기본 12)
            "slow_period": int (선택, 기본 26)
            "signal_period": int (선택, 기본 9)
            "source": str (선택, 기본 "close")
            "seed": str (선택, 기본 "sma")
        }

    Returns:
        tuple[pd.Series, pd.Series, pd.Series]:
            - macd: MACD 라인 (fast_ema - slow_ema)
            - macd_signal: 시그널 라인 (macd의 EMA)
            - macd_hist: 히스토그램 (macd - signal)

    Example:
        >>> macd_line, signal, hist = macd(ohlcv, {})
        >>> macd_line, signal, hist = macd(ohlcv, {
        ...     "fast_period": 8,
        ...     "slow_period": 21,
        ...     "signal_period": 5,
        ... })
    """
    fast = get_period(params, "fast_period", Defaults.MACD_FAST)
    slow = get_period(params, "slow_period", Defaults.MACD_SLOW)
    signal_period = get_period(params, "signal_period", Defaults.MACD_SIGNAL)
    source = get_source(params)
    seed = get_seed(params)

    if fast >= slow:
        logger.warning(f"MACD fast_period({fast}) >= slow_period({slow}): 부호가 반전된 결과")

    prices = get_column(ohlcv, source)

    fast_ema = primitives.exponential_moving_average(prices, fast, seed)
    slow_ema = primitives.exponential_moving_average(prices, slow, seed)

    macd_line = fast_ema - slow_ema
    signal_line = primitives.exponential_moving_average(macd_line, signal_period, seed)
    histogram = macd_line - signal_line

    return (
        macd_line.rename("macd"),
        signal_line.rename("macd_signal"),
        histogram.rename("macd_hist"),
    )


def stochastic(
    ohlcv: pd.DataFrame,
    params: dict[str, Any],
) -> tuple[pd.Series, pd.Series]:
    """Stochastic Oscillator

    Args:
        ohlcv: OHLCV DataFrame
        params: {
            "k_period": int (선택, 기본 14) - %K 기간
            "d_period": int (선택, 기본 3) - %D smoothing
            "smooth_k": int (선택, 기본 3) - %K smoothing
        }

    Returns:
        tuple[pd.Series, pd.Series]:
            - stoch_k: %K 라인 (Slow %K)
            - stoch_d: %D 라인 (시그널)
    """
    k_period = get_period(params, "k_period", Defaults.STOCH_K_PERIOD)
    d_period = get_period(params, "d_period", Defaults.STOCH_D_PERIOD)
    smooth_k = get_period(params, "smooth_k", Defaults.STOCH_SMOOTH_K)

    close = get_column(ohlcv, "close")
    low_min = primitives.rolling_min(get_column(ohlcv, "low"), k_period)
    high_max = primitives.rolling_max(get_column(ohlcv, "high"), k_period)

    # 분모(범위)가 0이면 NaN
    fast_k = 100 * primitives.safe_divide(close - low_min, high_max - low_min)

    percent_k = primitives.simple_moving_average(fast_k, smooth_k)
    percent_d = primitives.simple_moving_average(percent_k, d_period)

    return percent_k.rename("stoch_k"), percent_d.rename("stoch_d")


def williams_r(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Williams %R (-100 ~ 0)

    params: {"period": int (선택, 기본 14)}
    """
    period = get_period(params, default=Defaults.STOCH_K_PERIOD)

    close = get_column(ohlcv, "close")
    highest = primitives.rolling_max(get_column(ohlcv, "high"), period)
    lowest = primitives.rolling_min(get_column(ohlcv, "low"), period)

    result = -100 * primitives.safe_divide(highest - close, highest - lowest)
    return result.rename(f"williams_r_{period}")


def roc(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Rate of Change (%)

    params: {"period": int (선택, 기본 10), "source": str (선택)}
    """
    period = get_period(params, default=Defaults.ROC_PERIOD)
    source = get_source(params)

    result = primitives.rate_of_change(get_column(ohlcv, source), period)
    return result.rename(f"roc_{period}")


def momentum(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Momentum = x[i] - x[i-period]"""
    period = get_period(params, default=Defaults.ROC_PERIOD)
    source = get_source(params)

    result = get_column(ohlcv, source).diff(period)
    return result.rename(f"mom_{period}")


def cci(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Commodity Channel Index

    (TP - SMA(TP)) / (0.015 * 평균편차). 평균편차가 0이면 0.

    params: {"period": int (선택, 기본 20)}
    """
    period = get_period(params, default=Defaults.CCI_PERIOD)

    tp = typical_price(ohlcv)
    tp_sma = primitives.simple_moving_average(tp, period)
    mean_deviation = primitives.rolling_mean_deviation(tp, period)

    cci_values = (tp - tp_sma) / (Numeric.CCI_CONSTANT * mean_deviation)
    cci_values = cci_values.where(mean_deviation != 0, 0.0)
    cci_values = cci_values.where(tp_sma.notna() & mean_deviation.notna())

    return cci_values.rename(f"cci_{period}")


def rocp(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Rate of Change 비율 = (x[i] - x[i-period]) / x[i-period]"""
    period = get_period(params, default=Defaults.ROC_PERIOD)
    source = get_source(params)

    result = primitives.rate_of_change(get_column(ohlcv, source), period) / 100
    return result.rename(f"rocp_{period}")


def rocr(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Rate of Change ratio = x[i] / x[i-period]"""
    period = get_period(params, default=Defaults.ROC_PERIOD)
    source = get_source(params)

    result = primitives.lag_ratio(get_column(ohlcv, source), period)
    return result.rename(f"rocr_{period}")


def rocr100(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Rate of Change ratio (100 기준) = 100 * x[i] / x[i-period]"""
    period = get_period(params, default=Defaults.ROC_PERIOD)
    source = get_source(params)

    result = 100 * primitives.lag_ratio(get_column(ohlcv, source), period)
    return result.rename(f"rocr100_{period}")


def cmo(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Chande Momentum Oscillator (-100 ~ 100)

    100 * (상승 합 - 하락 합) / (상승 합 + 하락 합), 최근 period개 변화량 기준.
    변화가 전혀 없으면 NaN.

    params: {"period": int (선택, 기본 14), "source": str (선택)}
    """
    period = get_period(params, default=Defaults.CMO_PERIOD)
    source = get_source(params)

    delta = get_column(ohlcv, source).diff()
    gains = primitives.rolling_sum(delta.clip(lower=0.0), period)
    losses = primitives.rolling_sum((-delta).clip(lower=0.0), period)

    result = 100 * primitives.safe_divide(gains - losses, gains + losses)
    return result.rename(f"cmo_{period}")


def bop(ohlcv: pd.DataFrame, params: dict[str, Any] | None = None) -> pd.Series:
    """Balance of Power = (close - open) / (high - low)

    high == low 이면 0.
    """
    open_ = get_column(ohlcv, "open")
    close = get_column(ohlcv, "close")
    bar_range = get_column(ohlcv, "high") - get_column(ohlcv, "low")

    body = close - open_
    result = primitives.safe_divide(body, bar_range)
    result = result.where(bar_range != 0, 0.0)
    result = result.where(bar_range.notna() & body.notna())

    return result.rename("bop")


def ppo(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Percentage Price Oscillator (%)

    100 * (EMA_fast - EMA_slow) / EMA_slow. EMA_slow가 0이면 NaN.
    기간과 seed 정책은 macd()와 동일.

    Args:
        ohlcv: OHLCV DataFrame
        params: {
            "fast_period": int (선택, 기본 12)
            "slow_period": int (선택, 기본 26)
            "source": str (선택, 기본 "close")
            "seed": str (선택, 기본 "sma")
        }

    Returns:
        pd.Series: PPO 값 (이름 "ppo")
    """
    fast = get_period(params, "fast_period", Defaults.MACD_FAST)
    slow = get_period(params, "slow_period", Defaults.MACD_SLOW)
    source = get_source(params)
    seed = get_seed(params)

    prices = get_column(ohlcv, source)

    fast_ema = primitives.exponential_moving_average(prices, fast, seed)
    slow_ema = primitives.exponential_moving_average(prices, slow, seed)

    result = 100 * primitives.safe_divide(fast_ema - slow_ema, slow_ema)
    return result.rename("ppo")


def trix(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """TRIX: 3중 EMA의 1-bar 변화율 (%)

    세 EMA는 같은 seed 정책. SMA seed면 첫 유효값은 index 3*period-2.

    params: {"period": int (선택, 기본 15), "source": str (선택), "seed": str (선택)}
    """
    period = get_period(params, default=Defaults.TRIX_PERIOD)
    source = get_source(params)
    seed = get_seed(params)

    smoothed = get_column(ohlcv, source)
    for _ in range(3):
        smoothed = primitives.exponential_moving_average(smoothed, period, seed)

    result = primitives.rate_of_change(smoothed, 1)
    return result.rename(f"trix_{period}")


def stoch_rsi(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Stochastic RSI (0 ~ 1)

    (RSI - 최저 RSI) / (최고 RSI - 최저 RSI), stoch_period 구간 기준.
    RSI는 rsi()와 같은 Wilder smoothing. 구간 내 RSI가 변하지 않으면 NaN.

    params: {
        "rsi_period": int (선택, 기본 14)
        "stoch_period": int (선택, 기본 14)
        "source": str (선택)
    }
    """
    rsi_period = get_period(params, "rsi_period", Defaults.RSI_PERIOD)
    stoch_period = get_period(params, "stoch_period", Defaults.STOCH_RSI_PERIOD)
    source = get_source(params)

    rsi_values = rsi(ohlcv, {"period": rsi_period, "source": source})
    lowest = primitives.rolling_min(rsi_values, stoch_period)
    highest = primitives.rolling_max(rsi_values, stoch_period)

    result = primitives.safe_divide(rsi_values - lowest, highest - lowest)
    return result.rename(f"stoch_rsi_{rsi_period}")


def ultimate_oscillator(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Ultimate Oscillator (0 ~ 100)

    BP = close - min(low, 이전 close), TR = True Range
    Avg(n) = sum(BP, n) / sum(TR, n)
    UO = 100 * (4*Avg(short) + 2*Avg(medium) + Avg(long)) / 7

    params: {
        "short_period": int (선택, 기본 7)
        "medium_period": int (선택, 기본 14)
        "long_period": int (선택, 기본 28)
    }
    """
    short = get_period(params, "short_period", Defaults.ULTOSC_SHORT)
    medium = get_period(params, "medium_period", Defaults.ULTOSC_MEDIUM)
    long = get_period(params, "long_period", Defaults.ULTOSC_LONG)

    high = get_column(ohlcv, "high")
    low = get_column(ohlcv, "low")
    close = get_column(ohlcv, "close")

    # 이전 종가가 없으면 당일 low
    true_low = np.fmin(low, close.shift(1)).where(low.notna())
    buying_pressure = close - true_low
    tr = primitives.true_range(high, low, close)

    def average(window: int) -> pd.Series:
        return primitives.safe_divide(
            primitives.rolling_sum(buying_pressure, window),
            primitives.rolling_sum(tr, window),
        )

    result = 100 * (4 * average(short) + 2 * average(medium) + average(long)) / 7
    return result.rename("ultimate_oscillator")


def dpo(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Detrended Price Oscillator

    x[i - (period//2 + 1)] - SMA(x, period)[i]. 과거 값만 사용 (중앙 정렬하지 않음).

    params: {"period": int (선택, 기본 20), "source": str (선택)}
    """
    period = get_period(params, default=Defaults.DPO_PERIOD)
    source = get_source(params)

    prices = get_column(ohlcv, source)
    result = prices.shift(period // 2 + 1) - primitives.simple_moving_average(prices, period)

    return result.rename(f"dpo_{period}")
