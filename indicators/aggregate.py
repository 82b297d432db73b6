"""
Indicator Aggregator

고정된 지표 세트를 한 번에 계산하여 새 DataFrame으로 반환.

원본 DataFrame은 수정하지 않음. 필수 컬럼을 먼저 검증하고,
모든 지표를 계산한 뒤에만 결과를 합치므로 일부 컬럼만 붙은 결과는 없음.
"""

import logging

import pandas as pd

from core.config.loader import IndicatorSettings
from core.types import PriceSource
from indicators import primitives
from indicators.columns import get_column, require_columns
from indicators.momentum import macd, rsi
from indicators.moving_averages import ema, sma
from indicators.trend import adx
from indicators.volatility import atr, bollinger_bands, gk_volatility, percent_b
from indicators.volume import cmf, obv

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = [source.value for source in PriceSource]


def compute_indicators(
    ohlcv: pd.DataFrame,
    settings: IndicatorSettings | None = None,
) -> dict[str, pd.Series]:
    """고정 지표 세트 계산 (컬럼명 → Series)

    계산 순서:
        sma_{p}..., ema_{p}..., rsi_{p}, macd/macd_signal/macd_hist,
        bb_upper/bb_middle/bb_lower, bb_b, atr_{p}, gk_volatility_{p},
        adx_{p}, obv, cmf_{p}, returns, price_range,
        close_lag_{lag}..., returns_{lag}min, volatility_{window}min

    returns_{lag}min, volatility_{window}min 이름은 1분봉 기준 관례를 따름.

    Args:
        ohlcv: OHLCV DataFrame (open, high, low, close, volume 필수)
        settings: 지표 파라미터 (None이면 기본값)

    Returns:
        dict[str, pd.Series]: 삽입 순서가 유지된 결과

    Raises:
        ColumnNotFoundError: 필수 컬럼 누락 (계산 시작 전)
        IndicatorError: 개별 지표 계산 실패
    """
    if settings is None:
        settings = IndicatorSettings()

    require_columns(ohlcv, REQUIRED_COLUMNS)

    seed = settings.ema_seed.value
    results: dict[str, pd.Series] = {}

    def add(series: pd.Series) -> None:
        results[str(series.name)] = series

    # Moving Averages
    for period in settings.sma_periods:
        add(sma(ohlcv, {"period": period}))
    for period in settings.ema_periods:
        add(ema(ohlcv, {"period": period, "seed": seed}))

    # Oscillators
    add(rsi(ohlcv, {"period": settings.rsi_period}))
    for series in macd(ohlcv, {
        "fast_period": settings.macd_fast,
        "slow_period": settings.macd_slow,
        "signal_period": settings.macd_signal,
        "seed": seed,
    }):
        add(series)

    # Volatility
    bb_params = {"period": settings.bb_period, "std_dev": settings.bb_std_dev}
    for series in bollinger_bands(ohlcv, bb_params):
        add(series)
    add(percent_b(ohlcv, bb_params))
    add(atr(ohlcv, {"period": settings.atr_period}))
    add(gk_volatility(ohlcv, {"period": settings.gk_period}))

    # Trend
    add(adx(ohlcv, {"period": settings.adx_period}))

    # Volume
    add(obv(ohlcv))
    add(cmf(ohlcv, {"period": settings.cmf_period}))

    # Price dynamics
    close = get_column(ohlcv, "close")
    high = get_column(ohlcv, "high")
    low = get_column(ohlcv, "low")
    add(primitives.safe_divide(close - close.shift(1), close.shift(1)).rename("returns"))
    add(primitives.safe_divide(high - low, close).rename("price_range"))

    for lag in settings.close_lags:
        add(close.shift(lag).rename(f"close_lag_{lag}"))

    lagged = close.shift(settings.returns_lag)
    add(primitives.safe_divide(close - lagged, lagged).rename(f"returns_{settings.returns_lag}min"))

    # 직전 window개 1-bar 수익률의 모표준편차 (현재 bar 제외)
    window = settings.volatility_window
    volatility = primitives.rolling_std(results["returns"], window).shift(1)
    add(volatility.rename(f"volatility_{window}min"))

    logger.debug(f"지표 {len(results)}개 계산 완료 (rows={len(ohlcv)})")

    return results


def add_indicators(
    ohlcv: pd.DataFrame,
    settings: IndicatorSettings | None = None,
) -> pd.DataFrame:
    """원본 컬럼 + 고정 지표 세트를 가진 새 DataFrame 반환

    원본과 같은 이름의 컬럼이 이미 있으면 지표 값으로 대체됨 (원본 객체는 그대로).

    Example:
        >>> enriched = add_indicators(ohlcv)
        >>> enriched[["close", "sma_20", "rsi_14"]].tail()
    """
    results = compute_indicators(ohlcv, settings)

    enriched = ohlcv.copy()
    for name, series in results.items():
        enriched[name] = series

    return enriched
