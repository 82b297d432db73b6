"""
Trend Indicators

추세 강도/방향 지표: +DM/-DM, +DI/-DI, ADX, ADXR, Aroon, Aroon Oscillator,
Parabolic SAR, Vortex, Ichimoku

DM/TR smoothing은 ATR과 동일한 Wilder smoothing (SMA seed, alpha = 1/period).
"""

from typing import Any

import numpy as np
import pandas as pd

from core.constants import Defaults
from indicators import primitives
from indicators.columns import check_same_length, get_column, get_float, get_period
from indicators.errors import InvalidParameterError


def _smoothed_components(
    ohlcv: pd.DataFrame,
    period: int,
) -> tuple[pd.Series, pd.Series, pd.Series]:
    """Wilder smoothing된 (+DM, -DM, TR)"""
    high = get_column(ohlcv, "high")
    low = get_column(ohlcv, "low")
    close = get_column(ohlcv, "close")

    plus, minus = primitives.directional_movement(high, low)
    tr = primitives.true_range(high, low, close)

    return (
        primitives.wilder_smoothing(plus, period),
        primitives.wilder_smoothing(minus, period),
        primitives.wilder_smoothing(tr, period),
    )


def _directional_index(smoothed_dm: pd.Series, smoothed_tr: pd.Series) -> pd.Series:
    # 범위가 전혀 없으면(TR 0) 방향성도 0
    di = 100 * primitives.safe_divide(smoothed_dm, smoothed_tr)
    di = di.where(smoothed_tr != 0, 0.0)
    return di.where(smoothed_dm.notna() & smoothed_tr.notna())


def _di_pair(ohlcv: pd.DataFrame, period: int) -> tuple[pd.Series, pd.Series]:
    plus_sm, minus_sm, tr_sm = _smoothed_components(ohlcv, period)
    return _directional_index(plus_sm, tr_sm), _directional_index(minus_sm, tr_sm)


def plus_dm(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Smoothed +DM

    params: {"period": int (선택, 기본 14)}
    """
    period = get_period(params, default=Defaults.ADX_PERIOD)
    plus, _ = primitives.directional_movement(get_column(ohlcv, "high"), get_column(ohlcv, "low"))
    return primitives.wilder_smoothing(plus, period).rename(f"plus_dm_{period}")


def minus_dm(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Smoothed -DM

    params: {"period": int (선택, 기본 14)}
    """
    period = get_period(params, default=Defaults.ADX_PERIOD)
    _, minus = primitives.directional_movement(get_column(ohlcv, "high"), get_column(ohlcv, "low"))
    return primitives.wilder_smoothing(minus, period).rename(f"minus_dm_{period}")


def plus_di(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """+DI (%) = 100 * smoothed(+DM) / smoothed(TR)"""
    period = get_period(params, default=Defaults.ADX_PERIOD)
    pdi, _ = _di_pair(ohlcv, period)
    return pdi.rename(f"plus_di_{period}")


def minus_di(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """-DI (%) = 100 * smoothed(-DM) / smoothed(TR)"""
    period = get_period(params, default=Defaults.ADX_PERIOD)
    _, mdi = _di_pair(ohlcv, period)
    return mdi.rename(f"minus_di_{period}")


def adx(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Average Directional Index

    DX = 100 * |+DI - -DI| / (+DI + -DI)  (분모 0이면 0)
    ADX = Wilder smoothing(DX)

    첫 유효값은 index 2*period-2.

    Args:
        ohlcv: OHLCV DataFrame
        params: {
            "period": int (선택, 기본 14)
        }

    Returns:
        pd.Series: ADX 값 (0-100, 이름 "adx_{period}")

    Example:
        >>> adx_14 = adx(ohlcv, {"period": 14})
    """
    period = get_period(params, default=Defaults.ADX_PERIOD)
    return _adx(ohlcv, period).rename(f"adx_{period}")


def _adx(ohlcv: pd.DataFrame, period: int) -> pd.Series:
    pdi, mdi = _di_pair(ohlcv, period)

    total = pdi + mdi
    dx = 100 * primitives.safe_divide((pdi - mdi).abs(), total)
    dx = dx.where(total != 0, 0.0)
    dx = dx.where(pdi.notna() & mdi.notna())

    return primitives.wilder_smoothing(dx, period)


def adxr(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """ADX Rating = (ADX[i] + ADX[i-period]) / 2

    params: {"period": int (선택, 기본 14)}
    """
    period = get_period(params, default=Defaults.ADX_PERIOD)

    adx_values = _adx(ohlcv, period)
    result = (adx_values + adx_values.shift(period)) / 2

    return result.rename(f"adxr_{period}")


def aroon(ohlcv: pd.DataFrame, params: dict[str, Any]) -> tuple[pd.Series, pd.Series]:
    """Aroon Up / Down

    trailing period+1개 bar에서 최고가(최저가) 이후 경과 bar 수로 계산.
    동률이면 가장 최근 위치 사용. 처음 period개는 NaN.

    Aroon Up   = 100 * (period - 최고가 이후 경과) / period
    Aroon Down = 100 * (period - 최저가 이후 경과) / period

    Args:
        ohlcv: OHLCV DataFrame
        params: {
            "period": int (선택, 기본 25)
        }

    Returns:
        tuple[pd.Series, pd.Series]:
            - aroon_up_{period}
            - aroon_down_{period}
    """
    period = get_period(params, default=Defaults.AROON_PERIOD)

    since_high = primitives.periods_since_extreme(get_column(ohlcv, "high"), period, highest=True)
    since_low = primitives.periods_since_extreme(get_column(ohlcv, "low"), period, highest=False)

    up = 100 * (period - since_high) / period
    down = 100 * (period - since_low) / period

    return up.rename(f"aroon_up_{period}"), down.rename(f"aroon_down_{period}")


def aroon_oscillator(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Aroon Oscillator = Aroon Up - Aroon Down (-100 ~ 100)"""
    period = get_period(params, default=Defaults.AROON_PERIOD)

    up, down = aroon(ohlcv, {"period": period})
    return (up - down).rename(f"aroon_osc_{period}")


def psar(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Parabolic SAR

    상승 추세로 시작 (SAR = 첫 low, EP = 첫 high). 매 bar마다
    SAR += AF * (EP - SAR) 후 직전 두 bar의 low(하락 추세는 high)로 제한.
    당일 low가 SAR 아래로 내려가면 반전: SAR = EP, EP = 당일 low, AF = af_step.
    새 극값이 나오면 AF += af_step (최대 af_max).

    high/low 결측 bar는 NaN이고 상태는 그대로 유지. 첫 bar는 NaN.

    Args:
        ohlcv: OHLCV DataFrame
        params: {
            "af_step": float (선택, 기본 0.02, 0 초과)
            "af_max": float (선택, 기본 0.2, af_step 이상)
        }

    Returns:
        pd.Series: SAR 값 (이름 "psar")
    """
    af_step = get_float(params, "af_step", Defaults.PSAR_AF_STEP, minimum=0.0)
    af_max = get_float(params, "af_max", Defaults.PSAR_AF_MAX, minimum=0.0)
    if af_step <= 0:
        raise InvalidParameterError(f"params['af_step']는 0보다 커야 합니다: {af_step}")
    if af_max < af_step:
        raise InvalidParameterError(f"af_max({af_max})는 af_step({af_step}) 이상이어야 합니다")

    high_series = get_column(ohlcv, "high")
    low_series = get_column(ohlcv, "low")
    n = check_same_length(high_series, low_series)

    highs = high_series.to_numpy()
    lows = low_series.to_numpy()
    result = np.full(n, np.nan)

    started = False
    uptrend = True
    sar = extreme = af = 0.0

    for i in range(1, n):
        h, l, prev_h, prev_l = highs[i], lows[i], highs[i - 1], lows[i - 1]
        if not np.isfinite([h, l, prev_h, prev_l]).all():
            continue

        if not started:
            started = True
            uptrend = True
            sar, extreme, af = prev_l, prev_h, af_step

        # 직전 두 bar (두 번째가 없거나 결측이면 직전 bar만)
        if i >= 2 and np.isfinite(lows[i - 2]) and np.isfinite(highs[i - 2]):
            prev_l2, prev_h2 = lows[i - 2], highs[i - 2]
        else:
            prev_l2, prev_h2 = prev_l, prev_h

        if uptrend:
            sar = min(sar + af * (extreme - sar), prev_l, prev_l2)
            if l < sar:
                uptrend = False
                sar, extreme, af = extreme, l, af_step
            elif h > extreme:
                extreme = h
                af = min(af + af_step, af_max)
        else:
            sar = max(sar - af * (sar - extreme), prev_h, prev_h2)
            if h > sar:
                uptrend = True
                sar, extreme, af = extreme, h, af_step
            elif l < extreme:
                extreme = l
                af = min(af + af_step, af_max)

        result[i] = sar

    return pd.Series(result, index=high_series.index, name="psar")


def vortex(ohlcv: pd.DataFrame, params: dict[str, Any]) -> tuple[pd.Series, pd.Series]:
    """Vortex Indicator

    VM+ = |high - 이전 low|, VM- = |low - 이전 high|
    VI+ = sum(VM+, period) / sum(TR, period), VI-도 동일. TR 합이 0이면 NaN.
    첫 bar에는 이전 bar가 없으므로 첫 유효값은 index period.

    params: {"period": int (선택, 기본 14)}

    Returns:
        (vi_plus_{period}, vi_minus_{period})
    """
    period = get_period(params, default=Defaults.VORTEX_PERIOD)

    high = get_column(ohlcv, "high")
    low = get_column(ohlcv, "low")
    close = get_column(ohlcv, "close")

    vm_plus = (high - low.shift(1)).abs()
    vm_minus = (low - high.shift(1)).abs()
    tr_sum = primitives.rolling_sum(primitives.true_range(high, low, close), period)

    vi_plus = primitives.safe_divide(primitives.rolling_sum(vm_plus, period), tr_sum)
    vi_minus = primitives.safe_divide(primitives.rolling_sum(vm_minus, period), tr_sum)

    return vi_plus.rename(f"vi_plus_{period}"), vi_minus.rename(f"vi_minus_{period}")


def ichimoku(
    ohlcv: pd.DataFrame,
    params: dict[str, Any],
) -> tuple[pd.Series, pd.Series, pd.Series, pd.Series]:
    """Ichimoku Cloud (일목균형표)

    각 선은 기간 최고가와 최저가의 중간값.
    선행스팬은 미래로 이동하지 않고 계산된 bar에 그대로 둠.
    후행스팬(chikou)은 미래 종가가 필요하므로 제공하지 않음.

    Args:
        ohlcv: OHLCV DataFrame
        params: {
            "tenkan_period": int (선택, 기본 9)
            "kijun_period": int (선택, 기본 26)
            "senkou_b_period": int (선택, 기본 52)
        }

    Returns:
        tuple[pd.Series, pd.Series, pd.Series, pd.Series]:
            - tenkan_sen: 전환선
            - kijun_sen: 기준선
            - senkou_span_a: 선행스팬 A = (전환선 + 기준선) / 2
            - senkou_span_b: 선행스팬 B
    """
    tenkan_period = get_period(params, "tenkan_period", Defaults.ICHIMOKU_TENKAN)
    kijun_period = get_period(params, "kijun_period", Defaults.ICHIMOKU_KIJUN)
    senkou_b_period = get_period(params, "senkou_b_period", Defaults.ICHIMOKU_SENKOU_B)

    high = get_column(ohlcv, "high")
    low = get_column(ohlcv, "low")

    def midpoint(period: int) -> pd.Series:
        return (primitives.rolling_max(high, period) + primitives.rolling_min(low, period)) / 2

    tenkan = midpoint(tenkan_period)
    kijun = midpoint(kijun_period)
    span_a = (tenkan + kijun) / 2
    span_b = midpoint(senkou_b_period)

    return (
        tenkan.rename("tenkan_sen"),
        kijun.rename("kijun_sen"),
        span_a.rename("senkou_span_a"),
        span_b.rename("senkou_span_b"),
    )
