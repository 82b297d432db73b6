"""
Volume Indicators

거래량 기반 지표: OBV, CMF, A/D Line, MFI, PVT, Ease of Movement
"""

from typing import Any

import numpy as np
import pandas as pd

from core.constants import Defaults
from indicators import primitives
from indicators.columns import check_same_length, get_column, get_period
from indicators.price_transform import typical_price


def obv(ohlcv: pd.DataFrame, params: dict[str, Any] | None = None) -> pd.Series:
    """On-Balance Volume

    OBV[0] = volume[0]
    종가 상승 시 +volume, 하락 시 -volume, 같으면 유지.
    close/이전 close/volume 중 결측이 있는 bar는 NaN을 출력하고
    누적값에는 반영하지 않음 (이후 bar는 기존 누적값에서 계속).

    Args:
        ohlcv: OHLCV DataFrame
        params: 사용하지 않음

    Returns:
        pd.Series: OBV 값 (이름 "obv")
    """
    close_series = get_column(ohlcv, "close")
    volume_series = get_column(ohlcv, "volume")
    n = check_same_length(close_series, volume_series)

    closes = close_series.to_numpy()
    volumes = volume_series.to_numpy()

    result = np.full(n, np.nan)
    total = 0.0

    if np.isfinite(volumes[0]):
        total = volumes[0]
        result[0] = total

    for i in range(1, n):
        curr_close, prev_close, vol = closes[i], closes[i - 1], volumes[i]
        if not (np.isfinite(curr_close) and np.isfinite(prev_close) and np.isfinite(vol)):
            continue

        if curr_close > prev_close:
            total += vol
        elif curr_close < prev_close:
            total -= vol

        result[i] = total

    return pd.Series(result, index=close_series.index, name="obv")


def _money_flow_volume(ohlcv: pd.DataFrame) -> tuple[pd.Series, pd.Series]:
    """(Money Flow Volume, volume)

    Money Flow Multiplier = ((close - low) - (high - close)) / (high - low)
    high == low 이면 multiplier = 0.
    """
    high = get_column(ohlcv, "high")
    low = get_column(ohlcv, "low")
    close = get_column(ohlcv, "close")
    volume = get_column(ohlcv, "volume")

    bar_range = high - low
    multiplier = primitives.safe_divide((close - low) - (high - close), bar_range)
    multiplier = multiplier.where(bar_range != 0, 0.0)
    multiplier = multiplier.where(bar_range.notna() & close.notna())

    return multiplier * volume, volume


def cmf(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Chaikin Money Flow

    CMF = sum(Money Flow Volume, period) / sum(volume, period)
    거래량 합이 0이면 NaN.

    Args:
        ohlcv: OHLCV DataFrame
        params: {
            "period": int (선택, 기본 20)
        }

    Returns:
        pd.Series: CMF 값 (-1 ~ 1, 이름 "cmf_{period}")

    Example:
        >>> cmf_20 = cmf(ohlcv, {"period": 20})
    """
    period = get_period(params, default=Defaults.CMF_PERIOD)

    mf_volume, volume = _money_flow_volume(ohlcv)

    result = primitives.safe_divide(
        primitives.rolling_sum(mf_volume, period),
        primitives.rolling_sum(volume, period),
    )
    return result.rename(f"cmf_{period}")


def adl(ohlcv: pd.DataFrame, params: dict[str, Any] | None = None) -> pd.Series:
    """Accumulation/Distribution Line (Money Flow Volume 누적합)

    결측 bar는 NaN, 누적에는 0으로 반영.
    """
    mf_volume, _ = _money_flow_volume(ohlcv)

    result = mf_volume.fillna(0.0).cumsum().where(mf_volume.notna())
    return result.rename("adl")


def mfi(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Money Flow Index (거래량 가중 RSI)

    Typical Price 상승 bar의 money flow를 positive, 하락 bar를 negative로 분류.
    negative 합이 0이면 100 (positive도 0이면 50).

    params: {"period": int (선택, 기본 14)}
    """
    period = get_period(params, default=Defaults.MFI_PERIOD)

    tp = typical_price(ohlcv)
    raw_flow = tp * get_column(ohlcv, "volume")
    direction = tp.diff()

    positive = raw_flow.where(direction > 0, 0.0).where(direction.notna() & raw_flow.notna())
    negative = raw_flow.where(direction < 0, 0.0).where(direction.notna() & raw_flow.notna())

    pos_sum = primitives.rolling_sum(positive, period)
    neg_sum = primitives.rolling_sum(negative, period)

    ratio = primitives.safe_divide(pos_sum, neg_sum)
    mfi_values = 100 - (100 / (1 + ratio))
    mfi_values = mfi_values.mask((neg_sum == 0) & (pos_sum > 0), 100.0)
    mfi_values = mfi_values.mask((neg_sum == 0) & (pos_sum == 0), 50.0)

    return mfi_values.rename(f"mfi_{period}")


def pvt(ohlcv: pd.DataFrame, params: dict[str, Any] | None = None) -> pd.Series:
    """Price Volume Trend

    PVT[0] = 0, PVT[i] = PVT[i-1] + volume[i] * (close[i] - close[i-1]) / close[i-1]
    이전 종가가 0이면 해당 bar는 변화 없음. 결측 bar는 NaN이고 누적에는 반영하지 않음.
    """
    close = get_column(ohlcv, "close")
    volume = get_column(ohlcv, "volume")
    prev_close = close.shift(1)

    flow = primitives.safe_divide(close - prev_close, prev_close) * volume
    flow = flow.mask(prev_close == 0, 0.0)
    valid = close.notna() & volume.notna()
    flow = flow.where(valid)
    if valid.iloc[0]:
        flow.iloc[0] = 0.0

    result = flow.fillna(0.0).cumsum().where(flow.notna())
    return result.rename("pvt")


def eom(ohlcv: pd.DataFrame, params: dict[str, Any]) -> pd.Series:
    """Ease of Movement (SMA)

    distance = 중간가격[i] - 중간가격[i-1], 중간가격 = (high + low) / 2
    EOM[i] = distance / (volume / (high - low)), period 동안 SMA.
    거래량이나 high - low가 0인 bar는 NaN.

    params: {"period": int (선택, 기본 14)}
    """
    period = get_period(params, default=Defaults.EOM_PERIOD)

    high = get_column(ohlcv, "high")
    low = get_column(ohlcv, "low")
    volume = get_column(ohlcv, "volume")

    bar_range = high - low
    distance = ((high + low) / 2).diff()
    box_ratio = primitives.safe_divide(volume, bar_range)

    per_bar = primitives.safe_divide(distance, box_ratio)
    result = primitives.simple_moving_average(per_bar, period)

    return result.rename(f"eom_{period}")
