"""
Math Primitives

모든 지표가 공유하는 rolling-window 계산 엔진.
SMA, EMA, WMA, Wilder smoothing, rolling std/sum/max/min,
True Range, Directional Movement, Rate of Change.

공통 규칙:
    - 입력/출력은 같은 길이, 같은 index의 pd.Series (float64)
    - 결측은 NaN. ±inf 입력은 결측으로 취급하고 출력에 inf를 남기지 않음
    - warm-up 구간은 NaN (0이나 임의 값으로 채우지 않음)
    - window > 길이는 에러가 아님 (전체 NaN)
    - 재귀 smoothing(EMA, Wilder)은 결측을 만나면 해당 위치를 NaN으로 두고
      다음 유효 구간에서 다시 seed함 (NaN이 이후 전체로 전파되지 않음)
    - 작업 메모리는 입력 길이에 비례 (길이 x window 크기의 임시 배열을 만들지 않음)
"""

import logging
from collections import deque

import numpy as np
import pandas as pd

from core.types import EmaSeed
from indicators.columns import check_same_length, validate_period

logger = logging.getLogger(__name__)


def _to_array(values: pd.Series) -> np.ndarray:
    arr = values.to_numpy(dtype="float64", copy=True)
    arr[~np.isfinite(arr)] = np.nan
    return arr


def _to_series(arr: np.ndarray, index: pd.Index) -> pd.Series:
    arr[~np.isfinite(arr)] = np.nan
    return pd.Series(arr, index=index, dtype="float64")


def _check_window(values: pd.Series, period: int) -> int:
    period = validate_period(period)
    n = check_same_length(values)
    if period > n:
        logger.debug(f"window({period}) > 데이터 길이({n}): 전체 warm-up (NaN)")
    return period


def _rolling(values: pd.Series, period: int):
    """min_periods=period 인 trailing window

    window에 NaN이 하나라도 있으면 유효 개수가 period 미만이므로 결과도 NaN.
    """
    clean = pd.Series(_to_array(values), index=values.index)
    return clean.rolling(window=period, min_periods=period)


def _finish(result: pd.Series) -> pd.Series:
    return _to_series(result.to_numpy(dtype="float64", copy=True), result.index)


def simple_moving_average(values: pd.Series, period: int) -> pd.Series:
    """단순 이동평균

    output[i] = mean(values[i-period+1 .. i]), i < period-1 이면 NaN.
    window 안에 결측이 있으면 해당 위치는 NaN (건너뛰지 않음).
    """
    period = _check_window(values, period)
    return _finish(_rolling(values, period).mean())


def _smooth(values: pd.Series, period: int, alpha: float, seed: EmaSeed) -> pd.Series:
    """EMA/Wilder 공통 재귀식: out[i] = alpha*x[i] + (1-alpha)*out[i-1]

    seed:
        SMA - 연속 유효값 period개가 모이면 그 평균으로 seed
        FIRST_VALUE - 첫 유효값으로 seed
    결측을 만나면 상태를 초기화하고 다시 seed.
    """
    arr = _to_array(values)
    out = np.full(len(arr), np.nan)

    prev = np.nan
    run = 0  # 연속 유효값 개수

    for i, x in enumerate(arr):
        if np.isnan(x):
            prev = np.nan
            run = 0
            continue

        run += 1

        if np.isnan(prev):
            if seed is EmaSeed.FIRST_VALUE:
                prev = x
            elif run >= period:
                prev = arr[i - period + 1:i + 1].mean()
            else:
                continue
        else:
            prev = alpha * x + (1.0 - alpha) * prev

        out[i] = prev

    return _to_series(out, values.index)


def exponential_moving_average(
    values: pd.Series,
    period: int,
    seed: EmaSeed = EmaSeed.SMA,
) -> pd.Series:
    """지수 이동평균 (alpha = 2/(period+1))

    기본 seed는 SMA: output[period-1] = 첫 period개 값의 평균.
    EmaSeed.FIRST_VALUE는 output[0] = values[0]인 별도 변형.
    """
    period = _check_window(values, period)
    seed = EmaSeed(seed)
    return _smooth(values, period, 2.0 / (period + 1), seed)


def wilder_smoothing(values: pd.Series, period: int) -> pd.Series:
    """Wilder smoothing (alpha = 1/period, SMA seed)

    RSI 평균 이득/손실, ATR, ADX에서 공통으로 사용.
    """
    period = _check_window(values, period)
    return _smooth(values, period, 1.0 / period, EmaSeed.SMA)


def weighted_moving_average(values: pd.Series, period: int) -> pd.Series:
    """선형 가중 이동평균 (가장 최근 값의 가중치 = period)"""
    period = _check_window(values, period)
    arr = _to_array(values)
    out = np.full(len(arr), np.nan)

    if period <= len(arr):
        weights = np.arange(1, period + 1, dtype="float64")
        # convolve는 kernel을 뒤집으므로 최근 값 가중치가 kernel[0]
        out[period - 1:] = np.convolve(arr, weights[::-1], mode="valid") / weights.sum()

    return _to_series(out, values.index)


def rolling_std(values: pd.Series, period: int) -> pd.Series:
    """Rolling 모표준편차 (ddof=0)"""
    period = _check_window(values, period)
    return _finish(_rolling(values, period).std(ddof=0))


def rolling_sum(values: pd.Series, period: int) -> pd.Series:
    period = _check_window(values, period)
    return _finish(_rolling(values, period).sum())


def rolling_max(values: pd.Series, period: int) -> pd.Series:
    period = _check_window(values, period)
    return _finish(_rolling(values, period).max())


def rolling_min(values: pd.Series, period: int) -> pd.Series:
    period = _check_window(values, period)
    return _finish(_rolling(values, period).min())


def rolling_mean_deviation(values: pd.Series, period: int) -> pd.Series:
    """Rolling 평균 절대 편차: mean(|x - mean(window)|)

    CCI 분모에 사용. window에 결측이 있으면 NaN.
    """
    period = _check_window(values, period)
    result = _rolling(values, period).apply(
        lambda w: np.abs(w - w.mean()).mean(),
        raw=True,
    )
    return _finish(result)


def periods_since_extreme(values: pd.Series, period: int, highest: bool = True) -> pd.Series:
    """trailing period+1개 값에서 최고(최저)값 이후 경과한 bar 수

    동률이면 가장 최근 위치를 사용. window에 NaN이 있으면 NaN.
    monotonic deque로 O(N) 계산.
    """
    period = _check_window(values, period)
    arr = _to_array(values)
    size = period + 1
    out = np.full(len(arr), np.nan)

    candidates: deque[int] = deque()
    last_missing = -1

    for i, x in enumerate(arr):
        if np.isnan(x):
            last_missing = i
            candidates.clear()
            continue

        # 동률인 이전 값도 제거 -> 가장 최근 위치가 남음
        while candidates and (arr[candidates[-1]] <= x if highest else arr[candidates[-1]] >= x):
            candidates.pop()
        candidates.append(i)

        while candidates[0] <= i - size:
            candidates.popleft()

        if i >= size - 1 and last_missing <= i - size:
            out[i] = i - candidates[0]

    return _to_series(out, values.index)


def true_range(high: pd.Series, low: pd.Series, close: pd.Series) -> pd.Series:
    """True Range

    TR[i] = max(high-low, |high-prev_close|, |low-prev_close|)
    TR[0] = high[0]-low[0] (이전 종가 없음). 이전 종가가 결측이면 high-low.
    """
    check_same_length(high, low, close)
    h, l, c = _to_array(high), _to_array(low), _to_array(close)

    prev_close = np.concatenate(([np.nan], c[:-1]))
    hl = h - l
    hc = np.abs(h - prev_close)
    lc = np.abs(l - prev_close)

    tr = np.maximum(hl, np.maximum(hc, lc))
    tr = np.where(np.isnan(prev_close), hl, tr)

    return _to_series(tr, high.index)


def directional_movement(high: pd.Series, low: pd.Series) -> tuple[pd.Series, pd.Series]:
    """+DM / -DM

    UpMove = high[i]-high[i-1], DownMove = low[i-1]-low[i]
    +DM = UpMove (UpMove > DownMove and UpMove > 0) else 0
    -DM = DownMove (DownMove > UpMove and DownMove > 0) else 0
    index 0은 둘 다 0.
    """
    n = check_same_length(high, low)
    h, l = _to_array(high), _to_array(low)

    up = np.full(n, np.nan)
    down = np.full(n, np.nan)
    up[1:] = h[1:] - h[:-1]
    down[1:] = l[:-1] - l[1:]

    with np.errstate(invalid="ignore"):
        plus = np.where((up > down) & (up > 0), up, 0.0)
        minus = np.where((down > up) & (down > 0), down, 0.0)

    missing = np.isnan(up) | np.isnan(down)
    plus[missing] = np.nan
    minus[missing] = np.nan
    plus[0] = 0.0
    minus[0] = 0.0

    return _to_series(plus, high.index), _to_series(minus, high.index)


def _lagged(arr: np.ndarray, period: int) -> np.ndarray:
    prev = np.full(len(arr), np.nan)
    if period < len(arr):
        prev[period:] = arr[:-period]
    return prev


def rate_of_change(values: pd.Series, period: int) -> pd.Series:
    """Rate of Change (%)

    100 * (x[i] - x[i-period]) / x[i-period]
    i < period 또는 x[i-period] == 0 이면 NaN (예외 없음).
    """
    period = _check_window(values, period)
    arr = _to_array(values)
    prev = _lagged(arr, period)

    with np.errstate(divide="ignore", invalid="ignore"):
        roc = 100.0 * (arr - prev) / prev
    roc[prev == 0] = np.nan

    return _to_series(roc, values.index)


def lag_ratio(values: pd.Series, period: int) -> pd.Series:
    """x[i] / x[i-period] (ROCR). i < period 또는 x[i-period] == 0 이면 NaN."""
    period = _check_window(values, period)
    arr = _to_array(values)
    prev = _lagged(arr, period)

    with np.errstate(divide="ignore", invalid="ignore"):
        ratio = arr / prev
    ratio[prev == 0] = np.nan

    return _to_series(ratio, values.index)


def safe_divide(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    """분모가 0인 위치는 NaN (inf가 새지 않도록)"""
    check_same_length(numerator, denominator)
    num, den = _to_array(numerator), _to_array(denominator)

    with np.errstate(divide="ignore", invalid="ignore"):
        result = num / den
    result[den == 0] = np.nan

    return _to_series(result, numerator.index)
