"""
컬럼 접근 및 파라미터 검증

문자열 컬럼명 조회를 타입이 있는 접근자로 감싸서
없는 컬럼은 ColumnNotFoundError, 빈 입력은 InsufficientDataError로 변환.
컬럼명은 대소문자를 구분하며 정규화하지 않음.
"""

import math
import numbers
from typing import Any

import numpy as np
import pandas as pd

from core.constants import Defaults
from core.types import EmaSeed
from indicators.errors import (
    ColumnNotFoundError,
    InsufficientDataError,
    InvalidParameterError,
)


def get_column(ohlcv: pd.DataFrame, name: str) -> pd.Series:
    """컬럼을 float64 Series로 반환

    Args:
        ohlcv: OHLCV DataFrame
        name: 컬럼명 (정확히 일치해야 함)

    Returns:
        pd.Series: float64로 변환된 컬럼 (원본 index 유지, ±inf는 NaN)

    Raises:
        ColumnNotFoundError: 컬럼이 없을 때
        InsufficientDataError: 행이 0개일 때
        InvalidParameterError: 숫자로 변환할 수 없는 컬럼일 때
    """
    if name not in ohlcv.columns:
        raise ColumnNotFoundError(name, [str(c) for c in ohlcv.columns])

    if len(ohlcv) == 0:
        raise InsufficientDataError(f"입력 데이터가 비어 있습니다 (column='{name}')")

    try:
        values = ohlcv[name].astype("float64")
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"컬럼 '{name}'을 숫자로 변환할 수 없습니다: {e}") from e

    # ±inf는 결측으로 취급
    return values.replace([np.inf, -np.inf], np.nan)


def require_columns(ohlcv: pd.DataFrame, names: list[str]) -> None:
    """필수 컬럼 존재 여부를 한 번에 검증 (계산 전에 호출)

    Raises:
        ColumnNotFoundError: 첫 번째로 누락된 컬럼
    """
    available = [str(c) for c in ohlcv.columns]
    for name in names:
        if name not in ohlcv.columns:
            raise ColumnNotFoundError(name, available)


def get_source(params: dict[str, Any], default: str = Defaults.SOURCE) -> str:
    """params['source'] 반환 (기본 close)"""
    source = params.get("source", default)
    if not isinstance(source, str):
        raise InvalidParameterError(f"params['source']는 문자열이어야 합니다: {source!r}")
    return source


def get_seed(params: dict[str, Any]) -> EmaSeed:
    """params['seed'] 반환 (기본 sma)"""
    value = params.get("seed", EmaSeed.SMA)
    try:
        return EmaSeed(value)
    except ValueError as e:
        valid = [s.value for s in EmaSeed]
        raise InvalidParameterError(f"params['seed']는 {valid} 중 하나여야 합니다: {value!r}") from e


def validate_period(period: Any, name: str = "period") -> int:
    """window 값을 1 이상의 int로 검증

    정수형 float(20.0)는 허용, bool과 소수(20.5), inf/nan은 거부.

    Raises:
        InvalidParameterError: 정수가 아니거나 1 미만일 때
    """
    if isinstance(period, bool) or not isinstance(period, numbers.Real):
        raise InvalidParameterError(f"{name}는 정수여야 합니다: {period!r}")

    if not math.isfinite(period):
        raise InvalidParameterError(f"{name}는 유한한 값이어야 합니다: {period!r}")

    if int(period) != period:
        raise InvalidParameterError(f"{name}는 정수여야 합니다: {period!r}")

    period = int(period)
    if period < 1:
        raise InvalidParameterError(f"{name}는 1 이상이어야 합니다: {period}")

    return period


def get_period(params: dict[str, Any], key: str = "period", default: int | None = None) -> int:
    """params에서 기간 파라미터 추출 및 검증

    Args:
        params: 지표 파라미터
        key: 파라미터 키
        default: 기본값 (None이면 필수 파라미터)

    Raises:
        InvalidParameterError: 필수 파라미터 누락 또는 유효하지 않은 값
    """
    period = params.get(key, default)
    if period is None:
        raise InvalidParameterError(f"params['{key}'] is required")
    return validate_period(period, key)


def get_float(
    params: dict[str, Any],
    key: str,
    default: float,
    minimum: float | None = None,
) -> float:
    """params에서 float 파라미터 추출 (배수, 비율 등)"""
    value = params.get(key, default)
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidParameterError(f"params['{key}']는 숫자여야 합니다: {value!r}")

    value = float(value)
    if not math.isfinite(value):
        raise InvalidParameterError(f"params['{key}']는 유한한 값이어야 합니다: {value}")

    if minimum is not None and value < minimum:
        raise InvalidParameterError(f"params['{key}']는 {minimum} 이상이어야 합니다: {value}")

    return value


def check_same_length(*series: pd.Series) -> int:
    """다중 시리즈 입력의 길이 일치 검증

    Returns:
        공통 길이

    Raises:
        InvalidParameterError: 길이가 서로 다를 때 (잘라내지 않음)
        InsufficientDataError: 길이가 0일 때
    """
    lengths = {len(s) for s in series}
    if len(lengths) > 1:
        raise InvalidParameterError(f"입력 시리즈 길이가 일치하지 않습니다: {[len(s) for s in series]}")

    length = lengths.pop() if lengths else 0
    if length == 0:
        raise InsufficientDataError("입력 데이터가 비어 있습니다")

    return length
