"""
설정 로더

indicators.yaml 로드 및 aggregator 파라미터(IndicatorSettings) 생성
"""

import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from core.constants import Defaults, Paths
from core.types import EmaSeed


@dataclass(frozen=True)
class IndicatorSettings:
    """add_indicators()가 사용하는 고정 지표 세트의 파라미터

    불변 데이터 구조로 설정 변경 방지
    """

    sma_periods: tuple[int, ...] = Defaults.SMA_PERIODS
    ema_periods: tuple[int, ...] = Defaults.EMA_PERIODS
    rsi_period: int = Defaults.RSI_PERIOD
    macd_fast: int = Defaults.MACD_FAST
    macd_slow: int = Defaults.MACD_SLOW
    macd_signal: int = Defaults.MACD_SIGNAL
    bb_period: int = Defaults.BB_PERIOD
    bb_std_dev: float = Defaults.BB_STD_DEV
    atr_period: int = Defaults.ATR_PERIOD
    gk_period: int = Defaults.GK_PERIOD
    adx_period: int = Defaults.ADX_PERIOD
    cmf_period: int = Defaults.CMF_PERIOD
    close_lags: tuple[int, ...] = Defaults.CLOSE_LAGS
    returns_lag: int = Defaults.RETURNS_LAG
    volatility_window: int = Defaults.VOLATILITY_WINDOW
    ema_seed: EmaSeed = EmaSeed(Defaults.EMA_SEED)


class SettingsLoadError(Exception):
    """indicators.yaml 로드 실패 예외"""

    pass


_PERIOD_FIELDS = (
    "rsi_period",
    "macd_fast",
    "macd_slow",
    "macd_signal",
    "bb_period",
    "atr_period",
    "gk_period",
    "adx_period",
    "cmf_period",
    "returns_lag",
    "volatility_window",
)


def _parse_period(key: str, value: Any) -> int:
    # bool은 int의 하위 클래스이므로 명시적으로 제외
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise SettingsLoadError(
            f"'{key}'는 1 이상의 정수여야 합니다: {value!r}"
        )
    return value


def _parse_periods(key: str, value: Any) -> tuple[int, ...]:
    if isinstance(value, int) and not isinstance(value, bool):
        value = [value]
    if not isinstance(value, list) or not value:
        raise SettingsLoadError(
            f"'{key}'는 정수 리스트여야 합니다: {value!r}"
        )
    return tuple(_parse_period(key, v) for v in value)


def parse_indicator_settings(data: dict[str, Any]) -> IndicatorSettings:
    """dict → IndicatorSettings 변환 및 검증

    Args:
        data: indicators 섹션 내용

    Returns:
        IndicatorSettings 인스턴스

    Raises:
        SettingsLoadError: 알 수 없는 키 또는 잘못된 기간 값
        ValueError: 유효하지 않은 ema_seed
    """
    known = {f.name for f in fields(IndicatorSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise SettingsLoadError(f"알 수 없는 설정 키: {unknown}")

    kwargs: dict[str, Any] = {}

    for key in ("sma_periods", "ema_periods", "close_lags"):
        if key in data:
            kwargs[key] = _parse_periods(key, data[key])

    for key in _PERIOD_FIELDS:
        if key in data:
            kwargs[key] = _parse_period(key, data[key])

    if "bb_std_dev" in data:
        std_dev = data["bb_std_dev"]
        if (
            isinstance(std_dev, bool)
            or not isinstance(std_dev, (int, float))
            or not math.isfinite(std_dev)
            or std_dev < 0
        ):
            raise SettingsLoadError(
                f"'bb_std_dev'는 0 이상의 숫자여야 합니다: {std_dev!r}"
            )
        kwargs["bb_std_dev"] = float(std_dev)

    if "ema_seed" in data:
        seed_str = data["ema_seed"]
        try:
            kwargs["ema_seed"] = EmaSeed(seed_str)
        except ValueError as e:
            valid_seeds = [s.value for s in EmaSeed]
            raise ValueError(
                f"유효하지 않은 ema_seed입니다: '{seed_str}'. "
                f"유효한 값: {valid_seeds}"
            ) from e

    return IndicatorSettings(**kwargs)


def load_indicator_settings(path: Path | None = None) -> IndicatorSettings:
    """indicators.yaml 파일 로드

    path를 생략했고 기본 경로에 파일이 없으면 기본값 사용.

    Args:
        path: indicators.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        IndicatorSettings 인스턴스

    Raises:
        SettingsLoadError: 명시한 파일이 없거나 형식이 잘못된 경우
        ValueError: 유효하지 않은 ema_seed인 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE
        if not path.exists():
            return IndicatorSettings()

    if not path.exists():
        raise SettingsLoadError(f"indicators.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"indicators.yaml 파싱 실패: {e}") from e

    if data is None:
        return IndicatorSettings()

    if not isinstance(data, dict):
        raise SettingsLoadError("indicators.yaml 최상위는 매핑이어야 합니다")

    section = data.get("indicators")
    if section is None:
        raise SettingsLoadError("indicators.yaml에 'indicators' 섹션이 없습니다")
    if not isinstance(section, dict):
        raise SettingsLoadError("'indicators' 섹션은 매핑이어야 합니다")

    return parse_indicator_settings(section)
