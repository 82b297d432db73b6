"""
타입 정의 모듈

지표 계산에서 공유하는 Enum 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능 (YAML 설정값과 1:1 매핑)
"""

from enum import Enum


class EmaSeed(str, Enum):
    """EMA 초기값(seed) 정책

    SMA: 첫 period개 값의 단순평균을 index period-1에 배치 (표준)
    FIRST_VALUE: 첫 유효값을 그대로 seed로 사용 (warm-up 없음)

    MACD처럼 EMA를 여러 번 합성하는 지표는 반드시 하나의 정책만 사용
    """

    SMA = "sma"
    FIRST_VALUE = "first_value"


class PriceSource(str, Enum):
    """표준 OHLCV 컬럼명"""

    OPEN = "open"
    HIGH = "high"
    LOW = "low"
    CLOSE = "close"
    VOLUME = "volume"
