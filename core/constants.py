"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """지표 기본 파라미터

    indicators.yaml이 없거나 키가 생략되었을 때 사용하는 값
    """

    SOURCE: str = "close"

    # Moving Averages
    SMA_PERIODS: tuple[int, ...] = (20, 50)
    EMA_PERIODS: tuple[int, ...] = (20,)

    # Oscillators
    RSI_PERIOD: int = 14
    MACD_FAST: int = 12
    MACD_SLOW: int = 26
    MACD_SIGNAL: int = 9
    STOCH_K_PERIOD: int = 14
    STOCH_D_PERIOD: int = 3
    STOCH_SMOOTH_K: int = 3
    ROC_PERIOD: int = 10
    CCI_PERIOD: int = 20
    CMO_PERIOD: int = 14
    TRIX_PERIOD: int = 15
    STOCH_RSI_PERIOD: int = 14
    ULTOSC_SHORT: int = 7
    ULTOSC_MEDIUM: int = 14
    ULTOSC_LONG: int = 28
    DPO_PERIOD: int = 20

    # Volatility
    BB_PERIOD: int = 20
    BB_STD_DEV: float = 2.0
    ATR_PERIOD: int = 14
    GK_PERIOD: int = 10
    KELTNER_PERIOD: int = 20
    KELTNER_MULTIPLIER: float = 2.0
    DONCHIAN_PERIOD: int = 20
    HIST_VOL_PERIOD: int = 20
    TRADING_PERIODS: int = 252  # 연율화 기준 (일봉)

    # Trend
    ADX_PERIOD: int = 14
    AROON_PERIOD: int = 25
    VORTEX_PERIOD: int = 14
    PSAR_AF_STEP: float = 0.02
    PSAR_AF_MAX: float = 0.2
    ICHIMOKU_TENKAN: int = 9
    ICHIMOKU_KIJUN: int = 26
    ICHIMOKU_SENKOU_B: int = 52

    # Volume
    CMF_PERIOD: int = 20
    MFI_PERIOD: int = 14
    EOM_PERIOD: int = 14

    # Aggregator price dynamics
    CLOSE_LAGS: tuple[int, ...] = (5, 15, 30)
    RETURNS_LAG: int = 5
    VOLATILITY_WINDOW: int = 15

    # Patterns
    DOJI_BODY_RATIO: float = 0.1

    EMA_SEED: str = "sma"


class Numeric:
    """수치 안정성 관련 상수"""

    # 밴드 폭 등 분모가 0인지 판단하는 상대 허용 오차
    ZERO_TOLERANCE: float = 1e-12

    # CCI 상수 (Lambert)
    CCI_CONSTANT: float = 0.015


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리 (indicators.yaml은 패키지 데이터로 함께 설치됨)
    CONFIG_DIR: Path = PROJECT_ROOT / "core" / "config"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "indicators.yaml"
