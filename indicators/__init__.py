"""
Indicators - 기술적 지표 라이브러리

OHLCV DataFrame을 입력으로 받아 pd.Series 또는 tuple[pd.Series, ...]를 반환하는
순수 함수들을 제공합니다. 입력 DataFrame은 수정하지 않습니다.

사용법:
    from indicators import sma, ema, atr, rsi, macd

    # 단일 리턴 indicator
    sma_20 = sma(ohlcv, {"period": 20})
    atr_14 = atr(ohlcv, {"period": 14})
    rsi_14 = rsi(ohlcv, {"period": 14})

    # 복수 리턴 indicator
    macd_line, signal, histogram = macd(ohlcv, {})
    upper, middle, lower = bollinger_bands(ohlcv, {"period": 20})
    aroon_up, aroon_down = aroon(ohlcv, {"period": 25})

    # 고정 지표 세트 일괄 계산 (새 DataFrame 반환)
    enriched = add_indicators(ohlcv)

OHLCV DataFrame 표준:
    - Index: 임의 (DatetimeIndex 권장). 출력은 입력 index를 그대로 사용
    - Columns: open, high, low, close, volume (숫자형, 소문자, 대소문자 구분)
    - 결측/warm-up 값은 NaN
"""

from indicators.errors import (
    IndicatorError,
    InvalidParameterError,
    ColumnNotFoundError,
    InsufficientDataError,
)

# Moving Averages
from indicators.moving_averages import (
    sma,
    ema,
    wma,
    hma,
    vwap,
)

# Momentum / Oscillators
from indicators.momentum import (
    rsi,
    macd,
    stochastic,
    williams_r,
    roc,
    momentum,
    cci,
    rocp,
    rocr,
    rocr100,
    cmo,
    bop,
    ppo,
    trix,
    stoch_rsi,
    ultimate_oscillator,
    dpo,
)

# Volatility Indicators
from indicators.volatility import (
    true_range,
    atr,
    natr,
    stddev,
    bollinger_bands,
    percent_b,
    gk_volatility,
    keltner_channels,
    donchian_channels,
    hist_volatility,
)

# Trend Indicators
from indicators.trend import (
    plus_dm,
    minus_dm,
    plus_di,
    minus_di,
    adx,
    adxr,
    aroon,
    aroon_oscillator,
    psar,
    vortex,
    ichimoku,
)

# Volume Indicators
from indicators.volume import (
    obv,
    cmf,
    adl,
    mfi,
    pvt,
    eom,
)

# Price Transform
from indicators.price_transform import (
    typical_price,
    median_price,
    average_price,
    weighted_close,
)

# Candlestick Patterns
from indicators.patterns import (
    doji,
    hammer,
    shooting_star,
    bullish_engulfing,
    bearish_engulfing,
)

# Aggregator
from indicators.aggregate import (
    compute_indicators,
    add_indicators,
)

__all__ = [
    # Errors
    "IndicatorError",
    "InvalidParameterError",
    "ColumnNotFoundError",
    "InsufficientDataError",
    # Moving Averages
    "sma",
    "ema",
    "wma",
    "hma",
    "vwap",
    # Momentum
    "rsi",
    "macd",
    "stochastic",
    "williams_r",
    "roc",
    "momentum",
    "cci",
    "rocp",
    "rocr",
    "rocr100",
    "cmo",
    "bop",
    "ppo",
    "trix",
    "stoch_rsi",
    "ultimate_oscillator",
    "dpo",
    # Volatility
    "true_range",
    "atr",
    "natr",
    "stddev",
    "bollinger_bands",
    "percent_b",
    "gk_volatility",
    "keltner_channels",
    "donchian_channels",
    "hist_volatility",
    # Trend
    "plus_dm",
    "minus_dm",
    "plus_di",
    "minus_di",
    "adx",
    "adxr",
    "aroon",
    "aroon_oscillator",
    "psar",
    "vortex",
    "ichimoku",
    # Volume
    "obv",
    "cmf",
    "adl",
    "mfi",
    "pvt",
    "eom",
    # Price Transform
    "typical_price",
    "median_price",
    "average_price",
    "weighted_close",
    # Patterns
    "doji",
    "hammer",
    "shooting_star",
    "bullish_engulfing",
    "bearish_engulfing",
    # Aggregator
    "compute_indicators",
    "add_indicators",
]
