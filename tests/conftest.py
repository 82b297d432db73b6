"""
pytest 공통 fixture 정의

설정 파일 로딩 및 OHLCV 지표 테스트용 fixture
"""

import tempfile
from pathlib import Path

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 indicators.yaml 파일 생성"""
    settings_content = """# 테스트용 indicators.yaml
indicators:
  sma_periods: [5, 10]
  ema_periods: 8
  rsi_period: 7
  macd_fast: 6
  macd_slow: 13
  macd_signal: 4
  bb_period: 10
  bb_std_dev: 1.5
  atr_period: 7
  gk_period: 5
  adx_period: 7
  cmf_period: 10
  ema_seed: first_value
"""
    settings_path = temp_dir / "indicators.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture
def temp_settings_file_unknown_key(temp_dir: Path) -> Path:
    """알 수 없는 키가 있는 indicators.yaml 파일 생성"""
    settings_content = """indicators:
  rsi_period: 14
  rsi_smoothing: wilder
"""
    settings_path = temp_dir / "indicators_unknown.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture
def ohlcv() -> pd.DataFrame:
    """100개 bar의 랜덤워크 OHLCV (seed 고정)"""
    rng = np.random.default_rng(42)
    n = 100

    closes = 100 + np.cumsum(rng.normal(0, 1, n))
    opens = closes + rng.normal(0, 0.3, n)
    highs = np.maximum(opens, closes) + rng.uniform(0.1, 1.0, n)
    lows = np.minimum(opens, closes) - rng.uniform(0.1, 1.0, n)
    volumes = rng.uniform(1000, 5000, n)

    index = pd.date_range("2024-01-01", periods=n, freq="5min", tz="UTC")
    return pd.DataFrame({
        "open": opens,
        "high": highs,
        "low": lows,
        "close": closes,
        "volume": volumes,
    }, index=index)
