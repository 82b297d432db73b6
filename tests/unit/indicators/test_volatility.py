"""
Volatility Indicators 테스트

True Range, ATR, NATR, StdDev, Bollinger Bands, %B, Garman-Klass, Keltner, Donchian, Historical Volatility 테스트
"""

import math

import pytest
import pandas as pd
import numpy as np
from datetime import datetime, timezone, timedelta

from indicators.errors import InvalidParameterError
from indicators.moving_averages import ema, sma
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


def create_sample_ohlcv(num_rows: int = 50) -> pd.DataFrame:
    """테스트용 OHLCV DataFrame 생성"""
    base_time = datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)

    times = [base_time + timedelta(minutes=5 * i) for i in range(num_rows)]

    base_price = 100.0
    closes = [base_price + i * 0.5 + np.sin(i / 5) * 2 for i in range(num_rows)]
    highs = [c + 1.0 for c in closes]
    lows = [c - 1.0 for c in closes]
    opens = [c - 0.1 for c in closes]
    volumes = [1000000.0 + i * 10000 for i in range(num_rows)]

    df = pd.DataFrame({
        "time": times,
        "open": opens,
        "high": highs,
        "low": lows,
        "close": closes,
        "volume": volumes,
    })

    df["time"] = pd.to_datetime(df["time"], utc=True)
    df = df.set_index("time")

    return df


def create_constant_ohlcv(
    num_rows: int = 20,
    high: float = 102.0,
    low: float = 98.0,
    close: float = 100.0,
) -> pd.DataFrame:
    """일정한 가격 범위의 OHLCV DataFrame 생성"""
    base_time = datetime(2026, 1, 1, tzinfo=timezone.utc)
    df = pd.DataFrame({
        "time": [base_time + timedelta(minutes=i) for i in range(num_rows)],
        "open": [close] * num_rows,
        "high": [high] * num_rows,
        "low": [low] * num_rows,
        "close": [close] * num_rows,
        "volume": [100.0] * num_rows,
    })
    df["time"] = pd.to_datetime(df["time"], utc=True)
    df = df.set_index("time")

    return df


class TestTrueRange:
    """True Range 테스트"""

    def test_true_range_name(self):
        ohlcv = create_sample_ohlcv()

        result = true_range(ohlcv)

        assert result.name == "true_range"
        assert not result.isna().any()

    def test_true_range_first_bar(self):
        """첫 bar는 high - low"""
        ohlcv = create_sample_ohlcv()

        result = true_range(ohlcv)

        assert abs(result.iloc[0] - 2.0) < 1e-10


class TestAtr:
    """ATR 테스트"""

    def test_atr_basic(self):
        """기본 ATR 계산"""
        ohlcv = create_sample_ohlcv()

        result = atr(ohlcv, {"period": 14})

        assert isinstance(result, pd.Series)
        assert len(result) == len(ohlcv)
        assert result.name == "atr_14"
        # 처음 period-1개는 NaN
        assert result.iloc[:13].isna().all()
        assert not pd.isna(result.iloc[13])  # 14번째부터 값

    def test_atr_default_period(self):
        """기본 period = 14"""
        ohlcv = create_sample_ohlcv()

        result_default = atr(ohlcv, {})
        result_14 = atr(ohlcv, {"period": 14})

        # 마지막 값 비교 (float 비교이므로 근사치)
        assert abs(result_default.iloc[-1] - result_14.iloc[-1]) < 1e-10

    def test_atr_positive_values(self):
        """ATR은 항상 양수"""
        ohlcv = create_sample_ohlcv()

        result = atr(ohlcv, {"period": 14})

        # NaN 제외한 값은 모두 양수
        valid_values = result.dropna()
        assert (valid_values > 0).all()

    def test_atr_constant_range(self):
        """일정한 변동성에서 ATR 계산"""
        df = create_constant_ohlcv(20)

        result = atr(df, {"period": 5})

        # True Range = 4 (high - low), ATR = 4
        assert abs(result.iloc[-1] - 4.0) < 1e-10

    def test_atr_flat_bars(self):
        """high == low == close 이면 ATR 0"""
        df = create_constant_ohlcv(3, high=100.0, low=100.0, close=100.0)

        result = atr(df, {"period": 2})

        assert pd.isna(result.iloc[0])
        assert result.iloc[1] == 0.0
        assert result.iloc[2] == 0.0

    def test_atr_window_longer_than_data(self):
        """period > 길이는 전체 NaN"""
        df = create_constant_ohlcv(5)

        result = atr(df, {"period": 14})

        assert len(result) == 5
        assert result.isna().all()

    def test_atr_recovers_after_missing_bar(self):
        """중간 결측 bar 이후 period개가 모이면 다시 계산됨"""
        ohlcv = create_sample_ohlcv(120)
        ohlcv.loc[ohlcv.index[40], ["high", "low", "close"]] = np.nan

        result = atr(ohlcv, {"period": 14})

        assert pd.isna(result.iloc[40])
        assert not result.iloc[13:40].isna().any()
        # TR은 41부터 유효 (이전 종가 결측이면 high-low), 41+13에서 다시 seed
        assert result.iloc[41:54].isna().all()
        assert not result.iloc[54:].isna().any()


class TestNatr:
    """NATR 테스트"""

    def test_natr_percent_of_close(self):
        """100 * ATR / close"""
        df = create_constant_ohlcv(20)

        result = natr(df, {"period": 5})

        assert result.name == "natr_5"
        assert abs(result.iloc[-1] - 4.0) < 1e-10


class TestStddev:
    """StdDev 테스트"""

    def test_stddev_constant(self):
        """상수 가격의 표준편차는 0"""
        df = create_constant_ohlcv(20)

        result = stddev(df, {"period": 5})

        assert result.name == "stddev_5"
        assert (result.dropna() == 0.0).all()

    def test_stddev_population(self):
        """모표준편차 사용"""
        ohlcv = create_sample_ohlcv(30)

        result = stddev(ohlcv, {"period": 10})
        expected = ohlcv["close"].iloc[-10:].std(ddof=0)

        assert abs(result.iloc[-1] - expected) < 1e-10


class TestBollingerBands:
    """볼린저 밴드 테스트"""

    def test_bollinger_bands_basic(self):
        """기본 볼린저 밴드 계산"""
        ohlcv = create_sample_ohlcv()

        upper, middle, lower = bollinger_bands(ohlcv, {"period": 20})

        assert isinstance(upper, pd.Series)
        assert isinstance(middle, pd.Series)
        assert isinstance(lower, pd.Series)
        assert len(upper) == len(ohlcv)
        assert (upper.name, middle.name, lower.name) == ("bb_upper", "bb_middle", "bb_lower")

    def test_bollinger_bands_middle_is_sma(self):
        """중간 밴드는 SMA"""
        ohlcv = create_sample_ohlcv()

        _, middle, _ = bollinger_bands(ohlcv, {"period": 20})
        sma_20 = sma(ohlcv, {"period": 20})

        # 마지막 값 비교
        assert abs(middle.iloc[-1] - sma_20.iloc[-1]) < 1e-10

    def test_bollinger_bands_same_warmup(self):
        """세 밴드의 warm-up 구간이 같음"""
        ohlcv = create_sample_ohlcv()

        upper, middle, lower = bollinger_bands(ohlcv, {"period": 20})

        assert (upper.isna() == middle.isna()).all()
        assert (middle.isna() == lower.isna()).all()
        assert middle.isna().sum() == 19

    def test_bollinger_bands_symmetry(self):
        """상하 밴드 대칭성"""
        ohlcv = create_sample_ohlcv()

        upper, middle, lower = bollinger_bands(ohlcv, {"period": 20})

        # upper - middle == middle - lower
        upper_distance = upper.iloc[-1] - middle.iloc[-1]
        lower_distance = middle.iloc[-1] - lower.iloc[-1]

        assert abs(upper_distance - lower_distance) < 1e-10

    def test_bollinger_bands_order(self):
        """상단 >= 중간 >= 하단 순서"""
        ohlcv = create_sample_ohlcv()

        upper, middle, lower = bollinger_bands(ohlcv, {"period": 20})

        valid_idx = ~(pd.isna(upper) | pd.isna(middle) | pd.isna(lower))

        assert (upper[valid_idx] >= middle[valid_idx]).all()
        assert (middle[valid_idx] >= lower[valid_idx]).all()

    def test_bollinger_bands_custom_std(self):
        """커스텀 표준편차 배수"""
        ohlcv = create_sample_ohlcv()

        upper1, middle1, lower1 = bollinger_bands(ohlcv, {"period": 20, "std_dev": 2.0})
        upper2, middle2, lower2 = bollinger_bands(ohlcv, {"period": 20, "std_dev": 3.0})

        # std_dev가 크면 밴드 폭도 커짐
        width1 = upper1.iloc[-1] - lower1.iloc[-1]
        width2 = upper2.iloc[-1] - lower2.iloc[-1]

        assert width2 > width1

    def test_bollinger_bands_zero_std(self):
        """std_dev = 0 이면 세 밴드가 같음"""
        ohlcv = create_sample_ohlcv()

        upper, middle, lower = bollinger_bands(ohlcv, {"period": 20, "std_dev": 0})

        pd.testing.assert_series_equal(upper, middle, check_names=False)
        pd.testing.assert_series_equal(lower, middle, check_names=False)

    def test_bollinger_bands_negative_std(self):
        """음수 std_dev"""
        ohlcv = create_sample_ohlcv()

        with pytest.raises(InvalidParameterError):
            bollinger_bands(ohlcv, {"period": 20, "std_dev": -1.0})

    def test_bollinger_bands_infinite_std(self):
        """std_dev = inf 는 밴드에 inf를 만들지 않고 에러"""
        ohlcv = create_sample_ohlcv()

        with pytest.raises(InvalidParameterError):
            bollinger_bands(ohlcv, {"period": 2, "std_dev": float("inf")})

    def test_bollinger_bands_infinite_period(self):
        """period = inf"""
        ohlcv = create_sample_ohlcv()

        with pytest.raises(InvalidParameterError):
            bollinger_bands(ohlcv, {"period": float("inf")})


class TestPercentB:
    """%B 테스트"""

    def test_percent_b_at_middle(self):
        """가격 == 중간 밴드이면 0.5"""
        df = create_constant_ohlcv(3)
        df["close"] = [1.0, 3.0, 2.0]

        result = percent_b(df, {"period": 3})

        assert result.name == "bb_b"
        assert result.iloc[:2].isna().all()
        assert abs(result.iloc[2] - 0.5) < 1e-12

    def test_percent_b_outside_band(self):
        """밴드 밖의 가격은 [0, 1]을 벗어남"""
        ohlcv = create_sample_ohlcv(30)
        ohlcv.loc[ohlcv.index[-1], "close"] = 200.0

        result = percent_b(ohlcv, {"period": 20, "std_dev": 1.0})

        assert result.iloc[-1] > 1.0

    def test_percent_b_zero_width(self):
        """밴드 폭 0이면 NaN"""
        df = create_constant_ohlcv(20)

        result = percent_b(df, {"period": 5})

        assert result.isna().all()


class TestGkVolatility:
    """Garman-Klass 변동성 테스트"""

    def test_gk_known_value(self):
        """open == close 이면 sqrt(0.5) * ln(H/L)"""
        df = create_constant_ohlcv(20)

        result = gk_volatility(df, {"period": 5})

        assert result.name == "gk_volatility_5"
        assert result.iloc[:4].isna().all()
        expected = math.sqrt(0.5) * math.log(102.0 / 98.0)
        assert abs(result.iloc[-1] - expected) < 1e-12

    def test_gk_non_negative(self):
        """음수 분산은 0으로 clamp"""
        df = create_constant_ohlcv(20)
        # 종가가 고가 밖에 있는 비정상 bar: per-bar 추정치가 음수
        df["high"] = 101.0
        df["low"] = 100.0
        df["open"] = 100.0
        df["close"] = 110.0

        result = gk_volatility(df, {"period": 5})

        assert result.iloc[:4].isna().all()
        assert (result.iloc[4:] == 0.0).all()

    def test_gk_non_positive_price(self):
        """가격이 0 이하인 bar가 포함된 window는 NaN"""
        df = create_constant_ohlcv(20)
        df.loc[df.index[10], "low"] = 0.0

        result = gk_volatility(df, {"period": 5})

        assert result.iloc[10:15].isna().all()
        assert not pd.isna(result.iloc[9])
        assert not pd.isna(result.iloc[15])


class TestKeltnerChannels:
    """Keltner Channels 테스트"""

    def test_keltner_structure(self):
        """middle = EMA(close), 폭 = multiplier * ATR"""
        ohlcv = create_sample_ohlcv()

        upper, middle, lower = keltner_channels(ohlcv, {"period": 20, "multiplier": 1.5})
        ema_20 = ema(ohlcv, {"period": 20})
        atr_20 = atr(ohlcv, {"period": 20})

        assert (upper.name, middle.name, lower.name) == (
            "keltner_upper",
            "keltner_middle",
            "keltner_lower",
        )
        assert abs(middle.iloc[-1] - ema_20.iloc[-1]) < 1e-10
        assert abs((upper.iloc[-1] - middle.iloc[-1]) - 1.5 * atr_20.iloc[-1]) < 1e-10
        assert abs((middle.iloc[-1] - lower.iloc[-1]) - 1.5 * atr_20.iloc[-1]) < 1e-10


class TestDonchianChannels:
    """Donchian Channels 테스트"""

    def test_donchian_known_values(self):
        """기간 최고가/최저가"""
        df = create_constant_ohlcv(5)
        df["high"] = [10.0, 12.0, 11.0, 9.0, 8.0]
        df["low"] = [5.0, 6.0, 4.0, 7.0, 6.0]

        upper, middle, lower = donchian_channels(df, {"period": 3})

        assert upper.iloc[2:].tolist() == [12.0, 12.0, 11.0]
        assert lower.iloc[2:].tolist() == [4.0, 4.0, 4.0]
        assert middle.iloc[2:].tolist() == [8.0, 8.0, 7.5]
        assert upper.iloc[:2].isna().all()


class TestHistVolatility:
    """Historical Volatility 테스트"""

    def test_hist_volatility_constant_price(self):
        """가격 변화가 없으면 0, 첫 유효값은 index period"""
        df = create_constant_ohlcv(30)

        result = hist_volatility(df, {"period": 5})

        assert result.name == "hist_volatility_5"
        assert result.iloc[:5].isna().all()
        assert (result.iloc[5:] == 0.0).all()

    def test_hist_volatility_known_value(self):
        """로그 수익률이 ±ln(1.1)로 번갈아 나오면 표준편차 = ln(1.1)"""
        df = create_constant_ohlcv(10)
        df["close"] = [100.0, 110.0] * 5

        result = hist_volatility(df, {"period": 2, "trading_periods": 1})

        expected = math.log(1.1) * 100
        assert np.allclose(result.iloc[2:], expected)

    def test_hist_volatility_annualized(self):
        """trading_periods의 제곱근에 비례"""
        df = create_sample_ohlcv(60)

        daily = hist_volatility(df, {"period": 20, "trading_periods": 1})
        annual = hist_volatility(df, {})

        assert abs(annual.iloc[-1] - daily.iloc[-1] * math.sqrt(252)) < 1e-8

    def test_hist_volatility_non_positive_price(self):
        """가격이 0 이하인 bar의 수익률은 NaN"""
        df = create_constant_ohlcv(30)
        df.loc[df.index[10], "close"] = 0.0

        result = hist_volatility(df, {"period": 5})

        assert result.iloc[10:16].isna().all()
        assert not result.iloc[16:].isna().any()
        assert not np.isinf(result).any()
