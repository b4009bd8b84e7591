"""
Range Presets 테스트

모든 프리셋이 tick_lower < tick_upper 이고 틱 간격의 배수인지 확인합니다.
"""

import logging

import pytest

from ..constants import MIN_TICK, MAX_TICK
from ..exceptions import DegenerateRangeError, UnknownFeeTierError
from ..math.presets import (
    BASIC_RANGE_TICK_OFFSET,
    RangePreset,
    basic_range,
    current_range,
    fallback_range,
    full_range,
    generate_presets,
    get_range_preset,
    narrow_range,
    wide_range,
)
from ..math.range_math import TickRange
from ..math.tick_math import price_to_tick, tick_to_price


def assert_valid(tick_range: TickRange, spacing: int):
    assert tick_range.tick_lower < tick_range.tick_upper
    assert tick_range.tick_lower % spacing == 0
    assert tick_range.tick_upper % spacing == 0
    assert MIN_TICK <= tick_range.tick_lower
    assert tick_range.tick_upper <= MAX_TICK


class TestFullRange:
    """full_range 테스트"""

    @pytest.mark.parametrize("spacing,expected", [
        (1, (MIN_TICK, MAX_TICK)),
        (10, (-887270, 887270)),
        (60, (-887220, 887220)),
        (200, (-887200, 887200)),
        (2000, (-886000, 886000)),
    ])
    def test_usable_bounds(self, spacing, expected):
        assert full_range(spacing) == expected


class TestWideRange:
    """wide_range 테스트 (0.5× ~ 2×)"""

    def test_usdc_weth(self):
        """token0=6, token1=18, 가격 2000, 간격 60"""
        current_tick = price_to_tick(2000, 6, 18)
        result = wide_range(2000, current_tick, 60, 6, 18)

        assert_valid(result, 60)
        assert result.tick_lower < current_tick < result.tick_upper
        assert tick_to_price(result.tick_lower, 6, 18) == pytest.approx(1000, rel=0.005)
        assert tick_to_price(result.tick_upper, 6, 18) == pytest.approx(4000, rel=0.005)

    def test_width_is_about_log2(self):
        """0.5× ~ 2× = 약 ±6931 틱"""
        result = wide_range(1.0, 0, 10)
        assert result.tick_lower == -6930
        assert result.tick_upper == 6930

    def test_upper_beyond_max_price(self):
        """2× 가격이 표현 범위를 넘으면 최대 사용 가능 틱"""
        price = 3e38
        result = wide_range(price, price_to_tick(price), 60)
        assert result.tick_upper == 887220
        assert_valid(result, 60)


class TestNarrowRange:
    """narrow_range 테스트 (0.9× ~ 1.1×)"""

    def test_brackets_current(self):
        current_tick = price_to_tick(2000, 6, 18)
        result = narrow_range(2000, current_tick, 60, 6, 18)
        assert_valid(result, 60)
        assert result.tick_lower < current_tick < result.tick_upper

    def test_ticks(self):
        """0.9 → -1054, 1.1 → 953"""
        assert narrow_range(1.0, 0, 1) == TickRange(-1054, 953)

    @pytest.mark.parametrize("spacing", [1, 10, 60, 200, 2000])
    def test_never_collapses_for_standard_tiers(self, spacing):
        for current_tick in (-100000, -1, 0, 777, 250000):
            price = tick_to_price(current_tick)
            assert_valid(narrow_range(price, current_tick, spacing), spacing)

    def test_fallback_when_collapsed(self, caplog):
        """±10% 틱이 같은 틱으로 겹치면 현재 틱 ±1 간격"""
        with caplog.at_level(logging.WARNING, logger="v3_deposit.math.presets"):
            result = narrow_range(1.0, 0, 4000)

        assert result == TickRange(-4000, 4000)
        assert any("narrow" in record.getMessage() for record in caplog.records)

    def test_strict_raises(self):
        with pytest.raises(DegenerateRangeError):
            narrow_range(1.0, 0, 4000, strict=True)


class TestFallbackRange:
    """fallback_range 테스트"""

    def test_center(self):
        assert fallback_range(29, 60) == TickRange(-60, 60)

    def test_shifted_at_max(self):
        """경계에서는 안쪽으로 밀어서 폭 유지"""
        assert fallback_range(MAX_TICK, 60) == TickRange(887100, 887220)

    def test_shifted_at_min(self):
        assert fallback_range(MIN_TICK, 60) == TickRange(-887220, -887100)

    def test_spacing_too_large(self):
        with pytest.raises(DegenerateRangeError):
            fallback_range(0, MAX_TICK + 1)


class TestCurrentRange:
    """current_range 테스트"""

    @pytest.mark.parametrize("current_tick,expected", [
        (0, (0, 60)),
        (29, (0, 60)),
        (30, (60, 120)),
        (-31, (-60, 0)),
    ])
    def test_single_spacing(self, current_tick, expected):
        assert current_range(current_tick, 60) == expected

    def test_at_max_tick(self):
        result = current_range(MAX_TICK, 60)
        assert result == TickRange(887160, 887220)


class TestBasicRange:
    """basic_range 테스트 (약 10× 양쪽)"""

    def test_offset(self):
        assert BASIC_RANGE_TICK_OFFSET == 23027

    def test_price_1(self):
        result = basic_range(0, 60)
        assert result == TickRange(-23040, 23040)
        assert tick_to_price(result.tick_upper) == pytest.approx(10, rel=0.01)

    def test_clamped_near_bounds(self):
        result = basic_range(MAX_TICK - 100, 60)
        assert_valid(result, 60)
        assert result.tick_upper == 887220


class TestGeneratePresets:
    """generate_presets / get_range_preset 테스트"""

    def test_all_presets(self):
        current_tick = price_to_tick(2000, 6, 18)
        presets = generate_presets(2000, current_tick, 3000, 6, 18)

        assert set(presets) == set(RangePreset)
        for tick_range in presets.values():
            assert_valid(tick_range, 60)

        assert presets[RangePreset.FULL] == full_range(60)
        full_width = presets[RangePreset.FULL].width
        assert full_width > presets[RangePreset.WIDE].width > presets[RangePreset.NARROW].width
        assert presets[RangePreset.CURRENT].width == 60

    def test_get_range_preset_accepts_string(self):
        assert get_range_preset("full", 1.0, 0, 60) == full_range(60)

    def test_unknown_fee_tier(self):
        with pytest.raises(UnknownFeeTierError):
            generate_presets(1.0, 0, 1234)
