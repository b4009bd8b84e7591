"""
Range Presets - 자주 쓰는 범위 프리셋

현재 가격/틱과 틱 간격으로 범위를 만듭니다.

- FULL: 사용 가능한 최소/최대 틱
- WIDE: 현재 가격의 0.5× ~ 2×
- NARROW: 현재 가격의 0.9× ~ 1.1×
- CURRENT: [c, c + spacing), c = 현재 틱의 가장 가까운 사용 가능 틱

모든 프리셋은 tick_lower < tick_upper를 보장합니다. 간격이 커서 범위가
겹치거나 뒤집히면 현재 틱 양쪽으로 한 간격씩인 범위로 대체합니다.
"""

import logging
import math
from enum import Enum
from fractions import Fraction
from typing import Dict, Optional

from ..config import Settings
from ..constants import MIN_TICK, MAX_TICK, TICK_BASE
from ..exceptions import DegenerateRangeError, TickOutOfBoundsError
from .range_math import TickRange
from .sqrt_price_math import to_exact_price, to_raw_price
from .tick_math import (
    get_max_usable_tick,
    get_min_usable_tick,
    get_nearest_usable_tick,
    get_tick_spacing,
    price_to_tick,
)

logger = logging.getLogger(__name__)

# basic 모드: 양쪽 약 10배 가격 범위 (~23027 틱)
BASIC_RANGE_TICK_OFFSET: int = math.floor(math.log(10) / math.log(TICK_BASE))

WIDE_FACTORS = (Fraction(1, 2), Fraction(2))
NARROW_FACTORS = (Fraction(9, 10), Fraction(11, 10))


class RangePreset(str, Enum):
    """범위 프리셋 종류"""
    FULL = "full"
    WIDE = "wide"
    NARROW = "narrow"
    CURRENT = "current"


def _usable_tick_for_price(price, tick_spacing: int, decimals0: int, decimals1: int) -> int:
    """가격에 가장 가까운 사용 가능 틱 (표현 범위 밖이면 해당 끝 틱)"""
    try:
        tick = price_to_tick(price, decimals0, decimals1)
    except TickOutOfBoundsError:
        if to_raw_price(price, decimals0, decimals1) < 1:
            return get_min_usable_tick(tick_spacing)
        return get_max_usable_tick(tick_spacing)
    return get_nearest_usable_tick(tick, tick_spacing)


def fallback_range(current_tick: int, tick_spacing: int) -> TickRange:
    """현재 틱 양쪽으로 한 간격씩인 범위

    경계에 닿으면 안쪽으로 밀어서 폭(2 × spacing)을 유지합니다.
    """
    min_usable = get_min_usable_tick(tick_spacing)
    max_usable = get_max_usable_tick(tick_spacing)
    if max_usable - min_usable < 2 * tick_spacing:
        raise DegenerateRangeError(f"틱 간격이 너무 큽니다: {tick_spacing}")

    center = get_nearest_usable_tick(current_tick, tick_spacing)
    lower, upper = center - tick_spacing, center + tick_spacing

    if lower < min_usable:
        lower, upper = min_usable, min_usable + 2 * tick_spacing
    elif upper > max_usable:
        lower, upper = max_usable - 2 * tick_spacing, max_usable

    return TickRange(lower, upper)


def _ensure_valid(
    tick_range: TickRange,
    current_tick: int,
    tick_spacing: int,
    preset: RangePreset,
    strict: bool = False
) -> TickRange:
    if tick_range.tick_lower < tick_range.tick_upper:
        return tick_range
    if strict:
        raise DegenerateRangeError(
            f"{preset.value} 프리셋 범위가 겹칩니다 (spacing={tick_spacing}): "
            f"[{tick_range.tick_lower}, {tick_range.tick_upper})"
        )
    fallback = fallback_range(current_tick, tick_spacing)
    logger.warning(
        "%s preset collapsed to [%d, %d) with spacing %d, using [%d, %d)",
        preset.value, tick_range.tick_lower, tick_range.tick_upper, tick_spacing,
        fallback.tick_lower, fallback.tick_upper,
    )
    return fallback


def full_range(tick_spacing: int) -> TickRange:
    """전체 범위"""
    return TickRange(get_min_usable_tick(tick_spacing), get_max_usable_tick(tick_spacing))


def _price_factor_range(
    current_price,
    current_tick: int,
    tick_spacing: int,
    decimals0: int,
    decimals1: int,
    factors,
    preset: RangePreset,
    strict: bool = False
) -> TickRange:
    price = to_exact_price(current_price)
    lower_factor, upper_factor = factors
    tick_range = TickRange(
        _usable_tick_for_price(price * lower_factor, tick_spacing, decimals0, decimals1),
        _usable_tick_for_price(price * upper_factor, tick_spacing, decimals0, decimals1),
    )
    return _ensure_valid(tick_range, current_tick, tick_spacing, preset, strict)


def wide_range(
    current_price,
    current_tick: int,
    tick_spacing: int,
    decimals0: int = 18,
    decimals1: int = 18
) -> TickRange:
    """현재 가격의 0.5× ~ 2×"""
    return _price_factor_range(
        current_price, current_tick, tick_spacing, decimals0, decimals1,
        WIDE_FACTORS, RangePreset.WIDE,
    )


def narrow_range(
    current_price,
    current_tick: int,
    tick_spacing: int,
    decimals0: int = 18,
    decimals1: int = 18,
    strict: bool = False
) -> TickRange:
    """현재 가격의 0.9× ~ 1.1×

    strict=True면 범위가 겹칠 때 대체 범위 대신 DegenerateRangeError를 발생시킵니다
    (다른 수수료 티어 선택을 요청하는 UI용).
    """
    return _price_factor_range(
        current_price, current_tick, tick_spacing, decimals0, decimals1,
        NARROW_FACTORS, RangePreset.NARROW, strict,
    )


def current_range(current_tick: int, tick_spacing: int) -> TickRange:
    """가장 좁은 범위 [c, c + spacing)"""
    center = get_nearest_usable_tick(current_tick, tick_spacing)
    if center + tick_spacing > get_max_usable_tick(tick_spacing):
        return TickRange(center - tick_spacing, center)
    return TickRange(center, center + tick_spacing)


def basic_range(current_tick: int, tick_spacing: int) -> TickRange:
    """basic 모드 범위: 현재 틱 양쪽으로 약 10배 가격"""
    lower = get_nearest_usable_tick(max(MIN_TICK, current_tick - BASIC_RANGE_TICK_OFFSET), tick_spacing)
    upper = get_nearest_usable_tick(min(MAX_TICK, current_tick + BASIC_RANGE_TICK_OFFSET), tick_spacing)
    return _ensure_valid(TickRange(lower, upper), current_tick, tick_spacing, RangePreset.WIDE)


def get_range_preset(
    preset: RangePreset,
    current_price,
    current_tick: int,
    tick_spacing: int,
    decimals0: int = 18,
    decimals1: int = 18
) -> TickRange:
    """프리셋 하나 계산"""
    preset = RangePreset(preset)
    if preset is RangePreset.FULL:
        return full_range(tick_spacing)
    if preset is RangePreset.WIDE:
        return wide_range(current_price, current_tick, tick_spacing, decimals0, decimals1)
    if preset is RangePreset.NARROW:
        return narrow_range(current_price, current_tick, tick_spacing, decimals0, decimals1)
    return current_range(current_tick, tick_spacing)


def generate_presets(
    current_price,
    current_tick: int,
    fee_tier: int,
    decimals0: int = 18,
    decimals1: int = 18,
    settings: Optional[Settings] = None
) -> Dict[RangePreset, TickRange]:
    """모든 프리셋 계산

    Args:
        current_price: 현재 가격 (token1/token0, human-readable)
        current_tick: 현재 풀 틱
        fee_tier: 풀 수수료 티어
        decimals0: token0 소수점 자릿수
        decimals1: token1 소수점 자릿수
        settings: 설정 (추가 수수료 티어)

    Returns:
        {RangePreset: TickRange}
    """
    tick_spacing = get_tick_spacing(fee_tier, settings)
    return {
        preset: get_range_preset(preset, current_price, current_tick, tick_spacing, decimals0, decimals1)
        for preset in RangePreset
    }
