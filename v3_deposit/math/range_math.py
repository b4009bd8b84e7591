"""
Range Math - 범위 분류

현재 틱과 [tick_lower, tick_upper) 범위의 관계로 예치 방식을 결정합니다.

    current < lower   → token0만 예치 (가격이 범위 아래)
    current >= upper  → token1만 예치 (가격이 범위 위)
    그 외             → 양쪽 토큰 예치

틱 경계는 그 틱에서 시작하는 범위에 속합니다 (half-open).
"""

from enum import Enum
from typing import NamedTuple, Optional

from ..exceptions import DegenerateRangeError, InvalidTickSpacingError
from .tick_math import check_tick, check_tick_spacing


class DepositMode(str, Enum):
    """예치 방식"""
    DUAL = "dual"
    TOKEN0_ONLY = "token0-only"
    TOKEN1_ONLY = "token1-only"
    INVALID = "invalid"


class TickRange(NamedTuple):
    """[tick_lower, tick_upper) 틱 범위"""
    tick_lower: int
    tick_upper: int

    @property
    def width(self) -> int:
        return self.tick_upper - self.tick_lower


def classify_deposit(current_tick: int, tick_lower: int, tick_upper: int) -> DepositMode:
    """현재 틱 기준 예치 방식 분류"""
    if tick_lower >= tick_upper:
        return DepositMode.INVALID
    if current_tick < tick_lower:
        return DepositMode.TOKEN0_ONLY
    if current_tick >= tick_upper:
        return DepositMode.TOKEN1_ONLY
    return DepositMode.DUAL


def is_in_range(current_tick: int, tick_lower: int, tick_upper: int) -> bool:
    """포지션이 현재 수수료를 받는 중인지 (tick_lower <= current < tick_upper)"""
    return tick_lower <= current_tick < tick_upper


def validate_range(
    tick_lower: int,
    tick_upper: int,
    tick_spacing: Optional[int] = None
) -> TickRange:
    """amount 계산 전에 범위를 검증

    Args:
        tick_lower: 하한 틱
        tick_upper: 상한 틱
        tick_spacing: 주어지면 두 틱이 간격의 배수인지도 확인

    Returns:
        TickRange

    Raises:
        DegenerateRangeError: tick_lower >= tick_upper
        TickOutOfBoundsError: 틱이 유효 범위를 벗어남
        InvalidTickSpacingError: 틱이 간격의 배수가 아님
    """
    check_tick(tick_lower)
    check_tick(tick_upper)
    if tick_lower >= tick_upper:
        raise DegenerateRangeError(
            f"tick_lower는 tick_upper보다 작아야 합니다: [{tick_lower}, {tick_upper})"
        )

    if tick_spacing is not None:
        check_tick_spacing(tick_spacing)
        for tick in (tick_lower, tick_upper):
            if tick % tick_spacing != 0:
                raise InvalidTickSpacingError(
                    f"틱 {tick}이 틱 간격 {tick_spacing}의 배수가 아닙니다"
                )

    return TickRange(tick_lower, tick_upper)
