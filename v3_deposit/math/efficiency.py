"""
Capital Efficiency - 자본 효율 배수

같은 유동성 L을 전체 범위로 공급할 때 대비 몇 배의 자본 효율인지 추정합니다.

    efficiency = (√P / (√P - √Pa)) × (√Pb / (√Pb - √P))

표시용 지표입니다. 현재 가격이 범위 밖이면 None,
범위가 너무 좁아 발산하면 상한(cap)으로 제한합니다.
"""

import math
from fractions import Fraction
from typing import Optional

from ..config import settings as default_settings
from ..constants import Q96
from ..exceptions import InvalidPriceError
from .sqrt_price_math import to_exact_price
from .tick_math import get_sqrt_ratio_at_tick


def _resolve_cap(cap: Optional[float]) -> float:
    if cap is None:
        return default_settings.EFFICIENCY_CAP
    if cap <= 1 or not math.isfinite(cap):
        raise ValueError(f"cap은 1보다 큰 유한한 값이어야 합니다: {cap!r}")
    return float(cap)


def _efficiency(sqrt_current: float, sqrt_lower: float, sqrt_upper: float, cap: float) -> float:
    denominator = (sqrt_current - sqrt_lower) * (sqrt_upper - sqrt_current)
    if denominator <= 0:
        return cap

    efficiency = (sqrt_current * sqrt_upper) / denominator
    if not math.isfinite(efficiency) or efficiency > cap:
        return cap
    return efficiency


def estimate_capital_efficiency(
    current_price,
    price_lower,
    price_upper,
    cap: Optional[float] = None
) -> Optional[float]:
    """가격 범위의 자본 효율 배수

    Args:
        current_price: 현재 가격
        price_lower: 범위 하한 가격
        price_upper: 범위 상한 가격
        cap: 상한 (None이면 settings.EFFICIENCY_CAP)

    Returns:
        배수 (> 1), 현재 가격이 (price_lower, price_upper) 밖이면 None

    Raises:
        InvalidPriceError: 0 이하, NaN, 무한대 가격
    """
    current = to_exact_price(current_price)
    lower = to_exact_price(price_lower)
    upper = to_exact_price(price_upper)
    cap = _resolve_cap(cap)

    if not (lower < current < upper):
        return None

    return _efficiency(
        math.sqrt(current),
        math.sqrt(lower),
        math.sqrt(upper),
        cap,
    )


def estimate_capital_efficiency_for_ticks(
    sqrt_price_x96: int,
    tick_lower: int,
    tick_upper: int,
    cap: Optional[float] = None
) -> Optional[float]:
    """틱 범위의 자본 효율 배수 (풀의 sqrt 비율 그대로 사용)

    가격 단위와 무관하므로 소수점 자릿수가 필요 없습니다.
    """
    if isinstance(sqrt_price_x96, bool) or not isinstance(sqrt_price_x96, int) or sqrt_price_x96 <= 0:
        raise InvalidPriceError(f"sqrtPriceX96은 양의 정수여야 합니다: {sqrt_price_x96!r}")
    cap = _resolve_cap(cap)

    sqrt_lower = get_sqrt_ratio_at_tick(tick_lower)
    sqrt_upper = get_sqrt_ratio_at_tick(tick_upper)
    if not (sqrt_lower < sqrt_price_x96 < sqrt_upper):
        return None

    return _efficiency(
        float(Fraction(sqrt_price_x96, Q96)),
        float(Fraction(sqrt_lower, Q96)),
        float(Fraction(sqrt_upper, Q96)),
        cap,
    )
