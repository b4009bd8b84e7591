"""
Math layer for the V3 deposit engine

온체인 수준 정밀도의 수학 함수들:
- sqrt_price_math: price ↔ sqrtPriceX96 변환
- tick_math: Tick ↔ Price 변환, 틱 간격 정렬
- liquidity_math: 유동성 / 반대쪽 토큰 수량 계산
- range_math: 예치 방식 분류
- presets: 범위 프리셋
- efficiency: 자본 효율 배수
"""

from .sqrt_price_math import (
    sqrt_price_x96_to_price,
    price_to_sqrt_price_x96,
)
from .tick_math import (
    get_tick_at_sqrt_ratio,
    get_sqrt_ratio_at_tick,
    tick_to_price,
    price_to_tick,
    round_tick_to_spacing,
    align_tick_to_spacing,
    get_nearest_usable_tick,
    get_min_usable_tick,
    get_max_usable_tick,
    get_tick_spacing,
    get_price_range_for_tick_range,
)
from .liquidity_math import (
    DepositAmounts,
    get_amount0_delta,
    get_amount1_delta,
    get_liquidity_for_amounts,
    get_amounts_for_liquidity,
    get_amount1_for_amount0,
    get_amount0_for_amount1,
    calculate_deposit_amounts,
)
from .range_math import (
    DepositMode,
    TickRange,
    classify_deposit,
    is_in_range,
    validate_range,
)
from .presets import (
    RangePreset,
    full_range,
    wide_range,
    narrow_range,
    current_range,
    basic_range,
    get_range_preset,
    generate_presets,
)
from .efficiency import (
    estimate_capital_efficiency,
    estimate_capital_efficiency_for_ticks,
)
