"""
Uniswap V3 상수 정의

온체인 수준 정밀도를 위한 상수들:
- Q96: sqrt price 인코딩에 사용 (2^96)
- MIN_TICK / MAX_TICK: 표현 가능한 틱 범위
- MIN_SQRT_RATIO / MAX_SQRT_RATIO: TickMath.sol 경계값
- FEE_TIERS: 지원되는 수수료 티어
- TICK_SPACINGS: 각 수수료 티어별 틱 간격
"""

from typing import Dict

# Fixed-point 인코딩 상수
Q96: int = 2 ** 96
Q192: int = 2 ** 192

# 틱 범위 상수
MIN_TICK: int = -887272
MAX_TICK: int = 887272

# TickMath.sol: getSqrtRatioAtTick(MIN_TICK), getSqrtRatioAtTick(MAX_TICK)
MIN_SQRT_RATIO: int = 4295128739
MAX_SQRT_RATIO: int = 1461446703485210103287273052203988822378723970342

# 1 tick = 1bp 가격 변화
TICK_BASE: float = 1.0001

# 수수료 티어 (100분의 1 bps 단위)
# 500 = 0.05%, 3000 = 0.30%, 10000 = 1.00%
FEE_TIERS: Dict[int, str] = {
    100: "0.01%",
    500: "0.05%",
    3000: "0.30%",
    10000: "1.00%",
    100000: "10.00%",
}

# 각 수수료 티어별 틱 간격 (수수료가 낮을수록 촘촘함)
TICK_SPACINGS: Dict[int, int] = {
    100: 1,
    500: 10,
    3000: 60,
    10000: 200,
    100000: 2000,
}

# 자본 효율 배수 상한 (범위가 현재 가격으로 좁아질 때 발산 방지)
DEFAULT_EFFICIENCY_CAP: float = 9999.0

# uint 최대값
UINT256_MAX: int = 2 ** 256 - 1
UINT128_MAX: int = 2 ** 128 - 1
