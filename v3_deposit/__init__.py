"""
Uniswap V3 Concentrated Liquidity Deposit Engine

집중화된 유동성 포지션 예치 계산 라이브러리.
가격/틱 변환, 틱 간격 정렬, 범위 분류, 한쪽 토큰 수량으로부터
반대쪽 토큰 수량 계산, 범위 프리셋, 자본 효율 배수를 제공합니다.
"""

import logging

__version__ = "0.1.0"

from .constants import Q96, FEE_TIERS, TICK_SPACINGS, MIN_TICK, MAX_TICK
from .exceptions import (
    DepositMathError,
    InvalidPriceError,
    InvalidAmountError,
    TickOutOfBoundsError,
    UnknownFeeTierError,
    DegenerateRangeError,
    InvalidTickSpacingError,
)
from .math import (
    DepositAmounts,
    DepositMode,
    RangePreset,
    TickRange,
    calculate_deposit_amounts,
    classify_deposit,
    estimate_capital_efficiency,
    generate_presets,
    get_nearest_usable_tick,
    get_tick_spacing,
    is_in_range,
    price_to_sqrt_price_x96,
    price_to_tick,
    sqrt_price_x96_to_price,
    tick_to_price,
)
from .quote import (
    DepositQuoteCache,
    PoolState,
    QuoteRequest,
    QuoteResult,
    TokenInfo,
    TokenPair,
    quote_deposit,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())
