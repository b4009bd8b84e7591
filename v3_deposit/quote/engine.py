"""
Deposit Quote Engine

QuoteRequest 하나로 예치 견적(QuoteResult)을 계산합니다.

    1. 수수료 티어 → 틱 간격, 범위 검증
    2. 현재 틱 기준 예치 방식 분류
    3. 입력 수량 → (amount0, amount1, L)
    4. 자본 효율, 가격 범위, 표시 문자열

외부 상태를 읽거나 저장하지 않는 순수 계산입니다.
"""
import logging
from typing import Optional

from ..config import Settings, settings as default_settings
from ..math.efficiency import estimate_capital_efficiency_for_ticks
from ..math.liquidity_math import calculate_deposit_amounts
from ..math.range_math import DepositMode, classify_deposit, is_in_range, validate_range
from ..math.tick_math import get_price_range_for_tick_range, get_tick_spacing
from .display import format_amount, format_counterpart_amount
from .schemas import QuoteRequest, QuoteResult

logger = logging.getLogger(__name__)


def quote_deposit(request: QuoteRequest, settings: Optional[Settings] = None) -> QuoteResult:
    """예치 견적 계산

    Args:
        request: 견적 요청
        settings: 설정 (None이면 전역 설정)

    Returns:
        QuoteResult

    Raises:
        UnknownFeeTierError: 풀 수수료 티어가 테이블에 없음
        DegenerateRangeError: tick_lower >= tick_upper
        InvalidTickSpacingError: 틱이 틱 간격의 배수가 아님
        TickOutOfBoundsError: 틱이 유효 범위를 벗어남
        InvalidAmountError: 수량이 0 이하이거나, 단방향 구간에서 반대 토큰이 주어짐
    """
    settings = settings or default_settings
    pool = request.pool
    token0, token1 = request.pair.token0, request.pair.token1

    tick_spacing = get_tick_spacing(pool.fee_tier, settings)
    tick_lower, tick_upper = validate_range(request.tick_lower, request.tick_upper, tick_spacing)

    mode = classify_deposit(pool.tick, tick_lower, tick_upper)
    in_range = is_in_range(pool.tick, tick_lower, tick_upper)

    amounts = calculate_deposit_amounts(
        request.amount,
        request.input_is_token0,
        pool.sqrt_price_x96,
        tick_lower,
        tick_upper,
    )

    capital_efficiency = None
    if mode is DepositMode.DUAL:
        capital_efficiency = estimate_capital_efficiency_for_ticks(
            pool.sqrt_price_x96, tick_lower, tick_upper, cap=settings.EFFICIENCY_CAP
        )

    price_lower, price_upper = get_price_range_for_tick_range(
        tick_lower, tick_upper, token0.decimals, token1.decimals
    )

    places = settings.AMOUNT_DISPLAY_PLACES
    if request.input_is_token0:
        amount0_display = format_amount(amounts.amount0, token0.decimals, places)
        amount1_display = format_counterpart_amount(amounts.amount1, token1.decimals, places)
    else:
        amount0_display = format_counterpart_amount(amounts.amount0, token0.decimals, places)
        amount1_display = format_amount(amounts.amount1, token1.decimals, places)

    logger.debug(
        "quote %s/%s fee=%d range=[%d, %d) tick=%d mode=%s amount0=%d amount1=%d L=%d",
        token0.symbol or token0.address, token1.symbol or token1.address,
        pool.fee_tier, tick_lower, tick_upper, pool.tick, mode.value,
        amounts.amount0, amounts.amount1, amounts.liquidity,
    )

    return QuoteResult(
        request=request,
        mode=mode,
        in_range=in_range,
        amount0=amounts.amount0,
        amount1=amounts.amount1,
        liquidity=amounts.liquidity,
        capital_efficiency=capital_efficiency,
        amount0_display=amount0_display,
        amount1_display=amount1_display,
        price_lower=price_lower,
        price_upper=price_upper,
        current_price=pool.price(token0.decimals, token1.decimals),
    )
