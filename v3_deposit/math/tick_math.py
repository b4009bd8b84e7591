"""
Tick Math - Tick ↔ Price 변환

Uniswap V3의 틱 수학 함수들. 온체인 컨트랙트와 동일한 정밀도로 구현.

References:
- Uniswap V3 Core: contracts/libraries/TickMath.sol
- Uniswap V3 SDK: nearestUsableTick
- 백서 Section 6.1: Ticks and Tick Spacing

핵심 공식:
    price = 1.0001^tick
    tick = floor(log₁.₀₀₀₁(price))
    sqrtPriceX96 = sqrt(price) * 2^96

틱 간격 반올림 규칙:
    get_nearest_usable_tick은 가장 가까운 배수로 반올림하며,
    정확히 중간이면 항상 +∞ 방향(큰 틱)으로 올립니다.
"""

from typing import Dict, Optional, Tuple

from ..config import Settings, settings as default_settings
from ..constants import MIN_TICK, MAX_TICK, MIN_SQRT_RATIO, MAX_SQRT_RATIO, TICK_BASE, UINT256_MAX
from ..exceptions import InvalidTickSpacingError, TickOutOfBoundsError, UnknownFeeTierError
from .sqrt_price_math import to_raw_price, sqrt_x96_floor


# abs_tick의 각 비트에 대응하는 1/sqrt(1.0001)^(2^i) (Q128.128)
_SQRT_RATIO_FACTORS: Tuple[Tuple[int, int], ...] = (
    (0x2, 0xfff97272373d413259a46990580e213a),
    (0x4, 0xfff2e50f5f656932ef12357cf3c7fdcc),
    (0x8, 0xffe5caca7e10e4e61c3624eaa0941cd0),
    (0x10, 0xffcb9843d60f6159c9db58835c926644),
    (0x20, 0xff973b41fa98c081472e6896dfb254c0),
    (0x40, 0xff2ea16466c96a3843ec78b326b52861),
    (0x80, 0xfe5dee046a99a2a811c461f1969c3053),
    (0x100, 0xfcbe86c7900a88aedcffc83b479aa3a4),
    (0x200, 0xf987a7253ac413176f2b074cf7815e54),
    (0x400, 0xf3392b0822b70005940c7a398e4b70f3),
    (0x800, 0xe7159475a2c29b7443b29c7fa6e889d9),
    (0x1000, 0xd097f3bdfd2022b8845ad8f792aa5825),
    (0x2000, 0xa9f746462d870fdf8a65dc1f90e061e5),
    (0x4000, 0x70d869a156d2a1b890bb3df62baf32f7),
    (0x8000, 0x31be135f97d08fd981231505542fcfa6),
    (0x10000, 0x9aa508b5b7a84e1c677de54f3e99bc9),
    (0x20000, 0x5d6af8dedb81196699c329225ee604),
    (0x40000, 0x2216e584f5fa1ea926041bedfe98),
    (0x80000, 0x48a170391f7dc42444e8fa2),
)


def check_tick(tick: int) -> int:
    """틱이 [MIN_TICK, MAX_TICK] 범위인지 확인"""
    if tick < MIN_TICK or tick > MAX_TICK:
        raise TickOutOfBoundsError(
            f"틱이 유효 범위를 벗어났습니다: {tick} (범위: {MIN_TICK} ~ {MAX_TICK})",
            tick=tick,
        )
    return tick


def get_sqrt_ratio_at_tick(tick: int) -> int:
    """틱에서 sqrtPriceX96 계산

    Solidity TickMath.getSqrtRatioAtTick()과 동일한 구현.
    온체인 수준의 정밀도를 위해 정수 연산만 사용.

    Args:
        tick: 틱 인덱스 (-887272 ~ 887272)

    Returns:
        sqrtPriceX96 (Q64.96 형식)

    Raises:
        TickOutOfBoundsError: 틱이 유효 범위를 벗어난 경우
    """
    check_tick(tick)
    abs_tick = abs(tick)

    ratio = 0xfffcb933bd6fad37aa2d162d1a594001 if abs_tick & 0x1 \
        else 0x100000000000000000000000000000000

    for bit, factor in _SQRT_RATIO_FACTORS:
        if abs_tick & bit:
            ratio = (ratio * factor) >> 128

    if tick > 0:
        ratio = UINT256_MAX // ratio

    # Q128.128 -> Q64.96 (올림)
    return (ratio >> 32) + (1 if ratio % (1 << 32) != 0 else 0)


def get_tick_at_sqrt_ratio(sqrt_price_x96: int) -> int:
    """sqrtPriceX96에서 틱 계산

    Solidity TickMath.getTickAtSqrtRatio()과 동일한 구현.
    get_sqrt_ratio_at_tick(tick) <= sqrt_price_x96 을 만족하는 최대 틱을 반환합니다.

    Raises:
        TickOutOfBoundsError: sqrtPriceX96이 [MIN_SQRT_RATIO, MAX_SQRT_RATIO) 밖인 경우
    """
    if sqrt_price_x96 < MIN_SQRT_RATIO or sqrt_price_x96 >= MAX_SQRT_RATIO:
        raise TickOutOfBoundsError(
            f"sqrtPriceX96이 유효 범위를 벗어났습니다: {sqrt_price_x96}"
        )

    ratio = sqrt_price_x96 << 32
    msb = ratio.bit_length() - 1

    if msb >= 128:
        r = ratio >> (msb - 127)
    else:
        r = ratio << (127 - msb)

    log_2 = (msb - 128) << 64

    # log2 소수부 14비트
    for i in range(14):
        r = (r * r) >> 127
        f = r >> 128
        log_2 |= f << (63 - i)
        r >>= f

    log_sqrt10001 = log_2 * 255738958999603826347141

    tick_low = (log_sqrt10001 - 3402992956809132418596140100660247210) >> 128
    tick_high = (log_sqrt10001 + 291339464771989622907027621153398088495) >> 128

    if tick_low == tick_high:
        return tick_low

    return tick_high if get_sqrt_ratio_at_tick(tick_high) <= sqrt_price_x96 else tick_low


def tick_to_price(tick: int, token0_decimals: int = 18, token1_decimals: int = 18) -> float:
    """틱을 human-readable 가격으로 변환

    price = 1.0001^tick × 10^(token0_decimals - token1_decimals)

    Args:
        tick: 틱 인덱스
        token0_decimals: token0 소수점 자릿수 (예: USDC = 6)
        token1_decimals: token1 소수점 자릿수 (예: WETH = 18)

    Returns:
        가격 (token1/token0)

    Raises:
        TickOutOfBoundsError: 틱이 유효 범위를 벗어난 경우
    """
    check_tick(tick)
    return TICK_BASE ** tick * (10 ** (token0_decimals - token1_decimals))


def price_to_tick(price, token0_decimals: int = 18, token1_decimals: int = 18) -> int:
    """Human-readable 가격을 틱으로 변환

    tick = floor(log₁.₀₀₀₁(price × 10^(token1_decimals - token0_decimals)))

    log/float 대신 floor sqrtPriceX96과 TickMath를 사용하므로
    풀이 같은 가격에서 보고하는 틱과 정확히 일치합니다.
    tick_to_price와의 왕복은 float 반올림 때문에 ±1 틱 차이가 날 수 있습니다.

    Args:
        price: 가격 (token1/token0)
        token0_decimals: token0 소수점 자릿수
        token1_decimals: token1 소수점 자릿수

    Returns:
        틱 인덱스

    Raises:
        InvalidPriceError: 0 이하, NaN, 무한대 가격
        TickOutOfBoundsError: 표현 가능한 틱 범위 밖의 가격
    """
    raw_price = to_raw_price(price, token0_decimals, token1_decimals)
    sqrt_price_x96 = sqrt_x96_floor(raw_price)

    if sqrt_price_x96 < MIN_SQRT_RATIO or sqrt_price_x96 >= MAX_SQRT_RATIO:
        raise TickOutOfBoundsError(
            f"표현 가능한 가격 범위를 벗어났습니다: {price!r}"
        )

    return get_tick_at_sqrt_ratio(sqrt_price_x96)


def check_tick_spacing(tick_spacing: int) -> int:
    """틱 간격이 양의 정수인지 확인"""
    if isinstance(tick_spacing, bool) or not isinstance(tick_spacing, int) or tick_spacing <= 0:
        raise InvalidTickSpacingError(f"틱 간격은 양의 정수여야 합니다: {tick_spacing!r}")
    return tick_spacing


def round_tick_to_spacing(tick: int, tick_spacing: int) -> int:
    """틱을 가장 가까운 틱 간격 배수로 반올림 (범위 제한 없음)

    정확히 중간이면 +∞ 방향으로 올립니다 (양수는 올림, 음수는 0 방향).
    """
    check_tick_spacing(tick_spacing)

    # Python의 floor division을 사용하여 lower bound 계산
    lower = (tick // tick_spacing) * tick_spacing
    upper = lower + tick_spacing

    return upper if (upper - tick) <= (tick - lower) else lower


def align_tick_to_spacing(tick: int, tick_spacing: int, round_down: bool = True) -> int:
    """틱을 한 방향으로 정렬

    요청한 가격 경계를 넘어가면 안 될 때 사용합니다.

    Args:
        tick: 원래 틱
        tick_spacing: 틱 간격
        round_down: True = -∞ 방향, False = +∞ 방향

    Returns:
        정렬된 틱
    """
    check_tick_spacing(tick_spacing)
    if tick % tick_spacing == 0:
        return tick
    if round_down:
        return (tick // tick_spacing) * tick_spacing
    return (tick // tick_spacing + 1) * tick_spacing


def get_min_usable_tick(tick_spacing: int) -> int:
    """MIN_TICK 이상인 가장 작은 틱 간격 배수"""
    check_tick_spacing(tick_spacing)
    return -(MAX_TICK // tick_spacing) * tick_spacing


def get_max_usable_tick(tick_spacing: int) -> int:
    """MAX_TICK 이하인 가장 큰 틱 간격 배수"""
    check_tick_spacing(tick_spacing)
    return (MAX_TICK // tick_spacing) * tick_spacing


def get_nearest_usable_tick(tick: int, tick_spacing: int) -> int:
    """가장 가까운 사용 가능 틱

    결과는 항상 tick_spacing의 배수이며 [min_usable, max_usable] 안에 있습니다.
    중간값은 +∞ 방향으로 반올림됩니다.

    Raises:
        InvalidTickSpacingError: tick_spacing <= 0
        TickOutOfBoundsError: 입력 틱이 [MIN_TICK, MAX_TICK] 밖인 경우
    """
    check_tick(tick)
    rounded = round_tick_to_spacing(tick, tick_spacing)
    return max(get_min_usable_tick(tick_spacing), min(get_max_usable_tick(tick_spacing), rounded))


def get_tick_spacing(fee_tier: int, settings: Optional[Settings] = None) -> int:
    """수수료 티어에 해당하는 틱 간격 반환

    Args:
        fee_tier: 수수료 티어 (100, 500, 3000, 10000, 100000 + 설정된 추가 티어)
        settings: 설정 (None이면 전역 설정)

    Returns:
        틱 간격

    Raises:
        UnknownFeeTierError: 알 수 없는 수수료 티어
    """
    spacings: Dict[int, int] = (settings or default_settings).tick_spacings
    if fee_tier not in spacings:
        raise UnknownFeeTierError(fee_tier, spacings.keys())
    return spacings[fee_tier]


def get_price_range_for_tick_range(
    tick_lower: int,
    tick_upper: int,
    token0_decimals: int = 18,
    token1_decimals: int = 18
) -> Tuple[float, float]:
    """틱 범위 → 가격 범위 (price_lower, price_upper)"""
    return (
        tick_to_price(tick_lower, token0_decimals, token1_decimals),
        tick_to_price(tick_upper, token0_decimals, token1_decimals),
    )
