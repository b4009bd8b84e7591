"""
Liquidity Math - 유동성 계산

Uniswap V3의 집중화된 유동성(Concentrated Liquidity) 계산.
특정 가격 범위에서의 토큰 수량과 유동성 간의 변환, 그리고
한쪽 토큰 수량이 주어졌을 때 반대쪽 토큰 수량(counterpart) 계산.

References:
- Uniswap V3 Core: contracts/libraries/SqrtPriceMath.sol
- Uniswap V3 Periphery: contracts/libraries/LiquidityAmounts.sol
- 백서 Section 6.2.1: Concentrated Liquidity

핵심 공식 (가격이 범위 내일 때, √P = 현재, √Pa = 하한, √Pb = 상한):
    L = Δx · √P · √Pb / (√Pb - √P)   # token0 기준
    L = Δy / (√P - √Pa)              # token1 기준
    Δx = L · (√Pb - √P) / (√P · √Pb)
    Δy = L · (√P - √Pa)

모든 계산은 Q96 정수 연산. 반올림 방향:
    - L은 periphery와 동일하게 내림
    - counterpart 수량은 올림 → 컨트랙트의 getLiquidityForAmounts가
      같은 L 이상을 계산하고, 풀의 실제 인출량은 두 desired 수량을 넘지 않음
"""

from typing import NamedTuple, Tuple

from ..constants import Q96, UINT128_MAX
from ..exceptions import DegenerateRangeError, InvalidAmountError, InvalidPriceError
from .sqrt_price_math import mul_div, mul_div_rounding_up, div_rounding_up
from .tick_math import get_sqrt_ratio_at_tick


class DepositAmounts(NamedTuple):
    """예치 수량 계산 결과 (모두 최소 단위 정수)"""
    amount0: int  # token0 desired 수량
    amount1: int  # token1 desired 수량
    liquidity: int  # 두 수량이 공통으로 나타내는 유동성 L


def _sorted(sqrt_ratio_a_x96: int, sqrt_ratio_b_x96: int) -> Tuple[int, int]:
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96
    if sqrt_ratio_a_x96 == sqrt_ratio_b_x96:
        raise DegenerateRangeError(
            f"폭이 0인 가격 구간입니다: sqrtPriceX96={sqrt_ratio_a_x96}"
        )
    return sqrt_ratio_a_x96, sqrt_ratio_b_x96


def get_amount0_delta(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
    round_up: bool = True
) -> int:
    """유동성에서 amount0 변화량 계산

    공식: Δx = L * (√P_b - √P_a) / (√P_a * √P_b)

    Args:
        sqrt_ratio_a_x96: 하한 sqrtPriceX96
        sqrt_ratio_b_x96: 상한 sqrtPriceX96
        liquidity: 유동성
        round_up: True면 올림 (mint 시 풀이 요구하는 양), False면 내림

    Returns:
        amount0 (token0 수량, 최소 단위)
    """
    sqrt_ratio_a_x96, sqrt_ratio_b_x96 = _sorted(sqrt_ratio_a_x96, sqrt_ratio_b_x96)

    numerator1 = liquidity << 96
    numerator2 = sqrt_ratio_b_x96 - sqrt_ratio_a_x96

    if round_up:
        return div_rounding_up(
            mul_div_rounding_up(numerator1, numerator2, sqrt_ratio_b_x96),
            sqrt_ratio_a_x96
        )
    return mul_div(numerator1, numerator2, sqrt_ratio_b_x96) // sqrt_ratio_a_x96


def get_amount1_delta(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
    round_up: bool = True
) -> int:
    """유동성에서 amount1 변화량 계산

    공식: Δy = L * (√P_b - √P_a)
    """
    sqrt_ratio_a_x96, sqrt_ratio_b_x96 = _sorted(sqrt_ratio_a_x96, sqrt_ratio_b_x96)

    if round_up:
        return mul_div_rounding_up(liquidity, sqrt_ratio_b_x96 - sqrt_ratio_a_x96, Q96)
    return mul_div(liquidity, sqrt_ratio_b_x96 - sqrt_ratio_a_x96, Q96)


def get_liquidity_for_amount0(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    amount0: int
) -> int:
    """amount0에서 유동성 계산 (LiquidityAmounts.getLiquidityForAmount0)

    공식: L = Δx * √P_a * √P_b / (√P_b - √P_a)

    Raises:
        DegenerateRangeError: 두 sqrt 가격이 같은 경우
    """
    sqrt_ratio_a_x96, sqrt_ratio_b_x96 = _sorted(sqrt_ratio_a_x96, sqrt_ratio_b_x96)

    intermediate = mul_div(sqrt_ratio_a_x96, sqrt_ratio_b_x96, Q96)
    return mul_div(amount0, intermediate, sqrt_ratio_b_x96 - sqrt_ratio_a_x96)


def get_liquidity_for_amount1(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    amount1: int
) -> int:
    """amount1에서 유동성 계산 (LiquidityAmounts.getLiquidityForAmount1)

    공식: L = Δy / (√P_b - √P_a)
    """
    sqrt_ratio_a_x96, sqrt_ratio_b_x96 = _sorted(sqrt_ratio_a_x96, sqrt_ratio_b_x96)

    return mul_div(amount1, Q96, sqrt_ratio_b_x96 - sqrt_ratio_a_x96)


def get_liquidity_for_amounts(
    sqrt_ratio_x96: int,
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    amount0: int,
    amount1: int
) -> int:
    """토큰 수량에서 유동성 계산

    position manager가 mint 시 사용하는 것과 동일한 계산.
    현재 가격이 범위 내이면 두 제약 조건 중 작은 값을 반환합니다.
    """
    sqrt_ratio_a_x96, sqrt_ratio_b_x96 = _sorted(sqrt_ratio_a_x96, sqrt_ratio_b_x96)

    if sqrt_ratio_x96 <= sqrt_ratio_a_x96:
        # 가격이 범위 아래: token0만 사용
        return get_liquidity_for_amount0(sqrt_ratio_a_x96, sqrt_ratio_b_x96, amount0)

    elif sqrt_ratio_x96 < sqrt_ratio_b_x96:
        # 가격이 범위 내: 양쪽 토큰 사용, 작은 값 반환
        liquidity0 = get_liquidity_for_amount0(sqrt_ratio_x96, sqrt_ratio_b_x96, amount0)
        liquidity1 = get_liquidity_for_amount1(sqrt_ratio_a_x96, sqrt_ratio_x96, amount1)
        return min(liquidity0, liquidity1)

    else:
        # 가격이 범위 위: token1만 사용
        return get_liquidity_for_amount1(sqrt_ratio_a_x96, sqrt_ratio_b_x96, amount1)


def get_amounts_for_liquidity(
    sqrt_ratio_x96: int,
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
    round_up: bool = False
) -> Tuple[int, int]:
    """유동성에서 토큰 수량 계산

    round_up=False: 포지션이 보유한 수량 (LiquidityAmounts.getAmountsForLiquidity)
    round_up=True: mint 시 풀이 실제로 가져가는 수량 (Pool._modifyPosition)

    Returns:
        (amount0, amount1) 튜플
    """
    sqrt_ratio_a_x96, sqrt_ratio_b_x96 = _sorted(sqrt_ratio_a_x96, sqrt_ratio_b_x96)

    if sqrt_ratio_x96 <= sqrt_ratio_a_x96:
        # 가격이 범위 아래: token0만 보유
        amount0 = get_amount0_delta(sqrt_ratio_a_x96, sqrt_ratio_b_x96, liquidity, round_up)
        amount1 = 0

    elif sqrt_ratio_x96 < sqrt_ratio_b_x96:
        # 가격이 범위 내: 양쪽 토큰 보유
        amount0 = get_amount0_delta(sqrt_ratio_x96, sqrt_ratio_b_x96, liquidity, round_up)
        amount1 = get_amount1_delta(sqrt_ratio_a_x96, sqrt_ratio_x96, liquidity, round_up)

    else:
        # 가격이 범위 위: token1만 보유
        amount0 = 0
        amount1 = get_amount1_delta(sqrt_ratio_a_x96, sqrt_ratio_b_x96, liquidity, round_up)

    return amount0, amount1


def get_amount0_for_liquidity_desired(
    sqrt_ratio_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int
) -> int:
    """get_liquidity_for_amount0(√P, √Pb, x) >= liquidity 를 만족하는 최소 x

    periphery의 중간값 mulDiv(√P, √Pb, Q96) 내림까지 역산하므로
    컨트랙트가 같은 L을 다시 계산해 낼 수 있습니다.
    """
    sqrt_ratio_x96, sqrt_ratio_b_x96 = _sorted(sqrt_ratio_x96, sqrt_ratio_b_x96)

    intermediate = mul_div(sqrt_ratio_x96, sqrt_ratio_b_x96, Q96)
    if intermediate == 0:
        raise DegenerateRangeError(
            "가격이 너무 낮아 token0로 유동성을 만들 수 없습니다"
        )
    return mul_div_rounding_up(liquidity, sqrt_ratio_b_x96 - sqrt_ratio_x96, intermediate)


def _amount1_and_liquidity_for_amount0(
    amount0: int,
    sqrt_price_x96: int,
    sqrt_price_lower_x96: int,
    sqrt_price_upper_x96: int
) -> Tuple[int, int]:
    liquidity = get_liquidity_for_amount0(sqrt_price_x96, sqrt_price_upper_x96, amount0)
    return get_amount1_delta(sqrt_price_lower_x96, sqrt_price_x96, liquidity, round_up=True), liquidity


def _amount0_and_liquidity_for_amount1(
    amount1: int,
    sqrt_price_x96: int,
    sqrt_price_lower_x96: int,
    sqrt_price_upper_x96: int
) -> Tuple[int, int]:
    liquidity = get_liquidity_for_amount1(sqrt_price_lower_x96, sqrt_price_x96, amount1)
    return get_amount0_for_liquidity_desired(sqrt_price_x96, sqrt_price_upper_x96, liquidity), liquidity


def get_amount1_for_amount0(
    amount0: int,
    sqrt_price_x96: int,
    sqrt_price_lower_x96: int,
    sqrt_price_upper_x96: int
) -> int:
    """token0 수량에 대응하는 token1 수량

    범위 밖이면 0. 범위 내이면:
        L = liquidity_for_amount0(√P, √Pb, amount0)   (내림)
        amount1 = L · (√P - √Pa) / Q96                 (올림)
    """
    if sqrt_price_x96 <= sqrt_price_lower_x96 or sqrt_price_x96 >= sqrt_price_upper_x96:
        return 0

    amount1, _ = _amount1_and_liquidity_for_amount0(
        amount0, sqrt_price_x96, sqrt_price_lower_x96, sqrt_price_upper_x96
    )
    return amount1


def get_amount0_for_amount1(
    amount1: int,
    sqrt_price_x96: int,
    sqrt_price_lower_x96: int,
    sqrt_price_upper_x96: int
) -> int:
    """token1 수량에 대응하는 token0 수량

    범위 밖이면 0. 범위 내이면:
        L = liquidity_for_amount1(√Pa, √P, amount1)   (내림)
        amount0 = 위 L을 재현하는 최소 token0 수량    (올림)
    """
    if sqrt_price_x96 <= sqrt_price_lower_x96 or sqrt_price_x96 >= sqrt_price_upper_x96:
        return 0

    amount0, _ = _amount0_and_liquidity_for_amount1(
        amount1, sqrt_price_x96, sqrt_price_lower_x96, sqrt_price_upper_x96
    )
    return amount0


def check_amount(amount: int) -> int:
    """수량이 양의 정수(최소 단위)인지 확인"""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError(f"수량은 최소 단위 정수여야 합니다: {amount!r}")
    if amount <= 0:
        raise InvalidAmountError(f"수량은 양수여야 합니다: {amount}")
    return amount


def _check_liquidity(result: DepositAmounts) -> DepositAmounts:
    # 컨트랙트는 L을 uint128로 변환하며 넘으면 revert
    if result.liquidity > UINT128_MAX:
        raise InvalidAmountError(
            f"수량이 너무 커서 유동성이 uint128 범위를 넘습니다: L={result.liquidity}"
        )
    return result


def calculate_deposit_amounts(
    amount: int,
    is_token0: bool,
    sqrt_price_x96: int,
    tick_lower: int,
    tick_upper: int
) -> DepositAmounts:
    """한쪽 토큰 수량으로 예치 수량 쌍 계산

    세 가지 경우:
    1. √P <= √P(tick_lower): token0만 예치, amount1 = 0
    2. √P >= √P(tick_upper): token1만 예치, amount0 = 0
    3. 범위 내: 주어진 토큰으로 L 계산 후 같은 L로 반대쪽 수량 계산

    반대쪽 수량이 정확히 0인 것(가격이 경계와 같을 때)은 유효한 결과입니다.

    Args:
        amount: 사용자가 입력한 수량 (최소 단위 정수)
        is_token0: True면 amount가 token0 수량
        sqrt_price_x96: 현재 풀 sqrtPriceX96
        tick_lower: 하한 틱
        tick_upper: 상한 틱

    Returns:
        DepositAmounts(amount0, amount1, liquidity)

    Raises:
        InvalidAmountError: 수량이 0 이하이거나 정수가 아님, 또는
            단방향 구간에서 예치할 수 없는 쪽 토큰이 주어진 경우
        InvalidPriceError: sqrtPriceX96이 양의 정수가 아님
        DegenerateRangeError: tick_lower >= tick_upper
    """
    check_amount(amount)
    if isinstance(sqrt_price_x96, bool) or not isinstance(sqrt_price_x96, int) or sqrt_price_x96 <= 0:
        raise InvalidPriceError(f"sqrtPriceX96은 양의 정수여야 합니다: {sqrt_price_x96!r}")
    if tick_lower >= tick_upper:
        raise DegenerateRangeError(
            f"tick_lower는 tick_upper보다 작아야 합니다: [{tick_lower}, {tick_upper})"
        )

    sqrt_lower = get_sqrt_ratio_at_tick(tick_lower)
    sqrt_upper = get_sqrt_ratio_at_tick(tick_upper)

    if sqrt_price_x96 <= sqrt_lower:
        # 가격이 하한 이하 (√P == √Pa 경계 포함): token0만
        if not is_token0:
            raise InvalidAmountError("현재 가격이 범위 하한 이하(하한 경계 포함)여서 token0만 예치할 수 있습니다")
        liquidity = get_liquidity_for_amount0(sqrt_lower, sqrt_upper, amount)
        return _check_liquidity(DepositAmounts(amount0=amount, amount1=0, liquidity=liquidity))

    if sqrt_price_x96 >= sqrt_upper:
        # 가격이 범위 위: token1만
        if is_token0:
            raise InvalidAmountError("현재 가격이 범위 상한 이상이어서 token1만 예치할 수 있습니다")
        liquidity = get_liquidity_for_amount1(sqrt_lower, sqrt_upper, amount)
        return _check_liquidity(DepositAmounts(amount0=0, amount1=amount, liquidity=liquidity))

    if is_token0:
        amount1, liquidity = _amount1_and_liquidity_for_amount0(
            amount, sqrt_price_x96, sqrt_lower, sqrt_upper
        )
        return _check_liquidity(DepositAmounts(amount0=amount, amount1=amount1, liquidity=liquidity))

    amount0, liquidity = _amount0_and_liquidity_for_amount1(
        amount, sqrt_price_x96, sqrt_lower, sqrt_upper
    )
    return _check_liquidity(DepositAmounts(amount0=amount0, amount1=amount, liquidity=liquidity))
