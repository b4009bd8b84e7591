"""
Sqrt Price Math - sqrtPriceX96 관련 계산

Uniswap V3의 가격은 sqrtPriceX96 형식으로 저장됩니다.
sqrtPriceX96 = sqrt(price) * 2^96

가격은 항상 token1/token0 (human-readable) 기준이며,
raw 가격 = price × 10^(decimals1 - decimals0) 입니다.

float는 human-readable 가격 표시에만 사용하고,
sqrtPriceX96 자체는 정확한 정수 연산(Fraction, isqrt)으로 계산합니다.

References:
- Uniswap V3 Core: contracts/libraries/SqrtPriceMath.sol
- Uniswap V3 Core: contracts/libraries/FullMath.sol
"""

import math
from decimal import Decimal
from fractions import Fraction

from ..constants import Q192, MIN_SQRT_RATIO, MAX_SQRT_RATIO
from ..exceptions import InvalidPriceError, TickOutOfBoundsError


# price → sqrtPriceX96 → price 왕복 허용 상대 오차
ROUNDTRIP_RELATIVE_TOLERANCE: float = 1e-9


def to_exact_price(price) -> Fraction:
    """가격을 정확한 유리수로 변환

    Args:
        price: int, float, Decimal 또는 Fraction

    Returns:
        Fraction (항상 양수)

    Raises:
        InvalidPriceError: 0 이하, NaN, 무한대, 숫자가 아닌 입력
    """
    if isinstance(price, bool) or not isinstance(price, (int, float, Decimal, Fraction)):
        raise InvalidPriceError(f"가격은 숫자여야 합니다: {price!r}")
    if isinstance(price, float) and not math.isfinite(price):
        raise InvalidPriceError(f"가격은 유한한 값이어야 합니다: {price!r}")
    if isinstance(price, Decimal) and not price.is_finite():
        raise InvalidPriceError(f"가격은 유한한 값이어야 합니다: {price!r}")

    value = Fraction(price)
    if value <= 0:
        raise InvalidPriceError(f"가격은 양수여야 합니다: {price!r}")
    return value


def to_raw_price(price, decimal0: int, decimal1: int) -> Fraction:
    """Human-readable 가격 → raw 가격 (정확한 유리수)

    raw = price × 10^(decimal1 - decimal0)
    """
    return to_exact_price(price) * Fraction(10) ** (decimal1 - decimal0)


def sqrt_x96_floor(raw_price: Fraction) -> int:
    """floor(sqrt(raw_price) * 2^96)"""
    numerator = raw_price.numerator << 192
    return math.isqrt(numerator // raw_price.denominator)


def sqrt_x96_nearest(raw_price: Fraction) -> int:
    """round(sqrt(raw_price) * 2^96), 가장 가까운 정수"""
    numerator = raw_price.numerator << 192
    denominator = raw_price.denominator
    root = math.isqrt(numerator // denominator)

    # (root + 1/2)^2 < N 이면 root + 1이 더 가까움
    if 4 * numerator > (4 * root * root + 4 * root + 1) * denominator:
        root += 1
    return root


def sqrt_price_x96_to_price(
    sqrt_price_x96: int,
    decimal0: int = 18,
    decimal1: int = 18
) -> float:
    """sqrtPriceX96을 human-readable 가격으로 변환

    가격 = sqrtPriceX96^2 / 2^192 × 10^(decimal0 - decimal1)

    제곱/나눗셈은 정확한 유리수로 계산하고 마지막에 한 번만 float로 반올림합니다.

    Args:
        sqrt_price_x96: sqrtPriceX96 값
        decimal0: token0 소수점 자릿수
        decimal1: token1 소수점 자릿수

    Returns:
        가격 (token1/token0 기준, human-readable)

    Raises:
        InvalidPriceError: sqrtPriceX96이 양의 정수가 아닌 경우
    """
    if isinstance(sqrt_price_x96, bool) or not isinstance(sqrt_price_x96, int):
        raise InvalidPriceError(f"sqrtPriceX96은 정수여야 합니다: {sqrt_price_x96!r}")
    if sqrt_price_x96 <= 0:
        raise InvalidPriceError(f"sqrtPriceX96은 양수여야 합니다: {sqrt_price_x96}")

    price = Fraction(sqrt_price_x96 * sqrt_price_x96, Q192)
    price *= Fraction(10) ** (decimal0 - decimal1)
    return float(price)


def price_to_sqrt_price_x96(
    price,
    decimal0: int = 18,
    decimal1: int = 18
) -> int:
    """Human-readable 가격을 sqrtPriceX96으로 변환

    sqrtPriceX96 = round(sqrt(price × 10^(decimal1 - decimal0)) × 2^96)

    float 가격은 이진 표현 그대로의 정확한 유리수로 취급되므로
    정수 변환 과정에서 추가 오차가 발생하지 않습니다.

    Args:
        price: 가격 (token1/token0 기준)
        decimal0: token0 소수점 자릿수
        decimal1: token1 소수점 자릿수

    Returns:
        sqrtPriceX96 값

    Raises:
        InvalidPriceError: 0 이하, NaN, 무한대 가격
        TickOutOfBoundsError: [MIN_SQRT_RATIO, MAX_SQRT_RATIO) 범위 밖
    """
    sqrt_price_x96 = sqrt_x96_nearest(to_raw_price(price, decimal0, decimal1))

    if sqrt_price_x96 < MIN_SQRT_RATIO or sqrt_price_x96 >= MAX_SQRT_RATIO:
        raise TickOutOfBoundsError(
            f"표현 가능한 가격 범위를 벗어났습니다: price={price!r} "
            f"(sqrtPriceX96={sqrt_price_x96})"
        )

    return sqrt_price_x96


def mul_div(a: int, b: int, denominator: int) -> int:
    """floor(a * b / denominator), FullMath.mulDiv"""
    if denominator == 0:
        raise ZeroDivisionError("mul_div: denominator is zero")
    return (a * b) // denominator


def mul_div_rounding_up(a: int, b: int, denominator: int) -> int:
    """(a * b) / denominator 올림"""
    result = mul_div(a, b, denominator)
    if (a * b) % denominator > 0:
        result += 1
    return result


def div_rounding_up(numerator: int, denominator: int) -> int:
    """numerator / denominator 올림"""
    result = numerator // denominator
    if numerator % denominator > 0:
        result += 1
    return result
