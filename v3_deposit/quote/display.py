"""
표시용 포맷팅과 입력 파싱

여기서 만든 문자열은 화면 표시 전용입니다. mint에 쓰이는 값은 항상
엔진이 계산한 최소 단위 정수이며, 표시 문자열을 다시 계산에 넣지 않습니다.

parse_amount는 사용자가 직접 입력한 문자열을 엔진에 넘기기 전에
최소 단위 정수로 바꾸는 경계 함수입니다.
"""

import math
import re
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Optional

from ..config import settings as default_settings
from ..constants import FEE_TIERS
from ..exceptions import InvalidAmountError, InvalidPriceError

MAX_DECIMALS = 77

# uint256 전체 자릿수 + 소수점 이하 자릿수를 담을 수 있는 정밀도
_PRECISION = 160

_AMOUNT_PATTERN = re.compile(r"^([0-9]*)(?:\.([0-9]*))?$")


def _check_decimals(decimals: int) -> int:
    if isinstance(decimals, bool) or not isinstance(decimals, int) or not 0 <= decimals <= MAX_DECIMALS:
        raise ValueError(f"decimals는 0 ~ {MAX_DECIMALS} 사이 정수여야 합니다: {decimals!r}")
    return decimals


def _to_units(raw: int, decimals: int) -> Decimal:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise InvalidAmountError(f"수량은 최소 단위 정수여야 합니다: {raw!r}")
    if raw < 0:
        raise InvalidAmountError(f"수량은 음수일 수 없습니다: {raw}")
    _check_decimals(decimals)
    return Decimal(raw).scaleb(-decimals)


def _plain(value: Decimal) -> str:
    """지수 표기 없이, 뒤쪽 0 제거"""
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def format_amount(raw: int, decimals: int, places: Optional[int] = None) -> str:
    """최소 단위 수량을 표시용 문자열로 변환

    places 자릿수로 반올림하고 뒤쪽 0을 제거합니다.
    반올림하면 0이 되는 아주 작은 값은 지수 표기로 보여줍니다.

    Args:
        raw: 최소 단위 수량
        decimals: 토큰 소수점 자릿수
        places: 표시 자릿수 (None이면 settings.AMOUNT_DISPLAY_PLACES)

    Returns:
        표시용 문자열
    """
    places = default_settings.AMOUNT_DISPLAY_PLACES if places is None else places
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        value = _to_units(raw, decimals)
        if value == 0:
            return "0"

        rounded = value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
        if rounded == 0:
            return f"{value:.2e}"
        return _plain(rounded)


def format_counterpart_amount(raw: int, decimals: int, places: Optional[int] = None) -> str:
    """자동 계산된 반대쪽 수량 표시

    0이 아닌 수량을 "0"으로 보여주지 않습니다. 표시 자릿수보다 작은 값은
    정확한 전체 소수 문자열로 반환하므로 parse_amount로 같은 값을 복원할 수 있습니다.
    """
    places = default_settings.AMOUNT_DISPLAY_PLACES if places is None else places
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        value = _to_units(raw, decimals)
        if value == 0:
            return "0"

        if value < Decimal(1).scaleb(-places):
            return _plain(value)
        return _plain(value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


def format_price(price: float, places: Optional[int] = None) -> str:
    """가격 표시 (아주 크거나 작은 가격은 유효숫자 표기)

    Raises:
        InvalidPriceError: 0 이하, NaN, 무한대
    """
    places = default_settings.PRICE_DISPLAY_PLACES if places is None else places
    if not math.isfinite(price) or price <= 0:
        raise InvalidPriceError(f"표시할 수 없는 가격입니다: {price!r}")

    if price < 10 ** -places or price >= 1e15:
        return f"{price:.{max(places, 1)}g}"

    text = f"{price:.{places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def parse_amount(text: str, decimals: int) -> int:
    """사용자 입력 문자열을 최소 단위 정수로 변환

    "1.5" (decimals=6) → 1500000

    Args:
        text: 10진수 문자열 (부호, 지수, 천 단위 구분자 없음)
        decimals: 토큰 소수점 자릿수

    Returns:
        최소 단위 수량 (0 이상)

    Raises:
        InvalidAmountError: 형식이 잘못되었거나 소수점 이하 자릿수가 decimals를 초과
    """
    _check_decimals(decimals)
    if not isinstance(text, str):
        raise InvalidAmountError(f"수량 문자열이 아닙니다: {text!r}")

    match = _AMOUNT_PATTERN.match(text.strip())
    if match is None:
        raise InvalidAmountError(f"잘못된 수량 형식입니다: {text!r}")

    whole, fraction = match.group(1), match.group(2) or ""
    if not whole and not fraction:
        raise InvalidAmountError(f"잘못된 수량 형식입니다: {text!r}")

    significant = fraction.rstrip("0")
    if len(significant) > decimals:
        raise InvalidAmountError(
            f"소수점 이하 자릿수가 너무 많습니다: {text!r} (최대 {decimals}자리)"
        )

    return int(whole or "0") * 10 ** decimals + int(significant.ljust(decimals, "0") or "0")


def format_fee_tier(fee_tier: int) -> str:
    """수수료 티어 표시 (3000 → "0.30%")"""
    if fee_tier in FEE_TIERS:
        return FEE_TIERS[fee_tier]
    return f"{fee_tier / 10000:.2f}%"
