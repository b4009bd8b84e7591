"""
Quote Request/Result Schemas using Pydantic

예치 견적의 입력과 출력을 불변 값으로 정의합니다.
모든 수량 필드는 온체인 정밀도를 위해 최소 단위 int를 사용합니다.
"""
from typing import Any, Dict, Optional, Sequence, Union

from pydantic import BaseModel, Field, model_validator

from ..exceptions import InvalidPriceError, InvalidTokenPairError
from ..math.range_math import DepositMode
from ..math.sqrt_price_math import sqrt_price_x96_to_price
from ..math.tick_math import get_tick_at_sqrt_ratio


class TokenInfo(BaseModel):
    """ERC20 토큰 정보"""
    address: str = Field(..., description="Token contract address", min_length=1)
    decimals: int = Field(..., description="Token decimals", ge=0, le=77)
    symbol: str = Field(default="", description="Token symbol")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "address": "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",
                "decimals": 6,
                "symbol": "USDC"
            }
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TokenInfo":
        return cls(
            address=data.get("address", data.get("id")),
            decimals=int(data["decimals"]),
            symbol=data.get("symbol", ""),
        )

    @property
    def sort_key(self) -> str:
        return self.address.lower()


class TokenPair(BaseModel):
    """주소 순으로 정렬된 토큰 쌍 (token0 < token1)

    input_a_is_token0: from_tokens에 첫 번째로 넘긴 토큰이 token0인지 여부.
    """
    token0: TokenInfo
    token1: TokenInfo
    input_a_is_token0: bool = True

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_order(self) -> "TokenPair":
        if self.token0.sort_key == self.token1.sort_key:
            raise InvalidTokenPairError(f"같은 토큰으로 페어를 만들 수 없습니다: {self.token0.address}")
        if self.token0.sort_key > self.token1.sort_key:
            raise InvalidTokenPairError(
                f"token0 주소가 token1 주소보다 작아야 합니다: {self.token0.address} > {self.token1.address}"
            )
        return self

    @classmethod
    def from_tokens(cls, token_a: TokenInfo, token_b: TokenInfo) -> "TokenPair":
        """임의 순서의 두 토큰으로 페어 생성

        Raises:
            InvalidTokenPairError: 두 토큰의 주소가 같은 경우
        """
        if token_a.sort_key == token_b.sort_key:
            raise InvalidTokenPairError(f"같은 토큰으로 페어를 만들 수 없습니다: {token_a.address}")
        if token_a.sort_key < token_b.sort_key:
            return cls(token0=token_a, token1=token_b, input_a_is_token0=True)
        return cls(token0=token_b, token1=token_a, input_a_is_token0=False)

    def is_token0(self, token: TokenInfo) -> bool:
        """토큰이 token0이면 True, token1이면 False

        Raises:
            InvalidTokenPairError: 페어에 없는 토큰
        """
        if token.sort_key == self.token0.sort_key:
            return True
        if token.sort_key == self.token1.sort_key:
            return False
        raise InvalidTokenPairError(f"페어에 속하지 않는 토큰입니다: {token.address}")


class PoolState(BaseModel):
    """풀 현재 상태 (slot0 + 수수료 티어)"""
    sqrt_price_x96: int = Field(..., description="Current sqrtPriceX96", gt=0)
    tick: int = Field(..., description="Current tick")
    fee_tier: int = Field(..., description="Pool fee tier (hundredths of a bip)", gt=0)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "sqrt_price_x96": 79228162514264337593543950336,
                "tick": 0,
                "fee_tier": 3000
            }
        }

    @model_validator(mode="after")
    def check_tick(self) -> "PoolState":
        # 예치 방식은 tick, 수량은 sqrtPriceX96으로 계산하므로 두 값이 같은 틱을 가리켜야 함
        expected = get_tick_at_sqrt_ratio(self.sqrt_price_x96)
        if expected != self.tick:
            raise InvalidPriceError(
                f"tick이 sqrtPriceX96과 맞지 않습니다: tick={self.tick}, "
                f"sqrtPriceX96 기준 tick={expected}"
            )
        return self

    @classmethod
    def from_slot0(
        cls,
        slot0: Union[Dict[str, Any], Sequence[Any]],
        fee_tier: Optional[int] = None
    ) -> "PoolState":
        """slot0 조회 결과에서 생성

        Args:
            slot0: {"sqrtPriceX96", "tick", "feeTier"} 딕셔너리 또는
                (sqrtPriceX96, tick, ...) 튜플
            fee_tier: 수수료 티어 (slot0에 없을 때)
        """
        if isinstance(slot0, dict):
            sqrt_price_x96 = slot0["sqrtPriceX96"]
            tick = slot0["tick"]
            if fee_tier is None:
                fee_tier = slot0.get("feeTier", slot0.get("fee"))
        else:
            sqrt_price_x96, tick = slot0[0], slot0[1]

        if fee_tier is None:
            raise KeyError("feeTier")

        return cls(
            sqrt_price_x96=int(sqrt_price_x96),
            tick=int(tick),
            fee_tier=int(fee_tier),
        )

    def price(self, decimals0: int = 18, decimals1: int = 18) -> float:
        """현재 가격 (token1/token0, human-readable)"""
        return sqrt_price_x96_to_price(self.sqrt_price_x96, decimals0, decimals1)


class QuoteRequest(BaseModel):
    """예치 견적 요청

    amount는 input_is_token0가 가리키는 토큰의 최소 단위 수량입니다.
    수량 검증은 엔진에서 InvalidAmountError로 처리합니다.
    """
    pair: TokenPair
    pool: PoolState
    tick_lower: int
    tick_upper: int
    amount: int
    input_is_token0: bool = True

    class Config:
        frozen = True

    @classmethod
    def for_input_token(
        cls,
        pair: TokenPair,
        pool: PoolState,
        tick_lower: int,
        tick_upper: int,
        amount: int,
        input_token: TokenInfo
    ) -> "QuoteRequest":
        """사용자가 수량을 입력한 토큰으로 요청 생성"""
        return cls(
            pair=pair,
            pool=pool,
            tick_lower=tick_lower,
            tick_upper=tick_upper,
            amount=amount,
            input_is_token0=pair.is_token0(input_token),
        )


class QuoteResult(BaseModel):
    """예치 견적 결과

    amount0/amount1/liquidity가 mint에 쓰일 정확한 값이며,
    *_display 문자열과 가격 필드는 표시용입니다.

    현재 틱이 tick_lower와 같으면 mode는 DUAL이지만, sqrtPriceX96이 하한
    sqrt 가격과 정확히 같은 경우에는 token0 입력만 받고 amount1 = 0입니다.
    """
    request: QuoteRequest
    mode: DepositMode
    in_range: bool
    amount0: int = Field(..., ge=0)
    amount1: int = Field(..., ge=0)
    liquidity: int = Field(..., ge=0)
    capital_efficiency: Optional[float] = None
    amount0_display: str
    amount1_display: str
    price_lower: float
    price_upper: float
    current_price: float

    class Config:
        frozen = True

    @property
    def counterpart_amount(self) -> int:
        """사용자가 입력하지 않은 쪽 토큰 수량"""
        return self.amount1 if self.request.input_is_token0 else self.amount0
