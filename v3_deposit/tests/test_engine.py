"""
Quote Engine 테스트

QuoteRequest → QuoteResult 전체 흐름을 테스트합니다.
"""

import logging

import pytest
from pydantic import ValidationError

from ..config import Settings
from ..exceptions import (
    DegenerateRangeError,
    InvalidAmountError,
    InvalidTickSpacingError,
    InvalidTokenPairError,
    UnknownFeeTierError,
)
from ..math.liquidity_math import get_liquidity_for_amounts
from ..math.presets import wide_range
from ..math.range_math import DepositMode
from ..math.sqrt_price_math import price_to_sqrt_price_x96
from ..math.tick_math import get_nearest_usable_tick, get_sqrt_ratio_at_tick, get_tick_at_sqrt_ratio
from ..quote.engine import quote_deposit
from ..quote.schemas import PoolState, QuoteRequest, TokenInfo, TokenPair

USDC = TokenInfo(address="0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", decimals=6, symbol="USDC")
WETH = TokenInfo(address="0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2", decimals=18, symbol="WETH")


@pytest.fixture
def pair():
    return TokenPair.from_tokens(WETH, USDC)


@pytest.fixture
def pool():
    """token0=USDC(6), token1=WETH(18), 가격 2000, 0.3% 풀"""
    sqrt_price_x96 = price_to_sqrt_price_x96(2000, 6, 18)
    return PoolState(
        sqrt_price_x96=sqrt_price_x96,
        tick=get_tick_at_sqrt_ratio(sqrt_price_x96),
        fee_tier=3000,
    )


def make_request(pair, pool, tick_lower, tick_upper, amount, input_is_token0=True):
    return QuoteRequest(
        pair=pair,
        pool=pool,
        tick_lower=tick_lower,
        tick_upper=tick_upper,
        amount=amount,
        input_is_token0=input_is_token0,
    )


class TestQuoteDeposit:
    """quote_deposit 테스트"""

    def test_dual_sided(self, pair, pool):
        """범위 내: token0 1 USDC → token1 > 0, 자본 효율 > 1"""
        tick_range = wide_range(2000, pool.tick, 60, 6, 18)
        request = make_request(pair, pool, tick_range.tick_lower, tick_range.tick_upper, 1_000_000)

        result = quote_deposit(request)

        assert result.mode == DepositMode.DUAL
        assert result.in_range
        assert result.amount0 == 1_000_000
        assert result.amount1 > 0
        assert result.liquidity > 0
        assert result.capital_efficiency > 1
        assert result.amount0_display == "1"
        assert result.counterpart_amount == result.amount1
        assert result.price_lower < result.current_price < result.price_upper
        assert result.current_price == pytest.approx(2000, rel=1e-9)

    def test_contract_recomputes_liquidity(self, pair, pool):
        tick_range = wide_range(2000, pool.tick, 60, 6, 18)
        request = make_request(
            pair, pool, tick_range.tick_lower, tick_range.tick_upper, 5 * 10 ** 17, input_is_token0=False
        )

        result = quote_deposit(request)

        liquidity = get_liquidity_for_amounts(
            pool.sqrt_price_x96,
            get_sqrt_ratio_at_tick(tick_range.tick_lower),
            get_sqrt_ratio_at_tick(tick_range.tick_upper),
            result.amount0,
            result.amount1,
        )
        assert liquidity == result.liquidity
        assert result.counterpart_amount == result.amount0

    def test_below_range(self, pair, pool):
        """현재 틱 < tick_lower: token0만, amount1 = 0"""
        base = get_nearest_usable_tick(pool.tick, 60)
        request = make_request(pair, pool, base + 600, base + 1200, 1_000_000)

        result = quote_deposit(request)

        assert result.mode == DepositMode.TOKEN0_ONLY
        assert not result.in_range
        assert result.amount0 == 1_000_000
        assert result.amount1 == 0
        assert result.amount1_display == "0"
        assert result.capital_efficiency is None

    def test_above_range(self, pair, pool):
        base = get_nearest_usable_tick(pool.tick, 60)
        request = make_request(pair, pool, base - 1200, base - 600, 10 ** 18, input_is_token0=False)

        result = quote_deposit(request)

        assert result.mode == DepositMode.TOKEN1_ONLY
        assert result.amount0 == 0
        assert result.amount1 == 10 ** 18

    def test_wrong_token_for_single_sided(self, pair, pool):
        base = get_nearest_usable_tick(pool.tick, 60)
        request = make_request(pair, pool, base + 600, base + 1200, 10 ** 18, input_is_token0=False)
        with pytest.raises(InvalidAmountError):
            quote_deposit(request)

    def test_lower_boundary_accepts_token0_only(self, pair):
        """현재 가격이 정확히 하한: DUAL로 분류되지만 token1 입력은 거부"""
        pool = PoolState(sqrt_price_x96=2 ** 96, tick=0, fee_tier=3000)

        result = quote_deposit(make_request(pair, pool, 0, 60, 1_000_000))
        assert result.mode == DepositMode.DUAL
        assert result.amount1 == 0

        with pytest.raises(InvalidAmountError, match="하한 경계"):
            quote_deposit(make_request(pair, pool, 0, 60, 10 ** 18, input_is_token0=False))

    def test_degenerate_range(self, pair, pool):
        request = make_request(pair, pool, 600, 600, 1_000_000)
        with pytest.raises(DegenerateRangeError):
            quote_deposit(request)

    def test_unsnapped_ticks(self, pair, pool):
        base = get_nearest_usable_tick(pool.tick, 60)
        request = make_request(pair, pool, base - 601, base + 600, 1_000_000)
        with pytest.raises(InvalidTickSpacingError):
            quote_deposit(request)

    @pytest.mark.parametrize("amount", [0, -5])
    def test_invalid_amount(self, pair, pool, amount):
        tick_range = wide_range(2000, pool.tick, 60, 6, 18)
        request = make_request(pair, pool, tick_range.tick_lower, tick_range.tick_upper, amount)
        with pytest.raises(InvalidAmountError):
            quote_deposit(request)

    def test_unknown_fee_tier(self, pair):
        pool = PoolState(sqrt_price_x96=2 ** 96, tick=0, fee_tier=2500)
        request = make_request(pair, pool, -500, 500, 1_000_000)
        with pytest.raises(UnknownFeeTierError):
            quote_deposit(request, Settings(environ={}))

    def test_extra_fee_tier(self, pair):
        settings = Settings(environ={"V3_DEPOSIT_EXTRA_FEE_TIERS": "2500:50"})
        pool = PoolState(sqrt_price_x96=2 ** 96, tick=0, fee_tier=2500)
        request = make_request(pair, pool, -500, 500, 1_000_000)

        result = quote_deposit(request, settings)

        assert result.mode == DepositMode.DUAL
        assert result.amount1 > 0

    def test_efficiency_cap_from_settings(self, pair, pool):
        base = get_nearest_usable_tick(pool.tick, 60)
        settings = Settings(environ={"V3_DEPOSIT_EFFICIENCY_CAP": "5"})
        request = make_request(pair, pool, base - 60, base + 60, 1_000_000)

        result = quote_deposit(request, settings)

        assert result.capital_efficiency == 5.0

    def test_logs_at_debug(self, pair, pool, caplog):
        tick_range = wide_range(2000, pool.tick, 60, 6, 18)
        request = make_request(pair, pool, tick_range.tick_lower, tick_range.tick_upper, 1_000_000)

        with caplog.at_level(logging.DEBUG, logger="v3_deposit.quote.engine"):
            quote_deposit(request)

        assert any("mode=dual" in record.getMessage() for record in caplog.records)


class TestSchemas:
    """TokenPair / PoolState / QuoteRequest 테스트"""

    def test_pair_sorted_by_address(self):
        pair = TokenPair.from_tokens(WETH, USDC)
        assert pair.token0 == USDC
        assert pair.token1 == WETH
        assert pair.input_a_is_token0 is False

        pair = TokenPair.from_tokens(USDC, WETH)
        assert pair.input_a_is_token0 is True

    def test_token_from_dict(self):
        """토큰 레지스트리 형식 ({"id", "symbol", "decimals"})"""
        token = TokenInfo.from_dict({"id": WETH.address, "symbol": "WETH", "decimals": "18"})
        assert token == WETH

    def test_pair_same_address(self):
        lower = TokenInfo(address=USDC.address.lower(), decimals=6)
        with pytest.raises(InvalidTokenPairError):
            TokenPair.from_tokens(USDC, lower)

    def test_pair_direct_construction_checks_order(self):
        with pytest.raises(ValidationError):
            TokenPair(token0=WETH, token1=USDC)

    def test_is_token0(self, pair):
        assert pair.is_token0(USDC)
        assert not pair.is_token0(WETH)
        other = TokenInfo(address="0x6B175474E89094C44Da98b954EedeAC495271d0F", decimals=18)
        with pytest.raises(InvalidTokenPairError):
            pair.is_token0(other)

    def test_for_input_token(self, pair, pool):
        request = QuoteRequest.for_input_token(pair, pool, -600, 600, 10 ** 18, WETH)
        assert request.input_is_token0 is False

    def test_request_is_immutable(self, pair, pool):
        request = make_request(pair, pool, -600, 600, 1_000_000)
        with pytest.raises(ValidationError):
            request.amount = 2_000_000

    def test_requests_compare_by_value(self, pair, pool):
        assert make_request(pair, pool, -600, 600, 1) == make_request(pair, pool, -600, 600, 1)
        assert make_request(pair, pool, -600, 600, 1) != make_request(pair, pool, -600, 600, 2)

    def test_pool_from_slot0_dict(self):
        pool = PoolState.from_slot0({
            "sqrtPriceX96": "79228162514264337593543950336",
            "tick": "0",
            "feeTier": "3000",
        })
        assert pool.sqrt_price_x96 == 2 ** 96
        assert pool.tick == 0
        assert pool.fee_tier == 3000
        assert pool.price() == 1.0

    def test_pool_from_slot0_tuple(self):
        pool = PoolState.from_slot0((2 ** 96, 0, 0, 1, 1, 0, True), fee_tier=500)
        assert pool.fee_tier == 500

    def test_pool_from_slot0_missing_fee(self):
        with pytest.raises(KeyError):
            PoolState.from_slot0((2 ** 96, 0))

    def test_pool_rejects_non_positive_price(self):
        with pytest.raises(ValidationError):
            PoolState(sqrt_price_x96=0, tick=0, fee_tier=3000)

    def test_pool_rejects_tick_mismatch(self):
        """tick과 sqrtPriceX96이 다른 틱을 가리키면 오류"""
        with pytest.raises(ValidationError, match="tick이 sqrtPriceX96과 맞지 않습니다"):
            PoolState(sqrt_price_x96=get_sqrt_ratio_at_tick(6000), tick=-6000, fee_tier=3000)

    def test_pool_tick_is_floor_of_sqrt_price(self):
        sqrt_price_x96 = get_sqrt_ratio_at_tick(6000)
        assert PoolState(sqrt_price_x96=sqrt_price_x96, tick=6000, fee_tier=3000).tick == 6000
        assert PoolState(sqrt_price_x96=sqrt_price_x96 - 1, tick=5999, fee_tier=3000).tick == 5999
        with pytest.raises(ValidationError):
            PoolState(sqrt_price_x96=sqrt_price_x96 - 1, tick=6000, fee_tier=3000)

    def test_pool_rejects_price_outside_tick_bounds(self):
        with pytest.raises(ValidationError):
            PoolState(sqrt_price_x96=1, tick=-887272, fee_tier=3000)
