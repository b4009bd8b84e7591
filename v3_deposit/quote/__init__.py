"""
Quote layer

- schemas: 불변 요청/결과 모델
- engine: quote_deposit
- cache: 입력이 바뀌면 다시 계산하는 견적 캐시
- display: 표시용 포맷팅, 입력 파싱
"""

from .schemas import TokenInfo, TokenPair, PoolState, QuoteRequest, QuoteResult
from .engine import quote_deposit
from .cache import DepositQuoteCache
from .display import (
    format_amount,
    format_counterpart_amount,
    format_fee_tier,
    format_price,
    parse_amount,
)
