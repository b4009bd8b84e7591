"""
Deposit Quote Cache - 마지막 견적 메모

화면이 같은 입력으로 견적을 반복 요청할 때 재계산과 표시 문자열 재파싱을 피합니다.
입력(QuoteRequest)이 하나라도 바뀌면 다시 계산합니다.

한 UI 세션이 소유하는 객체이며 스레드 안전하지 않습니다.
"""
import logging
from typing import Optional, Tuple

from ..config import Settings
from .engine import quote_deposit
from .schemas import QuoteRequest, QuoteResult

logger = logging.getLogger(__name__)


class DepositQuoteCache:
    """단일 항목 견적 캐시

    사용법:
        cache = DepositQuoteCache()
        result = cache.get(request)      # 계산
        result = cache.get(request)      # 캐시
        cache.invalidate()               # 새 블록, 가격 갱신 등
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Args:
            settings: quote_deposit에 넘길 설정 (None이면 전역 설정)
        """
        self.settings = settings
        self._entry: Optional[Tuple[QuoteRequest, QuoteResult]] = None
        self.hits = 0
        self.misses = 0

    def get(self, request: QuoteRequest, use_cache: bool = True) -> QuoteResult:
        """견적 조회

        Args:
            request: 견적 요청
            use_cache: False면 항상 다시 계산

        Returns:
            QuoteResult

        Raises:
            quote_deposit과 동일. 오류가 나면 이전 항목도 비워집니다.
        """
        if use_cache and self._entry is not None and self._entry[0] == request:
            self.hits += 1
            return self._entry[1]

        self._entry = None
        self.misses += 1
        logger.debug("quote cache miss (hits=%d, misses=%d)", self.hits, self.misses)

        result = quote_deposit(request, self.settings)
        self._entry = (request, result)
        return result

    def invalidate(self) -> None:
        """캐시 비우기"""
        self._entry = None

    def peek(self) -> Optional[Tuple[QuoteRequest, QuoteResult]]:
        """현재 캐시 항목 (request, result) 또는 None"""
        return self._entry

    def __len__(self) -> int:
        return 0 if self._entry is None else 1
