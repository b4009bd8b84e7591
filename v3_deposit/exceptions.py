"""
예치 계산 엔진 오류 정의

모든 오류는 ValueError를 상속하므로 기존 ValueError 처리 코드와 호환됩니다.

- InvalidPriceError / InvalidAmountError: 사용자가 다시 입력하면 복구 가능
- TickOutOfBoundsError: 표현 가능한 가격 범위를 벗어남
- UnknownFeeTierError: 상위 설정 오류, 현재 작업 중단
- DegenerateRangeError: tick_lower >= tick_upper (호출자 결함)
"""


class DepositMathError(ValueError):
    """예치 계산 엔진 기본 오류"""
    pass


class InvalidPriceError(DepositMathError):
    """0 이하, NaN, 무한대 또는 숫자가 아닌 가격"""
    pass


class InvalidAmountError(DepositMathError):
    """0 이하, 정수가 아님, 또는 파싱할 수 없는 수량"""
    pass


class TickOutOfBoundsError(DepositMathError):
    """틱 또는 sqrtPriceX96이 표현 가능한 범위를 벗어남"""

    def __init__(self, message: str, tick=None):
        super().__init__(message)
        self.tick = tick


class UnknownFeeTierError(DepositMathError):
    """틱 간격 테이블에 없는 수수료 티어"""

    def __init__(self, fee_tier: int, known_tiers=None):
        known = sorted(known_tiers) if known_tiers else []
        super().__init__(
            f"지원하지 않는 수수료 티어: {fee_tier}. 지원 티어: {known}"
        )
        self.fee_tier = fee_tier


class DegenerateRangeError(DepositMathError):
    """폭이 0이거나 뒤집힌 범위"""
    pass


class InvalidTickSpacingError(DepositMathError):
    """틱 간격이 양수가 아니거나 틱이 간격의 배수가 아님"""
    pass


class InvalidTokenPairError(DepositMathError):
    """같은 주소의 두 토큰, 또는 페어에 속하지 않는 토큰"""
    pass
