"""
도메인 오류 분류

HTTP 상태 코드 매핑:
- ValidationError          → 4xx (400/422), 저장소 변경 없음
- ConflictError            → 409, 변경 없음
- AuthError                → 401, 변경 없음
- ResourceError            → 402, 변경 없음
- TransientUpstreamError   → 사용자에게 노출하지 않음 (워커 로그 후 다음 주기 재시도)
- PersistenceError         → 요청 경로에서는 500, 워커에서는 해당 주문만 다음 주기 재시도
"""


class LoyaltyError(Exception):
    """도메인 오류 베이스"""
    pass


# -------------------------------------------------------------------------
# 검증
# -------------------------------------------------------------------------

class ValidationError(LoyaltyError):
    """입력 검증 실패"""
    pass


class OrderNumberFormatError(ValidationError):
    """주문 번호 형식 오류 (숫자 아님 또는 Luhn 검사 실패)"""

    def __init__(self, number: str):
        self.number = number
        super().__init__(f"주문 번호 형식이 올바르지 않습니다: {number!r}")


# -------------------------------------------------------------------------
# 충돌
# -------------------------------------------------------------------------

class ConflictError(LoyaltyError):
    """다른 사용자 소유 리소스와 충돌"""
    pass


class OrderConflictError(ConflictError):
    """다른 사용자가 이미 등록한 주문"""

    def __init__(self, number: str):
        self.number = number
        super().__init__(f"다른 사용자가 이미 등록한 주문입니다: {number}")


class UserExistsError(ConflictError):
    """이미 존재하는 로그인"""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"이미 존재하는 사용자입니다: {username}")


# -------------------------------------------------------------------------
# 인증
# -------------------------------------------------------------------------

class AuthError(LoyaltyError):
    """인증 실패"""
    pass


class InvalidCredentialsError(AuthError):
    """로그인/비밀번호 불일치"""
    pass


class InvalidTokenError(AuthError):
    """토큰 형식 오류 또는 서명 불일치"""
    pass


class ExpiredTokenError(AuthError):
    """토큰 만료"""
    pass


class UserNotFoundError(AuthError):
    """토큰은 유효하지만 사용자가 없음"""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"사용자를 찾을 수 없습니다: {username}")


# -------------------------------------------------------------------------
# 잔고
# -------------------------------------------------------------------------

class ResourceError(LoyaltyError):
    """리소스 부족"""
    pass


class InsufficientFundsError(ResourceError):
    """출금 요청 금액이 현재 잔고보다 큼"""

    def __init__(self, username: str, requested: object, available: object):
        self.username = username
        self.requested = requested
        self.available = available
        super().__init__(
            f"잔고 부족: user={username}, requested={requested}, available={available}"
        )


# -------------------------------------------------------------------------
# 외부 시스템 / 저장소
# -------------------------------------------------------------------------

class TransientUpstreamError(LoyaltyError):
    """외부 Accrual 시스템 일시 오류 (다음 주기에 재시도)"""
    pass


class PersistenceError(LoyaltyError):
    """저장소 오류"""
    pass
