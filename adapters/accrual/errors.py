"""
Accrual 시스템 오류

모두 TransientUpstreamError 하위 클래스.
워커는 해당 주문 상태를 바꾸지 않고 다음 주기에 재시도.
"""

from core.domain.errors import TransientUpstreamError


class OrderNotRegisteredError(TransientUpstreamError):
    """204: Accrual 시스템에 등록되지 않은 주문"""

    def __init__(self, number: str):
        self.number = number
        super().__init__(f"Accrual 시스템에 등록되지 않은 주문: {number}")


class AccrualRateLimitError(TransientUpstreamError):
    """429: 요청 한도 초과

    retry_after는 로그 용도로만 사용 (쿨다운은 설정값 고정).
    """

    def __init__(self, retry_after: int | None = None):
        self.retry_after = retry_after
        message = "Accrual rate limit exceeded"
        if retry_after is not None:
            message += f". Retry after {retry_after} seconds."
        super().__init__(message)


class AccrualServiceError(TransientUpstreamError):
    """500, 예상하지 못한 상태 코드, 전송 오류, 잘못된 응답 본문

    Args:
        message: 오류 설명
        status_code: HTTP 상태 코드 (전송 오류면 None)
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
