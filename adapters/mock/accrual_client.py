"""
Mock Accrual 클라이언트

테스트용 메모리 내 Accrual 시스템.
IAccrualClient Protocol 준수.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from adapters.accrual.errors import (
    AccrualRateLimitError,
    AccrualServiceError,
    OrderNotRegisteredError,
)
from core.domain.models import AccrualResult
from core.types import OrderStatus


@dataclass
class MockAccrualState:
    """Mock 상태 (메모리 내 저장)"""

    # 주문 번호 → 응답
    results: dict[str, AccrualResult] = field(default_factory=dict)

    # 주문 번호 → 강제 오류 (한 번 발생 후 유지)
    errors: dict[str, Exception] = field(default_factory=dict)

    # 남은 호출 수가 0이 되면 429 (None이면 제한 없음)
    calls_before_rate_limit: int | None = None
    retry_after: int | None = 60

    # 호출 기록
    calls: list[str] = field(default_factory=list)


class MockAccrualClient:
    """Mock Accrual 클라이언트

    사용 예시:
    ```python
    client = MockAccrualClient()
    client.set_result("79927398713", OrderStatus.PROCESSED, Decimal("500"))

    result = await client.get_order("79927398713")
    ```
    """

    def __init__(self, state: MockAccrualState | None = None):
        self.state = state or MockAccrualState()
        self.closed = False

    # -------------------------------------------------------------------------
    # 상태 조작 메서드 (테스트용)
    # -------------------------------------------------------------------------

    def set_result(
        self,
        number: str,
        status: OrderStatus,
        accrual: Decimal | None = None,
    ) -> None:
        """주문 응답 설정"""
        self.state.results[number] = AccrualResult(order=number, status=status, accrual=accrual)
        self.state.errors.pop(number, None)

    def set_error(self, number: str, error: Exception) -> None:
        """주문 조회 시 발생할 오류 설정"""
        self.state.errors[number] = error

    def set_service_error(self, number: str) -> None:
        """500 응답 설정"""
        self.set_error(number, AccrualServiceError("accrual service internal error", status_code=500))

    def rate_limit_after(self, calls: int | None) -> None:
        """calls번 호출 이후 429 응답"""
        self.state.calls_before_rate_limit = calls

    # -------------------------------------------------------------------------
    # IAccrualClient
    # -------------------------------------------------------------------------

    async def get_order(self, number: str) -> AccrualResult:
        """주문 적립 정보 조회"""
        self.state.calls.append(number)

        remaining = self.state.calls_before_rate_limit
        if remaining is not None:
            if remaining <= 0:
                raise AccrualRateLimitError(self.state.retry_after)
            self.state.calls_before_rate_limit = remaining - 1

        if number in self.state.errors:
            raise self.state.errors[number]

        result = self.state.results.get(number)
        if result is None:
            raise OrderNotRegisteredError(number)
        return result

    async def close(self) -> None:
        """종료 (기록만)"""
        self.closed = True
