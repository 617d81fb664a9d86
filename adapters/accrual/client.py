"""
Accrual 시스템 REST 클라이언트

GET {base}/api/orders/{number}
- 200: {"order", "status", "accrual"?}
- 204: 등록되지 않은 주문
- 429: 요청 한도 초과 (Retry-After 헤더 선택)
- 500: 처리 오류
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from adapters.accrual.errors import (
    AccrualRateLimitError,
    AccrualServiceError,
    OrderNotRegisteredError,
)
from core.constants import AccrualEndpoints, Defaults
from core.domain.models import AccrualResult
from core.types import OrderStatus

logger = logging.getLogger(__name__)

# Accrual 시스템이 보낼 수 있는 상태
ORACLE_STATUSES: frozenset[OrderStatus] = frozenset({
    OrderStatus.REGISTERED,
    OrderStatus.PROCESSING,
    OrderStatus.INVALID,
    OrderStatus.PROCESSED,
})


def normalize_base_url(address: str) -> str:
    """스킴이 없으면 http:// 추가, 끝의 / 제거"""
    address = address.strip()
    if "://" not in address:
        address = f"http://{address}"
    return address.rstrip("/")


def _parse_retry_after(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


class AccrualClient:
    """Accrual 시스템 클라이언트

    Args:
        base_url: Accrual 시스템 주소
        timeout: 요청 타임아웃 (초)

    사용 예시:
    ```python
    client = AccrualClient("http://localhost:8080", timeout=5.0)
    result = await client.get_order("79927398713")
    await client.close()
    ```
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = Defaults.ACCRUAL_TIMEOUT_SEC,
    ):
        self.base_url = normalize_base_url(base_url)
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 반환 (lazy init)"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
            )
        return self._client

    async def close(self) -> None:
        """HTTP 클라이언트 종료"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get_order(self, number: str) -> AccrualResult:
        """주문 적립 정보 조회

        Args:
            number: 주문 번호

        Returns:
            AccrualResult

        Raises:
            OrderNotRegisteredError: 204
            AccrualRateLimitError: 429
            AccrualServiceError: 500, 기타 상태 코드, 전송 오류, 잘못된 응답
        """
        client = await self._get_client()
        path = AccrualEndpoints.ORDER_PATH.format(number=number)

        try:
            response = await client.get(path)
        except httpx.RequestError as e:
            logger.warning(f"Accrual 요청 실패: {e}", extra={"order": number})
            raise AccrualServiceError(f"request failed: {e}") from e

        if response.status_code == 200:
            return self._parse_result(number, response)

        if response.status_code == 204:
            raise OrderNotRegisteredError(number)

        if response.status_code == 429:
            retry_after = _parse_retry_after(response.headers.get("Retry-After"))
            logger.warning(
                "Accrual rate limit",
                extra={"order": number, "retry_after": retry_after},
            )
            raise AccrualRateLimitError(retry_after)

        if response.status_code == 500:
            raise AccrualServiceError("accrual service internal error", status_code=500)

        raise AccrualServiceError(
            f"unexpected status code: {response.status_code}",
            status_code=response.status_code,
        )

    def _parse_result(self, number: str, response: httpx.Response) -> AccrualResult:
        """200 응답 본문 → AccrualResult"""
        try:
            data: Any = response.json(parse_float=Decimal)
        except ValueError as e:
            raise AccrualServiceError(f"malformed response body: {e}", status_code=200) from e

        if not isinstance(data, dict):
            raise AccrualServiceError("response body is not an object", status_code=200)

        order = data.get("order", number)
        if str(order) != number:
            raise AccrualServiceError(
                f"order number mismatch: requested {number}, got {order}",
                status_code=200,
            )

        try:
            status = OrderStatus.parse(data.get("status"))
        except ValueError as e:
            raise AccrualServiceError(str(e), status_code=200) from e
        if status not in ORACLE_STATUSES:
            raise AccrualServiceError(f"unexpected status: {status.value}", status_code=200)

        accrual = self._parse_accrual(data.get("accrual"))
        return AccrualResult(order=number, status=status, accrual=accrual)

    @staticmethod
    def _parse_accrual(value: Any) -> Decimal | None:
        """accrual 필드 → Decimal (없으면 None, 음수/비숫자는 오류)"""
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, Decimal)):
            raise AccrualServiceError(f"accrual is not a number: {value!r}", status_code=200)
        try:
            amount = Decimal(value)
        except InvalidOperation as e:
            raise AccrualServiceError(f"accrual is not a number: {value!r}", status_code=200) from e
        if not amount.is_finite() or amount < 0:
            raise AccrualServiceError(f"invalid accrual: {value!r}", status_code=200)
        return amount
