"""
Order Ledger

주문 번호 검증, 소유권 판정, 주문 등록/조회 및 Accrual 결과 적용.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Callable

from core.domain.errors import OrderConflictError, OrderNumberFormatError
from core.domain.models import AccrualResult, Order
from core.types import PENDING_STATUSES
from core.utils.luhn import luhn_valid, normalize_order_number
from core.utils.timezone import now_utc

if TYPE_CHECKING:
    from adapters.interfaces import IStorage

logger = logging.getLogger(__name__)


class SubmitResult(str, Enum):
    """주문 등록 결과 (성공 케이스)

    형식 오류와 타인 소유 주문은 예외로 전달:
    - OrderNumberFormatError
    - OrderConflictError
    """

    ACCEPTED = "ACCEPTED"
    ALREADY_OWNED_BY_CALLER = "ALREADY_OWNED_BY_CALLER"


def validate_order_number(raw: str) -> str:
    """주문 번호 정규화 + 검증

    Args:
        raw: 입력 문자열 (뒤쪽 공백/개행 허용)

    Returns:
        정규화된 주문 번호

    Raises:
        OrderNumberFormatError: 숫자가 아니거나 Luhn 검사 실패
    """
    number = normalize_order_number(raw)
    if not luhn_valid(number):
        raise OrderNumberFormatError(number)
    return number


class OrderLedger:
    """주문 원장

    Args:
        storage: 저장소 게이트웨이
        clock: 현재 시각 함수 (테스트에서 교체)

    사용 예시:
    ```python
    ledger = OrderLedger(store)
    result = await ledger.submit("alice", "79927398713")
    if result == SubmitResult.ACCEPTED:
        ...
    ```
    """

    def __init__(
        self,
        storage: IStorage,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.storage = storage
        self._clock = clock

    async def submit(self, owner: str, raw_number: str) -> SubmitResult:
        """주문 등록

        검증은 저장소 접근 전에 수행.

        Args:
            owner: 요청 사용자
            raw_number: 주문 번호 (뒤쪽 공백 허용)

        Returns:
            ACCEPTED (신규) 또는 ALREADY_OWNED_BY_CALLER (본인이 이미 등록)

        Raises:
            OrderNumberFormatError: 형식 오류 (저장소 변경 없음)
            OrderConflictError: 다른 사용자가 이미 등록 (저장소 변경 없음)
            PersistenceError: 저장소 오류
        """
        number = validate_order_number(raw_number)

        order, created = await self.storage.insert_order(owner, number, self._clock())
        if created:
            logger.info("새 주문 접수", extra={"order": number, "owner": owner})
            return SubmitResult.ACCEPTED

        if order.owner == owner:
            return SubmitResult.ALREADY_OWNED_BY_CALLER

        logger.info(
            "다른 사용자 소유 주문 등록 시도",
            extra={"order": number, "owner": order.owner, "requested_by": owner},
        )
        raise OrderConflictError(number)

    async def list_pending(self) -> list[Order]:
        """워커가 추적할 주문 (NEW, REGISTERED, PROCESSING)"""
        return await self.storage.list_orders_by_status(PENDING_STATUSES)

    async def list_for_owner(self, owner: str) -> list[Order]:
        """사용자 주문 목록 (uploaded_at 오름차순)"""
        return await self.storage.list_orders_by_owner(owner)

    async def apply_accrual(self, result: AccrualResult) -> bool:
        """Accrual 결과 적용

        PROCESSED면 저장소가 같은 트랜잭션에서 소유자 잔고를 적립.

        Returns:
            적용 여부 (오래된 결과면 False)
        """
        applied = await self.storage.apply_accrual(result.order, result.status, result.accrual)
        if not applied:
            logger.debug(
                "오래된 Accrual 결과 무시",
                extra={"order": result.order, "status": result.status.value},
            )
        return applied
