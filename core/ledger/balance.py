"""
Balance Accounting

적립, 출금, 잔고/출금 내역 조회.

불변식:
- current = Σ accrual(PROCESSED) − Σ 출금액, 항상 0 이상
- 출금은 원자적 검사+차감 시점에 sum ≤ current일 때만 성공
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Callable

from core.domain.errors import OrderNumberFormatError, ValidationError
from core.domain.models import Balance, Withdrawal
from core.utils.luhn import luhn_valid, normalize_order_number
from core.utils.timezone import now_utc

if TYPE_CHECKING:
    from adapters.interfaces import IStorage

logger = logging.getLogger(__name__)


class BalanceAccounting:
    """잔고 관리

    Args:
        storage: 저장소 게이트웨이
        clock: 현재 시각 함수 (테스트에서 교체)
    """

    def __init__(
        self,
        storage: IStorage,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.storage = storage
        self._clock = clock

    async def credit(self, owner: str, amount: Decimal) -> None:
        """잔고 적립

        주문 적립은 OrderLedger.apply_accrual 경로에서 상태 변경과 함께 처리.

        Raises:
            ValidationError: 음수 금액
        """
        if amount < 0:
            raise ValidationError(f"적립 금액은 음수일 수 없습니다: {amount}")
        await self.storage.credit(owner, amount)

    async def withdraw(self, owner: str, order_ref: str, amount: Decimal) -> Withdrawal:
        """출금

        Args:
            owner: 요청 사용자
            order_ref: 출금 요청 번호 (Luhn 검증, 실제 주문일 필요 없음)
            amount: 출금 금액 (양수)

        Returns:
            생성된 출금 기록

        Raises:
            OrderNumberFormatError: order_ref 형식 오류
            ValidationError: 0 이하 금액
            InsufficientFundsError: 잔고 부족 (변경 없음)
            PersistenceError: 저장소 오류
        """
        order_ref = normalize_order_number(order_ref)
        if not luhn_valid(order_ref):
            raise OrderNumberFormatError(order_ref)

        if not amount.is_finite() or amount <= 0:
            raise ValidationError(f"출금 금액은 양수여야 합니다: {amount}")

        return await self.storage.withdraw(owner, order_ref, amount, self._clock())

    async def get_balance(self, owner: str) -> Balance:
        """잔고 스냅샷"""
        return await self.storage.get_balance(owner)

    async def list_withdrawals(self, owner: str) -> list[Withdrawal]:
        """출금 내역 (processed_at 오름차순)"""
        return await self.storage.list_withdrawals(owner)
