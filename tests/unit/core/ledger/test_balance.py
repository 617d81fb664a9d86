"""
BalanceAccounting 테스트
"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from core.domain.errors import (
    InsufficientFundsError,
    OrderNumberFormatError,
    ValidationError,
)
from core.domain.models import Balance
from core.ledger.balance import BalanceAccounting
from core.storage.loyalty_store import LoyaltyStore


class TestCredit:
    """credit 테스트"""

    @pytest.mark.asyncio
    async def test_credit(self, store: LoyaltyStore) -> None:
        """적립 후 잔고 증가"""
        await store.create_user("alice", "hash")
        accounting = BalanceAccounting(store)

        await accounting.credit("alice", Decimal("12.5"))

        assert await accounting.get_balance("alice") == Balance(Decimal("12.5"), Decimal("0"))

    @pytest.mark.asyncio
    async def test_negative_rejected(self) -> None:
        """음수 금액"""
        storage = AsyncMock()
        accounting = BalanceAccounting(storage)

        with pytest.raises(ValidationError):
            await accounting.credit("alice", Decimal("-1"))

        storage.credit.assert_not_called()


class TestWithdraw:
    """withdraw 테스트"""

    @pytest.mark.asyncio
    async def test_withdraw(self, store: LoyaltyStore, clock) -> None:
        """출금 성공"""
        await store.create_user("alice", "hash")
        accounting = BalanceAccounting(store, clock=clock)
        await accounting.credit("alice", Decimal("500"))

        withdrawal = await accounting.withdraw("alice", "2377225624", Decimal("500"))

        assert withdrawal.processed_at == clock()
        assert await accounting.get_balance("alice") == Balance(Decimal("0"), Decimal("500"))
        assert await accounting.list_withdrawals("alice") == [withdrawal]

    @pytest.mark.asyncio
    async def test_order_ref_need_not_exist(self, store: LoyaltyStore, clock) -> None:
        """출금 번호는 등록된 주문이 아니어도 됨, 같은 번호 재사용 가능"""
        await store.create_user("alice", "hash")
        accounting = BalanceAccounting(store, clock=clock)
        await accounting.credit("alice", Decimal("10"))

        await accounting.withdraw("alice", "18", Decimal("3"))
        await accounting.withdraw("alice", "18", Decimal("3"))

        assert len(await accounting.list_withdrawals("alice")) == 2

    @pytest.mark.asyncio
    async def test_insufficient_funds(self, store: LoyaltyStore) -> None:
        """잔고 부족 → 변경 없음"""
        await store.create_user("alice", "hash")
        accounting = BalanceAccounting(store)

        with pytest.raises(InsufficientFundsError):
            await accounting.withdraw("alice", "2377225624", Decimal("1"))

        assert await accounting.get_balance("alice") == Balance(Decimal("0"), Decimal("0"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5"), Decimal("NaN"), Decimal("Infinity")])
    async def test_non_positive_amount(self, amount: Decimal) -> None:
        """0 이하 또는 유한하지 않은 금액"""
        storage = AsyncMock()
        accounting = BalanceAccounting(storage)

        with pytest.raises(ValidationError):
            await accounting.withdraw("alice", "2377225624", amount)

        storage.withdraw.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_order_ref(self) -> None:
        """Luhn 실패"""
        storage = AsyncMock()
        accounting = BalanceAccounting(storage)

        with pytest.raises(OrderNumberFormatError):
            await accounting.withdraw("alice", "79927398710", Decimal("1"))

        storage.withdraw.assert_not_called()
