"""
LoyaltyStore - 저장소 게이트웨이 (SQLite 구현)

users / orders / withdrawals 테이블을 통해 사용자, 주문, 잔고, 출금 관리.
IStorage Protocol 구현체.

원자성:
- 주문 find-or-insert
- Accrual 결과 적용 + 소유자 적립
- 잔고 검사 + 차감 + 출금 기록
각각 SQLiteAdapter.transaction() 하나로 실행.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import AsyncIterator, Iterable

import aiosqlite

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.domain.errors import (
    InsufficientFundsError,
    PersistenceError,
    UserExistsError,
    UserNotFoundError,
)
from core.domain.models import Balance, Order, User, Withdrawal
from core.domain.state_machines import can_transition
from core.types import OrderStatus
from core.utils.timezone import ensure_utc, now_utc, to_db_timestamp

logger = logging.getLogger(__name__)


class LoyaltyStore:
    """로열티 저장소

    Args:
        db_path: SQLite 파일 경로

    사용 예시:
    ```python
    store = LoyaltyStore(settings.db_path)
    await store.init()

    order, created = await store.insert_order("alice", "79927398713", now_utc())
    balance = await store.get_balance("alice")

    await store.close()
    ```
    """

    def __init__(self, db_path: Path | str):
        self.db = SQLiteAdapter(db_path)

    @asynccontextmanager
    async def _guard(self, operation: str) -> AsyncIterator[None]:
        """sqlite 오류 → PersistenceError"""
        try:
            yield
        except aiosqlite.Error as e:
            logger.error(
                f"저장소 오류: {operation}",
                extra={"operation": operation, "error": str(e)},
            )
            raise PersistenceError(f"{operation} 실패: {e}") from e

    # -------------------------------------------------------------------------
    # 수명 주기
    # -------------------------------------------------------------------------

    async def init(self) -> None:
        """연결 및 스키마 생성"""
        async with self._guard("init"):
            await self.db.connect()
            await init_schema(self.db)

    async def check(self) -> bool:
        """저장소 응답 여부 확인 (헬스 체크용)"""
        if not self.db.is_connected:
            return False
        try:
            return await self.db.ping()
        except aiosqlite.Error as e:
            logger.warning(f"저장소 응답 없음: {e}")
            return False

    async def close(self) -> None:
        """연결 종료"""
        await self.db.close()

    # -------------------------------------------------------------------------
    # 사용자
    # -------------------------------------------------------------------------

    async def create_user(self, username: str, password_hash: str) -> User:
        """사용자 생성

        Raises:
            UserExistsError: 이미 존재하는 로그인
            PersistenceError: 저장소 오류
        """
        async with self._guard("create_user"):
            async with self.db.transaction() as conn:
                cursor = await conn.execute(
                    "SELECT 1 FROM users WHERE username = ?",
                    (username,),
                )
                if await cursor.fetchone() is not None:
                    raise UserExistsError(username)

                await conn.execute(
                    """
                    INSERT INTO users (username, password_hash, current, withdrawn, created_at)
                    VALUES (?, ?, '0', '0', ?)
                    """,
                    (username, password_hash, to_db_timestamp(now_utc())),
                )

        logger.info("사용자 등록", extra={"username": username})
        return User(username=username, password_hash=password_hash)

    async def get_user(self, username: str) -> User | None:
        """사용자 조회 (없으면 None)"""
        async with self._guard("get_user"):
            row = await self.db.fetchone(
                "SELECT * FROM users WHERE username = ?",
                (username,),
            )
        return User.from_row(dict(row)) if row is not None else None

    async def get_balance(self, username: str) -> Balance:
        """잔고 스냅샷

        Raises:
            UserNotFoundError: 사용자 없음
        """
        async with self._guard("get_balance"):
            row = await self.db.fetchone(
                "SELECT current, withdrawn FROM users WHERE username = ?",
                (username,),
            )
        if row is None:
            raise UserNotFoundError(username)
        return Balance(current=Decimal(row["current"]), withdrawn=Decimal(row["withdrawn"]))

    # -------------------------------------------------------------------------
    # 주문
    # -------------------------------------------------------------------------

    async def insert_order(
        self,
        owner: str,
        number: str,
        uploaded_at: datetime,
    ) -> tuple[Order, bool]:
        """주문 find-or-insert

        같은 번호가 이미 있으면 소유자와 무관하게 기존 주문 반환.
        소유자 비교는 호출자(OrderLedger) 책임.

        Returns:
            (주문, 새로 생성 여부)
        """
        uploaded_at = ensure_utc(uploaded_at)

        async with self._guard("insert_order"):
            async with self.db.transaction() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM orders WHERE number = ?",
                    (number,),
                )
                row = await cursor.fetchone()
                if row is not None:
                    return Order.from_row(dict(row)), False

                timestamp = to_db_timestamp(uploaded_at)
                await conn.execute(
                    """
                    INSERT INTO orders (number, owner, status, accrual, uploaded_at, updated_at)
                    VALUES (?, ?, ?, NULL, ?, ?)
                    """,
                    (number, owner, OrderStatus.NEW.to_text(), timestamp, timestamp),
                )

        logger.debug("주문 등록", extra={"order": number, "owner": owner})
        return Order(
            number=number,
            owner=owner,
            status=OrderStatus.NEW,
            uploaded_at=uploaded_at,
        ), True

    async def get_order(self, number: str) -> Order | None:
        """주문 조회"""
        async with self._guard("get_order"):
            row = await self.db.fetchone(
                "SELECT * FROM orders WHERE number = ?",
                (number,),
            )
        return Order.from_row(dict(row)) if row is not None else None

    async def list_orders_by_owner(self, owner: str) -> list[Order]:
        """사용자 주문 목록 (uploaded_at 오름차순)"""
        async with self._guard("list_orders_by_owner"):
            rows = await self.db.fetchall(
                "SELECT * FROM orders WHERE owner = ? ORDER BY uploaded_at, id",
                (owner,),
            )
        return [Order.from_row(dict(row)) for row in rows]

    async def list_orders_by_status(self, statuses: Iterable[OrderStatus]) -> list[Order]:
        """상태별 주문 목록 (uploaded_at 오름차순)"""
        texts = [status.to_text() for status in statuses]
        if not texts:
            return []

        placeholders = ", ".join("?" for _ in texts)
        async with self._guard("list_orders_by_status"):
            rows = await self.db.fetchall(
                f"SELECT * FROM orders WHERE status IN ({placeholders}) ORDER BY uploaded_at, id",
                tuple(texts),
            )
        return [Order.from_row(dict(row)) for row in rows]

    async def apply_accrual(
        self,
        number: str,
        status: OrderStatus,
        accrual: Decimal | None,
    ) -> bool:
        """Accrual 결과 적용

        - 저장된 상태가 종료 상태이거나 전진 전이가 아니면 무시 (False)
        - PROCESSED: accrual 기록 + 같은 트랜잭션에서 소유자 적립
        - 그 외: 상태만 변경

        Returns:
            적용 여부
        """
        async with self._guard("apply_accrual"):
            async with self.db.transaction() as conn:
                cursor = await conn.execute(
                    "SELECT owner, status FROM orders WHERE number = ?",
                    (number,),
                )
                row = await cursor.fetchone()
                if row is None:
                    logger.warning("적용할 주문이 없음", extra={"order": number})
                    return False

                current = OrderStatus.parse(row["status"])
                if not can_transition(current, status):
                    return False

                amount: Decimal | None = None
                if status == OrderStatus.PROCESSED:
                    amount = accrual if accrual is not None else Decimal("0")

                await conn.execute(
                    """
                    UPDATE orders
                    SET status = ?, accrual = ?, updated_at = ?
                    WHERE number = ?
                    """,
                    (
                        status.to_text(),
                        str(amount) if amount is not None else None,
                        to_db_timestamp(now_utc()),
                        number,
                    ),
                )

                if amount is not None and amount > 0:
                    await self._credit_in(conn, row["owner"], amount)

        logger.info(
            f"주문 상태 변경: {current.value} → {status.value}",
            extra={"order": number, "accrual": str(amount) if amount is not None else None},
        )
        return True

    # -------------------------------------------------------------------------
    # 잔고
    # -------------------------------------------------------------------------

    async def _credit_in(
        self,
        conn: aiosqlite.Connection,
        owner: str,
        amount: Decimal,
    ) -> None:
        """진행 중인 트랜잭션 안에서 current += amount"""
        cursor = await conn.execute(
            "SELECT current FROM users WHERE username = ?",
            (owner,),
        )
        row = await cursor.fetchone()
        if row is None:
            raise UserNotFoundError(owner)

        new_current = Decimal(row["current"]) + amount
        await conn.execute(
            "UPDATE users SET current = ? WHERE username = ?",
            (str(new_current), owner),
        )

    async def credit(self, owner: str, amount: Decimal) -> None:
        """잔고 적립

        Raises:
            UserNotFoundError: 사용자 없음
        """
        async with self._guard("credit"):
            async with self.db.transaction() as conn:
                await self._credit_in(conn, owner, amount)

        logger.info("잔고 적립", extra={"username": owner, "amount": str(amount)})

    async def withdraw(
        self,
        owner: str,
        order_ref: str,
        amount: Decimal,
        processed_at: datetime,
    ) -> Withdrawal:
        """잔고 검사 + 차감 + 출금 기록 (하나의 트랜잭션)

        Raises:
            UserNotFoundError: 사용자 없음
            InsufficientFundsError: amount > current (변경 없음)
        """
        processed_at = ensure_utc(processed_at)

        async with self._guard("withdraw"):
            async with self.db.transaction() as conn:
                cursor = await conn.execute(
                    "SELECT current, withdrawn FROM users WHERE username = ?",
                    (owner,),
                )
                row = await cursor.fetchone()
                if row is None:
                    raise UserNotFoundError(owner)

                current = Decimal(row["current"])
                withdrawn = Decimal(row["withdrawn"])
                if amount > current:
                    raise InsufficientFundsError(owner, amount, current)

                await conn.execute(
                    "UPDATE users SET current = ?, withdrawn = ? WHERE username = ?",
                    (str(current - amount), str(withdrawn + amount), owner),
                )
                await conn.execute(
                    """
                    INSERT INTO withdrawals (owner, order_ref, amount, processed_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    (owner, order_ref, str(amount), to_db_timestamp(processed_at)),
                )

        logger.info(
            "출금 처리",
            extra={"username": owner, "order": order_ref, "amount": str(amount)},
        )
        return Withdrawal(owner=owner, order=order_ref, sum=amount, processed_at=processed_at)

    async def list_withdrawals(self, owner: str) -> list[Withdrawal]:
        """출금 내역 (processed_at 오름차순)"""
        async with self._guard("list_withdrawals"):
            rows = await self.db.fetchall(
                "SELECT * FROM withdrawals WHERE owner = ? ORDER BY processed_at, id",
                (owner,),
            )
        return [Withdrawal.from_row(dict(row)) for row in rows]
