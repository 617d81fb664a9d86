"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
모든 구현체는 이 Protocol을 준수해야 함.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Protocol, runtime_checkable

from core.types import OrderStatus

if TYPE_CHECKING:
    from adapters.token.payload import TokenPayload
    from core.domain.models import AccrualResult, Balance, Order, User, Withdrawal


@runtime_checkable
class IStorage(Protocol):
    """저장소 게이트웨이 인터페이스

    읽기-검사-쓰기 단위(주문 find-or-insert, 적립+상태 변경,
    잔고 검사+차감+출금 기록)는 각각 하나의 트랜잭션으로 원자적 실행.
    저장소 오류는 PersistenceError로 노출.
    금액은 반드시 Decimal 타입 사용.
    """

    # -------------------------------------------------------------------------
    # 수명 주기
    # -------------------------------------------------------------------------

    async def init(self) -> None:
        """연결 및 스키마 초기화"""
        ...

    async def check(self) -> bool:
        """저장소 응답 여부 확인"""
        ...

    async def close(self) -> None:
        """연결 종료"""
        ...

    # -------------------------------------------------------------------------
    # 사용자
    # -------------------------------------------------------------------------

    async def create_user(self, username: str, password_hash: str) -> "User":
        """사용자 생성

        Raises:
            UserExistsError: 이미 존재하는 로그인
        """
        ...

    async def get_user(self, username: str) -> "User | None":
        """사용자 조회 (없으면 None)"""
        ...

    async def get_balance(self, username: str) -> "Balance":
        """잔고 스냅샷 조회

        Raises:
            UserNotFoundError: 사용자 없음
        """
        ...

    # -------------------------------------------------------------------------
    # 주문
    # -------------------------------------------------------------------------

    async def insert_order(
        self,
        owner: str,
        number: str,
        uploaded_at: datetime,
    ) -> "tuple[Order, bool]":
        """주문 find-or-insert

        Returns:
            (저장된 주문, 새로 생성 여부). 이미 있으면 기존 주문과 False
        """
        ...

    async def get_order(self, number: str) -> "Order | None":
        """주문 조회"""
        ...

    async def list_orders_by_owner(self, owner: str) -> "list[Order]":
        """사용자 주문 목록 (uploaded_at 오름차순)"""
        ...

    async def list_orders_by_status(self, statuses: Iterable[OrderStatus]) -> "list[Order]":
        """상태별 주문 목록"""
        ...

    async def apply_accrual(
        self,
        number: str,
        status: OrderStatus,
        accrual: Decimal | None,
    ) -> bool:
        """Accrual 결과 적용

        PROCESSED면 같은 트랜잭션에서 소유자 잔고 적립.

        Returns:
            적용 여부 (저장된 상태가 종료 상태이거나 전진 전이가 아니면 False)
        """
        ...

    # -------------------------------------------------------------------------
    # 잔고
    # -------------------------------------------------------------------------

    async def credit(self, owner: str, amount: Decimal) -> None:
        """잔고 적립 (current += amount)"""
        ...

    async def withdraw(
        self,
        owner: str,
        order_ref: str,
        amount: Decimal,
        processed_at: datetime,
    ) -> "Withdrawal":
        """잔고 검사 + 차감 + 출금 기록

        Raises:
            InsufficientFundsError: amount > current
        """
        ...

    async def list_withdrawals(self, owner: str) -> "list[Withdrawal]":
        """출금 내역 (processed_at 오름차순)"""
        ...


@runtime_checkable
class IAccrualClient(Protocol):
    """Accrual 시스템 클라이언트 인터페이스"""

    async def get_order(self, number: str) -> "AccrualResult":
        """주문 적립 정보 조회

        Raises:
            OrderNotRegisteredError: 204 (Accrual 시스템에 없는 주문)
            AccrualRateLimitError: 429
            AccrualServiceError: 500, 기타 상태 코드, 전송 오류, 잘못된 응답
        """
        ...

    async def close(self) -> None:
        """HTTP 클라이언트 종료"""
        ...


@runtime_checkable
class ITokenMaker(Protocol):
    """토큰 발급/검증 인터페이스

    엔진(jwt, fernet)은 설정으로 한 번만 선택.
    """

    def create_token(self, username: str, ttl: timedelta) -> "tuple[str, TokenPayload]":
        """토큰 발급

        Returns:
            (토큰 문자열, 페이로드)
        """
        ...

    def verify_token(self, token: str) -> "TokenPayload":
        """토큰 검증

        Raises:
            InvalidTokenError: 형식 오류, 서명 불일치
            ExpiredTokenError: 만료
        """
        ...
