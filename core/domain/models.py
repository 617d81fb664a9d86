"""
도메인 모델

사용자, 주문, 출금, 잔고 및 Accrual 시스템 응답.
모든 금액은 Decimal 타입 사용 (DB에는 문자열로 저장).
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from core.types import OrderStatus
from core.domain.state_machines import is_terminal


@dataclass(frozen=True)
class User:
    """사용자

    Attributes:
        username: 로그인 (불변 식별자)
        password_hash: bcrypt 해시
        current: 현재 잔고
        withdrawn: 누적 출금액
    """

    username: str
    password_hash: str
    current: Decimal = Decimal("0")
    withdrawn: Decimal = Decimal("0")

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "User":
        """DB 행에서 생성"""
        return cls(
            username=row["username"],
            password_hash=row["password_hash"],
            current=Decimal(row["current"]),
            withdrawn=Decimal(row["withdrawn"]),
        )


@dataclass(frozen=True)
class Balance:
    """잔고 스냅샷"""

    current: Decimal
    withdrawn: Decimal

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환 (JSON 응답용)"""
        return {
            "current": float(self.current),
            "withdrawn": float(self.withdrawn),
        }


@dataclass(frozen=True)
class Order:
    """주문

    Attributes:
        number: 주문 번호 (전역 유일)
        owner: 등록한 사용자
        status: 처리 상태
        uploaded_at: 등록 시각 (UTC)
        accrual: 적립 포인트 (PROCESSED 이후에만 존재)
    """

    number: str
    owner: str
    status: OrderStatus
    uploaded_at: datetime
    accrual: Decimal | None = None

    @property
    def is_terminal(self) -> bool:
        """종료 상태 여부"""
        return is_terminal(self.status)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Order":
        """DB 행에서 생성"""
        return cls(
            number=row["number"],
            owner=row["owner"],
            status=OrderStatus.parse(row["status"]),
            uploaded_at=datetime.fromisoformat(row["uploaded_at"]),
            accrual=Decimal(row["accrual"]) if row.get("accrual") is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환 (JSON 응답용, accrual은 있을 때만)"""
        data: dict[str, Any] = {
            "number": self.number,
            "status": self.status.to_text(),
        }
        if self.accrual is not None:
            data["accrual"] = float(self.accrual)
        data["uploaded_at"] = self.uploaded_at.isoformat(timespec="seconds")
        return data


@dataclass(frozen=True)
class Withdrawal:
    """출금 기록

    Attributes:
        owner: 출금한 사용자
        order: 출금 요청 번호 (Luhn 검증, 실제 주문일 필요 없음)
        sum: 출금 금액
        processed_at: 처리 시각 (UTC)
    """

    owner: str
    order: str
    sum: Decimal
    processed_at: datetime

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Withdrawal":
        """DB 행에서 생성"""
        return cls(
            owner=row["owner"],
            order=row["order_ref"],
            sum=Decimal(row["amount"]),
            processed_at=datetime.fromisoformat(row["processed_at"]),
        )

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환 (JSON 응답용)"""
        return {
            "order": self.order,
            "sum": float(self.sum),
            "processed_at": self.processed_at.isoformat(timespec="seconds"),
        }


@dataclass(frozen=True)
class AccrualResult:
    """Accrual 시스템 응답 (저장하지 않고 적용만 함)"""

    order: str
    status: OrderStatus
    accrual: Decimal | None = None
