"""
타입 정의 모듈

Enum 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping


class OrderStatus(str, Enum):
    """주문 처리 상태

    전이 규칙은 core.domain.state_machines 참조.
    INVALID, PROCESSED는 종료 상태.
    """

    NEW = "NEW"
    REGISTERED = "REGISTERED"
    PROCESSING = "PROCESSING"
    INVALID = "INVALID"
    PROCESSED = "PROCESSED"

    @classmethod
    def parse(cls, text: str) -> "OrderStatus":
        """문자열 → OrderStatus

        Raises:
            ValueError: 알 수 없는 상태 문자열 (기본값으로 대체하지 않음)
        """
        try:
            return TEXT_TO_STATUS[text]
        except (KeyError, TypeError):
            raise ValueError(f"알 수 없는 주문 상태입니다: {text!r}") from None

    def to_text(self) -> str:
        """OrderStatus → 문자열"""
        return STATUS_TO_TEXT[self]


# 상태 ↔ 문자열 양방향 매핑 (읽기 전용)
STATUS_TO_TEXT: Mapping[OrderStatus, str] = MappingProxyType({
    OrderStatus.NEW: "NEW",
    OrderStatus.REGISTERED: "REGISTERED",
    OrderStatus.PROCESSING: "PROCESSING",
    OrderStatus.INVALID: "INVALID",
    OrderStatus.PROCESSED: "PROCESSED",
})

TEXT_TO_STATUS: Mapping[str, OrderStatus] = MappingProxyType(
    {text: status for status, text in STATUS_TO_TEXT.items()}
)

# 워커가 계속 추적해야 하는 상태
PENDING_STATUSES: tuple[OrderStatus, ...] = (
    OrderStatus.NEW,
    OrderStatus.REGISTERED,
    OrderStatus.PROCESSING,
)

TERMINAL_STATUSES: frozenset[OrderStatus] = frozenset({
    OrderStatus.INVALID,
    OrderStatus.PROCESSED,
})


class TokenEngine(str, Enum):
    """토큰 엔진 종류"""

    JWT = "jwt"
    FERNET = "fernet"


class LogFormat(str, Enum):
    """로그 출력 형식"""

    PRINTF = "printf"
    JSON = "json"
