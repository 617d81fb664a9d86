"""
State Machines

주문(Order) 처리 상태 전이 관리.

상태는 단조 증가만 허용:
    NEW → REGISTERED → PROCESSING → {INVALID | PROCESSED}

- 중간 단계 건너뛰기 허용 (예: NEW → PROCESSED)
- 역방향 전이, 동일 상태 재적용은 무시 대상
- INVALID, PROCESSED는 종료 상태로 이후 어떤 결과도 덮어쓸 수 없음
"""

from core.types import OrderStatus, TERMINAL_STATUSES


# 상태별 진행 순위 (종료 상태 두 개는 같은 순위)
_STATUS_RANK: dict[OrderStatus, int] = {
    OrderStatus.NEW: 0,
    OrderStatus.REGISTERED: 1,
    OrderStatus.PROCESSING: 2,
    OrderStatus.INVALID: 3,
    OrderStatus.PROCESSED: 3,
}


def is_terminal(status: OrderStatus) -> bool:
    """종료 상태 여부"""
    return status in TERMINAL_STATUSES


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """전이 가능 여부 확인

    Args:
        current: 저장된 현재 상태
        target: Accrual 시스템이 알려준 새 상태

    Returns:
        현재 상태가 종료 상태가 아니고 target이 앞선 단계일 때만 True
    """
    if is_terminal(current):
        return False
    return _STATUS_RANK[target] > _STATUS_RANK[current]
