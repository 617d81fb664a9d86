"""
워커 모듈

Accrual 시스템을 주기적으로 조회하여 주문 상태와 잔고를 반영.
"""

from worker.accrual_poller import AccrualPoller, CycleResult

__all__ = [
    "AccrualPoller",
    "CycleResult",
]
