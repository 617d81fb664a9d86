"""
어댑터 레이어

외부 서비스(저장소, Accrual 시스템, 토큰 엔진)와의 연동을 담당.
Protocol 기반 인터페이스로 Mock 교체 가능.
"""

from adapters.interfaces import (
    IAccrualClient,
    IStorage,
    ITokenMaker,
)

__all__ = [
    # Interfaces
    "IStorage",
    "IAccrualClient",
    "ITokenMaker",
]
