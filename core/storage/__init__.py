"""
스토리지 모듈

저장소 게이트웨이(IStorage)의 SQLite 구현 제공
"""

from core.storage.loyalty_store import LoyaltyStore

__all__ = [
    "LoyaltyStore",
]
