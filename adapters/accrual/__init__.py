"""
Accrual 시스템 어댑터
"""

from adapters.accrual.client import AccrualClient, normalize_base_url
from adapters.accrual.errors import (
    AccrualRateLimitError,
    AccrualServiceError,
    OrderNotRegisteredError,
)

__all__ = [
    "AccrualClient",
    "normalize_base_url",
    "OrderNotRegisteredError",
    "AccrualRateLimitError",
    "AccrualServiceError",
]
