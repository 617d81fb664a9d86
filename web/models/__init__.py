"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    CredentialsRequest,
    WithdrawRequest,
)
from web.models.responses import (
    BalanceResponse,
    ErrorResponse,
    HealthResponse,
    OrderResponse,
    WithdrawalResponse,
)

__all__ = [
    # Requests
    "CredentialsRequest",
    "WithdrawRequest",
    # Responses
    "BalanceResponse",
    "ErrorResponse",
    "HealthResponse",
    "OrderResponse",
    "WithdrawalResponse",
]
