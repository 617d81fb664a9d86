"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    version: str = Field(..., description="서비스 버전")


class OrderResponse(BaseModel):
    """주문 응답 (accrual은 PROCESSED일 때만)"""

    number: str = Field(..., description="주문 번호")
    status: str = Field(..., description="처리 상태 (NEW/PROCESSING/INVALID/PROCESSED 등)")
    accrual: float | None = Field(default=None, description="적립 포인트")
    uploaded_at: str = Field(..., description="등록 시각 (RFC 3339)")


class BalanceResponse(BaseModel):
    """잔고 응답"""

    current: float = Field(..., description="현재 잔고")
    withdrawn: float = Field(..., description="누적 출금액")


class WithdrawalResponse(BaseModel):
    """출금 내역 응답"""

    order: str = Field(..., description="출금 요청 번호")
    sum: float = Field(..., description="출금 금액")
    processed_at: str = Field(..., description="처리 시각 (RFC 3339)")


class ErrorResponse(BaseModel):
    """오류 응답"""

    detail: str = Field(..., description="오류 메시지")
