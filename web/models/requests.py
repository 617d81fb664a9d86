"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증
"""

from decimal import Decimal

from pydantic import BaseModel, Field


class CredentialsRequest(BaseModel):
    """회원가입/로그인 요청"""

    login: str = Field(..., min_length=1, description="로그인")
    password: str = Field(..., min_length=1, description="비밀번호")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"login": "alice", "password": "secret"},
            ]
        }
    }


class WithdrawRequest(BaseModel):
    """출금 요청

    order는 Luhn 검증, sum은 양수 검증을 도메인에서 수행 (422).
    """

    order: str = Field(..., description="출금 요청 번호")
    sum: Decimal = Field(..., description="출금 금액")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"order": "2377225624", "sum": 751},
            ]
        }
    }
