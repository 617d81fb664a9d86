"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
컴포넌트는 create_app()에서 생성되어 app.state에 보관.
"""

import logging

from fastapi import Depends, HTTPException, Request

from adapters.interfaces import IStorage
from core.config.loader import Settings
from core.domain.errors import AuthError
from core.domain.models import User
from core.ledger.balance import BalanceAccounting
from core.ledger.order_ledger import OrderLedger
from web.services.auth_service import AuthService

logger = logging.getLogger(__name__)

TOKEN_COOKIE = "token"


def get_app_settings(request: Request) -> Settings:
    """애플리케이션 설정 반환"""
    return request.app.state.settings


def get_store(request: Request) -> IStorage:
    """저장소 반환"""
    return request.app.state.store


def get_auth_service(request: Request) -> AuthService:
    """AuthService 반환"""
    return request.app.state.auth_service


def get_order_ledger(request: Request) -> OrderLedger:
    """OrderLedger 반환"""
    return request.app.state.order_ledger


def get_balance_accounting(request: Request) -> BalanceAccounting:
    """BalanceAccounting 반환"""
    return request.app.state.balance_accounting


def extract_token(request: Request) -> str | None:
    """요청에서 토큰 추출

    Authorization: Bearer <token> 헤더 우선, 없으면 token 쿠키.
    """
    authorization = request.headers.get("Authorization")
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()

    return request.cookies.get(TOKEN_COOKIE) or None


async def get_current_user(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """인증된 사용자 반환

    Raises:
        HTTPException: 401 (토큰 없음, 유효하지 않음, 만료, 사용자 없음)
    """
    token = extract_token(request)
    if token is None:
        raise HTTPException(status_code=401, detail="인증 토큰이 없습니다")

    try:
        return await auth_service.authenticate(token)
    except AuthError as e:
        logger.debug(f"인증 실패: {e}")
        raise HTTPException(status_code=401, detail=str(e)) from e
