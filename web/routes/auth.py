"""
인증 API 라우터

POST /api/user/register - 회원가입
POST /api/user/login    - 로그인

성공 시 토큰을 Authorization 헤더와 token 쿠키로 전달.
"""

import logging

from fastapi import APIRouter, Depends, Response

from core.config.loader import Settings
from web.dependencies import TOKEN_COOKIE, get_app_settings, get_auth_service
from web.models.requests import CredentialsRequest
from web.models.responses import ErrorResponse
from web.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user", tags=["Auth"])


def _token_response(token: str, settings: Settings) -> Response:
    """토큰을 헤더와 쿠키에 담은 200 응답"""
    response = Response(status_code=200)
    response.headers["Authorization"] = f"Bearer {token}"
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=token,
        max_age=int(settings.token_ttl.total_seconds()),
        httponly=True,
        samesite="lax",
    )
    return response


@router.post("/register", status_code=200, responses={409: {"model": ErrorResponse}})
async def register(
    request: CredentialsRequest,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """회원가입

    Returns:
        200 (토큰 포함)

    Raises:
        400: 잘못된 요청 본문
        409: 이미 존재하는 로그인
    """
    user, token = await auth_service.register(request.login, request.password)
    logger.info("회원가입 완료", extra={"username": user.username})
    return _token_response(token, settings)


@router.post("/login", status_code=200, responses={401: {"model": ErrorResponse}})
async def login(
    request: CredentialsRequest,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """로그인

    Returns:
        200 (토큰 포함)

    Raises:
        400: 잘못된 요청 본문
        401: 로그인/비밀번호 불일치
    """
    user, token = await auth_service.login(request.login, request.password)
    logger.info("로그인", extra={"username": user.username})
    return _token_response(token, settings)
