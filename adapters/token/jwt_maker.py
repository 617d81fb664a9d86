"""
JWT 토큰 엔진 (PyJWT, HS256)
"""

import logging
from datetime import datetime, timedelta
from typing import Callable

import jwt

from adapters.token.payload import TokenPayload
from core.constants import TokenLimits
from core.domain.errors import InvalidTokenError
from core.utils.timezone import now_utc

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class JWTMaker:
    """JWT 토큰 발급/검증

    만료는 PyJWT 대신 TokenPayload.check_expiry로 확인 (시계 교체 가능).

    Args:
        secret_key: 서명 키 (최소 32자)
        clock: 현재 시각 함수

    Raises:
        ValueError: 서명 키가 너무 짧은 경우
    """

    def __init__(
        self,
        secret_key: str,
        clock: Callable[[], datetime] = now_utc,
    ):
        if len(secret_key) < TokenLimits.MIN_SECRET_LENGTH:
            raise ValueError(
                f"invalid key size: must be at least {TokenLimits.MIN_SECRET_LENGTH} characters"
            )
        self._secret_key = secret_key
        self._clock = clock

    def create_token(self, username: str, ttl: timedelta) -> tuple[str, TokenPayload]:
        """토큰 발급"""
        payload = TokenPayload.new(username, ttl, self._clock())
        token = jwt.encode(payload.to_claims(), self._secret_key, algorithm=ALGORITHM)
        return token, payload

    def verify_token(self, token: str) -> TokenPayload:
        """토큰 검증

        Raises:
            InvalidTokenError: 형식 오류, 서명 불일치
            ExpiredTokenError: 만료
        """
        try:
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[ALGORITHM],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["jti", "sub", "iat", "exp"],
                },
            )
        except jwt.PyJWTError as e:
            logger.debug(f"JWT 검증 실패: {e}")
            raise InvalidTokenError("토큰이 유효하지 않습니다") from e

        payload = TokenPayload.from_claims(claims)
        payload.check_expiry(self._clock())
        return payload
