"""
토큰 페이로드

두 엔진(jwt, fernet)이 같은 클레임 구조를 사용.
시각은 초 단위 UTC epoch로 직렬화.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from core.domain.errors import ExpiredTokenError, InvalidTokenError


@dataclass(frozen=True)
class TokenPayload:
    """토큰 페이로드

    Attributes:
        id: 토큰 고유 ID (uuid4)
        username: 토큰 소유 사용자
        issued_at: 발급 시각 (UTC)
        expired_at: 만료 시각 (UTC)
    """

    id: str
    username: str
    issued_at: datetime
    expired_at: datetime

    @classmethod
    def new(cls, username: str, ttl: timedelta, now: datetime) -> "TokenPayload":
        """새 페이로드 생성 (초 미만 절삭)"""
        issued_at = now.astimezone(timezone.utc).replace(microsecond=0)
        return cls(
            id=str(uuid.uuid4()),
            username=username,
            issued_at=issued_at,
            expired_at=issued_at + ttl,
        )

    def to_claims(self) -> dict[str, Any]:
        """클레임 딕셔너리 변환"""
        return {
            "jti": self.id,
            "sub": self.username,
            "iat": int(self.issued_at.timestamp()),
            "exp": int(self.expired_at.timestamp()),
        }

    @classmethod
    def from_claims(cls, claims: Any) -> "TokenPayload":
        """클레임 딕셔너리에서 생성

        Raises:
            InvalidTokenError: 필드 누락 또는 타입 불일치
        """
        if not isinstance(claims, dict):
            raise InvalidTokenError("토큰 페이로드 형식이 올바르지 않습니다")

        token_id = claims.get("jti")
        username = claims.get("sub")
        issued_at = claims.get("iat")
        expired_at = claims.get("exp")

        if not isinstance(token_id, str) or not isinstance(username, str) or not username:
            raise InvalidTokenError("토큰 페이로드에 jti/sub가 없습니다")
        if not isinstance(issued_at, int) or not isinstance(expired_at, int):
            raise InvalidTokenError("토큰 페이로드에 iat/exp가 없습니다")

        return cls(
            id=token_id,
            username=username,
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc),
            expired_at=datetime.fromtimestamp(expired_at, tz=timezone.utc),
        )

    def check_expiry(self, now: datetime) -> None:
        """만료 확인

        Raises:
            ExpiredTokenError: now가 expired_at 이후
        """
        if now >= self.expired_at:
            raise ExpiredTokenError("토큰이 만료되었습니다")
