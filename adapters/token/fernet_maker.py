"""
Fernet 토큰 엔진 (cryptography)

대칭키 인증 암호화 토큰. 페이로드가 외부에 노출되지 않음.
Fernet 키는 서명 키의 SHA-256 다이제스트에서 파생.
"""

import base64
import hashlib
import json
import logging
from datetime import datetime, timedelta
from typing import Callable

from cryptography.fernet import Fernet, InvalidToken

from adapters.token.payload import TokenPayload
from core.constants import TokenLimits
from core.domain.errors import InvalidTokenError
from core.utils.timezone import now_utc

logger = logging.getLogger(__name__)


def derive_fernet_key(secret_key: str) -> bytes:
    """서명 키 → Fernet 키 (urlsafe base64, 32바이트)"""
    digest = hashlib.sha256(secret_key.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest)


class FernetMaker:
    """Fernet 토큰 발급/검증

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
        self._fernet = Fernet(derive_fernet_key(secret_key))
        self._clock = clock

    def create_token(self, username: str, ttl: timedelta) -> tuple[str, TokenPayload]:
        """토큰 발급"""
        payload = TokenPayload.new(username, ttl, self._clock())
        data = json.dumps(payload.to_claims(), separators=(",", ":")).encode("utf-8")
        token = self._fernet.encrypt(data).decode("ascii")
        return token, payload

    def verify_token(self, token: str) -> TokenPayload:
        """토큰 검증

        Raises:
            InvalidTokenError: 형식 오류, 복호화/서명 실패
            ExpiredTokenError: 만료
        """
        try:
            data = self._fernet.decrypt(token.encode("utf-8"))
        except (InvalidToken, UnicodeEncodeError) as e:
            logger.debug("Fernet 토큰 복호화 실패")
            raise InvalidTokenError("토큰이 유효하지 않습니다") from e

        try:
            claims = json.loads(data)
        except ValueError as e:
            raise InvalidTokenError("토큰 페이로드를 해석할 수 없습니다") from e

        payload = TokenPayload.from_claims(claims)
        payload.check_expiry(self._clock())
        return payload
