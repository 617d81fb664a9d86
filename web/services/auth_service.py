"""
Auth 서비스

회원가입, 로그인, 토큰 인증.
비밀번호 해시(bcrypt)는 이벤트 루프를 막지 않도록 스레드에서 실행.
"""

import asyncio
import logging
from datetime import timedelta

from adapters.interfaces import IStorage, ITokenMaker
from core.domain.errors import InvalidCredentialsError, UserNotFoundError
from core.domain.models import User
from core.utils.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """인증 서비스

    Args:
        storage: 저장소 게이트웨이
        token_maker: 토큰 엔진
        token_ttl: 토큰 유효 기간
    """

    def __init__(
        self,
        storage: IStorage,
        token_maker: ITokenMaker,
        token_ttl: timedelta,
    ):
        self.storage = storage
        self.token_maker = token_maker
        self.token_ttl = token_ttl

    async def register(self, login: str, password: str) -> tuple[User, str]:
        """회원가입 후 토큰 발급

        Returns:
            (User, 토큰)

        Raises:
            UserExistsError: 이미 존재하는 로그인
        """
        password_hash = await asyncio.to_thread(hash_password, password)
        user = await self.storage.create_user(login, password_hash)
        token, _ = self.token_maker.create_token(user.username, self.token_ttl)
        return user, token

    async def login(self, login: str, password: str) -> tuple[User, str]:
        """로그인 후 토큰 발급

        Raises:
            InvalidCredentialsError: 로그인 없음 또는 비밀번호 불일치
        """
        user = await self.storage.get_user(login)
        if user is None:
            logger.info("로그인 실패: 사용자 없음", extra={"username": login})
            raise InvalidCredentialsError("로그인 또는 비밀번호가 올바르지 않습니다")

        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            logger.info("로그인 실패: 비밀번호 불일치", extra={"username": login})
            raise InvalidCredentialsError("로그인 또는 비밀번호가 올바르지 않습니다")

        token, _ = self.token_maker.create_token(user.username, self.token_ttl)
        return user, token

    async def authenticate(self, token: str) -> User:
        """토큰 → 사용자

        Raises:
            InvalidTokenError: 형식 오류, 서명 불일치
            ExpiredTokenError: 만료
            UserNotFoundError: 토큰의 사용자가 없음
        """
        payload = self.token_maker.verify_token(token)
        user = await self.storage.get_user(payload.username)
        if user is None:
            raise UserNotFoundError(payload.username)
        return user
