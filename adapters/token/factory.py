"""
토큰 엔진 선택

설정의 token_engine 값으로 시작 시 한 번만 선택.
"""

from types import MappingProxyType
from typing import Callable, Mapping

from adapters.interfaces import ITokenMaker
from adapters.token.fernet_maker import FernetMaker
from adapters.token.jwt_maker import JWTMaker
from core.types import TokenEngine

# 엔진 → 생성자 (읽기 전용)
TOKEN_MAKERS: Mapping[TokenEngine, Callable[[str], ITokenMaker]] = MappingProxyType({
    TokenEngine.JWT: JWTMaker,
    TokenEngine.FERNET: FernetMaker,
})


def create_token_maker(engine: TokenEngine | str, secret_key: str) -> ITokenMaker:
    """토큰 엔진 생성

    Args:
        engine: 엔진 이름 (jwt, fernet)
        secret_key: 서명 키

    Returns:
        ITokenMaker 구현체

    Raises:
        ValueError: 알 수 없는 엔진 또는 짧은 서명 키
    """
    try:
        key = TokenEngine(engine)
    except ValueError:
        valid = [e.value for e in TokenEngine]
        raise ValueError(f"unsupported token engine: {engine!r}. 유효한 값: {valid}") from None

    return TOKEN_MAKERS[key](secret_key)
