"""
토큰 어댑터

JWT (PyJWT) 및 Fernet (cryptography) 엔진
"""

from adapters.token.factory import TOKEN_MAKERS, create_token_maker
from adapters.token.fernet_maker import FernetMaker
from adapters.token.jwt_maker import JWTMaker
from adapters.token.payload import TokenPayload

__all__ = [
    "TokenPayload",
    "JWTMaker",
    "FernetMaker",
    "TOKEN_MAKERS",
    "create_token_maker",
]
