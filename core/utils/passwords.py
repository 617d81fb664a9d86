"""
비밀번호 해시

bcrypt 사용 (솔트 포함 해시 문자열 저장).
"""

import bcrypt


def hash_password(password: str) -> str:
    """비밀번호 해시 생성

    Args:
        password: 평문 비밀번호

    Returns:
        bcrypt 해시 문자열
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """비밀번호 검증

    해시 문자열이 손상된 경우에도 예외 대신 False 반환.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False
