"""
유틸리티 패키지

Luhn 검증, 비밀번호 해시, 타임존 처리 등 공통 유틸리티
"""

from core.utils.luhn import luhn_valid, normalize_order_number
from core.utils.passwords import hash_password, verify_password
from core.utils.timezone import now_utc, ensure_utc, to_db_timestamp

__all__ = [
    "luhn_valid",
    "normalize_order_number",
    "hash_password",
    "verify_password",
    "now_utc",
    "ensure_utc",
    "to_db_timestamp",
]
