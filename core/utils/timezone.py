"""
타임존 유틸리티

내부 저장은 항상 UTC (ISO 8601 문자열).
"""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """현재 UTC 시간 반환

    Returns:
        현재 UTC 시간 (tzinfo=UTC)
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """naive datetime은 UTC로 간주하여 tzinfo 부여

    Args:
        dt: datetime 객체

    Returns:
        UTC 타임존의 datetime
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_db_timestamp(dt: datetime) -> str:
    """DB 저장용 문자열 (UTC, 마이크로초 포함)

    문자열 정렬이 시간 순서와 일치하도록 항상 같은 형식 사용.
    """
    return ensure_utc(dt).isoformat(timespec="microseconds")
