"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent

VERSION: str = "1.0.0"


class AccrualEndpoints:
    """Accrual 시스템 API 경로 (고정값)"""

    ORDER_PATH: str = "/api/orders/{number}"


class Defaults:
    """기본값 상수

    설정 파일, 환경 변수, CLI 플래그 모두 없을 때 사용.
    """

    RUN_ADDRESS: str = "localhost:8000"
    DATABASE_URI: str = "sqlite:///data/loyalty.db"
    ACCRUAL_ADDRESS: str = "http://localhost:8080"

    TOKEN_ENGINE: str = "fernet"
    TOKEN_DURATION: str = "24h"
    # 개발용 키 (운영에서는 SECRET 환경 변수로 반드시 교체)
    SECRET_KEY: str = "cuzyouwillneverknowthissecretkey"

    LOG_LEVEL: str = "info"
    LOG_FORMAT: str = "printf"

    POLL_INTERVAL_SEC: float = 1.0
    COOLDOWN_SEC: float = 5.0
    ACCRUAL_TIMEOUT_SEC: float = 5.0
    MAX_CONCURRENCY: int = 5


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"

    # 설정 파일 (선택)
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"


class TokenLimits:
    """토큰 서명 키 제약"""

    MIN_SECRET_LENGTH: int = 32
