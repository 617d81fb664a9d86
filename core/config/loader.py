"""
설정 로더

기본값 < settings.yaml < 환경 변수 < CLI 플래그 순으로 병합하여 Settings 생성.
"""

import os
import re
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Mapping

import yaml

from core.constants import Defaults, Paths, PROJECT_ROOT, TokenLimits
from core.types import LogFormat, TokenEngine


# Settings 필드 → 환경 변수 이름
ENV_VARS: dict[str, str] = {
    "run_address": "RUN_ADDRESS",
    "database_uri": "DATABASE_URI",
    "accrual_address": "ACCRUAL_SYSTEM_ADDRESS",
    "token_engine": "TOKEN_ENGINE",
    "token_ttl": "TOKEN_DURATION",
    "secret_key": "SECRET",
    "log_level": "LOG_LEVEL",
    "log_format": "LOG_FORMAT",
    "poll_interval_sec": "POLL_INTERVAL",
    "cooldown_sec": "COOLDOWN",
    "accrual_timeout_sec": "ACCRUAL_TIMEOUT",
    "max_concurrency": "MAX_CONCURRENCY",
    "debug": "DEBUG",
}

LOG_LEVELS = ("debug", "info", "warn", "warning", "error")

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(h|m|s)")


@dataclass(frozen=True)
class Settings:
    """애플리케이션 설정

    불변 데이터 구조로 설정 변경 방지.
    TokenMaker, AccrualPoller, Web 앱에 명시적으로 전달.
    """

    run_address: str
    database_uri: str
    accrual_address: str
    token_engine: TokenEngine
    token_ttl: timedelta
    secret_key: str
    log_level: str = Defaults.LOG_LEVEL
    log_format: LogFormat = LogFormat.PRINTF
    poll_interval_sec: float = Defaults.POLL_INTERVAL_SEC
    cooldown_sec: float = Defaults.COOLDOWN_SEC
    accrual_timeout_sec: float = Defaults.ACCRUAL_TIMEOUT_SEC
    max_concurrency: int = Defaults.MAX_CONCURRENCY
    debug: bool = False

    @property
    def db_path(self) -> Path:
        """저장소 URI에서 SQLite 파일 경로 추출"""
        return parse_database_path(self.database_uri)

    @property
    def host(self) -> str:
        """listen 호스트"""
        return parse_run_address(self.run_address)[0]

    @property
    def port(self) -> int:
        """listen 포트"""
        return parse_run_address(self.run_address)[1]


class SettingsLoadError(Exception):
    """설정 로드 실패 예외"""

    pass


def parse_duration(value: str | int | float | timedelta) -> timedelta:
    """기간 문자열 파싱

    지원 형식: "90" (초), "30s", "15m", "24h", "1h30m"

    Raises:
        SettingsLoadError: 형식이 잘못된 경우
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return timedelta(seconds=value)

    text = str(value).strip()
    if re.fullmatch(r"\d+(?:\.\d+)?", text):
        return timedelta(seconds=float(text))

    parts = _DURATION_PART.findall(text)
    if not parts or "".join(n + u for n, u in parts) != text:
        raise SettingsLoadError(f"기간 형식이 올바르지 않습니다: {value!r}")

    seconds = 0.0
    for number, unit in parts:
        multiplier = {"h": 3600, "m": 60, "s": 1}[unit]
        seconds += float(number) * multiplier
    return timedelta(seconds=seconds)


def parse_database_path(uri: str) -> Path:
    """저장소 URI → SQLite 파일 경로

    - "sqlite:///data/app.db"   → PROJECT_ROOT/data/app.db
    - "sqlite:////var/app.db"   → /var/app.db
    - "data/app.db" (스킴 없음) → PROJECT_ROOT/data/app.db

    Raises:
        SettingsLoadError: SQLite 이외의 스킴
    """
    if uri.startswith("sqlite:///"):
        raw = uri[len("sqlite:///"):]
    elif "://" in uri:
        raise SettingsLoadError(f"지원하지 않는 저장소 URI입니다 (sqlite만 지원): {uri}")
    else:
        raw = uri

    if not raw:
        raise SettingsLoadError("저장소 경로가 비어 있습니다")

    path = Path(raw)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


def parse_run_address(address: str) -> tuple[str, int]:
    """"host:port" → (host, port). host가 비어 있으면 0.0.0.0"""
    host, sep, port = address.rpartition(":")
    if not sep:
        raise SettingsLoadError(f"listen 주소 형식이 올바르지 않습니다: {address!r}")
    try:
        port_number = int(port)
    except ValueError:
        raise SettingsLoadError(f"listen 포트가 숫자가 아닙니다: {address!r}") from None
    return host or "0.0.0.0", port_number


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _load_yaml(path: Path) -> dict[str, Any]:
    """settings.yaml 로드"""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    unknown = set(data) - set(ENV_VARS)
    if unknown:
        raise SettingsLoadError(f"settings.yaml에 알 수 없는 키가 있습니다: {sorted(unknown)}")
    return data


def load_settings(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """설정 로드

    Args:
        path: settings.yaml 경로 (None이면 기본 경로, 없으면 건너뜀)
        environ: 환경 변수 (None이면 os.environ)
        overrides: CLI 플래그 값 (None 값은 무시)

    Returns:
        Settings 인스턴스

    Raises:
        SettingsLoadError: 파일/값 형식이 잘못된 경우
    """
    raw: dict[str, Any] = {
        "run_address": Defaults.RUN_ADDRESS,
        "database_uri": Defaults.DATABASE_URI,
        "accrual_address": Defaults.ACCRUAL_ADDRESS,
        "token_engine": Defaults.TOKEN_ENGINE,
        "token_ttl": Defaults.TOKEN_DURATION,
        "secret_key": Defaults.SECRET_KEY,
        "log_level": Defaults.LOG_LEVEL,
        "log_format": Defaults.LOG_FORMAT,
        "poll_interval_sec": Defaults.POLL_INTERVAL_SEC,
        "cooldown_sec": Defaults.COOLDOWN_SEC,
        "accrual_timeout_sec": Defaults.ACCRUAL_TIMEOUT_SEC,
        "max_concurrency": Defaults.MAX_CONCURRENCY,
        "debug": False,
    }

    # 1. settings.yaml
    if path is None:
        if Paths.SETTINGS_FILE.exists():
            raw.update(_load_yaml(Paths.SETTINGS_FILE))
    elif not path.exists():
        raise SettingsLoadError(f"설정 파일을 찾을 수 없습니다: {path}")
    else:
        raw.update(_load_yaml(path))

    # 2. 환경 변수
    env = os.environ if environ is None else environ
    for field_name, env_name in ENV_VARS.items():
        if env_name in env:
            raw[field_name] = env[env_name]

    # 3. CLI 플래그
    if overrides:
        raw.update({k: v for k, v in overrides.items() if v is not None})

    return _build_settings(raw)


def _build_settings(raw: dict[str, Any]) -> Settings:
    """원시 값 검증 및 변환"""
    try:
        token_engine = TokenEngine(str(raw["token_engine"]).lower())
    except ValueError:
        valid = [e.value for e in TokenEngine]
        raise SettingsLoadError(
            f"유효하지 않은 토큰 엔진입니다: {raw['token_engine']!r}. 유효한 값: {valid}"
        ) from None

    try:
        log_format = LogFormat(str(raw["log_format"]).lower())
    except ValueError:
        valid = [f.value for f in LogFormat]
        raise SettingsLoadError(
            f"유효하지 않은 로그 형식입니다: {raw['log_format']!r}. 유효한 값: {valid}"
        ) from None

    log_level = str(raw["log_level"]).lower()
    if log_level not in LOG_LEVELS:
        raise SettingsLoadError(f"유효하지 않은 로그 레벨입니다: {raw['log_level']!r}")

    secret_key = str(raw["secret_key"])
    if len(secret_key) < TokenLimits.MIN_SECRET_LENGTH:
        raise SettingsLoadError(
            f"secret_key는 최소 {TokenLimits.MIN_SECRET_LENGTH}자 이상이어야 합니다"
        )

    try:
        poll_interval = float(raw["poll_interval_sec"])
        cooldown = float(raw["cooldown_sec"])
        timeout = float(raw["accrual_timeout_sec"])
        max_concurrency = int(raw["max_concurrency"])
    except (TypeError, ValueError) as e:
        raise SettingsLoadError(f"숫자 설정 값이 올바르지 않습니다: {e}") from e

    if poll_interval <= 0 or cooldown < 0 or timeout <= 0 or max_concurrency < 1:
        raise SettingsLoadError("poll_interval, timeout, max_concurrency는 양수여야 합니다")

    token_ttl = parse_duration(raw["token_ttl"])
    if token_ttl <= timedelta(0):
        raise SettingsLoadError("token_ttl은 양수여야 합니다")

    settings = Settings(
        run_address=str(raw["run_address"]),
        database_uri=str(raw["database_uri"]),
        accrual_address=str(raw["accrual_address"]).rstrip("/"),
        token_engine=token_engine,
        token_ttl=token_ttl,
        secret_key=secret_key,
        log_level=log_level,
        log_format=log_format,
        poll_interval_sec=poll_interval,
        cooldown_sec=cooldown,
        accrual_timeout_sec=timeout,
        max_concurrency=max_concurrency,
        debug=_parse_bool(raw["debug"]),
    )

    # 파생 값 조기 검증
    parse_run_address(settings.run_address)
    parse_database_path(settings.database_uri)

    return settings


_settings: Settings | None = None


def get_settings(path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환 (프로세스 내 최초 1회 로드)

    진입점에서만 사용. 컴포넌트에는 Settings를 직접 전달.
    """
    global _settings
    if _settings is None:
        _settings = load_settings(path)
    return _settings


def reset_settings() -> None:
    """캐시된 Settings 초기화 (테스트용)"""
    global _settings
    _settings = None
