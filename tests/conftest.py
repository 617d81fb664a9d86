"""
pytest 공통 fixture 정의

설정, 저장소, 시계 등 여러 테스트에서 공유하는 fixture
"""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable

import pytest
import pytest_asyncio

from core.config.loader import Settings
from core.storage.loyalty_store import LoyaltyStore
from core.types import LogFormat, TokenEngine

# 테스트용 서명 키 (32자 이상)
TEST_SECRET = "test-secret-key-0123456789abcdefghij"


class FakeClock:
    """수동으로 진행시키는 시계"""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clock() -> FakeClock:
    """고정 시계"""
    return FakeClock()


@pytest.fixture
def secret_key() -> str:
    """토큰 서명 키"""
    return TEST_SECRET


@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., Settings]:
    """테스트용 Settings 생성 함수"""

    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "run_address": "localhost:0",
            "database_uri": f"sqlite:///{tmp_path / 'loyalty.db'}",
            "accrual_address": "http://accrual.test",
            "token_engine": TokenEngine.JWT,
            "token_ttl": timedelta(hours=1),
            "secret_key": TEST_SECRET,
            "log_level": "debug",
            "log_format": LogFormat.PRINTF,
            "poll_interval_sec": 0.01,
            "cooldown_sec": 0.05,
            "accrual_timeout_sec": 1.0,
            "max_concurrency": 5,
            "debug": False,
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest_asyncio.fixture
async def store(tmp_path: Path) -> LoyaltyStore:
    """스키마가 초기화된 실제 SQLite 저장소"""
    store = LoyaltyStore(tmp_path / "store.db")
    await store.init()
    yield store
    await store.close()
