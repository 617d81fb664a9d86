"""
통합 테스트 공통 fixture

실제 SQLite 저장소 + MockAccrualClient로 구성한 앱과 HTTP 클라이언트.
워커는 테스트에서 run_cycle()을 직접 호출하여 진행.
"""

from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from adapters.mock.accrual_client import MockAccrualClient
from web.app import create_app
from worker.accrual_poller import AccrualPoller


@pytest.fixture
def accrual() -> MockAccrualClient:
    """메모리 내 Accrual 시스템"""
    return MockAccrualClient()


@pytest_asyncio.fixture
async def app(make_settings, accrual: MockAccrualClient) -> AsyncGenerator[FastAPI, None]:
    """lifespan이 실행된 앱 (워커 비활성)"""
    app = create_app(make_settings(), accrual_client=accrual, start_worker=False)
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """ASGI HTTP 클라이언트"""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def poller(app: FastAPI, accrual: MockAccrualClient) -> AccrualPoller:
    """앱과 같은 원장을 사용하는 워커 (max_concurrency=1)"""
    return AccrualPoller(app.state.order_ledger, accrual, max_concurrency=1)


@pytest.fixture
def register_user(client: httpx.AsyncClient):
    """회원가입 후 Authorization 헤더 반환 (쿠키는 비움)"""

    async def _register(login: str, password: str = "secret") -> dict[str, Any]:
        response = await client.post(
            "/api/user/register",
            json={"login": login, "password": password},
        )
        assert response.status_code == 200
        client.cookies.clear()
        return {"Authorization": response.headers["Authorization"]}

    return _register
