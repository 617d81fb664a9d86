"""
FastAPI 애플리케이션

라우터 등록, 미들웨어, 도메인 오류 → HTTP 상태 매핑.
lifespan에서 저장소 초기화 및 Accrual 워커 실행/종료.
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from adapters.accrual.client import AccrualClient
from adapters.interfaces import IAccrualClient, IStorage
from adapters.token.factory import create_token_maker
from core.config.loader import Settings, get_settings
from core.constants import VERSION
from core.domain.errors import (
    AuthError,
    ConflictError,
    PersistenceError,
    ResourceError,
    ValidationError,
)
from core.ledger.balance import BalanceAccounting
from core.ledger.order_ledger import OrderLedger
from core.storage.loyalty_store import LoyaltyStore
from web.routes import auth, balance, health, orders
from web.services.auth_service import AuthService
from worker.accrual_poller import AccrualPoller

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리"""
    settings: Settings = app.state.settings
    store: IStorage = app.state.store
    accrual_client: IAccrualClient = app.state.accrual_client

    # 시작 시 - DB 연결 및 스키마 초기화
    await store.init()

    shutdown_event = asyncio.Event()
    worker_task: asyncio.Task | None = None

    if app.state.start_worker:
        poller = AccrualPoller(
            ledger=app.state.order_ledger,
            client=accrual_client,
            poll_interval_sec=settings.poll_interval_sec,
            cooldown_sec=settings.cooldown_sec,
            max_concurrency=settings.max_concurrency,
        )
        worker_task = asyncio.create_task(poller.run(shutdown_event), name="accrual-poller")

    logger.info(
        "Web 시작",
        extra={"run_address": settings.run_address, "token_engine": settings.token_engine.value},
    )

    yield

    # 종료 시 - 워커 정지 후 리소스 정리
    shutdown_event.set()
    if worker_task is not None:
        await stop_worker(
            worker_task,
            timeout=settings.accrual_timeout_sec + settings.poll_interval_sec,
        )

    await accrual_client.close()
    await store.close()
    logger.info("Web 종료")


async def stop_worker(worker_task: asyncio.Task, timeout: float) -> None:
    """워커 종료 대기. timeout 안에 끝나지 않으면 작업 취소"""
    done, _ = await asyncio.wait({worker_task}, timeout=timeout)
    if worker_task in done:
        return

    logger.warning("Accrual 워커 종료 시간 초과: 작업 취소", extra={"timeout_sec": timeout})
    worker_task.cancel()
    try:
        await worker_task
    except asyncio.CancelledError:
        pass


def _error_response(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    """도메인 오류 → HTTP 상태 코드"""

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": "잘못된 요청 형식입니다"})

    @app.exception_handler(ValidationError)
    async def handle_validation(request: Request, exc: ValidationError):
        return _error_response(422, exc)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return _error_response(409, exc)

    @app.exception_handler(AuthError)
    async def handle_auth(request: Request, exc: AuthError):
        return _error_response(401, exc)

    @app.exception_handler(ResourceError)
    async def handle_resource(request: Request, exc: ResourceError):
        return _error_response(402, exc)

    @app.exception_handler(PersistenceError)
    async def handle_persistence(request: Request, exc: PersistenceError):
        logger.error(
            f"저장소 오류: {exc}",
            extra={"method": request.method, "path": request.url.path},
        )
        return JSONResponse(status_code=500, content={"detail": "internal server error"})


def create_app(
    settings: Settings | None = None,
    store: IStorage | None = None,
    accrual_client: IAccrualClient | None = None,
    start_worker: bool = True,
) -> FastAPI:
    """FastAPI 앱 생성

    Args:
        settings: 설정 (None이면 get_settings())
        store: 저장소 (None이면 settings.db_path의 LoyaltyStore)
        accrual_client: Accrual 클라이언트 (None이면 settings.accrual_address)
        start_worker: lifespan에서 Accrual 워커 실행 여부

    Returns:
        FastAPI 앱
    """
    if settings is None:
        settings = get_settings()
    if store is None:
        store = LoyaltyStore(settings.db_path)
    if accrual_client is None:
        accrual_client = AccrualClient(
            settings.accrual_address,
            timeout=settings.accrual_timeout_sec,
        )

    # 토큰 엔진은 시작 시 한 번만 선택
    token_maker = create_token_maker(settings.token_engine, settings.secret_key)

    app = FastAPI(
        title="LoyaltyEngine API",
        description="주문 적립 포인트 관리 API",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.store = store
    app.state.accrual_client = accrual_client
    app.state.start_worker = start_worker
    app.state.token_maker = token_maker
    app.state.auth_service = AuthService(store, token_maker, settings.token_ttl)
    app.state.order_ledger = OrderLedger(store)
    app.state.balance_accounting = BalanceAccounting(store)

    # CORS 설정
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Authorization"],
    )

    # 응답 압축
    app.add_middleware(GZipMiddleware, minimum_size=500)

    if settings.debug:
        @app.middleware("http")
        async def log_request(request: Request, call_next):
            """요청/응답 로그 (debug 모드)"""
            started = time.perf_counter()
            response = await call_next(request)
            logger.debug(
                f"{request.method} {request.url.path} → {response.status_code}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
            return response

    register_exception_handlers(app)

    # =========================================================================
    # API 라우터 등록
    # =========================================================================

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(orders.router)
    app.include_router(balance.router)

    return app
