"""
헬스 체크 엔드포인트

GET /health - 서버 상태 확인
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from adapters.interfaces import IStorage
from core.constants import VERSION
from web.dependencies import get_store
from web.models.responses import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def health_check(store: IStorage = Depends(get_store)):
    """서버 상태 확인

    Returns:
        HealthResponse: status, version 정보 (저장소 응답 없으면 503)
    """
    if not await store.check():
        return JSONResponse(
            status_code=503,
            content=HealthResponse(status="unavailable", version=VERSION).model_dump(),
        )

    return HealthResponse(status="ok", version=VERSION)
