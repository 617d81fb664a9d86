"""
주문 API 라우터

POST /api/user/orders - 주문 번호 등록 (text/plain)
GET  /api/user/orders - 내 주문 목록
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from core.domain.models import User
from core.ledger.order_ledger import OrderLedger, SubmitResult
from web.dependencies import get_current_user, get_order_ledger
from web.models.responses import ErrorResponse, OrderResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user", tags=["Orders"])


@router.post(
    "/orders",
    status_code=202,
    responses={
        200: {"description": "이미 본인이 등록한 주문"},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def submit_order(
    request: Request,
    user: User = Depends(get_current_user),
    ledger: OrderLedger = Depends(get_order_ledger),
) -> Response:
    """주문 번호 등록

    Returns:
        202: 새 주문 접수
        200: 이미 본인이 등록한 주문

    Raises:
        400: Content-Type이 text/plain이 아니거나 본문 해석 불가
        409: 다른 사용자가 등록한 주문
        422: 주문 번호 형식 오류
    """
    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith("text/plain"):
        raise HTTPException(status_code=400, detail="Content-Type은 text/plain이어야 합니다")

    body = await request.body()
    try:
        raw_number = body.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="본문을 해석할 수 없습니다") from None

    result = await ledger.submit(user.username, raw_number)
    if result == SubmitResult.ALREADY_OWNED_BY_CALLER:
        return Response(status_code=200)
    return Response(status_code=202)


@router.get(
    "/orders",
    response_model=list[OrderResponse],
    response_model_exclude_none=True,
    responses={204: {"description": "등록된 주문 없음"}},
)
async def list_orders(
    user: User = Depends(get_current_user),
    ledger: OrderLedger = Depends(get_order_ledger),
):
    """내 주문 목록 (uploaded_at 오름차순)

    Returns:
        주문 목록 (없으면 204)
    """
    orders = await ledger.list_for_owner(user.username)
    if not orders:
        return Response(status_code=204)

    return [OrderResponse(**order.to_dict()) for order in orders]
