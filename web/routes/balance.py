"""
잔고 API 라우터

GET  /api/user/balance          - 잔고 조회
POST /api/user/balance/withdraw - 출금
GET  /api/user/withdrawals      - 출금 내역
"""

import logging

from fastapi import APIRouter, Depends, Response

from core.domain.models import User
from core.ledger.balance import BalanceAccounting
from web.dependencies import get_balance_accounting, get_current_user
from web.models.requests import WithdrawRequest
from web.models.responses import BalanceResponse, ErrorResponse, WithdrawalResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user", tags=["Balance"])


@router.get("/balance", response_model=BalanceResponse)
async def get_balance(
    user: User = Depends(get_current_user),
    accounting: BalanceAccounting = Depends(get_balance_accounting),
) -> BalanceResponse:
    """잔고 조회"""
    balance = await accounting.get_balance(user.username)
    return BalanceResponse(**balance.to_dict())


@router.post(
    "/balance/withdraw",
    status_code=200,
    responses={402: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def withdraw(
    request: WithdrawRequest,
    user: User = Depends(get_current_user),
    accounting: BalanceAccounting = Depends(get_balance_accounting),
) -> Response:
    """출금

    Raises:
        402: 잔고 부족
        422: 출금 요청 번호 형식 오류, 0 이하 금액
    """
    await accounting.withdraw(user.username, request.order, request.sum)
    return Response(status_code=200)


@router.get(
    "/withdrawals",
    response_model=list[WithdrawalResponse],
    responses={204: {"description": "출금 내역 없음"}},
)
async def list_withdrawals(
    user: User = Depends(get_current_user),
    accounting: BalanceAccounting = Depends(get_balance_accounting),
):
    """출금 내역 (processed_at 오름차순)

    Returns:
        출금 목록 (없으면 204)
    """
    withdrawals = await accounting.list_withdrawals(user.username)
    if not withdrawals:
        return Response(status_code=204)

    return [WithdrawalResponse(**withdrawal.to_dict()) for withdrawal in withdrawals]
