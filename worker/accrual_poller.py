"""
AccrualPoller

미완료 주문(NEW, REGISTERED, PROCESSING)을 주기적으로 Accrual 시스템에 조회하여
주문 상태와 적립금을 반영하는 백그라운드 워커.

응답별 처리:
- 200: 종료 상태 주문이면 무시, 아니면 상태 변경 (PROCESSED는 같은 트랜잭션에서 적립)
- 204: 상태 유지, 다음 주기에 재시도
- 429: 이번 주기의 나머지 주문은 반영하지 않고 (진행 중이던 조회 결과 포함), 주기 종료 후 쿨다운 대기
- 500/기타: 상태 유지, 해당 주문만 실패 처리
- 그 외 예외: 해당 주문만 실패 처리
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum

from adapters.accrual.errors import (
    AccrualRateLimitError,
    AccrualServiceError,
    OrderNotRegisteredError,
)
from adapters.interfaces import IAccrualClient
from core.constants import Defaults
from core.domain.errors import LoyaltyError, PersistenceError
from core.domain.models import Order
from core.domain.state_machines import can_transition
from core.ledger.order_ledger import OrderLedger

logger = logging.getLogger(__name__)


class _Outcome(str, Enum):
    """주문 1건 처리 결과"""

    APPLIED = "APPLIED"
    STALE = "STALE"
    UNCHANGED = "UNCHANGED"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


@dataclass
class CycleResult:
    """폴링 1주기 결과

    Attributes:
        total: 조회 대상 주문 수
        applied: 상태가 변경된 주문 수
        stale: 오래된 결과로 무시된 주문 수
        unchanged: Accrual 시스템에 아직 없는 주문 수 (204)
        skipped: 429로 건너뛴 주문 수
        failed: 조회/저장 실패 주문 수
        rate_limited: 이번 주기에 429를 받았는지
    """

    total: int = 0
    applied: int = 0
    stale: int = 0
    unchanged: int = 0
    skipped: int = 0
    failed: int = 0
    rate_limited: bool = False


class AccrualPoller:
    """Accrual 조회 워커

    Args:
        ledger: 주문 원장
        client: Accrual 시스템 클라이언트
        poll_interval_sec: 주기 간 대기 (초)
        cooldown_sec: 429 이후 추가 대기 (초)
        max_concurrency: 동시 조회 수

    사용 예시:
    ```python
    shutdown_event = asyncio.Event()
    poller = AccrualPoller(ledger, client)
    task = asyncio.create_task(poller.run(shutdown_event))

    shutdown_event.set()
    await task
    ```
    """

    def __init__(
        self,
        ledger: OrderLedger,
        client: IAccrualClient,
        poll_interval_sec: float = Defaults.POLL_INTERVAL_SEC,
        cooldown_sec: float = Defaults.COOLDOWN_SEC,
        max_concurrency: int = Defaults.MAX_CONCURRENCY,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.ledger = ledger
        self.client = client
        self.poll_interval_sec = poll_interval_sec
        self.cooldown_sec = cooldown_sec
        self.max_concurrency = max_concurrency

        self._cycle_count = 0

    @property
    def cycle_count(self) -> int:
        """실행한 주기 수"""
        return self._cycle_count

    async def run(self, shutdown_event: asyncio.Event) -> None:
        """메인 루프

        shutdown_event가 설정되면 주기 경계에서 종료.
        진행 중인 조회는 중단하지 않음.
        """
        logger.info(
            "Accrual 워커 시작",
            extra={
                "poll_interval_sec": self.poll_interval_sec,
                "cooldown_sec": self.cooldown_sec,
                "max_concurrency": self.max_concurrency,
            },
        )

        while True:
            if await self._wait(shutdown_event, self.poll_interval_sec):
                break

            try:
                result = await self.run_cycle()
            except Exception as e:
                logger.error(f"Accrual 주기 에러: {e}", exc_info=True)
                continue

            if result.rate_limited:
                logger.warning(
                    f"Accrual rate limit: {self.cooldown_sec}초 쿨다운",
                    extra={"skipped": result.skipped},
                )
                if await self._wait(shutdown_event, self.cooldown_sec):
                    break

        logger.info("Accrual 워커 종료", extra={"cycles": self._cycle_count})

    @staticmethod
    async def _wait(shutdown_event: asyncio.Event, timeout: float) -> bool:
        """timeout 동안 대기. 종료 이벤트가 설정되면 즉시 True"""
        if shutdown_event.is_set():
            return True
        try:
            await asyncio.wait_for(shutdown_event.wait(), timeout)
        except asyncio.TimeoutError:
            return False
        return True

    async def run_cycle(self) -> CycleResult:
        """폴링 1주기 실행

        Returns:
            CycleResult
        """
        self._cycle_count += 1
        result = CycleResult()

        try:
            orders = await self.ledger.list_pending()
        except PersistenceError as e:
            logger.error(f"미완료 주문 조회 실패: {e}")
            return result

        if not orders:
            return result

        result.total = len(orders)
        semaphore = asyncio.Semaphore(self.max_concurrency)
        rate_limited = asyncio.Event()

        outcomes = await asyncio.gather(
            *(self._process(order, semaphore, rate_limited) for order in orders)
        )

        for outcome in outcomes:
            if outcome == _Outcome.APPLIED:
                result.applied += 1
            elif outcome == _Outcome.STALE:
                result.stale += 1
            elif outcome == _Outcome.UNCHANGED:
                result.unchanged += 1
            elif outcome == _Outcome.SKIPPED:
                result.skipped += 1
            else:
                result.failed += 1
        result.rate_limited = rate_limited.is_set()

        if result.applied or result.failed or result.rate_limited:
            logger.info(
                "Accrual 주기 완료",
                extra={
                    "total": result.total,
                    "applied": result.applied,
                    "failed": result.failed,
                    "skipped": result.skipped,
                },
            )
        else:
            logger.debug(f"Accrual 주기 완료: 변경 없음 ({result.total}건)")

        return result

    async def _process(
        self,
        order: Order,
        semaphore: asyncio.Semaphore,
        rate_limited: asyncio.Event,
    ) -> _Outcome:
        """주문 1건 조회 및 반영

        예상하지 못한 예외도 해당 주문의 실패로 처리하여 나머지 주문은 계속 진행.
        """
        try:
            return await self._process_order(order, semaphore, rate_limited)
        except Exception as e:
            logger.error(
                f"Accrual 주문 처리 에러: {e}",
                extra={"order": order.number},
                exc_info=True,
            )
            return _Outcome.FAILED

    async def _process_order(
        self,
        order: Order,
        semaphore: asyncio.Semaphore,
        rate_limited: asyncio.Event,
    ) -> _Outcome:
        async with semaphore:
            if rate_limited.is_set():
                return _Outcome.SKIPPED

            try:
                accrual = await self.client.get_order(order.number)
            except OrderNotRegisteredError:
                logger.debug("Accrual 시스템에 아직 없는 주문", extra={"order": order.number})
                return _Outcome.UNCHANGED
            except AccrualRateLimitError as e:
                rate_limited.set()
                logger.warning(
                    "Accrual 요청 한도 초과",
                    extra={"order": order.number, "retry_after": e.retry_after},
                )
                return _Outcome.SKIPPED
            except AccrualServiceError as e:
                logger.warning(
                    f"Accrual 조회 실패: {e}",
                    extra={"order": order.number, "status_code": e.status_code},
                )
                return _Outcome.FAILED

        # 조회 중 다른 주문이 429를 받았으면 결과를 반영하지 않음
        if rate_limited.is_set():
            return _Outcome.SKIPPED

        if not can_transition(order.status, accrual.status):
            return _Outcome.STALE

        try:
            applied = await self.ledger.apply_accrual(accrual)
        except LoyaltyError as e:
            logger.error(
                f"Accrual 결과 저장 실패: {e}",
                extra={"order": order.number, "status": accrual.status.value},
            )
            return _Outcome.FAILED

        return _Outcome.APPLIED if applied else _Outcome.STALE
