"""
State Machines 테스트
"""

import pytest

from core.domain.state_machines import (
    can_transition,
    is_terminal,
)
from core.types import OrderStatus


class TestCanTransition:
    """can_transition 테스트"""

    @pytest.mark.parametrize(
        "current, target",
        [
            (OrderStatus.NEW, OrderStatus.REGISTERED),
            (OrderStatus.NEW, OrderStatus.PROCESSING),
            (OrderStatus.NEW, OrderStatus.PROCESSED),
            (OrderStatus.NEW, OrderStatus.INVALID),
            (OrderStatus.REGISTERED, OrderStatus.PROCESSING),
            (OrderStatus.PROCESSING, OrderStatus.PROCESSED),
            (OrderStatus.PROCESSING, OrderStatus.INVALID),
        ],
    )
    def test_forward_transitions(self, current: OrderStatus, target: OrderStatus) -> None:
        """전진 전이 (건너뛰기 포함)"""
        assert can_transition(current, target) is True

    @pytest.mark.parametrize(
        "current, target",
        [
            (OrderStatus.PROCESSING, OrderStatus.REGISTERED),
            (OrderStatus.REGISTERED, OrderStatus.NEW),
            (OrderStatus.PROCESSING, OrderStatus.PROCESSING),
            (OrderStatus.NEW, OrderStatus.NEW),
        ],
    )
    def test_backward_or_same_ignored(self, current: OrderStatus, target: OrderStatus) -> None:
        """역방향, 동일 상태"""
        assert can_transition(current, target) is False

    @pytest.mark.parametrize("current", [OrderStatus.INVALID, OrderStatus.PROCESSED])
    @pytest.mark.parametrize("target", list(OrderStatus))
    def test_terminal_never_overwritten(self, current: OrderStatus, target: OrderStatus) -> None:
        """종료 상태는 어떤 결과로도 변경 불가"""
        assert can_transition(current, target) is False

    def test_is_terminal(self) -> None:
        """종료 상태 판별"""
        assert is_terminal(OrderStatus.PROCESSED)
        assert is_terminal(OrderStatus.INVALID)
        assert not is_terminal(OrderStatus.PROCESSING)
