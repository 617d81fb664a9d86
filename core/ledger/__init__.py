"""
주문 원장 및 잔고 관리

사용 예시:
```python
from core.ledger import OrderLedger, BalanceAccounting, SubmitResult

ledger = OrderLedger(store)
balance = BalanceAccounting(store)

result = await ledger.submit("alice", "79927398713")
withdrawal = await balance.withdraw("alice", "2377225624", Decimal("100"))
```
"""

from core.ledger.balance import BalanceAccounting
from core.ledger.order_ledger import OrderLedger, SubmitResult, validate_order_number

__all__ = [
    "OrderLedger",
    "SubmitResult",
    "BalanceAccounting",
    "validate_order_number",
]
