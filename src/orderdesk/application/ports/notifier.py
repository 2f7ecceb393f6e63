from __future__ import annotations

from typing import Protocol

from orderdesk.domain.common.ids import OrderId
from orderdesk.domain.common.money import Money
from orderdesk.domain.order.entities import PaymentData


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class PaymentCollector(Protocol):
    def collect(self, order_id: OrderId | None, total: Money) -> PaymentData | None: ...
