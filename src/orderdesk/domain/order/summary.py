from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from orderdesk.domain.common.ids import OrderId, TableId
from orderdesk.domain.common.money import Money
from orderdesk.domain.order.entities import OrderLineItem, OrderType


class OrderStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    SERVED = "served"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


CLOSED_STATUSES = frozenset({OrderStatus.SERVED, OrderStatus.COMPLETED, OrderStatus.CANCELLED})


@dataclass(frozen=True)
class OrderSummary:
    order_id: OrderId
    table_id: TableId | None
    status: OrderStatus
    payment_status: PaymentStatus
    order_type: OrderType
    total: Money
    created_at: datetime | None
    customer_name: str = ""
    items: list[OrderLineItem] = field(default_factory=list)

    @property
    def is_open(self) -> bool:
        return self.status not in CLOSED_STATUSES
