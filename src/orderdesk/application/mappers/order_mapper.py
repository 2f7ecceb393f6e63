from __future__ import annotations

from typing import Any

from orderdesk.application.dto.requests import CreateOrderItemRequest, CreateOrderRequest
from orderdesk.application.dto.responses import OrderItemResponse, OrderResponse
from orderdesk.domain.common.ids import MenuItemId, OrderId, TableId
from orderdesk.domain.common.money import Money, to_decimal
from orderdesk.domain.order.entities import OrderDraft, OrderLineItem, OrderType
from orderdesk.domain.order.summary import OrderStatus, OrderSummary, PaymentStatus


def to_create_order_request(draft: OrderDraft, order_type: OrderType) -> CreateOrderRequest:
    if draft.table is None:
        raise ValueError("draft has no table")
    return CreateOrderRequest(
        table=str(draft.table.table_id),
        items=[
            CreateOrderItemRequest(
                menu_item=str(line.item_id),
                quantity=line.quantity,
                notes=line.notes,
                price=float(line.unit_price.quantized().amount),
            )
            for line in draft.lines
        ],
        notes=draft.notes,
        order_type=order_type.value,
        customer_name=draft.customer_name,
        customer_phone=draft.customer_phone,
    )


def _reference_id(value: str | dict[str, Any] | None) -> str | None:
    # The backend returns either a bare id or a populated document.
    if value is None:
        return None
    if isinstance(value, dict):
        raw = value.get("_id")
        return str(raw) if raw is not None else None
    return value


def _to_line(item: OrderItemResponse, currency: str) -> OrderLineItem:
    name = item.name
    if not name and isinstance(item.menuItem, dict):
        name = str(item.menuItem.get("name", ""))
    return OrderLineItem(
        item_id=MenuItemId(_reference_id(item.menuItem) or ""),
        name=name,
        quantity=item.quantity,
        unit_price=Money(amount=to_decimal(item.price), currency=currency),
        notes=item.notes or "",
    )


def to_order_summary(response: OrderResponse, currency: str) -> OrderSummary:
    table_id = _reference_id(response.table)
    return OrderSummary(
        order_id=OrderId(response.id),
        table_id=TableId(table_id) if table_id else None,
        status=OrderStatus(response.status),
        payment_status=PaymentStatus(response.paymentStatus),
        order_type=OrderType(response.orderType),
        total=Money(amount=to_decimal(response.totalAmount), currency=currency),
        created_at=response.createdAt,
        customer_name=response.customerName or "",
        items=[_to_line(item, currency) for item in response.items],
    )
