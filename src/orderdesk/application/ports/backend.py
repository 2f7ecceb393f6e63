from __future__ import annotations

from typing import Protocol

from orderdesk.application.dto.requests import (
    CreateOrderRequest,
    ProcessPaymentRequest,
    UpdateOrderRequest,
    UpdateTableRequest,
)
from orderdesk.application.dto.responses import (
    MenuItemResponse,
    OrderResponse,
    TableResponse,
)
from orderdesk.domain.common.ids import OrderId, RestaurantId, TableId


class RestaurantBackend(Protocol):
    def list_tables(
        self,
        restaurant_id: RestaurantId,
        status: str | None = None,
        search: str | None = None,
    ) -> list[TableResponse]: ...

    def list_menu_items(
        self,
        restaurant_id: RestaurantId,
        is_active: bool | None = None,
        category: str | None = None,
        search: str | None = None,
    ) -> list[MenuItemResponse]: ...

    def create_order(
        self,
        restaurant_id: RestaurantId,
        request_dto: CreateOrderRequest,
    ) -> OrderResponse: ...

    def update_table(
        self,
        restaurant_id: RestaurantId,
        table_id: TableId,
        request_dto: UpdateTableRequest,
    ) -> None: ...

    def process_payment(
        self,
        restaurant_id: RestaurantId,
        order_id: OrderId,
        request_dto: ProcessPaymentRequest,
    ) -> None: ...

    def list_orders(
        self,
        restaurant_id: RestaurantId,
        params: dict[str, str],
    ) -> list[OrderResponse]: ...

    def update_order(
        self,
        restaurant_id: RestaurantId,
        order_id: OrderId,
        request_dto: UpdateOrderRequest,
    ) -> None: ...


class BackendError(Exception):
    """A remote call failed: transport error, error status or ``success: false``."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
