from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace

from orderdesk.application.dto.requests import UpdateOrderRequest
from orderdesk.application.mappers.order_mapper import to_order_summary
from orderdesk.application.metrics.pos_lifecycle import record_stale_discarded
from orderdesk.application.ports.backend import BackendError, RestaurantBackend
from orderdesk.application.ports.notifier import Notifier
from orderdesk.application.scheduling import AutoRefresher, Debouncer
from orderdesk.domain.common.ids import OrderId, RestaurantId
from orderdesk.domain.common.money import DEFAULT_CURRENCY
from orderdesk.domain.order.summary import OrderStatus, OrderSummary, PaymentStatus

logger = logging.getLogger(__name__)


class InvalidSortError(Exception):
    pass


@dataclass(frozen=True)
class OrderFilter:
    status: OrderStatus | None = None
    payment_status: PaymentStatus | None = None
    search: str = ""

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.status is not None:
            params["status"] = self.status.value
        if self.payment_status is not None:
            params["paymentStatus"] = self.payment_status.value
        if self.search:
            params["search"] = self.search
        return params


def _created_key(order: OrderSummary) -> float:
    return order.created_at.timestamp() if order.created_at is not None else 0.0


_SORTS = {
    "newest": (_created_key, True),
    "oldest": (_created_key, False),
    "total_desc": (lambda order: order.total.amount, True),
    "total_asc": (lambda order: order.total.amount, False),
}


class OrderBoard:
    """Filtered order list with debounced search and generation-guarded refresh."""

    def __init__(
        self,
        restaurant_id: RestaurantId,
        backend: RestaurantBackend,
        notifier: Notifier,
        currency: str = DEFAULT_CURRENCY,
        search_debounce_seconds: float = 0.5,
    ) -> None:
        self._restaurant_id = restaurant_id
        self._backend = backend
        self._notifier = notifier
        self._currency = currency
        self._lock = threading.Lock()
        self._generation = 0
        self._filter = OrderFilter()
        self._orders: list[OrderSummary] = []
        self._debouncer = Debouncer(search_debounce_seconds, self.refresh)

    @property
    def orders(self) -> list[OrderSummary]:
        return self._orders

    @property
    def filter(self) -> OrderFilter:
        return self._filter

    def refresh(self) -> list[OrderSummary]:
        with self._lock:
            self._generation += 1
            generation = self._generation
            order_filter = self._filter

        try:
            rows = self._backend.list_orders(self._restaurant_id, order_filter.to_params())
            orders = [to_order_summary(row, self._currency) for row in rows]
        except (BackendError, ValueError) as exc:
            logger.warning("orders_fetch_failed", extra={"error": str(exc)})
            self._notifier.error(str(exc) or "An error occurred fetching orders.")
            return self._orders

        with self._lock:
            if generation != self._generation:
                record_stale_discarded("orders")
                logger.info("orders_refresh_superseded", extra={"generation": generation})
                return self._orders
            self._orders = orders
        return orders

    def set_filter(
        self,
        status: OrderStatus | None = None,
        payment_status: PaymentStatus | None = None,
    ) -> list[OrderSummary]:
        with self._lock:
            self._filter = replace(self._filter, status=status, payment_status=payment_status)
        return self.refresh()

    def set_search(self, text: str) -> None:
        with self._lock:
            self._filter = replace(self._filter, search=text.strip())
        self._debouncer.trigger()

    def flush_search(self) -> None:
        self._debouncer.flush()

    def update_status(self, order_id: OrderId, status: OrderStatus) -> bool:
        try:
            self._backend.update_order(
                self._restaurant_id,
                order_id,
                UpdateOrderRequest(status=status.value),
            )
        except BackendError as exc:
            self._notifier.error(str(exc) or "Failed to update order status.")
            return False
        self._notifier.success(f"Order {str(order_id)[-6:]} status updated to {status.value}!")
        self.refresh()
        return True

    def sorted_orders(self, sort_by: str = "newest") -> list[OrderSummary]:
        if sort_by not in _SORTS:
            raise InvalidSortError(f"invalid sort: {sort_by}")
        key, reverse = _SORTS[sort_by]
        return sorted(self._orders, key=key, reverse=reverse)

    def auto_refresher(self, interval_seconds: float = 15.0) -> AutoRefresher:
        return AutoRefresher(self.refresh, interval_seconds=interval_seconds)

    def close(self) -> None:
        self._debouncer.cancel()
