from __future__ import annotations

from prometheus_client import Counter, Histogram

from orderdesk.domain.order.entities import OrderState, OrderType

ORDERS_PLACED_TOTAL = Counter(
    "orderdesk_orders_placed_total",
    "Total number of orders placed from the POS.",
    ["restaurant_id", "order_type"],
)

PAYMENTS_COMPLETED_TOTAL = Counter(
    "orderdesk_payments_completed_total",
    "Total number of payments completed from the POS.",
    ["restaurant_id", "payment_method"],
)

CHECKOUT_FAILURES_TOTAL = Counter(
    "orderdesk_checkout_failures_total",
    "Total number of rejected or failed checkout actions.",
    ["action", "reason"],
)

ORDER_TRANSITION_TOTAL = Counter(
    "orderdesk_order_transition_total",
    "Total number of order draft lifecycle transitions.",
    ["from", "to"],
)

CATALOG_LOAD_SECONDS = Histogram(
    "orderdesk_catalog_load_seconds",
    "Time taken to load tables and menu items.",
)

STALE_REFRESH_DISCARDED_TOTAL = Counter(
    "orderdesk_stale_refresh_discarded_total",
    "Total number of refresh results discarded because a newer refresh started.",
    ["kind"],
)


def record_order_placed(restaurant_id: str, order_type: OrderType) -> None:
    ORDERS_PLACED_TOTAL.labels(restaurant_id=restaurant_id, order_type=order_type.value).inc()


def record_payment_completed(restaurant_id: str, payment_method: str) -> None:
    PAYMENTS_COMPLETED_TOTAL.labels(
        restaurant_id=restaurant_id,
        payment_method=payment_method,
    ).inc()


def record_checkout_failure(action: str, reason: str) -> None:
    CHECKOUT_FAILURES_TOTAL.labels(action=action, reason=reason).inc()


def record_transition(from_state: OrderState, to_state: OrderState) -> None:
    ORDER_TRANSITION_TOTAL.labels(**{"from": from_state.value, "to": to_state.value}).inc()


def record_catalog_load(duration_seconds: float) -> None:
    CATALOG_LOAD_SECONDS.observe(max(duration_seconds, 0.0))


def record_stale_discarded(kind: str) -> None:
    STALE_REFRESH_DISCARDED_TOTAL.labels(kind=kind).inc()
