from __future__ import annotations

import sys
import threading
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from orderdesk.application.dto.responses import OrderResponse
from orderdesk.application.ports.backend import BackendError
from orderdesk.application.use_cases.order_board import InvalidSortError, OrderBoard, OrderFilter
from orderdesk.domain.common.ids import OrderId, RestaurantId
from orderdesk.domain.order.summary import OrderStatus, PaymentStatus


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))


def _order(order_id: str, total: float, created_at: str, status: str = "pending") -> dict:
    return {
        "_id": order_id,
        "table": {"_id": "tbl_1", "tableNumber": "1"},
        "status": status,
        "paymentStatus": "pending",
        "orderType": "dine_in",
        "totalAmount": total,
        "createdAt": created_at,
        "items": [
            {
                "menuItem": {"_id": "itm_1", "name": "Brochette"},
                "quantity": 2,
                "price": 1000,
            }
        ],
    }


class FakeOrdersBackend:
    def __init__(self) -> None:
        self.rows = [
            _order("ord_a", 2950, "2026-10-19T10:00:00Z"),
            _order("ord_b", 1180, "2026-10-19T11:00:00Z", status="preparing"),
            _order("ord_c", 5900, "2026-10-19T09:00:00Z"),
        ]
        self.params: list[dict[str, str]] = []
        self.updates: list[tuple[str, str]] = []
        self.fail = False

    def list_orders(self, restaurant_id, params):
        self.params.append(dict(params))
        if self.fail:
            raise BackendError("Failed to fetch orders.")
        return [OrderResponse.model_validate(row) for row in self.rows]

    def update_order(self, restaurant_id, order_id, request_dto):
        self.updates.append((str(order_id), request_dto.status))


def _board(backend: FakeOrdersBackend, delay: float = 0.5) -> tuple[OrderBoard, RecordingNotifier]:
    notifier = RecordingNotifier()
    board = OrderBoard(
        restaurant_id=RestaurantId("rst_001"),
        backend=backend,
        notifier=notifier,
        search_debounce_seconds=delay,
    )
    return board, notifier


def test_filter_params_omit_empty_values() -> None:
    assert OrderFilter().to_params() == {}
    assert OrderFilter(
        status=OrderStatus.READY,
        payment_status=PaymentStatus.PAID,
        search="aline",
    ).to_params() == {"status": "ready", "paymentStatus": "paid", "search": "aline"}


def test_refresh_maps_orders() -> None:
    backend = FakeOrdersBackend()
    board, _ = _board(backend)

    orders = board.refresh()

    assert [order.order_id for order in orders] == ["ord_a", "ord_b", "ord_c"]
    assert orders[0].table_id == "tbl_1"
    assert orders[0].items[0].name == "Brochette"
    assert orders[1].status == OrderStatus.PREPARING
    assert orders[0].is_open


def test_refresh_failure_keeps_previous_orders() -> None:
    backend = FakeOrdersBackend()
    board, notifier = _board(backend)
    board.refresh()
    backend.fail = True

    board.refresh()

    assert len(board.orders) == 3
    assert notifier.messages[-1] == ("error", "Failed to fetch orders.")


def test_set_filter_refreshes_with_params() -> None:
    backend = FakeOrdersBackend()
    board, _ = _board(backend)

    board.set_filter(status=OrderStatus.PENDING, payment_status=PaymentStatus.PENDING)

    assert backend.params[-1] == {"status": "pending", "paymentStatus": "pending"}


def test_search_is_debounced_to_last_value() -> None:
    backend = FakeOrdersBackend()
    board, _ = _board(backend, delay=30)

    board.set_search("a")
    board.set_search("al")
    board.set_search(" aline ")
    assert backend.params == []

    board.flush_search()

    assert backend.params == [{"search": "aline"}]
    board.close()


def test_update_status_then_refreshes() -> None:
    backend = FakeOrdersBackend()
    board, notifier = _board(backend)

    assert board.update_status(OrderId("ord_000000abcdef"), OrderStatus.READY)

    assert backend.updates == [("ord_000000abcdef", "ready")]
    assert len(backend.params) == 1
    assert notifier.messages[0] == ("success", "Order abcdef status updated to ready!")


def test_sorted_orders() -> None:
    board, _ = _board(FakeOrdersBackend())
    board.refresh()

    assert [o.order_id for o in board.sorted_orders()] == ["ord_b", "ord_a", "ord_c"]
    assert [o.order_id for o in board.sorted_orders("oldest")] == ["ord_c", "ord_a", "ord_b"]
    assert [o.order_id for o in board.sorted_orders("total_desc")] == ["ord_c", "ord_a", "ord_b"]
    assert [o.order_id for o in board.sorted_orders("total_asc")] == ["ord_b", "ord_a", "ord_c"]
    with pytest.raises(InvalidSortError):
        board.sorted_orders("alphabetical")


class SlowFirstBackend(FakeOrdersBackend):
    def __init__(self) -> None:
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()
        self._first = True

    def list_orders(self, restaurant_id, params):
        if self._first:
            self._first = False
            self.entered.set()
            self.release.wait(timeout=5)
            return [OrderResponse.model_validate(_order("ord_stale", 1, "2026-10-19T08:00:00Z"))]
        return super().list_orders(restaurant_id, params)


def test_stale_refresh_does_not_overwrite_newer_result() -> None:
    backend = SlowFirstBackend()
    board, _ = _board(backend)

    slow = threading.Thread(target=board.refresh)
    slow.start()
    assert backend.entered.wait(timeout=5)

    board.refresh()
    backend.release.set()
    slow.join(timeout=5)

    assert [order.order_id for order in board.orders] == ["ord_a", "ord_b", "ord_c"]
