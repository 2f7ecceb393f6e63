from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from opentelemetry.propagate import inject
from prometheus_client import Counter, Histogram
from pydantic import ValidationError

from orderdesk.application.dto.requests import (
    CreateOrderRequest,
    ProcessPaymentRequest,
    UpdateOrderRequest,
    UpdateTableRequest,
)
from orderdesk.application.dto.responses import (
    ApiEnvelope,
    MenuItemResponse,
    OrderResponse,
    TableResponse,
)
from orderdesk.application.ports.backend import BackendError
from orderdesk.config import Settings
from orderdesk.domain.common.ids import OrderId, RestaurantId, TableId
from orderdesk.infrastructure.http.request_id import (
    REQUEST_ID_HEADER,
    current_or_new_request_id,
    request_id_context,
)

logger = logging.getLogger(__name__)

BACKEND_REQUEST_COUNT = Counter(
    "orderdesk_backend_requests_total",
    "Total number of backend requests",
    ["method", "resource", "outcome"],
)
BACKEND_REQUEST_LATENCY = Histogram(
    "orderdesk_backend_request_duration_seconds",
    "Backend request duration in seconds",
    ["method", "resource"],
)


def _clean_params(params: dict[str, Any]) -> dict[str, str]:
    cleaned: dict[str, str] = {}
    for key, value in params.items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            cleaned[key] = "true" if value else "false"
        else:
            cleaned[key] = str(value)
    return cleaned


class HttpRestaurantBackend:
    """REST client for the ``/restaurant/{restaurantId}`` endpoints.

    Every response is expected as ``{success, data?, message?}``. Transport
    errors, non-2xx statuses and ``success: false`` all raise ``BackendError``.
    """

    def __init__(self, settings: Settings, client: httpx.Client | None = None) -> None:
        headers = {"Content-Type": "application/json"}
        if settings.api_token:
            headers["Authorization"] = f"Bearer {settings.api_token}"
        self._client = client or httpx.Client(
            base_url=settings.api_url,
            timeout=httpx.Timeout(settings.timeout_seconds),
            headers=headers,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpRestaurantBackend:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def list_tables(
        self,
        restaurant_id: RestaurantId,
        status: str | None = None,
        search: str | None = None,
    ) -> list[TableResponse]:
        data = self._request(
            "GET",
            f"/restaurant/{restaurant_id}/tables",
            resource="tables",
            params={"status": status, "search": search},
        )
        return _parse_list(data, TableResponse, "tables")

    def list_menu_items(
        self,
        restaurant_id: RestaurantId,
        is_active: bool | None = None,
        category: str | None = None,
        search: str | None = None,
    ) -> list[MenuItemResponse]:
        data = self._request(
            "GET",
            f"/restaurant/{restaurant_id}/menu-items",
            resource="menu_items",
            params={"isActive": is_active, "category": category, "search": search},
        )
        return _parse_list(data, MenuItemResponse, "menu items")

    def create_order(
        self,
        restaurant_id: RestaurantId,
        request_dto: CreateOrderRequest,
    ) -> OrderResponse:
        data = self._request(
            "POST",
            f"/restaurant/{restaurant_id}/orders",
            resource="orders",
            json=request_dto.to_payload(),
        )
        try:
            return OrderResponse.model_validate(data)
        except ValidationError as exc:
            raise BackendError(f"unexpected order payload: {exc.error_count()} errors") from exc

    def update_table(
        self,
        restaurant_id: RestaurantId,
        table_id: TableId,
        request_dto: UpdateTableRequest,
    ) -> None:
        self._request(
            "PUT",
            f"/restaurant/{restaurant_id}/tables/{table_id}",
            resource="tables",
            json=request_dto.to_payload(),
        )

    def process_payment(
        self,
        restaurant_id: RestaurantId,
        order_id: OrderId,
        request_dto: ProcessPaymentRequest,
    ) -> None:
        self._request(
            "POST",
            f"/restaurant/{restaurant_id}/orders/{order_id}/payment",
            resource="payments",
            json=request_dto.to_payload(),
        )

    def list_orders(
        self,
        restaurant_id: RestaurantId,
        params: dict[str, str],
    ) -> list[OrderResponse]:
        data = self._request(
            "GET",
            f"/restaurant/{restaurant_id}/orders",
            resource="orders",
            params=params,
        )
        return _parse_list(data, OrderResponse, "orders")

    def update_order(
        self,
        restaurant_id: RestaurantId,
        order_id: OrderId,
        request_dto: UpdateOrderRequest,
    ) -> None:
        self._request(
            "PUT",
            f"/restaurant/{restaurant_id}/orders/{order_id}",
            resource="orders",
            json=request_dto.to_payload(),
        )

    def _request(
        self,
        method: str,
        path: str,
        *,
        resource: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        request_id = current_or_new_request_id()
        token = request_id_context.set(request_id)
        started = time.perf_counter()
        outcome = "error"
        headers = {REQUEST_ID_HEADER: request_id}
        inject(headers)
        try:
            try:
                response = self._client.request(
                    method,
                    path,
                    params=_clean_params(params or {}),
                    json=json,
                    headers=headers,
                )
            except httpx.HTTPError as exc:
                logger.warning(
                    "backend_transport_error",
                    extra={"method": method, "path": path, "error": str(exc)},
                )
                raise BackendError(f"could not reach backend: {exc}") from exc

            envelope = _parse_envelope(response)
            if response.is_error or not envelope.success:
                message = envelope.message or f"request failed with status {response.status_code}"
                logger.warning(
                    "backend_request_failed",
                    extra={
                        "method": method,
                        "path": path,
                        "status_code": response.status_code,
                        "error": message,
                    },
                )
                raise BackendError(message, status_code=response.status_code)

            outcome = "success"
            return envelope.data
        finally:
            duration = time.perf_counter() - started
            BACKEND_REQUEST_COUNT.labels(method=method, resource=resource, outcome=outcome).inc()
            BACKEND_REQUEST_LATENCY.labels(method=method, resource=resource).observe(duration)
            logger.debug(
                "backend_request_complete",
                extra={
                    "method": method,
                    "path": path,
                    "duration_ms": round(duration * 1000, 2),
                },
            )
            request_id_context.reset(token)


def _parse_envelope(response: httpx.Response) -> ApiEnvelope:
    try:
        payload = response.json()
    except ValueError:
        return ApiEnvelope(success=False, message=f"invalid response (status {response.status_code})")
    if not isinstance(payload, dict):
        return ApiEnvelope(success=False, message="invalid response shape")
    try:
        return ApiEnvelope.model_validate(payload)
    except ValidationError:
        return ApiEnvelope(success=False, message="invalid response envelope")


def _parse_list(data: Any, model: type, name: str) -> list:
    if not isinstance(data, list):
        raise BackendError(f"Failed to fetch {name}.")
    try:
        return [model.model_validate(row) for row in data]
    except ValidationError as exc:
        raise BackendError(f"unexpected {name} payload: {exc.error_count()} errors") from exc
