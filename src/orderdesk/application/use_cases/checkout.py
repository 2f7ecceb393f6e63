from __future__ import annotations

import logging
from decimal import Decimal

from opentelemetry import trace

from orderdesk.application.dto.requests import (
    ProcessPaymentRequest,
    UpdateOrderRequest,
    UpdateTableRequest,
)
from orderdesk.application.mappers.order_mapper import to_create_order_request
from orderdesk.application.metrics.pos_lifecycle import (
    record_checkout_failure,
    record_order_placed,
    record_payment_completed,
    record_transition,
)
from orderdesk.application.ports.backend import BackendError, RestaurantBackend
from orderdesk.application.ports.notifier import PaymentCollector
from orderdesk.application.use_cases.catalog import CatalogLoadError
from orderdesk.application.use_cases.pos_session import PosSession, PreconditionError
from orderdesk.domain.common.ids import OrderId, RestaurantId
from orderdesk.domain.common.money import Money
from orderdesk.domain.order.entities import OrderDraft, OrderState, OrderType, PaymentData
from orderdesk.domain.order.pricing import payment_shortfall
from orderdesk.domain.order.summary import OrderStatus
from orderdesk.domain.table.entities import Table, TableStatus

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class PaymentValidationError(Exception):
    def __init__(self, amount_paid: Decimal, total: Money) -> None:
        self.amount_paid = amount_paid
        self.total = total
        self.shortfall = payment_shortfall(total, amount_paid)
        super().__init__(
            f"Amount paid ({amount_paid:.2f}) is less than total ({total.quantized().amount:.2f})."
        )


class PaymentCollectorMissingError(Exception):
    pass


class CheckoutCoordinator:
    """Drives a draft through placement and payment against the backend.

    Every failure is reported through the session notifier at the call site and
    leaves the draft as it was: local checks run before any network call and no
    state changes until the backend confirms.
    """

    def __init__(
        self,
        restaurant_id: RestaurantId,
        session: PosSession,
        backend: RestaurantBackend,
        payment_collector: PaymentCollector | None = None,
    ) -> None:
        self._restaurant_id = restaurant_id
        self._session = session
        self._backend = backend
        self._payment_collector = payment_collector

    def place_order(self, order_type: OrderType = OrderType.DINE_IN) -> OrderId | None:
        draft = self._session.draft
        notifier = self._session.notifier
        with tracer.start_as_current_span("pos.place_order") as span:
            span.set_attribute("orderdesk.order_type", order_type.value)
            try:
                table = _validate_for_placement(draft)
            except PreconditionError as exc:
                _record_rejection("place_order", "precondition")
                notifier.warning(str(exc))
                return None

            request_dto = to_create_order_request(draft, order_type)
            try:
                response = self._backend.create_order(self._restaurant_id, request_dto)
            except BackendError as exc:
                record_checkout_failure("place_order", "backend")
                logger.warning(
                    "order_place_failed",
                    extra={"table_id": str(table.table_id), "error": str(exc)},
                )
                notifier.error(str(exc) or "An error occurred placing the order.")
                return None

            order_id = OrderId(response.id)
            draft.mark_placed(order_id)
            record_transition(OrderState.DRAFTING, OrderState.PLACED)
            record_order_placed(str(self._restaurant_id), order_type)
            span.set_attribute("orderdesk.order_id", str(order_id))
            logger.info(
                "order_placed",
                extra={
                    "order_id": str(order_id),
                    "table_id": str(table.table_id),
                    "order_type": order_type.value,
                },
            )
            notifier.success(f"Order #{str(order_id)[-6:]} placed for Table {table.number}!")

            self._set_table_status(table, TableStatus.OCCUPIED)
            self._refresh_catalog()
            return order_id

    def checkout(self) -> bool:
        draft = self._session.draft
        notifier = self._session.notifier
        if draft.is_empty:
            notifier.warning("Order is empty. Cannot checkout.")
            return False
        if draft.table is None:
            notifier.warning("No table selected for checkout.")
            return False
        if self._payment_collector is None:
            raise PaymentCollectorMissingError("no payment collector configured")

        payment_data = self._payment_collector.collect(
            draft.order_id,
            self._session.totals.total.quantized(),
        )
        if payment_data is None:
            logger.info("payment_collection_cancelled", extra={"order_id": draft.order_id})
            return False
        return self.complete_payment(payment_data)

    def complete_payment(self, payment_data: PaymentData) -> bool:
        draft = self._session.draft
        notifier = self._session.notifier
        with tracer.start_as_current_span("pos.complete_payment") as span:
            span.set_attribute("orderdesk.payment_method", payment_data.payment_method.value)
            if draft.table is None or draft.order_id is None or draft.state != OrderState.PLACED:
                _record_rejection("complete_payment", "precondition")
                notifier.warning("No active order to process payment.")
                return False

            total = self._session.totals.total
            try:
                _validate_payment(payment_data, total)
            except PaymentValidationError as exc:
                _record_rejection(
                    "complete_payment",
                    "insufficient_payment",
                    amount_paid=str(payment_data.amount_paid),
                    total=str(total.amount),
                )
                notifier.error(str(exc))
                return False

            table = draft.table
            order_id = draft.order_id
            request_dto = ProcessPaymentRequest(
                payment_method=payment_data.payment_method.value,
                amount_paid=float(payment_data.amount_paid),
            )
            try:
                self._backend.process_payment(self._restaurant_id, order_id, request_dto)
            except BackendError as exc:
                record_checkout_failure("complete_payment", "backend")
                logger.warning(
                    "payment_failed",
                    extra={"order_id": str(order_id), "error": str(exc)},
                )
                notifier.error(str(exc) or "An error occurred processing payment.")
                return False

            draft.mark_paid()
            record_transition(OrderState.PLACED, OrderState.PAID)
            record_payment_completed(str(self._restaurant_id), payment_data.payment_method.value)
            logger.info(
                "payment_completed",
                extra={
                    "order_id": str(order_id),
                    "table_id": str(table.table_id),
                    "payment_method": payment_data.payment_method.value,
                },
            )
            notifier.success("Payment processed successfully!")

            self._set_table_status(table, TableStatus.VACANT)
            self._refresh_catalog()
            self._session.clear(keep_table=False)
            return True

    def cancel_order(self) -> bool:
        draft = self._session.draft
        notifier = self._session.notifier
        if draft.state not in (OrderState.DRAFTING, OrderState.PLACED):
            notifier.warning(f"Order is already {draft.state.value}.")
            return False

        previous = draft.state
        if draft.order_id is not None:
            try:
                self._backend.update_order(
                    self._restaurant_id,
                    draft.order_id,
                    UpdateOrderRequest(status=OrderStatus.CANCELLED.value),
                )
            except BackendError as exc:
                record_checkout_failure("cancel_order", "backend")
                notifier.error(str(exc) or "An error occurred cancelling the order.")
                return False

        draft.cancel()
        record_transition(previous, OrderState.CANCELLED)
        logger.info("order_cancelled", extra={"order_id": draft.order_id})
        notifier.success("Order cancelled.")
        if previous == OrderState.PLACED:
            self._refresh_catalog()
        self._session.clear(keep_table=True)
        return True

    def _set_table_status(self, table: Table, status: TableStatus) -> None:
        try:
            self._backend.update_table(
                self._restaurant_id,
                table.table_id,
                UpdateTableRequest(status=status.value),
            )
        except BackendError as exc:
            logger.warning(
                "table_status_update_failed",
                extra={"table_id": str(table.table_id), "status": status.value},
            )
            self._session.notifier.error(
                f"Table {table.number} could not be marked {status.value}: {exc}"
            )

    def _refresh_catalog(self) -> None:
        try:
            self._session.catalog.load(self._restaurant_id)
        except CatalogLoadError as exc:
            self._session.notifier.error(str(exc))


def _record_rejection(action: str, reason: str, **fields: str) -> None:
    record_checkout_failure(action, reason)
    logger.info("checkout_rejected", extra={"action": action, "reason": reason, **fields})


def _validate_for_placement(draft: OrderDraft) -> Table:
    if draft.table is None:
        raise PreconditionError("Please select a table first.")
    if draft.state != OrderState.DRAFTING:
        raise PreconditionError(f"Order is already {draft.state.value}.")
    if draft.is_empty:
        raise PreconditionError("Order cannot be empty. Please add items.")
    if draft.invalid_lines():
        raise PreconditionError("Order contains invalid items. Please review.")
    return draft.table


def _validate_payment(payment_data: PaymentData, total: Money) -> None:
    if Money(amount=payment_data.amount_paid, currency=total.currency) < total:
        raise PaymentValidationError(payment_data.amount_paid, total)
