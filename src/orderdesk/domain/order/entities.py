from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum

from orderdesk.domain.common.ids import MenuItemId, OrderId
from orderdesk.domain.common.money import Money, to_decimal
from orderdesk.domain.menu.entities import MenuItem
from orderdesk.domain.table.entities import Table


class OrderState(str, Enum):
    DRAFTING = "drafting"
    PLACED = "placed"
    PAID = "paid"
    CANCELLED = "cancelled"


_ALLOWED_TRANSITIONS: dict[OrderState, frozenset[OrderState]] = {
    OrderState.DRAFTING: frozenset({OrderState.PLACED, OrderState.CANCELLED}),
    OrderState.PLACED: frozenset({OrderState.PAID, OrderState.CANCELLED}),
    OrderState.PAID: frozenset(),
    OrderState.CANCELLED: frozenset(),
}


class OrderType(str, Enum):
    DINE_IN = "dine_in"
    TAKE_AWAY = "take_away"
    DELIVERY = "delivery"
    ONLINE = "online"
    QR_CODE = "qr_code"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    MOBILE_PAY = "mobile_pay"
    ONLINE = "online"


@dataclass(frozen=True)
class PaymentData:
    payment_method: PaymentMethod
    amount_paid: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount_paid, Decimal):
            object.__setattr__(self, "amount_paid", to_decimal(self.amount_paid))
        if self.amount_paid < 0:
            raise ValueError("amount_paid must be >= 0")


@dataclass(frozen=True)
class OrderLineItem:
    item_id: MenuItemId
    name: str
    quantity: int
    unit_price: Money
    notes: str = ""

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity

    def is_submittable(self) -> bool:
        return self.quantity > 0 and self.unit_price.amount > 0


class OrderTransitionError(Exception):
    pass


class DraftLockedError(Exception):
    pass


@dataclass
class OrderDraft:
    """In-progress order for one table, owned by a single POS session.

    Mutations are only accepted while the draft is ``drafting``. The unit
    price of a line is captured when the item is first added, so later catalog
    price changes never touch an open order.
    """

    table: Table | None = None
    lines: list[OrderLineItem] = field(default_factory=list)
    notes: str = ""
    customer_name: str = ""
    customer_phone: str = ""
    order_id: OrderId | None = None
    state: OrderState = OrderState.DRAFTING

    @classmethod
    def for_table(cls, table: Table) -> OrderDraft:
        return cls(table=table)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def find_line(self, item_id: MenuItemId) -> int | None:
        for index, line in enumerate(self.lines):
            if line.item_id == item_id:
                return index
        return None

    def add_item(self, menu_item: MenuItem) -> OrderLineItem:
        self._ensure_editable()
        index = self.find_line(menu_item.item_id)
        if index is not None:
            line = self.lines[index]
            self.lines[index] = replace(line, quantity=line.quantity + 1)
            return self.lines[index]

        line = OrderLineItem(
            item_id=menu_item.item_id,
            name=menu_item.name,
            quantity=1,
            unit_price=menu_item.price,
        )
        self.lines.append(line)
        return line

    def change_quantity(self, item_id: MenuItemId, delta: int) -> None:
        self._ensure_editable()
        index = self.find_line(item_id)
        if index is None:
            return
        line = self.lines[index]
        quantity = line.quantity + delta
        if quantity <= 0:
            del self.lines[index]
            return
        self.lines[index] = replace(line, quantity=quantity)

    def remove_item(self, item_id: MenuItemId) -> None:
        self._ensure_editable()
        self.lines = [line for line in self.lines if line.item_id != item_id]

    def set_note(self, line_index: int, note: str) -> None:
        self._ensure_editable()
        if line_index < 0 or line_index >= len(self.lines):
            raise IndexError(f"no order line at index {line_index}")
        self.lines[line_index] = replace(self.lines[line_index], notes=note)

    def set_order_notes(self, notes: str) -> None:
        self._ensure_editable()
        self.notes = notes

    def set_customer(self, name: str, phone: str) -> None:
        self._ensure_editable()
        self.customer_name = name
        self.customer_phone = phone

    def invalid_lines(self) -> list[OrderLineItem]:
        return [line for line in self.lines if not line.is_submittable()]

    def mark_placed(self, order_id: OrderId) -> None:
        self._transition(OrderState.PLACED)
        self.order_id = order_id

    def mark_paid(self) -> None:
        self._transition(OrderState.PAID)

    def cancel(self) -> None:
        self._transition(OrderState.CANCELLED)

    def _transition(self, target: OrderState) -> None:
        if target not in _ALLOWED_TRANSITIONS[self.state]:
            raise OrderTransitionError(
                f"cannot move order from {self.state.value} to {target.value}"
            )
        self.state = target

    def _ensure_editable(self) -> None:
        if self.state != OrderState.DRAFTING:
            raise DraftLockedError(f"order is {self.state.value}; the order can no longer change")
