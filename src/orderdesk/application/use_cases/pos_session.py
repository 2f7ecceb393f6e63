from __future__ import annotations

import logging
from decimal import Decimal

from orderdesk.application.ports.notifier import Notifier
from orderdesk.application.use_cases.catalog import CatalogCache
from orderdesk.domain.common.ids import MenuItemId
from orderdesk.domain.common.money import DEFAULT_CURRENCY
from orderdesk.domain.menu.entities import MenuItem
from orderdesk.domain.order.entities import DraftLockedError, OrderDraft
from orderdesk.domain.order.pricing import TAX_RATE, DerivedTotals, compute_totals
from orderdesk.domain.table.entities import Table

logger = logging.getLogger(__name__)


class PreconditionError(Exception):
    pass


class PosSession:
    """Owns the catalog and the single order draft of one POS screen."""

    def __init__(
        self,
        catalog: CatalogCache,
        notifier: Notifier,
        tax_rate: Decimal = TAX_RATE,
        currency: str = DEFAULT_CURRENCY,
    ) -> None:
        self._catalog = catalog
        self._notifier = notifier
        self._tax_rate = tax_rate
        self._currency = currency
        self._draft = OrderDraft()

    @property
    def catalog(self) -> CatalogCache:
        return self._catalog

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    @property
    def draft(self) -> OrderDraft:
        return self._draft

    @property
    def selected_table(self) -> Table | None:
        return self._draft.table

    @property
    def totals(self) -> DerivedTotals:
        # Derived on every read; a cached value could go stale after a mutation.
        return compute_totals(self._draft, tax_rate=self._tax_rate, currency=self._currency)

    def select_table(self, table: Table) -> OrderDraft:
        if self._draft.lines and self._draft.order_id is None:
            logger.info(
                "unsaved_draft_discarded",
                extra={"table_id": _table_id(self._draft.table), "lines": len(self._draft.lines)},
            )
        self._draft = OrderDraft.for_table(table)
        self._notifier.success(f"Table {table.number} selected. Starting new order.")
        return self._draft

    def add_item(self, menu_item: MenuItem) -> bool:
        if self._draft.table is None:
            self._notifier.warning("Please select a table first.")
            return False
        try:
            self._draft.add_item(menu_item)
        except DraftLockedError as exc:
            self._notifier.warning(str(exc))
            return False
        self._notifier.success(f"{menu_item.name} added to order!")
        return True

    def change_quantity(self, item_id: MenuItemId, delta: int) -> bool:
        try:
            self._draft.change_quantity(item_id, delta)
        except DraftLockedError as exc:
            self._notifier.warning(str(exc))
            return False
        return True

    def remove_item(self, item_id: MenuItemId) -> bool:
        try:
            self._draft.remove_item(item_id)
        except DraftLockedError as exc:
            self._notifier.warning(str(exc))
            return False
        self._notifier.success("Item removed from order.")
        return True

    def set_note(self, line_index: int, note: str) -> bool:
        try:
            self._draft.set_note(line_index, note)
        except DraftLockedError as exc:
            self._notifier.warning(str(exc))
            return False
        self._notifier.success("Notes updated!")
        return True

    def set_order_notes(self, notes: str) -> bool:
        try:
            self._draft.set_order_notes(notes)
        except DraftLockedError as exc:
            self._notifier.warning(str(exc))
            return False
        return True

    def set_customer(self, name: str = "", phone: str = "") -> bool:
        try:
            self._draft.set_customer(name.strip(), phone.strip())
        except DraftLockedError as exc:
            self._notifier.warning(str(exc))
            return False
        return True

    def clear(self, keep_table: bool = False) -> OrderDraft:
        table = self._draft.table if keep_table else None
        self._draft = OrderDraft(table=table)
        return self._draft


def _table_id(table: Table | None) -> str | None:
    return str(table.table_id) if table is not None else None
