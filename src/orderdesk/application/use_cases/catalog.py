from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field

from opentelemetry import trace

from orderdesk.application.mappers.menu_mapper import to_menu_item
from orderdesk.application.mappers.table_mapper import to_table
from orderdesk.application.metrics.pos_lifecycle import record_catalog_load, record_stale_discarded
from orderdesk.application.ports.backend import BackendError, RestaurantBackend
from orderdesk.domain.common.ids import MenuItemId, RestaurantId, TableId
from orderdesk.domain.common.money import DEFAULT_CURRENCY
from orderdesk.domain.menu.entities import MenuItem
from orderdesk.domain.table.entities import Table

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class CatalogLoadError(Exception):
    def __init__(self, failures: dict[str, Exception]) -> None:
        self.failures = failures
        reasons = "; ".join(f"{name}: {exc}" for name, exc in failures.items())
        super().__init__(f"failed to load POS data ({reasons})")


class CatalogNotLoadedError(Exception):
    pass


@dataclass(frozen=True)
class Catalog:
    tables: list[Table] = field(default_factory=list)
    menu_items: list[MenuItem] = field(default_factory=list)


class CatalogCache:
    """Read-through cache of the tables and active menu items of one restaurant.

    Every load replaces both lists wholesale or leaves the cache untouched.
    Loads are numbered; a load that finishes after a newer one has started is
    dropped, so an old response can never overwrite a fresher one.
    """

    def __init__(self, backend: RestaurantBackend, currency: str = DEFAULT_CURRENCY) -> None:
        self._backend = backend
        self._currency = currency
        self._lock = threading.Lock()
        self._generation = 0
        self._catalog = Catalog()
        self._restaurant_id: RestaurantId | None = None

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def tables(self) -> list[Table]:
        return self._catalog.tables

    @property
    def menu_items(self) -> list[MenuItem]:
        return self._catalog.menu_items

    @property
    def currency(self) -> str:
        return self._currency

    @property
    def restaurant_id(self) -> RestaurantId | None:
        return self._restaurant_id

    def find_table(self, table_id: TableId) -> Table | None:
        for table in self._catalog.tables:
            if table.table_id == table_id:
                return table
        return None

    def find_menu_item(self, item_id: MenuItemId) -> MenuItem | None:
        for item in self._catalog.menu_items:
            if item.item_id == item_id:
                return item
        return None

    def load(self, restaurant_id: RestaurantId) -> Catalog:
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._restaurant_id = restaurant_id

        started = time.perf_counter()
        with tracer.start_as_current_span("catalog.load") as span:
            span.set_attribute("orderdesk.restaurant_id", str(restaurant_id))
            with ThreadPoolExecutor(max_workers=2, thread_name_prefix="catalog") as executor:
                tables_future = executor.submit(self._fetch_tables, restaurant_id)
                menu_future = executor.submit(self._fetch_menu_items, restaurant_id)
                failures: dict[str, Exception] = {}
                tables = _collect(tables_future, "tables", failures)
                menu_items = _collect(menu_future, "menu items", failures)
        record_catalog_load(time.perf_counter() - started)

        if failures:
            logger.warning(
                "catalog_load_failed",
                extra={"restaurant_id": str(restaurant_id), "failed": sorted(failures)},
            )
            raise CatalogLoadError(failures)

        catalog = Catalog(tables=tables or [], menu_items=menu_items or [])
        with self._lock:
            if generation != self._generation:
                record_stale_discarded("catalog")
                logger.info(
                    "catalog_load_superseded",
                    extra={"restaurant_id": str(restaurant_id), "generation": generation},
                )
                return self._catalog
            self._catalog = catalog

        logger.info(
            "catalog_loaded",
            extra={
                "restaurant_id": str(restaurant_id),
                "tables": len(catalog.tables),
                "menu_items": len(catalog.menu_items),
            },
        )
        return catalog

    def refresh(self) -> Catalog:
        if self._restaurant_id is None:
            raise CatalogNotLoadedError("catalog has not been loaded yet")
        return self.load(self._restaurant_id)

    def _fetch_tables(self, restaurant_id: RestaurantId) -> list[Table]:
        return [to_table(row) for row in self._backend.list_tables(restaurant_id)]

    def _fetch_menu_items(self, restaurant_id: RestaurantId) -> list[MenuItem]:
        rows = self._backend.list_menu_items(restaurant_id, is_active=True)
        return [to_menu_item(row, self._currency) for row in rows]


def _collect(future: Future, name: str, failures: dict[str, Exception]):
    try:
        return future.result()
    except (BackendError, ValueError) as exc:
        failures[name] = exc
        return None
