from __future__ import annotations

import sys
import threading
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from orderdesk.application.dto.responses import MenuItemResponse, TableResponse
from orderdesk.application.ports.backend import BackendError
from orderdesk.application.use_cases.catalog import (
    CatalogCache,
    CatalogLoadError,
    CatalogNotLoadedError,
)
from orderdesk.domain.common.ids import MenuItemId, RestaurantId, TableId
from orderdesk.domain.table.entities import TableStatus


def _table(table_id: str, status: str = "vacant") -> TableResponse:
    return TableResponse(id=table_id, tableNumber=table_id[-1], capacity=4, status=status)


def _menu_item(item_id: str, price: float = 1200) -> MenuItemResponse:
    return MenuItemResponse(id=item_id, name=f"Item {item_id}", category="Mains", price=price)


class FakeCatalogBackend:
    def __init__(self) -> None:
        self.tables = [_table("tbl_1"), _table("tbl_2")]
        self.menu_items = [_menu_item("itm_1")]
        self.tables_error: Exception | None = None
        self.menu_error: Exception | None = None
        self.menu_calls: list[bool | None] = []

    def list_tables(self, restaurant_id, status=None, search=None):
        if self.tables_error is not None:
            raise self.tables_error
        return list(self.tables)

    def list_menu_items(self, restaurant_id, is_active=None, category=None, search=None):
        self.menu_calls.append(is_active)
        if self.menu_error is not None:
            raise self.menu_error
        return list(self.menu_items)


def test_load_fetches_tables_and_active_menu_items() -> None:
    backend = FakeCatalogBackend()
    cache = CatalogCache(backend)

    catalog = cache.load(RestaurantId("rst_001"))

    assert [table.table_id for table in catalog.tables] == ["tbl_1", "tbl_2"]
    assert [item.item_id for item in catalog.menu_items] == ["itm_1"]
    assert backend.menu_calls == [True]
    assert cache.find_table(TableId("tbl_2")) is not None
    assert cache.find_menu_item(MenuItemId("itm_1")).name == "Item itm_1"


def test_partial_failure_keeps_previous_catalog() -> None:
    backend = FakeCatalogBackend()
    cache = CatalogCache(backend)
    cache.load(RestaurantId("rst_001"))

    backend.tables = [_table("tbl_9")]
    backend.menu_error = BackendError("Failed to fetch menu items.")

    with pytest.raises(CatalogLoadError) as exc_info:
        cache.load(RestaurantId("rst_001"))

    assert list(exc_info.value.failures) == ["menu items"]
    assert "Failed to fetch menu items." in str(exc_info.value)
    assert [table.table_id for table in cache.tables] == ["tbl_1", "tbl_2"]


def test_both_failures_are_reported_together() -> None:
    backend = FakeCatalogBackend()
    backend.tables_error = BackendError("tables down")
    backend.menu_error = BackendError("menu down")

    with pytest.raises(CatalogLoadError) as exc_info:
        CatalogCache(backend).load(RestaurantId("rst_001"))

    assert set(exc_info.value.failures) == {"tables", "menu items"}


def test_invalid_payload_counts_as_failure() -> None:
    backend = FakeCatalogBackend()
    backend.tables = [_table("tbl_1", status="exploded")]

    with pytest.raises(CatalogLoadError):
        CatalogCache(backend).load(RestaurantId("rst_001"))


def test_refresh_replaces_lists_wholesale() -> None:
    backend = FakeCatalogBackend()
    cache = CatalogCache(backend)
    cache.load(RestaurantId("rst_001"))

    backend.tables = [_table("tbl_1", status="occupied")]
    cache.refresh()

    assert len(cache.tables) == 1
    assert cache.tables[0].status == TableStatus.OCCUPIED


def test_refresh_before_load_raises() -> None:
    with pytest.raises(CatalogNotLoadedError):
        CatalogCache(FakeCatalogBackend()).refresh()


class GatedCatalogBackend(FakeCatalogBackend):
    """Blocks the first tables fetch until released, so a second load can overtake it."""

    def __init__(self) -> None:
        super().__init__()
        self.first_call_entered = threading.Event()
        self.release_first_call = threading.Event()
        self._calls = 0
        self._lock = threading.Lock()

    def list_tables(self, restaurant_id, status=None, search=None):
        with self._lock:
            self._calls += 1
            call = self._calls
        if call == 1:
            self.first_call_entered.set()
            self.release_first_call.wait(timeout=5)
            return [_table("tbl_old")]
        return [_table("tbl_new")]


def test_older_load_finishing_last_does_not_overwrite_newer() -> None:
    backend = GatedCatalogBackend()
    cache = CatalogCache(backend)

    slow = threading.Thread(target=cache.load, args=(RestaurantId("rst_001"),))
    slow.start()
    assert backend.first_call_entered.wait(timeout=5)

    cache.load(RestaurantId("rst_001"))
    backend.release_first_call.set()
    slow.join(timeout=5)

    assert [table.table_id for table in cache.tables] == ["tbl_new"]
