from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from orderdesk.domain.common.ids import MenuItemId
from orderdesk.domain.common.money import Money
from orderdesk.domain.menu.entities import (
    ALL_CATEGORIES,
    MenuItem,
    filter_by_category,
    menu_categories,
)


def _item(item_id: str, category: str) -> MenuItem:
    return MenuItem(
        item_id=MenuItemId(item_id),
        name=f"Item {item_id}",
        category=category,
        price=Money(amount=Decimal("1000")),
    )


def test_menu_item_name_must_be_non_empty() -> None:
    with pytest.raises(ValueError):
        MenuItem(
            item_id=MenuItemId("itm_001"),
            name="  ",
            category="Drinks",
            price=Money(amount=Decimal("500")),
        )


def test_money_rejects_negative_amounts_and_bad_currency() -> None:
    with pytest.raises(ValueError):
        Money(amount=Decimal("-1"))
    with pytest.raises(ValueError):
        Money(amount=Decimal("1"), currency="usd")


def test_money_accepts_float_without_binary_noise() -> None:
    assert Money(amount=12.1).amount == Decimal("12.1")  # type: ignore[arg-type]


def test_categories_start_with_all_and_keep_first_seen_order() -> None:
    items = [_item("1", "Mains"), _item("2", "Drinks"), _item("3", "Mains"), _item("4", "")]

    assert menu_categories(items) == [ALL_CATEGORIES, "Mains", "Drinks"]


def test_filter_by_category() -> None:
    items = [_item("1", "Mains"), _item("2", "Drinks"), _item("3", "Mains")]

    assert filter_by_category(items, ALL_CATEGORIES) == items
    assert [item.item_id for item in filter_by_category(items, "Mains")] == ["1", "3"]
    assert filter_by_category(items, "Desserts") == []
