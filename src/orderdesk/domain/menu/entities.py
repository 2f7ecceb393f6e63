from __future__ import annotations

from dataclasses import dataclass

from orderdesk.domain.common.ids import MenuItemId
from orderdesk.domain.common.money import Money

ALL_CATEGORIES = "All"


@dataclass(frozen=True)
class MenuItem:
    item_id: MenuItemId
    name: str
    category: str
    price: Money
    is_active: bool = True
    description: str = ""
    prep_time_minutes: int = 10

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if self.prep_time_minutes < 0:
            raise ValueError("prep_time_minutes must be >= 0")


def menu_categories(items: list[MenuItem]) -> list[str]:
    categories = [ALL_CATEGORIES]
    for item in items:
        if item.category and item.category not in categories:
            categories.append(item.category)
    return categories


def filter_by_category(items: list[MenuItem], category: str) -> list[MenuItem]:
    if category == ALL_CATEGORIES:
        return list(items)
    return [item for item in items if item.category == category]
