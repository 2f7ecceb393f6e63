from __future__ import annotations

from orderdesk.application.dto.responses import MenuItemResponse
from orderdesk.domain.common.ids import MenuItemId
from orderdesk.domain.common.money import Money, to_decimal
from orderdesk.domain.menu.entities import MenuItem


def to_menu_item(response: MenuItemResponse, currency: str) -> MenuItem:
    return MenuItem(
        item_id=MenuItemId(response.id),
        name=response.name,
        category=response.category,
        price=Money(amount=to_decimal(response.price), currency=currency),
        is_active=response.isActive,
        description=response.description or "",
        prep_time_minutes=response.prepTimeMinutes or 0,
    )
