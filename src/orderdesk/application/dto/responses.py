from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BackendModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ApiEnvelope(BackendModel):
    success: bool = False
    data: Any = None
    message: str | None = None


class TableResponse(BackendModel):
    id: str = Field(alias="_id")
    tableNumber: str | int
    capacity: int = 1
    status: str = "vacant"
    location: str | None = None


class MenuItemResponse(BackendModel):
    id: str = Field(alias="_id")
    name: str
    category: str = ""
    price: float
    isActive: bool = True
    description: str | None = ""
    prepTimeMinutes: int | None = 10


class OrderItemResponse(BackendModel):
    menuItem: str | dict[str, Any]
    name: str = ""
    quantity: int
    price: float
    notes: str | None = None


class OrderResponse(BackendModel):
    id: str = Field(alias="_id")
    table: str | dict[str, Any] | None = None
    status: str = "pending"
    paymentStatus: str = "pending"
    orderType: str = "dine_in"
    totalAmount: float = 0
    customerName: str | None = None
    createdAt: datetime | None = None
    items: list[OrderItemResponse] = Field(default_factory=list)
