from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class CreateOrderItemRequest(CamelBaseModel):
    menu_item: str
    quantity: int = Field(ge=1)
    notes: str = ""
    price: float = Field(gt=0)


class CreateOrderRequest(CamelBaseModel):
    table: str
    items: list[CreateOrderItemRequest] = Field(min_length=1)
    notes: str = ""
    order_type: str = "dine_in"
    customer_name: str = ""
    customer_phone: str = ""


class UpdateTableRequest(CamelBaseModel):
    status: str


class UpdateOrderRequest(CamelBaseModel):
    status: str


class ProcessPaymentRequest(CamelBaseModel):
    payment_method: str
    amount_paid: float = Field(ge=0)
