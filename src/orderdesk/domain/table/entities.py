from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from orderdesk.domain.common.ids import TableId


class TableStatus(str, Enum):
    VACANT = "vacant"
    OCCUPIED = "occupied"
    RESERVED = "reserved"
    ORDERING = "ordering"
    CLEANING = "cleaning"
    WAITING_BILL = "waiting_bill"


@dataclass(frozen=True)
class Table:
    table_id: TableId
    number: str
    capacity: int
    status: TableStatus = TableStatus.VACANT
    location: str | None = None

    def __post_init__(self) -> None:
        if not self.number.strip():
            raise ValueError("number must be non-empty")
        if self.capacity < 1:
            raise ValueError("capacity must be >= 1")

    def with_status(self, status: TableStatus) -> Table:
        return replace(self, status=status)
