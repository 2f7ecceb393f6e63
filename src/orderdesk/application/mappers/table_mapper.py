from __future__ import annotations

from orderdesk.application.dto.responses import TableResponse
from orderdesk.domain.common.ids import TableId
from orderdesk.domain.table.entities import Table, TableStatus


def to_table(response: TableResponse) -> Table:
    return Table(
        table_id=TableId(response.id),
        number=str(response.tableNumber),
        capacity=response.capacity,
        status=TableStatus(response.status),
        location=response.location,
    )
