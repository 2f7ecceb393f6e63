from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from orderdesk.domain.common.money import DEFAULT_CURRENCY, Money, to_decimal
from orderdesk.domain.order.entities import OrderDraft

TAX_RATE = Decimal("0.18")


@dataclass(frozen=True)
class DerivedTotals:
    subtotal: Money
    tax: Money
    total: Money

    def quantized(self) -> DerivedTotals:
        return DerivedTotals(
            subtotal=self.subtotal.quantized(),
            tax=self.tax.quantized(),
            total=self.total.quantized(),
        )


def compute_totals(
    draft: OrderDraft,
    tax_rate: Decimal = TAX_RATE,
    currency: str = DEFAULT_CURRENCY,
) -> DerivedTotals:
    if draft.lines:
        currency = draft.lines[0].unit_price.currency
    subtotal = Money.zero(currency)
    for line in draft.lines:
        subtotal = subtotal + line.line_total
    tax = subtotal * tax_rate
    return DerivedTotals(subtotal=subtotal, tax=tax, total=subtotal + tax)


def change_due(total: Money, amount_paid: Decimal | float) -> Money:
    paid = to_decimal(amount_paid)
    return Money(amount=max(Decimal("0"), paid - total.amount), currency=total.currency)


def payment_shortfall(total: Money, amount_paid: Decimal | float) -> Decimal:
    return max(Decimal("0"), total.amount - to_decimal(amount_paid))
