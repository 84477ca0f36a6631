from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping

from crm_documents.core.models.line_item import DocumentTotals, LineItem, LineTotals, coerce_number

_HUNDRED = Decimal(100)


def _to_decimal(value: float | int) -> Decimal:
    return Decimal(str(value))


def _round_minor(value: Decimal) -> int:
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


class TotalsEngine:
    """
    Line-item totals in integer minor units (ore/cents).
    Per-line tax and discount win over the document defaults; values are not range-checked.
    """

    def __init__(self, default_tax_pct: float | None = 0.0, default_discount_pct: float | None = 0.0):
        self.default_tax_pct = coerce_number(default_tax_pct) or 0.0
        self.default_discount_pct = coerce_number(default_discount_pct) or 0.0

    def effective_tax_pct(self, item: LineItem) -> float:
        return item.tax_rate_pct if item.tax_rate_pct is not None else self.default_tax_pct

    def effective_discount_pct(self, item: LineItem) -> float:
        return item.discount_pct if item.discount_pct is not None else self.default_discount_pct

    def line_totals(self, item: LineItem | Mapping) -> LineTotals:
        if not isinstance(item, LineItem):
            item = LineItem.from_record(item)
        gross = _to_decimal(item.qty) * _to_decimal(item.unit_minor)
        discount = _to_decimal(self.effective_discount_pct(item))
        tax_rate = _to_decimal(self.effective_tax_pct(item))
        after_discount = _round_minor(gross * (1 - discount / _HUNDRED))
        tax = _round_minor(Decimal(after_discount) * tax_rate / _HUNDRED)
        return LineTotals(
            gross_minor=_round_minor(gross),
            after_discount_minor=after_discount,
            tax_minor=tax,
            total_minor=after_discount + tax,
        )

    def breakdown(self, items: Iterable[LineItem | Mapping]) -> list[LineTotals]:
        return [self.line_totals(item) for item in items]

    def summarize(self, items: Iterable[LineItem | Mapping]) -> DocumentTotals:
        subtotal = 0
        tax = 0
        for line in self.breakdown(items):
            subtotal += line.after_discount_minor
            tax += line.tax_minor
        return DocumentTotals(subtotal_minor=subtotal, tax_minor=tax, total_minor=subtotal + tax)


def compute_totals(
    records: Iterable[Mapping] | None,
    tax_pct: float | None = 0.0,
    discount_pct: float | None = 0.0,
) -> DocumentTotals:
    """Shortcut over raw `line_items` rows as stored by the CRM."""
    engine = TotalsEngine(default_tax_pct=tax_pct, default_discount_pct=discount_pct)
    return engine.summarize(LineItem.from_record(r) for r in (records or []))
