"""
Advisory checks for line items. The totals engine stays permissive; callers decide
whether a reported problem is worth more than a log line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from crm_documents.core.models.line_item import LineItem


@dataclass(frozen=True)
class LineItemError:
    field: str
    message: str


def _pct_in_range(value: float | None) -> bool:
    return value is None or 0.0 <= value <= 100.0


def validate_line_item(item: LineItem | Mapping) -> list[LineItemError]:
    if not isinstance(item, LineItem):
        item = LineItem.from_record(item)
    errors: list[LineItemError] = []
    if not item.description.strip():
        errors.append(LineItemError("description", "Description is required"))
    if item.qty < 0:
        errors.append(LineItemError("qty", "Quantity must be greater than or equal to 0"))
    if item.unit_minor < 0:
        errors.append(LineItemError("unit_minor", "Unit price must be greater than or equal to 0"))
    if not _pct_in_range(item.discount_pct):
        errors.append(LineItemError("discount_pct", "Discount must be between 0 and 100"))
    if not _pct_in_range(item.tax_rate_pct):
        errors.append(LineItemError("tax_rate_pct", "Tax rate must be between 0 and 100"))
    return errors
