from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping


def coerce_number(value: Any) -> float | None:
    """Return a finite float or None for missing/blank/NaN/garbage input."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
        if not value:
            return None
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(numeric):
        return None
    return numeric


def _first(record: Mapping, *keys: str) -> Any:
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return None


@dataclass
class LineItem:
    """One row of a quote, order or invoice. Money is kept in minor units."""

    description: str = ""
    qty: float = 0.0
    unit_minor: int = 0
    tax_rate_pct: float | None = None  # None -> document default
    discount_pct: float | None = None  # None -> document default
    position: int = 0

    @classmethod
    def from_record(cls, record: Mapping | None) -> "LineItem":
        """
        Normalize a JSON-shaped row (`description, qty, unit_minor, tax_rate_pct, discount_pct`).
        camelCase keys from the browser editors are accepted too.
        """
        r = record or {}
        qty = coerce_number(_first(r, "qty", "quantity"))
        unit = coerce_number(_first(r, "unit_minor", "unitMinor"))
        position = coerce_number(_first(r, "position"))
        return cls(
            description=str(_first(r, "description") or ""),
            qty=qty if qty is not None else 0.0,
            unit_minor=int(round(unit)) if unit is not None else 0,
            tax_rate_pct=coerce_number(_first(r, "tax_rate_pct", "taxRatePct")),
            discount_pct=coerce_number(_first(r, "discount_pct", "discountPct")),
            position=int(position) if position is not None else 0,
        )


@dataclass(frozen=True)
class LineTotals:
    gross_minor: int
    after_discount_minor: int
    tax_minor: int
    total_minor: int


@dataclass(frozen=True)
class DocumentTotals:
    """Derived aggregate, never persisted. total_minor == subtotal_minor + tax_minor."""

    subtotal_minor: int
    tax_minor: int
    total_minor: int

    @classmethod
    def zero(cls) -> "DocumentTotals":
        return cls(subtotal_minor=0, tax_minor=0, total_minor=0)

    def as_dict(self) -> dict[str, int]:
        return {
            "subtotal_minor": self.subtotal_minor,
            "tax_minor": self.tax_minor,
            "total_minor": self.total_minor,
        }
