"""
Display formatting in the da-DK convention (1.234,50 kr.).
Only for output; totals are always computed in integer minor units.
"""

from __future__ import annotations

from datetime import date, datetime

from crm_documents.core.models.line_item import coerce_number

CURRENCY_SYMBOLS = {
    "DKK": "kr.",
    "EUR": "€",
    "USD": "US$",
    "GBP": "£",
}


def _group_thousands(digits: str) -> str:
    groups = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    return ".".join(groups)


def format_amount(value_minor) -> str:
    minor = coerce_number(value_minor) or 0.0
    cents = int(round(abs(minor)))
    sign = "-" if minor < 0 and cents else ""
    major, rest = divmod(cents, 100)
    return f"{sign}{_group_thousands(str(major))},{rest:02d}"


def format_currency(value_minor, currency: str | None = "DKK") -> str:
    code = (currency or "DKK").upper()
    symbol = CURRENCY_SYMBOLS.get(code, code)
    return f"{format_amount(value_minor)} {symbol}"


def format_qty(value) -> str:
    numeric = coerce_number(value)
    if numeric is None:
        return "0"
    if float(numeric).is_integer():
        return str(int(numeric))
    return f"{numeric:.2f}".replace(".", ",")


def parse_date(value) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def format_date(value) -> str:
    parsed = parse_date(value)
    return parsed.strftime("%d.%m.%Y") if parsed else ""
