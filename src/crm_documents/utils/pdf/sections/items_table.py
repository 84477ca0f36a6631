from __future__ import annotations

from typing import Mapping, Sequence

from crm_documents.core.models.line_item import LineItem, LineTotals
from crm_documents.utils.currency import format_currency, format_qty
from crm_documents.utils.pdf.backends.base import Font, Page
from crm_documents.utils.pdf.core.fonts import FontPair
from crm_documents.utils.pdf.core.layout import draw_box, draw_text_aligned, row_height
from crm_documents.utils.pdf.core.layout_common import (
    CELL_PADDING,
    CONTENT_LEFT,
    CONTENT_W,
    TABLE_BODY_SIZE,
    TABLE_COLUMNS,
    TABLE_HEADER_SIZE,
    TABLE_LINE_SPACING,
    TABLE_ROW_BASE_HEIGHT,
    TABLE_ROW_PADDING,
    color,
)


def column(name: str) -> tuple[float, float]:
    offset, width = TABLE_COLUMNS[name]
    return CONTENT_LEFT + offset, width


def description_width() -> float:
    return TABLE_COLUMNS["desc"][1] - 2 * CELL_PADDING


def describe(item: LineItem, suffix: str = "rabat") -> str:
    text = item.description or "Beskrivelse"
    if item.discount_pct:
        text += f" ({format_qty(item.discount_pct)}% {suffix})"
    return text


def item_row_height(text: str, font: Font) -> int:
    return row_height(
        text,
        font,
        TABLE_BODY_SIZE,
        description_width(),
        base_height=TABLE_ROW_BASE_HEIGHT,
        line_spacing=TABLE_LINE_SPACING,
        padding=TABLE_ROW_PADDING,
    )


def _right_edge(name: str) -> float:
    x, w = column(name)
    return x + w - CELL_PADDING


def render_table_header(page: Page, fonts: FontPair, labels: Mapping, y: float) -> float:
    draw_box(page, CONTENT_LEFT, y - TABLE_ROW_BASE_HEIGHT, CONTENT_W, TABLE_ROW_BASE_HEIGHT, fill=color("light_green"))
    text_y = y - 16
    desc_x, _ = column("desc")
    draw_text_aligned(page, labels["col_description"], x=desc_x + CELL_PADDING, y=text_y, size=TABLE_HEADER_SIZE, font=fonts.bold)
    for name, key in (("qty", "col_qty"), ("unit", "col_unit"), ("total", "col_total")):
        draw_text_aligned(page, labels[key], x=_right_edge(name), y=text_y, size=TABLE_HEADER_SIZE, font=fonts.bold, align="right")
    return y - TABLE_ROW_BASE_HEIGHT


def render_items_table(
    page: Page,
    fonts: FontPair,
    items: Sequence[LineItem],
    line_totals: Sequence[LineTotals],
    labels: Mapping,
    currency: str,
    y: float,
) -> float:
    """
    Header row plus one row per item; rows grow with wrapped descriptions.
    Returns the y just below the last row.
    """
    y = render_table_header(page, fonts, labels, y)
    desc_x, _ = column("desc")

    if not items:
        draw_box(page, CONTENT_LEFT, y - TABLE_ROW_BASE_HEIGHT, CONTENT_W, TABLE_ROW_BASE_HEIGHT, fill=color("cream"))
        draw_text_aligned(page, labels["no_items"], x=desc_x + CELL_PADDING, y=y - 16, size=TABLE_BODY_SIZE, font=fonts.regular)
        return y - TABLE_ROW_BASE_HEIGHT

    suffix = labels.get("discount_suffix", "rabat")
    for idx, (item, totals) in enumerate(zip(items, line_totals)):
        description = describe(item, suffix)
        rh = item_row_height(description, fonts.regular)
        draw_box(page, CONTENT_LEFT, y - rh, CONTENT_W, rh, fill=color("white") if idx % 2 == 0 else color("cream"))

        text_y = y - 14
        draw_text_aligned(
            page,
            description,
            x=desc_x + CELL_PADDING,
            y=text_y,
            size=TABLE_BODY_SIZE,
            font=fonts.regular,
            max_width=description_width(),
            line_height=TABLE_LINE_SPACING,
        )
        cells = (
            ("qty", format_qty(item.qty)),
            ("unit", format_currency(item.unit_minor, currency)),
            ("total", format_currency(totals.after_discount_minor, currency)),
        )
        for name, text in cells:
            draw_text_aligned(page, text, x=_right_edge(name), y=text_y, size=TABLE_BODY_SIZE, font=fonts.regular, align="right")
        y -= rh
    return y
