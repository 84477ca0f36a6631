from __future__ import annotations

from typing import Mapping

from crm_documents.core.models.line_item import DocumentTotals
from crm_documents.utils.currency import format_currency
from crm_documents.utils.pdf.backends.base import Page
from crm_documents.utils.pdf.core.fonts import FontPair
from crm_documents.utils.pdf.core.layout import draw_box, draw_right_in_box, draw_rule, draw_text_aligned
from crm_documents.utils.pdf.core.layout_common import CONTENT_RIGHT, TOTALS_BOX_H, TOTALS_BOX_W, color


def build_summary_rows(totals: DocumentTotals, labels: Mapping, currency: str) -> list[tuple[str, str]]:
    return [
        (labels["subtotal"], format_currency(totals.subtotal_minor, currency)),
        (labels["tax"], format_currency(totals.tax_minor, currency)),
        (labels["total"], format_currency(totals.total_minor, currency)),
    ]


def render_summary(page: Page, fonts: FontPair, totals: DocumentTotals, labels: Mapping, currency: str, y: float) -> float:
    box_x = CONTENT_RIGHT - TOTALS_BOX_W
    draw_box(
        page,
        box_x,
        y - TOTALS_BOX_H,
        TOTALS_BOX_W,
        TOTALS_BOX_H,
        fill=color("light_gray"),
        border=color("green"),
        border_width=1,
    )
    (sub_label, sub_value), (tax_label, tax_value), (total_label, total_value) = build_summary_rows(totals, labels, currency)

    t_y = y - 22
    draw_text_aligned(page, sub_label, x=box_x + 10, y=t_y, size=10, font=fonts.regular)
    draw_right_in_box(page, sub_value, box_x=box_x, box_width=TOTALS_BOX_W, y=t_y, size=10, font=fonts.regular)
    t_y -= 20

    draw_text_aligned(page, tax_label, x=box_x + 10, y=t_y, size=10, font=fonts.regular)
    draw_right_in_box(page, tax_value, box_x=box_x, box_width=TOTALS_BOX_W, y=t_y, size=10, font=fonts.regular)
    t_y -= 18

    draw_rule(page, box_x + 10, t_y, box_x + TOTALS_BOX_W - 10, t_y, color=color("green"))
    t_y -= 18

    draw_text_aligned(page, total_label, x=box_x + 10, y=t_y, size=12, font=fonts.bold)
    draw_right_in_box(page, total_value, box_x=box_x, box_width=TOTALS_BOX_W, y=t_y, size=12, font=fonts.bold)

    return y - TOTALS_BOX_H - 30
