from __future__ import annotations

from typing import Mapping

from crm_documents.core.models.party import Party
from crm_documents.utils.pdf.backends.base import Page
from crm_documents.utils.pdf.core.fonts import FontPair
from crm_documents.utils.pdf.core.layout import draw_text_aligned
from crm_documents.utils.pdf.core.layout_common import COLUMN_GUTTER, CONTENT_LEFT, CONTENT_W


def column_widths() -> tuple[int, int]:
    left = (CONTENT_W - COLUMN_GUTTER) // 2
    return left, CONTENT_W - COLUMN_GUTTER - left


def build_sender_lines(company: Party, address_fallback: str = "") -> list[str]:
    lines = [company.address or address_fallback, company.postal_line]
    lines.extend(v for v in (company.email, company.phone) if v)
    if company.vat:
        lines.append(f"CVR: {company.vat}")
    return [line for line in lines if line]


def build_recipient_lines(contact: Party) -> list[str]:
    return [v for v in (contact.email, contact.phone) if v]


def _render_column(page: Page, fonts: FontPair, heading: str, name: str, lines: list[str], x: float, y: float, width: float) -> float:
    draw_text_aligned(page, heading, x=x, y=y, size=12, font=fonts.bold)
    y -= 18
    y = draw_text_aligned(page, name, x=x, y=y, size=11, font=fonts.bold, max_width=width).last_y - 2
    for line in lines:
        y = draw_text_aligned(page, line, x=x, y=y, size=10, font=fonts.regular, max_width=width).last_y - 2
    return y


def render_parties(page: Page, fonts: FontPair, payload: Mapping, y: float) -> float:
    labels = payload["labels"]
    left_w, right_w = column_widths()
    company: Party = payload["company"]
    contact: Party = payload["contact"]

    left_y = _render_column(
        page,
        fonts,
        labels["from"],
        company.name,
        build_sender_lines(company, labels.get("address_fallback", "")),
        CONTENT_LEFT,
        y,
        left_w,
    )
    right_y = _render_column(
        page,
        fonts,
        labels["to"],
        contact.name,
        build_recipient_lines(contact),
        CONTENT_LEFT + left_w + COLUMN_GUTTER,
        y,
        right_w,
    )
    return min(left_y, right_y) - 30
