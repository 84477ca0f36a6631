from __future__ import annotations

from typing import Mapping, Optional

from crm_documents.utils.pdf.backends.base import Image, Page
from crm_documents.utils.pdf.core.fonts import FontPair
from crm_documents.utils.pdf.core.layout import draw_box, draw_text_aligned
from crm_documents.utils.pdf.core.layout_common import (
    CONTENT_LEFT,
    CONTENT_RIGHT,
    HEADER_HEIGHT,
    LOGO_MAX_H,
    LOGO_MAX_W,
    META_BOX_H,
    META_BOX_W,
    PAGE_W,
    color,
)


def logo_size(image: Image) -> tuple[float, float]:
    """Fit the logo into the header bar keeping its aspect ratio."""
    ratio = (image.width / image.height) if image.height else 1.0
    h = min(LOGO_MAX_H, HEADER_HEIGHT - 20)
    w = min(LOGO_MAX_W, h * ratio)
    return w, h


def render_header(page: Page, fonts: FontPair, payload: Mapping, top_y: float, logo: Optional[Image] = None) -> float:
    labels = payload["labels"]
    draw_box(page, 0, top_y - HEADER_HEIGHT, PAGE_W, HEADER_HEIGHT, fill=color("primary"))

    if logo is not None:
        w, h = logo_size(logo)
        page.draw_image(logo, x=CONTENT_LEFT, y=top_y - 10 - h, width=w, height=h)
    else:
        draw_text_aligned(page, payload["company"].name, x=CONTENT_LEFT, y=top_y - 35, size=20, font=fonts.bold, color=color("white"))

    meta_x = CONTENT_RIGHT - META_BOX_W
    meta_top = top_y - 10
    draw_box(
        page,
        meta_x,
        meta_top - META_BOX_H,
        META_BOX_W,
        META_BOX_H,
        fill=color("cream"),
        border=color("tan"),
        border_width=1,
    )
    draw_text_aligned(page, payload["title"], x=meta_x - 8, y=top_y - 32, size=24, font=fonts.bold, color=color("white"), align="right")

    pad = 10
    y = meta_top - 16
    draw_text_aligned(
        page,
        f"{labels['number_label']} {payload['number']}",
        x=meta_x + pad,
        y=y,
        size=10,
        font=fonts.regular,
        max_width=META_BOX_W - 2 * pad,
    )
    y -= 15
    draw_text_aligned(page, f"{labels['date_label']} {payload['issue_date']}", x=meta_x + pad, y=y, size=10, font=fonts.regular)
    y -= 15
    draw_text_aligned(page, f"{labels['extra_label']} {payload['extra_value']}", x=meta_x + pad, y=y, size=10, font=fonts.regular)

    # the meta box hangs below the bar; start the next block under whichever is lower
    return min(top_y - HEADER_HEIGHT - 30, meta_top - META_BOX_H - 12)
