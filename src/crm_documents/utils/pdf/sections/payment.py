from __future__ import annotations

from typing import Mapping, Optional, Sequence

from crm_documents.utils.pdf.backends.base import Image, Page
from crm_documents.utils.pdf.core.fonts import FontPair
from crm_documents.utils.pdf.core.layout import draw_text_aligned
from crm_documents.utils.pdf.core.layout_common import CONTENT_LEFT, CONTENT_RIGHT, CONTENT_W, MARGIN_BOTTOM, QR_SIZE, color


def draw_qr_matrix(page: Page, matrix: Sequence[Sequence[bool]], x: float, top_y: float, side: float) -> None:
    """Dark modules as filled squares; (x, top_y) is the upper-left corner."""
    rows = len(matrix)
    cols = len(matrix[0]) if rows else 0
    if not rows or not cols:
        return
    cell = side / max(rows, cols)
    dark = color("black")
    for r in range(rows):
        for c in range(cols):
            if matrix[r][c]:
                page.draw_rectangle(x=x + c * cell, y=top_y - (r + 1) * cell, width=cell, height=cell, color=dark)


def render_payment(
    page: Page,
    fonts: FontPair,
    payload: Mapping,
    y: float,
    qr_image: Optional[Image] = None,
    qr_matrix: Optional[Sequence[Sequence[bool]]] = None,
) -> float:
    labels = payload["labels"]
    y = draw_text_aligned(
        page,
        f"{labels['terms']}: {payload['payment_terms']}",
        x=CONTENT_LEFT,
        y=y,
        size=10,
        font=fonts.regular,
        max_width=CONTENT_W,
    ).last_y
    y = draw_text_aligned(
        page,
        f"{labels['notes']}: {payload['notes']}",
        x=CONTENT_LEFT,
        y=y,
        size=10,
        font=fonts.regular,
        max_width=CONTENT_W,
    ).last_y

    qr_x = CONTENT_RIGHT - QR_SIZE
    if qr_image is not None:
        page.draw_image(qr_image, x=qr_x, y=y - QR_SIZE - 10, width=QR_SIZE, height=QR_SIZE)
        y -= QR_SIZE + 10
    elif qr_matrix:
        draw_qr_matrix(page, qr_matrix, qr_x, y - 10, QR_SIZE)
        y -= QR_SIZE + 10
    return y


def render_footer(page: Page, fonts: FontPair, labels: Mapping) -> None:
    draw_text_aligned(page, labels["footer"], x=CONTENT_RIGHT, y=MARGIN_BOTTOM + 20, size=8, font=fonts.regular, align="right", color=color("dark"))
