from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Mapping, Optional

from crm_documents.config import Settings
from crm_documents.core.errors import AssetFetchError, ImageEmbedError
from crm_documents.utils.assets import fetch_bytes
from crm_documents.utils.pdf.backends.base import Document, Image
from crm_documents.utils.pdf.backends.canvas import CanvasDocument
from crm_documents.utils.pdf.backends.stream import StreamDocument
from crm_documents.utils.pdf.core.fonts import load_fonts
from crm_documents.utils.pdf.core.layout_common import MARGIN_TOP, PAGE_H, PAGE_W
from crm_documents.utils.pdf.sections.header import render_header
from crm_documents.utils.pdf.sections.items_table import render_items_table
from crm_documents.utils.pdf.sections.parties import render_parties
from crm_documents.utils.pdf.sections.payment import render_footer, render_payment
from crm_documents.utils.pdf.sections.summary import render_summary
from crm_documents.utils.qr import make_qr_matrix

logger = logging.getLogger(__name__)

BACKENDS: dict[str, Callable[[], Document]] = {
    "stream": StreamDocument,
    "canvas": CanvasDocument,
}


def open_document(backend: str) -> Document:
    try:
        factory = BACKENDS[backend]
    except KeyError:
        raise ValueError(f"Unknown PDF backend {backend!r}; choose one of {', '.join(BACKENDS)}") from None
    return factory()


def load_image(document: Document, url: str, settings: Settings, fetch: Callable[..., bytes] = fetch_bytes) -> Optional[Image]:
    """Download and embed a PNG/JPEG; any failure is logged and yields None."""
    if not url:
        return None
    try:
        return document.embed_image(fetch(url, timeout=settings.fetch_timeout))
    except (AssetFetchError, ImageEmbedError) as exc:
        logger.warning("Failed to load image %s, continuing without it: %s", url, exc)
        return None


def render_document(
    payload: Mapping,
    backend: Optional[str] = None,
    settings: Optional[Settings] = None,
    fetch: Callable[..., bytes] = fetch_bytes,
) -> bytes:
    """
    Lay out one A4 page for an invoice, quote or order payload and return the PDF bytes.
    Assets are fetched one after another before layout starts.
    """
    settings = settings or Settings()
    document = open_document(backend or settings.backend)

    fonts = load_fonts(document, settings, fetch=fetch)
    logo = load_image(document, payload.get("logo_url", ""), settings, fetch)
    qr_image = load_image(document, payload.get("payment_qr_url", ""), settings, fetch)
    qr_matrix = None if qr_image is not None else make_qr_matrix(payload.get("payment_qr_data", ""))

    page = document.add_page((PAGE_W, PAGE_H))
    labels = payload["labels"]
    currency = payload.get("currency", settings.currency)

    y = render_header(page, fonts, payload, PAGE_H - MARGIN_TOP, logo=logo)
    y = render_parties(page, fonts, payload, y)
    y = render_items_table(page, fonts, payload["items"], payload["line_totals"], labels, currency, y)
    y = render_summary(page, fonts, payload["totals"], labels, currency, y - 20)
    render_payment(page, fonts, payload, y, qr_image=qr_image, qr_matrix=qr_matrix)
    render_footer(page, fonts, labels)

    pdf_bytes = document.save()
    logger.info(
        "Rendered %s %s (%d items, %d bytes, custom fonts: %s)",
        payload.get("doc_type"),
        payload.get("number"),
        len(payload["items"]),
        len(pdf_bytes),
        fonts.custom,
    )
    return pdf_bytes


def render_pdf(path: Path, payload: Mapping, backend: Optional[str] = None, settings: Optional[Settings] = None) -> Path:
    path = Path(path)
    path.write_bytes(render_document(payload, backend=backend, settings=settings))
    return path
