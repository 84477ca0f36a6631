from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from reportlab.pdfbase.pdfmetrics import stringWidth

from crm_documents.config import Settings
from crm_documents.core.errors import AssetFetchError, FontEmbedError
from crm_documents.utils.assets import fetch_bytes
from crm_documents.utils.pdf.backends.base import Document, Font

logger = logging.getLogger(__name__)

REGULAR = "Helvetica"
BOLD = "Helvetica-Bold"


@dataclass(frozen=True)
class StandardFont:
    """One of the 14 base PDF fonts; widths come from the bundled AFM metrics."""

    name: str
    resource: str = ""  # content-stream resource name, e.g. "/F1"

    def width_of_text_at_size(self, text: str, size: float) -> float:
        return stringWidth(str(text), self.name, size)


@dataclass(frozen=True)
class FontPair:
    regular: Font
    bold: Font
    custom: bool = False


def standard_pair(document: Document) -> FontPair:
    return FontPair(regular=document.standard_font(bold=False), bold=document.standard_font(bold=True))


def load_fonts(
    document: Document,
    settings: Optional[Settings] = None,
    fetch: Callable[..., bytes] = fetch_bytes,
) -> FontPair:
    """
    Custom TTFs when both URLs are configured and the backend can embed them,
    otherwise the standard Helvetica pair.
    """
    settings = settings or Settings()
    if not settings.custom_fonts:
        return standard_pair(document)
    try:
        regular_bytes = fetch(settings.font_regular_url, timeout=settings.fetch_timeout)
        bold_bytes = fetch(settings.font_bold_url, timeout=settings.fetch_timeout)
        regular = document.embed_font(regular_bytes, "CustomRegular")
        bold = document.embed_font(bold_bytes, "CustomBold")
    except (AssetFetchError, FontEmbedError) as exc:
        logger.warning("Failed to load custom fonts, using standard fonts: %s", exc)
        return standard_pair(document)
    return FontPair(regular=regular, bold=bold, custom=True)
