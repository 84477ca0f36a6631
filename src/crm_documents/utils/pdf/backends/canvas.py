"""
Adapter from the layout drawing calls to a reportlab canvas. Unlike the stream
backend it can embed TrueType fonts downloaded at render time.
"""

from __future__ import annotations

import hashlib
import io
from typing import Optional, Tuple

from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas

from crm_documents.core.errors import FontEmbedError, ImageEmbedError
from crm_documents.utils.pdf.core.fonts import BOLD, REGULAR, StandardFont
from crm_documents.utils.pdf.core.layout_common import hex_to_rgb


class CanvasFont:
    def __init__(self, name: str):
        self.name = name

    def width_of_text_at_size(self, text: str, size: float) -> float:
        return pdfmetrics.stringWidth(str(text), self.name, size)


class CanvasImage:
    def __init__(self, reader: ImageReader):
        self.reader = reader
        self.width, self.height = reader.getSize()


class CanvasPage:
    def __init__(self, pdf: canvas.Canvas, size: Tuple[float, float]):
        self.pdf = pdf
        self.width, self.height = size

    def draw_text(self, text: str, *, x: float, y: float, font, size: float, color: str) -> None:
        self.pdf.setFillColorRGB(*hex_to_rgb(color))
        self.pdf.setFont(font.name, size)
        self.pdf.drawString(x, y, str(text))

    def draw_rectangle(
        self,
        *,
        x: float,
        y: float,
        width: float,
        height: float,
        color: Optional[str] = None,
        border_color: Optional[str] = None,
        border_width: float = 0,
    ) -> None:
        stroke = bool(border_color and border_width > 0)
        fill = bool(color)
        if not (stroke or fill):
            return
        self.pdf.saveState()
        if fill:
            self.pdf.setFillColorRGB(*hex_to_rgb(color))
        if stroke:
            self.pdf.setStrokeColorRGB(*hex_to_rgb(border_color))
            self.pdf.setLineWidth(border_width)
        self.pdf.rect(x, y, width, height, stroke=int(stroke), fill=int(fill))
        self.pdf.restoreState()

    def draw_line(self, *, start: Tuple[float, float], end: Tuple[float, float], thickness: float = 1, color: str = "#000000") -> None:
        self.pdf.saveState()
        self.pdf.setStrokeColorRGB(*hex_to_rgb(color))
        self.pdf.setLineWidth(thickness)
        self.pdf.line(start[0], start[1], end[0], end[1])
        self.pdf.restoreState()

    def draw_image(self, image: CanvasImage, *, x: float, y: float, width: float, height: float) -> None:
        self.pdf.drawImage(image.reader, x, y, width=width, height=height, mask="auto")


class CanvasDocument:
    def __init__(self):
        self._buffer = io.BytesIO()
        self.pdf = canvas.Canvas(self._buffer)
        self.pages: list[CanvasPage] = []

    def add_page(self, size: Tuple[float, float]) -> CanvasPage:
        if self.pages:
            self.pdf.showPage()
        self.pdf.setPageSize(size)
        page = CanvasPage(self.pdf, size)
        self.pages.append(page)
        return page

    def standard_font(self, bold: bool = False) -> StandardFont:
        return StandardFont(BOLD if bold else REGULAR)

    def embed_font(self, data: bytes, name: str) -> CanvasFont:
        # reportlab keeps one process-wide registry; key entries by content
        font_name = f"{name}-{hashlib.sha1(data).hexdigest()[:12]}"
        if font_name not in pdfmetrics.getRegisteredFontNames():
            try:
                pdfmetrics.registerFont(TTFont(font_name, io.BytesIO(data)))
            except (TTFError, ValueError, OSError) as exc:
                raise FontEmbedError(f"font {name} could not be embedded: {exc}") from exc
        return CanvasFont(font_name)

    def embed_image(self, data: bytes) -> CanvasImage:
        try:
            return CanvasImage(ImageReader(io.BytesIO(data)))
        except (OSError, ValueError) as exc:
            raise ImageEmbedError(f"unsupported image data: {exc}") from exc

    def save(self) -> bytes:
        self.pdf.showPage()
        self.pdf.save()
        return self._buffer.getvalue()
