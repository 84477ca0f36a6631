"""
Hand-written PDF content streams: every draw call appends raw operators to the page,
`StreamDocument.save` assembles the object table via `build_pdf_bytes`.
"""

from __future__ import annotations

import io
import zlib
from typing import Optional, Tuple

from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from crm_documents.core.errors import FontEmbedError, ImageEmbedError
from crm_documents.utils.pdf.backends.base import Font
from crm_documents.utils.pdf.core.builder import FontResource, ImageResource, PageContent, build_pdf_bytes
from crm_documents.utils.pdf.core.fonts import BOLD, REGULAR, StandardFont
from crm_documents.utils.pdf.core.layout_common import hex_to_rgb


def _num(value: float) -> str:
    text = f"{float(value):.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _rgb(value: str) -> str:
    return " ".join(_num(c) for c in hex_to_rgb(value))


def _escape_pdf_text(text: str) -> str:
    """WinAnsi bytes written as a literal string; non-ASCII bytes become octal escapes."""
    out = []
    for byte in str(text).encode("cp1252", "replace"):
        ch = chr(byte)
        if ch in "\\()":
            out.append("\\" + ch)
        elif 32 <= byte < 127:
            out.append(ch)
        else:
            out.append(f"\\{byte:03o}")
    return "".join(out)


class StreamImage:
    def __init__(self, resource: str, width: int, height: int, data: bytes):
        self.resource = resource
        self.width = width
        self.height = height
        self.data = data

    @classmethod
    def from_bytes(cls, resource: str, raw: bytes) -> "StreamImage":
        try:
            img = PILImage.open(io.BytesIO(raw))
            img.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise ImageEmbedError(f"unsupported image data: {exc}") from exc
        if img.mode in ("RGBA", "LA", "P"):
            rgba = img.convert("RGBA")
            flat = PILImage.new("RGB", rgba.size, (255, 255, 255))
            flat.paste(rgba, mask=rgba.split()[-1])
            img = flat
        else:
            img = img.convert("RGB")
        return cls(resource, img.width, img.height, zlib.compress(img.tobytes()))


class StreamPage:
    def __init__(self, size: Tuple[float, float]):
        self.width, self.height = size
        self.ops: list[str] = []

    def draw_text(self, text: str, *, x: float, y: float, font: Font, size: float, color: str) -> None:
        resource = getattr(font, "resource", "") or "/F1"
        self.ops.append(
            f"BT {_rgb(color)} rg {resource} {_num(size)} Tf {_num(x)} {_num(y)} Td ({_escape_pdf_text(text)}) Tj ET\n"
        )

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
        rect = f"{_num(x)} {_num(y)} {_num(width)} {_num(height)} re"
        if color and border_color and border_width > 0:
            self.ops.append(f"q {_rgb(color)} rg {_rgb(border_color)} RG {_num(border_width)} w {rect} B Q\n")
        elif color:
            self.ops.append(f"q {_rgb(color)} rg {rect} f Q\n")
        elif border_color and border_width > 0:
            self.ops.append(f"q {_rgb(border_color)} RG {_num(border_width)} w {rect} S Q\n")

    def draw_line(self, *, start: Tuple[float, float], end: Tuple[float, float], thickness: float = 1, color: str = "#000000") -> None:
        (x1, y1), (x2, y2) = start, end
        self.ops.append(
            f"q {_rgb(color)} RG {_num(thickness)} w {_num(x1)} {_num(y1)} m {_num(x2)} {_num(y2)} l S Q\n"
        )

    def draw_image(self, image: StreamImage, *, x: float, y: float, width: float, height: float) -> None:
        self.ops.append(f"q {_num(width)} 0 0 {_num(height)} {_num(x)} {_num(y)} cm {image.resource} Do Q\n")

    def content(self) -> PageContent:
        return PageContent(stream="".join(self.ops), size=(self.width, self.height))


class StreamDocument:
    """Standard Type1 fonts only; embed_font always refuses so callers fall back."""

    def __init__(self):
        self.pages: list[StreamPage] = []
        self.images: list[StreamImage] = []
        self._fonts = {
            False: StandardFont(REGULAR, "/F1"),
            True: StandardFont(BOLD, "/F2"),
        }

    def add_page(self, size: Tuple[float, float]) -> StreamPage:
        page = StreamPage(size)
        self.pages.append(page)
        return page

    def standard_font(self, bold: bool = False) -> StandardFont:
        return self._fonts[bool(bold)]

    def embed_font(self, data: bytes, name: str) -> Font:
        raise FontEmbedError("stream backend only supports the standard Helvetica fonts")

    def embed_image(self, data: bytes) -> StreamImage:
        image = StreamImage.from_bytes(f"/Im{len(self.images) + 1}", data)
        self.images.append(image)
        return image

    def save(self) -> bytes:
        fonts = [FontResource(f.resource, f.name) for f in self._fonts.values()]
        images = [ImageResource(i.resource, i.width, i.height, i.data) for i in self.images]
        return build_pdf_bytes([p.content() for p in self.pages], fonts, images)
