"""
Drawing capability shared by all PDF backends.

The layout code only needs these few calls; any PDF producer that can offer them
can render the documents.
"""

from __future__ import annotations

from typing import Optional, Protocol, Tuple


class Font(Protocol):
    name: str

    def width_of_text_at_size(self, text: str, size: float) -> float: ...


class Image(Protocol):
    width: int
    height: int


class Page(Protocol):
    width: float
    height: float

    def draw_text(self, text: str, *, x: float, y: float, font: Font, size: float, color: str) -> None: ...

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
    ) -> None: ...

    def draw_line(self, *, start: Tuple[float, float], end: Tuple[float, float], thickness: float = 1, color: str = "#000000") -> None: ...

    def draw_image(self, image: Image, *, x: float, y: float, width: float, height: float) -> None: ...


class Document(Protocol):
    def add_page(self, size: Tuple[float, float]) -> Page: ...

    def standard_font(self, bold: bool = False) -> Font: ...

    def embed_font(self, data: bytes, name: str) -> Font: ...

    def embed_image(self, data: bytes) -> Image: ...

    def save(self) -> bytes: ...
