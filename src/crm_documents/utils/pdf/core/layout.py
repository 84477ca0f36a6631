"""
Backend-agnostic text layout: measurement, word wrap, alignment and row heights.

Everything here talks to the page and font only through the small capability set
in `crm_documents.utils.pdf.backends.base`, and every drawing helper returns the
cursor it leaves behind so callers thread `y` explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from crm_documents.utils.pdf.backends.base import Font, Page
from crm_documents.utils.pdf.core.layout_common import COLORS


@dataclass(frozen=True)
class RenderedLine:
    text: str
    x: float
    y: float
    width: float


@dataclass(frozen=True)
class TextCursor:
    last_y: float
    lines: int


@dataclass(frozen=True)
class LayoutBox:
    x: float
    y: float
    width: Optional[float] = None
    height: Optional[float] = None
    font: Optional[Font] = None
    size: float = 10
    color: str = COLORS["dark"]
    align: str = "left"


def text_width(font: Font, size: float, text) -> float:
    return float(font.width_of_text_at_size("" if text is None else str(text), size))


def default_line_height(size: float) -> int:
    """size * 1.2 rounded half-up."""
    return int((Decimal(str(size)) * Decimal("1.2")).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _hard_break(word: str, font: Font, size: float, max_width: float) -> list[str]:
    chunks: list[str] = []
    chunk = ""
    for ch in word:
        candidate = chunk + ch
        if text_width(font, size, candidate) <= max_width or not chunk:
            # a lone glyph wider than the box still has to go somewhere
            chunk = candidate
        else:
            chunks.append(chunk)
            chunk = ch
    if chunk:
        chunks.append(chunk)
    return chunks


def wrap_text(text, font: Font, size: float, max_width: float) -> list[str]:
    """
    Greedy line fill. Words are whitespace separated and re-joined with single spaces;
    a word wider than max_width is cut character by character, each piece on its own line.
    """
    words = ("" if text is None else str(text)).split()
    lines: list[str] = []
    current = ""
    for word in words:
        candidate = f"{current} {word}" if current else word
        if text_width(font, size, candidate) <= max_width:
            current = candidate
            continue
        if current:
            lines.append(current)
            current = ""
        if text_width(font, size, word) <= max_width:
            current = word
        else:
            lines.extend(_hard_break(word, font, size, max_width))
    if current:
        lines.append(current)
    return lines


def aligned_x(x: float, width: float, align: str) -> float:
    if align == "center":
        return x - width / 2
    if align == "right":
        return x - width
    return x


def layout_text(
    text,
    *,
    x: float,
    y: float,
    font: Font,
    size: float,
    align: str = "left",
    max_width: Optional[float] = None,
    line_height: Optional[float] = None,
) -> list[RenderedLine]:
    lh = line_height or default_line_height(size)
    if max_width:
        raw_lines = wrap_text(text, font, size, max_width)
    else:
        raw_lines = ["" if text is None else str(text)]
    placed: list[RenderedLine] = []
    for idx, line in enumerate(raw_lines):
        w = text_width(font, size, line)
        placed.append(RenderedLine(text=line, x=aligned_x(x, w, align), y=y - idx * lh, width=w))
    return placed


def draw_text_aligned(
    page: Page,
    text,
    *,
    x: float,
    y: float,
    font: Font,
    size: float,
    color: str = COLORS["dark"],
    align: str = "left",
    max_width: Optional[float] = None,
    line_height: Optional[float] = None,
) -> TextCursor:
    lh = line_height or default_line_height(size)
    placed = layout_text(text, x=x, y=y, font=font, size=size, align=align, max_width=max_width, line_height=lh)
    for line in placed:
        if line.text:
            page.draw_text(line.text, x=line.x, y=line.y, font=font, size=size, color=color)
    return TextCursor(last_y=y - len(placed) * lh, lines=len(placed))


def draw_in_box(page: Page, text, box: LayoutBox, *, max_width: Optional[float] = None, line_height: Optional[float] = None) -> TextCursor:
    return draw_text_aligned(
        page,
        text,
        x=box.x,
        y=box.y,
        font=box.font,  # type: ignore[arg-type]
        size=box.size,
        color=box.color,
        align=box.align,
        max_width=max_width or box.width,
        line_height=line_height,
    )


def draw_right_in_box(
    page: Page,
    text,
    *,
    box_x: float,
    box_width: float,
    y: float,
    font: Font,
    size: float,
    padding_right: float = 10,
    color: str = COLORS["dark"],
) -> TextCursor:
    return draw_text_aligned(page, text, x=box_x + box_width - padding_right, y=y, font=font, size=size, color=color, align="right")


def count_lines(text, font: Font, size: float, max_width: float) -> int:
    return len(wrap_text(text, font, size, max_width))


def row_height(
    text,
    font: Font,
    size: float,
    max_width: float,
    *,
    base_height: float,
    line_spacing: float,
    padding: float,
) -> int:
    lines = count_lines(text, font, size, max_width)
    return int(max(base_height, round(lines * line_spacing + padding)))


def draw_box(
    page: Page,
    x: float,
    y: float,
    width: float,
    height: float,
    *,
    fill: Optional[str] = None,
    border: Optional[str] = None,
    border_width: float = 0,
) -> None:
    if fill:
        page.draw_rectangle(x=x, y=y, width=width, height=height, color=fill)
    if border and border_width > 0:
        page.draw_rectangle(x=x, y=y, width=width, height=height, border_color=border, border_width=border_width)


def draw_rule(page: Page, x1: float, y1: float, x2: float, y2: float, color: str = COLORS["tan"], thickness: float = 1) -> None:
    page.draw_line(start=(x1, y1), end=(x2, y2), thickness=thickness, color=color)
