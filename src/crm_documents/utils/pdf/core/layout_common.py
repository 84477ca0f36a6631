"""
Layout and style constants for the single-page A4 documents.
"""

from __future__ import annotations

import re

# Page geometry (A4, points)
PAGE_W, PAGE_H = 595, 842
MARGIN_TOP = 24
MARGIN_BOTTOM = 24
MARGIN_SIDE = 32
CONTENT_LEFT = MARGIN_SIDE
CONTENT_RIGHT = PAGE_W - MARGIN_SIDE
CONTENT_W = CONTENT_RIGHT - CONTENT_LEFT

# Header
HEADER_HEIGHT = 60
LOGO_MAX_W, LOGO_MAX_H = 140, 40
META_BOX_W, META_BOX_H = 260, 84

# Party columns
COLUMN_GUTTER = 40

# Items table
TABLE_ROW_BASE_HEIGHT = 22
TABLE_LINE_SPACING = 11
TABLE_ROW_PADDING = 8
TABLE_BODY_SIZE = 9
TABLE_HEADER_SIZE = 10
TABLE_COLUMNS = {
    # name: (x offset from CONTENT_LEFT, width)
    "desc": (0, 250),
    "qty": (250, 80),
    "unit": (330, 100),
    "total": (430, 100),
}
CELL_PADDING = 10

# Totals box
TOTALS_BOX_W, TOTALS_BOX_H = 320, 104

# Payment QR
QR_SIZE = 120

COLORS = {
    "primary": "#698BB5",
    "dark": "#5E6367",
    "green": "#98A095",
    "light_green": "#C5CB9D",
    "cream": "#ECE0CA",
    "tan": "#CDBA9A",
    "white": "#FFFFFF",
    "light_gray": "#F8F6F0",
    "black": "#000000",
}

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")


def color(name: str) -> str:
    return COLORS.get(name, COLORS["black"])


def hex_to_rgb(value: str | None) -> tuple[float, float, float]:
    """'#RRGGBB' -> (r, g, b) in 0-1 space; anything unparseable is black."""
    match = _HEX_RE.match(str(value or ""))
    if not match:
        return (0.0, 0.0, 0.0)
    return tuple(int(part, 16) / 255.0 for part in match.groups())  # type: ignore[return-value]
