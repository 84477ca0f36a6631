import sys
from pathlib import Path

import pytest

# Ensure `src` is importable when running tests from repo root.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


class MonoFont:
    """Every glyph is half the font size wide; keeps layout arithmetic predictable."""

    name = "Mono"

    def width_of_text_at_size(self, text, size):
        return len(str(text)) * size * 0.5


class FakeImage:
    def __init__(self, width=200, height=100):
        self.width = width
        self.height = height


class RecordingPage:
    """Page double that keeps every draw call for assertions."""

    def __init__(self, width=595, height=842):
        self.width = width
        self.height = height
        self.texts = []
        self.rects = []
        self.lines = []
        self.images = []

    def draw_text(self, text, *, x, y, font, size, color):
        self.texts.append({"text": text, "x": x, "y": y, "font": font, "size": size, "color": color})

    def draw_rectangle(self, *, x, y, width, height, color=None, border_color=None, border_width=0):
        self.rects.append(
            {"x": x, "y": y, "width": width, "height": height, "color": color, "border_color": border_color, "border_width": border_width}
        )

    def draw_line(self, *, start, end, thickness=1, color="#000000"):
        self.lines.append({"start": start, "end": end, "thickness": thickness, "color": color})

    def draw_image(self, image, *, x, y, width, height):
        self.images.append({"image": image, "x": x, "y": y, "width": width, "height": height})

    def text_values(self):
        return [t["text"] for t in self.texts]


@pytest.fixture
def mono_font():
    return MonoFont()


@pytest.fixture
def font_pair(mono_font):
    from crm_documents.utils.pdf.core.fonts import FontPair

    return FontPair(regular=mono_font, bold=mono_font)


@pytest.fixture
def page():
    return RecordingPage()


@pytest.fixture
def settings():
    from crm_documents.config import Settings

    return Settings(backend="stream", currency="DKK", default_tax_pct=25.0, default_discount_pct=0.0, fetch_timeout=1.0)


@pytest.fixture
def invoice_record():
    return {
        "id": "5f1c2d7e-aaaa-bbbb-cccc-0000004242ab",
        "invoice_number": "2026-0042",
        "issue_date": "2026-10-01",
        "due_date": "2026-10-15",
        "currency": "DKK",
        "notes": "Husk at angive fakturanummer",
        "company": {
            "name": "Nordlys ApS",
            "address": "Havnegade 12",
            "postal_code": "1058",
            "city": "København K",
            "email": "faktura@nordlys.dk",
            "phone": "+45 31 74 39 01",
            "vat": "DK12345678",
        },
        "person": {"name": "Mette Jensen", "email": "mette@kunde.dk"},
    }


@pytest.fixture
def line_records():
    return [
        {"description": "Konsulenttimer", "qty": 2, "unit_minor": 100000, "tax_rate_pct": 25, "discount_pct": 0, "position": 1},
        {"description": "Licens", "qty": 1, "unit_minor": 50000, "tax_rate_pct": 25, "discount_pct": 10, "position": 2},
    ]


@pytest.fixture
def no_fetch():
    from crm_documents.core.errors import AssetFetchError

    def fetch(url, timeout=None):
        raise AssetFetchError(f"offline: {url}")

    return fetch


@pytest.fixture
def png_bytes():
    import io

    from PIL import Image

    buf = io.BytesIO()
    Image.new("RGBA", (40, 20), (105, 139, 181, 255)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def invoice_payload(invoice_record, line_records, settings):
    from crm_documents.core.services.documents import build_document_payload

    return build_document_payload("invoice", invoice_record, line_records, settings, content=None)
