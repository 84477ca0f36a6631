"""
PDF object builder: assembles content streams, base fonts and image XObjects
into a minimal PDF byte output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class FontResource:
    resource: str  # "/F1"
    base_font: str  # "Helvetica"


@dataclass(frozen=True)
class ImageResource:
    resource: str  # "/Im1"
    width: int
    height: int
    data: bytes  # Flate-compressed RGB samples


@dataclass(frozen=True)
class PageContent:
    stream: str
    size: tuple[float, float]


def _font_obj(obj_id: int, font: FontResource) -> bytes:
    return (
        f"{obj_id} 0 obj << /Type /Font /Subtype /Type1 /BaseFont /{font.base_font} "
        f"/Encoding /WinAnsiEncoding >> endobj\n"
    ).encode("ascii")


def _image_obj(obj_id: int, image: ImageResource) -> bytes:
    head = (
        f"{obj_id} 0 obj << /Type /XObject /Subtype /Image /Width {image.width} /Height {image.height} "
        f"/ColorSpace /DeviceRGB /BitsPerComponent 8 /Filter /FlateDecode /Length {len(image.data)} >> stream\n"
    ).encode("ascii")
    return head + image.data + b"\nendstream endobj\n"


def build_pdf_bytes(
    pages: Sequence[PageContent],
    fonts: Sequence[FontResource],
    images: Sequence[ImageResource] = (),
) -> bytes:
    """
    Given page content streams plus the resources they reference, return ready-to-write PDF bytes.
    """
    objs: list[bytes] = []
    next_obj_id = 3

    font_refs: list[str] = []
    for font in fonts:
        objs.append(_font_obj(next_obj_id, font))
        font_refs.append(f"{font.resource} {next_obj_id} 0 R")
        next_obj_id += 1

    image_refs: list[str] = []
    for image in images:
        objs.append(_image_obj(next_obj_id, image))
        image_refs.append(f"{image.resource} {next_obj_id} 0 R")
        next_obj_id += 1

    resources = f"/Font << {' '.join(font_refs)} >>"
    if image_refs:
        resources += f" /XObject << {' '.join(image_refs)} >>"

    pages_kids: list[int] = []
    for page in pages:
        stream = page.stream.encode("ascii", "ignore")
        content_id = next_obj_id
        page_id = next_obj_id + 1
        pages_kids.append(page_id)
        objs.append(
            f"{content_id} 0 obj << /Length {len(stream)} >> stream\n".encode("ascii") + stream + b"\nendstream endobj\n"
        )
        width, height = page.size
        objs.append(
            f"{page_id} 0 obj << /Type /Page /Parent 2 0 R /MediaBox [0 0 {width:g} {height:g}] "
            f"/Contents {content_id} 0 R /Resources << {resources} >> >> endobj\n".encode("ascii")
        )
        next_obj_id += 2

    kids_ref = " ".join(f"{kid} 0 R" for kid in pages_kids)
    pages_obj = f"2 0 obj << /Type /Pages /Count {len(pages_kids)} /Kids [{kids_ref}] >> endobj\n".encode("ascii")
    catalog_obj = b"1 0 obj << /Type /Catalog /Pages 2 0 R >> endobj\n"

    objs = [catalog_obj, pages_obj] + objs

    header = b"%PDF-1.4\n"
    offsets = [0]
    pdf_body = bytearray()
    current_offset = len(header)
    for obj in objs:
        offsets.append(current_offset)
        pdf_body += obj
        current_offset += len(obj)

    xref_entries = ["0000000000 65535 f \n"] + [_format_xref_entry(off) for off in offsets[1:]]
    xref = ("xref\n0 %d\n" % len(offsets)).encode("ascii") + "".join(xref_entries).encode("ascii")
    startxref = len(header) + len(pdf_body)
    trailer = f"trailer << /Size {len(offsets)} /Root 1 0 R >>\nstartxref\n{startxref}\n%%EOF\n".encode("ascii")

    return header + bytes(pdf_body) + xref + trailer


def _format_xref_entry(offset: int) -> str:
    return f"{offset:010d} 00000 n \n"
