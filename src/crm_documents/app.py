from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from crm_documents.config import BACKENDS, Settings
from crm_documents.core.calculations.totals_engine import compute_totals
from crm_documents.core.errors import CrmDocumentsError
from crm_documents.core.services.documents import build_document_payload
from crm_documents.utils.currency import format_currency
from crm_documents.utils.pdf.renderers.html_renderer import render_html
from crm_documents.utils.pdf.renderers.pdf_renderer import render_document

logger = logging.getLogger("crm_documents")


def _read_input(path: Path) -> dict:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return data


def cmd_render(args: argparse.Namespace, settings: Settings) -> int:
    data = _read_input(args.input)
    payload = build_document_payload(
        data.get("type", "invoice"),
        data.get("document") or {},
        data.get("line_items") or [],
        settings,
    )
    if args.html:
        out = Path(args.output or payload["filename"].replace(".pdf", ".html"))
        out.write_text(render_html(payload), encoding="utf-8")
    else:
        out = Path(args.output or payload["filename"])
        out.write_bytes(render_document(payload, backend=args.backend, settings=settings))
    print(out)
    return 0


def cmd_totals(args: argparse.Namespace, settings: Settings) -> int:
    data = _read_input(args.input)
    document = data.get("document") or {}
    tax_pct = data.get("tax_pct", document.get("tax_pct", settings.default_tax_pct))
    discount_pct = data.get("discount_pct", document.get("discount_pct", settings.default_discount_pct))
    totals = compute_totals(data.get("line_items") or [], tax_pct=tax_pct, discount_pct=discount_pct)
    if args.json:
        print(json.dumps(totals.as_dict()))
    else:
        currency = document.get("currency") or settings.currency
        print(f"Subtotal: {format_currency(totals.subtotal_minor, currency)}")
        print(f"Moms:     {format_currency(totals.tax_minor, currency)}")
        print(f"Total:    {format_currency(totals.total_minor, currency)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="crm-documents", description="Render CRM invoices, quotes and orders.")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="render a document JSON file to PDF or HTML")
    render.add_argument("input", type=Path)
    render.add_argument("-o", "--output", type=Path)
    render.add_argument("--backend", choices=BACKENDS)
    render.add_argument("--html", action="store_true", help="write HTML instead of PDF")
    render.set_defaults(func=cmd_render)

    totals = sub.add_parser("totals", help="print subtotal, tax and total of the line items")
    totals.add_argument("input", type=Path)
    totals.add_argument("--json", action="store_true")
    totals.set_defaults(func=cmd_totals)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args, Settings.from_env())
    except (CrmDocumentsError, OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
