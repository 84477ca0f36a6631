from __future__ import annotations

from typing import Iterable, Mapping, Optional

from crm_documents.config import Settings
from crm_documents.core.calculations.totals_engine import TotalsEngine
from crm_documents.core.errors import UnsupportedDocumentType
from crm_documents.core.models.line_item import LineItem, coerce_number
from crm_documents.core.models.party import Party
from crm_documents.core.services.pdf_content import labels_for, load_pdf_content
from crm_documents.utils.currency import format_date, parse_date

DOCUMENT_TYPES = ("invoice", "quote", "order")


def ensure_doc_type(doc_type) -> str:
    kind = str(doc_type or "").strip().lower()
    if kind not in DOCUMENT_TYPES:
        raise UnsupportedDocumentType(doc_type)
    return kind


def document_number(record: Mapping, prefix: str) -> str:
    for key in ("number", "invoice_number", "order_number", "quote_number"):
        value = record.get(key)
        if value:
            return str(value)
    doc_id = str(record.get("id") or "")
    return f"{prefix}{doc_id[-6:]}" if doc_id else f"{prefix}000000"


def payment_terms(record: Mapping, labels: Mapping) -> str:
    """'Netto N dage' from issue and due date when both are known."""
    issued = parse_date(record.get("issue_date") or record.get("created_at"))
    due = parse_date(record.get("due_date"))
    if issued and due and due >= issued:
        return f"Netto {(due - issued).days} dage"
    return str(record.get("payment_terms") or labels.get("default_terms", ""))


def _extra_value(kind: str, record: Mapping, labels: Mapping, currency: str) -> str:
    if kind == "invoice":
        return format_date(record.get("due_date")) or labels.get("extra_fallback", "")
    if kind == "quote":
        return format_date(record.get("valid_until")) or labels.get("extra_fallback", "")
    return currency


def build_document_payload(
    doc_type: str,
    record: Mapping,
    line_records: Optional[Iterable[Mapping]] = None,
    settings: Optional[Settings] = None,
    content: Optional[dict] = None,
) -> dict:
    """
    Normalize a stored document plus its line items into the mapping consumed by
    the PDF and HTML renderers. Totals are always recomputed from the lines.
    """
    kind = ensure_doc_type(doc_type)
    settings = settings or Settings()
    if content is None:
        content = load_pdf_content(settings.content_path)
    labels = labels_for(kind, content)
    record = record or {}

    currency = str(record.get("currency") or settings.currency or "DKK").upper()
    tax_pct = coerce_number(record.get("tax_pct"))
    discount_pct = coerce_number(record.get("discount_pct"))
    engine = TotalsEngine(
        default_tax_pct=settings.default_tax_pct if tax_pct is None else tax_pct,
        default_discount_pct=settings.default_discount_pct if discount_pct is None else discount_pct,
    )

    items = sorted((LineItem.from_record(r) for r in (line_records or [])), key=lambda it: it.position)
    line_totals = engine.breakdown(items)
    totals = engine.summarize(items)

    company = Party.from_record(record.get("company"), default_name=labels["company_fallback"])
    contact = Party.from_record(record.get("person") or record.get("contact"), default_name=labels["customer_fallback"])
    number = document_number(record, labels.get("number_prefix", ""))
    issue_date = record.get("issue_date") or record.get("order_date") or record.get("created_at")

    return {
        "doc_type": kind,
        "id": record.get("id"),
        "title": labels["title"],
        "number": number,
        "issue_date": format_date(issue_date),
        "extra_value": _extra_value(kind, record, labels, currency),
        "currency": currency,
        "company": company,
        "contact": contact,
        "items": items,
        "line_totals": line_totals,
        "totals": totals,
        "labels": labels,
        "payment_terms": payment_terms(record, labels),
        "notes": str(record.get("notes") or labels.get("default_notes", "")),
        "logo_url": company.logo_url,
        "payment_qr_url": str(record.get("payment_qr_url") or ""),
        "payment_qr_data": str(record.get("payment_qr_data") or ""),
        "filename": f"{kind}-{number}.pdf",
    }
