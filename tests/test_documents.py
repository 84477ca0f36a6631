import json

import pytest

from crm_documents.config import Settings
from crm_documents.core.errors import DocumentNotFound, UnsupportedDocumentType
from crm_documents.core.models.line_item import DocumentTotals
from crm_documents.core.services import pdf_content
from crm_documents.core.services.documents import build_document_payload, document_number, payment_terms
from crm_documents.core.services.repository import InMemoryRepository, load_repository
from crm_documents.core.validation import validate_line_item


def test_invoice_payload(invoice_payload):
    assert invoice_payload["doc_type"] == "invoice"
    assert invoice_payload["title"] == "FAKTURA"
    assert invoice_payload["number"] == "2026-0042"
    assert invoice_payload["issue_date"] == "01.10.2026"
    assert invoice_payload["extra_value"] == "15.10.2026"
    assert invoice_payload["payment_terms"] == "Netto 14 dage"
    assert invoice_payload["filename"] == "invoice-2026-0042.pdf"
    assert invoice_payload["company"].name == "Nordlys ApS"
    assert invoice_payload["contact"].name == "Mette Jensen"
    # 2 * 1000,00 + 500,00 - 10 % = 2450,00 ; 25 % moms
    assert invoice_payload["totals"] == DocumentTotals(subtotal_minor=245000, tax_minor=61250, total_minor=306250)


def test_items_are_sorted_by_position(invoice_record, settings):
    rows = [
        {"description": "B", "qty": 1, "unit_minor": 1, "position": 2},
        {"description": "A", "qty": 1, "unit_minor": 1, "position": 1},
    ]
    payload = build_document_payload("invoice", invoice_record, rows, settings)

    assert [it.description for it in payload["items"]] == ["A", "B"]


def test_document_default_tax_comes_from_record_then_settings(settings):
    rows = [{"description": "x", "qty": 1, "unit_minor": 10000}]

    from_settings = build_document_payload("quote", {"id": "q1"}, rows, settings)
    from_record = build_document_payload("quote", {"id": "q1", "tax_pct": 0}, rows, settings)

    assert from_settings["totals"].tax_minor == 2500
    assert from_record["totals"].tax_minor == 0


def test_quote_and_order_labels(settings):
    quote = build_document_payload("quote", {"id": "abcdef123456", "valid_until": "2026-11-30"}, [], settings)
    order = build_document_payload("ORDER", {"id": "x", "number": "O-7", "currency": "eur"}, [], settings)

    assert quote["title"] == "TILBUD"
    assert quote["number"] == "QUO-123456"
    assert quote["extra_value"] == "30.11.2026"
    assert quote["totals"] == DocumentTotals.zero()
    assert order["title"] == "ORDRE"
    assert order["extra_value"] == "EUR"
    assert order["filename"] == "order-O-7.pdf"


def test_unsupported_type_is_rejected(settings):
    with pytest.raises(UnsupportedDocumentType):
        build_document_payload("receipt", {"id": "1"}, [], settings)


def test_missing_parties_get_fallback_names(settings):
    payload = build_document_payload("invoice", {"id": "1"}, [], settings)

    assert payload["company"].name == "Virksomhed"
    assert payload["contact"].name == "Kunde"
    assert payload["payment_terms"] == "Netto 30 dage"
    assert payload["notes"] == "Tak for din forretning!"
    assert payload["extra_value"] == "Ikke angivet"


def test_document_number_fallbacks():
    assert document_number({"number": "N1", "invoice_number": "I1"}, "INV-") == "N1"
    assert document_number({"id": "0123456789"}, "INV-") == "INV-456789"
    assert document_number({}, "ORD-") == "ORD-000000"


def test_payment_terms_prefers_dates_then_record():
    labels = {"default_terms": "Netto 30 dage"}

    assert payment_terms({"issue_date": "2026-01-01", "due_date": "2026-01-31"}, labels) == "Netto 30 dage"
    assert payment_terms({"issue_date": "2026-01-01", "due_date": "2026-01-09"}, labels) == "Netto 8 dage"
    assert payment_terms({"payment_terms": "Kontant"}, labels) == "Kontant"
    assert payment_terms({}, labels) == "Netto 30 dage"


def test_content_overrides_are_merged(tmp_path):
    path = tmp_path / "pdf_content.json"
    pdf_content.save_pdf_content({"invoice": {"title": "INVOICE"}, "common": {"footer": "Page 1/1"}}, path)

    content = pdf_content.load_pdf_content(path)
    labels = pdf_content.labels_for("invoice", content)

    assert labels["title"] == "INVOICE"
    assert labels["footer"] == "Page 1/1"
    assert labels["number_label"] == "Faktura nr:"


def test_content_falls_back_on_broken_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    assert pdf_content.load_pdf_content(path)["quote"]["title"] == "TILBUD"


def test_settings_from_env():
    settings = Settings.from_env(
        {
            "CRM_DOCUMENTS_BACKEND": "CANVAS",
            "CRM_DOCUMENTS_CURRENCY": "eur",
            "CRM_DOCUMENTS_TAX_PCT": "12.5",
            "CRM_DOCUMENTS_FETCH_TIMEOUT": "soon",
            "CRM_DOCUMENTS_FONT_REGULAR_URL": "https://x/r.ttf",
        }
    )

    assert settings.backend == "canvas"
    assert settings.currency == "EUR"
    assert settings.default_tax_pct == 12.5
    assert settings.fetch_timeout == 10.0
    assert settings.custom_fonts is False
    assert Settings.from_env({"CRM_DOCUMENTS_BACKEND": "weasy"}).backend == "stream"


def test_repository_lookup(tmp_path):
    export = {
        "invoices": [{"id": "inv-1", "invoice_number": "42"}],
        "line_items": [
            {"parent_type": "invoice", "parent_id": "inv-1", "description": "second", "position": 2},
            {"parent_type": "invoice", "parent_id": "inv-1", "description": "first", "position": 1},
            {"parent_type": "quote", "parent_id": "inv-1", "description": "other doc", "position": 1},
        ],
    }
    path = tmp_path / "export.json"
    path.write_text(json.dumps(export), encoding="utf-8")

    repo = load_repository(path)

    assert repo.get_document("invoice", "inv-1")["invoice_number"] == "42"
    assert [r["description"] for r in repo.list_line_items("invoice", "inv-1")] == ["first", "second"]
    with pytest.raises(DocumentNotFound):
        repo.get_document("order", "inv-1")
    assert InMemoryRepository().list_line_items("quote", "nope") == []


def test_validation_reports_but_does_not_fix():
    problems = validate_line_item({"description": " ", "qty": -1, "unit_minor": -5, "discount_pct": 120, "tax_rate_pct": -1})

    assert [p.field for p in problems] == ["description", "qty", "unit_minor", "discount_pct", "tax_rate_pct"]
    assert validate_line_item({"description": "ok", "qty": 1, "unit_minor": 100}) == []


def test_payload_keys(invoice_payload):
    assert set(invoice_payload) == {
        "doc_type", "id", "title", "number", "issue_date", "extra_value", "currency",
        "company", "contact", "items", "line_totals", "totals", "labels",
        "payment_terms", "notes", "logo_url", "payment_qr_url", "payment_qr_data", "filename",
    }
