import base64
import json
import logging

import pytest

from crm_documents.core.services.repository import InMemoryRepository
from crm_documents.handlers.pdf_function import CORS_HEADERS, handle


@pytest.fixture
def repository(invoice_record, line_records):
    rows = [dict(r, parent_type="invoice", parent_id=invoice_record["id"]) for r in line_records]
    return InMemoryRepository(
        {
            "invoices": [invoice_record],
            "quotes": [{"id": "q-1", "quote_number": "T-9", "valid_until": "2026-12-01"}],
            "line_items": rows,
        }
    )


def _post(body):
    return {"httpMethod": "POST", "body": body if isinstance(body, str) else json.dumps(body)}


def test_preflight(repository, settings):
    response = handle({"httpMethod": "OPTIONS"}, repository, settings)

    assert response["statusCode"] == 200
    assert response["body"] == ""
    assert response["headers"]["Access-Control-Allow-Origin"] == CORS_HEADERS["Access-Control-Allow-Origin"]


def test_get_is_not_allowed(repository, settings):
    response = handle({"httpMethod": "GET"}, repository, settings)

    assert response["statusCode"] == 405
    assert json.loads(response["body"]) == {"error": "Method not allowed"}


@pytest.mark.parametrize(
    "body",
    [
        "{broken",
        "[1, 2]",
        {"type": "invoice"},
        {"data": {"id": "x"}},
        {"type": "invoice", "data": "x"},
    ],
)
def test_bad_requests(repository, settings, body):
    assert handle(_post(body), repository, settings)["statusCode"] == 400


def test_missing_fields_message(repository, settings):
    body = json.loads(handle(_post({"type": "quote"}), repository, settings)["body"])

    assert body["error"] == "Missing required fields: type and data.id"


def test_unsupported_type(repository, settings):
    response = handle(_post({"type": "receipt", "data": {"id": "1"}}), repository, settings)

    assert response["statusCode"] == 400
    assert "receipt" in json.loads(response["body"])["details"]


def test_unknown_document_is_404(repository, settings):
    response = handle(_post({"type": "invoice", "data": {"id": "nope"}}), repository, settings)

    assert response["statusCode"] == 404
    assert json.loads(response["body"])["error"] == "Invoice not found"


def test_invoice_pdf(repository, settings, invoice_record):
    response = handle(_post({"type": "invoice", "data": {"id": invoice_record["id"]}}), repository, settings)

    assert response["statusCode"] == 200
    assert response["headers"]["Content-Type"] == "application/json"
    body = json.loads(response["body"])
    pdf = base64.b64decode(body["pdf"])
    assert body["success"] is True
    assert body["filename"] == "invoice-2026-0042.pdf"
    assert body["contentType"] == "application/pdf"
    assert body["size"] == len(pdf)
    assert pdf.startswith(b"%PDF")
    assert b"(3.062,50 kr.) Tj" in pdf


def test_quote_html(repository, settings):
    response = handle(_post({"type": "QUOTE", "data": {"id": "q-1"}, "format": "html"}), repository, settings)

    body = json.loads(response["body"])
    assert response["statusCode"] == 200
    assert body["filename"] == "quote-T-9.html"
    assert "TILBUD" in body["html"]
    assert "Ingen linjeposter fundet" in body["html"]


class _BrokenRepository(InMemoryRepository):
    def get_document(self, doc_type, doc_id):
        raise ConnectionError("database unavailable")


class _NoLinesRepository(InMemoryRepository):
    def list_line_items(self, doc_type, doc_id):
        raise ConnectionError("timeout")


def test_repository_failure_is_500(settings):
    response = handle(_post({"type": "order", "data": {"id": "o-1"}}), _BrokenRepository(), settings)

    assert response["statusCode"] == 500
    assert json.loads(response["body"]) == {"error": "Failed to fetch document", "details": "database unavailable"}


def test_line_item_failure_renders_empty_document(settings, invoice_record, caplog):
    repository = _NoLinesRepository({"invoices": [invoice_record]})

    response = handle(_post({"type": "invoice", "data": {"id": invoice_record["id"]}}), repository, settings)

    assert response["statusCode"] == 200
    assert "rendering without them" in caplog.text


def test_invalid_line_items_are_logged_not_rejected(settings, caplog):
    repository = InMemoryRepository(
        {
            "orders": [{"id": "o-2"}],
            "line_items": [{"parent_type": "order", "parent_id": "o-2", "description": "Retur", "qty": -1, "unit_minor": 100}],
        }
    )

    with caplog.at_level(logging.WARNING):
        response = handle(_post({"type": "order", "data": {"id": "o-2"}}), repository, settings)

    assert response["statusCode"] == 200
    assert "order o-2 line 1" in caplog.text


def test_render_failure_is_500(repository, settings, invoice_record, monkeypatch):
    from crm_documents.handlers import pdf_function

    def explode(payload, settings=None):
        raise RuntimeError("out of paper")

    monkeypatch.setattr(pdf_function, "render_document", explode)

    response = handle(_post({"type": "invoice", "data": {"id": invoice_record["id"]}}), repository, settings)

    assert response["statusCode"] == 500
    assert json.loads(response["body"]) == {"error": "PDF generation failed", "details": "out of paper"}
