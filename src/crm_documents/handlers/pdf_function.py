"""
Serverless entry point: POST {"type": "invoice"|"quote"|"order", "data": {"id": ...}}
-> JSON with the base64-encoded PDF (or the HTML string when "format": "html").
"""

from __future__ import annotations

import base64
import json
import logging
from typing import Any, Mapping, Optional

from crm_documents.config import Settings
from crm_documents.core.errors import DocumentNotFound, UnsupportedDocumentType
from crm_documents.core.services.documents import build_document_payload, ensure_doc_type
from crm_documents.core.services.repository import DocumentRepository
from crm_documents.core.validation import validate_line_item
from crm_documents.utils.pdf.renderers.html_renderer import render_html
from crm_documents.utils.pdf.renderers.pdf_renderer import render_document

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def _response(status: int, body: Any = "") -> dict:
    headers = dict(CORS_HEADERS)
    if not isinstance(body, str):
        headers["Content-Type"] = "application/json"
        body = json.dumps(body, ensure_ascii=False)
    return {"statusCode": status, "headers": headers, "body": body}


def _error(status: int, error: str, details: str = "") -> dict:
    body = {"error": error}
    if details:
        body["details"] = details
    return _response(status, body)


def _load_line_items(repository: DocumentRepository, doc_type: str, doc_id: str) -> list[Mapping]:
    try:
        items = list(repository.list_line_items(doc_type, doc_id) or [])
    except Exception:
        logger.exception("Line items for %s %s could not be loaded; rendering without them", doc_type, doc_id)
        return []
    for idx, item in enumerate(items):
        for problem in validate_line_item(item):
            logger.warning("%s %s line %d: %s", doc_type, doc_id, idx + 1, problem.message)
    return items


def handle(event: Mapping, repository: DocumentRepository, settings: Optional[Settings] = None) -> dict:
    settings = settings or Settings.from_env()
    method = str(event.get("httpMethod") or "").upper()
    if method == "OPTIONS":
        return _response(200, "")
    if method != "POST":
        return _error(405, "Method not allowed")

    try:
        request = json.loads(event.get("body") or "{}")
    except ValueError as exc:
        return _error(400, "Invalid JSON body", str(exc))
    if not isinstance(request, dict):
        return _error(400, "Invalid JSON body")

    doc_type = request.get("type")
    data = request.get("data") or {}
    doc_id = data.get("id") if isinstance(data, dict) else None
    if not doc_type or not doc_id:
        return _error(400, "Missing required fields: type and data.id")

    try:
        kind = ensure_doc_type(doc_type)
    except UnsupportedDocumentType as exc:
        return _error(400, "Unsupported document type", str(exc))

    logger.info("Rendering %s %s", kind, doc_id)
    try:
        record = repository.get_document(kind, str(doc_id))
    except DocumentNotFound as exc:
        logger.error("%s", exc)
        return _error(404, f"{kind.capitalize()} not found", str(exc))
    except Exception as exc:
        logger.exception("Query for %s %s failed", kind, doc_id)
        return _error(500, "Failed to fetch document", str(exc))

    line_items = _load_line_items(repository, kind, str(doc_id))

    try:
        payload = build_document_payload(kind, record, line_items, settings)
        if request.get("format") == "html":
            html = render_html(payload)
            return _response(200, {"success": True, "html": html, "filename": payload["filename"].replace(".pdf", ".html")})
        pdf_bytes = render_document(payload, settings=settings)
    except Exception as exc:
        logger.exception("PDF generation failed for %s %s", kind, doc_id)
        return _error(500, "PDF generation failed", str(exc))

    return _response(
        200,
        {
            "success": True,
            "pdf": base64.b64encode(pdf_bytes).decode("ascii"),
            "filename": payload["filename"],
            "size": len(pdf_bytes),
            "contentType": "application/pdf",
        },
    )
