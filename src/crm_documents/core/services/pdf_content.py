from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)

PDF_CONTENT_PATH = Path(__file__).resolve().parents[2] / "data" / "pdf_content.json"

COMMON_LABELS: Dict[str, str] = {
    "from": "Fra:",
    "to": "Til:",
    "col_description": "Beskrivelse",
    "col_qty": "Antal",
    "col_unit": "Enhedspris",
    "col_total": "Total",
    "no_items": "Ingen linjeposter fundet",
    "subtotal": "Subtotal:",
    "tax": "Moms:",
    "total": "TOTAL:",
    "terms": "Betalingsbetingelser",
    "default_terms": "Netto 30 dage",
    "notes": "Noter",
    "default_notes": "Tak for din forretning!",
    "discount_suffix": "rabat",
    "footer": "Side 1/1",
    "company_fallback": "Virksomhed",
    "customer_fallback": "Kunde",
    "address_fallback": "Adresse ikke angivet",
}

DEFAULT_CONTENT: Dict[str, dict] = {
    "invoice": {
        "title": "FAKTURA",
        "number_label": "Faktura nr:",
        "date_label": "Dato:",
        "extra_label": "Forfaldsdato:",
        "extra_fallback": "Ikke angivet",
        "number_prefix": "INV-",
    },
    "quote": {
        "title": "TILBUD",
        "number_label": "Tilbud nr:",
        "date_label": "Dato:",
        "extra_label": "Gyldig til:",
        "extra_fallback": "-",
        "number_prefix": "QUO-",
    },
    "order": {
        "title": "ORDRE",
        "number_label": "Ordre nr:",
        "date_label": "Ordredato:",
        "extra_label": "Valuta:",
        "extra_fallback": "DKK",
        "number_prefix": "ORD-",
    },
    "common": COMMON_LABELS,
}


def load_pdf_content(path: Path | None = None) -> dict:
    """Defaults merged with the JSON overrides (per document type and `common`)."""
    content = copy.deepcopy(DEFAULT_CONTENT)
    target = path or PDF_CONTENT_PATH
    if not target.exists():
        return content
    try:
        overrides = json.loads(target.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable PDF content file %s: %s", target, exc)
        return content
    if not isinstance(overrides, dict):
        return content
    for section, values in overrides.items():
        if isinstance(values, dict):
            content.setdefault(section, {}).update({str(k): str(v) for k, v in values.items()})
    return content


def labels_for(doc_type: str, content: dict | None = None) -> dict:
    content = content or load_pdf_content()
    merged = dict(content.get("common", {}))
    merged.update(content.get(doc_type, {}))
    return merged


def save_pdf_content(data: dict, path: Path | None = None) -> Path:
    target = path or PDF_CONTENT_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    return target
