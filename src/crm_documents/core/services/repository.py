"""
Read access to stored documents and their line items.

The hosted database client lives outside this package; anything that implements
`DocumentRepository` can feed the handler. `InMemoryRepository` backs tests and
the CLI (loaded from a JSON export).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Mapping, Optional, Protocol

from crm_documents.core.errors import DocumentNotFound

TABLES = {"invoice": "invoices", "quote": "quotes", "order": "orders"}


class DocumentRepository(Protocol):
    def get_document(self, doc_type: str, doc_id: str) -> Mapping: ...

    def list_line_items(self, doc_type: str, doc_id: str) -> list[Mapping]: ...


class InMemoryRepository:
    def __init__(self, tables: Optional[Mapping[str, Iterable[Mapping]]] = None):
        tables = tables or {}
        self.documents: dict[str, dict[str, Mapping]] = {}
        for doc_type, table in TABLES.items():
            self.documents[doc_type] = {str(row.get("id")): row for row in tables.get(table, []) or []}
        self.line_items: list[Mapping] = list(tables.get("line_items", []) or [])

    def get_document(self, doc_type: str, doc_id: str) -> Mapping:
        row = self.documents.get(doc_type, {}).get(str(doc_id))
        if row is None:
            raise DocumentNotFound(doc_type, doc_id)
        return row

    def list_line_items(self, doc_type: str, doc_id: str) -> list[Mapping]:
        rows = [
            row
            for row in self.line_items
            if row.get("parent_type") == doc_type and str(row.get("parent_id")) == str(doc_id)
        ]
        return sorted(rows, key=lambda row: row.get("position") or 0)


def load_repository(path: Path) -> InMemoryRepository:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object with document tables")
    return InMemoryRepository(data)
