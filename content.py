from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from errors import ValidationFailed
from storage import load_for_write, read_items, write_document

logger = logging.getLogger("estuda-api.content")

RELATED_LIMIT = 5

# category -> difficulty shown on the ebook detail page
CATEGORY_LEVELS: Mapping[str, str] = {
    "Programação": "Intermediário",
    "Matemática": "Avançado",
    "Ciências": "Básico",
    "História": "Básico",
    "Línguas": "Intermediário",
}


class ContentStore:
    """List/get/append over a JSON list document (ebooks, banners)."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def list(self) -> List[Dict[str, Any]]:
        return read_items(self.path)

    def get(self, item_id: str) -> Optional[Dict[str, Any]]:
        return next((it for it in self.list() if str(it.get("id")) == item_id), None)

    def append(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        if not data:
            raise ValidationFailed("Corpo da requisição vazio")
        doc, items = load_for_write(self.path)
        existing = {str(it.get("id")) for it in items if isinstance(it, dict)}
        token = int(time.time() * 1000)
        while str(token) in existing:
            token += 1
        record = {**data, "id": str(token)}
        items.append(record)
        write_document(self.path, doc)
        logger.info("Added %s to %s", record["id"], self.path.name)
        return record


def ebook_details(ebook: Dict[str, Any]) -> Dict[str, Any]:
    categoria = ebook.get("categoria")
    tags = [categoria] if categoria else []
    return {
        **ebook,
        "idioma": ebook.get("idioma") or "Português",
        "nivel": CATEGORY_LEVELS.get(categoria, "Básico"),
        "dataPublicacao": ebook.get("dataCriacao") or "2024",
        "tags": tags + ["educação", "aprendizado"],
    }


def _same_category(a: Any, b: Any) -> bool:
    return isinstance(a, str) and isinstance(b, str) and a.strip().lower() == b.strip().lower()


def related_ebooks(ebooks: List[Dict[str, Any]], ebook: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [
        e
        for e in ebooks
        if str(e.get("id")) != str(ebook.get("id"))
        and _same_category(e.get("categoria"), ebook.get("categoria"))
    ][:RELATED_LIMIT]


def ebooks_in_category(ebooks: List[Dict[str, Any]], categoria: str) -> List[Dict[str, Any]]:
    return [e for e in ebooks if _same_category(e.get("categoria"), categoria)]
