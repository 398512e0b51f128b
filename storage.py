"""JSON document helpers shared by the question bank and the content stores.

Reads are tolerant: a missing, unreadable or malformed document is an empty
collection. Writes rewrite the whole document; there is no locking, so two
writers racing on the same file lose one of the updates.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from errors import StorageFailure

logger = logging.getLogger("estuda-api.storage")

Document = Union[Dict[str, Any], List[Any]]


def _items_of(data: Any, key: Optional[str]) -> Optional[List[Any]]:
    if isinstance(data, list):
        return data
    if key and isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key]
    return None


def read_items(p: Path, key: Optional[str] = None) -> List[Dict[str, Any]]:
    """Return the dict records held by document ``p``.

    The document is either a bare list or, when ``key`` is given, an object
    holding the list under ``key``.
    """
    if not p.is_file():
        logger.debug("Document %s not found; treating as empty", p)
        return []
    try:
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Could not read %s, treating as empty: %s", p, e)
        return []

    items = _items_of(data, key)
    if items is None:
        logger.warning("Unexpected root in %s, treating as empty", p)
        return []
    return [obj for obj in items if isinstance(obj, dict)]


def load_for_write(p: Path, key: Optional[str] = None) -> Tuple[Document, List[Any]]:
    """Load ``p`` ahead of a rewrite; returns ``(document, items)``.

    Unlike :func:`read_items`, a document that exists but cannot be parsed
    raises :class:`StorageFailure` so it is never overwritten.
    """
    if not p.exists():
        if key:
            doc: Document = {key: []}
            return doc, doc[key]
        doc = []
        return doc, doc
    try:
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Refusing to rewrite unreadable document %s: %s", p, e)
        raise StorageFailure(f"Não foi possível ler {p.name}")

    items = _items_of(data, key)
    if items is None:
        if key and isinstance(data, dict) and key not in data:
            data[key] = []
            return data, data[key]
        logger.error("Refusing to rewrite %s: unexpected root", p)
        raise StorageFailure(f"Formato inesperado em {p.name}")
    return data, items


def write_document(p: Path, doc: Document) -> None:
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        with p.open("w", encoding="utf-8") as f:
            json.dump(doc, f, indent=2, ensure_ascii=False)
            f.write("\n")
    except OSError as e:
        logger.error("Failed to write %s: %s", p, e)
        raise StorageFailure(f"Não foi possível gravar {p.name}")
