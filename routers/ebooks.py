from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from content import ContentStore, ebook_details, ebooks_in_category, related_ebooks
from deps.stores import get_ebook_store
from errors import NotFound

router = APIRouter(prefix="/api/ebooks", tags=["ebooks"])


def _get_or_404(store: ContentStore, ebook_id: str) -> Dict[str, Any]:
    ebook = store.get(ebook_id)
    if ebook is None:
        raise NotFound("Ebook não encontrado")
    return ebook


@router.get("")
def list_ebooks(store: ContentStore = Depends(get_ebook_store)):
    return {"success": True, "data": store.list()}


# declared before /{ebook_id}/related so /category/related lists a category
@router.get("/category/{categoria}")
def list_by_category(categoria: str, store: ContentStore = Depends(get_ebook_store)):
    return {"success": True, "data": ebooks_in_category(store.list(), categoria)}


@router.get("/{ebook_id}")
def get_ebook(ebook_id: str, store: ContentStore = Depends(get_ebook_store)):
    return {"success": True, "data": ebook_details(_get_or_404(store, ebook_id))}


@router.get("/{ebook_id}/related")
def get_related(ebook_id: str, store: ContentStore = Depends(get_ebook_store)):
    ebook = _get_or_404(store, ebook_id)
    return {"success": True, "data": related_ebooks(store.list(), ebook)}


@router.post("", status_code=201)
def create_ebook(
    payload: Dict[str, Any] = Body(...),
    store: ContentStore = Depends(get_ebook_store),
):
    return {"success": True, "data": store.append(payload)}
