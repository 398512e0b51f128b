from fastapi import APIRouter, Depends

from content import ContentStore
from deps.stores import get_banner_store

router = APIRouter(prefix="/api/banners", tags=["banners"])


@router.get("")
def list_banners(store: ContentStore = Depends(get_banner_store)):
    return {"success": True, "data": store.list()}
