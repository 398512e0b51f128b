# routers/health.py
from fastapi import APIRouter

from deps.stores import SettingsDep

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health():
    return {"ok": True}


@router.get("/storage")
def health_storage(settings: SettingsDep):
    checks = {
        "data_dir": settings.data_dir.is_dir(),
        "upload_dir": settings.upload_dir.is_dir(),
    }
    return {"ok": all(checks.values()), **checks}
