from __future__ import annotations

import logging
import re
import shutil
import time
from pathlib import Path

from fastapi import APIRouter, File, Request, UploadFile

from deps.stores import SettingsDep
from errors import StorageFailure, ValidationFailed

logger = logging.getLogger("estuda-api.upload")

router = APIRouter(prefix="/api", tags=["upload"])

_UNSAFE = re.compile(r"[^\w.-]+")


def stored_name(original: str) -> str:
    """``<ms timestamp>-<original name>`` with path parts and odd characters removed."""
    base = _UNSAFE.sub("_", Path(original or "").name).strip("._")
    if not base:
        raise ValidationFailed("Nome de arquivo inválido")
    return f"{int(time.time() * 1000)}-{base}"


@router.post("/upload")
def upload_file(request: Request, settings: SettingsDep, file: UploadFile = File(...)):
    name = stored_name(file.filename)
    dest = settings.upload_dir / name
    try:
        settings.upload_dir.mkdir(parents=True, exist_ok=True)
        with dest.open("wb") as out:
            shutil.copyfileobj(file.file, out)
    except OSError as e:
        logger.error("Failed to store upload %s: %s", dest, e)
        raise StorageFailure("Erro ao salvar arquivo")
    finally:
        file.file.close()

    logger.info("Stored upload %s", dest)
    return {"success": True, "url": str(request.url_for("uploads", path=name))}
