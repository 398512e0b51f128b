import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings
from errors import ApiError

# Routers
from routers.banners import router as banners_router
from routers.ebooks import router as ebooks_router
from routers.health import router as health_router
from routers.quiz import router as quiz_router
from routers.upload import router as upload_router

logger = logging.getLogger("estuda-api")
logging.basicConfig(level=logging.INFO)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()) if x != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Requisição inválida"


def _register_error_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(ApiError)
    async def api_error(request: Request, exc: ApiError):
        return JSONResponse(status_code=exc.kind.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400, content={"success": False, "error": _validation_message(exc)}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        body = {"success": False, "error": "Erro interno do servidor"}
        if not settings.production:
            body["detail"] = f"{type(exc).__name__}: {exc}"
        return JSONResponse(status_code=500, content=body)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(title="Estuda API")
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_error_handlers(app, settings)

    @app.get("/", response_class=PlainTextResponse)
    def root():
        return "API Estuda está online!"

    # Register routers
    app.include_router(quiz_router)  # /api/quiz/...
    app.include_router(ebooks_router)  # /api/ebooks/...
    app.include_router(banners_router)  # /api/banners
    app.include_router(upload_router)  # /api/upload
    app.include_router(health_router)  # /health/...

    # covers, PDFs and other uploaded files
    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")
    return app


app = create_app()


def run() -> None:
    settings = app.state.settings
    logger.info("Serving on http://localhost:%s", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
