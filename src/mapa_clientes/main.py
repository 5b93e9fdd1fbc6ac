"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from .api.routes import clients, distribution_centers, health, legacy, map
from .config import configure_logging, settings
from .db.supabase import ClientStore
from .exceptions import MapaClientesError

logger = logging.getLogger(__name__)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(MapaClientesError)
    async def handle_domain_error(request: Request, exc: MapaClientesError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path}: {exc.detail}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        message = errors[0].get("msg", "Solicitud inválida") if errors else "Solicitud inválida"
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Error {request.method} {request.url.path}")
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": "Error interno"})


def create_app(store: Optional[ClientStore] = None) -> FastAPI:
    """Build the app; ``store`` overrides the Supabase store built from settings."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        active_store = store or ClientStore()
        active_store.open()
        app.state.store = active_store
        logger.info(
            f"{settings.app_name} ready (tables: {settings.clients_table}, {settings.legacy_table})"
        )
        try:
            yield
        finally:
            active_store.close()

    configure_logging()
    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    _register_error_handlers(app)

    @app.get("/", include_in_schema=False)
    def index() -> FileResponse:
        return FileResponse(settings.static_dir / "index.html")

    app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")
    app.include_router(health.router)
    app.include_router(distribution_centers.router)
    app.include_router(map.router)
    app.include_router(clients.router)
    app.include_router(legacy.router)
    return app


app = create_app()
