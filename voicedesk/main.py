"""FastAPI application instance and startup hooks."""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from voicedesk.core import Settings, get_logger, get_settings
from voicedesk.core.errors import NotFoundError, RemoteGatewayError, ValidationError
from voicedesk.core.logger import init_logging
from voicedesk.integrations.voice_platform import get_voice_gateway
from voicedesk.routers import (
    bots_router,
    knowledge_bases_router,
    reservations_router,
    rooms_router,
    tools_router,
)

LOGGER = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = settings or get_settings()
    init_logging(level=settings.log_level, log_dir=settings.log_dir)

    app = FastAPI(title="Voice Desk", version="0.1.0")
    app.include_router(knowledge_bases_router)
    app.include_router(bots_router)
    app.include_router(reservations_router)
    app.include_router(rooms_router)
    app.include_router(tools_router)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(RemoteGatewayError)
    async def remote_handler(request: Request, exc: RemoteGatewayError) -> JSONResponse:
        LOGGER.error("Unhandled voice platform failure on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.get("/health", include_in_schema=False)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.on_event("shutdown")
    def close_gateway() -> None:
        if get_voice_gateway.cache_info().currsize:
            get_voice_gateway().close()

    LOGGER.info("FastAPI application initialised")
    return app


app = create_app()
