from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from campaign_scout.api.routes.campaigns import router as campaigns_router
from campaign_scout.api.routes.relay import router as relay_router
from campaign_scout.api.routes.research import router as research_router
from campaign_scout.api.routes.system import router as system_router
from campaign_scout.core.config import get_settings
from campaign_scout.core.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(_: FastAPI):
    settings = get_settings()
    missing: list[str] = []
    if not settings.songstats_key_valid:
        missing.append("SONGSTATS_API_KEY")
    if not settings.tracklists_configured:
        missing.append("TRACKLISTS_API_KEY")

    if missing:
        logger.warning("Providers without usable keys (demo data will be served): %s", ", ".join(missing))

    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    application = FastAPI(
        title="Campaign Scout",
        version="1.0",
        lifespan=app_lifespan,
    )

    allowed_origins_set = {
        "http://localhost:5173",
        "http://localhost:8000",
        "http://127.0.0.1:8000",
    }
    if settings.CORS_ORIGINS:
        allowed_origins_set.update(str(origin).rstrip("/") for origin in settings.CORS_ORIGINS)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(allowed_origins_set),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.include_router(research_router)
    application.include_router(campaigns_router)
    application.include_router(relay_router)
    application.include_router(system_router)

    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled exception at %s", request.url.path, exc_info=True, extra={"path": request.url.path})
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "msg": "An internal system error occurred. Please check server logs.",
            },
        )

    @application.get("/")
    def read_root() -> dict[str, str]:
        return {"status": "System Operational", "message": "Campaign Scout Backend is Running"}

    return application


app = create_app()
