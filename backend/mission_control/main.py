"""FastAPI entrypoint: wires config, container, routes, and lifecycle hooks."""

from __future__ import annotations

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mission_control.api.http.agents import router as agents_router
from mission_control.api.http.crons import router as crons_router
from mission_control.api.http.health import router as health_router
from mission_control.api.http.sessions import router as sessions_router
from mission_control.api.stream.sse import router as sse_router
from mission_control.core.config import Settings
from mission_control.core.container import build_container
from mission_control.core.lifecycle import on_shutdown, on_startup
from mission_control.infra.observability.logger import setup_logging


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level, transcript_level=settings.transcript_log_level)
    container = build_container(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        on_startup(container)
        try:
            yield
        finally:
            on_shutdown()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()],
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.include_router(health_router)
    app.include_router(sessions_router)
    app.include_router(sse_router)
    app.include_router(crons_router)
    app.include_router(agents_router)

    return app


def run() -> None:
    """Console entrypoint: serve the app with uvicorn on the configured host/port."""
    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)
