"""
Authentication backend — application entry point.
"""

from __future__ import annotations

import logging
import pathlib
import sys

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from api.errors import register_exception_handlers
from api.health import router as health_router
from api.middleware import register_middleware
from auth.routes import router as auth_router
from config.settings import Settings, config
from database.session import init_models

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("sqlalchemy.engine", "aiosqlite", "multipart"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def create_app(settings: Settings = config) -> FastAPI:
    app = FastAPI(
        title="Auth Service",
        version="1.0.0",
        description="User registration, login and password reset.",
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app, settings)

    # Routes
    app.include_router(health_router, prefix=f"{API_PREFIX}/health")
    app.include_router(auth_router, prefix=f"{API_PREFIX}/auth")

    public_dir = pathlib.Path(__file__).resolve().parent / "public"
    if public_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(public_dir), html=True), name="public")

    @app.on_event("startup")
    async def on_startup():
        logger.warning("Environment > %s", settings.environment)
        await init_models()
        logger.info(
            "Server running > http://%s:%d%s/health",
            settings.host, settings.port, API_PREFIX,
        )

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
