import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from . import __version__
from .api import health, tokens
from .config import Settings, settings
from .logging_config import setup_logging
from .middleware import RequestLoggingMiddleware
from .services import Services, build_services

logger = logging.getLogger(__name__)


def create_app(config: Optional[Settings] = None, services: Optional[Services] = None) -> FastAPI:
    """Build the gateway. ``services`` replaces the default xrpl.to wiring."""
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.services = services or build_services(config)
        try:
            yield
        finally:
            await app.state.services.aclose()

    app = FastAPI(
        title="LedgerGlow API",
        description="XRPL token explorer backend with cached logos",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(health.router, tags=["Health"])
    app.include_router(tokens.router, tags=["Tokens"])

    @app.get("/api")
    async def root():
        """Root endpoint with basic info"""
        return {
            "name": "LedgerGlow API",
            "version": __version__,
            "docs": "/docs",
            "health": "/healthz",
        }

    # Mounted last so it only sees paths the API does not handle
    if config.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=config.static_dir, html=True), name="static")
    else:
        logger.info("Static directory %s not found, serving the API only", config.static_dir)

    return app


app = create_app()


def run() -> None:
    import uvicorn

    setup_logging()
    logger.info("LedgerGlow server running at http://%s:%s", settings.host, settings.port)
    uvicorn.run(
        "ledgerglow.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    run()
