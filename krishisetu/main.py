"""
FastAPI application entry point.
Challenge: Mount routes, middleware (CORS, Prometheus), error mapping, logging.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from krishisetu.api.router import api_router
from krishisetu.config import get_settings
from krishisetu.core.exceptions import register_exception_handlers
from krishisetu.core.logging import setup_logging
from krishisetu.db.session import engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: report configuration gaps. Shutdown: release pooled connections."""
    if not get_settings().resolved_project_id:
        logger.warning("Firebase project id not configured; authenticated routes will fail")
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)
    app = FastAPI(
        title=settings.app_name,
        description="Crop marketplace: listings, buyer interests, owner adjudication.",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Prometheus metrics at /metrics
    app.mount("/metrics", make_asgi_app())

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")

    @app.get("/")
    async def root():
        return {"message": "Krishi-Setu Server is running"}

    logger.info("%s configured", settings.app_name)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
