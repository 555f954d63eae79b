"""
SiliconFlow Chat Proxy - FastAPI Application
Hosts the callSilicium cloud function over HTTP.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.core.utils.config import get_settings
from src.core.utils.logging import get_logger_with_context
from src.api.routes import health, functions

logger = get_logger_with_context(module="main")
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting SiliconFlow chat proxy...")

    # Log configuration (hide sensitive data)
    upstream = settings.siliconflow
    logger.info(f"Upstream: {upstream.completions_url}")
    logger.info(f"Model: {upstream.model_name}")
    if upstream.api_key:
        logger.info("API key configured")
    else:
        logger.warning("SILICIUM_KEY is not set; every call will fail until it is configured")

    logger.info("SiliconFlow chat proxy started.")

    yield

    logger.info("Shutdown complete.")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        description="Cloud-function proxy for the SiliconFlow chat-completion API",
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json"
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(functions.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "src.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )
