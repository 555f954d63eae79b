"""Health check endpoints."""

from fastapi import APIRouter

from src.core.utils.config import get_settings

router = APIRouter(tags=["Health"])
settings = get_settings()


@router.get("/health")
async def health_check():
    """Simple health check for the function host."""
    return {"status": "healthy", "version": "1.0.0"}


@router.get("/health/detailed")
async def detailed_health():
    """Detailed health check including upstream configuration."""
    upstream = settings.siliconflow

    return {
        "status": "healthy",
        "version": "1.0.0",
        "environment": settings.environment,
        "services": {
            "siliconflow": {
                "base_url": upstream.base_url,
                "model": upstream.model_name,
                "has_api_key": bool(upstream.api_key)
            }
        }
    }
