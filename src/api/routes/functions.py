"""Cloud function endpoints."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body

from src.core.utils.logging import get_logger_with_context
from src.functions.call_silicium import FUNCTION_NAME, get_silicium_proxy

router = APIRouter(prefix="/api/v1", tags=["Functions"])
logger = get_logger_with_context(module="functions")


@router.get("/status")
async def api_status():
    """API status endpoint."""
    return {
        "status": "operational",
        "version": "1.0.0",
        "functions": [FUNCTION_NAME]
    }


@router.post(f"/functions/{FUNCTION_NAME}")
async def call_silicium(event: Optional[Dict[str, Any]] = Body(default=None)):
    """
    Invoke the callSilicium function.
    Always answers 200; success or failure is carried in the envelope.
    """
    proxy = get_silicium_proxy()
    envelope = await proxy.handle(event)
    if not envelope.success:
        logger.info(f"{FUNCTION_NAME} returned failure: {envelope.error}")
    return envelope.to_payload()
