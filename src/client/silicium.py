"""
SiliconFlow Chat Proxy - Client Service

Usage:
    init = init_cloud(get_settings().cloud)
    if init.available:
        service = SiliciumService(init.handle)
        result = await service.send_message("Help me review this week's time log")
        print(result.data)

Every call returns a ResponseEnvelope; nothing is raised to the caller.
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError

from src.api.schemas import ResponseEnvelope
from src.client.cloud import CloudHandle, init_cloud
from src.core.utils.config import Settings, SiliconFlowSettings, get_settings
from src.core.utils.logging import get_logger_with_context
from src.functions.call_silicium import FUNCTION_NAME
from src.infrastructure.llm.failures import FALLBACK_ERROR_MESSAGE

logger = get_logger_with_context(module="silicium_client")

INVALID_REPLY_MESSAGE = f"Invalid reply from {FUNCTION_NAME}"


class SiliciumService:
    """Application-facing wrapper around the callSilicium function."""

    def __init__(self, cloud: CloudHandle, defaults: Optional[SiliconFlowSettings] = None):
        self.cloud = cloud
        # Same source the proxy reads its defaults from
        self.defaults = defaults or get_settings().siliconflow

    def build_options(self, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Merge caller options with the configured defaults."""
        options = options or {}
        temperature = options.get("temperature")
        max_tokens = options.get("max_tokens")
        return {
            "temperature": temperature if temperature is not None else self.defaults.temperature,
            "max_tokens": max_tokens if max_tokens is not None else self.defaults.max_tokens,
            "model": self.defaults.model_name
        }

    async def send_message(
        self,
        message: str,
        options: Optional[Dict[str, Any]] = None
    ) -> ResponseEnvelope:
        """
        Send a message through the proxy function.

        Args:
            message: User text
            options: Optional temperature and max_tokens (configured defaults
                0.7 and 1500)

        Returns:
            The function's envelope as returned, extra fields included. A
            local failure envelope replaces it if the function could not be
            invoked or its reply is not a valid envelope.
        """
        logger.info("=== Calling SiliconFlow API ===")
        logger.info(f"Message: {message}")
        logger.info(f"Options: {options}")

        try:
            logger.info(f"Invoking cloud function {FUNCTION_NAME}...")
            result = await self.cloud.call_function(
                FUNCTION_NAME,
                {"message": message, "options": self.build_options(options)}
            )
            logger.info(f"Cloud function succeeded, response: {result}")
        except Exception as e:
            logger.error(f"SiliconFlow API call failed: {type(e).__name__}: {e}")
            return ResponseEnvelope.fail(str(e) or FALLBACK_ERROR_MESSAGE)

        try:
            return ResponseEnvelope.model_validate(result)
        except ValidationError as e:
            logger.error(f"{INVALID_REPLY_MESSAGE}: {e.errors(include_url=False)}")
            return ResponseEnvelope.fail(INVALID_REPLY_MESSAGE)


def create_silicium_service(settings: Optional[Settings] = None) -> Optional[SiliciumService]:
    """Initialize the cloud runtime and build a service, or None if unavailable."""
    settings = settings or get_settings()
    init = init_cloud(settings.cloud)
    if not init.available:
        return None
    return SiliciumService(init.handle, defaults=settings.siliconflow)
