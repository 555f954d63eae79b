"""
SiliconFlow Chat Proxy - callSilicium Function

Turns one inbound message into one upstream chat-completion call and
normalizes whatever comes back into a ResponseEnvelope.
"""

from typing import Any, Dict, Optional, Union

import httpx
from pydantic import ValidationError

from src.api.schemas import ProxyRequest, ResponseEnvelope
from src.core.utils.config import SiliconFlowSettings, get_settings
from src.core.utils.logging import get_logger_with_context
from src.infrastructure.llm.failures import (
    EMPTY_RESULT_MESSAGE,
    MISSING_API_KEY_MESSAGE,
    ConfigurationError,
    EmptyResult,
    UpstreamFailure,
    classify_exception,
    extract_error_message,
    failure_details,
    failure_status,
)
from src.infrastructure.llm.siliconflow_client import SiliconFlowClient

FUNCTION_NAME = "callSilicium"
ERROR_PREFIX = "Call failed: "

logger = get_logger_with_context(module="call_silicium")


def failure_to_envelope(failure: Union[UpstreamFailure, EmptyResult]) -> ResponseEnvelope:
    """Failure envelope for a classified upstream outcome."""
    if isinstance(failure, EmptyResult):
        return ResponseEnvelope.fail(EMPTY_RESULT_MESSAGE)
    return ResponseEnvelope.fail(
        f"{ERROR_PREFIX}{extract_error_message(failure)}",
        code=failure_status(failure),
        details=failure_details(failure),
    )


def completion_to_envelope(body: Dict[str, Any]) -> ResponseEnvelope:
    """Map a 2xx upstream body onto the envelope."""
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        return failure_to_envelope(EmptyResult(body=body))

    choice = choices[0] if isinstance(choices[0], dict) else {}
    message = choice.get("message")
    content = message.get("content") if isinstance(message, dict) else None
    text = choice.get("text")
    finish_reason = choice.get("finish_reason")

    # Only plain strings are relayed; structured content parts become ""
    if not (isinstance(content, str) and content):
        content = text if isinstance(text, str) else ""

    usage = body.get("usage")
    return ResponseEnvelope.ok(
        data=content,
        usage=usage if isinstance(usage, dict) else None,
        finish_reason=finish_reason if isinstance(finish_reason, str) else None,
    )


def invalid_event_message(exc: ValidationError) -> str:
    """Readable reason for a rejected event, naming the offending field."""
    errors = exc.errors(include_url=False)
    if any(err["loc"][:1] == ("message",) for err in errors):
        return "message is required"
    err = errors[0]
    field = ".".join(str(part) for part in err["loc"]) or "event"
    return f"invalid {field}: {err['msg']}"


class SiliciumProxy:
    """
    The callSilicium cloud function.

    Configuration is passed in explicitly; the transport can be swapped to
    fake the upstream in tests.
    """

    def __init__(
        self,
        settings: SiliconFlowSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.settings = settings
        self.client = SiliconFlowClient(settings, transport=transport)

    async def handle(self, event: Optional[Dict[str, Any]]) -> ResponseEnvelope:
        """
        Function entry point.

        Args:
            event: {"message": str, "options": {"temperature", "max_tokens"}}

        Returns:
            ResponseEnvelope, never raises
        """
        try:
            request = ProxyRequest.model_validate(event or {})
        except ValidationError as e:
            logger.warning("Rejected invalid event: %s", e.errors(include_url=False))
            return ResponseEnvelope.fail(invalid_event_message(e), code=400)
        return await self.send(request)

    async def send(self, request: ProxyRequest) -> ResponseEnvelope:
        """Forward a validated request to the upstream and normalize the reply."""
        logger.info(
            "Input: %s",
            {
                "message": request.message,
                "options": request.options.model_dump(exclude_none=True),
                "hasApiKey": self.client.has_api_key,
            }
        )

        if not self.client.has_api_key:
            failure = ConfigurationError(message=MISSING_API_KEY_MESSAGE)
            logger.error("Upstream call skipped: %s", failure.message)
            return failure_to_envelope(failure)

        upstream_request = self.client.build_request(
            request.message,
            temperature=request.options.temperature,
            max_tokens=request.options.max_tokens
        )

        try:
            body = await self.client.chat_completion(upstream_request)
        except Exception as e:
            failure = classify_exception(e)
            logger.error(
                "API call failed: %s",
                {
                    "name": type(e).__name__,
                    "message": str(e),
                    "status": getattr(failure, "status", None),
                    "responseData": getattr(failure, "body", None),
                }
            )
            return failure_to_envelope(failure)

        envelope = completion_to_envelope(body)
        if not envelope.success:
            logger.warning("Upstream returned no choices")
        return envelope


# Singleton instance
_proxy: Optional[SiliciumProxy] = None


def get_silicium_proxy() -> SiliciumProxy:
    """Get or create the proxy bound to process-wide settings."""
    global _proxy
    if _proxy is None:
        _proxy = SiliciumProxy(get_settings().siliconflow)
    return _proxy
