"""
SiliconFlow Chat Proxy - SiliconFlow HTTP Client
Talks to the hosted chat-completion API via its OpenAI-compatible endpoint
"""

import asyncio
import json
import httpx
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field

from src.core.utils.config import SiliconFlowSettings
from src.core.utils.logging import get_logger_with_context, mask_headers

logger = get_logger_with_context(module="siliconflow_client")


class ChatMessage(BaseModel):
    """Chat message model."""
    role: str
    content: str


class ChatCompletionRequest(BaseModel):
    """OpenAI-compatible chat completion request."""
    model: str
    messages: List[ChatMessage] = Field(..., min_length=2, max_length=2)
    temperature: float
    max_tokens: int
    stream: bool = False


class SiliconFlowClient:
    """
    HTTP client for the SiliconFlow chat-completion API.

    Each call opens its own connection; nothing is shared between calls.
    """

    def __init__(
        self,
        settings: SiliconFlowSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.settings = settings
        # Per-phase limits; the whole POST is additionally capped by settings.timeout
        self.timeout = httpx.Timeout(settings.timeout)
        self.deadline = settings.timeout
        self._transport = transport

    @property
    def has_api_key(self) -> bool:
        return bool(self.settings.api_key)

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers."""
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.api_key}",
            "Accept": "application/json"
        }

    def build_request(
        self,
        message: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> ChatCompletionRequest:
        """
        Build the upstream request for a single user message.

        Args:
            message: The caller's text
            temperature: Sampling temperature (defaults to config)
            max_tokens: Maximum tokens to generate (defaults to config)

        Returns:
            Request with one system entry followed by one user entry
        """
        return ChatCompletionRequest(
            model=self.settings.model_name,
            messages=[
                ChatMessage(role="system", content=self.settings.system_prompt),
                ChatMessage(role="user", content=message),
            ],
            temperature=temperature if temperature is not None else self.settings.temperature,
            max_tokens=max_tokens if max_tokens is not None else self.settings.max_tokens,
            stream=False
        )

    async def chat_completion(self, request: ChatCompletionRequest) -> Dict[str, Any]:
        """
        Create a chat completion (non-streaming).

        Raises:
            httpx.HTTPStatusError: upstream answered with a non-2xx status
            httpx.HTTPError: transport failure, or timeout (whole call capped at settings.timeout)

        Returns:
            Parsed response body, or an empty dict when it is not a JSON object
        """
        headers = self._get_headers()
        payload = request.model_dump()

        logger.info(
            "Outbound request: %s",
            {
                "url": self.settings.completions_url,
                "method": "POST",
                "headers": mask_headers(headers),
                "requestData": json.dumps(payload, ensure_ascii=False, indent=2),
            }
        )

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await asyncio.wait_for(
                    client.post(
                        self.settings.completions_url,
                        headers=headers,
                        json=payload
                    ),
                    timeout=self.deadline
                )
            except asyncio.TimeoutError:
                raise httpx.TimeoutException(
                    f"Request timed out after {self.deadline:g}s",
                    request=httpx.Request("POST", self.settings.completions_url)
                ) from None
            logger.info("API response status: %s", response.status_code)
            logger.debug("API response headers: %s", dict(response.headers))
            response.raise_for_status()

            try:
                data = response.json()
            except ValueError:
                logger.warning("API response body is not JSON: %r", response.text[:200])
                return {}

            logger.info("API response body: %s", json.dumps(data, ensure_ascii=False, indent=2))
            return data if isinstance(data, dict) else {}
