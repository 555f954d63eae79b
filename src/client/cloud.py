"""
SiliconFlow Chat Proxy - Cloud Capability

Explicit initialization of the cloud-function runtime used by application
code. Callers get back a CloudInit and must check it before use.
"""

from typing import Any, Dict, Optional

import httpx

from src.core.utils.config import CloudSettings
from src.core.utils.logging import get_logger_with_context

logger = get_logger_with_context(module="cloud")

CLOUD_UNAVAILABLE_MESSAGE = "Cloud capability is not available in this environment"


class CloudInvocationError(Exception):
    """The named function could not be reached or returned garbage."""


class CloudHandle:
    """Initialized cloud runtime: environment id, tracing flag and invoker."""

    def __init__(
        self,
        settings: CloudSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.env = settings.env
        self.trace_user = settings.trace_user
        self.functions_url = settings.functions_url
        self.timeout = httpx.Timeout(settings.timeout)
        self._transport = transport

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "X-Cloud-Env": self.env,
            "X-Trace-User": "true" if self.trace_user else "false"
        }

    async def call_function(self, name: str, data: Dict[str, Any]) -> Any:
        """
        Invoke a named cloud function.

        Args:
            name: Function name, e.g. "callSilicium"
            data: JSON payload passed to the function

        Returns:
            The function's result as decoded JSON

        Raises:
            CloudInvocationError: on any transport, status or decoding failure
        """
        url = f"{self.functions_url}/{name}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, headers=self._get_headers(), json=data)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as e:
            raise CloudInvocationError(str(e)) from e
        except ValueError as e:
            raise CloudInvocationError(f"Invalid response from {name}: {e}") from e


class CloudInit:
    """Outcome of init_cloud: either a handle or the reason there is none."""

    def __init__(self, handle: Optional[CloudHandle] = None, error: Optional[str] = None):
        self.handle = handle
        self.error = error

    @property
    def available(self) -> bool:
        return self.handle is not None


def init_cloud(
    settings: CloudSettings,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> CloudInit:
    """Initialize the cloud runtime; logs and reports failure instead of raising."""
    if not settings.functions_url:
        logger.error(CLOUD_UNAVAILABLE_MESSAGE)
        return CloudInit(error=CLOUD_UNAVAILABLE_MESSAGE)

    logger.info(
        f"Cloud initialized. env={settings.env} traceUser={settings.trace_user} "
        f"functions={settings.functions_url}"
    )
    return CloudInit(handle=CloudHandle(settings, transport=transport))
