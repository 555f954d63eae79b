"""
SiliconFlow Chat Proxy - Upstream Failure Classification

Every way an upstream call can go wrong is reduced to one of a few tagged
shapes so that the human-readable message can be picked by a pure function.
"""

from typing import Any, Literal, Optional, Union

import httpx
from pydantic import BaseModel

FALLBACK_ERROR_MESSAGE = "Request failed"
EMPTY_RESULT_MESSAGE = "No valid reply received"
MISSING_API_KEY_MESSAGE = "API key not set"


class ConfigurationError(BaseModel):
    """Detected locally before any network I/O."""
    kind: Literal["configuration"] = "configuration"
    message: str


class NetworkError(BaseModel):
    """Transport failure or timeout; no HTTP status available."""
    kind: Literal["network"] = "network"
    message: str = ""


class UpstreamError(BaseModel):
    """Non-2xx reply from the upstream service."""
    kind: Literal["upstream"] = "upstream"
    status: int
    body: Any = None
    message: str = ""


class EmptyResult(BaseModel):
    """Well-formed reply without any choices."""
    kind: Literal["empty"] = "empty"
    body: Any = None


UpstreamFailure = Union[ConfigurationError, NetworkError, UpstreamError]


def _nonempty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def extract_error_message(failure: UpstreamFailure) -> str:
    """
    Pick the most useful message for a failure.

    Priority:
        1. body.error.message from the upstream reply
        2. body.message from the upstream reply
        3. the message of the underlying error
        4. a fixed fallback
    """
    body = getattr(failure, "body", None)
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            message = _nonempty_str(error.get("message"))
            if message:
                return message
        message = _nonempty_str(body.get("message"))
        if message:
            return message
    return _nonempty_str(failure.message) or FALLBACK_ERROR_MESSAGE


def failure_status(failure: UpstreamFailure) -> int:
    """HTTP status to report; 500 when the upstream never answered."""
    if isinstance(failure, UpstreamError) and failure.status:
        return failure.status
    return 500


def failure_details(failure: UpstreamFailure) -> Any:
    """Raw upstream error payload, or an empty object."""
    body = getattr(failure, "body", None)
    if body is None or body == "":
        return {}
    return body


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def classify_exception(exc: Exception) -> UpstreamFailure:
    """Map an exception raised around the upstream call to a failure variant."""
    if isinstance(exc, httpx.HTTPStatusError):
        return UpstreamError(
            status=exc.response.status_code,
            body=_response_body(exc.response),
            message=str(exc),
        )
    if isinstance(exc, httpx.TimeoutException):
        return NetworkError(message=str(exc) or "Request timed out")
    return NetworkError(message=str(exc))
