"""
SiliconFlow Chat Proxy - Request/Response Schemas
Inbound function payload and the fixed response envelope.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class ProxyOptions(BaseModel):
    """Per-call sampling options. Anything else (e.g. model) is dropped."""
    model_config = ConfigDict(extra="ignore")

    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


class ProxyRequest(BaseModel):
    """Payload of one callSilicium invocation."""
    model_config = ConfigDict(extra="ignore")

    message: str = Field(..., min_length=1)
    options: ProxyOptions = Field(default_factory=ProxyOptions)


class ResponseEnvelope(BaseModel):
    """
    Result shape returned by every operation.

    success=True carries data and never error; success=False carries error
    and never data. Unknown fields from a function reply are kept.
    """
    model_config = ConfigDict(extra="allow")

    success: bool
    data: Optional[str] = None
    usage: Optional[Dict[str, Any]] = None
    finish_reason: Optional[str] = None
    error: Optional[str] = None
    code: Optional[int] = None
    details: Optional[Any] = None

    @model_validator(mode="after")
    def check_outcome_fields(self) -> "ResponseEnvelope":
        if self.success:
            if self.data is None or self.error is not None:
                raise ValueError("successful envelope requires data and no error")
        elif self.error is None or self.data is not None:
            raise ValueError("failed envelope requires error and no data")
        return self

    @classmethod
    def ok(
        cls,
        data: str,
        usage: Optional[Dict[str, Any]] = None,
        finish_reason: Optional[str] = None,
    ) -> "ResponseEnvelope":
        return cls(success=True, data=data, usage=usage, finish_reason=finish_reason)

    @classmethod
    def fail(
        cls,
        error: str,
        code: Optional[int] = None,
        details: Optional[Any] = None,
    ) -> "ResponseEnvelope":
        return cls(success=False, error=error, code=code, details=details)

    def to_payload(self) -> Dict[str, Any]:
        """Wire form: absent fields are omitted rather than sent as null."""
        return self.model_dump(exclude_none=True)
