"""
SiliconFlow Chat Proxy - Configuration Management
Upstream credentials and cloud invocation settings
"""

from functools import lru_cache
from typing import Optional, List
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SiliconFlowSettings(BaseSettings):
    """Upstream chat-completion configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SILICONFLOW__",
        extra="ignore",
        populate_by_name=True
    )

    base_url: str = Field(
        default="https://api.siliconflow.com/v1",
        description="SiliconFlow API root (OpenAI-compatible)"
    )
    # SILICIUM_KEY, or SILICONFLOW__API_KEY; never a bare API_KEY
    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SILICIUM_KEY", "SILICONFLOW__API_KEY"),
        description="Bearer token for the upstream API"
    )
    model_name: str = Field(
        default="deepseek-ai/deepseek-vl2",
        description="Fixed upstream model identifier"
    )
    system_prompt: str = Field(
        default="",
        description="Static system instruction sent before every user message"
    )
    max_tokens: int = Field(default=1500, ge=1)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    timeout: float = Field(default=30.0, gt=0)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure base_url ends with /v1 for OpenAI compatibility."""
        v = v.rstrip("/")
        if not v.endswith("/v1"):
            v = f"{v}/v1"
        return v

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"


class CloudSettings(BaseSettings):
    """Cloud capability used by the client wrapper to reach the proxy function."""

    model_config = SettingsConfigDict(env_prefix="CLOUD__", extra="ignore")

    # Unset means the host has no cloud capability
    functions_url: Optional[str] = Field(
        default=None,
        description="Base URL of the function host, e.g. http://localhost:8000/api/v1/functions"
    )
    env: str = Field(default="yongshi-8gr2j4wf0508bf4d")
    trace_user: bool = Field(default=True)
    timeout: float = Field(default=35.0, gt=0)

    @field_validator("functions_url")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        return v.rstrip("/") if v else None


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    app_name: str = Field(default="silicium-proxy")
    environment: str = Field(default="production")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # API
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    cors_origins: List[str] = Field(
        default=["http://localhost", "http://localhost:80"]
    )

    # Nested settings
    siliconflow: SiliconFlowSettings = Field(default_factory=SiliconFlowSettings)
    cloud: CloudSettings = Field(default_factory=CloudSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
