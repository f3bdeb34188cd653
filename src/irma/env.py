from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, SecretStr, field_validator

from .infrastructure.http.http_client import parse_base_url


class Settings(BaseModel):
    """Typed client settings built from environment variables."""

    irma_server_url: str
    irma_token: Optional[SecretStr] = None
    http_timeout: float = 10.0

    @field_validator("irma_server_url")
    @classmethod
    def validate_irma_server_url(cls, v: str) -> str:
        if not v:
            raise ValueError("IRMA server URL cannot be empty")
        return parse_base_url(v)

    @field_validator("http_timeout")
    @classmethod
    def validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("HTTP timeout must be positive")
        return v


def get_settings() -> Settings:
    """Return typed settings instance sourced from env vars."""
    irma_server_url = os.environ.get("IRMA_SERVER_URL")
    if not irma_server_url:
        raise ValueError("IRMA_SERVER_URL is required")
    return Settings(
        irma_server_url=irma_server_url,
        irma_token=os.environ.get("IRMA_TOKEN") or None,
        http_timeout=float(os.environ.get("IRMA_HTTP_TIMEOUT", "10.0")),
    )
