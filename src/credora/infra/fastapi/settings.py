"""Application settings for the Credora app factory.

Pydantic Settings for FastAPI configuration and CORS policy.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CORSSettings(BaseSettings):
    """CORS policy configuration.

    Environment variables use the ``CORS_`` prefix (e.g., ``CORS_ALLOW_ORIGINS``).
    Comma-separated strings are parsed into lists.
    """

    model_config = SettingsConfigDict(env_prefix="CORS_", extra="ignore")

    allow_origins: list[str] = Field(default=["*"])
    allow_methods: list[str] = Field(default=["*"])
    allow_headers: list[str] = Field(default=["*"])
    allow_credentials: bool = Field(default=False)
    expose_headers: list[str] = Field(default=["X-Request-ID"])

    @field_validator(
        "allow_origins",
        "allow_methods",
        "allow_headers",
        "expose_headers",
        mode="before",
    )
    @classmethod
    def _parse_comma_separated(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        if isinstance(v, list):
            return v
        return ["*"]

    @model_validator(mode="after")
    def _validate_credentials_with_wildcard(self) -> CORSSettings:
        if self.allow_credentials and self.allow_origins == ["*"]:
            msg = (
                "CORS allow_credentials=True cannot be used with allow_origins=['*']. "
                "Specify explicit origins instead."
            )
            raise ValueError(msg)
        return self


def _default_version() -> str:
    """Resolve the default app version from installed package metadata."""
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("credora")
    except PackageNotFoundError:
        return "0.0.0"


class AppSettings(BaseSettings):
    """Application factory settings.

    Environment variables use the ``APP_`` prefix (e.g., ``APP_TITLE``).
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        extra="ignore",
    )

    title: str = Field(default="Credora Back Office")
    version: str = Field(default_factory=_default_version)
    debug: bool = Field(default=False)
    cors: CORSSettings = Field(default_factory=CORSSettings)
