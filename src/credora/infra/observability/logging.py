"""Structured logging configuration using structlog.

Environment-aware structured logging:
- JSON output in production, colored console output otherwise
- Request ID binding from RequestIdMiddleware via context variables
- Redaction of credentials before rendering
- Standard-library loggers (used throughout the domain packages) rendered
  through the same processor chain, including their ``extra`` fields

Usage:
    # During application startup
    from credora.infra.observability.logging import configure_logging
    configure_logging()

    # Structured logger
    from credora.infra.observability import get_logger
    logger = get_logger(__name__)
    logger.info("staff_deleted", target_id="...")
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from collections.abc import MutableMapping

Processor = structlog.types.Processor

SENSITIVE_FIELDS: frozenset[str] = frozenset(
    {
        "password",
        "token",
        "authorization",
        "api_key",
        "apikey",
        "secret",
        "service_role_key",
        "bearer",
        "credential",
    }
)

REDACTED_VALUE: str = "***REDACTED***"


class LoggingSettings(BaseSettings):
    """Logging configuration settings from environment variables.

    - LOG_LEVEL: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ENVIRONMENT: Environment name (development, staging, production, test)

    Example:
        >>> LoggingSettings(environment="production").use_json_logs
        True
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Minimum log level to output",
    )
    environment: str = Field(
        default="development",
        alias="ENVIRONMENT",
        description="Environment name for format selection",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        if isinstance(v, str):
            return v.upper()
        return str(v)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Reject names the logging module does not know.

        Raises:
            ValueError: If log level is not a valid Python logging level.
        """
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v not in valid_levels:
            msg = f"log_level must be one of {valid_levels}"
            raise ValueError(msg)
        return v

    @property
    def use_json_logs(self) -> bool:
        return self.environment == "production"

    @property
    def log_level_int(self) -> int:
        return getattr(logging, self.log_level, logging.INFO)


class SensitiveDataProcessor:
    """Structlog processor that redacts credential-like fields.

    Redacts values for keys in SENSITIVE_FIELDS (case-insensitive) and for
    keys containing "password", "token" or "secret".

    Example:
        >>> processor = SensitiveDataProcessor()
        >>> processor(None, "info", {"event": "x", "service_role_key": "k"})["service_role_key"]
        '***REDACTED***'
    """

    def __call__(
        self,
        logger: Any,
        method_name: str,
        event_dict: MutableMapping[str, Any],
    ) -> MutableMapping[str, Any]:
        for key in list(event_dict.keys()):
            if self._is_sensitive(key):
                event_dict[key] = REDACTED_VALUE
        return event_dict

    def _is_sensitive(self, key: str) -> bool:
        key_lower = key.lower()
        if key_lower in SENSITIVE_FIELDS:
            return True
        return any(part in key_lower for part in ("password", "token", "secret"))


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached LoggingSettings instance.

    Clear with ``get_logging_settings.cache_clear()`` in tests.
    """
    return LoggingSettings()


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        SensitiveDataProcessor(),
    ]


def _renderer(settings: LoggingSettings) -> Processor:
    if settings.use_json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def configure_logging(settings: LoggingSettings | None = None) -> None:
    """Configure structlog and route standard-library logging through it.

    Should be called once during application startup (in the lifespan hook).

    Args:
        settings: Optional LoggingSettings. Loaded from the environment if omitted.
    """
    if settings is None:
        settings = get_logging_settings()

    processors = _shared_processors()
    processors.append(structlog.processors.format_exc_info)
    processors.append(_renderer(settings))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.log_level_int),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            *_shared_processors(),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.ExtraAdder(),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(settings),
        ],
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(settings.log_level_int)


def get_logger(name: str | None = None) -> structlog.typing.WrappedLogger:
    """Get a structlog logger bound to the given name.

    Args:
        name: Logger name (typically __name__). If None, returns unbound logger.

    Returns:
        Bound structlog logger.
    """
    logger = structlog.get_logger()
    if name is not None:
        logger = logger.bind(logger=name)
    return logger
