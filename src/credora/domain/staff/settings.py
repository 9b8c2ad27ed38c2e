"""Configuration for staff account removal.

Loaded from environment variables. Follows the Pydantic BaseSettings pattern
used by the infrastructure packages.

Environment Variables:
    STAFF_DELETION_PROTECTED_ROLE: Role that must keep at least one live holder
    STAFF_DELETION_DEADLINE_SECONDS: Budget for one deletion run
    STAFF_DELETION_VERIFY_AFTER_REMOVAL: Re-read both planes after removal
    STAFF_DELETION_RESIDUAL_PROCEDURE: Database routine run as the last step
    STAFF_DELETION_REPARENT_MEMBERS_TO: Account that inherits assigned members
    STAFF_DELETION_TRACK_DELETED_EMAILS: Record released emails
    STAFF_DELETION_EMAIL_REUSE_COOLDOWN_HOURS: Cooldown before an email is reusable
    STAFF_DELETION_AUDIT_TO_DATABASE: Write audit events to ``audit_log``
    IDENTITY_BASE_URL: Hosted auth service base URL
    IDENTITY_SERVICE_ROLE_KEY: Admin key for the auth service
    IDENTITY_TIMEOUT_SECONDS: Per-request timeout ceiling
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from credora.foundation.domain.staff_value_objects import StaffRole


class StaffDeletionSettings(BaseSettings):
    """Deletion cascade configuration.

    Example:
        >>> settings = StaffDeletionSettings()
        >>> settings.protected_role
        <StaffRole.SUPER_ADMIN: 'super_admin'>
        >>> settings.residual_procedure
        'cleanup_user_references_simple'
    """

    model_config = SettingsConfigDict(
        env_prefix="STAFF_DELETION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    protected_role: StaffRole = Field(
        default=StaffRole.SUPER_ADMIN,
        description="Role that must always keep at least one live holder",
    )
    deadline_seconds: float | None = Field(
        default=30.0,
        gt=0,
        le=600,
        description="Time budget for one deletion run; None disables the deadline",
    )
    verify_after_removal: bool = Field(
        default=True,
        description="Confirm both planes are empty after the final removals",
    )
    residual_procedure: str | None = Field(
        default="cleanup_user_references_simple",
        description="Database routine run as the last, best-effort step",
    )
    reparent_members_to: str | None = Field(
        default=None,
        description="Account that inherits members assigned to the removed officer",
    )
    track_deleted_emails: bool = Field(
        default=True,
        description="Record released emails with a reuse cooldown",
    )
    email_reuse_cooldown_hours: int = Field(
        default=24,
        ge=0,
        le=24 * 365,
        description="Hours before a released email may be registered again",
    )
    audit_to_database: bool = Field(
        default=True,
        description="Write audit events to the audit_log table instead of the log stream",
    )

    @field_validator("residual_procedure", "reparent_members_to", mode="before")
    @classmethod
    def _blank_is_none(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class IdentitySettings(BaseSettings):
    """Hosted auth service admin API configuration.

    Example:
        >>> IdentitySettings().is_configured()
        False
    """

    model_config = SettingsConfigDict(
        env_prefix="IDENTITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(default="", description="Auth service base URL")
    service_role_key: str = Field(
        default="",
        repr=False,
        description="Admin key for the auth service",
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Per-request timeout ceiling",
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def is_configured(self) -> bool:
        return bool(self.base_url and self.service_role_key)


@lru_cache(maxsize=1)
def get_staff_deletion_settings() -> StaffDeletionSettings:
    """Get singleton StaffDeletionSettings instance.

    Clear cache with ``get_staff_deletion_settings.cache_clear()`` for testing.
    """
    return StaffDeletionSettings()


@lru_cache(maxsize=1)
def get_identity_settings() -> IdentitySettings:
    return IdentitySettings()
