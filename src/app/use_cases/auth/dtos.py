"""
Password Reset Use Case DTOs (Data Transfer Objects)

Context, settings and response classes for the auth domain.
Provides type safety and clear contracts between layers.
"""

from datetime import timedelta

from pydantic import BaseModel, Field, field_validator

from src.app.services.audit_logger import RequestContext
from src.app.services.reset_token import build_reset_link


# ============================================================================
# Inputs
# ============================================================================


class PasswordResetSettings(BaseModel):
    """Tunables for the password reset flow"""

    token_ttl_ms: int = Field(default=60 * 60 * 1000, gt=0)
    min_password_length: int = Field(default=8, ge=1)
    reset_url_base: str = "https://miapp.com/reset-password"
    password_hash_rounds: int = Field(default=10, ge=4, le=31)

    @field_validator("reset_url_base")
    @classmethod
    def validate_reset_url_base(cls, value: str) -> str:
        # Raises InvalidUrlError for a malformed base
        build_reset_link(value, "token")
        return value

    @property
    def token_ttl(self) -> timedelta:
        return timedelta(milliseconds=self.token_ttl_ms)

    @classmethod
    def from_config(cls, config) -> "PasswordResetSettings":
        return cls(
            token_ttl_ms=config.PASSWORD_RESET_TOKEN_TTL_MS,
            min_password_length=config.PASSWORD_MIN_LENGTH,
            reset_url_base=config.PASSWORD_RESET_URL_BASE,
            password_hash_rounds=config.PASSWORD_HASH_ROUNDS,
        )


# ============================================================================
# Response DTOs
# ============================================================================


class RequestPasswordResetResponse(BaseModel):
    """Response for request password reset use case (identical for unknown emails)"""

    ok: bool = True


class ResetPasswordResponse(BaseModel):
    """Response for reset password use case"""

    ok: bool = True
