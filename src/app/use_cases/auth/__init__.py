"""
Authentication Use Cases

Password reset business logic.
"""

from .request_password_reset_use_case import RequestPasswordResetUseCase
from .reset_password_use_case import ResetPasswordUseCase
from .dtos import (
    PasswordResetSettings,
    RequestContext,
    RequestPasswordResetResponse,
    ResetPasswordResponse,
)

__all__ = [
    # Use Cases
    "RequestPasswordResetUseCase",
    "ResetPasswordUseCase",
    # DTOs - Inputs
    "RequestContext",
    "PasswordResetSettings",
    # DTOs - Responses
    "RequestPasswordResetResponse",
    "ResetPasswordResponse",
]
