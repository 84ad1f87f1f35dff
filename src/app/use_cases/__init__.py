"""
Use Cases

Use cases are organized into domain folders:
- auth/: Password reset flows

Import from subdirectories for better organization.
"""

from .auth import (
    RequestPasswordResetUseCase,
    ResetPasswordUseCase,
)

__all__ = [
    # Auth
    "RequestPasswordResetUseCase",
    "ResetPasswordUseCase",
]
