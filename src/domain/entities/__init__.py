"""
Password Reset Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import AuditEventType, ResetFailureReason

# Export all entities
from .user import User
from .password_reset_token import PasswordResetToken
from .auth_audit_log import AuthAuditLog

__all__ = [
    # Enums
    "AuditEventType",
    "ResetFailureReason",
    # Entities
    "User",
    "PasswordResetToken",
    "AuthAuditLog",
]
