"""
Password Reset Domain Enums

Enumeration types used by the reset entities and use cases.
"""

from enum import Enum


class AuditEventType(str, Enum):
    """Security events written to the auth audit log"""

    password_reset_requested = "password_reset_requested"
    password_reset_failed = "password_reset_failed"
    password_reset_completed = "password_reset_completed"


class ResetFailureReason(str, Enum):
    """Audit detail values for failed or rejected reset attempts"""

    email_not_found = "email_not_found"
    weak_password = "weak_password"
    invalid_or_expired = "invalid_or_expired"
