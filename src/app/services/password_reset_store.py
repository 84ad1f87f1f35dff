"""
Password Reset Store

Persistence contract used by the password reset use cases. Implementations
must run consume_reset_token as one transaction holding an exclusive lock on
the matched token row, so that concurrent redemptions of the same token
serialize and at most one of them succeeds.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from src.domain.entities import AuthAuditLog, PasswordResetToken, User


class ConsumeResult(BaseModel):
    """Outcome of consume_reset_token"""

    ok: bool
    user_id: Optional[UUID] = None
    reason: Optional[str] = None


class IPasswordResetStore(ABC):
    """Password reset store interface - application layer"""

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        pass

    @abstractmethod
    async def create_reset_token(
        self, user_id: UUID, token_hash: str, expires_at: datetime
    ) -> PasswordResetToken:
        """Insert a reset token. Duplicate hashes are allowed."""
        pass

    @abstractmethod
    async def consume_reset_token(
        self, token_hash: str, new_password_hash: str, now: datetime
    ) -> ConsumeResult:
        """
        Atomically validate the newest token with this hash, set the owner's
        password hash and mark the token used.

        Returns ok=False with reason "invalid_or_expired" when no token matches
        or the token is used or expired; user_id is set when a token matched.
        Unexpected failures roll back and propagate.
        """
        pass

    @abstractmethod
    async def insert_audit_log(self, entry: AuthAuditLog) -> None:
        """Append an audit log entry"""
        pass
