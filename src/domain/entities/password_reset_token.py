"""
PasswordResetToken Entity

One password reset attempt.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class PasswordResetToken(SQLModel, table=True):
    """
    PasswordResetToken entity - single-use password reset tokens.

    Business Rules:
    - Token is stored only as the SHA-256 hash of the secret sent by email
    - Valid while used_at is null and expires_at is in the future
    - used_at is set exactly once; used or expired tokens never become valid again
    - Several rows may share a hash; the newest one (created_at, then id) wins
    - Issuing a token does not invalidate earlier ones
    """

    __tablename__ = "password_reset_tokens"

    # Auto-increment id keeps insertion order for created_at ties
    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", index=True)
    token_hash: str = Field(max_length=64)  # SHA-256 output

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime, nullable=True))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_password_reset_token_hash", "token_hash"),
        Index("idx_password_reset_expires_at", "expires_at"),
    )

    def is_valid(self, now: datetime) -> bool:
        return self.used_at is None and self.expires_at > now
