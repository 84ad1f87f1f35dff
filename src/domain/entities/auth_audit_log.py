"""
AuthAuditLog Entity

Append-only log of password reset security events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class AuthAuditLog(SQLModel, table=True):
    """
    AuthAuditLog entity - immutable record of an authentication event.

    Business Rules:
    - Immutable (never updated or deleted by this service)
    - Written for every outcome, successful or not
    - user_id is not a foreign key: unknown emails are logged too
    """

    __tablename__ = "auth_audit_logs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    event_type: str = Field(max_length=100)  # see AuditEventType
    user_id: Optional[UUID] = Field(default=None)
    email: Optional[str] = Field(default=None, max_length=255)
    ip: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    success: bool = Field(default=True)
    detail: Optional[str] = Field(default=None, max_length=255)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_auth_audit_created_at", "created_at"),
        Index("idx_auth_audit_event_type", "event_type"),
        Index("idx_auth_audit_user_id", "user_id"),
    )
