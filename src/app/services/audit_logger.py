import logging
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from src.app.services.password_reset_store import IPasswordResetStore
from src.domain.entities import AuditEventType, AuthAuditLog
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


class RequestContext(BaseModel):
    """Caller information recorded in the audit log"""

    ip: Optional[str] = None
    user_agent: Optional[str] = None


class AuditLogger:
    """
    Best-effort writer for the auth audit log.

    A failed write is logged as a warning and reported as an err Result; it
    never raises into the calling flow.
    """

    def __init__(self, store: IPasswordResetStore):
        self.store = store

    async def record(
        self,
        event_type: AuditEventType,
        success: bool,
        user_id: Optional[UUID] = None,
        email: Optional[str] = None,
        context: Optional[RequestContext] = None,
        detail: Optional[str] = None,
    ) -> Result[None]:
        context = context or RequestContext()
        entry = AuthAuditLog(
            event_type=event_type.value,
            user_id=user_id,
            email=email,
            ip=context.ip,
            user_agent=context.user_agent,
            success=success,
            detail=detail,
        )

        try:
            await self.store.insert_audit_log(entry)
        except Exception as exc:
            logger.warning(f"Failed to write audit log ({event_type.value}): {exc!r}")
            return Return.err(Error("AUDIT_LOG_FAILED", "Failed to write audit log"))

        return Return.ok(None)
