from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.auth_audit_log_repository import IAuthAuditLogRepository
from src.domain.entities import AuthAuditLog


class AuthAuditLogRepository(IAuthAuditLogRepository):
    """AuthAuditLog repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entry: AuthAuditLog) -> AuthAuditLog:
        """Append an audit log entry (immutable)"""
        self.session.add(entry)
        await self.session.flush()
        return entry
