from abc import ABC, abstractmethod

from src.domain.entities import AuthAuditLog


class IAuthAuditLogRepository(ABC):
    """AuthAuditLog repository interface - application layer"""

    @abstractmethod
    async def create(self, entry: AuthAuditLog) -> AuthAuditLog:
        """Append an audit log entry (immutable)"""
        pass
