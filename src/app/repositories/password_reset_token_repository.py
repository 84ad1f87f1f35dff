from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.domain.entities import PasswordResetToken


class IPasswordResetTokenRepository(ABC):
    """PasswordResetToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        pass

    @abstractmethod
    async def get_latest_by_token_hash_for_update(
        self, token_hash: str
    ) -> Optional[PasswordResetToken]:
        """
        Get the newest token with this hash and lock it until the transaction ends.

        Newest means latest created_at, ties broken by insertion order.
        """
        pass

    @abstractmethod
    async def mark_used_if_unused(self, token_id: int, used_at: datetime) -> bool:
        """
        Set used_at on the token only while it is still unset.

        Returns False when another transaction marked it first.
        """
        pass
