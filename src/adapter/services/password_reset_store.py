import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.app.services.password_reset_store import ConsumeResult, IPasswordResetStore
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import (
    AuthAuditLog,
    PasswordResetToken,
    ResetFailureReason,
    User,
)

logger = logging.getLogger(__name__)


class SqlPasswordResetStore(IPasswordResetStore):
    """
    Password reset store backed by a UnitOfWork.

    Every operation runs in its own transaction. Reads are committed rather
    than rolled back so returned entities stay loaded after the block exits.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def get_user_by_email(self, email: str) -> Optional[User]:
        async with self.uow:
            user = await self.uow.users.get_by_email(email)
            await self.uow.commit()
            return user

    async def create_reset_token(
        self, user_id: UUID, token_hash: str, expires_at: datetime
    ) -> PasswordResetToken:
        async with self.uow:
            token = await self.uow.password_reset_tokens.create(
                PasswordResetToken(user_id=user_id, token_hash=token_hash, expires_at=expires_at)
            )
            await self.uow.commit()
            return token

    async def consume_reset_token(
        self, token_hash: str, new_password_hash: str, now: datetime
    ) -> ConsumeResult:
        async with self.uow:
            # Row lock held until commit/rollback on backends that support FOR UPDATE
            token = await self.uow.password_reset_tokens.get_latest_by_token_hash_for_update(
                token_hash
            )

            if token is None:
                await self.uow.rollback()
                return ConsumeResult(ok=False, reason=ResetFailureReason.invalid_or_expired.value)

            token_id = token.id
            user_id = token.user_id
            invalid = ConsumeResult(
                ok=False,
                user_id=user_id,
                reason=ResetFailureReason.invalid_or_expired.value,
            )
            if not token.is_valid(now):
                await self.uow.rollback()
                return invalid

            # Claim the token before touching the user; a concurrent consumer that
            # read the same unused row loses here
            if not await self.uow.password_reset_tokens.mark_used_if_unused(token_id, now):
                await self.uow.rollback()
                logger.info(f"Reset token {token_id} already consumed by a concurrent request")
                return invalid

            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                # users.id is a foreign key of the token, so this means a broken row
                raise LookupError(f"User {user_id} referenced by reset token {token_id} not found")

            user.password_hash = new_password_hash
            await self.uow.users.update(user)

            await self.uow.commit()
            logger.info(f"Reset token {token_id} consumed for user {user_id}")
            return ConsumeResult(ok=True, user_id=user_id)

    async def insert_audit_log(self, entry: AuthAuditLog) -> None:
        async with self.uow:
            await self.uow.audit_logs.create(entry)
            await self.uow.commit()
