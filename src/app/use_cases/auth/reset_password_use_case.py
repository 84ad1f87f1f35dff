"""
Reset Password Use Case

Redeems a reset token and sets the new password.
"""

from datetime import datetime
from typing import Callable, Optional

from src.app.services.audit_logger import AuditLogger
from src.app.services.password_hasher import BcryptPasswordHasher
from src.app.services.password_reset_store import IPasswordResetStore
from src.app.services.reset_token import hash_reset_token
from src.domain.base import utcnow
from src.domain.entities import AuditEventType, ResetFailureReason
from src.domain.exceptions import InvalidOrExpiredTokenError, WeakPasswordError
from .dtos import PasswordResetSettings, RequestContext, ResetPasswordResponse

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


class ResetPasswordUseCase:
    """
    Use case for performing a password reset.

    Business Rules:
    - New password must have at least settings.min_password_length characters
      and fit in 72 bytes of UTF-8
    - Token is looked up by its SHA-256 hash; the newest matching token wins
    - Unknown, used and expired tokens are rejected with the same error
    - Password update and marking the token used happen in one store transaction
    - Every outcome is written to the audit log; audit failures are only logged
    """

    def __init__(
        self,
        store: IPasswordResetStore,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[PasswordResetSettings] = None,
        password_hasher: Optional[BcryptPasswordHasher] = None,
        now: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.audit_logger = audit_logger or AuditLogger(store)
        self.settings = settings or PasswordResetSettings()
        self.password_hasher = password_hasher or BcryptPasswordHasher(
            self.settings.password_hash_rounds
        )
        self.now = now

    def _validate_password(self, password: str) -> bool:
        if len(password) < self.settings.min_password_length:
            return False
        if len(password.encode()) > MAX_PASSWORD_BYTES:
            return False
        return True

    async def execute(
        self, token: str, new_password: str, context: Optional[RequestContext] = None
    ) -> ResetPasswordResponse:
        """
        Execute reset password use case.

        Args:
            token: Plain reset token from the emailed link
            new_password: New password to set
            context: Caller ip / user agent for the audit log

        Returns:
            ResetPasswordResponse on success

        Raises:
            WeakPasswordError: new_password fails the password policy
            InvalidOrExpiredTokenError: token unknown, already used, or expired
            Store errors from the consume transaction (rolled back)
        """
        context = context or RequestContext()

        if not self._validate_password(new_password):
            await self.audit_logger.record(
                AuditEventType.password_reset_failed,
                success=False,
                context=context,
                detail=ResetFailureReason.weak_password.value,
            )
            raise WeakPasswordError()

        token_hash = hash_reset_token(token)
        password_hash = await self.password_hasher.hash(new_password)

        result = await self.store.consume_reset_token(token_hash, password_hash, self.now())

        if not result.ok:
            await self.audit_logger.record(
                AuditEventType.password_reset_failed,
                success=False,
                user_id=result.user_id,
                context=context,
                detail=result.reason or ResetFailureReason.invalid_or_expired.value,
            )
            raise InvalidOrExpiredTokenError()

        await self.audit_logger.record(
            AuditEventType.password_reset_completed,
            success=True,
            user_id=result.user_id,
            context=context,
        )

        return ResetPasswordResponse()
