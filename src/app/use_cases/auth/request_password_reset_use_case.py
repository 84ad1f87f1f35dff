"""
Request Password Reset Use Case

Issues a single-use reset token and emails the reset link.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from src.app.services.audit_logger import AuditLogger
from src.app.services.email_notifier import IEmailNotifier
from src.app.services.password_reset_store import IPasswordResetStore
from src.app.services.reset_token import build_reset_link, generate_reset_token, hash_reset_token
from src.domain.base import utcnow
from src.domain.entities import AuditEventType, ResetFailureReason
from src.libs.result import Error, Result, Return
from .dtos import PasswordResetSettings, RequestContext, RequestPasswordResetResponse

logger = logging.getLogger(__name__)


class RequestPasswordResetUseCase:
    """
    Use case for requesting password reset.

    Business Rules:
    - Token is 32 random bytes, hex encoded; only its SHA-256 hash is stored
    - Token expires after settings.token_ttl (1 hour by default)
    - Earlier tokens of the same user stay valid until used or expired
    - No email enumeration: unknown emails get the same response, no token and no email
    - Email and audit failures are logged and never change the response
    """

    def __init__(
        self,
        store: IPasswordResetStore,
        notifier: IEmailNotifier,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[PasswordResetSettings] = None,
        now: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.notifier = notifier
        self.audit_logger = audit_logger or AuditLogger(store)
        self.settings = settings or PasswordResetSettings()
        self.now = now

    async def _send_email(self, to: str, reset_link: str) -> Result[None]:
        try:
            await self.notifier.send_reset_email(to, reset_link)
        except Exception as exc:
            logger.warning(f"Failed to send reset email: {exc!r}")
            return Return.err(Error("EMAIL_SEND_FAILED", "Failed to send reset email"))
        return Return.ok(None)

    async def execute(
        self, email: str, context: Optional[RequestContext] = None
    ) -> RequestPasswordResetResponse:
        """
        Execute request password reset use case.

        Args:
            email: Email address the reset was requested for
            context: Caller ip / user agent for the audit log

        Returns:
            RequestPasswordResetResponse, identical whether or not the email exists

        Raises:
            InvalidUrlError: reset_url_base is misconfigured
            Store errors while looking up the user or saving the token
        """
        context = context or RequestContext()

        user = await self.store.get_user_by_email(email)

        if user is None:
            await self.audit_logger.record(
                AuditEventType.password_reset_requested,
                success=False,
                email=email,
                context=context,
                detail=ResetFailureReason.email_not_found.value,
            )
            return RequestPasswordResetResponse()

        token = generate_reset_token()
        token_hash = hash_reset_token(token)
        expires_at = self.now() + self.settings.token_ttl

        await self.store.create_reset_token(user.id, token_hash, expires_at)
        reset_link = build_reset_link(self.settings.reset_url_base, token)

        await self._send_email(user.email, reset_link)

        await self.audit_logger.record(
            AuditEventType.password_reset_requested,
            success=True,
            user_id=user.id,
            email=user.email,
            context=context,
        )

        return RequestPasswordResetResponse()
