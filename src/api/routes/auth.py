from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import ClientError, ServerError
from src.app.use_cases.auth import (
    RequestContext,
    RequestPasswordResetResponse,
    RequestPasswordResetUseCase,
    ResetPasswordResponse,
    ResetPasswordUseCase,
)
from src.depends import get_request_password_reset_use_case, get_reset_password_use_case
from src.domain.exceptions import InvalidOrExpiredTokenError, InvalidUrlError, WeakPasswordError
from src.libs.result import Error

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_request_context(request: Request) -> RequestContext:
    """Client ip and user agent for the audit log"""
    ip: Optional[str] = request.client.host if request.client else None
    return RequestContext(ip=ip, user_agent=request.headers.get("user-agent"))


class ForgotPasswordRequest(BaseModel):
    """
    Forgot password HTTP request payload

    Validates incoming password reset request.
    """

    email: EmailStr = Field(..., description="Account email address")


@router.post(
    "/forgot-password",
    status_code=status.HTTP_200_OK,
    response_model=RequestPasswordResetResponse,
)
async def forgot_password(
    request: ForgotPasswordRequest,
    context: RequestContext = Depends(get_request_context),
    use_case: RequestPasswordResetUseCase = Depends(get_request_password_reset_use_case),
):
    """
    Request Password Reset

    Issues a reset token and emails the reset link.

    Security:
        - No email enumeration (same response for known and unknown emails)
        - Only the SHA-256 hash of the token is stored

    Returns:
        - 200 OK: Always, for any well-formed email
        - 500 Internal Server Error: Server error
    """
    try:
        return await use_case.execute(request.email, context)
    except InvalidUrlError as exc:
        raise ServerError(Error("INVALID_RESET_URL", str(exc)))


class ResetPasswordRequest(BaseModel):
    """
    Reset password HTTP request payload

    Password policy is enforced by the use case so rejections are audited.
    """

    token: str = Field(..., min_length=32, max_length=256, description="Reset token from email")
    new_password: str = Field(..., description="New password")


@router.post(
    "/reset-password",
    status_code=status.HTTP_200_OK,
    response_model=ResetPasswordResponse,
)
async def reset_password(
    request: ResetPasswordRequest,
    context: RequestContext = Depends(get_request_context),
    use_case: ResetPasswordUseCase = Depends(get_reset_password_use_case),
):
    """
    Reset Password

    Redeems a reset token and sets the new password.

    Raises:
        - 400 Bad Request: Weak password, or invalid/used/expired token
        - 500 Internal Server Error: Server error
    """
    try:
        return await use_case.execute(request.token, request.new_password, context)
    except (WeakPasswordError, InvalidOrExpiredTokenError) as exc:
        raise ClientError(exc.to_error(), status_code=status.HTTP_400_BAD_REQUEST)
