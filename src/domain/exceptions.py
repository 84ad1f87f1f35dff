"""
Password Reset Errors

Raised by the reset use cases and the token codec. The API layer maps them to
HTTP responses through the shared Error value.
"""

from src.libs.result import Error


class PasswordResetError(Exception):
    """Base class for expected password reset failures"""

    code = "PASSWORD_RESET_ERROR"
    default_message = "Password reset failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_error(self) -> Error:
        return Error(self.code, self.message)


class WeakPasswordError(PasswordResetError):
    """New password does not satisfy the password policy"""

    code = "WEAK_PASSWORD"
    default_message = "Password does not meet requirements"


class InvalidOrExpiredTokenError(PasswordResetError):
    """Token is unknown, already used, or expired (deliberately indistinguishable)"""

    code = "INVALID_OR_EXPIRED_TOKEN"
    default_message = "Invalid or expired token"


class InvalidUrlError(ValueError):
    """Reset link base URL is not an absolute http(s) URL"""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Invalid reset link base URL: {url!r}")
