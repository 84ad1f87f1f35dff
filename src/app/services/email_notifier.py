from abc import ABC, abstractmethod


class IEmailNotifier(ABC):
    """Outgoing email interface - application layer"""

    @abstractmethod
    async def send_reset_email(self, to: str, reset_link: str) -> None:
        """Deliver a password reset link. May raise on provider errors."""
        pass
