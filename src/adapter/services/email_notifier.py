import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from config import parse_bool
from src.app.services.email_notifier import IEmailNotifier

logger = logging.getLogger(__name__)

RESET_EMAIL_SUBJECT = "Restablecer contraseña"

RESET_EMAIL_TEXT = """Recibimos una solicitud para restablecer tu contraseña.

Usa este link para continuar: {reset_link}

Si no solicitaste el cambio, ignora este correo."""

RESET_EMAIL_HTML = """<p>Recibimos una solicitud para restablecer tu contraseña.</p>
<p><a href="{reset_link}">Restablecer contraseña</a></p>
<p>Si no solicitaste el cambio, ignora este correo.</p>"""


class LogEmailNotifier(IEmailNotifier):
    """Development provider: writes the reset link to the log instead of mailing it"""

    async def send_reset_email(self, to: str, reset_link: str) -> None:
        logger.info(f"Password reset email to={to} reset_link={reset_link}")


class SmtpEmailNotifier(IEmailNotifier):
    """SMTP provider. smtplib is blocking, so each send runs in a worker thread."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        secure: Optional[bool] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        from_email: str = "no-reply@miapp.com",
        timeout: int = 10,
    ):
        self.host = host
        self.port = port
        # Implicit TLS on 465, STARTTLS elsewhere unless configured
        self.secure = secure if secure is not None else port == 465
        self.user = user
        self.password = password
        self.from_email = from_email
        self.timeout = timeout

    def build_message(self, to: str, reset_link: str) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = RESET_EMAIL_SUBJECT
        message["From"] = self.from_email
        message["To"] = to
        message.attach(MIMEText(RESET_EMAIL_TEXT.format(reset_link=reset_link), "plain", "utf-8"))
        message.attach(MIMEText(RESET_EMAIL_HTML.format(reset_link=reset_link), "html", "utf-8"))
        return message

    def _send(self, message: MIMEMultipart) -> None:
        if self.secure:
            server = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)

        with server:
            if not self.secure:
                server.starttls()
            if self.user:
                server.login(self.user, self.password or "")
            server.send_message(message)

    async def send_reset_email(self, to: str, reset_link: str) -> None:
        message = self.build_message(to, reset_link)
        await asyncio.to_thread(self._send, message)
        logger.info(f"Password reset email sent via {self.host}:{self.port}")


def create_email_notifier(config) -> IEmailNotifier:
    """
    Build the notifier selected by EMAIL_PROVIDER.

    Defaults to smtp when SMTP_HOST is configured, otherwise log. Asking for
    smtp without SMTP_HOST falls back to log with a warning.
    """
    provider = config.EMAIL_PROVIDER or ("smtp" if config.SMTP_HOST else "log")

    if provider == "log":
        return LogEmailNotifier()

    if not config.SMTP_HOST:
        logger.warning("SMTP_HOST not configured, falling back to log email mode.")
        return LogEmailNotifier()

    return SmtpEmailNotifier(
        host=config.SMTP_HOST,
        port=int(config.SMTP_PORT),
        secure=parse_bool(config.SMTP_SECURE),
        user=config.SMTP_USER,
        password=config.SMTP_PASS,
        from_email=config.EMAIL_FROM,
    )
