"""
Email Service

Validates the sender's mail credentials and delivers one message over SMTP.
Each message carries the plain text body, an HTML rendering of it and any
base64 encoded attachments. Delivery failures are reported through
``EmailResult`` and never raised.
"""

import base64
import binascii
import html
import mimetypes
import re
import smtplib
import ssl
from dataclasses import dataclass, field
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Any, Callable, Dict, List, Optional

from ..config import MailConfig, get_mail_config
from ..utils import get_mail_logger

logger = get_mail_logger()

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

SUPPORTED_SERVICES = ("gmail", "outlook", "smtp")

GMAIL_APP_PASSWORD_LENGTH = 16

APP_PASSWORD_HINT = (
    "Gmail requires an App Password. Enable 2-Step Verification, then create a "
    "16-character App Password under Google Account > Security > App passwords."
)

class EmailConfigError(ValueError):
    """The sender's mail configuration is unusable."""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors

@dataclass
class SmtpSettings:
    host: str
    port: int
    use_ssl: bool

@dataclass
class EmailConfig:
    """Sender credentials and transport choice."""
    service: str = "gmail"
    user: str = ""
    password: str = ""
    host: Optional[str] = None
    port: Optional[int] = None
    secure: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EmailConfig":
        port = data.get("port")
        return cls(
            service=(data.get("service") or "gmail").lower(),
            user=(data.get("user") or "").strip(),
            password=data.get("password") or data.get("pass") or "",
            host=data.get("host") or None,
            port=int(port) if port not in (None, "") else None,
            secure=bool(data.get("secure", False))
        )

    def validation_errors(self) -> List[str]:
        """Everything wrong with this configuration, empty when usable."""
        errors = []

        if self.service not in SUPPORTED_SERVICES:
            errors.append(f"Unsupported email service '{self.service}'")

        if not self.user:
            errors.append("Sender email address is required")
        elif not EMAIL_PATTERN.match(self.user):
            errors.append("Sender email address is not valid")

        if not self.password:
            errors.append("Email password is required")
        elif self.service == "gmail" and (
            len(self.password) != GMAIL_APP_PASSWORD_LENGTH or re.search(r"\s", self.password)
        ):
            errors.append(APP_PASSWORD_HINT)

        if self.port is not None and not 0 < self.port < 65536:
            errors.append("SMTP port must be between 1 and 65535")

        return errors

    def validate(self) -> None:
        errors = self.validation_errors()
        if errors:
            raise EmailConfigError(errors)

    def smtp_settings(self) -> SmtpSettings:
        if self.service == "gmail":
            return SmtpSettings(host="smtp.gmail.com", port=465, use_ssl=True)
        if self.service == "outlook":
            return SmtpSettings(host="smtp-mail.outlook.com", port=587, use_ssl=False)
        return SmtpSettings(
            host=self.host or "smtp.gmail.com",
            port=self.port or 587,
            use_ssl=self.secure
        )

@dataclass
class Attachment:
    filename: str
    content: str
    encoding: str = "base64"

    def payload(self) -> bytes:
        """Decoded attachment bytes.

        Raises:
            ValueError: when the content is not valid base64.
        """
        if self.encoding != "base64":
            return self.content.encode("utf-8")
        try:
            return base64.b64decode(self.content, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Attachment {self.filename} is not valid base64: {e}") from e

@dataclass
class EmailData:
    to: str
    subject: str
    body: str
    attachments: List[Attachment] = field(default_factory=list)

@dataclass
class EmailResult:
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None

def plain_text_to_html(body: str) -> str:
    """Render a plain text body as paragraphs, escaping any markup."""
    escaped = html.escape(body, quote=False)
    rendered = escaped.replace("\n\n", "</p><p>").replace("\n", "<br>")
    return f"<p>{rendered}</p>".replace("<p></p>", "")

def _default_transport(settings: SmtpSettings, timeout: float) -> smtplib.SMTP:
    context = ssl.create_default_context()
    if settings.use_ssl:
        return smtplib.SMTP_SSL(settings.host, settings.port, timeout=timeout, context=context)
    connection = smtplib.SMTP(settings.host, settings.port, timeout=timeout)
    connection.ehlo()
    connection.starttls(context=context)
    connection.ehlo()
    return connection

TransportFactory = Callable[[SmtpSettings, float], Any]

class EmailService:
    """Sends messages for one sender configuration."""

    def __init__(
        self,
        config: EmailConfig,
        mail_config: Optional[MailConfig] = None,
        transport_factory: Optional[TransportFactory] = None
    ):
        self.config = config
        self.mail_config = mail_config or get_mail_config()
        self._transport_factory = transport_factory or _default_transport

    def build_message(self, email: EmailData) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.config.user
        message["To"] = email.to
        message["Subject"] = email.subject
        domain = self.config.user.split("@")[-1] or None
        message["Message-ID"] = make_msgid(domain=domain)

        message.set_content(email.body)
        message.add_alternative(plain_text_to_html(email.body), subtype="html")

        for attachment in email.attachments:
            mime_type, _ = mimetypes.guess_type(attachment.filename)
            maintype, subtype = (mime_type or "application/octet-stream").split("/", 1)
            message.add_attachment(
                attachment.payload(),
                maintype=maintype,
                subtype=subtype,
                filename=attachment.filename
            )

        return message

    def send_email(self, email: EmailData) -> EmailResult:
        """Deliver ``email``. Blocking; bulk callers run it in a worker thread."""
        errors = self.config.validation_errors()
        if errors:
            return EmailResult(success=False, error="; ".join(errors))

        if not EMAIL_PATTERN.match(email.to or ""):
            return EmailResult(success=False, error=f"Invalid recipient address: {email.to}")

        try:
            message = self.build_message(email)
        except ValueError as e:
            return EmailResult(success=False, error=str(e))

        settings = self.config.smtp_settings()
        connection = None
        try:
            connection = self._transport_factory(settings, self.mail_config.timeout_seconds)
            connection.login(self.config.user, self.config.password)
            connection.send_message(message)
        except smtplib.SMTPAuthenticationError as e:
            logger.warning(f"SMTP authentication failed for {self.config.user}: {e}")
            if self.config.service == "gmail":
                return EmailResult(success=False, error=f"Authentication failed. {APP_PASSWORD_HINT}")
            return EmailResult(success=False, error="Authentication failed. Check the email address and password.")
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {email.to}: {e}")
            return EmailResult(success=False, error=str(e) or e.__class__.__name__)
        finally:
            if connection is not None:
                try:
                    connection.quit()
                except (smtplib.SMTPException, OSError):
                    pass

        logger.info(f"Email sent to {email.to}")
        return EmailResult(success=True, message_id=message["Message-ID"])
