"""
Mail delivery for the Email Agent.
"""

from .email_service import (
    APP_PASSWORD_HINT,
    Attachment,
    EmailConfig,
    EmailConfigError,
    EmailData,
    EmailResult,
    EmailService,
    SmtpSettings,
    plain_text_to_html
)

__all__ = [
    'APP_PASSWORD_HINT',
    'Attachment',
    'EmailConfig',
    'EmailConfigError',
    'EmailData',
    'EmailResult',
    'EmailService',
    'SmtpSettings',
    'plain_text_to_html'
]
