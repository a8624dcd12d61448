"""Send generated report files as email attachments over SMTP."""

from .config import EmailConfig, ServerProfile
from .errors import (
    AddressParseError,
    ConfigMissingError,
    MailError,
    NoAttachmentsError,
    NoRecipientError,
    TransportError,
)
from .sender import EmailSender, send_attachment_email

__all__ = [
    "AddressParseError",
    "ConfigMissingError",
    "EmailConfig",
    "EmailSender",
    "MailError",
    "NoAttachmentsError",
    "NoRecipientError",
    "ServerProfile",
    "TransportError",
    "send_attachment_email",
]
