from __future__ import annotations


class MailError(Exception):
    """Raised when an attachment email cannot be composed or sent."""


class ConfigMissingError(MailError):
    """Raised when the server profile or the email config is absent."""

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind


class NoAttachmentsError(MailError):
    """Raised when there is nothing to attach."""


class AddressParseError(MailError, ValueError):
    """Raised when a recipient list contains a malformed address."""


class NoRecipientError(MailError):
    """Raised when to, cc and bcc all resolve to zero addresses."""

    def __init__(self, subject: str | None, from_address: str | None):
        super().__init__(
            "At least one receiver address required, could not send email: "
            f"'{subject}' from '{from_address}'"
        )
        self.subject = subject
        self.from_address = from_address


class TransportError(MailError):
    """Raised when the SMTP server or the network rejects the message."""
