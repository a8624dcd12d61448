from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

from .addresses import normalize_addresses
from .attachments import PathLike, build_attachments
from .config import PLAIN_TEXT_FALLBACK, EmailConfig, ServerProfile
from .error_text import describe_error
from .errors import AddressParseError, ConfigMissingError, MailError, NoRecipientError, TransportError
from .models import MessageBuilder
from .transport import MailTransport, SmtpTransport, configure_transport

logger = logging.getLogger(__name__)

NO_MAIL_SERVER_CONFIGURATION = "Cannot send email, no mail server configuration available"
NO_EMAIL_DATA = "Cannot send email, no email data provided."


class EmailSender:
    """
    Sends generated report files as attachments of a single email.

    Recipients in EmailConfig are used as given; every call creates its own
    transport handle through transport_factory.
    """

    def __init__(self, transport_factory: Callable[[], MailTransport] = SmtpTransport):
        self._transport_factory = transport_factory

    def send_attachment_email(
        self,
        attachments: Optional[Sequence[PathLike]],
        profile: Optional[ServerProfile],
        config: Optional[EmailConfig],
        html: Optional[str] = None,
    ) -> None:
        if profile is None:
            raise ConfigMissingError("ServerProfile", NO_MAIL_SERVER_CONFIGURATION)
        if config is None:
            raise ConfigMissingError("EmailConfig", NO_EMAIL_DATA)

        builder = MessageBuilder(attachments=build_attachments(attachments))

        transport = self._transport_factory()
        configure_transport(profile, transport)

        for field_name in ("to", "cc", "bcc"):
            raw = getattr(config, field_name)
            try:
                addresses = normalize_addresses(raw)
            except AddressParseError as exc:
                raise AddressParseError(f"AddressException: {field_name}: {exc}") from exc
            getattr(builder, field_name).extend(addresses)

        if not builder.has_recipient():
            raise NoRecipientError(config.subject, config.from_address)

        if config.from_address is not None:
            builder.from_address = config.from_address
        builder.subject = (profile.subject_prefix or "") + config.subject
        builder.text_body = PLAIN_TEXT_FALLBACK
        if html:
            builder.html_body = html
            builder.resource_root = Path.cwd()

        message = builder.build()

        logger.info(
            "Sending '%s' with %s attachment(s) to %s recipient(s) via %s",
            message.subject,
            len(message.attachments),
            len(message.recipients),
            profile.host,
        )
        try:
            transport.send(message)
        except MailError:
            raise
        except Exception as exc:  # noqa: BLE001
            text = describe_error(exc)
            logger.error("Sending the email failed: %s", text)
            raise TransportError(f"Sending the email caused an exception: {text}") from exc
        logger.info("Mail sent: %s", message.subject)


def send_attachment_email(
    attachments: Optional[Sequence[PathLike]],
    profile: Optional[ServerProfile],
    config: Optional[EmailConfig],
    html: Optional[str] = None,
) -> None:
    EmailSender().send_attachment_email(attachments, profile, config, html)
