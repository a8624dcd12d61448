from __future__ import annotations

import logging
import mimetypes
import smtplib
from email.message import EmailMessage
from email.utils import formatdate, make_msgid, parseaddr
from typing import Optional, Protocol

import httpx

from .config import SMTP_TIMEOUT_SECONDS, ServerProfile
from .html_images import embed_images
from .models import ComposedMessage

logger = logging.getLogger(__name__)


class MailTransport(Protocol):
    host: str
    port: Optional[int]
    bounce_address: Optional[str]
    debug: bool
    tls_on_connect: bool

    def set_authentication(self, username: str, password: str) -> None: ...

    def send(self, message: ComposedMessage) -> None: ...


class SmtpTransport:
    """One SMTP delivery per send(); the connection is closed afterwards."""

    def __init__(
        self,
        *,
        timeout: float = SMTP_TIMEOUT_SECONDS,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.host = ""
        self.port: Optional[int] = None
        self.username: Optional[str] = None
        self.password: Optional[str] = None
        self.bounce_address: Optional[str] = None
        self.debug = False
        self.tls_on_connect = False
        self.timeout = timeout
        self._http_transport = http_transport

    def set_authentication(self, username: str, password: str) -> None:
        self.username = username
        self.password = password

    def send(self, message: ComposedMessage) -> None:
        mime = render_message(message, http_transport=self._http_transport)
        envelope_from = self.bounce_address or parseaddr(message.from_address or "")[1]
        if not envelope_from:
            raise smtplib.SMTPException("From address required")

        smtp_cls = smtplib.SMTP_SSL if self.tls_on_connect else smtplib.SMTP
        # port 0 lets smtplib pick 25 (plain) or 465 (SSL)
        with smtp_cls(self.host, self.port or 0, timeout=self.timeout) as server:
            if self.debug:
                server.set_debuglevel(1)
            if self.username and self.password:
                server.login(self.username, self.password)
            server.send_message(mime, from_addr=envelope_from, to_addrs=message.recipients)
        logger.info("SMTP server %s accepted the message", self.host)


def configure_transport(profile: ServerProfile, transport: MailTransport) -> None:
    transport.host = profile.host
    if profile.port is not None:
        transport.port = profile.port

    if profile.user_id and profile.password:
        transport.set_authentication(profile.user_id, profile.password)

    if profile.bounce_address:
        transport.bounce_address = profile.bounce_address

    # debug output helps when delivery fails for technical reasons
    transport.debug = profile.debug

    # some hosts (e.g. Gmail) require SSL from the first byte
    transport.tls_on_connect = profile.tls_on_connect


def render_message(
    message: ComposedMessage,
    *,
    http_transport: httpx.BaseTransport | None = None,
) -> EmailMessage:
    """
    Build the MIME tree for a composed message.

    Layout: multipart/mixed -> [multipart/alternative -> text/plain, text/html
    (multipart/related when images are inlined)] followed by one part per
    attachment. Attachment files are read here, so a missing file raises
    OSError.
    """
    mime = EmailMessage()
    if message.from_address:
        mime["From"] = message.from_address
    if message.to:
        mime["To"] = message.to
    if message.cc:
        mime["Cc"] = message.cc
    mime["Subject"] = message.subject
    mime["Date"] = formatdate(localtime=True)
    mime["Message-ID"] = make_msgid(domain=_sender_domain(message.from_address))

    mime.set_content(message.text_body)
    if message.html_body:
        embedded = embed_images(message.html_body, message.resource_root, http_transport=http_transport)
        mime.add_alternative(embedded.html, subtype="html")
        html_part = mime.get_payload()[-1]
        for image in embedded.images:
            html_part.add_related(
                image.data,
                maintype=image.maintype,
                subtype=image.subtype,
                cid=f"<{image.cid}>",
                filename=image.filename,
            )

    for attachment in message.attachments:
        data = attachment.path.read_bytes()
        content_type = mimetypes.guess_type(attachment.name)[0] or "application/octet-stream"
        maintype, subtype = content_type.split("/", 1)
        mime.add_attachment(
            data,
            maintype=maintype,
            subtype=subtype,
            disposition=attachment.disposition,
            filename=attachment.name,
        )
        mime.get_payload()[-1]["Content-Description"] = attachment.description
    return mime


def _sender_domain(from_address: str | None) -> str | None:
    addr = parseaddr(from_address or "")[1]
    if "@" not in addr:
        return None
    return addr.rsplit("@", 1)[1] or None
