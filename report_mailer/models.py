from __future__ import annotations

from dataclasses import dataclass, field
from email.headerregistry import Address
from pathlib import Path
from typing import List, Optional, Tuple

from .config import ATTACHMENT_DESCRIPTION, ATTACHMENT_DISPOSITION
from .errors import NoRecipientError


@dataclass(frozen=True)
class Attachment:
    path: Path
    name: str
    description: str = ATTACHMENT_DESCRIPTION
    disposition: str = ATTACHMENT_DISPOSITION


@dataclass(frozen=True)
class ComposedMessage:
    to: Tuple[Address, ...]
    cc: Tuple[Address, ...]
    bcc: Tuple[Address, ...]
    subject: str
    from_address: Optional[str]
    text_body: str
    html_body: Optional[str]
    attachments: Tuple[Attachment, ...]
    resource_root: Path

    @property
    def recipients(self) -> List[str]:
        """Envelope recipients: to, cc and bcc in that order."""
        return [addr.addr_spec for addr in (*self.to, *self.cc, *self.bcc)]


@dataclass
class MessageBuilder:
    """Collects validated fields and freezes them into a ComposedMessage."""

    attachments: List[Attachment] = field(default_factory=list)
    to: List[Address] = field(default_factory=list)
    cc: List[Address] = field(default_factory=list)
    bcc: List[Address] = field(default_factory=list)
    subject: str = ""
    from_address: Optional[str] = None
    text_body: str = ""
    html_body: Optional[str] = None
    resource_root: Path = field(default_factory=Path.cwd)

    def has_recipient(self) -> bool:
        return bool(self.to or self.cc or self.bcc)

    def build(self) -> ComposedMessage:
        if not self.has_recipient():
            raise NoRecipientError(self.subject, self.from_address)
        return ComposedMessage(
            to=tuple(self.to),
            cc=tuple(self.cc),
            bcc=tuple(self.bcc),
            subject=self.subject,
            from_address=self.from_address,
            text_body=self.text_body,
            html_body=self.html_body,
            attachments=tuple(self.attachments),
            resource_root=self.resource_root,
        )
