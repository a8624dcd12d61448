from __future__ import annotations

import logging
from email import policy
from email.errors import HeaderParseError, ObsoleteHeaderDefect
from email.headerregistry import Address
from typing import List

from .errors import AddressParseError

logger = logging.getLogger(__name__)

_SEMICOLON = ";"
_COMMA = ","


def normalize_addresses(raw: str | None) -> List[Address]:
    """
    Parse a recipient string into addresses, keeping their order.

    Semicolons are not RFC 5322 list separators, but users type them anyway,
    so they are replaced with commas before parsing.
    """
    if not raw:
        return []
    text = raw.replace(_SEMICOLON, _COMMA)
    if not text.strip():
        return []

    try:
        header = policy.default.header_factory("To", text)
    except (HeaderParseError, IndexError, ValueError) as exc:
        raise AddressParseError(f"Invalid address list {raw!r}: {exc}") from exc
    defects = [d for d in header.defects if not isinstance(d, ObsoleteHeaderDefect)]
    if defects:
        raise AddressParseError(f"Invalid address list {raw!r}: {defects[0]}")

    addresses: List[Address] = []
    for address in header.addresses:
        if not address.username or not address.domain:
            raise AddressParseError(f"Invalid address {str(address)!r} in {raw!r}")
        addresses.append(address)
    logger.debug("Parsed %s address(es) from %r", len(addresses), raw)
    return addresses
