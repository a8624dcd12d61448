from __future__ import annotations

import smtplib
from typing import List

AUTHENTICATION_FAILED_MESSAGE = "Authentication with the provided SMTP username and password failed"


def describe_error(exc: BaseException) -> str:
    """
    Render an exception and everything that caused it, one line per link.

    The outermost exception comes first. Authentication failures are replaced
    with a fixed message since the server's own reply is rarely helpful.
    """
    lines: List[str] = []
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        lines.append(_describe_one(current))
        current = _cause_of(current)
    return "\n".join(lines)


def _describe_one(exc: BaseException) -> str:
    if isinstance(exc, smtplib.SMTPAuthenticationError):
        return AUTHENTICATION_FAILED_MESSAGE
    text = str(exc)
    if text:
        return f"{type(exc).__name__}: {text}"
    return type(exc).__name__


def _cause_of(exc: BaseException) -> BaseException | None:
    if exc.__cause__ is not None:
        return exc.__cause__
    if exc.__suppress_context__:
        return None
    return exc.__context__
