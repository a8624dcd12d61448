from __future__ import annotations

import smtplib

from report_mailer.error_text import AUTHENTICATION_FAILED_MESSAGE, describe_error


def _chain() -> Exception:
    try:
        try:
            try:
                raise ConnectionRefusedError("C")
            except ConnectionRefusedError as exc:
                raise OSError("B") from exc
        except OSError as exc:
            raise smtplib.SMTPException("A") from exc
    except smtplib.SMTPException as exc:
        return exc


def test_cause_chain_is_rendered_outermost_first():
    lines = describe_error(_chain()).split("\n")
    assert lines == ["SMTPException: A", "OSError: B", "ConnectionRefusedError: C"]


def test_authentication_failure_uses_fixed_message():
    exc = smtplib.SMTPAuthenticationError(535, b"5.7.8 Username and Password not accepted")
    assert describe_error(exc) == AUTHENTICATION_FAILED_MESSAGE


def test_authentication_failure_inside_chain():
    try:
        try:
            raise smtplib.SMTPAuthenticationError(535, b"bad credentials")
        except smtplib.SMTPAuthenticationError as exc:
            raise RuntimeError("login failed") from exc
    except RuntimeError as exc:
        outer = exc
    assert describe_error(outer) == f"RuntimeError: login failed\n{AUTHENTICATION_FAILED_MESSAGE}"


def test_exception_without_message_uses_class_name():
    assert describe_error(TimeoutError()) == "TimeoutError"


def test_implicit_context_is_followed_unless_suppressed():
    try:
        try:
            raise ValueError("inner")
        except ValueError:
            raise OSError("outer")
    except OSError as exc:
        implicit = exc
    assert describe_error(implicit) == "OSError: outer\nValueError: inner"

    try:
        try:
            raise ValueError("inner")
        except ValueError:
            raise OSError("outer") from None
    except OSError as exc:
        suppressed = exc
    assert describe_error(suppressed) == "OSError: outer"
