from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

# --------------------------------
# 設定値

# HTML を表示できないクライアント向けの本文（HTML 本文があっても常に付ける）
PLAIN_TEXT_FALLBACK = "Your email client does not support HTML messages"

# 添付ファイルの Content-Description
ATTACHMENT_DESCRIPTION = "The generated report"

# 添付ファイルの Content-Disposition
ATTACHMENT_DISPOSITION = "attachment"

# 外部設定でポート未指定を表す値
UNSET_PORT = -1

# SMTP 接続のタイムアウト（秒）
SMTP_TIMEOUT_SECONDS = 30.0

# 埋め込み画像取得のタイムアウト（秒）
IMAGE_FETCH_TIMEOUT_SECONDS = 20.0

DEFAULT_SUBJECT = "Report"

_TRUTHY = {"1", "true", "yes", "on"}
# --------------------------------


@dataclass(frozen=True)
class ServerProfile:
    host: str
    port: Optional[int] = None
    user_id: Optional[str] = None
    password: Optional[str] = None
    bounce_address: Optional[str] = None
    debug: bool = False
    tls_on_connect: bool = False
    subject_prefix: Optional[str] = None

    @staticmethod
    def port_from_raw(value: int | None) -> int | None:
        if value is None or value == UNSET_PORT:
            return None
        return value

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> "ServerProfile":
        e = env if env is not None else os.environ

        raw_port = _optional(e, "SMTP_PORT")
        port: int | None = None
        if raw_port is not None:
            try:
                port = ServerProfile.port_from_raw(int(raw_port))
            except ValueError as exc:
                raise ValueError(f"Environment variable SMTP_PORT must be an integer: {raw_port!r}") from exc

        return ServerProfile(
            host=_require(e, "SMTP_HOST"),
            port=port,
            user_id=_optional(e, "SMTP_USER"),
            password=_optional(e, "SMTP_PASSWORD"),
            bounce_address=_optional(e, "SMTP_BOUNCE"),
            debug=_flag(e, "SMTP_DEBUG"),
            tls_on_connect=_flag(e, "SMTP_SSL"),
            subject_prefix=_optional(e, "MAIL_SUBJECT_PREFIX"),
        )


@dataclass(frozen=True)
class EmailConfig:
    subject: str
    to: Optional[str] = None
    cc: Optional[str] = None
    bcc: Optional[str] = None
    from_address: Optional[str] = None

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None, subject_default: str = DEFAULT_SUBJECT) -> "EmailConfig":
        e = env if env is not None else os.environ
        return EmailConfig(
            subject=_optional(e, "MAIL_SUBJECT") or subject_default,
            to=_optional(e, "MAIL_TO"),
            cc=_optional(e, "MAIL_CC"),
            bcc=_optional(e, "MAIL_BCC"),
            from_address=_optional(e, "MAIL_FROM"),
        )


def _require(env: Mapping[str, str], name: str) -> str:
    value = env.get(name)
    if value is None or not value.strip():
        raise ValueError(f"Environment variable {name} is required.")
    return value.strip()


def _optional(env: Mapping[str, str], name: str) -> str | None:
    value = env.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _flag(env: Mapping[str, str], name: str) -> bool:
    return (env.get(name) or "").strip().lower() in _TRUTHY
