from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .config import EmailConfig, ServerProfile
from .errors import MailError
from .sender import EmailSender

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None, *, sender: EmailSender | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Send generated report files as email attachments over SMTP."
    )
    parser.add_argument("reports", nargs="+", help="report files to attach")
    parser.add_argument("--html-file", default=None, help="HTML body; images resolve against the working directory")
    parser.add_argument("--subject", default=None, help="overrides MAIL_SUBJECT")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s"
    )

    try:
        profile = ServerProfile.from_env()
        config = EmailConfig.from_env()
    except ValueError as exc:
        logger.error("Missing configuration: %s", exc)
        return 1
    if args.subject:
        config = replace(config, subject=args.subject)

    html_body = None
    if args.html_file:
        try:
            html_body = Path(args.html_file).read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Cannot read HTML body %s: %s", args.html_file, exc)
            return 1

    try:
        (sender or EmailSender()).send_attachment_email(args.reports, profile, config, html_body)
    except MailError as exc:
        logger.error("Notification failed: %s", exc)
        return 1

    logger.info("Done.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
