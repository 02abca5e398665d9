"""
Outgoing email over SMTP (aiosmtplib).

Sending is best-effort: routers schedule `send_email` as a background task so
an SMTP problem is logged and never changes the HTTP response.
"""

from __future__ import annotations

import logging
from email.mime.text import MIMEText

import aiosmtplib

from . import config

logger = logging.getLogger(__name__)


def build_message(*, to: str, subject: str, body: str) -> MIMEText:
    message = MIMEText(body, "plain", "utf-8")
    message["From"] = config.smtp_from()
    message["To"] = to
    message["Subject"] = subject
    return message


async def send_email(*, to: str, subject: str, body: str) -> bool:
    host = config.smtp_host()
    if not host:
        logger.warning("SMTP_HOST is not set; skipping email to %s (%s).", to, subject)
        return False

    message = build_message(to=to, subject=subject, body=body)
    try:
        await aiosmtplib.send(
            message,
            hostname=host,
            port=config.smtp_port(),
            username=config.smtp_user() or None,
            password=config.smtp_password() or None,
            use_tls=config.smtp_use_tls(),
        )
    except (aiosmtplib.SMTPException, OSError):
        logger.exception("Failed to send email to %s (%s).", to, subject)
        return False

    logger.info("Email sent to %s (%s).", to, subject)
    return True


async def send_inquiry_confirmation(*, to: str, full_name: str | None) -> bool:
    name = (full_name or "").strip() or "there"
    return await send_email(
        to=to,
        subject="We received your inquiry",
        body=f"Hi {name}, thank you for reaching out. Our team will contact you shortly.",
    )


async def send_subscription_welcome(*, to: str) -> bool:
    return await send_email(
        to=to,
        subject="Thank you for subscribing!",
        body="You have been subscribed to email alerts. You can unsubscribe at any time.",
    )
