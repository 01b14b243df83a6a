"""Dispatch: validate a draft and submit it to the SMTP provider.

The sequence is strictly linear: schema validation, configuration check,
recipient parsing, message assembly, transport verification, then a single
send addressed to every recipient at once. The first failing step ends the
call; nothing is retried.
"""

from __future__ import annotations

import asyncio
import html
from email.message import EmailMessage
from email.utils import formataddr, make_msgid

import aiosmtplib

from core.config import MailTransportConfig, Settings
from core.error_handler import StructuredLogger

from .results import ErrorKind, PipelineError, SendOutcome, SendResult
from .validation import parse_recipients, validate_send_request


logger = StructuredLogger(__name__)

CONNECTION_TIMEOUT_SECONDS = 15.0
GREETING_TIMEOUT_SECONDS = 15.0
SENDER_DISPLAY_NAME = "AI Email Assistant"
LOGGED_SUBJECT_LENGTH = 32

HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <style>
    body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, \
'Helvetica Neue', Arial, 'Noto Sans', sans-serif; line-height: 1.6; color: #111827; }}
    .container {{ max-width: 640px; margin: 0 auto; padding: 16px; }}
  </style>
</head>
<body>
  <div class="container">
    {content}
  </div>
</body>
</html>"""


def render_html(body: str) -> str:
    """Wrap the plain-text body in a minimal styled HTML document."""
    content = html.escape(body).replace("\n", "<br />")
    return HTML_TEMPLATE.format(content=content)


def header_subject(subject: str) -> str:
    """Collapse line breaks and runs of whitespace into single spaces."""
    return " ".join(subject.split())


def build_message(
    config: MailTransportConfig, recipients: list[str], subject: str, body: str
) -> EmailMessage:
    message = EmailMessage()
    message["From"] = formataddr((SENDER_DISPLAY_NAME, config.from_address))
    message["To"] = ", ".join(recipients)
    message["Subject"] = header_subject(subject)
    message["X-Mailer"] = SENDER_DISPLAY_NAME
    domain = config.from_address.rpartition("@")[2] or None
    message["Message-ID"] = make_msgid(domain=domain)
    message.set_content(body)
    message.add_alternative(render_html(body), subtype="html")
    return message


def build_transport(config: MailTransportConfig) -> aiosmtplib.SMTP:
    """Create an unconnected SMTP client for the configured provider.

    Port 465 uses implicit TLS. Any other port upgrades with STARTTLS when
    the server offers it. Certificates are always verified.
    """
    return aiosmtplib.SMTP(
        hostname=config.host,
        port=config.port,
        username=config.username,
        password=config.password,
        use_tls=config.implicit_tls,
        start_tls=False if config.implicit_tls else None,
        validate_certs=True,
        timeout=CONNECTION_TIMEOUT_SECONDS,
    )


async def verify_transport(smtp: aiosmtplib.SMTP) -> None:
    """Connect, negotiate TLS, authenticate and NOOP before any delivery.

    Raises whatever the client raises; `asyncio.TimeoutError` when the
    connection plus greeting takes longer than their combined budget.
    """
    async with asyncio.timeout(CONNECTION_TIMEOUT_SECONDS + GREETING_TIMEOUT_SECONDS):
        await smtp.connect()
        await smtp.noop()


def _truncate_subject(subject: str) -> str:
    if len(subject) > LOGGED_SUBJECT_LENGTH:
        return f"{subject[:LOGGED_SUBJECT_LENGTH]}…"
    return subject


async def _close(smtp: aiosmtplib.SMTP) -> None:
    if not smtp.is_connected:
        return
    try:
        await smtp.quit()
    except (aiosmtplib.SMTPException, OSError):
        smtp.close()


async def send_email(payload: object, settings: Settings) -> SendOutcome:
    """Validate a send request and deliver it through the SMTP provider.

    Args:
        payload: Decoded JSON request body with `recipients`, `subject` and
            `body`.
        settings: Process-wide configuration holding the SMTP settings.

    Returns:
        `SendResult` with the message's Message-ID, or a `PipelineError`.
        The SMTP secret never appears in the result or in logs.
    """
    request = validate_send_request(payload)
    if isinstance(request, PipelineError):
        return request

    config = settings.mail_transport()
    if config is None:
        logger.error(
            "SMTP configuration missing", **settings.mail_config_diagnostics()
        )
        return PipelineError(
            ErrorKind.CONFIGURATION_ERROR, "Email service is not configured properly"
        )

    recipients = parse_recipients(request.recipients)
    if not recipients:
        return PipelineError(
            ErrorKind.NO_VALID_RECIPIENTS, "No valid email recipients found"
        )

    try:
        message = build_message(config, recipients, request.subject, request.body)
    except ValueError as exc:
        detail = str(exc) or type(exc).__name__
        logger.error("Email build error", error=detail)
        return PipelineError(
            ErrorKind.SEND_ERROR, "Failed to send email", details=detail
        )

    smtp = build_transport(config)
    try:
        try:
            await verify_transport(smtp)
        except (aiosmtplib.SMTPException, OSError, TimeoutError) as exc:
            detail = str(exc) or type(exc).__name__
            logger.error("SMTP connection failed", error=detail)
            return PipelineError(
                ErrorKind.TRANSPORT_CONNECT_ERROR,
                "Failed to connect to email server",
                details=detail,
            )

        try:
            await smtp.send_message(message, recipients=recipients)
        except (aiosmtplib.SMTPException, OSError, TimeoutError) as exc:
            detail = str(exc) or type(exc).__name__
            logger.error("Email send error", error=detail)
            return PipelineError(
                ErrorKind.SEND_ERROR, "Failed to send email", details=detail
            )
    finally:
        await _close(smtp)

    message_id = str(message["Message-ID"])
    logger.info(
        "Email sent",
        message_id=message_id,
        recipients=recipients,
        subject=_truncate_subject(header_subject(request.subject)),
    )
    return SendResult(success=True, message_id=message_id)
