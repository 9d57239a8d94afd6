"""SMTP email client wrapper used by email-to-printer delivery."""

import html
import logging
import smtplib
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from app.config import settings

logger = logging.getLogger(__name__)


def smtp_configured() -> bool:
    return bool(settings.SMTP_HOST and settings.SMTP_USER)


def build_message(
    to_addresses: list[str],
    subject: str,
    body_html: str,
    body_text: str | None = None,
    attachments: list[tuple[str, bytes, str]] | None = None,
) -> MIMEMultipart:
    """Assemble a multipart message.

    Args:
        attachments: Optional list of (filename, data_bytes, subtype) tuples,
            e.g. ``("labels.pdf", data, "pdf")``.
    """
    msg = MIMEMultipart("mixed")
    msg["Subject"] = subject
    msg["From"] = f"{settings.SMTP_FROM_NAME} <{settings.SMTP_USER}>"
    msg["To"] = ", ".join(to_addresses)

    body_part = MIMEMultipart("alternative")
    if body_text:
        body_part.attach(MIMEText(body_text, "plain"))
    body_part.attach(MIMEText(body_html, "html"))
    msg.attach(body_part)

    for filename, data, subtype in attachments or []:
        part = MIMEApplication(data, _subtype=subtype, Name=filename)
        part["Content-Disposition"] = f'attachment; filename="{filename}"'
        msg.attach(part)
    return msg


def send_email(
    to_addresses: list[str],
    subject: str,
    body_html: str,
    body_text: str | None = None,
    attachments: list[tuple[str, bytes, str]] | None = None,
) -> bool:
    """Send an email via SMTP. Returns True on success, False on failure."""
    if not smtp_configured():
        logger.warning("SMTP not configured. Skipping email to %s.", to_addresses)
        return False

    try:
        msg = build_message(to_addresses, subject, body_html, body_text, attachments)
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
            if settings.SMTP_USE_TLS:
                server.starttls()
            server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
            server.sendmail(settings.SMTP_USER, to_addresses, msg.as_string())
        return True
    except (smtplib.SMTPException, OSError):
        logger.exception("Failed to send email to %s", to_addresses)
        return False


def render_print_job_email(job_id: str, label_count: int, format_name: str) -> str:
    """Render the HTML body sent along with a print job attachment."""
    safe_job = html.escape(job_id)
    safe_format = html.escape(format_name)

    return f"""
    <html>
    <body style="font-family: Inter, Arial, sans-serif; margin: 0; padding: 20px; background: #f8fafc;">
        <div style="max-width: 600px; margin: 0 auto; background: white; border-radius: 8px; overflow: hidden; box-shadow: 0 1px 3px rgba(0,0,0,0.1);">
            <div style="background: #2563eb; padding: 16px 24px;">
                <h2 style="color: white; margin: 0; font-size: 18px;">QR Code Labels for Printing</h2>
            </div>
            <div style="padding: 24px;">
                <p style="color: #334155; line-height: 1.6; margin: 0 0 16px 0;">
                    Print job <strong>{safe_job}</strong>: {label_count} label(s), {safe_format}.
                    The label document is attached.
                </p>
                <p style="color: #94a3b8; font-size: 12px; margin: 16px 0 0 0;">
                    This is an automated message from {html.escape(settings.APP_NAME)}. Do not reply to this email.
                </p>
            </div>
        </div>
    </body>
    </html>
    """
