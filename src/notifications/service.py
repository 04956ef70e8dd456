"""Email notification for new contact-form inquiries.

Active only when EMAIL_ENABLED=true and every SMTP_* / EMAIL_* variable is set.
Otherwise sending is skipped silently: the inquiry is already stored, so a
missing mail setup is an inactive feature, not an error.

Example Gmail configuration:
    EMAIL_ENABLED=true
    SMTP_HOST=smtp.gmail.com
    SMTP_PORT=587
    SMTP_USER=your-email@gmail.com
    SMTP_PASS=your-app-password
    EMAIL_FROM=noreply@sgglobaladvisors.com
    EMAIL_TO=contact@sgglobaladvisors.com
"""

import logging
from datetime import UTC, datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, formatdate, make_msgid
from html import escape

from ..config import settings
from ..contact.models import Inquiry
from .transport import EmailConfig, NotificationError, get_transport

logger = logging.getLogger(__name__)

__all__ = ["NotificationError", "build_inquiry_email", "get_email_config", "send_inquiry_notification"]


# ── Configuration ──────────────────────────────────────────────────────


def get_email_config() -> EmailConfig | None:
    """Build the SMTP configuration, or None when email is disabled or incomplete."""
    if settings.email_enabled != "true":
        return None

    required = {
        "SMTP_HOST": settings.smtp_host,
        "SMTP_PORT": settings.smtp_port,
        "SMTP_USER": settings.smtp_user,
        "SMTP_PASS": settings.smtp_pass,
        "EMAIL_FROM": settings.email_from,
        "EMAIL_TO": settings.email_to,
    }
    missing = [name for name, value in required.items() if not value]
    if missing:
        logger.warning(
            "Email configuration incomplete (missing %s). Set EMAIL_ENABLED=true and all "
            "SMTP_* and EMAIL_* variables to enable email notifications.",
            ", ".join(missing),
        )
        return None

    try:
        port = int(settings.smtp_port)
    except ValueError:
        logger.warning("Email configuration invalid: SMTP_PORT=%r is not a number", settings.smtp_port)
        return None

    return EmailConfig(
        host=settings.smtp_host,
        port=port,
        secure=settings.smtp_port.strip() == "465",
        user=settings.smtp_user,
        password=settings.smtp_pass,
        sender=settings.email_from,
        recipient=settings.email_to,
        timeout=settings.smtp_timeout,
    )


# ── Email building ─────────────────────────────────────────────────────


def _format_submitted(created_at: datetime | None) -> str:
    ts = created_at or datetime.now(UTC)
    return ts.strftime("%d %b %Y, %H:%M %Z").strip()


def _html_field(label: str, value: str) -> str:
    return f"""\
                <tr>
                  <td style="padding:6px 0; color:#6b7280; font-size:13px; width:90px; vertical-align:top;">{label}</td>
                  <td style="padding:6px 0; color:#111827; font-size:14px;">{value}</td>
                </tr>
"""


def build_inquiry_email(inquiry: Inquiry, config: EmailConfig) -> MIMEMultipart:
    """Build the notification email for a stored inquiry."""
    firm = settings.email_sender_name
    msg = MIMEMultipart("alternative")

    msg["From"] = formataddr((firm, config.sender))
    msg["To"] = config.recipient
    msg["Reply-To"] = inquiry.email
    msg["Date"] = formatdate(localtime=True)
    msg["Message-ID"] = make_msgid(domain=config.sender.split("@")[-1] if "@" in config.sender else "local")
    # Header values must stay on one line
    msg["Subject"] = f"New Contact Inquiry from {' '.join(inquiry.name.split())}"

    submitted = _format_submitted(inquiry.created_at)

    # ── Plain text ──
    lines = [
        f"New Contact Inquiry - {firm}",
        "",
        f"Name: {inquiry.name}",
        f"Email: {inquiry.email}",
    ]
    if inquiry.phone:
        lines.append(f"Phone: {inquiry.phone}")
    if inquiry.company:
        lines.append(f"Company: {inquiry.company}")
    lines += ["", "Message:", inquiry.message, "", f"Submitted: {submitted}"]
    text_body = "\n".join(lines)

    # ── HTML (every user-supplied value escaped) ──
    rows = _html_field("Name", escape(inquiry.name))
    rows += _html_field("Email", escape(inquiry.email))
    if inquiry.phone:
        rows += _html_field("Phone", escape(inquiry.phone))
    if inquiry.company:
        rows += _html_field("Company", escape(inquiry.company))
    rows += _html_field("Message", escape(inquiry.message).replace("\n", "<br>"))
    rows += _html_field("Submitted", escape(submitted))

    html_body = f"""\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>New Contact Inquiry</title>
</head>
<body style="margin:0; padding:0; background-color:#f4f4f5; font-family:Arial,Helvetica,sans-serif;">
  <table role="presentation" width="100%" cellpadding="0" cellspacing="0" style="background-color:#f4f4f5;">
    <tr><td align="center" style="padding:24px 16px;">
      <table role="presentation" width="600" cellpadding="0" cellspacing="0"
             style="background-color:#ffffff; border-radius:8px;">
        <tr><td style="background-color:#1e293b; padding:20px 32px; border-radius:8px 8px 0 0; text-align:center;">
          <h1 style="margin:0; color:#ffffff; font-size:20px; font-weight:600;">New Contact Inquiry</h1>
          <p style="margin:4px 0 0; color:#cbd5e1; font-size:13px;">{escape(firm)}</p>
        </td></tr>
        <tr><td style="padding:32px;">
          <table role="presentation" width="100%" cellpadding="0" cellspacing="0"
                 style="background-color:#f8f9fa; border-left:3px solid #1e293b;">
            <tr><td style="padding:16px 20px;">
              <table role="presentation" width="100%" cellpadding="0" cellspacing="0">
{rows}              </table>
            </td></tr>
          </table>
        </td></tr>
        <tr><td style="padding:16px 32px; border-top:1px solid #e5e7eb;">
          <p style="margin:0; color:#9ca3af; font-size:11px; line-height:1.5;">
            This email was automatically generated from the {escape(firm)} contact form.
          </p>
        </td></tr>
      </table>
    </td></tr>
  </table>
</body>
</html>"""

    msg.attach(MIMEText(text_body, "plain", "utf-8"))
    msg.attach(MIMEText(html_body, "html", "utf-8"))
    return msg


# ── Sending ────────────────────────────────────────────────────────────


def send_inquiry_notification(inquiry: Inquiry) -> None:
    """Email the configured recipient about a new inquiry.

    No-op when email is not configured. Raises NotificationError when the
    send itself fails; callers decide whether that matters.
    """
    config = get_email_config()
    if config is None:
        logger.info("Email not configured, skipping notification for inquiry #%s", inquiry.id)
        return

    msg = build_inquiry_email(inquiry, config)
    get_transport(config).send(msg)
    logger.info("Inquiry email notification sent for inquiry #%s", inquiry.id)
