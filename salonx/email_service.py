"""
Transactional email through Resend
"""

import html
import logging
from typing import Optional, Union

import resend

from .config import EMAIL_FROM_ADDRESS, RESEND_API_KEY

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY


def is_email_configured() -> bool:
    return bool(RESEND_API_KEY)


def send_email(
    to: Union[str, list[str]],
    subject: str,
    html_content: str,
    from_address: Optional[str] = None,
    reply_to: Optional[str] = None,
) -> dict:
    """
    Send an email using Resend

    Raises:
        Exception: when Resend is not configured or rejects the message
    """
    recipients = [to] if isinstance(to, str) else to

    if not RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing")
        raise Exception("Email service not configured")

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        email_data = {
            "from": from_address or EMAIL_FROM_ADDRESS,
            "to": recipients,
            "subject": subject,
            "html": html_content,
        }
        if reply_to:
            email_data["reply_to"] = reply_to

        response = resend.Emails.send(email_data)
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise Exception(f"Failed to send email: {str(e)}") from e


def demo_request_template(
    name: str,
    phone: str,
    salon_name: str,
    email: Optional[str],
    city: Optional[str],
    staff_count: Optional[str],
) -> str:
    rows = [
        ("Name", name),
        ("Phone", phone),
        ("Salon", salon_name),
        ("Email", email or "-"),
        ("City", city or "-"),
        ("Staff count", staff_count or "-"),
    ]
    table_rows = "".join(
        f"<tr><td style='padding:6px 12px;color:#6b7280'>{label}</td>"
        f"<td style='padding:6px 12px;font-weight:600'>{html.escape(str(value))}</td></tr>"
        for label, value in rows
    )
    return f"""
    <div style="font-family:Arial,sans-serif;max-width:560px;margin:0 auto">
      <h2 style="color:#7c3aed">New demo request</h2>
      <p>A salon has asked for a SalonX demo.</p>
      <table style="border-collapse:collapse">{table_rows}</table>
    </div>
    """


def send_demo_request_notification(to: str, **details) -> dict:
    """Notify the sales inbox about a new demo request"""
    return send_email(
        to=to,
        subject=f"New Demo Request - {details.get('salon_name')}",
        html_content=demo_request_template(**details),
        reply_to=details.get("email") or None,
    )
