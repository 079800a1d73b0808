"""
Transactional email via Resend
"""

import logging
from datetime import datetime
from html import escape
from typing import Optional, Union

import resend

from ..config import ADMIN_NOTIFICATION_EMAIL, EMAIL_FROM_ADDRESS, RESEND_API_KEY

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY


def send_email(
    to: Union[str, list[str]],
    subject: str,
    html_content: str,
    from_address: Optional[str] = None,
) -> dict:
    """Send an HTML email through Resend"""
    if not RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing")
        raise Exception("Email service not configured")

    recipients = [to] if isinstance(to, str) else to
    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        response = resend.Emails.send(
            {
                "from": from_address or EMAIL_FROM_ADDRESS,
                "to": recipients,
                "subject": subject,
                "html": html_content,
            }
        )
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise Exception(f"Failed to send email: {str(e)}") from e


# ============================================
# Pre-built emails
# ============================================


def send_signup_notification(email: Optional[str], display_name: Optional[str]) -> dict:
    """Notify the admin inbox about the most recent signup"""
    now = datetime.utcnow()
    details = ""
    if email or display_name:
        details = f"""
        <p>User Details:</p>
        <ul>
          <li>Email: {escape(email or "")}</li>
          <li>Display Name: {escape(display_name or "")}</li>
        </ul>
        """

    html_content = f"""
    <h3>New User Signup 📑</h3>
    <p>A new user has signed up on raivcoo.com 🪄.</p>
    {details}
    <p>Date: {now.strftime("%B %d, %Y")}</p>
    """
    return send_email(
        to=ADMIN_NOTIFICATION_EMAIL,
        subject="New User Signup Notification 👋",
        html_content=html_content,
    )


def send_project_invitation(
    to: str, project_name: str, inviter_name: Optional[str], invite_url: str
) -> dict:
    """Invite someone without an account to a project"""
    inviter = escape(inviter_name or "An editor")
    html_content = f"""
    <h3>You've been invited to a project</h3>
    <p>{inviter} invited you to collaborate on <strong>{escape(project_name)}</strong>.</p>
    <p><a href="{escape(invite_url)}">Accept invitation</a></p>
    """
    return send_email(
        to=to,
        subject=f"Invitation to {project_name}",
        html_content=html_content,
    )


def send_media_activity(
    to: str,
    recipient_name: Optional[str],
    actor_name: str,
    project_name: str,
    project_url: str,
    media_details: list[dict],
    subject: Optional[str] = None,
) -> dict:
    """Tell a project member that files were uploaded"""
    count = len(media_details)
    noun = "file" if count == 1 else "files"
    rows = "".join(
        f"<li>{escape(item['name'])} ({escape(item['type'])}, {escape(item['size'])})</li>"
        for item in media_details
    )
    html_content = f"""
    <p>Hi {escape(recipient_name or to)},</p>
    <p>{escape(actor_name)} uploaded {count} {noun} to <strong>{escape(project_name)}</strong>.</p>
    <ul>{rows}</ul>
    <p><a href="{escape(project_url)}">Open project</a></p>
    """
    return send_email(
        to=to,
        subject=subject or f"New Upload - {count} {noun} added to {project_name}",
        html_content=html_content,
    )
