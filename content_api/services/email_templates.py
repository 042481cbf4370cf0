"""
HTML and plain-text email templates.

Every value that originates from a visitor is passed through
``html.escape`` before it is placed in markup.
"""

from datetime import datetime
from html import escape
from typing import Any

from content_api.clients.protocols import OutboundEmail
from content_api.configs import settings


class EmailTemplateBuilder:
    """Builds simple, inline-styled HTML emails with a shared frame."""

    EMAIL_STYLES: dict[str, str] = {
        "font_stack": "Arial, Helvetica, sans-serif",
        "color_text": "#333333",
        "color_muted": "#888888",
        "color_panel": "#f9f9f9",
        "color_contact": "#4CAF50",
        "color_subscription": "#2196F3",
        "max_width": "600px",
    }

    def build_template(self, title: str, accent: str, content_html: str) -> str:
        styles = self.EMAIL_STYLES
        return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>{escape(title)}</title></head>
<body style="font-family: {styles["font_stack"]}; color: {styles["color_text"]};">
  <div style="max-width: {styles["max_width"]}; margin: 0 auto;">
    <h2 style="border-bottom: 2px solid {accent}; padding-bottom: 10px;">{escape(title)}</h2>
    {content_html}
    {self.build_footer(datetime.now().year)}
  </div>
</body>
</html>"""

    def build_footer(self, year: int) -> str:
        return (
            f'<p style="color: {self.EMAIL_STYLES["color_muted"]}; font-size: 12px;">'
            f"&copy; {year} {escape(settings.SITE_NAME)}</p>"
        )

    def build_rows(self, rows: list[tuple[str, str | None]]) -> str:
        """Label/value panel; rows with an empty value are skipped."""
        lines = "".join(
            f'<p style="margin: 10px 0;"><strong>{escape(label)}:</strong> {escape(value)}</p>'
            for label, value in rows
            if value
        )
        return (
            f'<div style="background-color: {self.EMAIL_STYLES["color_panel"]}; '
            f'padding: 20px; border-radius: 5px; margin: 20px 0;">{lines}</div>'
        )

    def build_paragraph(self, text: str) -> str:
        body = escape(text).replace("\n", "<br>")
        return f'<p style="line-height: 1.6; white-space: normal;">{body}</p>'

    def build_link(self, url: str, text: str) -> str:
        return f'<p><a href="{escape(url, quote=True)}">{escape(text)}</a></p>'


builder = EmailTemplateBuilder()


def _text_rows(rows: list[tuple[str, str | None]]) -> str:
    return "\n".join(f"{label}: {value}" for label, value in rows if value)


def unsubscribe_url(token: str) -> str:
    base = settings.PUBLIC_API_URL.rstrip("/")
    return f"{base}{settings.API_PREFIX}/subscriptions/unsubscribe/{token}"


def contact_notification(contact: dict[str, Any], to: str) -> OutboundEmail:
    """Operator notification for a new contact submission; replies go to the visitor."""
    rows = [
        ("Name", contact.get("name")),
        ("Email", contact.get("email")),
        ("Phone", contact.get("phone")),
        ("Company", contact.get("company")),
        ("Subject", contact.get("subject")),
    ]
    message = str(contact.get("message") or "")
    title = "New Contact Form Submission"
    return OutboundEmail(
        to=to,
        subject=f"New Contact: {contact.get('subject', '')}",
        text=f"{title}\n\n{_text_rows(rows)}\n\nMessage:\n{message}\n",
        html=builder.build_template(
            title,
            builder.EMAIL_STYLES["color_contact"],
            builder.build_rows(rows) + builder.build_paragraph(message),
        ),
        reply_to=contact.get("email"),
        tags=("contact_notification",),
    )


def subscription_notification(subscription: dict[str, Any], to: str) -> OutboundEmail:
    rows = [
        ("Email", subscription.get("email")),
        ("Name", subscription.get("name")),
        ("Subscription Type", subscription.get("subscriptionType") or "all"),
        ("Source", subscription.get("source") or "website"),
    ]
    title = "New Email Subscription"
    return OutboundEmail(
        to=to,
        subject=f"New Subscriber: {subscription.get('email', '')}",
        text=f"{title}\n\n{_text_rows(rows)}\n",
        html=builder.build_template(
            title,
            builder.EMAIL_STYLES["color_subscription"],
            builder.build_rows(rows),
        ),
        tags=("subscription_notification",),
    )


def welcome_email(subscription: dict[str, Any]) -> OutboundEmail:
    """Welcome message to a new subscriber, with their unsubscribe link."""
    name = subscription.get("name")
    greeting = f"Hi {name}," if name else "Hello,"
    body = (
        f"Thank you for subscribing to the {settings.SITE_NAME} newsletter! "
        "We're excited to have you join our community.\n\n"
        "If you have any questions, feel free to reply to this email."
    )
    link = unsubscribe_url(subscription["unsubscribeToken"])
    title = f"Welcome to {settings.SITE_NAME}!"
    return OutboundEmail(
        to=subscription["email"],
        subject=f"Welcome to the {settings.SITE_NAME} newsletter!",
        text=f"{title}\n\n{greeting}\n\n{body}\n\nUnsubscribe: {link}\n",
        html=builder.build_template(
            title,
            builder.EMAIL_STYLES["color_contact"],
            builder.build_paragraph(greeting)
            + builder.build_paragraph(body)
            + builder.build_link(link, "Unsubscribe"),
        ),
        tags=("welcome",),
    )
