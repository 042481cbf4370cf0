# tests/services/test_email_templates.py
"""Tests for content_api/services/email_templates.py module."""

from typing import Any

from content_api.services.email_templates import (
    contact_notification,
    subscription_notification,
    unsubscribe_url,
    welcome_email,
)


class TestContactNotification:
    """Operator email for a contact submission."""

    def test_visitor_values_are_escaped(self, contact_doc: dict[str, Any]) -> None:
        contact = {**contact_doc, "name": "<script>alert(1)</script>", "message": "a & b\nc"}

        message = contact_notification(contact, "owner@example.com")

        assert message.html is not None
        assert "<script>" not in message.html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in message.html
        assert "a &amp; b<br>c" in message.html
        assert "<script>alert(1)</script>" in message.text

    def test_addressing(self, contact_doc: dict[str, Any]) -> None:
        message = contact_notification(contact_doc, "owner@example.com")

        assert message.to == "owner@example.com"
        assert message.reply_to == contact_doc["email"]
        assert message.subject == f"New Contact: {contact_doc['subject']}"
        assert message.tags == ("contact_notification",)

    def test_empty_optional_fields_are_skipped(self, contact_doc: dict[str, Any]) -> None:
        message = contact_notification({**contact_doc, "phone": None}, "owner@example.com")
        assert "Phone:" not in message.text


class TestSubscriptionEmails:
    def test_operator_notification(self, subscription_doc: dict[str, Any]) -> None:
        message = subscription_notification(subscription_doc, "owner@example.com")

        assert message.to == "owner@example.com"
        assert message.subject == f"New Subscriber: {subscription_doc['email']}"
        assert message.reply_to is None
        assert message.kind == "subscription_notification"

    def test_welcome_carries_unsubscribe_link(self, subscription_doc: dict[str, Any]) -> None:
        message = welcome_email(subscription_doc)
        link = "https://api.example.com/api/subscriptions/unsubscribe/" + "a" * 64

        assert message.to == subscription_doc["email"]
        assert message.subject == "Welcome to the Example Site newsletter!"
        assert link in message.text
        assert message.html is not None
        assert f'href="{link}"' in message.html

    def test_welcome_greeting(self, subscription_doc: dict[str, Any]) -> None:
        named = welcome_email({**subscription_doc, "name": "Ada"})
        anonymous = welcome_email({**subscription_doc, "name": None})

        assert "Hi Ada," in named.text
        assert "Hello," in anonymous.text

    def test_unsubscribe_url(self) -> None:
        assert unsubscribe_url("abc") == "https://api.example.com/api/subscriptions/unsubscribe/abc"
