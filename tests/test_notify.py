import smtplib

import pytest

import services_notify
from services_notify import (
    create_html_email_body, create_newsletter_html, humanize_key, send_email_notification, send_newsletter,
)


class FakeSMTP:
    sent = []
    fail_for = set()

    def __init__(self, host, port, timeout=None):
        self.host, self.port, self.timeout = host, port, timeout

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, user, pwd):
        pass

    def sendmail(self, sender, recipients, msg):
        if set(recipients) & self.fail_for:
            raise smtplib.SMTPRecipientsRefused({r: (550, b"no") for r in recipients})
        FakeSMTP.sent.append((sender, recipients, msg))


@pytest.fixture()
def smtp(app, monkeypatch):
    FakeSMTP.sent = []
    FakeSMTP.fail_for = set()
    monkeypatch.setattr(services_notify.smtplib, "SMTP", FakeSMTP)
    app.config.update(EMAIL_SENDING_ENABLED=True, SMTP_HOST="smtp.test", SMTP_PORT=587,
                      SMTP_USER="center@example.com", SMTP_PASS="pw")
    return FakeSMTP


class TestTemplates:
    def test_humanize_key(self):
        assert humanize_key("subscribeToNewsletter") == "Subscribe To Newsletter"
        assert humanize_key("event_type") == "Event Type"
        assert humanize_key("name") == "Name"

    def test_form_body_formats_booleans_and_escapes(self):
        html = create_html_email_body({"isRecurring": True, "isAnonymous": False,
                                       "message": "<script>alert(1)</script>"})
        assert "Is Recurring" in html and "Yes" in html and "No" in html
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_newsletter_html(self):
        html = create_newsletter_html("June <news>", "Line one\nLine <two>", "http://x/unsub?token=t")
        assert "Line one<br>Line &lt;two&gt;" in html
        assert "June &lt;news&gt;" in html
        assert 'href="http://x/unsub?token=t"' in html

    def test_newsletter_html_without_unsubscribe(self):
        assert "Unsubscribe" not in create_newsletter_html("Hi", "Body text here")


class TestSending:
    def test_storage_only_mode_sends_nothing(self, app, monkeypatch):
        monkeypatch.setattr(services_notify.smtplib, "SMTP", lambda *a, **k: pytest.fail("SMTP used"))
        app.config["EMAIL_SENDING_ENABLED"] = False
        assert send_email_notification("Subject", "Body") is True

    def test_sends_to_primary_by_default(self, smtp):
        assert send_email_notification("Subject", "Body", "<p>Body</p>") is True
        sender, recipients, _ = smtp.sent[0]
        assert sender == services_notify.FROM_EMAIL
        assert recipients == [services_notify.PRIMARY_EMAIL]

    def test_smtp_failure_returns_false(self, smtp):
        smtp.fail_for = {"bad@example.com"}
        assert send_email_notification("Subject", "Body", to="bad@example.com") is False

    def test_unconfigured_smtp_returns_false(self, app, smtp):
        app.config["SMTP_HOST"] = ""
        assert send_email_notification("Subject", "Body") is False

    def test_newsletter_test_mode(self, smtp):
        assert send_newsletter("News", "Body of the newsletter", ["a@example.com"], test_email="ed@example.com")
        assert [r for _, r, _ in smtp.sent] == [["ed@example.com"]]

    def test_newsletter_skips_failing_subscriber(self, smtp):
        smtp.fail_for = {"b@example.com"}
        ok = send_newsletter("News", "Body of the newsletter", ["a@example.com", "b@example.com", "c@example.com"],
                             unsubscribe_url_for=lambda e: f"http://x/u?e={e}")
        assert ok is True
        assert [r for _, r, _ in smtp.sent] == [["a@example.com"], ["c@example.com"]]

    def test_newsletter_without_subscribers(self, smtp):
        assert send_newsletter("News", "Body of the newsletter", []) is False
        assert smtp.sent == []
