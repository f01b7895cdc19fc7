import io

import pytest

import routes_contact
from models_contact import ContactMessage, NewsletterSubscriber


@pytest.fixture()
def sent(monkeypatch):
    calls = []
    monkeypatch.setattr(routes_contact, "send_email_notification",
                        lambda subject, text, html=None, to=None: calls.append((subject, text, html)) or True)
    return calls


def _upload(client):
    res = client.post("/api/upload", data={"file": (io.BytesIO(b"agenda"), "agenda.txt", "text/plain")},
                      content_type="multipart/form-data")
    return res.get_json()["url"]


CONTACT = {"name": "Robin Banks", "email": "Robin@Example.com", "subject": "Hall hire",
           "message": "Is the gym free next week?"}


class TestContactForm:
    def test_valid_message_is_stored_and_emailed(self, client, sent):
        res = client.post("/api/contact", json=CONTACT)
        assert res.status_code == 201
        row = ContactMessage.query.one()
        assert row.email == "robin@example.com"
        assert row.subscribe_to_newsletter is False
        assert NewsletterSubscriber.query.count() == 0

        assert len(sent) == 1
        subject, _, html = sent[0]
        assert "Hall hire" in subject
        assert "Subscribe To Newsletter" in html and "No" in html

    def test_opt_in_adds_subscriber_once(self, client, sent):
        body = dict(CONTACT, subscribeToNewsletter=True)
        assert client.post("/api/contact", json=body).status_code == 201
        assert client.post("/api/contact", json=body).status_code == 201
        assert [s.email for s in NewsletterSubscriber.query.all()] == ["robin@example.com"]

    def test_attachment_from_upload_handler(self, client, sent):
        url = _upload(client)
        res = client.post("/api/contact", json=dict(CONTACT, attachments=[url]))
        assert res.status_code == 201
        assert ContactMessage.query.one().attachments == [url]

    def test_foreign_attachment_url_rejected(self, client, sent):
        res = client.post("/api/contact", json=dict(CONTACT, attachments=["https://elsewhere.example/x.pdf"]))
        assert res.status_code == 400
        assert res.get_json()["error"] == "validation_error"

    def test_missing_uploaded_file_rejected(self, client, sent):
        res = client.post("/api/contact", json=dict(CONTACT, attachments=["/uploads/1-1.pdf"]))
        assert res.status_code == 400
        assert res.get_json()["error"] == "bad_attachment"

    def test_invalid_email(self, client, sent):
        res = client.post("/api/contact", json=dict(CONTACT, email="not-an-email"))
        assert res.status_code == 400
        assert ContactMessage.query.count() == 0
        assert sent == []

    def test_email_failure_does_not_break_submission(self, client, monkeypatch):
        monkeypatch.setattr(routes_contact, "send_email_notification", lambda *a, **k: False)
        assert client.post("/api/contact", json=CONTACT).status_code == 201


class TestAdminContactMessages:
    def test_requires_admin(self, client, user_client):
        assert client.get("/api/admin/contact-messages").status_code == 401
        res = user_client.get("/api/admin/contact-messages")
        assert res.status_code == 403
        assert res.get_json()["error"] == "admin_required"

    def test_lists_newest_first(self, client, admin_client, sent):
        client.post("/api/contact", json=dict(CONTACT, subject="First"))
        client.post("/api/contact", json=dict(CONTACT, subject="Second"))
        res = admin_client.get("/api/admin/contact-messages")
        assert [m["subject"] for m in res.get_json()["messages"]] == ["Second", "First"]
