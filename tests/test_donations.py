import pytest

import routes_donations
from models_engagement import UserEngagementMetrics


@pytest.fixture(autouse=True)
def quiet_mail(monkeypatch):
    monkeypatch.setattr(routes_donations, "send_email_notification", lambda *a, **k: True)


DONATION = {"name": "Dana Giver", "email": "dana@example.com", "amount": 50}


class TestDonations:
    def test_create_and_total(self, client):
        assert client.get("/api/donations/total").get_json() == {"ok": True, "total": 0, "goal": 250000}
        assert client.post("/api/donations", json=DONATION).status_code == 201
        assert client.post("/api/donations", json=dict(DONATION, amount=125, isRecurring=True)).status_code == 201
        assert client.get("/api/donations/total").get_json()["total"] == 175

    @pytest.mark.parametrize("amount", [0, -5])
    def test_amount_must_be_positive(self, client, amount):
        res = client.post("/api/donations", json=dict(DONATION, amount=amount))
        assert res.status_code == 400
        assert res.get_json()["error"] == "validation_error"

    def test_goal_is_configurable(self, app, client):
        app.config["DONATION_GOAL"] = 1000
        assert client.get("/api/donations/total").get_json()["goal"] == 1000

    def test_member_donation_updates_metrics(self, user_client, user):
        user_client.post("/api/donations", json=dict(DONATION, amount=40))
        m = UserEngagementMetrics.query.filter_by(user_id=user.id).one()
        assert (m.donations_count, m.total_donation_amount) == (1, 40)

    def test_admin_list(self, client, admin_client, user_client):
        client.post("/api/donations", json=dict(DONATION, isAnonymous=True, message="Keep it up"))
        assert user_client.get("/api/admin/donations").status_code == 403
        body = admin_client.get("/api/admin/donations").get_json()
        assert body["total"] == 50
        assert body["donations"][0]["isAnonymous"] is True
        assert body["donations"][0]["message"] == "Keep it up"
