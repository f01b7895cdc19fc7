import pytest

from app import create_app
from extensions import db


def test_scanner_user_agent_blocked(client):
    res = client.get("/api/rooms", headers={"User-Agent": "sqlmap/1.7"})
    assert res.status_code == 403


@pytest.mark.parametrize("path", ["/wp-admin", "/.env", "/phpmyadmin/index.php"])
def test_probe_paths_look_missing(client, path):
    assert client.get(path).status_code == 404


def test_health(client):
    assert client.get("/healthz").get_json() == {"ok": True, "service": "community-center-backend"}


def test_login_is_rate_limited(tmp_path):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "UPLOAD_DIR": str(tmp_path / "uploads"),
        "RATELIMIT_ENABLED": True,
    })
    with app.app_context():
        c = app.test_client()
        codes = [c.post("/api/login", json={"email": "x@example.com", "password": "nope"}).status_code
                 for _ in range(11)]
        assert codes[:10] == [400] * 10
        assert codes[-1] == 429
        assert c.post("/api/login", json={}).get_json()["error"] == "too_many_requests"
        db.session.remove()
        db.drop_all()
