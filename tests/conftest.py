"""Shared fixtures: a fresh app on in-memory SQLite per test, users, rooms and an HTTP bridge for client.py."""
import io
from urllib.parse import urlsplit

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from app import create_app
from extensions import db
from models_auth import User
from models_engagement import metrics_for
from models_rooms import Room

BASE_URL = "http://testserver"


@pytest.fixture()
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "JWT_SECRET": "test-jwt-secret",
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "UPLOAD_DIR": str(tmp_path / "uploads"),
        "RATELIMIT_ENABLED": False,
        "EMAIL_SENDING_ENABLED": False,
        "CREATE_ALL": True,
    })
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


def make_user(email="user@example.com", password="secret123", name="Pat Member", role="user"):
    u = User(email=email, name=name, role=role)
    u.set_password(password)
    db.session.add(u)
    db.session.flush()
    metrics_for(u.id)
    db.session.commit()
    return u


def login(test_client, email, password="secret123"):
    res = test_client.post("/api/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.get_json()
    return res


@pytest.fixture()
def user(app):
    return make_user()


@pytest.fixture()
def admin(app):
    return make_user(email="admin@example.com", name="Alex Admin", role="admin")


@pytest.fixture()
def user_client(app, user):
    c = app.test_client()
    login(c, user.email)
    return c


@pytest.fixture()
def admin_client(app, admin):
    c = app.test_client()
    login(c, admin.email)
    return c


@pytest.fixture()
def rooms(app):
    gym = Room(name="Gymnasium", description="Big hall", capacity=200, hourly_rate=40,
               half_day_rate=120, full_day_rate=250, features=["Stage"], image_url="/images/gym.jpg")
    community = Room(name="Community Room", description="Stage and sound", capacity=50, hourly_rate=30,
                     half_day_rate=100, full_day_rate=180, features=["Sound System"],
                     image_url="/images/community.jpg")
    db.session.add_all([gym, community])
    db.session.commit()
    return gym, community


def png_bytes(width=3, height=2):
    from PIL import Image
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()


class FlaskTestAdapter(BaseAdapter):
    """requests transport that answers from a Flask test client (which keeps the cookies)."""

    def __init__(self, test_client):
        super().__init__()
        self.test_client = test_client

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        parts = urlsplit(request.url)
        path = parts.path + (f"?{parts.query}" if parts.query else "")
        headers = {k: v for k, v in request.headers.items() if k.lower() not in ("content-length", "host")}
        body = request.body
        if isinstance(body, str):
            body = body.encode("utf-8")
        r = self.test_client.open(path, method=request.method, headers=headers, data=body or b"")

        resp = requests.Response()
        resp.status_code = r.status_code
        resp.reason = r.status.split(" ", 1)[1] if " " in r.status else ""
        resp._content = r.get_data()
        resp.headers = CaseInsensitiveDict(dict(r.headers))
        resp.encoding = "utf-8"
        resp.url = request.url
        resp.request = request
        return resp

    def close(self):
        pass


@pytest.fixture()
def http_session(app):
    s = requests.Session()
    s.mount(BASE_URL, FlaskTestAdapter(app.test_client()))
    return s
