import pytest

from client import ApiClient, ApiError, AuthSession, QueryCache, USER_KEY
from tests.conftest import BASE_URL, make_user


@pytest.fixture()
def api(http_session):
    return ApiClient(BASE_URL, session=http_session)


class TestQueryCache:
    def test_set_get_invalidate(self):
        c = QueryCache()
        c.set(("/api/events", 2030, 3), [1])
        c.set(("/api/user",), {"id": 1})
        assert ("/api/events", 2030, 3) in c
        c.invalidate("/api/events")
        assert ("/api/events", 2030, 3) not in c
        assert c.get(("/api/user",)) == {"id": 1}
        c.invalidate()
        assert c.get(("/api/user",)) is None


class TestApiClient:
    def test_get_query_is_cached_until_invalidated(self, api, rooms):
        first = api.get_query(("/api/rooms",))
        assert len(first["rooms"]) == 2
        from extensions import db
        from models_rooms import Room
        db.session.add(Room(name="Classroom", description="Desks", capacity=30, features=[], image_url="/c.jpg"))
        db.session.commit()
        assert len(api.get_query(("/api/rooms",))["rooms"]) == 2
        api.cache.invalidate("/api/rooms")
        assert len(api.get_query(("/api/rooms",))["rooms"]) == 3

    def test_401_modes(self, api):
        assert api.get_query(USER_KEY, on401="returnNull") is None
        api.cache.invalidate()
        with pytest.raises(ApiError) as exc:
            api.get_query(USER_KEY)
        assert str(exc.value).startswith("401: ")
        assert exc.value.status == 401

    def test_json_request_and_multipart(self, api):
        res = api.request("POST", "/api/newsletter/subscribe", {"email": "c@example.com"})
        assert res.status_code == 201
        res = api.request("POST", "/api/upload", files={"file": ("a.txt", b"hello", "text/plain")})
        assert res.status_code == 201
        assert res.json()["originalName"] == "a.txt"

    def test_mutate_raises_and_invalidates(self, api):
        api.cache.set(("/api/donations/total",), {"total": 0})
        api.mutate("POST", "/api/donations", {"name": "Dana Giver", "email": "d@example.com", "amount": 5},
                   invalidate="/api/donations")
        assert ("/api/donations/total",) not in api.cache
        with pytest.raises(ApiError) as exc:
            api.mutate("POST", "/api/donations", {"name": "Dana Giver", "email": "d@example.com", "amount": 0})
        assert exc.value.status == 400


class TestAuthSession:
    def test_register_logout_login(self, api):
        auth = AuthSession(api)
        assert auth.user is None

        user = auth.register("Sam Neighbor", "sam@example.com", "secret123")
        assert user["email"] == "sam@example.com"
        assert auth.user["name"] == "Sam Neighbor"
        assert auth.redirect_to == "/dashboard"
        assert auth.notifications[-1].title == "Registration successful"

        auth.logout()
        assert auth.user is None
        assert auth.redirect_to == "/"

        auth.login("sam@example.com", "secret123")
        assert auth.notifications[-1].description == "Welcome back, Sam Neighbor!"
        # session cookie is live: a fresh (uncached) query sees the same user
        api.cache.invalidate(USER_KEY[0])
        assert auth.user["email"] == "sam@example.com"

    def test_failed_login_surfaces_server_message(self, app, api):
        make_user(email="lee@example.com")
        auth = AuthSession(api)
        with pytest.raises(ApiError):
            auth.login("lee@example.com", "wrong-password")
        note = auth.notifications[-1]
        assert (note.title, note.variant) == ("Login failed", "destructive")
        assert note.description == "Invalid email or password"
        assert auth.user is None

    def test_password_confirmation(self, api):
        auth = AuthSession(api)
        with pytest.raises(ValueError):
            auth.register("Sam", "sam@example.com", "secret123", confirm_password="different")
        assert auth.notifications[-1].description == "Passwords don't match"

    def test_admin_flag(self, app, api):
        make_user(email="boss@example.com", role="admin")
        auth = AuthSession(api)
        auth.login("boss@example.com", "secret123")
        assert auth.is_admin
