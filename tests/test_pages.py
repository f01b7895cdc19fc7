import pytest

from routes_pages import PAGES, ADMIN, LOGIN, PUBLIC, show_banner

PUBLIC_PATHS = [p for p, (_, a) in PAGES.items() if a == PUBLIC and p != "/auth"]
LOGIN_PATHS = [p for p, (_, a) in PAGES.items() if a == LOGIN]
ADMIN_PATHS = [p for p, (_, a) in PAGES.items() if a == ADMIN]


class TestPublicPages:
    @pytest.mark.parametrize("path", PUBLIC_PATHS)
    def test_public_pages_render_for_anyone(self, client, path):
        res = client.get(path)
        assert res.status_code == 200
        assert b"announcement-banner" in res.data

    def test_unknown_page_is_404_html(self, client):
        res = client.get("/no-such-page")
        assert res.status_code == 404
        assert b"Page Not Found" in res.data

    def test_unknown_api_path_is_404_json(self, client):
        res = client.get("/api/no-such-thing")
        assert res.status_code == 404
        assert res.get_json()["ok"] is False

    def test_rentals_lists_rooms(self, client, rooms):
        res = client.get("/rentals")
        assert b"Gymnasium" in res.data and b"Community Room" in res.data


class TestGate:
    @pytest.mark.parametrize("path", LOGIN_PATHS + ADMIN_PATHS)
    def test_anonymous_is_sent_to_auth(self, client, path):
        res = client.get(path)
        assert res.status_code == 302
        assert res.headers["Location"].startswith("/auth?next=")

    @pytest.mark.parametrize("path", LOGIN_PATHS)
    def test_logged_in_user_sees_member_pages_without_banner(self, user_client, path):
        res = user_client.get(path)
        assert res.status_code == 200
        assert b"announcement-banner" not in res.data

    @pytest.mark.parametrize("path", ADMIN_PATHS)
    def test_non_admin_is_sent_to_dashboard(self, user_client, path):
        res = user_client.get(path)
        assert res.status_code == 302
        assert res.headers["Location"].endswith("/dashboard")

    @pytest.mark.parametrize("path", ADMIN_PATHS)
    def test_admin_sees_admin_pages(self, admin_client, path):
        res = admin_client.get(path)
        assert res.status_code == 200
        assert b"announcement-banner" not in res.data

    def test_auth_page_redirects_signed_in_user_to_next(self, user_client):
        res = user_client.get("/auth?next=/profile")
        assert res.status_code == 302
        assert res.headers["Location"].endswith("/profile")

    def test_auth_page_ignores_offsite_next(self, user_client):
        res = user_client.get("/auth?next=//evil.example.com")
        assert res.headers["Location"].endswith("/dashboard")


class TestBanner:
    def test_banner_rule(self):
        assert show_banner("/")
        assert show_banner("/events")
        assert not show_banner("/admin/users")
        assert not show_banner("/dashboard")
        assert not show_banner("/profile")
