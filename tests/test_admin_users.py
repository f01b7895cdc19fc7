from models_auth import User
from tests.conftest import login


class TestAdminUsers:
    def test_list(self, admin_client, user):
        emails = [u["email"] for u in admin_client.get("/api/admin/users").get_json()["users"]]
        assert set(emails) == {"admin@example.com", user.email}

    def test_create_admin_account(self, app, admin_client):
        res = admin_client.post("/api/admin/users", json={"name": "Second Admin", "email": "two@example.com",
                                                          "password": "secret123", "role": "admin"})
        assert res.status_code == 201
        assert res.get_json()["user"]["role"] == "admin"
        login(app.test_client(), "two@example.com")

    def test_create_duplicate(self, admin_client, user):
        res = admin_client.post("/api/admin/users", json={"name": "Dup", "email": user.email,
                                                          "password": "secret123"})
        assert res.status_code == 400
        assert res.get_json()["error"] == "email_already_registered"

    def test_update_role_and_email(self, admin_client, user):
        res = admin_client.put(f"/api/admin/users/{user.id}", json={"role": "admin", "email": "pat@example.com"})
        assert res.status_code == 200
        assert res.get_json()["user"]["role"] == "admin"
        assert res.get_json()["user"]["email"] == "pat@example.com"

    def test_update_to_taken_email(self, admin_client, user):
        res = admin_client.put(f"/api/admin/users/{user.id}", json={"email": "admin@example.com"})
        assert res.status_code == 400

    def test_cannot_delete_self(self, admin_client, admin):
        res = admin_client.delete(f"/api/admin/users/{admin.id}")
        assert res.status_code == 400
        assert res.get_json()["error"] == "cannot_delete_self"

    def test_delete_other_user(self, admin_client, user):
        uid = user.id
        assert admin_client.delete(f"/api/admin/users/{uid}").status_code == 200
        assert User.query.filter_by(id=uid).first() is None
        assert admin_client.delete(f"/api/admin/users/{uid}").status_code == 404

    def test_member_cannot_manage_users(self, user_client):
        assert user_client.get("/api/admin/users").status_code == 403
