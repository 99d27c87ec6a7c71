"""
Tests for the /admin/users routes.

Covers:
- Only system admins get in
- Create user: unique email, must change password on first login
- Partial update and the self-lockout guards
- Reset password
- Deactivation: login refused, tokens refused, grants kept, no new grants
"""

import pytest

from conftest import DEFAULT_PASSWORD
from models.vault_permission import VaultUserPermission


@pytest.fixture
def admin(make_user):
    return make_user(email="root@example.com", role="admin")


class TestAccess:
    def test_regular_user_refused(self, client, make_user, auth_headers):
        user = make_user()
        assert client.get("/admin/users", headers=auth_headers(user)).status_code == 403

    def test_anonymous_refused(self, client):
        assert client.get("/admin/users").status_code == 401


class TestCreateUser:
    def test_create(self, client, admin, auth_headers):
        resp = client.post(
            "/admin/users",
            json={"email": "new@example.com", "full_name": "New Person", "password": "Welcome99"},
            headers=auth_headers(admin),
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["role"] == "user"
        assert body["is_active"] is True

        login = client.post("/auth/login", json={"email": "new@example.com", "password": "Welcome99"})
        assert login.json()["force_password_change"] is True

    def test_duplicate_email(self, client, admin, make_user, auth_headers):
        make_user(email="taken@example.com")
        resp = client.post(
            "/admin/users",
            json={"email": "taken@example.com", "full_name": "Again", "password": "Welcome99"},
            headers=auth_headers(admin),
        )
        assert resp.status_code == 409

    def test_password_policy_applies(self, client, admin, auth_headers):
        resp = client.post(
            "/admin/users",
            json={"email": "new@example.com", "full_name": "New", "password": "alllowercase"},
            headers=auth_headers(admin),
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_input"

    def test_short_password(self, client, admin, auth_headers):
        resp = client.post(
            "/admin/users",
            json={"email": "new@example.com", "full_name": "New", "password": "short"},
            headers=auth_headers(admin),
        )
        assert resp.status_code == 422

    def test_list_and_get(self, client, admin, make_user, auth_headers):
        user = make_user()
        listed = client.get("/admin/users", headers=auth_headers(admin)).json()["users"]
        assert [u["id"] for u in listed] == [admin.id, user.id]
        assert client.get(f"/admin/users/{user.id}", headers=auth_headers(admin)).json()["email"] == user.email
        assert client.get("/admin/users/9999", headers=auth_headers(admin)).status_code == 404


class TestUpdateUser:
    def test_partial_update(self, client, admin, make_user, auth_headers):
        user = make_user(full_name="Old Name")
        resp = client.put(
            f"/admin/users/{user.id}",
            json={"role": "admin"},
            headers=auth_headers(admin),
        )
        assert resp.status_code == 200
        assert resp.json()["role"] == "admin"
        assert resp.json()["full_name"] == "Old Name"

    def test_cannot_demote_self(self, client, admin, auth_headers):
        resp = client.put(f"/admin/users/{admin.id}", json={"role": "user"}, headers=auth_headers(admin))
        assert resp.status_code == 400

    def test_cannot_disable_self(self, client, admin, auth_headers):
        resp = client.put(f"/admin/users/{admin.id}", json={"is_active": False}, headers=auth_headers(admin))
        assert resp.status_code == 400
        assert client.delete(f"/admin/users/{admin.id}", headers=auth_headers(admin)).status_code == 400

    def test_email_stays_unique(self, client, admin, make_user, auth_headers):
        make_user(email="taken@example.com")
        user = make_user()
        resp = client.put(
            f"/admin/users/{user.id}",
            json={"email": "taken@example.com"},
            headers=auth_headers(admin),
        )
        assert resp.status_code == 409

    def test_reset_password(self, client, admin, make_user, auth_headers):
        user = make_user(email="forgetful@example.com")
        resp = client.put(
            f"/admin/users/{user.id}/reset-password",
            json={"new_password": "Temporary1"},
            headers=auth_headers(admin),
        )
        assert resp.status_code == 200

        assert client.post(
            "/auth/login", json={"email": "forgetful@example.com", "password": DEFAULT_PASSWORD}
        ).status_code == 401
        login = client.post("/auth/login", json={"email": "forgetful@example.com", "password": "Temporary1"})
        assert login.status_code == 200
        assert login.json()["force_password_change"] is True


class TestDeactivation:
    def test_deactivated_user_keeps_grants_but_loses_access(self, client, db, admin, make_user, auth_headers):
        owner = make_user()
        member = make_user(email="member@example.com")

        vault_id = client.post("/vaults", json={"name": "Team"}, headers=auth_headers(owner)).json()["id"]
        grant = client.post(
            "/permissions",
            json={"vault_id": vault_id, "user_id": member.id, "permission": "write"},
            headers=auth_headers(owner),
        )
        assert grant.status_code == 201
        member_headers = auth_headers(member)

        resp = client.delete(f"/admin/users/{member.id}", headers=auth_headers(admin))
        assert resp.status_code == 200
        assert resp.json()["is_active"] is False

        # Existing token and fresh logins are refused
        assert client.get("/auth/me", headers=member_headers).status_code == 401
        assert client.post(
            "/auth/login", json={"email": "member@example.com", "password": DEFAULT_PASSWORD}
        ).status_code == 401

        # The grant row survives
        listed = client.get(f"/permissions?vault_id={vault_id}", headers=auth_headers(owner)).json()
        assert [p["user_id"] for p in listed["permissions"]] == [member.id]
        db.expire_all()
        assert db.query(VaultUserPermission).filter(VaultUserPermission.user_id == member.id).count() == 1

        # ...but nothing new can be granted
        again = client.post(
            "/permissions",
            json={"vault_id": vault_id, "user_id": member.id, "permission": "read"},
            headers=auth_headers(owner),
        )
        assert again.status_code == 409
        assert again.json()["error"] == "invalid_state"
        assert again.json()["detail"] == "Cannot grant permissions to inactive user"
