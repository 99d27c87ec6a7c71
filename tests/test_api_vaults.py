"""
End-to-end tests over HTTP for vaults, categories, items, permissions and
the generator.

Covers:
- Read access upgraded to write access (the sharing scenario)
- Domain errors map to {"detail", "error"} with the right status
- Unreadable ciphertext surfaces as integrity_error / 500
- Empty secrets come back as null, plain fields verbatim
- Explicit null category in search over HTTP
- Generator endpoints
"""

import pytest

from models.credential_item import CredentialItem


@pytest.fixture
def alice(make_user):
    return make_user(email="alice@example.com")


@pytest.fixture
def bob(make_user):
    return make_user(email="bob@example.com")


def _vault(client, headers, name="Shared", **extra):
    resp = client.post("/vaults", json={"name": name, **extra}, headers=headers)
    assert resp.status_code == 201
    return resp.json()


class TestSharingScenario:
    def test_read_then_write(self, client, alice, bob, auth_headers):
        a, b = auth_headers(alice), auth_headers(bob)
        vault = _vault(client, a, is_shared=True)

        item = client.post(
            "/items",
            json={"vault_id": vault["id"], "title": "Router", "type": "password", "password": "admin!pw"},
            headers=a,
        ).json()

        # Bob has nothing yet
        assert client.get(f"/items/{item['id']}", headers=b).status_code == 403
        assert client.get(f"/permissions/me?vault_id={vault['id']}", headers=b).json()["permission"] is None

        grant = client.post(
            "/permissions",
            json={"vault_id": vault["id"], "user_id": bob.id, "permission": "read"},
            headers=a,
        ).json()

        # Read: can see the secret, cannot add
        assert client.get(f"/items/{item['id']}", headers=b).json()["password"] == "admin!pw"
        denied = client.post(
            "/items",
            json={"vault_id": vault["id"], "title": "Mine", "type": "secure_note"},
            headers=b,
        )
        assert denied.status_code == 403
        assert denied.json()["error"] == "insufficient_permission"

        # Upgrade to write
        upgraded = client.put(f"/permissions/{grant['id']}", json={"permission": "write"}, headers=a)
        assert upgraded.status_code == 200
        assert upgraded.json()["permission"] == "write"

        created = client.post(
            "/items",
            json={"vault_id": vault["id"], "title": "Mine", "type": "secure_note", "notes": "hello"},
            headers=b,
        )
        assert created.status_code == 201
        assert created.json()["created_by"] == bob.id

        # Still not an admin of the vault
        assert client.put(f"/vaults/{vault['id']}", json={"name": "Bob's"}, headers=b).status_code == 403
        assert client.get(f"/permissions?vault_id={vault['id']}", headers=b).status_code == 403

        rows = client.get("/permissions/vaults", headers=b).json()["vaults"]
        assert [(r["vault"]["id"], r["permission"]) for r in rows] == [(vault["id"], "write")]

    def test_self_modification_over_http(self, client, alice, bob, auth_headers):
        vault = _vault(client, auth_headers(alice))
        grant = client.post(
            "/permissions",
            json={"vault_id": vault["id"], "user_id": bob.id, "permission": "admin"},
            headers=auth_headers(alice),
        ).json()
        resp = client.put(f"/permissions/{grant['id']}", json={"permission": "read"}, headers=auth_headers(bob))
        assert resp.status_code == 409
        assert resp.json() == {"detail": "Cannot modify your own permissions", "error": "invalid_state"}

    def test_duplicate_grant_over_http(self, client, alice, bob, auth_headers):
        vault = _vault(client, auth_headers(alice))
        body = {"vault_id": vault["id"], "user_id": bob.id, "permission": "read"}
        assert client.post("/permissions", json=body, headers=auth_headers(alice)).status_code == 201
        assert client.post("/permissions", json=body, headers=auth_headers(alice)).status_code == 409


class TestVaultRoutes:
    def test_create_list_get(self, client, alice, auth_headers):
        vault = _vault(client, auth_headers(alice), name="Personal", description="mine")
        assert vault["owner_id"] == alice.id
        assert vault["is_shared"] is False

        listed = client.get("/vaults", headers=auth_headers(alice)).json()["vaults"]
        assert [v["id"] for v in listed] == [vault["id"]]

        categories = client.get(f"/categories?vault_id={vault['id']}", headers=auth_headers(alice)).json()
        assert [c["name"] for c in categories["categories"]] == ["Banking", "Personal", "Social", "Work"]

    def test_get_without_access_is_404(self, client, alice, bob, auth_headers):
        vault = _vault(client, auth_headers(alice))
        resp = client.get(f"/vaults/{vault['id']}", headers=auth_headers(bob))
        assert resp.status_code == 404
        assert resp.json()["error"] == "not_found"

    def test_null_name_rejected(self, client, alice, auth_headers):
        vault = _vault(client, auth_headers(alice))
        resp = client.put(f"/vaults/{vault['id']}", json={"name": None}, headers=auth_headers(alice))
        assert resp.status_code == 422

    def test_delete(self, client, alice, bob, auth_headers):
        vault = _vault(client, auth_headers(alice))
        assert client.delete(f"/vaults/{vault['id']}", headers=auth_headers(bob)).status_code == 404
        assert client.delete(f"/vaults/{vault['id']}", headers=auth_headers(alice)).status_code == 204
        assert client.get(f"/vaults/{vault['id']}", headers=auth_headers(alice)).status_code == 404


class TestItemRoutes:
    def test_search_explicit_null_category(self, client, alice, auth_headers):
        a = auth_headers(alice)
        vault = _vault(client, a)
        category_id = client.get(f"/categories?vault_id={vault['id']}", headers=a).json()["categories"][0]["id"]
        client.post(
            "/items",
            json={"vault_id": vault["id"], "title": "Filed", "type": "password", "category_id": category_id},
            headers=a,
        )
        loose = client.post(
            "/items", json={"vault_id": vault["id"], "title": "Loose", "type": "password"}, headers=a,
        ).json()

        found = client.post(
            "/items/search", json={"vault_id": vault["id"], "category_id": None}, headers=a,
        ).json()["items"]
        assert [i["id"] for i in found] == [loose["id"]]

        everything = client.post("/items/search", json={"vault_id": vault["id"]}, headers=a).json()["items"]
        assert len(everything) == 2

    def test_corrupted_ciphertext_is_integrity_error(self, client, db, alice, auth_headers):
        a = auth_headers(alice)
        vault = _vault(client, a)
        item = client.post(
            "/items",
            json={"vault_id": vault["id"], "title": "Broken", "type": "password", "password": "pw"},
            headers=a,
        ).json()

        row = db.query(CredentialItem).filter(CredentialItem.id == item["id"]).one()
        row.password_encrypted = "not-a-cipher-value"
        db.commit()

        resp = client.get(f"/items/{item['id']}", headers=a)
        assert resp.status_code == 500
        assert resp.json()["error"] == "integrity_error"

    def test_update_and_delete(self, client, alice, auth_headers):
        a = auth_headers(alice)
        vault = _vault(client, a)
        item = client.post(
            "/items",
            json={"vault_id": vault["id"], "title": "Mail", "type": "password", "password": "old"},
            headers=a,
        ).json()

        updated = client.put(f"/items/{item['id']}", json={"password": "new"}, headers=a).json()
        assert updated["password"] == "new"
        assert updated["title"] == "Mail"

        assert client.delete(f"/items/{item['id']}", headers=a).status_code == 204
        assert client.get(f"/items/{item['id']}", headers=a).status_code == 404

    def test_empty_secret_comes_back_null(self, client, alice, auth_headers):
        a = auth_headers(alice)
        vault = _vault(client, a)
        item = client.post(
            "/items",
            json={"vault_id": vault["id"], "title": "Blank", "type": "password", "password": "", "username": ""},
            headers=a,
        ).json()

        assert item["password"] is None
        assert item["username"] == ""
        assert client.get(f"/items/{item['id']}", headers=a).json()["password"] is None

    def test_delete_category_keeps_items(self, client, alice, auth_headers):
        a = auth_headers(alice)
        vault = _vault(client, a)
        category = client.post(
            "/categories", json={"vault_id": vault["id"], "name": "Games"}, headers=a,
        ).json()
        item = client.post(
            "/items",
            json={"vault_id": vault["id"], "title": "Steam", "type": "password", "category_id": category["id"]},
            headers=a,
        ).json()

        assert client.delete(f"/categories/{category['id']}", headers=a).status_code == 204
        assert client.get(f"/items/{item['id']}", headers=a).json()["category_id"] is None


class TestGeneratorRoutes:
    def test_generate(self, client, alice, auth_headers):
        resp = client.get("/generator/password?length=128", headers=auth_headers(alice))
        assert resp.status_code == 200
        assert len(resp.json()["password"]) == 128
        assert resp.json()["strength"] == 100

    def test_no_sets_is_invalid_input(self, client, alice, auth_headers):
        resp = client.get(
            "/generator/password",
            params={
                "include_uppercase": "false",
                "include_lowercase": "false",
                "include_numbers": "false",
                "include_symbols": "false",
            },
            headers=auth_headers(alice),
        )
        assert resp.status_code == 400
        assert resp.json() == {
            "detail": "No character sets selected for password generation",
            "error": "invalid_input",
        }

    @pytest.mark.parametrize("length", [3, 129])
    def test_length_bounds(self, client, alice, auth_headers, length):
        resp = client.get(f"/generator/password?length={length}", headers=auth_headers(alice))
        assert resp.status_code == 422

    def test_strength(self, client, alice, auth_headers):
        resp = client.post("/generator/strength", json={"password": "Password123!"}, headers=auth_headers(alice))
        assert resp.status_code == 200
        assert resp.json()["strength"] == 55

    def test_requires_login(self, client):
        assert client.get("/generator/password").status_code == 401


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
