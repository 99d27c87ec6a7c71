"""
Tests for vault lifecycle.

Covers:
- A new vault arrives with the four default categories, owner gets no grant row
- Partial update: absent keys untouched, description can be cleared
- Only ADMIN or above may update
- Delete is owner-only and removes items, categories and grants of that vault only
- Listing returns owned and granted vaults once each
- A failed create or delete rolls back completely
"""

import pytest

from core.errors import InsufficientPermissionError, NotFoundError, VaultNotFoundOrForbiddenError
from items.schemas import CredentialItemCreate
from items.service import create_item
from models.category import Category
from models.credential_item import CredentialItem
from models.vault import Vault
from models.vault_permission import VaultUserPermission
from permissions.service import grant_permission
from vaults import service


@pytest.fixture
def owner(make_user):
    return make_user()


class TestCreateVault:
    def test_default_categories(self, db, owner):
        vault = service.create_vault(db, "Personal", "mine", False, owner.id)
        names = sorted(c.name for c in db.query(Category).filter(Category.vault_id == vault.id))
        assert names == ["Banking", "Personal", "Social", "Work"]

    def test_owner_has_no_grant_row(self, db, owner):
        vault = service.create_vault(db, "Personal", None, False, owner.id)
        assert vault.owner_id == owner.id
        assert db.query(VaultUserPermission).filter(VaultUserPermission.vault_id == vault.id).count() == 0

    def test_failed_insert_leaves_nothing(self, db, owner, fail_flush_when):
        fail_flush_when(lambda session: any(isinstance(o, Category) for o in session.new))
        with pytest.raises(RuntimeError):
            service.create_vault(db, "Half", None, False, owner.id)

        assert db.query(Vault).count() == 0
        assert db.query(Category).count() == 0


class TestUpdateVault:
    def test_partial_update(self, db, owner):
        vault = service.create_vault(db, "Old", "keep me", False, owner.id)
        updated = service.update_vault(db, vault.id, {"name": "New"}, owner.id)
        assert updated.name == "New"
        assert updated.description == "keep me"
        assert updated.is_shared is False

    def test_description_cleared(self, db, owner):
        vault = service.create_vault(db, "Old", "drop me", False, owner.id)
        updated = service.update_vault(db, vault.id, {"description": None}, owner.id)
        assert updated.description is None

    def test_writer_cannot_update(self, db, owner, make_user):
        writer = make_user()
        vault = service.create_vault(db, "Team", None, True, owner.id)
        grant_permission(db, vault.id, writer.id, "write", owner.id)
        with pytest.raises(InsufficientPermissionError):
            service.update_vault(db, vault.id, {"name": "Hijacked"}, writer.id)

    def test_vault_admin_can_update(self, db, owner, make_user):
        vault_admin = make_user()
        vault = service.create_vault(db, "Team", None, True, owner.id)
        grant_permission(db, vault.id, vault_admin.id, "admin", owner.id)
        assert service.update_vault(db, vault.id, {"is_shared": False}, vault_admin.id).is_shared is False


class TestDeleteVault:
    def _populate(self, db, vault, owner_id):
        category = db.query(Category).filter(Category.vault_id == vault.id).first()
        create_item(db, CredentialItemCreate(
            title="Bank", type="password", vault_id=vault.id,
            category_id=category.id, password="pw",
        ), owner_id)
        create_item(db, CredentialItemCreate(
            title="Note", type="secure_note", vault_id=vault.id, notes="n",
        ), owner_id)

    def test_cascade_is_complete_and_scoped(self, db, owner, make_user):
        member = make_user()
        doomed = service.create_vault(db, "Doomed", None, True, owner.id)
        kept = service.create_vault(db, "Kept", None, False, owner.id)
        self._populate(db, doomed, owner.id)
        self._populate(db, kept, owner.id)
        grant_permission(db, doomed.id, member.id, "read", owner.id)

        service.delete_vault(db, doomed.id, owner.id)

        assert db.query(Vault).filter(Vault.id == doomed.id).first() is None
        assert db.query(CredentialItem).filter(CredentialItem.vault_id == doomed.id).count() == 0
        assert db.query(Category).filter(Category.vault_id == doomed.id).count() == 0
        assert db.query(VaultUserPermission).filter(VaultUserPermission.vault_id == doomed.id).count() == 0

        assert db.query(CredentialItem).filter(CredentialItem.vault_id == kept.id).count() == 2
        assert db.query(Category).filter(Category.vault_id == kept.id).count() == 4

    def test_vault_admin_cannot_delete(self, db, owner, make_user):
        vault_admin = make_user()
        vault = service.create_vault(db, "Team", None, True, owner.id)
        grant_permission(db, vault.id, vault_admin.id, "admin", owner.id)
        with pytest.raises(VaultNotFoundOrForbiddenError):
            service.delete_vault(db, vault.id, vault_admin.id)
        assert db.query(Vault).filter(Vault.id == vault.id).count() == 1

    def test_missing_vault_looks_the_same(self, db, owner):
        with pytest.raises(VaultNotFoundOrForbiddenError):
            service.delete_vault(db, 9999, owner.id)

    def test_failed_delete_rolls_back_everything(self, db, owner, make_user, fail_flush_when):
        member = make_user()
        vault = service.create_vault(db, "Survivor", None, True, owner.id)
        self._populate(db, vault, owner.id)
        grant_permission(db, vault.id, member.id, "read", owner.id)

        fail_flush_when(lambda session: any(isinstance(o, Vault) for o in session.deleted))
        with pytest.raises(RuntimeError):
            service.delete_vault(db, vault.id, owner.id)
        db.expire_all()

        assert db.query(Vault).filter(Vault.id == vault.id).count() == 1
        assert db.query(Category).filter(Category.vault_id == vault.id).count() == 4
        assert db.query(CredentialItem).filter(CredentialItem.vault_id == vault.id).count() == 2
        grants = db.query(VaultUserPermission).filter(VaultUserPermission.vault_id == vault.id).all()
        assert [(g.user_id, g.permission) for g in grants] == [(member.id, "read")]


class TestLookup:
    def test_list_owned_and_granted(self, db, owner, make_user):
        other = make_user()
        mine = service.create_vault(db, "Mine", None, False, owner.id)
        theirs = service.create_vault(db, "Theirs", None, True, other.id)
        service.create_vault(db, "Private", None, False, other.id)
        grant_permission(db, theirs.id, owner.id, "read", other.id)

        assert [v.id for v in service.list_vaults_for_user(db, owner.id)] == [mine.id, theirs.id]

    def test_get_without_access_is_not_found(self, db, owner, make_user):
        stranger = make_user()
        vault = service.create_vault(db, "Mine", None, False, owner.id)
        with pytest.raises(NotFoundError):
            service.get_vault(db, vault.id, stranger.id)
        assert service.get_vault(db, vault.id, owner.id).id == vault.id
