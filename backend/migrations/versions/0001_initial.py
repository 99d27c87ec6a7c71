"""Initial schema – users, vaults, categories, credential items, grants, revoked tokens

Revision ID: 0001_initial
Revises:
Create Date: 2026-02-05

Creates every table with the foreign-key constraints and indexes required
by the application.  No foreign key cascades: vault deletion removes its
rows explicitly, and users are only ever deactivated.
"""

from alembic import op
import sqlalchemy as sa

# Alembic revision identifiers
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(with_updated: bool = True) -> list:
    cols = [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]
    if with_updated:
        cols.append(
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=True),
                server_default=sa.func.now(),
                nullable=False,
            )
        )
    return cols


def upgrade() -> None:
    # -- users ----------------------------------------------------------
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("salt", sa.String(255), nullable=False),
        sa.Column(
            "role",
            sa.Enum("admin", "user", name="user_role"),
            nullable=False,
            server_default="user",
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column(
            "force_password_change",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("1"),
        ),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"])

    # -- vaults ---------------------------------------------------------
    op.create_table(
        "vaults",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("owner_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("is_shared", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
    )
    op.create_index("ix_vaults_owner_id", "vaults", ["owner_id"])

    # -- categories -----------------------------------------------------
    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(32), nullable=True),
        sa.Column("vault_id", sa.Integer(), sa.ForeignKey("vaults.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_categories_vault_id", "categories", ["vault_id"])

    # -- credential_items -----------------------------------------------
    op.create_table(
        "credential_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column(
            "type",
            sa.Enum("password", "credit_card", "secure_note", "software_license", name="item_type"),
            nullable=False,
        ),
        sa.Column("vault_id", sa.Integer(), sa.ForeignKey("vaults.id"), nullable=False),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id"), nullable=True),
        sa.Column("website_url", sa.String(2048), nullable=True),
        sa.Column("username", sa.String(255), nullable=True),
        sa.Column("card_holder_name", sa.String(255), nullable=True),
        sa.Column("card_expiry_date", sa.String(16), nullable=True),
        sa.Column("license_email", sa.String(255), nullable=True),
        # iv_hex ":" ciphertext_hex – never plaintext
        sa.Column("password_encrypted", sa.Text(), nullable=True),
        sa.Column("notes_encrypted", sa.Text(), nullable=True),
        sa.Column("card_number_encrypted", sa.Text(), nullable=True),
        sa.Column("card_cvv_encrypted", sa.Text(), nullable=True),
        sa.Column("license_key_encrypted", sa.Text(), nullable=True),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_credential_items_vault_id", "credential_items", ["vault_id"])
    op.create_index("ix_credential_items_category_id", "credential_items", ["category_id"])

    # -- vault_user_permissions -----------------------------------------
    op.create_table(
        "vault_user_permissions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("vault_id", sa.Integer(), sa.ForeignKey("vaults.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "permission",
            sa.Enum("read", "write", "admin", name="vault_permission"),
            nullable=False,
        ),
        sa.Column("granted_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(with_updated=False),
        sa.UniqueConstraint("vault_id", "user_id", name="uq_vault_user_permission"),
    )
    op.create_index("ix_vault_user_permissions_vault_id", "vault_user_permissions", ["vault_id"])
    op.create_index("ix_vault_user_permissions_user_id", "vault_user_permissions", ["user_id"])

    # -- revoked_tokens -------------------------------------------------
    op.create_table(
        "revoked_tokens",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("token_hash", sa.String(64), nullable=False, unique=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(with_updated=False),
    )
    op.create_index("ix_revoked_tokens_expires_at", "revoked_tokens", ["expires_at"])


def downgrade() -> None:
    op.drop_index("ix_revoked_tokens_expires_at", table_name="revoked_tokens")
    op.drop_table("revoked_tokens")
    op.drop_index("ix_vault_user_permissions_user_id", table_name="vault_user_permissions")
    op.drop_index("ix_vault_user_permissions_vault_id", table_name="vault_user_permissions")
    op.drop_table("vault_user_permissions")
    op.drop_index("ix_credential_items_category_id", table_name="credential_items")
    op.drop_index("ix_credential_items_vault_id", table_name="credential_items")
    op.drop_table("credential_items")
    op.drop_index("ix_categories_vault_id", table_name="categories")
    op.drop_table("categories")
    op.drop_index("ix_vaults_owner_id", table_name="vaults")
    op.drop_table("vaults")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
