"""initial schema: guest list, sessions, rsvps and photo gallery

Revision ID: 3f1c2b7a9d01
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""

import sqlalchemy as sa
import sqlalchemy_utils
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f1c2b7a9d01"
down_revision = None
branch_labels = None
depends_on = None


def uuid_type():
    return sqlalchemy_utils.UUIDType(binary=False)


def timestamps():
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
    ]


account_status_enum = sa.Enum("guest", "registered", "deleted", name="account_status_enum")
response_status_enum = sa.Enum(
    "attending", "not_attending", "pending", name="response_status_enum"
)


def upgrade() -> None:
    # Guest list, one row per person
    op.create_table(
        "users",
        sa.Column("id", uuid_type(), nullable=False),
        *timestamps(),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("partner_id", uuid_type(), nullable=True),
        sa.Column("plus_one_allowed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("account_status", account_status_enum, nullable=False, server_default="guest"),
        sa.Column("admin_notes", sa.Text(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["partner_id"], ["users.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("idx_users_name", "users", ["last_name", "first_name"])
    op.create_index("ix_users_partner_id", "users", ["partner_id"])
    op.create_index("ix_users_email", "users", ["email"])
    op.create_index("ix_users_is_admin", "users", ["is_admin"])
    op.create_index("ix_users_account_status", "users", ["account_status"])
    op.create_index("ix_users_deleted_at", "users", ["deleted_at"])

    op.create_table(
        "user_sessions",
        sa.Column("sid", sa.String(64), nullable=False),
        sa.Column("user_id", uuid_type(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("sid"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_user_sessions_user_id", "user_sessions", ["user_id"])
    op.create_index("ix_user_sessions_expires_at", "user_sessions", ["expires_at"])

    op.create_table(
        "rsvps",
        sa.Column("id", uuid_type(), nullable=False),
        *timestamps(),
        sa.Column("user_id", uuid_type(), nullable=False),
        sa.Column("partner_id", uuid_type(), nullable=True),
        sa.Column(
            "response_status", response_status_enum, nullable=False, server_default="pending"
        ),
        sa.Column("dietary_restrictions", sa.Text(), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["partner_id"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_rsvps_user_id", "rsvps", ["user_id"], unique=True)
    op.create_index("ix_rsvps_partner_id", "rsvps", ["partner_id"])
    op.create_index("ix_rsvps_response_status", "rsvps", ["response_status"])

    # Photo gallery
    op.create_table(
        "photo_categories",
        sa.Column("id", uuid_type(), nullable=False),
        *timestamps(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
        sa.UniqueConstraint("slug"),
    )

    op.create_table(
        "photos",
        sa.Column("id", uuid_type(), nullable=False),
        *timestamps(),
        sa.Column("user_id", uuid_type(), nullable=False),
        sa.Column("category_id", uuid_type(), nullable=True),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("original_filename", sa.String(255), nullable=False),
        sa.Column("file_path", sa.String(500), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("mime_type", sa.String(100), nullable=False),
        sa.Column("caption", sa.Text(), nullable=True),
        sa.Column("is_approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("upload_date", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["photo_categories.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("filename"),
    )
    op.create_index("ix_photos_user_id", "photos", ["user_id"])
    op.create_index("ix_photos_category_id", "photos", ["category_id"])
    op.create_index("ix_photos_is_approved", "photos", ["is_approved"])

    op.create_table(
        "photo_comments",
        sa.Column("id", uuid_type(), nullable=False),
        *timestamps(),
        sa.Column("photo_id", uuid_type(), nullable=False),
        sa.Column("user_id", uuid_type(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("is_approved", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["photo_id"], ["photos.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_photo_comments_photo_id", "photo_comments", ["photo_id"])

    op.create_table(
        "photo_likes",
        sa.Column("id", uuid_type(), nullable=False),
        sa.Column("photo_id", uuid_type(), nullable=False),
        sa.Column("user_id", uuid_type(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["photo_id"], ["photos.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("photo_id", "user_id", name="uq_photo_likes_photo_user"),
    )
    op.create_index("ix_photo_likes_photo_id", "photo_likes", ["photo_id"])


def downgrade() -> None:
    op.drop_table("photo_likes")
    op.drop_table("photo_comments")
    op.drop_table("photos")
    op.drop_table("photo_categories")
    op.drop_table("rsvps")
    op.drop_table("user_sessions")
    op.drop_table("users")

    bind = op.get_bind()
    response_status_enum.drop(bind, checkfirst=True)
    account_status_enum.drop(bind, checkfirst=True)
