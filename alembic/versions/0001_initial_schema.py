"""Initial CMS schema.

Creates site configuration, leadership, shields, shield values, gallery
categories/items, historical milestones/images and users, plus the partial
unique index allowing a single main shield.

Revision ID: 0001
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(with_updated: bool = True):
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)]
    if with_updated:
        columns.append(
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)
        )
    return columns


def _display_order_index(table: str) -> None:
    op.create_index(f"ix_{table}_display_order", table, ["display_order"], unique=False)


def upgrade() -> None:
    op.create_table(
        "site_config",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("site_name", sa.Text(), nullable=False),
        sa.Column("site_subtitle", sa.Text(), nullable=False),
        sa.Column("hero_description", sa.Text(), nullable=True),
        sa.Column("logo_url", sa.Text(), nullable=True),
        sa.Column("logo_s3_key", sa.Text(), nullable=True),
        sa.Column("favicon_url", sa.Text(), nullable=True),
        sa.Column("favicon_s3_key", sa.Text(), nullable=True),
        sa.Column("contact_email", sa.Text(), nullable=True),
        sa.Column("contact_phone", sa.Text(), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("training_schedule", sa.Text(), nullable=True),
        sa.Column("training_location", sa.Text(), nullable=True),
        sa.Column("ceremonies_schedule", sa.Text(), nullable=True),
        sa.Column("ceremonies_notes", sa.Text(), nullable=True),
        sa.Column("meetings_schedule", sa.Text(), nullable=True),
        sa.Column("meetings_location", sa.Text(), nullable=True),
        sa.Column("admission_requirements", sa.JSON(), nullable=True),
        sa.Column("footer_description", sa.Text(), nullable=True),
        sa.Column("mission_statement", sa.Text(), nullable=True),
        sa.Column("leadership_title", sa.Text(), nullable=True),
        sa.Column("leadership_description", sa.Text(), nullable=True),
        sa.Column("leadership_image_url", sa.Text(), nullable=True),
        sa.Column("leadership_image_s3_key", sa.Text(), nullable=True),
        sa.Column("founding_year", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "leadership_periods",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("year", sa.Text(), nullable=False),
        sa.Column("jefatura", sa.Text(), nullable=False),
        sa.Column("segunda_voz", sa.Text(), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("image_s3_key", sa.Text(), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    _display_order_index("leadership_periods")

    op.create_table(
        "shields",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=False),
        sa.Column("image_s3_key", sa.Text(), nullable=True),
        sa.Column("symbolism", sa.Text(), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_main_shield", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    _display_order_index("shields")
    op.create_index(
        "uq_shields_single_main",
        "shields",
        ["is_main_shield"],
        unique=True,
        postgresql_where=sa.text("is_main_shield"),
        sqlite_where=sa.text("is_main_shield = 1"),
    )

    op.create_table(
        "shield_values",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("icon_name", sa.String(20), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    _display_order_index("shield_values")

    op.create_table(
        "gallery_categories",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("slug", sa.Text(), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(with_updated=False),
        sa.UniqueConstraint("name", name="uq_gallery_categories_name"),
        sa.UniqueConstraint("slug", name="uq_gallery_categories_slug"),
    )
    _display_order_index("gallery_categories")

    op.create_table(
        "gallery_items",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=False),
        sa.Column("image_s3_key", sa.Text(), nullable=True),
        sa.Column("thumbnail_url", sa.Text(), nullable=True),
        sa.Column("thumbnail_s3_key", sa.Text(), nullable=True),
        sa.Column(
            "category_id",
            sa.String(36),
            sa.ForeignKey("gallery_categories.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("year", sa.Text(), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    _display_order_index("gallery_items")
    op.create_index("ix_gallery_items_category_id", "gallery_items", ["category_id"], unique=False)

    op.create_table(
        "historical_milestones",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("year", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("icon_name", sa.String(20), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    _display_order_index("historical_milestones")

    op.create_table(
        "historical_images",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=False),
        sa.Column("image_s3_key", sa.Text(), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    _display_order_index("historical_images")

    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("user_name", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(255), nullable=True),
        sa.Column("last_name", sa.String(255), nullable=True),
        sa.Column("company", sa.String(255), nullable=True),
        sa.Column("config_step", sa.String(10), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_historical_images_display_order", table_name="historical_images")
    op.drop_table("historical_images")
    op.drop_index("ix_historical_milestones_display_order", table_name="historical_milestones")
    op.drop_table("historical_milestones")
    op.drop_index("ix_gallery_items_category_id", table_name="gallery_items")
    op.drop_index("ix_gallery_items_display_order", table_name="gallery_items")
    op.drop_table("gallery_items")
    op.drop_index("ix_gallery_categories_display_order", table_name="gallery_categories")
    op.drop_table("gallery_categories")
    op.drop_index("ix_shield_values_display_order", table_name="shield_values")
    op.drop_table("shield_values")
    op.drop_index("uq_shields_single_main", table_name="shields")
    op.drop_index("ix_shields_display_order", table_name="shields")
    op.drop_table("shields")
    op.drop_index("ix_leadership_periods_display_order", table_name="leadership_periods")
    op.drop_table("leadership_periods")
    op.drop_table("site_config")
