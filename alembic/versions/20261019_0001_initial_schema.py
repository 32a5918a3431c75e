"""Initial schema - users, pages, page pairs, lenses, masteries

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True, index=True),
        sa.Column("full_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "pages",
        sa.Column("page_id", sa.String(32), primary_key=True),
        sa.Column("alias", sa.String(255), nullable=False, unique=True, index=True),
        sa.Column("title", sa.String(512), nullable=False, server_default=""),
        sa.Column("clickbait", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # subject: child teaches parent; requirement: child requires parent
    op.create_table(
        "page_pairs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("parent_id", sa.String(32), nullable=False),
        sa.Column("child_id", sa.String(32), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_page_pairs_parent_type", "page_pairs", ["parent_id", "type"])
    op.create_index("ix_page_pairs_child_type", "page_pairs", ["child_id", "type"])

    op.create_table(
        "lenses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("page_id", sa.String(32), nullable=False, index=True),
        sa.Column("lens_id", sa.String(32), nullable=False, unique=True),
        sa.Column("lens_index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("lens_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "user_mastery_pairs",
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("mastery_id", sa.String(32), primary_key=True),
        sa.Column("has", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("wants", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("taught_by", sa.String(32), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("user_mastery_pairs")
    op.drop_table("lenses")
    op.drop_index("ix_page_pairs_child_type", table_name="page_pairs")
    op.drop_index("ix_page_pairs_parent_type", table_name="page_pairs")
    op.drop_table("page_pairs")
    op.drop_table("pages")
    op.drop_table("users")
