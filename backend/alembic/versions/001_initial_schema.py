"""Initial schema — artists and courses.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "artists",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("genres", sa.JSON, nullable=False),
        sa.Column("origin_year", sa.Integer, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_artists_name", "artists", ["name"])

    op.create_table(
        "courses",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(120), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("level", sa.String(20), nullable=False, server_default="beginner"),
        sa.Column(
            "artist_id", sa.Integer,
            sa.ForeignKey("artists.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_courses_artist_id", "courses", ["artist_id"])


def downgrade() -> None:
    op.drop_index("ix_courses_artist_id", table_name="courses")
    op.drop_table("courses")
    op.drop_index("ix_artists_name", table_name="artists")
    op.drop_table("artists")
