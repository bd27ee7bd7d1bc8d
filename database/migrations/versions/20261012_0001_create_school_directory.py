"""create school directory

Revision ID: 20261012_0001
Revises:
Create Date: 2026-10-12 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261012_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "school_classes",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("section", sa.String(length=20), nullable=False, server_default="A"),
        sa.Column("class_teacher_id", sa.String(length=36), nullable=True),
    )

    op.create_table(
        "teachers",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("contact_number", sa.String(length=30), nullable=True),
    )

    op.create_table(
        "subjects",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("class_id", sa.String(length=36), nullable=True),
    )
    op.create_index("ix_subjects_class_id", "subjects", ["class_id"], unique=False)

    op.create_table(
        "holidays",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_holidays_start_date", "holidays", ["start_date"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_holidays_start_date", table_name="holidays")
    op.drop_table("holidays")
    op.drop_index("ix_subjects_class_id", table_name="subjects")
    op.drop_table("subjects")
    op.drop_table("teachers")
    op.drop_table("school_classes")
