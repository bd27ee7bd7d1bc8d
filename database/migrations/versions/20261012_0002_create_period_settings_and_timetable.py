"""create period settings and timetable entries

Revision ID: 20261012_0002
Revises: 20261012_0001
Create Date: 2026-10-12 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261012_0002"
down_revision = "20261012_0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    weekday = sa.Enum("MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", name="weekday")

    op.create_table(
        "period_settings",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("period_duration_minutes", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("school_start_time", sa.String(length=5), nullable=False, server_default="08:00"),
        sa.Column("lunch_after_period", sa.Integer(), nullable=False, server_default="5"),
        sa.Column("lunch_duration_minutes", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "timetable_entries",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("class_id", sa.String(length=36), nullable=False),
        sa.Column("weekday", weekday, nullable=False),
        sa.Column("period_number", sa.Integer(), nullable=False),
        sa.Column("subject_id", sa.String(length=36), nullable=False),
        sa.Column("teacher_id", sa.String(length=36), nullable=False),
        sa.Column("room_number", sa.String(length=50), nullable=True),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("settings_version", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("class_id", "weekday", "period_number", name="uq_timetable_entries_cell"),
    )
    op.create_index("ix_timetable_entries_class_id", "timetable_entries", ["class_id"], unique=False)
    op.create_index("ix_timetable_entries_teacher_id", "timetable_entries", ["teacher_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_timetable_entries_teacher_id", table_name="timetable_entries")
    op.drop_index("ix_timetable_entries_class_id", table_name="timetable_entries")
    op.drop_table("timetable_entries")
    op.drop_table("period_settings")
    sa.Enum(name="weekday").drop(op.get_bind(), checkfirst=True)
