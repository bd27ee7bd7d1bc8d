from __future__ import annotations

import logging

from sqlalchemy import inspect, text

import timetable_portal.models  # noqa: F401
from timetable_portal.db.base import Base
from timetable_portal.db.session import engine

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "period_settings": {
        "id",
        "period_duration_minutes",
        "school_start_time",
        "lunch_after_period",
        "lunch_duration_minutes",
        "version",
    },
    "timetable_entries": {
        "id",
        "class_id",
        "weekday",
        "period_number",
        "subject_id",
        "teacher_id",
        "start_time",
        "end_time",
        "settings_version",
        "version",
    },
    "holidays": {"id", "name", "start_date", "end_date"},
    "school_classes": {"id", "name", "section"},
    "teachers": {"id", "name"},
    "subjects": {"id", "name"},
}


def _ensure_entry_version_columns() -> None:
    # Databases created before optimistic locking lack the two counters.
    with engine.begin() as connection:
        inspector = inspect(connection)
        if "timetable_entries" not in set(inspector.get_table_names()):
            return
        column_names = {item["name"] for item in inspector.get_columns("timetable_entries")}
        if "settings_version" not in column_names:
            connection.execute(
                text("ALTER TABLE timetable_entries ADD COLUMN settings_version INTEGER NOT NULL DEFAULT 0")
            )
        if "version" not in column_names:
            connection.execute(text("ALTER TABLE timetable_entries ADD COLUMN version INTEGER NOT NULL DEFAULT 1"))


def _ensure_settings_version_column() -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        if "period_settings" not in set(inspector.get_table_names()):
            return
        column_names = {item["name"] for item in inspector.get_columns("period_settings")}
        if "version" not in column_names:
            connection.execute(text("ALTER TABLE period_settings ADD COLUMN version INTEGER NOT NULL DEFAULT 1"))


def missing_schema_items(connection) -> tuple[list[str], dict[str, list[str]]]:
    inspector = inspect(connection)
    table_names = set(inspector.get_table_names())
    missing_tables = sorted(name for name in REQUIRED_COLUMNS if name not in table_names)
    missing_columns: dict[str, list[str]] = {}
    for table_name, required in REQUIRED_COLUMNS.items():
        if table_name not in table_names:
            continue
        existing = {item["name"] for item in inspector.get_columns(table_name)}
        missing = sorted(required - existing)
        if missing:
            missing_columns[table_name] = missing
    return missing_tables, missing_columns


def _assert_required_columns() -> None:
    with engine.begin() as connection:
        missing_tables, missing_columns = missing_schema_items(connection)
    if missing_tables:
        raise RuntimeError(f"Missing required tables: {', '.join(missing_tables)}")
    if missing_columns:
        flattened = [f"{table}.{column}" for table, columns in missing_columns.items() for column in columns]
        raise RuntimeError(f"Missing required columns: {', '.join(flattened)}")


def ensure_runtime_schema_compatibility() -> None:
    try:
        # Ensure missing tables are present before additive compatibility patches.
        Base.metadata.create_all(bind=engine)
        _ensure_entry_version_columns()
        _ensure_settings_version_column()
        _assert_required_columns()
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Runtime schema compatibility bootstrap failed")
        raise RuntimeError("Runtime schema compatibility bootstrap failed") from exc
