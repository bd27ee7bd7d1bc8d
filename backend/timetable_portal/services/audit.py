from __future__ import annotations

from sqlalchemy.orm import Session

from timetable_portal.models.activity_log import ActivityLog


def log_activity(
    db: Session,
    *,
    actor: str | None,
    action: str,
    entity_type: str,
    entity_id: str | None = None,
    details: dict | None = None,
) -> None:
    """Stage an audit row in the caller's transaction; the caller commits."""
    db.add(
        ActivityLog(
            actor=actor,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details or {},
        )
    )
