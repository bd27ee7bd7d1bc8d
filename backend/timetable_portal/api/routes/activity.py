import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from timetable_portal.api.deps import get_db
from timetable_portal.core.exceptions import TransportError
from timetable_portal.models.activity_log import ActivityLog
from timetable_portal.schemas.activity import ActivityLogOut

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/activity/logs", response_model=list[ActivityLogOut])
def list_activity_logs(
    entity_type: str | None = Query(default=None),
    entity_id: str | None = Query(default=None),
    limit: int = Query(default=200, ge=1, le=500),
    db: Session = Depends(get_db),
) -> list[ActivityLogOut]:
    query = select(ActivityLog)
    if entity_type is not None:
        query = query.where(ActivityLog.entity_type == entity_type)
    if entity_id is not None:
        query = query.where(ActivityLog.entity_id == entity_id)
    query = query.order_by(ActivityLog.created_at.desc()).limit(limit)
    try:
        return list(db.execute(query).scalars())
    except OperationalError as exc:
        logger.exception("Unable to read the activity log")
        raise TransportError("The activity log is unavailable") from exc
