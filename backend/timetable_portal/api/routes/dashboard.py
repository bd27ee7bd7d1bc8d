from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from timetable_portal.api.deps import get_db
from timetable_portal.schemas.dashboard import DashboardOut
from timetable_portal.services.dashboard import build_dashboard

router = APIRouter()


@router.get("/dashboard/classes/{class_id}/timetable", response_model=DashboardOut)
def get_class_timetable(
    class_id: str,
    today: date | None = Query(default=None),
    db: Session = Depends(get_db),
) -> DashboardOut:
    # Holidays are projected onto the week containing `today`.
    return build_dashboard(db, class_id, today or date.today())
