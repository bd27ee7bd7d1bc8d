from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from timetable_portal.api.deps import get_db
from timetable_portal.schemas.directory import HolidayMatchOut, HolidayOut, SchoolClassOut, SubjectOut, TeacherOut
from timetable_portal.services.directory import list_classes, list_holidays, list_subjects, list_teachers, load_holiday_ranges
from timetable_portal.services.holiday_overlay import is_holiday

router = APIRouter()


@router.get("/classes", response_model=list[SchoolClassOut])
def get_classes(db: Session = Depends(get_db)) -> list[SchoolClassOut]:
    return list_classes(db)


@router.get("/teachers", response_model=list[TeacherOut])
def get_teachers(db: Session = Depends(get_db)) -> list[TeacherOut]:
    return list_teachers(db)


@router.get("/subjects", response_model=list[SubjectOut])
def get_subjects(
    class_id: str | None = Query(default=None, alias="classId"),
    db: Session = Depends(get_db),
) -> list[SubjectOut]:
    return list_subjects(db, class_id)


@router.get("/holidays", response_model=list[HolidayOut])
def get_holidays(db: Session = Depends(get_db)) -> list[HolidayOut]:
    return list_holidays(db)


@router.get("/holidays/check", response_model=HolidayMatchOut)
def check_holiday(on: date = Query(alias="date"), db: Session = Depends(get_db)) -> HolidayMatchOut:
    match = is_holiday(on, load_holiday_ranges(db))
    return HolidayMatchOut(matched=match.matched, name=match.name)
