from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import or_, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from timetable_portal.core.exceptions import TransportError
from timetable_portal.models.directory import SchoolClass, Subject, Teacher
from timetable_portal.models.holiday import Holiday
from timetable_portal.models.timetable_entry import TimetableEntry
from timetable_portal.schemas.directory import HolidayRange
from timetable_portal.schemas.timetable import TimetableEntryOut

logger = logging.getLogger(__name__)


@dataclass
class ReferenceData:
    """Id to record lookups for the dropdowns and name columns of a timetable."""

    teachers: dict[str, Teacher] = field(default_factory=dict)
    subjects: dict[str, Subject] = field(default_factory=dict)

    def teacher_name(self, teacher_id: str) -> str | None:
        teacher = self.teachers.get(teacher_id)
        return teacher.name if teacher is not None else None

    def subject_name(self, subject_id: str) -> str | None:
        subject = self.subjects.get(subject_id)
        return subject.name if subject is not None else None


def _fetch_all(db: Session, query, what: str) -> list:
    try:
        return list(db.execute(query).scalars())
    except OperationalError as exc:
        logger.exception("Unable to load %s", what)
        raise TransportError(f"The {what} directory is unavailable") from exc


def get_class(db: Session, class_id: str) -> SchoolClass | None:
    try:
        return db.get(SchoolClass, class_id)
    except OperationalError as exc:
        logger.exception("Unable to load class %s", class_id)
        raise TransportError("The class directory is unavailable") from exc


def list_classes(db: Session) -> list[SchoolClass]:
    return _fetch_all(db, select(SchoolClass).order_by(SchoolClass.name, SchoolClass.section), "class")


def list_teachers(db: Session) -> list[Teacher]:
    return _fetch_all(db, select(Teacher).order_by(Teacher.name), "teacher")


def list_subjects(db: Session, class_id: str | None = None) -> list[Subject]:
    query = select(Subject).order_by(Subject.name)
    if class_id is not None:
        # Subjects without a class are shared across every class.
        query = query.where(or_(Subject.class_id == class_id, Subject.class_id.is_(None)))
    return _fetch_all(db, query, "subject")


def list_holidays(db: Session) -> list[Holiday]:
    return _fetch_all(db, select(Holiday).order_by(Holiday.start_date), "holiday")


def load_holiday_ranges(db: Session) -> list[HolidayRange]:
    return [HolidayRange.model_validate(item) for item in list_holidays(db)]


def load_reference_data(db: Session, class_id: str | None = None) -> ReferenceData:
    return ReferenceData(
        teachers={item.id: item for item in list_teachers(db)},
        subjects={item.id: item for item in list_subjects(db, class_id)},
    )


def serialize_entry(entry: TimetableEntry, refs: ReferenceData) -> TimetableEntryOut:
    return TimetableEntryOut(
        id=entry.id,
        class_id=entry.class_id,
        weekday=entry.weekday,
        period_number=entry.period_number,
        start_time=entry.start_time,
        end_time=entry.end_time,
        subject_id=entry.subject_id,
        subject_name=refs.subject_name(entry.subject_id),
        teacher_id=entry.teacher_id,
        teacher_name=refs.teacher_name(entry.teacher_id),
        room_number=entry.room_number,
        version=entry.version,
        settings_version=entry.settings_version,
    )
