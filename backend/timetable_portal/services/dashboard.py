"""Read-only weekly timetable for a student's class.

Reuses the same period derivation and grid assembly as the editor, then lays
the holiday overlay on top. Nothing here writes to the database.
"""
from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from sqlalchemy.orm import Session

from timetable_portal.core.exceptions import NotFoundError
from timetable_portal.models.timetable_entry import TimetableEntry
from timetable_portal.schemas.dashboard import DashboardCellOut, DashboardDayOut, DashboardOut, TeacherContactOut
from timetable_portal.schemas.directory import HolidayMatchOut
from timetable_portal.schemas.settings import PeriodSlotOut
from timetable_portal.services.directory import ReferenceData, get_class, load_holiday_ranges, load_reference_data, serialize_entry
from timetable_portal.services.holiday_overlay import holiday_days, week_dates
from timetable_portal.services.settings_store import load_period_settings
from timetable_portal.services.timetable_store import TimetableStore
from timetable_portal.services.weekly_grid import build_weekly_grid


def teachers_for_entries(
    entries: Iterable[TimetableEntry],
    refs: ReferenceData,
    class_teacher_id: str | None = None,
) -> list[TeacherContactOut]:
    subjects_by_teacher: dict[str, set[str]] = {}
    for entry in entries:
        subject = refs.subject_name(entry.subject_id) or entry.subject_id
        subjects_by_teacher.setdefault(entry.teacher_id, set()).add(subject)

    contacts = []
    for teacher_id, subjects in subjects_by_teacher.items():
        teacher = refs.teachers.get(teacher_id)
        contacts.append(
            TeacherContactOut(
                teacher_id=teacher_id,
                teacher_name=teacher.name if teacher is not None else teacher_id,
                contact_number=teacher.contact_number if teacher is not None else None,
                subjects=sorted(subjects),
                is_class_teacher=class_teacher_id is not None and teacher_id == class_teacher_id,
            )
        )
    # Class teacher first, then alphabetical.
    contacts.sort(key=lambda item: (not item.is_class_teacher, item.teacher_name.lower()))
    return contacts


def build_dashboard(db: Session, class_id: str, today: date) -> DashboardOut:
    school_class = get_class(db, class_id)
    if school_class is None:
        raise NotFoundError("Class", class_id)

    settings = load_period_settings(db)
    entries = TimetableStore(db).get_by_class(class_id)
    refs = load_reference_data(db, class_id)
    grid = build_weekly_grid(class_id, settings, entries, settings_version=settings.version)
    dates = week_dates(today)
    holidays = holiday_days(today, load_holiday_ranges(db))

    days = []
    for weekday, cells in grid.rows():
        match = holidays[weekday]
        days.append(
            DashboardDayOut(
                day=weekday,
                calendar_date=dates[weekday],
                holiday=HolidayMatchOut(matched=match.matched, name=match.name),
                cells=[
                    DashboardCellOut(
                        period_number=cell.slot.period_number,
                        start_time=cell.start_time,
                        end_time=cell.end_time,
                        is_lunch=cell.slot.is_lunch,
                        is_diary=cell.slot.is_diary,
                        is_holiday=match.matched,
                        entry=(
                            serialize_entry(cell.entry, refs)
                            if cell.entry is not None and not match.matched
                            else None
                        ),
                    )
                    for cell in cells
                ],
            )
        )

    return DashboardOut(
        class_id=class_id,
        class_name=f"{school_class.name} {school_class.section}".strip(),
        today=today,
        settings_version=settings.version,
        periods=[PeriodSlotOut.model_validate(slot) for slot in grid.periods],
        days=days,
        teachers=teachers_for_entries(entries, refs, school_class.class_teacher_id),
    )
