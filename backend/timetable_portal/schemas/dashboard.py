from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from timetable_portal.models.timetable_entry import Weekday
from timetable_portal.schemas.directory import HolidayMatchOut
from timetable_portal.schemas.settings import PeriodSlotOut
from timetable_portal.schemas.timetable import TimetableEntryOut


class DashboardCellOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    period_number: int = Field(alias="period")
    start_time: str
    end_time: str
    is_lunch: bool = False
    is_diary: bool = False
    is_holiday: bool = False
    entry: TimetableEntryOut | None = None


class DashboardDayOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day: Weekday
    calendar_date: date = Field(alias="date")
    holiday: HolidayMatchOut
    cells: list[DashboardCellOut]


class TeacherContactOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    teacher_id: str
    teacher_name: str
    contact_number: str | None = None
    subjects: list[str]
    is_class_teacher: bool = False


class DashboardOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    class_id: str
    class_name: str
    today: date
    settings_version: int
    periods: list[PeriodSlotOut]
    days: list[DashboardDayOut]
    teachers: list[TeacherContactOut]
