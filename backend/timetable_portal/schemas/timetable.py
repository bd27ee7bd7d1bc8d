from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from timetable_portal.models.timetable_entry import Weekday
from timetable_portal.schemas.settings import TIME_PATTERN, PeriodSlotOut

DAY_SHORT_MAP = {
    "MON": Weekday.MONDAY,
    "TUE": Weekday.TUESDAY,
    "WED": Weekday.WEDNESDAY,
    "THU": Weekday.THURSDAY,
    "FRI": Weekday.FRIDAY,
    "SAT": Weekday.SATURDAY,
}


def normalize_weekday(value: str | Weekday) -> Weekday:
    if isinstance(value, Weekday):
        return value
    cleaned = str(value).strip().upper()
    if cleaned in Weekday.__members__:
        return Weekday[cleaned]
    if cleaned in DAY_SHORT_MAP:
        return DAY_SHORT_MAP[cleaned]
    if cleaned in {"SUN", "SUNDAY"}:
        raise ValueError("Sunday is never scheduled")
    raise ValueError(f"Invalid day value: {value}")


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value.strip() if isinstance(value, str) else value


class TimetableEntryDraft(BaseModel):
    """Write payload for a timetable cell.

    Field names differ between the admin editor and older clients, so every
    accepted spelling is listed here and nowhere else.
    """

    class_id: str = Field(
        min_length=1,
        max_length=36,
        validation_alias=AliasChoices("classId", "class_id"),
    )
    weekday: Weekday = Field(validation_alias=AliasChoices("day", "weekday"))
    period_number: int = Field(validation_alias=AliasChoices("period", "periodNumber", "period_number"))
    subject_id: str | None = Field(
        default=None,
        max_length=36,
        validation_alias=AliasChoices("subjectId", "subject", "subject_id"),
    )
    teacher_id: str | None = Field(
        default=None,
        max_length=36,
        validation_alias=AliasChoices("teacherId", "teacher", "teacher_id"),
    )
    room_number: str | None = Field(
        default=None,
        max_length=50,
        validation_alias=AliasChoices("roomNumber", "room", "room_number"),
    )
    start_time: str | None = Field(default=None, validation_alias=AliasChoices("startTime", "start", "start_time"))
    end_time: str | None = Field(default=None, validation_alias=AliasChoices("endTime", "end", "end_time"))
    expected_version: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("expectedVersion", "expected_version"),
    )

    @field_validator("class_id", "subject_id", "teacher_id", "room_number", mode="before")
    @classmethod
    def normalize_identifier(cls, value):
        return _blank_to_none(value)

    @field_validator("weekday", mode="before")
    @classmethod
    def validate_weekday(cls, value):
        return normalize_weekday(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value


class TimetableEntryOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    class_id: str
    weekday: Weekday = Field(alias="day")
    period_number: int = Field(alias="period")
    start_time: str
    end_time: str
    subject_id: str
    subject_name: str | None = None
    teacher_id: str
    teacher_name: str | None = None
    room_number: str | None = None
    version: int
    settings_version: int


class GridCellOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    period_number: int = Field(alias="period")
    start_time: str
    end_time: str
    is_lunch: bool = False
    entry: TimetableEntryOut | None = None


class GridDayOut(BaseModel):
    day: Weekday
    cells: list[GridCellOut]


class EditorGridOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    class_id: str
    settings_version: int
    periods: list[PeriodSlotOut]
    days: list[GridDayOut]


class CellDraftOut(BaseModel):
    """What the editor pre-fills when an operator opens a cell."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    class_id: str
    weekday: Weekday = Field(alias="day")
    period_number: int = Field(alias="period")
    start_time: str
    end_time: str
    subject_id: str | None = None
    teacher_id: str | None = None
    room_number: str | None = None
    entry_id: str | None = None
    # Send back as expectedVersion; 0 means the cell was empty when opened.
    expected_version: int = 0
