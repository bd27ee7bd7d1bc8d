from __future__ import annotations

import re
from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
TEACHING_PERIODS = 8
MINUTES_PER_DAY = 24 * 60


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class PeriodSettingsUpdate(BaseModel):
    """The four institution-wide knobs every period grid is derived from."""

    period_duration_minutes: int = Field(
        ge=30,
        le=120,
        alias="periodDuration",
        validation_alias=AliasChoices("periodDuration", "periodDurationMinutes", "period_duration_minutes"),
    )
    school_start_time: str = Field(
        alias="schoolStartTime",
        validation_alias=AliasChoices("schoolStartTime", "school_start_time"),
    )
    lunch_after_period: int = Field(
        ge=1,
        le=TEACHING_PERIODS,
        alias="lunchPeriod",
        validation_alias=AliasChoices("lunchPeriod", "lunchAfterPeriod", "lunch_after_period"),
    )
    lunch_duration_minutes: int = Field(
        ge=20,
        le=120,
        alias="lunchDuration",
        validation_alias=AliasChoices("lunchDuration", "lunchDurationMinutes", "lunch_duration_minutes"),
    )

    @field_validator("school_start_time")
    @classmethod
    def validate_start_time(cls, value: str) -> str:
        value = value.strip()
        if not TIME_PATTERN.match(value):
            raise ValueError("Invalid school start time format (expected HH:MM)")
        return value

    @model_validator(mode="after")
    def validate_day_fits(self) -> "PeriodSettingsUpdate":
        day_end = (
            parse_time_to_minutes(self.school_start_time)
            + TEACHING_PERIODS * self.period_duration_minutes
            + self.lunch_duration_minutes
        )
        if day_end >= MINUTES_PER_DAY:
            raise ValueError("School day must end before midnight; reduce the start time or durations")
        return self


class PeriodSettingsOut(PeriodSettingsUpdate):
    version: int
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    model_config = {"populate_by_name": True}


class PeriodSlotOut(BaseModel):
    period_number: int = Field(alias="period")
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    is_lunch: bool = Field(alias="isLunch")
    is_diary: bool = Field(default=False, alias="isDiary")
    label: str
    display: str

    model_config = {"from_attributes": True, "populate_by_name": True}


DEFAULT_PERIOD_SETTINGS = PeriodSettingsUpdate(
    periodDuration=60,
    schoolStartTime="08:00",
    lunchPeriod=5,
    lunchDuration=60,
)
