"""Derivation of a school day's period boundaries from the period settings.

This is the only place period times are computed. The timetable editor and the
student dashboard both call :func:`generate` so the two views cannot drift apart.
"""
from __future__ import annotations

from dataclasses import dataclass

from timetable_portal.core.exceptions import ValidationError
from timetable_portal.schemas.settings import MINUTES_PER_DAY, TEACHING_PERIODS, PeriodSettingsUpdate, parse_time_to_minutes

LUNCH_PERIOD = 0
# The last period of the day is the class diary period.
DIARY_PERIOD = TEACHING_PERIODS


@dataclass(frozen=True)
class PeriodSlotSpec:
    period_number: int
    start_time: str
    end_time: str

    @property
    def is_lunch(self) -> bool:
        return self.period_number == LUNCH_PERIOD

    @property
    def is_diary(self) -> bool:
        return self.period_number == DIARY_PERIOD

    @property
    def label(self) -> str:
        return "Lunch" if self.is_lunch else f"Period {self.period_number}"

    @property
    def display(self) -> str:
        return f"{format_12h(self.start_time)} - {format_12h(self.end_time)}"


def format_minutes(total_minutes: int) -> str:
    total_minutes %= MINUTES_PER_DAY
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def add_minutes(value: str, minutes: int) -> str:
    return format_minutes(parse_time_to_minutes(value) + minutes)


def format_12h(value: str) -> str:
    hours, minutes = (int(part) for part in value.split(":"))
    suffix = "PM" if hours >= 12 else "AM"
    display_hours = hours - 12 if hours > 12 else 12 if hours == 0 else hours
    return f"{display_hours:02d}:{minutes:02d} {suffix}"


def generate(settings: PeriodSettingsUpdate) -> list[PeriodSlotSpec]:
    slots: list[PeriodSlotSpec] = []
    clock = settings.school_start_time
    for number in range(1, TEACHING_PERIODS + 1):
        end = add_minutes(clock, settings.period_duration_minutes)
        slots.append(PeriodSlotSpec(number, clock, end))
        clock = end
        if number == settings.lunch_after_period:
            end = add_minutes(clock, settings.lunch_duration_minutes)
            slots.append(PeriodSlotSpec(LUNCH_PERIOD, clock, end))
            clock = end
    return slots


def teaching_slot(settings: PeriodSettingsUpdate, period_number: int) -> PeriodSlotSpec:
    if period_number == LUNCH_PERIOD:
        raise ValidationError("Lunch is not a teaching period", details={"period": period_number})
    for slot in generate(settings):
        if slot.period_number == period_number:
            return slot
    raise ValidationError(
        f"Period must be between 1 and {TEACHING_PERIODS}",
        details={"period": period_number},
    )
