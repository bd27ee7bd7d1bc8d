"""Holiday suppression for the weekly timetable view.

The overlay is a display-time projection: it decides which weekdays of the
current calendar week fall inside a holiday range. Stored timetable entries are
never modified.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from timetable_portal.models.timetable_entry import Weekday
from timetable_portal.schemas.directory import HolidayRange

# Sunday-first indices, matching how the student calendar counts a week.
SUNDAY_FIRST_INDEX = {
    Weekday.MONDAY: 1,
    Weekday.TUESDAY: 2,
    Weekday.WEDNESDAY: 3,
    Weekday.THURSDAY: 4,
    Weekday.FRIDAY: 5,
    Weekday.SATURDAY: 6,
}


@dataclass(frozen=True)
class HolidayMatch:
    matched: bool
    name: str | None = None


NO_HOLIDAY = HolidayMatch(matched=False)


def as_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def is_holiday(day: date | datetime | str, ranges: Iterable[HolidayRange]) -> HolidayMatch:
    target = as_date(day)
    for holiday in ranges:
        if holiday.start_date <= target <= holiday.end_date:
            return HolidayMatch(matched=True, name=holiday.name)
    return NO_HOLIDAY


def week_dates(today: date | datetime | str) -> dict[Weekday, date]:
    """Map each school weekday to its date in the week containing ``today``.

    Weeks start on Sunday, so on a Sunday the weekdays resolve to the six days
    that follow it.
    """
    anchor = as_date(today)
    today_index = anchor.isoweekday() % 7
    return {
        weekday: anchor + timedelta(days=index - today_index)
        for weekday, index in SUNDAY_FIRST_INDEX.items()
    }


def holiday_days(today: date | datetime | str, ranges: Iterable[HolidayRange]) -> dict[Weekday, HolidayMatch]:
    ranges = list(ranges)
    return {weekday: is_holiday(day, ranges) for weekday, day in week_dates(today).items()}
