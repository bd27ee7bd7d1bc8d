from datetime import date, datetime

import pytest
from pydantic import ValidationError as SchemaValidationError

from timetable_portal.models.timetable_entry import Weekday
from timetable_portal.schemas.directory import HolidayRange
from timetable_portal.services.holiday_overlay import NO_HOLIDAY, holiday_days, is_holiday, week_dates

BREAK = [HolidayRange.model_validate({"start": "2025-12-24", "end": "2025-12-26", "name": "Break"})]


def test_is_holiday_inside_and_outside_range():
    match = is_holiday("2025-12-25", BREAK)
    assert match.matched
    assert match.name == "Break"

    assert is_holiday("2025-12-27", BREAK) == NO_HOLIDAY


def test_is_holiday_bounds_are_inclusive():
    assert is_holiday(date(2025, 12, 24), BREAK).matched
    assert is_holiday(datetime(2025, 12, 26, 18, 30), BREAK).matched
    assert not is_holiday("2025-12-23T23:59:00", BREAK).matched


def test_single_day_holiday_and_first_match_wins():
    ranges = [
        HolidayRange.model_validate({"date": "2025-12-25", "occasion": "Christmas"}),
        *BREAK,
    ]
    assert ranges[0].end_date == date(2025, 12, 25)
    assert is_holiday("2025-12-25", ranges).name == "Christmas"
    assert is_holiday("2025-12-26", ranges).name == "Break"


def test_holiday_range_rejects_reversed_dates():
    with pytest.raises(SchemaValidationError):
        HolidayRange.model_validate({"startDate": "2025-12-26", "endDate": "2025-12-24"})


def test_week_dates_are_sunday_first():
    # 2025-12-24 is a Wednesday.
    dates = week_dates(date(2025, 12, 24))
    assert dates[Weekday.MONDAY] == date(2025, 12, 22)
    assert dates[Weekday.SATURDAY] == date(2025, 12, 27)

    # On a Sunday the school week is the one that follows.
    assert week_dates("2025-12-21")[Weekday.MONDAY] == date(2025, 12, 22)
    # Saturday still belongs to the week that started the previous Sunday.
    assert week_dates("2025-12-27")[Weekday.MONDAY] == date(2025, 12, 22)


def test_holiday_days_for_current_week():
    days = holiday_days("2025-12-24", BREAK)

    assert [weekday for weekday, match in days.items() if match.matched] == [
        Weekday.WEDNESDAY,
        Weekday.THURSDAY,
        Weekday.FRIDAY,
    ]
    assert days[Weekday.THURSDAY].name == "Break"
    assert days[Weekday.MONDAY] == NO_HOLIDAY
