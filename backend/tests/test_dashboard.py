from datetime import date

import pytest

from timetable_portal.core.exceptions import NotFoundError
from timetable_portal.models.timetable_entry import Weekday
from timetable_portal.schemas.settings import PeriodSettingsUpdate
from timetable_portal.services.dashboard import build_dashboard
from timetable_portal.services.settings_store import replace_period_settings
from timetable_portal.services.timetable_editor import TimetableEditor

CHRISTMAS_WEEK = date(2025, 12, 24)


def schedule(editor, day, period, subject, teacher):
    editor.open_cell(day, period)
    editor.set_subject(subject)
    editor.set_teacher(teacher)
    editor.save()


@pytest.fixture()
def planned_week(db_session, school):
    editor = TimetableEditor(db_session, "7", actor="Office")
    schedule(editor, "Mon", 1, "Math", "T1")
    schedule(editor, "Mon", 2, "Science", "T2")
    schedule(editor, "Wed", 1, "English", "T1")
    schedule(editor, "Thu", 6, "Math", "T1")
    return editor


def test_dashboard_and_editor_agree_on_period_times(db_session, planned_week):
    replace_period_settings(
        db_session,
        PeriodSettingsUpdate(periodDuration=45, schoolStartTime="08:30", lunchPeriod=3, lunchDuration=40),
    )
    planned_week.refresh()

    dashboard = build_dashboard(db_session, "7", date(2025, 12, 1))

    assert [(p.period_number, p.start_time, p.end_time) for p in dashboard.periods] == [
        (slot.period_number, slot.start_time, slot.end_time) for slot in planned_week.grid.periods
    ]
    editor_rows = dict(planned_week.grid.rows())
    for day in dashboard.days:
        assert [(c.start_time, c.end_time) for c in day.cells] == [
            (c.start_time, c.end_time) for c in editor_rows[day.day]
        ]
    assert dashboard.settings_version == 1


def test_dashboard_keeps_recorded_times_for_saved_cells(db_session, planned_week):
    replace_period_settings(
        db_session,
        PeriodSettingsUpdate(periodDuration=45, schoolStartTime="08:00", lunchPeriod=4, lunchDuration=60),
    )

    dashboard = build_dashboard(db_session, "7", date(2025, 12, 1))
    monday = dashboard.days[0]

    assert monday.cells[1].entry.subject_name == "Science"
    assert (monday.cells[1].start_time, monday.cells[1].end_time) == ("09:00", "10:00")
    assert (dashboard.days[1].cells[1].start_time, dashboard.days[1].cells[1].end_time) == ("08:45", "09:30")


def test_holiday_days_hide_entries(db_session, planned_week):
    dashboard = build_dashboard(db_session, "7", CHRISTMAS_WEEK)
    days = {day.day: day for day in dashboard.days}

    assert days[Weekday.MONDAY].calendar_date == date(2025, 12, 22)
    assert not days[Weekday.MONDAY].holiday.matched
    assert days[Weekday.MONDAY].cells[0].entry.subject_id == "Math"

    for weekday in (Weekday.WEDNESDAY, Weekday.THURSDAY, Weekday.FRIDAY):
        assert days[weekday].holiday.matched
        assert days[weekday].holiday.name == "Break"
        assert all(cell.is_holiday and cell.entry is None for cell in days[weekday].cells)
    assert not days[Weekday.SATURDAY].holiday.matched

    # The overlay is display-only.
    assert planned_week.store.find_cell("7", Weekday.WEDNESDAY, 1) is not None


def test_teacher_projection_lists_class_teacher_first(db_session, planned_week):
    dashboard = build_dashboard(db_session, "7", CHRISTMAS_WEEK)

    assert [(t.teacher_id, t.subjects, t.is_class_teacher) for t in dashboard.teachers] == [
        ("T2", ["Science"], True),
        ("T1", ["English", "Mathematics"], False),
    ]
    assert dashboard.teachers[0].contact_number == "555-0102"
    assert dashboard.class_name == "Class 7 A"


def test_dashboard_for_empty_class(db_session, school):
    dashboard = build_dashboard(db_session, "8", CHRISTMAS_WEEK)

    assert dashboard.teachers == []
    assert all(day.cells[-1].is_diary for day in dashboard.days)
    assert len(dashboard.days) == 6
    assert all(len(day.cells) == 9 for day in dashboard.days)


def test_dashboard_unknown_class(db_session, school):
    with pytest.raises(NotFoundError):
        build_dashboard(db_session, "42", CHRISTMAS_WEEK)


def test_dashboard_endpoint_serializes_days(client, school, planned_week):
    response = client.get("/api/dashboard/classes/7/timetable", params={"today": "2025-12-24"})

    assert response.status_code == 200
    body = response.json()
    assert body["classId"] == "7"
    assert body["today"] == "2025-12-24"
    wednesday = body["days"][2]
    assert wednesday["day"] == "WEDNESDAY"
    assert wednesday["date"] == "2025-12-24"
    assert wednesday["holiday"] == {"matched": True, "name": "Break"}
    assert wednesday["cells"][0]["isHoliday"] is True
    assert wednesday["cells"][0]["entry"] is None
    monday_first = body["days"][0]["cells"][0]
    assert monday_first["entry"]["subjectName"] == "Mathematics"
    assert monday_first["entry"]["teacherName"] == "Anita Verma"
    assert body["teachers"][0]["isClassTeacher"] is True


def test_dashboard_endpoint_unknown_class(client, school):
    response = client.get("/api/dashboard/classes/42/timetable")

    assert response.status_code == 404
    assert response.json()["details"] == {"resource_type": "Class", "resource_id": "42"}
