from timetable_portal.models.activity_log import ActivityLog  # noqa: F401
from timetable_portal.models.directory import SchoolClass, Subject, Teacher  # noqa: F401
from timetable_portal.models.holiday import Holiday  # noqa: F401
from timetable_portal.models.period_settings import PeriodSettings  # noqa: F401
from timetable_portal.models.timetable_entry import TimetableEntry, Weekday  # noqa: F401
