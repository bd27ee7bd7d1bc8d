from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from timetable_portal.core.exceptions import ConflictError, NotFoundError, TransportError, ValidationError
from timetable_portal.models.directory import SchoolClass, Subject, Teacher
from timetable_portal.models.timetable_entry import TimetableEntry, Weekday
from timetable_portal.schemas.settings import TEACHING_PERIODS, parse_time_to_minutes
from timetable_portal.schemas.timetable import TimetableEntryDraft
from timetable_portal.services.audit import log_activity
from timetable_portal.services.period_grid import LUNCH_PERIOD
from timetable_portal.services.settings_store import load_period_settings

logger = logging.getLogger(__name__)

WEEKDAY_ORDER = {day: index for index, day in enumerate(Weekday)}


def entry_sort_key(entry: TimetableEntry) -> tuple[int, int]:
    return WEEKDAY_ORDER[entry.weekday], entry.period_number


class TimetableStore:
    """Persisted timetable cells, at most one entry per (class, weekday, period).

    ``upsert`` is the only way to fill a cell: writing to an occupied cell
    replaces the entry in place. Start and end times are always taken from the
    caller; the store never re-derives them from the period settings.
    """

    def __init__(self, db: Session, *, actor: str | None = None) -> None:
        self.db = db
        self.actor = actor

    def get_by_class(self, class_id: str) -> list[TimetableEntry]:
        try:
            entries = self.db.execute(select(TimetableEntry).where(TimetableEntry.class_id == class_id)).scalars()
            return sorted(entries, key=entry_sort_key)
        except OperationalError as exc:
            logger.exception("Unable to load timetable for class %s", class_id)
            raise TransportError() from exc

    def get(self, entry_id: str) -> TimetableEntry:
        try:
            entry = self.db.execute(
                select(TimetableEntry)
                .where(TimetableEntry.id == entry_id)
                .execution_options(populate_existing=True)
            ).scalar_one_or_none()
        except OperationalError as exc:
            logger.exception("Unable to load timetable entry %s", entry_id)
            raise TransportError() from exc
        if entry is None:
            raise NotFoundError("Timetable entry", entry_id)
        return entry

    def find_cell(self, class_id: str, weekday: Weekday, period_number: int) -> TimetableEntry | None:
        try:
            return self.db.execute(
                select(TimetableEntry).where(
                    TimetableEntry.class_id == class_id,
                    TimetableEntry.weekday == weekday,
                    TimetableEntry.period_number == period_number,
                ).execution_options(populate_existing=True)
            ).scalar_one_or_none()
        except OperationalError as exc:
            logger.exception("Unable to load timetable cell %s/%s/%s", class_id, weekday.value, period_number)
            raise TransportError() from exc

    def upsert(self, draft: TimetableEntryDraft) -> TimetableEntry:
        try:
            self._validate(draft)
            # Read everything that can fail before the row is touched.
            settings_version = load_period_settings(self.db).version
            existing = self.find_cell(draft.class_id, draft.weekday, draft.period_number)
            self._check_version(existing, draft.expected_version)
            if existing is None:
                entry = TimetableEntry(
                    class_id=draft.class_id,
                    weekday=draft.weekday,
                    period_number=draft.period_number,
                    version=1,
                )
                self.db.add(entry)
                action = "timetable_entry.created"
            else:
                entry = existing
                entry.version += 1
                action = "timetable_entry.updated"
            self._apply(entry, draft, settings_version)
            return self._commit(entry, action)
        except OperationalError as exc:
            self.db.rollback()
            logger.exception(
                "Unable to save timetable cell %s/%s/%s", draft.class_id, draft.weekday.value, draft.period_number
            )
            raise TransportError() from exc
        except Exception:
            self.db.rollback()
            raise

    def update(self, entry_id: str, draft: TimetableEntryDraft) -> TimetableEntry:
        """Update an entry addressed by id, possibly moving it to another free cell."""
        entry = self.get(entry_id)
        try:
            self._validate(draft)
            self._check_version(entry, draft.expected_version)
            settings_version = load_period_settings(self.db).version
            occupant = self.find_cell(draft.class_id, draft.weekday, draft.period_number)
            if occupant is not None and occupant.id != entry.id:
                raise ConflictError(
                    "Target cell is already assigned",
                    details={"entryId": occupant.id, "currentVersion": occupant.version},
                )
            entry.class_id = draft.class_id
            entry.weekday = draft.weekday
            entry.period_number = draft.period_number
            entry.version += 1
            self._apply(entry, draft, settings_version)
            return self._commit(entry, "timetable_entry.updated")
        except OperationalError as exc:
            self.db.rollback()
            logger.exception("Unable to update timetable entry %s", entry_id)
            raise TransportError() from exc
        except Exception:
            self.db.rollback()
            raise

    def delete(self, entry_id: str) -> None:
        entry = self.get(entry_id)
        try:
            log_activity(
                self.db,
                actor=self.actor,
                action="timetable_entry.deleted",
                entity_type="timetable_entry",
                entity_id=entry.id,
                details=self._describe(entry),
            )
            self.db.delete(entry)
            self.db.commit()
        except OperationalError as exc:
            self.db.rollback()
            logger.exception("Unable to delete timetable entry %s", entry_id)
            raise TransportError() from exc
        except Exception:
            self.db.rollback()
            raise
        logger.info("Deleted timetable entry %s", entry_id)

    def _validate(self, draft: TimetableEntryDraft) -> None:
        missing = [name for name, value in (("subjectId", draft.subject_id), ("teacherId", draft.teacher_id)) if not value]
        if missing:
            raise ValidationError("Please select both subject and teacher", details={"missing": missing})
        if draft.period_number == LUNCH_PERIOD:
            raise ValidationError("Lunch is not a teaching period", details={"period": draft.period_number})
        if not 1 <= draft.period_number <= TEACHING_PERIODS:
            raise ValidationError(
                f"Period must be between 1 and {TEACHING_PERIODS}",
                details={"period": draft.period_number},
            )
        if draft.start_time is None or draft.end_time is None:
            raise ValidationError("Start and end time are required for a timetable entry")
        if parse_time_to_minutes(draft.end_time) <= parse_time_to_minutes(draft.start_time):
            raise ValidationError(
                "End time must be after start time",
                details={"startTime": draft.start_time, "endTime": draft.end_time},
            )

        if self.db.get(SchoolClass, draft.class_id) is None:
            raise NotFoundError("Class", draft.class_id)
        subject = self.db.get(Subject, draft.subject_id)
        teacher = self.db.get(Teacher, draft.teacher_id)
        if subject is None or teacher is None or subject.class_id not in (None, draft.class_id):
            raise ValidationError(
                "Invalid subject or teacher selection",
                details={"subjectId": draft.subject_id, "teacherId": draft.teacher_id},
            )

    @staticmethod
    def _check_version(entry: TimetableEntry | None, expected_version: int | None) -> None:
        if expected_version is None:
            return
        current_version = entry.version if entry is not None else 0
        if current_version != expected_version:
            raise ConflictError(
                "Timetable cell was changed by someone else; reload and try again",
                details={"expectedVersion": expected_version, "currentVersion": current_version},
            )

    @staticmethod
    def _apply(entry: TimetableEntry, draft: TimetableEntryDraft, settings_version: int) -> None:
        times_changed = (entry.start_time, entry.end_time) != (draft.start_time, draft.end_time)
        entry.subject_id = draft.subject_id
        entry.teacher_id = draft.teacher_id
        entry.room_number = draft.room_number
        entry.start_time = draft.start_time
        entry.end_time = draft.end_time
        if times_changed or entry.settings_version is None:
            entry.settings_version = settings_version

    def _commit(self, entry: TimetableEntry, action: str) -> TimetableEntry:
        cell = {"classId": entry.class_id, "day": entry.weekday.value, "period": entry.period_number}
        try:
            self.db.flush()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError(
                "Timetable cell was filled by someone else; reload and try again",
                details=cell,
            ) from exc
        log_activity(
            self.db,
            actor=self.actor,
            action=action,
            entity_type="timetable_entry",
            entity_id=entry.id,
            details=self._describe(entry),
        )
        self.db.commit()
        self.db.refresh(entry)
        logger.info(
            "%s %s for class %s on %s period %d (v%d)",
            action,
            entry.id,
            entry.class_id,
            entry.weekday.value,
            entry.period_number,
            entry.version,
        )
        return entry

    @staticmethod
    def _describe(entry: TimetableEntry) -> dict:
        return {
            "classId": entry.class_id,
            "day": entry.weekday.value,
            "period": entry.period_number,
            "subjectId": entry.subject_id,
            "teacherId": entry.teacher_id,
            "roomNumber": entry.room_number,
            "startTime": entry.start_time,
            "endTime": entry.end_time,
            "version": entry.version,
        }
