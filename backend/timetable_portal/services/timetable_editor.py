"""Operator-side timetable editing as an explicit state machine.

    Viewing(grid) --open_cell--> EditingCell --save/cancel--> Viewing
    Viewing(grid) --request_delete--> Deleting --confirm_delete/cancel--> Viewing

Every successful write is followed by a full re-read of the class timetable;
the editor never merges its own changes into the grid it already holds.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from sqlalchemy.orm import Session

from timetable_portal.core.exceptions import AppError, ConflictError, NotFoundError, ValidationError
from timetable_portal.models.timetable_entry import Weekday
from timetable_portal.schemas.timetable import TimetableEntryDraft, normalize_weekday
from timetable_portal.services.directory import ReferenceData, load_reference_data
from timetable_portal.services.period_grid import LUNCH_PERIOD, teaching_slot
from timetable_portal.services.settings_store import load_period_settings
from timetable_portal.services.timetable_store import TimetableStore
from timetable_portal.services.weekly_grid import WeeklyGrid, build_weekly_grid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotDraft:
    weekday: Weekday
    period_number: int
    start_time: str
    end_time: str
    subject_id: str | None = None
    teacher_id: str | None = None
    room_number: str | None = None
    entry_id: str | None = None
    version: int = 0


@dataclass(frozen=True)
class Viewing:
    grid: WeeklyGrid


@dataclass(frozen=True)
class EditingCell:
    weekday: Weekday
    period_number: int
    draft: SlotDraft


@dataclass(frozen=True)
class Deleting:
    weekday: Weekday
    period_number: int
    entry_id: str


EditorState = Viewing | EditingCell | Deleting


class TimetableEditor:
    def __init__(
        self,
        db: Session,
        class_id: str,
        *,
        actor: str | None = None,
        store: TimetableStore | None = None,
    ) -> None:
        self.db = db
        self.class_id = class_id
        self.store = store or TimetableStore(db, actor=actor)
        self.references: ReferenceData = load_reference_data(db, class_id)
        self.last_error: AppError | None = None
        self._grid = self._read_grid()
        self.state: EditorState = Viewing(self._grid)

    @property
    def grid(self) -> WeeklyGrid:
        return self._grid

    def refresh(self) -> WeeklyGrid:
        self._grid = self._read_grid()
        if isinstance(self.state, Viewing):
            self.state = Viewing(self._grid)
        return self._grid

    def open_cell(self, weekday: Weekday | str, period_number: int) -> SlotDraft:
        self._require(Viewing)
        weekday = self._weekday(weekday)
        if period_number == LUNCH_PERIOD:
            raise ValidationError("Lunch cells cannot be edited")

        entry = self._grid.entry_at(weekday, period_number)
        if entry is not None:
            draft = SlotDraft(
                weekday=weekday,
                period_number=period_number,
                start_time=entry.start_time,
                end_time=entry.end_time,
                subject_id=entry.subject_id,
                teacher_id=entry.teacher_id,
                room_number=entry.room_number,
                entry_id=entry.id,
                version=entry.version,
            )
        else:
            slot = teaching_slot(load_period_settings(self.db), period_number)
            draft = SlotDraft(
                weekday=weekday,
                period_number=period_number,
                start_time=slot.start_time,
                end_time=slot.end_time,
            )
        self.state = EditingCell(weekday, period_number, draft)
        return draft

    def set_subject(self, subject_id: str | None) -> SlotDraft:
        return self._edit(subject_id=subject_id or None)

    def set_teacher(self, teacher_id: str | None) -> SlotDraft:
        return self._edit(teacher_id=teacher_id or None)

    def set_room(self, room_number: str | None) -> SlotDraft:
        return self._edit(room_number=(room_number or "").strip() or None)

    def save(self):
        state = self._require(EditingCell)
        draft = state.draft
        if not draft.subject_id or not draft.teacher_id:
            error = ValidationError("Please select both subject and teacher")
            self.last_error = error
            raise error
        if draft.subject_id not in self.references.subjects or draft.teacher_id not in self.references.teachers:
            error = ValidationError("Invalid subject or teacher selection")
            self.last_error = error
            raise error

        payload = TimetableEntryDraft(
            class_id=self.class_id,
            weekday=draft.weekday,
            period_number=draft.period_number,
            subject_id=draft.subject_id,
            teacher_id=draft.teacher_id,
            room_number=draft.room_number,
            start_time=draft.start_time,
            end_time=draft.end_time,
            expected_version=draft.version,
        )
        entry = self._attempt(self.store.upsert, payload)
        self.last_error = None
        self.state = Viewing(self.refresh())
        return entry

    def request_delete(self, weekday: Weekday | str, period_number: int) -> Deleting:
        self._require(Viewing)
        weekday = self._weekday(weekday)
        entry = self._grid.entry_at(weekday, period_number)
        if entry is None:
            raise NotFoundError("Timetable entry", f"{self.class_id}/{weekday.value}/{period_number}")
        self.state = Deleting(weekday, period_number, entry.id)
        return self.state

    def confirm_delete(self) -> None:
        state = self._require(Deleting)
        self._attempt(self.store.delete, state.entry_id)
        self.last_error = None
        self.state = Viewing(self.refresh())

    def cancel(self) -> None:
        self.state = Viewing(self._grid)

    def _attempt(self, operation, argument):
        try:
            return operation(argument)
        except AppError as exc:
            self.last_error = exc
            if isinstance(exc, (NotFoundError, ConflictError)):
                # Resync with the store; the open draft or delete prompt stays put.
                logger.info("Editor for class %s resyncing after %s", self.class_id, type(exc).__name__)
                self._grid = self._read_grid()
            raise

    def _edit(self, **changes) -> SlotDraft:
        state = self._require(EditingCell)
        draft = replace(state.draft, **changes)
        self.state = replace(state, draft=draft)
        return draft

    def _require(self, state_type):
        if not isinstance(self.state, state_type):
            raise ValidationError(
                f"Editor is {type(self.state).__name__}; expected {state_type.__name__}",
            )
        return self.state

    @staticmethod
    def _weekday(value: Weekday | str) -> Weekday:
        try:
            return normalize_weekday(value)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

    def _read_grid(self) -> WeeklyGrid:
        settings = load_period_settings(self.db)
        return build_weekly_grid(
            self.class_id,
            settings,
            self.store.get_by_class(self.class_id),
            settings_version=settings.version,
        )
