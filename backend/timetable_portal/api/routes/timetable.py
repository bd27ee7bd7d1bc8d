from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from timetable_portal.api.deps import get_actor, get_db
from timetable_portal.core.exceptions import NotFoundError
from timetable_portal.models.timetable_entry import TimetableEntry
from timetable_portal.schemas.settings import PeriodSlotOut
from timetable_portal.schemas.timetable import (
    CellDraftOut,
    EditorGridOut,
    GridCellOut,
    GridDayOut,
    TimetableEntryDraft,
    TimetableEntryOut,
)
from timetable_portal.services.directory import get_class, load_reference_data, serialize_entry
from timetable_portal.services.period_grid import teaching_slot
from timetable_portal.services.settings_store import load_period_settings
from timetable_portal.services.timetable_editor import TimetableEditor
from timetable_portal.services.timetable_store import TimetableStore

router = APIRouter()


def open_editor(db: Session, class_id: str, actor: str | None = None) -> TimetableEditor:
    if get_class(db, class_id) is None:
        raise NotFoundError("Class", class_id)
    return TimetableEditor(db, class_id, actor=actor)


def with_default_times(db: Session, draft: TimetableEntryDraft, current: TimetableEntry | None) -> TimetableEntryDraft:
    """Fill omitted times: an existing cell keeps its recorded times, a new one gets the current grid's."""
    if draft.start_time is not None and draft.end_time is not None:
        return draft
    if current is not None:
        start_time, end_time = current.start_time, current.end_time
    else:
        slot = teaching_slot(load_period_settings(db), draft.period_number)
        start_time, end_time = slot.start_time, slot.end_time
    return draft.model_copy(
        update={
            "start_time": draft.start_time or start_time,
            "end_time": draft.end_time or end_time,
        }
    )


def render_entry(db: Session, entry: TimetableEntry) -> TimetableEntryOut:
    return serialize_entry(entry, load_reference_data(db, entry.class_id))


@router.get("/classes/{class_id}/entries", response_model=list[TimetableEntryOut])
def list_class_entries(class_id: str, db: Session = Depends(get_db)) -> list[TimetableEntryOut]:
    refs = load_reference_data(db, class_id)
    return [serialize_entry(entry, refs) for entry in TimetableStore(db).get_by_class(class_id)]


@router.get("/classes/{class_id}/grid", response_model=EditorGridOut)
def get_editor_grid(class_id: str, db: Session = Depends(get_db)) -> EditorGridOut:
    editor = open_editor(db, class_id)
    grid = editor.grid
    return EditorGridOut(
        class_id=class_id,
        settings_version=grid.settings_version,
        periods=[PeriodSlotOut.model_validate(slot) for slot in grid.periods],
        days=[
            GridDayOut(
                day=weekday,
                cells=[
                    GridCellOut(
                        period_number=cell.slot.period_number,
                        start_time=cell.start_time,
                        end_time=cell.end_time,
                        is_lunch=cell.slot.is_lunch,
                        entry=serialize_entry(cell.entry, editor.references) if cell.entry is not None else None,
                    )
                    for cell in cells
                ],
            )
            for weekday, cells in grid.rows()
        ],
    )


@router.get("/classes/{class_id}/cells/{day}/{period}", response_model=CellDraftOut)
def open_cell(class_id: str, day: str, period: int, db: Session = Depends(get_db)) -> CellDraftOut:
    draft = open_editor(db, class_id).open_cell(day, period)
    return CellDraftOut(
        class_id=class_id,
        weekday=draft.weekday,
        period_number=draft.period_number,
        start_time=draft.start_time,
        end_time=draft.end_time,
        subject_id=draft.subject_id,
        teacher_id=draft.teacher_id,
        room_number=draft.room_number,
        entry_id=draft.entry_id,
        expected_version=draft.version,
    )


@router.post("/entries", response_model=TimetableEntryOut, status_code=status.HTTP_201_CREATED)
def create_entry(
    payload: TimetableEntryDraft,
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
) -> TimetableEntryOut:
    store = TimetableStore(db, actor=actor)
    current = store.find_cell(payload.class_id, payload.weekday, payload.period_number)
    entry = store.upsert(with_default_times(db, payload, current))
    return render_entry(db, entry)


@router.put("/entries/{entry_id}", response_model=TimetableEntryOut)
def update_entry(
    entry_id: str,
    payload: TimetableEntryDraft,
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
) -> TimetableEntryOut:
    store = TimetableStore(db, actor=actor)
    current = store.get(entry_id)
    moved = (payload.class_id, payload.weekday, payload.period_number) != (
        current.class_id,
        current.weekday,
        current.period_number,
    )
    entry = store.update(entry_id, with_default_times(db, payload, None if moved else current))
    return render_entry(db, entry)


@router.delete("/entries/{entry_id}")
def delete_entry(
    entry_id: str,
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
) -> dict:
    TimetableStore(db, actor=actor).delete(entry_id)
    return {"success": True}

