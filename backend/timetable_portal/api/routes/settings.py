from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from timetable_portal.api.deps import get_actor, get_db
from timetable_portal.schemas.settings import PeriodSettingsOut, PeriodSettingsUpdate, PeriodSlotOut
from timetable_portal.services.period_grid import generate
from timetable_portal.services.settings_store import load_period_settings, replace_period_settings

router = APIRouter()


@router.get("/period-settings", response_model=PeriodSettingsOut)
def get_period_settings(db: Session = Depends(get_db)) -> PeriodSettingsOut:
    return load_period_settings(db)


@router.put("/period-settings", response_model=PeriodSettingsOut)
def update_period_settings(
    payload: PeriodSettingsUpdate,
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
) -> PeriodSettingsOut:
    return replace_period_settings(db, payload, actor=actor)


@router.get("/period-settings/periods", response_model=list[PeriodSlotOut])
def get_period_slots(db: Session = Depends(get_db)) -> list[PeriodSlotOut]:
    return [PeriodSlotOut.model_validate(slot) for slot in generate(load_period_settings(db))]
