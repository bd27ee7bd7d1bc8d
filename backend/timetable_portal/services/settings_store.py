from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from timetable_portal.core.exceptions import TransportError
from timetable_portal.models.period_settings import PeriodSettings
from timetable_portal.schemas.settings import DEFAULT_PERIOD_SETTINGS, PeriodSettingsOut, PeriodSettingsUpdate
from timetable_portal.services.audit import log_activity

logger = logging.getLogger(__name__)


def get_settings_record(db: Session) -> PeriodSettings | None:
    return db.execute(select(PeriodSettings).where(PeriodSettings.id == 1)).scalar_one_or_none()


def build_period_settings(record: PeriodSettings | None) -> PeriodSettingsOut:
    if record is None:
        # Version 0 marks "never saved"; entries stamped with it used the defaults.
        return PeriodSettingsOut(**DEFAULT_PERIOD_SETTINGS.model_dump(), version=0)

    return PeriodSettingsOut(
        period_duration_minutes=record.period_duration_minutes,
        school_start_time=record.school_start_time,
        lunch_after_period=record.lunch_after_period,
        lunch_duration_minutes=record.lunch_duration_minutes,
        version=record.version,
        updated_at=record.updated_at,
    )


def load_period_settings(db: Session) -> PeriodSettingsOut:
    try:
        record = get_settings_record(db)
    except OperationalError as exc:
        logger.exception("Unable to read period settings")
        raise TransportError("Period settings are unavailable") from exc
    return build_period_settings(record)


def replace_period_settings(
    db: Session,
    payload: PeriodSettingsUpdate,
    *,
    actor: str | None = None,
) -> PeriodSettingsOut:
    try:
        record = get_settings_record(db)
        if record is None:
            record = PeriodSettings(id=1, version=0)
            db.add(record)
        previous = build_period_settings(record if record.version else None)

        record.period_duration_minutes = payload.period_duration_minutes
        record.school_start_time = payload.school_start_time
        record.lunch_after_period = payload.lunch_after_period
        record.lunch_duration_minutes = payload.lunch_duration_minutes
        record.version = (record.version or 0) + 1

        log_activity(
            db,
            actor=actor,
            action="period_settings.replaced",
            entity_type="period_settings",
            entity_id=str(record.id),
            details={
                "version": record.version,
                "previous": previous.model_dump(exclude={"updated_at"}),
                "current": payload.model_dump(),
            },
        )
        db.commit()
        db.refresh(record)
    except OperationalError as exc:
        db.rollback()
        logger.exception("Unable to save period settings")
        raise TransportError("Period settings could not be saved") from exc
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Period settings replaced (version %d): %d min periods from %s, lunch after period %d for %d min",
        record.version,
        record.period_duration_minutes,
        record.school_start_time,
        record.lunch_after_period,
        record.lunch_duration_minutes,
    )
    return build_period_settings(record)
