from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from timetable_portal.db.base import Base


class PeriodSettings(Base):
    __tablename__ = "period_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    period_duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    school_start_time: Mapped[str] = mapped_column(String(5), nullable=False, default="08:00")
    lunch_after_period: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    lunch_duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
