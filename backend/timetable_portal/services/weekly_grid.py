from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from timetable_portal.models.timetable_entry import TimetableEntry, Weekday
from timetable_portal.schemas.settings import PeriodSettingsUpdate
from timetable_portal.services.period_grid import PeriodSlotSpec, generate


@dataclass(frozen=True)
class GridCell:
    weekday: Weekday
    slot: PeriodSlotSpec
    entry: TimetableEntry | None = None

    @property
    def start_time(self) -> str:
        # A saved cell keeps the times it was created with.
        return self.entry.start_time if self.entry is not None else self.slot.start_time

    @property
    def end_time(self) -> str:
        return self.entry.end_time if self.entry is not None else self.slot.end_time


@dataclass(frozen=True)
class WeeklyGrid:
    class_id: str
    settings_version: int
    periods: list[PeriodSlotSpec]
    entries: dict[tuple[Weekday, int], TimetableEntry] = field(default_factory=dict)

    def entry_at(self, weekday: Weekday, period_number: int) -> TimetableEntry | None:
        return self.entries.get((weekday, period_number))

    def row(self, weekday: Weekday) -> list[GridCell]:
        return [
            GridCell(weekday, slot, None if slot.is_lunch else self.entry_at(weekday, slot.period_number))
            for slot in self.periods
        ]

    def rows(self) -> Iterator[tuple[Weekday, list[GridCell]]]:
        for weekday in Weekday:
            yield weekday, self.row(weekday)


def build_weekly_grid(
    class_id: str,
    settings: PeriodSettingsUpdate,
    entries: Iterable[TimetableEntry],
    *,
    settings_version: int = 0,
) -> WeeklyGrid:
    return WeeklyGrid(
        class_id=class_id,
        settings_version=settings_version,
        periods=generate(settings),
        entries={(entry.weekday, entry.period_number): entry for entry in entries},
    )
