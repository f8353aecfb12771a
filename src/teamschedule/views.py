"""Team week/day grids derived from one snapshot of the store.

TeamView computes the flattened occurrences, the conflict keys and the period
rows together, so highlighting never mixes values from different snapshots.
Callers rebuild it after every store mutation:

    view = TeamView.from_schedules(store.all())
    for column in view.week_grid(date.today(), query="高数"):
        ...
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from src.teamschedule.conflicts import detect_conflicts
from src.teamschedule.flatten import flatten
from src.teamschedule.grouping import group_occurrences, order_periods
from src.teamschedule.models import ClassOccurrence, OccurrenceGroup, Schedule

# Index 0 is Monday, matching date.weekday().
_WEEKDAY_LABELS = ("一", "二", "三", "四", "五", "六", "日")


@dataclass(frozen=True)
class PeriodCell:
    period: str
    groups: tuple[OccurrenceGroup, ...]


@dataclass(frozen=True)
class DayColumn:
    date: date
    weekday: str
    cells: tuple[PeriodCell, ...]


def week_days(reference: date) -> list[date]:
    """Monday through Sunday of the week containing reference."""
    monday = reference - timedelta(days=reference.weekday())
    return [monday + timedelta(days=offset) for offset in range(7)]


def weekday_label(day: date) -> str:
    return _WEEKDAY_LABELS[day.weekday()]


def filter_occurrences(
    occurrences: Iterable[ClassOccurrence], query: str
) -> list[ClassOccurrence]:
    """Keep occurrences whose course, teacher, location or student matches.

    Matching is a case-insensitive substring test; a blank query keeps all.
    """
    needle = query.strip().lower()
    if not needle:
        return list(occurrences)
    return [
        occ
        for occ in occurrences
        if needle in occ.course_name.lower()
        or needle in occ.teacher.lower()
        or needle in (occ.location or "").lower()
        or needle in occ.student_name.lower()
    ]


@dataclass(frozen=True)
class TeamView:
    """Derived values of one store snapshot."""

    schedules: tuple[Schedule, ...]
    occurrences: tuple[ClassOccurrence, ...]
    conflicts: frozenset[str]
    periods: tuple[str, ...]

    @classmethod
    def from_schedules(cls, schedules: Sequence[Schedule]) -> "TeamView":
        snapshot = tuple(schedules)
        occurrences = tuple(flatten(snapshot))
        return cls(
            schedules=snapshot,
            occurrences=occurrences,
            conflicts=detect_conflicts(occurrences),
            periods=tuple(order_periods(occ.period for occ in occurrences)),
        )

    @property
    def has_schedules(self) -> bool:
        return bool(self.schedules)

    def day_cells(self, day: date, query: str = "") -> tuple[PeriodCell, ...]:
        """One cell per period row for a single day, in period order."""
        matching = filter_occurrences(self.occurrences, query)
        return self._cells([o for o in matching if o.date == day])

    def week_grid(self, reference: date, query: str = "") -> list[DayColumn]:
        """Seven day columns (Monday first) for the week holding reference."""
        days = week_days(reference)
        wanted = set(days)
        by_day: dict[date, list[ClassOccurrence]] = {d: [] for d in days}
        for occ in filter_occurrences(self.occurrences, query):
            if occ.date in wanted:
                by_day[occ.date].append(occ)
        return [
            DayColumn(date=d, weekday=weekday_label(d), cells=self._cells(by_day[d]))
            for d in days
        ]

    def _cells(self, occurrences: list[ClassOccurrence]) -> tuple[PeriodCell, ...]:
        return tuple(
            PeriodCell(
                period=period,
                groups=tuple(
                    group_occurrences(
                        (o for o in occurrences if o.period == period), self.conflicts
                    )
                ),
            )
            for period in self.periods
        )
